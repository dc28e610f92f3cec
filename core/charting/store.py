"""Live chart configuration with apply/revert lifecycle.

The store owns one ChartConfig plus an `is_dirty` flag and the last applied
snapshot. Variant-specific setters check the live variant first: asking a pie
config to change `bar_radius` is silently ignored (and logged at DEBUG), never
an error, because the editor may still hold controls from a previous type.
"""

from __future__ import annotations

import logging
from dataclasses import fields, replace
from typing import Any, TypeVar

from analysis.visualization_spec import Aggregation

from .access import replace_config_value
from .configs import get_default_config
from .schema import (
    AreaChartConfig,
    BarChartConfig,
    BaseChartConfig,
    ChartConfig,
    LineChartConfig,
    PieChartConfig,
    ScatterChartConfig,
    has_axes,
)
from .signals import config_changed

logger = logging.getLogger(__name__)

T = TypeVar("T")

_EXCLUSIVE_BAR_FLAGS = {"stacked": "grouped", "grouped": "stacked"}


def _apply_changes(value: T, changes: dict[str, Any]) -> T | None:
    """Return `value` with top-level `changes` applied, or None for unknown keys."""

    updated = value
    for key, new_value in changes.items():
        candidate = replace_config_value(updated, key, new_value)
        if candidate is None:
            return None
        updated = candidate
    return updated


def _enforce_bar_exclusivity(config: ChartConfig, changed: dict[str, Any]) -> ChartConfig:
    """Turn off `grouped` when `stacked` is switched on, and vice versa."""

    if not isinstance(config, BarChartConfig):
        return config
    for key, other in _EXCLUSIVE_BAR_FLAGS.items():
        if changed.get(key) is True and getattr(config, other):
            config = replace(config, **{other: False})
    return config


class ChartConfigStore:
    """Hold the live ChartConfig being edited."""

    def __init__(self, chart_type: str = "bar") -> None:
        self._config: ChartConfig = get_default_config(chart_type)
        self._is_dirty = False
        self._last_applied: ChartConfig | None = None

    @property
    def config(self) -> ChartConfig:
        return self._config

    @property
    def is_dirty(self) -> bool:
        return self._is_dirty

    @property
    def last_applied(self) -> ChartConfig | None:
        return self._last_applied

    def _set(self, config: ChartConfig, *, dirty: bool) -> None:
        if config == self._config and dirty == self._is_dirty:
            return
        self._config = config
        self._is_dirty = dirty
        config_changed.send(sender=self.__class__, store=self, config=config, is_dirty=dirty)

    def _edit(self, config: ChartConfig | None, reason: str) -> None:
        """Commit an edited config; None means the edit does not apply."""

        if config is None:
            logger.debug("Ignoring %s for %s config", reason, self._config.type)
            return
        if config == self._config:
            return
        self._set(config, dirty=True)

    # Lifecycle.

    def set_chart_type(self, chart_type: str) -> None:
        """Switch to `chart_type` defaults, keeping field bindings and title."""

        current = self._config
        config = replace(
            get_default_config(chart_type),
            data_field_x=current.data_field_x,
            data_field_y=current.data_field_y,
            title=current.title,
        )
        self._set(config, dirty=True)

    def reset_to_defaults(self) -> None:
        self._set(get_default_config(self._config.type), dirty=True)

    def apply_config(self) -> None:
        """Snapshot the live config as the last applied one."""

        self._last_applied = self._config
        self._set(self._config, dirty=False)

    def revert_changes(self) -> None:
        """Restore the last applied snapshot; does nothing when none exists."""

        if self._last_applied is None:
            logger.debug("Ignoring revert_changes without an applied snapshot")
            return
        self._set(self._last_applied, dirty=False)

    def load_config(self, config: ChartConfig) -> None:
        """Replace the live config with a clean, already applied `config`."""

        self._last_applied = config
        self._set(config, dirty=False)

    # Common setters.

    def set_data_field_x(self, field: str | None) -> None:
        self._edit(replace(self._config, data_field_x=field), "set_data_field_x")

    def set_data_field_y(self, field: str | None) -> None:
        self._edit(replace(self._config, data_field_y=field), "set_data_field_y")

    def set_aggregation(self, aggregation: Aggregation) -> None:
        self._edit(replace(self._config, aggregation=aggregation), "set_aggregation")

    def set_title(self, title: str) -> None:
        self._edit(replace(self._config, title=title), "set_title")

    def set_color_scheme(self, colors: list[str] | tuple[str, ...]) -> None:
        self._edit(replace(self._config, color_scheme=tuple(colors)), "set_color_scheme")

    def set_max_points(self, max_points: int) -> None:
        self._edit(replace(self._config, max_points=max_points), "set_max_points")

    def set_animation_duration(self, duration: int) -> None:
        self._edit(replace(self._config, animation_duration=duration), "set_animation_duration")

    def set_background_color(self, color: str) -> None:
        self._edit(replace(self._config, background_color=color), "set_background_color")

    def set_padding(self, **sides: int) -> None:
        """Update any of `top`, `right`, `bottom`, `left`."""

        self._edit(self._nested("padding", sides), "set_padding")

    def set_tooltip(self, **changes: Any) -> None:
        self._edit(self._nested("tooltip", changes), "set_tooltip")

    def set_legend(self, **changes: Any) -> None:
        self._edit(self._nested("legend", changes), "set_legend")

    def set_title_font(self, **changes: Any) -> None:
        self._edit(self._nested("title_font", changes), "set_title_font")

    def _nested(self, name: str, changes: dict[str, Any]) -> ChartConfig | None:
        updated = _apply_changes(getattr(self._config, name), changes)
        if updated is None:
            return None
        return replace(self._config, **{name: updated})

    # Axis setters (every type except pie).

    def set_x_axis(self, **changes: Any) -> None:
        self._edit(self._nested("x_axis", changes) if has_axes(self._config) else None, "set_x_axis")

    def set_y_axis(self, **changes: Any) -> None:
        self._edit(self._nested("y_axis", changes) if has_axes(self._config) else None, "set_y_axis")

    # Variant setters.

    def update_bar(self, **changes: Any) -> None:
        """Update bar-only fields; `stacked` and `grouped` exclude each other."""

        self._update_variant(BarChartConfig, changes, "update_bar")

    def update_line(self, **changes: Any) -> None:
        self._update_variant(LineChartConfig, changes, "update_line")

    def update_area(self, **changes: Any) -> None:
        self._update_variant(AreaChartConfig, changes, "update_area")

    def update_pie(self, **changes: Any) -> None:
        self._update_variant(PieChartConfig, changes, "update_pie")

    def update_scatter(self, **changes: Any) -> None:
        self._update_variant(ScatterChartConfig, changes, "update_scatter")

    def _update_variant(self, config_class: type, changes: dict[str, Any], reason: str) -> None:
        if not isinstance(self._config, config_class):
            self._edit(None, reason)
            return
        # Base fields are edited through the common setters.
        own = {f.name for f in fields(config_class)} - {f.name for f in fields(BaseChartConfig)}
        if not set(changes) <= own:
            self._edit(None, f"{reason}({', '.join(sorted(set(changes) - own))})")
            return
        updated = _apply_changes(self._config, changes)
        self._edit(None if updated is None else _enforce_bar_exclusivity(updated, changes), reason)

    # Generic editor entry point.

    def set_property(self, key: str, value: Any) -> None:
        """Set dot-path `key`; keys the live variant lacks are ignored."""

        updated = replace_config_value(self._config, key, value)
        if updated is not None:
            updated = _enforce_bar_exclusivity(updated, {key: value})
        self._edit(updated, f"set_property({key!r})")
