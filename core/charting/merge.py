"""Merge partial chart configs over the per-type defaults.

Persisted or user-supplied configs are often partial. Merging always starts
from the type's canonical default, so a merged config is complete and the
operation is idempotent: merging an already merged config changes nothing.
"""

from __future__ import annotations

import logging
from dataclasses import fields, is_dataclass, replace
from typing import Any, Final, Mapping, TypeVar

from .configs import UnknownChartTypeError, get_default_config
from .schema import BaseChartConfig, ChartConfig

logger = logging.getLogger(__name__)

T = TypeVar("T")


class _Unset:
    """Sentinel type for "leave the default alone"."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET: Final[Any] = _Unset()


def merge_with_defaults(partial: Mapping[str, Any] | ChartConfig) -> ChartConfig:
    """Return a complete ChartConfig built from defaults plus `partial`.

    Args:
        partial: Either a complete ChartConfig, or a mapping carrying a `type`
            key and any subset of that variant's fields. Nested configs may be
            given as mappings and are merged field by field. Sequences replace
            the default wholesale. `UNSET` values are skipped; None is kept.

    Returns:
        A complete ChartConfig of the variant named by `type`.

    Raises:
        UnknownChartTypeError: When `type` is missing or not a supported chart type.
    """

    if isinstance(partial, BaseChartConfig):
        return partial  # type: ignore[return-value]

    chart_type = partial.get("type")
    if not isinstance(chart_type, str):
        raise UnknownChartTypeError(f"Unknown chart type: {chart_type!r}")
    defaults = get_default_config(chart_type)
    overrides = {key: value for key, value in partial.items() if key != "type"}
    return _merge_into(defaults, overrides, prefix="")


def _merge_into(base: T, overrides: Mapping[str, Any], *, prefix: str) -> T:
    """Return `base` with `overrides` applied recursively."""

    names = {f.name for f in fields(base) if f.init}  # type: ignore[arg-type]
    changes: dict[str, Any] = {}
    for key, value in overrides.items():
        if value is UNSET:
            continue
        if key not in names:
            logger.warning("Ignoring unknown chart config key %r", f"{prefix}{key}")
            continue
        current = getattr(base, key)
        if is_dataclass(current) and isinstance(value, Mapping):
            changes[key] = _merge_into(current, value, prefix=f"{prefix}{key}.")
        elif isinstance(value, list):
            changes[key] = tuple(value)
        else:
            changes[key] = value
    if not changes:
        return base
    return replace(base, **changes)  # type: ignore[type-var]
