"""Built-in default ChartConfig per chart type.

Each chart type has exactly one canonical default, built from the shared base
plus type-specific literals. Configs are frozen dataclasses, so every caller
gets an independent value: deriving a new config with `replace()` never
affects anyone else's copy.
"""

from __future__ import annotations

from typing import Any, Final

from django.conf import settings

from analysis.visualization_spec import CHART_TYPES, ChartType

from .schema import (
    CONFIG_CLASSES,
    AxisConfig,
    ChartConfig,
    LegendConfig,
    Padding,
    TooltipConfig,
    Typography,
)


DEFAULT_COLOR_SCHEME: Final[tuple[str, ...]] = (
    "#2563EB",
    "#0891B2",
    "#7C3AED",
    "#DB2777",
    "#EA580C",
    "#16A34A",
    "#CA8A04",
)
DEFAULT_MAX_POINTS: Final[int] = 5000
DEFAULT_FONT_FAMILY: Final[str] = '"Inter", "Segoe UI", system-ui, sans-serif'


class UnknownChartTypeError(ValueError):
    """Raised when a chart type outside the closed chart-type set is requested."""


def _setting(name: str, default: Any) -> Any:
    """Read an optional project setting, falling back when Django is unconfigured."""

    if not settings.configured:
        return default
    return getattr(settings, name, default)


def _axis(*, show_grid: bool) -> AxisConfig:
    return AxisConfig(
        show=True,
        label="",
        show_grid=show_grid,
        tick_rotation=0,
        scale_type="linear",
        min_value=None,
        max_value=None,
        tick_format="",
    )


def _base_defaults() -> dict[str, Any]:
    """Return the shared base fields for every chart type."""

    color_scheme = tuple(_setting("CHART_COLOR_SCHEME", None) or DEFAULT_COLOR_SCHEME)
    return {
        "color_scheme": color_scheme,
        "animation_duration": 300,
        "tooltip": TooltipConfig(enabled=True, show_percent=False, format=""),
        "legend": LegendConfig(show=True, position="bottom"),
        "background_color": "#FFFFFF",
        "padding": Padding(top=16, right=16, bottom=16, left=16),
        "title": "",
        "title_font": Typography(font_family=DEFAULT_FONT_FAMILY, font_size=13, font_weight=600, color="#171717"),
        "data_field_x": None,
        "data_field_y": None,
        "aggregation": "sum",
        "max_points": int(_setting("CHART_DEFAULT_MAX_POINTS", DEFAULT_MAX_POINTS)),
    }


_TYPE_DEFAULTS: Final[dict[str, dict[str, Any]]] = {
    "bar": {
        "x_axis": _axis(show_grid=False),
        "y_axis": _axis(show_grid=True),
        "orientation": "vertical",
        "stacked": False,
        "grouped": False,
        "bar_width": "auto",
        "max_bar_width": 64,
        "bar_spacing": 4,
        "bar_category_gap": 20,
        "bar_radius": (2, 2, 0, 0),
        "sort_by": "none",
        "sort_order": "asc",
        "show_value_labels": False,
        "value_label_position": "top",
        "value_label_font_size": 10,
        "value_label_font_color": "#404040",
        "highlight_on_hover": True,
        "selected_bar_index": None,
        "selected_category": None,
    },
    "line": {
        "x_axis": _axis(show_grid=False),
        "y_axis": _axis(show_grid=True),
        "curve_type": "monotone",
        "stroke_width": 2.0,
        "stroke_style": "solid",
        "show_markers": True,
        "marker_shape": "circle",
        "marker_size": 4,
        "sort_by": "x",
        "sort_order": "asc",
        "multi_series": False,
        "series_fields": (),
        "area_fill": False,
        "area_fill_opacity": 0.2,
        "area_gradient": False,
        "zoomable": False,
        "pannable": False,
        "connect_nulls": False,
        "show_min_max": False,
    },
    "area": {
        "x_axis": _axis(show_grid=False),
        "y_axis": _axis(show_grid=True),
        "curve_type": "monotone",
        "stroke_width": 2.0,
        "show_line_border": True,
        "show_markers": False,
        "stacked": False,
        "stack_offset": "none",
        "fill_opacity": 0.3,
        "gradient_fill": False,
        "baseline_value": 0.0,
        "sort_order": "asc",
        "multi_series": False,
        "series_fields": (),
        "zoomable": False,
        "pannable": False,
    },
    "pie": {
        "inner_radius": 0,
        "outer_radius": 80,
        "start_angle": 0,
        "end_angle": 360,
        "pad_angle": 0.0,
        "corner_radius": 0,
        "sort_order": "desc",
        "show_labels": True,
        "label_format": "{percent}",
        "label_position": "outside",
        "max_slices": 8,
        "other_slice_label": "Other",
        "explode_slice_index": None,
        "explode_offset": 10,
        "center_label": "",
    },
    "scatter": {
        "x_axis": _axis(show_grid=True),
        "y_axis": _axis(show_grid=True),
        "data_field_size": None,
        "data_field_color": None,
        "point_size": 6,
        "min_point_size": 4,
        "max_point_size": 24,
        "point_shape": "circle",
        "point_opacity": 0.7,
        "sample_method": "random",
        "sample_size": 2000,
        "zoomable": True,
        "pannable": True,
        "show_trend_line": False,
        "trend_line_type": "linear",
        "highlight_outliers": False,
        "outlier_threshold": 3.0,
        "jitter": 0.0,
        "show_quadrants": False,
    },
}


def list_chart_types() -> tuple[ChartType, ...]:
    """Return the closed set of chart types in display order."""

    return CHART_TYPES  # type: ignore[return-value]


def get_default_config(chart_type: str) -> ChartConfig:
    """Return the canonical default config for `chart_type`.

    Args:
        chart_type: One of the supported chart types.

    Returns:
        A fresh, independent ChartConfig of the matching variant.

    Raises:
        UnknownChartTypeError: If `chart_type` is not a supported chart type.
    """

    config_class = CONFIG_CLASSES.get(chart_type)  # type: ignore[call-overload]
    if config_class is None:
        raise UnknownChartTypeError(f"Unknown chart type: {chart_type!r}")
    return config_class(**_base_defaults(), **_TYPE_DEFAULTS[chart_type])  # type: ignore[return-value]
