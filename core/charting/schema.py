"""Schema types for per-chart-type rendering configuration.

Rendering options are described by ChartConfig values: a tagged union of one
frozen dataclass per chart type. All variants share a base (colors, tooltip,
legend, title, field bindings) and add the fields of their own visual grammar.

A config is only ever read or written through the variant matching its `type`
tag. The tag is fixed per class and cannot be changed with `replace()`, so a
type switch always goes through the default registry.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, TypeAlias, TypeGuard

from analysis.visualization_spec import Aggregation, ChartType, SortBy, SortOrder

Orientation = Literal["vertical", "horizontal"]
LegendPosition = Literal["top", "bottom", "left", "right", "none"]
ScaleType = Literal["linear", "log"]
CurveType = Literal["linear", "monotone", "step", "step_after", "step_before", "smooth"]
StrokeStyle = Literal["solid", "dashed", "dotted"]
MarkerShape = Literal["circle", "square", "triangle", "diamond", "cross", "star"]
ValueLabelPosition = Literal["top", "center", "bottom"]
StackOffset = Literal["none", "expand", "silhouette", "wiggle"]
PieLabelPosition = Literal["inside", "outside", "center"]
SampleMethod = Literal["random", "stratified", "systematic"]
TrendLineType = Literal["none", "linear", "polynomial", "exponential", "logarithmic", "loess"]


@dataclass(frozen=True, slots=True, kw_only=True)
class AxisConfig:
    """Axis presentation options.

    Args:
        show: Whether the axis is drawn.
        label: Axis title; empty uses the bound field name.
        show_grid: Whether grid lines are drawn for this axis.
        tick_rotation: Tick label rotation in degrees.
        scale_type: Linear or logarithmic scale.
        min_value: Optional fixed lower bound.
        max_value: Optional fixed upper bound.
        tick_format: Format string applied to tick labels.
    """

    show: bool
    label: str
    show_grid: bool
    tick_rotation: int
    scale_type: ScaleType
    min_value: float | None
    max_value: float | None
    tick_format: str


@dataclass(frozen=True, slots=True, kw_only=True)
class TooltipConfig:
    """Tooltip options."""

    enabled: bool
    show_percent: bool
    format: str


@dataclass(frozen=True, slots=True, kw_only=True)
class LegendConfig:
    """Legend options."""

    show: bool
    position: LegendPosition


@dataclass(frozen=True, slots=True, kw_only=True)
class Padding:
    """Chart padding in pixels."""

    top: int
    right: int
    bottom: int
    left: int


@dataclass(frozen=True, slots=True, kw_only=True)
class Typography:
    """Font settings for the chart title."""

    font_family: str
    font_size: int
    font_weight: int
    color: str


@dataclass(frozen=True, slots=True, kw_only=True)
class BaseChartConfig:
    """Fields shared by every chart type.

    Args:
        color_scheme: Series colors, applied in order.
        animation_duration: Transition duration in milliseconds.
        tooltip: Tooltip options.
        legend: Legend options.
        background_color: Chart background color.
        padding: Chart padding.
        title: Chart title.
        title_font: Title typography.
        data_field_x: Field bound to the x axis.
        data_field_y: Field bound to the y axis.
        aggregation: Aggregation applied to `data_field_y`.
        max_points: Rendering hint capping the number of points requested.
    """

    color_scheme: tuple[str, ...]
    animation_duration: int
    tooltip: TooltipConfig
    legend: LegendConfig
    background_color: str
    padding: Padding
    title: str
    title_font: Typography
    data_field_x: str | None
    data_field_y: str | None
    aggregation: Aggregation
    max_points: int


@dataclass(frozen=True, slots=True, kw_only=True)
class BarChartConfig(BaseChartConfig):
    """Bar chart options."""

    type: Literal["bar"] = field(default="bar", init=False)
    x_axis: AxisConfig
    y_axis: AxisConfig
    orientation: Orientation
    stacked: bool
    grouped: bool
    bar_width: int | Literal["auto"]
    max_bar_width: int
    bar_spacing: int
    bar_category_gap: int
    bar_radius: tuple[int, int, int, int]
    sort_by: SortBy
    sort_order: SortOrder
    show_value_labels: bool
    value_label_position: ValueLabelPosition
    value_label_font_size: int
    value_label_font_color: str
    highlight_on_hover: bool
    selected_bar_index: int | None
    selected_category: str | None


@dataclass(frozen=True, slots=True, kw_only=True)
class LineChartConfig(BaseChartConfig):
    """Line chart options."""

    type: Literal["line"] = field(default="line", init=False)
    x_axis: AxisConfig
    y_axis: AxisConfig
    curve_type: CurveType
    stroke_width: float
    stroke_style: StrokeStyle
    show_markers: bool
    marker_shape: MarkerShape
    marker_size: int
    sort_by: SortBy
    sort_order: SortOrder
    multi_series: bool
    series_fields: tuple[str, ...]
    area_fill: bool
    area_fill_opacity: float
    area_gradient: bool
    zoomable: bool
    pannable: bool
    connect_nulls: bool
    show_min_max: bool


@dataclass(frozen=True, slots=True, kw_only=True)
class AreaChartConfig(BaseChartConfig):
    """Area chart options."""

    type: Literal["area"] = field(default="area", init=False)
    x_axis: AxisConfig
    y_axis: AxisConfig
    curve_type: CurveType
    stroke_width: float
    show_line_border: bool
    show_markers: bool
    stacked: bool
    stack_offset: StackOffset
    fill_opacity: float
    gradient_fill: bool
    baseline_value: float
    sort_order: SortOrder
    multi_series: bool
    series_fields: tuple[str, ...]
    zoomable: bool
    pannable: bool


@dataclass(frozen=True, slots=True, kw_only=True)
class PieChartConfig(BaseChartConfig):
    """Pie (and donut, when `inner_radius > 0`) chart options."""

    type: Literal["pie"] = field(default="pie", init=False)
    inner_radius: int
    outer_radius: int
    start_angle: int
    end_angle: int
    pad_angle: float
    corner_radius: int
    sort_order: SortOrder
    show_labels: bool
    label_format: str
    label_position: PieLabelPosition
    max_slices: int
    other_slice_label: str
    explode_slice_index: int | None
    explode_offset: int
    center_label: str


@dataclass(frozen=True, slots=True, kw_only=True)
class ScatterChartConfig(BaseChartConfig):
    """Scatter chart options."""

    type: Literal["scatter"] = field(default="scatter", init=False)
    x_axis: AxisConfig
    y_axis: AxisConfig
    data_field_size: str | None
    data_field_color: str | None
    point_size: int
    min_point_size: int
    max_point_size: int
    point_shape: MarkerShape
    point_opacity: float
    sample_method: SampleMethod
    sample_size: int
    zoomable: bool
    pannable: bool
    show_trend_line: bool
    trend_line_type: TrendLineType
    highlight_outliers: bool
    outlier_threshold: float
    jitter: float
    show_quadrants: bool


ChartConfig: TypeAlias = BarChartConfig | LineChartConfig | AreaChartConfig | PieChartConfig | ScatterChartConfig

CONFIG_CLASSES: dict[ChartType, type[BaseChartConfig]] = {
    "bar": BarChartConfig,
    "line": LineChartConfig,
    "area": AreaChartConfig,
    "pie": PieChartConfig,
    "scatter": ScatterChartConfig,
}

AxisBearingConfig: TypeAlias = BarChartConfig | LineChartConfig | AreaChartConfig | ScatterChartConfig


def has_axes(config: ChartConfig) -> TypeGuard[AxisBearingConfig]:
    """Return True for chart types that draw x/y axes (everything but pie)."""

    return not isinstance(config, PieChartConfig)


def as_bar_config(config: ChartConfig) -> BarChartConfig | None:
    """Return `config` narrowed to a bar config, or None for other variants."""

    return config if isinstance(config, BarChartConfig) else None


def as_line_config(config: ChartConfig) -> LineChartConfig | None:
    """Return `config` narrowed to a line config, or None for other variants."""

    return config if isinstance(config, LineChartConfig) else None


def as_area_config(config: ChartConfig) -> AreaChartConfig | None:
    """Return `config` narrowed to an area config, or None for other variants."""

    return config if isinstance(config, AreaChartConfig) else None


def as_pie_config(config: ChartConfig) -> PieChartConfig | None:
    """Return `config` narrowed to a pie config, or None for other variants."""

    return config if isinstance(config, PieChartConfig) else None


def as_scatter_config(config: ChartConfig) -> ScatterChartConfig | None:
    """Return `config` narrowed to a scatter config, or None for other variants."""

    return config if isinstance(config, ScatterChartConfig) else None
