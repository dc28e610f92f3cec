"""Property metadata registry used by the generic chart property editor.

Each chart type declares its editable properties as data: a dot-path key into
its ChartConfig, a label, a control type, a group, a default and type-specific
constraints. One generic editor interprets these records, so adding a chart
type means adding a default config and a property list, not new UI code.

Conditional controls declare an explicit `visible_when` rule (for example,
`marker_size` is only shown while `show_markers` is enabled).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Final, Iterable, Literal, Mapping

from analysis.dataset import NUMERIC_DTYPES
from analysis.visualization_spec import CHART_TYPES

from .access import MISSING, get_config_value
from .configs import DEFAULT_MAX_POINTS, get_default_config

PropertyType = Literal["boolean", "number", "enum", "color", "string", "field"]


@dataclass(frozen=True, slots=True)
class PropertyOption:
    """A selectable value for an enum property."""

    value: str
    label: str


@dataclass(frozen=True, slots=True)
class VisibilityRule:
    """Show a property only while another property has a qualifying value.

    Args:
        key: Dot-path of the governing property.
        one_of: Visible when the governing value is one of these (ignored when empty).
        none_of: Hidden when the governing value is one of these.
        greater_than: Visible when the governing value is a number above this bound.
    """

    key: str
    one_of: tuple[Any, ...] = ()
    none_of: tuple[Any, ...] = ()
    greater_than: float | None = None

    def is_satisfied(self, config: object) -> bool:
        """Return True when the property should be shown for `config`.

        A governing key that does not exist on the config never hides anything.
        """

        value = get_config_value(config, self.key)
        if value is MISSING:
            return True
        if self.one_of and value not in self.one_of:
            return False
        if self.none_of and value in self.none_of:
            return False
        if self.greater_than is not None:
            return isinstance(value, (int, float)) and not isinstance(value, bool) and value > self.greater_than
        return True


@dataclass(frozen=True, slots=True)
class PropertyMetadata:
    """Describe one editable ChartConfig field.

    Args:
        key: Dot-path into a ChartConfig.
        label: Control label.
        type: Control type interpreted by the editor.
        group: Editor section the control belongs to.
        default: Value shown when the live config has no value at `key`.
        min_value: Lower bound for number properties.
        max_value: Upper bound for number properties.
        step: Step size for number properties.
        options: Allowed values for enum properties.
        field_dtypes: Dataset dtypes accepted by field properties (None accepts all).
        nullable: Whether field properties may be left unset.
        visible_when: Optional visibility rule.
    """

    key: str
    label: str
    type: PropertyType
    group: str
    default: Any
    min_value: float | None = None
    max_value: float | None = None
    step: float | None = None
    options: tuple[PropertyOption, ...] = ()
    field_dtypes: frozenset[str] | None = None
    nullable: bool = True
    visible_when: VisibilityRule | None = None

    def option_values(self) -> tuple[str, ...]:
        """Return the allowed enum values in display order."""

        return tuple(option.value for option in self.options)


def _options(*pairs: tuple[str, str]) -> tuple[PropertyOption, ...]:
    return tuple(PropertyOption(value=value, label=label) for value, label in pairs)


def _when(key: str, *values: Any) -> VisibilityRule:
    return VisibilityRule(key=key, one_of=values)


_SORT_BY_OPTIONS = _options(("none", "None"), ("x", "Category"), ("y", "Value"))
_SORT_ORDER_OPTIONS = _options(("asc", "Ascending"), ("desc", "Descending"), ("none", "None"))
_CURVE_OPTIONS = _options(
    ("linear", "Straight"),
    ("monotone", "Smooth"),
    ("step", "Stepped"),
    ("step_after", "Step after"),
    ("step_before", "Step before"),
    ("smooth", "Spline"),
)
_SHAPE_OPTIONS = _options(
    ("circle", "Circle"),
    ("square", "Square"),
    ("triangle", "Triangle"),
    ("diamond", "Diamond"),
    ("cross", "Cross"),
    ("star", "Star"),
)
_SORTED = VisibilityRule(key="sort_by", none_of=("none",))


DATA_PROPERTIES: Final[tuple[PropertyMetadata, ...]] = (
    PropertyMetadata(key="data_field_x", label="X Field", type="field", group="Data", default=None),
    PropertyMetadata(
        key="data_field_y",
        label="Y Field",
        type="field",
        group="Data",
        default=None,
        field_dtypes=NUMERIC_DTYPES,
    ),
    PropertyMetadata(
        key="aggregation",
        label="Aggregation",
        type="enum",
        group="Data",
        default="sum",
        options=_options(
            ("sum", "Sum"),
            ("avg", "Average"),
            ("count", "Count"),
            ("min", "Minimum"),
            ("max", "Maximum"),
            ("median", "Median"),
        ),
    ),
    PropertyMetadata(
        key="max_points",
        label="Max Points",
        type="number",
        group="Data",
        default=DEFAULT_MAX_POINTS,
        min_value=100,
        max_value=50000,
        step=100,
    ),
)


def _axis_properties(axis: Literal["x", "y"], *, show_grid: bool) -> tuple[PropertyMetadata, ...]:
    prefix = f"{axis}_axis"
    group = f"{axis.upper()} Axis"
    return (
        PropertyMetadata(key=f"{prefix}.show", label="Show Axis", type="boolean", group=group, default=True),
        PropertyMetadata(
            key=f"{prefix}.label",
            label="Axis Title",
            type="string",
            group=group,
            default="",
            visible_when=_when(f"{prefix}.show", True),
        ),
        PropertyMetadata(
            key=f"{prefix}.show_grid",
            label="Grid Lines",
            type="boolean",
            group=group,
            default=show_grid,
        ),
        PropertyMetadata(
            key=f"{prefix}.tick_rotation",
            label="Label Rotation",
            type="number",
            group=group,
            default=0,
            min_value=-90,
            max_value=90,
            step=15,
            visible_when=_when(f"{prefix}.show", True),
        ),
        PropertyMetadata(
            key=f"{prefix}.scale_type",
            label="Scale",
            type="enum",
            group=group,
            default="linear",
            options=_options(("linear", "Linear"), ("log", "Logarithmic")),
        ),
    )


AXIS_PROPERTIES: Final[tuple[PropertyMetadata, ...]] = (
    _axis_properties("x", show_grid=False) + _axis_properties("y", show_grid=True)
)
SCATTER_AXIS_PROPERTIES: Final[tuple[PropertyMetadata, ...]] = (
    _axis_properties("x", show_grid=True) + _axis_properties("y", show_grid=True)
)


BAR_PROPERTIES: Final[tuple[PropertyMetadata, ...]] = (
    PropertyMetadata(
        key="orientation",
        label="Orientation",
        type="enum",
        group="Layout",
        default="vertical",
        options=_options(("vertical", "Vertical"), ("horizontal", "Horizontal")),
    ),
    PropertyMetadata(key="stacked", label="Stacked", type="boolean", group="Layout", default=False),
    PropertyMetadata(key="grouped", label="Grouped", type="boolean", group="Layout", default=False),
    PropertyMetadata(
        key="bar_category_gap",
        label="Category Gap",
        type="number",
        group="Layout",
        default=20,
        min_value=0,
        max_value=80,
        step=5,
    ),
    PropertyMetadata(
        key="bar_spacing",
        label="Bar Spacing",
        type="number",
        group="Layout",
        default=4,
        min_value=0,
        max_value=40,
        step=1,
    ),
    PropertyMetadata(
        key="max_bar_width",
        label="Max Bar Width",
        type="number",
        group="Style",
        default=64,
        min_value=8,
        max_value=200,
        step=4,
    ),
    PropertyMetadata(
        key="highlight_on_hover",
        label="Highlight on Hover",
        type="boolean",
        group="Style",
        default=True,
    ),
    PropertyMetadata(key="sort_by", label="Sort By", type="enum", group="Sorting", default="none", options=_SORT_BY_OPTIONS),
    PropertyMetadata(
        key="sort_order",
        label="Sort Order",
        type="enum",
        group="Sorting",
        default="asc",
        options=_SORT_ORDER_OPTIONS,
        visible_when=_SORTED,
    ),
    PropertyMetadata(
        key="show_value_labels",
        label="Show Value Labels",
        type="boolean",
        group="Labels",
        default=False,
    ),
    PropertyMetadata(
        key="value_label_position",
        label="Label Position",
        type="enum",
        group="Labels",
        default="top",
        options=_options(("top", "Top"), ("center", "Center"), ("bottom", "Bottom")),
        visible_when=_when("show_value_labels", True),
    ),
    PropertyMetadata(
        key="value_label_font_size",
        label="Label Font Size",
        type="number",
        group="Labels",
        default=10,
        min_value=6,
        max_value=24,
        step=1,
        visible_when=_when("show_value_labels", True),
    ),
    PropertyMetadata(
        key="value_label_font_color",
        label="Label Color",
        type="color",
        group="Labels",
        default="#404040",
        visible_when=_when("show_value_labels", True),
    ),
)


LINE_PROPERTIES: Final[tuple[PropertyMetadata, ...]] = (
    PropertyMetadata(key="curve_type", label="Line Style", type="enum", group="Style", default="monotone", options=_CURVE_OPTIONS),
    PropertyMetadata(
        key="stroke_width",
        label="Line Width",
        type="number",
        group="Style",
        default=2.0,
        min_value=1,
        max_value=6,
        step=0.5,
    ),
    PropertyMetadata(
        key="stroke_style",
        label="Dash Style",
        type="enum",
        group="Style",
        default="solid",
        options=_options(("solid", "Solid"), ("dashed", "Dashed"), ("dotted", "Dotted")),
    ),
    PropertyMetadata(
        key="connect_nulls",
        label="Connect Null Points",
        type="boolean",
        group="Style",
        default=False,
    ),
    PropertyMetadata(key="show_markers", label="Show Markers", type="boolean", group="Markers", default=True),
    PropertyMetadata(
        key="marker_shape",
        label="Marker Shape",
        type="enum",
        group="Markers",
        default="circle",
        options=_SHAPE_OPTIONS,
        visible_when=_when("show_markers", True),
    ),
    PropertyMetadata(
        key="marker_size",
        label="Marker Size",
        type="number",
        group="Markers",
        default=4,
        min_value=2,
        max_value=12,
        step=1,
        visible_when=_when("show_markers", True),
    ),
    PropertyMetadata(key="area_fill", label="Fill Area", type="boolean", group="Area Fill", default=False),
    PropertyMetadata(
        key="area_fill_opacity",
        label="Fill Opacity",
        type="number",
        group="Area Fill",
        default=0.2,
        min_value=0.05,
        max_value=1,
        step=0.05,
        visible_when=_when("area_fill", True),
    ),
    PropertyMetadata(
        key="area_gradient",
        label="Gradient Fill",
        type="boolean",
        group="Area Fill",
        default=False,
        visible_when=_when("area_fill", True),
    ),
    PropertyMetadata(key="sort_by", label="Sort By", type="enum", group="Sorting", default="x", options=_SORT_BY_OPTIONS),
    PropertyMetadata(
        key="sort_order",
        label="Sort Order",
        type="enum",
        group="Sorting",
        default="asc",
        options=_SORT_ORDER_OPTIONS,
        visible_when=_SORTED,
    ),
    PropertyMetadata(key="show_min_max", label="Mark Min/Max", type="boolean", group="Labels", default=False),
    PropertyMetadata(key="zoomable", label="Zoomable", type="boolean", group="Interaction", default=False),
    PropertyMetadata(key="pannable", label="Pannable", type="boolean", group="Interaction", default=False),
)


AREA_PROPERTIES: Final[tuple[PropertyMetadata, ...]] = (
    PropertyMetadata(key="curve_type", label="Line Style", type="enum", group="Style", default="monotone", options=_CURVE_OPTIONS),
    PropertyMetadata(key="stacked", label="Stacked", type="boolean", group="Layout", default=False),
    PropertyMetadata(
        key="stack_offset",
        label="Stack Offset",
        type="enum",
        group="Layout",
        default="none",
        options=_options(("none", "None"), ("expand", "Percent"), ("silhouette", "Silhouette"), ("wiggle", "Stream")),
        visible_when=_when("stacked", True),
    ),
    PropertyMetadata(
        key="fill_opacity",
        label="Fill Opacity",
        type="number",
        group="Style",
        default=0.3,
        min_value=0.1,
        max_value=1,
        step=0.1,
    ),
    PropertyMetadata(key="gradient_fill", label="Gradient Fill", type="boolean", group="Style", default=False),
    PropertyMetadata(key="show_line_border", label="Show Border Line", type="boolean", group="Style", default=True),
    PropertyMetadata(
        key="stroke_width",
        label="Border Width",
        type="number",
        group="Style",
        default=2.0,
        min_value=0,
        max_value=4,
        step=0.5,
        visible_when=_when("show_line_border", True),
    ),
    PropertyMetadata(key="show_markers", label="Show Markers", type="boolean", group="Style", default=False),
    PropertyMetadata(
        key="baseline_value",
        label="Baseline",
        type="number",
        group="Layout",
        default=0.0,
        step=1,
    ),
    PropertyMetadata(key="zoomable", label="Zoomable", type="boolean", group="Interaction", default=False),
    PropertyMetadata(key="pannable", label="Pannable", type="boolean", group="Interaction", default=False),
)


PIE_PROPERTIES: Final[tuple[PropertyMetadata, ...]] = (
    PropertyMetadata(
        key="inner_radius",
        label="Inner Radius (Donut)",
        type="number",
        group="Layout",
        default=0,
        min_value=0,
        max_value=80,
        step=5,
    ),
    PropertyMetadata(
        key="outer_radius",
        label="Outer Radius",
        type="number",
        group="Layout",
        default=80,
        min_value=20,
        max_value=100,
        step=5,
    ),
    PropertyMetadata(
        key="pad_angle",
        label="Slice Gap",
        type="number",
        group="Layout",
        default=0.0,
        min_value=0,
        max_value=10,
        step=0.5,
    ),
    PropertyMetadata(
        key="corner_radius",
        label="Corner Radius",
        type="number",
        group="Layout",
        default=0,
        min_value=0,
        max_value=20,
        step=1,
    ),
    PropertyMetadata(
        key="center_label",
        label="Center Label",
        type="string",
        group="Layout",
        default="",
        visible_when=VisibilityRule(key="inner_radius", greater_than=0),
    ),
    PropertyMetadata(
        key="max_slices",
        label="Max Slices",
        type="number",
        group="Slices",
        default=8,
        min_value=2,
        max_value=20,
        step=1,
    ),
    PropertyMetadata(key="other_slice_label", label="Other Slice Label", type="string", group="Slices", default="Other"),
    PropertyMetadata(key="sort_order", label="Sort Order", type="enum", group="Slices", default="desc", options=_SORT_ORDER_OPTIONS),
    PropertyMetadata(
        key="explode_offset",
        label="Explode Offset",
        type="number",
        group="Slices",
        default=10,
        min_value=0,
        max_value=40,
        step=2,
        visible_when=VisibilityRule(key="explode_slice_index", none_of=(None,)),
    ),
    PropertyMetadata(key="show_labels", label="Show Labels", type="boolean", group="Labels", default=True),
    PropertyMetadata(
        key="label_format",
        label="Label Format",
        type="string",
        group="Labels",
        default="{percent}",
        visible_when=_when("show_labels", True),
    ),
    PropertyMetadata(
        key="label_position",
        label="Label Position",
        type="enum",
        group="Labels",
        default="outside",
        options=_options(("inside", "Inside"), ("outside", "Outside"), ("center", "Center")),
        visible_when=_when("show_labels", True),
    ),
)


SCATTER_PROPERTIES: Final[tuple[PropertyMetadata, ...]] = (
    PropertyMetadata(
        key="data_field_size",
        label="Size Field",
        type="field",
        group="Data",
        default=None,
        field_dtypes=NUMERIC_DTYPES,
    ),
    PropertyMetadata(key="data_field_color", label="Color Field", type="field", group="Data", default=None),
    PropertyMetadata(
        key="point_size",
        label="Point Size",
        type="number",
        group="Style",
        default=6,
        min_value=2,
        max_value=20,
        step=1,
    ),
    PropertyMetadata(
        key="min_point_size",
        label="Min Point Size",
        type="number",
        group="Style",
        default=4,
        min_value=1,
        max_value=20,
        step=1,
        visible_when=VisibilityRule(key="data_field_size", none_of=(None,)),
    ),
    PropertyMetadata(
        key="max_point_size",
        label="Max Point Size",
        type="number",
        group="Style",
        default=24,
        min_value=4,
        max_value=60,
        step=1,
        visible_when=VisibilityRule(key="data_field_size", none_of=(None,)),
    ),
    PropertyMetadata(key="point_shape", label="Point Shape", type="enum", group="Style", default="circle", options=_SHAPE_OPTIONS),
    PropertyMetadata(
        key="point_opacity",
        label="Point Opacity",
        type="number",
        group="Style",
        default=0.7,
        min_value=0.1,
        max_value=1,
        step=0.1,
    ),
    PropertyMetadata(
        key="jitter",
        label="Jitter",
        type="number",
        group="Style",
        default=0.0,
        min_value=0,
        max_value=1,
        step=0.05,
    ),
    PropertyMetadata(
        key="sample_method",
        label="Sampling",
        type="enum",
        group="Sampling",
        default="random",
        options=_options(("random", "Random"), ("stratified", "Stratified"), ("systematic", "Systematic")),
    ),
    PropertyMetadata(
        key="sample_size",
        label="Sample Size",
        type="number",
        group="Sampling",
        default=2000,
        min_value=100,
        max_value=20000,
        step=100,
    ),
    PropertyMetadata(key="show_trend_line", label="Trend Line", type="boolean", group="Analysis", default=False),
    PropertyMetadata(
        key="trend_line_type",
        label="Trend Type",
        type="enum",
        group="Analysis",
        default="linear",
        options=_options(
            ("none", "None"),
            ("linear", "Linear"),
            ("polynomial", "Polynomial"),
            ("exponential", "Exponential"),
            ("logarithmic", "Logarithmic"),
            ("loess", "LOESS"),
        ),
        visible_when=_when("show_trend_line", True),
    ),
    PropertyMetadata(
        key="highlight_outliers",
        label="Highlight Outliers",
        type="boolean",
        group="Analysis",
        default=False,
    ),
    PropertyMetadata(
        key="outlier_threshold",
        label="Outlier Threshold (σ)",
        type="number",
        group="Analysis",
        default=3.0,
        min_value=1,
        max_value=5,
        step=0.5,
        visible_when=_when("highlight_outliers", True),
    ),
    PropertyMetadata(key="show_quadrants", label="Show Quadrants", type="boolean", group="Analysis", default=False),
    PropertyMetadata(key="zoomable", label="Zoomable", type="boolean", group="Interaction", default=True),
    PropertyMetadata(key="pannable", label="Pannable", type="boolean", group="Interaction", default=True),
)


APPEARANCE_PROPERTIES: Final[tuple[PropertyMetadata, ...]] = (
    PropertyMetadata(key="title", label="Title", type="string", group="Title", default=""),
    PropertyMetadata(
        key="title_font.font_size",
        label="Title Size",
        type="number",
        group="Title",
        default=13,
        min_value=8,
        max_value=32,
        step=1,
    ),
    PropertyMetadata(key="title_font.color", label="Title Color", type="color", group="Title", default="#171717"),
    PropertyMetadata(key="background_color", label="Background", type="color", group="Appearance", default="#FFFFFF"),
    PropertyMetadata(
        key="animation_duration",
        label="Animation (ms)",
        type="number",
        group="Appearance",
        default=300,
        min_value=0,
        max_value=2000,
        step=50,
    ),
    PropertyMetadata(key="tooltip.enabled", label="Show Tooltip", type="boolean", group="Tooltip", default=True),
    PropertyMetadata(
        key="tooltip.show_percent",
        label="Show Percent",
        type="boolean",
        group="Tooltip",
        default=False,
        visible_when=_when("tooltip.enabled", True),
    ),
)


COMMON_PROPERTIES: Final[tuple[PropertyMetadata, ...]] = (
    PropertyMetadata(key="legend.show", label="Show Legend", type="boolean", group="Legend", default=True),
    PropertyMetadata(
        key="legend.position",
        label="Legend Position",
        type="enum",
        group="Legend",
        default="bottom",
        options=_options(("top", "Top"), ("bottom", "Bottom"), ("left", "Left"), ("right", "Right"), ("none", "None")),
        visible_when=_when("legend.show", True),
    ),
)


class PropertyMetadataRegistry:
    """Lookup helpers for per-chart-type property metadata."""

    def __init__(
        self,
        properties_by_type: Mapping[str, Iterable[PropertyMetadata]],
        *,
        common: Iterable[PropertyMetadata] = (),
    ) -> None:
        """Initialize a registry; `common` is appended to every chart type's list."""

        common = tuple(common)
        self._properties: dict[str, tuple[PropertyMetadata, ...]] = {}
        for chart_type, properties in properties_by_type.items():
            combined = tuple(properties) + common
            seen: set[str] = set()
            for prop in combined:
                if prop.key in seen:
                    raise ValueError(f"Duplicate PropertyMetadata key for {chart_type!r}: {prop.key!r}")
                seen.add(prop.key)
                if prop.type == "enum" and prop.default not in prop.option_values():
                    raise ValueError(
                        f"PropertyMetadata[{chart_type}.{prop.key}] default={prop.default!r} is not an option."
                    )
            self._properties[chart_type] = combined

    def chart_types(self) -> tuple[str, ...]:
        """Return registered chart types in registration order."""

        return tuple(self._properties)

    def for_chart_type(self, chart_type: str) -> tuple[PropertyMetadata, ...]:
        """Return every property for `chart_type` (empty for unknown types)."""

        return self._properties.get(chart_type, ())

    def get(self, chart_type: str, key: str) -> PropertyMetadata | None:
        """Return the property with `key` for `chart_type`, or None when missing."""

        for prop in self.for_chart_type(chart_type):
            if prop.key == key:
                return prop
        return None

    def groups(self, chart_type: str) -> tuple[str, ...]:
        """Return unique group names in first-seen order."""

        return tuple(dict.fromkeys(prop.group for prop in self.for_chart_type(chart_type)))

    def by_group(self, chart_type: str, group: str) -> tuple[PropertyMetadata, ...]:
        """Return the properties of `group` in declaration order."""

        return tuple(prop for prop in self.for_chart_type(chart_type) if prop.group == group)

    def unresolved_keys(self) -> tuple[str, ...]:
        """Return `type.key` entries whose key does not exist on the type's default config."""

        missing: list[str] = []
        for chart_type, properties in self._properties.items():
            defaults = get_default_config(chart_type)
            for prop in properties:
                if get_config_value(defaults, prop.key) is MISSING:
                    missing.append(f"{chart_type}.{prop.key}")
        return tuple(missing)


DEFAULT_PROPERTY_REGISTRY: Final[PropertyMetadataRegistry] = PropertyMetadataRegistry(
    {
        "bar": DATA_PROPERTIES + BAR_PROPERTIES + AXIS_PROPERTIES + APPEARANCE_PROPERTIES,
        "line": DATA_PROPERTIES + LINE_PROPERTIES + AXIS_PROPERTIES + APPEARANCE_PROPERTIES,
        "area": DATA_PROPERTIES + AREA_PROPERTIES + AXIS_PROPERTIES + APPEARANCE_PROPERTIES,
        "pie": DATA_PROPERTIES + PIE_PROPERTIES + APPEARANCE_PROPERTIES,
        "scatter": DATA_PROPERTIES + SCATTER_PROPERTIES + SCATTER_AXIS_PROPERTIES + APPEARANCE_PROPERTIES,
    },
    common=COMMON_PROPERTIES,
)

_UNRESOLVED = DEFAULT_PROPERTY_REGISTRY.unresolved_keys()
if _UNRESOLVED:
    raise ValueError(f"PropertyMetadata keys missing from default configs: {list(_UNRESOLVED)}")
if set(DEFAULT_PROPERTY_REGISTRY.chart_types()) != set(CHART_TYPES):
    raise ValueError("PropertyMetadata registry must cover every chart type.")


def get_properties_for_chart_type(chart_type: str) -> tuple[PropertyMetadata, ...]:
    """Return the editable properties for `chart_type` (type-specific first, legend last)."""

    return DEFAULT_PROPERTY_REGISTRY.for_chart_type(chart_type)


def get_property_groups(chart_type: str) -> tuple[str, ...]:
    """Return the editor groups for `chart_type` in insertion order."""

    return DEFAULT_PROPERTY_REGISTRY.groups(chart_type)


def get_properties_by_group(chart_type: str, group: str) -> tuple[PropertyMetadata, ...]:
    """Return the properties of one editor group."""

    return DEFAULT_PROPERTY_REGISTRY.by_group(chart_type, group)


def filter_visible_properties(
    properties: Iterable[PropertyMetadata],
    config: object,
) -> tuple[PropertyMetadata, ...]:
    """Drop properties whose visibility rule fails against `config`.

    This is a pure filter: it reads `config` and never changes it.
    """

    return tuple(
        prop for prop in properties if prop.visible_when is None or prop.visible_when.is_satisfied(config)
    )
