"""Forms for chart editing workflows.

- a generic chart property form generated from property metadata,
- a builder form for the visualization spec selections,
- a single row-filter form.
"""

from __future__ import annotations

from typing import Any, Callable, Iterable

from django import forms
from django.core.validators import RegexValidator

from analysis.dataset import Column, filter_columns, find_column
from analysis.visualization_spec import (
    AGGREGATIONS,
    CHART_TYPES,
    DATE_BINNINGS,
    FILTER_OPERATORS,
    SORT_FIELDS,
    SORT_ORDERS,
    VALUELESS_OPERATORS,
    FilterSpec,
    VisualizationSpec,
)
from core.charting.access import get_config_value
from core.charting.builder import VisualizationSpecBuilder
from core.charting.properties import PropertyMetadata, filter_visible_properties, get_properties_for_chart_type
from core.charting.schema import ChartConfig
from core.charting.store import ChartConfigStore
from core.charting.validator import HEX_COLOR_RE


def _labelled(values: Iterable[str]) -> list[tuple[str, str]]:
    return [(value, value.replace("_", " ").capitalize()) for value in values]


def property_field_name(key: str) -> str:
    """Return the form field name for a dot-path property key."""

    return key.replace(".", "__")


def _boolean_field(prop: PropertyMetadata, columns: tuple[Column, ...]) -> forms.Field:
    return forms.BooleanField(required=False, label=prop.label)


def _number_field(prop: PropertyMetadata, columns: tuple[Column, ...]) -> forms.Field:
    attrs = {"step": prop.step} if prop.step is not None else {}
    return forms.FloatField(
        required=True,
        label=prop.label,
        min_value=prop.min_value,
        max_value=prop.max_value,
        widget=forms.NumberInput(attrs=attrs),
    )


def _enum_field(prop: PropertyMetadata, columns: tuple[Column, ...]) -> forms.Field:
    return forms.ChoiceField(
        required=True,
        label=prop.label,
        choices=[(option.value, option.label) for option in prop.options],
    )


def _color_field(prop: PropertyMetadata, columns: tuple[Column, ...]) -> forms.Field:
    return forms.CharField(
        required=True,
        label=prop.label,
        validators=[RegexValidator(HEX_COLOR_RE, message="Enter a hex color such as #2563EB.")],
    )


def _string_field(prop: PropertyMetadata, columns: tuple[Column, ...]) -> forms.Field:
    return forms.CharField(required=False, label=prop.label)


def _column_field(prop: PropertyMetadata, columns: tuple[Column, ...]) -> forms.Field:
    choices = [("", "(none)")] if prop.nullable else []
    choices += [(column.name, column.name) for column in filter_columns(columns, prop.field_dtypes)]
    return forms.ChoiceField(required=not prop.nullable, label=prop.label, choices=choices)


FIELD_BUILDERS: dict[str, Callable[[PropertyMetadata, tuple[Column, ...]], forms.Field]] = {
    "boolean": _boolean_field,
    "number": _number_field,
    "enum": _enum_field,
    "color": _color_field,
    "string": _string_field,
    "field": _column_field,
}


class ChartPropertyForm(forms.Form):
    """Edit the visible properties of a ChartConfig.

    Fields are generated from property metadata, one builder per property type,
    so every chart type shares this form. Field names are the property keys
    with `.` replaced by `__`.
    """

    def __init__(self, *args, config: ChartConfig, columns: Iterable[Column] = (), **kwargs) -> None:
        """Initialize fields for the visible properties of `config`."""

        super().__init__(*args, **kwargs)
        self.config = config
        self.columns = tuple(columns)
        visible = filter_visible_properties(get_properties_for_chart_type(config.type), config)
        self.properties: dict[str, PropertyMetadata] = {}
        for prop in visible:
            name = property_field_name(prop.key)
            field = FIELD_BUILDERS[prop.type](prop, self.columns)
            field.initial = self._initial_value(prop)
            self.fields[name] = field
            self.properties[name] = prop

    def _initial_value(self, prop: PropertyMetadata) -> Any:
        value = get_config_value(self.config, prop.key, prop.default)
        if prop.type == "field" and value is None:
            return ""
        return value

    def clean(self) -> dict[str, object]:
        """Reject combinations the chart cannot render."""

        cleaned = super().clean()
        if cleaned.get("stacked") is True and cleaned.get("grouped") is True:
            self.add_error("grouped", "Bars cannot be both stacked and grouped.")
        inner = cleaned.get("inner_radius")
        outer = cleaned.get("outer_radius")
        if inner is not None and outer is not None and inner >= outer:
            self.add_error("inner_radius", "Inner radius must be smaller than the outer radius.")
        return cleaned

    def changes(self) -> dict[str, Any]:
        """Return `{property key: new value}` for values that differ from the config.

        Raises:
            ValueError: If the form is invalid.
        """

        if not self.is_valid():
            raise ValueError("Cannot compute changes for an invalid form.")

        result: dict[str, Any] = {}
        for name, prop in self.properties.items():
            current = get_config_value(self.config, prop.key, prop.default)
            value = self._coerce(prop, self.cleaned_data.get(name), current)
            if value != current:
                result[prop.key] = value
        return result

    @staticmethod
    def _coerce(prop: PropertyMetadata, value: Any, current: Any) -> Any:
        if prop.type == "field":
            return value or None
        if prop.type == "number" and isinstance(value, float):
            keep_int = isinstance(current, int) or (current is None and isinstance(prop.default, int))
            if keep_int and value.is_integer():
                return int(value)
        return value

    def apply_to(self, store: ChartConfigStore) -> dict[str, Any]:
        """Write changed values into `store` and return them."""

        changes = self.changes()
        for key, value in changes.items():
            store.set_property(key, value)
        return changes


class VisualizationBuilderForm(forms.Form):
    """Validate Visualization Builder selections against the dataset columns."""

    chart_type = forms.ChoiceField(required=True, choices=_labelled(CHART_TYPES), label="Chart type")
    x_field = forms.ChoiceField(required=True, choices=(), label="X axis")
    y_field = forms.ChoiceField(required=True, choices=(), label="Y axis")
    aggregation = forms.ChoiceField(required=True, choices=_labelled(AGGREGATIONS), label="Aggregation")
    x_date_binning = forms.ChoiceField(
        required=False,
        choices=[("", "(default)")] + _labelled(DATE_BINNINGS),
        label="X date bucket",
        help_text="Only used when the x field is a date column.",
    )
    y_date_binning = forms.ChoiceField(
        required=False,
        choices=[("", "(default)")] + _labelled(DATE_BINNINGS),
        label="Y date bucket",
        help_text="Only used when the y field is a date column.",
    )
    group_by = forms.ChoiceField(required=False, choices=(), label="Group by")
    sort_by = forms.ChoiceField(required=True, choices=_labelled(SORT_FIELDS), label="Sort by", initial="none")
    sort_order = forms.ChoiceField(required=True, choices=_labelled(SORT_ORDERS), label="Sort order", initial="asc")
    title = forms.CharField(required=False, label="Title", help_text="Leave blank to generate one.")

    def __init__(self, *args, columns: Iterable[Column], **kwargs) -> None:
        """Initialize column choices from the active dataset."""

        super().__init__(*args, **kwargs)
        self.columns = tuple(columns)
        names = [(column.name, column.name) for column in self.columns]
        self.fields["x_field"].choices = names
        self.fields["y_field"].choices = names
        self.fields["group_by"].choices = [("", "(none)")] + names

    def clean(self) -> dict[str, object]:
        """Reject date buckets on non-date columns."""

        cleaned = super().clean()
        for axis in ("x", "y"):
            binning = cleaned.get(f"{axis}_date_binning")
            column = find_column(self.columns, cleaned.get(f"{axis}_field"))
            if binning and column is not None and not column.is_temporal:
                self.add_error(f"{axis}_date_binning", f"{column.name} is not a date column.")
        return cleaned

    def apply_to(self, builder: VisualizationSpecBuilder) -> VisualizationSpec | None:
        """Push the validated selections into `builder` and build a spec.

        Raises:
            ValueError: If the form is invalid.
        """

        if not self.is_valid():
            raise ValueError("Cannot apply an invalid builder form.")

        data = self.cleaned_data
        builder.set_chart_type(data["chart_type"])
        builder.set_x_field(data["x_field"], self.columns)
        builder.set_y_field(data["y_field"], self.columns)
        if data.get("x_date_binning"):
            builder.set_x_date_binning(data["x_date_binning"])
        if data.get("y_date_binning"):
            builder.set_y_date_binning(data["y_date_binning"])
        builder.set_aggregation(data["aggregation"])
        builder.set_group_by(data.get("group_by") or None)
        builder.set_sort_by(data["sort_by"])
        builder.set_sort_order(data["sort_order"])
        builder.set_title(data.get("title") or "")
        return builder.build_spec(self.columns)


class FilterSpecForm(forms.Form):
    """Validate a single row filter."""

    column = forms.ChoiceField(required=True, choices=(), label="Column")
    operator = forms.ChoiceField(required=True, choices=_labelled(FILTER_OPERATORS), label="Operator")
    value = forms.CharField(required=False, label="Value")

    def __init__(self, *args, columns: Iterable[Column], **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.columns = tuple(columns)
        self.fields["column"].choices = [(column.name, column.name) for column in self.columns]

    def clean(self) -> dict[str, object]:
        """Require a value unless the operator is valueless, and coerce numbers."""

        cleaned = super().clean()
        operator = cleaned.get("operator")
        column = find_column(self.columns, cleaned.get("column"))
        raw = cleaned.get("value") or ""
        if operator in VALUELESS_OPERATORS:
            cleaned["value"] = None
        elif not raw:
            self.add_error("value", "A value is required for this operator.")
        elif column is not None and column.is_numeric:
            try:
                cleaned["value"] = float(raw) if column.dtype == "float" else int(raw)
            except ValueError:
                self.add_error("value", f"{column.name} expects a number.")
        elif column is not None and column.dtype == "boolean":
            cleaned["value"] = raw.strip().casefold() in {"1", "true", "yes", "on"}
        return cleaned

    def filter_spec(self) -> FilterSpec:
        """Return the validated filter.

        Raises:
            ValueError: If the form is invalid.
        """

        if not self.is_valid():
            raise ValueError("Cannot build a filter from an invalid form.")
        data = self.cleaned_data
        return FilterSpec(column=data["column"], operator=data["operator"], value=data.get("value"))
