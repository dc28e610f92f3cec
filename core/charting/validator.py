"""Validation for ChartConfig values.

Configs are user-editable, so every editable property is checked against its
metadata (ranges, enum options, colors, field dtypes), plus the handful of
cross-field rules that metadata cannot express.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable

from analysis.dataset import Column, find_column

from .access import MISSING, get_config_value
from .properties import PropertyMetadata, get_properties_for_chart_type
from .schema import ChartConfig, as_bar_config, as_pie_config, as_scatter_config, has_axes

HEX_COLOR_RE = re.compile(r"^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6}|[0-9a-fA-F]{8})$")


@dataclass(frozen=True, slots=True)
class ValidationResult:
    """Result of validating a chart config."""

    is_valid: bool
    errors: tuple[str, ...] = ()
    warnings: tuple[str, ...] = ()


def is_hex_color(value: object) -> bool:
    """Return True for `#RGB`, `#RRGGBB` or `#RRGGBBAA` strings."""

    return isinstance(value, str) and HEX_COLOR_RE.match(value) is not None


def validate_chart_config(config: ChartConfig, *, columns: Iterable[Column] | None = None) -> ValidationResult:
    """Validate a ChartConfig against its property metadata.

    Args:
        config: ChartConfig to validate.
        columns: Optional dataset columns; when given, field bindings must
            name an existing column of an accepted dtype.

    Returns:
        ValidationResult containing errors and warnings.
    """

    errors: list[str] = []
    warnings: list[str] = []
    column_list = tuple(columns) if columns is not None else None

    for prop in get_properties_for_chart_type(config.type):
        value = get_config_value(config, prop.key)
        if value is MISSING:
            errors.append(f"ChartConfig[{config.type}].{prop.key} is missing.")
            continue
        message = _check_property(prop, value, columns=column_list)
        if message:
            errors.append(f"ChartConfig[{config.type}].{prop.key} {message}")

    if not config.color_scheme:
        errors.append(f"ChartConfig[{config.type}].color_scheme must contain at least one color.")
    for color in config.color_scheme:
        if not is_hex_color(color):
            errors.append(f"ChartConfig[{config.type}].color_scheme has an invalid color: {color!r}.")

    if config.data_field_x is None or config.data_field_y is None:
        warnings.append(f"ChartConfig[{config.type}] has no field bound to one of its axes.")

    if has_axes(config):
        for name, axis in (("x_axis", config.x_axis), ("y_axis", config.y_axis)):
            if axis.min_value is not None and axis.max_value is not None and axis.min_value >= axis.max_value:
                errors.append(f"ChartConfig[{config.type}].{name}.min_value must be below max_value.")

    bar = as_bar_config(config)
    if bar is not None and bar.stacked and bar.grouped:
        errors.append("ChartConfig[bar] cannot be both stacked and grouped.")

    pie = as_pie_config(config)
    if pie is not None:
        if pie.inner_radius >= pie.outer_radius:
            errors.append("ChartConfig[pie].inner_radius must be below outer_radius.")
        if pie.explode_slice_index is not None and not 0 <= pie.explode_slice_index < pie.max_slices:
            warnings.append("ChartConfig[pie].explode_slice_index is outside the visible slices.")

    scatter = as_scatter_config(config)
    if scatter is not None and scatter.min_point_size > scatter.max_point_size:
        errors.append("ChartConfig[scatter].min_point_size must not exceed max_point_size.")

    return ValidationResult(is_valid=not errors, errors=tuple(errors), warnings=tuple(warnings))


def _check_property(prop: PropertyMetadata, value: object, *, columns: tuple[Column, ...] | None) -> str | None:
    """Return an error message suffix for `value`, or None when it is acceptable."""

    if prop.type == "boolean":
        return None if isinstance(value, bool) else "must be a boolean."
    if prop.type == "number":
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return "must be a number."
        if prop.min_value is not None and value < prop.min_value:
            return f"must be >= {prop.min_value:g}."
        if prop.max_value is not None and value > prop.max_value:
            return f"must be <= {prop.max_value:g}."
        return None
    if prop.type == "enum":
        return None if value in prop.option_values() else f"is not a supported value: {value!r}."
    if prop.type == "color":
        return None if is_hex_color(value) else f"is not a hex color: {value!r}."
    if prop.type == "string":
        return None if isinstance(value, str) else "must be a string."
    if value is None:
        return None if prop.nullable else "is required."
    if not isinstance(value, str):
        return "must be a column name."
    if columns is None:
        return None
    column = find_column(columns, value)
    if column is None:
        return f"references an unknown column: {value!r}."
    if prop.field_dtypes is not None and column.dtype not in prop.field_dtypes:
        return f"does not accept {column.dtype} column {value!r}."
    return None
