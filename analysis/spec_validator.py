"""Validation for VisualizationSpec values."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from analysis.dataset import Column, find_column
from analysis.visualization_spec import (
    AGGREGATIONS,
    CHART_TYPES,
    DATE_BINNINGS,
    FILTER_OPERATORS,
    SORT_FIELDS,
    SORT_ORDERS,
    VALUELESS_OPERATORS,
    VisualizationSpec,
)

_VALUE_AGGREGATIONS = frozenset({"sum", "avg", "median"})


@dataclass(frozen=True, slots=True)
class SpecValidationResult:
    """Validation result for VisualizationSpec.

    Args:
        is_valid: True when no errors exist.
        errors: Fatal validation errors.
        warnings: Non-fatal warnings intended for UI display.
    """

    is_valid: bool
    errors: tuple[str, ...] = ()
    warnings: tuple[str, ...] = ()


def validate_visualization_spec(
    spec: VisualizationSpec,
    *,
    columns: Iterable[Column],
) -> SpecValidationResult:
    """Validate a VisualizationSpec against the active dataset schema.

    Args:
        spec: VisualizationSpec emitted by the builder or decoded from storage.
        columns: Columns of the active dataset.

    Returns:
        SpecValidationResult containing errors and warnings.
    """

    columns = tuple(columns)
    errors: list[str] = []
    warnings: list[str] = []

    if spec.chart_type not in CHART_TYPES:
        errors.append(f"Unsupported chart_type: {spec.chart_type!r}.")
    if spec.aggregation not in AGGREGATIONS:
        errors.append(f"Unsupported aggregation: {spec.aggregation!r}.")
    if spec.sort_by not in SORT_FIELDS:
        errors.append(f"Unsupported sort_by: {spec.sort_by!r}.")
    if spec.sort_order not in SORT_ORDERS:
        errors.append(f"Unsupported sort_order: {spec.sort_order!r}.")
    if not spec.title.strip():
        errors.append("VisualizationSpec.title must be a non-empty string.")

    for axis, field_name, binning in (
        ("x", spec.x_field, spec.x_date_binning),
        ("y", spec.y_field, spec.y_date_binning),
    ):
        column = find_column(columns, field_name)
        if column is None:
            errors.append(f"{axis}_field references unknown column: {field_name!r}.")
            continue
        if binning is not None and not column.is_temporal:
            errors.append(f"{axis}_date_binning is only allowed for date columns; {field_name!r} is {column.dtype}.")
        if binning is not None and binning not in DATE_BINNINGS:
            errors.append(f"Unsupported {axis}_date_binning: {binning!r}.")
        if binning is None and column.is_temporal:
            warnings.append(f"{axis}_field {field_name!r} is a date column without date binning.")

    y_column = find_column(columns, spec.y_field)
    if y_column is not None and spec.aggregation in _VALUE_AGGREGATIONS and not y_column.is_numeric:
        warnings.append(
            f"Aggregation {spec.aggregation!r} on non-numeric column {spec.y_field!r} may produce empty values."
        )

    if spec.group_by is not None and find_column(columns, spec.group_by) is None:
        errors.append(f"group_by references unknown column: {spec.group_by!r}.")

    if spec.sort_by == "none" and spec.sort_order == "desc":
        warnings.append("sort_order is ignored when sort_by is 'none'.")

    for idx, filter_spec in enumerate(spec.filters):
        if find_column(columns, filter_spec.column) is None:
            errors.append(f"filters[{idx}] references unknown column: {filter_spec.column!r}.")
        if filter_spec.operator not in FILTER_OPERATORS:
            errors.append(f"filters[{idx}] has unsupported operator: {filter_spec.operator!r}.")
        elif filter_spec.operator in VALUELESS_OPERATORS and filter_spec.value is not None:
            warnings.append(f"filters[{idx}] value is ignored for operator {filter_spec.operator!r}.")
        elif filter_spec.operator not in VALUELESS_OPERATORS and filter_spec.value is None:
            errors.append(f"filters[{idx}] operator {filter_spec.operator!r} requires a value.")

    return SpecValidationResult(is_valid=not errors, errors=tuple(errors), warnings=tuple(warnings))
