"""DTO schema for visualization specifications.

A VisualizationSpec is the canonical description of *what* to chart:
- schema-driven (fields reference dataset columns, no free-form expressions),
- serializable for persistence,
- validated before execution,
- the only artifact handed to the query engine (styling lives elsewhere).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final, Literal


ChartType = Literal["bar", "line", "area", "pie", "scatter"]
Aggregation = Literal["sum", "avg", "count", "min", "max", "median"]
DateBinning = Literal["year", "quarter", "month", "day"]
SortBy = Literal["x", "y", "none"]
SortOrder = Literal["asc", "desc", "none"]
FilterOperator = Literal[
    "eq",
    "neq",
    "gt",
    "lt",
    "gte",
    "lte",
    "contains",
    "starts_with",
    "ends_with",
    "is_null",
    "is_not_null",
]
FilterValue = str | int | float | bool | None

CHART_TYPES: Final[tuple[str, ...]] = ("bar", "line", "area", "pie", "scatter")
AGGREGATIONS: Final[tuple[str, ...]] = ("sum", "avg", "count", "min", "max", "median")
DATE_BINNINGS: Final[tuple[str, ...]] = ("year", "quarter", "month", "day")
SORT_FIELDS: Final[tuple[str, ...]] = ("x", "y", "none")
SORT_ORDERS: Final[tuple[str, ...]] = ("asc", "desc", "none")
FILTER_OPERATORS: Final[tuple[str, ...]] = (
    "eq",
    "neq",
    "gt",
    "lt",
    "gte",
    "lte",
    "contains",
    "starts_with",
    "ends_with",
    "is_null",
    "is_not_null",
)
VALUELESS_OPERATORS: Final[frozenset[str]] = frozenset({"is_null", "is_not_null"})

DEFAULT_DATE_BINNING: Final[DateBinning] = "year"


@dataclass(frozen=True, slots=True)
class FilterSpec:
    """A single row filter applied before aggregation.

    Args:
        column: Column the filter applies to.
        operator: Comparison operator.
        value: Comparison value; always None for is_null / is_not_null.
    """

    column: str
    operator: FilterOperator
    value: FilterValue = None


@dataclass(frozen=True, slots=True)
class VisualizationSpec:
    """Canonical, serializable query description for one chart.

    Args:
        chart_type: Visualization type.
        x_field: Column bound to the x axis (category/label axis).
        y_field: Column bound to the y axis (value axis).
        aggregation: Aggregation applied to `y_field` per x bucket.
        group_by: Optional column used to split the chart into series.
        sort_by: `x` sorts by label, `y` by aggregated value, `none` keeps natural order.
        sort_order: Direction used when `sort_by != "none"`.
        title: Human-readable chart title.
        filters: Row filters applied before aggregation.
        x_date_binning: Date bucket for `x_field`; present only for temporal columns.
        y_date_binning: Date bucket for `y_field`; present only for temporal columns.
    """

    chart_type: ChartType
    x_field: str
    y_field: str
    aggregation: Aggregation
    group_by: str | None
    sort_by: SortBy
    sort_order: SortOrder
    title: str
    filters: tuple[FilterSpec, ...] = ()
    x_date_binning: DateBinning | None = None
    y_date_binning: DateBinning | None = None


def default_title(aggregation: str, *, x_field: str, y_field: str) -> str:
    """Return the generated title used when the user has not supplied one."""

    label = aggregation[:1].upper() + aggregation[1:]
    return f"{label} of {y_field} by {x_field}"
