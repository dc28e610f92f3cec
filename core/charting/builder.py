"""Interactive builder state that produces VisualizationSpec values.

The builder holds the user's in-progress selections (chart type, axes,
aggregation, binning, grouping, filters, sorting, title). Nothing is queried
while a selection is incomplete: `build_spec` returns None until both axes are
bound and every referenced field exists in the active dataset.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Iterable

from django.conf import settings

from analysis.dataset import Column, find_column
from analysis.visualization_spec import (
    AGGREGATIONS,
    CHART_TYPES,
    DATE_BINNINGS,
    DEFAULT_DATE_BINNING,
    SORT_FIELDS,
    SORT_ORDERS,
    VALUELESS_OPERATORS,
    Aggregation,
    ChartType,
    DateBinning,
    FilterSpec,
    SortBy,
    SortOrder,
    VisualizationSpec,
    default_title,
)

from .signals import builder_changed

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class BuilderState:
    """Snapshot of the builder's selections.

    Args:
        chart_type: Selected chart type.
        x_field: Column bound to the x axis, if any.
        y_field: Column bound to the y axis, if any.
        aggregation: Aggregation applied to the y field.
        x_aggregation: Editor-only aggregation choice for the x field; it is
            not part of the built spec.
        x_date_binning: Date bucket kept for a temporal x field.
        y_date_binning: Date bucket kept for a temporal y field.
        group_by: Optional series-splitting column.
        sort_by: Sort key (`none` keeps natural order).
        sort_order: Sort direction.
        title: User title; blank means "generate one".
        filters: Row filters in insertion order.
    """

    chart_type: ChartType = "bar"
    x_field: str | None = None
    y_field: str | None = None
    aggregation: Aggregation = "sum"
    x_aggregation: Aggregation = "sum"
    x_date_binning: DateBinning | None = DEFAULT_DATE_BINNING
    y_date_binning: DateBinning | None = DEFAULT_DATE_BINNING
    group_by: str | None = None
    sort_by: SortBy = "none"
    sort_order: SortOrder = "asc"
    title: str = ""
    filters: tuple[FilterSpec, ...] = ()


def default_date_binning() -> DateBinning:
    """Return the bucket applied when a temporal column is first selected."""

    configured = getattr(settings, "CHART_DEFAULT_DATE_BINNING", None) if settings.configured else None
    if configured in DATE_BINNINGS:
        return configured  # type: ignore[return-value]
    return DEFAULT_DATE_BINNING


def _require(value: str, allowed: tuple[str, ...], name: str) -> None:
    if value not in allowed:
        raise ValueError(f"Unsupported {name}: {value!r}.")


class VisualizationSpecBuilder:
    """Mutable selection state with a pure `build_spec` projection."""

    def __init__(self) -> None:
        self._state = BuilderState()

    @property
    def state(self) -> BuilderState:
        """Return the current (immutable) selection snapshot."""

        return self._state

    def _update(self, **changes: object) -> None:
        self._commit(replace(self._state, **changes))

    def _commit(self, state: BuilderState) -> None:
        if state == self._state:
            return
        self._state = state
        builder_changed.send(sender=self.__class__, builder=self, state=state)

    def set_chart_type(self, chart_type: str) -> None:
        """Select the chart type."""

        _require(chart_type, CHART_TYPES, "chart_type")
        self._update(chart_type=chart_type)

    def set_x_field(self, name: str | None, columns: Iterable[Column]) -> None:
        """Bind the x axis; temporal columns start with the default date bucket."""

        self._update(x_field=name or None, x_date_binning=self._binning_for(name, columns))

    def set_y_field(self, name: str | None, columns: Iterable[Column]) -> None:
        """Bind the y axis; temporal columns start with the default date bucket."""

        self._update(y_field=name or None, y_date_binning=self._binning_for(name, columns))

    @staticmethod
    def _binning_for(name: str | None, columns: Iterable[Column]) -> DateBinning | None:
        column = find_column(columns, name)
        if column is not None and column.is_temporal:
            return default_date_binning()
        return None

    def set_aggregation(self, aggregation: str) -> None:
        _require(aggregation, AGGREGATIONS, "aggregation")
        self._update(aggregation=aggregation)

    def set_x_aggregation(self, aggregation: str) -> None:
        _require(aggregation, AGGREGATIONS, "aggregation")
        self._update(x_aggregation=aggregation)

    def set_x_date_binning(self, binning: str | None) -> None:
        if binning is not None:
            _require(binning, DATE_BINNINGS, "date binning")
        self._update(x_date_binning=binning)

    def set_y_date_binning(self, binning: str | None) -> None:
        if binning is not None:
            _require(binning, DATE_BINNINGS, "date binning")
        self._update(y_date_binning=binning)

    def set_group_by(self, name: str | None) -> None:
        self._update(group_by=name or None)

    def add_filter(self, filter_spec: FilterSpec) -> None:
        """Append a row filter; valueless operators drop any supplied value."""

        if filter_spec.operator in VALUELESS_OPERATORS and filter_spec.value is not None:
            filter_spec = replace(filter_spec, value=None)
        self._update(filters=self._state.filters + (filter_spec,))

    def remove_filter(self, index: int) -> None:
        """Remove the filter at `index`; out-of-range indexes are ignored."""

        filters = self._state.filters
        if not 0 <= index < len(filters):
            logger.debug("Ignoring remove_filter(%s) with %s filters", index, len(filters))
            return
        self._update(filters=filters[:index] + filters[index + 1 :])

    def clear_filters(self) -> None:
        self._update(filters=())

    def set_sort_by(self, sort_by: str) -> None:
        _require(sort_by, SORT_FIELDS, "sort_by")
        self._update(sort_by=sort_by)

    def set_sort_order(self, sort_order: str) -> None:
        _require(sort_order, SORT_ORDERS, "sort_order")
        self._update(sort_order=sort_order)

    def set_title(self, title: str) -> None:
        self._update(title=title)

    def build_spec(self, columns: Iterable[Column]) -> VisualizationSpec | None:
        """Project the current selections into a VisualizationSpec.

        Args:
            columns: Columns of the active dataset.

        Returns:
            A complete VisualizationSpec, or None while either axis is unbound
            or any referenced field is missing from `columns`.
        """

        columns = tuple(columns)
        state = self._state
        if not state.x_field or not state.y_field:
            logger.debug("Spec not built: both axes must be bound")
            return None

        x_column = find_column(columns, state.x_field)
        y_column = find_column(columns, state.y_field)
        referenced = [state.x_field, state.y_field]
        if state.group_by:
            referenced.append(state.group_by)
        referenced.extend(f.column for f in state.filters)
        missing = [name for name in referenced if find_column(columns, name) is None]
        if x_column is None or y_column is None or missing:
            logger.debug("Spec not built: unknown fields %s", missing)
            return None

        title = state.title if state.title.strip() else default_title(
            state.aggregation, x_field=state.x_field, y_field=state.y_field
        )
        fallback = default_date_binning()
        return VisualizationSpec(
            chart_type=state.chart_type,
            x_field=state.x_field,
            y_field=state.y_field,
            aggregation=state.aggregation,
            group_by=state.group_by,
            sort_by=state.sort_by,
            sort_order=state.sort_order,
            title=title,
            filters=state.filters,
            x_date_binning=(state.x_date_binning or fallback) if x_column.is_temporal else None,
            y_date_binning=(state.y_date_binning or fallback) if y_column.is_temporal else None,
        )

    def load_from_spec(self, spec: VisualizationSpec) -> None:
        """Replace every selection with the values of `spec`.

        `x_aggregation` is not carried by specs and returns to its default.
        """

        self._update(
            chart_type=spec.chart_type,
            x_field=spec.x_field,
            y_field=spec.y_field,
            aggregation=spec.aggregation,
            x_aggregation="sum",
            x_date_binning=spec.x_date_binning or DEFAULT_DATE_BINNING,
            y_date_binning=spec.y_date_binning or DEFAULT_DATE_BINNING,
            group_by=spec.group_by,
            sort_by=spec.sort_by,
            sort_order=spec.sort_order,
            title=spec.title,
            filters=tuple(spec.filters),
        )

    def reset(self) -> None:
        """Return to the initial selections."""

        self._commit(BuilderState())
