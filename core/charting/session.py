"""Per-chart editing session tying the builder, config store and queries together.

A ChartSession is the composition root for one chart view: it owns the
dataset columns, the spec builder, the config store, the active spec and the
request tracker used to discard stale query results.
"""

from __future__ import annotations

import logging
from typing import Iterable

from analysis.chart_data import ChartData, QueryEngine, QueryExecutionError
from analysis.dataset import Column
from analysis.query_tracking import DEFAULT_CHART_KEY, LatestRequestTracker
from analysis.reduction import reduction_disclosure, validate_reduction_metadata
from analysis.visualization_spec import VisualizationSpec

from .builder import VisualizationSpecBuilder
from .signals import chart_data_received, spec_applied
from .store import ChartConfigStore

logger = logging.getLogger(__name__)


class ChartSession:
    """Own the editing state and query lifecycle of a single chart."""

    def __init__(
        self,
        columns: Iterable[Column] = (),
        *,
        chart_type: str = "bar",
        chart_key: str = DEFAULT_CHART_KEY,
    ) -> None:
        """Initialize a session.

        Args:
            columns: Columns of the active dataset.
            chart_type: Initial chart type for the config store.
            chart_key: Identity used for last-request-wins tracking.
        """

        self.columns: tuple[Column, ...] = tuple(columns)
        self.chart_key = chart_key
        self.builder = VisualizationSpecBuilder()
        self.config_store = ChartConfigStore(chart_type)
        self.tracker = LatestRequestTracker()
        self._active_spec: VisualizationSpec | None = None
        self._last_result: ChartData | None = None
        self._last_error: str | None = None

    @property
    def active_spec(self) -> VisualizationSpec | None:
        """Return the spec most recently applied, if any."""

        return self._active_spec

    @property
    def last_result(self) -> ChartData | None:
        return self._last_result

    @property
    def last_error(self) -> str | None:
        return self._last_error

    @property
    def reduction_disclosure(self) -> str | None:
        """Return the disclosure text for the current result, or None when complete."""

        if self._last_result is None:
            return None
        return reduction_disclosure(self._last_result.metadata)

    def set_columns(self, columns: Iterable[Column]) -> None:
        """Swap the dataset schema; the builder keeps its selections."""

        self.columns = tuple(columns)

    def apply_builder(self) -> VisualizationSpec | None:
        """Build a spec from the builder and make it the active spec.

        The config store follows the spec's chart type, field bindings,
        aggregation and title. Nothing is applied while the builder is
        incomplete.

        Returns:
            The applied spec, or None when the builder cannot produce one.
        """

        spec = self.builder.build_spec(self.columns)
        if spec is None:
            logger.debug("Nothing applied: builder selections are incomplete")
            return None

        store = self.config_store
        if store.config.type != spec.chart_type:
            store.set_chart_type(spec.chart_type)
        store.set_data_field_x(spec.x_field)
        store.set_data_field_y(spec.y_field)
        store.set_aggregation(spec.aggregation)
        store.set_title(spec.title)

        self._active_spec = spec
        logger.info("Applied %s spec %r", spec.chart_type, spec.title)
        spec_applied.send(sender=self.__class__, session=self, spec=spec)
        return spec

    def load_spec(self, spec: VisualizationSpec) -> VisualizationSpec | None:
        """Load a persisted spec into the builder and apply it."""

        self.builder.load_from_spec(spec)
        return self.apply_builder()

    async def refresh(self, engine: QueryEngine) -> ChartData | None:
        """Execute the active spec and keep the result if it is still current.

        Args:
            engine: Query engine used to execute the spec.

        Returns:
            The applied ChartData, or None when there is no active spec, the
            query failed, or a newer query superseded this one.
        """

        spec = self._active_spec
        if spec is None:
            return None

        ticket = self.tracker.issue(self.chart_key)
        try:
            data = await engine.execute(spec, self.config_store.config)
        except QueryExecutionError as exc:
            if self.tracker.is_current(ticket):
                self._last_error = str(exc)
            logger.warning("Query %s for chart %r failed: %s", ticket.request_id, self.chart_key, exc)
            return None

        if not self.tracker.is_current(ticket):
            logger.warning("Discarding stale result %s for chart %r", ticket.request_id, self.chart_key)
            return None

        if data.metadata is not None and data.metadata.reduction is not None:
            check = validate_reduction_metadata(data.metadata.reduction)
            for message in check.errors + check.warnings:
                logger.warning("Reduction metadata for chart %r: %s", self.chart_key, message)

        self._last_result = data
        self._last_error = None
        chart_data_received.send(sender=self.__class__, session=self, chart_key=self.chart_key, data=data)
        return data
