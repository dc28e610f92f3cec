"""Last-request-wins bookkeeping for chart queries.

A spec change issues a new query. When an older query for the same chart is
still in flight, its result is discarded on arrival instead of being applied
over the newer one. Nothing is cancelled; the consumer simply checks the
ticket before applying a result.
"""

from __future__ import annotations

from dataclasses import dataclass
from itertools import count
from typing import Iterator

DEFAULT_CHART_KEY = "default"


@dataclass(frozen=True, slots=True)
class QueryTicket:
    """Identity of one issued query.

    Args:
        chart_key: Chart (view) the query belongs to.
        request_id: Monotonically increasing id across all charts.
    """

    chart_key: str
    request_id: int


class LatestRequestTracker:
    """Track the most recent request per chart key."""

    def __init__(self) -> None:
        self._ids: Iterator[int] = count(1)
        self._latest: dict[str, int] = {}

    def issue(self, chart_key: str = DEFAULT_CHART_KEY) -> QueryTicket:
        """Issue a ticket that supersedes every earlier ticket for `chart_key`."""

        ticket = QueryTicket(chart_key=chart_key, request_id=next(self._ids))
        self._latest[chart_key] = ticket.request_id
        return ticket

    def is_current(self, ticket: QueryTicket) -> bool:
        """Return True when no newer ticket has been issued for the same chart."""

        return self._latest.get(ticket.chart_key) == ticket.request_id

    def latest(self, chart_key: str = DEFAULT_CHART_KEY) -> int | None:
        """Return the latest request id for `chart_key`, if any."""

        return self._latest.get(chart_key)
