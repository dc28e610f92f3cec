"""Pytest fixtures shared across chart studio tests."""

from __future__ import annotations

from collections.abc import Sequence

import pytest

from analysis.dataset import Column


@pytest.fixture
def sales_columns() -> tuple[Column, ...]:
    """Return a small sales dataset schema with date, text and numeric columns."""

    return (
        Column(name="Month", dtype="date"),
        Column(name="Region", dtype="string"),
        Column(name="Product", dtype="string"),
        Column(name="Sales", dtype="float"),
        Column(name="Units", dtype="integer"),
        Column(name="Returned", dtype="boolean", nullable=True),
    )


def pytest_collection_modifyitems(items: Sequence[pytest.Item]) -> None:
    """Enforce that every test has exactly one speed marker.

    The suite must be runnable by intent:
    - `unit`: pure, fast tests with no Django machinery beyond settings.
    - `integration`: tests touching Django forms, signals, or management commands.

    Each test must have exactly one of these markers.
    """

    invalid: list[str] = []
    for item in items:
        has_unit = item.get_closest_marker("unit") is not None
        has_integration = item.get_closest_marker("integration") is not None
        if has_unit == has_integration:
            markers = []
            if has_unit:
                markers.append("unit")
            if has_integration:
                markers.append("integration")
            invalid.append(f"{item.nodeid} (markers={markers or 'none'})")

    if invalid:
        joined = "\n".join(f"- {nodeid}" for nodeid in invalid)
        raise pytest.UsageError(
            "Each test must have exactly one speed marker: `@pytest.mark.unit` or "
            "`@pytest.mark.integration`.\n"
            f"Offending tests:\n{joined}"
        )
