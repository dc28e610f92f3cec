"""Tests for dataset column helpers."""

from __future__ import annotations

import pytest

from analysis.dataset import NUMERIC_DTYPES, Column, column_from_payload, filter_columns, find_column

pytestmark = pytest.mark.unit


def test_column_kind_properties() -> None:
    """Columns classify themselves as numeric, categorical or temporal."""

    assert Column(name="Sales", dtype="float").is_numeric
    assert Column(name="Region", dtype="string").is_categorical
    assert Column(name="Month", dtype="date").is_temporal
    assert not Column(name="Month", dtype="date").is_numeric


def test_find_column(sales_columns) -> None:
    """Lookups return the column or None."""

    assert find_column(sales_columns, "Units") == Column(name="Units", dtype="integer")
    assert find_column(sales_columns, "Missing") is None
    assert find_column(sales_columns, None) is None


def test_filter_columns_by_dtype(sales_columns) -> None:
    """Filtering keeps declaration order; None keeps everything."""

    assert [c.name for c in filter_columns(sales_columns, NUMERIC_DTYPES)] == ["Sales", "Units"]
    assert filter_columns(sales_columns, None) == tuple(sales_columns)


def test_column_from_payload() -> None:
    """Schema payloads become Columns; malformed payloads raise ValueError."""

    assert column_from_payload({"name": "Month", "dtype": "date", "nullable": True}) == Column(
        name="Month", dtype="date", nullable=True
    )
    with pytest.raises(ValueError):
        column_from_payload({"name": "", "dtype": "date"})
    with pytest.raises(ValueError):
        column_from_payload({"name": "Blob", "dtype": "binary"})
