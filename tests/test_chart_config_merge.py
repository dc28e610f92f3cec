"""Tests for merging partial chart configs over defaults."""

from __future__ import annotations

import logging

import pytest

from core.charting.configs import UnknownChartTypeError, get_default_config
from core.charting.merge import UNSET, merge_with_defaults

pytestmark = pytest.mark.unit


def test_merge_fills_missing_fields_from_defaults() -> None:
    """A partial config becomes a complete config of the requested type."""

    merged = merge_with_defaults({"type": "line", "stroke_width": 3.5, "title": "Revenue"})

    assert merged.type == "line"
    assert merged.stroke_width == 3.5
    assert merged.title == "Revenue"
    assert merged.curve_type == get_default_config("line").curve_type


def test_merge_recurses_into_nested_configs() -> None:
    """Nested mappings override only the keys they name."""

    merged = merge_with_defaults({"type": "bar", "x_axis": {"label": "Month"}, "legend": {"position": "top"}})

    assert merged.x_axis.label == "Month"
    assert merged.x_axis.show is True
    assert merged.legend.position == "top"
    assert merged.legend.show is True


def test_merge_replaces_sequences_wholesale() -> None:
    """Lists replace the default sequence instead of being merged element-wise."""

    merged = merge_with_defaults({"type": "pie", "color_scheme": ["#000000"]})

    assert merged.color_scheme == ("#000000",)


def test_merge_skips_unset_but_keeps_none() -> None:
    """UNSET keeps the default while None is a real value."""

    merged = merge_with_defaults(
        {"type": "scatter", "point_size": UNSET, "data_field_size": None, "data_field_x": "Sales"}
    )

    assert merged.point_size == get_default_config("scatter").point_size
    assert merged.data_field_size is None
    assert merged.data_field_x == "Sales"


def test_merge_none_overrides_non_null_default() -> None:
    """None replaces a non-null default."""

    merged = merge_with_defaults({"type": "bar", "x_axis": {"min_value": None}, "selected_category": None})

    assert merged.x_axis.min_value is None
    assert merged.selected_category is None


def test_merge_is_idempotent() -> None:
    """Merging an already merged config changes nothing."""

    partial = {"type": "area", "stacked": True, "stack_offset": "expand", "y_axis": {"scale_type": "log"}}
    once = merge_with_defaults(partial)

    assert merge_with_defaults(once) == once
    assert merge_with_defaults(partial) == once


def test_merge_ignores_and_logs_unknown_keys(caplog) -> None:
    """Keys the variant does not define are dropped with a warning."""

    with caplog.at_level(logging.WARNING, logger="core.charting.merge"):
        merged = merge_with_defaults({"type": "pie", "bar_radius": [4, 4, 0, 0], "x_axis": {"label": "X"}})

    assert merged == get_default_config("pie")
    assert "bar_radius" in caplog.text
    assert "x_axis" in caplog.text


def test_merge_rejects_unknown_or_missing_type() -> None:
    """A missing or unsupported type raises UnknownChartTypeError."""

    with pytest.raises(UnknownChartTypeError):
        merge_with_defaults({"type": "radar"})
    with pytest.raises(UnknownChartTypeError):
        merge_with_defaults({"title": "No type"})
