"""Tests for persisting visualization specs and chart configs as JSON payloads."""

from __future__ import annotations

import json
from dataclasses import replace

import pytest

from analysis.visualization_spec import FilterSpec, VisualizationSpec
from core.charting.configs import get_default_config
from core.charting.snapshot_codec import (
    CONFIG_PAYLOAD_VERSION,
    SPEC_PAYLOAD_VERSION,
    decode_chart_config,
    decode_visualization_spec,
    encode_chart_config,
    encode_visualization_spec,
)

pytestmark = pytest.mark.unit


def _spec() -> VisualizationSpec:
    return VisualizationSpec(
        chart_type="bar",
        x_field="Region",
        y_field="Sales",
        aggregation="avg",
        group_by="Product",
        sort_by="y",
        sort_order="desc",
        title="Average sales",
        filters=(
            FilterSpec(column="Units", operator="gte", value=5),
            FilterSpec(column="Returned", operator="is_not_null"),
        ),
    )


def test_visualization_spec_survives_json_storage() -> None:
    """Encoded specs are plain JSON and decode to an equal spec."""

    payload = json.loads(json.dumps(encode_visualization_spec(_spec())))

    assert payload["version"] == SPEC_PAYLOAD_VERSION
    assert decode_visualization_spec(payload) == _spec()


@pytest.mark.parametrize("missing", ["chart_type", "x_field", "y_field", "aggregation"])
def test_decode_visualization_spec_requires_core_fields(missing: str) -> None:
    """Missing required fields raise ValueError."""

    payload = encode_visualization_spec(_spec())
    payload.pop(missing)
    with pytest.raises(ValueError):
        decode_visualization_spec(payload)


def test_decode_visualization_spec_rejects_invalid_enum() -> None:
    """Unsupported chart types raise ValueError."""

    payload = encode_visualization_spec(_spec())
    payload["chart_type"] = "radar"
    with pytest.raises(ValueError):
        decode_visualization_spec(payload)


def test_decode_visualization_spec_parses_optional_fields_best_effort() -> None:
    """Optional fields fall back to defaults instead of failing."""

    spec = decode_visualization_spec(
        {
            "chart_type": "line",
            "x_field": "Month",
            "y_field": "Sales",
            "aggregation": "sum",
            "sort_by": "sideways",
            "x_date_binning": "week",
            "group_by": "",
        }
    )

    assert spec.sort_by == "none"
    assert spec.sort_order == "asc"
    assert spec.x_date_binning is None
    assert spec.group_by is None
    assert spec.title == "Sum of Sales by Month"


def test_decode_visualization_spec_rejects_filter_without_value() -> None:
    """Filters change results, so malformed filters are rejected."""

    payload = encode_visualization_spec(_spec())
    payload["filters"] = [{"column": "Units", "operator": "gt"}]
    with pytest.raises(ValueError):
        decode_visualization_spec(payload)


@pytest.mark.parametrize("chart_type", ["bar", "line", "area", "pie", "scatter"])
def test_chart_config_survives_json_storage(chart_type: str) -> None:
    """Encoded configs are plain JSON and decode to an equal config."""

    config = replace(get_default_config(chart_type), title="Stored", data_field_x="Region")
    payload = json.loads(json.dumps(encode_chart_config(config)))

    assert payload["version"] == CONFIG_PAYLOAD_VERSION
    assert payload["type"] == chart_type
    assert decode_chart_config(payload) == config


def test_encode_chart_config_uses_lists_and_dicts() -> None:
    """Nested configs become dicts and tuples become lists."""

    payload = encode_chart_config(get_default_config("bar"))

    assert payload["bar_radius"] == [2, 2, 0, 0]
    assert payload["x_axis"]["show"] is True
    assert isinstance(payload["color_scheme"], list)


def test_decode_chart_config_fills_missing_fields() -> None:
    """Partial payloads load by merging over defaults."""

    config = decode_chart_config({"version": CONFIG_PAYLOAD_VERSION, "type": "pie", "inner_radius": 40})

    assert config.inner_radius == 40
    assert config.outer_radius == get_default_config("pie").outer_radius


def test_decode_chart_config_requires_type() -> None:
    """Payloads without a supported type raise ValueError."""

    with pytest.raises(ValueError):
        decode_chart_config({"title": "No type"})
    with pytest.raises(ValueError):
        decode_chart_config({"type": "radar"})
