"""Tests for decoding query engine payloads into chart data DTOs."""

from __future__ import annotations

import pytest

from analysis.chart_data import ChartData, decode_chart_data
from analysis.reduction import requires_reduction_disclosure, validate_reduction_metadata

pytestmark = pytest.mark.unit


def test_decode_chart_data_without_reduction_fields() -> None:
    """A payload without a `reduced` key is a complete answer."""

    chart = decode_chart_data(
        {
            "labels": ["2024", "2025"],
            "datasets": [{"label": "Sales", "data": [10, 12.5], "color": "#2563EB"}],
            "metadata": {"title": "Sum of Sales by Month", "x_label": "Month", "y_label": "Sales", "total_records": 24},
        }
    )

    assert isinstance(chart, ChartData)
    assert chart.labels == ("2024", "2025")
    assert chart.datasets[0].data == (10.0, 12.5)
    assert chart.datasets[0].color == "#2563EB"
    assert chart.metadata is not None
    assert chart.metadata.total_records == 24
    assert chart.metadata.reduction is None
    assert requires_reduction_disclosure(chart.metadata) is False


def test_decode_chart_data_reads_flat_reduction_fields() -> None:
    """Flat reduction fields on metadata become ReductionMetadata."""

    chart = decode_chart_data(
        {
            "labels": ["A", "B"],
            "datasets": [{"label": "Units", "data": [1, 2]}],
            "metadata": {
                "title": "t",
                "x_label": "x",
                "y_label": "y",
                "total_records": "40000",
                "reduced": True,
                "reduction_reason": "sampling",
                "original_row_estimate": 40000,
                "returned_points": 2000,
                "sample_ratio": "0.05",
                "warning_message": "Showing 5.0% sample",
                "reduction_steps": [{"step_type": "sampling", "input_rows": 40000, "output_rows": 2000}],
            },
        }
    )

    reduction = chart.metadata.reduction
    assert reduction is not None
    assert reduction.reduced is True
    assert reduction.reduction_reason == "sampling"
    assert reduction.sample_ratio == 0.05
    assert reduction.reduction_steps[0].output_rows == 2000
    assert chart.metadata.total_records == 40000
    assert requires_reduction_disclosure(chart.metadata) is True


def test_decode_chart_data_defaults_missing_series_labels() -> None:
    """Unlabelled datasets get positional labels and metadata stays optional."""

    chart = decode_chart_data({"labels": ["A"], "datasets": [{"data": [3]}, {"data": [4]}]})

    assert [dataset.label for dataset in chart.datasets] == ["Series 1", "Series 2"]
    assert chart.metadata is None


def test_decode_chart_data_rejects_misaligned_datasets() -> None:
    """Datasets must align with labels."""

    with pytest.raises(ValueError):
        decode_chart_data({"labels": ["A", "B"], "datasets": [{"label": "x", "data": [1]}]})


def test_decode_chart_data_rejects_unknown_reduction_reason() -> None:
    """An unsupported reduction reason is a malformed payload."""

    with pytest.raises(ValueError):
        decode_chart_data(
            {"labels": [], "datasets": [], "metadata": {"reduced": True, "reduction_reason": "magic"}}
        )


def test_decode_chart_data_keeps_missing_reduction_reason_unset() -> None:
    """A reduced payload without a reason decodes as `none` and fails validation."""

    chart = decode_chart_data(
        {
            "labels": ["A"],
            "datasets": [{"label": "Sales", "data": [1]}],
            "metadata": {"reduced": True, "original_row_estimate": 500, "returned_points": 1},
        }
    )

    reduction = chart.metadata.reduction
    assert reduction is not None
    assert reduction.reduced is True
    assert reduction.reduction_reason == "none"
    result = validate_reduction_metadata(reduction)
    assert result.is_valid is False
    assert "Reduced results must declare a specific reduction_reason." in result.errors
