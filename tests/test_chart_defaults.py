"""Tests for the per-chart-type default config registry."""

from __future__ import annotations

from dataclasses import replace

import pytest

from core.charting.configs import (
    DEFAULT_COLOR_SCHEME,
    UnknownChartTypeError,
    get_default_config,
    list_chart_types,
)
from core.charting.schema import (
    BarChartConfig,
    PieChartConfig,
    ScatterChartConfig,
    as_bar_config,
    as_pie_config,
    has_axes,
)

pytestmark = pytest.mark.unit


@pytest.mark.parametrize("chart_type", ["bar", "line", "area", "pie", "scatter"])
def test_default_config_matches_requested_type(chart_type: str) -> None:
    """Every chart type has a default whose tag matches the type."""

    assert get_default_config(chart_type).type == chart_type


def test_list_chart_types_is_closed_and_ordered() -> None:
    """The chart-type set is closed and in display order."""

    assert list_chart_types() == ("bar", "line", "area", "pie", "scatter")


def test_default_configs_are_independent_values() -> None:
    """Deriving from one default leaves the next default untouched."""

    first = get_default_config("bar")
    changed = replace(first, title="Edited", bar_radius=(0, 0, 0, 0))
    second = get_default_config("bar")

    assert changed.title == "Edited"
    assert second.title == ""
    assert second.bar_radius == (2, 2, 0, 0)
    assert second == first
    assert second is not first


def test_unknown_chart_type_raises() -> None:
    """An unsupported chart type is a programming error."""

    with pytest.raises(UnknownChartTypeError):
        get_default_config("radar")


def test_unknown_chart_type_error_is_value_error() -> None:
    """UnknownChartTypeError can be caught as ValueError."""

    assert issubclass(UnknownChartTypeError, ValueError)


def test_bar_defaults() -> None:
    """Bar defaults are vertical, unstacked and unsorted."""

    config = get_default_config("bar")
    assert isinstance(config, BarChartConfig)
    assert config.orientation == "vertical"
    assert config.stacked is False and config.grouped is False
    assert config.sort_by == "none"
    assert config.sort_order == "asc"
    assert config.y_axis.show_grid is True
    assert config.x_axis.show_grid is False


def test_pie_defaults_have_no_axes() -> None:
    """Pie configs carry no axis fields."""

    config = get_default_config("pie")
    assert isinstance(config, PieChartConfig)
    assert has_axes(config) is False
    assert not hasattr(config, "x_axis")
    assert config.max_slices == 8
    assert config.other_slice_label == "Other"


def test_scatter_defaults_enable_zoom_and_pan() -> None:
    """Scatter charts are zoomable and pannable by default."""

    config = get_default_config("scatter")
    assert isinstance(config, ScatterChartConfig)
    assert config.zoomable is True
    assert config.pannable is True
    assert config.sample_size == 2000


def test_shared_base_defaults() -> None:
    """Every type shares the same base defaults."""

    for chart_type in list_chart_types():
        config = get_default_config(chart_type)
        assert config.color_scheme == DEFAULT_COLOR_SCHEME
        assert config.aggregation == "sum"
        assert config.data_field_x is None
        assert config.data_field_y is None
        assert config.legend.show is True


def test_narrowing_helpers_return_none_for_other_variants() -> None:
    """Narrowing helpers only accept the matching variant."""

    pie = get_default_config("pie")
    assert as_pie_config(pie) is pie
    assert as_bar_config(pie) is None


def test_type_tag_cannot_be_replaced() -> None:
    """The variant tag is fixed per class."""

    with pytest.raises(ValueError):
        replace(get_default_config("bar"), type="pie")


def test_settings_override_max_points(settings) -> None:
    """CHART_DEFAULT_MAX_POINTS overrides the built-in default."""

    settings.CHART_DEFAULT_MAX_POINTS = 1200
    assert get_default_config("line").max_points == 1200
