"""Tests for VisualizationSpec and ChartConfig validation."""

from __future__ import annotations

from dataclasses import replace

import pytest

from analysis.spec_validator import validate_visualization_spec
from analysis.visualization_spec import FilterSpec, VisualizationSpec
from core.charting.configs import get_default_config, list_chart_types
from core.charting.validator import is_hex_color, validate_chart_config

pytestmark = pytest.mark.unit


def _spec(**overrides) -> VisualizationSpec:
    base = VisualizationSpec(
        chart_type="line",
        x_field="Month",
        y_field="Sales",
        aggregation="sum",
        group_by=None,
        sort_by="none",
        sort_order="asc",
        title="Sum of Sales by Month",
        x_date_binning="year",
    )
    return replace(base, **overrides)


def test_valid_spec_passes(sales_columns) -> None:
    """A builder-shaped spec validates cleanly."""

    result = validate_visualization_spec(_spec(), columns=sales_columns)
    assert result.is_valid is True
    assert result.errors == ()
    assert result.warnings == ()


def test_spec_rejects_unknown_columns(sales_columns) -> None:
    """Axis, group_by and filter columns must exist."""

    spec = _spec(
        y_field="Profit",
        group_by="Channel",
        filters=(FilterSpec(column="Store", operator="eq", value="1"),),
    )
    result = validate_visualization_spec(spec, columns=sales_columns)

    assert result.is_valid is False
    assert any("y_field" in error for error in result.errors)
    assert any("group_by" in error for error in result.errors)
    assert any("filters[0]" in error for error in result.errors)


def test_spec_rejects_binning_on_non_date_column(sales_columns) -> None:
    """Date binning is only valid for date columns."""

    result = validate_visualization_spec(_spec(x_field="Region"), columns=sales_columns)
    assert result.is_valid is False
    assert any("only allowed for date columns" in error for error in result.errors)


def test_spec_warns_for_date_axis_without_binning(sales_columns) -> None:
    """A date axis without binning is allowed but flagged."""

    result = validate_visualization_spec(_spec(x_date_binning=None), columns=sales_columns)
    assert result.is_valid is True
    assert any("without date binning" in warning for warning in result.warnings)


def test_spec_warns_for_numeric_aggregation_on_text(sales_columns) -> None:
    """Summing a text column is flagged."""

    result = validate_visualization_spec(_spec(y_field="Region"), columns=sales_columns)
    assert any("non-numeric" in warning for warning in result.warnings)


def test_spec_filter_value_rules(sales_columns) -> None:
    """Valued operators need a value; valueless ones ignore it."""

    spec = _spec(
        filters=(
            FilterSpec(column="Region", operator="eq"),
            FilterSpec(column="Returned", operator="is_null", value=True),
        )
    )
    result = validate_visualization_spec(spec, columns=sales_columns)

    assert any("requires a value" in error for error in result.errors)
    assert any("ignored" in warning for warning in result.warnings)


def test_spec_rejects_blank_title(sales_columns) -> None:
    """Specs must carry a title."""

    result = validate_visualization_spec(_spec(title="  "), columns=sales_columns)
    assert result.is_valid is False


@pytest.mark.parametrize("chart_type", ["bar", "line", "area", "pie", "scatter"])
def test_default_configs_are_valid(chart_type: str) -> None:
    """Built-in defaults pass validation (with an unbound-field warning)."""

    result = validate_chart_config(get_default_config(chart_type))
    assert result.is_valid is True, result.errors
    assert result.warnings


def test_config_validation_checks_metadata_constraints() -> None:
    """Ranges, enum options and colors come from property metadata."""

    config = replace(
        get_default_config("line"),
        marker_size=40,
        curve_type="zigzag",
        background_color="white",
    )
    result = validate_chart_config(config)

    assert result.is_valid is False
    assert any("marker_size" in error for error in result.errors)
    assert any("curve_type" in error for error in result.errors)
    assert any("background_color" in error for error in result.errors)


def test_config_validation_checks_field_dtypes(sales_columns) -> None:
    """Field bindings must exist and match the accepted dtypes."""

    config = replace(get_default_config("bar"), data_field_x="Region", data_field_y="Region")
    result = validate_chart_config(config, columns=sales_columns)
    assert any("data_field_y" in error for error in result.errors)

    config = replace(get_default_config("bar"), data_field_x="Nope", data_field_y="Sales")
    result = validate_chart_config(config, columns=sales_columns)
    assert any("unknown column" in error for error in result.errors)


def test_config_validation_cross_field_rules() -> None:
    """Rules metadata cannot express are checked explicitly."""

    bar = replace(get_default_config("bar"), stacked=True, grouped=True)
    pie = replace(get_default_config("pie"), inner_radius=90, outer_radius=80)
    scatter = replace(get_default_config("scatter"), min_point_size=30, max_point_size=10)

    assert any("stacked and grouped" in e for e in validate_chart_config(bar).errors)
    assert any("inner_radius" in e for e in validate_chart_config(pie).errors)
    assert any("min_point_size" in e for e in validate_chart_config(scatter).errors)


def test_is_hex_color() -> None:
    """Short, long and alpha hex colors are accepted."""

    assert is_hex_color("#fff")
    assert is_hex_color("#2563EB")
    assert is_hex_color("#2563EB80")
    assert not is_hex_color("2563EB")
    assert not is_hex_color(None)


def test_every_chart_type_validates() -> None:
    """Validation covers every chart type."""

    for chart_type in list_chart_types():
        assert validate_chart_config(get_default_config(chart_type)).errors == ()
