"""Tests for the describe_chart_type management command."""

from __future__ import annotations

import json
from io import StringIO

import pytest
from django.core.management import call_command
from django.core.management.base import CommandError

pytestmark = pytest.mark.integration


def test_describe_chart_type_prints_config_and_properties() -> None:
    """The command prints the default config and property metadata as JSON."""

    out = StringIO()
    call_command("describe_chart_type", "scatter", stdout=out)
    payload = json.loads(out.getvalue())

    assert payload["chart_type"] == "scatter"
    assert payload["default_config"]["type"] == "scatter"
    assert payload["default_config"]["zoomable"] is True
    keys = [prop["key"] for prop in payload["properties"]]
    assert keys[:2] == ["data_field_x", "data_field_y"]
    assert keys[-1] == "legend.position"
    y_field = next(prop for prop in payload["properties"] if prop["key"] == "data_field_y")
    assert y_field["field_dtypes"] == ["float", "integer"]


def test_describe_chart_type_properties_only_compact() -> None:
    """--properties-only and --indent 0 print compact property metadata."""

    out = StringIO()
    call_command("describe_chart_type", "pie", "--properties-only", "--indent", "0", stdout=out)
    text = out.getvalue().strip()
    payload = json.loads(text)

    assert "\n" not in text
    assert "default_config" not in payload
    assert any(prop["key"] == "inner_radius" for prop in payload["properties"])


def test_describe_chart_type_rejects_unknown_type() -> None:
    """Unknown chart types surface as CommandError."""

    with pytest.raises(CommandError):
        call_command("describe_chart_type", "radar", stdout=StringIO())


def test_describe_chart_type_rejects_negative_indent() -> None:
    """Negative indentation is rejected."""

    with pytest.raises(CommandError):
        call_command("describe_chart_type", "bar", "--indent", "-1", stdout=StringIO())
