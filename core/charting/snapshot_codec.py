"""Snapshot encoding/decoding helpers for VisualizationSpec and ChartConfig payloads."""

from __future__ import annotations

from dataclasses import fields, is_dataclass
from typing import Any, Final, cast

from analysis.visualization_spec import (
    AGGREGATIONS,
    CHART_TYPES,
    DATE_BINNINGS,
    FILTER_OPERATORS,
    SORT_FIELDS,
    SORT_ORDERS,
    VALUELESS_OPERATORS,
    FilterSpec,
    VisualizationSpec,
    default_title,
)

from .merge import merge_with_defaults
from .schema import ChartConfig

SPEC_PAYLOAD_VERSION: Final[str] = "visualization_spec_v1"
CONFIG_PAYLOAD_VERSION: Final[str] = "chart_config_v1"


def encode_visualization_spec(spec: VisualizationSpec) -> dict[str, Any]:
    """Encode a VisualizationSpec into a JSON-serializable dictionary.

    Args:
        spec: VisualizationSpec to encode.

    Returns:
        Dict payload safe for JSON storage.
    """

    return {
        "version": SPEC_PAYLOAD_VERSION,
        "chart_type": spec.chart_type,
        "x_field": spec.x_field,
        "y_field": spec.y_field,
        "aggregation": spec.aggregation,
        "group_by": spec.group_by,
        "sort_by": spec.sort_by,
        "sort_order": spec.sort_order,
        "title": spec.title,
        "filters": [
            {"column": item.column, "operator": item.operator, "value": item.value} for item in spec.filters
        ],
        "x_date_binning": spec.x_date_binning,
        "y_date_binning": spec.y_date_binning,
    }


def decode_visualization_spec(payload: dict[str, Any]) -> VisualizationSpec:
    """Decode a VisualizationSpec from a stored payload dictionary.

    Args:
        payload: Payload previously produced by `encode_visualization_spec`.

    Returns:
        VisualizationSpec instance.

    Raises:
        ValueError: When required fields are missing or invalid.
    """

    chart_type = _require_choice(payload, "chart_type", CHART_TYPES)
    aggregation = _require_choice(payload, "aggregation", AGGREGATIONS)
    x_field = _require_text(payload, "x_field")
    y_field = _require_text(payload, "y_field")

    filters_raw = payload.get("filters") or ()
    if not isinstance(filters_raw, (list, tuple)):
        raise ValueError("VisualizationSpec payload filters must be a list.")
    filters = tuple(_decode_filter(cast(dict[str, Any], item)) for item in filters_raw)

    title = str(payload.get("title") or "").strip() or default_title(aggregation, x_field=x_field, y_field=y_field)
    return VisualizationSpec(
        chart_type=chart_type,  # type: ignore[arg-type]
        x_field=x_field,
        y_field=y_field,
        aggregation=aggregation,  # type: ignore[arg-type]
        group_by=_parse_text(payload.get("group_by")),
        sort_by=_parse_choice(payload.get("sort_by"), SORT_FIELDS, "none"),  # type: ignore[arg-type]
        sort_order=_parse_choice(payload.get("sort_order"), SORT_ORDERS, "asc"),  # type: ignore[arg-type]
        title=title,
        filters=filters,
        x_date_binning=_parse_choice(payload.get("x_date_binning"), DATE_BINNINGS, None),  # type: ignore[arg-type]
        y_date_binning=_parse_choice(payload.get("y_date_binning"), DATE_BINNINGS, None),  # type: ignore[arg-type]
    )


def encode_chart_config(config: ChartConfig) -> dict[str, Any]:
    """Encode a ChartConfig into a JSON-serializable dictionary.

    Nested configs become dicts and tuples become lists; the `type` tag is kept.
    """

    payload = cast(dict[str, Any], _encode_value(config))
    return {"version": CONFIG_PAYLOAD_VERSION, **payload}


def decode_chart_config(payload: dict[str, Any]) -> ChartConfig:
    """Decode a ChartConfig from a stored payload dictionary.

    Missing fields fall back to the type's defaults and unknown keys are
    ignored, so payloads written by older versions still load.

    Raises:
        ValueError: When the payload has no supported `type`.
    """

    if not isinstance(payload, dict):
        raise ValueError("ChartConfig payload must be a dict.")
    data = {key: value for key, value in payload.items() if key != "version"}
    return merge_with_defaults(data)


def _encode_value(value: object) -> object:
    """Recursively convert dataclasses and tuples into JSON-friendly values."""

    if is_dataclass(value) and not isinstance(value, type):
        return {f.name: _encode_value(getattr(value, f.name)) for f in fields(value)}
    if isinstance(value, (list, tuple)):
        return [_encode_value(item) for item in value]
    return value


def _decode_filter(raw: dict[str, Any]) -> FilterSpec:
    """Decode one filter entry; filters change results, so they are strict."""

    if not isinstance(raw, dict):
        raise ValueError("VisualizationSpec filter entries must be objects.")
    column = _require_text(raw, "column")
    operator = _require_choice(raw, "operator", FILTER_OPERATORS)
    value = raw.get("value")
    if operator in VALUELESS_OPERATORS:
        value = None
    elif value is None:
        raise ValueError(f"Filter on {column!r} with operator {operator!r} requires a value.")
    return FilterSpec(column=column, operator=operator, value=value)  # type: ignore[arg-type]


def _require_text(payload: dict[str, Any], key: str) -> str:
    value = payload.get(key)
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"Payload field {key!r} must be a non-empty string.")
    return value


def _require_choice(payload: dict[str, Any], key: str, allowed: tuple[str, ...]) -> str:
    value = payload.get(key)
    if value not in allowed:
        raise ValueError(f"Payload field {key!r} has unsupported value {value!r}.")
    return cast(str, value)


def _parse_text(value: object) -> str | None:
    """Best-effort optional string parsing for snapshot payloads."""

    if value is None or value == "":
        return None
    return str(value)


def _parse_choice(value: object, allowed: tuple[str, ...], fallback: str | None) -> str | None:
    """Best-effort enum parsing for snapshot payloads."""

    if value in allowed:
        return cast(str, value)
    return fallback
