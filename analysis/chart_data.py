"""Chart data DTOs returned by the query engine.

The query engine consumes a VisualizationSpec (plus an optional ChartConfig for
rendering hints such as `max_points`) and produces deterministic DTO outputs
that the UI can render without performing calculations inline.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Protocol, cast

from analysis.reduction import REDUCTION_REASONS, ReductionMetadata, ReductionStep
from analysis.visualization_spec import DATE_BINNINGS, VisualizationSpec


class QueryExecutionError(RuntimeError):
    """Raised by a query engine when a spec cannot be executed."""


@dataclass(frozen=True, slots=True)
class ChartDataset:
    """A single series produced by the query engine.

    Args:
        label: Dataset label shown in legends.
        data: Values aligned to `ChartData.labels`.
        color: Optional engine-suggested color.
    """

    label: str
    data: tuple[float, ...]
    color: str | None = None


@dataclass(frozen=True, slots=True)
class ChartMetadata:
    """Descriptive metadata for a query result.

    Args:
        title: Chart title.
        x_label: X axis label.
        y_label: Y axis label.
        total_records: Rows considered by the engine.
        reduction: Reduction metadata; None means the answer is complete.
        swapped: Whether the engine swapped axes (e.g. horizontal bar output).
    """

    title: str
    x_label: str
    y_label: str
    total_records: int
    reduction: ReductionMetadata | None = None
    swapped: bool = False

    @property
    def reduced(self) -> bool:
        """Return True only when reduction metadata explicitly says so."""

        return self.reduction is not None and self.reduction.reduced is True


@dataclass(frozen=True, slots=True)
class ChartData:
    """Chart output produced by the query engine.

    Args:
        labels: Category labels (x values).
        datasets: Datasets aligned to labels.
        metadata: Optional descriptive metadata.
    """

    labels: tuple[str, ...]
    datasets: tuple[ChartDataset, ...]
    metadata: ChartMetadata | None = None


class QueryEngine(Protocol):
    """External collaborator that executes visualization specs."""

    async def execute(self, spec: VisualizationSpec, config: object | None = None) -> ChartData:
        """Execute `spec` and return chart data, raising QueryExecutionError on failure."""
        ...


def decode_chart_data(payload: Mapping[str, Any]) -> ChartData:
    """Decode the query engine's JSON payload into ChartData.

    The engine reports reduction fields flat on the metadata object
    (`reduced`, `reduction_reason`, `sample_ratio`, ...). Reduction metadata is
    only attached when the payload carries a `reduced` key.

    Args:
        payload: Mapping with `labels`, `datasets` and optional `metadata`.

    Returns:
        ChartData instance.

    Raises:
        ValueError: When datasets are misaligned with labels.
    """

    labels = tuple(str(label) for label in (payload.get("labels") or ()))
    datasets: list[ChartDataset] = []
    for idx, raw in enumerate(payload.get("datasets") or ()):
        raw = cast(Mapping[str, Any], raw)
        values = tuple(float(value) for value in (raw.get("data") or ()))
        if len(values) != len(labels):
            raise ValueError(f"datasets[{idx}] has {len(values)} values for {len(labels)} labels.")
        color = raw.get("color")
        datasets.append(
            ChartDataset(
                label=str(raw.get("label") or f"Series {idx + 1}"),
                data=values,
                color=str(color) if color else None,
            )
        )

    metadata_raw = payload.get("metadata")
    metadata = None
    if isinstance(metadata_raw, Mapping):
        metadata = ChartMetadata(
            title=str(metadata_raw.get("title") or ""),
            x_label=str(metadata_raw.get("x_label") or ""),
            y_label=str(metadata_raw.get("y_label") or ""),
            total_records=_parse_int(metadata_raw.get("total_records")) or 0,
            reduction=_decode_reduction(metadata_raw),
            swapped=metadata_raw.get("swapped") is True,
        )
    return ChartData(labels=labels, datasets=tuple(datasets), metadata=metadata)


def _decode_reduction(raw: Mapping[str, Any]) -> ReductionMetadata | None:
    """Decode flat reduction fields; None when the engine did not report any."""

    if "reduced" not in raw:
        return None
    reduced = raw.get("reduced") is True
    reason = str(raw.get("reduction_reason") or "none")
    if reason not in REDUCTION_REASONS:
        raise ValueError(f"Unsupported reduction_reason: {reason!r}.")
    granularity = raw.get("date_bin_granularity")
    if granularity is not None and granularity not in DATE_BINNINGS:
        granularity = None
    original = _parse_int(raw.get("original_row_estimate")) or 0
    steps = tuple(
        ReductionStep(
            step_type=str(step.get("step_type") or "none"),  # type: ignore[arg-type]
            input_rows=_parse_int(step.get("input_rows")) or 0,
            output_rows=_parse_int(step.get("output_rows")) or 0,
            description=str(step.get("description") or ""),
        )
        for step in (raw.get("reduction_steps") or ())
        if isinstance(step, Mapping)
    )
    returned = _parse_int(raw.get("returned_points"))
    return ReductionMetadata(
        reduced=reduced,
        reduction_reason=reason,  # type: ignore[arg-type]
        original_row_estimate=original,
        returned_points=original if returned is None else returned,
        sample_ratio=_parse_float(raw.get("sample_ratio")),
        top_n_value=_parse_int(raw.get("top_n_value")),
        date_bin_granularity=granularity,
        distribution_preserved=raw.get("distribution_preserved") is not False,
        warning_message=str(raw["warning_message"]) if raw.get("warning_message") else None,
        reduction_steps=steps,
    )


def _parse_int(value: object) -> int | None:
    """Best-effort int parsing for engine payloads."""

    if value is None or value == "":
        return None
    try:
        return int(str(value))
    except ValueError:
        return None


def _parse_float(value: object) -> float | None:
    """Best-effort float parsing for engine payloads."""

    if value is None or value == "":
        return None
    try:
        return float(str(value))
    except ValueError:
        return None
