"""Reduction metadata attached to query results.

Whenever the query engine returns fewer or coarser points than a full,
unreduced answer (aggregation, sampling, top-N truncation, date binning), it
must attach a ReductionMetadata with `reduced=True` and a specific reason. The
rendering layer discloses reduction only from this metadata: a missing
metadata object or `reduced=False` means "complete answer", and reduction is
never inferred from the shape of the data.

Like chart flags, disclosures are advisory: they never change values.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Final, Literal, Mapping

from analysis.visualization_spec import DateBinning

ReductionReason = Literal["auto-aggregation", "sampling", "top-n", "date-binning", "combined", "none"]

REDUCTION_REASONS: Final[tuple[str, ...]] = (
    "auto-aggregation",
    "sampling",
    "top-n",
    "date-binning",
    "combined",
    "none",
)

GENERIC_WARNING: Final[str] = "Data was reduced for performance"


@dataclass(frozen=True, slots=True)
class ReductionStep:
    """A single reduction applied by the query engine.

    Args:
        step_type: Reason for this step (never "combined" or "none").
        input_rows: Rows entering the step.
        output_rows: Rows leaving the step.
        description: Short engine-provided description.
    """

    step_type: ReductionReason
    input_rows: int
    output_rows: int
    description: str = ""


@dataclass(frozen=True, slots=True)
class ReductionMetadata:
    """Describe how a query result differs from the full answer.

    Args:
        reduced: Whether any reduction was applied.
        reduction_reason: Primary reason, or "combined" when several steps ran.
        original_row_estimate: Estimated rows before any transformation.
        returned_points: Points actually returned.
        sample_ratio: Sampling ratio (0.0-1.0) when sampling was applied.
        top_n_value: N when top-N truncation was applied.
        date_bin_granularity: Bucket size when dates were coarsened.
        distribution_preserved: Whether sampling preserved the distribution shape.
        warning_message: Human-readable disclosure for the UI.
        reduction_steps: Individual steps in application order.
    """

    reduced: bool
    reduction_reason: ReductionReason
    original_row_estimate: int
    returned_points: int
    sample_ratio: float | None = None
    top_n_value: int | None = None
    date_bin_granularity: DateBinning | None = None
    distribution_preserved: bool = True
    warning_message: str | None = None
    reduction_steps: tuple[ReductionStep, ...] = ()

    @classmethod
    def no_reduction(cls, row_count: int) -> "ReductionMetadata":
        """Return metadata describing a complete answer."""

        return cls(
            reduced=False,
            reduction_reason="none",
            original_row_estimate=row_count,
            returned_points=row_count,
        )

    @classmethod
    def aggregated(cls, original: int, returned: int) -> "ReductionMetadata":
        """Return metadata for automatic aggregation of many rows into few groups."""

        return cls(
            reduced=True,
            reduction_reason="auto-aggregation",
            original_row_estimate=original,
            returned_points=returned,
            warning_message=(
                f"Data was automatically aggregated from {format_count(original)} to {format_count(returned)} groups"
            ),
            reduction_steps=(
                ReductionStep(
                    step_type="auto-aggregation",
                    input_rows=original,
                    output_rows=returned,
                    description="Auto-aggregation applied",
                ),
            ),
        )

    @classmethod
    def sampled(cls, original: int, returned: int, ratio: float) -> "ReductionMetadata":
        """Return metadata for a sampled result."""

        return cls(
            reduced=True,
            reduction_reason="sampling",
            original_row_estimate=original,
            returned_points=returned,
            sample_ratio=ratio,
            warning_message=(
                f"Showing {ratio * 100:.1f}% sample ({format_count(returned)} of {format_count(original)} rows)"
                " for performance"
            ),
            reduction_steps=(
                ReductionStep(
                    step_type="sampling",
                    input_rows=original,
                    output_rows=returned,
                    description=f"Deterministic sampling at {ratio * 100:.1f}% ratio",
                ),
            ),
        )

    @classmethod
    def top_n(cls, original: int, n: int, *, has_others: bool) -> "ReductionMetadata":
        """Return metadata for top-N category truncation (plus an optional Others bucket)."""

        returned = n + 1 if has_others else n
        others = " (+ Others)" if has_others else ""
        return cls(
            reduced=True,
            reduction_reason="top-n",
            original_row_estimate=original,
            returned_points=returned,
            top_n_value=n,
            warning_message=f"Showing top {n} categories{others} from {format_count(original)} unique values",
            reduction_steps=(
                ReductionStep(
                    step_type="top-n",
                    input_rows=original,
                    output_rows=returned,
                    description=f"Top-{n} with Others bucket" if has_others else f"Top-{n}",
                ),
            ),
        )

    @classmethod
    def date_binned(cls, original: int, returned: int, granularity: DateBinning) -> "ReductionMetadata":
        """Return metadata for dates coarsened into buckets."""

        return cls(
            reduced=True,
            reduction_reason="date-binning",
            original_row_estimate=original,
            returned_points=returned,
            date_bin_granularity=granularity,
            warning_message=f"Dates were binned by {granularity} ({format_count(returned)} buckets)",
            reduction_steps=(
                ReductionStep(
                    step_type="date-binning",
                    input_rows=original,
                    output_rows=returned,
                    description=f"Dates binned by {granularity}",
                ),
            ),
        )

    def with_step(self, step: ReductionStep) -> "ReductionMetadata":
        """Return a copy with `step` appended; two or more steps make the reason "combined"."""

        steps = self.reduction_steps + (step,)
        reason: ReductionReason = step.step_type if len(steps) == 1 else "combined"
        updated = replace(
            self,
            reduced=True,
            reduction_reason=reason,
            returned_points=step.output_rows,
            reduction_steps=steps,
        )
        return replace(updated, warning_message=build_warning_message(updated))

    def merged(self, other: "ReductionMetadata") -> "ReductionMetadata":
        """Return a copy that also carries `other`'s reductions (no-op when `other` is unreduced)."""

        if not other.reduced:
            return self
        steps = self.reduction_steps + other.reduction_steps
        reason: ReductionReason = "combined" if len(steps) > 1 else other.reduction_reason
        updated = replace(
            self,
            reduced=True,
            reduction_reason=reason,
            returned_points=other.returned_points,
            sample_ratio=other.sample_ratio if other.sample_ratio is not None else self.sample_ratio,
            top_n_value=other.top_n_value if other.top_n_value is not None else self.top_n_value,
            date_bin_granularity=(
                other.date_bin_granularity if other.date_bin_granularity is not None else self.date_bin_granularity
            ),
            distribution_preserved=self.distribution_preserved and other.distribution_preserved,
            reduction_steps=steps,
        )
        if len(steps) > 1:
            return replace(updated, warning_message=build_warning_message(updated))
        return replace(updated, warning_message=other.warning_message or build_warning_message(updated))


@dataclass(frozen=True, slots=True)
class ReductionValidationResult:
    """Validation result for ReductionMetadata produced by a query engine."""

    is_valid: bool
    errors: tuple[str, ...] = ()
    warnings: tuple[str, ...] = ()


def format_count(value: int) -> str:
    """Format an integer with thousands separators (12000 -> "12,000")."""

    return f"{value:,}"


def build_warning_message(metadata: ReductionMetadata) -> str:
    """Compose a user-facing warning from the metadata's reduction steps.

    Args:
        metadata: Metadata with one or more steps.

    Returns:
        A message such as "Data was aggregated from 12,000 to 40 groups, showing top 10 categories".
    """

    parts: list[str] = []
    for step in metadata.reduction_steps:
        if step.step_type == "auto-aggregation":
            parts.append(f"aggregated from {format_count(step.input_rows)} to {format_count(step.output_rows)} groups")
        elif step.step_type == "sampling" and metadata.sample_ratio is not None:
            parts.append(f"sampled {metadata.sample_ratio * 100:.1f}% ({format_count(step.output_rows)} points)")
        elif step.step_type == "top-n" and metadata.top_n_value is not None:
            parts.append(f"showing top {metadata.top_n_value} categories")
        elif step.step_type == "date-binning" and metadata.date_bin_granularity is not None:
            parts.append(f"dates binned by {metadata.date_bin_granularity}")
    if not parts:
        return GENERIC_WARNING
    return "Data was " + ", ".join(parts)


def _reduced_flag(metadata: object) -> bool:
    """Read the `reduced` flag from metadata, ChartMetadata or a raw payload."""

    if metadata is None:
        return False
    if isinstance(metadata, Mapping):
        return metadata.get("reduced") is True
    reduction = getattr(metadata, "reduction", metadata)
    if reduction is None:
        return False
    return getattr(reduction, "reduced", None) is True


def requires_reduction_disclosure(metadata: object) -> bool:
    """Return True when the UI must disclose that the data was reduced.

    Args:
        metadata: ReductionMetadata, ChartMetadata, a raw metadata mapping, or None.

    Returns:
        True only when the metadata explicitly says `reduced=True`.
    """

    return _reduced_flag(metadata)


def reduction_disclosure(metadata: object) -> str | None:
    """Return the disclosure text to show, or None for complete answers."""

    if not requires_reduction_disclosure(metadata):
        return None
    if isinstance(metadata, Mapping):
        message = metadata.get("warning_message")
        return str(message) if message else GENERIC_WARNING
    reduction = getattr(metadata, "reduction", metadata)
    if reduction.warning_message:
        return reduction.warning_message
    return build_warning_message(reduction)


def validate_reduction_metadata(metadata: ReductionMetadata) -> ReductionValidationResult:
    """Check that engine-provided metadata is internally consistent.

    Args:
        metadata: ReductionMetadata attached to a query result.

    Returns:
        ReductionValidationResult containing errors and warnings.
    """

    errors: list[str] = []
    warnings: list[str] = []

    if metadata.reduction_reason not in REDUCTION_REASONS:
        errors.append(f"Unsupported reduction_reason: {metadata.reduction_reason!r}.")
    if metadata.reduced and metadata.reduction_reason == "none":
        errors.append("Reduced results must declare a specific reduction_reason.")
    if not metadata.reduced and metadata.reduction_reason != "none":
        errors.append(f"reduction_reason={metadata.reduction_reason!r} requires reduced=True.")
    if metadata.reduction_reason == "sampling":
        if metadata.sample_ratio is None:
            errors.append("Sampling reductions require sample_ratio.")
        elif not 0.0 < metadata.sample_ratio <= 1.0:
            errors.append(f"sample_ratio must be in (0, 1]; got {metadata.sample_ratio}.")
    if metadata.reduction_reason == "top-n" and metadata.top_n_value is None:
        errors.append("Top-N reductions require top_n_value.")
    if metadata.reduction_reason == "date-binning" and metadata.date_bin_granularity is None:
        errors.append("Date-binning reductions require date_bin_granularity.")
    if metadata.reduction_reason == "combined" and len(metadata.reduction_steps) < 2:
        warnings.append("reduction_reason='combined' is expected to carry at least two reduction_steps.")
    if metadata.original_row_estimate < 0 or metadata.returned_points < 0:
        errors.append("Row counts must be non-negative.")
    if metadata.reduced and metadata.returned_points > metadata.original_row_estimate:
        warnings.append(
            f"returned_points={metadata.returned_points} exceeds original_row_estimate="
            f"{metadata.original_row_estimate}."
        )

    return ReductionValidationResult(is_valid=not errors, errors=tuple(errors), warnings=tuple(warnings))
