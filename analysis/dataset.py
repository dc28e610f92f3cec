"""Dataset column descriptions supplied by the dataset/schema provider.

Columns are read-only from the charting layer's point of view. They decide
which fields are valid bindings and which fields are temporal (and therefore
eligible for date binning).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final, Iterable, Literal

ColumnDType = Literal["string", "integer", "float", "date", "boolean"]

COLUMN_DTYPES: Final[frozenset[str]] = frozenset({"string", "integer", "float", "date", "boolean"})
NUMERIC_DTYPES: Final[frozenset[str]] = frozenset({"integer", "float"})
CATEGORICAL_DTYPES: Final[frozenset[str]] = frozenset({"string", "boolean"})
TEMPORAL_DTYPES: Final[frozenset[str]] = frozenset({"date"})


@dataclass(frozen=True, slots=True)
class Column:
    """A single dataset column.

    Args:
        name: Column name as it appears in the dataset.
        dtype: Logical column type.
        nullable: Whether the column may contain nulls.
    """

    name: str
    dtype: ColumnDType
    nullable: bool = False

    @property
    def is_numeric(self) -> bool:
        """Return True for integer and float columns."""

        return self.dtype in NUMERIC_DTYPES

    @property
    def is_categorical(self) -> bool:
        """Return True for string and boolean columns."""

        return self.dtype in CATEGORICAL_DTYPES

    @property
    def is_temporal(self) -> bool:
        """Return True for date columns."""

        return self.dtype in TEMPORAL_DTYPES


def find_column(columns: Iterable[Column], name: str | None) -> Column | None:
    """Return the column called `name`, or None when absent.

    Args:
        columns: Columns of the active dataset.
        name: Column name to look up; None always returns None.

    Returns:
        The matching Column, or None.
    """

    if not name:
        return None
    for column in columns:
        if column.name == name:
            return column
    return None


def filter_columns(columns: Iterable[Column], dtypes: Iterable[str] | None) -> tuple[Column, ...]:
    """Return columns whose dtype is in `dtypes` (all columns when None)."""

    if dtypes is None:
        return tuple(columns)
    allowed = frozenset(dtypes)
    return tuple(column for column in columns if column.dtype in allowed)


def column_from_payload(payload: dict[str, object]) -> Column:
    """Build a Column from a schema-provider payload.

    Raises:
        ValueError: When the name is missing or the dtype is unsupported.
    """

    name = str(payload.get("name") or "").strip()
    if not name:
        raise ValueError("Column payload requires a non-empty name.")
    dtype = str(payload.get("dtype") or "")
    if dtype not in COLUMN_DTYPES:
        raise ValueError(f"Column {name!r} has unsupported dtype={dtype!r}.")
    return Column(name=name, dtype=dtype, nullable=bool(payload.get("nullable", False)))  # type: ignore[arg-type]
