"""Collect the problems found while importing data.

Importing flat files is a lossy process: rows can have
more or less fields than the header, cells might not match
the type that was declared or guessed for their column and
some columns might not provide enough evidence to guess a type at all.

None of those conditions stop the import. Instead they are
recorded as :class:`ProblemRecord` entries in a :class:`ProblemsCollector`
that is returned to the caller together with the data, so that
it can be inspected after every import::

    >>> collector = ProblemsCollector()
    >>> collector.append(ProblemRecord.cell_failure(1, "x", "abc", "integer"))
    >>> collector.count
    1
    >>> collector.by_column()
    {'x': 1}

Only structurally fatal conditions, like an unterminated quoted field,
raise an exception. See :class:`flatpyground.reader.MalformedSource`.
"""

import enum
from dataclasses import dataclass
from typing import Iterable, Iterator

import pyarrow as pa

__all__ = (
    "ProblemKind",
    "Severity",
    "ProblemRecord",
    "ProblemsCollector",
)


class ProblemKind(enum.Enum):
    """The kind of condition that was recorded."""

    RAGGED_ROW = "ragged_row"
    CELL_PARSE_FAILURE = "cell_parse_failure"
    AMBIGUOUS_INFERENCE = "ambiguous_inference"


class Severity(enum.Enum):
    """How much a problem affects the imported data.

    ``WARNING`` problems mean that some data was lost or altered,
    ``INFO`` problems are advisories on decisions that might be wrong.
    """

    WARNING = "warning"
    INFO = "info"


@dataclass(frozen=True)
class ProblemRecord:
    """A single problem found during an import.

    :param row: The 0-based index of the data record in the source
                (header excluded), which is also the row of the table
                unless ragged rows were dropped. ``None`` for problems
                that concern a whole column.
    :param column: The name of the column, ``None`` for problems
                   that concern a whole row.
    :param raw: The raw value that caused the problem.
    :param expected: What was expected instead, usually the name of a type.
    :param reason: Human readable explanation.
    :param kind: The :class:`ProblemKind` of the problem.
    :param severity: The :class:`Severity` of the problem.
    """

    row: int | None
    column: str | None
    raw: str | None
    expected: str
    reason: str
    kind: ProblemKind = ProblemKind.CELL_PARSE_FAILURE
    severity: Severity = Severity.WARNING

    @classmethod
    def cell_failure(
        cls, row: int, column: str, raw: str, expected: str, reason: str = ""
    ) -> "ProblemRecord":
        """A cell value that doesn't match the grammar of its column type."""
        return cls(
            row=row,
            column=column,
            raw=raw,
            expected=expected,
            reason=reason or f"value doesn't match the {expected} grammar",
            kind=ProblemKind.CELL_PARSE_FAILURE,
            severity=Severity.WARNING,
        )

    @classmethod
    def ragged_row(cls, row: int, found: int, expected: int) -> "ProblemRecord":
        """A row with a number of fields different from the number of columns."""
        return cls(
            row=row,
            column=None,
            raw=f"{found} fields",
            expected=f"{expected} columns",
            reason=f"row has {found} fields, expected {expected}",
            kind=ProblemKind.RAGGED_ROW,
            severity=Severity.WARNING,
        )

    @classmethod
    def ambiguous_inference(cls, column: str, sample_size: int) -> "ProblemRecord":
        """A column whose sample had no usable values to guess a type from."""
        return cls(
            row=None,
            column=column,
            raw=None,
            expected="character",
            reason=(
                "inference ambiguous: all sampled values missing "
                f"(sample size {sample_size})"
            ),
            kind=ProblemKind.AMBIGUOUS_INFERENCE,
            severity=Severity.INFO,
        )

    def __str__(self) -> str:
        return (
            f"ProblemRecord(row={self.row}, column={self.column!r}, "
            f"raw={self.raw!r}, expected={self.expected!r}, kind={self.kind.value})"
        )


class ProblemsCollector:
    """Append-only, ordered, collection of :class:`ProblemRecord`.

    Records are kept in the order they were appended and are
    never deduplicated, two identical failures on two different
    imports of the same data will both be present if the
    collector is shared.

    A collector with no records is falsy, so callers can check
    if an import went through cleanly with ``if not problems:``.
    """

    def __init__(self, records: Iterable[ProblemRecord] = ()) -> None:
        """
        :param records: Initial records for the collector.
        """
        self._records: list[ProblemRecord] = list(records)

    def append(self, record: ProblemRecord) -> None:
        """Record a new problem."""
        self._records.append(record)

    def extend(self, records: Iterable[ProblemRecord]) -> None:
        """Record multiple problems preserving their order."""
        self._records.extend(records)

    @property
    def count(self) -> int:
        """Total number of recorded problems."""
        return len(self._records)

    @property
    def records(self) -> tuple[ProblemRecord, ...]:
        """The recorded problems in the order they were recorded."""
        return tuple(self._records)

    def for_column(self, column: str) -> list[ProblemRecord]:
        """Only the problems concerning the given column."""
        return [r for r in self._records if r.column == column]

    def by_column(self) -> dict[str | None, int]:
        """Count of problems for each column.

        Row level problems (like ragged rows) are counted
        under the ``None`` key.
        """
        counts: dict[str | None, int] = {}
        for record in self._records:
            counts[record.column] = counts.get(record.column, 0) + 1
        return counts

    def by_kind(self) -> dict[ProblemKind, int]:
        """Count of problems for each :class:`ProblemKind`."""
        counts: dict[ProblemKind, int] = {}
        for record in self._records:
            counts[record.kind] = counts.get(record.kind, 0) + 1
        return counts

    def to_arrow(self) -> pa.Table:
        """The recorded problems as a :class:`pyarrow.Table`.

        One row per problem, which makes easy to filter
        or aggregate the problems using any Arrow based tool.
        """
        return pa.table(
            {
                "row": pa.array([r.row for r in self._records], type=pa.int64()),
                "column": pa.array([r.column for r in self._records], type=pa.string()),
                "raw": pa.array([r.raw for r in self._records], type=pa.string()),
                "expected": pa.array(
                    [r.expected for r in self._records], type=pa.string()
                ),
                "reason": pa.array([r.reason for r in self._records], type=pa.string()),
                "kind": pa.array(
                    [r.kind.value for r in self._records], type=pa.string()
                ),
                "severity": pa.array(
                    [r.severity.value for r in self._records], type=pa.string()
                ),
            }
        )

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[ProblemRecord]:
        return iter(self._records)

    def __getitem__(self, idx: int) -> ProblemRecord:
        return self._records[idx]

    def __bool__(self) -> bool:
        return bool(self._records)

    def __str__(self) -> str:
        return f"ProblemsCollector(count={self.count}, by_column={self.by_column()})"
