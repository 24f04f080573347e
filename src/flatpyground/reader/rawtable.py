"""Turn delimited text into a table of raw string values.

The :func:`parse` function combines the :class:`flatpyground.reader.tokenize.Tokenizer`
with the handling of column names and of rows that don't
have the expected number of fields, producing a :class:`RawTable`.

A :class:`RawTable` is still untyped, every value is the string
that was found in the source (or ``None`` for values that were
missing in short rows). Giving types to the values is the job of
:mod:`flatpyground.coltypes` and :mod:`flatpyground.convert`.

>>> raw = parse("x,y,z\\n1,2,3\\n4,5,6\\n")
>>> raw.names
['x', 'y', 'z']
>>> raw.rows
[['1', '2', '3'], ['4', '5', '6']]
"""

import itertools
import logging
from dataclasses import dataclass
from typing import Iterator, Sequence

from ..problems import ProblemRecord, ProblemsCollector
from .tokenize import MalformedSource, Tokenizer

__all__ = ("ReadOptions", "RawTable", "parse", "repair_names")

log = logging.getLogger(__name__)

RAGGED_POLICIES = ("pad", "drop")


@dataclass(frozen=True)
class ReadOptions:
    """Options that control how the text is split into rows and columns.

    :param delimiter: The character separating fields.
    :param quote: The character used to quote fields.
    :param skip: Number of physical lines to ignore at the start of the text.
    :param comment: Lines starting with this prefix are ignored.
    :param col_names: ``True`` if the first record provides the column names,
                      ``False`` to name the columns ``X1..Xn``, or
                      the list of column names to use.
    :param trim_ws: Strip leading and trailing whitespace from unquoted fields.
    :param skip_empty_rows: Ignore lines that contain no data.
    :param ragged: What to do with rows that have a different number of
                   fields than the number of columns. ``"pad"`` fills short
                   rows with missing values and truncates long ones, ``"drop"``
                   removes those rows. In both cases a problem is recorded.
    :param encoding: The encoding used to decode the text when provided as bytes.
    """

    delimiter: str = ","
    quote: str = '"'
    skip: int = 0
    comment: str | None = None
    col_names: bool | Sequence[str] = True
    trim_ws: bool = True
    skip_empty_rows: bool = True
    ragged: str = "pad"
    encoding: str = "utf-8"

    def __post_init__(self) -> None:
        if len(self.delimiter) != 1:
            raise ValueError(
                f"Delimiter must be a single character, got {self.delimiter!r}"
            )
        if len(self.quote) != 1:
            raise ValueError(f"Quote must be a single character, got {self.quote!r}")
        if self.delimiter == self.quote:
            raise ValueError("Delimiter and quote must be different characters")
        if self.delimiter == "\n" or self.quote == "\n":
            raise ValueError("Newline can't be used as delimiter or quote")
        if self.skip < 0:
            raise ValueError(f"Lines to skip can't be negative, got {self.skip}")
        if self.ragged not in RAGGED_POLICIES:
            raise ValueError(
                f"Unknown ragged rows policy {self.ragged!r}, expected one of {RAGGED_POLICIES}"
            )


class RawTable:
    """Rows of raw string values, all with the same number of fields.

    The table also carries the problems that were found
    while reading the rows, like ragged rows.

    Fields that were quoted in the source are
    :class:`flatpyground.reader.tokenize.QuotedField` instances.
    """

    def __init__(
        self,
        names: list[str],
        rows: list[list[str | None]],
        problems: ProblemsCollector | None = None,
        row_numbers: Sequence[int] | None = None,
    ) -> None:
        """
        :param names: The names of the columns, must be unique.
        :param rows: The rows of the table, each one with as many fields as names.
        :param problems: Problems found while reading the rows.
        :param row_numbers: The index of each row among the data records
                            of the source, when some records were dropped.
                            By default rows are numbered by their position.
        """
        if len(set(names)) != len(names):
            raise ValueError(f"Column names must be unique, got {names}")
        for row in rows:
            if len(row) != len(names):
                raise ValueError(
                    f"Row {row} has {len(row)} fields, expected {len(names)}"
                )
        if row_numbers is None:
            row_numbers = range(len(rows))
        elif len(row_numbers) != len(rows):
            raise ValueError(
                f"Got {len(row_numbers)} row numbers for {len(rows)} rows"
            )
        self.names = names
        self.rows = rows
        self.row_numbers = list(row_numbers)
        self.problems = problems if problems is not None else ProblemsCollector()

    @property
    def num_rows(self) -> int:
        return len(self.rows)

    @property
    def num_columns(self) -> int:
        return len(self.names)

    def column_index(self, name_or_index: str | int) -> int:
        """Position of a column given its name or position."""
        if isinstance(name_or_index, int):
            if not -self.num_columns <= name_or_index < self.num_columns:
                raise IndexError(f"Column index {name_or_index} out of range")
            return name_or_index % self.num_columns
        try:
            return self.names.index(name_or_index)
        except ValueError:
            raise KeyError(f"No column named {name_or_index!r}") from None

    def column(self, name_or_index: str | int) -> Iterator[str | None]:
        """Iterate over the raw values of a column."""
        idx = self.column_index(name_or_index)
        return (row[idx] for row in self.rows)

    def __str__(self) -> str:
        return f"RawTable(columns={self.names}, rows={self.num_rows})"


def repair_names(names: Sequence[str | None]) -> list[str]:
    """Make column names unique and non empty.

    Empty names are replaced by ``X<position>`` and
    duplicated names get a ``_<n>`` suffix:

    >>> repair_names(["x", "", "x", "y"])
    ['x', 'X2', 'x_1', 'y']
    """
    seen: set[str] = set()
    repaired = []
    for position, name in enumerate(names, start=1):
        base = str(name) if name else f"X{position}"
        candidate = base
        suffix = 1
        while candidate in seen:
            candidate = f"{base}_{suffix}"
            suffix += 1
        seen.add(candidate)
        repaired.append(candidate)
    return repaired


def decode(source: str | bytes, encoding: str) -> str:
    """Decode the source when it's provided as bytes.

    Any leading byte order mark is removed.
    """
    if isinstance(source, (bytes, bytearray)):
        try:
            source = bytes(source).decode(encoding)
        except UnicodeDecodeError as e:
            raise MalformedSource(
                f"Source can't be decoded as {encoding}: {e.reason} at byte {e.start}"
            ) from e
    return source.removeprefix("\ufeff")


def parse(source_text: str | bytes, options: ReadOptions | None = None) -> RawTable:
    """Parse delimited text into a :class:`RawTable`.

    :param source_text: The text to parse, bytes are decoded
                        using the encoding of the options.
    :param options: The :class:`ReadOptions` to use.

    Only an unterminated quoted field or undecodable bytes raise
    :class:`flatpyground.reader.MalformedSource`, rows with the wrong number
    of fields are recorded as problems of the returned table.
    """
    options = options or ReadOptions()
    text = decode(source_text, options.encoding)

    records = Tokenizer(
        text,
        delimiter=options.delimiter,
        quote=options.quote,
        skip=options.skip,
        comment=options.comment,
        trim_ws=options.trim_ws,
        skip_empty_rows=options.skip_empty_rows,
    ).records()

    if options.col_names is True:
        header = next(records, None)
        names = repair_names(header) if header is not None else []
    elif options.col_names is False:
        first = next(records, None)
        if first is None:
            names = []
        else:
            names = [f"X{i}" for i in range(1, len(first) + 1)]
            records = itertools.chain([first], records)
    else:
        names = repair_names(list(options.col_names))
    log.debug("Reading columns %s", names)

    problems = ProblemsCollector()
    rows: list[list[str | None]] = []
    row_numbers = []
    width = len(names)
    for idx, record in enumerate(records):
        if len(record) != width:
            problems.append(ProblemRecord.ragged_row(idx, len(record), width))
            if options.ragged == "drop":
                continue
            if len(record) < width:
                record = record + [None] * (width - len(record))
            else:
                record = record[:width]
        rows.append(record)
        row_numbers.append(idx)

    return RawTable(names, rows, problems, row_numbers)
