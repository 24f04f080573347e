"""High level functions to import flat files and parse vectors of strings.

This is the entry point most users will need, it combines the
reader, the type inference and the column parser in a single call::

    >>> table = read_csv("x,y,z\\n1,2,3\\n4,5,6\\n")
    >>> table.column_types
    {'x': <ColumnType.INTEGER: 'integer'>, 'y': <ColumnType.INTEGER: 'integer'>, 'z': <ColumnType.INTEGER: 'integer'>}
    >>> table.to_pydict()
    {'x': [1, 4], 'y': [2, 5], 'z': [3, 6]}

The problems found during the import are available
as ``table.problems`` or through :func:`problems`.

The ``parse_*`` functions apply the grammar of a type to
a sequence of strings, which is convenient to figure out
how a parser behaves before reading a whole file::

    >>> values, failures = parse_integer(["1", "231", ".", "456"], na=["."])
    >>> values.to_pylist()
    [1, 231, None, 456]
    >>> len(failures)
    0
"""

import logging
import os
from typing import IO, Iterable, Mapping, Sequence

import pyarrow as pa

from .coltypes.base import (
    DEFAULT_MISSING_MARKERS,
    ColumnDeclaration,
    ColumnSpec,
    ColumnType,
    ColumnTypes,
    as_spec,
    col_character,
    col_date,
    col_datetime,
    col_double,
    col_factor,
    col_integer,
    col_logical,
    col_number,
    col_time,
)
from .coltypes.inference import guess_type, infer
from .coltypes.locale import DEFAULT_LOCALE, Locale
from .convert.apply import apply, parse_column
from .convert.table import TypedTable
from .problems import ProblemsCollector
from .reader.rawtable import ReadOptions, parse

__all__ = (
    "read_csv",
    "read_tsv",
    "read_delim",
    "parse_vector",
    "parse_logical",
    "parse_integer",
    "parse_double",
    "parse_number",
    "parse_character",
    "parse_factor",
    "parse_date",
    "parse_time",
    "parse_datetime",
    "parse_guess",
    "guess_parser",
    "problems",
)

log = logging.getLogger(__name__)

Source = str | bytes | os.PathLike | IO[str] | IO[bytes]
ColTypes = ColumnTypes | Mapping[str, ColumnDeclaration] | ColumnDeclaration | None


def as_markers(na: Iterable[str] | str) -> tuple[str, ...]:
    """Missing markers as a tuple, a single string is a single marker."""
    if isinstance(na, str):
        return (na,)
    return tuple(na)


def read_source(source: Source) -> str | bytes:
    """Get the content of the source.

    Strings and bytes are the literal content, paths
    are read as bytes and file objects are read entirely.
    """
    if isinstance(source, (str, bytes, bytearray)):
        return source
    if isinstance(source, os.PathLike):
        with open(source, "rb") as f:
            return f.read()
    if hasattr(source, "read"):
        return source.read()
    raise TypeError(f"Unsupported source of type {type(source).__name__}")


def read_delim(
    source: Source,
    delim: str,
    col_names: bool | Sequence[str] = True,
    col_types: ColTypes = None,
    na: Iterable[str] = DEFAULT_MISSING_MARKERS,
    skip: int = 0,
    comment: str | None = None,
    guess_max: int = 1000,
    locale: Locale | None = None,
    quote: str = '"',
    trim_ws: bool = True,
    skip_empty_rows: bool = True,
    ragged: str = "pad",
) -> TypedTable:
    """Read delimited text into a :class:`flatpyground.convert.TypedTable`.

    :param source: Literal text or bytes, a path, or a file object.
    :param delim: The character separating fields.
    :param col_names: ``True`` to use the first line as column names,
                      ``False`` to name columns ``X1..Xn``, or the list
                      of names to use.
    :param col_types: Declared column types, see :func:`flatpyground.coltypes.cols`.
                      Columns without a declaration have their type guessed.
    :param na: Values that denote missing data.
    :param skip: Number of lines to ignore at the start of the text.
    :param comment: Lines starting with this prefix are ignored.
    :param guess_max: How many values of each column to use to guess its type.
    :param locale: The :class:`flatpyground.coltypes.Locale` the data was written with.
    :param quote: The character used to quote fields.
    :param trim_ws: Strip leading and trailing whitespace from unquoted fields.
    :param skip_empty_rows: Ignore lines that contain no data.
    :param ragged: ``"pad"`` or ``"drop"`` rows with a wrong number of fields.
    """
    locale = locale or DEFAULT_LOCALE
    na = as_markers(na)
    options = ReadOptions(
        delimiter=delim,
        quote=quote,
        skip=skip,
        comment=comment,
        col_names=col_names,
        trim_ws=trim_ws,
        skip_empty_rows=skip_empty_rows,
        ragged=ragged,
        encoding=locale.encoding,
    )
    raw = parse(read_source(source), options)

    col_types = ColumnTypes.from_value(col_types)
    advisories = ProblemsCollector()
    inferred = infer(
        raw,
        sample_size=guess_max,
        missing_markers=na,
        locale=locale,
        problems=advisories,
        columns=col_types.needs_inference(raw.names),
    )
    specs = col_types.resolve(raw.names, {spec.name: spec for spec in inferred})
    table, collector = apply(raw, specs, na, locale, advisories)

    if collector:
        log.warning(
            "%d problems while reading %d rows, see table.problems for details: %s",
            collector.count,
            raw.num_rows,
            {kind.value: count for kind, count in collector.by_kind().items()},
        )
    return table


def read_csv(source: Source, **kwargs) -> TypedTable:
    """Read comma separated values, see :func:`read_delim` for the options."""
    return read_delim(source, ",", **kwargs)


def read_tsv(source: Source, **kwargs) -> TypedTable:
    """Read tab separated values, see :func:`read_delim` for the options."""
    return read_delim(source, "\t", **kwargs)


def problems(table: TypedTable) -> ProblemsCollector:
    """The problems found while building the table."""
    return table.problems


def parse_vector(
    values: Iterable[str | bytes | None] | str | bytes,
    declaration: ColumnDeclaration,
    na: Iterable[str] = DEFAULT_MISSING_MARKERS,
    locale: Locale | None = None,
) -> tuple[pa.Array, ProblemsCollector]:
    """Parse a sequence of strings as values of the declared type.

    ``bytes`` values are decoded with the encoding of the locale,
    values that can't be decoded are recorded as problems.

    Returns the parsed values and the problems found, failed
    values are missing in the result.
    """
    if isinstance(values, (str, bytes)):
        values = [values]
    spec = as_spec(declaration)
    na = as_markers(na)
    if spec.type is ColumnType.GUESS:
        values = list(values)
        encoding = (locale or DEFAULT_LOCALE).encoding
        texts = [
            v.decode(encoding, errors="replace") if isinstance(v, bytes) else v
            for v in values
        ]
        spec = ColumnSpec(
            spec.name, guess_type(texts, na, locale) or ColumnType.CHARACTER
        )
    collector = ProblemsCollector()
    return parse_column(values, spec, na, locale, collector), collector


def parse_logical(values, na=DEFAULT_MISSING_MARKERS):
    return parse_vector(values, col_logical(), na)


def parse_integer(values, na=DEFAULT_MISSING_MARKERS):
    return parse_vector(values, col_integer(), na)


def parse_double(values, na=DEFAULT_MISSING_MARKERS, locale=None):
    return parse_vector(values, col_double(), na, locale)


def parse_number(values, na=DEFAULT_MISSING_MARKERS, locale=None):
    """Parse numbers ignoring grouping marks and any text around them.

    >>> parse_number("It cost $123.45")[0].to_pylist()
    [123.45]
    """
    return parse_vector(values, col_number(), na, locale)


def parse_character(values, na=DEFAULT_MISSING_MARKERS, locale=None):
    """Parse text, ``bytes`` are decoded with the encoding of the locale.

    >>> parse_character([b"El Ni\\xf1o"], locale=Locale(encoding="latin-1"))[0].to_pylist()
    ['El Niño']
    """
    return parse_vector(values, col_character(), na, locale)


def parse_factor(values, levels=None, na=DEFAULT_MISSING_MARKERS):
    """Parse categorical values, values out of ``levels`` are problems."""
    return parse_vector(values, col_factor(levels), na)


def parse_date(values, format=None, na=DEFAULT_MISSING_MARKERS, locale=None):
    return parse_vector(values, col_date(format), na, locale)


def parse_time(values, format=None, na=DEFAULT_MISSING_MARKERS, locale=None):
    return parse_vector(values, col_time(format), na, locale)


def parse_datetime(values, format=None, na=DEFAULT_MISSING_MARKERS, locale=None):
    return parse_vector(values, col_datetime(format), na, locale)


def parse_guess(values, na=DEFAULT_MISSING_MARKERS, locale=None):
    """Guess the type of the values and parse them with it."""
    return parse_vector(values, ColumnType.GUESS, na, locale)


def guess_parser(
    values: Iterable[str | None] | str,
    na: Iterable[str] = DEFAULT_MISSING_MARKERS,
    locale: Locale | None = None,
) -> str:
    """The name of the type that would be guessed for the values.

    >>> guess_parser(["2010-10-01", "2010-10-02"])
    'date'
    """
    if isinstance(values, str):
        values = [values]
    return (guess_type(values, as_markers(na), locale) or ColumnType.CHARACTER).value
