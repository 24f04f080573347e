"""Convert raw string values to typed columns.

Once the type of each column is known, either because it was declared
or because it was guessed by :func:`flatpyground.coltypes.infer`, every
value of the column is parsed with the grammar of that type.

Parsing never stops on a bad value. A value that doesn't match the
grammar becomes a missing value and a
:class:`flatpyground.problems.ProblemRecord` is recorded for it::

    >>> from flatpyground.reader import parse
    >>> from flatpyground.coltypes import ColumnSpec, ColumnType
    >>> raw = parse("x\\n1\\nabc\\n")
    >>> table, problems = apply(raw, [ColumnSpec("x", ColumnType.INTEGER)])
    >>> table.column("x").to_pylist()
    [1, None]
    >>> problems[0].raw
    'abc'

Unquoted values matching one of the missing markers become missing values
without recording any problem, as they are missing on purpose.
"""

import dataclasses
import itertools
import logging
from typing import Iterable, Iterator, Mapping, Sequence

import pyarrow as pa

from ..coltypes.base import (
    DEFAULT_MISSING_MARKERS,
    ColumnDeclaration,
    ColumnSpec,
    ColumnType,
    ColumnTypes,
    is_missing,
)
from ..coltypes.grammar import parser_for
from ..coltypes.inference import infer
from ..coltypes.locale import DEFAULT_LOCALE, Locale
from ..problems import ProblemRecord, ProblemsCollector
from ..reader.rawtable import RawTable
from .table import TypedTable

__all__ = ("apply", "parse_column", "type_convert")

log = logging.getLogger(__name__)


def parse_column(
    values: Iterable[str | bytes | None],
    spec: ColumnSpec,
    missing_markers: Iterable[str] = DEFAULT_MISSING_MARKERS,
    locale: Locale | None = None,
    problems: ProblemsCollector | None = None,
    row_numbers: Sequence[int] | None = None,
) -> pa.Array:
    """Parse the values of a single column.

    :param values: The raw values of the column, ``None`` for missing values.
                   ``bytes`` values are decoded with the locale encoding.
    :param spec: The :class:`flatpyground.coltypes.ColumnSpec` of the column.
    :param missing_markers: Values that denote missing data.
    :param locale: The locale to use when the spec doesn't provide one.
    :param problems: Collector where to record the values that failed to parse.
    :param row_numbers: The row reported for each value in the problems,
                        by default the position of the value.

    Returns an Arrow array of the type of the column.
    """
    if not spec.type.is_concrete:
        raise ValueError(f"Can't parse values as {spec.type.value}")
    locale = spec.locale or locale or DEFAULT_LOCALE
    markers = frozenset(missing_markers)
    if problems is None:
        problems = ProblemsCollector()

    texts = decode_values(values, spec, locale, problems, row_numbers)
    if spec.type is ColumnType.FACTOR:
        return parse_factor_column(texts, spec, markers, problems)

    parser = parser_for(spec.type)
    parsed = []
    for row, value in texts:
        if is_missing(value, markers):
            parsed.append(None)
            continue
        try:
            parsed.append(parser.parse(value, locale, spec.format))
        except ValueError as e:
            problems.append(
                ProblemRecord.cell_failure(
                    row, spec.name, str(value), spec.type.value, str(e)
                )
            )
            parsed.append(None)
    return pa.array(parsed, type=spec.type.arrow_type)


def decode_values(
    values: Iterable[str | bytes | None],
    spec: ColumnSpec,
    locale: Locale,
    problems: ProblemsCollector,
    row_numbers: Sequence[int] | None = None,
) -> Iterator[tuple[int, str | None]]:
    """Pair each value with its row number, decoding ``bytes`` values.

    Values that can't be decoded with the locale encoding
    are recorded as failures and become missing values.
    """
    rows = row_numbers if row_numbers is not None else itertools.count()
    for row, value in zip(rows, values):
        if isinstance(value, (bytes, bytearray)):
            try:
                value = bytes(value).decode(locale.encoding)
            except UnicodeDecodeError as e:
                problems.append(
                    ProblemRecord.cell_failure(
                        row,
                        spec.name,
                        bytes(value).decode(locale.encoding, errors="backslashreplace"),
                        spec.type.value,
                        f"can't be decoded as {locale.encoding}: {e.reason}",
                    )
                )
                value = None
        yield row, value


def parse_factor_column(
    values: Iterable[tuple[int, str | None]],
    spec: ColumnSpec,
    markers: frozenset[str],
    problems: ProblemsCollector,
) -> pa.DictionaryArray:
    """Parse the numbered values of a factor column into a dictionary array.

    When the spec declares the levels, any other value is a failure.
    Otherwise levels are collected in order of first appearance.
    """
    levels = list(spec.levels) if spec.levels is not None else []
    positions = {level: idx for idx, level in enumerate(levels)}

    indices = []
    for row, value in values:
        if is_missing(value, markers):
            indices.append(None)
        elif value in positions:
            indices.append(positions[value])
        elif spec.levels is None:
            positions[value] = len(levels)
            levels.append(str(value))
            indices.append(positions[value])
        else:
            problems.append(
                ProblemRecord.cell_failure(
                    row,
                    spec.name,
                    str(value),
                    spec.type.value,
                    f"value not in levels {list(spec.levels)}",
                )
            )
            indices.append(None)

    return pa.DictionaryArray.from_arrays(
        pa.array(indices, type=pa.int32()), pa.array(levels, type=pa.string())
    )


def apply(
    raw_table: RawTable,
    column_specs: Sequence[ColumnSpec],
    missing_markers: Iterable[str] = DEFAULT_MISSING_MARKERS,
    locale: Locale | None = None,
    problems: ProblemsCollector | None = None,
) -> tuple[TypedTable, ProblemsCollector]:
    """Parse every column of a raw table with its specification.

    :param raw_table: The :class:`flatpyground.reader.RawTable` to convert.
    :param column_specs: One :class:`flatpyground.coltypes.ColumnSpec`
                         for each column of the table, in the same order.
                         Columns declared as ``skip`` are dropped.
    :param missing_markers: Values that denote missing data.
    :param locale: The :class:`flatpyground.coltypes.Locale` of the values.
    :param problems: Problems already found for this import, like those
                     recorded by inference.

    Returns the typed table and the collector of all the problems of
    the import: those of the raw table, those that were provided and those
    found while parsing, in this order. The same collector is attached to
    the table as ``table.problems``.
    """
    if len(column_specs) != raw_table.num_columns:
        raise ValueError(
            f"Got {len(column_specs)} column specifications for {raw_table.num_columns} columns"
        )
    markers = frozenset(missing_markers)

    collector = ProblemsCollector(raw_table.problems)
    if problems is not None:
        collector.extend(problems)

    specs = []
    arrays = []
    for idx, (name, spec) in enumerate(zip(raw_table.names, column_specs)):
        if spec.name is None:
            spec = spec.bind(name)
        elif spec.name != name:
            raise ValueError(f"Column specification {spec} provided for column {name}")
        if spec.type is ColumnType.SKIP:
            continue
        if spec.type is ColumnType.GUESS:
            raise ValueError(f"Column {name} type must be inferred before parsing")

        array = parse_column(
            raw_table.column(idx),
            spec,
            markers,
            locale,
            collector,
            row_numbers=raw_table.row_numbers,
        )
        if spec.type is ColumnType.FACTOR and spec.levels is None:
            spec = dataclasses.replace(spec, levels=tuple(array.dictionary.to_pylist()))
        specs.append(spec)
        arrays.append(array)

    log.debug(
        "Parsed %d rows into %d columns with %d problems",
        raw_table.num_rows,
        len(specs),
        len(collector),
    )
    return TypedTable.from_arrays(specs, arrays, collector), collector


def type_convert(
    table: TypedTable,
    col_types: ColumnTypes | Mapping[str, ColumnDeclaration] | ColumnDeclaration | None = None,
    sample_size: int = 1000,
    missing_markers: Iterable[str] = DEFAULT_MISSING_MARKERS,
    locale: Locale | None = None,
) -> TypedTable:
    """Guess again the types of the character columns of a table.

    Useful when the data was read with every column as character,
    for example to diagnose problems, and should now get proper types.
    Character columns are re-inferred (or parsed with the declared
    types) and re-parsed in a single pass, other columns are left as they are.

    :param table: The :class:`TypedTable` to convert.
    :param col_types: Declared types for the character columns,
                      in any form accepted by :meth:`flatpyground.coltypes.ColumnTypes.from_value`.
    :param sample_size: How many leading values of each column to inspect.
    :param missing_markers: Values that denote missing data.
    :param locale: The :class:`flatpyground.coltypes.Locale` of the values.

    The problems of the returned table are only those of the conversion.
    """
    col_types = ColumnTypes.from_value(col_types)
    markers = frozenset(missing_markers)
    names = [spec.name for spec in table.specs if spec.type is ColumnType.CHARACTER]

    values = [table.column(name).to_pylist() for name in names]
    raw = RawTable(names, [list(row) for row in zip(*values)] if values else [])

    problems = ProblemsCollector()
    inferred = infer(
        raw,
        sample_size=sample_size,
        missing_markers=markers,
        locale=locale,
        problems=problems,
        columns=col_types.needs_inference(names),
    )
    specs = col_types.resolve(names, {spec.name: spec for spec in inferred})
    converted, problems = apply(raw, specs, markers, locale, problems)

    out_specs = []
    arrays = []
    for spec in table.specs:
        if spec.type is not ColumnType.CHARACTER:
            out_specs.append(spec)
            arrays.append(table.column(spec.name))
        elif spec.name in converted.column_names:
            out_specs.append(converted.spec(spec.name))
            arrays.append(converted.column(spec.name))
    return TypedTable.from_arrays(out_specs, arrays, problems)
