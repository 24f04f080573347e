"""Guess the type of columns from a sample of their values.

Flat files carry no information about the types of their
columns, every value is just text. To provide typed data
the type of each column has to be guessed from the values
themselves.

Looking at every value of a large file before parsing it
would require reading it twice, so only a sample of the
first ``sample_size`` values of each column is considered.
Values that are missing markers (like an unquoted ``NA``) carry no
information and are excluded from the sample.

The candidate types are tried from the most specific to the
least specific, and the first type whose grammar accepts
every value of the sample wins::

    logical -> integer -> [number] -> double -> date -> time -> datetime -> character

``character`` accepts anything, so it always terminates the search.
The ``number`` candidate is only tried when a locale with non default
decimal or grouping marks is provided, as in that case the caller
explicitly told that numbers are formatted differently.

This is a heuristic: a column that contains integers in the sample
and decimals further down will be guessed as integer and its decimals
will fail to parse. When that happens, declare the type explicitly
or increase the sample size.

A column whose sample only contains missing values can't be guessed,
it will be ``character`` and an advisory problem is recorded.
"""

import itertools
import logging
from typing import Iterable, Sequence

from ..problems import ProblemRecord, ProblemsCollector
from ..reader.rawtable import RawTable
from .base import DEFAULT_MISSING_MARKERS, ColumnSpec, ColumnType, is_missing
from .grammar import parser_for
from .locale import DEFAULT_LOCALE, Locale

__all__ = ("infer", "guess_type", "candidate_types")

log = logging.getLogger(__name__)


def candidate_types(locale: Locale = DEFAULT_LOCALE) -> list[ColumnType]:
    """The types tried by inference, most specific first.

    ``character`` is not included as it's the fallback
    when no candidate matches.
    """
    candidates = [ColumnType.LOGICAL, ColumnType.INTEGER]
    if not locale.is_default():
        candidates.append(ColumnType.NUMBER)
    candidates.extend(
        [ColumnType.DOUBLE, ColumnType.DATE, ColumnType.TIME, ColumnType.DATETIME]
    )
    return candidates


def guess_type(
    values: Iterable[str | None],
    missing_markers: Iterable[str] = DEFAULT_MISSING_MARKERS,
    locale: Locale | None = None,
) -> ColumnType | None:
    """Guess the most specific type that accepts all the values.

    Missing values and missing markers are ignored,
    if no value is left ``None`` is returned as there
    is no evidence to guess a type from.

    >>> guess_type(["1", "2", "NA"])
    <ColumnType.INTEGER: 'integer'>
    >>> guess_type(["1", "2.5"])
    <ColumnType.DOUBLE: 'double'>
    >>> guess_type(["NA", ""]) is None
    True
    """
    locale = locale or DEFAULT_LOCALE
    markers = frozenset(missing_markers)
    sample = [v for v in values if not is_missing(v, markers)]
    if not sample:
        return None

    for candidate in candidate_types(locale):
        parser = parser_for(candidate)
        if all(parser.matches(value, locale) for value in sample):
            return candidate
    return ColumnType.CHARACTER


def infer(
    raw_table: RawTable,
    sample_size: int = 1000,
    missing_markers: Iterable[str] = DEFAULT_MISSING_MARKERS,
    locale: Locale | None = None,
    problems: ProblemsCollector | None = None,
    columns: Sequence[str] | None = None,
) -> list[ColumnSpec]:
    """Infer the :class:`ColumnSpec` of the columns of a table.

    :param raw_table: The :class:`flatpyground.reader.RawTable` to inspect.
    :param sample_size: How many leading values of each column to inspect.
    :param missing_markers: Values that denote missing data.
    :param locale: The :class:`Locale` the values were written with.
    :param problems: Collector where to record columns that couldn't be guessed.
    :param columns: Only infer the named columns, by default all of them.

    The returned specifications are in the same order as the
    columns of the table.
    """
    if sample_size < 1:
        raise ValueError(f"Sample size must be positive, got {sample_size}")
    locale = locale or DEFAULT_LOCALE
    markers = frozenset(missing_markers)

    specs = []
    for name in raw_table.names:
        if columns is not None and name not in columns:
            continue

        sample = itertools.islice(raw_table.column(name), sample_size)
        column_type = guess_type(sample, markers, locale)
        if column_type is None:
            column_type = ColumnType.CHARACTER
            if problems is not None:
                problems.append(ProblemRecord.ambiguous_inference(name, sample_size))
        log.debug("Guessed column %s as %s", name, column_type.value)
        specs.append(ColumnSpec(name, column_type))
    return specs
