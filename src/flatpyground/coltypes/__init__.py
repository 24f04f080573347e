"""Column types, their grammars and their inference.

Every column of an imported table has a type, which
can be declared by the caller or guessed from the data.

* :mod:`flatpyground.coltypes.base` defines the :class:`ColumnType`
  enumeration, the :class:`ColumnSpec` binding a type to a column
  and the :func:`cols` helper to declare column types.
* :mod:`flatpyground.coltypes.locale` defines the :class:`Locale`
  used to parse numbers, dates and times written in different conventions.
* :mod:`flatpyground.coltypes.grammar` implements the parser of each type.
* :mod:`flatpyground.coltypes.inference` guesses the type of columns
  from a sample of their values.
"""

from .base import (
    DEFAULT_MISSING_MARKERS,
    ColumnSpec,
    ColumnType,
    ColumnTypes,
    col_character,
    col_date,
    col_datetime,
    col_double,
    col_factor,
    col_guess,
    col_integer,
    col_logical,
    col_number,
    col_skip,
    col_time,
    cols,
)
from .grammar import ValueParser, parser_for
from .inference import guess_type, infer
from .locale import DEFAULT_LOCALE, Locale

__all__ = (
    "DEFAULT_MISSING_MARKERS",
    "DEFAULT_LOCALE",
    "ColumnSpec",
    "ColumnType",
    "ColumnTypes",
    "Locale",
    "ValueParser",
    "parser_for",
    "guess_type",
    "infer",
    "cols",
    "col_character",
    "col_date",
    "col_datetime",
    "col_double",
    "col_factor",
    "col_guess",
    "col_integer",
    "col_logical",
    "col_number",
    "col_skip",
    "col_time",
)
