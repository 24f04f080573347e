"""FlatPyground

Import flat files into typed, columnar, tables.

Flat files, like CSV files, are the most common way to exchange
tabular data, but they carry no information about the types
of their columns: every value is just text. FlatPyground reads
delimited text, guesses the type of each column from a sample of
its values and converts every value, collecting the values that
couldn't be converted instead of failing the whole import.

The import is constituted by multiple components, each isolated within its own
package and each self documented in literate programming style:

* The Reader (:mod:`flatpyground.reader`), which splits text into rows of raw string values.
* The Column Types (:mod:`flatpyground.coltypes`), which define the grammar of each
  type and guess the types of columns.
* The Converter (:mod:`flatpyground.convert`), which parses the values of each column
  into a :class:`flatpyground.convert.TypedTable` backed by Apache Arrow.
* The Problems Collector (:mod:`flatpyground.problems`), which records everything
  that went wrong during an import.

Most users will only need :func:`read_csv`::

    >>> table = read_csv("x,y\\n1,a\\n2,b\\n")
    >>> print(table)
    # A table: 2 x 2
    x     | y
    <int> | <chr>
    ----- | -----
    1     | a
    2     | b
"""

from . import coltypes, convert, reader
from .api import (
    guess_parser,
    parse_character,
    parse_date,
    parse_datetime,
    parse_double,
    parse_factor,
    parse_guess,
    parse_integer,
    parse_logical,
    parse_number,
    parse_time,
    parse_vector,
    problems,
    read_csv,
    read_delim,
    read_tsv,
)
from .coltypes import (
    ColumnSpec,
    ColumnType,
    Locale,
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
from .convert import TypedTable, type_convert
from .problems import ProblemRecord, ProblemsCollector
from .reader import MalformedSource, format_csv, write_csv

__all__ = (
    "coltypes",
    "convert",
    "reader",
    "read_csv",
    "read_delim",
    "read_tsv",
    "format_csv",
    "write_csv",
    "type_convert",
    "problems",
    "guess_parser",
    "parse_vector",
    "parse_character",
    "parse_date",
    "parse_datetime",
    "parse_double",
    "parse_factor",
    "parse_guess",
    "parse_integer",
    "parse_logical",
    "parse_number",
    "parse_time",
    "ColumnSpec",
    "ColumnType",
    "Locale",
    "TypedTable",
    "ProblemRecord",
    "ProblemsCollector",
    "MalformedSource",
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
