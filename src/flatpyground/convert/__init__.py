"""Convert raw values to typed tables.

Given a :class:`flatpyground.reader.RawTable` and the
:class:`flatpyground.coltypes.ColumnSpec` of each of its columns,
:func:`apply` parses every value into a :class:`TypedTable`,
collecting the values that failed to parse as problems.

:func:`type_convert` re-applies inference and parsing to the
character columns of an existing :class:`TypedTable`.
"""

from .apply import apply, parse_column, type_convert
from .table import TypedTable

__all__ = ("apply", "parse_column", "type_convert", "TypedTable")
