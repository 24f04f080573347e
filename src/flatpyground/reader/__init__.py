"""Read delimited text into rows of raw values.

The reader is the first step of any import, it is in charge
of splitting the text into records of fields, figuring out
the names of the columns and making sure that every row
has one field for each column.

It is constituted by two components:

1. The :class:`flatpyground.reader.tokenize.Tokenizer`, a state machine
   that splits the text into records honoring quoted fields,
   escaped quotes, comments and skipped lines.
2. The :func:`flatpyground.reader.rawtable.parse` function, which
   consumes the records to build a :class:`RawTable`, using the first
   record as the column names (or synthesizing ``X1..Xn`` names)
   and padding or dropping the rows that have a wrong number of fields.

To read a text you would typically do::

    raw = parse("x,y,z\\n1,2,3\\n", ReadOptions(skip=0, comment="#"))

The values of a :class:`RawTable` are still plain strings,
see :mod:`flatpyground.coltypes` and :mod:`flatpyground.convert`
for how they get their types.

The module also provides :func:`format_csv` and :func:`write_csv`
to write typed tables back to delimited text.
"""

from .rawtable import RawTable, ReadOptions, parse, repair_names
from .tokenize import MalformedSource, QuotedField, Tokenizer
from .writer import format_csv, write_csv

__all__ = (
    "RawTable",
    "ReadOptions",
    "parse",
    "repair_names",
    "MalformedSource",
    "Tokenizer",
    "QuotedField",
    "format_csv",
    "write_csv",
)
