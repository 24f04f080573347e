"""Write typed tables back to delimited text.

Writing is the inverse of reading: values are formatted
in the canonical form of their type, so that reading
the text back with the same options guesses the same types
and gets the same values::

    logical   -> TRUE / FALSE
    double    -> shortest representation, Inf, -Inf, NaN
    date      -> YYYY-MM-DD
    time      -> HH:MM:SS[.ffffff]
    datetime  -> YYYY-MM-DDTHH:MM:SS[.ffffff]
    factor    -> the level
    missing   -> NA

Fields are quoted only when necessary, which is when they contain
the delimiter, the quote character, a newline, leading or trailing
whitespace, or when they would be read back as a missing value.
"""

import datetime
import math
import os
from typing import IO, Any, Iterator

import pyarrow as pa

__all__ = ("format_csv", "write_csv", "iter_lines", "format_value")


def format_value(value: Any, na: str = "NA") -> str:
    """Format a single value in the canonical form of its type."""
    if value is None:
        return na
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Inf" if value > 0 else "-Inf"
        return repr(value)
    if isinstance(value, (datetime.datetime, datetime.date, datetime.time)):
        return value.isoformat()
    return str(value)


def quote_field(text: str, delimiter: str, quote: str, na: str) -> str:
    """Enclose the text in quotes when it couldn't be read back as is."""
    needs_quotes = (
        text == ""
        or text == na
        or text != text.strip()
        or any(c in text for c in (delimiter, quote, "\n", "\r"))
    )
    if not needs_quotes:
        return text
    return quote + text.replace(quote, quote + quote) + quote


def iter_lines(
    table: pa.Table,
    delimiter: str = ",",
    quote: str = '"',
    na: str = "NA",
    col_names: bool = True,
) -> Iterator[str]:
    """Emit the lines of the delimited text one by one, without terminator."""
    if col_names:
        yield delimiter.join(
            quote_field(name, delimiter, quote, na) for name in table.column_names
        )
    for batch in table.to_batches():
        for row in batch.to_pylist():
            fields = []
            for value in row.values():
                if value is None:
                    fields.append(na)
                else:
                    fields.append(
                        quote_field(format_value(value, na), delimiter, quote, na)
                    )
            yield delimiter.join(fields)


def format_csv(
    table: Any,
    delimiter: str = ",",
    quote: str = '"',
    na: str = "NA",
    col_names: bool = True,
) -> str:
    """Format a table as delimited text.

    :param table: A :class:`flatpyground.convert.TypedTable` or a :class:`pyarrow.Table`.
    :param delimiter: The character separating fields.
    :param quote: The character used to quote fields.
    :param na: The text written for missing values.
    :param col_names: Write the column names as the first line.
    """
    data = table if isinstance(table, pa.Table) else table.to_arrow()
    return "".join(
        line + "\n" for line in iter_lines(data, delimiter, quote, na, col_names)
    )


def write_csv(
    table: Any,
    file: str | os.PathLike | IO[str],
    delimiter: str = ",",
    quote: str = '"',
    na: str = "NA",
    col_names: bool = True,
) -> None:
    """Write a table as delimited text to a path or text file object.

    Accepts the same options as :func:`format_csv`.
    """
    data = table if isinstance(table, pa.Table) else table.to_arrow()
    lines = iter_lines(data, delimiter, quote, na, col_names)
    if isinstance(file, (str, os.PathLike)):
        with open(file, "w", encoding="utf-8", newline="") as f:
            for line in lines:
                f.write(line + "\n")
    else:
        for line in lines:
            file.write(line + "\n")
