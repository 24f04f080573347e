"""Format tabular data into a text table for print.

the `tabulate` function takes a `pyarrow.Table` or `pyarrow.RecordBatch` and formats it into a text table.
It will truncate long strings, format floats to 2 decimal places, show missing values as ``NA``
and limit the number of rows to display.
When the types of the columns are provided, they are shown under the column names.

Example:

    >>> import pyarrow as pa
    >>> data = {
    ...     "Product": ["Videogame", "Laptop", None],
    ...     "Quantity": [8, 8, 7],
    ...     "Price": [66.5, 38.72, 77.46],
    ... }
    >>> table = pa.table(data)
    >>> print(tabulate(table, types=["chr", "int", "dbl"]))
    # A table: 3 x 3
    Product   | Quantity | Price
    <chr>     | <int>    | <dbl>
    --------- | -------- | -----
    Videogame | 8        | 66.50
    Laptop    | 8        | 38.72
    NA        | 7        | 77.46
"""

import datetime
from typing import Any, Sequence

import pyarrow as pa


def tabulate(
    data: pa.Table | pa.RecordBatch,
    max_rows: int = 20,
    types: Sequence[str] | None = None,
) -> str:
    """Format a Table into a text table.

    Will produce a string like::

        # A table: 3 x 3
        Product   | Quantity | Price
        <chr>     | <int>    | <dbl>
        --------- | -------- | -----
        Videogame | 8        | 66.50
        Laptop    | 8        | 38.72
        NA        | 7        | 77.46
    """
    cols = data.column_names
    rows = [
        [format_value(row[c]) for c in cols]
        for row in data.slice(length=max_rows).to_pylist()
    ]

    header_rows = [list(cols)]
    if types is not None:
        header_rows.append([f"<{t}>" for t in types])

    colsizes = compute_max_colsize(cols, header_rows + rows)
    header = [maketablerow(row, colsizes=colsizes) for row in header_rows]
    separator = [maketablerow(["-"] * len(cols), colsizes=colsizes, fillvalue="-")]
    textrows = [maketablerow(row, colsizes=colsizes) for row in rows]

    title = [f"# A table: {data.num_rows} x {data.num_columns}"]
    table = "\n".join(title + header + separator + textrows)
    if data.num_rows > max_rows:
        table += f"\n... and {data.num_rows - max_rows} more rows"
    return table


def compute_max_colsize(cols: list[str], rows: list[list[str]]) -> list[int]:
    """Compute the maximum size of each column in a table."""
    return [
        max([len(row[colidx]) for row in rows] + [len(cols[colidx])])
        for colidx, _ in enumerate(cols)
    ]


def maketablerow(cols: list[str], colsizes: list[int], fillvalue: str = " ") -> str:
    """Make a table row with the given column sizes."""
    return " | ".join(
        [col.ljust(colsizes[idx], fillvalue) for idx, col in enumerate(cols)]
    ).rstrip()


def format_value(v: Any) -> str:
    """Format a value to be printed in the table.

    This function will format floats to 2 decimal places,
    show missing values as ``NA`` and truncate long strings.
    """
    if v is None:
        return "NA"
    elif isinstance(v, bool):
        return "TRUE" if v else "FALSE"
    elif isinstance(v, float):
        return f"{v:.2f}"
    elif isinstance(v, datetime.datetime):
        return v.isoformat(sep=" ")

    v = str(v)
    if len(v) > 30:
        v = v[:27] + "..."
    return v
