"""The typed table produced by an import.

A :class:`TypedTable` pairs the :class:`flatpyground.coltypes.ColumnSpec`
of each column with the values of the column, stored in a :class:`pyarrow.Table`.

Storing the data in Arrow format means that missing values
are represented by Arrow nulls, which are distinct from any
real value of any type (including ``NaN`` and the empty string),
and that the data can be handed to any Arrow based tool
for filtering, sorting or aggregating it::

    >>> import pyarrow as pa
    >>> from flatpyground.coltypes import ColumnSpec, ColumnType
    >>> table = TypedTable(
    ...     [ColumnSpec("x", ColumnType.INTEGER)],
    ...     pa.table({"x": pa.array([1, None], type=pa.int64())}),
    ... )
    >>> table.column("x").to_pylist()
    [1, None]
"""

from typing import Any, Sequence

import pyarrow as pa

from ..coltypes.base import ColumnSpec, ColumnType
from ..problems import ProblemsCollector
from ..utils import tabulate

__all__ = ("TypedTable",)


class TypedTable:
    """Columns of typed values with their specifications."""

    def __init__(
        self,
        specs: Sequence[ColumnSpec],
        data: pa.Table,
        problems: ProblemsCollector | None = None,
    ) -> None:
        """
        :param specs: The specification of each column, in order.
        :param data: The values of the columns, one Arrow column for each spec.
        :param problems: The problems found while building the table.
        """
        names = [spec.name for spec in specs]
        if names != data.column_names:
            raise ValueError(
                f"Column specifications {names} don't match data columns {data.column_names}"
            )
        for spec, field in zip(specs, data.schema):
            if not spec.type.is_concrete:
                raise ValueError(f"Column {spec.name} has no concrete type")
            if field.type != spec.type.arrow_type:
                raise ValueError(
                    f"Column {spec.name} is {field.type}, expected {spec.type.arrow_type}"
                )
        self.specs = list(specs)
        self.data = data
        self.problems = problems if problems is not None else ProblemsCollector()

    @classmethod
    def from_arrays(
        cls,
        specs: Sequence[ColumnSpec],
        arrays: Sequence[pa.Array],
        problems: ProblemsCollector | None = None,
    ) -> "TypedTable":
        """Build a table from the arrays of each column."""
        schema = pa.schema([pa.field(s.name, s.type.arrow_type) for s in specs])
        return cls(specs, pa.Table.from_arrays(list(arrays), schema=schema), problems)

    @property
    def column_names(self) -> list[str]:
        return [spec.name for spec in self.specs]

    @property
    def column_types(self) -> dict[str, ColumnType]:
        """The type of each column, by column name."""
        return {spec.name: spec.type for spec in self.specs}

    @property
    def num_rows(self) -> int:
        return self.data.num_rows

    @property
    def num_columns(self) -> int:
        return self.data.num_columns

    def spec(self, name_or_index: str | int) -> ColumnSpec:
        """The specification of a column given its name or position."""
        return self.specs[self.column_index(name_or_index)]

    def column_index(self, name_or_index: str | int) -> int:
        if isinstance(name_or_index, int):
            if not -self.num_columns <= name_or_index < self.num_columns:
                raise IndexError(f"Column index {name_or_index} out of range")
            return name_or_index % self.num_columns
        try:
            return self.column_names.index(name_or_index)
        except ValueError:
            raise KeyError(f"No column named {name_or_index!r}") from None

    def column(self, name_or_index: str | int) -> pa.Array:
        """The values of a column given its name or position."""
        return self.data.column(self.column_index(name_or_index)).combine_chunks()

    def to_arrow(self) -> pa.Table:
        """The data of the table as a :class:`pyarrow.Table`."""
        return self.data

    def to_pydict(self) -> dict[str, list[Any]]:
        """The values of each column as Python objects, by column name."""
        return self.data.to_pydict()

    def to_pylist(self) -> list[dict[str, Any]]:
        """The rows of the table as dictionaries of Python objects."""
        return self.data.to_pylist()

    def equals(self, other: "TypedTable") -> bool:
        """If the two tables have the same columns, types and values."""
        return (
            [(s.name, s.type) for s in self.specs]
            == [(s.name, s.type) for s in other.specs]
            and self.data.equals(other.data)
        )

    def format(self, max_rows: int = 10) -> str:
        """Format the table as text, showing up to ``max_rows`` rows."""
        return tabulate.tabulate(
            self.data,
            max_rows=max_rows,
            types=[spec.type.abbreviation for spec in self.specs],
        )

    def __getitem__(self, name_or_index: str | int) -> pa.Array:
        return self.column(name_or_index)

    def __len__(self) -> int:
        return self.num_rows

    def __str__(self) -> str:
        return self.format()

    def __repr__(self) -> str:
        columns = ", ".join(f"{s.name}: {s.type.abbreviation}" for s in self.specs)
        return f"TypedTable({columns}, rows={self.num_rows}, problems={len(self.problems)})"
