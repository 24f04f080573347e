"""Column types and column specifications.

Each column of a typed table has one of the :class:`ColumnType` types,
which also dictates the Arrow type used to store its values.

A :class:`ColumnSpec` binds a type to a column name, together
with any extra information that is necessary to parse the values,
like the format of dates or the allowed levels of a factor.

Column types can be declared explicitly for some columns
using :func:`cols` and the ``col_*`` helpers::

    col_types = cols(
        x=col_double(),
        y=col_date("%d/%m/%Y"),
        default=col_character(),
    )

Columns without a declaration use the default, which by
default is :func:`col_guess`, meaning the type will be inferred
by :func:`flatpyground.coltypes.inference.infer`.
"""

import dataclasses
import enum
import logging
from dataclasses import dataclass
from typing import Mapping, Sequence

import pyarrow as pa

from ..reader.tokenize import QuotedField
from .locale import Locale

__all__ = (
    "ColumnType",
    "ColumnSpec",
    "is_missing",
    "ColumnTypes",
    "cols",
    "col_logical",
    "col_integer",
    "col_double",
    "col_number",
    "col_character",
    "col_date",
    "col_time",
    "col_datetime",
    "col_factor",
    "col_guess",
    "col_skip",
)

log = logging.getLogger(__name__)

DEFAULT_MISSING_MARKERS = ("", "NA")


def is_missing(value: str | None, markers: frozenset[str] | Sequence[str]) -> bool:
    """If a raw value denotes missing data.

    ``None`` is always missing, other values are missing when they
    match one of the markers, unless they were quoted in the source:

    >>> from flatpyground.reader.tokenize import QuotedField
    >>> is_missing("NA", ("NA",)), is_missing(QuotedField("NA"), ("NA",))
    (True, False)
    """
    if value is None:
        return True
    return not isinstance(value, QuotedField) and value in markers


class ColumnType(enum.Enum):
    """The types a column can have.

    ``GUESS`` and ``SKIP`` are only used in declarations,
    to ask for the type to be inferred or for the column to be dropped.
    """

    LOGICAL = "logical"
    INTEGER = "integer"
    DOUBLE = "double"
    NUMBER = "number"
    CHARACTER = "character"
    DATE = "date"
    TIME = "time"
    DATETIME = "datetime"
    FACTOR = "factor"
    GUESS = "guess"
    SKIP = "skip"

    @property
    def is_concrete(self) -> bool:
        """If values can actually be parsed to this type."""
        return self not in (ColumnType.GUESS, ColumnType.SKIP)

    @property
    def arrow_type(self) -> pa.DataType:
        """The Arrow type used to store values of this type."""
        if not self.is_concrete:
            raise ValueError(f"Column type {self.value} has no storage type")
        return ARROW_TYPES[self]

    @property
    def abbreviation(self) -> str:
        """Short name of the type, used when printing tables."""
        return ABBREVIATIONS[self]


ARROW_TYPES = {
    ColumnType.LOGICAL: pa.bool_(),
    ColumnType.INTEGER: pa.int64(),
    ColumnType.DOUBLE: pa.float64(),
    ColumnType.NUMBER: pa.float64(),
    ColumnType.CHARACTER: pa.string(),
    ColumnType.DATE: pa.date32(),
    ColumnType.TIME: pa.time64("us"),
    ColumnType.DATETIME: pa.timestamp("us"),
    ColumnType.FACTOR: pa.dictionary(pa.int32(), pa.string()),
}

ABBREVIATIONS = {
    ColumnType.LOGICAL: "lgl",
    ColumnType.INTEGER: "int",
    ColumnType.DOUBLE: "dbl",
    ColumnType.NUMBER: "num",
    ColumnType.CHARACTER: "chr",
    ColumnType.DATE: "date",
    ColumnType.TIME: "time",
    ColumnType.DATETIME: "dttm",
    ColumnType.FACTOR: "fct",
    ColumnType.GUESS: "?",
    ColumnType.SKIP: "_",
}


@dataclass(frozen=True)
class ColumnSpec:
    """The type of a column and how to parse its values.

    :param name: The name of the column, ``None`` for declarations
                 that are not yet bound to a column.
    :param type: The :class:`ColumnType` of the column, or its name.
    :param format: ``strptime`` template for date, time and datetime columns.
    :param levels: Allowed values of a factor column, in order.
                   When not provided they are collected from the data.
    :param locale: :class:`flatpyground.coltypes.locale.Locale` to use
                   for this column in place of the one of the import.
    """

    name: str | None
    type: ColumnType
    format: str | None = None
    levels: tuple[str, ...] | None = None
    locale: Locale | None = None

    def __post_init__(self) -> None:
        # Frozen dataclass, normalize through object.__setattr__
        object.__setattr__(self, "type", ColumnType(self.type))
        if self.levels is not None:
            if self.type is not ColumnType.FACTOR:
                raise ValueError("Only factor columns can have levels")
            object.__setattr__(self, "levels", tuple(self.levels))
        if self.format is not None and self.type not in (
            ColumnType.DATE,
            ColumnType.TIME,
            ColumnType.DATETIME,
        ):
            raise ValueError(f"Column type {self.type.value} doesn't accept a format")

    def bind(self, name: str) -> "ColumnSpec":
        """The same specification applied to the named column."""
        return dataclasses.replace(self, name=name)

    def __str__(self) -> str:
        extra = ""
        if self.format is not None:
            extra += f", format={self.format!r}"
        if self.levels is not None:
            extra += f", levels={list(self.levels)}"
        return f"ColumnSpec({self.name}: {self.type.value}{extra})"


ColumnDeclaration = ColumnSpec | ColumnType | str


def as_spec(declaration: ColumnDeclaration, name: str | None = None) -> ColumnSpec:
    """Convert a type, type name or specification to a :class:`ColumnSpec`."""
    if isinstance(declaration, ColumnSpec):
        return declaration if name is None else declaration.bind(name)
    return ColumnSpec(name, ColumnType(declaration))


class ColumnTypes:
    """Declared types for the columns of a table.

    Holds the declarations for named columns and the
    declaration used for any column that wasn't named.
    """

    def __init__(
        self,
        named: Mapping[str, ColumnDeclaration] | None = None,
        default: ColumnDeclaration = ColumnType.GUESS,
    ) -> None:
        """
        :param named: Declarations for specific columns, by column name.
        :param default: Declaration for all other columns.
        """
        self.named = {name: as_spec(decl, name) for name, decl in (named or {}).items()}
        self.default = as_spec(default)

    @classmethod
    def from_value(
        cls, value: "ColumnTypes | Mapping[str, ColumnDeclaration] | ColumnDeclaration | None"
    ) -> "ColumnTypes":
        """Build column types from any of the accepted declaration forms.

        Accepts an existing :class:`ColumnTypes`, a mapping of column names
        to declarations, a single declaration used as default, or ``None``.
        """
        if value is None:
            return cls()
        if isinstance(value, ColumnTypes):
            return value
        if isinstance(value, Mapping):
            return cls(named=value)
        return cls(default=value)

    def for_column(self, name: str) -> ColumnSpec:
        """The declaration that applies to the named column."""
        if name in self.named:
            return self.named[name]
        return self.default.bind(name)

    def needs_inference(self, names: Sequence[str]) -> list[str]:
        """The columns whose type has to be guessed."""
        return [n for n in names if self.for_column(n).type is ColumnType.GUESS]

    def resolve(
        self, names: Sequence[str], inferred: Mapping[str, ColumnSpec]
    ) -> list[ColumnSpec]:
        """Merge declared and inferred specifications.

        Declared types always win over inferred ones, inference
        only applies to columns declared as :func:`col_guess`.

        :param names: The columns of the table, in order.
        :param inferred: Inferred specifications, by column name.
        """
        unknown = [n for n in self.named if n not in names]
        if unknown:
            log.warning("Declared column types for unknown columns ignored: %s", unknown)

        specs = []
        for name in names:
            spec = self.for_column(name)
            if spec.type is ColumnType.GUESS:
                spec = inferred.get(name, ColumnSpec(name, ColumnType.CHARACTER))
            specs.append(spec)
        return specs

    def __str__(self) -> str:
        named = ", ".join(f"{n}={s.type.value}" for n, s in self.named.items())
        return f"ColumnTypes({named}, default={self.default.type.value})"


def cols(default: ColumnDeclaration = ColumnType.GUESS, **named: ColumnDeclaration) -> ColumnTypes:
    """Declare the types of the columns of a table.

    >>> str(cols(x=col_integer(), default=col_character()))
    'ColumnTypes(x=integer, default=character)'
    """
    return ColumnTypes(named=named, default=default)


def col_logical() -> ColumnSpec:
    return ColumnSpec(None, ColumnType.LOGICAL)


def col_integer() -> ColumnSpec:
    return ColumnSpec(None, ColumnType.INTEGER)


def col_double() -> ColumnSpec:
    return ColumnSpec(None, ColumnType.DOUBLE)


def col_number() -> ColumnSpec:
    """Numbers with grouping marks, currency or percent symbols."""
    return ColumnSpec(None, ColumnType.NUMBER)


def col_character() -> ColumnSpec:
    return ColumnSpec(None, ColumnType.CHARACTER)


def col_date(format: str | None = None) -> ColumnSpec:
    """Dates, ISO ``YYYY-MM-DD`` unless a ``strptime`` format is provided."""
    return ColumnSpec(None, ColumnType.DATE, format=format)


def col_time(format: str | None = None) -> ColumnSpec:
    """Times of the day, ``HH:MM[:SS]`` unless a ``strptime`` format is provided."""
    return ColumnSpec(None, ColumnType.TIME, format=format)


def col_datetime(format: str | None = None) -> ColumnSpec:
    """Date and time, ISO-8601 unless a ``strptime`` format is provided."""
    return ColumnSpec(None, ColumnType.DATETIME, format=format)


def col_factor(levels: Sequence[str] | None = None) -> ColumnSpec:
    """Categorical values, optionally restricted to the given levels."""
    return ColumnSpec(
        None, ColumnType.FACTOR, levels=tuple(levels) if levels is not None else None
    )


def col_guess() -> ColumnSpec:
    """Infer the type of the column from its values."""
    return ColumnSpec(None, ColumnType.GUESS)


def col_skip() -> ColumnSpec:
    """Drop the column from the result."""
    return ColumnSpec(None, ColumnType.SKIP)
