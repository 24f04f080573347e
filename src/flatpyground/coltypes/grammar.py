"""The grammar of each column type.

Every concrete :class:`flatpyground.coltypes.base.ColumnType` has a
:class:`ValueParser` that knows how to convert a string to a value of that type.

The same parsers are used both to guess the type of a column
and to convert its values, so that a column is never guessed
as a type whose parser would then refuse its values.

Parsers are strict: a value either matches the whole grammar
or the parser raises :class:`ValueError`. The grammars are:

============  ===============================================================
Type          Accepted values
============  ===============================================================
logical       ``TRUE``, ``FALSE``, ``T``, ``F`` in any case.
integer       Optional sign followed by digits, in the 64 bit signed range.
double        Decimal or scientific notation, ``Inf``, ``-Inf``, ``NaN``.
number        A number with grouping marks, surrounded by other text
              like currency or percent symbols (``$1,000``, ``20%``).
character     Anything.
date          ``YYYY-MM-DD`` or the ``strptime`` format provided.
time          ``HH:MM[:SS[.ffffff]]`` optionally followed by ``AM``/``PM``.
datetime      ISO-8601 date, optionally followed by ``T`` or space and
              a time, and a ``Z`` or ``+HH:MM`` offset.
              Compact forms like ``20101010T2010`` are accepted.
              When the time is omitted it defaults to midnight.
factor        Anything, the allowed levels are checked by the column parser.
============  ===============================================================

The decimal and grouping marks used by the number parsers come from
the :class:`flatpyground.coltypes.locale.Locale`.
"""

import abc
import datetime
import functools
import re
from typing import Any

from .base import ColumnType
from .locale import DEFAULT_LOCALE, Locale

__all__ = (
    "ValueParser",
    "LogicalParser",
    "IntegerParser",
    "DoubleParser",
    "NumberParser",
    "CharacterParser",
    "DateParser",
    "TimeParser",
    "DatetimeParser",
    "FactorParser",
    "parser_for",
)

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1


class ValueParser(abc.ABC):
    """Convert strings to values of a column type."""

    column_type: ColumnType

    @abc.abstractmethod
    def parse(
        self, text: str, locale: Locale = DEFAULT_LOCALE, format: str | None = None
    ) -> Any:
        """Convert the text to a value.

        Raises :class:`ValueError` if the text doesn't
        match the grammar of the type.

        :param text: The text to convert.
        :param locale: The locale to use for numbers, dates and times.
        :param format: A ``strptime`` template, for types that accept one.
        """
        ...

    def matches(
        self, text: str, locale: Locale = DEFAULT_LOCALE, format: str | None = None
    ) -> bool:
        """If the text matches the grammar of the type."""
        try:
            self.parse(text, locale, format)
        except ValueError:
            return False
        return True

    def __str__(self) -> str:
        return f"{self.__class__.__name__}({self.column_type.value})"


class LogicalParser(ValueParser):
    column_type = ColumnType.LOGICAL

    TRUE_VALUES = frozenset(("TRUE", "T"))
    FALSE_VALUES = frozenset(("FALSE", "F"))

    def parse(
        self, text: str, locale: Locale = DEFAULT_LOCALE, format: str | None = None
    ) -> bool:
        upper = text.upper()
        if upper in self.TRUE_VALUES:
            return True
        if upper in self.FALSE_VALUES:
            return False
        raise ValueError(f"Not a logical value: {text!r}")


class IntegerParser(ValueParser):
    column_type = ColumnType.INTEGER

    PATTERN = re.compile(r"[+-]?[0-9]+")

    def parse(
        self, text: str, locale: Locale = DEFAULT_LOCALE, format: str | None = None
    ) -> int:
        if not self.PATTERN.fullmatch(text):
            raise ValueError(f"Not an integer: {text!r}")
        value = int(text)
        if not INT64_MIN <= value <= INT64_MAX:
            raise ValueError(f"Integer out of 64 bit range: {text!r}")
        return value


@functools.lru_cache(maxsize=None)
def double_pattern(decimal_mark: str) -> re.Pattern:
    """Regular expression for doubles using the given decimal mark."""
    d = re.escape(decimal_mark)
    return re.compile(
        rf"[+-]?(?:[0-9]+(?:{d}[0-9]*)?|{d}[0-9]+)(?:[eE][+-]?[0-9]+)?"
        r"|[+-]?(?:[Ii]nf(?:inity)?|INF)|[Nn]a[Nn]|NAN"
    )


class DoubleParser(ValueParser):
    """Floating point numbers in decimal or scientific notation."""

    column_type = ColumnType.DOUBLE

    def parse(
        self, text: str, locale: Locale = DEFAULT_LOCALE, format: str | None = None
    ) -> float:
        if not double_pattern(locale.decimal_mark).fullmatch(text):
            raise ValueError(f"Not a double: {text!r}")
        return float(text.replace(locale.decimal_mark, "."))


@functools.lru_cache(maxsize=None)
def number_pattern(decimal_mark: str, grouping_mark: str) -> re.Pattern:
    """Regular expression for formatted numbers using the given marks.

    The number itself is captured in the ``digits`` group,
    anything before and after it is captured in ``prefix`` and ``suffix``.
    """
    d = re.escape(decimal_mark)
    groups = rf"(?:{re.escape(grouping_mark)}[0-9]{{3}})*" if grouping_mark else ""
    return re.compile(
        r"(?P<prefix>[^0-9]*?)"
        rf"(?P<digits>[0-9]+{groups}(?:{d}[0-9]*)?|{d}[0-9]+)"
        r"(?P<suffix>[^0-9]*)"
    )


class NumberParser(ValueParser):
    """Numbers formatted for humans.

    Grouping marks are ignored, as is any text before and
    after the number, so that currencies, percentages
    and units can be parsed:

    >>> NumberParser().parse("$1,000.50")
    1000.5
    >>> NumberParser().parse("20%")
    20.0
    >>> NumberParser().parse("123.456.789,50", Locale(decimal_mark=",", grouping_mark="."))
    123456789.5
    """

    column_type = ColumnType.NUMBER

    def parse(
        self, text: str, locale: Locale = DEFAULT_LOCALE, format: str | None = None
    ) -> float:
        match = number_pattern(locale.decimal_mark, locale.grouping_mark).fullmatch(
            text
        )
        if match is None:
            raise ValueError(f"Not a number: {text!r}")

        digits = match.group("digits")
        if locale.grouping_mark:
            digits = digits.replace(locale.grouping_mark, "")
        value = float(digits.replace(locale.decimal_mark, "."))

        prefix = match.group("prefix").strip()
        if prefix.startswith("-") or prefix.endswith("-"):
            value = -value
        return value


class CharacterParser(ValueParser):
    column_type = ColumnType.CHARACTER

    def parse(
        self, text: str, locale: Locale = DEFAULT_LOCALE, format: str | None = None
    ) -> str:
        return str(text)


class FactorParser(ValueParser):
    """Categorical values, levels are validated by the column parser."""

    column_type = ColumnType.FACTOR

    def parse(
        self, text: str, locale: Locale = DEFAULT_LOCALE, format: str | None = None
    ) -> str:
        return text


class DateParser(ValueParser):
    column_type = ColumnType.DATE

    PATTERN = re.compile(r"([0-9]{4})-([0-9]{2})-([0-9]{2})")

    def parse(
        self, text: str, locale: Locale = DEFAULT_LOCALE, format: str | None = None
    ) -> datetime.date:
        format = format or locale.date_format
        if format is not None:
            return datetime.datetime.strptime(text, format).date()

        match = self.PATTERN.fullmatch(text)
        if match is None:
            raise ValueError(f"Not a date: {text!r}")
        year, month, day = (int(g) for g in match.groups())
        return datetime.date(year, month, day)


class TimeParser(ValueParser):
    column_type = ColumnType.TIME

    PATTERN = re.compile(
        r"(?P<hour>[0-9]{1,2}):(?P<minute>[0-9]{2})"
        r"(?::(?P<second>[0-9]{2})(?:\.(?P<fraction>[0-9]{1,6}))?)?"
        r"(?:\s*(?P<meridiem>[AaPp][Mm]))?"
    )

    def parse(
        self, text: str, locale: Locale = DEFAULT_LOCALE, format: str | None = None
    ) -> datetime.time:
        format = format or locale.time_format
        if format is not None:
            return datetime.datetime.strptime(text, format).time()

        match = self.PATTERN.fullmatch(text)
        if match is None:
            raise ValueError(f"Not a time: {text!r}")

        hour = int(match.group("hour"))
        meridiem = match.group("meridiem")
        if meridiem is not None:
            if not 1 <= hour <= 12:
                raise ValueError(f"Hour out of 12 hour clock range: {text!r}")
            hour = hour % 12 + (12 if meridiem.upper() == "PM" else 0)
        return datetime.time(
            hour,
            int(match.group("minute")),
            int(match.group("second") or 0),
            microseconds(match.group("fraction")),
        )


class DatetimeParser(ValueParser):
    """Dates with a time of the day.

    Values with a timezone offset are converted to UTC,
    all returned datetimes are naive and in UTC.

    >>> DatetimeParser().parse("2010-10-01T2010")
    datetime.datetime(2010, 10, 1, 20, 10)
    >>> DatetimeParser().parse("20101010")
    datetime.datetime(2010, 10, 10, 0, 0)
    """

    column_type = ColumnType.DATETIME

    PATTERN = re.compile(
        r"(?P<year>[0-9]{4})(?P<sep>-?)(?P<month>[0-9]{2})(?P=sep)(?P<day>[0-9]{2})"
        r"(?:[T ](?P<hour>[0-9]{2}):?(?P<minute>[0-9]{2})"
        r"(?::?(?P<second>[0-9]{2})(?:[.,](?P<fraction>[0-9]{1,9}))?)?"
        r"(?P<tz>Z|[+-][0-9]{2}(?::?[0-9]{2})?)?)?"
    )

    def parse(
        self, text: str, locale: Locale = DEFAULT_LOCALE, format: str | None = None
    ) -> datetime.datetime:
        if format is not None:
            return to_naive_utc(datetime.datetime.strptime(text, format))

        match = self.PATTERN.fullmatch(text)
        if match is None:
            raise ValueError(f"Not a datetime: {text!r}")

        value = datetime.datetime(
            int(match.group("year")),
            int(match.group("month")),
            int(match.group("day")),
            int(match.group("hour") or 0),
            int(match.group("minute") or 0),
            int(match.group("second") or 0),
            microseconds(match.group("fraction")),
        )
        tz = match.group("tz")
        if tz is not None:
            value = value.replace(tzinfo=parse_offset(tz))
        return to_naive_utc(value)


def microseconds(fraction: str | None) -> int:
    """Convert the digits of a fraction of second to microseconds."""
    if not fraction:
        return 0
    return int(fraction[:6].ljust(6, "0"))


def parse_offset(tz: str) -> datetime.timezone:
    """Convert ``Z``, ``+HH``, ``+HHMM`` or ``+HH:MM`` to a timezone."""
    if tz == "Z":
        return datetime.timezone.utc
    sign = -1 if tz[0] == "-" else 1
    digits = tz[1:].replace(":", "")
    hours = int(digits[:2])
    minutes = int(digits[2:] or 0)
    return datetime.timezone(sign * datetime.timedelta(hours=hours, minutes=minutes))


def to_naive_utc(value: datetime.datetime) -> datetime.datetime:
    """Convert aware datetimes to naive UTC ones, naive ones are left as they are.

    Raises :class:`ValueError` when the UTC value falls out of the
    supported range of years.
    """
    if value.tzinfo is None:
        return value
    try:
        return value.astimezone(datetime.timezone.utc).replace(tzinfo=None)
    except OverflowError as e:
        raise ValueError(f"Datetime out of range in UTC: {value.isoformat()}") from e


PARSERS: dict[ColumnType, ValueParser] = {
    parser.column_type: parser
    for parser in (
        LogicalParser(),
        IntegerParser(),
        DoubleParser(),
        NumberParser(),
        CharacterParser(),
        DateParser(),
        TimeParser(),
        DatetimeParser(),
        FactorParser(),
    )
}


def parser_for(column_type: ColumnType) -> ValueParser:
    """The :class:`ValueParser` for a concrete column type."""
    try:
        return PARSERS[column_type]
    except KeyError:
        raise ValueError(f"No parser for column type {column_type.value}") from None
