"""Conventions that change from place to place.

Numbers, dates and text are not written the same way
everywhere. In some countries ``1.000,50`` means one thousand
and fifty cents, in others it would be written ``1,000.50``.

The :class:`Locale` groups those conventions in a single
explicit configuration object that is passed to the type
inference and to the parsers. Nothing is auto detected:
the locale the data was written with must be known by the caller.
"""

from dataclasses import dataclass

__all__ = ("Locale", "DEFAULT_LOCALE")


@dataclass(frozen=True)
class Locale:
    """Locale configuration for parsing values.

    >>> Locale(decimal_mark=",", grouping_mark=".").is_default()
    False

    :param decimal_mark: Character separating the integer and decimal parts.
    :param grouping_mark: Character separating groups of thousands,
                          empty for none. By default it's ``.`` when the
                          decimal mark is ``,`` and ``,`` otherwise.
    :param encoding: Encoding of the source text when it's provided as bytes.
    :param date_format: ``strptime`` template for dates,
                        ``None`` for ISO ``YYYY-MM-DD``.
    :param time_format: ``strptime`` template for times,
                        ``None`` for ``HH:MM[:SS]`` with optional AM/PM.
    """

    decimal_mark: str = "."
    grouping_mark: str | None = None
    encoding: str = "utf-8"
    date_format: str | None = None
    time_format: str | None = None

    def __post_init__(self) -> None:
        if self.grouping_mark is None:
            object.__setattr__(
                self, "grouping_mark", "." if self.decimal_mark == "," else ","
            )
        if len(self.decimal_mark) != 1:
            raise ValueError(
                f"Decimal mark must be a single character, got {self.decimal_mark!r}"
            )
        if len(self.grouping_mark) > 1:
            raise ValueError(
                f"Grouping mark must be a single character, got {self.grouping_mark!r}"
            )
        if self.decimal_mark == self.grouping_mark:
            raise ValueError("Decimal mark and grouping mark must be different")
        if self.decimal_mark.isdigit() or self.grouping_mark.isdigit():
            raise ValueError("Decimal and grouping marks can't be digits")

    def is_default(self) -> bool:
        """If the numeric conventions are the default ones."""
        return (
            self.decimal_mark == DEFAULT_LOCALE.decimal_mark
            and self.grouping_mark == DEFAULT_LOCALE.grouping_mark
        )


DEFAULT_LOCALE = Locale()
