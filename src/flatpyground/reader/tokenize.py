"""Split delimited text into records of string fields.

The tokenizer is the lowest level of the import process,
it knows nothing about headers, column types or missing values.
Given a text like::

    x,y,"a ""quoted"", value"
    1,2,3

it will produce the records::

    [["x", "y", 'a "quoted", value'], ["1", "2", "3"]]

The supported dialect follows RFC 4180 conventions:

- Fields are separated by a single delimiter character.
- A field can be enclosed in quote characters, in which case
  it can contain the delimiter and newlines.
- A doubled quote character inside a quoted field is a literal quote.
- Records are separated by ``\\n`` or ``\\r\\n``.

The tokenizer works as a state machine that moves through the text
looking for the next interesting character (delimiter, quote or newline).
Records are emitted as soon as they are complete, so the whole
text is never duplicated in memory as a list of lines.
"""

import logging
from typing import Iterator

__all__ = ("Tokenizer", "MalformedSource", "QuotedField")

log = logging.getLogger(__name__)


class MalformedSource(ValueError):
    """The source text can't be split into records.

    Raised when a quoted field is never closed before the
    end of the input or when the input bytes can't be decoded.
    """

    def __init__(self, message: str, line: int | None = None) -> None:
        """
        :param message: Description of the problem.
        :param line: The 1-based line where the problem started, if known.
        """
        if line is not None:
            message = f"{message} (line {line})"
        super().__init__(message)
        self.line = line


class QuotedField(str):
    """A field that was enclosed in quotes in the source.

    It behaves as a plain string, but missing markers
    don't apply to it, so ``""`` and ``"NA"`` are
    read back as the literal values they represent.
    """

    __slots__ = ()


class Tokenizer:
    """Tokenize delimited text into records of fields.

    >>> list(Tokenizer('"a,b",1\\n').records())
    [['a,b', '1']]
    """

    def __init__(
        self,
        text: str,
        delimiter: str = ",",
        quote: str = '"',
        skip: int = 0,
        comment: str | None = None,
        trim_ws: bool = True,
        skip_empty_rows: bool = True,
    ) -> None:
        """
        :param text: The text to tokenize.
        :param delimiter: The character separating fields.
        :param quote: The character used to quote fields.
        :param skip: How many physical lines to ignore at the start of the text.
        :param comment: Lines starting with this prefix are ignored.
        :param trim_ws: Strip leading and trailing whitespace from unquoted fields.
        :param skip_empty_rows: Ignore lines that contain no data.
        """
        self.text = text
        self.delimiter = delimiter
        self.quote = quote
        self.skip = skip
        self.comment = comment or None
        self.trim_ws = trim_ws
        self.skip_empty_rows = skip_empty_rows
        self.whitespace = "".join(c for c in " \t" if c != delimiter)

        self.pos = 0
        self.line = 1

    def tokenize(self) -> list[list[str]]:
        """Tokenize the whole text and return all the records."""
        return list(self.records())

    def records(self) -> Iterator[list[str]]:
        """Emit the records of the text one by one."""
        self.pos = 0
        self.line = 1
        self.skip_lines(self.skip)

        text_length = len(self.text)
        while self.pos < text_length:
            line_end = self.text.find("\n", self.pos)
            if line_end == -1:
                line_end = text_length
            physical_line = self.text[self.pos : line_end].rstrip("\r")
            if self.trim_ws:
                physical_line = physical_line.strip(self.whitespace)

            if self.comment is not None and physical_line.startswith(self.comment):
                log.debug("Skipping comment at line %d", self.line)
                self.skip_lines(1)
                continue

            if self.skip_empty_rows and not physical_line:
                self.skip_lines(1)
                continue

            yield self.read_record()

    def skip_lines(self, count: int) -> None:
        """Move past the next ``count`` physical lines."""
        for _ in range(count):
            line_end = self.text.find("\n", self.pos)
            if line_end == -1:
                self.pos = len(self.text)
                return
            self.pos = line_end + 1
            self.line += 1

    def read_record(self) -> list[str]:
        """Read all the fields up to the end of the current record.

        Moves the tokenizer position to the beginning of the next record.
        """
        fields = []
        while True:
            fields.append(self.read_field())
            if self.pos >= len(self.text):
                break

            char = self.text[self.pos]
            if char == self.delimiter:
                self.pos += 1
                continue

            # Only a newline can stop a field other than the delimiter.
            self.pos += 1
            self.line += 1
            break
        return fields

    def read_field(self) -> str:
        """Read the field starting at the current position.

        Stops on the delimiter or newline that terminates the field,
        without consuming it.
        """
        if self.trim_ws:
            self.skip_whitespace()

        if self.text.startswith(self.quote, self.pos):
            return self.read_quoted_field()

        end = self.find_field_end(self.pos)
        value = self.text[self.pos : end]
        self.pos = end
        if value.endswith("\r") and self.text.startswith("\n", end):
            value = value[:-1]
        if self.trim_ws:
            value = value.strip(self.whitespace)
        return value

    def read_quoted_field(self) -> QuotedField:
        """Read a field enclosed in quotes.

        Doubled quotes are converted to a single literal quote,
        any text between the closing quote and the end of the field
        is appended as is to the value.
        """
        start_line = self.line
        self.pos += len(self.quote)

        chunks = []
        while True:
            closing = self.text.find(self.quote, self.pos)
            if closing == -1:
                raise MalformedSource("Unterminated quoted field", line=start_line)
            chunk = self.text[self.pos : closing]
            self.line += chunk.count("\n")
            chunks.append(chunk)
            self.pos = closing + len(self.quote)
            if self.text.startswith(self.quote, self.pos):
                # Escaped quote, keep going.
                chunks.append(self.quote)
                self.pos += len(self.quote)
                continue
            break

        end = self.find_field_end(self.pos)
        trailing = self.text[self.pos : end].rstrip("\r")
        if self.trim_ws:
            trailing = trailing.strip(self.whitespace)
        if trailing:
            log.debug("Text after closing quote at line %d: %r", self.line, trailing)
            chunks.append(trailing)
        self.pos = end
        return QuotedField("".join(chunks))

    def find_field_end(self, start: int) -> int:
        """Position of the delimiter or newline that ends the field at ``start``."""
        ends = [
            idx
            for idx in (
                self.text.find(self.delimiter, start),
                self.text.find("\n", start),
            )
            if idx != -1
        ]
        return min(ends) if ends else len(self.text)

    def skip_whitespace(self) -> None:
        """Move past any whitespace at the current position."""
        text_length = len(self.text)
        while self.pos < text_length and self.text[self.pos] in self.whitespace:
            self.pos += 1
