import pytest

from flatpyground.reader.tokenize import MalformedSource, QuotedField, Tokenizer


def test_tokenizer_simple_records():
    tokens = Tokenizer("x,y,z\n1,2,3\n4,5,6\n").tokenize()

    assert tokens == [["x", "y", "z"], ["1", "2", "3"], ["4", "5", "6"]]


def test_tokenizer_without_final_newline():
    tokens = Tokenizer("x,y\n1,2").tokenize()

    assert tokens == [["x", "y"], ["1", "2"]]


def test_tokenizer_crlf_line_endings():
    tokens = Tokenizer("x,y\r\n1,2\r\n").tokenize()

    assert tokens == [["x", "y"], ["1", "2"]]


def test_tokenizer_quoted_delimiter():
    tokens = Tokenizer('"a,b",1\n').tokenize()

    assert tokens == [["a,b", "1"]]


def test_tokenizer_quoted_newline():
    tokens = Tokenizer('x,y\n"first\nsecond",2\n3,4\n').tokenize()

    assert tokens == [["x", "y"], ["first\nsecond", "2"], ["3", "4"]]


def test_tokenizer_escaped_quotes():
    tokens = Tokenizer('"say ""hello""",""""\n').tokenize()

    assert tokens == [['say "hello"', '"']]


def test_tokenizer_empty_fields_are_empty_strings():
    tokens = Tokenizer("a,,c\n,,\n").tokenize()

    assert tokens == [["a", "", "c"], ["", "", ""]]


def test_tokenizer_empty_quoted_field():
    tokens = Tokenizer('a,"",c\n').tokenize()

    assert tokens == [["a", "", "c"]]


def test_tokenizer_trailing_delimiter():
    tokens = Tokenizer("a,b,\n").tokenize()

    assert tokens == [["a", "b", ""]]


@pytest.mark.parametrize(
    "trim_ws, expected",
    [
        (True, [["a", "b", " c "]]),
        (False, [[" a", "b ", " c "]]),
    ],
)
def test_tokenizer_trim_whitespace(trim_ws, expected):
    tokens = Tokenizer(' a,b ," c "\n', trim_ws=trim_ws).tokenize()

    assert tokens == expected


def test_tokenizer_skip_lines():
    text = "The first line of metadata\nThe second line of metadata\nx,y,z\n1,2,3\n"
    tokens = Tokenizer(text, skip=2).tokenize()

    assert tokens == [["x", "y", "z"], ["1", "2", "3"]]


def test_tokenizer_skip_more_lines_than_available():
    tokens = Tokenizer("x,y\n", skip=5).tokenize()

    assert tokens == []


def test_tokenizer_comment_lines():
    text = "# A comment I want to skip\nx,y,z\n# another one\n1,2,3\n"
    tokens = Tokenizer(text, comment="#").tokenize()

    assert tokens == [["x", "y", "z"], ["1", "2", "3"]]


def test_tokenizer_comment_after_skip():
    text = "# skipped by skip\n# skipped by comment\nx\n1\n"
    tokens = Tokenizer(text, skip=1, comment="#").tokenize()

    assert tokens == [["x"], ["1"]]


def test_tokenizer_skips_empty_rows():
    tokens = Tokenizer("x,y\n\n1,2\n   \n3,4\n").tokenize()

    assert tokens == [["x", "y"], ["1", "2"], ["3", "4"]]


def test_tokenizer_keeps_empty_rows():
    tokens = Tokenizer("x\n\n1\n", skip_empty_rows=False).tokenize()

    assert tokens == [["x"], [""], ["1"]]


def test_tokenizer_custom_delimiter_and_quote():
    tokens = Tokenizer("a;'b;c'\n", delimiter=";", quote="'").tokenize()

    assert tokens == [["a", "b;c"]]


def test_tokenizer_tab_delimiter_keeps_empty_fields():
    tokens = Tokenizer("a\t\tc\n", delimiter="\t").tokenize()

    assert tokens == [["a", "", "c"]]


def test_tokenizer_text_after_closing_quote():
    tokens = Tokenizer('"a"b,c\n').tokenize()

    assert tokens == [["ab", "c"]]


def test_tokenizer_empty_text():
    assert Tokenizer("").tokenize() == []


def test_tokenizer_unterminated_quote():
    with pytest.raises(MalformedSource, match="Unterminated quoted field") as err:
        Tokenizer('x,y\n1,"never closed\n2,3\n').tokenize()

    assert err.value.line == 2


def test_tokenizer_streams_records():
    records = Tokenizer('x\n1\n"unterminated\n').records()

    assert next(records) == ["x"]
    assert next(records) == ["1"]
    with pytest.raises(MalformedSource):
        next(records)


def test_tokenizer_marks_quoted_fields():
    [record] = Tokenizer('"",NA,"NA",x\n').tokenize()

    assert record == ["", "NA", "NA", "x"]
    assert [isinstance(field, QuotedField) for field in record] == [
        True,
        False,
        True,
        False,
    ]
