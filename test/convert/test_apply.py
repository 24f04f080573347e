import datetime

import pyarrow as pa
import pytest

from flatpyground.coltypes import (
    ColumnSpec,
    ColumnType,
    Locale,
    col_factor,
    col_integer,
    col_skip,
    infer,
)
from flatpyground.convert import apply, parse_column
from flatpyground.problems import ProblemKind, ProblemRecord, ProblemsCollector
from flatpyground.reader import RawTable, ReadOptions, parse


def test_apply_inferred_types():
    raw = parse("x,y,z\n1,2,3\n4,5,6\n")

    table, problems = apply(raw, infer(raw))

    assert table.column_names == ["x", "y", "z"]
    assert all(t is ColumnType.INTEGER for t in table.column_types.values())
    assert [table.column(n).to_pylist() for n in "xyz"] == [[1, 4], [2, 5], [3, 6]]
    assert len(problems) == 0
    assert problems is table.problems


def test_apply_declared_type_failure():
    raw = parse("x,y,z\n1,2,3\nabc,5,6\n")
    specs = [
        ColumnSpec("x", ColumnType.INTEGER),
        ColumnSpec("y", ColumnType.INTEGER),
        ColumnSpec("z", ColumnType.INTEGER),
    ]

    table, problems = apply(raw, specs)

    assert table.column("x").to_pylist() == [1, None]
    assert len(problems) == 1
    problem = problems[0]
    assert (problem.row, problem.column, problem.raw, problem.expected) == (
        1,
        "x",
        "abc",
        "integer",
    )
    assert problem.kind is ProblemKind.CELL_PARSE_FAILURE


def test_apply_declared_types_win_over_inference():
    raw = parse("x\n1\n2\n")

    table, _ = apply(raw, [ColumnSpec("x", ColumnType.CHARACTER)])

    assert table.column("x").to_pylist() == ["1", "2"]


def test_apply_never_stores_missing_markers():
    raw = parse("x,y\nNA,\n.,b\n")

    table, problems = apply(
        raw,
        [ColumnSpec("x", ColumnType.CHARACTER), ColumnSpec("y", ColumnType.CHARACTER)],
        missing_markers=["NA", "", "."],
    )

    assert table.column("x").to_pylist() == [None, None]
    assert table.column("y").to_pylist() == [None, "b"]
    assert not problems


def test_apply_empty_string_is_a_value_when_not_a_marker():
    raw = parse("x,y\n,a\n")

    table, _ = apply(raw, infer(raw, missing_markers=["NA"]), missing_markers=["NA"])

    assert table.column("x").to_pylist() == [""]


def test_apply_unnamed_specs_are_bound_by_position():
    raw = parse("x,y\n1,2\n")

    table, _ = apply(raw, [col_integer(), col_integer()])

    assert table.column_names == ["x", "y"]


def test_apply_skip_columns():
    raw = parse("x,y\n1,2\n")

    table, _ = apply(raw, [col_skip(), col_integer()])

    assert table.column_names == ["y"]


def test_apply_factor_collects_levels():
    raw = parse("fruit\nbanana\napple\nbanana\n")

    table, _ = apply(raw, [col_factor()])

    assert table.spec("fruit").levels == ("banana", "apple")
    assert table.column("fruit").to_pylist() == ["banana", "apple", "banana"]


def test_apply_factor_unexpected_level():
    raw = parse("fruit\napple\nbanana\napple\nbananana\n")

    table, problems = apply(raw, [col_factor(["apple", "banana"])])

    assert table.column("fruit").to_pylist() == ["apple", "banana", "apple", None]
    assert table.column("fruit").dictionary.to_pylist() == ["apple", "banana"]
    assert problems[0].row == 3
    assert problems[0].raw == "bananana"


def test_apply_dates_and_times():
    raw = parse("d,t,dt\n2010-10-01,20:10,2010-10-01T2010\n")

    table, _ = apply(raw, infer(raw))

    assert table.column_types == {
        "d": ColumnType.DATE,
        "t": ColumnType.TIME,
        "dt": ColumnType.DATETIME,
    }
    assert table.to_pylist() == [
        {
            "d": datetime.date(2010, 10, 1),
            "t": datetime.time(20, 10),
            "dt": datetime.datetime(2010, 10, 1, 20, 10),
        }
    ]


def test_apply_problem_order():
    raw = parse("x,y\n1\nabc,2\n")
    advisories = ProblemsCollector([ProblemRecord.ambiguous_inference("y", 1000)])

    _, problems = apply(
        raw,
        [ColumnSpec("x", ColumnType.INTEGER), ColumnSpec("y", ColumnType.INTEGER)],
        problems=advisories,
    )

    assert [p.kind for p in problems] == [
        ProblemKind.RAGGED_ROW,
        ProblemKind.AMBIGUOUS_INFERENCE,
        ProblemKind.CELL_PARSE_FAILURE,
    ]


def test_apply_does_not_deduplicate_problems():
    raw = parse("x\nabc\nabc\n")

    _, problems = apply(raw, [col_integer()])

    assert problems.count == 2
    assert problems.by_column() == {"x": 2}


def test_apply_column_locale():
    raw = parse('price\n"1,5"\n')
    spec = ColumnSpec("price", ColumnType.DOUBLE, locale=Locale(decimal_mark=",", grouping_mark="."))

    table, problems = apply(raw, [spec])

    assert table.column("price").to_pylist() == [1.5]
    assert not problems


@pytest.mark.parametrize(
    "specs, message",
    [
        ([col_integer()], "1 column specifications for 2 columns"),
        ([ColumnSpec("a", "integer"), col_integer()], "provided for column x"),
        ([ColumnSpec(None, "guess"), col_integer()], "must be inferred"),
    ],
)
def test_apply_invalid_specs(specs, message):
    raw = parse("x,y\n1,2\n")

    with pytest.raises(ValueError, match=message):
        apply(raw, specs)


def test_parse_column_returns_arrow_array():
    problems = ProblemsCollector()

    array = parse_column(
        ["1.5", "x", None], ColumnSpec("v", ColumnType.DOUBLE), problems=problems
    )

    assert array.type == pa.float64()
    assert array.to_pylist() == [1.5, None, None]
    assert [p.row for p in problems] == [1]


def test_apply_empty_table():
    raw = RawTable(["x"], [])

    table, problems = apply(raw, [ColumnSpec("x", ColumnType.CHARACTER)])

    assert table.num_rows == 0
    assert table.column("x").type == pa.string()
    assert not problems


def test_apply_rows_match_source_when_ragged_rows_dropped():
    raw = parse("x,y\n1,a\n2\nabc,b\n", ReadOptions(ragged="drop"))

    table, problems = apply(raw, [col_integer(), ColumnSpec("y", ColumnType.CHARACTER)])

    assert table.column("x").to_pylist() == [1, None]
    assert [(p.row, p.kind) for p in problems] == [
        (1, ProblemKind.RAGGED_ROW),
        (2, ProblemKind.CELL_PARSE_FAILURE),
    ]


def test_apply_quoted_values_are_not_missing():
    raw = parse('x,y\n"",1\n"NA",2\nNA,3\n')

    table, problems = apply(
        raw, [ColumnSpec("x", ColumnType.CHARACTER), col_integer()]
    )

    assert table.column("x").to_pylist() == ["", "NA", None]
    assert not problems


def test_parse_column_decodes_bytes():
    spec = ColumnSpec("name", ColumnType.CHARACTER)
    collector = ProblemsCollector()

    array = parse_column(
        [b"El Ni\xf1o", None, b"NA"],
        spec,
        locale=Locale(encoding="latin-1"),
        problems=collector,
    )

    assert array.to_pylist() == ["El Niño", None, None]
    assert not collector


def test_parse_column_undecodable_bytes():
    spec = ColumnSpec("name", ColumnType.CHARACTER)
    collector = ProblemsCollector()

    array = parse_column([b"ok", b"El Ni\xf1o"], spec, problems=collector)

    assert array.to_pylist() == ["ok", None]
    [problem] = collector
    assert problem.row == 1
    assert problem.kind is ProblemKind.CELL_PARSE_FAILURE
    assert problem.raw == "El Ni\\xf1o"
    assert "can't be decoded as utf-8" in problem.reason


def test_parse_column_datetime_out_of_range():
    collector = ProblemsCollector()

    array = parse_column(
        ["9999-12-31T23:30:00-01:00", "2010-10-01T20:10"],
        ColumnSpec("when", ColumnType.DATETIME),
        problems=collector,
    )

    assert array.to_pylist() == [None, datetime.datetime(2010, 10, 1, 20, 10)]
    assert [(p.row, p.raw) for p in collector] == [(0, "9999-12-31T23:30:00-01:00")]
