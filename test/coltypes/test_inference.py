import pytest

from flatpyground.coltypes import ColumnSpec, ColumnType, Locale, guess_type, infer
from flatpyground.coltypes.inference import candidate_types
from flatpyground.problems import ProblemKind, ProblemsCollector, Severity
from flatpyground.reader import RawTable, parse

EUROPEAN = Locale(decimal_mark=",", grouping_mark=".")


@pytest.mark.parametrize(
    "values, expected",
    [
        (["TRUE", "F", "t"], ColumnType.LOGICAL),
        (["1", "-2", "+3"], ColumnType.INTEGER),
        (["1", "2.5"], ColumnType.DOUBLE),
        (["1e10", "3"], ColumnType.DOUBLE),
        (["2010-01-01", "1979-10-14"], ColumnType.DATE),
        (["20:10:01", "01:10 am"], ColumnType.TIME),
        (["2010-10-01T20:10", "2010-10-02"], ColumnType.DATETIME),
        (["1", "abc"], ColumnType.CHARACTER),
        (["$100", "20%"], ColumnType.CHARACTER),
        (["1", "NA", ""], ColumnType.INTEGER),
    ],
)
def test_guess_type(values, expected):
    assert guess_type(values) is expected


def test_guess_type_no_evidence():
    assert guess_type(["NA", "", None]) is None


def test_guess_type_custom_missing_markers():
    assert guess_type(["1", "."], missing_markers=["."]) is ColumnType.INTEGER
    assert guess_type(["1", "NA"], missing_markers=["."]) is ColumnType.CHARACTER


def test_guess_type_number_only_with_non_default_locale():
    assert guess_type(["1.000,50", "20%"]) is ColumnType.CHARACTER
    assert guess_type(["1.000,50", "20%"], locale=EUROPEAN) is ColumnType.NUMBER


def test_guess_type_integers_stay_integers_with_locale():
    assert guess_type(["1", "2"], locale=EUROPEAN) is ColumnType.INTEGER


def test_candidate_types_order():
    assert candidate_types() == [
        ColumnType.LOGICAL,
        ColumnType.INTEGER,
        ColumnType.DOUBLE,
        ColumnType.DATE,
        ColumnType.TIME,
        ColumnType.DATETIME,
    ]
    assert candidate_types(EUROPEAN).index(ColumnType.NUMBER) == 2


def test_infer_columns():
    raw = parse("x,y,z\n1,2.5,a\n4,5,b\n")

    specs = infer(raw)

    assert specs == [
        ColumnSpec("x", ColumnType.INTEGER),
        ColumnSpec("y", ColumnType.DOUBLE),
        ColumnSpec("z", ColumnType.CHARACTER),
    ]


def test_infer_only_looks_at_sample():
    raw = RawTable(["x"], [["1"], ["2"], ["2.5"]])

    assert infer(raw, sample_size=2)[0].type is ColumnType.INTEGER
    assert infer(raw, sample_size=3)[0].type is ColumnType.DOUBLE


def test_infer_all_missing_is_ambiguous():
    raw = RawTable(["x", "y"], [["NA", "1"], ["", "2"]])
    problems = ProblemsCollector()

    specs = infer(raw, problems=problems)

    assert specs[0].type is ColumnType.CHARACTER
    assert specs[1].type is ColumnType.INTEGER
    assert len(problems) == 1
    assert problems[0].column == "x"
    assert problems[0].kind is ProblemKind.AMBIGUOUS_INFERENCE
    assert problems[0].severity is Severity.INFO


def test_infer_padded_values_are_missing():
    raw = parse("x,y\n1\n2\n")

    specs = infer(raw)

    assert specs[1].type is ColumnType.CHARACTER


def test_infer_selected_columns():
    raw = parse("x,y,z\n1,2,3\n")

    specs = infer(raw, columns=["z", "x"])

    assert [s.name for s in specs] == ["x", "z"]


def test_infer_invalid_sample_size():
    with pytest.raises(ValueError, match="Sample size must be positive"):
        infer(parse("x\n1\n"), sample_size=0)
