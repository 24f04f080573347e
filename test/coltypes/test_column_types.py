import logging

import pyarrow as pa
import pytest

from flatpyground.coltypes import (
    ColumnSpec,
    ColumnType,
    ColumnTypes,
    Locale,
    col_character,
    col_date,
    col_factor,
    col_guess,
    col_integer,
    col_skip,
    cols,
)


@pytest.mark.parametrize(
    "column_type, arrow_type",
    [
        (ColumnType.LOGICAL, pa.bool_()),
        (ColumnType.INTEGER, pa.int64()),
        (ColumnType.DOUBLE, pa.float64()),
        (ColumnType.NUMBER, pa.float64()),
        (ColumnType.CHARACTER, pa.string()),
        (ColumnType.DATE, pa.date32()),
        (ColumnType.TIME, pa.time64("us")),
        (ColumnType.DATETIME, pa.timestamp("us")),
        (ColumnType.FACTOR, pa.dictionary(pa.int32(), pa.string())),
    ],
)
def test_arrow_types(column_type, arrow_type):
    assert column_type.arrow_type == arrow_type


def test_declaration_only_types_have_no_storage():
    with pytest.raises(ValueError, match="has no storage type"):
        ColumnType.GUESS.arrow_type


def test_column_spec_accepts_type_names():
    assert ColumnSpec("x", "integer").type is ColumnType.INTEGER


def test_column_spec_unknown_type():
    with pytest.raises(ValueError):
        ColumnSpec("x", "complex")


def test_column_spec_validation():
    with pytest.raises(ValueError, match="Only factor columns can have levels"):
        ColumnSpec("x", ColumnType.CHARACTER, levels=["a"])
    with pytest.raises(ValueError, match="doesn't accept a format"):
        ColumnSpec("x", ColumnType.INTEGER, format="%d")


def test_column_spec_bind():
    spec = col_date("%d/%m/%Y").bind("when")

    assert spec == ColumnSpec("when", ColumnType.DATE, format="%d/%m/%Y")
    assert str(spec) == "ColumnSpec(when: date, format='%d/%m/%Y')"


def test_col_factor_levels():
    assert col_factor(["apple", "banana"]).levels == ("apple", "banana")
    assert col_factor().levels is None


def test_cols_defaults_to_guess():
    col_types = cols(x=col_integer())

    assert col_types.for_column("x").type is ColumnType.INTEGER
    assert col_types.for_column("y") == ColumnSpec("y", ColumnType.GUESS)
    assert col_types.needs_inference(["x", "y", "z"]) == ["y", "z"]


def test_cols_default_declaration():
    col_types = cols(default=col_character())

    assert col_types.needs_inference(["x", "y"]) == []
    assert col_types.for_column("y").type is ColumnType.CHARACTER


@pytest.mark.parametrize(
    "value, named, default",
    [
        (None, {}, ColumnType.GUESS),
        ({"x": "double"}, {"x": ColumnType.DOUBLE}, ColumnType.GUESS),
        (ColumnType.CHARACTER, {}, ColumnType.CHARACTER),
        ("logical", {}, ColumnType.LOGICAL),
        (col_skip(), {}, ColumnType.SKIP),
    ],
)
def test_column_types_from_value(value, named, default):
    col_types = ColumnTypes.from_value(value)

    assert {name: spec.type for name, spec in col_types.named.items()} == named
    assert col_types.default.type is default


def test_column_types_from_value_keeps_instances():
    col_types = cols(x=col_guess())

    assert ColumnTypes.from_value(col_types) is col_types


def test_resolve_prefers_declared_types():
    col_types = cols(x=col_character())
    inferred = {"y": ColumnSpec("y", ColumnType.INTEGER)}

    specs = col_types.resolve(["x", "y"], inferred)

    assert specs == [
        ColumnSpec("x", ColumnType.CHARACTER),
        ColumnSpec("y", ColumnType.INTEGER),
    ]


def test_resolve_warns_on_unknown_columns(caplog):
    col_types = cols(nope=col_integer())

    with caplog.at_level(logging.WARNING, logger="flatpyground.coltypes.base"):
        specs = col_types.resolve(["x"], {"x": ColumnSpec("x", ColumnType.DOUBLE)})

    assert specs == [ColumnSpec("x", ColumnType.DOUBLE)]
    assert "unknown columns ignored: ['nope']" in caplog.text


def test_column_types_str():
    assert str(cols(x=col_integer())) == "ColumnTypes(x=integer, default=guess)"


@pytest.mark.parametrize(
    "kwargs, message",
    [
        ({"decimal_mark": ",", "grouping_mark": ","}, "must be different"),
        ({"decimal_mark": ""}, "Decimal mark must be a single character"),
        ({"grouping_mark": "::"}, "Grouping mark must be a single character"),
        ({"decimal_mark": "1"}, "can't be digits"),
    ],
)
def test_locale_validation(kwargs, message):
    with pytest.raises(ValueError, match=message):
        Locale(**kwargs)


def test_locale_is_default():
    assert Locale().is_default()
    assert Locale(encoding="latin-1").is_default()
    assert not Locale(decimal_mark=",", grouping_mark=".").is_default()


def test_locale_default_grouping_mark():
    assert Locale().grouping_mark == ","
    assert Locale(decimal_mark=",").grouping_mark == "."
    assert Locale(decimal_mark=",", grouping_mark="").grouping_mark == ""
    assert Locale(decimal_mark=",", grouping_mark=" ").grouping_mark == " "
