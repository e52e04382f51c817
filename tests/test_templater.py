"""Tests for placeholder substitution and literal escaping."""

import pytest

from analytics_mapping.processor import (
    QueryTemplater,
    UnsupportedParameterError,
    escape_value,
    find_placeholders,
    is_interval_literal,
    missing_parameters,
    substitute,
)


def test_string_quotes_are_doubled():
    result = substitute("SELECT * WHERE x = {{v}}", {"v": "O'Brien"})

    assert result == "SELECT * WHERE x = 'O''Brien'"


def test_interval_passes_through():
    sql = "SELECT * FROM t WHERE timestamp > NOW() - INTERVAL {{iv}}"
    result = substitute(sql, {"iv": "'7' DAY"})

    assert result.endswith("INTERVAL '7' DAY")


def test_integer_is_unquoted():
    assert substitute("LIMIT {{n}}", {"n": 10}) == "LIMIT 10"


def test_float_formatting():
    assert substitute("x > {{f}}", {"f": 1.5}) == "x > 1.5"
    assert substitute("x > {{f}}", {"f": 10.0}) == "x > 10"
    assert substitute("x > {{f}}", {"f": -0.25}) == "x > -0.25"


@pytest.mark.parametrize(
    "value",
    ["'15' MINUTE", "'1' second", "'30'   Hour", "'2' WEEK", "'6' MONTH", "'1' YEAR", "'10' Day"],
)
def test_interval_units(value):
    assert is_interval_literal(value)
    assert escape_value("iv", value) == value


@pytest.mark.parametrize(
    "value",
    [
        "7 DAY",
        "'7' DAYS",
        "'7' FORTNIGHT",
        "'7' DAY; DROP TABLE t",
        "'x' DAY",
        "'7'DAY",
        " '7' DAY",
        "'7' DAY\n",
        "'-7' DAY",
    ],
)
def test_near_intervals_are_quoted(value):
    assert not is_interval_literal(value)
    assert escape_value("iv", value) == "'" + value.replace("'", "''") + "'"


def test_injection_attempt_stays_inside_string():
    result = substitute("WHERE name = {{n}}", {"n": "x' OR '1'='1"})

    assert result == "WHERE name = 'x'' OR ''1''=''1'"


def test_every_occurrence_replaced():
    sql = "SELECT {{c}} FROM t WHERE {{c}} > 0 OR {{c}} < 0"

    assert substitute(sql, {"c": 3}) == "SELECT 3 FROM t WHERE 3 > 0 OR 3 < 0"


def test_multiple_parameters():
    sql = "WHERE blob1 = {{country}} AND double1 > {{min}} LIMIT {{limit}}"
    result = substitute(sql, {"country": "NZ", "min": 0.5, "limit": 100})

    assert result == "WHERE blob1 = 'NZ' AND double1 > 0.5 LIMIT 100"


def test_unknown_placeholder_left_untouched():
    result = substitute("WHERE a = {{a}} AND b = {{b}}", {"a": 1})

    assert result == "WHERE a = 1 AND b = {{b}}"


def test_substituted_value_is_not_rescanned():
    result = substitute("{{a}} {{b}}", {"a": "{{b}}", "b": 2})

    assert result == "'{{b}}' 2"


def test_names_are_matched_literally():
    result = substitute("x = {{a.b}} AND y = {{a+}}", {"a.b": 1, "a+": 2})

    assert result == "x = 1 AND y = 2"


def test_no_params_returns_text():
    assert substitute("SELECT {{x}}", {}) == "SELECT {{x}}"


def test_empty_string_value():
    assert substitute("x = {{v}}", {"v": ""}) == "x = ''"


@pytest.mark.parametrize("value", [True, None, [1], {"a": 1}])
def test_unsupported_types_raise(value):
    with pytest.raises(UnsupportedParameterError) as exc_info:
        QueryTemplater().substitute("x = {{v}}", {"v": value})
    assert "'v'" in str(exc_info.value)
    assert isinstance(exc_info.value, TypeError)


def test_non_finite_numbers_raise():
    with pytest.raises(ValueError):
        substitute("x = {{v}}", {"v": float("inf")})


def test_find_and_missing_placeholders():
    sql = "{{b}} {{a}} {{b}} {{c}}"

    assert find_placeholders(sql) == ["b", "a", "c"]
    assert missing_parameters(sql, {"a": 1}) == ["b", "c"]
