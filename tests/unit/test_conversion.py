from __future__ import annotations

from datetime import date, datetime, time
from decimal import Decimal

import pytest

from recordsheet.models.conversion import (
    ConversionError,
    UnsupportedFieldTypeError,
    format_value,
    parser_for,
)


def test_int_parser_accepts_plain_and_integral_float_text():
    parse = parser_for("qty", int, nullable=False)
    assert parse("12") == 12
    assert parse(" 7 ") == 7
    assert parse("12.0") == 12


@pytest.mark.parametrize("text", ["12.5", "abc", "", "NaN"])
def test_int_parser_rejects_non_integers(text):
    parse = parser_for("qty", int, nullable=False)
    with pytest.raises(ConversionError) as e:
        parse(text)
    assert e.value.field == "qty"
    assert e.value.target is int


def test_bool_parser():
    parse = parser_for("paid", bool, nullable=False)
    assert parse("True") is True
    assert parse("false") is False
    assert parse("1") is True
    with pytest.raises(ConversionError):
        parse("yes")


def test_date_and_datetime_parsers():
    assert parser_for("d", date, False)("2024-03-01") == date(2024, 3, 1)
    assert parser_for("d", date, False)("2024-03-01 00:00:00") == date(2024, 3, 1)
    assert parser_for("dt", datetime, False)("2024-03-01 10:30:00") == datetime(2024, 3, 1, 10, 30)
    assert parser_for("t", time, False)("08:15:00") == time(8, 15)


def test_decimal_and_float_parsers():
    assert parser_for("amount", Decimal, False)("19.99") == Decimal("19.99")
    assert parser_for("value", float, False)("2.5") == 2.5
    with pytest.raises(ConversionError):
        parser_for("amount", Decimal, False)("1,5")


def test_nullable_empty_text_is_none():
    assert parser_for("battery", int, nullable=True)("") is None
    assert parser_for("note", str, nullable=True)("") is None
    assert parser_for("battery", int, nullable=True)("80") == 80


def test_non_nullable_empty_text():
    assert parser_for("name", str, nullable=False)("") == ""
    with pytest.raises(ConversionError):
        parser_for("qty", int, nullable=False)("")


def test_unsupported_type():
    with pytest.raises(UnsupportedFieldTypeError):
        parser_for("tags", list, nullable=False)


def test_conversion_error_position():
    err = ConversionError("qty", "x", int).at(row=5, column=2)
    assert err.row == 5 and err.column == 2
    assert "row=5 column=2" in str(err)


def test_format_value():
    assert format_value(None) is None
    assert format_value(True) == "True"
    assert format_value(42) == "42"
    assert format_value(Decimal("1.50")) == "1.50"
    assert format_value(date(2024, 3, 1)) == "2024-03-01"
    assert format_value(datetime(2024, 3, 1, 10, 30)) == "2024-03-01 10:30:00"
    assert format_value(time(8, 15)) == "08:15:00"
    assert format_value("") == ""
