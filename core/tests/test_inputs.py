from datetime import date, datetime
from decimal import Decimal

import pytest

from core.exceptions import ValidationFailed
from core.utils.dates import parse_calendar_date
from core.utils.inputs import clean_amount, clean_date, clean_reason


@pytest.mark.parametrize("value, expected", [
    ("1000", Decimal("1000.00")),
    ("1000,5", Decimal("1000.50")),
    (250, Decimal("250.00")),
    (Decimal("0.015"), Decimal("0.02")),
])
def test_clean_amount(value, expected):
    assert clean_amount(value) == expected


@pytest.mark.parametrize("value", [None, "", "  ", "0", "-10", "abc", "NaN", "Infinity", "0.001"])
def test_clean_amount_refuses(value):
    with pytest.raises(ValidationFailed):
        clean_amount(value)


@pytest.mark.parametrize("value", ["1e30", "12345678901", "9999999999.995"])
def test_clean_amount_refuses_values_beyond_column_capacity(value):
    with pytest.raises(ValidationFailed):
        clean_amount(value)


def test_clean_amount_accepts_column_maximum():
    assert clean_amount("9999999999.99") == Decimal("9999999999.99")


def test_parse_calendar_date_keeps_calendar_components():
    assert parse_calendar_date("2024-06-15") == date(2024, 6, 15)
    assert parse_calendar_date("2024-06-15T23:30:00-03:00") == date(2024, 6, 15)
    assert parse_calendar_date(datetime(2024, 12, 31, 23, 59)) == date(2024, 12, 31)
    assert parse_calendar_date(date(2024, 1, 1)) == date(2024, 1, 1)


@pytest.mark.parametrize("value", ["15/06/2024", "2024-02-30", "", 20240615])
def test_parse_calendar_date_refuses(value):
    with pytest.raises(ValueError):
        parse_calendar_date(value)


def test_clean_date_and_reason():
    assert clean_date("2024-06-15") == date(2024, 6, 15)
    with pytest.raises(ValidationFailed):
        clean_date(None)
    with pytest.raises(ValidationFailed):
        clean_date("amanhã")
    assert clean_reason("  duplicada ") == "duplicada"
    with pytest.raises(ValidationFailed):
        clean_reason(" \n\t ")
