"""Tests for cell parsing utilities."""

from datetime import date, datetime
from decimal import Decimal

import pytest

from ledgergrid.utils import (
    coerce_bool,
    column_to_letter,
    letter_to_column,
    month_bounds,
    parse_amount,
    parse_date,
)


@pytest.mark.parametrize(
    "value, expected",
    [
        ("2024-01-15", date(2024, 1, 15)),
        ("January 15, 2024", date(2024, 1, 15)),
        (datetime(2024, 1, 15, 9, 30), date(2024, 1, 15)),
        (date(2024, 1, 15), date(2024, 1, 15)),
    ],
)
def test_parse_date(value, expected):
    assert parse_date(value) == expected


@pytest.mark.parametrize("value", ["", "not a date"])
def test_parse_date_invalid(value):
    with pytest.raises(ValueError):
        parse_date(value)


def test_month_bounds():
    assert month_bounds(2024, 2) == (date(2024, 2, 1), date(2024, 2, 29))
    assert month_bounds(2023, 12) == (date(2023, 12, 1), date(2023, 12, 31))


@pytest.mark.parametrize(
    "value, expected",
    [
        ("-50", Decimal("-50")),
        ("$1,234.56", Decimal("1234.56")),
        ("(12.50)", Decimal("-12.50")),
        ("-€3", Decimal("-3")),
        (2000, Decimal("2000")),
        (1.5, Decimal("1.5")),
    ],
)
def test_parse_amount(value, expected):
    assert parse_amount(value) == expected


@pytest.mark.parametrize("value", ["", "abc", True])
def test_parse_amount_invalid(value):
    with pytest.raises(ValueError):
        parse_amount(value)


def test_column_letters():
    assert column_to_letter(1) == "A"
    assert column_to_letter(18) == "R"
    assert column_to_letter(27) == "AA"
    assert letter_to_column("t") == 20
    assert letter_to_column(column_to_letter(703)) == 703
    with pytest.raises(ValueError):
        column_to_letter(0)


@pytest.mark.parametrize(
    "value, expected",
    [
        (True, True),
        ("TRUE", True),
        (" 1 ", True),
        (1, True),
        ("false", False),
        ("0", False),
        (0, False),
        ("yes", False),
        (None, False),
        (2, False),
    ],
)
def test_coerce_bool(value, expected):
    assert coerce_bool(value) is expected


def test_coerce_bool_default():
    assert coerce_bool("maybe", default=True) is True
    assert coerce_bool(False, default=True) is False
