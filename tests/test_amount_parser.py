"""Tests for amount parsing and fixed precision."""

import pytest
from decimal import Decimal

from finkeep.utils.amount_parser import parse_amount, parse_decimal
from finkeep.utils.precision import quantize_amount, quantize_price, quantize_quantity


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("123.45", Decimal("123.45")),
        ("$123.45", Decimal("123.45")),
        ("1,234.56", Decimal("1234.56")),
        ("₹ 1,234.56", Decimal("1234.56")),
        ("-5", Decimal("-5")),
    ],
)
def test_parse_decimal(raw, expected):
    assert parse_decimal(raw) == expected


@pytest.mark.parametrize("raw", ["", "   ", "twelve"])
def test_parse_decimal_invalid(raw):
    with pytest.raises(ValueError):
        parse_decimal(raw)


@pytest.mark.parametrize("raw", ["0", "-10.00"])
def test_parse_amount_must_be_positive(raw):
    with pytest.raises(ValueError, match="must be positive"):
        parse_amount(raw)


def test_rounding_is_half_up():
    assert quantize_amount(Decimal("2.345")) == Decimal("2.35")
    assert quantize_amount(Decimal("2.344")) == Decimal("2.34")
    assert str(quantize_quantity("0.1234565")) == "0.123457"
    assert str(quantize_price(Decimal("99.99995"))) == "100.0000"
