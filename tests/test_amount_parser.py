"""Tests for amount parsing."""

import pytest
from decimal import Decimal

from tagledger.utils.amount_parser import parse_amount, parse_positive_amount


@pytest.mark.parametrize(
    "text, expected",
    [
        ("123.45", Decimal("123.45")),
        ("-123.45", Decimal("-123.45")),
        ("$1,234.56", Decimal("1234.56")),
        ("Rs. 15,000", Decimal("15000")),
        ("rs 10", Decimal("10")),
        ("(50.00)", Decimal("-50.00")),
        ("€ 9.99", Decimal("9.99")),
    ],
)
def test_parse_amount(text, expected):
    """Test the accepted amount formats."""
    assert parse_amount(text) == expected


@pytest.mark.parametrize("text", ["", "   ", "abc", "NaN", "1.2.3"])
def test_parse_amount_invalid(text):
    """Test that unparseable input raises ValueError."""
    with pytest.raises(ValueError):
        parse_amount(text)


def test_parse_positive_amount():
    """Test that only amounts above zero are accepted."""
    assert parse_positive_amount("0.01") == Decimal("0.01")
    with pytest.raises(ValueError, match="must be positive"):
        parse_positive_amount("0")
    with pytest.raises(ValueError):
        parse_positive_amount("-5")


def test_parse_positive_amount_rounds_to_minor_units():
    """Test that amounts are rounded half-up to cents and sub-cent input is rejected."""
    assert parse_positive_amount("10.005") == Decimal("10.01")
    assert parse_positive_amount("0.005") == Decimal("0.01")
    with pytest.raises(ValueError, match="must be positive"):
        parse_positive_amount("0.004")
    with pytest.raises(ValueError):
        parse_positive_amount("1e40")
