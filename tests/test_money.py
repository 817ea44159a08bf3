"""
Tests for money utilities
"""

from decimal import Decimal

import pytest

from storefront.services.money import format_money, parse_decimal, round_money, to_decimal, to_float


class TestToDecimal:

    def test_conversions(self):
        assert to_decimal("19.99") == Decimal("19.99")
        assert to_decimal(5) == Decimal("5")
        assert to_decimal(0.1) == Decimal("0.1")

    def test_invalid_is_zero(self):
        assert to_decimal(None) == Decimal("0")
        assert to_decimal("abc") == Decimal("0")


class TestParseDecimal:

    def test_valid(self):
        assert parse_decimal("25.00") == Decimal("25.00")
        assert parse_decimal(Decimal("1.5")) == Decimal("1.5")
        assert parse_decimal(2.2) == Decimal("2.2")

    @pytest.mark.parametrize("value", [None, True, "abc", "NaN", "Infinity", [], {}])
    def test_invalid(self, value):
        with pytest.raises(ValueError):
            parse_decimal(value)


class TestRounding:

    def test_round_half_up(self):
        assert round_money("2.345") == Decimal("2.35")
        assert round_money("2.5", to_int=True) == Decimal("3")

    def test_to_float(self):
        assert to_float(Decimal("12.50")) == 12.5


class TestFormatMoney:

    @pytest.mark.parametrize("value,currency,expected", [
        (Decimal("1234.5"), "USD", "$1,234.50"),
        (Decimal("0"), "USD", "$0.00"),
        (Decimal("12"), "GBP", "£12.00"),
        (Decimal("1500"), "JPY", "¥1,500"),
        (Decimal("12"), "EUR", "12.00 €"),
        (Decimal("12"), "CHF", "12.00 CHF"),
        (Decimal("3.1"), "usd", "$3.10"),
    ])
    def test_format(self, value, currency, expected):
        assert format_money(value, currency) == expected

    def test_missing_currency_defaults_to_usd(self):
        assert format_money(Decimal("5"), "") == "$5.00"
