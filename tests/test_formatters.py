"""Tests for money, percent, and number formatting."""

from __future__ import annotations

from decimal import Decimal

import pytest

from formatters import (
    AMOUNT_PLACEHOLDER,
    MISSING_AMOUNT,
    format_amount_or_placeholder,
    format_cents,
    format_currency,
    format_currency_strict,
    format_decimal,
    format_number,
    format_percent,
    format_signed_currency,
    group_thousands,
    round_half_up,
)


class TestFormatCurrency:
    """Tests for formatters.format_currency()."""

    def test_groups_millions(self):
        assert format_currency(1234567) == "$1,234,567"

    def test_zero_is_missing(self):
        assert format_currency(0) == "---"
        assert format_currency(0.0) == MISSING_AMOUNT

    def test_none_is_missing(self):
        assert format_currency(None) == "---"

    def test_no_spurious_separator(self):
        assert format_currency(999) == "$999"
        assert format_currency(100000) == "$100,000"

    def test_rounds_to_whole_dollars(self):
        assert format_currency(1499.5) == "$1,500"
        assert format_currency(1499.49) == "$1,499"

    def test_sub_dollar_rounds_to_missing(self):
        assert format_currency(0.4) == "---"

    def test_negative(self):
        assert format_currency(-2500) == "-$2,500"

    def test_numeric_string(self):
        assert format_currency("1500") == "$1,500"

    def test_garbage_is_missing(self):
        assert format_currency("abc") == "---"
        assert format_currency(True) == "---"


class TestCurrencyVariants:
    def test_strict_shows_real_zero(self):
        assert format_currency_strict(0) == "$0"
        assert format_currency_strict(None) == "---"
        assert format_currency_strict(1500) == "$1,500"

    def test_cents(self):
        assert format_cents(1234.5) == "$1,234.50"
        assert format_cents(0) == "$0.00"
        assert format_cents(None) == "---"
        assert format_cents(-3.456) == "-$3.46"

    def test_placeholder_for_missing(self):
        assert format_amount_or_placeholder(0) == AMOUNT_PLACEHOLDER
        assert format_amount_or_placeholder(None) == "[Amount]"
        assert format_amount_or_placeholder(1500) == "$1,500"

    @pytest.mark.parametrize("value,expected", [
        (15000, "+$15,000"),
        (-10000, "-$10,000"),
        (0, "$0"),
        (None, "$0"),
    ])
    def test_signed(self, value, expected):
        assert format_signed_currency(value) == expected


class TestFormatPercent:
    """Tests for formatters.format_percent()."""

    def test_rounds_to_precision(self):
        assert format_percent(7.456, 2) == "7.46%"

    def test_keeps_trailing_zero(self):
        assert format_percent(7.0, 1) == "7.0%"

    def test_zero_decimals(self):
        assert format_percent(6.5, 0) == "7%"

    def test_half_rounds_up(self):
        assert format_percent(2.675, 2) == "2.68%"

    def test_non_numeric_is_blank(self):
        assert format_percent(None) == ""


class TestGrouping:
    """Tests for group_thousands() and related number formatting."""

    @pytest.mark.parametrize("value,expected", [
        (0, "0"),
        (7, "7"),
        (999, "999"),
        (1000, "1,000"),
        (12345, "12,345"),
        (123456, "123,456"),
        (1234567, "1,234,567"),
        (1234567890123, "1,234,567,890,123"),
        (-1234, "-1,234"),
    ])
    def test_every_three_digits(self, value, expected):
        assert group_thousands(value) == expected

    def test_never_leading_separator(self):
        for digits in range(1, 16):
            grouped = group_thousands(int("9" * digits))
            assert not grouped.startswith(",")
            assert grouped.replace(",", "") == "9" * digits

    def test_custom_separator(self):
        assert group_thousands(1234567, sep=".") == "1.234.567"

    def test_format_number_decimals(self):
        assert format_number(1234.5, 2) == "1,234.50"
        assert format_number(1234.5) == "1,235"

    def test_format_decimal_trims(self):
        assert format_decimal(2.50) == "2.5"
        assert format_decimal(3.0) == "3"
        assert format_decimal(1850) == "1850"
        assert format_decimal(None) == ""


class TestRoundHalfUp:
    def test_half_away_from_zero(self):
        assert round_half_up(0.5) == Decimal("1")
        assert round_half_up(-0.5) == Decimal("-1")
        assert round_half_up(2.5) == Decimal("3")

    def test_non_numeric(self):
        assert round_half_up("abc") is None
        assert round_half_up(float("nan")) is None


class TestLongNumbers:
    """Numbers wider than the default 28-digit decimal context."""

    def test_grouping_forty_digits(self):
        value = int("1234567890" * 4)
        grouped = group_thousands(value)
        assert grouped.replace(",", "") == str(value)
        assert grouped.startswith("1,234,567,890,")

    def test_currency(self):
        assert format_currency(10**30) == "$1" + ",000" * 10
        assert format_currency(-(10**30)) == "-$1" + ",000" * 10

    def test_currency_keeps_every_digit(self):
        value = 123456789012345678901234567890
        assert format_currency(value).replace(",", "") == f"${value}"

    def test_cents_signed_and_percent(self):
        assert format_cents(10**30) == "$1" + ",000" * 10 + ".00"
        assert format_signed_currency(10**30) == "+$1" + ",000" * 10
        assert format_percent(10**30, 2) == "1" + "0" * 30 + ".00%"

    def test_float_input(self):
        assert format_currency(1e30) == "$1" + ",000" * 10
