"""Tests for currency helpers."""

from __future__ import annotations

from decimal import Decimal

import pytest

from src.errors import ConfigurationError
from src.pricing.currency import (
    CURRENCY_OPTIONS,
    DEFAULT_RATES,
    convert,
    default_rate,
    format_currency,
    get_currency_symbol,
)


class TestStaticTable:
    def test_usd_is_base(self):
        assert DEFAULT_RATES["USD"] == Decimal("1")

    def test_codes_unique(self):
        codes = [c.value for c in CURRENCY_OPTIONS]
        assert len(codes) == len(set(codes)) == 17

    def test_default_rate_case_insensitive(self):
        assert default_rate("inr") == Decimal("83.12")

    def test_default_rate_unknown(self):
        with pytest.raises(ConfigurationError):
            default_rate("XYZ")


class TestSymbols:
    def test_known(self):
        assert get_currency_symbol("GBP") == "£"

    def test_unknown_falls_back_to_dollar(self):
        assert get_currency_symbol("XYZ") == "$"


class TestConvert:
    RATES = {"USD": Decimal("1"), "INR": Decimal("80"), "EUR": Decimal("0.8")}

    def test_same_currency(self):
        assert convert(Decimal("10"), "EUR", "EUR", self.RATES) == Decimal("10")

    def test_no_rates(self):
        assert convert(Decimal("10"), "USD", "INR", None) == Decimal("10")

    def test_cross_rate(self):
        assert convert(Decimal("8"), "EUR", "INR", self.RATES) == Decimal("800")

    def test_missing_target(self):
        with pytest.raises(ConfigurationError):
            convert(Decimal("1"), "USD", "JPY", self.RATES)


class TestFormatCurrency:
    def test_usd_grouping(self):
        assert format_currency(Decimal("1234567")) == "$1,234,567"

    def test_rounds_to_whole_by_default(self):
        assert format_currency(Decimal("999.5")) == "$1,000"

    def test_inr_lakh_grouping(self):
        assert format_currency(Decimal("1234567"), "INR") == "₹12,34,567"

    def test_inr_small(self):
        assert format_currency(Decimal("950"), "INR") == "₹950"

    def test_two_fraction_digits(self):
        assert format_currency(Decimal("99.5"), "EUR", fraction_digits=2) == "€99.50"

    def test_fraction_digits_capped(self):
        assert format_currency(Decimal("1.23456"), "USD", fraction_digits=5) == "$1.23"

    def test_negative(self):
        assert format_currency(Decimal("-1234.5")) == "-$1,235"

    def test_none(self):
        assert format_currency(None) == "-"
