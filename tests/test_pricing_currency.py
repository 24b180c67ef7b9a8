"""Tests for static-rate currency conversion."""

import itertools

import pytest

from foodtracker.errors import UnsupportedCurrency
from foodtracker.pricing.currency import (
    DEFAULT_RATES,
    CurrencyConverter,
    convert,
    format_currency,
)


@pytest.fixture
def converter():
    return CurrencyConverter()


class TestConvert:
    def test_identity(self, converter):
        """Same-currency conversion returns the amount unchanged."""
        for code in DEFAULT_RATES:
            assert converter.convert(12.34, code, code) == 12.34

    def test_identity_keeps_object(self, converter):
        amount = 0.1 + 0.2
        assert converter.convert(amount, "EUR", "EUR") is amount

    def test_eur_to_dkk(self, converter):
        assert converter.convert(10, "EUR", "DKK") == pytest.approx(74.4)

    def test_dkk_to_usd(self, converter):
        assert converter.convert(68.4, "DKK", "USD") == pytest.approx(10.0)

    def test_cross_rate(self, converter):
        assert converter.convert(1, "EUR", "USD") == pytest.approx(7.44 / 6.84)

    def test_round_trip(self, converter):
        for a, b in itertools.permutations(DEFAULT_RATES, 2):
            there = converter.convert(42.5, a, b)
            assert converter.convert(there, b, a) == pytest.approx(42.5)

    def test_unsupported_from(self, converter):
        with pytest.raises(UnsupportedCurrency) as exc_info:
            converter.convert(1, "XYZ", "DKK")
        assert exc_info.value.currency == "XYZ"
        assert "XYZ" in str(exc_info.value)

    def test_unsupported_to(self, converter):
        with pytest.raises(UnsupportedCurrency) as exc_info:
            converter.convert(1, "DKK", "GBP")
        assert exc_info.value.currency == "GBP"

    def test_from_checked_before_to(self, converter):
        with pytest.raises(UnsupportedCurrency) as exc_info:
            converter.convert(1, "AAA", "BBB")
        assert exc_info.value.currency == "AAA"

    def test_to_anchor(self, converter):
        assert converter.to_anchor(2, "USD") == pytest.approx(13.68)

    def test_module_level_convert(self):
        assert convert(1, "EUR", "DKK") == pytest.approx(7.44)


class TestInjectedRates:
    def test_custom_table(self):
        converter = CurrencyConverter({"DKK": 1.0, "SEK": 0.65})
        assert converter.convert(100, "SEK", "DKK") == pytest.approx(65.0)
        assert converter.supports("SEK")
        assert not converter.supports("EUR")

    def test_anchor_missing(self):
        with pytest.raises(ValueError, match="Anchor"):
            CurrencyConverter({"EUR": 7.44})

    def test_anchor_rate_must_be_one(self):
        with pytest.raises(ValueError, match="1.0"):
            CurrencyConverter({"DKK": 2.0, "EUR": 7.44})

    def test_non_positive_rate(self):
        with pytest.raises(ValueError, match="positive"):
            CurrencyConverter({"DKK": 1.0, "EUR": 0})

    def test_rates_are_copied(self):
        table = {"DKK": 1.0, "EUR": 7.44}
        converter = CurrencyConverter(table)
        table["EUR"] = 100.0
        assert converter.rates["EUR"] == 7.44


class TestFormatCurrency:
    def test_usd(self):
        assert format_currency(6.84, "USD") == "$6.84"

    def test_eur(self):
        assert format_currency(12.5, "EUR") == "€12.50"

    def test_dkk(self):
        assert format_currency(24.95, "DKK") == "DKK 24.95"

    def test_thousands(self):
        assert format_currency(1234.5, "USD") == "$1,234.50"

    def test_negative(self):
        assert format_currency(-1, "USD") == "-$1.00"

    def test_fallback(self):
        assert format_currency(3.14159, "XYZ") == "3.14 XYZ"
