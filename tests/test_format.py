from __future__ import annotations

from invoice_format import (
    FormatConfig,
    currency_symbol,
    format_currency,
    format_date,
    format_quantity,
    format_rate,
)


class TestFormatCurrency:
    def test_simple(self):
        assert format_currency(1000) == "1.000,00 €"

    def test_with_decimals(self):
        assert format_currency(1234.56) == "1.234,56 €"

    def test_zero(self):
        assert format_currency(0) == "0,00 €"

    def test_large(self):
        assert format_currency(1234567.891) == "1.234.567,89 €"

    def test_negative(self):
        assert format_currency(-5.5) == "-5,50 €"

    def test_rounds_half_up(self):
        assert format_currency(0.005) == "0,01 €"
        assert format_currency(84.03361344537815) == "84,03 €"

    def test_other_currency_german_style(self):
        assert format_currency(1234.5, FormatConfig(currency="USD")) == "1.234,50 $"
        assert format_currency(10, FormatConfig(currency="CHF")) == "10,00 CHF"

    def test_english_locale(self):
        assert format_currency(1234.56, FormatConfig(locale="en")) == "€1,234.56"


class TestCurrencySymbol:
    def test_known(self):
        assert currency_symbol("eur") == "€"

    def test_unknown_returns_code(self):
        assert currency_symbol("SEK") == "SEK"


class TestFormatDate:
    def test_german_date_passes_through(self):
        assert format_date("14.03.2025") == "14.03.2025"

    def test_iso_date(self):
        assert format_date("2025-03-14") == "14.03.2025"

    def test_iso_datetime(self):
        assert format_date("2025-03-14T09:30:00Z") == "14.03.2025"

    def test_unparseable_unchanged(self):
        assert format_date("März 2025") == "März 2025"


class TestFormatNumbers:
    def test_whole_quantity(self):
        assert format_quantity(3.0) == "3"

    def test_fractional_quantity(self):
        assert format_quantity(2.5) == "2,5"
        assert format_quantity(2.5, FormatConfig(locale="en")) == "2.5"

    def test_rates(self):
        assert format_rate(19) == "19%"
        assert format_rate(7.0) == "7%"
        assert format_rate(5.5) == "5,5%"

    def test_quantity_keeps_all_digits(self):
        assert format_quantity(1234.567) == "1234,567"
        assert format_quantity(123456.5) == "123456,5"
        assert format_quantity(1.2345678) == "1,2345678"

    def test_large_quantity_without_exponent(self):
        assert format_quantity(1234567.5) == "1234567,5"
        assert format_quantity(25000000.0) == "25000000"
        assert format_quantity(1234567.5, FormatConfig(locale="en")) == "1234567.5"

    def test_rate_keeps_all_digits(self):
        assert format_rate(7.125) == "7,125%"
        assert format_rate(100) == "100%"
