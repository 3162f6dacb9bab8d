import logging

import pytest

from expense_tracker.currency import (
    EXCHANGE_RATES,
    SUPPORTED_CURRENCIES,
    CurrencyConverter,
    convert,
    format_amount,
    is_supported,
)


@pytest.mark.parametrize("code", ["USD", "INR", "JPY", "XYZ"])
def test_convert_same_currency_is_identity(code):
    assert convert(100, code, code) == 100
    assert convert(0.1, code, code) == 0.1


def test_convert_goes_through_usd_base():
    assert convert(1, "USD", "INR") == pytest.approx(83.25)
    assert convert(83.25, "INR", "USD") == pytest.approx(1.0)
    assert convert(92, "EUR", "GBP") == pytest.approx(79.0)


def test_convert_unknown_currency_fails_open():
    assert convert(100, "XYZ", "USD") == 100
    assert convert(100, "USD", "XYZ") == 100
    assert convert(100, None, "USD") == 100


def test_convert_normalises_codes():
    assert convert(1, "usd", " inr ") == pytest.approx(83.25)


def test_non_finite_result_returns_original_amount(caplog):
    converter = CurrencyConverter({"USD": 1.0, "BIG": 1e308})

    with caplog.at_level(logging.WARNING):
        assert converter.convert(1e308, "USD", "BIG") == 1e308

    assert "Invalid conversion result" in caplog.text


def test_rate_table_and_symbols_cover_the_same_currencies():
    assert set(EXCHANGE_RATES) == set(SUPPORTED_CURRENCIES)
    assert EXCHANGE_RATES["USD"] == 1.0
    assert is_supported("eur")
    assert not is_supported("XYZ")


def test_format_amount():
    assert format_amount(1250, "INR") == "₹1,250.00"
    assert format_amount(1500.4, "JPY") == "¥1,500"
    assert format_amount(10, "XYZ") == "10.00 XYZ"
