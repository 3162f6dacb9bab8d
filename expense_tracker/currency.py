"""Static currency table and conversion helpers.

Every rate is expressed as units of the currency per one US dollar, so a
conversion always goes ``amount / rate[from] * rate[to]``.  Rates are refreshed
by editing this table; nothing here talks to the network.
"""
from __future__ import annotations

import logging
import math
from typing import Mapping, Optional

logger = logging.getLogger(__name__)

RATE_BASE_CURRENCY = "USD"

# Working currency of rows that carry no explicit currency.
DEFAULT_CURRENCY = "INR"

EXCHANGE_RATES: dict[str, float] = {
    "USD": 1.0,
    "EUR": 0.92,
    "GBP": 0.79,
    "JPY": 149.50,
    "INR": 83.25,
    "CAD": 1.38,
    "MXN": 17.85,
    "CNY": 7.24,
    "AUD": 1.54,
    "NZD": 1.68,
    "KRW": 1345.50,
    "SGD": 1.35,
    "HKD": 7.82,
    "THB": 36.75,
    "MYR": 4.72,
    "AED": 3.67,
    "SAR": 3.75,
    "ZAR": 18.95,
    "CHF": 0.88,
    "SEK": 10.85,
    "NOK": 10.92,
    "DKK": 6.86,
    "PLN": 4.05,
    "CZK": 23.15,
    "BRL": 5.15,
    "ARS": 365.50,
    "RUB": 92.50,
    "TRY": 28.75,
}

# code -> (symbol, display name)
SUPPORTED_CURRENCIES: dict[str, tuple[str, str]] = {
    "USD": ("$", "US Dollar"),
    "EUR": ("€", "Euro"),
    "GBP": ("£", "British Pound"),
    "JPY": ("¥", "Japanese Yen"),
    "INR": ("₹", "Indian Rupee"),
    "CAD": ("C$", "Canadian Dollar"),
    "MXN": ("Mex$", "Mexican Peso"),
    "CNY": ("¥", "Chinese Yuan"),
    "AUD": ("A$", "Australian Dollar"),
    "NZD": ("NZ$", "New Zealand Dollar"),
    "KRW": ("₩", "South Korean Won"),
    "SGD": ("S$", "Singapore Dollar"),
    "HKD": ("HK$", "Hong Kong Dollar"),
    "THB": ("฿", "Thai Baht"),
    "MYR": ("RM", "Malaysian Ringgit"),
    "AED": ("د.إ", "UAE Dirham"),
    "SAR": ("ر.س", "Saudi Riyal"),
    "ZAR": ("R", "South African Rand"),
    "CHF": ("Fr", "Swiss Franc"),
    "SEK": ("kr", "Swedish Krona"),
    "NOK": ("kr", "Norwegian Krone"),
    "DKK": ("kr", "Danish Krone"),
    "PLN": ("zł", "Polish Zloty"),
    "CZK": ("Kč", "Czech Koruna"),
    "BRL": ("R$", "Brazilian Real"),
    "ARS": ("$", "Argentine Peso"),
    "RUB": ("₽", "Russian Ruble"),
    "TRY": ("₺", "Turkish Lira"),
}

_ZERO_DECIMAL_CURRENCIES = frozenset({"JPY", "KRW"})


def normalise_code(code: Optional[str]) -> str:
    return (code or "").strip().upper()


def is_supported(code: Optional[str]) -> bool:
    return normalise_code(code) in EXCHANGE_RATES


def currency_symbol(code: Optional[str]) -> str:
    entry = SUPPORTED_CURRENCIES.get(normalise_code(code))
    return entry[0] if entry else ""


def format_amount(amount: float, currency: Optional[str]) -> str:
    """Render ``amount`` with its currency symbol, e.g. ``"₹1,250.00"``."""

    code = normalise_code(currency)
    entry = SUPPORTED_CURRENCIES.get(code)
    if entry is None:
        return f"{amount:,.2f} {code}".rstrip()
    decimals = 0 if code in _ZERO_DECIMAL_CURRENCIES else 2
    return f"{entry[0]}{amount:,.{decimals}f}"


class CurrencyConverter:
    """Convert amounts between currencies through the USD base."""

    def __init__(self, rates: Mapping[str, float] = EXCHANGE_RATES) -> None:
        self._rates = dict(rates)

    def convert(self, amount: float, from_currency: Optional[str], to_currency: Optional[str]) -> float:
        """Return ``amount`` expressed in ``to_currency``.

        Unknown codes fail open: the amount is returned unchanged so a single
        odd row cannot break a whole report.  The same happens when the
        arithmetic yields NaN or infinity, which is logged.
        """

        source = normalise_code(from_currency)
        target = normalise_code(to_currency)
        if source == target:
            return amount

        source_rate = self._rates.get(source)
        target_rate = self._rates.get(target)
        if not source_rate or not target_rate:
            return amount

        try:
            result = amount / source_rate * target_rate
        except (TypeError, ZeroDivisionError, OverflowError):
            logger.warning("Currency conversion failed: %s %s -> %s", amount, source, target)
            return amount

        if math.isnan(result) or math.isinf(result):
            logger.warning("Invalid conversion result: %s %s -> %s", amount, source, target)
            return amount
        return result


_default_converter = CurrencyConverter()


def convert(amount: float, from_currency: Optional[str], to_currency: Optional[str]) -> float:
    return _default_converter.convert(amount, from_currency, to_currency)


__all__ = [
    "CurrencyConverter",
    "DEFAULT_CURRENCY",
    "EXCHANGE_RATES",
    "SUPPORTED_CURRENCIES",
    "convert",
    "currency_symbol",
    "format_amount",
    "is_supported",
    "normalise_code",
    "RATE_BASE_CURRENCY",
]
