from __future__ import annotations

from dataclasses import dataclass

CURRENCY_SYMBOLS = {
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "JPY": "¥",
    "CAD": "C$",
    "AUD": "A$",
    "INR": "₹",
    "CNY": "¥",
    "BRL": "R$",
    "MAD": "DH",
}

# Currencies written with the symbol after the amount.
_SUFFIX_CURRENCIES = {"MAD"}


@dataclass(frozen=True)
class DisplaySettings:
    currency: str = "USD"
    language: str = "en"


def format_currency(amount: float, display: DisplaySettings | None = None) -> str:
    display = display or DisplaySettings()
    currency = (display.currency or "USD").upper()
    symbol = CURRENCY_SYMBOLS.get(currency, currency)
    if currency in _SUFFIX_CURRENCIES or (display.language or "").lower().startswith("ar"):
        return "{:.2f} {}".format(amount, symbol)
    return "{}{:.2f}".format(symbol, amount)


def format_percent(fraction: float, digits: int = 1) -> str:
    return "{:.{digits}f}%".format(fraction * 100, digits=digits)


def supported_currencies():
    return [
        {"value": code, "label": "{} ({})".format(code, symbol)}
        for code, symbol in CURRENCY_SYMBOLS.items()
    ]


__all__ = ["CURRENCY_SYMBOLS", "DisplaySettings", "format_currency", "format_percent", "supported_currencies"]
