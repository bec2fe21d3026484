# 🖨️ pricecart/domain/pricing/formatter.py
"""
🖨️ Форматування грошових сум для відображення.

🔹 Символ валюти та роздільники залежать від локалі (`en_US` → `$1,234.56`, `de_DE` → `1.234,56 €`).
🔹 Невідома локаль падає на `en_US`, невідома валюта — на ISO-код.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Dict


@dataclass(frozen=True, slots=True)
class _LocaleFormat:
    group: str
    decimal: str
    symbol_first: bool
    space: bool


_LOCALES: Dict[str, _LocaleFormat] = {
    "en_US": _LocaleFormat(",", ".", True, False),
    "en_GB": _LocaleFormat(",", ".", True, False),
    "en_CA": _LocaleFormat(",", ".", True, False),
    "de_DE": _LocaleFormat(".", ",", False, True),
    "fr_FR": _LocaleFormat(" ", ",", False, True),
    "uk_UA": _LocaleFormat(" ", ",", False, True),
    "pl_PL": _LocaleFormat(" ", ",", False, True),
}

_SYMBOLS: Dict[str, str] = {
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "UAH": "₴",
    "PLN": "zł",
    "JPY": "¥",
    "CAD": "CA$",
    "AUD": "A$",
    "INR": "₹",
    "KRW": "₩",
}


class PriceFormatter:
    """Перетворює квантовану суму у рядок за правилами локалі."""

    def __init__(self, locale: str = "en_US") -> None:
        self.locale = locale if locale in _LOCALES else "en_US"
        self._fmt = _LOCALES[self.locale]

    def format(self, amount: Decimal, currency: str) -> str:
        sign = "-" if amount < 0 else ""
        number = self._group(abs(amount))
        symbol = _SYMBOLS.get(currency.upper())
        if symbol is None:
            return f"{sign}{currency.upper()} {number}"
        if self._fmt.symbol_first:
            return f"{sign}{symbol}{number}"
        gap = " " if self._fmt.space else ""
        return f"{sign}{number}{gap}{symbol}"

    def _group(self, amount: Decimal) -> str:
        text = format(amount, "f")
        whole, _, frac = text.partition(".")
        groups = []
        while len(whole) > 3:
            groups.insert(0, whole[-3:])
            whole = whole[:-3]
        groups.insert(0, whole)
        grouped = self._fmt.group.join(groups)
        return f"{grouped}{self._fmt.decimal}{frac}" if frac else grouped


def format_plain_number(value: object) -> str:
    """`10.00` → `10`, `15.50` → `15.5`: два знаки, без хвостових нулів."""
    return f"{Decimal(str(value)):.2f}".rstrip("0").rstrip(".")


def format_percentage(value: object) -> str:
    return f"{format_plain_number(value)}%"


__all__ = ["PriceFormatter", "format_plain_number", "format_percentage"]
