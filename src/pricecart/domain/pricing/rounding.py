# 🔁 pricecart/domain/pricing/rounding.py
"""
🔁 Точна арифметика та округлення грошових сум.

🔹 `_CCY_DECIMALS` — кількість знаків після коми для кожної валюти.
🔹 `to_decimal` / `to_fraction` — безпечне приведення вхідних значень (float через рядок).
🔹 `round_fraction` — єдина точка округлення раціонального проміжного значення.
"""

from __future__ import annotations

# 🔠 Системні імпорти
import logging
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, localcontext
from fractions import Fraction
from typing import Dict, Union

# 🧩 Внутрішні модулі проєкту
from pricecart.errors import PriceError
from pricecart.shared.utils.logger import LOG_NAME

logger = logging.getLogger(f"{LOG_NAME}.domain.pricing")

Numeric = Union[int, float, str, Decimal, Fraction]

# ================================
# 💱 ТОЧНІСТЬ ВАЛЮТ
# ================================
_CCY_DECIMALS: Dict[str, int] = {
    "USD": 2,															# 🇺🇸 Долар
    "EUR": 2,															# 🇪🇺 Євро
    "GBP": 2,															# 🇬🇧 Фунт
    "UAH": 2,															# 🇺🇦 Гривня
    "PLN": 2,															# 🇵🇱 Злотий
    "CAD": 2,
    "AUD": 2,
    "NZD": 2,
    "CHF": 2,
    "SEK": 2,
    "NOK": 2,
    "DKK": 2,
    "CZK": 2,
    "CNY": 2,
    "INR": 2,
    "MXN": 2,
    "BRL": 2,
    "SGD": 2,
    "HKD": 2,
    "JPY": 0,															# 🇯🇵 Без копійок
    "KRW": 0,
    "BHD": 3,
    "KWD": 3,
}

_WORKING_PRECISION = 60


def currency_decimals(currency: str) -> int:
    """Повертає кількість знаків для валюти або кидає `PriceError` для невідомої."""
    code = str(currency or "").upper()
    if code not in _CCY_DECIMALS:
        raise PriceError(f"Unknown currency code: {currency!r}")
    return _CCY_DECIMALS[code]


def quantum_for(currency: str) -> Decimal:
    """📏 10^-digits для валюти."""
    return Decimal(1).scaleb(-currency_decimals(currency))


def to_decimal(value: object) -> Decimal:
    """🧮 Безпечно приводить значення до Decimal через рядкове представлення."""
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, Fraction):
        with localcontext() as ctx:
            ctx.prec = _WORKING_PRECISION
            result = Decimal(value.numerator) / Decimal(value.denominator)
    elif isinstance(value, bool):
        raise PriceError(f"Invalid numeric value: {value!r}")
    else:
        try:
            result = Decimal(str(value).strip())						# 🧼 Позбавляємося артефактів float
        except (InvalidOperation, AttributeError, ValueError) as exc:
            raise PriceError(f"Invalid numeric value: {value!r}") from exc
    if not result.is_finite():
        raise PriceError(f"Invalid numeric value: {value!r}")
    return result


def to_fraction(value: object) -> Fraction:
    """Точне раціональне представлення числа."""
    if isinstance(value, Fraction):
        return value
    return Fraction(to_decimal(value))


def round_fraction(value: Fraction, currency: str, rounding: str = ROUND_HALF_UP) -> Decimal:
    """📐 Округлює раціональне значення до мінорної одиниці валюти один раз."""
    quantum = quantum_for(currency)
    with localcontext() as ctx:
        ctx.prec = _WORKING_PRECISION
        exact = Decimal(value.numerator) / Decimal(value.denominator)
        return exact.quantize(quantum, rounding=rounding)


def quantize(amount: Decimal, currency: str, rounding: str = ROUND_HALF_UP) -> Decimal:
    """📐 Квантоване значення з урахуванням валюти та стратегії округлення."""
    with localcontext() as ctx:
        ctx.prec = _WORKING_PRECISION
        return amount.quantize(quantum_for(currency), rounding=rounding)


def percent(value: Numeric, pct: Numeric) -> Fraction:
    """Точна частка `value × pct / 100` без округлення."""
    return to_fraction(value) * to_fraction(pct) / 100


__all__ = [
    "Numeric",
    "currency_decimals",
    "quantum_for",
    "to_decimal",
    "to_fraction",
    "round_fraction",
    "quantize",
    "percent",
]
