# 💵 pricecart/domain/pricing/price.py
"""
💵 Незмінне грошове значення, привʼязане до однієї валюти.

🔹 Уся арифметика кошика проходить через `Price`, результат завжди новий обʼєкт.
🔹 `subtract` не опускається нижче нуля, `plus` / `multiply_by` можуть давати відʼємні дельти (знижки).
🔹 Проміжні обчислення — точні (`Fraction`), округлення HALF_UP до мінорної одиниці валюти відбувається один раз.
"""

from __future__ import annotations

# 🔠 Системні імпорти
from decimal import ROUND_HALF_UP, Decimal
from fractions import Fraction
from functools import total_ordering
from typing import Union

# 🧩 Внутрішні модулі проєкту
from pricecart.errors import DivideByZeroError, PriceError
from .formatter import PriceFormatter
from .rounding import (
    Numeric,
    currency_decimals,
    quantize,
    round_fraction,
    to_decimal,
    to_fraction,
)

DEFAULT_CURRENCY = "USD"
DEFAULT_LOCALE = "en_US"


@total_ordering
class Price:
    """Точна сума в мінорних одиницях валюти."""

    __slots__ = ("_amount", "_currency", "_locale")

    def __init__(
        self,
        value: Union["Price", Numeric] = 0,
        currency: str = DEFAULT_CURRENCY,
        locale: str = DEFAULT_LOCALE,
    ) -> None:
        if isinstance(value, Price):
            currency, locale = value.currency, value.locale
            value = value.amount
        code = str(currency or "").upper()
        currency_decimals(code)                                      # ✅ Невідома валюта → PriceError
        if isinstance(value, Fraction):
            amount = round_fraction(value, code)
        else:
            amount = quantize(to_decimal(value), code)
        self._amount: Decimal = amount + Decimal(0)                  # 🧼 -0.00 → 0.00
        self._currency = code
        self._locale = locale or DEFAULT_LOCALE

    # ================================
    # 🏭 ФАБРИКИ
    # ================================
    @classmethod
    def from_value(cls, value: Union["Price", Numeric], currency: str = DEFAULT_CURRENCY, locale: str = DEFAULT_LOCALE) -> "Price":
        return cls(value, currency, locale)

    @classmethod
    def zero(cls, currency: str = DEFAULT_CURRENCY, locale: str = DEFAULT_LOCALE) -> "Price":
        return cls(0, currency, locale)

    def _new(self, value: Union[Decimal, Fraction]) -> "Price":
        return Price(value, self._currency, self._locale)

    def zeroed(self) -> "Price":
        """Нуль у тій самій валюті та локалі."""
        return self._new(Decimal(0))

    # ================================
    # 🔎 ВЛАСТИВОСТІ
    # ================================
    @property
    def amount(self) -> Decimal:
        return self._amount

    @property
    def currency(self) -> str:
        return self._currency

    @property
    def locale(self) -> str:
        return self._locale

    def minor_value(self) -> int:
        """Сума в мінорних одиницях (центах)."""
        return int(self._amount.scaleb(currency_decimals(self._currency)))

    def to_rational(self) -> Fraction:
        """Точне раціональне значення для ланцюжків відсоткових обчислень."""
        return Fraction(self._amount)

    def to_number(self) -> float:
        return float(self._amount)

    to_float = to_number

    def is_negative(self) -> bool:
        return self._amount < 0

    def is_zero(self) -> bool:
        return self._amount == 0

    # ================================
    # ➕ АРИФМЕТИКА
    # ================================
    def _coerce(self, other: Union["Price", Numeric]) -> Fraction:
        if isinstance(other, Price):
            if other.currency != self._currency:
                raise PriceError(
                    f"Currency mismatch: {self._currency} vs {other.currency}",
                    details="arithmetic requires matching currencies",
                )
            return other.to_rational()
        return to_fraction(other)

    def plus(self, other: Union["Price", Numeric]) -> "Price":
        return self._new(self.to_rational() + self._coerce(other))

    def subtract(self, other: Union["Price", Numeric]) -> "Price":
        """Різниця, обмежена знизу нулем."""
        result = self.to_rational() - self._coerce(other)
        return self._new(max(result, Fraction(0)))

    minus = subtract

    def multiply_by(self, factor: Numeric, rounding: str = ROUND_HALF_UP) -> "Price":
        exact = self.to_rational() * to_fraction(factor)
        return Price(round_fraction(exact, self._currency, rounding), self._currency, self._locale)

    def divide_by(self, divisor: Numeric, rounding: str = ROUND_HALF_UP) -> "Price":
        fraction = to_fraction(divisor)
        if fraction == 0:
            raise DivideByZeroError("Cannot divide by zero")
        exact = self.to_rational() / fraction
        return Price(round_fraction(exact, self._currency, rounding), self._currency, self._locale)

    def percentage(self, pct: Numeric) -> "Price":
        """Сума, збільшена на `pct` відсотків (відʼємний `pct` зменшує)."""
        exact = self.to_rational() * (1 + to_fraction(pct) / 100)
        return self._new(exact)

    def negated(self) -> "Price":
        return self._new(-self.to_rational())

    def absolute(self) -> "Price":
        return self._new(abs(self.to_rational()))

    # ================================
    # 🖨️ ВІДОБРАЖЕННЯ
    # ================================
    def formatted(self) -> str:
        return PriceFormatter(self._locale).format(self._amount, self._currency)

    format = formatted

    def __str__(self) -> str:
        return self.formatted()

    def __repr__(self) -> str:
        return f"Price({str(self._amount)!r}, {self._currency!r})"

    # ================================
    # ⚖️ ПОРІВНЯННЯ
    # ================================
    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Price):
            return NotImplemented
        return self._amount == other._amount and self._currency == other._currency

    def __lt__(self, other: "Price") -> bool:
        if not isinstance(other, Price):
            return NotImplemented
        self._coerce(other)                                         # ⚠️ Перевірка валюти
        return self._amount < other._amount

    def __hash__(self) -> int:
        return hash((self._amount, self._currency))


def sum_prices(prices, currency: str = DEFAULT_CURRENCY, locale: str = DEFAULT_LOCALE) -> Price:
    """Сума колекції цін, нуль для порожньої."""
    total = Price.zero(currency, locale)
    for price in prices:
        total = total.plus(price)
    return total


__all__ = ["Price", "DEFAULT_CURRENCY", "DEFAULT_LOCALE", "sum_prices"]
