# 🏷️ pricecart/domain/conditions/enums.py
"""🏷️ Тип і ціль цінових коригувань."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pricecart.errors import ValidationError


class ConditionType(str, Enum):
    """Як рахується коригування: фіксована сума чи відсоток від бази."""

    FIXED = "fixed"
    PERCENTAGE = "percentage"

    @classmethod
    def coerce(cls, value: Any) -> "ConditionType":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError as exc:
            raise ValidationError(f'Parameter "type" must be one of {[m.value for m in cls]}, got {value!r}.') from exc


class ConditionTarget(str, Enum):
    """Яку базу змінює коригування."""

    ITEM = "item"                 # 🏷️ Ціна одиниці товару
    SUBTOTAL = "subtotal"         # 🧾 Проміжний підсумок позиції або кошика
    TAXABLE = "taxable"           # 💼 Оподатковувана частина підсумку

    @classmethod
    def coerce(cls, value: Any) -> "ConditionTarget":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError as exc:
            raise ValidationError(f'Parameter "target" must be one of {[m.value for m in cls]}, got {value!r}.') from exc


__all__ = ["ConditionType", "ConditionTarget"]
