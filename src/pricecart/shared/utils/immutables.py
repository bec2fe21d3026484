# 🧊 pricecart/shared/utils/immutables.py
"""
🧊 Заморожування та розморожування атрибутів умов, правил і позицій кошика.

🔹 `freeze` перетворює словники/списки/набори у незмінні аналоги (MappingProxyType, tuple, frozenset).
🔹 `thaw` повертає звичайні dict/list для структурної серіалізації у сховище.
🔹 `merge_attributes` зливає дві мапи атрибутів (вхідні значення перемагають).
"""

from __future__ import annotations

# 🔠 Системні імпорти
from collections.abc import Iterable, Mapping            # 🧰 Перевірки типів колекцій
from decimal import Decimal                              # 💵 Підтримка грошових значень
from enum import Enum                                    # 🏷️ Перерахування
from types import MappingProxyType                       # 🔒 Незмінна обгортка над dict
from typing import Any, Optional                         # 🧰 Загальні типи

# ================================
# 🧾 АЛІАСИ
# ================================
FrozenMapping = MappingProxyType
_SCALARS = (str, bytes, int, float, bool, Decimal, Enum)


# ================================
# ❄️ ЗАМОРОЖУВАЧ
# ================================
def freeze(obj: Any) -> Any:
    """Рекурсивно перетворює колекції на незмінні аналоги."""
    if obj is None or isinstance(obj, _SCALARS):
        return obj
    if isinstance(obj, Mapping):
        return MappingProxyType({key: freeze(value) for key, value in obj.items()})
    if isinstance(obj, (set, frozenset)):
        return frozenset(freeze(value) for value in obj)
    if isinstance(obj, Iterable):
        return tuple(freeze(value) for value in obj)
    return obj


def thaw(obj: Any) -> Any:
    """Зворотна операція до `freeze`: повертає dict/list, придатні для JSON."""
    if obj is None or isinstance(obj, _SCALARS):
        return obj
    if isinstance(obj, Mapping):
        return {key: thaw(value) for key, value in obj.items()}
    if isinstance(obj, (set, frozenset)):
        return [thaw(value) for value in obj]
    if isinstance(obj, Iterable):
        return [thaw(value) for value in obj]
    return obj


def freeze_attributes(attributes: Optional[Mapping[str, Any]]) -> Mapping[str, Any]:
    """
    Нормалізує довільну мапу атрибутів у незмінну.

    Raises:
        TypeError: якщо передано не Mapping.
    """
    if attributes is None:
        return MappingProxyType({})
    if not isinstance(attributes, Mapping):
        raise TypeError(f"attributes must be a mapping, got {type(attributes).__name__}")
    return freeze(attributes)


def merge_attributes(base: Optional[Mapping[str, Any]], incoming: Optional[Mapping[str, Any]]) -> Mapping[str, Any]:
    """Поверхнево зливає дві мапи атрибутів, ключі з `incoming` перемагають."""
    merged = dict(thaw(base or {}))
    merged.update(thaw(incoming or {}))
    return freeze(merged)


def is_frozen_mapping(obj: Any) -> bool:
    """Перевіряє, чи є обʼєкт замороженою мапою."""
    return isinstance(obj, MappingProxyType)


__all__ = [
    "FrozenMapping",
    "freeze",
    "thaw",
    "freeze_attributes",
    "merge_attributes",
    "is_frozen_mapping",
]
