# 🧮 pricecart/domain/conditions/conditions.py
"""
🧮 Умови — іменовані незмінні цінові коригування.

🔹 Одна структура `Condition` з тегом типу (`FIXED` / `PERCENTAGE`) і таблицею обчислювачів на кожен тег.
🔹 Варіанти (`FixedCondition`, `PercentageCondition`, `PercentageTaxCondition`) задають лише тег і,
   за потреби, ціль рівня класу — вона завжди має пріоритет над ціллю з конструктора.
🔹 `to_dict()` / `condition_from_dict()` — структурна серіалізація з тегом `class` для сховищ.
"""

from __future__ import annotations

# 🔠 Системні імпорти
import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Callable, ClassVar, Dict, Mapping, Optional, Type

# 🧩 Внутрішні модулі проєкту
from pricecart.domain.pricing import (
    DEFAULT_CURRENCY,
    DEFAULT_LOCALE,
    Price,
    format_percentage,
    percent,
)
from pricecart.errors import PriceError, ValidationError
from pricecart.shared.utils.immutables import freeze_attributes, thaw
from pricecart.shared.utils.logger import LOG_NAME
from .enums import ConditionTarget, ConditionType

logger = logging.getLogger(f"{LOG_NAME}.domain.conditions")


# ================================
# ✅ ВАЛІДАЦІЯ ПАРАМЕТРІВ
# ================================
def _validate_name(name: Any) -> str:
    if not isinstance(name, str) or not name:
        raise ValidationError('Parameter "name" is required and must be a non-empty string.')
    return name


def _validate_value(value: Any) -> Decimal:
    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal, str)):
        raise ValidationError('Parameter "value" is required and must be a number (int or float).')
    try:
        number = Decimal(str(value).strip())
    except ArithmeticError as exc:
        raise ValidationError('Parameter "value" is required and must be a number (int or float).') from exc
    if not number.is_finite():
        raise ValidationError('Parameter "value" must be a finite number.')
    return number


def _validate_order(order: Any) -> int:
    if isinstance(order, bool) or not isinstance(order, int):
        raise ValidationError('Parameter "order" must be an integer.')
    return order


def _validate_taxable(taxable: Any) -> bool:
    if not isinstance(taxable, bool):
        raise ValidationError('Parameter "taxable" must be a boolean.')
    return taxable


def _validate_attributes(attributes: Any) -> Mapping[str, Any]:
    try:
        return freeze_attributes(attributes)
    except TypeError as exc:
        raise ValidationError('Parameter "attributes" must be a mapping.') from exc


# ================================
# 🧮 ОБЧИСЛЮВАЧІ ЗА ТЕГОМ ТИПУ
# ================================
def _calculate_fixed(condition: "Condition", base: Optional[Price], currency: str, locale: str) -> Price:
    """Фіксована дельта: база впливає лише на валюту результату."""
    if base is not None:
        currency, locale = base.currency, base.locale
    return Price(condition.value, currency, locale)


def _calculate_percentage(condition: "Condition", base: Optional[Price], currency: str, locale: str) -> Price:
    """`base × value / 100` через точний дріб, одне округлення HALF_UP."""
    if base is None:
        raise PriceError("Price is required for percentage conditions.")
    exact = percent(base.to_rational(), condition.value)
    return Price(exact, base.currency, base.locale)


_EVALUATORS: Dict[ConditionType, Callable[["Condition", Optional[Price], str, str], Price]] = {
    ConditionType.FIXED: _calculate_fixed,
    ConditionType.PERCENTAGE: _calculate_percentage,
}


# ================================
# 🧾 УМОВА
# ================================
@dataclass(frozen=True)
class Condition:
    """
    Незмінне цінове коригування.

    Ціль визначається так: ціль рівня класу (`CLASS_TARGET`) → ціль з конструктора → `SUBTOTAL`.
    """

    name: str
    value: Decimal
    target: Optional[ConditionTarget] = None
    attributes: Mapping[str, Any] = field(default_factory=dict, hash=False)
    order: int = 0
    taxable: bool = False
    type: ConditionType = field(init=False)

    TAG: ClassVar[str] = ""
    TYPE: ClassVar[Optional[ConditionType]] = None
    CLASS_TARGET: ClassVar[Optional[ConditionTarget]] = None

    def __post_init__(self) -> None:
        if self.TYPE is None:
            raise TypeError("Condition is abstract, use one of its variants")
        object.__setattr__(self, "name", _validate_name(self.name))
        object.__setattr__(self, "value", _validate_value(self.value))
        object.__setattr__(self, "target", self.resolve_target(self.target))
        object.__setattr__(self, "attributes", _validate_attributes(self.attributes))
        object.__setattr__(self, "order", _validate_order(self.order))
        object.__setattr__(self, "taxable", _validate_taxable(self.taxable))
        object.__setattr__(self, "type", self.TYPE)

    @classmethod
    def resolve_target(cls, requested: Any) -> ConditionTarget:
        """Ціль рівня класу перемагає будь-яку передану в конструктор."""
        if cls.CLASS_TARGET is not None:
            return cls.CLASS_TARGET
        if requested is None:
            return ConditionTarget.SUBTOTAL
        return ConditionTarget.coerce(requested)

    @classmethod
    def make(cls, parameters: Mapping[str, Any]) -> "Condition":
        """
        Створює умову з мапи параметрів із перевіркою обовʼязкових полів.

        Raises:
            ValidationError: відсутні `name`/`value` або некоректні типи.
        """
        if not isinstance(parameters, Mapping):
            raise ValidationError("Condition parameters must be a mapping.")
        if "value" not in parameters or parameters["value"] is None:
            raise ValidationError('Parameter "value" is required and must be a number (int or float).')
        target = parameters.get("target")
        return cls(
            name=parameters.get("name"),
            value=parameters["value"],
            target=None if cls.CLASS_TARGET is not None else target,
            attributes=parameters.get("attributes") or {},
            order=parameters.get("order", 0),
            taxable=parameters.get("taxable", False),
        )

    # ================================
    # 🧮 ОБЧИСЛЕННЯ
    # ================================
    def calculate(
        self,
        price: Optional[Price] = None,
        *,
        currency: str = DEFAULT_CURRENCY,
        locale: str = DEFAULT_LOCALE,
    ) -> Price:
        """Дельта коригування (відʼємна для знижок)."""
        return _EVALUATORS[self.type](self, price, currency, locale)

    @property
    def is_percentage(self) -> bool:
        return self.type is ConditionType.PERCENTAGE

    def formatted_value(self, currency: str = DEFAULT_CURRENCY, locale: str = DEFAULT_LOCALE) -> str:
        if self.is_percentage:
            return format_percentage(self.value)
        return Price(self.value, currency, locale).formatted()

    # ================================
    # 📦 СЕРІАЛІЗАЦІЯ
    # ================================
    def to_dict(self) -> Dict[str, Any]:
        return {
            "class": self.TAG,
            "name": self.name,
            "value": str(self.value),
            "type": self.type.value,
            "target": self.target.value,
            "attributes": thaw(self.attributes),
            "order": self.order,
            "taxable": self.taxable,
        }


# ================================
# 🧩 ВАРІАНТИ
# ================================
_REGISTRY: Dict[str, Type[Condition]] = {}


def register_condition(cls: Type[Condition]) -> Type[Condition]:
    """Декоратор: реєструє варіант під його тегом `TAG`."""
    _REGISTRY[cls.TAG] = cls
    return cls


@register_condition
class FixedCondition(Condition):
    """Фіксована сума, незалежна від бази."""

    TAG = "fixed"
    TYPE = ConditionType.FIXED


@register_condition
class PercentageCondition(Condition):
    TAG = "percentage"
    TYPE = ConditionType.PERCENTAGE


@register_condition
class PercentageTaxCondition(Condition):
    """Податок у відсотках — завжди від оподатковуваної бази."""

    TAG = "percentage_tax"
    TYPE = ConditionType.PERCENTAGE
    CLASS_TARGET = ConditionTarget.TAXABLE


def condition_from_dict(data: Mapping[str, Any]) -> Condition:
    """
    Відновлює умову зі структурного представлення.

    Варіант обирається за тегом `class`, інакше за полем `type` (`fixed` / `percentage`).
    """
    if not isinstance(data, Mapping):
        raise ValidationError("Condition data must be a mapping.")
    tag = data.get("class") or ConditionType.coerce(data.get("type", ConditionType.FIXED.value)).value
    variant = _REGISTRY.get(str(tag))
    if variant is None:
        raise ValidationError(f"Unknown condition class: {tag!r}")
    return variant.make(data)


def available_conditions() -> Dict[str, Type[Condition]]:
    return dict(_REGISTRY)


__all__ = [
    "Condition",
    "FixedCondition",
    "PercentageCondition",
    "PercentageTaxCondition",
    "register_condition",
    "condition_from_dict",
    "available_conditions",
]
