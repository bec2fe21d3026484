# 🎯 pricecart/domain/conditions/rules.py
"""
🎯 Правила — промо-коригування, що залежать від стану всього кошика.

🔹 Перед кожним обчисленням правило отримує контекст: знімок позицій та поточний підсумок.
🔹 `with_context()` повертає привʼязану одноразову копію, оригінал лишається без контексту.
🔹 Без контексту правило нічого не робить: `applies()` → False, знижка → 0.
🔹 Знижки повертаються відʼємними `Price`.
"""

from __future__ import annotations

# 🔠 Системні імпорти
import copy
import logging
import re
from abc import ABC, abstractmethod
from decimal import Decimal
from fractions import Fraction
from typing import (
    Any,
    ClassVar,
    Dict,
    Iterable,
    List,
    Mapping,
    Optional,
    Protocol,
    Sequence,
    Tuple,
    Type,
    Union,
)

# 🧩 Внутрішні модулі проєкту
from pricecart.domain.pricing import (
    DEFAULT_CURRENCY,
    DEFAULT_LOCALE,
    Price,
    format_plain_number,
    percent,
    to_fraction,
)
from pricecart.errors import ValidationError
from pricecart.shared.utils.immutables import freeze_attributes, thaw
from pricecart.shared.utils.logger import LOG_NAME
from .conditions import _validate_name, _validate_order, _validate_taxable, _validate_value
from .enums import ConditionTarget, ConditionType

logger = logging.getLogger(f"{LOG_NAME}.domain.rules")

ItemIds = Union[str, Sequence[str]]


class _PricedItem(Protocol):
    """Мінімальний контракт позиції кошика, потрібний правилам."""

    id: Any
    quantity: int

    def subtotal(self) -> Price: ...

    def unit_price(self) -> Price: ...


# ================================
# 🔎 ЗІСТАВЛЕННЯ ID ЗА ШАБЛОНОМ
# ================================
def matches_pattern(value: str, pattern: str) -> bool:
    """`*` відповідає будь-якому ID, `sku-*` — будь-якому суфіксу, інакше точний збіг."""
    if pattern == "*":
        return True
    if "*" not in pattern:
        return value == pattern
    regex = re.escape(pattern).replace(r"\*", ".*")
    return re.fullmatch(regex, value) is not None


def _normalize_ids(item_ids: ItemIds) -> Tuple[str, ...]:
    if isinstance(item_ids, str):
        return (item_ids,)
    ids = tuple(str(i) for i in item_ids)
    if not ids:
        raise ValidationError("Rule item_ids must not be empty.")
    return ids


# ================================
# 🧠 БАЗОВЕ ПРАВИЛО
# ================================
class Rule(ABC):
    """Спільна форма звітності (name, value, type, target, attributes, order, taxable) та протокол контексту."""

    TAG: ClassVar[str] = ""

    def __init__(
        self,
        name: str,
        value: Any = 0,
        attributes: Optional[Mapping[str, Any]] = None,
        order: int = 0,
        taxable: bool = False,
    ) -> None:
        self.name = _validate_name(name)
        self.value: Decimal = _validate_value(value)
        self.type = ConditionType.FIXED
        self.target = ConditionTarget.SUBTOTAL
        self.attributes = freeze_attributes(attributes)
        self.order = _validate_order(order)
        self.taxable = _validate_taxable(taxable)
        self._items: Tuple[_PricedItem, ...] = ()
        self._subtotal: Optional[Price] = None

    # ================================
    # 🧷 КОНТЕКСТ
    # ================================
    @property
    def context_set(self) -> bool:
        return self._subtotal is not None

    @property
    def items(self) -> Tuple[_PricedItem, ...]:
        return self._items

    @property
    def subtotal(self) -> Optional[Price]:
        return self._subtotal

    def set_context(self, items: Union[Mapping[Any, _PricedItem], Iterable[_PricedItem]], subtotal: Price) -> "Rule":
        """Зберігає знімок позицій і підсумок для одного циклу обчислень."""
        values = items.values() if isinstance(items, Mapping) else items
        self._items = tuple(values)
        self._subtotal = subtotal
        return self

    def with_context(self, items: Union[Mapping[Any, _PricedItem], Iterable[_PricedItem]], subtotal: Price) -> "Rule":
        """Повертає привʼязану копію правила, не змінюючи оригінал."""
        bound = copy.copy(self)
        return bound.set_context(items, subtotal)

    def clear_context(self) -> "Rule":
        self._items = ()
        self._subtotal = None
        return self

    # ================================
    # 🧮 ОБЧИСЛЕННЯ
    # ================================
    def applies(self) -> bool:
        if not self.context_set:
            return False
        return self._applies()

    def get_discount(self) -> Price:
        if not self.context_set:
            return self._zero()
        return self._discount()

    def calculate(self, price: Optional[Price] = None) -> Price:
        """Той самий інтерфейс, що й у `Condition`: база ігнорується, рахується з контексту."""
        if not self.context_set or not self._applies():
            return self._zero()
        return self._discount()

    @abstractmethod
    def _applies(self) -> bool:
        ...

    @abstractmethod
    def _discount(self) -> Price:
        ...

    @property
    def is_percentage(self) -> bool:
        return self.type is ConditionType.PERCENTAGE

    # ================================
    # 🧰 ДОПОМІЖНЕ
    # ================================
    def _currency(self) -> str:
        return self._subtotal.currency if self._subtotal is not None else DEFAULT_CURRENCY

    def _locale(self) -> str:
        return self._subtotal.locale if self._subtotal is not None else DEFAULT_LOCALE

    def _zero(self) -> Price:
        return Price.zero(self._currency(), self._locale())

    def _price(self, value: Union[Decimal, Fraction]) -> Price:
        return Price(value, self._currency(), self._locale())

    def _matching_items(self, item_ids: Tuple[str, ...]) -> List[_PricedItem]:
        return [
            item for item in self._items
            if any(matches_pattern(str(item.id), pattern) for pattern in item_ids)
        ]

    def _matching_quantity(self, item_ids: Tuple[str, ...]) -> int:
        return sum(item.quantity for item in self._matching_items(item_ids))

    def _percent_off(self, base: Price, pct: Decimal) -> Price:
        """`-(base × |pct| / 100)` з одним округленням."""
        return self._price(-percent(base.to_rational(), abs(to_fraction(pct))))

    def formatted_value(self) -> str:
        if self.is_percentage:
            return f"{format_plain_number(self.value)}%"
        return self._price(self.value).formatted()

    # ================================
    # 📦 СЕРІАЛІЗАЦІЯ
    # ================================
    def _constructor_fields(self) -> Dict[str, Any]:
        return {}

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "class": self.TAG,
            "name": self.name,
            "value": str(self.value),
            "type": self.type.value,
            "target": self.target.value,
            "attributes": thaw(self.attributes),
            "order": self.order,
            "taxable": self.taxable,
        }
        data.update(self._constructor_fields())
        return data

    @classmethod
    @abstractmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Rule":
        """Відновлює правило зі знімка `to_dict()`."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, value={str(self.value)!r})"


# ================================
# 🗂️ РЕЄСТР ПРАВИЛ
# ================================
_REGISTRY: Dict[str, Type[Rule]] = {}


def register_rule(cls: Type[Rule]) -> Type[Rule]:
    _REGISTRY[cls.TAG] = cls
    return cls


def _common_kwargs(data: Mapping[str, Any]) -> Dict[str, Any]:
    return {
        "attributes": data.get("attributes") or {},
        "order": data.get("order", 0),
        "taxable": data.get("taxable", False),
    }


# ================================
# 💰 ПОРІГ ПІДСУМКУ
# ================================
@register_rule
class ThresholdRule(Rule):
    """Знижка, коли підсумок кошика досягає мінімуму."""

    TAG = "threshold"

    def __init__(
        self,
        name: str,
        min_subtotal: Any,
        discount: Any,
        discount_type: Union[ConditionType, str] = ConditionType.PERCENTAGE,
        attributes: Optional[Mapping[str, Any]] = None,
        order: int = 0,
        taxable: bool = False,
    ) -> None:
        super().__init__(name, discount, attributes, order, taxable)
        self.min_subtotal = _validate_value(min_subtotal)
        self.discount_type = ConditionType.coerce(discount_type)
        self.type = self.discount_type

    def _applies(self) -> bool:
        return self._subtotal.amount >= self.min_subtotal

    def _discount(self) -> Price:
        if self.discount_type is ConditionType.PERCENTAGE:
            return self._percent_off(self._subtotal, self.value)
        return self._price(self.value)

    def formatted_value(self) -> str:
        threshold = self._price(self.min_subtotal).formatted()
        if self.discount_type is ConditionType.PERCENTAGE:
            return f"{format_plain_number(abs(self.value))}% off orders over {threshold}"
        return f"{self._price(abs(self.value)).formatted()} off orders over {threshold}"

    def _constructor_fields(self) -> Dict[str, Any]:
        return {
            "min_subtotal": str(self.min_subtotal),
            "discount_type": self.discount_type.value,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ThresholdRule":
        return cls(
            data.get("name"),
            min_subtotal=data.get("min_subtotal", 0),
            discount=data.get("value", 0),
            discount_type=data.get("discount_type", data.get("type", ConditionType.PERCENTAGE)),
            **_common_kwargs(data),
        )


# ================================
# 🪜 СХОДИНКОВА ЗНИЖКА
# ================================
@register_rule
class TieredRule(Rule):
    """
    Відсоток за найвищим досягнутим порогом.

    Пороги не сумуються: працює лише один, знайдений при скануванні від найбільшого.
    """

    TAG = "tiered"

    def __init__(
        self,
        name: str,
        tiers: Mapping[Any, Any],
        attributes: Optional[Mapping[str, Any]] = None,
        order: int = 0,
        taxable: bool = False,
    ) -> None:
        super().__init__(name, 0, attributes, order, taxable)
        if not isinstance(tiers, Mapping) or not tiers:
            raise ValidationError("TieredRule requires a non-empty mapping of threshold → discount percent.")
        self.type = ConditionType.PERCENTAGE
        self._tiers: Tuple[Tuple[Decimal, Decimal], ...] = tuple(
            (_validate_value(threshold), _validate_value(discount)) for threshold, discount in tiers.items()
        )

    def applicable_tier(self) -> Optional[Tuple[Decimal, Decimal]]:
        """Повертає `(threshold, discount)` або None, якщо жоден поріг не досягнуто."""
        if not self.context_set:
            return None
        for threshold, discount in sorted(self._tiers, key=lambda tier: tier[0], reverse=True):
            if self._subtotal.amount >= threshold:
                return threshold, discount
        return None

    def _applies(self) -> bool:
        return self.applicable_tier() is not None

    def _discount(self) -> Price:
        tier = self.applicable_tier()
        if tier is None:
            return self._zero()
        return self._percent_off(self._subtotal, tier[1])

    def formatted_value(self) -> str:
        tier = self.applicable_tier()
        if tier is None:
            return "No discount"
        return f"{format_plain_number(abs(tier[1]))}% off"

    def tiers_list(self) -> List[Dict[str, Decimal]]:
        return [{"threshold": threshold, "discount": discount} for threshold, discount in self._tiers]

    def _constructor_fields(self) -> Dict[str, Any]:
        return {"tiers": {str(threshold): str(discount) for threshold, discount in self._tiers}}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "TieredRule":
        return cls(data.get("name"), tiers=data.get("tiers") or {}, **_common_kwargs(data))


# ================================
# 📦 КІЛЬКІСТЬ ТОВАРІВ
# ================================
@register_rule
class ItemQuantityRule(Rule):
    """Знижка, коли сумарна кількість відповідних позицій досягає мінімуму."""

    TAG = "item_quantity"

    def __init__(
        self,
        name: str,
        min_quantity: int,
        discount: Any,
        discount_type: Union[ConditionType, str] = ConditionType.PERCENTAGE,
        item_ids: ItemIds = "*",
        per_item: bool = False,
        attributes: Optional[Mapping[str, Any]] = None,
        order: int = 0,
        taxable: bool = False,
    ) -> None:
        super().__init__(name, discount, attributes, order, taxable)
        if isinstance(min_quantity, bool) or not isinstance(min_quantity, int) or min_quantity < 0:
            raise ValidationError("ItemQuantityRule min_quantity must be a non-negative integer.")
        self.min_quantity = min_quantity
        self.discount_type = ConditionType.coerce(discount_type)
        self.type = self.discount_type
        self.item_ids = _normalize_ids(item_ids)
        self.per_item = bool(per_item)

    def _applies(self) -> bool:
        return self._matching_quantity(self.item_ids) >= self.min_quantity

    def _discount(self) -> Price:
        matching = self._matching_items(self.item_ids)
        if not matching:
            return self._zero()
        if self.discount_type is ConditionType.PERCENTAGE:
            base = self._zero()
            for item in matching:
                base = base.plus(item.subtotal())
            return self._percent_off(base, self.value)
        if self.per_item:
            quantity = sum(item.quantity for item in matching)
            return self._price(self.value).multiply_by(quantity)
        return self._price(self.value)

    def formatted_value(self) -> str:
        if self.discount_type is ConditionType.PERCENTAGE:
            return f"{format_plain_number(abs(self.value))}% off when buying {self.min_quantity}+"
        per_item = " per item" if self.per_item else ""
        return f"{self._price(abs(self.value)).formatted()} off{per_item} when buying {self.min_quantity}+"

    def _constructor_fields(self) -> Dict[str, Any]:
        return {
            "min_quantity": self.min_quantity,
            "discount_type": self.discount_type.value,
            "item_ids": list(self.item_ids),
            "per_item": self.per_item,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ItemQuantityRule":
        return cls(
            data.get("name"),
            min_quantity=int(data.get("min_quantity", 0)),
            discount=data.get("value", 0),
            discount_type=data.get("discount_type", data.get("type", ConditionType.PERCENTAGE)),
            item_ids=data.get("item_ids", "*"),
            per_item=bool(data.get("per_item", False)),
            **_common_kwargs(data),
        )


# ================================
# 🎁 КУПИ X, ОТРИМАЙ Y
# ================================
@register_rule
class BuyXGetYRule(Rule):
    """
    Кожен повний набір із `buy + get` одиниць дає `get` одиниць зі знижкою.

    Знижка застосовується до найдешевших одиниць першими.
    """

    TAG = "buy_x_get_y"

    def __init__(
        self,
        name: str,
        buy_quantity: int,
        get_quantity: int,
        discount_percent: Any = 100,
        item_ids: ItemIds = "*",
        attributes: Optional[Mapping[str, Any]] = None,
        order: int = 0,
        taxable: bool = False,
    ) -> None:
        super().__init__(name, discount_percent, attributes, order, taxable)
        for label, qty in (("buy_quantity", buy_quantity), ("get_quantity", get_quantity)):
            if isinstance(qty, bool) or not isinstance(qty, int) or qty < 0:
                raise ValidationError(f"BuyXGetYRule {label} must be a non-negative integer.")
        if get_quantity < 1:
            raise ValidationError("BuyXGetYRule get_quantity must be at least 1.")
        self.type = ConditionType.PERCENTAGE
        self.buy_quantity = buy_quantity
        self.get_quantity = get_quantity
        self.item_ids = _normalize_ids(item_ids)

    @property
    def bundle_size(self) -> int:
        return self.buy_quantity + self.get_quantity

    def _applies(self) -> bool:
        return self._matching_quantity(self.item_ids) >= self.bundle_size

    def _discount(self) -> Price:
        matching = self._matching_items(self.item_ids)
        if not matching:
            return self._zero()
        bundles = sum(item.quantity for item in matching) // self.bundle_size
        to_discount = bundles * self.get_quantity
        if to_discount == 0:
            return self._zero()

        pct = to_fraction(self.value) / 100
        total = Fraction(0)
        for item in sorted(matching, key=lambda i: i.unit_price().amount):   # 🔽 Найдешевші першими
            if to_discount <= 0:
                break
            units = min(item.quantity, to_discount)
            total += item.unit_price().to_rational() * pct * units
            to_discount -= units
        return self._price(-total)

    def _constructor_fields(self) -> Dict[str, Any]:
        return {
            "buy_quantity": self.buy_quantity,
            "get_quantity": self.get_quantity,
            "discount_percent": str(self.value),
            "item_ids": list(self.item_ids),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "BuyXGetYRule":
        return cls(
            data.get("name"),
            buy_quantity=int(data.get("buy_quantity", 0)),
            get_quantity=int(data.get("get_quantity", 1)),
            discount_percent=data.get("discount_percent", data.get("value", 100)),
            item_ids=data.get("item_ids", "*"),
            **_common_kwargs(data),
        )


def rule_from_dict(data: Mapping[str, Any]) -> Rule:
    """Відновлює правило за тегом `class` разом з його полями конструктора."""
    if not isinstance(data, Mapping):
        raise ValidationError("Rule data must be a mapping.")
    variant = _REGISTRY.get(str(data.get("class")))
    if variant is None:
        raise ValidationError(f"Unknown rule class: {data.get('class')!r}")
    return variant.from_dict(data)


def available_rules() -> Dict[str, Type[Rule]]:
    return dict(_REGISTRY)


__all__ = [
    "Rule",
    "ThresholdRule",
    "TieredRule",
    "ItemQuantityRule",
    "BuyXGetYRule",
    "matches_pattern",
    "register_rule",
    "rule_from_dict",
    "available_rules",
]
