# 🛍️ pricecart/domain/cart/cart_item.py
"""
🛍️ Позиція кошика та її розрахунок підсумку.

🔹 Кількість завжди нормалізується до цілого ≥ 1 (усічення, не округлення).
🔹 Умови позиції унікальні за імʼям: повторне додавання замінює запис на тому ж місці.
🔹 `subtotal()` сортує тимчасову копію умов і не змінює їхній видимий порядок.
"""

from __future__ import annotations

# 🔠 Системні імпорти
import logging
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union

# 🧩 Внутрішні модулі проєкту
from pricecart.config.settings import DEFAULT_SETTINGS, CartSettings
from pricecart.domain.conditions import (
    Condition,
    ConditionTarget,
    ConditionType,
    condition_from_dict,
)
from pricecart.domain.pricing import Price, to_decimal
from pricecart.errors import PriceError, ValidationError
from pricecart.shared.utils.immutables import freeze_attributes, thaw
from pricecart.shared.utils.logger import LOG_NAME

logger = logging.getLogger(f"{LOG_NAME}.domain.cart_item")

ConditionInput = Union[Condition, Mapping[str, Any]]

# 🔢 Порядок цілей у розрахунку позиції
_ITEM_TARGET_PRIORITY: Dict[ConditionTarget, int] = {
    ConditionTarget.ITEM: 1,
    ConditionTarget.SUBTOTAL: 2,
}


# ================================
# 🧰 НОРМАЛІЗАЦІЯ
# ================================
def normalize_quantity(quantity: Any) -> int:
    """`0`, `-5`, `0.001` → 1; `2.5` → 2."""
    if isinstance(quantity, bool):
        raise ValidationError("Item quantity must be a number.")
    if isinstance(quantity, int):
        return max(1, quantity)
    try:
        truncated = int(to_decimal(quantity))
    except PriceError as exc:
        raise ValidationError(f"Item quantity must be a number, got {quantity!r}.") from exc
    return max(1, truncated)


def to_condition(condition: ConditionInput) -> Condition:
    if isinstance(condition, Condition):
        return condition
    if isinstance(condition, Mapping):
        return condition_from_dict(condition)
    raise ValidationError(f"Unsupported condition: {condition!r}")


def upsert_by_name(entries: List[Any], entry: Any) -> bool:
    """Замінює запис з тим самим імʼям на місці або додає в кінець. Повертає True при заміні."""
    for index, existing in enumerate(entries):
        if existing.name == entry.name:
            entries[index] = entry
            return True
    entries.append(entry)
    return False


def _item_sort_key(indexed: Tuple[int, Condition]) -> Tuple[int, int, Decimal]:
    _, condition = indexed
    return (
        _ITEM_TARGET_PRIORITY.get(condition.target, 999),
        condition.order,
        -condition.value,
    )


# ================================
# 🛍️ ПОЗИЦІЯ КОШИКА
# ================================
class CartItem:
    """Рядок кошика з ціною одиниці, кількістю та власними умовами."""

    def __init__(
        self,
        id: Union[str, int],
        name: str,
        price: Union[Price, int, float, str, Decimal],
        quantity: Any = 1,
        taxable: bool = True,
        attributes: Optional[Mapping[str, Any]] = None,
        conditions: Optional[Iterable[ConditionInput]] = None,
        *,
        settings: CartSettings = DEFAULT_SETTINGS,
    ) -> None:
        if id is None or id == "" or isinstance(id, bool) or not isinstance(id, (str, int)):
            raise ValidationError("Item ID is required")
        if not isinstance(name, str) or not name:
            raise ValidationError("Item name is required")
        if price is None or price == "":
            raise ValidationError("Item price is required")

        self.settings = settings
        self.id: str = str(id)
        self.name = name
        self.price = price if isinstance(price, Price) else Price(price, settings.currency, settings.locale)
        self.quantity = normalize_quantity(quantity)
        self.taxable = bool(taxable)
        self.attributes: Mapping[str, Any] = freeze_attributes(attributes)
        self._conditions: List[Condition] = []
        for condition in conditions or ():
            upsert_by_name(self._conditions, to_condition(condition))

    @classmethod
    def make(cls, data: Mapping[str, Any], *, settings: CartSettings = DEFAULT_SETTINGS) -> "CartItem":
        """Створює позицію з мапи (`id`, `name`, `price`, `quantity`, `taxable`, `attributes`, `conditions`)."""
        return cls(
            id=data.get("id"),
            name=data.get("name"),
            price=data.get("price"),
            quantity=data.get("quantity", 1),
            taxable=data.get("taxable", True),
            attributes=data.get("attributes"),
            conditions=data.get("conditions"),
            settings=settings,
        )

    def copy_with(self, **changes: Any) -> "CartItem":
        """Нова позиція з тими самими полями, окрім змінених."""
        settings = changes.pop("settings", self.settings)
        fields: Dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "price": self.price,
            "quantity": self.quantity,
            "taxable": self.taxable,
            "attributes": self.attributes,
            "conditions": list(self._conditions),
        }
        fields.update(changes)
        return CartItem(settings=settings, **fields)

    def with_settings(self, settings: CartSettings) -> "CartItem":
        """
        Копія позиції під налаштуваннями кошика, який її приймає.

        🔹 Ціна у валюті власних налаштувань позиції переводиться у валюту та локаль кошика.
        🔹 Ціна, явно задана в іншій валюті, лишається як є.
        """
        if settings == self.settings:
            return self
        price = self.price
        if price.currency == self.settings.currency:
            price = Price(price.amount, settings.currency, settings.locale)
        return self.copy_with(price=price, settings=settings)

    # ================================
    # 🔧 МУТАЦІЇ
    # ================================
    @property
    def conditions(self) -> Tuple[Condition, ...]:
        """Умови у порядку додавання."""
        return tuple(self._conditions)

    def set_quantity(self, quantity: Any) -> "CartItem":
        self.quantity = normalize_quantity(quantity)
        return self

    def add_condition(self, condition: ConditionInput) -> "CartItem":
        upsert_by_name(self._conditions, to_condition(condition))
        return self

    def add_conditions(self, conditions: Iterable[ConditionInput]) -> "CartItem":
        for condition in conditions:
            self.add_condition(condition)
        return self

    def remove_condition(self, name: str) -> "CartItem":
        self._conditions = [c for c in self._conditions if c.name != name]
        return self

    def clear_conditions(self) -> "CartItem":
        self._conditions = []
        return self

    def get_condition(self, name: str) -> Optional[Condition]:
        return next((c for c in self._conditions if c.name == name), None)

    # ================================
    # 🧮 РОЗРАХУНОК
    # ================================
    def unit_price(self) -> Price:
        return self.price

    def unadjusted_subtotal(self) -> Price:
        return self.price.multiply_by(self.quantity)

    def subtotal(self) -> Price:
        """
        Підсумок позиції після всіх її умов.

        Порядок: ціль (ITEM → SUBTOTAL → інші), `order` за зростанням, значення за спаданням.
        Відсоткові умови на підсумок рахуються від `unit_price × qty`, або від поточного
        накопиченого підсумку при `compound_discounts`.
        """
        compound = self.settings.compound_discounts
        original_unit = self.price
        unit = original_unit
        zero = original_unit.zeroed()
        pct_adjustments = zero
        fixed_adjustments = zero

        ordered = sorted(enumerate(self._conditions), key=_item_sort_key)
        for _, condition in ordered:
            if condition.target is ConditionTarget.ITEM:
                if condition.type is ConditionType.PERCENTAGE:
                    base = unit if compound else original_unit
                    unit = unit.plus(condition.calculate(base))
                else:
                    unit = unit.plus(condition.calculate(zero))
            elif condition.target is ConditionTarget.SUBTOTAL:
                if condition.type is ConditionType.PERCENTAGE:
                    base = unit.multiply_by(self.quantity)
                    if compound:
                        base = base.plus(pct_adjustments).plus(fixed_adjustments)
                    pct_adjustments = pct_adjustments.plus(condition.calculate(base))
                else:
                    fixed_adjustments = fixed_adjustments.plus(condition.calculate(zero))

        result = unit.multiply_by(self.quantity).plus(pct_adjustments).plus(fixed_adjustments)
        logger.debug(
            "🧮 Item subtotal | id=%s qty=%s conditions=%d result=%s",
            self.id, self.quantity, len(ordered), result.amount,
        )
        return zero if result.is_negative() else result

    # ================================
    # 📦 ПРЕДСТАВЛЕННЯ
    # ================================
    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "price": str(self.price.amount),
            "currency": self.price.currency,
            "quantity": self.quantity,
            "taxable": self.taxable,
            "unit_price": str(self.unit_price().amount),
            "subtotal": str(self.subtotal().amount),
            "attributes": thaw(self.attributes),
            "conditions": [condition.to_dict() for condition in self._conditions],
        }

    def __repr__(self) -> str:
        return f"CartItem(id={self.id!r}, name={self.name!r}, price={self.price!r}, quantity={self.quantity})"


__all__ = ["CartItem", "ConditionInput", "normalize_quantity", "to_condition", "upsert_by_name"]
