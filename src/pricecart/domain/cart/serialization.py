# 📦 pricecart/domain/cart/serialization.py
"""
📦 Структурне представлення стану кошика для сховищ.

🔹 Знімок: `{"items": {id: {...}}, "conditions": [...], "rules": [...]}` — лише dict/list/str/int/bool.
🔹 Умови та правила серіалізуються з тегом `class`, тож відновлюється той самий варіант.
🔹 Під час читання приймаються і вже готові обʼєкти (`CartItem`, `Condition`, `Rule`).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional

from pricecart.config.settings import DEFAULT_SETTINGS, CartSettings
from pricecart.domain.conditions import Condition, Rule, condition_from_dict, rule_from_dict
from pricecart.domain.pricing import Price
from pricecart.errors import ValidationError
from pricecart.shared.utils.immutables import thaw
from .cart_item import CartItem


@dataclass
class CartState:
    """Розпакований стан кошика."""

    items: Dict[str, CartItem] = field(default_factory=dict)
    conditions: List[Condition] = field(default_factory=list)
    rules: List[Rule] = field(default_factory=list)


# ================================
# 📤 ЗАПИС
# ================================
def item_to_data(item: CartItem) -> Dict[str, Any]:
    return {
        "id": item.id,
        "name": item.name,
        "price": str(item.price.amount),
        "currency": item.price.currency,
        "quantity": item.quantity,
        "taxable": item.taxable,
        "attributes": thaw(item.attributes),
        "conditions": [condition.to_dict() for condition in item.conditions],
    }


def cart_to_data(
    items: Mapping[str, CartItem],
    conditions: Iterable[Condition] = (),
    rules: Iterable[Rule] = (),
) -> Dict[str, Any]:
    return {
        "items": {item_id: item_to_data(item) for item_id, item in items.items()},
        "conditions": [condition.to_dict() for condition in conditions],
        "rules": [rule.to_dict() for rule in rules],
    }


# ================================
# 📥 ЧИТАННЯ
# ================================
def item_from_data(data: Any, settings: CartSettings = DEFAULT_SETTINGS) -> CartItem:
    if isinstance(data, CartItem):
        return data
    if not isinstance(data, Mapping):
        raise ValidationError(f"Stored item must be a mapping, got {type(data).__name__}")
    price = data.get("price")
    if price is not None and not isinstance(price, Price):
        price = Price(price, data.get("currency") or settings.currency, settings.locale)
    return CartItem(
        id=data.get("id"),
        name=data.get("name"),
        price=price,
        quantity=data.get("quantity", 1),
        taxable=data.get("taxable", True),
        attributes=data.get("attributes"),
        conditions=data.get("conditions") or (),
        settings=settings,
    )


def _condition(entry: Any) -> Condition:
    return entry if isinstance(entry, Condition) else condition_from_dict(entry)


def _rule(entry: Any) -> Rule:
    return entry if isinstance(entry, Rule) else rule_from_dict(entry)


def cart_from_data(data: Optional[Mapping[str, Any]], settings: CartSettings = DEFAULT_SETTINGS) -> CartState:
    """Відновлює `CartState`; `None` або порожній знімок → порожній кошик."""
    state = CartState()
    if not data:
        return state
    raw_items = data.get("items") or {}
    entries = raw_items.items() if isinstance(raw_items, Mapping) else ((None, entry) for entry in raw_items)
    for key, entry in entries:
        item = item_from_data(entry, settings)
        state.items[str(key) if key is not None else item.id] = item
    state.conditions = [_condition(entry) for entry in data.get("conditions") or ()]
    state.rules = [_rule(entry) for entry in data.get("rules") or ()]
    return state


__all__ = [
    "CartState",
    "item_to_data",
    "item_from_data",
    "cart_to_data",
    "cart_from_data",
]
