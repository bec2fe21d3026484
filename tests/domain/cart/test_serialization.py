"""
🧪 test_serialization.py — тести знімків кошика для сховищ

Перевіряє:
- Структуру знімка позиції
- Відновлення варіантів умов і правил за тегом
- Старий формат (список позицій) та порожні знімки
"""

from decimal import Decimal

import pytest

from pricecart.domain.cart import CartItem
from pricecart.domain.cart.serialization import cart_from_data, cart_to_data, item_from_data, item_to_data
from pricecart.domain.conditions import BuyXGetYRule, FixedCondition, PercentageTaxCondition
from pricecart.errors import ValidationError


def test_item_snapshot_shape():
    item = CartItem("a", "A", "5.5", 2, attributes={"tags": ["x"]}, conditions=[FixedCondition("fee", 1)])
    data = item_to_data(item)
    assert data == {
        "id": "a",
        "name": "A",
        "price": "5.50",
        "currency": "USD",
        "quantity": 2,
        "taxable": True,
        "attributes": {"tags": ["x"]},
        "conditions": [FixedCondition("fee", 1).to_dict()],
    }


def test_cart_snapshot_restores_variants():
    items = {"a": CartItem("a", "A", 10)}
    data = cart_to_data(items, [PercentageTaxCondition("VAT", 20)], [BuyXGetYRule("B2G1", 2, 1)])
    state = cart_from_data(data)
    assert list(state.items) == ["a"]
    assert isinstance(state.conditions[0], PercentageTaxCondition)
    rule = state.rules[0]
    assert isinstance(rule, BuyXGetYRule)
    assert (rule.buy_quantity, rule.get_quantity, rule.value) == (2, 1, Decimal("100"))


def test_item_from_data_uses_stored_currency():
    item = item_from_data({"id": "a", "name": "A", "price": "100", "currency": "EUR"})
    assert item.price.currency == "EUR"
    assert item.quantity == 1
    assert item.taxable is True


def test_list_items_are_keyed_by_id():
    state = cart_from_data({"items": [{"id": 7, "name": "A", "price": 1}]})
    assert list(state.items) == ["7"]


@pytest.mark.parametrize("data", [None, {}])
def test_empty_snapshot(data):
    state = cart_from_data(data)
    assert state.items == {}
    assert state.conditions == []
    assert state.rules == []


def test_invalid_item_entry():
    with pytest.raises(ValidationError):
        item_from_data("not a mapping")
