"""
🧪 test_rules.py — unit-тести для правил кошика

Перевіряє:
- Поведінку без контексту (нічого не застосовується)
- Поріг, сходинки, кількість, «купи X — отримай Y»
- Шаблони ID та форматування
- Відновлення правила з dict
"""

from decimal import Decimal

import pytest

from pricecart.domain.conditions import (
    BuyXGetYRule,
    ConditionType,
    ItemQuantityRule,
    Rule,
    ThresholdRule,
    TieredRule,
    available_rules,
    matches_pattern,
    rule_from_dict,
)
from pricecart.domain.pricing import Price
from pricecart.errors import ValidationError


class _Item:
    """Мінімальна позиція для контексту правил."""

    def __init__(self, item_id, unit, quantity):
        self.id = item_id
        self.quantity = quantity
        self._unit = Price(unit)

    def unit_price(self):
        return self._unit

    def subtotal(self):
        return self._unit.multiply_by(self.quantity)


def test_rule_without_context_is_inert():
    rule = ThresholdRule("Big", 100, 10)
    assert rule.context_set is False
    assert rule.applies() is False
    assert rule.get_discount().is_zero()
    assert rule.calculate(Price("500.00")).is_zero()


def test_with_context_leaves_original_unbound():
    rule = ThresholdRule("Big", 100, 10)
    bound = rule.with_context([], Price("150.00"))
    assert bound is not rule
    assert bound.applies() is True
    assert rule.context_set is False
    bound.clear_context()
    assert bound.applies() is False


def test_threshold_percentage_and_fixed():
    pct = ThresholdRule("Big", 100, 10).with_context([], Price("150.00"))
    assert pct.get_discount().amount == Decimal("-15.00")

    fixed = ThresholdRule("Flat", 50, -5, discount_type="fixed").with_context([], Price("50.00"))
    assert fixed.applies() is True
    assert fixed.calculate().amount == Decimal("-5.00")

    below = ThresholdRule("Big", 100, 10).with_context([], Price("99.99"))
    assert below.applies() is False
    assert below.calculate().is_zero()


def test_tiered_uses_highest_reached_tier():
    rule = TieredRule("Tiers", {100: 5, 200: 10, 500: 15})
    bound = rule.with_context([], Price("300.00"))
    assert bound.applicable_tier() == (Decimal("200"), Decimal("10"))
    assert bound.calculate().amount == Decimal("-30.00")
    assert bound.formatted_value() == "10% off"


def test_tiered_below_all_tiers():
    bound = TieredRule("Tiers", {100: 5}).with_context([], Price("50.00"))
    assert bound.applies() is False
    assert bound.formatted_value() == "No discount"


def test_tiered_requires_tiers():
    with pytest.raises(ValidationError):
        TieredRule("Tiers", {})


def test_buy_x_get_y_discounts_cheapest_units():
    items = [_Item("shirt", "30.00", 6)]
    rule = BuyXGetYRule("B2G1", 2, 1).with_context(items, Price("180.00"))
    assert rule.applies() is True
    assert rule.calculate().amount == Decimal("-60.00")


def test_buy_x_get_y_mixed_prices():
    items = [_Item("a", "50.00", 2), _Item("b", "10.00", 1)]
    rule = BuyXGetYRule("B2G1 half", 2, 1, discount_percent=50).with_context(items, Price("110.00"))
    assert rule.calculate().amount == Decimal("-5.00")


def test_buy_x_get_y_not_enough_units():
    rule = BuyXGetYRule("B2G1", 2, 1).with_context([_Item("a", "10", 2)], Price("20.00"))
    assert rule.applies() is False
    assert rule.calculate().is_zero()


def test_buy_x_get_y_requires_get_quantity():
    with pytest.raises(ValidationError):
        BuyXGetYRule("bad", 2, 0)


def test_item_quantity_percentage_on_matching_items():
    items = [_Item("sku-1", "10.00", 3), _Item("sku-2", "20.00", 2), _Item("other", "100.00", 1)]
    rule = ItemQuantityRule("Bulk", 5, 10, item_ids="sku-*").with_context(items, Price("170.00"))
    assert rule.applies() is True
    assert rule.calculate().amount == Decimal("-7.00")


def test_item_quantity_fixed_per_item():
    items = [_Item("a", "10.00", 4)]
    rule = ItemQuantityRule("Per", 3, -1, discount_type=ConditionType.FIXED, per_item=True)
    assert rule.with_context(items, Price("40.00")).calculate().amount == Decimal("-4.00")


def test_matches_pattern():
    assert matches_pattern("anything", "*")
    assert matches_pattern("sku-42", "sku-*")
    assert not matches_pattern("item-42", "sku-*")
    assert matches_pattern("a.b", "a.b")
    assert not matches_pattern("axb", "a.b")


def test_formatted_values():
    assert ThresholdRule("t", 100, 10).formatted_value() == "10% off orders over $100.00"
    assert ThresholdRule("t", 100, -5, discount_type="fixed").formatted_value() == "$5.00 off orders over $100.00"
    assert ItemQuantityRule("q", 5, 10).formatted_value() == "10% off when buying 5+"
    assert (
        ItemQuantityRule("q", 10, -5, discount_type="fixed", per_item=True).formatted_value()
        == "$5.00 off per item when buying 10+"
    )


def test_to_dict_and_rule_from_dict():
    rule = ItemQuantityRule("Bulk", 5, 10, item_ids=["a", "b*"], order=2)
    data = rule.to_dict()
    assert data["class"] == "item_quantity"
    assert data["item_ids"] == ["a", "b*"]
    restored = rule_from_dict(data)
    assert isinstance(restored, ItemQuantityRule)
    assert restored.min_quantity == 5
    assert restored.item_ids == ("a", "b*")
    assert restored.order == 2

    tiered = rule_from_dict(TieredRule("T", {100: 5}).to_dict())
    assert tiered.tiers_list() == [{"threshold": Decimal("100"), "discount": Decimal("5")}]


def test_unknown_rule_class():
    with pytest.raises(ValidationError):
        rule_from_dict({"class": "nope", "name": "x"})


def test_registry_lists_rules():
    assert set(available_rules()) == {"threshold", "tiered", "item_quantity", "buy_x_get_y"}


def test_rule_without_from_dict_is_abstract():
    class _NoRestore(Rule):
        def _applies(self):
            return True

        def _discount(self):
            return Price(-1)

    with pytest.raises(TypeError):
        _NoRestore("Broken", 1)
