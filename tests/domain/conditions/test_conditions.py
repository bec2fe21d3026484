"""
🧪 test_conditions.py — unit-тести для Condition та варіантів

Перевіряє:
- Розрахунок фіксованих і відсоткових умов
- Пріоритет цілі рівня класу над ціллю з конструктора
- Валідацію параметрів
- Структурне представлення і відновлення варіанта
"""

from decimal import Decimal

import pytest

from pricecart.domain.conditions import (
    Condition,
    ConditionTarget,
    ConditionType,
    FixedCondition,
    PercentageCondition,
    PercentageTaxCondition,
    available_conditions,
    condition_from_dict,
)
from pricecart.domain.pricing import Price
from pricecart.errors import PriceError, ValidationError


def test_fixed_ignores_base_price():
    cond = FixedCondition("Shipping", 5)
    assert cond.calculate().amount == Decimal("5.00")
    assert cond.calculate(Price("999.00")).amount == Decimal("5.00")
    assert cond.type is ConditionType.FIXED


def test_fixed_takes_currency_from_base():
    cond = FixedCondition("Fee", 3)
    assert cond.calculate(Price("1", "EUR")).currency == "EUR"


def test_percentage_rounds_half_up():
    cond = PercentageCondition("Sale", -10)
    assert cond.calculate(Price("19.95")).amount == Decimal("-2.00")   # -1.995 → -2.00
    assert cond.calculate(Price("100.00")).amount == Decimal("-10.00")


def test_percentage_requires_price():
    with pytest.raises(PriceError, match="Price is required"):
        PercentageCondition("Sale", -10).calculate()


def test_default_target_is_subtotal():
    assert FixedCondition("a", 1).target is ConditionTarget.SUBTOTAL
    assert FixedCondition("a", 1, target="item").target is ConditionTarget.ITEM


def test_tax_variant_target_wins_over_constructor():
    tax = PercentageTaxCondition("VAT", 20, target=ConditionTarget.ITEM)
    assert tax.target is ConditionTarget.TAXABLE
    assert PercentageTaxCondition.make({"name": "VAT", "value": 20, "target": "subtotal"}).target is ConditionTarget.TAXABLE


def test_base_condition_is_abstract():
    with pytest.raises(TypeError):
        Condition("x", 1)


@pytest.mark.parametrize(
    "params, message",
    [
        ({"value": 1}, 'Parameter "name"'),
        ({"name": "", "value": 1}, 'Parameter "name"'),
        ({"name": "x"}, 'Parameter "value"'),
        ({"name": "x", "value": "abc"}, 'Parameter "value"'),
        ({"name": "x", "value": True}, 'Parameter "value"'),
        ({"name": "x", "value": 1, "order": "1"}, 'Parameter "order"'),
        ({"name": "x", "value": 1, "taxable": "yes"}, 'Parameter "taxable"'),
        ({"name": "x", "value": 1, "attributes": ["a"]}, 'Parameter "attributes"'),
        ({"name": "x", "value": 1, "target": "shipping"}, "target"),
    ],
)
def test_validation_errors(params, message):
    with pytest.raises(ValidationError, match=message):
        FixedCondition.make(params)


def test_formatted_value():
    assert PercentageCondition("a", "15.50").formatted_value() == "15.5%"
    assert PercentageCondition("a", 10).formatted_value() == "10%"
    assert FixedCondition("a", -5).formatted_value() == "-$5.00"


def test_attributes_are_immutable():
    cond = FixedCondition("a", 1, attributes={"code": "X"})
    with pytest.raises(TypeError):
        cond.attributes["code"] = "Y"  # type: ignore[index]


def test_to_dict_and_back_restores_variant():
    tax = PercentageTaxCondition("VAT", "7.25", attributes={"region": "CA"}, order=3, taxable=True)
    data = tax.to_dict()
    assert data == {
        "class": "percentage_tax",
        "name": "VAT",
        "value": "7.25",
        "type": "percentage",
        "target": "taxable",
        "attributes": {"region": "CA"},
        "order": 3,
        "taxable": True,
    }
    restored = condition_from_dict(data)
    assert isinstance(restored, PercentageTaxCondition)
    assert restored == tax


def test_from_dict_falls_back_to_type():
    restored = condition_from_dict({"name": "Addon", "value": 0.12, "type": "fixed", "target": "item"})
    assert isinstance(restored, FixedCondition)
    assert restored.value == Decimal("0.12")
    assert restored.target is ConditionTarget.ITEM


def test_unknown_class_tag():
    with pytest.raises(ValidationError):
        condition_from_dict({"class": "bogus", "name": "x", "value": 1})


def test_registry_lists_variants():
    assert set(available_conditions()) >= {"fixed", "percentage", "percentage_tax"}
