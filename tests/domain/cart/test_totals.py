"""
🧪 test_totals.py — unit-тести для розрахунку підсумків кошика

Перевіряє:
- Податок після знижки на оподатковувану базу
- Пропорційне зменшення бази, коли є неоподатковувані позиції
- Правила разом з умовами
- Обмеження нулем і режим compound
"""

from decimal import Decimal

from pricecart.domain.cart import CartItem, compute_totals
from pricecart.domain.cart.totals import effective_adjustments
from pricecart.domain.conditions import (
    FixedCondition,
    PercentageCondition,
    PercentageTaxCondition,
    ThresholdRule,
    TieredRule,
)
from pricecart.domain.pricing import Price


def test_tax_applies_to_discounted_base():
    items = [CartItem("a", "A", 100)]
    totals = compute_totals(
        items,
        [PercentageTaxCondition("VAT", 10), PercentageCondition("Sale", -20)],
    )
    assert totals.subtotal.amount == Decimal("100.00")
    assert totals.taxable_subtotal.amount == Decimal("100.00")
    assert totals.total.amount == Decimal("88.00")
    assert [a.name for a in totals.applied] == ["Sale", "VAT"]


def test_taxable_discount_counts_twice_against_tax_base():
    items = [CartItem("a", "A", 100)]
    totals = compute_totals(
        items,
        [PercentageCondition("Sale", -10, taxable=True), PercentageTaxCondition("VAT", 10)],
    )
    # -10 → 90; база податку 90 + (-10) = 80 → +8
    assert totals.total.amount == Decimal("98.00")


def test_non_taxable_items_shrink_discount_share():
    items = [CartItem("a", "A", 100), CartItem("b", "B", 100, taxable=False)]
    totals = compute_totals(items, [PercentageCondition("Sale", -10), PercentageTaxCondition("VAT", 10)])
    assert totals.taxable_subtotal.amount == Decimal("100.00")
    # -20 на підсумок, -10 на оподатковувану частину → податок з 90
    assert totals.total.amount == Decimal("189.00")


def test_no_taxable_items_means_no_tax():
    items = [CartItem("a", "A", 50, taxable=False)]
    totals = compute_totals(items, [PercentageTaxCondition("VAT", 20)])
    assert totals.total.amount == Decimal("50.00")


def test_rules_join_conditions():
    items = [CartItem("a", "A", 150, 2)]
    totals = compute_totals(
        items,
        [FixedCondition("Shipping", 10)],
        [TieredRule("Tiers", {100: 5, 200: 10, 500: 15})],
    )
    assert totals.subtotal.amount == Decimal("300.00")
    assert totals.total.amount == Decimal("280.00")


def test_inactive_rule_is_skipped():
    items = [CartItem("a", "A", 20)]
    totals = compute_totals(items, rules=[ThresholdRule("Big", 100, 10)])
    assert totals.total.amount == Decimal("20.00")
    assert totals.applied == ()


def test_rule_stays_unbound_after_totals():
    rule = ThresholdRule("Big", 10, 10)
    compute_totals([CartItem("a", "A", 20)], rules=[rule])
    assert rule.context_set is False


def test_total_clamped_at_zero():
    totals = compute_totals([CartItem("a", "A", 30)], [FixedCondition("Gift card", -100)])
    assert totals.total.amount == Decimal("0.00")


def test_compound_cart_discounts():
    items = [CartItem("a", "A", 100)]
    conditions = [PercentageCondition("A", -10), PercentageCondition("B", -10)]
    assert compute_totals(items, conditions).total.amount == Decimal("80.00")
    assert compute_totals(items, conditions, compound_discounts=True).total.amount == Decimal("81.00")


def test_adjustment_order():
    conditions = [
        PercentageTaxCondition("tax", 5),
        FixedCondition("late", -1, order=5),
        FixedCondition("small", -1),
        FixedCondition("big", 10),
        FixedCondition("taxable", -1, taxable=True),
    ]
    ordered = effective_adjustments(conditions, [], [], Price("100.00"))
    assert [a.name for a in ordered] == ["big", "small", "late", "taxable", "tax"]


def test_empty_cart():
    totals = compute_totals([], [PercentageTaxCondition("VAT", 10)])
    assert totals.subtotal.is_zero()
    assert totals.total.is_zero()
