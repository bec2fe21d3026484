# 🧾 pricecart/domain/cart/totals.py
"""
🧾 Розрахунок підсумків кошика як згортка з явним станом.

🔹 Підсумок = сума `item.subtotal()`, оподатковуваний підсумок — лише по позиціях з `taxable`.
🔹 Глобальні умови та правила, що спрацювали, сортуються разом:
   ціль (SUBTOTAL → TAXABLE → інші), спершу без `taxable`, далі `order`, значення за спаданням.
🔹 Кожне коригування підсумку пропорційно зменшує оподатковувану базу (частка taxable / subtotal),
   тож податок після знижок рахується від уже зменшеної бази.
🔹 Стан згортки (`FoldState`) — незмінний, `compute_totals` можна викликати скільки завгодно разів.
"""

from __future__ import annotations

# 🔠 Системні імпорти
import logging
from dataclasses import dataclass, replace
from decimal import Decimal
from fractions import Fraction
from functools import reduce
from typing import Dict, Iterable, List, Optional, Sequence, Tuple, Union

# 🧩 Внутрішні модулі проєкту
from pricecart.domain.conditions import Condition, ConditionTarget, ConditionType, Rule
from pricecart.domain.pricing import DEFAULT_CURRENCY, DEFAULT_LOCALE, Price
from pricecart.shared.utils.logger import LOG_NAME
from .cart_item import CartItem

logger = logging.getLogger(f"{LOG_NAME}.domain.totals")

Adjustment = Union[Condition, Rule]

_CART_TARGET_PRIORITY: Dict[ConditionTarget, int] = {
    ConditionTarget.SUBTOTAL: 1,
    ConditionTarget.TAXABLE: 2,
}


# ================================
# 🧱 DTO
# ================================
@dataclass(frozen=True, slots=True)
class FoldState:
    """Акумулятори згортки."""

    total: Price
    current_taxable_subtotal: Price
    taxable_adjustments: Price


@dataclass(frozen=True, slots=True)
class AppliedAdjustment:
    name: str
    target: ConditionTarget
    amount: Price


@dataclass(frozen=True, slots=True)
class CartTotals:
    subtotal: Price
    taxable_subtotal: Price
    total: Price
    applied: Tuple[AppliedAdjustment, ...] = ()


@dataclass(frozen=True, slots=True)
class _FoldContext:
    original_subtotal: Price
    original_taxable_subtotal: Price
    taxable_ratio: Optional[Fraction]
    compound_discounts: bool
    zero: Price


# ================================
# 🧮 ПІДСУМКИ ПОЗИЦІЙ
# ================================
def items_subtotal(items: Iterable[CartItem], currency: str = DEFAULT_CURRENCY, locale: str = DEFAULT_LOCALE) -> Price:
    total = Price.zero(currency, locale)
    for item in items:
        total = total.plus(item.subtotal())
    return total


def taxable_items_subtotal(items: Iterable[CartItem], currency: str = DEFAULT_CURRENCY, locale: str = DEFAULT_LOCALE) -> Price:
    return items_subtotal((item for item in items if item.taxable), currency, locale)


# ================================
# 🔃 ПОРЯДОК КОРИГУВАНЬ
# ================================
def _cart_sort_key(indexed: Tuple[int, Adjustment]) -> Tuple[int, int, int, Decimal]:
    _, adjustment = indexed
    return (
        _CART_TARGET_PRIORITY.get(adjustment.target, 999),
        2 if adjustment.taxable else 1,
        adjustment.order,
        -adjustment.value,
    )


def effective_adjustments(
    conditions: Sequence[Condition],
    rules: Sequence[Rule],
    items: Sequence[CartItem],
    subtotal: Price,
) -> List[Adjustment]:
    """Умови та привʼязані правила, що спрацювали, у порядку застосування."""
    bound_rules = [rule.with_context(items, subtotal) for rule in rules]
    candidates: List[Adjustment] = list(conditions) + [rule for rule in bound_rules if rule.applies()]
    return [adjustment for _, adjustment in sorted(enumerate(candidates), key=_cart_sort_key)]


# ================================
# 🔁 КРОК ЗГОРТКИ
# ================================
def _evaluate(adjustment: Adjustment, base: Price, zero: Price) -> Price:
    if adjustment.type is ConditionType.PERCENTAGE:
        return adjustment.calculate(base)
    return adjustment.calculate(zero)


def _step(ctx: _FoldContext, state: FoldState, adjustment: Adjustment, applied: List[AppliedAdjustment]) -> FoldState:
    if adjustment.target is ConditionTarget.SUBTOTAL:
        base = state.total if ctx.compound_discounts else ctx.original_subtotal
        amount = _evaluate(adjustment, base, ctx.zero)
        taxable_adjustments = state.taxable_adjustments
        current_taxable = state.current_taxable_subtotal
        if ctx.taxable_ratio is not None:
            proportional = amount.multiply_by(ctx.taxable_ratio)
            if adjustment.taxable:
                taxable_adjustments = taxable_adjustments.plus(proportional)
            current_taxable = current_taxable.plus(proportional)
        elif adjustment.taxable:
            taxable_adjustments = taxable_adjustments.plus(amount)
        applied.append(AppliedAdjustment(adjustment.name, adjustment.target, amount))
        return FoldState(state.total.plus(amount), current_taxable, taxable_adjustments)

    if adjustment.target is ConditionTarget.TAXABLE:
        base = state.current_taxable_subtotal.plus(state.taxable_adjustments)
        amount = _evaluate(adjustment, base, ctx.zero)
        applied.append(AppliedAdjustment(adjustment.name, adjustment.target, amount))
        return replace(state, total=state.total.plus(amount))

    return state


# ================================
# 🚀 ПУБЛІЧНИЙ API
# ================================
def compute_totals(
    items: Sequence[CartItem],
    conditions: Sequence[Condition] = (),
    rules: Sequence[Rule] = (),
    *,
    compound_discounts: bool = False,
    currency: str = DEFAULT_CURRENCY,
    locale: str = DEFAULT_LOCALE,
) -> CartTotals:
    """Рахує підсумок, оподатковуваний підсумок і фінальну суму кошика (не менше нуля)."""
    subtotal = items_subtotal(items, currency, locale)
    taxable_subtotal = taxable_items_subtotal(items, currency, locale)
    zero = Price.zero(currency, locale)

    ratio: Optional[Fraction] = None
    if taxable_subtotal.amount > 0 and subtotal.amount > 0:
        ratio = taxable_subtotal.to_rational() / subtotal.to_rational()

    ctx = _FoldContext(subtotal, taxable_subtotal, ratio, compound_discounts, zero)
    applied: List[AppliedAdjustment] = []
    ordered = effective_adjustments(conditions, rules, items, subtotal)
    final = reduce(
        lambda state, adjustment: _step(ctx, state, adjustment, applied),
        ordered,
        FoldState(total=subtotal, current_taxable_subtotal=taxable_subtotal, taxable_adjustments=zero),
    )
    total = zero if final.total.is_negative() else final.total
    logger.debug(
        "💸 Cart totals | subtotal=%s taxable=%s adjustments=%d total=%s",
        subtotal.amount, taxable_subtotal.amount, len(ordered), total.amount,
    )
    return CartTotals(subtotal, taxable_subtotal, total, tuple(applied))


__all__ = [
    "FoldState",
    "AppliedAdjustment",
    "CartTotals",
    "items_subtotal",
    "taxable_items_subtotal",
    "effective_adjustments",
    "compute_totals",
]
