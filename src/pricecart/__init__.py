# 🛒 pricecart/__init__.py
"""
🛒 pricecart — рушій розрахунку цін і промо-акцій кошика.

🔹 `Price` — точні грошові значення з округленням до мінімальної одиниці валюти.
🔹 `Condition` / `Rule` — статичні коригування та контекстні промо-правила.
🔹 `Cart` / `CartItem` — позиції, підсумки, податок і злиття кошиків.
"""

from pricecart.domain.cart import Cart, CartItem, CartTotals, RecordingEventSink, compute_totals
from pricecart.domain.conditions import (
    BuyXGetYRule,
    Condition,
    ConditionTarget,
    ConditionType,
    FixedCondition,
    ItemQuantityRule,
    PercentageCondition,
    PercentageTaxCondition,
    Rule,
    ThresholdRule,
    TieredRule,
)
from pricecart.domain.pricing import Price

__version__ = "1.0.0"

__all__ = [
    "Price",
    "Condition",
    "FixedCondition",
    "PercentageCondition",
    "PercentageTaxCondition",
    "ConditionType",
    "ConditionTarget",
    "Rule",
    "ThresholdRule",
    "TieredRule",
    "ItemQuantityRule",
    "BuyXGetYRule",
    "Cart",
    "CartItem",
    "CartTotals",
    "compute_totals",
    "RecordingEventSink",
    "__version__",
]
