# 🧮 pricecart/domain/conditions/__init__.py
"""
🧮 Умови та правила ціноутворення.

🔹 `Condition` та варіанти — статичні коригування позиції або кошика.
🔹 `Rule` та варіанти — контекстні промо-правила рівня кошика.
"""

from .conditions import (
    Condition,
    FixedCondition,
    PercentageCondition,
    PercentageTaxCondition,
    available_conditions,
    condition_from_dict,
    register_condition,
)
from .enums import ConditionTarget, ConditionType
from .rules import (
    BuyXGetYRule,
    ItemQuantityRule,
    Rule,
    ThresholdRule,
    TieredRule,
    available_rules,
    matches_pattern,
    register_rule,
    rule_from_dict,
)

__all__ = [
    "ConditionType",
    "ConditionTarget",
    "Condition",
    "FixedCondition",
    "PercentageCondition",
    "PercentageTaxCondition",
    "register_condition",
    "condition_from_dict",
    "available_conditions",
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
