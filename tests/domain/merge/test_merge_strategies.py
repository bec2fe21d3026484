"""
🧪 test_merge_strategies.py — unit-тести для стратегій злиття кошиків

Перевіряє:
- sum / replace / max / keep_target на однакових позиціях
- Злиття умов за імʼям
- Реєстр стратегій і помилку для невідомої назви
"""

from decimal import Decimal

import pytest

from pricecart.domain.cart import CartItem
from pricecart.domain.conditions import FixedCondition
from pricecart.domain.merge import (
    KeepTargetMergeStrategy,
    MaxMergeStrategy,
    MergeStrategy,
    MergeStrategyFactory,
    ReplaceMergeStrategy,
    SumMergeStrategy,
    merge_by_name,
)
from pricecart.errors import MergeStrategyError


@pytest.fixture
def target():
    return CartItem("a", "Target", 10, 2, conditions=[FixedCondition("t", 1), FixedCondition("shared", 1)])


@pytest.fixture
def source():
    return CartItem("a", "Source", 12, 3, conditions=[FixedCondition("shared", 5), FixedCondition("s", 1)])


def test_sum_adds_quantities_and_takes_source_fields(target, source):
    merged = SumMergeStrategy().merge_item(target, source)
    assert merged.quantity == 5
    assert merged.name == "Source"
    assert merged.price.amount == Decimal("12.00")
    assert [(c.name, c.value) for c in merged.conditions] == [
        ("t", Decimal("1")), ("shared", Decimal("5")), ("s", Decimal("1")),
    ]


def test_replace_takes_source(target, source):
    merged = ReplaceMergeStrategy().merge_item(target, source)
    assert (merged.name, merged.quantity) == ("Source", 3)
    assert ReplaceMergeStrategy().merge_conditions(target.conditions, source.conditions) == list(source.conditions)


def test_max_picks_larger_quantity(target, source):
    assert MaxMergeStrategy().merge_item(target, source).name == "Source"
    tie = CartItem("a", "Tie", 1, 2)
    assert MaxMergeStrategy().merge_item(target, tie).name == "Target"


def test_max_keeps_target_conditions(target, source):
    merged = MaxMergeStrategy().merge_conditions(target.conditions, source.conditions)
    assert [(c.name, c.value) for c in merged] == [
        ("t", Decimal("1")), ("shared", Decimal("1")), ("s", Decimal("1")),
    ]


def test_keep_target(target, source):
    strategy = KeepTargetMergeStrategy()
    assert strategy.merge_item(target, source).name == "Target"
    assert strategy.merge_conditions(target.conditions, source.conditions) == list(target.conditions)


def test_new_item_is_copied(source):
    copy = SumMergeStrategy().handle_new_item(source)
    assert copy is not source
    assert copy.quantity == source.quantity


def test_merge_by_name_preserves_target_positions():
    merged = merge_by_name([FixedCondition("a", 1), FixedCondition("b", 2)], [FixedCondition("a", 9)])
    assert [(c.name, c.value) for c in merged] == [("a", Decimal("9")), ("b", Decimal("2"))]


def test_factory_lookup_and_error():
    assert isinstance(MergeStrategyFactory.make("max"), MaxMergeStrategy)
    assert MergeStrategyFactory.default().name() == "sum"
    assert MergeStrategyFactory.available() == ["sum", "replace", "max", "keep_target"]
    with pytest.raises(
        MergeStrategyError,
        match='Invalid merge strategy "avg". Available strategies: sum, replace, max, keep_target',
    ):
        MergeStrategyFactory.make("avg")


def test_factory_register_custom_strategy():
    class FirstWins(KeepTargetMergeStrategy):
        NAME = "first_wins"

    MergeStrategyFactory.register("first_wins", FirstWins)
    try:
        assert isinstance(MergeStrategyFactory.make("first_wins"), MergeStrategy)
    finally:
        MergeStrategyFactory.unregister("first_wins")
    assert "first_wins" not in MergeStrategyFactory.available()

    with pytest.raises(MergeStrategyError):
        MergeStrategyFactory.register("bad", dict)
