# 🔀 pricecart/domain/merge/strategies.py
"""
🔀 Стратегії злиття двох кошиків.

🔹 `sum` — кількості додаються, назва/ціна/taxable/атрибути беруться з джерела, умови зливаються за імʼям.
🔹 `replace` — позиція та умови джерела повністю замінюють цільові.
🔹 `max` — перемагає позиція з більшою кількістю; при рівності лишається цільова.
🔹 `keep_target` — цільові позиції та умови без змін, додаються лише нові позиції.
🔹 `MergeStrategyFactory` — реєстр стратегій за назвою.
"""

from __future__ import annotations

# 🔠 Системні імпорти
import logging
from abc import ABC, abstractmethod
from typing import Callable, ClassVar, Dict, List, Optional, Sequence, Type

# 🧩 Внутрішні модулі проєкту
from pricecart.domain.cart.cart_item import CartItem
from pricecart.domain.conditions import Condition
from pricecart.errors import MergeStrategyError
from pricecart.shared.utils.logger import LOG_NAME

logger = logging.getLogger(f"{LOG_NAME}.domain.merge")


def merge_by_name(target: Sequence[Condition], source: Sequence[Condition]) -> List[Condition]:
    """Злиття за імʼям: однойменні умови джерела замінюють цільові на їхньому місці."""
    merged: Dict[str, Condition] = {condition.name: condition for condition in target}
    for condition in source:
        merged[condition.name] = condition
    return list(merged.values())


# ================================
# 🧠 БАЗОВА СТРАТЕГІЯ
# ================================
class MergeStrategy(ABC):
    NAME: ClassVar[str] = ""

    def name(self) -> str:
        return self.NAME

    def handle_new_item(self, source: CartItem) -> CartItem:
        """Позиція, якої немає в цільовому кошику, копіюється як є."""
        return source.copy_with()

    @abstractmethod
    def merge_item(self, target: CartItem, source: CartItem) -> CartItem:
        ...

    @abstractmethod
    def merge_conditions(self, target: Sequence[Condition], source: Sequence[Condition]) -> List[Condition]:
        ...


class SumMergeStrategy(MergeStrategy):
    NAME = "sum"

    def merge_item(self, target: CartItem, source: CartItem) -> CartItem:
        return CartItem(
            id=target.id,
            name=source.name,
            price=source.unit_price(),
            quantity=target.quantity + source.quantity,
            taxable=source.taxable,
            attributes=source.attributes,
            conditions=merge_by_name(target.conditions, source.conditions),
            settings=target.settings,
        )

    def merge_conditions(self, target: Sequence[Condition], source: Sequence[Condition]) -> List[Condition]:
        return merge_by_name(target, source)


class ReplaceMergeStrategy(MergeStrategy):
    NAME = "replace"

    def merge_item(self, target: CartItem, source: CartItem) -> CartItem:
        return source.copy_with(settings=target.settings)

    def merge_conditions(self, target: Sequence[Condition], source: Sequence[Condition]) -> List[Condition]:
        return list(source)


class MaxMergeStrategy(MergeStrategy):
    """Перемагає більша кількість; при рівності — цільова позиція."""

    NAME = "max"

    def merge_item(self, target: CartItem, source: CartItem) -> CartItem:
        winner = source if source.quantity > target.quantity else target
        return winner.copy_with(settings=target.settings)

    def merge_conditions(self, target: Sequence[Condition], source: Sequence[Condition]) -> List[Condition]:
        # однойменні умови цілі лишаються, нові з джерела додаються
        known = {condition.name for condition in target}
        return list(target) + [condition for condition in source if condition.name not in known]


class KeepTargetMergeStrategy(MergeStrategy):
    NAME = "keep_target"

    def merge_item(self, target: CartItem, source: CartItem) -> CartItem:
        return target.copy_with()

    def merge_conditions(self, target: Sequence[Condition], source: Sequence[Condition]) -> List[Condition]:
        return list(target)


# ================================
# 🏭 ФАБРИКА
# ================================
class MergeStrategyFactory:
    """Реєстр стратегій злиття за назвою."""

    _strategies: ClassVar[Dict[str, Callable[[], MergeStrategy]]] = {
        SumMergeStrategy.NAME: SumMergeStrategy,
        ReplaceMergeStrategy.NAME: ReplaceMergeStrategy,
        MaxMergeStrategy.NAME: MaxMergeStrategy,
        KeepTargetMergeStrategy.NAME: KeepTargetMergeStrategy,
    }

    @classmethod
    def make(cls, name: str) -> MergeStrategy:
        factory = cls._strategies.get(name)
        if factory is None:
            raise MergeStrategyError(
                f'Invalid merge strategy "{name}". Available strategies: {", ".join(cls.available())}'
            )
        return factory()

    @classmethod
    def default(cls, name: Optional[str] = None) -> MergeStrategy:
        """Стратегія з налаштувань (`cart.merge.default_strategy`), за замовчуванням `sum`."""
        return cls.make(name or SumMergeStrategy.NAME)

    @classmethod
    def available(cls) -> List[str]:
        return list(cls._strategies)

    @classmethod
    def register(cls, name: str, strategy: Type[MergeStrategy]) -> None:
        if not (isinstance(strategy, type) and issubclass(strategy, MergeStrategy)):
            raise MergeStrategyError(f"Merge strategy {strategy!r} must subclass MergeStrategy")
        cls._strategies[name] = strategy
        logger.info("🔀 Merge strategy registered | name=%s", name)

    @classmethod
    def unregister(cls, name: str) -> None:
        cls._strategies.pop(name, None)


__all__ = [
    "merge_by_name",
    "MergeStrategy",
    "SumMergeStrategy",
    "ReplaceMergeStrategy",
    "MaxMergeStrategy",
    "KeepTargetMergeStrategy",
    "MergeStrategyFactory",
]
