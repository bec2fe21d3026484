# 📣 pricecart/domain/cart/events.py
"""
📣 Події кошика та приймачі (sinks) для них.

🔹 Кожна подія несе `cart_id`, `occurred_at` та незмінний `payload`.
🔹 Кошик викликає `sink.emit(event)` після кожної мутації, якщо події увімкнені в налаштуваннях.
🔹 `RecordingEventSink` зручний у тестах, `LoggingEventSink` — для спостереження в логах.
"""

from __future__ import annotations

# 🔠 Системні імпорти
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, List, Mapping, Optional, Type, TypeVar

# 🧩 Внутрішні модулі проєкту
from pricecart.shared.utils.immutables import freeze, thaw
from pricecart.shared.utils.logger import LOG_NAME

logger = logging.getLogger(f"{LOG_NAME}.domain.events")

E = TypeVar("E", bound="CartEvent")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ================================
# 🧾 БАЗОВА ПОДІЯ
# ================================
@dataclass(frozen=True)
class CartEvent:
    cart_id: str
    payload: Mapping[str, Any] = field(default_factory=dict)
    occurred_at: datetime = field(default_factory=_utcnow)

    def __post_init__(self) -> None:
        object.__setattr__(self, "payload", freeze(dict(self.payload)))

    @property
    def name(self) -> str:
        return type(self).__name__

    def to_dict(self) -> dict:
        return {
            "event": self.name,
            "cart_id": self.cart_id,
            "occurred_at": self.occurred_at.isoformat(),
            "payload": thaw(self.payload),
        }


# ================================
# 🛍️ ПОДІЇ ПОЗИЦІЙ
# ================================
class ItemAdded(CartEvent):
    """payload: item"""


class ItemUpdated(CartEvent):
    """payload: item_id, changes, item"""


class ItemQuantityUpdated(CartEvent):
    """payload: item_id, old_quantity, new_quantity, item"""


class ItemRemoved(CartEvent):
    """payload: item"""


class ItemConditionAdded(CartEvent):
    """payload: item_id, condition"""


class ItemConditionRemoved(CartEvent):
    """payload: item_id, condition_name"""


# ================================
# 🧮 ПОДІЇ УМОВ І ПРАВИЛ
# ================================
class ConditionAdded(CartEvent):
    """payload: condition, replaced"""


class ConditionRemoved(CartEvent):
    """payload: condition_name"""


class ConditionsCleared(CartEvent):
    """payload: conditions"""


class RuleAdded(CartEvent):
    """payload: rule, replaced"""


class RuleRemoved(CartEvent):
    """payload: rule_name"""


class RulesCleared(CartEvent):
    """payload: rules"""


# ================================
# 🛒 ПОДІЇ КОШИКА
# ================================
class CartCleared(CartEvent):
    """payload: items"""


class CartReset(CartEvent):
    """payload: items, conditions (правила йдуть окремою подією `RulesCleared`)"""


class CartMerged(CartEvent):
    """payload: source_cart_id, merged_items, strategy"""


# ================================
# 📥 ПРИЙМАЧІ ПОДІЙ
# ================================
class NullEventSink:
    def emit(self, event: CartEvent) -> None:
        return None


class RecordingEventSink:
    """Накопичує події в памʼяті."""

    def __init__(self) -> None:
        self.events: List[CartEvent] = []

    def emit(self, event: CartEvent) -> None:
        self.events.append(event)

    def of_type(self, event_type: Type[E]) -> List[E]:
        return [event for event in self.events if isinstance(event, event_type)]

    def names(self) -> List[str]:
        return [event.name for event in self.events]

    def clear(self) -> None:
        self.events.clear()


class LoggingEventSink:
    def __init__(self, log: Optional[logging.Logger] = None, level: int = logging.INFO) -> None:
        self._log = log or logger
        self._level = level

    def emit(self, event: CartEvent) -> None:
        self._log.log(
            self._level,
            "📣 %s | cart=%s",
            event.name,
            event.cart_id,
            extra={"event": event.name, "cart_id": event.cart_id},
        )


class CallbackEventSink:
    """Передає кожну подію у довільний callback."""

    def __init__(self, callback: Callable[[CartEvent], Any]) -> None:
        self._callback = callback

    def emit(self, event: CartEvent) -> None:
        self._callback(event)


__all__ = [
    "CartEvent",
    "ItemAdded",
    "ItemUpdated",
    "ItemQuantityUpdated",
    "ItemRemoved",
    "ItemConditionAdded",
    "ItemConditionRemoved",
    "ConditionAdded",
    "ConditionRemoved",
    "ConditionsCleared",
    "RuleAdded",
    "RuleRemoved",
    "RulesCleared",
    "CartCleared",
    "CartReset",
    "CartMerged",
    "NullEventSink",
    "RecordingEventSink",
    "LoggingEventSink",
    "CallbackEventSink",
]
