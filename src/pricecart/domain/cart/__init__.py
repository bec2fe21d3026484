# 🛒 pricecart/domain/cart/__init__.py
"""
🛒 Кошик: позиції, розрахунок підсумків, події та контракти сховищ.

🔹 `Cart` — агрегат з операціями над позиціями, умовами та правилами.
🔹 `CartItem` — позиція з власним розрахунком підсумку.
🔹 `compute_totals` — чиста згортка підсумків кошика.
"""

from .cart import Cart
from .cart_item import CartItem, ConditionInput, normalize_quantity
from .events import (
    CallbackEventSink,
    CartCleared,
    CartEvent,
    CartMerged,
    CartReset,
    ConditionAdded,
    ConditionRemoved,
    ConditionsCleared,
    ItemAdded,
    ItemConditionAdded,
    ItemConditionRemoved,
    ItemQuantityUpdated,
    ItemRemoved,
    ItemUpdated,
    LoggingEventSink,
    NullEventSink,
    RecordingEventSink,
    RuleAdded,
    RuleRemoved,
    RulesCleared,
)
from .interfaces import CartData, ICartStorage, ICommerceClient, IEventSink
from .serialization import CartState, cart_from_data, cart_to_data, item_from_data, item_to_data
from .totals import AppliedAdjustment, CartTotals, FoldState, compute_totals

__all__ = [
    "Cart",
    "CartItem",
    "ConditionInput",
    "normalize_quantity",
    "CartTotals",
    "AppliedAdjustment",
    "FoldState",
    "compute_totals",
    "CartState",
    "cart_to_data",
    "cart_from_data",
    "item_to_data",
    "item_from_data",
    "CartData",
    "ICartStorage",
    "IEventSink",
    "ICommerceClient",
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
