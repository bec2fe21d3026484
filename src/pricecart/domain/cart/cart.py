# 🛒 pricecart/domain/cart/cart.py
"""
🛒 Кошик — позиції, глобальні умови, правила та їхній розрахунок.

🔹 Стан завантажується зі сховища при створенні і зберігається після кожної мутації.
🔹 Після мутації кошик передає подію у sink, якщо `events_enabled` увімкнено.
🔹 `total()` делегує чистій згортці з `totals.compute_totals` — виклик без побічних ефектів.
🔹 `merge_from()` переносить позиції та умови іншого кошика через стратегію злиття.
"""

from __future__ import annotations

# 🔠 Системні імпорти
import logging
from typing import (
    TYPE_CHECKING,
    Any,
    Callable,
    Dict,
    Iterable,
    List,
    Mapping,
    Optional,
    Tuple,
    Type,
    Union,
)

# 🧩 Внутрішні модулі проєкту
from pricecart.config.settings import CartSettings
from pricecart.domain.conditions import Condition, Rule
from pricecart.domain.pricing import Price
from pricecart.errors import CartError, ValidationError
from pricecart.shared.utils.immutables import merge_attributes
from pricecart.shared.utils.logger import LOG_NAME
from .cart_item import CartItem, ConditionInput, normalize_quantity, to_condition, upsert_by_name
from .events import (
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
    NullEventSink,
    RuleAdded,
    RuleRemoved,
    RulesCleared,
)
from .interfaces import CartData, ICartStorage, IEventSink
from .serialization import cart_from_data, cart_to_data, item_to_data
from .totals import CartTotals, compute_totals, items_subtotal, taxable_items_subtotal

if TYPE_CHECKING:
    from pricecart.domain.merge.strategies import MergeStrategy

logger = logging.getLogger(f"{LOG_NAME}.domain.cart")

_UPDATABLE_FIELDS = ("name", "price", "quantity", "taxable", "attributes", "conditions")


class Cart:
    """Кошик, привʼязаний до одного сховища."""

    def __init__(
        self,
        storage: ICartStorage,
        *,
        settings: Optional[CartSettings] = None,
        events: Optional[IEventSink] = None,
    ) -> None:
        self._storage = storage
        self.settings = settings or CartSettings.from_config()
        self._events: IEventSink = events or NullEventSink()
        state = cart_from_data(storage.get(), self.settings)
        self._items: Dict[str, CartItem] = state.items
        self._conditions: List[Condition] = state.conditions
        self._rules: List[Rule] = state.rules
        logger.debug("🛒 Cart loaded | id=%s items=%d", self.id, len(self._items))

    @classmethod
    def load(
        cls,
        storage: ICartStorage,
        cart_id: str,
        *,
        settings: Optional[CartSettings] = None,
        events: Optional[IEventSink] = None,
    ) -> Optional["Cart"]:
        """Відкриває інший кошик того ж сховища або повертає None, якщо його немає."""
        if storage.get_cart_by_id(str(cart_id)) is None:
            return None
        bound = storage.for_cart(str(cart_id))
        if bound is None:
            return None
        return cls(bound, settings=settings, events=events)

    # ================================
    # 🔎 ДОСТУП
    # ================================
    @property
    def id(self) -> str:
        return self._storage.cart_id()

    @property
    def storage(self) -> ICartStorage:
        return self._storage

    def item(self, item_id: Union[str, int]) -> Optional[CartItem]:
        return self._items.get(str(item_id))

    def items(self) -> Dict[str, CartItem]:
        return dict(self._items)

    def conditions(self) -> Tuple[Condition, ...]:
        return tuple(self._conditions)

    def rules(self) -> Tuple[Rule, ...]:
        return tuple(self._rules)

    def count(self) -> int:
        """Сумарна кількість одиниць."""
        return sum(item.quantity for item in self._items.values())

    def unique_count(self) -> int:
        return len(self._items)

    def is_empty(self) -> bool:
        return not self._items

    # ================================
    # 🧮 РОЗРАХУНОК
    # ================================
    def subtotal(self) -> Price:
        return items_subtotal(self._items.values(), self.settings.currency, self.settings.locale)

    def taxable_subtotal(self) -> Price:
        return taxable_items_subtotal(self._items.values(), self.settings.currency, self.settings.locale)

    def totals(self) -> CartTotals:
        return compute_totals(
            list(self._items.values()),
            self._conditions,
            self._rules,
            compound_discounts=self.settings.compound_discounts,
            currency=self.settings.currency,
            locale=self.settings.locale,
        )

    def total(self) -> Price:
        return self.totals().total

    def raw_cart_data(self) -> Dict[str, Any]:
        totals = self.totals()
        return {
            "id": self.id,
            "items": {item_id: item.to_dict() for item_id, item in self._items.items()},
            "subtotal": totals.subtotal,
            "taxable_subtotal": totals.taxable_subtotal,
            "total": totals.total,
            "count": self.count(),
            "conditions": [condition.to_dict() for condition in self._conditions],
            "rules": [rule.to_dict() for rule in self._rules],
        }

    # ================================
    # 🛍️ ПОЗИЦІЇ
    # ================================
    def add_item(self, item: Union[CartItem, Mapping[str, Any]]) -> "Cart":
        """
        Додає позицію або збільшує кількість наявної.

        Для наявного ID: кількості додаються, атрибути зливаються (нові перемагають),
        `taxable` та умови зберігаються, якщо не передані нові.
        Готова `CartItem` переводиться на налаштування кошика.

        Raises:
            ValidationError: немає `id`, `name` або `price`.
        """
        if isinstance(item, CartItem):
            item = item.with_settings(self.settings)
            old = self._items.get(item.id)
            self._items[item.id] = item
            self._after_item_write(item, old.quantity if old else None)
            return self

        if not isinstance(item, Mapping):
            raise ValidationError(f"Unsupported item: {item!r}")
        for key, label in (("id", "ID"), ("name", "name"), ("price", "price")):
            if item.get(key) is None:
                raise ValidationError(f"Item {label} is required")

        data = dict(item)
        item_id = str(data["id"])
        existing = self._items.get(item_id)
        if existing is not None:
            data["quantity"] = normalize_quantity(data.get("quantity", 1)) + existing.quantity
            if data.get("taxable") is None:
                data["taxable"] = existing.taxable
            data["attributes"] = merge_attributes(existing.attributes, data.get("attributes"))
            if data.get("conditions") is None:
                data["conditions"] = existing.conditions

        cart_item = CartItem.make(data, settings=self.settings)
        self._items[item_id] = cart_item
        self._after_item_write(cart_item, existing.quantity if existing else None)
        return self

    def _after_item_write(self, item: CartItem, old_quantity: Optional[int]) -> None:
        self._persist()
        if old_quantity is not None:
            logger.info("🔁 Item quantity updated | cart=%s item=%s %s→%s", self.id, item.id, old_quantity, item.quantity)
            self._dispatch(ItemQuantityUpdated, lambda: {
                "item_id": item.id,
                "old_quantity": old_quantity,
                "new_quantity": item.quantity,
                "item": item_to_data(item),
            })
        else:
            logger.info("➕ Item added | cart=%s item=%s qty=%s", self.id, item.id, item.quantity)
            self._dispatch(ItemAdded, lambda: {"item": item_to_data(item)})

    def update_item(self, item_id: Union[str, int], changes: Mapping[str, Any]) -> "Cart":
        """
        Оновлює поля наявної позиції. Невідомий ID — без змін.

        Підтримувані ключі: name, price, quantity, taxable, attributes, conditions
        (нові умови зливаються з наявними за імʼям).
        """
        key = str(item_id)
        existing = self._items.get(key)
        if existing is None:
            logger.debug("🤷 update_item skipped, no such item | cart=%s item=%s", self.id, key)
            return self

        unknown = set(changes) - set(_UPDATABLE_FIELDS)
        if unknown:
            raise ValidationError(f"Unsupported item fields: {sorted(unknown)}")

        updates = {field: changes[field] for field in _UPDATABLE_FIELDS[:-1] if changes.get(field) is not None}
        if "price" in updates and not isinstance(updates["price"], Price):
            updates["price"] = Price(updates["price"], self.settings.currency, self.settings.locale)
        updated = existing.copy_with(**updates)
        if changes.get("conditions") is not None:
            updated.add_conditions(changes["conditions"])

        self._items[key] = updated
        self._persist()
        logger.info("✏️ Item updated | cart=%s item=%s fields=%s", self.id, key, sorted(changes))
        self._dispatch(ItemUpdated, lambda: {
            "item_id": key,
            "changes": sorted(changes),
            "item": item_to_data(updated),
        })
        return self

    def remove_item(self, item_id: Union[str, int]) -> "Cart":
        removed = self._items.pop(str(item_id), None)
        self._persist()
        if removed is not None:
            logger.info("➖ Item removed | cart=%s item=%s", self.id, removed.id)
            self._dispatch(ItemRemoved, lambda: {"item": item_to_data(removed)})
        return self

    def clear(self) -> "Cart":
        """Видаляє всі позиції; умови та правила лишаються."""
        cleared = self._items
        self._items = {}
        self._persist()
        if cleared:
            logger.info("🧹 Cart cleared | cart=%s items=%d", self.id, len(cleared))
            self._dispatch(CartCleared, lambda: {"items": [item_to_data(i) for i in cleared.values()]})
        return self

    def reset(self) -> "Cart":
        """Видаляє позиції, умови та правила."""
        items, conditions, rules = self._items, self._conditions, self._rules
        self._items, self._conditions, self._rules = {}, [], []
        self._persist()
        if items or conditions:
            logger.info("♻️ Cart reset | cart=%s", self.id)
            self._dispatch(CartReset, lambda: {
                "items": [item_to_data(i) for i in items.values()],
                "conditions": [c.to_dict() for c in conditions],
            })
        if rules:
            self._dispatch(RulesCleared, lambda: {"rules": [r.to_dict() for r in rules]})
        return self

    # ================================
    # 🧮 ГЛОБАЛЬНІ УМОВИ
    # ================================
    def add_condition(self, condition: ConditionInput) -> "Cart":
        resolved = to_condition(condition)
        replaced = upsert_by_name(self._conditions, resolved)
        self._persist()
        logger.info("🏷️ Condition added | cart=%s name=%s replaced=%s", self.id, resolved.name, replaced)
        self._dispatch(ConditionAdded, lambda: {"condition": resolved.to_dict(), "replaced": replaced})
        return self

    def add_conditions(self, conditions: Iterable[ConditionInput]) -> "Cart":
        for condition in conditions:
            self.add_condition(condition)
        return self

    def remove_condition(self, name: str) -> "Cart":
        removed = next((c for c in self._conditions if c.name == name), None)
        self._conditions = [c for c in self._conditions if c.name != name]
        self._persist()
        if removed is not None:
            self._dispatch(ConditionRemoved, lambda: {"condition_name": name, "condition": removed.to_dict()})
        return self

    def clear_conditions(self) -> "Cart":
        cleared = self._conditions
        self._conditions = []
        self._persist()
        if cleared:
            self._dispatch(ConditionsCleared, lambda: {"conditions": [c.to_dict() for c in cleared]})
        return self

    # ================================
    # 🏷️ УМОВИ ПОЗИЦІЙ
    # ================================
    def add_item_condition(self, item_id: Union[str, int], condition: ConditionInput) -> "Cart":
        """Додає умову до позиції; невідомий ID — без змін."""
        item = self._items.get(str(item_id))
        if item is None:
            return self
        resolved = to_condition(condition)
        item.add_condition(resolved)
        self._persist()
        self._dispatch(ItemConditionAdded, lambda: {"item_id": item.id, "condition": resolved.to_dict()})
        return self

    def remove_item_condition(self, item_id: Union[str, int], name: str) -> "Cart":
        item = self._items.get(str(item_id))
        if item is None:
            return self
        item.remove_condition(name)
        self._persist()
        self._dispatch(ItemConditionRemoved, lambda: {"item_id": item.id, "condition_name": name})
        return self

    # ================================
    # 🎯 ПРАВИЛА
    # ================================
    def add_rule(self, rule: Rule) -> "Cart":
        if not isinstance(rule, Rule):
            raise ValidationError(f"Expected a Rule, got {type(rule).__name__}")
        replaced = upsert_by_name(self._rules, rule)
        self._persist()
        logger.info("🎯 Rule added | cart=%s name=%s replaced=%s", self.id, rule.name, replaced)
        self._dispatch(RuleAdded, lambda: {"rule": rule.to_dict(), "replaced": replaced})
        return self

    def remove_rule(self, name: str) -> "Cart":
        removed = next((r for r in self._rules if r.name == name), None)
        self._rules = [r for r in self._rules if r.name != name]
        self._persist()
        if removed is not None:
            self._dispatch(RuleRemoved, lambda: {"rule_name": name, "rule": removed.to_dict()})
        return self

    def clear_rules(self) -> "Cart":
        cleared = self._rules
        self._rules = []
        self._persist()
        if cleared:
            self._dispatch(RulesCleared, lambda: {"rules": [r.to_dict() for r in cleared]})
        return self

    # ================================
    # 🔀 ЗЛИТТЯ
    # ================================
    def merge_from(
        self,
        source: Union["Cart", str],
        strategy: Union["MergeStrategy", str, None] = None,
    ) -> "Cart":
        """
        Переносить позиції та умови з іншого кошика.

        Raises:
            CartError: кошик-джерело не знайдено.
            MergeStrategyError: невідома назва стратегії.
        """
        from pricecart.domain.merge.strategies import MergeStrategyFactory   # 🔁 Уникаємо циклу імпортів

        source_cart = source if isinstance(source, Cart) else Cart.load(
            self._storage, str(source), settings=self.settings, events=self._events
        )
        if source_cart is None:
            raise CartError("Source cart not found", details=f"cart_id={source}")
        if source_cart is self or source_cart.id == self.id:
            return self

        if strategy is None:
            resolved = MergeStrategyFactory.default(self.settings.merge_default_strategy)
        elif isinstance(strategy, str):
            resolved = MergeStrategyFactory.make(strategy)
        else:
            resolved = strategy

        merged_ids: List[str] = []
        for item_id, source_item in source_cart.items().items():
            existing = self._items.get(item_id)
            if existing is not None:
                self._items[item_id] = resolved.merge_item(existing, source_item).with_settings(self.settings)
            else:
                self._items[item_id] = resolved.handle_new_item(source_item).with_settings(self.settings)
            merged_ids.append(item_id)

        self._conditions = resolved.merge_conditions(self._conditions, source_cart.conditions())
        self._persist()
        logger.info(
            "🔀 Cart merged | target=%s source=%s strategy=%s items=%d",
            self.id, source_cart.id, resolved.name(), len(merged_ids),
        )
        self._dispatch(CartMerged, lambda: {
            "source_cart_id": source_cart.id,
            "merged_items": [item_to_data(self._items[i]) for i in merged_ids],
            "strategy": resolved.name(),
        })

        if self.settings.merge_delete_source:
            source_cart.reset()
        return self

    # ================================
    # 💾 ПОБІЧНІ ЕФЕКТИ
    # ================================
    def _persist(self) -> CartData:
        return self._storage.put(cart_to_data(self._items, self._conditions, self._rules))

    def _dispatch(self, event_type: Type[CartEvent], payload: Callable[[], Dict[str, Any]]) -> None:
        if not self.settings.events_enabled:
            return
        self._events.emit(event_type(cart_id=self.id, payload=payload()))

    def __repr__(self) -> str:
        return f"Cart(id={self.id!r}, items={len(self._items)})"


__all__ = ["Cart"]
