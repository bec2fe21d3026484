# 🧩 pricecart/domain/cart/interfaces.py
"""
🧩 Контракти зовнішніх співпрацівників кошика.

🔹 `ICartStorage` — зберігає структурний знімок `{items, conditions, rules}` одного кошика.
🔹 `IEventSink` — приймає події після мутацій.
🔹 `ICommerceClient` — перетворює конфігурацію товару з каталогу у позицію кошика.
"""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional, Protocol, runtime_checkable

from .events import CartEvent

CartData = Dict[str, Any]


@runtime_checkable
class ICartStorage(Protocol):
    """Сховище стану одного кошика."""

    def get(self) -> CartData:
        """Поточний знімок (порожній, якщо нічого не збережено)."""
        ...

    def put(self, cart: Mapping[str, Any]) -> CartData:
        ...

    def flush(self) -> None:
        ...

    def cart_id(self) -> str:
        ...

    def get_cart_by_id(self, cart_id: str) -> Optional[CartData]:
        """Знімок іншого кошика того ж бекенду або None."""
        ...

    def for_cart(self, cart_id: str) -> Optional["ICartStorage"]:
        """Сховище, привʼязане до іншого кошика того ж бекенду, або None."""
        ...


@runtime_checkable
class IEventSink(Protocol):
    def emit(self, event: CartEvent) -> None:
        ...


@runtime_checkable
class ICommerceClient(Protocol):
    def cart_item(self, slug: str, config: Optional[Mapping[str, Any]] = None) -> Any:
        """Повертає DTO з `to_cart_dict()` для `Cart.add_item`."""
        ...


__all__ = ["CartData", "ICartStorage", "IEventSink", "ICommerceClient"]
