# 🏠 pricecart/infrastructure/commerce/local_driver.py
"""
🏠 Локальний драйвер каталогу: той самий контракт, що й `CommerceClient`, без HTTP.

🔹 Товари та колекції передаються як словники у форматі API (`slug`, `name`, `status`, `prices`, `variants`, ...).
🔹 Видимі лише товари зі статусом `active`; невідомий slug → `CommerceConnectionError`.
🔹 Ціна обирається з цін варіанта (якщо вказано `variant_id`), інакше з цін товару, за валютою.
"""

from __future__ import annotations

# 🔠 Системні імпорти
import logging
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Mapping, Optional

# 🧩 Внутрішні модулі проєкту
from pricecart.config.settings import DEFAULT_SETTINGS, CartSettings
from pricecart.domain.cart.cart_item import CartItem
from pricecart.errors import CommerceConnectionError
from pricecart.shared.utils.logger import LOG_NAME
from .dtos import CartItemData, CollectionData, Page, PriceBreakdownData, ProductData

if TYPE_CHECKING:
    from pricecart.domain.cart.cart import Cart

logger = logging.getLogger(f"{LOG_NAME}.infrastructure.commerce.local")

_MAX_PER_PAGE = 100


def _paginate(entries: List[Dict[str, Any]], filters: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    filters = filters or {}
    per_page = max(1, min(int(filters.get("per_page", 15)), _MAX_PER_PAGE))
    page = max(1, int(filters.get("page", 1)))
    start = (page - 1) * per_page
    return {
        "data": entries[start:start + per_page],
        "meta": {"total": len(entries), "per_page": per_page, "current_page": page},
    }


class LocalCommerceDriver:
    """Каталог у памʼяті процесу."""

    def __init__(
        self,
        products: Iterable[Mapping[str, Any]] = (),
        collections: Iterable[Mapping[str, Any]] = (),
        *,
        settings: CartSettings = DEFAULT_SETTINGS,
    ) -> None:
        self._products: Dict[str, Dict[str, Any]] = {p["slug"]: dict(p) for p in products}
        self._collections: Dict[str, Dict[str, Any]] = {c["slug"]: dict(c) for c in collections}
        self._settings = settings

    # ================================
    # 📚 КАТАЛОГ
    # ================================
    def _active_products(self) -> List[Dict[str, Any]]:
        active = [p for p in self._products.values() if p.get("status", "active") == "active"]
        return sorted(active, key=lambda p: p.get("name", ""))

    def products(self, filters: Optional[Mapping[str, Any]] = None) -> Page[ProductData]:
        return Page.from_response(_paginate(self._active_products(), filters), ProductData.from_dict)

    def product(self, slug: str) -> ProductData:
        data = self._products.get(slug)
        if data is None or data.get("status", "active") != "active":
            raise CommerceConnectionError(f"No active product found with slug '{slug}'.")
        return ProductData.from_dict(data)

    def collections(self, filters: Optional[Mapping[str, Any]] = None) -> Page[CollectionData]:
        active = sorted(
            (c for c in self._collections.values() if c.get("is_active", True)),
            key=lambda c: c.get("name", ""),
        )
        return Page.from_response(_paginate(active, filters), CollectionData.from_dict)

    def collection(self, slug: str) -> CollectionData:
        data = self._collections.get(slug)
        if data is None or not data.get("is_active", True):
            raise CommerceConnectionError(f"No active collection found with slug '{slug}'.")
        return CollectionData.from_dict(data)

    # ================================
    # 💰 ЦІНИ ТА КОШИК
    # ================================
    def _variant(self, product: ProductData, variant_id: Any) -> Optional[Mapping[str, Any]]:
        if variant_id is None:
            return None
        for variant in product.variants:
            if variant.get("id") == variant_id and variant.get("is_active", True):
                return variant
        raise CommerceConnectionError(f"Variant '{variant_id}' not found for product '{product.slug}'.")

    def _unit_price(self, product: ProductData, variant: Optional[Mapping[str, Any]], currency: str) -> Decimal:
        sources = list((variant or {}).get("prices") or ()) + list(product.prices)
        for entry in sources:
            if str(entry.get("currency", "")).upper() == currency:
                return Decimal(str(entry["amount"]))
        raise CommerceConnectionError(f"No {currency} price for product '{product.slug}'.")

    def resolve_price(self, slug: str, config: Optional[Mapping[str, Any]] = None) -> PriceBreakdownData:
        config = config or {}
        product = self.product(slug)
        variant = self._variant(product, config.get("variant_id"))
        currency = str(config.get("currency") or self._settings.currency).upper()
        quantity = max(1, int(config.get("quantity", 1)))
        unit = self._unit_price(product, variant, currency)
        return PriceBreakdownData.from_dict({
            "product_slug": slug,
            "variant": dict(variant) if variant else None,
            "quantity": quantity,
            "currency": currency,
            "unit_price": str(unit),
            "tier_applied": None,
            "addons": [],
            "line_total": str(unit * quantity),
        })

    def cart_item(self, slug: str, config: Optional[Mapping[str, Any]] = None) -> CartItemData:
        config = config or {}
        breakdown = self.resolve_price(slug, config)
        product = self.product(slug)
        variant = breakdown.variant or {}
        item_id = variant.get("sku") or slug
        name = f"{product.name} - {variant['name']}" if variant.get("name") else product.name
        return CartItemData.from_dict({
            "id": item_id,
            "name": name,
            "price": breakdown.unit_price,
            "quantity": breakdown.quantity,
            "attributes": {
                "product_slug": slug,
                "variant_id": variant.get("id"),
                "sku": variant.get("sku"),
                "source": "local",
            },
            "conditions": [],
        })

    def add_to_cart(self, slug: str, config: Optional[Mapping[str, Any]], cart: "Cart") -> CartItem:
        data = self.cart_item(slug, config)
        cart.add_item(data.to_cart_dict())
        item = cart.item(data.id)
        if item is None:
            raise CommerceConnectionError(f"Failed to add item '{data.id}' to cart.")
        logger.info("🛒 Local catalog item added | slug=%s item=%s", slug, data.id)
        return item


__all__ = ["LocalCommerceDriver"]
