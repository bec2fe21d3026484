# 🌐 pricecart/infrastructure/commerce/commerce_client.py
"""
🌐 HTTP-клієнт віддаленого каталогу товарів.

🔹 Bearer-токен, JSON, таймаут з конфігурації.
🔹 GET-відповіді кешуються в `TtlLruCache` за ключем path+query.
🔹 Помилки httpx перетворюються стратегіями на `CommerceAuthenticationError` / `CommerceConnectionError`.
🔹 `add_to_cart()` спершу отримує payload і лише потім змінює кошик: збій не лишає часткових змін.
"""

from __future__ import annotations

# 🌐 Зовнішні бібліотеки
import httpx															# 🌐 HTTP-клієнт

# 🔠 Системні імпорти
import logging
from typing import TYPE_CHECKING, Any, Dict, Iterable, Mapping, Optional

# 🧩 Внутрішні модулі проєкту
from pricecart.domain.cart.cart_item import CartItem
from pricecart.errors import (
    CommerceConnectionError,
    HttpxErrorStrategy,
    IErrorHandlingStrategy,
    convert_exception,
)
from pricecart.shared.cache.ttl_cache import TtlLruCache
from pricecart.shared.utils.logger import LOG_NAME
from .dtos import CartItemData, CollectionData, Page, PriceBreakdownData, ProductData

if TYPE_CHECKING:
    from pricecart.config.config_service import ConfigService
    from pricecart.domain.cart.cart import Cart

logger = logging.getLogger(f"{LOG_NAME}.infrastructure.commerce")

CACHE_PREFIX = "pricecart:commerce"


class CommerceClient:
    """Синхронний клієнт REST API каталогу."""

    def __init__(
        self,
        base_url: str,
        token: str,
        *,
        timeout: float = 10,
        cache_enabled: bool = True,
        cache_ttl: float = 300,
        cache: Optional[TtlLruCache] = None,
        transport: Optional[httpx.BaseTransport] = None,
        strategies: Optional[Iterable[IErrorHandlingStrategy]] = None,
    ) -> None:
        self._cache_enabled = cache_enabled
        self._cache = cache or TtlLruCache(max_entries=512, ttl_sec=cache_ttl)
        self._strategies = list(strategies) if strategies is not None else [HttpxErrorStrategy()]
        self._http = httpx.Client(
            base_url=base_url.rstrip("/"),
            headers={"Authorization": f"Bearer {token}", "Accept": "application/json"},
            timeout=timeout,
            transport=transport,
        )
        logger.debug("🌐 CommerceClient ready | base_url=%s cache=%s", base_url, cache_enabled)

    @classmethod
    def from_config(cls, config: "ConfigService", **kwargs: Any) -> "CommerceClient":
        """Клієнт з ключів `commerce.*`."""
        return cls(
            str(config.get("commerce.base_url", "") or ""),
            str(config.get("commerce.token", "") or ""),
            timeout=float(config.get("commerce.timeout", 10) or 10),
            cache_enabled=bool(config.get("commerce.cache.enabled", True)),
            cache_ttl=float(config.get("commerce.cache.ttl", 300) or 300),
            **kwargs,
        )

    # ================================
    # 📚 КАТАЛОГ
    # ================================
    def products(self, filters: Optional[Mapping[str, Any]] = None) -> Page[ProductData]:
        return Page.from_response(self._get("/products", filters), ProductData.from_dict)

    def product(self, slug: str) -> ProductData:
        return ProductData.from_dict(self._get(f"/products/{slug}")["data"])

    def collections(self, filters: Optional[Mapping[str, Any]] = None) -> Page[CollectionData]:
        return Page.from_response(self._get("/collections", filters), CollectionData.from_dict)

    def collection(self, slug: str) -> CollectionData:
        return CollectionData.from_dict(self._get(f"/collections/{slug}")["data"])

    # ================================
    # 💰 ЦІНИ ТА КОШИК
    # ================================
    def resolve_price(self, slug: str, config: Optional[Mapping[str, Any]] = None) -> PriceBreakdownData:
        """`config`: variant_id, quantity, currency, addon_selections."""
        return PriceBreakdownData.from_dict(self._request("POST", f"/products/{slug}/resolve-price", config)["data"])

    def cart_item(self, slug: str, config: Optional[Mapping[str, Any]] = None) -> CartItemData:
        return CartItemData.from_dict(self._request("POST", f"/products/{slug}/cart-item", config)["data"])

    def add_to_cart(self, slug: str, config: Optional[Mapping[str, Any]], cart: "Cart") -> CartItem:
        data = self.cart_item(slug, config)
        cart.add_item(data.to_cart_dict())
        item = cart.item(data.id)
        if item is None:
            raise CommerceConnectionError(f"Failed to add item '{data.id}' to cart.")
        logger.info("🛒 Commerce item added to cart | slug=%s item=%s cart=%s", slug, data.id, cart.id)
        return item

    # ================================
    # 🔧 HTTP
    # ================================
    def _get(self, path: str, query: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
        if not self._cache_enabled:
            return self._request("GET", path, query)
        key = TtlLruCache.make_key(CACHE_PREFIX, path, query)
        return self._cache.remember(key, lambda: self._request("GET", path, query))

    def _request(self, method: str, path: str, data: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
        payload = dict(data or {})
        try:
            if method == "GET":
                response = self._http.get(path, params=payload)
            else:
                response = self._http.request(method, path, json=payload)
            response.raise_for_status()
        except httpx.HTTPError as exc:
            converted = convert_exception(exc, self._strategies)
            if converted is None:
                raise
            logger.warning("⚠️ Commerce request failed | %s %s: %s", method, path, converted.message,
                           extra=converted.to_log_extra())
            raise converted from exc
        logger.debug("✅ Commerce %s %s -> %s", method, path, response.status_code)
        return response.json()

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> "CommerceClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()


__all__ = ["CommerceClient", "CACHE_PREFIX"]
