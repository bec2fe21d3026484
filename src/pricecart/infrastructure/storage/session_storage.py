# 🧺 pricecart/infrastructure/storage/session_storage.py
"""
🧺 Сховище кошика в сесії (будь-яке `MutableMapping`).

🔹 Кошик живе під одним ключем сесії (`cart.session_key`, за замовчуванням `flexible_cart`).
🔹 Знімки копіюються при читанні та записі: зовнішні зміни не просочуються в сесію.
🔹 Старий формат (сесія містить одразу мапу позицій) читається як `{"items": ...}`.
"""

from __future__ import annotations

# 🔠 Системні імпорти
import copy
import logging
from typing import Any, Dict, Mapping, MutableMapping, Optional

# 🧩 Внутрішні модулі проєкту
from pricecart.config.settings import DEFAULT_SETTINGS, CartSettings
from pricecart.domain.cart.interfaces import CartData
from pricecart.shared.utils.logger import LOG_NAME

logger = logging.getLogger(f"{LOG_NAME}.infrastructure.session_storage")


def _empty() -> CartData:
    return {"items": {}, "conditions": [], "rules": []}


def _normalize(data: Any) -> CartData:
    if not isinstance(data, Mapping):
        return _empty()
    if "items" in data and isinstance(data["items"], (Mapping, list)):
        normalized = copy.deepcopy(dict(data))
        normalized.setdefault("conditions", [])
        normalized.setdefault("rules", [])
        return normalized
    # 🕰️ Старий формат: сесія містить лише позиції
    return {"items": copy.deepcopy(dict(data)), "conditions": [], "rules": []}


class MemorySessionStorage:
    """Зберігає знімок кошика під ключем у спільній сесії."""

    def __init__(
        self,
        session: Optional[MutableMapping[str, Any]] = None,
        key: Optional[str] = None,
        *,
        settings: CartSettings = DEFAULT_SETTINGS,
    ) -> None:
        self._session: MutableMapping[str, Any] = session if session is not None else {}
        self._key = key if key not in (None, "", "0") else settings.session_key
        self._settings = settings

    @property
    def session(self) -> MutableMapping[str, Any]:
        return self._session

    def cart_id(self) -> str:
        return self._key

    def get(self) -> CartData:
        return _normalize(self._session.get(self._key))

    def put(self, cart: Mapping[str, Any]) -> CartData:
        data = _normalize(cart)
        self._session[self._key] = copy.deepcopy(data)
        logger.debug("💾 Session cart stored | key=%s items=%d", self._key, len(data["items"]))
        return data

    def flush(self) -> None:
        self._session.pop(self._key, None)
        logger.debug("🧹 Session cart flushed | key=%s", self._key)

    def get_cart_by_id(self, cart_id: str) -> Optional[CartData]:
        """Кошик під іншим ключем тієї ж сесії або None."""
        if cart_id != self._key and cart_id not in self._session:
            return None
        return self.get() if cart_id == self._key else _normalize(self._session[cart_id])

    def for_cart(self, cart_id: str) -> Optional["MemorySessionStorage"]:
        if cart_id != self._key and cart_id not in self._session:
            return None
        return MemorySessionStorage(self._session, cart_id, settings=self._settings)

    def keys(self) -> Dict[str, int]:
        """Ключі кошиків у сесії з кількістю позицій."""
        return {
            key: len(_normalize(value)["items"])
            for key, value in self._session.items()
            if isinstance(value, Mapping)
        }


__all__ = ["MemorySessionStorage"]
