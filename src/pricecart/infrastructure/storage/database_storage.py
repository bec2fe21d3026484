# 🗄️ pricecart/infrastructure/storage/database_storage.py
"""
🗄️ Довготривале сховище кошика на SQLAlchemy.

🔹 Кошик знаходиться (або створюється) за `user_id`, якщо його передано, інакше за `session_id`.
🔹 `put()` видаляє позиції, яких більше немає в знімку, та оновлює/створює решту.
🔹 Кожна операція виконується у власній транзакції.
"""

from __future__ import annotations

# 🌐 Зовнішні бібліотеки
from sqlalchemy import select
from sqlalchemy.orm import Session, sessionmaker

# 🔠 Системні імпорти
import json
import logging
import uuid
from decimal import Decimal
from typing import Any, Dict, List, Mapping, Optional

# 🧩 Внутрішні модулі проєкту
from pricecart.config.settings import DEFAULT_SETTINGS, CartSettings
from pricecart.domain.cart.interfaces import CartData
from pricecart.errors import CartError
from pricecart.shared.utils.logger import LOG_NAME
from .db import init_db, make_engine, make_session_factory
from .models import CartItemModel, CartModel, utcnow

logger = logging.getLogger(f"{LOG_NAME}.infrastructure.database_storage")


def _dump(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False, default=str)


def _load(raw: Optional[str], default: Any) -> Any:
    if not raw:
        return default
    return json.loads(raw)


def _item_to_data(row: CartItemModel) -> Dict[str, Any]:
    return {
        "id": row.item_id,
        "name": row.name,
        "price": str(Decimal(row.price)),
        "currency": row.currency,
        "quantity": row.quantity,
        "taxable": bool(row.taxable),
        "attributes": _load(row.attributes, {}),
        "conditions": _load(row.conditions, []),
    }


def _cart_to_data(cart: CartModel) -> CartData:
    return {
        "items": {row.item_id: _item_to_data(row) for row in cart.items},
        "conditions": _load(cart.conditions, []),
        "rules": _load(cart.rules, []),
    }


class DatabaseStorage:
    """Зберігає кошик у таблицях `carts` / `cart_items`."""

    def __init__(
        self,
        session_factory: sessionmaker,
        *,
        user_id: Optional[int] = None,
        session_id: Optional[str] = None,
        cart_pk: Optional[int] = None,
    ) -> None:
        self._session_factory = session_factory
        self._user_id = user_id or None
        self._session_id = session_id
        self._cart_pk = cart_pk if cart_pk is not None else self._initialize_cart_id()

    @classmethod
    def from_url(
        cls,
        url: str,
        *,
        user_id: Optional[int] = None,
        session_id: Optional[str] = None,
    ) -> "DatabaseStorage":
        engine = make_engine(url)
        init_db(engine)
        return cls(make_session_factory(engine), user_id=user_id, session_id=session_id)

    @classmethod
    def from_settings(
        cls,
        settings: CartSettings = DEFAULT_SETTINGS,
        *,
        user_id: Optional[int] = None,
        session_id: Optional[str] = None,
    ) -> "DatabaseStorage":
        return cls.from_url(settings.database_url, user_id=user_id, session_id=session_id)

    # ================================
    # 🔑 ІДЕНТИФІКАЦІЯ
    # ================================
    def _initialize_cart_id(self) -> int:
        with self._session_factory() as session, session.begin():
            if self._user_id is not None:
                stmt = select(CartModel).where(CartModel.user_id == self._user_id)
                owner = {"user_id": self._user_id}
            else:
                if not self._session_id:
                    self._session_id = uuid.uuid4().hex
                stmt = select(CartModel).where(CartModel.session_id == self._session_id)
                owner = {"session_id": self._session_id}
            cart = session.scalars(stmt.order_by(CartModel.id)).first()
            if cart is None:
                cart = CartModel(**owner)
                session.add(cart)
                session.flush()
                logger.info("🆕 Cart row created | id=%s owner=%s", cart.id, owner)
            return cart.id

    def cart_id(self) -> str:
        return str(self._cart_pk)

    @property
    def session_id(self) -> Optional[str]:
        return self._session_id

    def _require_cart(self, session: Session) -> CartModel:
        cart = session.get(CartModel, self._cart_pk)
        if cart is None:
            raise CartError("Cart record not found", details=f"cart_id={self._cart_pk}")
        return cart

    # ================================
    # 📥 ЧИТАННЯ / 📤 ЗАПИС
    # ================================
    def get(self) -> CartData:
        with self._session_factory() as session:
            cart = session.get(CartModel, self._cart_pk)
            if cart is None:
                return {"items": {}, "conditions": [], "rules": []}
            return _cart_to_data(cart)

    def put(self, cart: Mapping[str, Any]) -> CartData:
        items: Mapping[str, Any] = cart.get("items") or {}
        with self._session_factory() as session, session.begin():
            model = self._require_cart(session)
            existing = {row.item_id: row for row in model.items}

            for stale_id in set(existing) - set(items):
                model.items.remove(existing.pop(stale_id))

            for item_id, data in items.items():
                row = existing.get(item_id)
                if row is None:
                    row = CartItemModel(item_id=item_id)
                    model.items.append(row)
                row.name = data.get("name") or ""
                row.price = Decimal(str(data.get("price", 0)))
                row.currency = data.get("currency")
                row.quantity = int(data.get("quantity", 1))
                row.taxable = bool(data.get("taxable", True))
                row.attributes = _dump(data.get("attributes") or {})
                row.conditions = _dump(data.get("conditions") or [])

            model.conditions = _dump(list(cart.get("conditions") or []))
            model.rules = _dump(list(cart.get("rules") or []))
            model.updated_at = utcnow()
        logger.debug("💾 Cart persisted | id=%s items=%d", self._cart_pk, len(items))
        return dict(cart)

    def flush(self) -> None:
        with self._session_factory() as session, session.begin():
            model = self._require_cart(session)
            model.items.clear()
            model.conditions = _dump([])
            model.rules = _dump([])
            model.updated_at = utcnow()
        logger.info("🧹 Cart flushed | id=%s", self._cart_pk)

    # ================================
    # 🔎 ІНШІ КОШИКИ
    # ================================
    @staticmethod
    def _parse_pk(cart_id: str) -> Optional[int]:
        try:
            return int(cart_id)
        except (TypeError, ValueError):
            return None

    def get_cart_by_id(self, cart_id: str) -> Optional[CartData]:
        pk = self._parse_pk(cart_id)
        if pk is None:
            return None
        with self._session_factory() as session:
            cart = session.get(CartModel, pk)
            return _cart_to_data(cart) if cart is not None else None

    def for_cart(self, cart_id: str) -> Optional["DatabaseStorage"]:
        pk = self._parse_pk(cart_id)
        if pk is None:
            return None
        with self._session_factory() as session:
            if session.get(CartModel, pk) is None:
                return None
        return DatabaseStorage(self._session_factory, cart_pk=pk)

    def all_cart_ids(self) -> List[str]:
        with self._session_factory() as session:
            return [str(pk) for pk in session.scalars(select(CartModel.id).order_by(CartModel.id))]


__all__ = ["DatabaseStorage"]
