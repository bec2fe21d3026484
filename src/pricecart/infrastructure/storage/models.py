# 🗄️ pricecart/infrastructure/storage/models.py
"""
🗄️ ORM-моделі SQLAlchemy для довготривалого сховища кошиків.

🔹 `carts` — батьківський запис кошика (власник: user_id або session_id).
🔹 `cart_items` — по одному рядку на позицію, видаляються каскадно разом із кошиком.
🔹 Умови, правила та атрибути зберігаються як JSON-текст.
"""

from __future__ import annotations

# 🌐 Зовнішні бібліотеки
from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.orm import declarative_base, relationship

# 🔠 Системні імпорти
from datetime import datetime, timezone
from typing import Any, Dict


def utcnow() -> datetime:
    """Наївний UTC-час: SQLite не зберігає часові пояси."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class DictMixin:
    """Серіалізація моделі у словник за колонками таблиці."""

    def to_dict(self) -> Dict[str, Any]:
        return {c.name: getattr(self, c.name) for c in self.__table__.columns}


Base = declarative_base(cls=DictMixin)


class CartModel(Base):
    __tablename__ = "carts"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, nullable=True, index=True)
    session_id = Column(String(255), nullable=True, index=True)
    conditions = Column(Text, nullable=True)
    rules = Column(Text, nullable=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    items = relationship(
        "CartItemModel",
        back_populates="cart",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="CartItemModel.id",
    )

    def __repr__(self) -> str:
        return f"CartModel(id={self.id!r}, user_id={self.user_id!r}, session_id={self.session_id!r})"


class CartItemModel(Base):
    __tablename__ = "cart_items"
    __table_args__ = (Index("ix_cart_items_cart_item", "cart_id", "item_id"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    cart_id = Column(Integer, ForeignKey("carts.id", ondelete="CASCADE"), nullable=False)
    item_id = Column(String(255), nullable=False)
    name = Column(String(255), nullable=False)
    price = Column(Numeric(15, 4), nullable=False)
    currency = Column(String(3), nullable=True)
    quantity = Column(Integer, nullable=False, default=1)
    taxable = Column(Boolean, nullable=False, default=True)
    attributes = Column(Text, nullable=True)
    conditions = Column(Text, nullable=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    cart = relationship("CartModel", back_populates="items")

    def __repr__(self) -> str:
        return f"CartItemModel(cart_id={self.cart_id!r}, item_id={self.item_id!r}, qty={self.quantity!r})"


__all__ = ["Base", "DictMixin", "CartModel", "CartItemModel", "utcnow"]
