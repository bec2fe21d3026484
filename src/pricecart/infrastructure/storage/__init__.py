# 💾 pricecart/infrastructure/storage/__init__.py
"""
💾 Реалізації `ICartStorage`.

🔹 `MemorySessionStorage` — сесійне сховище під одним ключем.
🔹 `DatabaseStorage` — SQLAlchemy, батьківський `carts` + дочірні `cart_items`.
🔹 `CartCleanupService` — прибирання застарілих кошиків.
"""

from .cleanup import CartCleanupService, CleanupResult
from .database_storage import DatabaseStorage
from .db import init_db, make_engine, make_session_factory
from .models import Base, CartItemModel, CartModel
from .session_storage import MemorySessionStorage

__all__ = [
    "MemorySessionStorage",
    "DatabaseStorage",
    "CartCleanupService",
    "CleanupResult",
    "Base",
    "CartModel",
    "CartItemModel",
    "make_engine",
    "make_session_factory",
    "init_db",
]
