# 🔌 pricecart/infrastructure/storage/db.py
"""
🔌 Створення SQLAlchemy engine та фабрики сесій.

🔹 Для SQLite вмикається `PRAGMA foreign_keys`, щоб каскадне видалення працювало і на рівні БД.
🔹 `init_db()` створює таблиці, якщо їх ще немає.
"""

from __future__ import annotations

# 🌐 Зовнішні бібліотеки
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# 🔠 Системні імпорти
import logging
from typing import Any, Dict

# 🧩 Внутрішні модулі проєкту
from pricecart.shared.utils.logger import LOG_NAME
from .models import Base

logger = logging.getLogger(f"{LOG_NAME}.infrastructure.db")


def _enable_sqlite_foreign_keys(dbapi_connection: Any, _record: Any) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def make_engine(url: str, **kwargs: Any) -> Engine:
    """Engine для `url`; `sqlite:///:memory:` отримує StaticPool (одне зʼєднання на процес)."""
    options: Dict[str, Any] = dict(kwargs)
    is_sqlite = url.startswith("sqlite")
    if is_sqlite:
        options.setdefault("connect_args", {"check_same_thread": False})
        if ":memory:" in url or url in {"sqlite://", "sqlite:///"}:
            options.setdefault("poolclass", StaticPool)
    engine = create_engine(url, **options)
    if is_sqlite:
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
    logger.debug("🔌 Engine created | dialect=%s", engine.dialect.name)
    return engine


def make_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


def init_db(engine: Engine) -> None:
    """Створює таблиці `carts` та `cart_items`."""
    Base.metadata.create_all(bind=engine)
    logger.info("🗄️ Cart tables ensured | dialect=%s", engine.dialect.name)


__all__ = ["make_engine", "make_session_factory", "init_db"]
