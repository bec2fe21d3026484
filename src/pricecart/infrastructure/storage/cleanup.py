# 🧹 pricecart/infrastructure/storage/cleanup.py
"""
🧹 Періодичне прибирання застарілих кошиків у БД.

🔹 Звичайний режим видаляє кошики, які не оновлювались довше за `cart.cleanup.lifetime` хвилин.
🔹 `force=True` видаляє всі кошики незалежно від віку та прапорця `cleanup.enabled`.
🔹 Видалення йде через ORM, тож позиції видаляються каскадно.
"""

from __future__ import annotations

# 🌐 Зовнішні бібліотеки
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

# 🔠 Системні імпорти
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Optional

# 🧩 Внутрішні модулі проєкту
from pricecart.config.settings import DEFAULT_SETTINGS, CartSettings
from pricecart.shared.utils.logger import LOG_NAME
from .models import CartModel, utcnow

logger = logging.getLogger(f"{LOG_NAME}.infrastructure.cleanup")


@dataclass(frozen=True, slots=True)
class CleanupResult:
    deleted: int
    cutoff: Optional[datetime] = None
    skipped: bool = False


class CartCleanupService:
    """Видаляє застарілі кошики з БД."""

    def __init__(
        self,
        session_factory: sessionmaker,
        settings: CartSettings = DEFAULT_SETTINGS,
        *,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._session_factory = session_factory
        self._settings = settings
        self._clock = clock

    def run(self, force: bool = False) -> CleanupResult:
        if force:
            return self._delete_all()
        if not self._settings.cleanup_enabled:
            logger.info("⏸️ Cart cleanup is disabled in the configuration.")
            return CleanupResult(deleted=0, skipped=True)
        cutoff = self._clock() - timedelta(minutes=self._settings.cleanup_lifetime_minutes)
        return self._delete_older_than(cutoff)

    def _delete_all(self) -> CleanupResult:
        logger.info("🔥 Force deleting all carts...")
        try:
            with self._session_factory() as session, session.begin():
                carts = session.scalars(select(CartModel)).all()
                for cart in carts:
                    session.delete(cart)
        except SQLAlchemyError as exc:
            logger.error("❌ Error deleting all carts: %s", exc, extra={"error": type(exc).__name__})
            raise
        logger.info("✅ Successfully deleted all %d cart(s).", len(carts))
        return CleanupResult(deleted=len(carts))

    def _delete_older_than(self, cutoff: datetime) -> CleanupResult:
        logger.info("🧹 Cleaning up carts older than %s", cutoff.strftime("%Y-%m-%d %H:%M:%S"))
        try:
            with self._session_factory() as session, session.begin():
                carts = session.scalars(select(CartModel).where(CartModel.updated_at < cutoff)).all()
                for cart in carts:
                    session.delete(cart)
        except SQLAlchemyError as exc:
            logger.error("❌ Error cleaning up carts: %s", exc, extra={"error": type(exc).__name__})
            raise
        logger.info("✅ Successfully deleted %d old cart(s).", len(carts))
        return CleanupResult(deleted=len(carts), cutoff=cutoff)


__all__ = ["CartCleanupService", "CleanupResult"]
