# 📦 pricecart/container.py
"""
📦 Контейнер залежностей рушія кошика.

🔹 Створює налаштування, сховище, приймач подій і клієнт каталогу в одному місці.
🔹 Для БД-бекенду тримає один engine і фабрику сесій на контейнер.
"""

from __future__ import annotations

# 🌐 Зовнішні бібліотеки
from sqlalchemy.orm import sessionmaker

# 🔠 Системні імпорти
import logging
from typing import Any, MutableMapping, Optional

# 🧩 Внутрішні модулі проєкту
from pricecart.config.config_service import ConfigService
from pricecart.config.settings import CartSettings
from pricecart.domain.cart.cart import Cart
from pricecart.domain.cart.events import LoggingEventSink, NullEventSink
from pricecart.domain.cart.interfaces import ICartStorage, IEventSink
from pricecart.errors import ValidationError
from pricecart.infrastructure.commerce import CommerceClient
from pricecart.infrastructure.storage import (
    CartCleanupService,
    DatabaseStorage,
    MemorySessionStorage,
    init_db,
    make_engine,
    make_session_factory,
)
from pricecart.shared.utils.logger import LOG_NAME, init_logging_from_config

logger = logging.getLogger(f"{LOG_NAME}.container")


class Container:
    """Єдина точка складання сервісів кошика."""

    def __init__(
        self,
        config: Optional[ConfigService] = None,
        *,
        settings: Optional[CartSettings] = None,
        events: Optional[IEventSink] = None,
        session: Optional[MutableMapping[str, Any]] = None,
    ) -> None:
        self.config = config or ConfigService()
        self.settings = settings or CartSettings.from_config(self.config)
        self.events: IEventSink = events or (
            LoggingEventSink() if self.settings.events_enabled else NullEventSink()
        )
        self.session: MutableMapping[str, Any] = session if session is not None else {}
        self._session_factory: Optional[sessionmaker] = None
        self._commerce: Optional[CommerceClient] = None
        logger.debug("📦 Container ready | storage=%s currency=%s", self.settings.storage, self.settings.currency)

    def configure_logging(self) -> logging.Logger:
        """Налаштовує логер `pricecart` з розділу `logging` конфігурації."""
        return init_logging_from_config(self.config.get("logging"))

    @property
    def session_factory(self) -> sessionmaker:
        if self._session_factory is None:
            engine = make_engine(self.settings.database_url)
            init_db(engine)
            self._session_factory = make_session_factory(engine)
        return self._session_factory

    def storage(
        self,
        *,
        session_key: Optional[str] = None,
        user_id: Optional[int] = None,
        session_id: Optional[str] = None,
    ) -> ICartStorage:
        backend = self.settings.storage.strip().lower()
        if backend == "session":
            return MemorySessionStorage(self.session, session_key, settings=self.settings)
        if backend == "database":
            return DatabaseStorage(self.session_factory, user_id=user_id, session_id=session_id)
        raise ValidationError(f'Unsupported cart storage "{self.settings.storage}". Use "session" or "database".')

    def cart(self, storage: Optional[ICartStorage] = None, **storage_kwargs: Any) -> Cart:
        return Cart(storage or self.storage(**storage_kwargs), settings=self.settings, events=self.events)

    def cleanup_service(self) -> CartCleanupService:
        return CartCleanupService(self.session_factory, self.settings)

    def commerce(self) -> CommerceClient:
        if self._commerce is None:
            self._commerce = CommerceClient.from_config(self.config)
        return self._commerce


__all__ = ["Container"]
