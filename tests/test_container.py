"""
🧪 test_container.py — тести складання сервісів у Container

Перевіряє:
- Вибір сховища за налаштуваннями
- Спільну сесію між кошиками
- БД-бекенд та сервіс прибирання
- Клієнт каталогу з конфігурації
"""

import logging

import pytest

from pricecart.config.config_service import ConfigService
from pricecart.container import Container
from pricecart.domain.cart import LoggingEventSink, NullEventSink, RecordingEventSink
from pricecart.errors import ValidationError
from pricecart.infrastructure.commerce import CommerceClient
from pricecart.infrastructure.storage import DatabaseStorage, MemorySessionStorage
from pricecart.shared.utils.logger import LOG_NAME


def _container(**config):
    return Container(ConfigService.from_dict(config))


def test_session_backend_by_default():
    container = _container()
    storage = container.storage()
    assert isinstance(storage, MemorySessionStorage)
    assert isinstance(container.events, LoggingEventSink)

    container.cart().add_item({"id": "a", "name": "A", "price": 3})
    assert container.cart().item("a").quantity == 1
    assert "flexible_cart" in container.session


def test_events_disabled_uses_null_sink():
    assert isinstance(_container(**{"cart.events.enabled": False}).events, NullEventSink)


def test_explicit_sink_receives_events():
    sink = RecordingEventSink()
    container = Container(ConfigService.from_dict({}), events=sink)
    container.cart().add_item({"id": "a", "name": "A", "price": 3})
    assert sink.names() == ["ItemAdded"]


def test_database_backend():
    container = _container(**{"cart.storage": "database", "cart.database_url": "sqlite:///:memory:"})
    cart = container.cart(user_id=5)
    assert isinstance(cart.storage, DatabaseStorage)
    cart.add_item({"id": "a", "name": "A", "price": 3})
    assert container.cart(user_id=5).item("a") is not None
    assert container.cleanup_service().run(force=True).deleted == 1


def test_unknown_backend():
    with pytest.raises(ValidationError):
        _container(**{"cart.storage": "redis"}).storage()


def test_commerce_client_is_shared():
    container = _container(**{"commerce.base_url": "https://shop.test/api", "commerce.token": "t"})
    client = container.commerce()
    assert isinstance(client, CommerceClient)
    assert container.commerce() is client
    client.close()


def test_configure_logging():
    root = logging.getLogger(LOG_NAME)
    handlers = list(root.handlers)
    try:
        container = _container(**{"logging": {"level": "WARNING", "to_file": False}})
        assert container.configure_logging() is root
        assert root.level == logging.WARNING
    finally:
        for handler in list(root.handlers):
            root.removeHandler(handler)
        for handler in handlers:
            root.addHandler(handler)
