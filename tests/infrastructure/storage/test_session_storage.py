"""
🧪 test_session_storage.py — тести для MemorySessionStorage

Перевіряє:
- Ключ за замовчуванням і порожній знімок
- Ізоляцію знімків від зовнішніх змін
- Старий формат сесії та доступ до інших кошиків тієї ж сесії
"""

from pricecart.config.settings import CartSettings
from pricecart.infrastructure.storage import MemorySessionStorage


def test_default_key_and_empty_cart(session):
    storage = MemorySessionStorage(session, "0")
    assert storage.cart_id() == "flexible_cart"
    assert storage.get() == {"items": {}, "conditions": [], "rules": []}


def test_key_from_settings():
    storage = MemorySessionStorage(settings=CartSettings(session_key="basket"))
    assert storage.cart_id() == "basket"


def test_put_and_get_are_isolated(storage, session):
    snapshot = {"items": {"a": {"id": "a", "name": "A", "price": "1.00"}}, "conditions": [], "rules": []}
    storage.put(snapshot)
    snapshot["items"]["a"]["name"] = "changed"
    assert session["flexible_cart"]["items"]["a"]["name"] == "A"

    loaded = storage.get()
    loaded["items"].clear()
    assert "a" in storage.get()["items"]


def test_legacy_items_only_format(session):
    session["flexible_cart"] = {"a": {"id": "a", "name": "A", "price": 1}}
    data = MemorySessionStorage(session).get()
    assert list(data["items"]) == ["a"]
    assert data["conditions"] == []


def test_flush(storage, session):
    storage.put({"items": {}})
    storage.flush()
    assert "flexible_cart" not in session


def test_other_carts_in_same_session(session):
    guest = MemorySessionStorage(session, "guest")
    guest.put({"items": {"x": {"id": "x", "name": "X", "price": 2}}})
    user = MemorySessionStorage(session, "user")

    assert user.get_cart_by_id("guest")["items"]["x"]["name"] == "X"
    assert user.get_cart_by_id("nobody") is None
    assert user.get_cart_by_id("user") == {"items": {}, "conditions": [], "rules": []}

    bound = user.for_cart("guest")
    assert bound.cart_id() == "guest"
    assert bound.session is session
    assert user.for_cart("nobody") is None
    assert user.keys() == {"guest": 1}
