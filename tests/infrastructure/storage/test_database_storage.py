"""
🧪 test_database_storage.py — тести для DatabaseStorage на SQLite у памʼяті

Перевіряє:
- Пошук або створення кошика за user_id / session_id
- Запис знімка, оновлення та видалення позицій
- Роботу Cart поверх БД та злиття кошиків
"""

from decimal import Decimal

import pytest

from pricecart.config.settings import CartSettings
from pricecart.domain.cart import Cart
from pricecart.domain.conditions import FixedCondition, PercentageTaxCondition, TieredRule
from pricecart.infrastructure.storage import (
    CartItemModel,
    DatabaseStorage,
    init_db,
    make_engine,
    make_session_factory,
)


@pytest.fixture
def session_factory():
    engine = make_engine("sqlite:///:memory:")
    init_db(engine)
    yield make_session_factory(engine)
    engine.dispose()


def _snapshot(**items):
    return {
        "items": {
            item_id: {"id": item_id, "name": name, "price": price, "currency": "USD", "quantity": qty,
                      "taxable": True, "attributes": {"k": item_id}, "conditions": []}
            for item_id, (name, price, qty) in items.items()
        },
        "conditions": [FixedCondition("fee", 1).to_dict()],
        "rules": [],
    }


def test_same_owner_gets_same_cart(session_factory):
    first = DatabaseStorage(session_factory, user_id=42)
    second = DatabaseStorage(session_factory, user_id=42)
    other = DatabaseStorage(session_factory, session_id="abc")
    assert first.cart_id() == second.cart_id()
    assert other.cart_id() != first.cart_id()
    assert DatabaseStorage(session_factory, session_id="abc").cart_id() == other.cart_id()


def test_generated_session_id(session_factory):
    storage = DatabaseStorage(session_factory)
    assert storage.session_id
    assert storage.get() == {"items": {}, "conditions": [], "rules": []}


def test_put_get_roundtrip_and_stale_items(session_factory):
    storage = DatabaseStorage(session_factory, user_id=1)
    storage.put(_snapshot(a=("A", "10.50", 2), b=("B", "3", 1)))
    storage.put(_snapshot(a=("A+", "11", 3)))

    data = storage.get()
    assert list(data["items"]) == ["a"]
    item = data["items"]["a"]
    assert item["name"] == "A+"
    assert Decimal(item["price"]) == Decimal("11")
    assert item["quantity"] == 3
    assert item["attributes"] == {"k": "a"}
    assert data["conditions"][0]["name"] == "fee"

    with session_factory() as session:
        assert session.query(CartItemModel).count() == 1


def test_flush_empties_cart(session_factory):
    storage = DatabaseStorage(session_factory, user_id=1)
    storage.put(_snapshot(a=("A", "1", 1)))
    storage.flush()
    assert storage.get() == {"items": {}, "conditions": [], "rules": []}


def test_lookup_other_carts(session_factory):
    user = DatabaseStorage(session_factory, user_id=1)
    guest = DatabaseStorage(session_factory, session_id="guest")
    guest.put(_snapshot(x=("X", "2", 1)))

    assert "x" in user.get_cart_by_id(guest.cart_id())["items"]
    assert user.get_cart_by_id("999") is None
    assert user.get_cart_by_id("not-a-number") is None
    assert user.for_cart(guest.cart_id()).cart_id() == guest.cart_id()
    assert user.for_cart("999") is None
    assert user.all_cart_ids() == [user.cart_id(), guest.cart_id()]


def test_cart_on_database_storage(session_factory, settings):
    storage = DatabaseStorage(session_factory, user_id=7)
    cart = Cart(storage, settings=settings)
    cart.add_item({"id": "a", "name": "A", "price": "19.99", "quantity": 2, "taxable": False})
    cart.add_condition(PercentageTaxCondition("VAT", 10))
    cart.add_rule(TieredRule("Tiers", {10: 5}))

    reloaded = Cart(DatabaseStorage(session_factory, user_id=7), settings=settings)
    item = reloaded.item("a")
    assert item.price.amount == Decimal("19.99")
    assert item.taxable is False
    assert isinstance(reloaded.rules()[0], TieredRule)
    assert reloaded.total() == cart.total()
    assert reloaded.total().amount == Decimal("37.98")


def test_merge_between_database_carts(session_factory):
    settings = CartSettings()
    guest = Cart(DatabaseStorage(session_factory, session_id="guest"), settings=settings)
    guest.add_item({"id": "a", "name": "A", "price": 5, "quantity": 3})
    user = Cart(DatabaseStorage(session_factory, user_id=1), settings=settings)
    user.add_item({"id": "a", "name": "A", "price": 5, "quantity": 1})

    user.merge_from(guest.id)

    assert user.item("a").quantity == 4
    assert Cart(guest.storage, settings=settings).is_empty()
