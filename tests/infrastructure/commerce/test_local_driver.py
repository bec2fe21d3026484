"""
🧪 test_local_driver.py — тести локального драйвера каталогу

Перевіряє:
- Фільтрацію неактивних товарів і пагінацію
- Вибір ціни за варіантом та валютою
- Формування позиції кошика
"""

from decimal import Decimal

import pytest

from pricecart.domain.cart import Cart
from pricecart.errors import CommerceConnectionError
from pricecart.infrastructure.commerce import LocalCommerceDriver

PRODUCTS = [
    {
        "slug": "hoodie", "name": "Hoodie", "type": "variable", "status": "active",
        "prices": [{"currency": "USD", "amount": "60.00"}, {"currency": "EUR", "amount": "55.00"}],
        "variants": [
            {"id": 1, "name": "Large", "sku": "HOOD-L", "prices": [{"currency": "USD", "amount": "65.00"}]},
            {"id": 2, "name": "Retired", "sku": "HOOD-X", "is_active": False},
        ],
    },
    {"slug": "cap", "name": "Cap", "type": "simple", "prices": [{"currency": "USD", "amount": "15"}]},
    {"slug": "draft", "name": "Draft", "type": "simple", "status": "draft"},
]

COLLECTIONS = [
    {"slug": "winter", "name": "Winter"},
    {"slug": "old", "name": "Old", "is_active": False},
]


@pytest.fixture
def driver():
    return LocalCommerceDriver(PRODUCTS, COLLECTIONS)


def test_lists_active_products_sorted(driver):
    page = driver.products()
    assert [p.slug for p in page] == ["cap", "hoodie"]
    assert page.total == 2


def test_pagination(driver):
    page = driver.products({"per_page": 1, "page": 2})
    assert [p.slug for p in page] == ["hoodie"]
    assert page.last_page == 2


def test_inactive_product_is_not_found(driver):
    with pytest.raises(CommerceConnectionError, match="No active product found with slug 'draft'."):
        driver.product("draft")


def test_collections(driver):
    assert [c.slug for c in driver.collections()] == ["winter"]
    with pytest.raises(CommerceConnectionError):
        driver.collection("old")


def test_resolve_price_by_variant_and_currency(driver):
    variant = driver.resolve_price("hoodie", {"variant_id": 1, "quantity": 3})
    assert variant.unit_amount == Decimal("65.00")
    assert variant.line_amount == Decimal("195.00")

    eur = driver.resolve_price("hoodie", {"currency": "eur"})
    assert eur.currency == "EUR"
    assert eur.unit_amount == Decimal("55.00")


def test_resolve_price_errors(driver):
    with pytest.raises(CommerceConnectionError):
        driver.resolve_price("hoodie", {"variant_id": 2})
    with pytest.raises(CommerceConnectionError):
        driver.resolve_price("cap", {"currency": "GBP"})


def test_cart_item_and_add_to_cart(driver, storage, settings):
    data = driver.cart_item("hoodie", {"variant_id": 1})
    assert data.id == "HOOD-L"
    assert data.name == "Hoodie - Large"
    assert data.attributes["source"] == "local"

    cart = Cart(storage, settings=settings)
    driver.add_to_cart("cap", {"quantity": 2}, cart)
    assert cart.item("cap").subtotal().amount == Decimal("30.00")
