# 🌐 pricecart/infrastructure/commerce/__init__.py
"""
🌐 Клієнти каталогу товарів.

🔹 `CommerceClient` — віддалене REST API через httpx.
🔹 `LocalCommerceDriver` — каталог у памʼяті процесу з тим самим контрактом.
"""

from .commerce_client import CACHE_PREFIX, CommerceClient
from .dtos import CartItemData, CollectionData, Page, PriceBreakdownData, ProductData
from .local_driver import LocalCommerceDriver

__all__ = [
    "CommerceClient",
    "LocalCommerceDriver",
    "CACHE_PREFIX",
    "ProductData",
    "CollectionData",
    "PriceBreakdownData",
    "CartItemData",
    "Page",
]
