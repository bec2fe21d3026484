# 📦 pricecart/infrastructure/commerce/dtos.py
"""
📦 DTO відповідей віддаленого каталогу.

🔹 Кожен DTO зберігає сирий payload у `raw` для полів, які ми не моделюємо явно.
🔹 `CartItemData.to_cart_dict()` — готовий вхід для `Cart.add_item`.
"""

from __future__ import annotations

# 🔠 Системні імпорти
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Callable, Dict, Generic, List, Mapping, Optional, Tuple, TypeVar

# 🧩 Внутрішні модулі проєкту
from pricecart.domain.conditions import Condition, condition_from_dict
from pricecart.errors import ValidationError

T = TypeVar("T")


def _require(data: Mapping[str, Any], key: str, dto: str) -> Any:
    if key not in data or data[key] is None:
        raise ValidationError(f"{dto}: field '{key}' is required")
    return data[key]


@dataclass(frozen=True, slots=True)
class ProductData:
    slug: str
    name: str
    type: str
    description: Optional[str] = None
    prices: Tuple[Any, ...] = ()
    options: Tuple[Any, ...] = ()
    variants: Tuple[Any, ...] = ()
    addon_groups: Tuple[Any, ...] = ()
    raw: Mapping[str, Any] = field(default_factory=dict, compare=False)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ProductData":
        return cls(
            slug=_require(data, "slug", "ProductData"),
            name=_require(data, "name", "ProductData"),
            type=_require(data, "type", "ProductData"),
            description=data.get("description"),
            prices=tuple(data.get("prices") or ()),
            options=tuple(data.get("options") or ()),
            variants=tuple(data.get("variants") or ()),
            addon_groups=tuple(data.get("addon_groups") or ()),
            raw=dict(data),
        )


@dataclass(frozen=True, slots=True)
class CollectionData:
    slug: str
    name: str
    type: Optional[str] = None
    description: Optional[str] = None
    is_active: bool = True
    parent_id: Optional[int] = None
    children: Tuple[Any, ...] = ()
    products: Tuple[Any, ...] = ()
    raw: Mapping[str, Any] = field(default_factory=dict, compare=False)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CollectionData":
        return cls(
            slug=_require(data, "slug", "CollectionData"),
            name=_require(data, "name", "CollectionData"),
            type=data.get("type"),
            description=data.get("description"),
            is_active=bool(data.get("is_active", True)),
            parent_id=data.get("parent_id"),
            children=tuple(data.get("children") or ()),
            products=tuple(data.get("products") or ()),
            raw=dict(data),
        )


@dataclass(frozen=True, slots=True)
class PriceBreakdownData:
    """Розрахунок ціни налаштованого товару; суми як рядки, щоб не втрачати точність."""

    product_slug: str
    quantity: int
    currency: str
    unit_price: str
    line_total: str
    variant: Optional[Mapping[str, Any]] = None
    tier_applied: Optional[Mapping[str, Any]] = None
    addons: Tuple[Any, ...] = ()
    raw: Mapping[str, Any] = field(default_factory=dict, compare=False)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "PriceBreakdownData":
        return cls(
            product_slug=_require(data, "product_slug", "PriceBreakdownData"),
            quantity=int(_require(data, "quantity", "PriceBreakdownData")),
            currency=_require(data, "currency", "PriceBreakdownData"),
            unit_price=str(_require(data, "unit_price", "PriceBreakdownData")),
            line_total=str(_require(data, "line_total", "PriceBreakdownData")),
            variant=data.get("variant"),
            tier_applied=data.get("tier_applied"),
            addons=tuple(data.get("addons") or ()),
            raw=dict(data),
        )

    @property
    def unit_amount(self) -> Decimal:
        return Decimal(self.unit_price)

    @property
    def line_amount(self) -> Decimal:
        return Decimal(self.line_total)


@dataclass(frozen=True, slots=True)
class CartItemData:
    id: str
    name: str
    price: Decimal
    quantity: int
    attributes: Mapping[str, Any] = field(default_factory=dict)
    conditions: Tuple[Mapping[str, Any], ...] = ()
    raw: Mapping[str, Any] = field(default_factory=dict, compare=False)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CartItemData":
        return cls(
            id=str(_require(data, "id", "CartItemData")),
            name=_require(data, "name", "CartItemData"),
            price=Decimal(str(_require(data, "price", "CartItemData"))),
            quantity=int(data.get("quantity", 1)),
            attributes=dict(data.get("attributes") or {}),
            conditions=tuple(data.get("conditions") or ()),
            raw=dict(data),
        )

    def to_cart_dict(self) -> Dict[str, Any]:
        """Payload для `Cart.add_item` з умовами, вже перетвореними на `Condition`."""
        conditions: List[Condition] = [condition_from_dict(entry) for entry in self.conditions]
        return {
            "id": self.id,
            "name": self.name,
            "price": self.price,
            "quantity": self.quantity,
            "attributes": dict(self.attributes),
            "conditions": conditions,
        }


@dataclass(frozen=True, slots=True)
class Page(Generic[T]):
    """Сторінка пагінованої відповіді."""

    items: Tuple[T, ...]
    total: int
    per_page: int
    current_page: int

    @property
    def last_page(self) -> int:
        if self.per_page <= 0:
            return 1
        return max(1, -(-self.total // self.per_page))

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self):
        return iter(self.items)

    @classmethod
    def from_response(cls, response: Mapping[str, Any], mapper: Callable[[Mapping[str, Any]], T]) -> "Page[T]":
        meta = response.get("meta") or {}
        items = tuple(mapper(entry) for entry in response.get("data") or ())
        return cls(
            items=items,
            total=int(meta.get("total", len(items))),
            per_page=int(meta.get("per_page", len(items) or 15)),
            current_page=int(meta.get("current_page", 1)),
        )


__all__ = ["ProductData", "CollectionData", "PriceBreakdownData", "CartItemData", "Page"]
