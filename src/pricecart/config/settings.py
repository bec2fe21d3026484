# 🧾 pricecart/config/settings.py
"""
🧾 Типізований знімок налаштувань рушія кошика.

🔹 `CartSettings` — незмінний DTO, який явно передається у `Cart` та `CartItem`.
🔹 `from_config()` читає значення з `ConfigService` (або будь-якого обʼєкта з `.get`).
"""

from __future__ import annotations

# 🔠 Системні імпорти
from dataclasses import dataclass, replace
from typing import Any, Optional, Protocol


class _ConfigLike(Protocol):
    def get(self, key: str, default: Any = None) -> Any: ...


def _as_bool(value: Any, default: bool) -> bool:
    if value is None:
        return default
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "on"}
    return bool(value)


@dataclass(frozen=True, slots=True)
class CartSettings:
    """Налаштування, що впливають на розрахунки та побічні ефекти кошика."""

    currency: str = "USD"
    locale: str = "en_US"
    compound_discounts: bool = False
    storage: str = "session"
    session_key: str = "flexible_cart"
    database_url: str = "sqlite:///pricecart.db"
    events_enabled: bool = True
    merge_default_strategy: str = "sum"
    merge_delete_source: bool = True
    cleanup_enabled: bool = True
    cleanup_lifetime_minutes: int = 10080

    @classmethod
    def from_config(cls, config: Optional[_ConfigLike] = None) -> "CartSettings":
        """Будує знімок із конфігурації; відсутні ключі беруть дефолти класу."""
        if config is None:
            from .config_service import ConfigService  # 🔁 Лінивий імпорт singleton-а
            config = ConfigService()
        base = cls()
        return cls(
            currency=str(config.get("cart.currency", base.currency)).upper(),
            locale=str(config.get("cart.locale", base.locale)),
            compound_discounts=_as_bool(config.get("cart.compound_discounts"), base.compound_discounts),
            storage=str(config.get("cart.storage", base.storage)),
            session_key=str(config.get("cart.session_key", base.session_key)),
            database_url=str(config.get("cart.database_url", base.database_url)),
            events_enabled=_as_bool(config.get("cart.events.enabled"), base.events_enabled),
            merge_default_strategy=str(config.get("cart.merge.default_strategy", base.merge_default_strategy)),
            merge_delete_source=_as_bool(config.get("cart.merge.delete_source"), base.merge_delete_source),
            cleanup_enabled=_as_bool(config.get("cart.cleanup.enabled"), base.cleanup_enabled),
            cleanup_lifetime_minutes=int(config.get("cart.cleanup.lifetime", base.cleanup_lifetime_minutes)),
        )

    def with_overrides(self, **changes: Any) -> "CartSettings":
        """Повертає копію зі зміненими полями."""
        return replace(self, **changes)


DEFAULT_SETTINGS = CartSettings()

__all__ = ["CartSettings", "DEFAULT_SETTINGS"]
