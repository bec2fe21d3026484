# ⚙️ pricecart/config/__init__.py
"""
⚙️ Пакет Config — централізована конфігурація рушія кошика.

Цей пакет відповідає за:
- Завантаження налаштувань (config.yaml, PRICECART_CONFIG, .env).
- Типізований знімок `CartSettings` для доменного шару.
"""

from .config_service import ConfigService
from .settings import DEFAULT_SETTINGS, CartSettings

__all__ = [
    "ConfigService",
    "CartSettings",
    "DEFAULT_SETTINGS",
]
