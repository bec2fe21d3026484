# ⚙️ config_service.py
"""
⚙️ config_service.py — Сервіс для доступу до статичної конфігурації рушія кошика.

🔹 Клас `ConfigService`:
- Завантажує вбудований config.yaml, опційний YAML з `PRICECART_CONFIG` та змінні .env.
- Надає єдиний метод .get() для доступу до будь-якого параметра.
- Працює як Singleton (`reset()` скидає екземпляр, наприклад у тестах).
"""

# 🌐 Зовнішні бібліотеки
import yaml                                  # 📦 YAML-парсинг
from dotenv import load_dotenv              # 🔐 Завантаження змінних із .env

# 🔠 Системні імпорти
import os                                   # 📁 Доступ до змінних середовища
import logging                              # 🧾 Логування
from pathlib import Path                    # 📁 Побудова шляху до файлів
from typing import Any, Dict, Optional      # 🧩 Типізація

# 🧩 Внутрішні модулі проєкту
from pricecart.shared.utils.logger import LOG_NAME

logger = logging.getLogger(f"{LOG_NAME}.config")

BUNDLED_CONFIG_PATH = Path(__file__).parent / "config.yaml"
OVERRIDE_ENV_VAR = "PRICECART_CONFIG"

# 🔐 Змінна середовища → крапковий ключ конфігурації
ENV_KEYS: Dict[str, str] = {
    "CART_CURRENCY": "cart.currency",
    "CART_LOCALE": "cart.locale",
    "CART_COMPOUND_DISCOUNTS": "cart.compound_discounts",
    "CART_STORAGE": "cart.storage",
    "DATABASE_URL": "cart.database_url",
    "COMMERCE_BASE_URL": "commerce.base_url",
    "COMMERCE_TOKEN": "commerce.token",
    "LOG_LEVEL": "logging.level",
}

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


# ============================
# ⚙️ СЕРВІС ДОСТУПУ ДО КОНФІГІВ
# ============================
class ConfigService:
    """
    ⚙️ Надає доступ до всіх конфігураційних параметрів рушія.
    Працює як Singleton — конфігурація зчитується лише один раз.
    """

    _instance: Optional["ConfigService"] = None     # 🧩 Singleton-екземпляр

    def __new__(cls):
        # ✅ Патерн Singleton: створюємо лише один екземпляр
        if cls._instance is None:
            instance = super().__new__(cls)
            instance._config = {}
            instance._load_all_configs()
            cls._instance = instance
            logger.debug("🔄 Singleton ConfigService створено і конфігурація завантажена")
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """♻️ Скидає Singleton: наступний виклик перечитає всі джерела."""
        cls._instance = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ConfigService":
        """🧪 Створює незалежний екземпляр з готового словника (без файлів і середовища)."""
        instance = super().__new__(cls)
        instance._config = {}
        instance._deep_update(instance._config, instance._unflatten_dict(data))
        return instance

    def _load_all_configs(self) -> None:
        """
        📥 Завантажує всі джерела конфігурації в один словник.
        Порядок накладання: config.yaml → YAML з PRICECART_CONFIG → .env.
        """

        # --- 1. Вбудований YAML ---
        self._deep_update(self._config, self._read_yaml(BUNDLED_CONFIG_PATH))

        # --- 2. Override YAML ---
        load_dotenv()  # 🔐 Ініціалізує змінні середовища з файлу .env
        override = os.getenv(OVERRIDE_ENV_VAR)
        if override:
            self._deep_update(self._config, self._read_yaml(Path(override)))

        # --- 3. Змінні середовища ---
        env_vars = {
            key: self._coerce_env(value)
            for name, key in ENV_KEYS.items()
            if (value := os.getenv(name)) not in (None, "")
        }
        self._deep_update(self._config, self._unflatten_dict(env_vars))

        logger.info("✅ Configuration loaded | sources=%s", "yaml+env" if not override else "yaml+override+env")

    def _read_yaml(self, path: Path) -> Dict[str, Any]:
        try:
            logger.debug("📘 Loading %s", path)
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except (FileNotFoundError, yaml.YAMLError) as e:
            logger.warning("⚠️ Could not load %s: %s", path, e)
            return {}
        if not isinstance(data, dict):
            logger.warning("⚠️ %s does not contain a mapping, ignoring", path)
            return {}
        return data

    @staticmethod
    def _coerce_env(value: str) -> Any:
        """🔁 Перетворює 'true'/'false' зі змінних середовища у bool."""
        lowered = value.strip().lower()
        if lowered in _TRUE:
            return True
        if lowered in _FALSE:
            return False
        return value

    def get(self, key: str, default: Any = None) -> Any:
        """
        🔑 Отримує значення конфігурації за ключем (наприклад: 'cart.currency').

        Args:
            key (str): Ключ у форматі з крапкою.
            default (Any): Значення за замовчуванням, якщо ключ не знайдено.

        Returns:
            Any: Значення параметра або default.
        """
        value: Any = self._config
        for k in key.split('.'):
            if isinstance(value, dict) and k in value:
                value = value[k]                 # 🔎 Переходимо глибше в структуру
            else:
                return default
        return value

    def as_dict(self) -> Dict[str, Any]:
        """📦 Повертає копію обʼєднаної конфігурації."""
        return dict(self._config)

    # ===============================
    # 🔧 ДОПОМІЖНІ МЕТОДИ ЗЛИТТЯ КОНФІГІВ
    # ===============================

    def _unflatten_dict(self, d: Dict[str, Any]) -> Dict[str, Any]:
        """
        🔁 Перетворює ключі з крапками в ієрархічний словник.
        'cart.currency' → {'cart': {'currency': ...}}
        """
        result: Dict[str, Any] = {}
        for key, value in d.items():
            parts = key.split('.')
            d_ref = result
            for part in parts[:-1]:
                d_ref = d_ref.setdefault(part, {})
            d_ref[parts[-1]] = value
        return result

    def _deep_update(self, source: Dict, overrides: Dict) -> None:
        """
        🔁 Рекурсивно обʼєднує два словника (оновлення значень).
        Якщо значення — словник, обʼєднує його глибоко.
        """
        for key, value in overrides.items():
            if (
                isinstance(value, dict) and
                key in source and
                isinstance(source[key], dict)
            ):
                self._deep_update(source[key], value)  # 🔁 Глибоке обʼєднання
            else:
                source[key] = value                    # 🧩 Перезапис простого значення


__all__ = ["ConfigService", "ENV_KEYS", "OVERRIDE_ENV_VAR"]
