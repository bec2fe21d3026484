"""
🧪 test_settings_and_config.py — тести ConfigService та CartSettings

Перевіряє:
- Вбудований config.yaml і перекриття змінними середовища
- YAML-перекриття з PRICECART_CONFIG
- Побудову CartSettings з конфігурації
"""

import pytest

from pricecart.config.config_service import ConfigService
from pricecart.config.settings import CartSettings


@pytest.fixture(autouse=True)
def fresh_config(monkeypatch):
    for name in ("CART_CURRENCY", "CART_COMPOUND_DISCOUNTS", "CART_STORAGE", "PRICECART_CONFIG", "LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    ConfigService.reset()
    yield
    ConfigService.reset()


def test_bundled_defaults():
    config = ConfigService()
    assert config.get("cart.currency") == "USD"
    assert config.get("cart.merge.default_strategy") == "sum"
    assert config.get("cart.missing", "fallback") == "fallback"
    assert config is ConfigService()


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("CART_CURRENCY", "eur")
    monkeypatch.setenv("CART_COMPOUND_DISCOUNTS", "true")
    config = ConfigService()
    assert config.get("cart.currency") == "eur"
    assert config.get("cart.compound_discounts") is True

    settings = CartSettings.from_config(config)
    assert settings.currency == "EUR"
    assert settings.compound_discounts is True


def test_override_yaml(tmp_path, monkeypatch):
    override = tmp_path / "override.yaml"
    override.write_text("cart:\n  cleanup:\n    lifetime: 30\n  events:\n    enabled: false\n", encoding="utf-8")
    monkeypatch.setenv("PRICECART_CONFIG", str(override))

    settings = CartSettings.from_config(ConfigService())
    assert settings.cleanup_lifetime_minutes == 30
    assert settings.events_enabled is False
    assert settings.cleanup_enabled is True


def test_from_dict_accepts_dotted_and_nested_keys():
    config = ConfigService.from_dict({"cart.storage": "database", "commerce": {"timeout": 3}})
    assert config.get("cart.storage") == "database"
    assert config.get("commerce.timeout") == 3
    assert config is not ConfigService.from_dict({})


def test_settings_defaults_for_missing_keys():
    settings = CartSettings.from_config(ConfigService.from_dict({"cart.merge.delete_source": "no"}))
    assert settings == CartSettings(merge_delete_source=False)
    assert settings.with_overrides(currency="GBP").currency == "GBP"
