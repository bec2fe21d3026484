# 🚨 pricecart/errors/custom_errors.py
"""
🚨 Ієрархія доменних винятків рушія кошика.

🔹 `PriceCartError` — базовий клас із `to_log_extra()` для структурованих логів.
🔹 `ValidationError` / `DivideByZeroError` успадковують також вбудовані `ValueError` / `ZeroDivisionError`.
🔹 Помилки каталогу (`CommerceError`) несуть URL та HTTP-статус.
"""

from __future__ import annotations

# 🔠 Системні імпорти
import logging														# 🧾 Логування створення помилок
from typing import Dict, Optional									# 📐 Типізація

# 🧩 Внутрішні модулі проєкту
from pricecart.shared.utils.logger import LOG_NAME


# ================================
# 🧾 ЛОГЕР
# ================================
logger = logging.getLogger(f"{LOG_NAME}.errors")


# ================================
# ⚠️ КОДИ ПОМИЛОК
# ================================
class ErrorCode:
    """⚠️ Коди категорій для полів `error_code` у логах."""

    VALIDATION = "validation_error"									# 🧾 Некоректні параметри
    PRICE = "price_error"											# 💵 Арифметика цін
    CART = "cart_error"												# 🛒 Операції кошика
    MERGE = "merge_error"											# 🔀 Стратегії злиття
    COMMERCE = "commerce_error"										# 🌐 Віддалений каталог
    UNKNOWN = "unknown_error"										# ❓ Резервний код


# ================================
# 🧠 БАЗОВИЙ ВИНЯТОК
# ================================
class PriceCartError(Exception):
    """🧠 Базова помилка пакета з опційними деталями."""

    code: str = ErrorCode.UNKNOWN

    def __init__(self, message: str, *, details: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details

    def to_log_extra(self) -> Dict[str, object]:
        """📦 Формує словник для `logger.*(..., extra=...)`."""
        extra: Dict[str, object] = {"error_code": self.code}
        if self.details:
            extra["details"] = self.details
        return extra


class ValidationError(PriceCartError, ValueError):
    """🧾 Неприпустимі вхідні дані (відсутні поля, невідомий тип, нечислові значення)."""

    code = ErrorCode.VALIDATION


class PriceError(PriceCartError):
    """💵 Некоректна операція над цінами (наприклад, різні валюти)."""

    code = ErrorCode.PRICE


class DivideByZeroError(PriceError, ZeroDivisionError):
    """➗ Ділення ціни на нуль."""


class CartError(PriceCartError):
    """🛒 Помилка операції кошика (відсутній товар, кошик-джерело тощо)."""

    code = ErrorCode.CART


class MergeStrategyError(CartError):
    """🔀 Невідома або некоректна стратегія злиття."""

    code = ErrorCode.MERGE


# ================================
# 🌐 ПОМИЛКИ КАТАЛОГУ
# ================================
class CommerceError(PriceCartError):
    """🌐 Загальна помилка взаємодії з віддаленим каталогом."""

    code = ErrorCode.COMMERCE


class CommerceAuthenticationError(CommerceError):
    """🔐 Каталог відхилив токен (HTTP 401)."""


class CommerceConnectionError(CommerceError):
    """🌐 Мережевий збій або неуспішний HTTP-статус від каталогу."""

    def __init__(
        self,
        message: str,
        *,
        details: Optional[str] = None,
        url: Optional[str] = None,
        status_code: Optional[int] = None,
    ) -> None:
        super().__init__(message, details=details)
        self.url = url												# 🔗 URL запиту
        self.status_code = status_code								# 🔢 HTTP-код відповіді
        logger.debug("🌐 CommerceConnectionError created", extra={"url": url, "status_code": status_code})

    def to_log_extra(self) -> Dict[str, object]:
        extra = super().to_log_extra()
        if self.url:
            extra["url"] = self.url
        if self.status_code is not None:
            extra["status_code"] = self.status_code
        return extra


# ================================
# 📤 ПУБЛІЧНИЙ API
# ================================
__all__ = [
    "ErrorCode",
    "PriceCartError",
    "ValidationError",
    "PriceError",
    "DivideByZeroError",
    "CartError",
    "MergeStrategyError",
    "CommerceError",
    "CommerceAuthenticationError",
    "CommerceConnectionError",
]
