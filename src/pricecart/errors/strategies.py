# 📜 pricecart/errors/strategies.py
"""
📜 Стратегії конвертації сторонніх винятків у доменні `PriceCartError`.

🔹 Клієнт каталогу не знає деталей httpx: він делегує стратегії.
🔹 Нові стратегії додаються без зміни клієнта.
"""

from __future__ import annotations

# 🌐 Зовнішні бібліотеки
import httpx															# 🌐 HTTP-клієнт (винятки)

# 🔠 Системні імпорти
import logging															# 🧾 Логування стратегій
from typing import Iterable, Optional, Protocol							# 📐 Типи

# 🧩 Внутрішні модулі проєкту
from pricecart.shared.utils.logger import LOG_NAME
from .custom_errors import (
    CommerceAuthenticationError,
    CommerceConnectionError,
    PriceCartError,
)


# ================================
# 🧾 ЛОГЕР
# ================================
logger = logging.getLogger(f"{LOG_NAME}.errors.strategies")


# ================================
# 🧠 КОНТРАКТ СТРАТЕГІЙ
# ================================
class IErrorHandlingStrategy(Protocol):
    """🧠 Контракт, що визначає єдиний метод `handle`."""

    def handle(self, error: Exception) -> Optional[PriceCartError]:
        """Вертає `PriceCartError`, якщо виняток розпізнано, або None."""


# ================================
# 🌐 HTTPX-СТРАТЕГІЯ
# ================================
class HttpxErrorStrategy(IErrorHandlingStrategy):
    """🌐 Перетворює httpx-помилки на помилки каталогу."""

    def handle(self, error: Exception) -> Optional[PriceCartError]:
        if isinstance(error, httpx.HTTPStatusError):					# 🔢 Неочікуваний статус
            url = str(error.request.url)
            status = error.response.status_code
            message = _extract_message(error.response)
            logger.debug("🔢 httpx status error", extra={"url": url, "status": status})
            if status == 401:
                return CommerceAuthenticationError(message or "Unauthenticated.", details=str(error))
            return CommerceConnectionError(
                message or f"Commerce API request failed with status {status}",
                url=url,
                status_code=status,
                details=str(error),
            )

        if isinstance(error, httpx.TransportError):						# 🌐 Connect/Read/Timeout
            url = _request_url(error)
            logger.debug("🌐 httpx transport error", extra={"url": url})
            return CommerceConnectionError(
                f"Could not connect to commerce API: {error}",
                url=url,
                details=type(error).__name__,
            )

        return None


def _request_url(error: httpx.RequestError) -> str:
    """Повертає URL запиту або 'N/A', якщо запит не прикріплено."""
    try:
        return str(error.request.url)
    except RuntimeError:												# 🧷 httpx кидає RuntimeError без request
        return "N/A"


def _extract_message(response: httpx.Response) -> Optional[str]:
    """Дістає `error.message` або `message` з JSON-тіла відповіді."""
    try:
        body = response.json()
    except ValueError:
        return None
    if not isinstance(body, dict):
        return None
    error_node = body.get("error")
    if isinstance(error_node, dict) and error_node.get("message"):
        return str(error_node["message"])
    if body.get("message"):
        return str(body["message"])
    return None


# ================================
# 🧭 ЗАСТОСУВАННЯ СТРАТЕГІЙ
# ================================
def convert_exception(
    error: Exception,
    strategies: Iterable[IErrorHandlingStrategy],
) -> Optional[PriceCartError]:
    """Проганяє виняток через стратегії і повертає першу доменну помилку."""
    for strategy in strategies:
        converted = strategy.handle(error)
        if converted is not None:
            return converted
    return None


__all__ = [
    "IErrorHandlingStrategy",
    "HttpxErrorStrategy",
    "convert_exception",
]																		# 📤 Публічний API
