# 🚨 pricecart/errors/__init__.py
"""🚨 Доменні винятки та стратегії конвертації сторонніх помилок."""

from .custom_errors import (
    CartError,
    CommerceAuthenticationError,
    CommerceConnectionError,
    CommerceError,
    DivideByZeroError,
    ErrorCode,
    MergeStrategyError,
    PriceCartError,
    PriceError,
    ValidationError,
)
from .strategies import HttpxErrorStrategy, IErrorHandlingStrategy, convert_exception

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
    "IErrorHandlingStrategy",
    "HttpxErrorStrategy",
    "convert_exception",
]
