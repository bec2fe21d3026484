# 📦 pricecart/domain/pricing/__init__.py
"""
📦 Доменний пакет для роботи з грошима.

🔹 Експортує `Price` та допоміжні функції округлення.
🔹 Не залежить від кошика: чисті обчислення над Decimal/Fraction.
"""

from .formatter import PriceFormatter, format_percentage, format_plain_number
from .price import DEFAULT_CURRENCY, DEFAULT_LOCALE, Price, sum_prices
from .rounding import currency_decimals, percent, to_decimal, to_fraction

__all__ = [
    "Price",
    "PriceFormatter",
    "DEFAULT_CURRENCY",
    "DEFAULT_LOCALE",
    "sum_prices",
    "format_percentage",
    "format_plain_number",
    "currency_decimals",
    "percent",
    "to_decimal",
    "to_fraction",
]
