# 🧰 pricecart/shared/utils/__init__.py
"""
🧰 Спільні утиліти: логування та незмінні колекції.

🔹 Не імпортує доменні пакети, тож доступний з будь-якого шару.
"""

from __future__ import annotations

# 🔠 Логування
from .logger import (
    LOG_NAME,
    JsonFormatter,
    LoggingConfig,
    get_logger,
    init_logging,
    init_logging_from_config,
)

# 🧊 Незмінні колекції
from .immutables import (
    FrozenMapping,
    freeze,
    freeze_attributes,
    is_frozen_mapping,
    merge_attributes,
    thaw,
)

__all__ = [
    "LOG_NAME",
    "LoggingConfig",
    "JsonFormatter",
    "get_logger",
    "init_logging",
    "init_logging_from_config",
    "FrozenMapping",
    "freeze",
    "freeze_attributes",
    "is_frozen_mapping",
    "merge_attributes",
    "thaw",
]
