# 🔀 pricecart/domain/merge/__init__.py
"""🔀 Стратегії злиття кошиків."""

from .strategies import (
    KeepTargetMergeStrategy,
    MaxMergeStrategy,
    MergeStrategy,
    MergeStrategyFactory,
    ReplaceMergeStrategy,
    SumMergeStrategy,
    merge_by_name,
)

__all__ = [
    "MergeStrategy",
    "SumMergeStrategy",
    "ReplaceMergeStrategy",
    "MaxMergeStrategy",
    "KeepTargetMergeStrategy",
    "MergeStrategyFactory",
    "merge_by_name",
]
