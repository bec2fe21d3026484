# 🗃️ pricecart/shared/cache/__init__.py
from .ttl_cache import TtlLruCache

__all__ = ["TtlLruCache"]
