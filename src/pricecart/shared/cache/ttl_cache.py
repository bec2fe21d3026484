# ♻️ pricecart/shared/cache/ttl_cache.py
"""
♻️ Потокобезпечний LRU+TTL кеш для відповідей каталогу.

🔹 Обмеження за кількістю елементів (LRU) та часом життя (TTL).
🔹 `remember(key, loader)` повертає кешоване значення або викликає loader і зберігає результат.
🔹 Винятки loader-а не кешуються і пробрасуються далі.
"""

from __future__ import annotations

# 🔠 Системні імпорти
import hashlib                                         # 🔑 Стабільні ключі кешу
import json                                            # 📄 Канонічна форма запиту
import logging                                         # 🧾 Логи hit/miss
import threading                                       # 🔐 Захист від гонок
import time                                            # ⏱️ Вимірювання TTL
from collections import OrderedDict                    # 🔁 Реалізація LRU
from typing import Any, Callable, Mapping, Optional, Tuple, TypeVar

# 🧩 Внутрішні модулі проєкту
from pricecart.shared.utils.logger import LOG_NAME

logger = logging.getLogger(f"{LOG_NAME}.shared.cache")

T = TypeVar("T")


class TtlLruCache:
    """Процесний кеш з LRU-виселенням та TTL на запис."""

    def __init__(self, max_entries: int = 256, ttl_sec: float = 300, clock: Callable[[], float] = time.monotonic) -> None:
        self.max = max(1, int(max_entries))
        self.ttl = float(ttl_sec)                      # ⏳ 0 → записи не старіють
        self._clock = clock
        self._data: "OrderedDict[str, Tuple[float, Any]]" = OrderedDict()
        self._lock = threading.RLock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)

    def get(self, key: str) -> Optional[Any]:
        """Повертає значення, якщо запис ще валідний."""
        with self._lock:
            item = self._data.get(key)
            if item is None:
                return None
            stored_at, value = item
            if self.ttl > 0 and (self._clock() - stored_at) > self.ttl:
                self._data.pop(key, None)              # 🧹 TTL вичерпано
                return None
            self._data.move_to_end(key, last=True)
            return value

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            self._data[key] = (self._clock(), value)
            self._data.move_to_end(key, last=True)
            while len(self._data) > self.max:
                self._data.popitem(last=False)         # 🚮 Виселяємо найстаріший

    def remember(self, key: str, loader: Callable[[], T]) -> T:
        """Повертає кешоване значення або завантажує і кешує нове."""
        cached = self.get(key)
        if cached is not None:
            logger.debug("♻️ cache hit | key=%s", key)
            return cached
        logger.debug("🆕 cache miss | key=%s", key)
        value = loader()
        if value is not None:
            self.set(key, value)
        return value

    def clear(self) -> None:
        with self._lock:
            self._data.clear()

    @staticmethod
    def make_key(prefix: str, path: str, query: Optional[Mapping[str, Any]] = None) -> str:
        """Будує ключ `prefix:<md5(path+query)>` з канонічно відсортованим запитом."""
        raw = path + json.dumps(dict(query or {}), sort_keys=True, default=str)
        return f"{prefix}:{hashlib.md5(raw.encode('utf-8')).hexdigest()}"


__all__ = ["TtlLruCache"]
