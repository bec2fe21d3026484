"""
🧪 test_ttl_cache.py — unit-тести для TtlLruCache

Перевіряє:
- TTL на основі інжектованого годинника
- LRU-виселення
- remember() без кешування None
- Стабільні ключі
"""

from pricecart.shared.cache import TtlLruCache


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


def test_entries_expire_after_ttl():
    clock = FakeClock()
    cache = TtlLruCache(ttl_sec=10, clock=clock)
    cache.set("k", "v")
    clock.now = 10
    assert cache.get("k") == "v"
    clock.now = 10.5
    assert cache.get("k") is None
    assert len(cache) == 0


def test_lru_eviction():
    cache = TtlLruCache(max_entries=2)
    cache.set("a", 1)
    cache.set("b", 2)
    cache.get("a")
    cache.set("c", 3)
    assert cache.get("b") is None
    assert cache.get("a") == 1
    assert cache.get("c") == 3


def test_remember_loads_once_and_skips_none():
    cache = TtlLruCache()
    calls = []

    def loader():
        calls.append(1)
        return {"ok": True}

    assert cache.remember("x", loader) == {"ok": True}
    assert cache.remember("x", loader) == {"ok": True}
    assert len(calls) == 1

    assert cache.remember("none", lambda: None) is None
    assert len(cache) == 1
    cache.clear()
    assert len(cache) == 0


def test_make_key_ignores_query_order():
    first = TtlLruCache.make_key("p", "/products", {"a": 1, "b": 2})
    second = TtlLruCache.make_key("p", "/products", {"b": 2, "a": 1})
    assert first == second
    assert first.startswith("p:")
    assert first != TtlLruCache.make_key("p", "/collections", {"a": 1, "b": 2})
