import pytest

from store.cache import ResponseCache
from store.registry import CacheRegistry


def test_default_registry_has_every_cache(caches):
    assert caches.names() == ["sessions", "traces", "quality", "security", "coordinator"]
    assert caches["sessions"].ttl_seconds == 15
    assert caches.get("traces").max_entries == 20


def test_unknown_cache_raises():
    reg = CacheRegistry({"one": [1, 1]})
    with pytest.raises(KeyError, match="unknown cache"):
        reg.get("two")


def test_registry_caches_are_isolated(clock):
    reg = CacheRegistry({"a": [10, 5], "b": [10, 5]}, clock=clock)
    reg["a"].put("k", 1)
    assert reg["b"].get("k") is None
    assert all(isinstance(c, ResponseCache) for c in reg)

    reg.clear()
    assert len(reg["a"]) == 0
    stats = reg.stats()
    assert stats["a"]["misses"] == 0
    assert stats["b"]["misses"] == 1
