import pytest

from store.cache import ResponseCache


@pytest.fixture
def cache(clock):
    return ResponseCache("test", ttl_seconds=10, max_entries=3, clock=clock)


def test_hit_reports_age(cache, clock):
    cache.put("k", {"v": 1})
    clock.advance(4)
    hit = cache.get("k")
    assert hit.payload == {"v": 1}
    assert hit.age_seconds == 4


def test_entry_expires_at_ttl_and_is_removed(cache, clock):
    cache.put("k", 1)
    clock.advance(9.5)
    assert cache.get("k") is not None
    clock.advance(0.5)
    assert cache.get("k") is None
    assert "k" not in cache
    assert len(cache) == 0


def test_fifo_eviction_ignores_reads(cache):
    for k in ("a", "b", "c"):
        cache.put(k, k)
    cache.get("a")
    cache.put("d", "d")
    assert cache.keys() == ["b", "c", "d"]
    assert cache.stats()["evictions"] == 1


def test_reput_moves_key_to_back_with_fresh_age(cache, clock):
    cache.put("a", 1)
    cache.put("b", 2)
    clock.advance(5)
    cache.put("a", 3)
    cache.put("c", 4)
    cache.put("d", 5)
    assert cache.keys() == ["a", "c", "d"]
    assert cache.get("a").age_seconds == 0


def test_invalidate_and_clear(cache):
    cache.put("a", 1)
    assert cache.invalidate("a") is True
    assert cache.invalidate("a") is False
    cache.put("b", 1)
    cache.clear()
    assert cache.keys() == []


def test_stats_counts_hits_and_misses(cache):
    cache.get("missing")
    cache.put("a", 1)
    cache.get("a")
    stats = cache.stats()
    assert stats["hits"] == 1
    assert stats["misses"] == 1
    assert stats["entries"] == 1


def test_capacity_must_be_positive():
    with pytest.raises(ValueError):
        ResponseCache("bad", ttl_seconds=1, max_entries=0)
