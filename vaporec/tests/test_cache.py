from __future__ import annotations

from unittest.mock import patch

from vaporec.recommendations import cache
from vaporec.recommendations.cache import (
    cache_get,
    cache_set,
    clear_cache,
    get_cache_stats,
    make_key,
)


def test_key_ignores_dict_order():
    assert make_key({"a": 1, "b": 2}) == make_key({"b": 2, "a": 1})
    assert make_key({"a": 1}) != make_key({"a": 2})


def test_cache_miss_then_hit():
    clear_cache()
    payload = {"query": "calm", "top_n": 5}
    assert cache_get(payload) is None
    cache_set(payload, ["picked"])
    assert cache_get(payload) == ["picked"]

    stats = get_cache_stats()
    assert stats["hits"] == 1
    assert stats["misses"] == 1
    assert stats["hit_rate"] == 50.0


def test_expired_entry_is_evicted():
    clear_cache()
    payload = {"query": "calm"}
    with patch("vaporec.recommendations.cache.time.monotonic", return_value=1000.0):
        cache_set(payload, ["picked"], ttl=10)
    with patch("vaporec.recommendations.cache.time.monotonic", return_value=1011.0):
        assert cache_get(payload) is None
    assert get_cache_stats()["size"] == 0


def test_zero_ttl_is_not_stored():
    clear_cache()
    cache_set({"query": "calm"}, ["picked"], ttl=0)
    assert get_cache_stats()["size"] == 0


def test_full_cache_evicts_soonest_expiring(monkeypatch):
    clear_cache()
    monkeypatch.setattr(cache, "MAX_ENTRIES", 2)
    cache_set({"q": 1}, "short", ttl=5)
    cache_set({"q": 2}, "long", ttl=500)
    cache_set({"q": 3}, "new", ttl=500)

    assert cache_get({"q": 1}) is None
    assert cache_get({"q": 2}) == "long"
    assert cache_get({"q": 3}) == "new"
    assert get_cache_stats()["evictions"] == 1


def test_clear_cache_resets_stats():
    cache_set({"q": 1}, "x")
    cache_get({"q": 1})
    clear_cache()
    assert get_cache_stats() == {
        "size": 0,
        "hits": 0,
        "misses": 0,
        "evictions": 0,
        "hit_rate": 0.0,
    }
