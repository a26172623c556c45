"""Tests for TTLCache."""

import re

import pytest

import portfolio_dash.services.cache as cache_mod
from portfolio_dash.services.cache import (
    CacheStats,
    TTLCache,
    cache_status,
    glob_matcher,
    prefix_matcher,
)


def test_set_and_get(cache):
    cache.set("k1", [1, 2, 3], ttl=60_000)
    assert cache.get("k1") == [1, 2, 3]


def test_get_missing_key_returns_none(cache):
    assert cache.get("nonexistent") is None
    assert not cache.has("nonexistent")


def test_expiry(cache, clock):
    cache.set("k", "value", ttl=1000)

    clock.advance(1000)
    assert cache.get("k") == "value"  # boundary is still live

    clock.advance(1)
    assert cache.get("k") is None
    assert "k" not in cache.get_stats().keys


def test_no_sliding_expiry(cache, clock):
    cache.set("k", "v", ttl=1000)
    clock.advance(800)
    assert cache.get("k") == "v"
    clock.advance(800)
    assert cache.get("k") is None


def test_has_evicts_expired(cache, clock):
    cache.set("k", "v", ttl=10)
    assert cache.has("k")
    clock.advance(11)
    assert not cache.has("k")
    assert cache.get_stats().size == 0


def test_falsy_values_are_hits(cache):
    cache.set("zero", 0, ttl=1000)
    cache.set("empty", [], ttl=1000)
    assert cache.get("zero") == 0
    assert cache.get("empty") == []
    assert cache.has("empty")


def test_overwrite_replaces_entry(cache, clock):
    cache.set("k1", "old", ttl=100)
    clock.advance(90)
    cache.set("k1", "new", ttl=100)
    clock.advance(90)
    assert cache.get("k1") == "new"
    assert cache.get_info("k1").ttl == 100


@pytest.mark.parametrize(
    ("key", "expected"),
    [
        ("stocks:all", 300_000),
        ("cryptos:all", 180_000),
        ("positions:manual", 120_000),
        ("autotrader:summary", 60_000),
        ("unrelated:key", 300_000),
    ],
)
def test_default_ttl_by_namespace(cache, key, expected):
    cache.set(key, "v")
    assert cache.get_info(key).ttl == expected


def test_explicit_zero_ttl_is_kept(cache, clock):
    cache.set("stocks:all", "v", ttl=0)
    assert cache.get_info("stocks:all").ttl == 0
    assert cache.get("stocks:all") == "v"
    clock.advance(1)
    assert cache.get("stocks:all") is None


def test_injected_default_ttl(clock):
    cache = TTLCache(lambda key: 42)
    cache.set("stocks:all", "v")
    assert cache.get_info("stocks:all").ttl == 42


def test_set_sweeps_expired_entries(cache, clock):
    cache.set("old", 1, ttl=100)
    cache.set("fresh", 2, ttl=10_000)
    clock.advance(200)
    assert cache.get_stats().keys == ["old", "fresh"]  # stats do not sweep

    cache.set("new", 3, ttl=100)
    assert sorted(cache.get_stats().keys) == ["fresh", "new"]


def test_sweep_on_write_disabled(clock):
    cache = TTLCache(sweep_on_write=False)
    cache.set("old", 1, ttl=100)
    clock.advance(200)
    cache.set("new", 2, ttl=100)
    assert cache.get_stats().size == 2
    assert cache.get("old") is None
    assert cache.get_stats().keys == ["new"]


def test_purge_expired(cache, clock):
    cache.set("a", 1, ttl=100)
    cache.set("b", 2, ttl=500)
    clock.advance(200)
    assert cache.purge_expired() == 1
    assert cache.get_stats().keys == ["b"]


def test_invalidate(cache):
    cache.set("k1", "val", ttl=60_000)
    cache.invalidate("k1")
    assert cache.get("k1") is None


def test_invalidate_nonexistent_key(cache):
    cache.invalidate("nope")  # Should not raise


def test_invalidate_pattern_scope(cache):
    cache.set("stocks:all", 1)
    cache.set("stocks:by-score", 2)
    cache.set("cryptos:all", 3)

    removed = cache.invalidate_pattern("stocks:")

    assert removed == 2
    assert cache.get("stocks:all") is None
    assert cache.get("stocks:by-score") is None
    assert cache.get("cryptos:all") == 3


def test_invalidate_pattern_is_unanchored(cache):
    cache.set("portfolio:stocks:positions", 1)
    cache.set("stock:AAPL", 2)
    cache.invalidate_pattern("stocks:")
    assert cache.get("portfolio:stocks:positions") is None
    assert cache.get("stock:AAPL") == 2


def test_invalidate_pattern_respects_anchors(cache):
    cache.set("stocks:all", 1)
    cache.set("portfolio:stocks:positions", 2)
    cache.invalidate_pattern("^stocks:")
    assert cache.get("stocks:all") is None
    assert cache.get("portfolio:stocks:positions") == 2


def test_invalid_pattern_raises_and_removes_nothing(cache):
    cache.set("stocks:all", 1)
    with pytest.raises(re.error):
        cache.invalidate_pattern("stocks:(")
    assert cache.get("stocks:all") == 1


def test_invalidate_matching_with_other_matchers(cache):
    cache.set("alerts:all", 1)
    cache.set("alerts:p1", 2)
    cache.set("portfolio:alerts", 3)

    assert cache.invalidate_matching(prefix_matcher("alerts:")) == 2
    assert cache.get("portfolio:alerts") == 3

    assert cache.invalidate_matching(glob_matcher("portfolio:*")) == 1
    assert cache.get_stats().size == 0


def test_clear(cache):
    cache.set("a", 1, ttl=60_000)
    cache.set("b", 2, ttl=60_000)
    cache.clear()
    assert cache.get("a") is None
    assert cache.get("b") is None
    assert len(cache) == 0


def test_get_info(cache, clock):
    assert cache.get_info("missing").exists is False

    cache.set("k", "v", ttl=1000)
    clock.advance(250)
    info = cache.get_info("k")
    assert info.exists
    assert info.age == 250
    assert info.ttl == 1000
    assert info.expires_in == 750


def test_get_info_does_not_evict(cache, clock):
    cache.set("k", "v", ttl=1000)
    clock.advance(5000)
    info = cache.get_info("k")
    assert info.exists
    assert info.expires_in == 0
    assert "k" in cache.get_stats().keys


def test_contains_uses_liveness(cache, clock):
    cache.set("k", "v", ttl=10)
    assert "k" in cache
    clock.advance(11)
    assert "k" not in cache


def test_instances_are_isolated(clock):
    a, b = TTLCache(), TTLCache()
    a.set("k", 1)
    assert b.get("k") is None


def test_default_clock_is_monotonic_ms(monkeypatch):
    monkeypatch.setattr(cache_mod.time, "monotonic", lambda: 12.5)
    assert cache_mod._now_ms() == 12_500


def test_cache_status():
    assert cache_status(CacheStats()) == "empty"
    assert cache_status(CacheStats(size=3, keys=["a", "b", "c"])) == "warming"
    assert cache_status(CacheStats(size=5, keys=list("abcde"))) == "warm"


def test_len_matches_stats_size(cache, clock):
    cache.set("a", 1, ttl=100)
    cache.set("b", 2, ttl=1000)
    clock.advance(200)
    assert len(cache) == cache.get_stats().size == 2
    cache.purge_expired()
    assert len(cache) == 1
