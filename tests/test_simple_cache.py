"""Unit tests for the in-memory SimpleTTLCache and cache key builder."""

import threading

import pytest

from news_gateway.utils.simple_cache import SimpleTTLCache, build_cache_key
from tests.helpers import FakeClock


def test_set_then_get_returns_value_unchanged() -> None:
    cache = SimpleTTLCache(default_ttl_seconds=10, clock=FakeClock())
    payload = {"results": [{"title": "a"}], "nextPage": None}

    cache.set("k", payload)

    assert cache.get("k") is payload


def test_missing_key_is_absent_and_counted() -> None:
    cache = SimpleTTLCache(default_ttl_seconds=10)

    assert cache.get("missing") is None
    assert cache.stats()["misses"] == 1


def test_entry_is_absent_once_ttl_elapses() -> None:
    clock = FakeClock()
    cache = SimpleTTLCache(default_ttl_seconds=100, clock=clock)
    cache.set("k", {"v": 1}, ttl=5)

    clock.advance(4.999)
    assert cache.get("k") == {"v": 1}

    clock.advance(0.001)
    assert cache.get("k") is None
    assert cache.stats()["evictions"] == 1


def test_default_ttl_applies_when_none_given() -> None:
    clock = FakeClock()
    cache = SimpleTTLCache(default_ttl_seconds=60, clock=clock)
    cache.set("k", "v")

    clock.advance(59)
    assert cache.get("k") == "v"
    clock.advance(1)
    assert cache.get("k") is None


def test_overwrite_replaces_value_and_expiry() -> None:
    clock = FakeClock()
    cache = SimpleTTLCache(default_ttl_seconds=10, clock=clock)
    cache.set("k", "old")

    clock.advance(8)
    cache.set("k", "new")
    clock.advance(8)

    assert cache.get("k") == "new"
    assert len(cache) == 1


def test_housekeeping_does_not_shorten_unrelated_entries() -> None:
    clock = FakeClock()
    cache = SimpleTTLCache(default_ttl_seconds=100, clock=clock)
    cache.set("short", 1, ttl=1)
    cache.set("long", 2, ttl=50)

    clock.advance(2)
    cache.set("other", 3)

    assert cache.get("short") is None
    assert cache.get("long") == 2


def test_lru_eviction_removes_least_recently_used() -> None:
    cache = SimpleTTLCache(default_ttl_seconds=100, max_entries=2)
    cache.set("a", {"v": 1})
    cache.set("b", {"v": 2})

    # Access "a" so that "b" becomes least recently used
    assert cache.get("a") == {"v": 1}

    cache.set("c", {"v": 3})

    assert cache.get("a") == {"v": 1}
    assert cache.get("c") == {"v": 3}
    assert cache.get("b") is None


def test_clear_resets_state() -> None:
    cache = SimpleTTLCache(default_ttl_seconds=10)
    cache.set("a", 1)
    cache.get("a")
    cache.get("b")

    cache.clear()

    stats = cache.stats()
    assert stats["entries"] == 0
    assert stats["hits"] == 0
    assert stats["misses"] == 0


@pytest.mark.parametrize(
    "kwargs",
    [
        {"default_ttl_seconds": 0},
        {"default_ttl_seconds": 10, "max_entries": 0},
    ],
)
def test_invalid_constructor_args(kwargs: dict) -> None:
    with pytest.raises(ValueError):
        SimpleTTLCache(**kwargs)


def test_non_positive_ttl_is_rejected() -> None:
    cache = SimpleTTLCache(default_ttl_seconds=10)
    with pytest.raises(ValueError):
        cache.set("k", 1, ttl=0)


def test_thread_safety_under_concurrent_sets() -> None:
    cache = SimpleTTLCache(default_ttl_seconds=30, max_entries=None)
    total_keys = 50

    def _writer(idx: int) -> None:
        cache.set(f"k-{idx}", {"v": idx})

    threads = [threading.Thread(target=_writer, args=(i,)) for i in range(total_keys)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert cache.stats()["entries"] == total_keys
    assert cache.get("k-0") == {"v": 0}
    assert cache.get("k-49") == {"v": 49}


class TestBuildCacheKey:
    def test_is_stable_and_order_independent(self) -> None:
        first = build_cache_key("search", q="cricket", language="te", category=None, page=None)
        second = build_cache_key("search", page=None, category=None, language="te", q="cricket")

        assert first == second
        assert first.startswith("search:")

    def test_every_parameter_discriminates(self) -> None:
        base = dict(q="cricket", language="te", category="sports", page="p2")
        key = build_cache_key("search", **base)

        for name in base:
            changed = {**base, name: base[name] + "x"}
            assert build_cache_key("search", **changed) != key

    def test_omitted_parameter_differs_from_empty_string(self) -> None:
        assert build_cache_key("news", language="te", page=None) != build_cache_key(
            "news", language="te", page=""
        )

    def test_route_name_discriminates(self) -> None:
        assert build_cache_key("news", language="te") != build_cache_key("search", language="te")

    def test_separator_characters_do_not_collide(self) -> None:
        assert build_cache_key("search", q="a-b", category="c") != build_cache_key(
            "search", q="a", category="b-c"
        )

    def test_empty_route_is_rejected(self) -> None:
        with pytest.raises(ValueError):
            build_cache_key("")
