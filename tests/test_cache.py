"""Tests for the TTL cache."""

import pytest

from cache import TTLCache


class FakeClock:
    def __init__(self, now: float = 0.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


class TestExpiry:
    """Tests for lazy and explicit expiry."""

    def test_entry_lives_until_ttl(self, clock):
        cache = TTLCache(ttl=10, clock=clock)
        cache.set("a", 1)

        clock.advance(9.9)
        assert cache.get("a") == 1

        clock.advance(0.1)
        assert cache.get("a") is None
        assert "a" not in cache

    def test_touch_restarts_timer(self, clock):
        cache = TTLCache(ttl=10, clock=clock)
        cache.set("a", 1)

        clock.advance(8)
        assert cache.touch("a")
        clock.advance(8)

        assert cache.get("a") == 1

    def test_touch_expired_entry(self, clock):
        cache = TTLCache(ttl=10, clock=clock)
        cache.set("a", 1)
        clock.advance(11)

        assert not cache.touch("a")

    def test_purge_reports_expired_keys(self, clock):
        evicted = []
        cache = TTLCache(ttl=10, clock=clock, on_evict=lambda k, v: evicted.append((k, v)))
        cache.set("a", 1)
        clock.advance(5)
        cache.set("b", 2)
        clock.advance(6)

        assert cache.purge() == ["a"]
        assert evicted == [("a", 1)]
        assert list(cache) == ["b"]
        assert len(cache) == 1

    def test_write_evicts_expired_entries(self, clock):
        evicted = []
        cache = TTLCache(ttl=10, clock=clock, on_evict=lambda k, v: evicted.append(k))
        cache.set("a", 1)
        clock.advance(11)

        cache.set("b", 2)

        assert evicted == ["a"]

    def test_invalid_ttl(self):
        with pytest.raises(ValueError):
            TTLCache(ttl=0)


class TestCapacity:
    """Tests for max_entries and explicit removal."""

    def test_oldest_write_evicted_on_overflow(self, clock):
        evicted = []
        cache = TTLCache(ttl=10, clock=clock, max_entries=2,
                         on_evict=lambda k, v: evicted.append(k))
        cache.set("a", 1)
        cache.set("b", 2)
        cache.set("a", 3)
        cache.set("c", 4)

        assert evicted == ["b"]
        assert sorted(cache) == ["a", "c"]

    def test_pop_does_not_call_on_evict(self, clock):
        evicted = []
        cache = TTLCache(ttl=10, clock=clock, on_evict=lambda k, v: evicted.append(k))
        cache.set("a", 1)

        assert cache.pop("a") == 1
        assert cache.pop("a") is None
        assert evicted == []

    def test_eviction_callback_errors_are_contained(self, clock):
        def explode(key, value):
            raise RuntimeError("boom")

        cache = TTLCache(ttl=1, clock=clock, on_evict=explode)
        cache.set("a", 1)
        clock.advance(2)

        assert cache.values() == []
