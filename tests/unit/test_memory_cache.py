"""InMemoryTTLCache: per-entry TTL, LRU eviction, copies on read and write."""

import pytest

from app.infrastructure.cache.memory_cache import InMemoryTTLCache


class FakeClock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


async def test_entry_expires_after_ttl() -> None:
    clock = FakeClock()
    cache = InMemoryTTLCache(clock=clock)

    await cache.set("k", {"a": 1}, ttl=10)
    clock.now += 9.9
    assert await cache.get("k") == {"a": 1}
    clock.now += 0.1
    assert await cache.get("k") is None
    assert len(cache) == 0


async def test_lru_eviction_keeps_recently_read() -> None:
    cache = InMemoryTTLCache(max_entries=2)

    await cache.set("a", 1)
    await cache.set("b", 2)
    await cache.get("a")
    await cache.set("c", 3)

    assert await cache.get("a") == 1
    assert await cache.get("b") is None
    assert await cache.get("c") == 3


async def test_expired_entries_purged_before_eviction() -> None:
    clock = FakeClock()
    cache = InMemoryTTLCache(max_entries=2, clock=clock)

    await cache.set("live", 1, ttl=100)
    await cache.set("short", 2, ttl=1)
    clock.now += 5
    await cache.set("new", 3, ttl=100)

    assert await cache.get("live") == 1
    assert await cache.get("new") == 3


async def test_values_are_copied() -> None:
    cache = InMemoryTTLCache()
    value = {"items": [1]}
    await cache.set("k", value)
    value["items"].append(2)

    cached = await cache.get("k")
    cached["items"].append(3)

    assert await cache.get("k") == {"items": [1]}


async def test_non_positive_ttl_not_stored() -> None:
    cache = InMemoryTTLCache()
    assert await cache.set("k", 1, ttl=0) is False
    assert await cache.get("k") is None


async def test_delete_and_clear() -> None:
    cache = InMemoryTTLCache()
    await cache.set("a", 1)
    await cache.set("b", 2)

    assert await cache.delete("a") is True
    assert await cache.delete("a") is False
    await cache.clear()
    assert len(cache) == 0


def test_capacity_must_be_positive() -> None:
    with pytest.raises(ValueError):
        InMemoryTTLCache(max_entries=0)
