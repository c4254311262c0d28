"""Redis CacheService: JSON values, TTLs, and failures reported as misses."""

import json
from unittest.mock import AsyncMock

import pytest
import redis.asyncio as redis

from app.infrastructure.cache.redis_cache import CacheService


@pytest.fixture
def client() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
async def cache(client: AsyncMock) -> CacheService:
    service = CacheService(client, default_ttl=120)
    await service.connect()
    return service


async def test_unreachable_redis_leaves_cache_disabled(client: AsyncMock) -> None:
    client.ping.side_effect = redis.ConnectionError("refused")
    service = CacheService(client)

    await service.connect()

    assert service.is_available() is False
    assert await service.get("profiles:u1") is None
    client.get.assert_not_awaited()


async def test_set_serializes_with_default_ttl(cache: CacheService, client: AsyncMock) -> None:
    assert await cache.set("profiles:u1", [{"id": "p1"}]) is True

    client.set.assert_awaited_once_with("profiles:u1", json.dumps([{"id": "p1"}]), ex=120)


async def test_get_decodes_json(cache: CacheService, client: AsyncMock) -> None:
    client.get.return_value = '[{"id": "p1"}]'

    assert await cache.get("profiles:u1") == [{"id": "p1"}]


async def test_get_miss_and_garbage_are_none(cache: CacheService, client: AsyncMock) -> None:
    client.get.return_value = None
    assert await cache.get("profiles:u1") is None

    client.get.return_value = "{not json"
    assert await cache.get("profiles:u1") is None
    assert cache.is_available() is True


async def test_timeout_disables_cache(cache: CacheService, client: AsyncMock) -> None:
    client.get.side_effect = redis.TimeoutError("slow")

    assert await cache.get("profiles:u1") is None
    assert cache.is_available() is False
    assert await cache.set("profiles:u1", []) is False


async def test_other_redis_error_keeps_cache_enabled(
    cache: CacheService, client: AsyncMock
) -> None:
    client.delete.side_effect = redis.ResponseError("WRONGTYPE")

    assert await cache.delete("profiles:u1") is False
    assert cache.is_available() is True


async def test_delete_reports_removal(cache: CacheService, client: AsyncMock) -> None:
    client.delete.return_value = 1
    assert await cache.delete("profiles:u1") is True
    client.delete.return_value = 0
    assert await cache.delete("profiles:u1") is False


async def test_disconnect_closes_client(cache: CacheService, client: AsyncMock) -> None:
    await cache.disconnect()

    client.aclose.assert_awaited_once()
    assert cache.is_available() is False
