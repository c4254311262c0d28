"""Redis profile-list cache, shared across API workers (REDIS_ENABLED=true).

Stores JSON under the keys built in app.infrastructure.cache.keys. Redis is
never the source of truth: every failure is logged and reported as a miss
(get) or as False (set/delete), and the caller falls back to Postgres.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

import redis.asyncio as redis

if TYPE_CHECKING:
    from app.core.config import Settings

logger = logging.getLogger(__name__)

# Connection-level failures: mark the cache unavailable until reconnect.
_CONNECTION_ERRORS = (redis.ConnectionError, redis.TimeoutError)


class CacheService:
    """Async Redis cache with per-key TTL. Implements ICacheService."""

    def __init__(self, client: redis.Redis, default_ttl: int = 120) -> None:
        """Wrap an existing client (built by from_settings, or a fake in tests)."""
        self._client: redis.Redis | None = client
        self._default_ttl = default_ttl
        self._available = False

    @classmethod
    def from_settings(cls, settings: "Settings") -> "CacheService":
        password = settings.redis_password.get_secret_value() if settings.redis_password else None
        client = redis.Redis(
            host=settings.redis_host,
            port=settings.redis_port,
            db=settings.redis_db,
            password=password,
            decode_responses=True,
            socket_connect_timeout=5,
            socket_keepalive=True,
        )
        return cls(client, default_ttl=settings.cache_ttl_profiles)

    async def connect(self) -> None:
        """Ping Redis; on failure the cache stays disabled and lookups hit Postgres."""
        if self._client is None:
            return
        try:
            await self._client.ping()
        except _CONNECTION_ERRORS as e:
            logger.warning("Redis unreachable (%s); profile cache disabled", e)
            self._available = False
            return
        self._available = True
        logger.info("Redis profile cache connected")

    async def disconnect(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None
        self._available = False
        logger.info("Redis profile cache disconnected")

    def is_available(self) -> bool:
        return self._available and self._client is not None

    def _on_error(self, op: str, key: str, error: redis.RedisError) -> None:
        if isinstance(error, _CONNECTION_ERRORS):
            self._available = False
            logger.warning("Redis %s failed for %s, disabling cache: %s", op, key, error)
        else:
            logger.error("Redis %s failed for %s: %s", op, key, error)

    async def get(self, key: str) -> Any | None:
        if not self.is_available():
            return None
        try:
            raw = await self._client.get(key)
        except redis.RedisError as e:
            self._on_error("get", key, e)
            return None
        if raw is None:
            logger.debug("Cache MISS: %s", key)
            return None
        try:
            return json.loads(raw)
        except ValueError:
            logger.warning("Discarding unreadable cache entry %s", key)
            return None

    async def set(self, key: str, value: Any, ttl: int | None = None) -> bool:
        ttl = self._default_ttl if ttl is None else ttl
        if not self.is_available() or ttl <= 0:
            return False
        try:
            await self._client.set(key, json.dumps(value), ex=ttl)
        except redis.RedisError as e:
            self._on_error("set", key, e)
            return False
        return True

    async def delete(self, key: str) -> bool:
        """Remove key. True if a value was removed."""
        if not self.is_available():
            return False
        try:
            removed = await self._client.delete(key)
        except redis.RedisError as e:
            self._on_error("delete", key, e)
            return False
        return bool(removed)
