"""In-process TTL cache with capacity bound (default cache backend).

Entries expire after their TTL and the least recently used entry is evicted
once max_entries is reached, so memory stays bounded however many keys are
written.
"""

from __future__ import annotations

import copy
import logging
import threading
import time
from collections import OrderedDict
from collections.abc import Callable
from typing import Any

logger = logging.getLogger(__name__)


class InMemoryTTLCache:
    """Thread-safe LRU cache with per-entry TTL. Implements ICacheService."""

    def __init__(
        self,
        max_entries: int = 1000,
        default_ttl: int = 300,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize cache.

        Args:
            max_entries: Capacity; LRU entry is evicted beyond this.
            default_ttl: TTL in seconds when set() gets none.
            clock: Monotonic time source (injectable for tests).
        """
        if max_entries < 1:
            raise ValueError("max_entries must be >= 1")
        self._max_entries = max_entries
        self._default_ttl = default_ttl
        self._clock = clock
        self._entries: OrderedDict[str, tuple[float, Any]] = OrderedDict()
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def is_available(self) -> bool:
        return True

    def _purge_expired(self, now: float) -> None:
        expired = [k for k, (expires_at, _) in self._entries.items() if expires_at <= now]
        for key in expired:
            del self._entries[key]

    async def get(self, key: str) -> Any | None:
        now = self._clock()
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                logger.debug("Cache MISS: %s", key)
                return None
            expires_at, value = entry
            if expires_at <= now:
                del self._entries[key]
                logger.debug("Cache EXPIRED: %s", key)
                return None
            self._entries.move_to_end(key)
            logger.debug("Cache HIT: %s", key)
            return copy.deepcopy(value)

    async def set(self, key: str, value: Any, ttl: int | None = None) -> bool:
        ttl = self._default_ttl if ttl is None else ttl
        if ttl <= 0:
            return False
        now = self._clock()
        with self._lock:
            self._entries[key] = (now + ttl, copy.deepcopy(value))
            self._entries.move_to_end(key)
            if len(self._entries) > self._max_entries:
                self._purge_expired(now)
            while len(self._entries) > self._max_entries:
                evicted, _ = self._entries.popitem(last=False)
                logger.debug("Cache EVICT: %s", evicted)
        return True

    async def delete(self, key: str) -> bool:
        with self._lock:
            return self._entries.pop(key, None) is not None

    async def clear(self) -> None:
        with self._lock:
            self._entries.clear()
