"""Cache: in-process TTL cache, Redis service and cache key utilities.

Used by the profile service for the "my profiles" list. Backend is chosen
at startup (REDIS_ENABLED); key format is in keys.py.
"""

from app.infrastructure.cache.keys import profiles_by_user_key
from app.infrastructure.cache.memory_cache import InMemoryTTLCache
from app.infrastructure.cache.redis_cache import CacheService

__all__ = [
    "CacheService",
    "InMemoryTTLCache",
    "profiles_by_user_key",
]
