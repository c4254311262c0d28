"""API process lifespan: wires the profile cache, object store, media cleanup
service and worker on startup, and tears them down (plus the DB engine) on exit.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from app.core.config import get_settings
from app.domain.exceptions import SqlNotConfiguredException
from app.infrastructure.exceptions import StorageNotConfiguredError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Run startup then yield; on exit run shutdown.

    Startup order: profile cache (Redis when enabled, else in-process TTL),
    object store and key extractor, media cleanup service, cleanup worker.
    Shutdown order: worker stop, cache disconnect, SQL engine dispose.
    """
    settings = get_settings()

    # ---- Startup ----
    if settings.redis_enabled:
        from app.infrastructure.cache.redis_cache import CacheService

        cache = CacheService.from_settings(settings)
        await cache.connect()
        app.state.cache = cache
    else:
        from app.infrastructure.cache.memory_cache import InMemoryTTLCache

        app.state.cache = InMemoryTTLCache(
            max_entries=settings.cache_max_entries,
            default_ttl=settings.cache_ttl_profiles,
        )

    from app.infrastructure.external.storage import StorageFactory

    app.state.key_extractor = StorageFactory.create_key_extractor(settings)
    try:
        app.state.object_store = StorageFactory.create_object_store(settings)
    except StorageNotConfiguredError:
        logger.warning("Object store not configured; upload grants and media cleanup disabled")
        app.state.object_store = None

    app.state.media_cleanup_service = None
    app.state.media_cleanup_worker = None
    if app.state.object_store is not None:
        from app.application.services.media_cleanup_service import MediaCleanupService
        from app.infrastructure.persistence.database import get_session_factory
        from app.infrastructure.persistence.repositories import MediaCleanupTaskRepository

        try:
            session_factory = get_session_factory()
        except SqlNotConfiguredException:
            session_factory = None
        if session_factory is not None:
            app.state.media_cleanup_service = MediaCleanupService(
                session_factory,
                StorageFactory.create_batch_deleter(app.state.object_store, settings),
                MediaCleanupTaskRepository,
                stale_after_seconds=settings.media_cleanup_stale_seconds,
            )

    if app.state.media_cleanup_service is not None and settings.media_cleanup_worker_enabled:
        from app.infrastructure.workers import MediaCleanupWorker

        worker = MediaCleanupWorker(
            app.state.media_cleanup_service,
            poll_seconds=settings.media_cleanup_poll_seconds,
            claim_limit=settings.media_cleanup_claim_limit,
        )
        worker.start()
        app.state.media_cleanup_worker = worker

    yield

    # ---- Shutdown ----
    worker = getattr(app.state, "media_cleanup_worker", None)
    if worker is not None:
        await worker.stop()

    cache = getattr(app.state, "cache", None)
    if cache is not None and hasattr(cache, "disconnect"):
        await cache.disconnect()

    from app.infrastructure.persistence.database import dispose_engine

    await dispose_engine()
    logger.info("Database engine disposed")
