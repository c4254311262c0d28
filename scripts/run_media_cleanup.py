"""Drain the media cleanup outbox once: delete orphaned media from the object store.

Usage:
    uv run python -m scripts.run_media_cleanup [limit]
Processes up to limit claimable tasks (default MEDIA_CLEANUP_CLAIM_LIMIT) and
exits non-zero if any task still has failed keys. Requires Postgres and the
S3_* settings.
"""

import asyncio
import sys

from app.application.services.media_cleanup_service import MediaCleanupService
from app.core.config import get_settings
from app.domain.enums import CleanupTaskStatus
from app.infrastructure.external.storage import StorageFactory
from app.infrastructure.persistence.database import dispose_engine, get_session_factory
from app.infrastructure.persistence.repositories import MediaCleanupTaskRepository
from app.shared.telemetry import setup_logging


async def main() -> int:
    """Process one batch of pending or stale tasks and print a summary."""
    settings = get_settings()
    setup_logging()
    limit = int(sys.argv[1]) if len(sys.argv) > 1 else settings.media_cleanup_claim_limit

    object_store = StorageFactory.create_object_store(settings)
    service = MediaCleanupService(
        get_session_factory(),
        StorageFactory.create_batch_deleter(object_store, settings),
        MediaCleanupTaskRepository,
        stale_after_seconds=settings.media_cleanup_stale_seconds,
    )
    try:
        outcomes = await service.process_pending(limit)
    finally:
        await dispose_engine()

    incomplete = [o for o in outcomes if o.status != CleanupTaskStatus.DONE]
    for outcome in outcomes:
        print(
            f"{outcome.task_id}: {outcome.status.value} "
            f"(deleted={outcome.succeeded}, failed={len(outcome.failed)}, skipped={outcome.skipped})"
        )
    print(f"Done. {len(outcomes)} task(s) processed, {len(incomplete)} incomplete")
    return 1 if incomplete else 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
