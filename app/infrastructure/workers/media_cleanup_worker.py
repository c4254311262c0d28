"""Background worker that drains the media cleanup outbox.

Started from lifespan as an asyncio task. Each tick claims up to claim_limit
pending (or stale in-progress) tasks and runs them through MediaCleanupService.
Stopping cancels the task; a task interrupted mid-run stays in_progress and is
reclaimed once its claim goes stale.
"""

from __future__ import annotations

import asyncio

from app.application.dtos.cleanup import CleanupOutcome
from app.application.services.media_cleanup_service import MediaCleanupService
from app.shared.telemetry import get_logger

logger = get_logger(__name__)


class MediaCleanupWorker:
    """Polls the outbox every poll_seconds until stopped."""

    def __init__(
        self,
        service: MediaCleanupService,
        *,
        poll_seconds: float = 30,
        claim_limit: int = 20,
    ) -> None:
        self.service = service
        self.poll_seconds = poll_seconds
        self.claim_limit = claim_limit
        self._task: asyncio.Task[None] | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def run_once(self) -> list[CleanupOutcome]:
        """Process one batch of claimable tasks. Errors are logged, not raised."""
        try:
            outcomes = await self.service.process_pending(self.claim_limit)
        except Exception:
            logger.exception("Media cleanup tick failed")
            return []
        if outcomes:
            logger.info("Media cleanup tick processed %s task(s)", len(outcomes))
        return outcomes

    async def _loop(self) -> None:
        logger.info(
            "Media cleanup worker started (poll=%ss, claim_limit=%s)",
            self.poll_seconds,
            self.claim_limit,
        )
        try:
            while True:
                outcomes = await self.run_once()
                # A full batch means more work is likely waiting.
                if len(outcomes) < self.claim_limit:
                    await asyncio.sleep(self.poll_seconds)
        except asyncio.CancelledError:
            logger.info("Media cleanup worker cancelled")
            raise

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.create_task(self._loop(), name="media-cleanup-worker")

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info("Media cleanup worker stopped")
