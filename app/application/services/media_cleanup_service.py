"""Media cleanup processor: drains outbox tasks through the batch deleter.

Tasks are written in the same transaction as the delete or edit that
orphaned the media. After commit they are processed here, either right
away as a background task or later by MediaCleanupWorker. Each attempt
claims the task, deletes outside any transaction, then records the
outcome; a task whose attempts reach max_attempts is dead-lettered.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from contextlib import AbstractAsyncContextManager
from datetime import datetime, timedelta
from typing import Any

from app.application.dtos.cleanup import CleanupOutcome, MediaCleanupTaskResult
from app.application.interfaces.repositories import IMediaCleanupTaskRepository
from app.application.interfaces.services import IBatchDeleter
from app.domain.enums import CleanupTaskStatus
from app.shared.utils.datetime import utc_now

logger = logging.getLogger(__name__)

SessionFactory = Callable[[], AbstractAsyncContextManager[Any]]
TaskRepoFactory = Callable[[Any], IMediaCleanupTaskRepository]


class MediaCleanupService:
    """Processes media cleanup tasks. Safe to run concurrently (claims are conditional)."""

    def __init__(
        self,
        session_factory: SessionFactory,
        batch_deleter: IBatchDeleter,
        task_repo_factory: TaskRepoFactory,
        *,
        stale_after_seconds: int = 600,
    ) -> None:
        self.session_factory = session_factory
        self.batch_deleter = batch_deleter
        self.task_repo_factory = task_repo_factory
        self.stale_after = timedelta(seconds=stale_after_seconds)

    def _stale_before(self) -> datetime:
        return utc_now() - self.stale_after

    async def process_task(self, task_id: str) -> CleanupOutcome | None:
        """Claim and run one task. None if it is done, dead-lettered or held elsewhere."""
        async with self.session_factory() as session:
            async with session.begin():
                task = await self.task_repo_factory(session).claim(
                    task_id, self._stale_before()
                )
        if task is None:
            logger.debug("Media cleanup task %s not claimable", task_id)
            return None
        return await self._run(task)

    async def process_pending(self, limit: int = 20) -> list[CleanupOutcome]:
        """Claim up to limit pending (or stale) tasks and run them in order."""
        async with self.session_factory() as session:
            async with session.begin():
                tasks = await self.task_repo_factory(session).claim_pending(
                    limit, self._stale_before()
                )
        outcomes = []
        for task in tasks:
            outcomes.append(await self._run(task))
        return outcomes

    async def dispatch(self, task_id: str) -> None:
        """Background-task entry point: never raises; the worker retries what is left."""
        try:
            await self.process_task(task_id)
        except Exception:
            logger.exception(
                "Media cleanup task %s failed in background; left for the worker", task_id
            )

    async def _run(self, task: MediaCleanupTaskResult) -> CleanupOutcome:
        if task.is_retry:
            report = await self.batch_deleter.delete_keys(task.failed_keys or [])
        else:
            report = await self.batch_deleter.delete_all(task.urls)

        async with self.session_factory() as session:
            async with session.begin():
                repo = self.task_repo_factory(session)
                if report.ok:
                    await repo.mark_done(task.id)
                    status = CleanupTaskStatus.DONE
                else:
                    summary = ", ".join(
                        sorted({report.errors.get(k, "Unknown") for k in report.failed})
                    )
                    status = await repo.mark_attempt_failed(
                        task.id, report.failed, f"{len(report.failed)} key(s) failed: {summary}"
                    )

        if status == CleanupTaskStatus.DONE:
            logger.info(
                "Media cleanup task %s (%s %s) done: %s deleted, %s skipped",
                task.id,
                task.reason.value,
                task.subject_id,
                len(report.succeeded),
                len(report.skipped),
            )
        elif status == CleanupTaskStatus.FAILED:
            logger.error(
                "Media cleanup task %s dead-lettered after %s attempts; keys=%s",
                task.id,
                task.attempts + 1,
                report.failed,
            )
        else:
            logger.warning(
                "Media cleanup task %s attempt %s/%s left %s key(s) for retry",
                task.id,
                task.attempts + 1,
                task.max_attempts,
                len(report.failed),
            )
        return CleanupOutcome(
            task_id=task.id,
            status=status,
            succeeded=len(report.succeeded),
            failed=list(report.failed),
            skipped=len(report.skipped),
        )
