"""Media cleanup outbox repository: enqueue, claim, and record attempt outcomes."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import and_, case, func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.dtos.cleanup import MediaCleanupTaskResult
from app.domain.enums import CleanupReason, CleanupTaskStatus
from app.infrastructure.persistence.models.media_cleanup_task import MediaCleanupTask


def _task_to_result(t: MediaCleanupTask) -> MediaCleanupTaskResult:
    """Map ORM MediaCleanupTask to application DTO."""
    return MediaCleanupTaskResult(
        id=t.id,
        reason=CleanupReason(t.reason),
        subject_id=t.subject_id,
        urls=list(t.urls or []),
        status=CleanupTaskStatus(t.status),
        attempts=t.attempts,
        max_attempts=t.max_attempts,
        failed_keys=list(t.failed_keys) if t.failed_keys is not None else None,
        last_error=t.last_error,
        created_at=t.created_at,
        updated_at=t.updated_at,
    )


def _claimable(stale_before: datetime):
    """Pending tasks, or in-progress tasks whose claim is older than stale_before."""
    return or_(
        MediaCleanupTask.status == CleanupTaskStatus.PENDING.value,
        and_(
            MediaCleanupTask.status == CleanupTaskStatus.IN_PROGRESS.value,
            MediaCleanupTask.claimed_at < stale_before,
        ),
    )


class MediaCleanupTaskRepository:
    """Outbox persistence. Implements IMediaCleanupTaskRepository."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def enqueue(
        self,
        reason: CleanupReason,
        subject_id: str,
        urls: list[str],
        max_attempts: int,
    ) -> MediaCleanupTaskResult:
        """Insert a pending task in the caller's transaction."""
        task = MediaCleanupTask(
            reason=reason.value,
            subject_id=subject_id,
            urls=sorted(set(urls)),
            status=CleanupTaskStatus.PENDING.value,
            attempts=0,
            max_attempts=max_attempts,
        )
        self.db.add(task)
        await self.db.flush()
        await self.db.refresh(task)
        return _task_to_result(task)

    async def get(self, task_id: str) -> MediaCleanupTaskResult | None:
        orm = await self.db.get(MediaCleanupTask, task_id)
        return _task_to_result(orm) if orm else None

    async def claim(
        self, task_id: str, stale_before: datetime
    ) -> MediaCleanupTaskResult | None:
        """Mark one task in_progress if claimable. None if done, failed or held by another worker."""
        result = await self.db.execute(
            update(MediaCleanupTask)
            .where(MediaCleanupTask.id == task_id, _claimable(stale_before))
            .values(status=CleanupTaskStatus.IN_PROGRESS.value, claimed_at=func.now())
            .returning(MediaCleanupTask)
            .execution_options(synchronize_session=False)
        )
        orm = result.scalars().first()
        return _task_to_result(orm) if orm else None

    async def claim_pending(
        self, limit: int, stale_before: datetime
    ) -> list[MediaCleanupTaskResult]:
        """Claim up to limit claimable tasks, oldest first (SKIP LOCKED across workers)."""
        ids = (
            select(MediaCleanupTask.id)
            .where(_claimable(stale_before))
            .order_by(MediaCleanupTask.created_at)
            .limit(limit)
            .with_for_update(skip_locked=True)
        )
        result = await self.db.execute(
            update(MediaCleanupTask)
            .where(MediaCleanupTask.id.in_(ids.scalar_subquery()))
            .values(status=CleanupTaskStatus.IN_PROGRESS.value, claimed_at=func.now())
            .returning(MediaCleanupTask)
            .execution_options(synchronize_session=False)
        )
        return [_task_to_result(t) for t in result.scalars().all()]

    async def mark_done(self, task_id: str) -> None:
        await self.db.execute(
            update(MediaCleanupTask)
            .where(MediaCleanupTask.id == task_id)
            .values(
                status=CleanupTaskStatus.DONE.value,
                attempts=MediaCleanupTask.attempts + 1,
                failed_keys=[],
                last_error=None,
                claimed_at=None,
            )
            .execution_options(synchronize_session=False)
        )

    async def mark_attempt_failed(
        self, task_id: str, failed_keys: list[str], error: str
    ) -> CleanupTaskStatus:
        """Record a failed attempt; dead-letter (failed) once attempts reach max_attempts."""
        result = await self.db.execute(
            update(MediaCleanupTask)
            .where(MediaCleanupTask.id == task_id)
            .values(
                attempts=MediaCleanupTask.attempts + 1,
                failed_keys=failed_keys,
                last_error=error[:2000],
                claimed_at=None,
                status=case(
                    (
                        MediaCleanupTask.attempts + 1 >= MediaCleanupTask.max_attempts,
                        CleanupTaskStatus.FAILED.value,
                    ),
                    else_=CleanupTaskStatus.PENDING.value,
                ),
            )
            .returning(MediaCleanupTask.status)
            .execution_options(synchronize_session=False)
        )
        return CleanupTaskStatus(result.scalar_one())
