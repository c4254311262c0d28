"""Lifecycle history repository. Append-only: no update or delete methods exist."""

from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.domain.entities.lifecycle import LifecycleHistoryEntry
from app.domain.enums import HistoryAction
from app.infrastructure.persistence.models.lifecycle_history import LifecycleHistory


def _to_entry(h: LifecycleHistory) -> LifecycleHistoryEntry:
    return LifecycleHistoryEntry(
        id=h.id,
        user_id=h.user_id,
        profile_id=h.profile_id,
        action=HistoryAction(h.action),
        created_at=h.created_at,
    )


class LifecycleHistoryRepository:
    """Lifecycle ledger persistence. Implements ILifecycleHistoryRepository."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def append(
        self, user_id: str, profile_id: str, action: HistoryAction
    ) -> LifecycleHistoryEntry:
        """Insert one entry and flush so it is written before the caller continues."""
        entry = LifecycleHistory(user_id=user_id, profile_id=profile_id, action=action.value)
        self.db.add(entry)
        await self.db.flush()
        await self.db.refresh(entry)
        return _to_entry(entry)

    async def exists_for_user(self, user_id: str, action: HistoryAction) -> bool:
        result = await self.db.execute(
            select(func.count(LifecycleHistory.id)).where(
                LifecycleHistory.user_id == user_id,
                LifecycleHistory.action == action.value,
            )
        )
        return (result.scalar() or 0) > 0

    async def list_for_user(self, user_id: str) -> list[LifecycleHistoryEntry]:
        """Return entries of user in chronological order."""
        result = await self.db.execute(
            select(LifecycleHistory)
            .where(LifecycleHistory.user_id == user_id)
            .order_by(LifecycleHistory.created_at)
        )
        return [_to_entry(h) for h in result.scalars().all()]
