"""Append-only lifecycle ledger: the single source of truth for lifetime bans."""

from __future__ import annotations

import logging

from app.application.interfaces.repositories import ILifecycleHistoryRepository
from app.domain.entities.lifecycle import LifecycleHistoryEntry
from app.domain.enums import HistoryAction
from app.domain.exceptions import HistoryWriteException

logger = logging.getLogger(__name__)


class HistoryLedger:
    """Records profile creations and deletions. Entries are never updated or removed.

    A 'deleted' entry bans the user from creating another profile for life,
    so record_deleted must succeed before a profile is soft-deleted.
    """

    def __init__(self, history_repo: ILifecycleHistoryRepository) -> None:
        self.history_repo = history_repo

    async def _append(
        self, user_id: str, profile_id: str, action: HistoryAction
    ) -> LifecycleHistoryEntry:
        try:
            entry = await self.history_repo.append(user_id, profile_id, action)
        except Exception as e:
            logger.error(
                "Lifecycle history write failed (user=%s, profile=%s, action=%s): %s",
                user_id,
                profile_id,
                action.value,
                e,
            )
            raise HistoryWriteException(user_id, profile_id, action.value, str(e)) from e
        logger.info(
            "Lifecycle history: user=%s profile=%s action=%s",
            user_id,
            profile_id,
            action.value,
        )
        return entry

    async def record_created(self, user_id: str, profile_id: str) -> LifecycleHistoryEntry:
        return await self._append(user_id, profile_id, HistoryAction.CREATED)

    async def record_deleted(self, user_id: str, profile_id: str) -> LifecycleHistoryEntry:
        """Write the ban entry. Raises HistoryWriteException; callers must abort the delete."""
        return await self._append(user_id, profile_id, HistoryAction.DELETED)

    async def has_deleted(self, user_id: str) -> bool:
        return await self.history_repo.exists_for_user(user_id, HistoryAction.DELETED)

    async def entries_for_user(self, user_id: str) -> list[LifecycleHistoryEntry]:
        return await self.history_repo.list_for_user(user_id)
