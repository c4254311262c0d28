"""Repository interfaces (ports) for the application layer.

Protocols define contracts that infrastructure implementations must fulfill (DIP).
All types reference domain entities or application DTOs only; no infrastructure imports.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime
from typing import TYPE_CHECKING, Any, Protocol

from app.domain.enums import CleanupReason, CleanupTaskStatus, HistoryAction, ProfileVariant

if TYPE_CHECKING:
    from app.application.dtos.cleanup import MediaCleanupTaskResult
    from app.application.dtos.profile import FamilyMemberCreate, ProfileToPersist
    from app.domain.entities.lifecycle import LifecycleHistoryEntry, OrderEntity
    from app.domain.entities.memorial import (
        FamilyMemberEntity,
        MemoryEntity,
        ProfileEntity,
    )


class IProfileRepository(Protocol):
    """Protocol for memorial profile repository (DIP)."""

    async def get_entity(self, profile_id: str) -> ProfileEntity | None:
        """Return profile by id (soft-deleted included), with members."""

    async def get_active_by_user(self, user_id: str) -> ProfileEntity | None:
        """Return the active profile of user, if any."""

    async def has_active_profile(self, user_id: str) -> bool:
        """Return True if user has a profile with deleted_at IS NULL."""

    async def list_active_by_user(self, user_id: str) -> list[ProfileEntity]:
        """Return active profiles of user (newest first)."""

    async def get_public_by_slug(self, slug: str) -> ProfileEntity | None:
        """Return published, active profile by slug."""

    async def create_profile(
        self,
        data: ProfileToPersist,
        members: list[FamilyMemberCreate] | None = None,
    ) -> ProfileEntity:
        """Insert profile and members. Raises ConflictException on active-profile race."""

    async def apply_edit(
        self, profile_id: str, changes: dict[str, Any]
    ) -> ProfileEntity | None:
        """Conditionally apply changes and increment edit_count. None if not editable."""

    async def soft_delete(self, profile_id: str) -> ProfileEntity | None:
        """Set deleted_at. None if already deleted or missing."""


class IFamilyMemberRepository(Protocol):
    """Protocol for family member repository (DIP)."""

    async def count_for_profile(self, family_profile_id: str) -> int:
        """Return number of members of a family profile."""

    async def get_member(
        self, family_profile_id: str, member_id: str
    ) -> FamilyMemberEntity | None:
        """Return member of family_profile_id, or None."""

    async def add_member(
        self, family_profile_id: str, data: FamilyMemberCreate
    ) -> FamilyMemberEntity:
        """Append member at the end of the ordering."""

    async def remove_member(self, member_id: str) -> bool:
        """Hard-delete member. False if missing."""


class IMemoryRepository(Protocol):
    """Protocol for memory repository (DIP)."""

    async def get_memory(self, memory_id: str) -> MemoryEntity | None:
        """Return memory by id."""

    async def create_memory(
        self,
        profile_id: str,
        variant: ProfileVariant,
        author_name: str,
        message: str,
        photo_url: str | None,
    ) -> MemoryEntity:
        """Insert an unauthorized memory."""

    async def list_for_profile(
        self, profile_id: str, *, authorized_only: bool = True
    ) -> list[MemoryEntity]:
        """Return memories of a profile (newest first)."""

    async def set_authorized(self, memory_id: str, is_authorized: bool) -> MemoryEntity | None:
        """Set moderation flag."""

    async def delete_memory(self, memory_id: str) -> bool:
        """Hard-delete memory. False if missing."""

    async def photo_urls_in_use(
        self,
        urls: Iterable[str],
        *,
        exclude_profile_id: str | None = None,
        exclude_memory_id: str | None = None,
    ) -> set[str]:
        """Return urls still used as a memory photo outside the exclusions."""


class ILifecycleHistoryRepository(Protocol):
    """Protocol for the append-only lifecycle ledger (DIP). No update or delete."""

    async def append(
        self, user_id: str, profile_id: str, action: HistoryAction
    ) -> LifecycleHistoryEntry:
        """Insert and flush one entry."""

    async def exists_for_user(self, user_id: str, action: HistoryAction) -> bool:
        """Return True if user has any entry with action."""

    async def list_for_user(self, user_id: str) -> list[LifecycleHistoryEntry]:
        """Return entries of user, oldest first."""


class IOrderRepository(Protocol):
    """Protocol for order repository (DIP). Read-only."""

    async def get_completed_order(
        self, user_id: str, variant: ProfileVariant | None = None
    ) -> OrderEntity | None:
        """Return most recent completed order of user (optionally of variant)."""


class IMediaCleanupTaskRepository(Protocol):
    """Protocol for the media cleanup outbox (DIP)."""

    async def enqueue(
        self,
        reason: CleanupReason,
        subject_id: str,
        urls: list[str],
        max_attempts: int,
    ) -> MediaCleanupTaskResult:
        """Insert a pending task in the caller's transaction."""

    async def get(self, task_id: str) -> MediaCleanupTaskResult | None:
        """Return task by id."""

    async def claim(
        self, task_id: str, stale_before: datetime
    ) -> MediaCleanupTaskResult | None:
        """Mark one task in_progress if claimable."""

    async def claim_pending(
        self, limit: int, stale_before: datetime
    ) -> list[MediaCleanupTaskResult]:
        """Claim up to limit claimable tasks, oldest first."""

    async def mark_done(self, task_id: str) -> None:
        """Mark task done."""

    async def mark_attempt_failed(
        self, task_id: str, failed_keys: list[str], error: str
    ) -> CleanupTaskStatus:
        """Record failed attempt; returns new status (pending or failed)."""
