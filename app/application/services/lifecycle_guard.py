"""Lifecycle eligibility rules: who may create, and which profiles may still be edited."""

from __future__ import annotations

from app.application.dtos.profile import Eligibility
from app.application.interfaces.repositories import IOrderRepository, IProfileRepository
from app.application.services.history_ledger import HistoryLedger
from app.domain.entities.lifecycle import OrderEntity
from app.domain.entities.memorial import ProfileEntity
from app.domain.enums import ProfileVariant
from app.domain.exceptions import ConflictException, ResourceNotFoundException


class LifecycleGuard:
    """Read-only checks over profiles, the history ledger and orders. No side effects.

    These checks give readable errors; the partial unique index and the
    conditional edit update are what hold under concurrency.
    """

    def __init__(
        self,
        profile_repo: IProfileRepository,
        ledger: HistoryLedger,
        order_repo: IOrderRepository,
    ) -> None:
        self.profile_repo = profile_repo
        self.ledger = ledger
        self.order_repo = order_repo

    async def is_lifetime_banned(self, user_id: str) -> bool:
        return await self.ledger.has_deleted(user_id)

    async def completed_order(
        self, user_id: str, variant: ProfileVariant | None = None
    ) -> OrderEntity | None:
        return await self.order_repo.get_completed_order(user_id, variant)

    async def has_completed_order(
        self, user_id: str, variant: ProfileVariant | None = None
    ) -> bool:
        return await self.completed_order(user_id, variant) is not None

    async def can_create(self, user_id: str) -> bool:
        """False if the user has an active profile or has ever deleted one."""
        if await self.profile_repo.has_active_profile(user_id):
            return False
        return not await self.is_lifetime_banned(user_id)

    async def ensure_can_create(self, user_id: str) -> None:
        """Raise ConflictException naming the rule that forbids a create."""
        if await self.profile_repo.has_active_profile(user_id):
            raise ConflictException(
                "Only one memorial is allowed. Delete the existing one to create a new one.",
                "active_profile_exists",
            )
        if await self.is_lifetime_banned(user_id):
            raise ConflictException(
                "A memorial was already deleted for this account; a new one cannot be created.",
                "lifetime_ban",
            )

    async def get_profile(self, profile_id: str) -> ProfileEntity:
        profile = await self.profile_repo.get_entity(profile_id)
        if profile is None:
            raise ResourceNotFoundException("memorial_profile", profile_id)
        return profile

    async def can_edit(self, profile_id: str) -> bool:
        """False if soft-deleted or out of edits. Raises ResourceNotFoundException if missing."""
        profile = await self.get_profile(profile_id)
        return profile.can_edit()

    async def eligibility(self, user_id: str) -> Eligibility:
        active = await self.profile_repo.get_active_by_user(user_id)
        banned = await self.is_lifetime_banned(user_id)
        return Eligibility(
            can_create=active is None and not banned,
            has_completed_order=await self.has_completed_order(user_id),
            is_lifetime_banned=banned,
            active_profile_id=active.id if active else None,
            remaining_edits=active.remaining_edits if active else None,
        )
