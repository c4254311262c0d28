"""Family member operations: add (capped) and remove (never the last one)."""

from __future__ import annotations

import logging

from app.application.dtos.profile import FamilyMemberCreate
from app.application.interfaces.repositories import (
    IFamilyMemberRepository,
    IMediaCleanupTaskRepository,
)
from app.application.interfaces.services import ICacheService
from app.application.services.lifecycle_guard import LifecycleGuard
from app.application.services.media_ownership import MediaOwnership
from app.application.services.media_reference_collector import MediaReferenceCollector
from app.application.services.profile_validator import ProfileValidator
from app.domain.entities.memorial import FamilyMemberEntity, ProfileEntity
from app.domain.enums import CleanupReason
from app.domain.exceptions import (
    ConflictException,
    ResourceNotFoundException,
    ValidationException,
)
from app.infrastructure.cache.keys import profiles_by_user_key

logger = logging.getLogger(__name__)


class FamilyMemberService:
    """Members of the caller's active family memorial."""

    def __init__(
        self,
        guard: LifecycleGuard,
        member_repo: IFamilyMemberRepository,
        cleanup_repo: IMediaCleanupTaskRepository,
        validator: ProfileValidator,
        ownership: MediaOwnership,
        cache: ICacheService | None = None,
        *,
        family_max_members: int = 10,
        cleanup_max_attempts: int = 5,
    ) -> None:
        self.guard = guard
        self.member_repo = member_repo
        self.cleanup_repo = cleanup_repo
        self.validator = validator
        self.ownership = ownership
        self.cache = cache
        self.family_max_members = family_max_members
        self.cleanup_max_attempts = cleanup_max_attempts

    async def _family_profile(self, profile_id: str, user_id: str) -> ProfileEntity:
        profile = await self.guard.get_profile(profile_id)
        if not profile.is_owned_by(user_id):
            raise ResourceNotFoundException("memorial_profile", profile_id)
        if profile.is_deleted:
            raise ConflictException("Memorial has been deleted", "profile_deleted")
        if not profile.is_family:
            raise ValidationException(
                "Members can only be managed on family memorials", field="profile_id"
            )
        return profile

    async def invalidate_cached_profiles(self, user_id: str) -> None:
        """Drop the cached profile list of user_id. Routes call it again after commit."""
        if self.cache and self.cache.is_available():
            await self.cache.delete(profiles_by_user_key(user_id))

    async def add_member(
        self, profile_id: str, user_id: str, data: FamilyMemberCreate
    ) -> FamilyMemberEntity:
        profile = await self._family_profile(profile_id, user_id)
        limit = profile.max_members or self.family_max_members
        count = await self.member_repo.count_for_profile(profile_id)
        if count >= limit:
            raise ConflictException(
                f"Member limit reached ({limit} maximum)", "member_limit_reached", max_members=limit
            )
        cleaned = self.validator.clean_member(data, count)
        self.ownership.require_profile_media(
            profile.user_id,
            [cleaned.profile_image_url, cleaned.memorial_video_url],
            f"members[{count}]",
        )
        member = await self.member_repo.add_member(profile_id, cleaned)
        await self.invalidate_cached_profiles(user_id)
        logger.info("Family member added: profile=%s member=%s", profile_id, member.id)
        return member

    async def remove_member(
        self, profile_id: str, member_id: str, user_id: str
    ) -> str | None:
        """Remove a member and queue its media. Returns the cleanup task id, if any."""
        profile = await self._family_profile(profile_id, user_id)
        member = await self.member_repo.get_member(profile_id, member_id)
        if member is None:
            raise ResourceNotFoundException("family_member", member_id)
        if await self.member_repo.count_for_profile(profile_id) <= 1:
            raise ConflictException(
                "The last member of a family cannot be removed", "last_member"
            )
        await self.member_repo.remove_member(member_id)

        cleanup_task_id = None
        remaining = [m for m in profile.members if m.id != member_id]
        urls = self.ownership.deletable_profile_media(
            profile.user_id, MediaReferenceCollector.collect_member(member)
        ) - MediaReferenceCollector.collect(profile, members=remaining)
        if urls:
            task = await self.cleanup_repo.enqueue(
                CleanupReason.MEMBER_REMOVED, member_id, sorted(urls), self.cleanup_max_attempts
            )
            cleanup_task_id = task.id
        await self.invalidate_cached_profiles(user_id)
        logger.info("Family member removed: profile=%s member=%s", profile_id, member_id)
        return cleanup_task_id
