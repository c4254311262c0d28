"""Profile lifecycle operations: create, edit (bounded), soft-delete, and reads."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import Any

from app.application.dtos.profile import (
    DeleteAck,
    Eligibility,
    ProfileCreate,
    ProfileResult,
    ProfileToPersist,
)
from app.application.interfaces.repositories import (
    IMediaCleanupTaskRepository,
    IMemoryRepository,
    IProfileRepository,
)
from app.application.interfaces.services import ICacheService
from app.application.services.history_ledger import HistoryLedger
from app.application.services.lifecycle_guard import LifecycleGuard
from app.application.services.media_ownership import MediaOwnership
from app.application.services.media_reference_collector import MediaReferenceCollector
from app.application.services.profile_validator import ProfileValidator
from app.domain.entities.memorial import ProfileEntity
from app.domain.enums import CleanupReason, ProfileVariant
from app.domain.exceptions import (
    ConflictException,
    ResourceNotFoundException,
    ValidationException,
)
from app.domain.value_objects.core import Slug
from app.infrastructure.cache.keys import profiles_by_user_key
from app.shared.utils.datetime import epoch_ms, utc_now

logger = logging.getLogger(__name__)


class ProfileService:
    """Memorial profile lifecycle.

    Create needs a completed order and passes the LifecycleGuard; edits are
    bounded by max_edits; delete writes the ledger entry first, then the
    soft-delete flag and a media cleanup task, all in the caller's
    transaction. Cleanup itself runs after commit.
    """

    def __init__(
        self,
        profile_repo: IProfileRepository,
        memory_repo: IMemoryRepository,
        cleanup_repo: IMediaCleanupTaskRepository,
        guard: LifecycleGuard,
        ledger: HistoryLedger,
        validator: ProfileValidator,
        ownership: MediaOwnership,
        cache: ICacheService | None = None,
        *,
        default_max_edits: int = 3,
        family_max_members: int = 10,
        cleanup_max_attempts: int = 5,
        cache_ttl: int = 120,
        clock_ms: Callable[[], int] = epoch_ms,
    ) -> None:
        self.profile_repo = profile_repo
        self.memory_repo = memory_repo
        self.cleanup_repo = cleanup_repo
        self.guard = guard
        self.ledger = ledger
        self.validator = validator
        self.ownership = ownership
        self.cache = cache
        self.default_max_edits = default_max_edits
        self.family_max_members = family_max_members
        self.cleanup_max_attempts = cleanup_max_attempts
        self.cache_ttl = cache_ttl
        self._clock_ms = clock_ms

    async def invalidate_cached_profiles(self, user_id: str) -> None:
        """Drop the cached profile list of user_id. Routes call it again after commit."""
        if self.cache and self.cache.is_available():
            await self.cache.delete(profiles_by_user_key(user_id))

    async def _owned_profile(self, profile_id: str, user_id: str) -> ProfileEntity:
        if not profile_id or not profile_id.strip():
            raise ValidationException("Profile id is required", field="profile_id")
        profile = await self.guard.get_profile(profile_id)
        if not profile.is_owned_by(user_id):
            raise ResourceNotFoundException("memorial_profile", profile_id)
        return profile

    async def _deletable_media(self, profile: ProfileEntity) -> set[str]:
        """Media of the profile, its members and its memory wall that may be removed."""
        urls = self.ownership.deletable_profile_media(
            profile.user_id, MediaReferenceCollector.collect(profile)
        )
        memories = await self.memory_repo.list_for_profile(profile.id, authorized_only=False)
        photos = self.ownership.deletable_memory_photos(
            url for memory in memories for url in MediaReferenceCollector.collect_memory(memory)
        )
        if photos:
            photos -= await self.memory_repo.photo_urls_in_use(
                photos, exclude_profile_id=profile.id
            )
        return urls | photos

    async def create_profile(self, user_id: str, data: ProfileCreate) -> ProfileResult:
        """Create the user's one memorial.

        Raises:
            ValidationException: invalid payload or no completed order.
            ConflictException: active profile exists, or user is banned.
        """
        name = self.validator.clean_display_name(data.display_name)
        values, members = self.validator.validate_create(data)
        self.ownership.require_profile_values(user_id, values, members)

        is_family = data.variant == ProfileVariant.FAMILY
        order = await self.guard.completed_order(
            user_id, ProfileVariant.FAMILY if is_family else None
        )
        if order is None:
            raise ValidationException(
                "A completed family order is required to create this memorial"
                if is_family
                else "A completed order is required to create a memorial",
                field="order",
            )
        await self.guard.ensure_can_create(user_id)

        slug = Slug.for_profile(name, data.variant, self._clock_ms())
        profile = await self.profile_repo.create_profile(
            ProfileToPersist(
                user_id=user_id,
                order_id=order.id,
                variant=data.variant,
                slug=slug.value,
                display_name=name,
                max_edits=self.default_max_edits,
                max_members=self.family_max_members if is_family else None,
                values=values,
            ),
            members,
        )
        await self.ledger.record_created(user_id, profile.id)
        await self.invalidate_cached_profiles(user_id)
        logger.info(
            "Memorial created: profile=%s user=%s variant=%s slug=%s",
            profile.id,
            user_id,
            data.variant.value,
            profile.slug,
        )
        return ProfileResult(profile=profile)

    async def edit_profile(
        self, profile_id: str, user_id: str, changes: Mapping[str, Any]
    ) -> ProfileResult:
        """Apply one edit (counts against max_edits). Media dropped by the edit is queued for cleanup.

        Raises:
            ResourceNotFoundException: missing or not owned.
            ConflictException: deleted, or no edits left.
            ValidationException: invalid changes.
        """
        profile = await self._owned_profile(profile_id, user_id)
        if profile.is_deleted:
            raise ConflictException("Memorial has been deleted", "profile_deleted")
        if not profile.can_edit():
            raise ConflictException(
                f"Edit limit reached ({profile.max_edits} edits)",
                "edit_limit_reached",
                max_edits=profile.max_edits,
            )
        cleaned = self.validator.validate_edit(
            profile.variant,
            changes,
            {"birth_date": profile.birth_date, "death_date": profile.death_date},
        )
        self.ownership.require_profile_values(user_id, cleaned)

        updated = await self.profile_repo.apply_edit(profile_id, cleaned)
        if updated is None:
            # Lost a race with another edit or a delete.
            raise ConflictException(
                f"Edit limit reached ({profile.max_edits} edits)",
                "edit_limit_reached",
                max_edits=profile.max_edits,
            )

        cleanup_task_id = None
        orphaned = self.ownership.deletable_profile_media(
            profile.user_id, MediaReferenceCollector.orphaned_by_edit(profile, updated)
        )
        if orphaned:
            task = await self.cleanup_repo.enqueue(
                CleanupReason.PROFILE_EDITED,
                profile_id,
                sorted(orphaned),
                self.cleanup_max_attempts,
            )
            cleanup_task_id = task.id
        await self.invalidate_cached_profiles(user_id)
        logger.info(
            "Memorial edited: profile=%s edit %s/%s",
            profile_id,
            updated.edit_count,
            updated.max_edits,
        )
        return ProfileResult(profile=updated, cleanup_task_id=cleanup_task_id)

    async def delete_profile(self, profile_id: str, user_id: str) -> DeleteAck:
        """Soft-delete the profile and ban the user from creating another.

        Order matters: the ledger entry is written (and flushed) before the
        soft-delete; if it fails nothing is deleted.

        Raises:
            ValidationException: empty id.
            ResourceNotFoundException: missing or not owned.
            ConflictException: already deleted.
            HistoryWriteException: ledger write failed (delete aborted).
        """
        profile = await self._owned_profile(profile_id, user_id)
        if profile.is_deleted:
            raise ConflictException("Memorial is already deleted", "already_deleted")

        urls = await self._deletable_media(profile)

        await self.ledger.record_deleted(user_id, profile_id)
        deleted = await self.profile_repo.soft_delete(profile_id)
        if deleted is None:
            raise ConflictException("Memorial is already deleted", "already_deleted")

        cleanup_task_id = None
        if urls:
            task = await self.cleanup_repo.enqueue(
                CleanupReason.PROFILE_DELETED,
                profile_id,
                sorted(urls),
                self.cleanup_max_attempts,
            )
            cleanup_task_id = task.id
        await self.invalidate_cached_profiles(user_id)
        logger.info(
            "Memorial deleted: profile=%s user=%s, %s media URL(s) queued",
            profile_id,
            user_id,
            len(urls),
        )
        return DeleteAck(
            profile_id=profile_id,
            deleted_at=deleted.deleted_at or utc_now(),
            media_count=len(urls),
            cleanup_task_id=cleanup_task_id,
        )

    async def get_my_profiles(self, user_id: str) -> list[ProfileEntity]:
        """Active profiles of the user (cached for cache_ttl seconds)."""
        key = profiles_by_user_key(user_id)
        if self.cache and self.cache.is_available():
            cached = await self.cache.get(key)
            if cached is not None:
                return [ProfileEntity.from_dict(item) for item in cached]
        profiles = await self.profile_repo.list_active_by_user(user_id)
        if self.cache and self.cache.is_available():
            await self.cache.set(key, [p.to_dict() for p in profiles], ttl=self.cache_ttl)
        return profiles

    async def get_public_profile(self, slug: str) -> ProfileEntity:
        profile = await self.profile_repo.get_public_by_slug(slug)
        if profile is None:
            raise ResourceNotFoundException("memorial_profile", slug)
        return profile

    async def eligibility(self, user_id: str) -> Eligibility:
        return await self.guard.eligibility(user_id)
