"""Memorial profile repository. Returns domain ProfileEntity; enforces lifecycle at the row level."""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.dtos.profile import FamilyMemberCreate, ProfileToPersist
from app.domain.entities.memorial import FamilyMemberEntity, ProfileEntity
from app.domain.enums import ProfileVariant
from app.domain.exceptions import ConflictException
from app.infrastructure.persistence.models.family_member import FamilyMember
from app.infrastructure.persistence.models.memorial_profile import MemorialProfile
from app.infrastructure.persistence.repositories.base import BaseRepository

logger = logging.getLogger(__name__)

ACTIVE_USER_INDEX = "uq_memorial_profile_active_user"


def member_to_entity(m: FamilyMember) -> FamilyMemberEntity:
    """Map ORM FamilyMember to domain entity."""
    return FamilyMemberEntity(
        id=m.id,
        family_profile_id=m.family_profile_id,
        name=m.name,
        order_index=m.order_index,
        relationship=m.relationship,
        birth_date=m.birth_date,
        death_date=m.death_date,
        profile_image_url=m.profile_image_url,
        memorial_video_url=m.memorial_video_url,
    )


def profile_to_entity(
    p: MemorialProfile, members: list[FamilyMemberEntity] | None = None
) -> ProfileEntity:
    """Map ORM MemorialProfile to domain ProfileEntity."""
    return ProfileEntity(
        id=p.id,
        user_id=p.user_id,
        variant=ProfileVariant(p.variant),
        slug=p.slug,
        display_name=p.display_name,
        edit_count=p.edit_count,
        max_edits=p.max_edits,
        is_published=p.is_published,
        order_id=p.order_id,
        description=p.description or "",
        birth_date=p.birth_date,
        death_date=p.death_date,
        profile_image_url=p.profile_image_url,
        banner_image_url=p.banner_image_url,
        memorial_video_url=p.memorial_video_url,
        qr_code_url=p.qr_code_url,
        gallery_images=list(p.gallery_images or []),
        template_id=p.template_id,
        favorite_music=p.favorite_music,
        max_members=p.max_members,
        created_at=p.created_at,
        updated_at=p.updated_at,
        published_at=p.published_at,
        deleted_at=p.deleted_at,
        members=members or [],
    )


class ProfileRepository(BaseRepository[MemorialProfile]):
    """Memorial profile persistence.

    "Active" means deleted_at IS NULL. Soft-deleted rows are kept but
    never returned by active queries.
    """

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, MemorialProfile)

    async def _members_for(self, profile: MemorialProfile) -> list[FamilyMemberEntity]:
        if profile.variant != ProfileVariant.FAMILY.value:
            return []
        result = await self.db.execute(
            select(FamilyMember)
            .where(FamilyMember.family_profile_id == profile.id)
            .order_by(FamilyMember.order_index, FamilyMember.created_at)
        )
        return [member_to_entity(m) for m in result.scalars().all()]

    async def _to_entity(self, profile: MemorialProfile) -> ProfileEntity:
        return profile_to_entity(profile, await self._members_for(profile))

    async def get_entity(self, profile_id: str) -> ProfileEntity | None:
        """Return profile by id including soft-deleted ones, with members."""
        orm = await super().get_by_id(profile_id)
        return await self._to_entity(orm) if orm else None

    async def get_active_by_user(self, user_id: str) -> ProfileEntity | None:
        result = await self.db.execute(
            select(MemorialProfile).where(
                MemorialProfile.user_id == user_id,
                MemorialProfile.deleted_at.is_(None),
            )
        )
        orm = result.scalar_one_or_none()
        return await self._to_entity(orm) if orm else None

    async def has_active_profile(self, user_id: str) -> bool:
        result = await self.db.execute(
            select(func.count(MemorialProfile.id)).where(
                MemorialProfile.user_id == user_id,
                MemorialProfile.deleted_at.is_(None),
            )
        )
        return (result.scalar() or 0) > 0

    async def list_active_by_user(self, user_id: str) -> list[ProfileEntity]:
        """Return active profiles of user, newest first (at most one by construction)."""
        result = await self.db.execute(
            select(MemorialProfile)
            .where(
                MemorialProfile.user_id == user_id,
                MemorialProfile.deleted_at.is_(None),
            )
            .order_by(MemorialProfile.created_at.desc())
        )
        return [await self._to_entity(p) for p in result.scalars().all()]

    async def get_public_by_slug(self, slug: str) -> ProfileEntity | None:
        result = await self.db.execute(
            select(MemorialProfile).where(
                MemorialProfile.slug == slug,
                MemorialProfile.deleted_at.is_(None),
                MemorialProfile.is_published.is_(True),
            )
        )
        orm = result.scalar_one_or_none()
        return await self._to_entity(orm) if orm else None

    async def create_profile(
        self,
        data: ProfileToPersist,
        members: list[FamilyMemberCreate] | None = None,
    ) -> ProfileEntity:
        """Insert a profile (and its members) in the current transaction.

        Raises:
            ConflictException: another active profile exists for the user
                (partial unique index) or the slug is taken.
        """
        profile = MemorialProfile(
            user_id=data.user_id,
            order_id=data.order_id,
            variant=data.variant.value,
            slug=data.slug,
            display_name=data.display_name,
            max_edits=data.max_edits,
            max_members=data.max_members,
            edit_count=0,
            is_published=True,
            published_at=func.now(),
            **data.values,
        )
        try:
            async with self.db.begin_nested():
                self.db.add(profile)
                await self.db.flush()
                for index, member in enumerate(members or []):
                    self.db.add(
                        FamilyMember(
                            family_profile_id=profile.id,
                            order_index=index,
                            **_member_values(member),
                        )
                    )
                await self.db.flush()
        except IntegrityError as e:
            if ACTIVE_USER_INDEX in str(e.orig):
                raise ConflictException(
                    "User already has an active memorial profile",
                    "active_profile_exists",
                ) from e
            logger.warning("Profile insert rejected for user %s: %s", data.user_id, e.orig)
            raise ConflictException(
                "Memorial profile could not be created", "integrity_conflict"
            ) from e
        await self.db.refresh(profile)
        return await self._to_entity(profile)

    async def apply_edit(
        self, profile_id: str, changes: dict[str, Any]
    ) -> ProfileEntity | None:
        """Apply changes and increment edit_count in one conditional UPDATE.

        Returns None when the row is missing, soft-deleted or out of edits;
        edit_count can never pass max_edits under concurrency.
        """
        result = await self.db.execute(
            update(MemorialProfile)
            .where(
                MemorialProfile.id == profile_id,
                MemorialProfile.deleted_at.is_(None),
                MemorialProfile.edit_count < MemorialProfile.max_edits,
            )
            .values(
                **changes,
                edit_count=MemorialProfile.edit_count + 1,
                updated_at=func.now(),
            )
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            return None
        orm = await self.db.get(MemorialProfile, profile_id, populate_existing=True)
        if orm is None:
            return None
        return await self._to_entity(orm)

    async def soft_delete(self, profile_id: str) -> ProfileEntity | None:
        """Set deleted_at and unpublish. Returns None if already deleted or missing."""
        result = await self.db.execute(
            update(MemorialProfile)
            .where(
                MemorialProfile.id == profile_id,
                MemorialProfile.deleted_at.is_(None),
            )
            .values(deleted_at=func.now(), is_published=False, updated_at=func.now())
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            return None
        orm = await self.db.get(MemorialProfile, profile_id, populate_existing=True)
        if orm is None:
            return None
        return await self._to_entity(orm)


def _member_values(member: FamilyMemberCreate) -> dict[str, Any]:
    return {
        "name": member.name,
        "relationship": member.relationship,
        "birth_date": member.birth_date,
        "death_date": member.death_date,
        "profile_image_url": member.profile_image_url,
        "memorial_video_url": member.memorial_video_url,
    }
