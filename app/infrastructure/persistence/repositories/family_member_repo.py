"""Family member repository. Returns domain FamilyMemberEntity."""

from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.dtos.profile import FamilyMemberCreate
from app.domain.entities.memorial import FamilyMemberEntity
from app.infrastructure.persistence.models.family_member import FamilyMember
from app.infrastructure.persistence.repositories.base import BaseRepository
from app.infrastructure.persistence.repositories.profile_repo import member_to_entity


class FamilyMemberRepository(BaseRepository[FamilyMember]):
    """Members of family memorial profiles."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, FamilyMember)

    async def count_for_profile(self, family_profile_id: str) -> int:
        result = await self.db.execute(
            select(func.count(FamilyMember.id)).where(
                FamilyMember.family_profile_id == family_profile_id
            )
        )
        return result.scalar() or 0

    async def get_member(
        self, family_profile_id: str, member_id: str
    ) -> FamilyMemberEntity | None:
        """Return member only if it belongs to family_profile_id."""
        result = await self.db.execute(
            select(FamilyMember).where(
                FamilyMember.id == member_id,
                FamilyMember.family_profile_id == family_profile_id,
            )
        )
        orm = result.scalar_one_or_none()
        return member_to_entity(orm) if orm else None

    async def add_member(
        self, family_profile_id: str, data: FamilyMemberCreate
    ) -> FamilyMemberEntity:
        """Append a member after the current last one."""
        result = await self.db.execute(
            select(func.max(FamilyMember.order_index)).where(
                FamilyMember.family_profile_id == family_profile_id
            )
        )
        last_index = result.scalar()
        member = FamilyMember(
            family_profile_id=family_profile_id,
            name=data.name,
            relationship=data.relationship,
            birth_date=data.birth_date,
            death_date=data.death_date,
            profile_image_url=data.profile_image_url,
            memorial_video_url=data.memorial_video_url,
            order_index=0 if last_index is None else last_index + 1,
        )
        return member_to_entity(await self.create(member))

    async def remove_member(self, member_id: str) -> bool:
        orm = await self.get_by_id(member_id)
        if orm is None:
            return False
        await self.delete(orm)
        return True
