"""Memory repository. Returns domain MemoryEntity."""

from __future__ import annotations

from collections.abc import Iterable

from sqlalchemy import func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.domain.entities.memorial import MemoryEntity
from app.domain.enums import ProfileVariant
from app.infrastructure.persistence.models.memory import Memory
from app.infrastructure.persistence.repositories.base import BaseRepository


def _memory_to_entity(m: Memory) -> MemoryEntity:
    """Map ORM Memory to domain MemoryEntity."""
    return MemoryEntity(
        id=m.id,
        profile_id=m.profile_id,
        photo_url=m.photo_url,
        author_name=m.author_name,
        message=m.message,
        is_authorized=m.is_authorized,
        created_at=m.created_at,
    )


class MemoryRepository(BaseRepository[Memory]):
    """Memory wall entries. Public reads return authorized memories only."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Memory)

    async def get_memory(self, memory_id: str) -> MemoryEntity | None:
        orm = await self.get_by_id(memory_id)
        return _memory_to_entity(orm) if orm else None

    async def create_memory(
        self,
        profile_id: str,
        variant: ProfileVariant,
        author_name: str,
        message: str,
        photo_url: str | None,
    ) -> MemoryEntity:
        """Insert an unauthorized memory linked by the column matching variant."""
        memory = Memory(
            memorial_profile_id=profile_id if variant == ProfileVariant.INDIVIDUAL else None,
            family_profile_id=profile_id if variant == ProfileVariant.FAMILY else None,
            author_name=author_name,
            message=message,
            photo_url=photo_url,
            is_authorized=False,
        )
        return _memory_to_entity(await self.create(memory))

    async def list_for_profile(
        self, profile_id: str, *, authorized_only: bool = True
    ) -> list[MemoryEntity]:
        """Return memories of a profile, newest first."""
        stmt = select(Memory).where(
            or_(
                Memory.memorial_profile_id == profile_id,
                Memory.family_profile_id == profile_id,
            )
        )
        if authorized_only:
            stmt = stmt.where(Memory.is_authorized.is_(True))
        result = await self.db.execute(stmt.order_by(Memory.created_at.desc()))
        return [_memory_to_entity(m) for m in result.scalars().all()]

    async def set_authorized(self, memory_id: str, is_authorized: bool) -> MemoryEntity | None:
        await self.db.execute(
            update(Memory)
            .where(Memory.id == memory_id)
            .values(is_authorized=is_authorized)
            .execution_options(synchronize_session=False)
        )
        orm = await self.db.get(Memory, memory_id, populate_existing=True)
        return _memory_to_entity(orm) if orm else None

    async def delete_memory(self, memory_id: str) -> bool:
        orm = await self.get_by_id(memory_id)
        if orm is None:
            return False
        await self.delete(orm)
        return True

    async def photo_urls_in_use(
        self,
        urls: Iterable[str],
        *,
        exclude_profile_id: str | None = None,
        exclude_memory_id: str | None = None,
    ) -> set[str]:
        """Return the urls still set as photo_url on some memory outside the exclusions."""
        wanted = sorted(set(urls))
        if not wanted:
            return set()
        stmt = select(Memory.photo_url).where(Memory.photo_url.in_(wanted))
        if exclude_profile_id is not None:
            stmt = stmt.where(
                func.coalesce(Memory.memorial_profile_id, Memory.family_profile_id)
                != exclude_profile_id
            )
        if exclude_memory_id is not None:
            stmt = stmt.where(Memory.id != exclude_memory_id)
        result = await self.db.execute(stmt.distinct())
        return {url for url in result.scalars().all() if url}
