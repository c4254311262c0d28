"""Collect every media URL referenced by a memorial and its dependents."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from app.domain.entities.memorial import (
    FamilyMemberEntity,
    MemoryEntity,
    ProfileEntity,
)


def _usable(value: Any) -> str | None:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def _gather(values: Iterable[Any]) -> set[str]:
    urls: set[str] = set()
    for value in values:
        url = _usable(value)
        if url is not None:
            urls.add(url)
    return urls


class MediaReferenceCollector:
    """Pure collector of garbage-collection candidates.

    Blank and non-string entries are dropped silently; duplicates collapse.
    """

    @staticmethod
    def collect(
        profile: ProfileEntity,
        members: Iterable[FamilyMemberEntity] | None = None,
        memories: Iterable[MemoryEntity] | None = None,
    ) -> set[str]:
        """Return the set of URLs referenced by profile, its members and memories.

        Args:
            profile: Profile (either variant).
            members: Family members; defaults to profile.members.
            memories: Memories on the profile's wall.
        """
        urls = _gather(profile.media_fields())
        for member in profile.members if members is None else members:
            urls |= _gather(member.media_fields())
        for memory in memories or ():
            urls |= _gather(memory.media_fields())
        return urls

    @staticmethod
    def collect_member(member: FamilyMemberEntity) -> set[str]:
        return _gather(member.media_fields())

    @staticmethod
    def collect_memory(memory: MemoryEntity) -> set[str]:
        return _gather(memory.media_fields())

    @staticmethod
    def orphaned_by_edit(before: ProfileEntity, after: ProfileEntity) -> set[str]:
        """URLs the profile record dropped in an edit that no member still uses."""
        still_used = _gather(after.media_fields())
        for member in before.members:
            still_used |= _gather(member.media_fields())
        return _gather(before.media_fields()) - still_used
