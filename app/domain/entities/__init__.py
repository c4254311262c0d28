"""Domain entities: business concepts independent of persistence."""

from app.domain.entities.lifecycle import LifecycleHistoryEntry, OrderEntity
from app.domain.entities.memorial import (
    MEMBER_MEDIA_FIELDS,
    PROFILE_MEDIA_FIELDS,
    FamilyMemberEntity,
    MemoryEntity,
    ProfileEntity,
)

__all__ = [
    "MEMBER_MEDIA_FIELDS",
    "PROFILE_MEDIA_FIELDS",
    "FamilyMemberEntity",
    "LifecycleHistoryEntry",
    "MemoryEntity",
    "OrderEntity",
    "ProfileEntity",
]
