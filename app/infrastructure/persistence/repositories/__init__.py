"""Persistence repositories. Re-exports for dependency injection."""

from app.infrastructure.persistence.repositories.base import BaseRepository
from app.infrastructure.persistence.repositories.family_member_repo import (
    FamilyMemberRepository,
)
from app.infrastructure.persistence.repositories.lifecycle_history_repo import (
    LifecycleHistoryRepository,
)
from app.infrastructure.persistence.repositories.media_cleanup_task_repo import (
    MediaCleanupTaskRepository,
)
from app.infrastructure.persistence.repositories.memory_repo import MemoryRepository
from app.infrastructure.persistence.repositories.order_repo import OrderRepository
from app.infrastructure.persistence.repositories.profile_repo import ProfileRepository

__all__ = [
    "BaseRepository",
    "FamilyMemberRepository",
    "LifecycleHistoryRepository",
    "MediaCleanupTaskRepository",
    "MemoryRepository",
    "OrderRepository",
    "ProfileRepository",
]
