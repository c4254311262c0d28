"""Persistence models: ORM entities and mixins."""

from app.infrastructure.persistence.models.customer_order import CustomerOrder
from app.infrastructure.persistence.models.family_member import FamilyMember
from app.infrastructure.persistence.models.lifecycle_history import LifecycleHistory
from app.infrastructure.persistence.models.media_cleanup_task import MediaCleanupTask
from app.infrastructure.persistence.models.memorial_profile import MemorialProfile
from app.infrastructure.persistence.models.memory import Memory
from app.infrastructure.persistence.models.mixins import (
    CuidMixin,
    SoftDeleteMixin,
    TimestampMixin,
)

__all__ = [
    "CustomerOrder",
    "MemorialProfile",
    "FamilyMember",
    "Memory",
    "LifecycleHistory",
    "MediaCleanupTask",
    "CuidMixin",
    "TimestampMixin",
    "SoftDeleteMixin",
]
