"""Domain layer: entities, value objects, enums, and exceptions.

No dependencies on infrastructure or presentation. Used by application
and infrastructure layers.
"""

from app.domain.entities import (
    FamilyMemberEntity,
    LifecycleHistoryEntry,
    MemoryEntity,
    OrderEntity,
    ProfileEntity,
)
from app.domain.enums import (
    CleanupReason,
    CleanupTaskStatus,
    HistoryAction,
    OrderStatus,
    ProfileVariant,
    UploadCategory,
)
from app.domain.exceptions import (
    AuthenticationException,
    AuthorizationException,
    ConflictException,
    HistoryWriteException,
    MemorialException,
    ResourceNotFoundException,
    ValidationException,
)
from app.domain.value_objects import Slug

__all__ = [
    # Entities
    "FamilyMemberEntity",
    "LifecycleHistoryEntry",
    "MemoryEntity",
    "OrderEntity",
    "ProfileEntity",
    # Enums
    "CleanupReason",
    "CleanupTaskStatus",
    "HistoryAction",
    "OrderStatus",
    "ProfileVariant",
    "UploadCategory",
    # Exceptions
    "AuthenticationException",
    "AuthorizationException",
    "ConflictException",
    "HistoryWriteException",
    "MemorialException",
    "ResourceNotFoundException",
    "ValidationException",
    # Value objects
    "Slug",
]
