"""Domain enumerations for the memorial service.

Enums represent fixed sets of domain values (e.g. profile variant, history action).
"""

from enum import Enum


class ProfileVariant(str, Enum):
    """Memorial profile variant (tag of the single profile record)."""

    INDIVIDUAL = "individual"
    FAMILY = "family"

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid variant values as strings."""
        return [variant.value for variant in cls]


class HistoryAction(str, Enum):
    """Lifecycle history action. A 'deleted' entry is a permanent lifetime ban."""

    CREATED = "created"
    DELETED = "deleted"


class OrderStatus(str, Enum):
    """Package order status. Only completed orders grant create eligibility."""

    PENDING = "pending"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class UploadCategory(str, Enum):
    """Upload grant category; fixes the MIME allow-list and size cap."""

    PROFILE_IMAGE = "profile-image"
    GALLERY_IMAGE = "gallery-image"
    VIDEO = "video"
    MEMORY_IMAGE = "memory-image"

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid category values as strings."""
        return [category.value for category in cls]

    @property
    def requires_eligibility(self) -> bool:
        """Return True for categories that attach to a memorial profile."""
        return self is not UploadCategory.MEMORY_IMAGE


class CleanupReason(str, Enum):
    """Why media was queued for deletion from the object store."""

    PROFILE_DELETED = "profile_deleted"
    PROFILE_EDITED = "profile_edited"
    MEMBER_REMOVED = "member_removed"
    MEMORY_DELETED = "memory_deleted"


class CleanupTaskStatus(str, Enum):
    """Media cleanup outbox task status. FAILED is the dead-letter state."""

    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    DONE = "done"
    FAILED = "failed"
