"""Application DTOs (no ORM dependency)."""

from app.application.dtos.cleanup import (
    CleanupOutcome,
    DeletionReport,
    MediaCleanupTaskResult,
)
from app.application.dtos.memory import MemoryDeleteAck, MemorySubmit
from app.application.dtos.profile import (
    DeleteAck,
    Eligibility,
    FamilyMemberCreate,
    ProfileCreate,
    ProfileResult,
    ProfileToPersist,
)
from app.application.dtos.upload import PresignedPost, UploadGrant

__all__ = [
    "CleanupOutcome",
    "DeleteAck",
    "DeletionReport",
    "Eligibility",
    "FamilyMemberCreate",
    "MediaCleanupTaskResult",
    "MemoryDeleteAck",
    "MemorySubmit",
    "PresignedPost",
    "ProfileCreate",
    "ProfileResult",
    "ProfileToPersist",
    "UploadGrant",
]
