"""Application use cases: one entry point per workflow."""

from app.application.use_cases.memories import MemoryService
from app.application.use_cases.profiles import FamilyMemberService, ProfileService

__all__ = [
    "FamilyMemberService",
    "MemoryService",
    "ProfileService",
]
