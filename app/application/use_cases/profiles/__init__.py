"""Profile use cases: lifecycle (create/edit/delete/read) and family members."""

from app.application.use_cases.profiles.family_member_operations import (
    FamilyMemberService,
)
from app.application.use_cases.profiles.profile_operations import ProfileService

__all__ = ["FamilyMemberService", "ProfileService"]
