"""Pydantic request/response schemas for the API."""

from app.schemas.health import HealthResponse
from app.schemas.memory import (
    MemoryAuthorizationRequest,
    MemoryDeleteResponse,
    MemoryResponse,
    MemorySubmitRequest,
)
from app.schemas.profile import (
    EligibilityResponse,
    FamilyMemberRequest,
    FamilyMemberResponse,
    MemberRemoveResponse,
    ProfileCreateRequest,
    ProfileDeleteResponse,
    ProfileEditRequest,
    ProfileMutationResponse,
    ProfileResponse,
)
from app.schemas.upload import UploadGrantRequest, UploadGrantResponse

__all__ = [
    "EligibilityResponse",
    "FamilyMemberRequest",
    "FamilyMemberResponse",
    "HealthResponse",
    "MemberRemoveResponse",
    "MemoryAuthorizationRequest",
    "MemoryDeleteResponse",
    "MemoryResponse",
    "MemorySubmitRequest",
    "ProfileCreateRequest",
    "ProfileDeleteResponse",
    "ProfileEditRequest",
    "ProfileMutationResponse",
    "ProfileResponse",
    "UploadGrantRequest",
    "UploadGrantResponse",
]
