"""Memorial profile API schemas."""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field

from app.application.dtos.profile import (
    DeleteAck,
    Eligibility,
    FamilyMemberCreate,
    ProfileCreate,
)
from app.domain.entities.memorial import FamilyMemberEntity, ProfileEntity
from app.domain.enums import ProfileVariant


class FamilyMemberRequest(BaseModel):
    """One member of a family memorial (create or add)."""

    name: str = Field(..., min_length=1, max_length=200)
    relationship: str | None = Field(default=None, max_length=100)
    birth_date: date | None = None
    death_date: date | None = None
    profile_image_url: str | None = None
    memorial_video_url: str | None = None

    def to_command(self) -> FamilyMemberCreate:
        return FamilyMemberCreate(**self.model_dump())


class ProfileCreateRequest(BaseModel):
    """Request body for POST /profiles. Media fields carry URLs returned by upload grants."""

    variant: ProfileVariant = ProfileVariant.INDIVIDUAL
    display_name: str = Field(..., min_length=1, max_length=200)
    description: str = Field(default="", max_length=5000)
    birth_date: date | None = None
    death_date: date | None = None
    profile_image_url: str | None = None
    banner_image_url: str | None = None
    memorial_video_url: str | None = None
    qr_code_url: str | None = None
    gallery_images: list[str] = Field(default_factory=list)
    template_id: str | None = Field(default=None, max_length=100)
    favorite_music: str | None = Field(default=None, max_length=500)
    members: list[FamilyMemberRequest] = Field(default_factory=list)

    def to_command(self) -> ProfileCreate:
        data = self.model_dump(exclude={"members"})
        return ProfileCreate(
            **data, members=[m.to_command() for m in self.members]
        )


class ProfileEditRequest(BaseModel):
    """Request body for PATCH /profiles/{id}. Only submitted fields change; each PATCH is one edit."""

    model_config = ConfigDict(extra="forbid")

    display_name: str | None = Field(default=None, max_length=200)
    description: str | None = Field(default=None, max_length=5000)
    birth_date: date | None = None
    death_date: date | None = None
    profile_image_url: str | None = None
    banner_image_url: str | None = None
    memorial_video_url: str | None = None
    gallery_images: list[str] | None = None
    template_id: str | None = Field(default=None, max_length=100)
    favorite_music: str | None = Field(default=None, max_length=500)


class FamilyMemberResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    relationship: str | None = None
    birth_date: date | None = None
    death_date: date | None = None
    profile_image_url: str | None = None
    memorial_video_url: str | None = None
    order_index: int = 0

    @classmethod
    def from_entity(cls, member: FamilyMemberEntity) -> "FamilyMemberResponse":
        return cls.model_validate(member)


class ProfileResponse(BaseModel):
    """Memorial profile as returned to its owner and to public visitors."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    variant: ProfileVariant
    slug: str
    display_name: str
    description: str = ""
    birth_date: date | None = None
    death_date: date | None = None
    profile_image_url: str | None = None
    banner_image_url: str | None = None
    memorial_video_url: str | None = None
    qr_code_url: str | None = None
    gallery_images: list[str] = Field(default_factory=list)
    template_id: str | None = None
    favorite_music: str | None = None
    is_published: bool = True
    edit_count: int = 0
    max_edits: int = 3
    remaining_edits: int = 0
    max_members: int | None = None
    members: list[FamilyMemberResponse] = Field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_entity(cls, profile: ProfileEntity) -> "ProfileResponse":
        return cls.model_validate(profile)


class ProfileMutationResponse(BaseModel):
    """Response for create and edit. cleanup_task_id is set when an edit orphaned media."""

    profile: ProfileResponse
    cleanup_task_id: str | None = None


class ProfileDeleteResponse(BaseModel):
    """Response for DELETE /profiles/{id}. Media removal continues in the background."""

    model_config = ConfigDict(from_attributes=True)

    profile_id: str
    deleted_at: datetime
    media_count: int
    cleanup_task_id: str | None = None

    @classmethod
    def from_ack(cls, ack: DeleteAck) -> "ProfileDeleteResponse":
        return cls.model_validate(ack)


class EligibilityResponse(BaseModel):
    """Response for GET /profiles/eligibility."""

    model_config = ConfigDict(from_attributes=True)

    can_create: bool
    has_completed_order: bool
    is_lifetime_banned: bool
    active_profile_id: str | None = None
    remaining_edits: int | None = None

    @classmethod
    def from_dto(cls, eligibility: Eligibility) -> "EligibilityResponse":
        return cls.model_validate(eligibility)


class MemberRemoveResponse(BaseModel):
    member_id: str
    cleanup_task_id: str | None = None
