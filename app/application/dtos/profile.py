"""DTOs for memorial profile lifecycle (no dependency on ORM)."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any

from app.domain.entities.memorial import ProfileEntity
from app.domain.enums import ProfileVariant


@dataclass(frozen=True)
class FamilyMemberCreate:
    """Member data for a family memorial (create or add)."""

    name: str
    relationship: str | None = None
    birth_date: date | None = None
    death_date: date | None = None
    profile_image_url: str | None = None
    memorial_video_url: str | None = None


@dataclass(frozen=True)
class ProfileCreate:
    """Input for creating a memorial profile."""

    variant: ProfileVariant
    display_name: str
    description: str = ""
    birth_date: date | None = None
    death_date: date | None = None
    profile_image_url: str | None = None
    banner_image_url: str | None = None
    memorial_video_url: str | None = None
    qr_code_url: str | None = None
    gallery_images: list[str] = field(default_factory=list)
    template_id: str | None = None
    favorite_music: str | None = None
    members: list[FamilyMemberCreate] = field(default_factory=list)


@dataclass(frozen=True)
class ProfileToPersist:
    """Fully resolved profile row (slug, limits, order) ready for insert."""

    user_id: str
    order_id: str | None
    variant: ProfileVariant
    slug: str
    display_name: str
    max_edits: int
    max_members: int | None
    values: dict[str, Any]


@dataclass(frozen=True)
class ProfileResult:
    """Outcome of create/edit. cleanup_task_id is set when an edit orphaned media."""

    profile: ProfileEntity
    cleanup_task_id: str | None = None


@dataclass(frozen=True)
class DeleteAck:
    """Outcome of a profile soft-delete."""

    profile_id: str
    deleted_at: datetime
    media_count: int
    cleanup_task_id: str | None = None


@dataclass(frozen=True)
class Eligibility:
    """Lifecycle state of a user, shown before create/edit."""

    can_create: bool
    has_completed_order: bool
    is_lifetime_banned: bool
    active_profile_id: str | None = None
    remaining_edits: int | None = None
