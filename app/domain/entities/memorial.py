"""Memorial domain entities: profile (tagged individual/family), family member, memory.

Represents the business concepts independent of persistence. The profile is a
single tagged variant; lifecycle rules and media extraction live here once.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import date, datetime
from typing import Any

from app.domain.enums import ProfileVariant

# Single-value media columns shared by both variants.
PROFILE_MEDIA_FIELDS: tuple[str, ...] = (
    "profile_image_url",
    "banner_image_url",
    "memorial_video_url",
    "qr_code_url",
)
MEMBER_MEDIA_FIELDS: tuple[str, ...] = ("profile_image_url", "memorial_video_url")

_DATETIME_FIELDS = ("created_at", "updated_at", "published_at", "deleted_at")
_DATE_FIELDS = ("birth_date", "death_date")


@dataclass
class FamilyMemberEntity:
    """One person inside a family memorial."""

    id: str
    family_profile_id: str
    name: str
    order_index: int = 0
    relationship: str | None = None
    birth_date: date | None = None
    death_date: date | None = None
    profile_image_url: str | None = None
    memorial_video_url: str | None = None

    def media_fields(self) -> list[Any]:
        """Return raw media values of this member (may include None)."""
        return [getattr(self, name) for name in MEMBER_MEDIA_FIELDS]


@dataclass
class MemoryEntity:
    """Visitor-submitted tribute on the memory wall of exactly one profile."""

    id: str
    profile_id: str
    photo_url: str | None
    author_name: str
    message: str
    is_authorized: bool = False
    created_at: datetime | None = None

    def media_fields(self) -> list[Any]:
        return [self.photo_url]


@dataclass
class ProfileEntity:
    """Domain entity for a memorial profile (individual or family).

    Lifecycle: active while deleted_at is None; editable while
    edit_count < max_edits; soft-deleted exactly once.
    """

    id: str
    user_id: str
    variant: ProfileVariant
    slug: str
    display_name: str
    edit_count: int = 0
    max_edits: int = 3
    is_published: bool = True
    order_id: str | None = None
    description: str = ""
    birth_date: date | None = None
    death_date: date | None = None
    profile_image_url: str | None = None
    banner_image_url: str | None = None
    memorial_video_url: str | None = None
    qr_code_url: str | None = None
    gallery_images: list[Any] = field(default_factory=list)
    template_id: str | None = None
    favorite_music: str | None = None
    max_members: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    published_at: datetime | None = None
    deleted_at: datetime | None = None
    members: list[FamilyMemberEntity] = field(default_factory=list)

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None

    @property
    def is_family(self) -> bool:
        return self.variant == ProfileVariant.FAMILY

    @property
    def remaining_edits(self) -> int:
        """Edits left before the profile becomes read-only (never negative)."""
        return max(self.max_edits - self.edit_count, 0)

    def can_edit(self) -> bool:
        """Return whether the profile may still be mutated in place."""
        return not self.is_deleted and self.edit_count < self.max_edits

    def is_owned_by(self, user_id: str) -> bool:
        return self.user_id == user_id

    def is_publicly_visible(self) -> bool:
        return self.is_published and not self.is_deleted

    def media_fields(self) -> list[Any]:
        """Return raw media values of the profile record itself (may include None).

        Members are separate records and are walked by the collector.
        """
        values: list[Any] = [getattr(self, name) for name in PROFILE_MEDIA_FIELDS]
        if isinstance(self.gallery_images, list):
            values.extend(self.gallery_images)
        return values

    def to_dict(self) -> dict[str, Any]:
        """JSON-serializable representation (used by the profile list cache)."""
        data = asdict(self)
        data["variant"] = self.variant.value
        for name in _DATETIME_FIELDS + _DATE_FIELDS:
            value = data.get(name)
            data[name] = value.isoformat() if value is not None else None
        for member in data["members"]:
            for name in _DATE_FIELDS:
                value = member.get(name)
                member[name] = value.isoformat() if value is not None else None
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ProfileEntity:
        """Rebuild an entity from to_dict() output."""
        values = dict(data)
        values["variant"] = ProfileVariant(values["variant"])
        for name in _DATETIME_FIELDS:
            raw = values.get(name)
            values[name] = datetime.fromisoformat(raw) if raw else None
        for name in _DATE_FIELDS:
            raw = values.get(name)
            values[name] = date.fromisoformat(raw) if raw else None
        members = []
        for raw_member in values.get("members") or []:
            member = dict(raw_member)
            for name in _DATE_FIELDS:
                raw = member.get(name)
                member[name] = date.fromisoformat(raw) if raw else None
            members.append(FamilyMemberEntity(**member))
        values["members"] = members
        return cls(**values)
