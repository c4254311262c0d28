"""Profile payload validation: names, dates, text limits and member lists."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import date
from typing import Any

from app.application.dtos.profile import FamilyMemberCreate, ProfileCreate
from app.core.constants import MAX_TEXT_LENGTH
from app.domain.enums import ProfileVariant
from app.domain.exceptions import ValidationException
from app.shared.utils.datetime import utc_now
from app.shared.utils.sanitization import sanitize_text

MAX_DISPLAY_NAME_LENGTH = 100
MAX_MEMBER_NAME_LENGTH = 50
MAX_GALLERY_IMAGES = 50

# Fields a profile edit may change. Lifecycle columns are never client-editable.
EDITABLE_FIELDS = frozenset(
    {
        "display_name",
        "description",
        "birth_date",
        "death_date",
        "profile_image_url",
        "banner_image_url",
        "memorial_video_url",
        "gallery_images",
        "template_id",
        "favorite_music",
    }
)
INDIVIDUAL_ONLY_FIELDS = frozenset({"birth_date", "death_date", "profile_image_url"})


def _today() -> date:
    return utc_now().date()


class ProfileValidator:
    """Validates and normalizes profile input. Raises ValidationException on the first problem."""

    def __init__(self, family_max_members: int = 10) -> None:
        self.family_max_members = family_max_members

    @staticmethod
    def clean_display_name(value: str | None, field: str = "display_name") -> str:
        name = sanitize_text(value)
        if not name:
            raise ValidationException("Name is required", field=field)
        if len(name) > MAX_DISPLAY_NAME_LENGTH:
            raise ValidationException(
                f"Name cannot exceed {MAX_DISPLAY_NAME_LENGTH} characters", field=field
            )
        return name

    @staticmethod
    def clean_description(value: str | None) -> str:
        text = sanitize_text(value)
        if len(text) > MAX_TEXT_LENGTH:
            raise ValidationException(
                f"Description cannot exceed {MAX_TEXT_LENGTH} characters",
                field="description",
            )
        return text

    @staticmethod
    def check_dates(
        birth_date: date | None,
        death_date: date | None,
        *,
        required: bool = False,
        field: str = "dates",
    ) -> None:
        if required and (birth_date is None or death_date is None):
            raise ValidationException("Birth and death dates are required", field=field)
        if death_date is not None and death_date > _today():
            raise ValidationException("Death date cannot be in the future", field=field)
        if birth_date is not None and death_date is not None and birth_date >= death_date:
            raise ValidationException("Birth date must be before death date", field=field)

    @staticmethod
    def clean_gallery(images: Iterable[Any] | None) -> list[str]:
        cleaned = [i.strip() for i in images or [] if isinstance(i, str) and i.strip()]
        if len(cleaned) > MAX_GALLERY_IMAGES:
            raise ValidationException(
                f"Gallery cannot exceed {MAX_GALLERY_IMAGES} images", field="gallery_images"
            )
        return cleaned

    def clean_member(self, member: FamilyMemberCreate, position: int) -> FamilyMemberCreate:
        field = f"members[{position}]"
        name = sanitize_text(member.name)
        if not name:
            raise ValidationException(f"Name of member {position + 1} is required", field=field)
        if len(name) > MAX_MEMBER_NAME_LENGTH:
            raise ValidationException(
                f"Name of member {position + 1} cannot exceed {MAX_MEMBER_NAME_LENGTH} characters",
                field=field,
            )
        self.check_dates(member.birth_date, member.death_date, required=True, field=field)
        return FamilyMemberCreate(
            name=name,
            relationship=sanitize_text(member.relationship) or None,
            birth_date=member.birth_date,
            death_date=member.death_date,
            profile_image_url=member.profile_image_url or None,
            memorial_video_url=member.memorial_video_url or None,
        )

    def clean_members(self, members: list[FamilyMemberCreate]) -> list[FamilyMemberCreate]:
        if not members:
            raise ValidationException(
                "A family memorial needs at least one member", field="members"
            )
        if len(members) > self.family_max_members:
            raise ValidationException(
                f"At most {self.family_max_members} members are allowed per family",
                field="members",
            )
        return [self.clean_member(m, i) for i, m in enumerate(members)]

    def validate_create(
        self, data: ProfileCreate
    ) -> tuple[dict[str, Any], list[FamilyMemberCreate]]:
        """Return (column values, cleaned members) for a new profile."""
        is_family = data.variant == ProfileVariant.FAMILY
        if not is_family:
            if data.members:
                raise ValidationException(
                    "Only family memorials have members", field="members"
                )
            self.check_dates(data.birth_date, data.death_date)
        members = self.clean_members(data.members) if is_family else []
        values: dict[str, Any] = {
            "description": self.clean_description(data.description),
            "banner_image_url": data.banner_image_url or None,
            "memorial_video_url": data.memorial_video_url or None,
            "qr_code_url": data.qr_code_url or None,
            "gallery_images": self.clean_gallery(data.gallery_images),
            "template_id": data.template_id or None,
            "favorite_music": sanitize_text(data.favorite_music) or None,
        }
        if not is_family:
            values.update(
                birth_date=data.birth_date,
                death_date=data.death_date,
                profile_image_url=data.profile_image_url or None,
            )
        return values, members

    def validate_edit(
        self, variant: ProfileVariant, changes: Mapping[str, Any], current: Mapping[str, Any]
    ) -> dict[str, Any]:
        """Return cleaned column changes. current supplies dates not being changed."""
        unknown = set(changes) - EDITABLE_FIELDS
        if unknown:
            raise ValidationException(
                f"Fields cannot be edited: {', '.join(sorted(unknown))}", field="changes"
            )
        if variant == ProfileVariant.FAMILY:
            invalid = set(changes) & INDIVIDUAL_ONLY_FIELDS
            if invalid:
                raise ValidationException(
                    f"Fields not valid for family memorials: {', '.join(sorted(invalid))}",
                    field="changes",
                )
        if not changes:
            raise ValidationException("No changes submitted", field="changes")

        cleaned: dict[str, Any] = {}
        for name, value in changes.items():
            if name == "display_name":
                cleaned[name] = self.clean_display_name(value)
            elif name == "description":
                cleaned[name] = self.clean_description(value)
            elif name == "gallery_images":
                cleaned[name] = self.clean_gallery(value)
            elif name == "favorite_music":
                cleaned[name] = sanitize_text(value) or None
            elif name in ("birth_date", "death_date"):
                cleaned[name] = value
            else:
                cleaned[name] = value or None
        if "birth_date" in cleaned or "death_date" in cleaned:
            self.check_dates(
                cleaned.get("birth_date", current.get("birth_date")),
                cleaned.get("death_date", current.get("death_date")),
            )
        return cleaned
