"""Which stored media URLs a caller may reference, and which may be deleted.

Upload grants write under <owner>/<category>/..., so the key of a URL in our
bucket says who uploaded it and for what. Profile and member media must live
under the profile owner's profile-image, gallery-image or video prefixes;
memory photos under <uploader>/memory-image/. URLs outside the bucket are
accepted as references but never deleted.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from typing import Any

from app.application.dtos.profile import FamilyMemberCreate
from app.core.constants import ANONYMOUS_UPLOADER
from app.domain.entities.memorial import PROFILE_MEDIA_FIELDS
from app.domain.enums import UploadCategory
from app.domain.exceptions import ValidationException

PROFILE_MEDIA_CATEGORIES = (
    UploadCategory.PROFILE_IMAGE,
    UploadCategory.GALLERY_IMAGE,
    UploadCategory.VIDEO,
)


def profile_media_prefixes(user_id: str) -> tuple[str, ...]:
    return tuple(f"{user_id}/{category.value}/" for category in PROFILE_MEDIA_CATEGORIES)


def memory_photo_prefixes(uploader_id: str | None = None) -> tuple[str, ...]:
    owners = [ANONYMOUS_UPLOADER]
    if uploader_id:
        owners.append(uploader_id)
    return tuple(f"{owner}/{UploadCategory.MEMORY_IMAGE.value}/" for owner in owners)


def _is_memory_photo_key(key: str) -> bool:
    parts = key.split("/", 2)
    return len(parts) == 3 and bool(parts[0]) and parts[1] == UploadCategory.MEMORY_IMAGE.value


class MediaOwnership:
    """Ownership checks on top of a URL-to-key mapping (KeyExtractor.extract_key)."""

    def __init__(self, key_for: Callable[[str], str | None]) -> None:
        self._key_for = key_for

    def require_profile_media(
        self, user_id: str, urls: Iterable[str | None], field: str
    ) -> None:
        """Reject bucket URLs the user did not upload as profile media.

        Raises:
            ValidationException: a URL points at another owner's or category's object.
        """
        prefixes = profile_media_prefixes(user_id)
        for url in urls:
            if not url:
                continue
            key = self._key_for(url)
            if key is not None and not key.startswith(prefixes):
                raise ValidationException(
                    "Media must be uploaded by the memorial owner", field=field
                )

    def require_profile_values(
        self,
        user_id: str,
        values: Mapping[str, Any],
        members: Iterable[FamilyMemberCreate] = (),
    ) -> None:
        """Check the media columns present in values and the media of new members."""
        for name in PROFILE_MEDIA_FIELDS:
            if name in values:
                self.require_profile_media(user_id, [values[name]], name)
        self.require_profile_media(user_id, values.get("gallery_images") or [], "gallery_images")
        for position, member in enumerate(members):
            self.require_profile_media(
                user_id,
                [member.profile_image_url, member.memorial_video_url],
                f"members[{position}]",
            )

    def require_memory_photo(self, url: str, uploader_id: str | None = None) -> None:
        """A memory photo must be a memory-image upload of the submitter (or anonymous)."""
        key = self._key_for(url)
        if key is None or not key.startswith(memory_photo_prefixes(uploader_id)):
            raise ValidationException(
                "Photo must be uploaded with an upload grant", field="photo_url"
            )

    def deletable_profile_media(self, user_id: str, urls: Iterable[str]) -> set[str]:
        """Subset of urls stored under the owner's profile media prefixes."""
        prefixes = profile_media_prefixes(user_id)
        deletable: set[str] = set()
        for url in urls:
            key = self._key_for(url)
            if key is not None and key.startswith(prefixes):
                deletable.add(url)
        return deletable

    def deletable_memory_photos(self, urls: Iterable[str]) -> set[str]:
        """Subset of urls that are memory-image uploads."""
        deletable: set[str] = set()
        for url in urls:
            key = self._key_for(url)
            if key is not None and _is_memory_photo_key(key):
                deletable.add(url)
        return deletable
