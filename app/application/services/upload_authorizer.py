"""Upload grants: validate the request, check eligibility, then presign a constrained POST."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from app.application.dtos.upload import UploadGrant
from app.application.interfaces.services import IObjectStore
from app.application.services.lifecycle_guard import LifecycleGuard
from app.core.constants import ANONYMOUS_UPLOADER
from app.domain.enums import UploadCategory
from app.domain.exceptions import (
    AuthenticationException,
    AuthorizationException,
    ValidationException,
)
from app.shared.utils.datetime import epoch_ms
from app.shared.utils.generators import generate_short_token
from app.shared.utils.sanitization import InputSanitizer

logger = logging.getLogger(__name__)

IMAGE_CONTENT_TYPES = frozenset({"image/jpeg", "image/jpg", "image/png", "image/webp"})
VIDEO_CONTENT_TYPES = frozenset(
    {"video/mp4", "video/webm", "video/quicktime", "video/x-msvideo"}
)


@dataclass(frozen=True)
class CategoryPolicy:
    """MIME allow-list and size cap of one upload category."""

    content_types: frozenset[str]
    max_size: int
    major_type: str


class UploadAuthorizer:
    """Issues short-lived, constrained upload grants.

    Nothing is presigned unless the request is valid and, for profile
    media, the caller holds a completed order and is not banned.
    """

    def __init__(
        self,
        object_store: IObjectStore,
        guard: LifecycleGuard,
        *,
        max_image_size: int,
        max_video_size: int,
        expires_in: int = 1800,
        clock_ms: Callable[[], int] = epoch_ms,
        token_factory: Callable[[], str] = generate_short_token,
    ) -> None:
        self.object_store = object_store
        self.guard = guard
        self.expires_in = expires_in
        self._clock_ms = clock_ms
        self._token_factory = token_factory
        image = CategoryPolicy(IMAGE_CONTENT_TYPES, max_image_size, "image")
        self._policies: dict[UploadCategory, CategoryPolicy] = {
            UploadCategory.PROFILE_IMAGE: image,
            UploadCategory.GALLERY_IMAGE: image,
            UploadCategory.MEMORY_IMAGE: image,
            UploadCategory.VIDEO: CategoryPolicy(VIDEO_CONTENT_TYPES, max_video_size, "video"),
        }

    def policy_for(self, category: UploadCategory) -> CategoryPolicy:
        return self._policies[category]

    def validate(
        self, category: str, content_type: str, declared_size: int
    ) -> tuple[UploadCategory, CategoryPolicy, str]:
        """Return (category, policy, normalized content type) or raise ValidationException."""
        try:
            parsed = UploadCategory(category)
        except ValueError as e:
            raise ValidationException(
                f"Invalid category. Allowed: {', '.join(UploadCategory.values())}",
                field="category",
            ) from e
        policy = self.policy_for(parsed)
        normalized = (content_type or "").split(";", 1)[0].strip().lower()
        if normalized not in policy.content_types:
            raise ValidationException(
                f"File type not allowed for {parsed.value}. "
                f"Allowed: {', '.join(sorted(policy.content_types))}",
                field="content_type",
            )
        if declared_size < 1:
            raise ValidationException("File is empty", field="size")
        if declared_size > policy.max_size:
            raise ValidationException(
                f"File too large. Maximum: {policy.max_size // (1024 * 1024)}MB",
                field="size",
            )
        return parsed, policy, normalized

    def build_key(self, owner: str, category: UploadCategory, filename: str) -> str:
        """Key: <owner>/<category>/<epoch_ms>-<random6>-<sanitized filename>."""
        try:
            safe_name = InputSanitizer.sanitize_filename(filename)
        except ValueError as e:
            raise ValidationException(str(e), field="filename") from e
        return f"{owner}/{category.value}/{self._clock_ms()}-{self._token_factory()}-{safe_name}"

    async def _ensure_eligible(self, user_id: str | None, category: UploadCategory) -> None:
        if not category.requires_eligibility:
            return
        if user_id is None:
            raise AuthenticationException("Sign in to upload memorial media")
        if not await self.guard.has_completed_order(user_id):
            raise AuthorizationException(
                resource="upload_grant",
                action=category.value,
                message="A completed order is required to upload memorial media",
                reason="no_completed_order",
            )
        if await self.guard.is_lifetime_banned(user_id):
            raise AuthorizationException(
                resource="upload_grant",
                action=category.value,
                message="A memorial was already deleted for this account",
                reason="lifetime_ban",
            )

    async def authorize(
        self,
        user_id: str | None,
        category: str,
        content_type: str,
        declared_size: int,
        filename: str,
    ) -> UploadGrant:
        """Validate, check eligibility and presign.

        Raises:
            ValidationException: bad category, MIME type, size or filename.
            AuthenticationException: profile media requested anonymously.
            AuthorizationException: no completed order, or lifetime ban.
        """
        parsed, policy, normalized = self.validate(category, content_type, declared_size)
        await self._ensure_eligible(user_id, parsed)

        owner = user_id or ANONYMOUS_UPLOADER
        key = self.build_key(owner, parsed, filename)
        conditions: list[Any] = [
            ["content-length-range", 1, policy.max_size],
            ["starts-with", "$Content-Type", f"{policy.major_type}/"],
            ["starts-with", "$key", f"{owner}/{parsed.value}/"],
        ]
        post = await self.object_store.generate_presigned_post(
            key, normalized, conditions, self.expires_in
        )
        logger.info("Upload grant issued: owner=%s category=%s key=%s", owner, parsed.value, key)
        return UploadGrant(
            url=post.url,
            fields=post.fields,
            key=key,
            public_url=self.object_store.public_url(key),
            content_type=normalized,
            max_size=policy.max_size,
            expires_in=self.expires_in,
        )
