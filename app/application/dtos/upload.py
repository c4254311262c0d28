"""DTOs for presigned upload grants."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class UploadGrant:
    """Presigned POST the browser uses to upload one object directly to the store.

    public_url is the value the client submits back in profile/memory payloads.
    """

    url: str
    fields: dict[str, str]
    key: str
    public_url: str
    content_type: str
    max_size: int
    expires_in: int


@dataclass(frozen=True)
class PresignedPost:
    """Browser-usable presigned POST: form target URL plus the signed form fields."""

    url: str
    fields: dict[str, str]
