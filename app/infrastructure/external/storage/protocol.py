"""Object store protocol (DIP). Implementation: S3ObjectStore (S3-compatible, e.g. R2)."""

from dataclasses import dataclass, field
from typing import Any, Protocol

from app.application.dtos.upload import PresignedPost


@dataclass(frozen=True)
class ObjectDeleteError:
    """Per-key failure reported by a batch delete call."""

    key: str
    code: str
    message: str = ""


@dataclass(frozen=True)
class BatchDeleteResult:
    """Outcome of one batch delete call (at most 1000 keys)."""

    deleted: list[str] = field(default_factory=list)
    errors: list[ObjectDeleteError] = field(default_factory=list)


class ObjectStoreProtocol(Protocol):
    """Protocol for the S3-compatible object store used for memorial media."""

    bucket: str

    async def generate_presigned_post(
        self,
        key: str,
        content_type: str,
        conditions: list[Any],
        expires_in: int,
    ) -> PresignedPost:
        """Issue a time-boxed upload grant for key constrained by conditions."""
        ...

    async def delete_objects(self, keys: list[str]) -> BatchDeleteResult:
        """Delete up to 1000 keys in one request. Raises StorageDeleteError if the call fails."""
        ...

    def public_url(self, key: str) -> str:
        """Return the public URL clients store in profile fields for key."""
        ...
