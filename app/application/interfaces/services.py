"""Service interfaces (ports) for the application layer.

Protocols define contracts for infrastructure services (DIP).
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from app.application.dtos.cleanup import DeletionReport
    from app.application.dtos.upload import PresignedPost


class ICacheService(Protocol):
    """Minimal cache protocol for profile list caching (DIP)."""

    def is_available(self) -> bool:
        """Return True if cache is usable."""

    async def get(self, key: str) -> Any:
        """Return cached value or None."""

    async def set(self, key: str, value: Any, ttl: int | None = None) -> bool:
        """Store value with TTL. Returns True on success."""

    async def delete(self, key: str) -> bool:
        """Delete key. Returns True on success."""


class IObjectStore(Protocol):
    """Upload side of the object store used by UploadAuthorizer."""

    async def generate_presigned_post(
        self,
        key: str,
        content_type: str,
        conditions: list[Any],
        expires_in: int,
    ) -> PresignedPost:
        """Issue a presigned POST for key constrained by conditions."""

    def public_url(self, key: str) -> str:
        """Return the public URL of key."""


class IBatchDeleter(Protocol):
    """Deletes referenced media from the object store. Never raises."""

    async def delete_all(self, urls: Iterable[str]) -> DeletionReport:
        """Map URLs to keys and delete them in batches."""

    async def delete_keys(self, keys: Iterable[str]) -> DeletionReport:
        """Delete keys directly (retry of previously failed keys)."""
