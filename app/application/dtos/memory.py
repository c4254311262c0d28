"""DTOs for memory wall submissions."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class MemorySubmit:
    """Visitor submission; text is sanitized by the service."""

    profile_id: str
    author_name: str
    message: str
    photo_url: str | None = None
    uploader_id: str | None = None


@dataclass(frozen=True)
class MemoryDeleteAck:
    memory_id: str
    cleanup_task_id: str | None = None
