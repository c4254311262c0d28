"""DTOs for the media cleanup outbox."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from app.domain.enums import CleanupReason, CleanupTaskStatus


@dataclass(frozen=True)
class MediaCleanupTaskResult:
    """Outbox task as read from storage."""

    id: str
    reason: CleanupReason
    subject_id: str
    urls: list[str]
    status: CleanupTaskStatus
    attempts: int
    max_attempts: int
    failed_keys: list[str] | None = None
    last_error: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def is_retry(self) -> bool:
        """True when a previous attempt left failed keys to retry."""
        return self.failed_keys is not None


@dataclass(frozen=True)
class CleanupOutcome:
    """Result of processing one cleanup task."""

    task_id: str
    status: CleanupTaskStatus
    succeeded: int = 0
    failed: list[str] = field(default_factory=list)
    skipped: int = 0


@dataclass
class DeletionReport:
    """Per-key outcome of a deletion run.

    succeeded and failed hold storage keys; skipped holds URLs that did not
    map to a key in our bucket. errors maps failed keys to their error code.
    """

    succeeded: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    errors: dict[str, str] = field(default_factory=dict)

    @property
    def total(self) -> int:
        return len(self.succeeded) + len(self.failed)

    @property
    def ok(self) -> bool:
        return not self.failed

    def merge(self, other: DeletionReport) -> None:
        self.succeeded.extend(other.succeeded)
        self.failed.extend(other.failed)
        self.skipped.extend(other.skipped)
        self.errors.update(other.errors)
