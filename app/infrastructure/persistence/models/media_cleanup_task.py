"""Media cleanup task ORM model. Outbox of object-store deletions to run after commit."""

from datetime import datetime

from sqlalchemy import DateTime, Index, Integer, String, Text, text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from app.infrastructure.persistence.database import Base
from app.infrastructure.persistence.models.mixins import CuidMixin, TimestampMixin


class MediaCleanupTask(CuidMixin, TimestampMixin, Base):
    """Media cleanup outbox row. Table: media_cleanup_task.

    Written in the same transaction as the delete/edit that orphaned the
    media. failed_keys holds the keys still to retry; status 'failed' is
    the dead-letter state once attempts reach max_attempts.
    """

    __tablename__ = "media_cleanup_task"

    reason: Mapped[str] = mapped_column(String(30), nullable=False)
    subject_id: Mapped[str] = mapped_column(String, nullable=False, index=True)
    urls: Mapped[list[str]] = mapped_column(
        JSONB, nullable=False, default=list, server_default=text("'[]'::jsonb")
    )
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default="pending", server_default=text("'pending'")
    )
    attempts: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0, server_default=text("0")
    )
    max_attempts: Mapped[int] = mapped_column(Integer, nullable=False, default=5)
    failed_keys: Mapped[list[str] | None] = mapped_column(JSONB, nullable=True)
    last_error: Mapped[str | None] = mapped_column(Text, nullable=True)
    claimed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    __table_args__ = (
        Index("ix_media_cleanup_task_status_created", "status", "created_at"),
    )
