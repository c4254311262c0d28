"""Lifecycle history ORM model. Append-only ledger of profile creations and deletions."""

from datetime import datetime
from typing import Any

from sqlalchemy import (
    CheckConstraint,
    Connection,
    DateTime,
    Index,
    String,
    event,
    text,
)
from sqlalchemy.orm import Mapped, Mapper, mapped_column

from app.infrastructure.persistence.database import Base
from app.shared.utils.generators import generate_cuid


class LifecycleHistory(Base):
    """Lifecycle history entry. Table: lifecycle_history. No update/delete.

    profile_id has no foreign key: entries outlive the profile row.
    """

    __tablename__ = "lifecycle_history"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=generate_cuid)
    user_id: Mapped[str] = mapped_column(String, nullable=False)
    profile_id: Mapped[str] = mapped_column(String, nullable=False)
    action: Mapped[str] = mapped_column(String(20), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=text("now()"), nullable=False
    )

    __table_args__ = (
        Index("ix_lifecycle_history_user_action", "user_id", "action"),
        CheckConstraint(
            "action IN ('created', 'deleted')", name="ck_lifecycle_history_action"
        ),
    )


@event.listens_for(LifecycleHistory, "before_update")
def _prevent_history_updates(
    _mapper: Mapper[Any], _connection: Connection, _target: LifecycleHistory
) -> None:
    """Lifecycle history entries are append-only; updates are forbidden."""
    raise ValueError("Lifecycle history entries are immutable and cannot be updated.")


@event.listens_for(LifecycleHistory, "before_delete")
def _prevent_history_deletes(
    _mapper: Mapper[Any], _connection: Connection, _target: LifecycleHistory
) -> None:
    """A 'deleted' entry is a lifetime ban; entries cannot be deleted."""
    raise ValueError("Lifecycle history entries cannot be deleted.")
