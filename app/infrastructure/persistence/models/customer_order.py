"""Customer order ORM model. Read-only here: a completed order grants create eligibility."""

from datetime import datetime

from sqlalchemy import DateTime, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from app.infrastructure.persistence.database import Base
from app.infrastructure.persistence.models.mixins import CuidMixin, TimestampMixin


class CustomerOrder(CuidMixin, TimestampMixin, Base):
    """Package order. Table: customer_order. Index: (user_id, status)."""

    __tablename__ = "customer_order"

    user_id: Mapped[str] = mapped_column(String, nullable=False, index=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False)
    variant: Mapped[str] = mapped_column(String(20), nullable=False)
    paid_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    __table_args__ = (Index("ix_customer_order_user_status", "user_id", "status"),)
