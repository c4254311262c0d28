"""Family member ORM model. Members of a family memorial profile."""

from datetime import date

from sqlalchemy import Date, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.infrastructure.persistence.database import Base
from app.infrastructure.persistence.models.mixins import CuidMixin, TimestampMixin


class FamilyMember(CuidMixin, TimestampMixin, Base):
    """Family member entity. Table: family_member. Ordered by order_index."""

    __tablename__ = "family_member"

    family_profile_id: Mapped[str] = mapped_column(
        String,
        ForeignKey("memorial_profile.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    relationship: Mapped[str | None] = mapped_column(String(100), nullable=True)
    birth_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    death_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    profile_image_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    memorial_video_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    order_index: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    __table_args__ = (
        Index("ix_family_member_profile_order", "family_profile_id", "order_index"),
    )
