"""Memorial profile ORM model. One tagged table for individual and family memorials."""

from datetime import date, datetime

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    text,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from app.infrastructure.persistence.database import Base
from app.infrastructure.persistence.models.mixins import (
    CuidMixin,
    SoftDeleteMixin,
    TimestampMixin,
)


class MemorialProfile(CuidMixin, TimestampMixin, SoftDeleteMixin, Base):
    """Memorial profile entity. Table: memorial_profile.

    variant is 'individual' or 'family'. At most one active (deleted_at IS NULL)
    profile per user, enforced by uq_memorial_profile_active_user.
    """

    __tablename__ = "memorial_profile"

    user_id: Mapped[str] = mapped_column(String, nullable=False, index=True)
    order_id: Mapped[str | None] = mapped_column(
        String, ForeignKey("customer_order.id", ondelete="SET NULL"), nullable=True
    )
    variant: Mapped[str] = mapped_column(String(20), nullable=False)
    slug: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    display_name: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    birth_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    death_date: Mapped[date | None] = mapped_column(Date, nullable=True)

    profile_image_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    banner_image_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    memorial_video_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    qr_code_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    gallery_images: Mapped[list[str]] = mapped_column(
        JSONB, nullable=False, default=list, server_default=text("'[]'::jsonb")
    )
    template_id: Mapped[str | None] = mapped_column(String(100), nullable=True)
    favorite_music: Mapped[str | None] = mapped_column(String(500), nullable=True)

    is_published: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True, server_default=text("true")
    )
    published_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    edit_count: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0, server_default=text("0")
    )
    max_edits: Mapped[int] = mapped_column(
        Integer, nullable=False, default=3, server_default=text("3")
    )
    max_members: Mapped[int | None] = mapped_column(Integer, nullable=True)

    __table_args__ = (
        Index(
            "uq_memorial_profile_active_user",
            "user_id",
            unique=True,
            postgresql_where=text("deleted_at IS NULL"),
        ),
        CheckConstraint(
            "variant IN ('individual', 'family')", name="ck_memorial_profile_variant"
        ),
        CheckConstraint(
            "edit_count >= 0 AND edit_count <= max_edits",
            name="ck_memorial_profile_edit_count",
        ),
    )
