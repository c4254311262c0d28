"""Memory ORM model. Visitor messages on the memory wall of a memorial."""

from sqlalchemy import Boolean, CheckConstraint, ForeignKey, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column

from app.infrastructure.persistence.database import Base
from app.infrastructure.persistence.models.mixins import CuidMixin, TimestampMixin


class Memory(CuidMixin, TimestampMixin, Base):
    """Memory entity. Table: memory.

    Belongs to exactly one profile: memorial_profile_id for individual
    memorials, family_profile_id for family memorials.
    """

    __tablename__ = "memory"

    memorial_profile_id: Mapped[str | None] = mapped_column(
        String,
        ForeignKey("memorial_profile.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )
    family_profile_id: Mapped[str | None] = mapped_column(
        String,
        ForeignKey("memorial_profile.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )
    photo_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    author_name: Mapped[str] = mapped_column(String(100), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    is_authorized: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=text("false")
    )

    @property
    def profile_id(self) -> str:
        return self.memorial_profile_id or self.family_profile_id or ""

    __table_args__ = (
        CheckConstraint(
            "(memorial_profile_id IS NULL) <> (family_profile_id IS NULL)",
            name="ck_memory_single_profile",
        ),
    )
