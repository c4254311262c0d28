"""initial memorial schema

Revision ID: a1c2e3f4b5d6
Revises:
Create Date: 2026-10-18

Orders (read-only here), memorial profiles (individual and family in one
table), family members, memories, the append-only lifecycle history and the
media cleanup outbox. uq_memorial_profile_active_user allows one active
profile per user.
"""

from collections.abc import Sequence
from typing import Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

revision: str = "a1c2e3f4b5d6"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
    ]


def upgrade() -> None:
    op.create_table(
        "customer_order",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("user_id", sa.String(), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False),
        sa.Column("variant", sa.String(length=20), nullable=False),
        sa.Column("paid_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_customer_order_user_id", "customer_order", ["user_id"])
    op.create_index(
        "ix_customer_order_user_status", "customer_order", ["user_id", "status"]
    )

    op.create_table(
        "memorial_profile",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("user_id", sa.String(), nullable=False),
        sa.Column("order_id", sa.String(), nullable=True),
        sa.Column("variant", sa.String(length=20), nullable=False),
        sa.Column("slug", sa.String(length=100), nullable=False),
        sa.Column("display_name", sa.String(length=200), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("birth_date", sa.Date(), nullable=True),
        sa.Column("death_date", sa.Date(), nullable=True),
        sa.Column("profile_image_url", sa.Text(), nullable=True),
        sa.Column("banner_image_url", sa.Text(), nullable=True),
        sa.Column("memorial_video_url", sa.Text(), nullable=True),
        sa.Column("qr_code_url", sa.Text(), nullable=True),
        sa.Column(
            "gallery_images",
            postgresql.JSONB(astext_type=sa.Text()),
            server_default=sa.text("'[]'::jsonb"),
            nullable=False,
        ),
        sa.Column("template_id", sa.String(length=100), nullable=True),
        sa.Column("favorite_music", sa.String(length=500), nullable=True),
        sa.Column(
            "is_published", sa.Boolean(), server_default=sa.text("true"), nullable=False
        ),
        sa.Column("published_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("edit_count", sa.Integer(), server_default=sa.text("0"), nullable=False),
        sa.Column("max_edits", sa.Integer(), server_default=sa.text("3"), nullable=False),
        sa.Column("max_members", sa.Integer(), nullable=True),
        *_timestamps(),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(
            ["order_id"], ["customer_order.id"], ondelete="SET NULL"
        ),
        sa.UniqueConstraint("slug", name="uq_memorial_profile_slug"),
        sa.CheckConstraint(
            "variant IN ('individual', 'family')", name="ck_memorial_profile_variant"
        ),
        sa.CheckConstraint(
            "edit_count >= 0 AND edit_count <= max_edits",
            name="ck_memorial_profile_edit_count",
        ),
    )
    op.create_index("ix_memorial_profile_user_id", "memorial_profile", ["user_id"])
    op.create_index("ix_memorial_profile_deleted_at", "memorial_profile", ["deleted_at"])
    op.create_index(
        "uq_memorial_profile_active_user",
        "memorial_profile",
        ["user_id"],
        unique=True,
        postgresql_where=sa.text("deleted_at IS NULL"),
    )

    op.create_table(
        "family_member",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("family_profile_id", sa.String(), nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("relationship", sa.String(length=100), nullable=True),
        sa.Column("birth_date", sa.Date(), nullable=True),
        sa.Column("death_date", sa.Date(), nullable=True),
        sa.Column("profile_image_url", sa.Text(), nullable=True),
        sa.Column("memorial_video_url", sa.Text(), nullable=True),
        sa.Column("order_index", sa.Integer(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(
            ["family_profile_id"], ["memorial_profile.id"], ondelete="CASCADE"
        ),
    )
    op.create_index(
        "ix_family_member_family_profile_id", "family_member", ["family_profile_id"]
    )
    op.create_index(
        "ix_family_member_profile_order",
        "family_member",
        ["family_profile_id", "order_index"],
    )

    op.create_table(
        "memory",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("memorial_profile_id", sa.String(), nullable=True),
        sa.Column("family_profile_id", sa.String(), nullable=True),
        sa.Column("photo_url", sa.Text(), nullable=True),
        sa.Column("author_name", sa.String(length=100), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column(
            "is_authorized", sa.Boolean(), server_default=sa.text("false"), nullable=False
        ),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(
            ["memorial_profile_id"], ["memorial_profile.id"], ondelete="CASCADE"
        ),
        sa.ForeignKeyConstraint(
            ["family_profile_id"], ["memorial_profile.id"], ondelete="CASCADE"
        ),
        sa.CheckConstraint(
            "(memorial_profile_id IS NULL) <> (family_profile_id IS NULL)",
            name="ck_memory_single_profile",
        ),
    )
    op.create_index("ix_memory_memorial_profile_id", "memory", ["memorial_profile_id"])
    op.create_index("ix_memory_family_profile_id", "memory", ["family_profile_id"])

    op.create_table(
        "lifecycle_history",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("user_id", sa.String(), nullable=False),
        sa.Column("profile_id", sa.String(), nullable=False),
        sa.Column("action", sa.String(length=20), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint(
            "action IN ('created', 'deleted')", name="ck_lifecycle_history_action"
        ),
    )
    op.create_index(
        "ix_lifecycle_history_user_action", "lifecycle_history", ["user_id", "action"]
    )
    # Append-only at the database level too; the ORM listeners cover the app path.
    op.execute(
        """
        CREATE OR REPLACE FUNCTION lifecycle_history_immutable()
        RETURNS trigger AS $$
        BEGIN
            RAISE EXCEPTION 'lifecycle_history is append-only';
        END;
        $$ LANGUAGE plpgsql;
        """
    )
    op.execute(
        """
        CREATE TRIGGER trg_lifecycle_history_immutable
        BEFORE UPDATE OR DELETE ON lifecycle_history
        FOR EACH ROW EXECUTE FUNCTION lifecycle_history_immutable();
        """
    )

    op.create_table(
        "media_cleanup_task",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("reason", sa.String(length=30), nullable=False),
        sa.Column("subject_id", sa.String(), nullable=False),
        sa.Column(
            "urls",
            postgresql.JSONB(astext_type=sa.Text()),
            server_default=sa.text("'[]'::jsonb"),
            nullable=False,
        ),
        sa.Column(
            "status",
            sa.String(length=20),
            server_default=sa.text("'pending'"),
            nullable=False,
        ),
        sa.Column("attempts", sa.Integer(), server_default=sa.text("0"), nullable=False),
        sa.Column("max_attempts", sa.Integer(), nullable=False),
        sa.Column("failed_keys", postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.Column("last_error", sa.Text(), nullable=True),
        sa.Column("claimed_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_media_cleanup_task_subject_id", "media_cleanup_task", ["subject_id"]
    )
    op.create_index(
        "ix_media_cleanup_task_status_created",
        "media_cleanup_task",
        ["status", "created_at"],
    )


def downgrade() -> None:
    op.drop_index("ix_media_cleanup_task_status_created", table_name="media_cleanup_task")
    op.drop_index("ix_media_cleanup_task_subject_id", table_name="media_cleanup_task")
    op.drop_table("media_cleanup_task")
    op.execute("DROP TRIGGER IF EXISTS trg_lifecycle_history_immutable ON lifecycle_history")
    op.execute("DROP FUNCTION IF EXISTS lifecycle_history_immutable()")
    op.drop_index("ix_lifecycle_history_user_action", table_name="lifecycle_history")
    op.drop_table("lifecycle_history")
    op.drop_index("ix_memory_family_profile_id", table_name="memory")
    op.drop_index("ix_memory_memorial_profile_id", table_name="memory")
    op.drop_table("memory")
    op.drop_index("ix_family_member_profile_order", table_name="family_member")
    op.drop_index("ix_family_member_family_profile_id", table_name="family_member")
    op.drop_table("family_member")
    op.drop_index("uq_memorial_profile_active_user", table_name="memorial_profile")
    op.drop_index("ix_memorial_profile_deleted_at", table_name="memorial_profile")
    op.drop_index("ix_memorial_profile_user_id", table_name="memorial_profile")
    op.drop_table("memorial_profile")
    op.drop_index("ix_customer_order_user_status", table_name="customer_order")
    op.drop_index("ix_customer_order_user_id", table_name="customer_order")
    op.drop_table("customer_order")
