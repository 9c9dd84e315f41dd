"""Initial schema: users, collections, images.

Revision ID: 001
Revises: (none)
Create Date: 2026-10-19
"""

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects.postgresql import JSONB

revision = "001"
down_revision = None
branch_labels = None
depends_on = None


def _timestamp(name: str) -> sa.Column:
    return sa.Column(
        name,
        sa.DateTime(timezone=True),
        server_default=sa.func.now(),
        nullable=False,
    )


def upgrade() -> None:
    # --- users ---
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(255), nullable=True),
        sa.Column("email", sa.String(320), nullable=False, unique=True),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("phone_number", sa.String(50), nullable=True),
        sa.Column("user_type", sa.String(20), server_default="CLIENT", nullable=False),
        sa.Column("user_role", sa.String(20), server_default="OWNER", nullable=False),
        sa.Column("status", sa.String(20), server_default="ACTIVE", nullable=False),
        sa.Column("property_ids", JSONB, server_default=sa.text("'[]'::jsonb"), nullable=False),
        _timestamp("created_at"),
        _timestamp("updated_at"),
    )

    # --- collections ---
    op.create_table(
        "collections",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "user_id",
            sa.Integer(),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("property_description", sa.Text(), nullable=False),
        sa.Column("property_address", sa.String(500), nullable=False),
        sa.Column("collection_code", sa.String(100), nullable=False),
        sa.Column("property_size", sa.Integer(), server_default="0", nullable=False),
        sa.Column("property_owner_id", sa.Integer(), nullable=True),
        sa.Column("bedrooms", sa.Integer(), server_default="0", nullable=False),
        sa.Column("bathrooms", sa.Integer(), server_default="0", nullable=False),
        sa.Column("parking_spaces", sa.Integer(), nullable=True),
        sa.Column("property_type", sa.String(50), nullable=False),
        sa.Column("image_urls", JSONB, server_default=sa.text("'[]'::jsonb"), nullable=False),
        sa.Column("approval_status", sa.String(20), server_default="PENDING", nullable=False),
        _timestamp("created_at"),
        _timestamp("updated_at"),
    )
    op.create_index("idx_collections_user", "collections", ["user_id"])

    # --- images ---
    op.create_table(
        "images",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("image_id", sa.String(64), nullable=False, unique=True),
        sa.Column(
            "collection_id",
            sa.Integer(),
            sa.ForeignKey("collections.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("storage_key", sa.String(500), nullable=False),
        sa.Column("image_url", sa.Text(), nullable=False),
        _timestamp("upload_time"),
        sa.Column("image_tag", sa.String(30), nullable=False),
        sa.Column("custom_tag", sa.String(100), nullable=True),
        sa.Column("instance_number", sa.Integer(), server_default="1", nullable=False),
        sa.Column("image_status", sa.String(20), server_default="PENDING", nullable=False),
        sa.Column("rejection_reason", sa.String(500), nullable=True),
        sa.Column("description", sa.String(500), nullable=True),
        sa.Column("description_summary", sa.String(500), nullable=True),
        sa.Column("ai_tag", sa.String(30), nullable=True),
        sa.Column("ai_confidence", sa.Float(), nullable=True),
        sa.Column("content_type", sa.String(100), nullable=False),
        sa.Column("size_bytes", sa.Integer(), nullable=False),
    )
    op.create_index("idx_images_collection", "images", ["collection_id"])


def downgrade() -> None:
    op.drop_index("idx_images_collection", table_name="images")
    op.drop_table("images")
    op.drop_index("idx_collections_user", table_name="collections")
    op.drop_table("collections")
    op.drop_table("users")
