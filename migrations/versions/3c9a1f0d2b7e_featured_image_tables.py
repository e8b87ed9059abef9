"""contents and featured image tables

Revision ID: 3c9a1f0d2b7e
Revises:
Create Date: 2025-09-02 09:14:21.118204+00:00

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '3c9a1f0d2b7e'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

content_status = postgresql.ENUM("draft", "published", name="content_status", create_type=False)
featured_image_source = postgresql.ENUM("media", "external", name="featured_image_source", create_type=False)
featured_image_kind = postgresql.ENUM("direct", "provider", name="featured_image_kind", create_type=False)


def upgrade() -> None:
    bind = op.get_bind()
    for enum in (content_status, featured_image_source, featured_image_kind):
        enum.create(bind, checkfirst=True)

    op.create_table(
        "contents",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("canonical_url", sa.Text(), nullable=True),
        sa.Column("native_image_url", sa.Text(), nullable=True),
        sa.Column("status", content_status, nullable=False, server_default="draft"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )

    op.create_table(
        "content_featured_images",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "content_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("contents.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("source_mode", featured_image_source, nullable=False, server_default="media"),
        sa.Column("raw_url", sa.Text(), nullable=True),
        sa.Column("chosen_url", sa.Text(), nullable=True),
        sa.Column("original_url", sa.Text(), nullable=True),
        sa.Column("kind", featured_image_kind, nullable=True),
        sa.Column("provider_id", sa.String(64), nullable=True),
        sa.Column("resolved_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("last_error", sa.Text(), nullable=True),
        sa.Column("last_error_kind", sa.String(32), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.UniqueConstraint("content_id", name="uq_content_featured_images_content"),
    )

    op.create_table(
        "featured_image_settings",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("api_key_secret", sa.Text(), nullable=True),
        sa.Column("size_policy", sa.String(32), nullable=False, server_default="optimize_social"),
        sa.Column("cache_ttl_value", sa.Integer(), nullable=False, server_default="24"),
        sa.Column("cache_ttl_unit", sa.String(16), nullable=False, server_default="hours"),
        sa.Column("cache_ttl_seconds", sa.Integer(), nullable=False, server_default="86400"),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )


def downgrade() -> None:
    op.drop_table("featured_image_settings")
    op.drop_table("content_featured_images")
    op.drop_table("contents")
    bind = op.get_bind()
    for enum in (featured_image_kind, featured_image_source, content_status):
        enum.drop(bind, checkfirst=True)
