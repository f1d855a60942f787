"""catalog, upcoming announcements and advertisement requests

Revision ID: 20261019_000001
Revises: 
Create Date: 2026-10-19 00:00:01.000000
"""
from __future__ import annotations

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = "20261019_000001"
down_revision = None
branch_labels = None
depends_on = None


content_type_enum = postgresql.ENUM("Movie", "Web Series", "Show", name="content_type", create_type=False)
upcoming_content_type_enum = postgresql.ENUM(
    "Movie", "Web Series", "Show", name="upcoming_content_type", create_type=False
)


def _jsonb_list(name: str) -> sa.Column:
    return sa.Column(name, postgresql.JSONB(astext_type=sa.Text()), nullable=True, server_default=sa.text("'[]'::jsonb"))


def _timestamps(nullable: bool = True) -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=nullable, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=nullable, server_default=sa.func.now()),
    ]


def _detail_columns() -> list[sa.Column]:
    return [
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("release_year", sa.Integer(), nullable=True),
        sa.Column("rating_type", sa.String(length=32), nullable=True),
        sa.Column("rating", sa.Float(), nullable=True),
        _jsonb_list("directors"),
        _jsonb_list("writers"),
        _jsonb_list("cast_members"),
        sa.Column("thumbnail_url", sa.String(length=1024), nullable=True),
        sa.Column("trailer_url", sa.String(length=1024), nullable=True),
        _jsonb_list("feature_in"),
    ]


def upgrade() -> None:
    """Create catalog tables, announcement slots and advertisement requests."""
    content_type_enum.create(op.get_bind(), checkfirst=True)
    upcoming_content_type_enum.create(op.get_bind(), checkfirst=True)

    op.create_table(
        "upload_content",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("title", sa.String(length=500), nullable=False),
        sa.Column("content_type", content_type_enum, nullable=False),
        _jsonb_list("genre"),
        sa.Column("content_id", postgresql.UUID(as_uuid=True), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_upload_content"),
    )
    op.create_index("ix_upload_content_title", "upload_content", ["title"], unique=False)
    op.create_index("ix_upload_content_content_id", "upload_content", ["content_id"], unique=False)

    op.create_table(
        "movie",
        sa.Column("content_id", postgresql.UUID(as_uuid=True), nullable=False),
        *_detail_columns(),
        sa.Column("duration", sa.Integer(), nullable=True),
        sa.Column("video_url", sa.String(length=1024), nullable=True),
        sa.Column("views", sa.Integer(), nullable=False, server_default="0"),
        *_timestamps(),
        sa.PrimaryKeyConstraint("content_id", name="pk_movie"),
    )

    op.create_table(
        "web_series",
        sa.Column("content_id", postgresql.UUID(as_uuid=True), nullable=False),
        _jsonb_list("season_id_list"),
        *_timestamps(),
        sa.PrimaryKeyConstraint("content_id", name="pk_web_series"),
    )

    season_columns = [column for column in _detail_columns() if column.name != "description"]
    op.create_table(
        "season",
        sa.Column("season_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("season_description", sa.Text(), nullable=True),
        *season_columns,
        _jsonb_list("episode_id_list"),
        *_timestamps(),
        sa.PrimaryKeyConstraint("season_id", name="pk_season"),
    )

    op.create_table(
        "episode",
        sa.Column("episode_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("title", sa.String(length=500), nullable=False),
        sa.Column("duration", sa.Integer(), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("video_url", sa.String(length=1024), nullable=True),
        sa.Column("thumbnail_url", sa.String(length=1024), nullable=True),
        sa.Column("views", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint("episode_id", name="pk_episode"),
    )

    op.create_table(
        "show",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        *_detail_columns(),
        _jsonb_list("episode_id_list"),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_show"),
    )

    op.create_table(
        "upcoming_content",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("title", sa.String(length=500), nullable=False),
        sa.Column("content_type", upcoming_content_type_enum, nullable=False),
        sa.Column("release_date", sa.Date(), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("thumbnail_url", sa.String(length=1024), nullable=False),
        sa.Column("trailer_url", sa.String(length=1024), nullable=False),
        _jsonb_list("genre"),
        _jsonb_list("cast_members"),
        _jsonb_list("directors"),
        _jsonb_list("writers"),
        sa.Column("rating_type", sa.String(length=32), nullable=True),
        sa.Column("content_order", sa.Integer(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_upcoming_content"),
        sa.CheckConstraint("content_order >= 1", name="ck_upcoming_content_content_order_positive"),
    )
    op.create_index("ix_upcoming_content_release_date", "upcoming_content", ["release_date"], unique=False)
    op.create_index("ix_upcoming_content_content_order", "upcoming_content", ["content_order"], unique=False)

    op.create_table(
        "advertisement_requests",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("email", sa.String(length=320), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("budget", sa.Numeric(14, 2), nullable=False),
        sa.Column("user_ip", sa.String(length=64), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_advertisement_requests"),
    )
    op.create_index("ix_advertisement_requests_user_ip", "advertisement_requests", ["user_ip"], unique=False)
    op.create_index("ix_advertisement_requests_created_at", "advertisement_requests", ["created_at"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_advertisement_requests_created_at", table_name="advertisement_requests")
    op.drop_index("ix_advertisement_requests_user_ip", table_name="advertisement_requests")
    op.drop_table("advertisement_requests")
    op.drop_index("ix_upcoming_content_content_order", table_name="upcoming_content")
    op.drop_index("ix_upcoming_content_release_date", table_name="upcoming_content")
    op.drop_table("upcoming_content")
    op.drop_table("show")
    op.drop_table("episode")
    op.drop_table("season")
    op.drop_table("web_series")
    op.drop_table("movie")
    op.drop_index("ix_upload_content_content_id", table_name="upload_content")
    op.drop_index("ix_upload_content_title", table_name="upload_content")
    op.drop_table("upload_content")
    upcoming_content_type_enum.drop(op.get_bind(), checkfirst=True)
    content_type_enum.drop(op.get_bind(), checkfirst=True)
