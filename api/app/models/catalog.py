"""Catalog models: uploaded content plus movie, series, season, episode and show details.

Child rows are linked through ordered id lists (``season_id_list`` and
``episode_id_list``) rather than foreign keys so that list order is the
display order.
"""

from __future__ import annotations

import enum
import uuid
from datetime import datetime, timezone

from sqlalchemy import JSON, DateTime, Enum, Float, Integer, String, Text, Uuid
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base_class import Base

JSON_COMPATIBLE = JSON().with_variant(JSONB, "postgresql")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ContentType(str, enum.Enum):
    """Top-level catalog categories."""
    MOVIE = "Movie"
    WEB_SERIES = "Web Series"
    SHOW = "Show"


class ContentRecord(Base):
    """One uploaded title; ``content_id`` points into the type-specific table."""
    __tablename__ = "upload_content"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    title: Mapped[str] = mapped_column(String(500), nullable=False, index=True)
    # Persist the display values ("Web Series") so they match the stored enum
    content_type: Mapped[ContentType] = mapped_column(
        Enum(ContentType, name="content_type", values_callable=lambda enum_cls: [e.value for e in enum_cls]),
        nullable=False,
    )
    genre: Mapped[list[str]] = mapped_column(JSON_COMPATIBLE, default=list)
    content_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False, default=uuid.uuid4, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)


class Movie(Base):
    """Movie detail row, 1:1 with a Movie content record."""
    __tablename__ = "movie"

    content_id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True)
    description: Mapped[str | None] = mapped_column(Text)
    release_year: Mapped[int | None] = mapped_column(Integer)
    rating_type: Mapped[str | None] = mapped_column(String(32))
    rating: Mapped[float | None] = mapped_column(Float)
    duration: Mapped[int | None] = mapped_column(Integer)
    directors: Mapped[list[str]] = mapped_column(JSON_COMPATIBLE, default=list)
    writers: Mapped[list[str]] = mapped_column(JSON_COMPATIBLE, default=list)
    cast_members: Mapped[list[str]] = mapped_column(JSON_COMPATIBLE, default=list)
    thumbnail_url: Mapped[str | None] = mapped_column(String(1024))
    trailer_url: Mapped[str | None] = mapped_column(String(1024))
    video_url: Mapped[str | None] = mapped_column(String(1024))
    feature_in: Mapped[list[str]] = mapped_column(JSON_COMPATIBLE, default=list)
    views: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)


class WebSeries(Base):
    """Web series detail row holding the ordered season ids."""
    __tablename__ = "web_series"

    content_id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True)
    season_id_list: Mapped[list[str]] = mapped_column(JSON_COMPATIBLE, default=list)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)


class Season(Base):
    """One season of a web series with its own metadata and episodes."""
    __tablename__ = "season"

    season_id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    season_description: Mapped[str | None] = mapped_column(Text)
    release_year: Mapped[int | None] = mapped_column(Integer)
    rating_type: Mapped[str | None] = mapped_column(String(32))
    rating: Mapped[float | None] = mapped_column(Float)
    directors: Mapped[list[str]] = mapped_column(JSON_COMPATIBLE, default=list)
    writers: Mapped[list[str]] = mapped_column(JSON_COMPATIBLE, default=list)
    cast_members: Mapped[list[str]] = mapped_column(JSON_COMPATIBLE, default=list)
    thumbnail_url: Mapped[str | None] = mapped_column(String(1024))
    trailer_url: Mapped[str | None] = mapped_column(String(1024))
    feature_in: Mapped[list[str]] = mapped_column(JSON_COMPATIBLE, default=list)
    episode_id_list: Mapped[list[str]] = mapped_column(JSON_COMPATIBLE, default=list)
    created_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)


class Episode(Base):
    """A playable episode belonging to a season or a show."""
    __tablename__ = "episode"

    episode_id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    duration: Mapped[int | None] = mapped_column(Integer)
    description: Mapped[str | None] = mapped_column(Text)
    video_url: Mapped[str | None] = mapped_column(String(1024))
    thumbnail_url: Mapped[str | None] = mapped_column(String(1024))
    views: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)


class Show(Base):
    """Show detail row; episodes are listed directly without seasons."""
    __tablename__ = "show"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True)
    description: Mapped[str | None] = mapped_column(Text)
    release_year: Mapped[int | None] = mapped_column(Integer)
    rating_type: Mapped[str | None] = mapped_column(String(32))
    rating: Mapped[float | None] = mapped_column(Float)
    directors: Mapped[list[str]] = mapped_column(JSON_COMPATIBLE, default=list)
    writers: Mapped[list[str]] = mapped_column(JSON_COMPATIBLE, default=list)
    cast_members: Mapped[list[str]] = mapped_column(JSON_COMPATIBLE, default=list)
    thumbnail_url: Mapped[str | None] = mapped_column(String(1024))
    trailer_url: Mapped[str | None] = mapped_column(String(1024))
    feature_in: Mapped[list[str]] = mapped_column(JSON_COMPATIBLE, default=list)
    episode_id_list: Mapped[list[str]] = mapped_column(JSON_COMPATIBLE, default=list)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)
