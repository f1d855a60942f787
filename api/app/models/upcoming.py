"""Upcoming-release announcements shown in numbered slots."""

from __future__ import annotations

import uuid
from datetime import date, datetime

from sqlalchemy import CheckConstraint, Date, DateTime, Enum, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base_class import Base
from app.models.catalog import JSON_COMPATIBLE, ContentType, utcnow


class UpcomingAnnouncement(Base):
    """Announcement occupying one ``content_order`` slot."""
    __tablename__ = "upcoming_content"
    __table_args__ = (
        CheckConstraint("content_order >= 1", name="content_order_positive"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    content_type: Mapped[ContentType] = mapped_column(
        Enum(
            ContentType,
            name="upcoming_content_type",
            values_callable=lambda enum_cls: [e.value for e in enum_cls],
        ),
        nullable=False,
    )
    release_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    thumbnail_url: Mapped[str] = mapped_column(String(1024), nullable=False)
    trailer_url: Mapped[str] = mapped_column(String(1024), nullable=False)
    genre: Mapped[list[str]] = mapped_column(JSON_COMPATIBLE, default=list)
    cast_members: Mapped[list[str]] = mapped_column(JSON_COMPATIBLE, default=list)
    directors: Mapped[list[str]] = mapped_column(JSON_COMPATIBLE, default=list)
    writers: Mapped[list[str]] = mapped_column(JSON_COMPATIBLE, default=list)
    rating_type: Mapped[str | None] = mapped_column(String(32))
    content_order: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)
