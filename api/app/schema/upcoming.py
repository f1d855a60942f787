"""Schemas for upcoming-release announcements."""

from __future__ import annotations

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, Field

from app.models.catalog import ContentType
from app.schema.base import ORMModel


class UpcomingAnnouncementWrite(BaseModel):
    """Admin form payload; completeness and the date window are checked by the service."""
    title: str | None = None
    content_type: str | None = None
    release_date: date | None = None
    description: str | None = None
    thumbnail_url: str | None = None
    trailer_url: str | None = None
    genre: list[str] = Field(default_factory=list)
    cast_members: list[str] = Field(default_factory=list)
    directors: list[str] = Field(default_factory=list)
    writers: list[str] = Field(default_factory=list)
    rating_type: str | None = None
    content_order: int | None = None


class UpcomingAnnouncementRead(ORMModel):
    id: UUID
    title: str
    content_type: ContentType
    release_date: date
    description: str
    thumbnail_url: str
    trailer_url: str
    genre: list[str] = Field(default_factory=list)
    cast_members: list[str] = Field(default_factory=list)
    directors: list[str] = Field(default_factory=list)
    writers: list[str] = Field(default_factory=list)
    rating_type: str | None = None
    content_order: int
    created_at: datetime
    updated_at: datetime


class CleanupResult(BaseModel):
    deleted: int
