"""Catalog schemas: flattened display records and admin upload payloads."""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Literal, Union
from uuid import UUID

from pydantic import BaseModel, Field, computed_field

from app.models.catalog import ContentType
from app.schema.base import ORMModel


class EpisodeRead(ORMModel):
    """Episode as embedded in season and show records."""
    episode_id: UUID
    title: str
    duration: int | None = None
    description: str | None = None
    video_url: str | None = None
    thumbnail_url: str | None = None
    views: int = 0


class SeasonRead(ORMModel):
    """Resolved season with its episodes in list order."""
    season_id: UUID
    season_description: str | None = None
    release_year: int | None = None
    rating_type: str | None = None
    rating: float | None = None
    directors: list[str] = Field(default_factory=list)
    writers: list[str] = Field(default_factory=list)
    cast_members: list[str] = Field(default_factory=list)
    thumbnail_url: str | None = None
    trailer_url: str | None = None
    feature_in: list[str] = Field(default_factory=list)
    episodes: list[EpisodeRead] = Field(default_factory=list)


class DisplayRecordBase(BaseModel):
    """Fields shared by every flattened catalog entry."""
    id: str
    record_id: UUID
    title: str
    genre: list[str] = Field(default_factory=list)
    description: str | None = None
    release_year: int | None = None
    rating_type: str | None = None
    rating: float | None = None
    directors: list[str] = Field(default_factory=list)
    writers: list[str] = Field(default_factory=list)
    cast_members: list[str] = Field(default_factory=list)
    thumbnail_url: str | None = None
    trailer_url: str | None = None
    feature_in: list[str] = Field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None


class MovieDisplay(DisplayRecordBase):
    content_type: Literal["Movie"] = "Movie"
    duration: int | None = None
    video_url: str | None = None
    views: int = 0


class SeasonDisplay(DisplayRecordBase):
    """One season of a web series surfaced as its own catalog entry."""
    content_type: Literal["Web Series"] = "Web Series"
    season_number: int
    season: SeasonRead

    @computed_field  # type: ignore[prop-decorator]
    @property
    def episode_count(self) -> int:
        return len(self.season.episodes)


class ShowDisplay(DisplayRecordBase):
    content_type: Literal["Show"] = "Show"
    episodes: list[EpisodeRead] = Field(default_factory=list)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def episode_count(self) -> int:
        return len(self.episodes)


DisplayRecord = Annotated[Union[MovieDisplay, SeasonDisplay, ShowDisplay], Field(discriminator="content_type")]


class CatalogSections(BaseModel):
    """Catalog grouped by type, as rendered on the browse pages."""
    movies: list[MovieDisplay] = Field(default_factory=list)
    web_series: list[SeasonDisplay] = Field(default_factory=list)
    shows: list[ShowDisplay] = Field(default_factory=list)


class ContentRecordRead(ORMModel):
    """Top-level content record returned after an upload."""
    id: UUID
    title: str
    content_type: ContentType
    genre: list[str] = Field(default_factory=list)
    content_id: UUID
    created_at: datetime
    updated_at: datetime


class EpisodeCreate(BaseModel):
    title: str = Field(min_length=1)
    duration: int | None = Field(default=None, ge=0)
    description: str | None = None
    video_url: str | None = None
    thumbnail_url: str | None = None


class DetailFields(BaseModel):
    """Metadata common to movies, seasons and shows."""
    description: str | None = None
    release_year: int | None = None
    rating_type: str | None = None
    rating: float | None = Field(default=None, ge=0, le=10)
    directors: list[str] = Field(default_factory=list)
    writers: list[str] = Field(default_factory=list)
    cast_members: list[str] = Field(default_factory=list)
    thumbnail_url: str | None = None
    trailer_url: str | None = None
    feature_in: list[str] = Field(default_factory=list)


class SeasonCreate(DetailFields):
    episodes: list[EpisodeCreate] = Field(default_factory=list)


class MovieUpload(DetailFields):
    content_type: Literal["Movie"]
    title: str = Field(min_length=1)
    genre: list[str] = Field(default_factory=list)
    duration: int | None = Field(default=None, ge=0)
    video_url: str | None = None


class WebSeriesUpload(BaseModel):
    content_type: Literal["Web Series"]
    title: str = Field(min_length=1)
    genre: list[str] = Field(default_factory=list)
    seasons: list[SeasonCreate] = Field(min_length=1)


class ShowUpload(DetailFields):
    content_type: Literal["Show"]
    title: str = Field(min_length=1)
    genre: list[str] = Field(default_factory=list)
    episodes: list[EpisodeCreate] = Field(default_factory=list)


ContentUpload = Annotated[Union[MovieUpload, WebSeriesUpload, ShowUpload], Field(discriminator="content_type")]
