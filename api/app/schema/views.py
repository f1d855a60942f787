"""View counter and platform statistics payloads."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel


class ViewKind(str, Enum):
    MOVIE = "movie"
    SHOW = "show"
    WEB_SERIES = "web-series"
    EPISODE = "episode"
    SEASON = "season"


class ViewCount(BaseModel):
    views: int = 0


class ViewIncrement(BaseModel):
    success: bool = True
    message: str
    views: int


class PlatformStats(BaseModel):
    total_movies: int = 0
    total_shows: int = 0
    total_web_series: int = 0
    total_movie_views: int = 0
    total_show_views: int = 0
    total_web_series_views: int = 0
    total_views: int = 0
