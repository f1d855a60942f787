"""Flatten catalog records into display records.

Invariants:
- One display record per resolvable movie or show and one per resolvable web
  series season; a series with N resolvable seasons fans out into N records.
- Missing detail rows (movie, series, season, show) are skipped, never raised,
  and never affect sibling records.
- Output order follows input order; seasons follow ``season_id_list`` order.

Implementation notes:
- Everything here is synchronous and works on rows that were already fetched.
  ``CatalogSnapshot`` is the in-memory resolver the database layer fills.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from typing import Any, Iterable, Iterator, Protocol, TypeAlias

from app.models.catalog import ContentRecord, ContentType, Episode, Movie, Season, Show, WebSeries
from app.schema.catalog import (
    DisplayRecordBase,
    EpisodeRead,
    MovieDisplay,
    SeasonDisplay,
    SeasonRead,
    ShowDisplay,
)
from app.utils.display_ids import ContentKey, SeasonKey, encode_display_id

ACTION_ADVENTURE = "Action & Adventure"
GENRE_ALIASES: dict[str, frozenset[str]] = {ACTION_ADVENTURE: frozenset({"Action", "Adventure"})}

logger = logging.getLogger("app.services.catalog_aggregation")


@dataclass(slots=True)
class ResolvedSeason:
    season: Season
    episodes: list[Episode] = field(default_factory=list)


@dataclass(slots=True)
class ResolvedSeries:
    """Web series with one entry per ``season_id_list`` slot; None marks a missing season."""
    series: WebSeries
    seasons: list[ResolvedSeason | None] = field(default_factory=list)


@dataclass(slots=True)
class ResolvedShow:
    show: Show
    episodes: list[Episode] = field(default_factory=list)


Detail: TypeAlias = Movie | ResolvedSeries | ResolvedShow


class DetailResolver(Protocol):
    """Look up the type-specific detail for a content record.

    Returns None for a missing row instead of raising.
    """

    def resolve(self, content_type: ContentType, content_id: uuid.UUID) -> Detail | None: ...


def _as_uuid(value: Any) -> uuid.UUID | None:
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except (TypeError, ValueError):
        return None


def uuid_list(values: Iterable[Any] | None) -> list[uuid.UUID]:
    """Parse a stored id list, dropping entries that are not UUIDs."""
    return [key for key in (_as_uuid(value) for value in values or []) if key is not None]


def _content_type(record: ContentRecord) -> ContentType | None:
    try:
        return ContentType(record.content_type)
    except ValueError:
        return None


@dataclass
class CatalogSnapshot:
    """In-memory detail resolver over pre-fetched rows."""

    movies: dict[uuid.UUID, Movie] = field(default_factory=dict)
    web_series: dict[uuid.UUID, WebSeries] = field(default_factory=dict)
    seasons: dict[uuid.UUID, Season] = field(default_factory=dict)
    episodes: dict[uuid.UUID, Episode] = field(default_factory=dict)
    shows: dict[uuid.UUID, Show] = field(default_factory=dict)

    @classmethod
    def from_rows(
        cls,
        *,
        movies: Iterable[Movie] = (),
        web_series: Iterable[WebSeries] = (),
        seasons: Iterable[Season] = (),
        episodes: Iterable[Episode] = (),
        shows: Iterable[Show] = (),
    ) -> "CatalogSnapshot":
        return cls(
            movies={row.content_id: row for row in movies},
            web_series={row.content_id: row for row in web_series},
            seasons={row.season_id: row for row in seasons},
            episodes={row.episode_id: row for row in episodes},
            shows={row.id: row for row in shows},
        )

    def resolve(self, content_type: ContentType, content_id: uuid.UUID) -> Detail | None:
        if content_type == ContentType.MOVIE:
            return self.movies.get(content_id)
        if content_type == ContentType.WEB_SERIES:
            series = self.web_series.get(content_id)
            if series is None:
                return None
            return ResolvedSeries(
                series=series,
                seasons=[self._resolve_season(season_id) for season_id in series.season_id_list or []],
            )
        if content_type == ContentType.SHOW:
            show = self.shows.get(content_id)
            if show is None:
                return None
            return ResolvedShow(show=show, episodes=self._resolve_episodes(show.episode_id_list))
        return None

    def _resolve_season(self, season_id: Any) -> ResolvedSeason | None:
        key = _as_uuid(season_id)
        season = self.seasons.get(key) if key else None
        if season is None:
            return None
        return ResolvedSeason(season=season, episodes=self._resolve_episodes(season.episode_id_list))

    def _resolve_episodes(self, episode_ids: Iterable[Any] | None) -> list[Episode]:
        resolved: list[Episode] = []
        for episode_id in episode_ids or []:
            key = _as_uuid(episode_id)
            if key and key in self.episodes:
                resolved.append(self.episodes[key])
        return resolved


def _episode_read(episode: Episode) -> EpisodeRead:
    return EpisodeRead(
        episode_id=episode.episode_id,
        title=episode.title,
        duration=episode.duration,
        description=episode.description,
        video_url=episode.video_url,
        thumbnail_url=episode.thumbnail_url,
        views=episode.views or 0,
    )


def _shared_fields(record: ContentRecord, detail: Movie | Season | Show) -> dict[str, Any]:
    return {
        "record_id": record.id,
        "title": record.title,
        "genre": list(record.genre or []),
        "release_year": detail.release_year,
        "rating_type": detail.rating_type,
        "rating": detail.rating,
        "directors": list(detail.directors or []),
        "writers": list(detail.writers or []),
        "cast_members": list(detail.cast_members or []),
        "thumbnail_url": detail.thumbnail_url,
        "trailer_url": detail.trailer_url,
        "feature_in": list(detail.feature_in or []),
    }


def _movie_display(record: ContentRecord, movie: Movie) -> MovieDisplay:
    return MovieDisplay(
        id=encode_display_id(ContentKey(record.id)),
        description=movie.description,
        duration=movie.duration,
        video_url=movie.video_url,
        views=movie.views or 0,
        created_at=record.created_at,
        updated_at=record.updated_at,
        **_shared_fields(record, movie),
    )


def _season_display(record: ContentRecord, resolved: ResolvedSeason, season_number: int) -> SeasonDisplay:
    season = resolved.season
    episodes = [_episode_read(episode) for episode in resolved.episodes]
    return SeasonDisplay(
        id=encode_display_id(SeasonKey(record.id, season_number)),
        season_number=season_number,
        description=season.season_description,
        season=SeasonRead(
            season_id=season.season_id,
            season_description=season.season_description,
            release_year=season.release_year,
            rating_type=season.rating_type,
            rating=season.rating,
            directors=list(season.directors or []),
            writers=list(season.writers or []),
            cast_members=list(season.cast_members or []),
            thumbnail_url=season.thumbnail_url,
            trailer_url=season.trailer_url,
            feature_in=list(season.feature_in or []),
            episodes=episodes,
        ),
        created_at=season.created_at or record.created_at,
        updated_at=season.updated_at or record.updated_at,
        **_shared_fields(record, season),
    )


def _show_display(record: ContentRecord, resolved: ResolvedShow) -> ShowDisplay:
    return ShowDisplay(
        id=encode_display_id(ContentKey(record.id)),
        description=resolved.show.description,
        episodes=[_episode_read(episode) for episode in resolved.episodes],
        created_at=record.created_at,
        updated_at=record.updated_at,
        **_shared_fields(record, resolved.show),
    )


def _has_feature(detail: Movie | Season | Show, feature: str | None) -> bool:
    if feature is None:
        return True
    return feature in (detail.feature_in or [])


def expand_record(
    record: ContentRecord,
    resolver: DetailResolver,
    *,
    feature: str | None = None,
) -> Iterator[DisplayRecordBase]:
    """Yield the display records for one content record.

    When ``feature`` is given, movies and shows are checked against their own
    ``feature_in`` and every season is checked independently against its own.
    """
    content_type = _content_type(record)
    if content_type is None:
        logger.debug("Skipping %s with unknown content type %r", record.id, record.content_type)
        return
    detail = resolver.resolve(content_type, record.content_id)
    if detail is None:
        logger.debug("Skipping %s: no %s detail for %s", record.id, content_type.value, record.content_id)
        return

    if isinstance(detail, Movie):
        if _has_feature(detail, feature):
            yield _movie_display(record, detail)
    elif isinstance(detail, ResolvedSeries):
        for index, resolved in enumerate(detail.seasons):
            if resolved is None:
                logger.debug("Skipping season %d of %s: season row missing", index + 1, record.id)
                continue
            if _has_feature(resolved.season, feature):
                yield _season_display(record, resolved, index + 1)
    elif isinstance(detail, ResolvedShow):
        if _has_feature(detail.show, feature):
            yield _show_display(record, detail)


def aggregate_all(records: Iterable[ContentRecord], resolver: DetailResolver) -> list[DisplayRecordBase]:
    """Flatten every record, fanning web series out into one record per season."""
    return [display for record in records for display in expand_record(record, resolver)]


def filter_by_feature(
    records: Iterable[ContentRecord], resolver: DetailResolver, feature_tag: str
) -> list[DisplayRecordBase]:
    """Flatten records whose movie, show or individual season is tagged ``feature_tag``."""
    if not feature_tag:
        return []
    return [display for record in records for display in expand_record(record, resolver, feature=feature_tag)]


def genre_matches(genres: Iterable[str] | None, genre: str) -> bool:
    """Exact membership, except that an alias genre matches any of its members."""
    wanted = GENRE_ALIASES.get(genre, frozenset({genre}))
    return any(value in wanted for value in genres or [])


def filter_by_genre(
    records: Iterable[ContentRecord], resolver: DetailResolver, genre: str
) -> list[DisplayRecordBase]:
    """Flatten records whose record-level genre matches; matching series keep all seasons."""
    if not genre:
        return []
    return [
        display
        for record in records
        if genre_matches(record.genre, genre)
        for display in expand_record(record, resolver)
    ]
