"""Catalog queries and admin uploads, edits and deletes backed by the database.

Reads fetch the content records first, then load every referenced detail row
with one batched query per table into a ``CatalogSnapshot`` and hand both to
the aggregation functions.
"""

from __future__ import annotations

import logging
import uuid
from typing import Iterable, Sequence

from fastapi import HTTPException, status
from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.catalog import ContentRecord, ContentType, Episode, Movie, Season, Show, WebSeries, utcnow
from app.schema.catalog import (
    CatalogSections,
    ContentUpload,
    DetailFields,
    EpisodeCreate,
    MovieDisplay,
    MovieUpload,
    SeasonCreate,
    SeasonDisplay,
    ShowDisplay,
    ShowUpload,
    WebSeriesUpload,
)
from app.services import catalog_aggregation
from app.services.catalog_aggregation import CatalogSnapshot, uuid_list
from app.utils.display_ids import SeasonKey, decode_display_id

logger = logging.getLogger("app.services.catalog")


async def _fetch_records(session: AsyncSession, *, content_type: ContentType | None = None) -> list[ContentRecord]:
    query = select(ContentRecord).order_by(ContentRecord.updated_at.desc(), ContentRecord.created_at.desc())
    if content_type is not None:
        query = query.where(ContentRecord.content_type == content_type)
    result = await session.execute(query)
    return list(result.scalars().all())


async def _fetch_by_keys(session: AsyncSession, model: type, column, keys: Sequence[uuid.UUID]) -> list:
    if not keys:
        return []
    result = await session.execute(select(model).where(column.in_(set(keys))))
    return list(result.scalars().all())


async def load_snapshot(session: AsyncSession, records: Iterable[ContentRecord]) -> CatalogSnapshot:
    """Load every detail row the given records reference."""
    movie_keys: list[uuid.UUID] = []
    series_keys: list[uuid.UUID] = []
    show_keys: list[uuid.UUID] = []
    for record in records:
        if record.content_type == ContentType.MOVIE:
            movie_keys.append(record.content_id)
        elif record.content_type == ContentType.WEB_SERIES:
            series_keys.append(record.content_id)
        elif record.content_type == ContentType.SHOW:
            show_keys.append(record.content_id)

    movies = await _fetch_by_keys(session, Movie, Movie.content_id, movie_keys)
    web_series = await _fetch_by_keys(session, WebSeries, WebSeries.content_id, series_keys)
    shows = await _fetch_by_keys(session, Show, Show.id, show_keys)

    season_keys = [key for series in web_series for key in uuid_list(series.season_id_list)]
    seasons = await _fetch_by_keys(session, Season, Season.season_id, season_keys)

    episode_keys = [key for season in seasons for key in uuid_list(season.episode_id_list)]
    episode_keys += [key for show in shows for key in uuid_list(show.episode_id_list)]
    episodes = await _fetch_by_keys(session, Episode, Episode.episode_id, episode_keys)

    return CatalogSnapshot.from_rows(
        movies=movies, web_series=web_series, seasons=seasons, episodes=episodes, shows=shows
    )


async def list_catalog(
    session: AsyncSession,
    *,
    content_type: ContentType | None = None,
    limit: int | None = None,
) -> list[catalog_aggregation.DisplayRecordBase]:
    """Return flattened display records, newest first."""
    records = await _fetch_records(session, content_type=content_type)
    snapshot = await load_snapshot(session, records)
    displays = catalog_aggregation.aggregate_all(records, snapshot)
    if limit is not None:
        displays = displays[:limit]
    return displays


async def list_catalog_sections(session: AsyncSession) -> CatalogSections:
    """Group the flattened catalog into movies, web series seasons and shows."""
    displays = await list_catalog(session)
    return CatalogSections(
        movies=[display for display in displays if isinstance(display, MovieDisplay)],
        web_series=[display for display in displays if isinstance(display, SeasonDisplay)],
        shows=[display for display in displays if isinstance(display, ShowDisplay)],
    )


async def list_by_feature(session: AsyncSession, feature: str) -> list[catalog_aggregation.DisplayRecordBase]:
    if not feature:
        return []
    records = await _fetch_records(session)
    snapshot = await load_snapshot(session, records)
    return catalog_aggregation.filter_by_feature(records, snapshot, feature)


async def list_by_genre(session: AsyncSession, genre: str) -> list[catalog_aggregation.DisplayRecordBase]:
    if not genre:
        return []
    records = [
        record
        for record in await _fetch_records(session)
        if catalog_aggregation.genre_matches(record.genre, genre)
    ]
    snapshot = await load_snapshot(session, records)
    return catalog_aggregation.filter_by_genre(records, snapshot, genre)


async def get_display_record(session: AsyncSession, display_id: str) -> catalog_aggregation.DisplayRecordBase:
    """Resolve a display id (plain or ``-season-N``) to its display record."""
    try:
        key = decode_display_id(display_id)
    except ValueError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Content not found") from None

    record = await session.get(ContentRecord, key.content_id)
    if record is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Content not found")
    snapshot = await load_snapshot(session, [record])
    for display in catalog_aggregation.expand_record(record, snapshot):
        if isinstance(key, SeasonKey):
            if isinstance(display, SeasonDisplay) and display.season_number == key.season_number:
                return display
        elif not isinstance(display, SeasonDisplay):
            return display
    raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Content not found")


def _detail_values(payload: DetailFields) -> dict[str, object]:
    return {
        "release_year": payload.release_year,
        "rating_type": payload.rating_type,
        "rating": payload.rating,
        "directors": list(payload.directors),
        "writers": list(payload.writers),
        "cast_members": list(payload.cast_members),
        "thumbnail_url": payload.thumbnail_url,
        "trailer_url": payload.trailer_url,
        "feature_in": list(payload.feature_in),
    }


def _add_episodes(session: AsyncSession, payloads: Iterable[EpisodeCreate]) -> list[str]:
    episode_ids: list[str] = []
    for payload in payloads:
        episode = Episode(episode_id=uuid.uuid4(), **payload.model_dump())
        session.add(episode)
        episode_ids.append(str(episode.episode_id))
    return episode_ids


def _add_seasons(session: AsyncSession, payloads: Iterable[SeasonCreate]) -> list[str]:
    season_ids: list[str] = []
    for payload in payloads:
        season = Season(
            season_id=uuid.uuid4(),
            season_description=payload.description,
            episode_id_list=_add_episodes(session, payload.episodes),
            **_detail_values(payload),
        )
        session.add(season)
        season_ids.append(str(season.season_id))
    return season_ids


def _add_details(session: AsyncSession, content_id: uuid.UUID, payload: ContentUpload) -> None:
    if isinstance(payload, MovieUpload):
        session.add(
            Movie(
                content_id=content_id,
                description=payload.description,
                duration=payload.duration,
                video_url=payload.video_url,
                **_detail_values(payload),
            )
        )
    elif isinstance(payload, WebSeriesUpload):
        session.add(WebSeries(content_id=content_id, season_id_list=_add_seasons(session, payload.seasons)))
    elif isinstance(payload, ShowUpload):
        session.add(
            Show(
                id=content_id,
                description=payload.description,
                episode_id_list=_add_episodes(session, payload.episodes),
                **_detail_values(payload),
            )
        )


async def _get_record(session: AsyncSession, record_id: uuid.UUID) -> ContentRecord:
    record = await session.get(ContentRecord, record_id)
    if record is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Content not found")
    return record


async def _delete_children(session: AsyncSession, record: ContentRecord) -> None:
    """Delete the seasons and episodes a series or show lists; the detail row stays."""
    snapshot = await load_snapshot(session, [record])
    season_ids = list(snapshot.seasons)
    episode_ids = [key for season in snapshot.seasons.values() for key in uuid_list(season.episode_id_list)]
    episode_ids += [key for show in snapshot.shows.values() for key in uuid_list(show.episode_id_list)]
    if season_ids:
        await session.execute(delete(Season).where(Season.season_id.in_(season_ids)))
    if episode_ids:
        await session.execute(delete(Episode).where(Episode.episode_id.in_(episode_ids)))


async def _delete_details(session: AsyncSession, record: ContentRecord) -> None:
    await _delete_children(session, record)
    if record.content_type == ContentType.MOVIE:
        await session.execute(delete(Movie).where(Movie.content_id == record.content_id))
    elif record.content_type == ContentType.WEB_SERIES:
        await session.execute(delete(WebSeries).where(WebSeries.content_id == record.content_id))
    elif record.content_type == ContentType.SHOW:
        await session.execute(delete(Show).where(Show.id == record.content_id))


async def upload_content(session: AsyncSession, payload: ContentUpload) -> ContentRecord:
    """Create a content record with its detail rows in one transaction."""
    content_id = uuid.uuid4()
    record = ContentRecord(
        title=payload.title,
        content_type=ContentType(payload.content_type),
        genre=list(payload.genre),
        content_id=content_id,
    )
    session.add(record)
    _add_details(session, content_id, payload)

    await session.commit()
    logger.info("Uploaded %s %r as %s", record.content_type.value, record.title, record.id)
    return record


async def update_content(session: AsyncSession, record_id: uuid.UUID, payload: ContentUpload) -> ContentRecord:
    """Rewrite a content record and its details, keeping the record id.

    A movie keeps its detail row (and view count). Series seasons and show
    episodes are replaced by the submitted ones. When the content type
    changes, the old details are deleted and rebuilt under the new type.
    """
    record = await _get_record(session, record_id)
    new_type = ContentType(payload.content_type)

    if record.content_type != new_type:
        await _delete_details(session, record)
        _add_details(session, record.content_id, payload)
    elif isinstance(payload, MovieUpload):
        await session.execute(
            update(Movie)
            .where(Movie.content_id == record.content_id)
            .values(
                description=payload.description,
                duration=payload.duration,
                video_url=payload.video_url,
                **_detail_values(payload),
            )
        )
    elif isinstance(payload, WebSeriesUpload):
        await _delete_children(session, record)
        await session.execute(
            update(WebSeries)
            .where(WebSeries.content_id == record.content_id)
            .values(season_id_list=_add_seasons(session, payload.seasons))
        )
    elif isinstance(payload, ShowUpload):
        await _delete_children(session, record)
        await session.execute(
            update(Show)
            .where(Show.id == record.content_id)
            .values(
                description=payload.description,
                episode_id_list=_add_episodes(session, payload.episodes),
                **_detail_values(payload),
            )
        )

    previous_type = record.content_type
    record.title = payload.title
    record.genre = list(payload.genre)
    record.content_type = new_type
    record.updated_at = utcnow()
    await session.commit()
    await session.refresh(record)
    if previous_type != new_type:
        logger.info("Converted content %s from %s to %s", record.id, previous_type.value, new_type.value)
    else:
        logger.info("Updated %s %r (%s)", new_type.value, record.title, record.id)
    return record


async def delete_content(session: AsyncSession, record_id: uuid.UUID) -> None:
    """Delete a content record together with its detail, seasons and episodes."""
    record = await _get_record(session, record_id)
    await _delete_details(session, record)
    content_type = record.content_type
    await session.delete(record)
    await session.commit()
    logger.info("Deleted content %s (%s)", record_id, content_type.value)
