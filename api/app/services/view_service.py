"""View counters for movies and episodes, and the rollups built on them.

Only movies and episodes store a counter. Season, web series and show totals
are sums over the episodes their id lists reference.
"""

from __future__ import annotations

import logging
import uuid
from typing import Iterable

from fastapi import HTTPException, status
from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.catalog import ContentRecord, Episode, Movie, Season, Show, WebSeries
from app.schema.views import PlatformStats, ViewKind
from app.services.catalog_aggregation import uuid_list

logger = logging.getLogger("app.services.views")


def _require_id(value: str, label: str) -> uuid.UUID:
    candidate = (value or "").strip()
    if not candidate:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=f"{label} is required and cannot be empty"
        )
    try:
        return uuid.UUID(candidate)
    except ValueError:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Invalid {label.lower()}") from None


def _optional_id(value: str) -> uuid.UUID | None:
    try:
        return uuid.UUID((value or "").strip())
    except ValueError:
        return None


async def increment_movie_views(session: AsyncSession, content_id: str) -> int:
    """Add one view to a movie and return the new total."""
    key = _require_id(content_id, "Content ID")
    result = await session.execute(
        update(Movie).where(Movie.content_id == key).values(views=Movie.views + 1).returning(Movie.views)
    )
    views = result.scalar_one_or_none()
    if views is None:
        await session.rollback()
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Movie not found")
    await session.commit()
    logger.debug("Movie %s now has %d views", key, views)
    return views


async def increment_episode_views(session: AsyncSession, episode_id: str) -> int:
    """Add one view to an episode of a season or show and return the new total."""
    key = _require_id(episode_id, "Episode ID")
    result = await session.execute(
        update(Episode).where(Episode.episode_id == key).values(views=Episode.views + 1).returning(Episode.views)
    )
    views = result.scalar_one_or_none()
    if views is None:
        await session.rollback()
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Episode not found")
    await session.commit()
    logger.debug("Episode %s now has %d views", key, views)
    return views


async def _sum_episode_views(session: AsyncSession, episode_ids: Iterable[uuid.UUID]) -> int:
    keys = set(episode_ids)
    if not keys:
        return 0
    result = await session.execute(
        select(func.coalesce(func.sum(Episode.views), 0)).where(Episode.episode_id.in_(keys))
    )
    return int(result.scalar_one())


async def _season_episode_ids(session: AsyncSession, season_ids: Iterable[uuid.UUID]) -> list[uuid.UUID]:
    keys = set(season_ids)
    if not keys:
        return []
    result = await session.execute(select(Season.episode_id_list).where(Season.season_id.in_(keys)))
    return [key for episode_ids in result.scalars() for key in uuid_list(episode_ids)]


async def get_movie_views(session: AsyncSession, content_id: uuid.UUID) -> int:
    result = await session.execute(select(Movie.views).where(Movie.content_id == content_id))
    return result.scalar_one_or_none() or 0


async def get_episode_views(session: AsyncSession, episode_id: uuid.UUID) -> int:
    result = await session.execute(select(Episode.views).where(Episode.episode_id == episode_id))
    return result.scalar_one_or_none() or 0


async def get_season_views(session: AsyncSession, season_id: uuid.UUID) -> int:
    return await _sum_episode_views(session, await _season_episode_ids(session, [season_id]))


async def get_web_series_views(session: AsyncSession, content_id: uuid.UUID) -> int:
    result = await session.execute(select(WebSeries.season_id_list).where(WebSeries.content_id == content_id))
    season_ids = result.scalar_one_or_none()
    if season_ids is None:
        return 0
    return await _sum_episode_views(session, await _season_episode_ids(session, uuid_list(season_ids)))


async def get_show_views(session: AsyncSession, show_id: uuid.UUID) -> int:
    """Total views of a show addressed by its show id or by its content record id."""
    show = await session.get(Show, show_id)
    if show is None:
        record = await session.get(ContentRecord, show_id)
        show = await session.get(Show, record.content_id) if record else None
    if show is None:
        return 0
    return await _sum_episode_views(session, uuid_list(show.episode_id_list))


async def get_views(session: AsyncSession, kind: ViewKind, content_id: str) -> int:
    """Read views for any counted kind; unknown or malformed ids read as 0."""
    key = _optional_id(content_id)
    if key is None:
        return 0
    if kind is ViewKind.MOVIE:
        return await get_movie_views(session, key)
    if kind is ViewKind.EPISODE:
        return await get_episode_views(session, key)
    if kind is ViewKind.SEASON:
        return await get_season_views(session, key)
    if kind is ViewKind.WEB_SERIES:
        return await get_web_series_views(session, key)
    return await get_show_views(session, key)


async def platform_stats(session: AsyncSession) -> PlatformStats:
    """Counts and view totals per content type."""
    total_movies = (await session.execute(select(func.count()).select_from(Movie))).scalar_one()
    total_movie_views = (await session.execute(select(func.coalesce(func.sum(Movie.views), 0)))).scalar_one()

    shows = (await session.execute(select(Show.episode_id_list))).scalars().all()
    show_episode_ids = [key for episode_ids in shows for key in uuid_list(episode_ids)]
    total_show_views = await _sum_episode_views(session, show_episode_ids)

    series = (await session.execute(select(WebSeries.season_id_list))).scalars().all()
    season_ids = [key for season_id_list in series for key in uuid_list(season_id_list)]
    total_web_series_views = await _sum_episode_views(session, await _season_episode_ids(session, season_ids))

    return PlatformStats(
        total_movies=total_movies,
        total_shows=len(shows),
        total_web_series=len(series),
        total_movie_views=int(total_movie_views),
        total_show_views=total_show_views,
        total_web_series_views=total_web_series_views,
        total_views=int(total_movie_views) + total_show_views + total_web_series_views,
    )
