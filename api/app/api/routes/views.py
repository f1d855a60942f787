from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_db
from app.schema.views import PlatformStats, ViewCount, ViewIncrement, ViewKind
from app.services import view_service

router = APIRouter()


@router.post("/views/movie/{content_id}", response_model=ViewIncrement)
async def increment_movie_views(content_id: str, session: AsyncSession = Depends(get_db)) -> ViewIncrement:
    views = await view_service.increment_movie_views(session, content_id)
    return ViewIncrement(message="Movie view incremented", views=views)


@router.post("/views/episode/{episode_id}", response_model=ViewIncrement)
async def increment_episode_views(episode_id: str, session: AsyncSession = Depends(get_db)) -> ViewIncrement:
    views = await view_service.increment_episode_views(session, episode_id)
    return ViewIncrement(message="Episode view incremented", views=views)


@router.post("/views/show/{episode_id}", response_model=ViewIncrement)
async def increment_show_views(episode_id: str, session: AsyncSession = Depends(get_db)) -> ViewIncrement:
    """Show views are counted on the episode that was watched."""
    views = await view_service.increment_episode_views(session, episode_id)
    return ViewIncrement(message="Show episode view incremented", views=views)


@router.get("/views/{kind}/{content_id}", response_model=ViewCount)
async def get_views(kind: ViewKind, content_id: str, session: AsyncSession = Depends(get_db)) -> ViewCount:
    return ViewCount(views=await view_service.get_views(session, kind, content_id))


@router.get("/platform-stats", response_model=PlatformStats)
async def platform_stats(session: AsyncSession = Depends(get_db)) -> PlatformStats:
    return await view_service.platform_stats(session)
