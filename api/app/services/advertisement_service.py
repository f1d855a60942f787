"""Advertisement request intake with budget bounds and a per-IP cooldown."""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timedelta, timezone

from fastapi import HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.models.advertisement import AdvertisementRequest
from app.schema.advertisement import AdvertisementRequestCreate

logger = logging.getLogger("app.services.advertisements")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _format_amount(value: float) -> str:
    return f"{value:,.0f}"


def validate_budget(budget: float) -> None:
    if budget < settings.ad_request_min_budget:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Minimum budget is {_format_amount(settings.ad_request_min_budget)}",
        )
    if budget > settings.ad_request_max_budget:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Maximum budget is {_format_amount(settings.ad_request_max_budget)}",
        )


async def has_recent_request(session: AsyncSession, user_ip: str, since: datetime) -> bool:
    """True when ``user_ip`` submitted a request at or after ``since``."""
    if since.tzinfo is None:
        since = since.replace(tzinfo=timezone.utc)
    result = await session.execute(
        select(AdvertisementRequest.id)
        .where(AdvertisementRequest.user_ip == user_ip, AdvertisementRequest.created_at >= since)
        .limit(1)
    )
    return result.first() is not None


async def create_request(
    session: AsyncSession, payload: AdvertisementRequestCreate, user_ip: str
) -> AdvertisementRequest:
    validate_budget(payload.budget)
    cooldown = settings.ad_request_cooldown_minutes
    if await has_recent_request(session, user_ip, _utcnow() - timedelta(minutes=cooldown)):
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail=f"You can only make one advertisement request every {cooldown} minutes. Please try again later.",
        )
    request = AdvertisementRequest(
        email=payload.email,
        description=payload.description.strip(),
        budget=payload.budget,
        user_ip=user_ip,
    )
    session.add(request)
    await session.commit()
    await session.refresh(request)
    logger.info("Recorded advertisement request %s", request.id)
    return request


async def list_requests(session: AsyncSession) -> list[AdvertisementRequest]:
    """All requests, newest first."""
    result = await session.execute(select(AdvertisementRequest).order_by(AdvertisementRequest.created_at.desc()))
    return list(result.scalars().all())


async def delete_request(session: AsyncSession, request_id: uuid.UUID) -> None:
    request = await session.get(AdvertisementRequest, request_id)
    if request is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Advertisement request not found")
    await session.delete(request)
    await session.commit()
