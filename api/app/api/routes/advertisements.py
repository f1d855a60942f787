from __future__ import annotations

import uuid
from datetime import datetime, timedelta, timezone

from fastapi import APIRouter, Depends, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import client_ip, get_db, require_admin
from app.core.config import settings
from app.schema.advertisement import (
    AdvertisementRequestCreate,
    AdvertisementRequestRead,
    RecentRequestCheck,
    RecentRequestStatus,
)
from app.services import advertisement_service

router = APIRouter()


@router.get("", response_model=list[AdvertisementRequestRead], dependencies=[Depends(require_admin)])
async def list_requests(session: AsyncSession = Depends(get_db)) -> list[AdvertisementRequestRead]:
    requests = await advertisement_service.list_requests(session)
    return [AdvertisementRequestRead.model_validate(item) for item in requests]


@router.post("", response_model=AdvertisementRequestRead, status_code=status.HTTP_201_CREATED)
async def create_request(
    payload: AdvertisementRequestCreate,
    request: Request,
    session: AsyncSession = Depends(get_db),
) -> AdvertisementRequestRead:
    created = await advertisement_service.create_request(session, payload, client_ip(request))
    return AdvertisementRequestRead.model_validate(created)


@router.post("/recent", response_model=RecentRequestStatus)
async def check_recent_request(
    payload: RecentRequestCheck,
    request: Request,
    session: AsyncSession = Depends(get_db),
) -> RecentRequestStatus:
    """Tell the form whether this client is still in its cooldown window."""
    since = payload.since or datetime.now(timezone.utc) - timedelta(minutes=settings.ad_request_cooldown_minutes)
    recent = await advertisement_service.has_recent_request(session, client_ip(request), since)
    return RecentRequestStatus(has_recent_request=recent)


@router.delete(
    "/{request_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    response_model=None,
    dependencies=[Depends(require_admin)],
)
async def delete_request(request_id: uuid.UUID, session: AsyncSession = Depends(get_db)) -> None:
    await advertisement_service.delete_request(session, request_id)
