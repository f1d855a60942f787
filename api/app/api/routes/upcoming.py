"""Upcoming-release announcements: public listing and admin slot management."""

from __future__ import annotations

import uuid
from typing import NoReturn

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_announcement_store, get_db, require_admin
from app.schema.upcoming import CleanupResult, UpcomingAnnouncementRead, UpcomingAnnouncementWrite
from app.services import upcoming_service
from app.services.slot_manager import (
    AnnouncementPersistenceError,
    AnnouncementValidationError,
    CapacityExceededError,
    SlotConflictError,
    UpcomingContentError,
)
from app.services.upcoming_service import SqlAnnouncementStore

router = APIRouter()

_ERROR_STATUS: dict[type[UpcomingContentError], int] = {
    AnnouncementValidationError: status.HTTP_400_BAD_REQUEST,
    CapacityExceededError: status.HTTP_409_CONFLICT,
    SlotConflictError: status.HTTP_409_CONFLICT,
    AnnouncementPersistenceError: status.HTTP_503_SERVICE_UNAVAILABLE,
}


def _raise_http(exc: UpcomingContentError) -> NoReturn:
    status_code = _ERROR_STATUS.get(type(exc), status.HTTP_400_BAD_REQUEST)
    raise HTTPException(status_code=status_code, detail=str(exc)) from exc


@router.get("", response_model=list[UpcomingAnnouncementRead])
async def list_announcements(session: AsyncSession = Depends(get_db)) -> list[UpcomingAnnouncementRead]:
    announcements = await upcoming_service.list_announcements(session)
    return [UpcomingAnnouncementRead.model_validate(item) for item in announcements]


@router.get("/{announcement_id}", response_model=UpcomingAnnouncementRead)
async def get_announcement(
    announcement_id: uuid.UUID, session: AsyncSession = Depends(get_db)
) -> UpcomingAnnouncementRead:
    announcement = await upcoming_service.get_announcement(session, announcement_id)
    return UpcomingAnnouncementRead.model_validate(announcement)


@router.post(
    "",
    response_model=UpcomingAnnouncementRead,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
async def create_announcement(
    payload: UpcomingAnnouncementWrite,
    store: SqlAnnouncementStore = Depends(get_announcement_store),
) -> UpcomingAnnouncementRead:
    try:
        announcement = await upcoming_service.create_announcement(store, payload)
    except UpcomingContentError as exc:
        _raise_http(exc)
    return UpcomingAnnouncementRead.model_validate(announcement)


@router.put(
    "/{announcement_id}",
    response_model=UpcomingAnnouncementRead,
    dependencies=[Depends(require_admin)],
)
async def update_announcement(
    announcement_id: uuid.UUID,
    payload: UpcomingAnnouncementWrite,
    store: SqlAnnouncementStore = Depends(get_announcement_store),
) -> UpcomingAnnouncementRead:
    try:
        announcement = await upcoming_service.update_announcement(store, announcement_id, payload)
    except UpcomingContentError as exc:
        _raise_http(exc)
    return UpcomingAnnouncementRead.model_validate(announcement)


@router.delete(
    "/{announcement_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    response_model=None,
    dependencies=[Depends(require_admin)],
)
async def delete_announcement(
    announcement_id: uuid.UUID,
    store: SqlAnnouncementStore = Depends(get_announcement_store),
) -> None:
    try:
        await upcoming_service.delete_announcement(store, announcement_id)
    except UpcomingContentError as exc:
        _raise_http(exc)


@router.post("/cleanup", response_model=CleanupResult, dependencies=[Depends(require_admin)])
async def cleanup_expired(session: AsyncSession = Depends(get_db)) -> CleanupResult:
    """Delete announcements whose release date has already passed."""
    deleted = await upcoming_service.purge_expired_announcements(session)
    return CleanupResult(deleted=deleted)
