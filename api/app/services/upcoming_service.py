"""Upcoming-release announcements: validation, slot-aware CRUD and cleanup.

Invariants:
- A create never exceeds ``upcoming_max_slots`` live announcements.
- Slot shifts and the caller's own write land in one transaction; a failure
  rolls all of them back.
- Deletes leave gaps in the slot sequence.
"""

from __future__ import annotations

import logging
import uuid
from contextlib import asynccontextmanager
from datetime import date, timedelta
from typing import Any, AsyncIterator

from fastapi import HTTPException, status
from sqlalchemy import Select, delete, func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.models.catalog import ContentType, utcnow
from app.models.upcoming import UpcomingAnnouncement
from app.schema.upcoming import UpcomingAnnouncementWrite
from app.services.slot_manager import (
    AnnouncementPersistenceError,
    AnnouncementStore,
    AnnouncementValidationError,
    CapacityExceededError,
    SlotHolder,
    reserve_slot,
)
from app.utils.datetime import add_years, utc_today
from app.utils.redaction import redact_secrets

logger = logging.getLogger("app.services.upcoming")

# Transaction-scoped advisory lock key serializing writers of the slot board on Postgres.
SLOT_BOARD_LOCK_KEY = 7_302_451_001

MISSING_FIELDS_MESSAGE = "All fields are required. Please fill in all the form fields."
REQUIRED_FIELDS = (
    "title",
    "content_type",
    "release_date",
    "description",
    "thumbnail_url",
    "trailer_url",
    "genre",
    "directors",
    "writers",
    "cast_members",
)


def capacity_message(max_slots: int) -> str:
    return f"Maximum of {max_slots} announcements allowed. Please delete some existing announcements first."


def release_window_message(years: int) -> str:
    unit = "year" if years == 1 else "years"
    return f"Release date must be from tomorrow onwards and within {years} {unit}."


def board_lock_statement(dialect_name: str) -> Select | None:
    """Statement that takes the slot-board lock, or None where the backend has none."""
    if dialect_name != "postgresql":
        return None
    return select(func.pg_advisory_xact_lock(SLOT_BOARD_LOCK_KEY))


class SqlAnnouncementStore:
    """Announcement store over an ``AsyncSession``.

    ``count_live`` and ``list_live`` take the slot-board lock on Postgres, so
    concurrent creates and updates run one at a time until their commit.
    ``update_order`` only issues statements; ``insert``, ``update`` and
    ``delete`` commit, so shifts made by ``reserve_slot`` are committed together
    with the write that follows them.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def _lock_board(self) -> None:
        statement = board_lock_statement(self.session.get_bind().dialect.name)
        if statement is not None:
            await self.session.execute(statement)

    @asynccontextmanager
    async def _guard(self, action: str) -> AsyncIterator[None]:
        try:
            yield
        except SQLAlchemyError as exc:
            await self.session.rollback()
            logger.error("Announcement %s failed: %s", action, redact_secrets(str(exc)))
            raise AnnouncementPersistenceError(f"Could not {action} announcement. Please try again.") from exc

    async def list_live(self, exclude_id: uuid.UUID | None = None) -> list[SlotHolder]:
        query = (
            select(UpcomingAnnouncement.id, UpcomingAnnouncement.content_order, UpcomingAnnouncement.created_at)
            .order_by(UpcomingAnnouncement.content_order.asc(), UpcomingAnnouncement.created_at.asc())
            .with_for_update()
        )
        if exclude_id is not None:
            query = query.where(UpcomingAnnouncement.id != exclude_id)
        async with self._guard("load"):
            await self._lock_board()
            result = await self.session.execute(query)
        return [SlotHolder(id=row.id, content_order=row.content_order, created_at=row.created_at) for row in result]

    async def update_order(self, announcement_id: uuid.UUID, new_order: int) -> None:
        async with self._guard("reorder"):
            await self.session.execute(
                update(UpcomingAnnouncement)
                .where(UpcomingAnnouncement.id == announcement_id)
                .values(content_order=new_order, updated_at=utcnow())
            )

    async def count_live(self) -> int:
        async with self._guard("count"):
            await self._lock_board()
            result = await self.session.execute(select(func.count()).select_from(UpcomingAnnouncement))
        return int(result.scalar_one())

    async def exists(self, announcement_id: uuid.UUID) -> bool:
        async with self._guard("load"):
            result = await self.session.execute(
                select(UpcomingAnnouncement.id).where(UpcomingAnnouncement.id == announcement_id)
            )
        return result.scalar_one_or_none() is not None

    async def insert(self, values: dict[str, Any]) -> UpcomingAnnouncement:
        announcement = UpcomingAnnouncement(**values)
        async with self._guard("create"):
            self.session.add(announcement)
            await self.session.commit()
            await self.session.refresh(announcement)
        return announcement

    async def update(self, announcement_id: uuid.UUID, values: dict[str, Any]) -> UpcomingAnnouncement:
        async with self._guard("update"):
            announcement = await self.session.get(UpcomingAnnouncement, announcement_id, populate_existing=True)
            if announcement is None:
                raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Announcement not found")
            for key, value in values.items():
                setattr(announcement, key, value)
            await self.session.commit()
            await self.session.refresh(announcement)
        return announcement

    async def delete(self, announcement_id: uuid.UUID) -> None:
        async with self._guard("delete"):
            result = await self.session.execute(
                delete(UpcomingAnnouncement).where(UpcomingAnnouncement.id == announcement_id)
            )
            await self.session.commit()
        if not result.rowcount:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Announcement not found")


def release_window(today: date) -> tuple[date, date]:
    """Earliest and latest accepted release dates, both inclusive."""
    return today + timedelta(days=1), add_years(today, settings.upcoming_release_window_years)


def validate_announcement(payload: UpcomingAnnouncementWrite, today: date | None = None) -> dict[str, Any]:
    """Check a submission and return the column values to store."""
    for name in REQUIRED_FIELDS:
        value = getattr(payload, name)
        if isinstance(value, str):
            value = value.strip()
        if not value:
            raise AnnouncementValidationError(MISSING_FIELDS_MESSAGE)
    if payload.content_order is None:
        raise AnnouncementValidationError(MISSING_FIELDS_MESSAGE)

    try:
        content_type = ContentType(payload.content_type)
    except ValueError:
        raise AnnouncementValidationError(f"Unknown content type: {payload.content_type}") from None

    earliest, latest = release_window(today or utc_today())
    if not earliest <= payload.release_date <= latest:
        raise AnnouncementValidationError(release_window_message(settings.upcoming_release_window_years))

    max_slots = settings.upcoming_max_slots
    if not 1 <= payload.content_order <= max_slots:
        raise AnnouncementValidationError(f"Content order must be between 1 and {max_slots}.")

    return {
        "title": payload.title.strip(),
        "content_type": content_type,
        "release_date": payload.release_date,
        "description": payload.description.strip(),
        "thumbnail_url": payload.thumbnail_url.strip(),
        "trailer_url": payload.trailer_url.strip(),
        "genre": list(payload.genre),
        "cast_members": list(payload.cast_members),
        "directors": list(payload.directors),
        "writers": list(payload.writers),
        "rating_type": payload.rating_type or None,
        "content_order": payload.content_order,
    }


async def create_announcement(
    store: AnnouncementStore, payload: UpcomingAnnouncementWrite, today: date | None = None
) -> Any:
    values = validate_announcement(payload, today)
    max_slots = settings.upcoming_max_slots
    if await store.count_live() >= max_slots:
        raise CapacityExceededError(capacity_message(max_slots))
    await reserve_slot(store, values["content_order"], max_slots=max_slots)
    announcement = await store.insert(values)
    logger.info("Created announcement %r in slot %d", values["title"], values["content_order"])
    return announcement


async def update_announcement(
    store: AnnouncementStore,
    announcement_id: uuid.UUID,
    payload: UpcomingAnnouncementWrite,
    today: date | None = None,
) -> Any:
    values = validate_announcement(payload, today)
    if not await store.exists(announcement_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Announcement not found")
    await reserve_slot(store, values["content_order"], exclude_id=announcement_id)
    announcement = await store.update(announcement_id, values)
    logger.info("Updated announcement %s in slot %d", announcement_id, values["content_order"])
    return announcement


async def delete_announcement(store: AnnouncementStore, announcement_id: uuid.UUID) -> None:
    await store.delete(announcement_id)
    logger.info("Deleted announcement %s", announcement_id)


async def list_announcements(session: AsyncSession) -> list[UpcomingAnnouncement]:
    """Announcements by slot; newer first within a slot."""
    result = await session.execute(
        select(UpcomingAnnouncement).order_by(
            UpcomingAnnouncement.content_order.asc(), UpcomingAnnouncement.created_at.desc()
        )
    )
    return list(result.scalars().all())


async def get_announcement(session: AsyncSession, announcement_id: uuid.UUID) -> UpcomingAnnouncement:
    announcement = await session.get(UpcomingAnnouncement, announcement_id)
    if announcement is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Announcement not found")
    return announcement


async def purge_expired_announcements(session: AsyncSession, today: date | None = None) -> int:
    """Delete announcements whose release date has passed."""
    cutoff = today or utc_today()
    result = await session.execute(delete(UpcomingAnnouncement).where(UpcomingAnnouncement.release_date < cutoff))
    await session.commit()
    deleted = result.rowcount or 0
    if deleted:
        logger.info("Purged %d announcements released before %s", deleted, cutoff.isoformat())
    return deleted
