"""Maintenance jobs for announcement retention."""

from __future__ import annotations

import asyncio
import logging
from datetime import date

from app.db.session import async_session
from app.services import upcoming_service

logger = logging.getLogger("app.jobs.maintenance")


def purge_expired_announcements_job(today: str | None = None) -> dict[str, int]:
    """Scheduled cleanup for announcements whose release date has passed.

    ``today`` is an ISO date so the job stays serializable when enqueued.
    """

    async def _run() -> int:
        async with async_session() as session:
            return await upcoming_service.purge_expired_announcements(
                session, date.fromisoformat(today) if today else None
            )

    deleted = asyncio.run(_run())
    logger.info("Purged %d expired announcements", deleted)
    return {"deleted": deleted}
