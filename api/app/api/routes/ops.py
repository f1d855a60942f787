from __future__ import annotations

from fastapi import APIRouter, Depends

from app.api.deps import require_admin
from app.services.task_queue import task_queue

router = APIRouter(dependencies=[Depends(require_admin)])


@router.get("/queues")
async def queue_health() -> dict:
    """
    Minimal operations dashboard for Redis/RQ health.

    Admin only, since it exposes worker and queue names.
    """

    return task_queue.snapshot()


@router.post("/jobs/purge-expired-announcements")
async def run_announcement_sweep() -> dict:
    """Run the expired-announcement sweep through the worker queue, inline when Redis is down."""
    return await task_queue.enqueue_announcement_sweep()
