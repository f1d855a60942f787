from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone

from rq_scheduler import Scheduler

from app.core.config import settings
from app.jobs.maintenance import purge_expired_announcements_job
from app.services.task_queue import task_queue

logger = logging.getLogger("app.jobs.schedule_registry")


def _schedule_entries() -> list[dict]:
    entries: list[dict] = []
    if settings.announcement_sweep_interval_seconds > 0:
        entries.append(
            {
                "id": "maintenance:purge_expired_announcements",
                "func": purge_expired_announcements_job,
                "interval": max(60, settings.announcement_sweep_interval_seconds),
                "repeat": None,
                "queue_name": task_queue.maintenance_queue_name(),
            }
        )
    return entries


def ensure_schedules() -> None:
    """Idempotently register periodic jobs with rq-scheduler."""
    if settings.environment.lower() == "test":
        return
    if not task_queue.connection:
        logger.info("Skipping scheduler bootstrap; queue connection is unavailable")
        return
    scheduler = Scheduler(connection=task_queue.connection, queue_name=task_queue.queue_names[0])
    for entry in _schedule_entries():
        if entry["id"] in scheduler:
            continue
        scheduler.schedule(
            scheduled_time=datetime.now(timezone.utc),
            func=entry["func"],
            interval=entry["interval"],
            repeat=entry["repeat"],
            id=entry["id"],
            queue_name=entry["queue_name"],
            result_ttl=int(timedelta(hours=1).total_seconds()),
        )
        logger.info("Scheduled job %s every %ss on queue %s", entry["id"], entry["interval"], entry["queue_name"])
