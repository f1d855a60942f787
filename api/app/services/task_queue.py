"""RQ task queue wrapper with inline fallback for local/test runs."""

from __future__ import annotations

import asyncio
import logging
import time
from datetime import datetime, timezone
from typing import Any, Callable

from redis import Redis
from redis.exceptions import RedisError
from rq import Queue, Retry
from rq.registry import DeferredJobRegistry, FailedJobRegistry, ScheduledJobRegistry, StartedJobRegistry
from rq.worker import Worker
from rq_scheduler import Scheduler

from app.core.config import settings
from app.utils.redaction import redact_secrets

logger = logging.getLogger("app.services.task_queue")

DEFAULT_RETRY = Retry(max=3, interval=[5, 15, 30])


class TaskQueue:
    """Thin wrapper around RQ that can fall back to inline execution."""

    def __init__(self) -> None:
        self.queue_names: list[str] = settings.worker_queue_names or ["default"]
        self._connection: Redis | None = None
        self._enabled = False
        self._bootstrap()

    @property
    def enabled(self) -> bool:
        return self._enabled

    @property
    def connection(self) -> Redis | None:
        return self._connection

    def _bootstrap(self) -> None:
        """Initialize Redis connectivity unless disabled for tests."""
        if settings.environment.lower() == "test":
            logger.info("Task queue disabled in test environment")
            return
        try:
            connection = Redis.from_url(settings.redis_url)
            connection.ping()
        except (RedisError, ValueError) as exc:  # pragma: no cover - network/redis specific
            logger.warning("Redis unavailable; running jobs inline: %s", redact_secrets(str(exc)))
            return
        self._connection = connection
        self._enabled = True
        logger.info("Task queue ready (queues: %s)", ", ".join(self.queue_names))

    def maintenance_queue_name(self) -> str:
        if "maintenance" in self.queue_names:
            return "maintenance"
        return self.queue_names[0] if self.queue_names else "default"

    def get_queue(self, queue_name: str | None = None) -> Queue:
        """Return a configured queue instance for enqueuing jobs."""
        if not self._connection:
            raise RuntimeError("Queue connection not initialized")
        return Queue(queue_name or self.queue_names[0], connection=self._connection)

    async def enqueue_announcement_sweep(self) -> Any:
        """Run the expired-announcement sweep on the maintenance queue."""
        from app.jobs.maintenance import purge_expired_announcements_job

        return await self.enqueue_or_run(
            purge_expired_announcements_job,
            queue_name=self.maintenance_queue_name(),
            timeout_seconds=60,
            description="maintenance:purge_expired_announcements",
        )

    async def enqueue_or_run(
        self,
        func: Callable[..., Any],
        *,
        queue_name: str | None = None,
        timeout_seconds: int = 60,
        retry: Retry | None = DEFAULT_RETRY,
        description: str | None = None,
        **kwargs: Any,
    ) -> Any:
        """Enqueue a job and wait for the result; run it in a thread when no queue is available.

        Jobs are synchronous callables (they drive their own event loop), so
        the inline path runs them off the current loop.
        """
        if not self._enabled or not self._connection:
            return await asyncio.to_thread(func, **kwargs)

        def _enqueue_and_wait() -> Any:
            queue = self.get_queue(queue_name)
            job = queue.enqueue(
                func,
                kwargs=kwargs,
                job_timeout=timeout_seconds,
                description=description,
                retry=retry,
            )
            return _wait_for_result(job, timeout_seconds)

        try:
            return await asyncio.to_thread(_enqueue_and_wait)
        except RedisError as exc:  # pragma: no cover - network/redis specific
            logger.warning("Falling back to inline execution after queue failure: %s", redact_secrets(str(exc)))
            return await asyncio.to_thread(func, **kwargs)

    def snapshot(self) -> dict[str, Any]:
        """Return a diagnostic snapshot of queue, worker, and scheduler state."""
        if not self._connection:
            return {
                "status": "offline",
                "queues": [],
                "workers": [],
                "error": "queue connection not initialized",
                "redis_url": redact_secrets(settings.redis_url),
            }

        queues: list[dict[str, Any]] = []
        for name in self.queue_names:
            queue = Queue(name, connection=self._connection)
            queues.append(
                {
                    "name": name,
                    "size": queue.count,
                    "deferred": len(DeferredJobRegistry(queue=queue)),
                    "scheduled": len(ScheduledJobRegistry(queue=queue)),
                    "started": len(StartedJobRegistry(queue=queue)),
                    "failed": len(FailedJobRegistry(queue=queue)),
                }
            )

        workers: list[dict[str, Any]] = []
        try:
            for worker in Worker.all(connection=self._connection):
                workers.append(
                    {
                        "name": worker.name,
                        "state": worker.get_state(),
                        "queues": list(worker.queue_names()),
                        "current_job_id": worker.get_current_job_id(),
                    }
                )
        except RedisError as exc:  # pragma: no cover - network/redis specific
            logger.warning("Unable to list workers: %s", redact_secrets(str(exc)))

        scheduler_summary: dict[str, Any] = {}
        try:
            scheduler = Scheduler(connection=self._connection, queue_name=self.queue_names[0])
            scheduler_summary["scheduled_jobs"] = len(list(scheduler.get_jobs()))
            scheduler_summary["healthy"] = True
        except RedisError:  # pragma: no cover - redis specific
            scheduler_summary["scheduled_jobs"] = None
            scheduler_summary["healthy"] = False

        warnings: list[str] = []
        if not workers:
            warnings.append("no_workers")
        if scheduler_summary.get("healthy") is False:
            warnings.append("scheduler_unreachable")
        return {
            "status": "online" if not warnings else "degraded",
            "queues": queues,
            "workers": workers,
            "redis_url": redact_secrets(settings.redis_url),
            "scheduler": scheduler_summary,
            "warnings": warnings,
            "checked_at": datetime.now(timezone.utc).isoformat(),
        }


def _wait_for_result(job: Any, timeout_seconds: int) -> Any:
    """Poll a job until it finishes or ``timeout_seconds`` pass."""
    deadline = time.monotonic() + timeout_seconds
    while time.monotonic() < deadline:
        job.refresh()
        if job.is_finished:
            return job.return_value()
        if job.is_failed:
            raise RuntimeError(f"Job {job.id} failed")
        time.sleep(0.5)
    raise TimeoutError(f"Job {job.id} did not finish within {timeout_seconds}s")


task_queue = TaskQueue()
