"""FastAPI application entrypoint and health reporting.

Invariants:
- Health detail is only exposed to callers presenting the admin token.
"""

import logging
import secrets
from typing import Any

from fastapi import FastAPI, Header
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from app.api.router import api_router
from app.core.config import settings
from app.db.session import async_session
from app.jobs.schedule_registry import ensure_schedules
from app.services.task_queue import task_queue
from app.utils.redaction import redact_secrets

logger = logging.getLogger("app.main")

app = FastAPI(title=settings.app_name)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.include_router(api_router, prefix=settings.api_prefix)


@app.on_event("startup")
async def _register_schedules() -> None:
    """Register scheduled jobs on startup."""
    ensure_schedules()


async def _database_ok() -> bool:
    try:
        async with async_session() as session:
            await session.execute(text("SELECT 1"))
    except SQLAlchemyError as exc:
        logger.warning("Database health check failed: %s", redact_secrets(str(exc)))
        return False
    return True


def _can_view_health_detail(admin_token: str | None) -> bool:
    expected = settings.admin_api_token
    return bool(expected and admin_token and secrets.compare_digest(admin_token, expected))


@app.get("/health", tags=["internal"])
@app.get(f"{settings.api_prefix}/health", tags=["internal"])
async def health(x_admin_token: str | None = Header(default=None, alias="X-Admin-Token")) -> dict[str, Any]:
    """Return health status and, for admins, database and queue detail."""
    if not _can_view_health_detail(x_admin_token):
        return {"status": "ok"}

    database_ok = await _database_ok()
    queue = task_queue.snapshot()
    status = "ok" if database_ok else "degraded"
    return {
        "status": status,
        "database": "ok" if database_ok else "unreachable",
        "queue": {"status": queue["status"], "warnings": queue.get("warnings", [])},
    }
