from __future__ import annotations

from contextlib import asynccontextmanager
from datetime import date

import app.jobs.maintenance as maintenance


def test_purge_job_runs_service_with_its_own_session(monkeypatch):
    calls: list[tuple[object, date | None]] = []
    fake_session = object()

    @asynccontextmanager
    async def _session_factory():
        yield fake_session

    async def _purge_stub(session, today=None):
        calls.append((session, today))
        return 3

    monkeypatch.setattr(maintenance, "async_session", _session_factory)
    monkeypatch.setattr(maintenance.upcoming_service, "purge_expired_announcements", _purge_stub)

    assert maintenance.purge_expired_announcements_job("2026-10-19") == {"deleted": 3}
    assert calls == [(fake_session, date(2026, 10, 19))]


def test_purge_job_defaults_to_today(monkeypatch):
    seen: list[date | None] = []

    @asynccontextmanager
    async def _session_factory():
        yield object()

    async def _purge_stub(session, today=None):
        seen.append(today)
        return 0

    monkeypatch.setattr(maintenance, "async_session", _session_factory)
    monkeypatch.setattr(maintenance.upcoming_service, "purge_expired_announcements", _purge_stub)

    assert maintenance.purge_expired_announcements_job() == {"deleted": 0}
    assert seen == [None]
