from __future__ import annotations

import pytest

from app.tests.utils import ADMIN_HEADERS


@pytest.mark.asyncio
async def test_health_reports_ok_without_token(client):
    response = await client.get("/api/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


@pytest.mark.asyncio
async def test_health_detail_for_admins(client):
    response = await client.get("/health", headers=ADMIN_HEADERS)
    assert response.status_code == 200
    payload = response.json()
    assert payload["status"] == "ok"
    assert payload["database"] == "ok"
    assert payload["queue"]["status"] == "offline"


@pytest.mark.asyncio
async def test_health_degrades_when_database_is_down(client, monkeypatch):
    async def _database_down() -> bool:
        return False

    monkeypatch.setattr("app.main._database_ok", _database_down)

    response = await client.get("/api/health", headers=ADMIN_HEADERS)
    payload = response.json()
    assert payload["status"] == "degraded"
    assert payload["database"] == "unreachable"
