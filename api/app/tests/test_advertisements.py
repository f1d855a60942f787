from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from app.core.config import settings
from app.models.advertisement import AdvertisementRequest
from app.services import advertisement_service
from app.tests.utils import ADMIN_HEADERS


def _request(**overrides) -> dict:
    payload = {"email": "brand@example.com", "description": "Pre-roll for launch week", "budget": 25000}
    payload.update(overrides)
    return payload


@pytest.mark.asyncio
async def test_create_request_records_client_ip(client):
    response = await client.post("/api/advertisement-requests", json=_request())
    assert response.status_code == 201
    body = response.json()
    assert body["budget"] == 25000
    assert body["user_ip"] == "127.0.0.1"


@pytest.mark.asyncio
@pytest.mark.parametrize("budget", [4999, 100_000_001])
async def test_budget_must_be_within_bounds(client, budget):
    response = await client.post("/api/advertisement-requests", json=_request(budget=budget))
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_one_request_per_ip_per_cooldown(client):
    assert (await client.post("/api/advertisement-requests", json=_request())).status_code == 201
    response = await client.post("/api/advertisement-requests", json=_request(email="other@example.com"))
    assert response.status_code == 429

    recent = await client.post("/api/advertisement-requests/recent", json={})
    assert recent.json() == {"has_recent_request": True}

    forwarded = await client.post(
        "/api/advertisement-requests", json=_request(), headers={"X-Forwarded-For": "203.0.113.9"}
    )
    assert forwarded.status_code == 201


@pytest.mark.asyncio
async def test_requests_older_than_cooldown_do_not_block(session):
    old = AdvertisementRequest(
        email="brand@example.com",
        description="Last year",
        budget=10000,
        user_ip="198.51.100.1",
        created_at=datetime.now(timezone.utc) - timedelta(minutes=settings.ad_request_cooldown_minutes + 5),
    )
    session.add(old)
    await session.commit()

    since = datetime.now(timezone.utc) - timedelta(minutes=settings.ad_request_cooldown_minutes)
    assert await advertisement_service.has_recent_request(session, "198.51.100.1", since) is False


@pytest.mark.asyncio
async def test_admin_lists_newest_first_and_deletes(client):
    await client.post("/api/advertisement-requests", json=_request(), headers={"X-Forwarded-For": "203.0.113.1"})
    await client.post(
        "/api/advertisement-requests", json=_request(email="late@example.com"), headers={"X-Forwarded-For": "203.0.113.2"}
    )

    assert (await client.get("/api/advertisement-requests")).status_code == 403
    listing = await client.get("/api/advertisement-requests", headers=ADMIN_HEADERS)
    assert [item["email"] for item in listing.json()] == ["late@example.com", "brand@example.com"]

    request_id = listing.json()[0]["id"]
    response = await client.delete(f"/api/advertisement-requests/{request_id}", headers=ADMIN_HEADERS)
    assert response.status_code == 204
    listing = await client.get("/api/advertisement-requests", headers=ADMIN_HEADERS)
    assert len(listing.json()) == 1
