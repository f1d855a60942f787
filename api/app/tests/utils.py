"""Shared helpers for API and service tests."""

from __future__ import annotations

import uuid
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace
from typing import Any

from app.services.slot_manager import SlotHolder
from app.utils.datetime import utc_today

ADMIN_TOKEN = "test-admin-token"
ADMIN_HEADERS = {"X-Admin-Token": ADMIN_TOKEN}

_EPOCH = datetime(2026, 1, 1, tzinfo=timezone.utc)


def announcement_payload(content_order: int, **overrides: Any) -> dict[str, Any]:
    """A complete announcement form submission releasing next month."""
    payload: dict[str, Any] = {
        "title": f"Coming soon #{content_order}",
        "content_type": "Movie",
        "release_date": (utc_today() + timedelta(days=30)).isoformat(),
        "description": "A new release.",
        "thumbnail_url": "https://cdn.example.com/thumb.jpg",
        "trailer_url": "https://cdn.example.com/trailer.mp4",
        "genre": ["Drama"],
        "cast_members": ["Lead Actor"],
        "directors": ["Director"],
        "writers": ["Writer"],
        "rating_type": "PG-13",
        "content_order": content_order,
    }
    payload.update(overrides)
    return payload


class InMemoryAnnouncementStore:
    """Announcement store backed by a dict.

    Every write checks that no other row already holds the slot, so a test
    fails if shifts are applied in an order that would collide. The row being
    updated (the ``exclude_id`` of the last ``list_live`` call) is ignored by
    that check because it is about to be rewritten.
    """

    def __init__(self) -> None:
        self.rows: dict[uuid.UUID, dict[str, Any]] = {}
        self.order_writes: list[tuple[uuid.UUID, int]] = []
        self._rewriting: uuid.UUID | None = None
        self._clock = 0

    def seed(self, content_order: int, *, created_at: datetime | None = None) -> uuid.UUID:
        announcement_id = uuid.uuid4()
        self.rows[announcement_id] = {
            "id": announcement_id,
            "title": f"Seeded #{content_order}",
            "content_order": content_order,
            "created_at": created_at or self._tick(),
        }
        return announcement_id

    def _tick(self) -> datetime:
        self._clock += 1
        return _EPOCH + timedelta(seconds=self._clock)

    def order_of(self, announcement_id: uuid.UUID) -> int:
        return self.rows[announcement_id]["content_order"]

    def orders(self) -> list[int]:
        return sorted(row["content_order"] for row in self.rows.values())

    def _assert_free(self, content_order: int, moving: uuid.UUID) -> None:
        for row_id, row in self.rows.items():
            if row_id in (moving, self._rewriting):
                continue
            assert row["content_order"] != content_order, f"slot {content_order} already taken"

    async def list_live(self, exclude_id: uuid.UUID | None = None) -> list[SlotHolder]:
        self._rewriting = exclude_id
        holders = [
            SlotHolder(id=row["id"], content_order=row["content_order"], created_at=row["created_at"])
            for row in self.rows.values()
            if row["id"] != exclude_id
        ]
        return sorted(holders, key=lambda holder: (holder.content_order, holder.created_at))

    async def update_order(self, announcement_id: uuid.UUID, new_order: int) -> None:
        self._assert_free(new_order, announcement_id)
        self.rows[announcement_id]["content_order"] = new_order
        self.order_writes.append((announcement_id, new_order))

    async def count_live(self) -> int:
        return len(self.rows)

    async def exists(self, announcement_id: uuid.UUID) -> bool:
        return announcement_id in self.rows

    async def insert(self, values: dict[str, Any]) -> SimpleNamespace:
        announcement_id = uuid.uuid4()
        self._assert_free(values["content_order"], announcement_id)
        self.rows[announcement_id] = {**values, "id": announcement_id, "created_at": self._tick()}
        return SimpleNamespace(**self.rows[announcement_id])

    async def update(self, announcement_id: uuid.UUID, values: dict[str, Any]) -> SimpleNamespace:
        self._assert_free(values["content_order"], announcement_id)
        self.rows[announcement_id].update(values)
        self._rewriting = None
        return SimpleNamespace(**self.rows[announcement_id])

    async def delete(self, announcement_id: uuid.UUID) -> None:
        self.rows.pop(announcement_id)

