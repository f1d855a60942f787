"""Slot reservation for the bounded upcoming-announcement list.

Invariants:
- Live announcements hold unique ``content_order`` values in ``[1, max_slots]``.
- Shifts are planned and validated before the first write; a request that
  cannot be satisfied fails without touching the store.
- Writes are issued one at a time in an order that never leaves two live rows
  on the same slot: highest-first when shifting up, lowest-first when shifting
  down.

Implementation notes:
- The store is injected so the same algorithm runs against the database or an
  in-memory fake.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Protocol

from app.core.config import settings

logger = logging.getLogger("app.services.slot_manager")


class UpcomingContentError(RuntimeError):
    """Base error for announcement operations; the message is shown to the admin."""


class AnnouncementValidationError(UpcomingContentError):
    """Submission is missing a field or has a release date outside the window."""


class CapacityExceededError(UpcomingContentError):
    """All announcement slots are already taken."""


class SlotConflictError(UpcomingContentError):
    """The requested slot cannot be freed by shifting other announcements."""


class AnnouncementPersistenceError(UpcomingContentError):
    """The backing store failed part way through an operation."""


@dataclass(frozen=True, slots=True)
class SlotHolder:
    """The parts of a live announcement the slot manager needs."""
    id: uuid.UUID
    content_order: int
    created_at: datetime


@dataclass(frozen=True, slots=True)
class SlotMove:
    id: uuid.UUID
    from_order: int
    to_order: int


class AnnouncementStore(Protocol):
    """Persistence operations the slot manager and CRUD wrappers rely on."""

    async def list_live(self, exclude_id: uuid.UUID | None = None) -> list[SlotHolder]: ...

    async def update_order(self, announcement_id: uuid.UUID, new_order: int) -> None: ...

    async def count_live(self) -> int: ...

    async def exists(self, announcement_id: uuid.UUID) -> bool: ...

    async def insert(self, values: dict[str, Any]) -> Any: ...

    async def update(self, announcement_id: uuid.UUID, values: dict[str, Any]) -> Any: ...

    async def delete(self, announcement_id: uuid.UUID) -> None: ...


def _priority(holder: SlotHolder) -> tuple[int, datetime]:
    return (holder.content_order, holder.created_at)


def plan_shift_up(holders: list[SlotHolder], target_order: int, max_slots: int) -> list[SlotMove]:
    """Move every holder at or above ``target_order`` one slot up.

    Holders are walked lowest-first (older first on ties) and each lands on
    the slot after the previous one if that is higher than ``order + 1``, so a
    stray duplicate is spread out instead of carried along. The returned moves
    are ordered highest-first, ready to be written.
    """
    moves: list[SlotMove] = []
    previous = 0
    for holder in sorted((h for h in holders if h.content_order >= target_order), key=_priority):
        new_order = max(holder.content_order, previous) + 1
        if new_order > max_slots:
            raise SlotConflictError(
                f"Cannot resolve content order conflict - slot {holder.content_order} cannot move past {max_slots}"
            )
        moves.append(SlotMove(holder.id, holder.content_order, new_order))
        previous = new_order
    moves.reverse()
    return moves


def plan_shift_down(holders: list[SlotHolder], target_order: int, conflicting: SlotHolder) -> list[SlotMove]:
    """Compact the slots below ``target_order`` to free it.

    The lowest unused slot below the target is filled by shifting the holders
    between it and the target down by one; the holder at the target then
    moves to ``target_order - 1``. Moves are ordered lowest-first.
    """
    used = {holder.content_order for holder in holders}
    available = 1
    while available in used and available < target_order:
        available += 1
    if available >= target_order:
        raise SlotConflictError("Cannot resolve content order conflict - no available positions")

    moves = [
        SlotMove(holder.id, holder.content_order, holder.content_order - 1)
        for holder in sorted(holders, key=_priority)
        if available <= holder.content_order < target_order
    ]
    moves.append(SlotMove(conflicting.id, conflicting.content_order, target_order - 1))
    return moves


def plan_reservation(
    holders: list[SlotHolder], target_order: int, *, max_slots: int | None = None
) -> list[SlotMove]:
    """Return the moves that free ``target_order``; empty when it is already free."""
    max_slots = max_slots or settings.upcoming_max_slots
    conflicts = sorted((h for h in holders if h.content_order == target_order), key=_priority)
    if not conflicts:
        return []
    max_order = max(holder.content_order for holder in holders)
    if max_order < max_slots:
        return plan_shift_up(holders, target_order, max_slots)
    return plan_shift_down(holders, target_order, conflicts[0])


async def reserve_slot(
    store: AnnouncementStore,
    target_order: int,
    exclude_id: uuid.UUID | None = None,
    *,
    max_slots: int | None = None,
) -> list[SlotMove]:
    """Free ``target_order`` for the caller by shifting other announcements.

    ``exclude_id`` is the announcement being updated; it is ignored when
    looking for conflicts. Returns the moves that were applied.
    """
    holders = await store.list_live(exclude_id)
    moves = plan_reservation(holders, target_order, max_slots=max_slots)
    for move in moves:
        await store.update_order(move.id, move.to_order)
    if moves:
        logger.info(
            "Reserved slot %d by moving %s",
            target_order,
            ", ".join(f"{move.from_order}->{move.to_order}" for move in moves),
        )
    return moves
