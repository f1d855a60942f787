from __future__ import annotations

import uuid
from datetime import datetime, timezone

import pytest

from app.services.slot_manager import SlotConflictError, SlotHolder, plan_reservation, reserve_slot
from app.tests.utils import InMemoryAnnouncementStore


def _store_with(*orders: int) -> tuple[InMemoryAnnouncementStore, dict[int, uuid.UUID]]:
    store = InMemoryAnnouncementStore()
    ids = {order: store.seed(order) for order in orders}
    return store, ids


@pytest.mark.asyncio
async def test_free_slot_is_a_no_op():
    store, _ = _store_with(1, 3)
    moves = await reserve_slot(store, 2)
    assert moves == []
    assert store.order_writes == []


@pytest.mark.asyncio
async def test_shift_up_moves_everything_at_or_above_target():
    store, ids = _store_with(1, 2, 3)

    await reserve_slot(store, 2)

    assert store.order_of(ids[1]) == 1
    assert store.order_of(ids[2]) == 3
    assert store.order_of(ids[3]) == 4
    # Highest first so no two rows ever share a slot.
    assert store.order_writes == [(ids[3], 4), (ids[2], 3)]


@pytest.mark.asyncio
async def test_shift_up_keeps_gaps_above_the_target():
    store, ids = _store_with(1, 2, 5)
    await reserve_slot(store, 2)
    assert store.orders() == [1, 3, 6]
    assert store.order_of(ids[5]) == 6


@pytest.mark.asyncio
async def test_shift_down_compacts_below_target_when_slot_twenty_is_taken():
    orders = [order for order in range(1, 21) if order != 7]
    store, ids = _store_with(*orders)

    await reserve_slot(store, 10)

    assert store.order_of(ids[8]) == 7
    assert store.order_of(ids[9]) == 8
    assert store.order_of(ids[10]) == 9
    assert store.order_of(ids[11]) == 11
    assert 10 not in store.orders()
    assert store.order_writes == [(ids[8], 7), (ids[9], 8), (ids[10], 9)]


@pytest.mark.asyncio
async def test_shift_down_into_adjacent_gap_moves_only_the_conflict():
    orders = [order for order in range(1, 21) if order != 4]
    store, ids = _store_with(*orders)

    await reserve_slot(store, 5)

    assert store.order_writes == [(ids[5], 4)]


@pytest.mark.asyncio
async def test_shift_down_without_gap_below_target_fails_before_writing():
    orders = [order for order in range(1, 21) if order != 10]
    store, _ = _store_with(*orders)

    with pytest.raises(SlotConflictError, match="no available positions"):
        await reserve_slot(store, 5)
    assert store.order_writes == []


@pytest.mark.asyncio
async def test_full_board_cannot_free_a_slot():
    store, _ = _store_with(*range(1, 21))
    with pytest.raises(SlotConflictError):
        await reserve_slot(store, 20)
    assert store.order_writes == []


@pytest.mark.asyncio
async def test_excluded_announcement_does_not_count_as_a_conflict():
    store, ids = _store_with(1, 2, 3)

    moves = await reserve_slot(store, 3, exclude_id=ids[3])

    assert moves == []
    assert store.orders() == [1, 2, 3]


@pytest.mark.asyncio
async def test_moving_an_announcement_up_the_board():
    store, ids = _store_with(1, 2, 3)

    await reserve_slot(store, 1, exclude_id=ids[3])

    assert store.order_of(ids[1]) == 2
    assert store.order_of(ids[2]) == 3


def test_shift_up_that_would_pass_the_last_slot_fails_without_a_plan():
    created = datetime(2026, 1, 1, tzinfo=timezone.utc)
    holders = [
        SlotHolder(id=uuid.uuid4(), content_order=19, created_at=created),
        SlotHolder(id=uuid.uuid4(), content_order=19, created_at=created.replace(hour=1)),
    ]
    with pytest.raises(SlotConflictError):
        plan_reservation(holders, 19, max_slots=20)


def test_duplicate_slots_are_spread_out_oldest_first():
    created = datetime(2026, 1, 1, tzinfo=timezone.utc)
    older = SlotHolder(id=uuid.uuid4(), content_order=2, created_at=created)
    newer = SlotHolder(id=uuid.uuid4(), content_order=2, created_at=created.replace(hour=5))

    moves = plan_reservation([newer, older], 2, max_slots=20)

    assert [(move.id, move.to_order) for move in moves] == [(newer.id, 4), (older.id, 3)]


@pytest.mark.asyncio
async def test_slots_stay_unique_across_a_sequence_of_reservations():
    store = InMemoryAnnouncementStore()
    for target in [1, 1, 2, 5, 1, 3, 3]:
        await reserve_slot(store, target)
        await store.insert({"content_order": target})
        orders = store.orders()
        assert len(orders) == len(set(orders))
        assert all(1 <= order <= 20 for order in orders)
