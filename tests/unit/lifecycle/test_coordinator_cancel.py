"""Unit tests for ReservationCoordinator cancellation."""

from unittest.mock import AsyncMock

import pytest

from library_reservations.exceptions import (
    InvalidStateTransitionError,
    ReservationNotFoundError,
    StoreFailureError,
)
from library_reservations.lifecycle import ReservationCoordinator
from library_reservations.stores import BaseStore, MemoryStore
from library_reservations.types import ReservationStatus


@pytest.fixture
def seeded(make_reservations, book, student, registry, metrics):
    active = make_reservations(student.id, 1, book_id=book.id)
    completed = make_reservations(student.id, 1, ReservationStatus.COMPLETED, book_id=book.id)
    cancelled = make_reservations(student.id, 1, ReservationStatus.CANCELLED, book_id=book.id)
    store = MemoryStore(
        books=[book.with_available_copies(2)],
        users=[student],
        reservations=active + completed + cancelled,
    )
    coordinator = ReservationCoordinator(store=store, registry=registry, metrics=metrics)
    return coordinator, store, active[0], completed[0], cancelled[0]


class TestCancel:
    @pytest.mark.asyncio
    async def test_cancel_active(self, seeded, metrics):
        coordinator, store, active, _, _ = seeded
        updated = await coordinator.cancel(active.id, ReservationStatus.ACTIVE)

        assert updated.status is ReservationStatus.CANCELLED
        assert (await store.get_reservation(active.id)).status is ReservationStatus.CANCELLED
        assert metrics.get_metrics()["cancelled"] == {"total": 1}

    @pytest.mark.asyncio
    async def test_accepts_status_string(self, seeded):
        coordinator, _, active, _, _ = seeded
        updated = await coordinator.cancel(active.id, "active")
        assert updated.status is ReservationStatus.CANCELLED

    @pytest.mark.asyncio
    async def test_cancel_leaves_copies_unchanged(self, seeded, book):
        coordinator, store, active, _, _ = seeded
        await coordinator.cancel(active.id, ReservationStatus.ACTIVE)
        assert (await store.get_book(book.id)).available_copies == 2

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "status", [ReservationStatus.COMPLETED, ReservationStatus.CANCELLED]
    )
    async def test_terminal_status_rejected(self, status, registry):
        store = AsyncMock(spec=BaseStore)
        coordinator = ReservationCoordinator(store=store, registry=registry)

        with pytest.raises(InvalidStateTransitionError) as exc_info:
            await coordinator.cancel("res-1", status)

        assert exc_info.value.current_status is status
        assert exc_info.value.target_status is ReservationStatus.CANCELLED
        store.update_reservation_status.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_rejection_recorded(self, seeded, metrics):
        coordinator, _, _, completed, _ = seeded
        with pytest.raises(InvalidStateTransitionError):
            await coordinator.cancel(completed.id, completed.status)
        assert metrics.get_metrics()["rejected"] == {"invalid_transition": 1}

    @pytest.mark.asyncio
    async def test_unknown_status_string(self, seeded):
        coordinator, _, active, _, _ = seeded
        with pytest.raises(ValueError):
            await coordinator.cancel(active.id, "overdue")

    @pytest.mark.asyncio
    async def test_store_failure_propagates(self, registry, metrics):
        store = AsyncMock(spec=BaseStore)
        store.update_reservation_status.side_effect = StoreFailureError(
            "update failed", operation="update_reservation_status"
        )
        coordinator = ReservationCoordinator(store=store, registry=registry, metrics=metrics)

        with pytest.raises(StoreFailureError):
            await coordinator.cancel("res-1", ReservationStatus.ACTIVE)

        assert store.update_reservation_status.await_count == 1
        assert metrics.get_metrics()["store_failures"] == {
            "update_reservation_status:false": 1
        }
        assert "cancelled" not in metrics.get_metrics()


class TestCancelReservation:
    @pytest.mark.asyncio
    async def test_reads_status_from_store(self, seeded):
        coordinator, _, active, _, _ = seeded
        updated = await coordinator.cancel_reservation(active.id)
        assert updated.status is ReservationStatus.CANCELLED

    @pytest.mark.asyncio
    async def test_second_cancel_rejected(self, seeded):
        coordinator, _, active, _, _ = seeded
        await coordinator.cancel_reservation(active.id)
        with pytest.raises(InvalidStateTransitionError):
            await coordinator.cancel_reservation(active.id)

    @pytest.mark.asyncio
    async def test_completed_rejected(self, seeded):
        coordinator, _, _, completed, _ = seeded
        with pytest.raises(InvalidStateTransitionError):
            await coordinator.cancel_reservation(completed.id)

    @pytest.mark.asyncio
    async def test_missing_reservation(self, seeded):
        coordinator, _, _, _, _ = seeded
        with pytest.raises(ReservationNotFoundError) as exc_info:
            await coordinator.cancel_reservation("res-missing")
        assert exc_info.value.reservation_id == "res-missing"

    @pytest.mark.asyncio
    async def test_owner_mismatch_looks_missing(self, seeded, student):
        coordinator, store, active, _, _ = seeded
        with pytest.raises(ReservationNotFoundError):
            await coordinator.cancel_reservation(active.id, user_id="someone-else")
        assert (await store.get_reservation(active.id)).status is ReservationStatus.ACTIVE

        updated = await coordinator.cancel_reservation(active.id, user_id=student.id)
        assert updated.status is ReservationStatus.CANCELLED
