"""Shared fixtures for the reservation engine tests."""

from datetime import datetime, timedelta, timezone

import pytest
from prometheus_client import CollectorRegistry

from library_reservations.lifecycle import ReservationCoordinator
from library_reservations.observability import ReservationMetrics
from library_reservations.policy import create_default_registry
from library_reservations.stores import MemoryStore
from library_reservations.types import (
    NORMAL,
    STUDENT,
    Book,
    Reservation,
    ReservationStatus,
    User,
)

NOW = datetime(2024, 1, 20, tzinfo=timezone.utc)


def _make_reservations(
    user_id, count, status=ReservationStatus.ACTIVE, book_id="book-seed"
):
    return [
        Reservation(
            id=f"{user_id}-{status.value}-{i}",
            user_id=user_id,
            book_id=book_id,
            expires_at=NOW + timedelta(days=7),
            status=status,
            created_at=NOW,
        )
        for i in range(count)
    ]


@pytest.fixture
def make_reservations():
    """Factory for reservations of one user, expiring a week after NOW."""
    return _make_reservations


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def student():
    return User(id="user-student", email="sam@example.com", name="Sam", classification=STUDENT)


@pytest.fixture
def normal_user():
    return User(id="user-normal", email="nora@example.com", name="Nora", classification=NORMAL)


@pytest.fixture
def book():
    return Book(
        id="book-1",
        title="Dune",
        author="Frank Herbert",
        total_copies=3,
        available_copies=3,
        isbn="9780441013593",
    )


@pytest.fixture
def unavailable_book():
    return Book(
        id="book-2",
        title="Neuromancer",
        author="William Gibson",
        total_copies=1,
        available_copies=0,
    )


@pytest.fixture
def store(book, unavailable_book, student, normal_user):
    return MemoryStore(
        books=[
            book,
            unavailable_book,
            Book(id="book-seed", title="Seed", author="Anon", total_copies=10, available_copies=10),
        ],
        users=[student, normal_user],
        clock=lambda: NOW,
    )


@pytest.fixture
def registry():
    return create_default_registry()


@pytest.fixture
def metrics():
    return ReservationMetrics(registry=CollectorRegistry())


@pytest.fixture
def coordinator(store, registry, metrics):
    return ReservationCoordinator(
        store=store, registry=registry, metrics=metrics, clock=lambda: NOW
    )
