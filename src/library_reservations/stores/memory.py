# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
MemoryStore for the Library Reservation Engine

This module provides an in-memory store implementation that doesn't require
a remote GraphQL endpoint. Perfect for testing, development, and
single-process applications.
"""

import asyncio
import logging
import uuid
from collections.abc import Callable, Iterable
from datetime import datetime, timezone

from ..exceptions import StoreFailureError
from ..types.book import Book
from ..types.policy import ReservationPolicy
from ..types.reservation import Reservation, ReservationStatus
from ..types.user import User
from .base import BaseStore, HealthCheckResult

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class MemoryStore(BaseStore):
    """
    An in-memory data store.

    Key Features:
    - Pure in-memory dict-based storage
    - Async-safe operations using asyncio.Lock
    - Enforces 0 <= available_copies <= total_copies on updates
    - Injectable clock for deterministic ``created_at`` values

    Note:
        This store is NOT suitable for:
        - Multi-process applications
        - Data that must survive a restart
    """

    store_type = "memory"

    def __init__(
        self,
        books: Iterable[Book] = (),
        users: Iterable[User] = (),
        reservations: Iterable[Reservation] = (),
        policies: dict[str, ReservationPolicy] | None = None,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        """
        Initialize the in-memory store, optionally seeded with records.

        Args:
            books: Initial books
            users: Initial users
            reservations: Initial reservations
            policies: Initial classification -> policy rows (inactive ones
                are stored but not returned by get_reservation_policies)
            clock: Source of ``created_at`` for new reservations
        """
        self._books: dict[str, Book] = {book.id: book for book in books}
        self._users: dict[str, User] = {user.id: user for user in users}
        self._reservations: dict[str, Reservation] = {
            reservation.id: reservation for reservation in reservations
        }
        self._policies: dict[str, ReservationPolicy] = dict(policies or {})
        self._clock = clock
        self._lock = asyncio.Lock()

        logger.debug(
            "Initialized MemoryStore with %d books, %d users, %d reservations",
            len(self._books),
            len(self._users),
            len(self._reservations),
        )

    # ==========================================================================
    # Books
    # ==========================================================================

    async def get_book(self, book_id: str) -> Book | None:
        async with self._lock:
            return self._books.get(book_id)

    async def list_books(
        self,
        search: str | None = None,
        available_only: bool = False,
    ) -> list[Book]:
        needle = search.lower() if search else None
        async with self._lock:
            books = list(self._books.values())
        if needle:
            books = [
                book
                for book in books
                if needle in book.title.lower() or needle in book.author.lower()
            ]
        if available_only:
            books = [book for book in books if book.available]
        return sorted(books, key=lambda book: book.title)

    async def update_book_availability(
        self, book_id: str, available_copies: int
    ) -> Book:
        async with self._lock:
            book = self._books.get(book_id)
            if book is None:
                raise StoreFailureError(
                    f"Book not found: {book_id}",
                    operation="update_book_availability",
                )
            try:
                updated = book.with_available_copies(available_copies)
            except ValueError as e:
                raise StoreFailureError(
                    f"Rejected availability update for book {book_id}: {e}",
                    operation="update_book_availability",
                ) from e
            self._books[book_id] = updated
            return updated

    # ==========================================================================
    # Users and Policies
    # ==========================================================================

    async def get_user(self, user_id: str) -> User | None:
        async with self._lock:
            return self._users.get(user_id)

    async def get_reservation_policies(self) -> dict[str, ReservationPolicy]:
        async with self._lock:
            return {
                classification: policy
                for classification, policy in self._policies.items()
                if policy.active
            }

    # ==========================================================================
    # Reservations
    # ==========================================================================

    async def get_reservation(self, reservation_id: str) -> Reservation | None:
        async with self._lock:
            return self._reservations.get(reservation_id)

    async def list_reservations(
        self,
        user_id: str,
        status: ReservationStatus | None = None,
    ) -> list[Reservation]:
        async with self._lock:
            matches = [
                reservation
                for reservation in self._reservations.values()
                if reservation.user_id == user_id
                and (status is None or reservation.status is status)
            ]
        matches.sort(key=lambda reservation: reservation.expires_at, reverse=True)
        return matches

    async def create_reservation(
        self, user_id: str, book_id: str, expires_at: datetime
    ) -> Reservation:
        async with self._lock:
            if book_id not in self._books:
                raise StoreFailureError(
                    f"Book not found: {book_id}", operation="create_reservation"
                )
            reservation = Reservation(
                id=str(uuid.uuid4()),
                user_id=user_id,
                book_id=book_id,
                expires_at=expires_at,
                status=ReservationStatus.ACTIVE,
                created_at=self._clock(),
            )
            self._reservations[reservation.id] = reservation
            return reservation

    async def update_reservation_status(
        self, reservation_id: str, status: ReservationStatus
    ) -> Reservation:
        async with self._lock:
            reservation = self._reservations.get(reservation_id)
            if reservation is None:
                raise StoreFailureError(
                    f"Reservation not found: {reservation_id}",
                    operation="update_reservation_status",
                )
            updated = reservation.with_status(status)
            self._reservations[reservation_id] = updated
            return updated

    # ==========================================================================
    # Lifecycle
    # ==========================================================================

    async def health_check(self) -> HealthCheckResult:
        return HealthCheckResult(
            healthy=True,
            store_type=self.store_type,
            metadata={
                "books": len(self._books),
                "users": len(self._users),
                "reservations": len(self._reservations),
            },
        )
