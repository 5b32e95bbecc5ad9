# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Base Store for the Library Reservation Engine

This module provides the BaseStore abstract class that defines the interface
to the data store collaborator: the system of record for users, books,
reservations and reservation policies.

Contract for implementations:
- Failed or malformed calls raise StoreFailureError (or a subclass);
  StoreConnectionError when the store could not be reached at all.
- Lookups of missing records return None rather than raising.
- Retries, timeouts and transactions are the implementation's concern.
"""

import abc
import logging
from dataclasses import dataclass
from datetime import datetime
from types import TracebackType
from typing import Any

from ..types.book import Book
from ..types.policy import ReservationPolicy
from ..types.reservation import Reservation, ReservationStatus
from ..types.user import User

logger = logging.getLogger(__name__)


@dataclass
class HealthCheckResult:
    """
    Structured health check result for store monitoring.

    Attributes:
        healthy: Whether the store is operational
        store_type: Type of store (e.g., 'graphql', 'memory')
        error: Error message if unhealthy
        metadata: Additional store-specific information
    """

    healthy: bool
    store_type: str
    error: str | None = None
    metadata: dict[str, Any] | None = None


class BaseStore(abc.ABC):
    """
    An abstract base class for data store collaborators.

    The reservation coordinator only talks to the store through this
    interface, so a GraphQL endpoint, an in-memory dictionary, or any other
    system of record can be used interchangeably.
    """

    store_type: str = "base"

    # ==========================================================================
    # Books
    # ==========================================================================

    @abc.abstractmethod
    async def get_book(self, book_id: str) -> Book | None:
        """
        Fetch a book by id.

        Returns:
            The Book, or None if no book has that id
        """
        pass

    @abc.abstractmethod
    async def list_books(
        self,
        search: str | None = None,
        available_only: bool = False,
    ) -> list[Book]:
        """
        List books ordered by title.

        Args:
            search: Optional case-insensitive substring of title or author
            available_only: Only return books with at least one free copy
        """
        pass

    @abc.abstractmethod
    async def update_book_availability(
        self, book_id: str, available_copies: int
    ) -> Book:
        """
        Set a book's available copy count.

        Returns:
            The updated Book
        """
        pass

    # ==========================================================================
    # Users and Policies
    # ==========================================================================

    @abc.abstractmethod
    async def get_user(self, user_id: str) -> User | None:
        pass

    @abc.abstractmethod
    async def get_reservation_policies(self) -> dict[str, ReservationPolicy]:
        """
        Fetch the active reservation policies.

        Returns:
            Mapping of classification to its active policy
        """
        pass

    # ==========================================================================
    # Reservations
    # ==========================================================================

    @abc.abstractmethod
    async def get_reservation(self, reservation_id: str) -> Reservation | None:
        pass

    @abc.abstractmethod
    async def list_reservations(
        self,
        user_id: str,
        status: ReservationStatus | None = None,
    ) -> list[Reservation]:
        """
        List a user's reservations, most recent expiry first.

        Args:
            user_id: Owning user
            status: Optional status filter; None returns every status
        """
        pass

    async def count_active_reservations(self, user_id: str) -> int:
        """
        Count a user's active reservations.

        Implementations with a cheaper aggregate query should override this.
        """
        active = await self.list_reservations(user_id, ReservationStatus.ACTIVE)
        return len(active)

    @abc.abstractmethod
    async def create_reservation(
        self, user_id: str, book_id: str, expires_at: datetime
    ) -> Reservation:
        """
        Create a reservation in ``active`` status.

        Returns:
            The created Reservation as recorded by the store

        Raises:
            StoreFailureError: With committed=True when the row was written
                but could not be returned
        """
        pass

    @abc.abstractmethod
    async def update_reservation_status(
        self, reservation_id: str, status: ReservationStatus
    ) -> Reservation:
        """
        Set a reservation's status.

        Returns:
            The updated Reservation
        """
        pass

    # ==========================================================================
    # Lifecycle
    # ==========================================================================

    async def health_check(self) -> HealthCheckResult:
        return HealthCheckResult(healthy=True, store_type=self.store_type)

    async def close(self) -> None:
        """Release any resources held by the store."""
        pass

    async def __aenter__(self) -> "BaseStore":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.close()
