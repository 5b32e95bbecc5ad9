# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""Exception classes for the library reservation engine.

This module defines the exception hierarchy used throughout the library.
All exceptions inherit from ReservationError, making it easy to catch
all reservation-related exceptions with a single except clause.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .types.reservation import Reservation, ReservationStatus


class ReservationError(Exception):
    """Base exception for all reservation engine errors.

    Example:
        try:
            await coordinator.reserve(user, book, count, now)
        except ReservationError as e:
            logger.error(f"Reservation failed: {e}")
    """

    pass


class UnknownClassificationError(ReservationError):
    """Raised when no policy is registered for a user classification.

    An unrecognized classification indicates a data or configuration defect
    upstream, so it is never silently mapped to a default policy.

    Attributes:
        classification: The classification that had no registered policy.
    """

    def __init__(self, classification: str):
        super().__init__(f"No policy found for user type: {classification}")
        self.classification = classification


class BookUnavailableError(ReservationError):
    """Raised when a reservation is attempted on a book with no free copies.

    Attributes:
        book_id: The identifier of the book that has no available copies.
    """

    def __init__(self, book_id: str):
        super().__init__(f"Book {book_id} has no available copies")
        self.book_id = book_id


class ReservationLimitExceededError(ReservationError):
    """Raised when a user already holds the maximum number of reservations.

    Attributes:
        max_reservations: The policy limit that was reached, for user-facing
            messages such as "You can only reserve up to 3 books".
        classification: The user classification whose policy applied.
        current_count: The active reservation count the decision was made on.

    Example:
        try:
            await coordinator.reserve(user, book, count, now)
        except ReservationLimitExceededError as e:
            show_alert(f"You can only reserve up to {e.max_reservations} books.")
    """

    def __init__(
        self,
        max_reservations: int,
        classification: str | None = None,
        current_count: int | None = None,
    ):
        message = f"You can only reserve up to {max_reservations} books"
        if current_count is not None:
            message = f"{message} ({current_count} active)"
        super().__init__(message)
        self.max_reservations = max_reservations
        self.classification = classification
        self.current_count = current_count


class InvalidStateTransitionError(ReservationError):
    """Raised when a reservation cannot move to the requested status.

    Only active reservations can be cancelled; completed and cancelled
    reservations are immutable.

    Attributes:
        reservation_id: The reservation that was targeted.
        current_status: The status the reservation is in.
        target_status: The status that was requested.
    """

    def __init__(
        self,
        reservation_id: str,
        current_status: ReservationStatus,
        target_status: ReservationStatus,
    ):
        super().__init__(
            f"Cannot move reservation {reservation_id} from "
            f"{current_status.value} to {target_status.value}"
        )
        self.reservation_id = reservation_id
        self.current_status = current_status
        self.target_status = target_status


class BookNotFoundError(ReservationError):
    """Raised when a book id does not exist in the data store."""

    def __init__(self, book_id: str):
        super().__init__(f"Book not found: {book_id}")
        self.book_id = book_id


class ReservationNotFoundError(ReservationError):
    """Raised when a reservation id does not exist in the data store."""

    def __init__(self, reservation_id: str):
        super().__init__(f"Reservation not found: {reservation_id}")
        self.reservation_id = reservation_id


class StoreFailureError(ReservationError):
    """Raised when a data store call fails or returns malformed data.

    Attributes:
        operation: Name of the store operation that failed
            (e.g. "create_reservation").
        committed: True when an earlier state-changing step of the same
            workflow had already succeeded before this failure. A committed
            failure means the store holds a partial result.

    Example:
        try:
            await coordinator.reserve(user, book, count, now)
        except AvailabilityUpdateError as e:
            # The reservation exists; only the copy count is stale
            notify_user_reserved(e.reservation)
        except StoreFailureError:
            show_alert("Failed to reserve the book. Please try again.")
    """

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        committed: bool = False,
    ):
        super().__init__(message)
        self.operation = operation
        self.committed = committed


class StoreConnectionError(StoreFailureError):
    """Raised when the data store cannot be reached at all.

    This is typically a transient transport issue (DNS, refused connection,
    timeout) rather than a rejected operation.
    """

    pass


class AvailabilityUpdateError(StoreFailureError):
    """Raised when a reservation was created but the copy count update failed.

    The reservation record exists in the store and is returned on the
    exception; the book's available copy count is stale until corrected.

    Attributes:
        reservation: The reservation that was successfully created.
        book_id: The book whose available copy count could not be updated.
        expected_copies: The copy count the update tried to write.
    """

    def __init__(
        self,
        reservation: Reservation,
        book_id: str,
        expected_copies: int,
        reason: str | None = None,
    ):
        message = (
            f"Reservation {reservation.id} was created but availability of "
            f"book {book_id} could not be set to {expected_copies}"
        )
        if reason:
            message = f"{message}: {reason}"
        super().__init__(
            message,
            operation="update_book_availability",
            committed=True,
        )
        self.reservation = reservation
        self.book_id = book_id
        self.expected_copies = expected_copies


class ConfigurationError(ReservationError):
    """Raised when engine configuration is invalid or incomplete.

    Raised, for example, when a GraphQLStore is created without an endpoint
    URL and LIBRARY_GRAPHQL_URL is not set.
    """

    pass


__all__ = [
    "AvailabilityUpdateError",
    "BookNotFoundError",
    "BookUnavailableError",
    "ConfigurationError",
    "InvalidStateTransitionError",
    "ReservationError",
    "ReservationLimitExceededError",
    "ReservationNotFoundError",
    "StoreConnectionError",
    "StoreFailureError",
    "UnknownClassificationError",
]
