# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Reservation Lifecycle Coordinator

This module provides the ReservationCoordinator, the only component that
mutates reservation and book state. It enforces the user's policy on reserve,
keeps the book's available copy count in step with new reservations, and
guards cancellation against illegal status transitions.

Reserve workflow:
    1. Reject when the book has no available copies
    2. Reject when the user's active count has reached the policy maximum
    3. Compute the expiry instant from the user's loan duration
    4. Create the reservation in the store
    5. Decrement the book's available copies (only after 4 succeeded)

Steps 4 and 5 are independent store calls. If 5 fails, the reservation still
exists and AvailabilityUpdateError (a committed StoreFailureError carrying
the reservation) is raised so the caller knows the reservation succeeded.
If the store reports that 4 was written but its result could not be read
back (a committed StoreFailureError), 5 still runs and that error is raised.
"""

import logging
from collections.abc import Callable
from datetime import datetime, timezone
from types import TracebackType
from typing import Any

from ..admission.base import AdmissionGuard
from ..admission.memory import MemoryAdmissionGuard
from ..config import AdmissionMode, ReservationEngineConfig
from ..exceptions import (
    AvailabilityUpdateError,
    BookNotFoundError,
    BookUnavailableError,
    InvalidStateTransitionError,
    ReservationLimitExceededError,
    ReservationNotFoundError,
    StoreFailureError,
    UnknownClassificationError,
)
from ..observability.collector import ReservationMetrics, get_metrics_collector
from ..observability.constants import (
    REASON_BOOK_UNAVAILABLE,
    REASON_INVALID_TRANSITION,
    REASON_LIMIT_EXCEEDED,
    REASON_UNKNOWN_CLASSIFICATION,
)
from ..policy.eligibility import EligibilityEvaluator
from ..policy.expiration import ExpirationCalculator
from ..policy.registry import PolicyRegistry, create_default_registry
from ..stores.base import BaseStore
from ..stores.graphql import GraphQLStore
from ..stores.memory import MemoryStore
from ..types.book import Book
from ..types.policy import ReservationPolicy
from ..types.reservation import Reservation, ReservationStatus
from ..types.user import User
from .summary import ReservationSummary

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ReservationCoordinator:
    """
    Orchestrates reserve and cancel against the data store.

    The coordinator owns its PolicyRegistry instance; there is no global
    registry. It holds no other state between calls and never retries a
    failed store call.

    Example:
        >>> coordinator = ReservationCoordinator(store=MemoryStore(books=[book]))
        >>> reservation = await coordinator.reserve(user, book, 0, now)
    """

    def __init__(
        self,
        store: BaseStore,
        registry: PolicyRegistry | None = None,
        admission_guard: AdmissionGuard | None = None,
        metrics: ReservationMetrics | None = None,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        """
        Initialize the coordinator.

        Args:
            store: Data store collaborator
            registry: Policy registry; defaults to create_default_registry()
            admission_guard: Optional per-user guard. When set, reserve holds
                the user's lock and re-counts active reservations from the
                store before admitting.
            metrics: Optional metrics collector
            clock: Source of "now" for the convenience methods that do not
                take an explicit instant
        """
        self._store = store
        self._registry = registry if registry is not None else create_default_registry()
        self._evaluator = EligibilityEvaluator(self._registry)
        self._expiration = ExpirationCalculator(self._registry)
        self._guard = admission_guard
        self._metrics = metrics
        self._clock = clock

    @property
    def store(self) -> BaseStore:
        return self._store

    @property
    def registry(self) -> PolicyRegistry:
        return self._registry

    @property
    def admission_guard(self) -> AdmissionGuard | None:
        return self._guard

    # ==========================================================================
    # Policy Facade
    # ==========================================================================

    def register_policy(self, classification: str, policy: ReservationPolicy) -> None:
        self._registry.register(classification, policy)

    def can_reserve(self, user: User, current_active_count: int) -> bool:
        return self._evaluator.can_reserve(user, current_active_count)

    def max_reservations(self, classification: str) -> int:
        return self._evaluator.max_reservations(classification)

    def loan_duration_days(self, classification: str) -> int:
        return self._evaluator.loan_duration_days(classification)

    def compute_expiry(self, classification: str, now: datetime) -> datetime:
        return self._expiration.compute_expiry(classification, now)

    async def refresh_policies(self) -> int:
        """
        Register the store's active policies over the current ones.

        Classifications the store does not mention keep their current policy.

        Returns:
            Number of policies registered
        """
        policies = await self._store.get_reservation_policies()
        loaded = self._registry.load(policies)
        logger.info("Loaded %d reservation policies from the store", loaded)
        return loaded

    # ==========================================================================
    # Reserve
    # ==========================================================================

    async def reserve(
        self,
        user: User,
        book: Book,
        current_active_count: int,
        now: datetime,
    ) -> Reservation:
        """
        Reserve one copy of a book for a user.

        Args:
            user: The reserving user
            book: The target book with its current available copy count
            current_active_count: The user's active reservations, as read by
                the caller from the store
            now: Timezone-aware current instant

        Returns:
            The created reservation, in active status

        Raises:
            BookUnavailableError: The book has no available copies
            ReservationLimitExceededError: The user is at the policy maximum
            UnknownClassificationError: The user's classification has no policy
            StoreFailureError: A store call failed. committed is False when
                nothing was written and True when the insert was stored but
                could not be read back
            AvailabilityUpdateError: The reservation was created but the copy
                count could not be decremented
        """
        if book.available_copies <= 0:
            self._record_rejected(REASON_BOOK_UNAVAILABLE)
            logger.warning(
                "Reservation rejected: book %s has no available copies", book.id
            )
            raise BookUnavailableError(book.id)

        if self._guard is None:
            return await self._admit_and_create(user, book, current_active_count, now)

        try:
            async with self._guard.hold(user.id):
                stored_count = await self._store.count_active_reservations(user.id)
                count = max(current_active_count, stored_count)
                return await self._admit_and_create(user, book, count, now)
        except StoreFailureError as e:
            if e.operation in ("acquire_admission_lock", "count_active_reservations"):
                self._record_store_failure(e)
            raise

    async def _admit_and_create(
        self,
        user: User,
        book: Book,
        current_active_count: int,
        now: datetime,
    ) -> Reservation:
        try:
            eligible = self._evaluator.can_reserve(user, current_active_count)
        except UnknownClassificationError:
            self._record_rejected(REASON_UNKNOWN_CLASSIFICATION)
            raise

        if not eligible:
            max_reservations = self._evaluator.max_reservations(user.classification)
            self._record_rejected(REASON_LIMIT_EXCEEDED)
            logger.warning(
                "Reservation rejected: user %s has %d of %d reservations",
                user.id,
                current_active_count,
                max_reservations,
            )
            raise ReservationLimitExceededError(
                max_reservations,
                classification=user.classification,
                current_count=current_active_count,
            )

        expires_at = self._expiration.compute_expiry(user.classification, now)

        remaining = book.available_copies - 1
        try:
            reservation = await self._store.create_reservation(
                user.id, book.id, expires_at
            )
        except StoreFailureError as e:
            self._record_store_failure(e)
            if not e.committed:
                logger.error("Failed to create reservation for book %s: %s", book.id, e)
                raise
            # The insert went through but its result is unusable; keep the
            # copy count in step with the stored reservation
            logger.error(
                "Reservation for book %s was stored but could not be read back: %s",
                book.id,
                e,
            )
            await self._decrement_after_unreadable_insert(book.id, remaining)
            raise

        try:
            await self._store.update_book_availability(book.id, remaining)
        except StoreFailureError as e:
            error = AvailabilityUpdateError(
                reservation, book.id, remaining, reason=str(e)
            )
            self._record_store_failure(error)
            logger.error(
                "Reservation %s created but availability of book %s is stale: %s",
                reservation.id,
                book.id,
                e,
            )
            raise error from e

        if self._metrics is not None:
            self._metrics.record_created(user.classification)
        logger.info(
            "Reserved book %s for user %s until %s (reservation %s)",
            book.id,
            user.id,
            expires_at.isoformat(),
            reservation.id,
        )
        return reservation

    async def _decrement_after_unreadable_insert(
        self, book_id: str, remaining: int
    ) -> None:
        try:
            await self._store.update_book_availability(book_id, remaining)
        except StoreFailureError as e:
            if self._metrics is not None:
                self._metrics.record_store_failure(e.operation, committed=True)
            logger.error(
                "Availability of book %s is stale after an unreadable insert: %s",
                book_id,
                e,
            )

    async def reserve_book(
        self,
        user: User,
        book_id: str,
        now: datetime | None = None,
    ) -> Reservation:
        """
        Reserve a book by id, reading the book and active count from the store.

        Raises:
            BookNotFoundError: No book has that id
            (plus everything reserve() raises)
        """
        book = await self._store.get_book(book_id)
        if book is None:
            raise BookNotFoundError(book_id)
        count = await self._store.count_active_reservations(user.id)
        return await self.reserve(user, book, count, now or self._clock())

    # ==========================================================================
    # Cancel
    # ==========================================================================

    async def cancel(
        self,
        reservation_id: str,
        current_status: ReservationStatus | str,
    ) -> Reservation:
        """
        Cancel an active reservation.

        The book's available copy count is left unchanged.

        Args:
            reservation_id: The reservation to cancel
            current_status: Its status as last read by the caller

        Returns:
            The updated reservation, in cancelled status

        Raises:
            InvalidStateTransitionError: The reservation is not active
            StoreFailureError: The status update failed
        """
        status = ReservationStatus(current_status)
        target = ReservationStatus.CANCELLED
        if not status.can_transition_to(target):
            self._record_rejected(REASON_INVALID_TRANSITION)
            raise InvalidStateTransitionError(reservation_id, status, target)

        try:
            updated = await self._store.update_reservation_status(
                reservation_id, target
            )
        except StoreFailureError as e:
            self._record_store_failure(e)
            logger.error("Failed to cancel reservation %s: %s", reservation_id, e)
            raise

        if self._metrics is not None:
            self._metrics.record_cancelled()
        logger.info("Cancelled reservation %s", reservation_id)
        return updated

    async def cancel_reservation(
        self,
        reservation_id: str,
        user_id: str | None = None,
    ) -> Reservation:
        """
        Cancel a reservation by id, reading its current status from the store.

        Args:
            reservation_id: The reservation to cancel
            user_id: When given, only a reservation owned by this user is found

        Raises:
            ReservationNotFoundError: No matching reservation
            (plus everything cancel() raises)
        """
        reservation = await self._store.get_reservation(reservation_id)
        if reservation is None or (
            user_id is not None and reservation.user_id != user_id
        ):
            raise ReservationNotFoundError(reservation_id)
        return await self.cancel(reservation.id, reservation.status)

    # ==========================================================================
    # Views
    # ==========================================================================

    async def list_reservations(
        self,
        user_id: str,
        status: ReservationStatus | str | None = None,
    ) -> list[Reservation]:
        if status is not None:
            status = ReservationStatus(status)
        return await self._store.list_reservations(user_id, status)

    async def active_reservations(self, user_id: str) -> list[Reservation]:
        return await self._store.list_reservations(user_id, ReservationStatus.ACTIVE)

    async def summarize(
        self, user: User, now: datetime | None = None
    ) -> ReservationSummary:
        """Reservation statistics and policy limits for a user's profile."""
        policy = self._registry.resolve(user.classification)
        reservations = await self._store.list_reservations(user.id)
        return ReservationSummary.from_reservations(
            reservations, policy, now or self._clock()
        )

    # ==========================================================================
    # Metrics & Lifecycle
    # ==========================================================================

    def _record_rejected(self, reason: str) -> None:
        if self._metrics is not None:
            self._metrics.record_rejected(reason)

    def _record_store_failure(self, error: StoreFailureError) -> None:
        if self._metrics is not None:
            self._metrics.record_store_failure(error.operation, error.committed)

    async def close(self) -> None:
        """Close the store and the admission guard."""
        try:
            await self._store.close()
        finally:
            if self._guard is not None:
                await self._guard.close()

    async def __aenter__(self) -> "ReservationCoordinator":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.close()


# Factory function for easy creation with dependency injection
def create_coordinator(
    config: ReservationEngineConfig | None = None,
    store: BaseStore | None = None,
    registry: PolicyRegistry | None = None,
    admission_guard: AdmissionGuard | None = None,
    metrics: ReservationMetrics | None = None,
    **kwargs: Any,
) -> ReservationCoordinator:
    """
    Factory function to create a ReservationCoordinator from configuration.

    Args:
        config: Optional engine config (default config if not provided)
        store: Optional store; otherwise a GraphQLStore when config.graphql_url
            is set, else a MemoryStore
        registry: Optional policy registry (default policies if not provided)
        admission_guard: Optional guard; otherwise chosen by config.admission_mode
        metrics: Optional metrics collector; otherwise the global collector
            when config.metrics_enabled
        **kwargs: Additional arguments passed to ReservationCoordinator

    Returns:
        Configured ReservationCoordinator instance
    """
    if config is None:
        config = ReservationEngineConfig()

    if store is None:
        if config.graphql_url:
            store = GraphQLStore(
                url=config.graphql_url,
                admin_secret=config.graphql_admin_secret,
                auth_token=config.graphql_auth_token,
                timeout=config.request_timeout,
            )
        else:
            store = MemoryStore()

    if admission_guard is None:
        if config.admission_mode is AdmissionMode.LOCAL:
            admission_guard = MemoryAdmissionGuard(
                acquire_timeout=config.admission_acquire_timeout
            )
        elif config.admission_mode is AdmissionMode.REDIS:
            from ..admission import RedisAdmissionGuard

            admission_guard = RedisAdmissionGuard(
                redis_url=config.redis_url,
                namespace=config.namespace,
                lock_timeout=config.admission_lock_timeout,
                acquire_timeout=config.admission_acquire_timeout,
            )

    if metrics is None and config.metrics_enabled:
        metrics = get_metrics_collector()

    logger.debug(
        "Creating ReservationCoordinator (store=%s, admission=%s)",
        store.store_type,
        config.admission_mode.value,
    )
    return ReservationCoordinator(
        store=store,
        registry=registry,
        admission_guard=admission_guard,
        metrics=metrics,
        **kwargs,
    )
