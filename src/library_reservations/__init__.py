# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""Library Reservations - Reservation policy and lifecycle engine for library apps.

This library decides whether a member may reserve a book, computes when the
reservation expires, and carries out reserve and cancel against an external
data store while keeping the book's available copy count consistent.

Key Features:
    - Per-classification reservation policies (student, normal, or your own)
    - Pure eligibility and expiry calculations with explicit "now"
    - Reserve/cancel orchestration with partial-failure reporting
    - Pluggable data stores (in-memory, GraphQL)
    - Optional per-user admission guard (asyncio or Redis locks)
    - Prometheus counters for reservation outcomes

Quick Start:
    >>> from datetime import datetime, timezone
    >>> from library_reservations import Book, MemoryStore, STUDENT, User, create_coordinator
    >>>
    >>> book = Book(id="b-1", title="Dune", author="Herbert", total_copies=2, available_copies=2)
    >>> user = User(id="u-1", email="ada@example.com", name="Ada", classification=STUDENT)
    >>> coordinator = create_coordinator(store=MemoryStore(books=[book], users=[user]))
    >>> async with coordinator:
    ...     reservation = await coordinator.reserve(user, book, 0, datetime.now(timezone.utc))

Note: RedisAdmissionGuard requires the 'redis' extra. Install with:
    pip install library-reservations[redis]

Version: 1.0.0
"""

__version__ = "1.0.0"

from typing import TYPE_CHECKING

from .admission import AdmissionGuard, MemoryAdmissionGuard
from .config import AdmissionMode, ReservationEngineConfig
from .exceptions import (
    AvailabilityUpdateError,
    BookNotFoundError,
    BookUnavailableError,
    ConfigurationError,
    InvalidStateTransitionError,
    ReservationError,
    ReservationLimitExceededError,
    ReservationNotFoundError,
    StoreConnectionError,
    StoreFailureError,
    UnknownClassificationError,
)
from .lifecycle import (
    ReservationCoordinator,
    ReservationSummary,
    create_coordinator,
    find_expired,
)
from .observability import ReservationMetrics, get_metrics_collector
from .policy import (
    EligibilityEvaluator,
    ExpirationCalculator,
    PolicyRegistry,
    create_default_registry,
)
from .stores import BaseStore, GraphQLStore, HealthCheckResult, MemoryStore
from .types import (
    DEFAULT_CLASSIFICATIONS,
    NORMAL,
    STUDENT,
    Book,
    Classification,
    Reservation,
    ReservationPolicy,
    ReservationStatus,
    User,
)

# Lazy import for optional redis guard
if TYPE_CHECKING:
    from .admission import RedisAdmissionGuard

__all__ = [
    "DEFAULT_CLASSIFICATIONS",
    "NORMAL",
    "STUDENT",
    # Admission
    "AdmissionGuard",
    "AdmissionMode",
    "AvailabilityUpdateError",
    # Stores
    "BaseStore",
    # Types
    "Book",
    "BookNotFoundError",
    "BookUnavailableError",
    "Classification",
    "ConfigurationError",
    # Policy
    "EligibilityEvaluator",
    "ExpirationCalculator",
    "GraphQLStore",
    "HealthCheckResult",
    "InvalidStateTransitionError",
    "MemoryAdmissionGuard",
    "MemoryStore",
    "PolicyRegistry",
    "RedisAdmissionGuard",  # Lazy loaded - requires redis extra
    "Reservation",
    # Lifecycle
    "ReservationCoordinator",
    # Config
    "ReservationEngineConfig",
    # Exceptions
    "ReservationError",
    "ReservationLimitExceededError",
    # Observability
    "ReservationMetrics",
    "ReservationNotFoundError",
    "ReservationPolicy",
    "ReservationStatus",
    "ReservationSummary",
    "StoreConnectionError",
    "StoreFailureError",
    "UnknownClassificationError",
    "User",
    "create_coordinator",
    "create_default_registry",
    "find_expired",
    "get_metrics_collector",
]


def __getattr__(name: str) -> type:
    """Lazy import for optional redis guard."""
    if name == "RedisAdmissionGuard":
        from .admission import RedisAdmissionGuard

        return RedisAdmissionGuard
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
