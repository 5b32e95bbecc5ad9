# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""Type definitions and constants."""

from .book import Book
from .policy import ReservationPolicy
from .reservation import (
    Reservation,
    ReservationStatus,
    format_timestamp,
    parse_timestamp,
)
from .user import (
    DEFAULT_CLASSIFICATIONS,
    NORMAL,
    STUDENT,
    Classification,
    User,
)

__all__ = [
    "DEFAULT_CLASSIFICATIONS",
    "NORMAL",
    "STUDENT",
    # Records
    "Book",
    # Classification
    "Classification",
    "Reservation",
    "ReservationPolicy",
    "ReservationStatus",
    "User",
    # Timestamp helpers
    "format_timestamp",
    "parse_timestamp",
]
