# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Reservation record and status lifecycle.

This module defines the reservation status enum with its legal transitions,
the Reservation dataclass, and timestamp helpers shared by the stores.
"""

import math
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from .book import Book

_SECONDS_PER_DAY = 86400


class ReservationStatus(Enum):
    """
    Lifecycle status of a reservation.

    - ACTIVE: Created by the coordinator; counts against the user's limit.
    - COMPLETED: Terminal; set by an external process such as a book return.
    - CANCELLED: Terminal; set by an explicit cancel of an active reservation.
    """

    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self is not ReservationStatus.ACTIVE

    def can_transition_to(self, target: "ReservationStatus") -> bool:
        """Only active reservations may move, and only to a terminal status."""
        return self is ReservationStatus.ACTIVE and target.is_terminal


def parse_timestamp(value: str | datetime) -> datetime:
    """
    Parse an ISO-8601 timestamp from the store into an aware datetime.

    Stores that use a ``timestamp`` column without a zone return naive
    strings; those are read as UTC.
    """
    if isinstance(value, datetime):
        parsed = value
    else:
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def format_timestamp(value: datetime) -> str:
    """Format an aware datetime as a UTC ISO-8601 string with a ``Z`` suffix."""
    return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


@dataclass(frozen=True)
class Reservation:
    """
    A user's hold on one copy of a book.

    Attributes:
        id: Unique reservation identifier
        user_id: Owning user
        book_id: Reserved book
        expires_at: Instant the reservation expires
        status: Lifecycle status
        created_at: Instant the store recorded the reservation, when known
        book: Optional nested book details returned by list queries
    """

    id: str
    user_id: str
    book_id: str
    expires_at: datetime
    status: ReservationStatus = ReservationStatus.ACTIVE
    created_at: datetime | None = None
    book: Book | None = None

    @property
    def is_active(self) -> bool:
        return self.status is ReservationStatus.ACTIVE

    def is_expired(self, now: datetime) -> bool:
        """True once ``now`` has reached the expiry instant."""
        return now >= self.expires_at

    def days_remaining(self, now: datetime) -> int:
        """
        Whole days left before expiry, rounded up.

        Returns 0 on the expiry day and a negative number once past it.
        """
        seconds = (self.expires_at - now).total_seconds()
        return math.ceil(seconds / _SECONDS_PER_DAY)

    def with_status(self, status: ReservationStatus) -> "Reservation":
        return replace(self, status=status)

    @classmethod
    def from_record(
        cls,
        record: dict[str, Any],
        defaults: dict[str, Any] | None = None,
    ) -> "Reservation":
        """
        Build a Reservation from a store row.

        Args:
            record: Row as returned by the store
            defaults: Values for fields the row omits (mutations often
                return only the changed columns)
        """
        merged = {**(defaults or {}), **record}
        created_at = merged.get("created_at")
        book = merged.get("book")
        # List queries nest a partial book (id/title/author only)
        has_full_book = isinstance(book, dict) and "total_copies" in book
        return cls(
            id=str(merged["id"]),
            user_id=str(merged["user_id"]),
            book_id=str(merged["book_id"]),
            expires_at=parse_timestamp(merged["expires_at"]),
            status=ReservationStatus(merged.get("status", "active")),
            created_at=parse_timestamp(created_at) if created_at else None,
            book=Book.from_record(book) if has_full_book else None,
        )

    def to_record(self) -> dict[str, Any]:
        record: dict[str, Any] = {
            "id": self.id,
            "user_id": self.user_id,
            "book_id": self.book_id,
            "expires_at": format_timestamp(self.expires_at),
            "status": self.status.value,
        }
        if self.created_at is not None:
            record["created_at"] = format_timestamp(self.created_at)
        return record


__all__ = [
    "Reservation",
    "ReservationStatus",
    "format_timestamp",
    "parse_timestamp",
]
