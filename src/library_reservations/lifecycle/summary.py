# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""Read-only views over a user's reservations."""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime

from ..types.policy import ReservationPolicy
from ..types.reservation import Reservation, ReservationStatus


@dataclass(frozen=True)
class ReservationSummary:
    """
    Reservation statistics for a user's profile.

    Attributes:
        active: Reservations in active status
        completed: Reservations completed (book returned)
        cancelled: Reservations cancelled by the user
        expired: Active reservations whose expiry instant has passed
        max_reservations: The user's policy limit
        loan_duration_days: The user's policy loan duration
    """

    active: int
    completed: int
    cancelled: int
    expired: int
    max_reservations: int
    loan_duration_days: int

    @property
    def total(self) -> int:
        return self.active + self.completed + self.cancelled

    @property
    def remaining_slots(self) -> int:
        return max(0, self.max_reservations - self.active)

    @classmethod
    def from_reservations(
        cls,
        reservations: Iterable[Reservation],
        policy: ReservationPolicy,
        now: datetime,
    ) -> "ReservationSummary":
        counts = dict.fromkeys(ReservationStatus, 0)
        expired = 0
        for reservation in reservations:
            counts[reservation.status] += 1
            if reservation.is_active and reservation.is_expired(now):
                expired += 1
        return cls(
            active=counts[ReservationStatus.ACTIVE],
            completed=counts[ReservationStatus.COMPLETED],
            cancelled=counts[ReservationStatus.CANCELLED],
            expired=expired,
            max_reservations=policy.max_reservations,
            loan_duration_days=policy.loan_duration_days,
        )


def find_expired(
    reservations: Iterable[Reservation], now: datetime
) -> list[Reservation]:
    """Return the active reservations whose expiry instant is at or before ``now``."""
    return [
        reservation
        for reservation in reservations
        if reservation.is_active and reservation.is_expired(now)
    ]
