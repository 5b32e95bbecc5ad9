# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Reservation policy record.

A policy is plain data: the pair (maximum concurrent active reservations,
loan duration in days) plus an active flag. The classification it applies
to is the key it is registered under in the PolicyRegistry.
"""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class ReservationPolicy:
    """
    Reservation rules for one user classification.

    Attributes:
        max_reservations: Maximum concurrent active reservations (positive)
        loan_duration_days: Days until a new reservation expires (positive)
        active: Whether the policy is in force; inactive policies are
            skipped when loading policies in bulk
    """

    max_reservations: int
    loan_duration_days: int
    active: bool = True

    def __post_init__(self) -> None:
        """Validate policy values after initialization."""
        for name in ("max_reservations", "loan_duration_days"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(
                    f"{name} must be an integer, got {type(value).__name__}"
                )
            if value < 1:
                raise ValueError(f"{name} must be positive, got {value}")

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> "ReservationPolicy":
        """Build a policy from a ``reservation_policies`` row."""
        return cls(
            max_reservations=int(record["max_reservations"]),
            loan_duration_days=int(record["reservation_duration_days"]),
            active=bool(record.get("is_active", True)),
        )


__all__ = ["ReservationPolicy"]
