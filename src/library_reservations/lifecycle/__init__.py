# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Reservation lifecycle: reserve, cancel, and read-only views.

Exports:
    ReservationCoordinator: Orchestrates reserve/cancel against the store
    create_coordinator: Factory wiring store, guard and metrics from config
    ReservationSummary: Profile statistics for a user's reservations
    find_expired: Active reservations already past their expiry
"""

from .coordinator import ReservationCoordinator, create_coordinator
from .summary import ReservationSummary, find_expired

__all__ = [
    "ReservationCoordinator",
    "ReservationSummary",
    "create_coordinator",
    "find_expired",
]
