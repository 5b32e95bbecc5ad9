# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""Reservation expiry computation."""

from datetime import datetime, timedelta

from .registry import PolicyRegistry


class ExpirationCalculator:
    """
    Computes when a newly created reservation expires.

    The current instant is always passed in by the caller; the calculator
    never reads the wall clock.
    """

    def __init__(self, registry: PolicyRegistry):
        self._registry = registry

    def compute_expiry(self, classification: str, now: datetime) -> datetime:
        """
        Return ``now`` plus the classification's loan duration in days.

        Args:
            classification: User classification selecting the policy
            now: Timezone-aware current instant

        Returns:
            Expiry instant in the same timezone as ``now``

        Raises:
            ValueError: If ``now`` is naive
            UnknownClassificationError: If the classification has no policy
        """
        if now.tzinfo is None or now.utcoffset() is None:
            raise ValueError("now must be a timezone-aware datetime")
        duration = self._registry.resolve(classification).loan_duration_days
        return now + timedelta(days=duration)
