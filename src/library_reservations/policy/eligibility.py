# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""Reservation admission decisions."""

from ..types.user import User
from .registry import PolicyRegistry


class EligibilityEvaluator:
    """
    Decides whether a user may take out another reservation.

    The evaluator never counts reservations itself; callers supply the
    user's current active reservation count. All methods are pure reads of
    the registry.
    """

    def __init__(self, registry: PolicyRegistry):
        self._registry = registry

    @property
    def registry(self) -> PolicyRegistry:
        return self._registry

    def can_reserve(self, user: User, current_active_count: int) -> bool:
        """
        Check admission for one more reservation.

        Args:
            user: The user attempting to reserve
            current_active_count: The user's active reservations right now

        Returns:
            True iff current_active_count is strictly below the policy maximum

        Raises:
            UnknownClassificationError: If the user's classification has no policy
        """
        if current_active_count < 0:
            raise ValueError(
                f"current_active_count must not be negative, got {current_active_count}"
            )
        policy = self._registry.resolve(user.classification)
        return current_active_count < policy.max_reservations

    def max_reservations(self, classification: str) -> int:
        return self._registry.resolve(classification).max_reservations

    def loan_duration_days(self, classification: str) -> int:
        return self._registry.resolve(classification).loan_duration_days
