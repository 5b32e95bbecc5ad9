# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""PolicyRegistry mapping user classifications to reservation policies."""

import logging
from collections.abc import Iterator, Mapping

from ..exceptions import UnknownClassificationError
from ..types.policy import ReservationPolicy
from ..types.user import NORMAL, STUDENT

logger = logging.getLogger(__name__)

# Built-in policies registered by create_default_registry()
DEFAULT_POLICIES: dict[str, ReservationPolicy] = {
    STUDENT: ReservationPolicy(max_reservations=5, loan_duration_days=14),
    NORMAL: ReservationPolicy(max_reservations=3, loan_duration_days=7),
}


class PolicyRegistry:
    """
    Associates each user classification with exactly one ReservationPolicy.

    New classifications are added by registering a policy for them; callers
    never special-case a classification. Registering a key that already
    exists replaces its policy (last registration wins).

    Lookups never fall back to a default: an unknown classification raises
    UnknownClassificationError.

    The registry is meant to be populated during setup. It performs no
    locking, so concurrent register() and resolve() calls are not supported.
    """

    def __init__(self, policies: Mapping[str, ReservationPolicy] | None = None):
        """
        Initialize the registry.

        Args:
            policies: Optional initial classification -> policy bindings,
                registered in iteration order
        """
        self._policies: dict[str, ReservationPolicy] = {}
        if policies:
            for classification, policy in policies.items():
                self.register(classification, policy)

    def register(self, classification: str, policy: ReservationPolicy) -> None:
        """
        Bind a policy to a classification, replacing any previous binding.

        Args:
            classification: User classification key (exact string match)
            policy: The policy to apply to that classification
        """
        if not isinstance(policy, ReservationPolicy):
            raise TypeError(
                f"policy must be a ReservationPolicy, got {type(policy).__name__}"
            )
        previous = self._policies.get(classification)
        self._policies[classification] = policy
        if previous is not None and previous != policy:
            logger.info(
                "Replaced reservation policy for %r: %s -> %s",
                classification,
                previous,
                policy,
            )
        else:
            logger.debug("Registered reservation policy for %r: %s", classification, policy)

    def unregister(self, classification: str) -> None:
        """Remove the policy bound to a classification, if any."""
        self._policies.pop(classification, None)

    def load(self, policies: Mapping[str, ReservationPolicy]) -> int:
        """
        Register a batch of policies, skipping inactive ones.

        Args:
            policies: classification -> policy mapping, e.g. from the store

        Returns:
            Number of policies registered
        """
        loaded = 0
        for classification, policy in policies.items():
            if not policy.active:
                logger.debug("Skipping inactive policy for %r", classification)
                continue
            self.register(classification, policy)
            loaded += 1
        return loaded

    def resolve(self, classification: str) -> ReservationPolicy:
        """
        Return the policy registered for an exact classification.

        Raises:
            UnknownClassificationError: If nothing is registered for the key
        """
        try:
            return self._policies[classification]
        except KeyError:
            raise UnknownClassificationError(classification) from None

    @property
    def classifications(self) -> frozenset[str]:
        return frozenset(self._policies)

    def __contains__(self, classification: object) -> bool:
        return classification in self._policies

    def __len__(self) -> int:
        return len(self._policies)

    def __iter__(self) -> Iterator[str]:
        return iter(self._policies)


def create_default_registry() -> PolicyRegistry:
    """
    Create a registry pre-populated with the built-in policies.

    Students may hold 5 reservations for 14 days; normal members 3 for 7 days.
    These are ordinary registrations and can be overridden at any time.
    """
    return PolicyRegistry(DEFAULT_POLICIES)
