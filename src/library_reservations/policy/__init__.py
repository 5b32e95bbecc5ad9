# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Reservation policy components.

Exports:
    PolicyRegistry: Classification -> ReservationPolicy mapping
    create_default_registry: Registry with the built-in student/normal policies
    EligibilityEvaluator: Admission decisions against the registry
    ExpirationCalculator: Expiry instants from loan durations
"""

from .eligibility import EligibilityEvaluator
from .expiration import ExpirationCalculator
from .registry import DEFAULT_POLICIES, PolicyRegistry, create_default_registry

__all__ = [
    "DEFAULT_POLICIES",
    "EligibilityEvaluator",
    "ExpirationCalculator",
    "PolicyRegistry",
    "create_default_registry",
]
