# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
# library_reservations/types/user.py
"""
User classification constants and the User record.

Classifications are plain strings so that new categories can be added by
registering a policy for them, without touching this module.

Constants:
    STUDENT: Student members (longer loans, more reservations)
    NORMAL: Regular members
    DEFAULT_CLASSIFICATIONS: Frozenset of the classifications with built-in policies

Example:
    >>> from library_reservations import STUDENT, User
    >>> user = User(id="u-1", email="ada@example.com", name="Ada", classification=STUDENT)
"""

from dataclasses import dataclass
from typing import Any

# Core library uses plain strings for classifications
Classification = str  # Type alias for clarity

STUDENT = "student"
NORMAL = "normal"

DEFAULT_CLASSIFICATIONS = frozenset({STUDENT, NORMAL})


@dataclass(frozen=True)
class User:
    """
    A library member as issued by the authentication collaborator.

    Users are immutable for the duration of a session.

    Attributes:
        id: Unique user identifier
        email: Email address
        name: Display name
        classification: User category that selects the reservation policy
    """

    id: str
    email: str
    name: str
    classification: Classification

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> "User":
        """Build a User from a store row (``user_type`` names the classification)."""
        return cls(
            id=str(record["id"]),
            email=record.get("email", ""),
            name=record.get("name", ""),
            classification=record.get("user_type") or record["classification"],
        )

    def to_record(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "email": self.email,
            "name": self.name,
            "user_type": self.classification,
        }


__all__ = [
    "DEFAULT_CLASSIFICATIONS",
    "NORMAL",
    "STUDENT",
    "Classification",
    "User",
]
