# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Admission guards that serialize reserve calls per user.

Available guards:
- AdmissionGuard: Abstract base class defining the guard interface
- MemoryAdmissionGuard: asyncio locks for single-process deployments
- RedisAdmissionGuard: Redis locks for multi-process deployments (requires redis extra)

Note: RedisAdmissionGuard is lazily imported to avoid requiring the redis
package when only using MemoryAdmissionGuard.
"""

from typing import TYPE_CHECKING, cast

from .base import AdmissionGuard
from .memory import MemoryAdmissionGuard

# Lazy import for optional redis guard
if TYPE_CHECKING:
    from .redis import RedisAdmissionGuard

__all__ = [
    "AdmissionGuard",
    "MemoryAdmissionGuard",
    # Redis guard (lazy loaded)
    "RedisAdmissionGuard",
]


def __getattr__(name: str) -> type:
    """Lazy import for optional redis guard."""
    if name == "RedisAdmissionGuard":
        try:
            from library_reservations.admission import redis as redis_module

            return cast(type, redis_module.RedisAdmissionGuard)
        except ImportError as e:  # pragma: no cover
            raise ImportError(  # pragma: no cover
                "'RedisAdmissionGuard' requires the 'redis' extra. "
                "Install with: pip install library-reservations[redis]"
            ) from e
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
