# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Configuration for the Library Reservation Engine

This module provides the configuration class used by create_coordinator()
to select the data store, the admission guard, and metrics.
"""

import os
from dataclasses import dataclass
from enum import Enum


class AdmissionMode(Enum):
    """How concurrent reserve calls for the same user are admitted.

    - NONE: Admission uses only the count supplied by the caller. Two
      concurrent reserves for one user can both pass and briefly exceed the
      policy maximum.
    - LOCAL: Serialize per user with asyncio locks and re-count from the
      store while holding the lock. Single process only.
    - REDIS: Same as LOCAL using Redis locks, for multiple processes.
    """

    NONE = "none"
    LOCAL = "local"
    REDIS = "redis"


@dataclass
class ReservationEngineConfig:
    """
    Configuration for the reservation engine.

    Leave graphql_url unset to use an in-memory store.
    """

    # === Data Store ===

    graphql_url: str | None = None
    """GraphQL endpoint URL. None selects the in-memory store."""

    graphql_admin_secret: str | None = None
    """Hasura admin secret sent as x-hasura-admin-secret."""

    graphql_auth_token: str | None = None
    """Bearer token from the session store."""

    request_timeout: float = 10.0
    """Data store request timeout in seconds."""

    # === Admission ===

    admission_mode: AdmissionMode = AdmissionMode.NONE
    """Concurrency control for reserve admission."""

    admission_acquire_timeout: float = 10.0
    """Seconds to wait for a user's admission lock."""

    admission_lock_timeout: float = 30.0
    """TTL of a Redis admission lock in seconds."""

    redis_url: str | None = None
    """Redis URL for AdmissionMode.REDIS."""

    namespace: str = "library_reservations"
    """Key namespace for Redis admission locks."""

    # === Metrics ===

    metrics_enabled: bool = True
    """Record reservation outcomes on the Prometheus collector."""

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if isinstance(self.admission_mode, str):
            self.admission_mode = AdmissionMode(self.admission_mode.lower())
        if self.request_timeout <= 0:
            raise ValueError("request_timeout must be positive")
        if self.admission_acquire_timeout <= 0:
            raise ValueError("admission_acquire_timeout must be positive")
        if self.admission_lock_timeout <= 0:
            raise ValueError("admission_lock_timeout must be positive")

    @classmethod
    def from_env(cls) -> "ReservationEngineConfig":
        """
        Build a configuration from environment variables.

        Environment Variables:
            LIBRARY_GRAPHQL_URL: GraphQL endpoint URL
            LIBRARY_GRAPHQL_ADMIN_SECRET: Hasura admin secret
            LIBRARY_GRAPHQL_AUTH_TOKEN: Bearer token
            LIBRARY_REQUEST_TIMEOUT: Request timeout in seconds
            LIBRARY_ADMISSION_MODE: none, local or redis
            LIBRARY_METRICS_ENABLED: "false" or "0" disables metrics
            REDIS_URL: Redis URL for the redis admission mode
        """
        metrics_flag = os.environ.get("LIBRARY_METRICS_ENABLED", "true")
        return cls(
            graphql_url=os.environ.get("LIBRARY_GRAPHQL_URL"),
            graphql_admin_secret=os.environ.get("LIBRARY_GRAPHQL_ADMIN_SECRET"),
            graphql_auth_token=os.environ.get("LIBRARY_GRAPHQL_AUTH_TOKEN"),
            request_timeout=float(os.environ.get("LIBRARY_REQUEST_TIMEOUT", "10.0")),
            admission_mode=AdmissionMode(
                os.environ.get("LIBRARY_ADMISSION_MODE", "none").lower()
            ),
            redis_url=os.environ.get("REDIS_URL"),
            metrics_enabled=metrics_flag.lower() not in ("false", "0", "no"),
        )


__all__ = [
    "AdmissionMode",
    "ReservationEngineConfig",
]
