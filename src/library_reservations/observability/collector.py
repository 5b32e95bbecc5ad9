# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Reservation metrics collector backed by prometheus_client.

This module provides the ReservationMetrics class that records the outcome
of every reserve and cancel call handled by the coordinator.

Features:
    1. Thread-safe counter operations
    2. Prometheus counters registered on a configurable registry
    3. Dict snapshot for JSON export and tests

Usage:
    >>> from library_reservations.observability import get_metrics_collector
    >>> collector = get_metrics_collector()
    >>> collector.record_created("student")
    >>> collector.get_metrics()
"""

from __future__ import annotations

import logging
import threading
from collections import defaultdict
from typing import Any

from prometheus_client import REGISTRY, CollectorRegistry, Counter

from .constants import (
    RESERVATIONS_CANCELLED_TOTAL,
    RESERVATIONS_CREATED_TOTAL,
    RESERVATIONS_REJECTED_TOTAL,
    STORE_FAILURES_TOTAL,
)

logger = logging.getLogger(__name__)


class ReservationMetrics:
    """
    Counters for reservation outcomes.

    Prometheus metric names must be unique per registry, so create one
    collector per registry: use get_metrics_collector() for the default
    registry and pass a fresh CollectorRegistry in tests.

    Example:
        >>> from prometheus_client import CollectorRegistry
        >>> metrics = ReservationMetrics(registry=CollectorRegistry())
        >>> metrics.record_rejected("limit_exceeded")
        >>> metrics.get_metrics()["rejected"]
        {'limit_exceeded': 1}
    """

    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        """
        Initialize the metrics collector.

        Args:
            registry: Prometheus registry to register counters on; defaults
                to the global prometheus_client REGISTRY
        """
        self._registry = registry if registry is not None else REGISTRY
        self._lock = threading.RLock()

        self._created = Counter(
            RESERVATIONS_CREATED_TOTAL,
            "Total reservations created",
            ("classification",),
            registry=self._registry,
        )
        self._rejected = Counter(
            RESERVATIONS_REJECTED_TOTAL,
            "Total reserve attempts rejected",
            ("reason",),
            registry=self._registry,
        )
        self._cancelled = Counter(
            RESERVATIONS_CANCELLED_TOTAL,
            "Total reservations cancelled",
            (),
            registry=self._registry,
        )
        self._store_failures = Counter(
            STORE_FAILURES_TOTAL,
            "Total data store failures",
            ("operation", "committed"),
            registry=self._registry,
        )

        # Dict-based mirror for get_metrics()
        self._counts: dict[str, dict[str, int]] = defaultdict(lambda: defaultdict(int))

        logger.debug("ReservationMetrics initialized")

    @property
    def registry(self) -> CollectorRegistry:
        return self._registry

    def record_created(self, classification: str) -> None:
        with self._lock:
            self._created.labels(classification=classification).inc()
            self._counts["created"][classification] += 1

    def record_rejected(self, reason: str) -> None:
        with self._lock:
            self._rejected.labels(reason=reason).inc()
            self._counts["rejected"][reason] += 1

    def record_cancelled(self) -> None:
        with self._lock:
            self._cancelled.inc()
            self._counts["cancelled"]["total"] += 1

    def record_store_failure(self, operation: str | None, committed: bool) -> None:
        operation = operation or "unknown"
        committed_label = "true" if committed else "false"
        with self._lock:
            self._store_failures.labels(
                operation=operation, committed=committed_label
            ).inc()
            self._counts["store_failures"][f"{operation}:{committed_label}"] += 1

    def get_metrics(self) -> dict[str, Any]:
        """Return a snapshot of all counters as plain dicts."""
        with self._lock:
            return {name: dict(values) for name, values in self._counts.items()}


# =============================================================================
# Global Singleton
# =============================================================================

_global_collector: ReservationMetrics | None = None
_collector_lock = threading.Lock()


def get_metrics_collector() -> ReservationMetrics:
    """
    Get or create the global metrics collector singleton.

    The singleton registers its counters on the default Prometheus registry
    exactly once per process.
    """
    global _global_collector

    if _global_collector is None:
        with _collector_lock:
            if _global_collector is None:
                _global_collector = ReservationMetrics()
    return _global_collector


def reset_metrics_collector() -> None:
    """
    Reset the global metrics collector singleton (mainly for testing).

    Unregisters its counters from the default registry so a new singleton
    can register them again.
    """
    global _global_collector
    with _collector_lock:
        if _global_collector is not None:
            for counter in (
                _global_collector._created,
                _global_collector._rejected,
                _global_collector._cancelled,
                _global_collector._store_failures,
            ):
                _global_collector.registry.unregister(counter)
        _global_collector = None
