# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Observability for the reservation engine.

Exports:
    ReservationMetrics: Prometheus-backed reservation outcome counters
    get_metrics_collector: Process-wide collector on the default registry
    reset_metrics_collector: Drop the process-wide collector (testing)
"""

from .collector import (
    ReservationMetrics,
    get_metrics_collector,
    reset_metrics_collector,
)
from .constants import (
    METRIC_PREFIX,
    REASON_BOOK_UNAVAILABLE,
    REASON_INVALID_TRANSITION,
    REASON_LIMIT_EXCEEDED,
    REASON_UNKNOWN_CLASSIFICATION,
    RESERVATIONS_CANCELLED_TOTAL,
    RESERVATIONS_CREATED_TOTAL,
    RESERVATIONS_REJECTED_TOTAL,
    STORE_FAILURES_TOTAL,
)

__all__ = [
    "METRIC_PREFIX",
    "REASON_BOOK_UNAVAILABLE",
    "REASON_INVALID_TRANSITION",
    "REASON_LIMIT_EXCEEDED",
    "REASON_UNKNOWN_CLASSIFICATION",
    "RESERVATIONS_CANCELLED_TOTAL",
    "RESERVATIONS_CREATED_TOTAL",
    "RESERVATIONS_REJECTED_TOTAL",
    "STORE_FAILURES_TOTAL",
    "ReservationMetrics",
    "get_metrics_collector",
    "reset_metrics_collector",
]
