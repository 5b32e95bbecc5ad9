# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Metric name constants following Prometheus naming conventions.

All metric names use the `library_reservations_` prefix.

Label Best Practices:
    To prevent label cardinality explosion, use only:
    - `classification` - User classification (categorical: student, normal)
    - `reason` - Rejection reason (enum: book_unavailable, limit_exceeded, ...)
    - `operation` - Store operation name (enum)
    - `committed` - Whether an earlier step had succeeded (true, false)

    NEVER use:
    - `user_id`, `book_id`, `reservation_id` - Unbounded!
"""

METRIC_PREFIX = "library_reservations"
"""Prefix for all Prometheus metrics in this library."""

RESERVATIONS_CREATED_TOTAL = f"{METRIC_PREFIX}_created_total"
"""Total reservations created."""

RESERVATIONS_REJECTED_TOTAL = f"{METRIC_PREFIX}_rejected_total"
"""Total reserve attempts rejected before any store mutation."""

RESERVATIONS_CANCELLED_TOTAL = f"{METRIC_PREFIX}_cancelled_total"
"""Total reservations cancelled."""

STORE_FAILURES_TOTAL = f"{METRIC_PREFIX}_store_failures_total"
"""Total data store failures seen by the coordinator."""

# Rejection reasons
REASON_BOOK_UNAVAILABLE = "book_unavailable"
REASON_LIMIT_EXCEEDED = "limit_exceeded"
REASON_INVALID_TRANSITION = "invalid_transition"
REASON_UNKNOWN_CLASSIFICATION = "unknown_classification"

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
]
