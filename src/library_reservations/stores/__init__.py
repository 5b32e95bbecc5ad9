# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Data store implementations for the reservation engine.

This module provides the abstract base class and concrete implementations
of the data store collaborator.

Available stores:
- BaseStore: Abstract base class defining the store interface
- MemoryStore: In-memory store for tests, development and single processes
- GraphQLStore: Remote Hasura-style GraphQL endpoint over httpx

Supporting types:
- HealthCheckResult: Structured result from store health checks
"""

from .base import BaseStore, HealthCheckResult
from .graphql import GraphQLStore
from .memory import MemoryStore

__all__ = [
    # Base classes
    "BaseStore",
    # GraphQL store
    "GraphQLStore",
    "HealthCheckResult",
    # Memory store
    "MemoryStore",
]
