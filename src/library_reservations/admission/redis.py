# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Distributed admission guard backed by Redis locks.

Each user gets a Redis lock key; every process running the reservation
coordinator against the same Redis serializes its reserve calls for that
user. Locks carry a TTL so a crashed holder cannot block a user forever.
"""

import base64
import contextlib
import logging
import os
from collections.abc import AsyncIterator
from typing import Any

from redis.asyncio import Redis
from redis.exceptions import LockError, RedisError

from ..exceptions import StoreConnectionError, StoreFailureError
from .base import AdmissionGuard

logger = logging.getLogger(__name__)


class RedisAdmissionGuard(AdmissionGuard):
    """
    Serializes reserve calls per user across processes using Redis locks.

    Key format: ``{namespace}:admission:{base64(user_id)}``
    """

    guard_type = "redis"

    def __init__(
        self,
        redis_url: str | None = None,
        redis_client: Any | None = None,
        namespace: str = "library_reservations",
        lock_timeout: float = 30.0,
        acquire_timeout: float = 10.0,
    ) -> None:
        """
        Initialize the Redis admission guard.

        Args:
            redis_url: Redis connection URL. If not provided, falls back to REDIS_URL
                environment variable, then to "redis://localhost:6379".
            redis_client: Optional pre-configured Redis client (not closed by
                this guard)
            namespace: Namespace prefix for lock keys
            lock_timeout: Lock TTL in seconds; bounds how long a crashed
                holder can block the user
            acquire_timeout: Seconds to wait for the lock before failing
        """
        self.redis_url = (
            redis_url or os.environ.get("REDIS_URL") or "redis://localhost:6379"
        )
        self.namespace = namespace
        self.lock_timeout = lock_timeout
        self.acquire_timeout = acquire_timeout

        self._redis: Any | None = redis_client
        self._owned_redis = redis_client is None

    def _get_client(self) -> Any:
        if self._redis is None:
            self._redis = Redis.from_url(self.redis_url)
        return self._redis

    def _lock_key(self, user_id: str) -> str:
        # Base64 encode user_id for safe key construction
        encoded = base64.urlsafe_b64encode(user_id.encode()).decode().rstrip("=")
        return f"{self.namespace}:admission:{encoded}"

    @contextlib.asynccontextmanager
    async def hold(self, user_id: str) -> AsyncIterator[None]:
        client = self._get_client()
        lock = client.lock(
            self._lock_key(user_id),
            timeout=self.lock_timeout,
            blocking_timeout=self.acquire_timeout,
        )
        try:
            acquired = await lock.acquire()
        except RedisError as e:
            raise StoreConnectionError(
                f"Failed to acquire admission lock for user {user_id}: {e}",
                operation="acquire_admission_lock",
            ) from e
        if not acquired:
            raise StoreFailureError(
                f"Timed out waiting for admission lock of user {user_id}",
                operation="acquire_admission_lock",
            )
        logger.debug("Acquired Redis admission lock for user %s", user_id)
        try:
            yield
        finally:
            try:
                await lock.release()
            except LockError:
                # The TTL elapsed while we held it; another holder may have it now
                logger.warning(
                    "Admission lock for user %s expired before release", user_id
                )
            except RedisError as e:
                logger.warning(
                    "Failed to release admission lock for user %s: %s", user_id, e
                )

    async def close(self) -> None:
        if self._redis is not None and self._owned_redis:
            await self._redis.aclose()
            self._redis = None
