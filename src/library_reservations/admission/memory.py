# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""In-process admission guard built on asyncio locks."""

import asyncio
import contextlib
import logging
from collections import defaultdict
from collections.abc import AsyncIterator

from ..exceptions import StoreFailureError
from .base import AdmissionGuard

logger = logging.getLogger(__name__)


def _abandon(waiter: "asyncio.Future[bool]", lock: asyncio.Lock) -> None:
    """Cancel a pending acquire, releasing the lock if it was granted anyway."""

    def release_if_granted(task: "asyncio.Future[bool]") -> None:
        if not task.cancelled() and task.exception() is None:
            lock.release()
            logger.debug("Released admission lock granted after timeout")

    waiter.cancel()
    waiter.add_done_callback(release_if_granted)


class MemoryAdmissionGuard(AdmissionGuard):
    """
    Serializes reserve calls per user within a single event loop.

    Locks are created on first use and discarded once no caller holds or
    waits for them, so memory stays bounded by the number of users with a
    reserve in flight.

    Note:
        This guard does NOT coordinate across processes; use
        RedisAdmissionGuard for that.
    """

    guard_type = "memory"

    def __init__(self, acquire_timeout: float | None = 10.0):
        """
        Args:
            acquire_timeout: Seconds to wait for a user's lock before failing;
                None waits indefinitely
        """
        self.acquire_timeout = acquire_timeout
        self._locks: dict[str, asyncio.Lock] = {}
        self._waiters: dict[str, int] = defaultdict(int)

    @property
    def tracked_users(self) -> int:
        return len(self._locks)

    async def _acquire(self, lock: asyncio.Lock) -> bool:
        """
        Acquire ``lock`` within acquire_timeout.

        The acquire runs as its own task. A grant that lands after the
        timeout, or after the caller was cancelled, is released again.

        Returns:
            True if the lock is now held by the caller
        """
        if self.acquire_timeout is None:
            await lock.acquire()
            return True

        waiter = asyncio.ensure_future(lock.acquire())
        try:
            done, _ = await asyncio.wait({waiter}, timeout=self.acquire_timeout)
        except asyncio.CancelledError:
            _abandon(waiter, lock)
            raise
        if done:
            return True
        _abandon(waiter, lock)
        return False

    @contextlib.asynccontextmanager
    async def hold(self, user_id: str) -> AsyncIterator[None]:
        lock = self._locks.setdefault(user_id, asyncio.Lock())
        self._waiters[user_id] += 1
        try:
            if not await self._acquire(lock):
                raise StoreFailureError(
                    f"Timed out waiting for admission lock of user {user_id}",
                    operation="acquire_admission_lock",
                )
            logger.debug("Acquired admission lock for user %s", user_id)
            try:
                yield
            finally:
                lock.release()
        finally:
            self._waiters[user_id] -= 1
            if self._waiters[user_id] == 0:
                del self._waiters[user_id]
                self._locks.pop(user_id, None)
