# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Base admission guard.

An admission guard serializes reserve calls per user so that the active
reservation count read during admission cannot be raced by a second reserve
for the same user. Without a guard, two concurrent reserves can both observe
the same count and both succeed, temporarily exceeding the policy maximum.
"""

import abc
from contextlib import AbstractAsyncContextManager


class AdmissionGuard(abc.ABC):
    """
    Per-user mutual exclusion around the reserve workflow.

    Usage:
        async with guard.hold(user.id):
            count = await store.count_active_reservations(user.id)
            ...
    """

    guard_type: str = "base"

    @abc.abstractmethod
    def hold(self, user_id: str) -> AbstractAsyncContextManager[None]:
        """
        Return a context manager that holds the user's admission lock.

        Raises (on enter):
            StoreFailureError: If the lock could not be acquired in time
        """
        pass

    async def close(self) -> None:
        """Release any resources held by the guard."""
        pass
