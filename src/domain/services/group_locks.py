"""Per-group mutual exclusion for membership transitions."""

import asyncio
import weakref
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from uuid import UUID


class GroupLockRegistry:
    """Hands out one asyncio.Lock per group id.

    Locks are held weakly, so a group's lock disappears once no coroutine
    holds or waits on it.
    """

    def __init__(self) -> None:
        self._locks: weakref.WeakValueDictionary[UUID, asyncio.Lock] = (
            weakref.WeakValueDictionary()
        )

    def _get(self, group_id: UUID) -> asyncio.Lock:
        lock = self._locks.get(group_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[group_id] = lock
        return lock

    @asynccontextmanager
    async def hold(self, group_id: UUID) -> AsyncIterator[None]:
        """Serialize the enclosed block against others on the same group."""
        lock = self._get(group_id)
        async with lock:
            yield
