"""Per-user serialization of trip-mutating operations."""

from __future__ import annotations

import asyncio
import contextlib
import weakref
from collections.abc import AsyncIterator


class UserLockRegistry:
    """Hands out one ``asyncio.Lock`` per user id.

    Locks are held weakly, so a user's lock disappears once no request is
    holding or waiting on it.
    """

    def __init__(self) -> None:
        self._locks: weakref.WeakValueDictionary[str, asyncio.Lock] = (
            weakref.WeakValueDictionary()
        )

    def lock_for(self, user_id: str) -> asyncio.Lock:
        lock = self._locks.get(user_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[user_id] = lock
        return lock

    @contextlib.asynccontextmanager
    async def hold(self, user_id: str) -> AsyncIterator[None]:
        lock = self.lock_for(user_id)
        async with lock:
            yield

    def __len__(self) -> int:
        return len(self._locks)


user_locks = UserLockRegistry()
