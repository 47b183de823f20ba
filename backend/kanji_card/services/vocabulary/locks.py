"""
Per-user serialization.

Intake reads the newest intake set, mutates it and writes it back; promote
and recall follow the same read-modify-write shape. The record store gives
no atomicity, so two requests for the same user could both decide "no
writable set" and each create one. Every such sequence runs under the
user's lock. Users never share a lock.

A lock lives only while someone holds or waits on it, so the registry
stays as small as the number of users with requests in flight.
"""

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator


class UserLockRegistry:
    """One asyncio.Lock per active user id, created on first use."""

    def __init__(self):
        self._locks: dict[str, asyncio.Lock] = {}
        self._users: dict[str, int] = {}

    def get(self, user_id: str) -> asyncio.Lock:
        lock = self._locks.get(user_id)
        if lock is None:
            lock = self._locks[user_id] = asyncio.Lock()
        return lock

    @asynccontextmanager
    async def hold(self, user_id: str) -> AsyncIterator[None]:
        lock = self.get(user_id)
        self._users[user_id] = self._users.get(user_id, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._users[user_id] -= 1
            if not self._users[user_id]:
                del self._users[user_id]
                del self._locks[user_id]

    def __len__(self) -> int:
        return len(self._locks)
