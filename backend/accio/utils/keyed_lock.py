"""
Per-key asyncio locks.

Entries are created on first use and dropped once no coroutine holds or
waits on them, so the table stays proportional to in-flight work.
"""

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict, Tuple


class KeyedLock:
    """A table of asyncio.Lock objects addressed by string key."""

    def __init__(self) -> None:
        self._locks: Dict[str, Tuple[asyncio.Lock, int]] = {}

    @asynccontextmanager
    async def hold(self, key: str) -> AsyncIterator[None]:
        lock, users = self._locks.get(key, (None, 0))
        if lock is None:
            lock = asyncio.Lock()
        self._locks[key] = (lock, users + 1)
        try:
            async with lock:
                yield
        finally:
            lock, users = self._locks[key]
            if users <= 1:
                del self._locks[key]
            else:
                self._locks[key] = (lock, users - 1)

    def __len__(self) -> int:
        return len(self._locks)
