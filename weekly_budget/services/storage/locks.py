"""
Per-key async locks.

Ledger documents are rewritten whole (read, modify, write). Two such
cycles on the same key must not overlap or the second silently discards
the first one's change. KeyedLock serializes them per key while letting
unrelated keys proceed.
"""

import asyncio
from contextlib import AsyncExitStack, asynccontextmanager
from typing import AsyncIterator


class KeyedLock:
    """
    One asyncio.Lock per storage key, created on first use.

    Locks requested together are always taken in sorted key order, so two
    multi-key sections cannot deadlock each other.
    """

    def __init__(self):
        self._locks: dict[str, asyncio.Lock] = {}

    def _lock_for(self, key: str) -> asyncio.Lock:
        return self._locks.setdefault(key, asyncio.Lock())

    def locked(self, key: str) -> bool:
        lock = self._locks.get(key)
        return lock is not None and lock.locked()

    @asynccontextmanager
    async def hold(self, *keys: str) -> AsyncIterator[None]:
        async with AsyncExitStack() as stack:
            for key in sorted(set(keys)):
                await stack.enter_async_context(self._lock_for(key))
            yield
