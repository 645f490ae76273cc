"""Per-key asyncio locks, used to serialize payment writes for the same student."""

import asyncio
import weakref
from contextlib import asynccontextmanager
from typing import AsyncIterator, Hashable


class KeyedLocks:
    """
    One asyncio.Lock per key, created on demand.

    Entries are weakly held: a lock disappears once no coroutine holds or waits
    on it, so the registry does not grow with the number of students.
    Only serializes within one process; cross-process safety comes from the
    row lock taken in the same transaction.
    """

    def __init__(self) -> None:
        self._locks: "weakref.WeakValueDictionary[Hashable, asyncio.Lock]" = weakref.WeakValueDictionary()

    def _get(self, key: Hashable) -> asyncio.Lock:
        lock = self._locks.get(key)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[key] = lock
        return lock

    @asynccontextmanager
    async def hold(self, key: Hashable) -> AsyncIterator[None]:
        lock = self._get(key)
        async with lock:
            yield

    def __len__(self) -> int:
        return len(self._locks)


student_payment_locks = KeyedLocks()
