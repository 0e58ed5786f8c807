"""
Per-event lock registry

One asyncio.Lock per key (an event id, or ('venue', venue_id) for
publishing). Capacity mutations and cancellation cascades for the same
event are serialized inside this process; operations on different events
never wait on each other. Row-level `SELECT ... FOR UPDATE` serializes
across processes.
"""

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict, Hashable

from src.platform.exception.exceptions import ConcurrencyConflictError
from src.platform.logging.loguru_io import Logger


class EventLockRegistry:
    def __init__(self, *, timeout_seconds: float = 5.0) -> None:
        self.timeout_seconds = timeout_seconds
        self._locks: Dict[Hashable, asyncio.Lock] = {}
        self._waiters: Dict[Hashable, int] = {}

    def _acquire_entry(self, key: Hashable) -> asyncio.Lock:
        lock = self._locks.get(key)
        if lock is None:
            lock = self._locks[key] = asyncio.Lock()
        self._waiters[key] = self._waiters.get(key, 0) + 1
        return lock

    def _release_entry(self, key: Hashable) -> None:
        remaining = self._waiters.get(key, 1) - 1
        if remaining:
            self._waiters[key] = remaining
            return
        # Keys live only while someone holds or waits on them
        self._waiters.pop(key, None)
        self._locks.pop(key, None)

    @asynccontextmanager
    async def hold(self, key: Hashable) -> AsyncIterator[None]:
        lock = self._acquire_entry(key)
        try:
            try:
                await asyncio.wait_for(lock.acquire(), timeout=self.timeout_seconds)
            except asyncio.TimeoutError:
                Logger.base.warning(f'⏳ [LOCK] key={key} not acquired within {self.timeout_seconds}s')
                raise ConcurrencyConflictError(f'Lock {key!r} is busy, retry the request') from None
            try:
                yield
            finally:
                lock.release()
        finally:
            self._release_entry(key)

    def is_locked(self, key: Hashable) -> bool:
        lock = self._locks.get(key)
        return lock is not None and lock.locked()
