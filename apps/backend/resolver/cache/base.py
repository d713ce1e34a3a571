"""Abstract cache store interface for resolved SKUs.

Contract:
  - get() returns None for unknown or expired keys. On a hit it returns the
    entry as stored, then bumps ``accessed_at`` and ``access_count``.
  - set() upserts: the prior ``access_count`` is carried over and incremented
    (1 for a new key) and both timestamps are reset, restarting the TTL.
  - An entry written at T is live while now - T < ttl.

Read-modify-write on a key is serialized through ``key_lock``. A key holds a
lock only while some coroutine is using it, so misses leave nothing behind.
"""

from __future__ import annotations

import asyncio
import time
import weakref
from abc import ABC, abstractmethod
from typing import Callable, Optional

from resolver.constants import DEFAULT_CACHE_TTL_DAYS
from resolver.models import CacheEntry, CacheStats, NormalizedRecord

DAY_MS = 24 * 60 * 60 * 1000
DEFAULT_TTL_MS = DEFAULT_CACHE_TTL_DAYS * DAY_MS

Clock = Callable[[], int]


def now_ms() -> int:
    return int(time.time() * 1000)


def normalize_key(key: str) -> str:
    return key.strip().upper()


class BaseCacheStore(ABC):
    """Unified interface for cache storage backends."""

    backend_name = "base"

    def __init__(self, ttl_ms: int = DEFAULT_TTL_MS, clock: Optional[Clock] = None) -> None:
        self.ttl_ms = ttl_ms
        self._clock = clock or now_ms
        # Locks live only while a holder or waiter references them
        self._key_locks: weakref.WeakValueDictionary[str, asyncio.Lock] = weakref.WeakValueDictionary()

    def now(self) -> int:
        return self._clock()

    def is_expired(self, created_at: int, now: Optional[int] = None) -> bool:
        current = self.now() if now is None else now
        return current - created_at >= self.ttl_ms

    def key_lock(self, key: str) -> asyncio.Lock:
        lock = self._key_locks.get(key)
        if lock is None:
            lock = asyncio.Lock()
            self._key_locks[key] = lock
        return lock

    @abstractmethod
    async def get(self, key: str) -> CacheEntry | None:
        """Return the live entry for ``key`` and record the access."""

    @abstractmethod
    async def set(
        self,
        key: str,
        record: NormalizedRecord,
        source_name: str,
        confidence: float,
    ) -> None:
        """Upsert the entry for ``key``."""

    @abstractmethod
    async def peek(self, key: str) -> CacheEntry | None:
        """Return the stored entry (expired or not) without touching it."""

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Remove the entry for ``key``."""

    @abstractmethod
    async def stats(self) -> CacheStats:
        """Entry count and entries accessed in the last 24 hours."""

    @abstractmethod
    async def purge_expired(self) -> int:
        """Delete expired entries and return how many were removed."""

    async def close(self) -> None:
        """Release backend resources."""
