"""In-process cache store (CACHE_BACKEND=memory).

Shared by every resolution in the process; state is lost on restart.
"""

from __future__ import annotations

import logging
from typing import Dict, Optional

from resolver.cache.base import DAY_MS, BaseCacheStore, Clock, DEFAULT_TTL_MS, normalize_key
from resolver.models import CacheEntry, CacheStats, NormalizedRecord

logger = logging.getLogger(__name__)


class InMemoryCacheStore(BaseCacheStore):
    backend_name = "memory"

    def __init__(self, ttl_ms: int = DEFAULT_TTL_MS, clock: Optional[Clock] = None) -> None:
        super().__init__(ttl_ms=ttl_ms, clock=clock)
        self._entries: Dict[str, CacheEntry] = {}

    async def get(self, key: str) -> CacheEntry | None:
        key = normalize_key(key)
        # No await between read and touch, so the hit is atomic on the loop
        entry = self._entries.get(key)
        if entry is None:
            return None
        now = self.now()
        if self.is_expired(entry.created_at, now):
            return None

        snapshot = entry.model_copy(deep=True)
        entry.accessed_at = now
        entry.access_count += 1
        return snapshot

    async def set(
        self,
        key: str,
        record: NormalizedRecord,
        source_name: str,
        confidence: float,
    ) -> None:
        key = normalize_key(key)
        async with self.key_lock(key):
            prior = self._entries.get(key)
            now = self.now()
            self._entries[key] = CacheEntry(
                key=key,
                record=record.model_copy(),
                source_name=source_name or "unknown",
                confidence=confidence,
                created_at=now,
                accessed_at=now,
                access_count=(prior.access_count + 1) if prior else 1,
            )
        logger.debug(f"[InMemoryCacheStore] Cached {key} from {source_name} ({confidence:.2f})")

    async def peek(self, key: str) -> CacheEntry | None:
        entry = self._entries.get(normalize_key(key))
        return entry.model_copy(deep=True) if entry else None

    async def delete(self, key: str) -> None:
        key = normalize_key(key)
        async with self.key_lock(key):
            self._entries.pop(key, None)

    async def stats(self) -> CacheStats:
        since = self.now() - DAY_MS
        recent = sum(1 for entry in self._entries.values() if entry.accessed_at > since)
        return CacheStats(total=len(self._entries), recent_hits=recent)

    async def purge_expired(self) -> int:
        now = self.now()
        expired = [key for key, entry in self._entries.items() if self.is_expired(entry.created_at, now)]
        for key in expired:
            self._entries.pop(key, None)
        return len(expired)
