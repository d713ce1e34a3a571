"""SQL-backed cache store (CACHE_BACKEND=sql).

Persists entries in the ``sku_cache`` table through an async SQLAlchemy
engine. SQLite (aiosqlite) by default, Postgres (asyncpg) in production.
The hit counter is bumped with a single UPDATE so concurrent readers never
lose increments; upserts are serialized per key within the process.
"""

from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy import func, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine
from sqlmodel import delete, select

from database import get_session_factory, init_db
from exceptions import CacheStoreError
from models.cache import SkuCache
from resolver.cache.base import DAY_MS, BaseCacheStore, Clock, DEFAULT_TTL_MS, normalize_key
from resolver.models import CacheEntry, CacheStats, NormalizedRecord

logger = logging.getLogger(__name__)


def _row_to_entry(row: SkuCache) -> CacheEntry:
    return CacheEntry(
        key=row.sku,
        record=NormalizedRecord(
            brand=row.brand,
            name=row.name,
            model=row.model,
            colorway=row.colorway,
            category=row.category or NormalizedRecord().category,
        ),
        source_name=row.source,
        confidence=row.confidence,
        created_at=row.created_at,
        accessed_at=row.accessed_at,
        access_count=row.access_count,
    )


class SqlCacheStore(BaseCacheStore):
    backend_name = "sql"

    def __init__(
        self,
        engine: AsyncEngine,
        ttl_ms: int = DEFAULT_TTL_MS,
        clock: Optional[Clock] = None,
    ) -> None:
        super().__init__(ttl_ms=ttl_ms, clock=clock)
        self._engine = engine
        self._session_factory = get_session_factory(engine)

    async def init_schema(self) -> None:
        await init_db(self._engine)

    async def get(self, key: str) -> CacheEntry | None:
        key = normalize_key(key)
        try:
            async with self._session_factory() as session:
                row = await session.get(SkuCache, key)
                if row is None:
                    return None
                now = self.now()
                if self.is_expired(row.created_at, now):
                    return None

                entry = _row_to_entry(row)
                await session.exec(
                    update(SkuCache)
                    .where(SkuCache.sku == key)
                    .values(accessed_at=now, access_count=SkuCache.access_count + 1)
                )
                await session.commit()
                return entry
        except SQLAlchemyError as e:
            logger.error(f"[SqlCacheStore] Read failed for {key}: {e}")
            raise CacheStoreError("Cache read failed", detail={"key": key}) from e

    async def set(
        self,
        key: str,
        record: NormalizedRecord,
        source_name: str,
        confidence: float,
    ) -> None:
        key = normalize_key(key)
        source_name = source_name or "unknown"
        try:
            async with self.key_lock(key):
                async with self._session_factory() as session:
                    now = self.now()
                    row = await session.get(SkuCache, key)
                    if row is None:
                        row = SkuCache(sku=key, created_at=now, accessed_at=now, access_count=1)
                    else:
                        row.created_at = now
                        row.accessed_at = now
                        row.access_count = row.access_count + 1

                    row.brand = record.brand
                    row.name = record.name
                    row.model = record.model
                    row.colorway = record.colorway
                    row.category = record.category
                    row.source = source_name
                    row.confidence = confidence
                    row.raw_data = {
                        **record.model_dump(),
                        "source": source_name,
                        "confidence": confidence,
                    }

                    session.add(row)
                    await session.commit()
        except SQLAlchemyError as e:
            logger.error(f"[SqlCacheStore] Write failed for {key}: {e}")
            raise CacheStoreError("Cache write failed", detail={"key": key}) from e

    async def peek(self, key: str) -> CacheEntry | None:
        key = normalize_key(key)
        try:
            async with self._session_factory() as session:
                row = await session.get(SkuCache, key)
                return _row_to_entry(row) if row else None
        except SQLAlchemyError as e:
            logger.error(f"[SqlCacheStore] Peek failed for {key}: {e}")
            raise CacheStoreError("Cache read failed", detail={"key": key}) from e

    async def delete(self, key: str) -> None:
        key = normalize_key(key)
        try:
            async with self.key_lock(key):
                async with self._session_factory() as session:
                    await session.exec(delete(SkuCache).where(SkuCache.sku == key))
                    await session.commit()
        except SQLAlchemyError as e:
            logger.error(f"[SqlCacheStore] Delete failed for {key}: {e}")
            raise CacheStoreError("Cache delete failed", detail={"key": key}) from e

    async def stats(self) -> CacheStats:
        since = self.now() - DAY_MS
        try:
            async with self._session_factory() as session:
                total = (await session.exec(select(func.count()).select_from(SkuCache))).one()
                recent = (
                    await session.exec(
                        select(func.count()).select_from(SkuCache).where(SkuCache.accessed_at > since)
                    )
                ).one()
        except SQLAlchemyError as e:
            logger.error(f"[SqlCacheStore] Stats query failed: {e}")
            raise CacheStoreError("Cache stats failed") from e
        return CacheStats(total=total, recent_hits=recent)

    async def purge_expired(self) -> int:
        # Entries created at or before the cutoff are past their TTL
        cutoff = self.now() - self.ttl_ms
        try:
            async with self._session_factory() as session:
                result = await session.exec(delete(SkuCache).where(SkuCache.created_at <= cutoff))
                await session.commit()
        except SQLAlchemyError as e:
            logger.error(f"[SqlCacheStore] Purge failed: {e}")
            raise CacheStoreError("Cache purge failed", detail={"cutoff": cutoff}) from e
        removed = result.rowcount or 0
        if removed:
            logger.info(f"[SqlCacheStore] Purged {removed} expired entries")
        return removed

    async def close(self) -> None:
        await self._engine.dispose()
