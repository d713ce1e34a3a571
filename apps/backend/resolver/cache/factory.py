"""Factory for cache store instantiation from the environment."""

from __future__ import annotations

import os
from typing import Optional

from resolver.cache.base import DAY_MS, BaseCacheStore, Clock
from resolver.constants import DEFAULT_CACHE_TTL_DAYS


def cache_ttl_ms() -> int:
    try:
        days = float(os.getenv("CACHE_TTL_DAYS", str(DEFAULT_CACHE_TTL_DAYS)))
    except ValueError:
        days = DEFAULT_CACHE_TTL_DAYS
    return int(days * DAY_MS)


def create_cache_store(
    backend: Optional[str] = None,
    database_url: Optional[str] = None,
    clock: Optional[Clock] = None,
) -> BaseCacheStore:
    """Instantiate the configured cache backend.

    Args:
        backend: "sql" or "memory". Defaults to CACHE_BACKEND, then "sql".
        database_url: Overrides CACHE_DATABASE_URL for the sql backend.
        clock: Millisecond clock, injectable for tests.
    """
    backend = (backend or os.getenv("CACHE_BACKEND", "sql")).strip().lower()
    ttl_ms = cache_ttl_ms()

    if backend == "memory":
        from resolver.cache.memory import InMemoryCacheStore
        return InMemoryCacheStore(ttl_ms=ttl_ms, clock=clock)

    if backend == "sql":
        from database import create_cache_engine
        from resolver.cache.sql import SqlCacheStore
        return SqlCacheStore(create_cache_engine(database_url), ttl_ms=ttl_ms, clock=clock)

    raise ValueError(f"Unsupported cache backend: {backend!r}")
