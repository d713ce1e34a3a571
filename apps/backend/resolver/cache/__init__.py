"""Cache stores for resolved SKUs."""

from resolver.cache.base import BaseCacheStore, DAY_MS, DEFAULT_TTL_MS, normalize_key, now_ms
from resolver.cache.factory import create_cache_store
from resolver.cache.memory import InMemoryCacheStore

__all__ = [
    "BaseCacheStore",
    "DAY_MS",
    "DEFAULT_TTL_MS",
    "InMemoryCacheStore",
    "create_cache_store",
    "normalize_key",
    "now_ms",
]
