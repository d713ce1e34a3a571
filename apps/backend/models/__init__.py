"""
Persistence models.

- cache.py: SkuCache table backing the durable resolution cache
"""

from models.cache import SkuCache

__all__ = ["SkuCache"]
