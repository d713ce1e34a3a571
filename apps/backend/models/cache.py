"""Persisted SKU resolution cache."""

from typing import Any, Optional

import sqlalchemy as sa
from sqlmodel import Field, SQLModel, Column


class SkuCache(SQLModel, table=True):
    """
    One resolved SKU, keyed by its normalized identifier.

    Timestamps are epoch milliseconds. A row is logically dead once
    now - created_at reaches the configured TTL; readers skip it rather
    than deleting it.
    """
    __tablename__ = "sku_cache"

    sku: str = Field(primary_key=True)

    brand: Optional[str] = None
    name: Optional[str] = None
    model: Optional[str] = None
    colorway: Optional[str] = None
    category: Optional[str] = None

    source: str = "unknown"
    confidence: float = 0.0
    raw_data: Optional[Any] = Field(default=None, sa_column=Column(sa.JSON, nullable=True))

    created_at: int = Field(sa_column=Column(sa.BigInteger, nullable=False))
    accessed_at: int = Field(sa_column=Column(sa.BigInteger, nullable=False, index=True))
    access_count: int = 1
