"""Async engine and session helpers for the durable SKU cache."""

import logging
import os
from pathlib import Path
from typing import Optional

from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import create_async_engine, AsyncEngine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import NullPool, StaticPool

logger = logging.getLogger(__name__)

DEFAULT_CACHE_DATABASE_URL = "sqlite+aiosqlite:///./data/cache.db"


def resolve_database_url(url: Optional[str] = None) -> str:
    """Pick the cache database URL and force an async driver."""
    database_url = url or os.getenv("CACHE_DATABASE_URL") or DEFAULT_CACHE_DATABASE_URL

    # Ensure asyncpg driver is used in the connection string
    if database_url.startswith("postgres://"):
        database_url = database_url.replace("postgres://", "postgresql+asyncpg://", 1)
    elif database_url.startswith("postgresql://"):
        database_url = database_url.replace("postgresql://", "postgresql+asyncpg://", 1)
    elif database_url.startswith("sqlite:///"):
        database_url = database_url.replace("sqlite:///", "sqlite+aiosqlite:///", 1)

    return database_url


# Echo SQL queries (for debugging only - disable in production)
ECHO_SQL = os.getenv("DB_ECHO", "false").lower() == "true"

# Pool settings only apply to server databases
POOL_SIZE = int(os.getenv("DB_POOL_SIZE", "5"))
MAX_OVERFLOW = int(os.getenv("DB_MAX_OVERFLOW", "10"))
POOL_RECYCLE = int(os.getenv("DB_POOL_RECYCLE", "3600"))
USE_NULL_POOL = os.getenv("DB_USE_NULL_POOL", "false").lower() == "true"


def create_cache_engine(url: Optional[str] = None) -> AsyncEngine:
    database_url = resolve_database_url(url)
    parsed = make_url(database_url)

    engine_kwargs = {"echo": ECHO_SQL, "future": True}

    if parsed.get_backend_name() == "sqlite":
        database = parsed.database or ""
        if database in ("", ":memory:"):
            # One shared connection, otherwise each session sees an empty database
            engine_kwargs["poolclass"] = StaticPool
            engine_kwargs["connect_args"] = {"check_same_thread": False}
        else:
            Path(database).expanduser().parent.mkdir(parents=True, exist_ok=True)
    elif USE_NULL_POOL:
        engine_kwargs["poolclass"] = NullPool
    else:
        engine_kwargs["pool_pre_ping"] = True
        engine_kwargs["pool_recycle"] = POOL_RECYCLE
        engine_kwargs["pool_size"] = POOL_SIZE
        engine_kwargs["max_overflow"] = MAX_OVERFLOW

    logger.info(f"Cache database backend: {parsed.get_backend_name()}")
    return create_async_engine(database_url, **engine_kwargs)


async def init_db(engine: AsyncEngine) -> None:
    # Import registers the table on SQLModel.metadata
    import models  # noqa: F401

    async with engine.begin() as conn:
        # This creates tables if they don't exist
        await conn.run_sync(SQLModel.metadata.create_all)


def get_session_factory(engine: AsyncEngine) -> sessionmaker:
    return sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
