"""
Database session configuration.
"""

import os
from typing import Any, Dict

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import StaticPool

from app.core.config import settings

if "PYTEST_CURRENT_TEST" in os.environ:
    DATABASE_URL = os.getenv("TEST_DATABASE_URL") or settings.DATABASE_URI
else:
    DATABASE_URL = settings.DATABASE_URI


def build_engine(url: str, echo: bool = False) -> AsyncEngine:
    """
    Create an async engine for the given URL.

    In-memory SQLite databases live inside a single connection, so they are
    pinned to a StaticPool.
    """
    kwargs: Dict[str, Any] = {"echo": echo}
    if url.startswith("sqlite") and ":memory:" in url:
        kwargs["poolclass"] = StaticPool
    else:
        kwargs["pool_pre_ping"] = True
    return create_async_engine(url, **kwargs)


def build_session_factory(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind=bind,
        expire_on_commit=False,
        autoflush=False,
        class_=AsyncSession,
    )


engine = build_engine(DATABASE_URL, echo=settings.DB_ECHO)

async_session_factory = build_session_factory(engine)

# Base class for all models
Base = declarative_base()


async def init_models(bind: AsyncEngine = engine) -> None:
    """
    Create all tables that do not exist yet.
    """
    # Make sure every model is registered on Base.metadata
    import app.db.models  # noqa: F401

    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
