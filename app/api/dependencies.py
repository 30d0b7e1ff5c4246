"""
FastAPI API dependencies.
"""

from typing import AsyncGenerator

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.session import async_session_factory
from app.db.store import ResourceStore
from app.services.resources import ResourceService


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency for getting an async database session.
    """
    async with async_session_factory() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise


def get_resource_store(db: AsyncSession = Depends(get_db_session)) -> ResourceStore:
    return ResourceStore(db)


def get_resource_service(store: ResourceStore = Depends(get_resource_store)) -> ResourceService:
    """
    Dependency providing a resource service bound to the request's session.
    """
    return ResourceService(store)
