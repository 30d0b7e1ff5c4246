"""
Persistence primitives for resources.
"""

from typing import Any, Dict, List, Optional, Sequence, Tuple

from loguru import logger
from sqlalchemy import delete, insert, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import StoreError
from app.core.metrics import time_db_query
from app.db import queries
from app.db.models.resource import Resource, ResourceStatus, utcnow
from app.schemas.resources import SQL_INTEGER_MAX, UPDATABLE_FIELDS, ResourceFilters

TABLE = Resource.__tablename__

# Writes go through Core statements on the table; reads load ORM instances
resources_table = Resource.__table__


class ResourceStore:
    """
    Keyed CRUD operations and query execution over the resources table.

    Every write is committed on its own, so each call is atomic for the single
    row it touches. Driver failures are rolled back and re-raised as
    ``StoreError``.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _fail(self, action: str, exc: SQLAlchemyError) -> StoreError:
        logger.opt(exception=exc).error(f"Database error while trying to {action}: {exc}")
        await self.db.rollback()
        return StoreError(f"Failed to {action}")

    @time_db_query("insert", TABLE)
    async def insert(self, fields: Dict[str, Any]) -> int:
        """Persist a new row and return its id."""
        now = utcnow()
        values = {key: fields[key] for key in UPDATABLE_FIELDS if key in fields}
        values.setdefault("status", ResourceStatus.ACTIVE.value)

        try:
            result = await self.db.execute(insert(resources_table).values(**values, created_at=now, updated_at=now))
            resource_id = result.inserted_primary_key[0]
            await self.db.commit()
        except SQLAlchemyError as e:
            raise await self._fail("create resource", e) from e

        return int(resource_id)

    @time_db_query("select", TABLE)
    async def get_by_id(self, resource_id: int) -> Optional[Resource]:
        if resource_id > SQL_INTEGER_MAX:
            return None
        try:
            result = await self.db.execute(
                select(Resource).where(Resource.id == resource_id).execution_options(populate_existing=True)
            )
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            raise await self._fail("fetch resource", e) from e

    @time_db_query("update", TABLE)
    async def update_by_id(self, resource_id: int, changes: Sequence[Tuple[str, Any]]) -> int:
        """
        Apply ``changes`` as ``(field, value)`` pairs and bump ``updated_at``.

        Returns the number of rows affected.
        """
        values: Dict[str, Any] = {}
        for field, value in changes:
            if field not in UPDATABLE_FIELDS:
                raise ValueError(f"Field {field!r} cannot be updated")
            values[field] = value
        values["updated_at"] = utcnow()
        if resource_id > SQL_INTEGER_MAX:
            return 0

        try:
            result = await self.db.execute(
                update(resources_table).where(resources_table.c.id == resource_id).values(**values)
            )
            await self.db.commit()
        except SQLAlchemyError as e:
            raise await self._fail("update resource", e) from e

        return int(result.rowcount or 0)

    @time_db_query("delete", TABLE)
    async def delete_by_id(self, resource_id: int) -> int:
        if resource_id > SQL_INTEGER_MAX:
            return 0
        try:
            result = await self.db.execute(
                delete(resources_table).where(resources_table.c.id == resource_id)
            )
            await self.db.commit()
        except SQLAlchemyError as e:
            raise await self._fail("delete resource", e) from e

        return int(result.rowcount or 0)

    @time_db_query("select", TABLE)
    async def query(self, filters: ResourceFilters) -> List[Resource]:
        try:
            result = await self.db.execute(queries.build_list_query(filters))
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            raise await self._fail("list resources", e) from e

    @time_db_query("count", TABLE)
    async def count(self, filters: ResourceFilters) -> int:
        try:
            result = await self.db.execute(queries.build_count_query(filters))
            return int(result.scalar_one())
        except SQLAlchemyError as e:
            raise await self._fail("count resources", e) from e

    @time_db_query("aggregate", TABLE)
    async def count_by_status(self) -> Dict[str, int]:
        try:
            result = await self.db.execute(queries.build_status_counts_query())
            return {status: int(total) for status, total in result.all()}
        except SQLAlchemyError as e:
            raise await self._fail("aggregate resources by status", e) from e

    @time_db_query("aggregate", TABLE)
    async def count_by_category(self) -> Dict[str, int]:
        try:
            result = await self.db.execute(queries.build_category_counts_query())
            return {category: int(total) for category, total in result.all()}
        except SQLAlchemyError as e:
            raise await self._fail("aggregate resources by category", e) from e
