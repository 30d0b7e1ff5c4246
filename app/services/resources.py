"""Business logic for resources."""

from typing import Any, Mapping, Tuple

from loguru import logger

from app.core.exceptions import NotFoundError, StoreError
from app.core.metrics import record_resource_event
from app.db.models.resource import Resource, ResourceStatus
from app.db.store import ResourceStore
from app.schemas.resources import (
    PaginatedResources,
    ResourceResponse,
    ResourceStats,
    StatusCounts,
)
from app.services.validation import validate_create, validate_id, validate_list_query, validate_update


class ResourceService:
    """Service for resource-related operations."""

    def __init__(self, store: ResourceStore):
        """Initialize with the resource store."""
        self.store = store

    async def _get_existing(self, resource_id: int) -> Resource:
        resource = await self.store.get_by_id(resource_id)
        if resource is None:
            logger.warning(f"Resource with ID {resource_id} not found")
            raise NotFoundError(f"Resource with ID {resource_id} not found")
        return resource

    async def create_resource(self, payload: Any) -> ResourceResponse:
        """Create a new resource."""
        data = validate_create(payload)

        fields = data.model_dump(exclude_unset=True)
        fields["status"] = data.status.value

        resource_id = await self.store.insert(fields)
        resource = await self._get_existing(resource_id)

        logger.info(f"Created new resource with ID {resource_id}")
        record_resource_event("created")
        return ResourceResponse.model_validate(resource)

    async def list_resources(self, query: Mapping[str, Any]) -> PaginatedResources:
        """Get a page of resources matching the query filters."""
        filters = validate_list_query(query)

        total = await self.store.count(filters)
        resources = await self.store.query(filters)

        return PaginatedResources(
            data=[ResourceResponse.model_validate(r) for r in resources],
            total=total,
            limit=filters.limit,
            offset=filters.offset,
            has_next=filters.offset + filters.limit < total,
            has_prev=filters.offset > 0,
        )

    async def get_resource(self, raw_id: Any) -> ResourceResponse:
        """Get a specific resource by ID."""
        resource_id = validate_id(raw_id)
        resource = await self._get_existing(resource_id)
        return ResourceResponse.model_validate(resource)

    async def update_resource(self, raw_id: Any, payload: Any) -> Tuple[ResourceResponse, bool]:
        """
        Apply a partial update.

        Returns the resource and whether anything changed. Sending values equal
        to the stored ones leaves the row, including ``updated_at``, untouched.
        """
        resource_id = validate_id(raw_id)
        data = validate_update(payload)

        existing = await self._get_existing(resource_id)

        changes = [(field, value) for field, value in data.changes().items() if getattr(existing, field) != value]
        if not changes:
            logger.info(f"No changes to apply to resource with ID {resource_id}")
            return ResourceResponse.model_validate(existing), False

        await self.store.update_by_id(resource_id, changes)
        resource = await self._get_existing(resource_id)

        logger.info(f"Updated resource with ID {resource_id}: {', '.join(field for field, _ in changes)}")
        record_resource_event("updated")
        return ResourceResponse.model_validate(resource), True

    async def delete_resource(self, raw_id: Any) -> ResourceResponse:
        """Delete a resource and return its last state."""
        resource_id = validate_id(raw_id)
        snapshot = ResourceResponse.model_validate(await self._get_existing(resource_id))

        if await self.store.delete_by_id(resource_id) == 0:
            raise StoreError("Failed to delete resource")

        logger.info(f"Deleted resource with ID {resource_id}")
        record_resource_event("deleted")
        return snapshot

    async def get_stats(self) -> ResourceStats:
        """Aggregate counts by status and category."""
        by_status = await self.store.count_by_status()
        by_category = await self.store.count_by_category()

        # status is NOT NULL, so the per-status counts partition the table
        status_counts = StatusCounts(**{s.value: by_status.get(s.value, 0) for s in ResourceStatus})
        return ResourceStats(
            total=status_counts.active + status_counts.inactive + status_counts.archived,
            by_status=status_counts,
            by_category=by_category,
        )
