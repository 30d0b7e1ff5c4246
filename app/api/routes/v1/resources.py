"""
Resource CRUD endpoints.
"""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, Path, Query

from app.api.dependencies import get_resource_service
from app.api.responses import (
    HTTP_201_CREATED,
    DataResponseModel,
    PaginatedResponseModel,
    ResponseMessage,
    default_error_responses,
    not_found_error_responses,
)
from app.schemas.resources import ResourceResponse, ResourceStats
from app.services.resources import ResourceService

router = APIRouter()

BODY_EXAMPLE = {"name": "Test Resource", "description": "A test resource", "category": "test", "status": "active"}
ID_DESCRIPTION = "Resource ID (positive integer)"


@router.post(
    "/resources",
    response_model=DataResponseModel[ResourceResponse],
    status_code=HTTP_201_CREATED,
    summary="Create a resource",
    responses=default_error_responses,
)
async def create_resource(
    payload: Any = Body(None, examples=[BODY_EXAMPLE]),
    service: ResourceService = Depends(get_resource_service),
) -> DataResponseModel[ResourceResponse]:
    """Create a resource. ``status`` defaults to ``active``."""
    resource = await service.create_resource(payload)
    return DataResponseModel[ResourceResponse](message=ResponseMessage.RESOURCE_CREATED, data=resource)


@router.get(
    "/resources",
    response_model=PaginatedResponseModel,
    summary="List resources",
    description="Filter by category, status or a search term; sort and paginate the results.",
    responses=default_error_responses,
)
async def list_resources(
    category: Optional[str] = Query(None, description="Exact category match"),
    status: Optional[str] = Query(None, description="One of active, inactive, archived"),
    search: Optional[str] = Query(None, description="Substring of name or description"),
    limit: Optional[str] = Query(None, description="Page size, 1 to 100 (default 10)"),
    offset: Optional[str] = Query(None, description="Rows to skip (default 0)"),
    sort_by: Optional[str] = Query(
        None, alias="sortBy", description="id, name, category, status, created_at or updated_at"
    ),
    sort_order: Optional[str] = Query(None, alias="sortOrder", description="ASC or DESC"),
    service: ResourceService = Depends(get_resource_service),
) -> PaginatedResponseModel:
    """List resources matching the given filters."""
    params: Dict[str, Any] = {
        "category": category,
        "status": status,
        "search": search,
        "limit": limit,
        "offset": offset,
        "sortBy": sort_by,
        "sortOrder": sort_order,
    }
    page = await service.list_resources({key: value for key, value in params.items() if value is not None})
    return PaginatedResponseModel(
        message=ResponseMessage.RESOURCES_RETRIEVED,
        data=page.data,
        total=page.total,
        limit=page.limit,
        offset=page.offset,
        has_next=page.has_next,
        has_prev=page.has_prev,
    )


@router.get(
    "/resources/stats",
    response_model=DataResponseModel[ResourceStats],
    summary="Resource statistics",
    responses=default_error_responses,
)
async def get_resource_stats(
    service: ResourceService = Depends(get_resource_service),
) -> DataResponseModel[ResourceStats]:
    """Totals by status and by category."""
    stats = await service.get_stats()
    return DataResponseModel[ResourceStats](message=ResponseMessage.STATS_RETRIEVED, data=stats)


@router.get(
    "/resources/{resource_id}",
    response_model=DataResponseModel[ResourceResponse],
    summary="Get a resource",
    responses=not_found_error_responses,
)
async def get_resource(
    resource_id: str = Path(..., description=ID_DESCRIPTION),
    service: ResourceService = Depends(get_resource_service),
) -> DataResponseModel[ResourceResponse]:
    resource = await service.get_resource(resource_id)
    return DataResponseModel[ResourceResponse](message=ResponseMessage.RESOURCE_RETRIEVED, data=resource)


@router.put(
    "/resources/{resource_id}",
    response_model=DataResponseModel[ResourceResponse],
    summary="Update a resource",
    description="Partial update: only the fields present in the body are changed.",
    responses=not_found_error_responses,
)
async def update_resource(
    resource_id: str = Path(..., description=ID_DESCRIPTION),
    payload: Any = Body(None, examples=[BODY_EXAMPLE]),
    service: ResourceService = Depends(get_resource_service),
) -> DataResponseModel[ResourceResponse]:
    resource, changed = await service.update_resource(resource_id, payload)
    message = ResponseMessage.RESOURCE_UPDATED if changed else ResponseMessage.RESOURCE_UNCHANGED
    return DataResponseModel[ResourceResponse](message=message, data=resource)


@router.delete(
    "/resources/{resource_id}",
    response_model=DataResponseModel[ResourceResponse],
    summary="Delete a resource",
    description="Deletes the resource and returns its state before deletion.",
    responses=not_found_error_responses,
)
async def delete_resource(
    resource_id: str = Path(..., description=ID_DESCRIPTION),
    service: ResourceService = Depends(get_resource_service),
) -> DataResponseModel[ResourceResponse]:
    resource = await service.delete_resource(resource_id)
    return DataResponseModel[ResourceResponse](message=ResponseMessage.RESOURCE_DELETED, data=resource)
