"""
Standardized API response models.

Successful responses share the ``{"success": true, "message": ..., "data": ...}``
shape; failures use ``{"success": false, "error": {"message": ...}}``.
"""

from typing import Any, Generic, List, Optional, TypeVar

from fastapi import status
from pydantic import BaseModel, ConfigDict, Field

from app.schemas.resources import ResourceResponse

# Type variable for generic response models
T = TypeVar("T")


class ResponseMessage:
    """Messages returned alongside successful responses."""

    RESOURCE_CREATED = "Resource created successfully"
    RESOURCES_RETRIEVED = "Resources retrieved successfully"
    RESOURCE_RETRIEVED = "Resource retrieved successfully"
    RESOURCE_UPDATED = "Resource updated successfully"
    RESOURCE_UNCHANGED = "No changes to update"
    RESOURCE_DELETED = "Resource deleted successfully"
    STATS_RETRIEVED = "Resource statistics retrieved successfully"


class DataResponseModel(BaseModel, Generic[T]):
    """Generic response model with data."""

    success: bool = Field(True, description="Whether the request succeeded")
    message: str = Field(..., description="Response message")
    data: T = Field(..., description="Response data")


class PaginatedResponseModel(BaseModel):
    """A page of resources with pagination metadata at the top level."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool = Field(True, description="Whether the request succeeded")
    message: str = Field(..., description="Response message")
    data: List[ResourceResponse] = Field(..., description="Resources on this page")
    total: int = Field(..., description="Rows matching the filters")
    limit: int = Field(..., description="Page size")
    offset: int = Field(..., description="Rows skipped")
    has_next: bool = Field(..., alias="hasNext", description="Whether a later page exists")
    has_prev: bool = Field(..., alias="hasPrev", description="Whether an earlier page exists")


class ErrorDetail(BaseModel):
    message: str = Field(..., description="Human-readable error message")
    detail: Optional[str] = Field(None, description="Diagnostic detail, development only")


class ErrorResponseModel(BaseModel):
    """Base model for error responses."""

    success: bool = Field(False, description="Always false for errors")
    error: ErrorDetail


def error_body(message: str, detail: Optional[str] = None) -> dict[str, Any]:
    """Build the JSON body for an error response."""
    error: dict[str, Any] = {"message": message}
    if detail is not None:
        error["detail"] = detail
    return {"success": False, "error": error}


# Export HTTP status codes for easier route definitions
HTTP_201_CREATED = status.HTTP_201_CREATED
HTTP_400_BAD_REQUEST = status.HTTP_400_BAD_REQUEST
HTTP_404_NOT_FOUND = status.HTTP_404_NOT_FOUND
HTTP_500_INTERNAL_SERVER_ERROR = status.HTTP_500_INTERNAL_SERVER_ERROR


class Tags:
    """API route tags for documentation grouping."""

    HEALTH = "Health"
    RESOURCES = "Resources"


default_error_responses: dict[int | str, dict[str, Any]] = {
    HTTP_400_BAD_REQUEST: {
        "model": ErrorResponseModel,
        "description": "Bad Request – Invalid input",
    },
    HTTP_500_INTERNAL_SERVER_ERROR: {
        "model": ErrorResponseModel,
        "description": "Internal Error – Unexpected server failure",
    },
}

not_found_error_responses: dict[int | str, dict[str, Any]] = {
    **default_error_responses,
    HTTP_404_NOT_FOUND: {
        "model": ErrorResponseModel,
        "description": "Not Found – No resource with this ID",
    },
}
