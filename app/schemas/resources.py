"""
Pydantic schemas for the resources resource.

Input schemas carry the validation rules. Every rule raises a
``PydanticCustomError`` whose message is surfaced to the client verbatim, so
the wording here is part of the API.
"""

import re
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic_core import PydanticCustomError

from app.core.config import settings
from app.db.models.resource import ResourceStatus

NAME_MAX_LENGTH = 255
DESCRIPTION_MAX_LENGTH = 1000
CATEGORY_MAX_LENGTH = 100

STATUS_VALUES = tuple(s.value for s in ResourceStatus)
UPDATABLE_FIELDS = ("name", "description", "category", "status")

_INTEGER_RE = re.compile(r"[+-]?[0-9]+")

# Largest value an SQLite INTEGER column can bind
SQL_INTEGER_MAX = 2**63 - 1


class SortField(str, Enum):
    """
    Columns a resource listing may be sorted by.
    """

    ID = "id"
    NAME = "name"
    CATEGORY = "category"
    STATUS = "status"
    CREATED_AT = "created_at"
    UPDATED_AT = "updated_at"


class SortOrder(str, Enum):
    ASC = "ASC"
    DESC = "DESC"


def _fail(error_type: str, message: str) -> PydanticCustomError:
    return PydanticCustomError(error_type, message)


def _check_name(value: Any, message: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise _fail("name_invalid", message)
    value = value.strip()
    if len(value) > NAME_MAX_LENGTH:
        raise _fail("name_too_long", f"Name must be at most {NAME_MAX_LENGTH} characters")
    return value


def _check_text(value: Any, label: str, max_length: int) -> str:
    if not isinstance(value, str):
        raise _fail(f"{label.lower()}_type", f"{label} must be a string")
    value = value.strip()
    if len(value) > max_length:
        raise _fail(f"{label.lower()}_too_long", f"{label} must be at most {max_length} characters")
    return value


def _check_status(value: Any) -> str:
    if not isinstance(value, str) or value not in STATUS_VALUES:
        raise _fail("status_invalid", f"Status must be one of: {', '.join(STATUS_VALUES)}")
    return value


def _parse_integer(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and _INTEGER_RE.fullmatch(value.strip()):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


class ResourceCreate(BaseModel):
    """
    Schema for creating a new resource.
    """

    model_config = ConfigDict(extra="ignore")

    name: str = Field(..., description="Resource name")
    description: Optional[str] = Field(None, description="Resource description")
    category: Optional[str] = Field(None, description="Resource category")
    status: ResourceStatus = Field(default=ResourceStatus.ACTIVE, description="Resource status")

    @model_validator(mode="before")
    @classmethod
    def require_name(cls, data: Any) -> Any:
        if isinstance(data, dict) and "name" not in data:
            raise _fail("name_invalid", "Name is required and must be a non-empty string")
        return data

    @field_validator("name", mode="before")
    @classmethod
    def validate_name(cls, v: Any) -> str:
        return _check_name(v, "Name is required and must be a non-empty string")

    @field_validator("description", mode="before")
    @classmethod
    def validate_description(cls, v: Any) -> str:
        return _check_text(v, "Description", DESCRIPTION_MAX_LENGTH)

    @field_validator("category", mode="before")
    @classmethod
    def validate_category(cls, v: Any) -> str:
        return _check_text(v, "Category", CATEGORY_MAX_LENGTH)

    @field_validator("status", mode="before")
    @classmethod
    def validate_status(cls, v: Any) -> str:
        return _check_status(v)


class ResourceUpdate(BaseModel):
    """
    Schema for a partial update. Only the fields that were sent are applied.
    """

    model_config = ConfigDict(extra="ignore")

    name: Optional[str] = Field(None, description="Resource name")
    description: Optional[str] = Field(None, description="Resource description")
    category: Optional[str] = Field(None, description="Resource category")
    status: Optional[ResourceStatus] = Field(None, description="Resource status")

    @model_validator(mode="before")
    @classmethod
    def require_any_field(cls, data: Any) -> Any:
        if isinstance(data, dict) and not any(field in data for field in UPDATABLE_FIELDS):
            raise _fail("empty_update", "At least one field must be provided for update")
        return data

    @field_validator("name", mode="before")
    @classmethod
    def validate_name(cls, v: Any) -> str:
        return _check_name(v, "Name must be a non-empty string")

    @field_validator("description", mode="before")
    @classmethod
    def validate_description(cls, v: Any) -> str:
        return _check_text(v, "Description", DESCRIPTION_MAX_LENGTH)

    @field_validator("category", mode="before")
    @classmethod
    def validate_category(cls, v: Any) -> str:
        return _check_text(v, "Category", CATEGORY_MAX_LENGTH)

    @field_validator("status", mode="before")
    @classmethod
    def validate_status(cls, v: Any) -> str:
        return _check_status(v)

    def changes(self) -> Dict[str, Any]:
        """Fields supplied by the caller, with enums reduced to their values."""
        return {
            key: value.value if isinstance(value, Enum) else value
            for key, value in self.model_dump(exclude_unset=True).items()
        }


class ResourceFilters(BaseModel):
    """
    Normalized filter plan driving list and count queries.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    category: Optional[str] = Field(None, description="Exact category match")
    status: Optional[ResourceStatus] = Field(None, description="Exact status match")
    search: Optional[str] = Field(None, description="Substring of name or description")
    limit: int = Field(default_factory=lambda: settings.DEFAULT_PAGE_LIMIT, description="Page size")
    offset: int = Field(0, description="Rows to skip")
    sort_by: SortField = Field(SortField.ID, alias="sortBy", description="Sort column")
    sort_order: SortOrder = Field(SortOrder.ASC, alias="sortOrder", description="Sort direction")

    @field_validator("category", "search", mode="before")
    @classmethod
    def blank_as_missing(cls, v: Any) -> Optional[str]:
        if v is None:
            return None
        v = str(v).strip()
        return v or None

    @field_validator("status", mode="before")
    @classmethod
    def validate_status(cls, v: Any) -> Optional[str]:
        if v is None or v == "":
            return None
        return _check_status(v)

    @field_validator("limit", mode="before")
    @classmethod
    def validate_limit(cls, v: Any) -> int:
        limit = _parse_integer(v)
        if limit is None or not 1 <= limit <= settings.MAX_PAGE_LIMIT:
            raise _fail(
                "limit_invalid",
                f"Limit must be a positive integer between 1 and {settings.MAX_PAGE_LIMIT}",
            )
        return limit

    @field_validator("offset", mode="before")
    @classmethod
    def validate_offset(cls, v: Any) -> int:
        offset = _parse_integer(v)
        if offset is None or not 0 <= offset <= SQL_INTEGER_MAX:
            raise _fail("offset_invalid", "Offset must be a non-negative integer")
        return offset

    @field_validator("sort_by", mode="before")
    @classmethod
    def validate_sort_by(cls, v: Any) -> str:
        if v is None or v == "":
            return SortField.ID.value
        allowed = [f.value for f in SortField]
        if not isinstance(v, str) or v not in allowed:
            raise _fail("sort_by_invalid", f"SortBy must be one of: {', '.join(allowed)}")
        return v

    @field_validator("sort_order", mode="before")
    @classmethod
    def validate_sort_order(cls, v: Any) -> str:
        if v is None or v == "":
            return SortOrder.ASC.value
        if not isinstance(v, str) or v.upper() not in (SortOrder.ASC.value, SortOrder.DESC.value):
            raise _fail("sort_order_invalid", "SortOrder must be either ASC or DESC")
        return v.upper()


class ResourceResponse(BaseModel):
    """
    Schema for resource response.
    """

    id: int = Field(..., description="Resource ID")
    name: str = Field(..., description="Resource name")
    description: Optional[str] = Field(None, description="Resource description")
    category: Optional[str] = Field(None, description="Resource category")
    status: ResourceStatus = Field(..., description="Resource status")
    created_at: datetime = Field(..., description="Creation timestamp")
    updated_at: datetime = Field(..., description="Last update timestamp")

    model_config = {
        "from_attributes": True,
        "json_schema_extra": {
            "examples": [
                {
                    "id": 1,
                    "name": "Test Resource",
                    "description": "A test resource",
                    "category": "test",
                    "status": "active",
                    "created_at": "2024-01-01T00:00:00",
                    "updated_at": "2024-01-01T00:00:00",
                }
            ]
        },
    }


class PaginatedResources(BaseModel):
    """
    One page of a resource listing.
    """

    model_config = ConfigDict(populate_by_name=True)

    data: List[ResourceResponse]
    total: int
    limit: int
    offset: int
    has_next: bool = Field(..., alias="hasNext")
    has_prev: bool = Field(..., alias="hasPrev")


class StatusCounts(BaseModel):
    active: int = 0
    inactive: int = 0
    archived: int = 0


class ResourceStats(BaseModel):
    """
    Aggregate counts over the whole collection.
    """

    model_config = ConfigDict(populate_by_name=True)

    total: int
    by_status: StatusCounts = Field(..., alias="byStatus")
    by_category: Dict[str, int] = Field(default_factory=dict, alias="byCategory")
