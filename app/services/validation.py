"""Request validation for resource operations.

Each function either returns a normalized value or raises
``app.core.exceptions.ValidationError`` carrying the first failed rule.
"""

import re
from typing import Any, Mapping, Type, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from app.core.exceptions import ValidationError
from app.schemas.resources import ResourceCreate, ResourceFilters, ResourceUpdate

ModelT = TypeVar("ModelT", bound=BaseModel)

_ID_RE = re.compile(r"[0-9]+")
INVALID_ID_MESSAGE = "Invalid resource ID. Must be a positive integer."


def _first_error(exc: PydanticValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    return str(errors[0].get("msg", "Invalid request"))


def _validate(model: Type[ModelT], payload: Any) -> ModelT:
    if not isinstance(payload, Mapping):
        raise ValidationError("Request body must be a JSON object")
    try:
        return model.model_validate(dict(payload))
    except PydanticValidationError as exc:
        raise ValidationError(_first_error(exc)) from exc


def validate_create(payload: Any) -> ResourceCreate:
    """Validate and normalize a create payload."""
    return _validate(ResourceCreate, payload)


def validate_update(payload: Any) -> ResourceUpdate:
    """Validate a partial update payload; unsent fields stay unset."""
    return _validate(ResourceUpdate, payload)


def validate_id(raw: Any) -> int:
    """
    Parse a path id, accepting only positive decimal integers.

    Ids beyond the database's integer range are still returned; the store
    reports them as missing rows.
    """
    value = 0
    if isinstance(raw, int) and not isinstance(raw, bool):
        value = raw
    elif isinstance(raw, str) and _ID_RE.fullmatch(raw):
        try:
            value = int(raw)
        except ValueError as exc:
            # more digits than int() will convert
            raise ValidationError(INVALID_ID_MESSAGE) from exc

    if value <= 0:
        raise ValidationError(INVALID_ID_MESSAGE)
    return value


def validate_list_query(query: Mapping[str, Any]) -> ResourceFilters:
    """Validate list query parameters into a filter plan."""
    return _validate(ResourceFilters, query)
