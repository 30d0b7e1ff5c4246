"""
Application error taxonomy.

Each error maps to one HTTP status code; the API layer turns them into the
uniform ``{"success": false, "error": {...}}`` envelope.
"""

from fastapi import status


class AppError(Exception):
    """Base class for errors raised by the service layer."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Internal Server Error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(AppError):
    """Malformed or out-of-range input."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"


class NotFoundError(AppError):
    """The targeted resource does not exist."""

    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Resource not found"


class StoreError(AppError):
    """Unexpected failure of the backing store."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Database operation failed"
