"""
API error handling for consistent error responses across the application.
"""

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.api.responses import error_body
from app.core.config import settings
from app.core.exceptions import AppError


def _server_error(message: str, exc: Exception) -> JSONResponse:
    # Driver and stack details never leave the process outside development
    detail = str(exc) if settings.ENVIRONMENT == "development" else None
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body(message, detail),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """
    Register exception handlers for the FastAPI application.
    """

    @app.exception_handler(AppError)
    async def app_exception_handler(request: Request, exc: AppError) -> JSONResponse:
        """
        Handle errors raised by the service layer.
        """
        if exc.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
            logger.error(f"Error {exc.status_code} on {request.method} {request.url.path}: {exc.message}")
            cause = exc.__cause__ if isinstance(exc.__cause__, Exception) else exc
            return _server_error(exc.message, cause)

        logger.warning(f"Error {exc.status_code} on {request.method} {request.url.path}: {exc.message}")
        return JSONResponse(status_code=exc.status_code, content=error_body(exc.message))

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        """
        Handle request parsing errors, e.g. a malformed JSON body.
        """
        logger.warning(f"Validation error: {exc.errors()}")

        def flatten_error(err: dict) -> str:
            location = ".".join(str(loc) for loc in err.get("loc", []))
            message = err.get("msg", "Validation error")
            return f"{location}: {message}"

        flat_errors = [flatten_error(err) for err in exc.errors()]
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=error_body(" | ".join(flat_errors) or "Invalid request"),
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        """
        Wrap framework HTTP errors (unknown routes, wrong methods) in the envelope.
        """
        if exc.status_code == status.HTTP_404_NOT_FOUND:
            message = f"Route {request.url.path} not found"
        else:
            message = str(exc.detail)
        return JSONResponse(status_code=exc.status_code, content=error_body(message), headers=exc.headers)

    @app.exception_handler(SQLAlchemyError)
    async def sqlalchemy_exception_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
        """
        Handle database errors that escaped the store.
        """
        logger.opt(exception=exc).error(f"Database error: {str(exc)}")
        return _server_error("Database operation failed", exc)

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """
        Handle all other uncaught exceptions.
        """
        logger.opt(exception=exc).error(f"Unhandled exception: {str(exc)}")
        return _server_error("Internal Server Error", exc)
