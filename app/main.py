"""
FastAPI application entry point.
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict

import sentry_sdk
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.logging import LoggingIntegration

from app.api.errors import register_exception_handlers
from app.api.middleware import RequestContextMiddleware
from app.api.responses import Tags
from app.api.routes.v1.endpoints.health import router as health_router
from app.api.routes.v1.resources import router as resources_router
from app.core.config import settings
from app.core.logging import configure_logging
from app.core.metrics import setup_metrics
from app.db.session import engine, init_models

DOCS_URL = f"{settings.API_PREFIX}/docs"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    FastAPI lifespan event handler for startup and shutdown events.
    """
    if settings.SENTRY_DSN:
        sentry_logging = LoggingIntegration(level=logging.INFO, event_level=logging.ERROR)
        sentry_sdk.init(
            dsn=settings.SENTRY_DSN,
            integrations=[
                FastApiIntegration(),
                sentry_logging,
            ],
            environment=settings.ENVIRONMENT,
            traces_sample_rate=settings.SENTRY_TRACES_SAMPLE_RATE,
            release=f"{settings.PROJECT_NAME}@{settings.VERSION}",
        )
        logger.info("Sentry initialized")

    await init_models()
    logger.info(f"Database tables initialized ({engine.url.render_as_string(hide_password=True)})")

    yield

    await engine.dispose()
    logger.info("Database connection closed")


def create_application() -> FastAPI:
    """
    Create and configure the FastAPI application.
    """
    configure_logging()

    application = FastAPI(
        title=settings.PROJECT_NAME,
        description=settings.PROJECT_DESCRIPTION,
        version=settings.VERSION,
        docs_url=DOCS_URL if not settings.is_production else None,
        redoc_url=f"{settings.API_PREFIX}/redoc" if not settings.is_production else None,
        openapi_url=f"{settings.API_PREFIX}/openapi.json" if not settings.is_production else None,
        lifespan=lifespan,
        swagger_ui_parameters={
            "deepLinking": True,
            "displayRequestDuration": True,
            "filter": True,
            "tryItOutEnabled": True,
        },
        openapi_tags=[
            {"name": Tags.HEALTH, "description": "Health check and readiness endpoints"},
            {"name": Tags.RESOURCES, "description": "Resource management endpoints"},
        ],
        license_info={
            "name": "MIT",
            "url": "https://opensource.org/licenses/MIT",
        },
    )

    register_exception_handlers(application)

    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if settings.CORS_ORIGINS_STR == "*" else settings.CORS_ORIGINS_STR.split(","),
        allow_credentials=settings.CORS_ORIGINS_STR != "*",
        allow_methods=["*"],
        allow_headers=["*"],
    )

    application.add_middleware(RequestContextMiddleware)

    if settings.ENABLE_METRICS:
        setup_metrics(application)
        logger.info("Prometheus metrics enabled")

    application.include_router(health_router, prefix=f"{settings.API_PREFIX}/health", tags=[Tags.HEALTH])
    application.include_router(resources_router, prefix=settings.API_PREFIX, tags=[Tags.RESOURCES])

    @application.get("/", include_in_schema=False)
    async def root() -> Dict[str, Any]:
        return {
            "success": True,
            "message": f"Welcome to the {settings.PROJECT_NAME}",
            "version": settings.VERSION,
            "documentation": DOCS_URL,
            "health": f"{settings.API_PREFIX}/health",
        }

    return application


app = create_application()
