"""
Prometheus metrics configuration.
"""

import functools
import re
import time
from typing import Any, Callable, TypeVar, cast

from fastapi import FastAPI, Request, Response
from loguru import logger
from prometheus_client import REGISTRY, Counter, Gauge, Histogram, Summary
from prometheus_client.openmetrics.exposition import CONTENT_TYPE_LATEST, generate_latest
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.types import ASGIApp

F = TypeVar("F", bound=Callable[..., Any])

METRICS_PATH = "/metrics"

REQUEST_COUNT = Counter("http_requests_total", "Total HTTP requests count", ["method", "endpoint", "status_code"])

REQUEST_TIME = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"],
    buckets=(0.005, 0.01, 0.025, 0.05, 0.075, 0.1, 0.25, 0.5, 0.75, 1.0, 2.5, 5.0, float("inf")),
)

REQUEST_IN_PROGRESS = Gauge("http_requests_in_progress", "Number of HTTP requests in progress", ["method", "endpoint"])

EXCEPTION_COUNT = Counter(
    "http_exceptions_total", "Total HTTP exceptions count", ["method", "endpoint", "exception_type"]
)

DB_QUERY_TIME = Summary("db_query_duration_seconds", "Database query duration in seconds", ["query_type", "table"])

RESOURCE_EVENTS = Counter("resource_events_total", "Resource lifecycle events", ["event_type"])

# /api/resources/42 -> /api/resources/{id}
_NUMERIC_SEGMENT = re.compile(r"/\d+(?=/|$)")


def normalize_path(path: str) -> str:
    """Collapse numeric path segments to keep label cardinality bounded."""
    return _NUMERIC_SEGMENT.sub("/{id}", path)


class PrometheusMiddleware(BaseHTTPMiddleware):
    """
    Middleware that collects Prometheus metrics for HTTP requests.
    """

    def __init__(self, app: ASGIApp) -> None:
        super().__init__(app)

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        method = request.method
        path = request.url.path

        if path == METRICS_PATH:
            return await call_next(request)

        endpoint = normalize_path(path)
        start_time = time.perf_counter()
        REQUEST_IN_PROGRESS.labels(method=method, endpoint=endpoint).inc()

        try:
            response = await call_next(request)
            REQUEST_COUNT.labels(method=method, endpoint=endpoint, status_code=response.status_code).inc()
            REQUEST_TIME.labels(method=method, endpoint=endpoint).observe(time.perf_counter() - start_time)
            return response
        except Exception as e:
            EXCEPTION_COUNT.labels(method=method, endpoint=endpoint, exception_type=type(e).__name__).inc()
            raise
        finally:
            REQUEST_IN_PROGRESS.labels(method=method, endpoint=endpoint).dec()


async def metrics_endpoint(request: Request) -> Response:
    """
    Endpoint for exposing Prometheus metrics.
    """
    data = generate_latest(REGISTRY)
    return Response(content=data, headers={"Content-Type": CONTENT_TYPE_LATEST})


def setup_metrics(app: FastAPI) -> None:
    """
    Set up Prometheus metrics and middleware for FastAPI application.
    """
    app.add_middleware(PrometheusMiddleware)
    app.add_route(METRICS_PATH, metrics_endpoint)

    logger.info("Prometheus metrics configured")


def record_resource_event(event_type: str) -> None:
    """Count a create/update/delete of a resource."""
    RESOURCE_EVENTS.labels(event_type=event_type).inc()


def time_db_query(query_type: str, table: str) -> Callable[[F], F]:
    """Decorator to time database queries."""

    def decorator(func: F) -> F:
        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            start_time = time.perf_counter()
            try:
                return await func(*args, **kwargs)
            finally:
                DB_QUERY_TIME.labels(query_type=query_type, table=table).observe(time.perf_counter() - start_time)

        return cast(F, wrapper)

    return decorator
