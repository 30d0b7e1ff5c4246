"""
API middleware components.

This module contains the request context middleware, which assigns every
request an ID for correlation in logs and echoes it back to the client.
"""

import time
import uuid

from fastapi import Request, Response
from loguru import logger
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

REQUEST_ID_HEADER = "X-Request-ID"


class RequestContextMiddleware(BaseHTTPMiddleware):
    """
    Middleware that tags each request with an ID and logs its outcome.

    An incoming ``X-Request-ID`` header is reused so IDs can be propagated
    from upstream proxies. Log records emitted while the request is handled,
    including those from the exception handlers, carry ``request_id`` in
    their ``extra``.
    """

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        start_time = time.perf_counter()

        with logger.contextualize(request_id=request_id):
            response = await call_next(request)
            elapsed_ms = (time.perf_counter() - start_time) * 1000
            logger.info(
                f"{request.method} {request.url.path} -> {response.status_code} ({elapsed_ms:.1f} ms)",
            )

        response.headers[REQUEST_ID_HEADER] = request_id
        return response
