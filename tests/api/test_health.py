"""
Tests for health check endpoints and request middleware.
"""

import pytest
from httpx import AsyncClient
from loguru import logger

from app.api.dependencies import get_db_session
from app.main import app

pytestmark = pytest.mark.asyncio


async def test_basic_health_check(client: AsyncClient) -> None:
    """
    Test the basic health check endpoint.
    """
    response = await client.get("/api/health")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"
    assert "version" in response.json()
    assert "environment" in response.json()


async def test_readiness_check(client: AsyncClient) -> None:
    """
    Test the readiness check endpoint against the test database.
    """
    response = await client.get("/api/health/ready")

    assert response.status_code == 200
    data = response.json()
    components = {c["name"]: c for c in data["components"]}
    assert components["database"]["status"] == "healthy"
    assert components["database"]["details"] == {"type": "sqlite"}


async def test_readiness_check_reports_broken_database(client: AsyncClient) -> None:
    class BrokenSession:
        async def execute(self, *args, **kwargs):
            raise ConnectionError("database is gone")

    async def override_get_db():
        yield BrokenSession()

    app.dependency_overrides[get_db_session] = override_get_db

    response = await client.get("/api/health/ready")

    assert response.status_code == 503
    assert response.json()["status"] == "degraded"


async def test_request_id_is_generated(client: AsyncClient) -> None:
    response = await client.get("/api/health")

    assert response.headers["X-Request-ID"]


async def test_request_id_is_propagated(client: AsyncClient) -> None:
    response = await client.get("/api/health", headers={"X-Request-ID": "abc-123"})

    assert response.headers["X-Request-ID"] == "abc-123"


async def test_error_handler_logs_carry_request_id(client: AsyncClient) -> None:
    records = []
    handler_id = logger.add(lambda message: records.append(message.record), level="WARNING")
    try:
        response = await client.get("/api/resources/424242", headers={"X-Request-ID": "req-404"})
    finally:
        logger.remove(handler_id)

    assert response.status_code == 404
    assert any(
        record["extra"].get("request_id") == "req-404" and "not found" in record["message"] for record in records
    )
