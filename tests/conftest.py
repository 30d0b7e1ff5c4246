import os
from typing import AsyncGenerator, Dict

os.environ.setdefault("ENABLE_METRICS", "false")
os.environ.setdefault("DATABASE_URI", "sqlite+aiosqlite:///:memory:")

import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession  # noqa: E402

from app.api.dependencies import get_db_session  # noqa: E402
from app.db.session import build_engine, build_session_factory, init_models  # noqa: E402
from app.db.store import ResourceStore  # noqa: E402
from app.main import app  # noqa: E402
from app.services.resources import ResourceService  # noqa: E402

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture(scope="function")
async def test_engine() -> AsyncGenerator[AsyncEngine, None]:
    # Fresh in-memory database per test
    engine = build_engine(TEST_DATABASE_URL)
    await init_models(engine)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db_session(test_engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    async with build_session_factory(test_engine)() as session:
        yield session


@pytest_asyncio.fixture(scope="function")
async def store(db_session: AsyncSession) -> ResourceStore:
    return ResourceStore(db_session)


@pytest_asyncio.fixture(scope="function")
async def service(store: ResourceStore) -> ResourceService:
    return ResourceService(store)


@pytest_asyncio.fixture(scope="function")
async def client(test_engine: AsyncEngine) -> AsyncGenerator[AsyncClient, None]:
    session_factory = build_session_factory(test_engine)

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db_session] = override_get_db
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides = {}


@pytest_asyncio.fixture(scope="function")
async def create_resource(client: AsyncClient):
    """Factory creating resources over HTTP and returning their JSON."""

    async def _create(**payload: str) -> Dict:
        response = await client.post("/api/resources", json=payload)
        assert response.status_code == 201, response.text
        return response.json()["data"]

    return _create
