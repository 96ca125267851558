import contextlib

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from invitely.config.database import engine
from invitely.main import app
from invitely.models.metadata import metadata


@pytest_asyncio.fixture
async def database():
    """Fresh schema in the test database for each test."""
    async with engine.begin() as conn:
        await conn.run_sync(metadata.drop_all)
        await conn.run_sync(metadata.create_all)

    yield

    async with engine.begin() as conn:
        await conn.run_sync(metadata.drop_all)


@pytest.fixture
def client_factory():
    """
    Build a test client with FastAPI dependency overrides.

    Usage:
        async with client_factory({get_rsvp_admission: lambda: admission}) as client:
            response = await client.post(...)
    """

    @contextlib.asynccontextmanager
    async def factory(overrides: dict | None = None):
        app.dependency_overrides.update(overrides or {})
        transport = ASGITransport(app=app)
        try:
            async with AsyncClient(transport=transport, base_url="http://test") as client:
                yield client
        finally:
            app.dependency_overrides.clear()

    return factory


@pytest_asyncio.fixture
async def client(client_factory):
    async with client_factory() as test_client:
        yield test_client
