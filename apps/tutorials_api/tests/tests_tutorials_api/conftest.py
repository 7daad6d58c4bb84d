import httpx
import pytest
import pytest_asyncio
from sqlalchemy.pool import StaticPool
from tutorials_api import create_app
from tutorials_core import TutorialsSettings
from tutorials_db import db as db_module

DATABASE_URL = "sqlite+aiosqlite:///:memory:"  # in-memory DB for tests


@pytest.fixture
def settings():
    return TutorialsSettings(
        _env_file=None,
        DATABASE_URL=DATABASE_URL,
        ENABLE_CORS=True,
        CORS_ORIGINS=["http://localhost:8081"],
    )


@pytest_asyncio.fixture(scope="function")
async def init_test_db():
    """Initialize a fresh in-memory database for each test."""
    db_module.init_db(DATABASE_URL, echo=False, poolclass=StaticPool)
    await db_module.create_all()

    yield

    await db_module.close_db()


@pytest_asyncio.fixture()
async def db_session(init_test_db):  # noqa: ARG001
    async for session in db_module.get_db():
        yield session


@pytest.fixture
def app(settings):
    return create_app(settings, manage_database=False)


@pytest_asyncio.fixture()
async def client(app, init_test_db):  # noqa: ARG001
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest_asyncio.fixture()
async def make_tutorial(client):
    """Create a tutorial through the API and return its JSON body."""

    async def _make(title: str = "Learn X", description: str | None = "desc") -> dict:
        response = await client.post(
            "/api/tutorials", json={"title": title, "description": description}
        )
        assert response.status_code == 201, response.text
        return response.json()

    return _make

