"""Test fixtures — a fresh in-memory database per test.

Learn: Testing pattern for async SQLAlchemy + FastAPI:

1. Each test gets its own in-memory SQLite engine (aiosqlite). StaticPool
   keeps a single connection alive so every session sees the same DB.
2. Tables are created from the ORM metadata, so the schema (including
   the CHECK constraints) matches production.
3. The app's get_db dependency is overridden to hand out that session.

Nothing is shared between tests, so no cleanup is needed.
"""

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from debtbook.config import settings
from debtbook.db.engine import build_engine, get_db
from debtbook.db.models import Base, User
from debtbook.main import app

TEST_DB_URL = "sqlite+aiosqlite://"


@pytest.fixture(autouse=True)
def fast_password_hashing(monkeypatch):
    """Minimum bcrypt cost, since tests register many users."""
    monkeypatch.setattr(settings, "bcrypt_rounds", 4)


@pytest_asyncio.fixture()
async def db_session():
    """Per-test session bound to a throwaway in-memory database."""
    engine = build_engine(TEST_DB_URL)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session = AsyncSession(engine, expire_on_commit=False)
    try:
        yield session
    finally:
        await session.close()
        await engine.dispose()


@pytest_asyncio.fixture()
async def client(db_session):
    """HTTP client with the app's get_db overridden for testing.

    Auth is NOT mocked — record tests register real users and send
    real bearer tokens through the identity guard.
    """
    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


async def register(client, username: str, password: str = "password_123") -> dict:
    """Register a user through the API and return the response body."""
    r = await client.post(
        "/api/v1/auth/register",
        json={"username": username, "password": password},
    )
    assert r.status_code == 201, r.text
    return r.json()


@pytest_asyncio.fixture()
async def alice(client):
    """A registered user: {"id", "username", "headers"}."""
    body = await register(client, "alice")
    return {
        **body["user"],
        "headers": {"Authorization": f"Bearer {body['token']}"},
    }


@pytest_asyncio.fixture()
async def bob(client):
    body = await register(client, "bob")
    return {
        **body["user"],
        "headers": {"Authorization": f"Bearer {body['token']}"},
    }


@pytest_asyncio.fixture()
async def owners(db_session):
    """Two users inserted directly (no bcrypt) for store-level tests."""
    first = User(username="owner-a", password_hash="unused")
    second = User(username="owner-b", password_hash="unused")
    db_session.add_all([first, second])
    await db_session.commit()
    return first, second
