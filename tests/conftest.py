"""Shared fixtures: in-memory database, controllable clock and an HTTP client."""

import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("CREATE_TABLES_ON_STARTUP", "false")

from datetime import datetime, timedelta, timezone

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.clock import get_clock
from app.core.db import Base, get_db
from app.main import app


class FrozenClock:
    """Clock that only moves when told to."""

    def __init__(self, start: datetime = None):
        self.current = start or datetime.now(timezone.utc)

    def now(self) -> datetime:
        return self.current

    def advance(self, **kwargs) -> datetime:
        self.current = self.current + timedelta(**kwargs)
        return self.current


@pytest.fixture
def clock():
    return FrozenClock()


@pytest_asyncio.fixture
async def session_factory():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(session_factory, clock):
    """HTTP client bound to the app with the test database and clock."""

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_clock] = lambda: clock

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


async def register_user(client, email: str, username: str, password: str = "secret123") -> dict:
    """Register a user and return {"token", "id", "headers"}."""
    response = await client.post(
        "/api/auth/register",
        json={"email": email, "username": username, "password": password},
    )
    assert response.status_code == 201, response.text
    body = response.json()
    return {
        "token": body["token"],
        "id": body["user"]["id"],
        "headers": {"Authorization": f"Bearer {body['token']}"},
    }


@pytest_asyncio.fixture
async def alice(client):
    return await register_user(client, "alice@example.com", "alice")


@pytest_asyncio.fixture
async def bob(client):
    return await register_user(client, "bob@example.com", "bob")


@pytest_asyncio.fixture
async def carol(client):
    return await register_user(client, "carol@example.com", "carol")


async def create_doc(client, user, title="Notes", content=None) -> dict:
    payload = {"title": title}
    if content is not None:
        payload["content"] = content
    response = await client.post("/api/docs", json=payload, headers=user["headers"])
    assert response.status_code == 201, response.text
    return response.json()


async def add_editor(client, owner, doc_id, email) -> dict:
    response = await client.post(
        f"/api/docs/{doc_id}/editors", json={"email": email}, headers=owner["headers"]
    )
    assert response.status_code == 200, response.text
    return response.json()
