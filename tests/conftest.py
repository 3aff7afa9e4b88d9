"""Shared test fixtures.

Tests run against a throwaway SQLite database (aiosqlite) whose schema is
built from the ORM metadata. Redis is never initialized, so rate limiting is
bypassed.
"""

from __future__ import annotations

import os
import tempfile
from collections.abc import AsyncGenerator, Awaitable, Callable
from pathlib import Path

_TEST_DIR = Path(tempfile.mkdtemp(prefix="playvault_test_"))

os.environ["PV_DATABASE_URL"] = f"sqlite+aiosqlite:///{_TEST_DIR / 'test.db'}"
os.environ["PV_JWT_ALGORITHM"] = "HS256"
os.environ["PV_JWT_SECRET"] = "test-secret-with-enough-bytes-for-hs256"
os.environ["PV_SEED_CATALOG"] = "false"
os.environ["PV_LOG_FORMAT"] = "console"

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession  # noqa: E402

from playvault.auth.jwt import create_access_token, reset_keys  # noqa: E402
from playvault.config import get_settings  # noqa: E402
from playvault.database import close_db, get_engine, init_db  # noqa: E402
from playvault.db import models  # noqa: E402, F401
from playvault.db.base import Base  # noqa: E402
from playvault.db.models import User  # noqa: E402
from playvault.gamification.milestone_service import provision_milestones  # noqa: E402
from playvault.main import create_app  # noqa: E402

get_settings.cache_clear()
reset_keys()

MakeUser = Callable[..., Awaitable[User]]


@pytest_asyncio.fixture(autouse=True)
async def database() -> AsyncGenerator[None, None]:
    """Fresh schema for every test."""
    await init_db(get_settings().database_url)
    engine = get_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    yield
    await close_db()


@pytest_asyncio.fixture
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Direct database session for service-level tests and assertions."""
    async with AsyncSession(get_engine(), expire_on_commit=False) as session:
        yield session


@pytest_asyncio.fixture
async def make_user() -> MakeUser:
    """Factory inserting a committed user with its milestone rows."""
    counter = 0

    async def _make(user_id: str | None = None, **fields: object) -> User:
        nonlocal counter
        counter += 1
        user_id = user_id or f"user-{counter:04d}-0000-0000"
        async with AsyncSession(get_engine(), expire_on_commit=False) as session:
            user = User(id=user_id, **fields)
            session.add(user)
            await session.flush()
            await provision_milestones(session, user_id)
            await session.commit()
        return user

    return _make


@pytest_asyncio.fixture
async def client() -> AsyncGenerator[AsyncClient, None]:
    """HTTP client bound to a fresh app instance."""
    app = create_app()
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


def auth_headers(user_id: str, **claims: object) -> dict[str, str]:
    """Bearer header for a token naming ``user_id``."""
    return {"Authorization": f"Bearer {create_access_token(user_id, claims)}"}


@pytest_asyncio.fixture
async def authed_client(client: AsyncClient) -> AsyncClient:
    """Client authenticated as ``player-1``. The user row is created on first request."""
    client.headers.update(auth_headers("player-1", email="player1@example.com", first_name="Ada"))
    return client


@pytest.fixture
def headers_for() -> Callable[..., dict[str, str]]:
    return auth_headers
