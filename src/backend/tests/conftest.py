"""
Pytest fixtures for IdeaBox backend tests.
"""

import os
from collections.abc import AsyncGenerator, Callable
from datetime import datetime, timezone
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest
from httpx import ASGITransport, AsyncClient

# Set test environment variables before importing app
os.environ.setdefault("SECRET_KEY", "test-secret-key-for-testing")
os.environ.setdefault("STORAGE_BACKEND", "memory")
os.environ.setdefault("POSTGRES_PASSWORD", "test-password")
os.environ.setdefault("POSTGRES_HOST", "localhost")
os.environ.setdefault("POSTGRES_DB", "ideabox_test")
os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("DEBUG", "false")
os.environ.setdefault("LOG_JSON", "false")


class FixedClock:
    """Callable clock that tests can move forward by hand."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture(scope="session")
def anyio_backend() -> str:
    """Use asyncio backend for async tests."""
    return "asyncio"


@pytest.fixture
def app() -> Any:
    """Create a fresh FastAPI application (own store and change feed) per test."""
    from main import create_application

    return create_application()


@pytest.fixture
async def client(app: Any) -> AsyncGenerator[AsyncClient, None]:
    """Create async test client."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
        headers={"Origin": "http://localhost:5173"},
    ) as ac:
        yield ac


@pytest.fixture
def make_token() -> Callable[..., str]:
    """Mint access tokens the API accepts."""
    from core.security import create_access_token

    def _make(user_id: str = "user-1", is_admin: bool = False, email: str | None = None) -> str:
        claims: dict[str, Any] = {"sub": user_id, "is_admin": is_admin}
        if email:
            claims["email"] = email
        return create_access_token(claims)

    return _make


@pytest.fixture
def auth_headers(make_token: Callable[..., str]) -> dict[str, str]:
    """Authentication headers for a regular user."""
    return {"Authorization": f"Bearer {make_token('user-1', email='user1@example.com')}"}


@pytest.fixture
def admin_headers(make_token: Callable[..., str]) -> dict[str, str]:
    """Authentication headers for an administrator."""
    return {"Authorization": f"Bearer {make_token('admin-1', is_admin=True)}"}


@pytest.fixture
def clock() -> FixedClock:
    """A clock fixed in the middle of 2024-Q2."""
    return FixedClock(datetime(2024, 5, 15, 12, 0, tzinfo=timezone.utc))


@pytest.fixture
def change_feed():
    from services.change_feed import ChangeFeed

    return ChangeFeed(queue_size=10)


@pytest.fixture
def memory_store():
    from repositories.memory_repository import InMemoryStore

    return InMemoryStore()


@pytest.fixture
def repos(memory_store, change_feed):
    """In-memory repositories publishing straight to the test change feed."""
    from repositories.provider import memory_repositories

    return memory_repositories(memory_store, change_feed)


@pytest.fixture
def make_idea(repos, clock) -> Callable[..., Any]:
    """Insert an idea directly through the repository."""
    from schemas.idea import UsageFrequencyEnum

    async def _make(
        title: str = "Dark Mode Toggle",
        description: str = "Add a dark mode option.",
        category: str = "User Interface",
        created_by: str | None = "author-1",
        created_at: datetime | None = None,
    ):
        return await repos.ideas.create(
            title=title,
            description=description,
            category=category,
            usage_frequency=UsageFrequencyEnum.HIGH,
            created_by=created_by,
            created_at=created_at or clock(),
        )

    return _make


@pytest.fixture
def mock_db_session() -> AsyncMock:
    """Create mock database session."""
    session = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.flush = AsyncMock()
    session.refresh = AsyncMock()
    session.execute = AsyncMock()
    session.get = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def postgres_backend(monkeypatch, mock_db_session) -> AsyncMock:
    """
    Select the postgres backend with sessions served by ``mock_db_session``.

    Returns the mocked session so tests can inspect or fail its commit.
    """
    from contextlib import asynccontextmanager

    from core.config import settings

    @asynccontextmanager
    async def session_factory():
        yield mock_db_session

    monkeypatch.setattr(settings, "STORAGE_BACKEND", "postgres")
    monkeypatch.setattr("repositories.provider.get_session_maker", lambda: session_factory)
    return mock_db_session
