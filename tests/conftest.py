"""Pytest configuration and shared fixtures for all tests."""

import os

# Minimal environment for settings validation; must run before gdp_rewards imports
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./test.db")
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("LOG_LEVEL", "DEBUG")

from collections.abc import Awaitable, Callable
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from gdp_rewards.config.database import create_engine_from_settings, create_session_maker
from gdp_rewards.models import Base, User

UserFactory = Callable[..., Awaitable[User]]


@pytest.fixture
def mock_session():
    """Mock AsyncSession for tests without a database."""
    session = AsyncMock()
    session.execute = AsyncMock()
    session.get = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.flush = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    session.refresh = AsyncMock()
    return session


@pytest_asyncio.fixture
async def engine(tmp_path) -> AsyncEngine:
    """File-backed SQLite engine with the schema created."""
    engine = create_engine_from_settings(
        f"sqlite+aiosqlite:///{tmp_path / 'rewards.db'}"
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_maker(engine) -> async_sessionmaker[AsyncSession]:
    """Session factory bound to the test engine."""
    return create_session_maker(engine)


@pytest_asyncio.fixture
async def session(session_maker) -> AsyncSession:
    """Database session for a single test."""
    async with session_maker() as session:
        yield session


@pytest.fixture
def user_factory(session) -> UserFactory:
    """
    Create users in the test database.

    Usage:
        root = await user_factory("100")
        child = await user_factory("100", parent=root)
    """
    counter = {"n": 0}

    async def create_user(
        gdp_price: str | Decimal | None = None,
        parent: User | None = None,
        username: str | None = None,
    ) -> User:
        counter["n"] += 1
        user = User(
            username=username or f"user{counter['n']}",
            gdp_price=Decimal(gdp_price) if gdp_price is not None else None,
            parent_id=parent.id if parent is not None else None,
        )
        session.add(user)
        await session.flush()
        return user

    return create_user
