"""
Database engine and session factory.
"""

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from gdp_rewards.config.settings import settings


def create_engine_from_settings(url: str | None = None) -> AsyncEngine:
    """
    Create async engine.

    Args:
        url: Optional override of the configured database URL

    Returns:
        Async SQLAlchemy engine
    """
    database_url = url or settings.async_database_url
    if database_url.startswith('sqlite'):
        # SQLite waits on its file lock instead of failing a concurrent writer
        return create_async_engine(
            database_url,
            echo=settings.database_echo,
            connect_args={"timeout": 30},
        )
    return create_async_engine(
        database_url,
        echo=settings.database_echo,
        pool_size=settings.database_pool_size,
        pool_pre_ping=True,
    )


def create_session_maker(
    engine: AsyncEngine,
) -> async_sessionmaker[AsyncSession]:
    """Create session maker bound to engine."""
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


engine = create_engine_from_settings()
async_session_maker = create_session_maker(engine)
