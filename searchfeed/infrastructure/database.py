"""Database configuration and session management.

Provides the async SQLAlchemy engine and session factory backing the
catalog repositories and the key/value settings store.
"""

from collections.abc import AsyncGenerator

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import declarative_base

from searchfeed.infrastructure.config import settings

# Create async engine
engine = create_async_engine(
    settings.database_url,
    echo=settings.debug,
    pool_pre_ping=True,
)

# Session factory
async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)

# Base class for models
Base = declarative_base()


async def create_schema(bind: AsyncEngine | None = None) -> None:
    """Create all catalog and settings tables that do not exist yet.

    Args:
        bind: Engine to use, defaults to the application engine.
    """
    # Register the mapped tables on Base.metadata
    import searchfeed.catalog.models  # noqa: F401
    import searchfeed.infrastructure.system_config  # noqa: F401

    async with (bind or engine).begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """Get database session.

    Yields:
        AsyncSession for database operations.
    """
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
