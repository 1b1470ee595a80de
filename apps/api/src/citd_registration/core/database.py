"""
Database Configuration

Async SQLAlchemy engine and session factory for PostgreSQL (asyncpg).
"""

from collections.abc import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from citd_registration.core.config import settings


class Base(DeclarativeBase):
    """Declarative base for all ORM models."""


def get_database_url() -> str:
    """Return the configured database URL using the asyncpg driver."""
    db_url = settings.database_url
    if db_url.startswith("postgresql://"):
        db_url = db_url.replace("postgresql://", "postgresql+asyncpg://", 1)
    return db_url


# The engine does not connect until first use
engine = create_async_engine(
    get_database_url(),
    echo=False,
    pool_pre_ping=True,
)

async_session_maker = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency yielding a database session.

    Usage:
        @router.post("/")
        async def endpoint(db: AsyncSession = Depends(get_db)):
            ...
    """
    async with async_session_maker() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise


async def init_db() -> None:
    """
    Verify the database is reachable and create missing tables.

    Alembic owns the schema in deployed environments; ``create_all`` only
    fills in tables that do not exist yet.
    """
    # Import models so they register on Base.metadata
    from citd_registration.modules.registrations import models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def close_db() -> None:
    """Dispose of the connection pool."""
    await engine.dispose()
