"""
Async engine and request-scoped sessions.
"""

from typing import AsyncGenerator

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from thinktank.config import Settings, get_settings


def _create_engine(settings: Settings) -> AsyncEngine:
    if not settings.database_url.startswith("sqlite"):
        return create_async_engine(
            settings.database_url,
            echo=settings.debug,
            pool_pre_ping=True,
            pool_size=settings.database_pool_size,
            max_overflow=settings.database_max_overflow,
        )

    # A connection per session, so concurrent sessions see each other's commits
    sqlite_engine = create_async_engine(settings.database_url, echo=settings.debug, poolclass=NullPool)

    @event.listens_for(sqlite_engine.sync_engine, "connect")
    def _sqlite_pragmas(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.execute("PRAGMA busy_timeout=5000")
        cursor.close()

    return sqlite_engine


engine = _create_engine(get_settings())

async_session_maker = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Request-scoped session: commit on success, roll back on any error.

    Authorization and conflict errors therefore leave no partial effect.
    """
    async with async_session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def init_db() -> None:
    """Create missing tables (development and tests; production uses alembic)."""
    from thinktank.kernel.models import Base

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def close_db() -> None:
    await engine.dispose()
