"""
Async engine and session factory construction.
"""

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from events_api.core.config import Settings


def create_engine(settings: Settings) -> AsyncEngine:
    """Build the async engine. Pool sizing only applies to server databases."""
    url = settings.DATABASE_URL

    if url.startswith("sqlite"):
        # An in-memory database lives and dies with its single connection
        pool_kwargs = {"poolclass": StaticPool} if ":memory:" in url else {}
        return create_async_engine(url, echo=settings.DEBUG, **pool_kwargs)

    return create_async_engine(
        url,
        echo=settings.DEBUG,
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
        pool_timeout=settings.DB_POOL_TIMEOUT,
        pool_recycle=settings.DB_POOL_RECYCLE,
        pool_pre_ping=True,
    )


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
