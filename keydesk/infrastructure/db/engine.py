import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy.exc import DBAPIError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from keydesk.config import Settings
from keydesk.domain.errors import StorageError
from keydesk.infrastructure.db.tables import metadata

logger = logging.getLogger(__name__)


def build_engine(settings: Settings) -> AsyncEngine:
    if not settings.database_url:
        raise RuntimeError("DATABASE_URL is required for SQL mode")
    options = {"echo": settings.database_echo, "pool_pre_ping": True}
    if not settings.database_url.startswith("sqlite"):
        options["pool_recycle"] = 3600
    return create_async_engine(settings.database_url, **options)


def build_sessionmaker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def create_schema(engine: AsyncEngine) -> None:
    async with engine.begin() as conn:
        await conn.run_sync(metadata.create_all)


@asynccontextmanager
async def session_scope(
    session_maker: async_sessionmaker[AsyncSession],
    operation: str = "database",
) -> AsyncIterator[AsyncSession]:
    """
    One transaction per block: commit on exit, rollback on error.

    Driver errors leave the block as StorageError, chained to the original
    exception so callers can still inspect it.
    """
    try:
        async with session_maker() as session:
            async with session.begin():
                yield session
    except DBAPIError as exc:
        logger.error(
            "Database operation failed",
            exc_info=exc,
            extra={"operation": operation},
        )
        raise StorageError(operation) from exc
