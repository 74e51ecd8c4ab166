import logging
from collections.abc import AsyncGenerator, AsyncIterator
from contextlib import asynccontextmanager
from datetime import UTC, datetime

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from core.config import settings
from core.errors import InternalError

logger = logging.getLogger(__name__)

# Create async engine
engine = create_async_engine(
    settings.database_url,
    echo=settings.is_development,
    pool_pre_ping=True,
    pool_size=10,
    max_overflow=20,
)

# Create async session factory
AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)


class Base(DeclarativeBase):
    """Base class for all database models."""

    pass


def utcnow() -> datetime:
    """Timezone-aware current UTC time."""
    return datetime.now(UTC)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Dependency for getting async database session."""
    async with AsyncSessionLocal() as session:
        try:
            yield session
        finally:
            await session.close()


@asynccontextmanager
async def unit_of_work(session: AsyncSession) -> AsyncIterator[AsyncSession]:
    """
    Run a block of writes as one transaction.

    Commits when the block exits normally and rolls back on any exception.
    Domain errors propagate unchanged; database errors are logged and
    re-raised as InternalError so callers never see a partial commit.

    Args:
        session: Session with no transaction in progress

    Yields:
        The same session, inside the transaction
    """
    try:
        async with session.begin():
            yield session
    except SQLAlchemyError as e:
        logger.exception("Transaction rolled back after database error")
        raise InternalError() from e
