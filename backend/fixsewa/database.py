"""Async database engine, session factory and declarative base."""

import logging
from typing import AsyncGenerator
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from fixsewa.config import get_settings
from fixsewa.exceptions import StoreError

settings = get_settings()
logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Declarative base for all ORM models."""


engine = create_async_engine(
    settings.DATABASE_URL,
    echo=settings.DB_ECHO,
    future=True,
)

AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Dependency: one session per request."""
    async with AsyncSessionLocal() as session:
        yield session


async def init_db() -> None:
    """Create tables that do not exist yet."""
    # Register every mapped class on Base.metadata
    import fixsewa.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def close_db() -> None:
    """Dispose of pooled connections."""
    await engine.dispose()


async def commit_or_raise(session: AsyncSession, action: str) -> None:
    """Commit, or roll back and surface the failure as a StoreError."""
    try:
        await session.commit()
    except SQLAlchemyError as e:
        await session.rollback()
        logger.error("Store failure while trying to %s: %s", action, e)
        raise StoreError(f"Could not {action}")
