"""
Database Engine and Sessions

One async engine (asyncpg) per process. Pool sizing comes from the
"database" section of config/default.yaml; connection details come from
Settings.

Services receive an AsyncSession through the get_db dependency and commit
their own unit of work (e.g. a whole recurrence group in one commit).
get_db rolls back whatever is left uncommitted when a request fails.

Usage:
    from study_tracker.db.base import get_db

    @router.get("/api/subjects")
    async def list_subjects(db: AsyncSession = Depends(get_db)):
        ...
"""

from collections.abc import AsyncGenerator
from typing import Any
import logging

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from study_tracker.config import settings, yaml_config

logger = logging.getLogger(__name__)

_pool: dict[str, Any] = yaml_config.get("database", {})

engine = create_async_engine(
    settings.POSTGRES_URL,
    pool_size=_pool.get("pool_size", 5),
    max_overflow=_pool.get("max_overflow", 10),
    pool_timeout=_pool.get("pool_timeout", 30),
    pool_pre_ping=True,
    echo=settings.DEBUG,
)

# expire_on_commit=False so rows stay readable after commit when services
# build response models from them
async_session_maker = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


class Base(DeclarativeBase):
    """Declarative base for subjects, sessions, decks and cards."""


# Registers the tables on Base.metadata; must follow the Base definition
from study_tracker.db import models  # noqa: F401, E402


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Yield a session for one request; roll back if the request fails."""
    async with async_session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            logger.debug("Request failed, rolling back open transaction")
            await session.rollback()
            raise


async def init_db() -> None:
    """Create missing tables. Existing tables are left untouched."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info(f"Database ready ({', '.join(sorted(Base.metadata.tables))})")


async def close_db() -> None:
    """Dispose of pooled connections on shutdown."""
    await engine.dispose()
