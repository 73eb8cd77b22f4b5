"""
Async SQLAlchemy engine and per-request session dependency.

The engine is built by ``configure_engine`` (called from ``create_app``) so
the database URL comes from the injected settings rather than import time.
"""

from __future__ import annotations

import logging
from typing import AsyncGenerator, Optional

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool

from database.models import Base

logger = logging.getLogger(__name__)

engine: Optional[AsyncEngine] = None
async_session_factory: Optional[async_sessionmaker[AsyncSession]] = None


def build_engine(database_url: str) -> AsyncEngine:
    if database_url.startswith("sqlite"):
        # aiosqlite connections are bound to the loop that opened them
        return create_async_engine(database_url, echo=False, poolclass=NullPool)
    return create_async_engine(
        database_url,
        echo=False,
        pool_size=10,
        max_overflow=20,
        pool_recycle=3600,
    )


def configure_engine(database_url: str) -> async_sessionmaker[AsyncSession]:
    """(Re)build the module-level engine and session factory."""
    global engine, async_session_factory

    engine = build_engine(database_url)
    async_session_factory = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )
    logger.debug("Database engine configured for %s", engine.url.render_as_string())
    return async_session_factory


async def create_tables() -> None:
    """Create missing tables (idempotent)."""
    if engine is None:
        raise RuntimeError("Database engine is not configured")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def dispose_engine() -> None:
    if engine is not None:
        await engine.dispose()


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """Dependency function — use in FastAPI `Depends(get_db_session)`."""
    if async_session_factory is None:
        raise RuntimeError("Database engine is not configured")
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()
