"""Database access for the portal: one async engine, per-request sessions.

PostgreSQL through asyncpg. Outside production the tables are created on
startup; production schemas come from the Alembic revisions.
"""

from __future__ import annotations

import contextlib
import logging
from collections.abc import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from src.config import settings

logger = logging.getLogger(__name__)

# ── Engine & sessions ────────────────────────────────────────────────

engine: AsyncEngine = create_async_engine(
    settings.db.database_url,
    echo=settings.db.echo_sql,
    pool_size=settings.db.pool_size,
    max_overflow=settings.db.max_overflow,
    pool_pre_ping=True,
    pool_recycle=3600,
)

# Snapshots are read after commit, so attributes must not expire
async_session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency: one session per request, committed on success."""
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


# ── Startup / shutdown ───────────────────────────────────────────────


async def init_db() -> None:
    # Importing the package registers every model with Base.metadata
    from src.models import Base

    async with engine.begin() as conn:
        if settings.is_production:
            await conn.execute(text("SELECT 1"))
            logger.info("Database reachable (schema managed by Alembic)")
        else:
            await conn.run_sync(Base.metadata.create_all)
            logger.info("Database tables ensured: %s", ", ".join(sorted(Base.metadata.tables)))


async def close_db() -> None:
    await engine.dispose()


@contextlib.asynccontextmanager
async def db_lifespan() -> AsyncGenerator[None, None]:
    """Initialise the database on enter, dispose the pool on exit."""
    await init_db()
    try:
        yield
    finally:
        await close_db()
