"""Async database configuration and session management.
"""
import logging

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.ext.asyncio import async_sessionmaker
from sqlalchemy.ext.asyncio import create_async_engine

from agents_arena.core.config import Settings
from agents_arena.models import Base

logger = logging.getLogger(__name__)


def create_engine(settings: Settings) -> AsyncEngine:
    """Create the async engine for the configured database.

    Args:
        settings: Application settings (database_url, database_echo).

    Returns:
        AsyncEngine with pre-ping enabled.
    """
    return create_async_engine(
        settings.database_url,
        echo=settings.database_echo,
        pool_pre_ping=True,
    )


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create the session factory used by repositories.

    Each unit of work should create its own session using:
        async with session_factory() as session:
            ...
    """
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


async def init_models(engine: AsyncEngine) -> None:
    """Create missing tables for all registered models."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables initialized")


async def check_db_health(engine: AsyncEngine) -> dict[str, str]:
    """Check database connection health.

    Returns:
        dict: Health check result with status and details
    """
    try:
        async with engine.connect() as conn:
            result = await conn.execute(text("SELECT 1 as health_check"))
            if result.scalar() == 1:
                return {"status": "healthy", "message": "Database connection successful"}
            return {
                "status": "unhealthy",
                "message": "Database query returned unexpected result",
            }
    except (SQLAlchemyError, OSError) as e:
        logger.error(f"Database health check failed: {e}")
        return {"status": "unhealthy", "message": f"Database connection failed: {str(e)}"}
