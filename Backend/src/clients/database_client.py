# -*- coding: utf-8 -*-
"""
Database client (PostgreSQL through asyncpg).
"""
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import (AsyncSession, async_sessionmaker,
                                    create_async_engine)

from src.config.settings import settings
from src.domain.models import Base

async_engine = create_async_engine(
    settings.database_url.replace("postgresql+psycopg2://", "postgresql+asyncpg://"),
    echo=settings.database_echo,
    pool_pre_ping=True,
    pool_recycle=3600,  # reconnect every hour
)

AsyncSessionLocal = async_sessionmaker(
    bind=async_engine, class_=AsyncSession, expire_on_commit=False
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Provide an async database session for FastAPI dependency injection.

    Yields:
        AsyncSession: Active database session

    Raises:
        SQLAlchemyError: Database connection errors
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


async def init_db() -> None:
    """
    Create every table declared on ``Base``.

    Production schemas are managed by Alembic; this is for local runs with
    ``AUTO_CREATE_TABLES=true``.
    """
    async with async_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def check_db_connection() -> None:
    """Run ``SELECT 1`` to verify the database is reachable."""
    from sqlalchemy import text

    async with async_engine.connect() as conn:
        await conn.execute(text("SELECT 1"))
