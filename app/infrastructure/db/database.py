"""
Database Configuration
Async SQLAlchemy engine and session dependency for the compliance store
"""

import logging
import os
from typing import AsyncGenerator, Optional

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from app.config import settings

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Declarative base for routes, banking records and pools"""
    pass


def to_async_url(url: str) -> str:
    """Map a plain PostgreSQL / SQLite URL onto its async driver"""
    if url.startswith("postgres://"):
        url = url.replace("postgres://", "postgresql://", 1)
    if url.startswith("postgresql://"):
        return url.replace("postgresql://", "postgresql+asyncpg://", 1)
    if url.startswith("sqlite://"):
        return url.replace("sqlite://", "sqlite+aiosqlite://", 1)
    return url


def to_sync_url(url: str) -> str:
    """Map any configured URL onto the sync driver Alembic connects with"""
    if url.startswith("postgres://"):
        url = url.replace("postgres://", "postgresql://", 1)
    return url.replace("+asyncpg", "+psycopg2").replace("+aiosqlite", "")


def build_engine(url: str) -> AsyncEngine:
    """Create the async engine; pool sizing only applies to server databases"""
    async_url = to_async_url(url)
    options = {"echo": settings.DEBUG and settings.LOG_LEVEL.upper() == "DEBUG"}
    if not async_url.startswith("sqlite"):
        options.update(
            pool_size=10,
            max_overflow=20,
            pool_timeout=30,
            pool_recycle=3600,
            pool_pre_ping=True,
        )
    return create_async_engine(async_url, **options)


DATABASE_URL = to_async_url(settings.DATABASE_URL)

# Alembic runs on a sync driver and must not build the async engine
ALEMBIC_MODE = os.getenv("ALEMBIC_MODE") == "1"

engine: Optional[AsyncEngine] = None
async_session_factory: Optional[async_sessionmaker] = None

if not ALEMBIC_MODE:
    engine = build_engine(settings.DATABASE_URL)
    async_session_factory = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False
    )


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Request-scoped session

    Commits when the endpoint returns, rolls back when it raises. Banking
    appends commit earlier on their own.
    """
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def init_db():
    """Create missing tables when AUTO_CREATE_TABLES is set (dev / demo only)"""
    if not settings.AUTO_CREATE_TABLES:
        logger.info("Skipping create_all; schema is managed by Alembic")
        return

    # Register models on Base.metadata
    from app.infrastructure.db import models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def close_db():
    """Dispose pooled connections"""
    if engine is not None:
        await engine.dispose()
