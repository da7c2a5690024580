from __future__ import annotations

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import AsyncAdaptedQueuePool

from campus_chat.config import Settings, settings


def build_engine(cfg: Settings) -> AsyncEngine:
    """Pooled asyncpg engine; connections are recycled before the server drops them."""
    return create_async_engine(
        cfg.database_url,
        poolclass=AsyncAdaptedQueuePool,
        pool_size=cfg.DB_POOL_SIZE,
        max_overflow=cfg.DB_MAX_OVERFLOW,
        pool_pre_ping=True,
        pool_recycle=cfg.DB_POOL_RECYCLE,
        echo=False,
    )


def build_sessionmaker(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    # returned rows stay readable after commit
    return async_sessionmaker(
        bind=bind,
        class_=AsyncSession,
        autoflush=False,
        expire_on_commit=False,
    )


engine = build_engine(settings)
AsyncSessionLocal = build_sessionmaker(engine)
