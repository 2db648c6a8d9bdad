from typing import Optional

import structlog
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base

from trusty.core.config import Settings, get_settings

logger = structlog.get_logger()
Base = declarative_base()


def normalize_database_url(url: str) -> str:
    """Select the async driver for the configured database URL."""
    # Some providers use postgres:// but SQLAlchemy requires postgresql://
    if url.startswith("postgres://"):
        url = url.replace("postgres://", "postgresql://", 1)
    if url.startswith("postgresql://"):
        url = url.replace("postgresql://", "postgresql+asyncpg://", 1)
    elif url.startswith("sqlite://"):
        url = url.replace("sqlite://", "sqlite+aiosqlite://", 1)
    return url


class Database:
    """Owns the async engine and session factory."""

    def __init__(self, settings: Optional[Settings] = None, url: Optional[str] = None):
        settings = settings or get_settings()
        db_url = normalize_database_url(url or settings.DATABASE_URL)

        engine_kwargs = {"echo": settings.DATABASE_ECHO}
        if db_url.startswith("postgresql"):
            engine_kwargs.update(
                pool_size=settings.DATABASE_POOL_SIZE,
                max_overflow=settings.DATABASE_MAX_OVERFLOW,
                pool_pre_ping=True,  # Verify connections before using them
                pool_recycle=3600,   # Recycle connections after 1 hour
            )

        self.url = db_url
        self.engine = create_async_engine(db_url, **engine_kwargs)
        self.async_session = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False
        )

    async def connect(self) -> None:
        """Verify the database is reachable (SQLAlchemy handles pooling)"""
        try:
            async with self.engine.begin() as conn:
                await conn.execute(text("SELECT 1"))
            logger.info("Database connection pool created")
        except Exception as e:
            logger.error("Failed to connect to database", error=str(e))
            raise

    async def disconnect(self) -> None:
        """Close database connections and dispose of the engine"""
        await self.engine.dispose()
        logger.info("SQLAlchemy engine disposed")

    async def init_schema(self) -> None:
        """Create any missing tables."""
        # Registers the document table on Base.metadata
        from trusty.infrastructure import document_models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database schema initialized")

    def get_session(self) -> AsyncSession:
        """Get a new SQLAlchemy async session"""
        return self.async_session()
