import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

from sqlalchemy import text
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from config.settings import settings

from .models import Base

logger = logging.getLogger(__name__)

# Async driver used for each supported backend
ASYNC_DRIVERS = {
    "sqlite": "aiosqlite",
    "postgresql": "asyncpg",
}

POSTGRES_POOL_OPTIONS = {
    "pool_size": 20,
    "max_overflow": 30,
    "pool_pre_ping": True,
    "pool_recycle": 300,
}


def to_async_url(database_url: str) -> str:
    """Swap the driver of a ``sqlite://`` or ``postgresql://`` URL for its async counterpart."""
    scheme, separator, rest = database_url.partition("://")
    backend = scheme.split("+", 1)[0]
    if not separator or backend not in ASYNC_DRIVERS:
        raise ValueError(f"Unsupported database URL: {database_url}")
    return f"{backend}+{ASYNC_DRIVERS[backend]}://{rest}"


class DatabaseManager:
    """Owns the async engine backing the document store and usage records."""

    def __init__(self, database_url: str | None = None, echo: bool | None = None) -> None:
        self.database_url = database_url or settings.database_url
        self.echo = settings.debug if echo is None else echo
        self.async_url = to_async_url(self.database_url)
        self.engine: AsyncEngine = create_async_engine(self.async_url, **self._engine_options())
        self.session_factory = async_sessionmaker(bind=self.engine, class_=AsyncSession, expire_on_commit=False)

    def _engine_options(self) -> dict[str, Any]:
        options: dict[str, Any] = {"echo": self.echo}
        if self.async_url.startswith("sqlite"):
            options["connect_args"] = {"check_same_thread": False}
        else:
            options.update(POSTGRES_POOL_OPTIONS)
        return options

    def _ensure_sqlite_directory(self) -> None:
        url = make_url(self.async_url)
        if url.get_backend_name() != "sqlite" or not url.database or url.database == ":memory:":
            return

        directory = Path(url.database).parent
        if not directory.exists():
            directory.mkdir(parents=True, exist_ok=True)
            logger.info(f"Created database directory: {directory}")

    async def create_tables(self) -> None:
        self._ensure_sqlite_directory()
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

        logger.info(f"Database tables created: {', '.join(sorted(Base.metadata.tables))}")

    async def drop_tables(self) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)

        logger.info("Database tables dropped successfully")

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Yield a session that commits on success and rolls back on any error."""
        session = self.session_factory()
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()

    async def health_check(self) -> bool:
        try:
            async with self.session() as session:
                await session.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error(f"Database health check failed: {e}")
            return False

    async def close(self) -> None:
        await self.engine.dispose()
        logger.info("Database connection closed")
