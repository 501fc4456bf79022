"""
Database connection pool handle
"""
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Optional

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.engine import URL, make_url
from sqlalchemy.exc import InterfaceError, OperationalError, SQLAlchemyError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from sqlalchemy.ext.asyncio import AsyncConnection, create_async_engine
from sqlalchemy.orm import declarative_base

from catalog_api.config import Settings
from catalog_api.errors import StoreError, StoreUnavailableError

# Base class for models
Base = declarative_base()

# Failures that mean the store itself is out of reach
_UNAVAILABLE_ERRORS = (OperationalError, InterfaceError, PoolTimeoutError, OSError)


def _get_async_url(url: str) -> str:
    """Convert database URL to async variant"""
    if url.startswith("postgres://"):
        url = url.replace("postgres://", "postgresql://", 1)
    if url.startswith("postgresql://"):
        return url.replace("postgresql://", "postgresql+asyncpg://", 1)
    if url.startswith("mysql://"):
        return url.replace("mysql://", "mysql+aiomysql://", 1)
    if url.startswith("sqlite:///"):
        return url.replace("sqlite:///", "sqlite+aiosqlite:///", 1)
    return url


def build_database_url(settings: Settings) -> str:
    """DATABASE_URL when given, otherwise assembled from the DB_* settings"""
    if settings.DATABASE_URL:
        return _get_async_url(settings.DATABASE_URL)
    url = URL.create(
        drivername=settings.DB_DRIVER,
        username=settings.DB_USER,
        password=settings.DB_PASSWORD or None,
        host=settings.DB_HOST,
        port=settings.DB_PORT,
        database=settings.DB_NAME,
    )
    return url.render_as_string(hide_password=False)


class Database:
    """
    Bounded pool of reusable connections to the relational store.

    Connections are opened lazily and kept for reuse. When all of them are
    busy, callers wait for one to be released, up to ``pool_timeout``
    seconds (``None`` or a non-positive value waits forever).
    """

    def __init__(
        self,
        url: str,
        pool_size: int = 10,
        pool_timeout: Optional[float] = 30.0,
        pool_recycle: int = 3600,
        echo: bool = False,
    ):
        self.url = _get_async_url(url)
        self.is_sqlite = self.url.startswith("sqlite")
        self.is_memory = self.is_sqlite and make_url(self.url).database in (None, "", ":memory:")

        engine_kwargs: dict[str, Any] = {"echo": echo}

        # In-memory SQLite runs on a single static connection
        if not self.is_memory:
            engine_kwargs["pool_size"] = pool_size
            engine_kwargs["max_overflow"] = 0
            engine_kwargs["pool_timeout"] = pool_timeout if pool_timeout and pool_timeout > 0 else None
            engine_kwargs["pool_recycle"] = pool_recycle
            engine_kwargs["pool_pre_ping"] = True

        self.engine = create_async_engine(self.url, **engine_kwargs)

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        return cls(
            build_database_url(settings),
            pool_size=settings.DB_POOL_SIZE,
            pool_timeout=settings.DB_POOL_TIMEOUT,
            pool_recycle=settings.DB_POOL_RECYCLE,
            echo=settings.DEBUG,
        )

    @asynccontextmanager
    async def acquire(self) -> AsyncIterator[AsyncConnection]:
        """Borrow a pooled connection; it goes back to the pool on exit"""
        try:
            async with self.engine.connect() as conn:
                yield conn
        except _UNAVAILABLE_ERRORS as e:
            raise StoreUnavailableError(str(e)) from e
        except SQLAlchemyError as e:
            raise StoreError(str(e)) from e

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[AsyncConnection]:
        """Borrow a connection inside one transaction, committed on clean exit"""
        try:
            async with self.engine.begin() as conn:
                yield conn
        except _UNAVAILABLE_ERRORS as e:
            raise StoreUnavailableError(str(e)) from e
        except SQLAlchemyError as e:
            raise StoreError(str(e)) from e

    async def execute(self, statement, params: Optional[dict] = None) -> list[dict]:
        """Run a single statement on a pooled connection and return its rows"""
        if isinstance(statement, str):
            statement = text(statement)
        async with self.transaction() as conn:
            result = await conn.execute(statement, params or {})
            if not result.returns_rows:
                return []
            return [dict(row) for row in result.mappings()]

    async def ping(self) -> bool:
        rows = await self.execute("SELECT 1 AS ok")
        return bool(rows) and rows[0]["ok"] == 1

    async def create_all(self) -> None:
        """Create the mapped tables that don't exist yet"""
        import catalog_api.models  # noqa: F401 - register the tables

        async with self.transaction() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self) -> None:
        await self.engine.dispose()


def get_database(request: Request) -> Database:
    """Dependency for getting the application's connection pool"""
    return request.app.state.database
