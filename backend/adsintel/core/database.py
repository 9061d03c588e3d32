"""Async PostgreSQL access for analysis sessions and their results.

The engine is created once at startup (see main.lifespan). Request handlers
get a unit-of-work session through get_session(); the analysis pipeline
opens its own sessions from db_manager.session_factory because it runs
after the request has returned.

Logged through db_logger:
- engine/connection failures (credentials masked)
- rollbacks, with the table parsed from the driver error when possible
- sessions held open longer than DB_SLOW_QUERY_THRESHOLD_MS
"""

import re
import time
from collections.abc import AsyncGenerator
from typing import Any

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from adsintel.core.config import Settings, get_settings
from adsintel.core.logging import db_logger, get_logger

logger = get_logger(__name__)

_ASYNCPG_SCHEMES = ("postgres://", "postgresql://")

_TABLE_IN_ERROR = (
    re.compile(r'relation "([^"]+)"', re.IGNORECASE),
    re.compile(r'(?:INSERT INTO|UPDATE|FROM) "?([a-z_]+)"?', re.IGNORECASE),
)


class Base(DeclarativeBase):
    """Declarative base shared by the analysis models."""


def async_database_url(url: str) -> str:
    """Rewrite a plain postgres URL so SQLAlchemy picks the asyncpg driver."""
    for scheme in _ASYNCPG_SCHEMES:
        if url.startswith(scheme):
            return "postgresql+asyncpg://" + url[len(scheme) :]
    return url


def _connect_args(settings: Settings) -> dict[str, Any]:
    args: dict[str, Any] = {
        "timeout": settings.db_connect_timeout,
        "command_timeout": settings.db_command_timeout,
    }
    if settings.environment == "production":
        args["ssl"] = "require"
    return args


class DatabaseManager:
    """Owns the engine and session factory for the running process."""

    def __init__(self) -> None:
        self._engine: AsyncEngine | None = None
        self._session_factory: async_sessionmaker[AsyncSession] | None = None

    @property
    def engine(self) -> AsyncEngine:
        if self._engine is None:
            raise RuntimeError("Database engine requested before init_db()")
        return self._engine

    @property
    def session_factory(self) -> async_sessionmaker[AsyncSession]:
        if self._session_factory is None:
            raise RuntimeError("Session factory requested before init_db()")
        return self._session_factory

    def init_db(self) -> None:
        settings = get_settings()
        db_url = async_database_url(str(settings.database_url))

        try:
            self._engine = create_async_engine(
                db_url,
                pool_size=settings.db_pool_size,
                max_overflow=settings.db_max_overflow,
                pool_timeout=settings.db_pool_timeout,
                pool_pre_ping=True,
                echo=settings.debug,
                connect_args=_connect_args(settings),
            )
        except Exception as e:
            db_logger.connection_error(e, db_url)
            raise

        self._session_factory = async_sessionmaker(
            bind=self._engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )
        logger.info(
            "Database engine ready",
            extra={"pool_size": settings.db_pool_size, "environment": settings.environment},
        )

    async def create_tables(self) -> None:
        """Create the analysis tables that do not exist yet."""
        import adsintel.models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info(
            "Analysis tables ensured",
            extra={"tables": sorted(Base.metadata.tables)},
        )

    async def close(self) -> None:
        if self._engine is None:
            return
        await self._engine.dispose()
        self._engine = None
        self._session_factory = None
        logger.info("Database engine disposed")

    async def check_connection(self) -> bool:
        """Run SELECT 1; False (and a logged error) when it fails."""
        try:
            async with self.session_factory() as session:
                await session.execute(text("SELECT 1"))
        except Exception as e:
            db_logger.connection_error(e, str(get_settings().database_url))
            return False
        return True


db_manager = DatabaseManager()


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency: one session per request, committed on success."""
    threshold_ms = get_settings().db_slow_query_threshold_ms

    async with db_manager.session_factory() as session:
        started = time.monotonic()
        try:
            yield session
            await session.commit()
        except SQLAlchemyError as e:
            await session.rollback()
            db_logger.transaction_failure(
                e,
                table=table_from_error(e),
                context="Request session rolled back",
            )
            raise
        finally:
            elapsed_ms = (time.monotonic() - started) * 1000
            if elapsed_ms > threshold_ms:
                db_logger.slow_query(query="request_session", duration_ms=elapsed_ms)


def table_from_error(error: Exception) -> str | None:
    """Best-effort table name from a driver error message."""
    message = str(error)
    for pattern in _TABLE_IN_ERROR:
        match = pattern.search(message)
        if match:
            return match.group(1)
    return None
