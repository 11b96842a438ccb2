"""Database engine, request sessions and import transactions.

Every request gets one session from `get_session`, committed when the handler
returns. A WordPress import writes all of its rows inside `transaction()` so a
failed import leaves no partial content behind.
"""

import re
import time
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from sqlalchemy import text
from sqlalchemy.exc import DBAPIError, SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from fastpress.core.config import Settings, get_settings
from fastpress.core.logging import db_logger, get_logger

logger = get_logger(__name__)

_STATEMENT_TABLE = re.compile(
    r'^\s*(?:INSERT INTO|UPDATE|DELETE FROM)\s+"?(\w+)"?', re.IGNORECASE
)


class Base(DeclarativeBase):
    """Base class for FastPress models."""

    pass


def async_database_url(url: str) -> str:
    """Convert a postgres URL to the asyncpg driver form."""
    if url.startswith("postgres://"):
        return url.replace("postgres://", "postgresql+asyncpg://", 1)
    if url.startswith("postgresql://"):
        return url.replace("postgresql://", "postgresql+asyncpg://", 1)
    return url


def engine_options(settings: Settings) -> dict[str, Any]:
    """Pool and asyncpg connection options for the content database."""
    connect_args: dict[str, Any] = {
        "timeout": settings.db_connect_timeout,
        "command_timeout": settings.db_command_timeout,
    }
    if settings.environment == "production":
        connect_args["ssl"] = "require"
    return {
        "pool_size": settings.db_pool_size,
        "max_overflow": settings.db_max_overflow,
        "pool_timeout": settings.db_pool_timeout,
        "pool_pre_ping": True,
        "echo": settings.debug,
        "connect_args": connect_args,
    }


class DatabaseManager:
    """Owns the engine and session factory for the lifetime of the app."""

    def __init__(self) -> None:
        self._engine: AsyncEngine | None = None
        self._session_factory: async_sessionmaker[AsyncSession] | None = None

    @property
    def session_factory(self) -> async_sessionmaker[AsyncSession]:
        if self._session_factory is None:
            raise RuntimeError("Database not initialized. Call init_db() first.")
        return self._session_factory

    def init_db(self) -> None:
        """Create the engine and session factory from settings."""
        settings = get_settings()
        db_url = async_database_url(str(settings.database_url))
        try:
            self._engine = create_async_engine(db_url, **engine_options(settings))
        except (SQLAlchemyError, ValueError) as e:
            db_logger.connection_error(e, db_url)
            raise

        self._session_factory = async_sessionmaker(
            bind=self._engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )
        logger.info("Database engine initialized")

    async def close(self) -> None:
        if self._engine is not None:
            await self._engine.dispose()
            self._engine = None
            self._session_factory = None
            logger.info("Database connections closed")

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Session outside a request (startup seeding), committed on success."""
        async with self.session_factory() as session:
            try:
                yield session
                await session.commit()
            except SQLAlchemyError:
                await session.rollback()
                raise

    async def ping(self) -> bool:
        """True when the database answers `SELECT 1`."""
        try:
            async with self.session_factory() as session:
                await session.execute(text("SELECT 1"))
        except (SQLAlchemyError, OSError) as e:
            db_logger.connection_error(e, str(get_settings().database_url))
            return False
        return True


# Global database manager instance
db_manager = DatabaseManager()


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """Request-scoped session dependency.

    Commits when the handler returns. Any error raised by the handler skips
    the commit, so flushed writes are discarded when the session closes.
    """
    async with db_manager.session_factory() as session:
        try:
            yield session
            await session.commit()
        except SQLAlchemyError as e:
            await session.rollback()
            db_logger.transaction_failure(
                e,
                table=failed_table(e),
                context="Request session rollback",
            )
            raise


@asynccontextmanager
async def transaction(
    session: AsyncSession, label: str
) -> AsyncGenerator[AsyncSession, None]:
    """Commit everything written in the block, or nothing.

    Rolls back on any error. Runs longer than the slow threshold are logged
    with `label` so long imports show up in the logs.

    Usage:
        async with transaction(session, "wp_import"):
            ...
    """
    threshold_ms = get_settings().db_slow_query_threshold_ms
    start_time = time.monotonic()
    try:
        yield session
        await session.commit()
    except SQLAlchemyError as e:
        await session.rollback()
        db_logger.transaction_failure(e, table=failed_table(e), context=label)
        raise
    except Exception:
        await session.rollback()
        raise

    duration_ms = (time.monotonic() - start_time) * 1000
    if duration_ms > threshold_ms:
        db_logger.slow_query(query=label, duration_ms=round(duration_ms, 2))


def failed_table(error: Exception) -> str | None:
    """Table named in the statement that raised `error`, when there is one."""
    statement = error.statement if isinstance(error, DBAPIError) else None
    if not statement:
        return None
    match = _STATEMENT_TABLE.match(statement)
    return match.group(1) if match else None
