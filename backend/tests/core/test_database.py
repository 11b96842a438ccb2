"""Tests for database session management.

Covers:
- asyncpg URL conversion and engine options
- Table extraction from failed statements
- Import transactions committing or rolling back as a whole
- Startup sessions and the connectivity ping
"""

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from fastpress.core.config import get_settings
from fastpress.core.database import (
    DatabaseManager,
    async_database_url,
    engine_options,
    failed_table,
    transaction,
)
from fastpress.models.taxonomy import Tag


class TestEngineConfiguration:
    @pytest.mark.parametrize(
        ("url", "expected"),
        [
            ("postgres://u:p@h/db", "postgresql+asyncpg://u:p@h/db"),
            ("postgresql://u:p@h/db", "postgresql+asyncpg://u:p@h/db"),
            ("postgresql+asyncpg://u:p@h/db", "postgresql+asyncpg://u:p@h/db"),
        ],
    )
    def test_async_database_url(self, url: str, expected: str) -> None:
        assert async_database_url(url) == expected

    def test_engine_options(self) -> None:
        settings = get_settings().model_copy(
            update={"db_pool_size": 7, "environment": "development"}
        )

        options = engine_options(settings)

        assert options["pool_size"] == 7
        assert options["pool_pre_ping"] is True
        assert "ssl" not in options["connect_args"]

    def test_production_requires_ssl(self) -> None:
        settings = get_settings().model_copy(update={"environment": "production"})

        assert engine_options(settings)["connect_args"]["ssl"] == "require"

    def test_uninitialized_manager(self) -> None:
        with pytest.raises(RuntimeError, match="Database not initialized"):
            DatabaseManager().session_factory


class TestFailedTable:
    def test_insert_statement(self) -> None:
        error = IntegrityError('INSERT INTO "posts" (id) VALUES ($1)', {}, Exception("dup"))
        assert failed_table(error) == "posts"

    def test_update_statement(self) -> None:
        error = OperationalError("UPDATE media SET alt=$1", {}, Exception("locked"))
        assert failed_table(error) == "media"

    def test_select_statement(self) -> None:
        error = OperationalError("SELECT 1", {}, Exception("gone"))
        assert failed_table(error) is None

    def test_plain_exception(self) -> None:
        assert failed_table(ValueError("nope")) is None


async def _tag_count(session: AsyncSession) -> int:
    return (await session.execute(select(func.count(Tag.id)))).scalar_one()


class TestTransaction:
    @pytest.mark.asyncio
    async def test_commits_on_success(self, db_session: AsyncSession) -> None:
        async with transaction(db_session, "wp_import"):
            db_session.add(Tag(name="Python", slug="python"))

        assert await _tag_count(db_session) == 1

    @pytest.mark.asyncio
    async def test_rolls_back_everything_on_error(self, db_session: AsyncSession) -> None:
        with pytest.raises(RuntimeError):
            async with transaction(db_session, "wp_import"):
                db_session.add(Tag(name="Python", slug="python"))
                await db_session.flush()
                raise RuntimeError("import failed")

        assert await _tag_count(db_session) == 0

    @pytest.mark.asyncio
    async def test_rolls_back_on_integrity_error(self, db_session: AsyncSession) -> None:
        with pytest.raises(IntegrityError):
            async with transaction(db_session, "wp_import"):
                db_session.add(Tag(name="A", slug="same"))
                db_session.add(Tag(name="B", slug="same"))
                await db_session.flush()

        assert await _tag_count(db_session) == 0


class TestDatabaseManager:
    @pytest.mark.asyncio
    async def test_session_commits(
        self, mock_db_manager: DatabaseManager, db_session: AsyncSession
    ) -> None:
        async with mock_db_manager.session() as session:
            session.add(Tag(name="News", slug="news"))

        assert await _tag_count(db_session) == 1

    @pytest.mark.asyncio
    async def test_ping(self, mock_db_manager: DatabaseManager) -> None:
        assert await mock_db_manager.ping() is True
