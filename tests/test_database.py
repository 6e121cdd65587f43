"""Tests for the lazily connected record store handle."""

from pathlib import Path
from unittest.mock import AsyncMock

import pytest
from sqlalchemy import inspect

from app.core.exceptions import DatabaseConnectionException
from app.database import Database


@pytest.mark.asyncio
async def test_failed_connection_leaves_handle_uninitialized(tmp_path: Path) -> None:
    """Test that a failed attempt is retried by the next caller."""
    unreachable = tmp_path / "missing" / "store.db"
    database = Database(f"sqlite+aiosqlite:///{unreachable}", create_tables=True)

    with pytest.raises(DatabaseConnectionException) as exc_info:
        await database.get_engine()

    assert exc_info.value.status_code == 500
    assert exc_info.value.message.startswith("Server error: ")
    assert not database.is_initialized
    assert await database.check_connection() is False

    unreachable.parent.mkdir()
    try:
        engine = await database.get_engine()
        assert database.is_initialized
        assert await database.get_engine() is engine
        assert await database.check_connection() is True

        async with engine.connect() as conn:
            tables = await conn.run_sync(lambda sync: inspect(sync).get_table_names())
        assert {"appointments", "providers"} <= set(tables)
    finally:
        await database.dispose()

    assert not database.is_initialized


@pytest.mark.asyncio
async def test_session_uses_shared_engine(tmp_path: Path) -> None:
    """Test that sessions are opened on the verified engine."""
    database = Database(f"sqlite+aiosqlite:///{tmp_path / 'store.db'}")
    try:
        session = await database.session()
        async with session:
            assert session.bind is await database.get_engine()
    finally:
        await database.dispose()


@pytest.mark.asyncio
async def test_session_without_sessionmaker_raises(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """Test that a handle left without a session factory fails with a store error."""
    database = Database(f"sqlite+aiosqlite:///{tmp_path / 'store.db'}")
    monkeypatch.setattr(database, "get_engine", AsyncMock())

    with pytest.raises(DatabaseConnectionException) as exc_info:
        await database.session()

    assert exc_info.value.status_code == 500


@pytest.mark.asyncio
async def test_session_on_unreachable_store_raises(tmp_path: Path) -> None:
    """Test that opening a session surfaces the connection failure."""
    database = Database(f"sqlite+aiosqlite:///{tmp_path / 'missing' / 'store.db'}")

    with pytest.raises(DatabaseConnectionException):
        await database.session()

    assert not database.is_initialized
