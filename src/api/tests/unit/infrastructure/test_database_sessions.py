"""Unit tests for the cached engines and session context managers.

No connection is opened: engines and sessions are created lazily and these
tests only inspect their bindings.
"""

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from infrastructure.database.dependencies import (
    close_database_connections,
    get_read_engine,
    get_write_engine,
    read_session,
    write_session,
)


@pytest_asyncio.fixture(autouse=True)
async def reset_engines():
    yield
    await close_database_connections()


@pytest.mark.asyncio
async def test_get_write_engine():
    """Test that get_write_engine returns an asyncpg AsyncEngine."""
    engine = get_write_engine()

    assert isinstance(engine, AsyncEngine)
    assert engine.url.drivername == "postgresql+asyncpg"


@pytest.mark.asyncio
async def test_engines_are_singletons():
    """Test that engines are cached and reused."""
    assert get_write_engine() is get_write_engine()
    assert get_read_engine() is get_read_engine()
    assert get_write_engine() is not get_read_engine()


@pytest.mark.asyncio
async def test_write_session_uses_write_engine():
    """Test that write sessions are bound to the write engine."""
    engine = get_write_engine()

    async with write_session() as session:
        assert isinstance(session, AsyncSession)
        assert session.bind.sync_engine is engine.sync_engine


@pytest.mark.asyncio
async def test_read_session_uses_read_engine():
    """Test that read sessions are bound to the read engine."""
    engine = get_read_engine()

    async with read_session() as session:
        assert session.bind.sync_engine is engine.sync_engine


@pytest.mark.asyncio
async def test_close_resets_engines():
    """Test that closing connections allows fresh engines afterwards."""
    first = get_write_engine()

    await close_database_connections()

    assert get_write_engine() is not first
