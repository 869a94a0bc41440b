# tests/conftest.py
import logging
from datetime import datetime, timezone

import aiosqlite
import pytest
import pytest_asyncio

from record_store.base.clock import FixedClock
from record_store.db_implementations.sqlite_backend import SqliteBackend
from record_store.store import RecordStore

TEST_TABLE_NAME = "records_test"


# --- Clock Fixture ---


@pytest.fixture
def clock():
    """A clock frozen at 2024-01-15 12:00:00 UTC."""
    return FixedClock(datetime(2024, 1, 15, 12, 0, 0, tzinfo=timezone.utc))


# SQLite Fixture (Function Scoped)
@pytest_asyncio.fixture(scope="function")
async def sqlite_memory_db_conn():
    """Provides an in-memory aiosqlite database connection for testing."""
    conn = None
    try:
        conn = await aiosqlite.connect(":memory:")
        conn.row_factory = aiosqlite.Row
        yield conn
    finally:
        if conn:
            await conn.close()


@pytest.fixture
def sqlite_backend(sqlite_memory_db_conn):
    return SqliteBackend(sqlite_memory_db_conn)


@pytest_asyncio.fixture(scope="function")
async def store(sqlite_backend, clock, logger):
    """An initialized store with its table created, driven by the fixed clock."""
    _store = RecordStore(
        sqlite_backend,
        TEST_TABLE_NAME,
        automigrate_enabled=True,
        clock=clock,
    )
    await _store.initialize(logger)
    return _store


# --- Logger Fixture ---


@pytest.fixture(scope="session")
def logger():
    """Create a test logger."""
    _logger = logging.getLogger("test_store_logger")
    if not _logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )
        handler.setFormatter(formatter)
        handler.setLevel(logging.DEBUG)
        _logger.addHandler(handler)
        _logger.setLevel(logging.DEBUG)
        _logger.propagate = False
    return logging.LoggerAdapter(_logger, {})
