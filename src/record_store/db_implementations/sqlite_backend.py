# src/record_store/db_implementations/sqlite_backend.py

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict, List, Sequence

# --- aiosqlite Driver Import ---
import aiosqlite

# --- Framework Imports ---
from record_store.base.exceptions import KeyAlreadyExistsException
from record_store.base.interfaces import SqlBackend
from record_store.base.utils import row_to_strings
from record_store.sql.dialect import Dialect


class SqliteBackend(SqlBackend):
    """
    SQLite backend using aiosqlite.

    This backend expects an active `aiosqlite.Connection` to be provided
    during initialization, typically managed by a Unit of Work or Service Layer
    that handles transaction boundaries (commit/rollback).

    Timestamps are stored as TEXT in the `YYYY-MM-DD HH:MM:SS` format, which
    sorts and compares correctly as plain strings.
    """

    def __init__(self, db_connection: aiosqlite.Connection):
        """
        Args:
            db_connection: An active aiosqlite.Connection object managed externally.
        """
        if not isinstance(db_connection, aiosqlite.Connection):
            raise TypeError(
                "db_connection must be an instance of aiosqlite.Connection"
            )

        self._conn = db_connection
        # Ensure connection uses dict-like rows for convenience
        self._conn.row_factory = aiosqlite.Row
        self._logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    @property
    def dialect(self) -> Dialect:
        return Dialect.SQLITE

    # --- Connection/Session Management (UoW Aware) ---
    @asynccontextmanager
    async def _get_session(self) -> AsyncGenerator[aiosqlite.Connection, None]:
        """
        Provides the externally managed connection within a context.
        Does NOT handle commit/rollback; expects the caller (UoW) to manage it.
        """
        try:
            yield self._conn
        except Exception as e:
            self._logger.error(
                f"Error during backend operation within external transaction: {e}",
                exc_info=True,
            )
            raise

    async def execute(self, sql: str, params: Sequence[Any] = ()) -> int:
        try:
            async with self._get_session() as conn:
                async with conn.execute(sql, tuple(params)) as cursor:
                    affected = cursor.rowcount
            return affected if affected and affected > 0 else 0
        except Exception as e:
            self._handle_db_error(e, f"executing '{sql}'")
            raise  # unreachable, _handle_db_error always raises

    async def select_rows(
        self, sql: str, params: Sequence[Any] = ()
    ) -> List[Dict[str, str]]:
        try:
            async with self._get_session() as conn:
                async with conn.execute(sql, tuple(params)) as cursor:
                    rows = await cursor.fetchall()
            return [row_to_strings(row) for row in rows]
        except Exception as e:
            self._handle_db_error(e, f"querying '{sql}'")
            raise

    def _handle_db_error(self, error: Exception, context: str = "") -> None:
        """Maps specific database errors to store exceptions and raises."""
        log_message = f"Error during {context}: {error}"
        if isinstance(error, aiosqlite.Error):
            self._logger.error(log_message, exc_info=True)
        else:
            self._logger.error(log_message)

        if isinstance(error, aiosqlite.IntegrityError):
            if "UNIQUE constraint failed" in str(error):
                raise KeyAlreadyExistsException(
                    f"A record with the same ID already exists. Detail: {error}"
                ) from error
            raise RuntimeError(
                f"Database integrity constraint violated during {context}. Detail: {error}"
            ) from error
        if isinstance(error, aiosqlite.Error):
            raise RuntimeError(
                f"Database error during {context}: {error}"
            ) from error
        raise error
