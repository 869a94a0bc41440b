# src/record_store/db_implementations/postgresql_backend.py

import logging
import re
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict, List, Optional, Sequence

# --- asyncpg Driver Import ---
import asyncpg

# --- Framework Imports ---
from record_store.base.exceptions import KeyAlreadyExistsException
from record_store.base.interfaces import SqlBackend
from record_store.base.utils import row_to_strings
from record_store.sql.dialect import Dialect

# Trailing row count of a command status such as 'INSERT 0 1' or 'UPDATE 3'
_STATUS_COUNT = re.compile(r"(\d+)\s*$")


class PostgresBackend(SqlBackend):
    """
    PostgreSQL backend using an asyncpg connection pool.

    A connection is acquired for each statement and released afterwards.
    Statements run in asyncpg's implicit autocommit mode.

    Timestamp columns are TIMESTAMP WITHOUT TIME ZONE holding UTC values;
    they are bound as text with an explicit cast and read back as strings.
    """

    def __init__(self, db_pool: asyncpg.Pool):
        """
        Args:
            db_pool: An active asyncpg.Pool object.
        """
        if not isinstance(db_pool, asyncpg.Pool):
            raise TypeError("db_pool must be an instance of asyncpg.Pool")

        self._pool = db_pool
        self._logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    @property
    def dialect(self) -> Dialect:
        return Dialect.POSTGRES

    # --- Connection/Session Management ---
    @asynccontextmanager
    async def _get_session(self) -> AsyncGenerator[asyncpg.Connection, None]:
        """Acquire a connection from the pool and release it afterwards."""
        conn: Optional[asyncpg.Connection] = None
        try:
            conn = await self._pool.acquire()
            self._logger.debug(f"Acquired connection {conn} from pool.")
            yield conn
        except Exception as e:
            self._logger.error(
                f"Error during connection handling: {e}", exc_info=True
            )
            raise
        finally:
            if conn:
                try:
                    await self._pool.release(conn)
                    self._logger.debug(f"Released connection {conn} back to pool.")
                except Exception as release_error:
                    self._logger.error(
                        f"Error releasing connection {conn}: {release_error}",
                        exc_info=True,
                    )

    async def execute(self, sql: str, params: Sequence[Any] = ()) -> int:
        try:
            async with self._get_session() as conn:
                status = await conn.execute(sql, *params)
        except Exception as e:
            self._handle_db_error(e, f"executing '{sql}'")
            raise

        match = _STATUS_COUNT.search(status or "")
        if not match:
            # DDL statuses such as 'CREATE TABLE' carry no count
            return 0
        return int(match.group(1))

    async def select_rows(
        self, sql: str, params: Sequence[Any] = ()
    ) -> List[Dict[str, str]]:
        try:
            async with self._get_session() as conn:
                rows = await conn.fetch(sql, *params)
        except Exception as e:
            self._handle_db_error(e, f"querying '{sql}'")
            raise
        return [row_to_strings(row) for row in rows]

    def _handle_db_error(self, error: Exception, context: str = "") -> None:
        """
        Map asyncpg errors to store exceptions.

        Raises:
            KeyAlreadyExistsException: For unique violations.
            RuntimeError: For any other database error.
        """
        log_message = f"Error during {context}: {error}"

        if isinstance(error, asyncpg.PostgresError):
            self._logger.error(log_message, exc_info=True)
            if isinstance(error, asyncpg.UniqueViolationError):
                raise KeyAlreadyExistsException(
                    f"A record with the same ID already exists. Detail: {error}"
                ) from error
            raise RuntimeError(
                f"Database error during {context}: {error}"
            ) from error

        if isinstance(error, asyncpg.InterfaceError):
            self._logger.error(log_message, exc_info=True)
            raise RuntimeError(
                f"Database interface error during {context}: {error}"
            ) from error

        self._logger.error(log_message)
        raise error
