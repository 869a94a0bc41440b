# src/record_store/db_implementations/mysql_backend.py

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict, List, Sequence, Tuple

# --- aiomysql Driver Import ---
import aiomysql

# --- Framework Imports ---
from record_store.base.exceptions import KeyAlreadyExistsException
from record_store.base.interfaces import SqlBackend
from record_store.base.utils import row_to_strings
from record_store.sql.dialect import Dialect

# MySQL server error code for ER_DUP_ENTRY
_DUPLICATE_ENTRY = 1062


class MySQLBackend(SqlBackend):
    """
    MySQL backend using an aiomysql connection pool.

    A connection and DictCursor are acquired for each statement. Writes are
    committed immediately after they run.
    """

    def __init__(self, db_pool: aiomysql.Pool):
        """
        Args:
            db_pool: An active aiomysql.Pool object.
        """
        if not isinstance(db_pool, aiomysql.Pool):
            raise TypeError("db_pool must be an instance of aiomysql.Pool")

        self._pool = db_pool
        self._logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    @property
    def dialect(self) -> Dialect:
        return Dialect.MYSQL

    # --- Connection/Session Management ---
    @asynccontextmanager
    async def _get_session(
        self,
    ) -> AsyncGenerator[Tuple[aiomysql.Connection, aiomysql.DictCursor], None]:
        """
        Acquire connection from the pool and create a DictCursor.
        Handles connection release.
        """
        conn = None
        cursor = None
        try:
            conn = await self._pool.acquire()
            self._logger.debug("Acquired connection from pool.")
            cursor = await conn.cursor(aiomysql.DictCursor)
            yield conn, cursor
        except Exception as e:
            self._logger.error(
                f"Error during connection handling: {e}", exc_info=True
            )
            raise
        finally:
            if cursor:
                await cursor.close()
            if conn:
                try:
                    self._pool.release(conn)
                    self._logger.debug("Released connection back to pool.")
                except Exception as release_error:
                    self._logger.error(
                        f"Error releasing connection: {release_error}",
                        exc_info=True,
                    )

    async def execute(self, sql: str, params: Sequence[Any] = ()) -> int:
        try:
            async with self._get_session() as (conn, cursor):
                await cursor.execute(sql, tuple(params) or None)
                affected = cursor.rowcount
                await conn.commit()
        except Exception as e:
            self._handle_db_error(e, f"executing '{sql}'")
            raise
        return affected if affected and affected > 0 else 0

    async def select_rows(
        self, sql: str, params: Sequence[Any] = ()
    ) -> List[Dict[str, str]]:
        try:
            async with self._get_session() as (conn, cursor):
                await cursor.execute(sql, tuple(params) or None)
                rows = await cursor.fetchall()
        except Exception as e:
            self._handle_db_error(e, f"querying '{sql}'")
            raise
        return [row_to_strings(row) for row in rows]

    def _handle_db_error(self, error: Exception, context: str = "") -> None:
        """
        Map aiomysql errors to store exceptions.

        Raises:
            KeyAlreadyExistsException: For duplicate key errors.
            RuntimeError: For any other database error.
        """
        log_message = f"Error during {context}: {error}"

        if isinstance(error, aiomysql.Error):
            self._logger.error(log_message, exc_info=True)
            if isinstance(error, aiomysql.IntegrityError) and (
                (error.args and error.args[0] == _DUPLICATE_ENTRY)
                or "Duplicate entry" in str(error)
            ):
                raise KeyAlreadyExistsException(
                    f"A record with the same ID already exists. Detail: {error}"
                ) from error
            raise RuntimeError(
                f"Database error during {context}: {error}"
            ) from error

        self._logger.error(log_message)
        raise error
