# src/record_store/store.py

import logging
from logging import LoggerAdapter
from typing import TYPE_CHECKING, Any, List, Optional, Sequence

from record_store.base.clock import Clock
from record_store.base.columns import COLUMN_ID, COLUMN_SOFT_DELETED_AT, MAX_DATETIME
from record_store.base.interfaces import SqlBackend, StoreInterface
from record_store.base.query import RecordQuery
from record_store.base.record import Record
from record_store.base.utils import now_datetime_string
from record_store.sql.dialect import Dialect
from record_store.sql.renderer import (
    render_count,
    render_create_table,
    render_delete,
    render_insert,
    render_select,
    render_update,
)

if TYPE_CHECKING:
    from record_store.config import StoreSettings


class RecordStore(StoreInterface):
    """
    Stores records in a single SQL table through a SqlBackend.

    The store renders every statement itself and hands it to the backend with
    positional parameters; the backend only executes. All timestamps written
    by the store come from `clock` (the system clock by default).

    Example::

        backend = SqliteBackend(await aiosqlite.connect("app.db"))
        store = RecordStore(backend, "records", automigrate_enabled=True)
        await store.initialize(logger)

        record = Record.new("person")
        record.set_payload_map({"name": "Jon"})
        await store.record_create(record, logger)
    """

    def __init__(
        self,
        backend: SqlBackend,
        table_name: str,
        automigrate_enabled: bool = False,
        debug_enabled: bool = False,
        clock: Optional[Clock] = None,
    ):
        """
        Args:
            backend: Executes the rendered statements.
            table_name: The name of the records table.
            automigrate_enabled: If True, `initialize` creates the table.
            debug_enabled: If True, every statement and its parameters are logged.
            clock: Source of the current time. Defaults to the system clock.

        Raises:
            ValueError: If the table name is empty or no backend is given.
        """
        if not table_name:
            raise ValueError("record store: table_name is required")
        if backend is None:
            raise ValueError("record store: backend is required")

        self._backend = backend
        self._table_name = table_name
        self._automigrate_enabled = automigrate_enabled
        self._debug_enabled = debug_enabled
        self._clock = clock
        self._logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

        self._logger.info(
            f"Store instance created using table '{table_name}' "
            f"(Dialect: {backend.dialect.value}, Automigrate: {automigrate_enabled}, "
            f"Debug: {debug_enabled})."
        )

    @classmethod
    def from_settings(
        cls,
        backend: SqlBackend,
        settings: "StoreSettings",
        clock: Optional[Clock] = None,
    ) -> "RecordStore":
        """
        Builds a store from StoreSettings.

        Raises:
            ValueError: If the configured dialect does not match the backend.
        """
        if settings.dialect is not backend.dialect:
            raise ValueError(
                f"record store: configured dialect '{settings.dialect.value}' does not "
                f"match backend dialect '{backend.dialect.value}'"
            )
        return cls(
            backend,
            settings.table_name,
            automigrate_enabled=settings.automigrate_enabled,
            debug_enabled=settings.debug_enabled,
            clock=clock,
        )

    # --- Properties ---

    @property
    def automigrate_enabled(self) -> bool:
        return self._automigrate_enabled

    @property
    def debug_enabled(self) -> bool:
        return self._debug_enabled

    @property
    def table_name(self) -> str:
        return self._table_name

    @property
    def dialect(self) -> Dialect:
        return self._backend.dialect

    def enable_debug(self, debug: bool) -> None:
        self._debug_enabled = debug

    def _log_statement(
        self, logger: LoggerAdapter, action: str, sql: str, params: Sequence[Any] = ()
    ) -> None:
        if self._debug_enabled:
            logger.debug(f"{action} query: {sql} params={list(params)}")

    # --- Schema ---

    async def auto_migrate(self, logger: LoggerAdapter) -> None:
        logger.info(f"Attempting to create table '{self._table_name}'...")
        sql = render_create_table(self.dialect, self._table_name)
        self._log_statement(logger, "Create table", sql)
        await self._backend.execute(sql)
        logger.info(f"Table creation/verification complete for '{self._table_name}'.")

    # --- Create ---

    async def record_create(self, record: Record, logger: LoggerAdapter) -> None:
        if record is None:
            raise ValueError("record is None")
        if record.id == "":
            raise ValueError("record ID is required")

        now = now_datetime_string(self._clock)
        record.created_at = now
        record.updated_at = now
        if record.soft_deleted_at == "":
            record.soft_deleted_at = MAX_DATETIME

        sql, params = render_insert(self.dialect, self._table_name, record.data())
        self._log_statement(logger, "Record create", sql, params)

        await self._backend.execute(sql, params)
        record.mark_clean()
        logger.info(f"Record '{record.id}' of type '{record.type}' created.")

    # --- Read ---

    async def record_find_by_id(
        self, record_id: str, logger: LoggerAdapter
    ) -> Optional[Record]:
        if record_id == "":
            raise ValueError("record id is empty")

        records = await self.record_list(
            RecordQuery().set_id(record_id).set_limit(1), logger
        )
        if not records:
            logger.debug(f"Record '{record_id}' not found.")
            return None
        return records[0]

    async def record_list(
        self, query: RecordQuery, logger: LoggerAdapter
    ) -> List[Record]:
        select, columns = query.to_select(self.dialect, self._table_name, self._clock)
        sql, params = render_select(select, columns)
        self._log_statement(logger, "Record list", sql, params)

        rows = await self._backend.select_rows(sql, params)
        return [Record.from_existing_data(row) for row in rows]

    async def record_count(self, query: RecordQuery, logger: LoggerAdapter) -> int:
        query.set_count_only(True)
        select, _ = query.to_select(self.dialect, self._table_name, self._clock)
        sql, params = render_count(select)
        self._log_statement(logger, "Record count", sql, params)

        rows = await self._backend.select_rows(sql, params)
        if not rows:
            return 0
        return int(rows[0]["count"])

    # --- Update ---

    async def record_update(self, record: Record, logger: LoggerAdapter) -> None:
        if record is None:
            raise ValueError("record is None")
        if record.id == "":
            raise ValueError("record id is required")

        data_changed = record.data_changed()
        data_changed.pop(COLUMN_ID, None)  # the ID is not updatable
        if not data_changed:
            logger.debug(f"Record '{record.id}' has no changes to update.")
            return

        if data_changed.get(COLUMN_SOFT_DELETED_AT, MAX_DATETIME) == "":
            record.soft_deleted_at = MAX_DATETIME
        record.updated_at = now_datetime_string(self._clock)
        data_changed = record.data_changed()
        data_changed.pop(COLUMN_ID, None)

        sql, params = render_update(self.dialect, self._table_name, data_changed, record.id)
        self._log_statement(logger, "Record update", sql, params)

        await self._backend.execute(sql, params)
        record.mark_clean()
        logger.info(
            f"Record '{record.id}' updated (columns: {', '.join(sorted(data_changed))})."
        )

    # --- Delete ---

    async def record_soft_delete(self, record: Record, logger: LoggerAdapter) -> None:
        if record is None:
            raise ValueError("record is None")

        record.soft_deleted_at = now_datetime_string(self._clock)
        await self.record_update(record, logger)

    async def record_soft_delete_by_id(
        self, record_id: str, logger: LoggerAdapter
    ) -> None:
        if record_id == "":
            raise ValueError("record id is empty")

        record = await self.record_find_by_id(record_id, logger)
        if record is None:
            # missing or already soft deleted
            return
        await self.record_soft_delete(record, logger)

    async def record_delete(self, record: Record, logger: LoggerAdapter) -> None:
        if record is None:
            raise ValueError("record is None")
        await self.record_delete_by_id(record.id, logger)

    async def record_delete_by_id(self, record_id: str, logger: LoggerAdapter) -> None:
        if record_id == "":
            raise ValueError("record id is empty")

        sql, params = render_delete(self.dialect, self._table_name, record_id)
        self._log_statement(logger, "Record delete", sql, params)

        deleted = await self._backend.execute(sql, params)
        logger.info(f"Record '{record_id}' deleted ({deleted} row(s)).")
