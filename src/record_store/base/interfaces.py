# src/record_store/base/interfaces.py

from abc import ABC, abstractmethod
from logging import LoggerAdapter
from typing import Any, Dict, List, Optional, Sequence

from record_store.base.query import RecordQuery
from record_store.base.record import Record
from record_store.sql.dialect import Dialect


class SqlBackend(ABC):
    """
    Executes rendered SQL statements against one database.

    Backends are handed SQL text with positional parameters in the marker style
    of their `dialect`. They do not build statements themselves and do not own
    transaction boundaries beyond what their driver requires.
    """

    @property
    @abstractmethod
    def dialect(self) -> Dialect:
        """The SQL flavour this backend expects statements in."""
        pass

    @abstractmethod
    async def execute(self, sql: str, params: Sequence[Any] = ()) -> int:
        """
        Execute a statement that returns no rows.

        Args:
            sql: The statement text.
            params: Positional parameters.

        Returns:
            The number of affected rows, or 0 when the driver does not report it.

        Raises:
            KeyAlreadyExistsException: On a primary key or unique violation.
            RuntimeError: For other database errors.
        """
        pass

    @abstractmethod
    async def select_rows(
        self, sql: str, params: Sequence[Any] = ()
    ) -> List[Dict[str, str]]:
        """
        Execute a query and return every row as a column-to-string mapping.

        NULL values are returned as empty strings and timestamps in the
        `YYYY-MM-DD HH:MM:SS` format, so rows can hydrate a Record directly.

        Raises:
            RuntimeError: For database errors.
        """
        pass


class StoreInterface(ABC):
    """
    Persistence operations for records kept in a single table.

    Finder methods return None when nothing matches instead of raising.
    Deleting a record that does not exist is not an error.
    """

    @property
    @abstractmethod
    def automigrate_enabled(self) -> bool:
        """Whether `initialize` creates the table."""
        pass

    async def initialize(self, logger: LoggerAdapter) -> None:
        """
        Prepares the store for use, creating the table when automigration is
        enabled.

        Args:
            logger: Logger adapter for recording initialization steps.
        """
        logger.info(
            f"Initializing {self.__class__.__name__} "
            f"(Automigrate: {self.automigrate_enabled})"
        )
        if self.automigrate_enabled:
            await self.auto_migrate(logger)
        logger.info(f"{self.__class__.__name__} setup complete.")

    @abstractmethod
    async def auto_migrate(self, logger: LoggerAdapter) -> None:
        """Create the records table if it does not exist. Idempotent."""
        pass

    @abstractmethod
    def enable_debug(self, debug: bool) -> None:
        """Turn statement logging on or off."""
        pass

    @abstractmethod
    async def record_create(self, record: Record, logger: LoggerAdapter) -> None:
        """
        Insert a new record. Refreshes the created/updated timestamps, fills
        an empty soft_deleted_at with MAX_DATETIME and marks the record clean
        on success.

        Raises:
            ValueError: If the record has no ID.
            KeyAlreadyExistsException: If a record with the same ID exists.
        """
        pass

    @abstractmethod
    async def record_find_by_id(
        self, record_id: str, logger: LoggerAdapter
    ) -> Optional[Record]:
        """
        Fetch a live (not soft-deleted) record by ID.

        Returns:
            The record, or None if not found.

        Raises:
            ValueError: If `record_id` is empty.
        """
        pass

    @abstractmethod
    async def record_list(
        self, query: RecordQuery, logger: LoggerAdapter
    ) -> List[Record]:
        """
        List records matching the query.

        Raises:
            ValidationError: If the query is invalid.
        """
        pass

    @abstractmethod
    async def record_count(self, query: RecordQuery, logger: LoggerAdapter) -> int:
        """Count records matching the query, ignoring limit and offset."""
        pass

    @abstractmethod
    async def record_update(self, record: Record, logger: LoggerAdapter) -> None:
        """
        Persist the changed columns of a record and refresh updated_at.
        Does nothing when the record is clean. An emptied soft_deleted_at is
        written as MAX_DATETIME.

        Raises:
            ValueError: If the record is None or has no ID.
        """
        pass

    @abstractmethod
    async def record_soft_delete(self, record: Record, logger: LoggerAdapter) -> None:
        """Mark a record as deleted as of now, keeping the row."""
        pass

    @abstractmethod
    async def record_soft_delete_by_id(
        self, record_id: str, logger: LoggerAdapter
    ) -> None:
        pass

    @abstractmethod
    async def record_delete(self, record: Record, logger: LoggerAdapter) -> None:
        """Remove a record's row permanently."""
        pass

    @abstractmethod
    async def record_delete_by_id(self, record_id: str, logger: LoggerAdapter) -> None:
        pass
