# src/record_store/__init__.py

"""
Record Store Library Initialization.

This package stores schema-light records (a type, a JSON payload, string
metas and a memo) in a single SQL table, with soft deletion, dirty tracking
and a fluent query builder. SQLite, PostgreSQL and MySQL are supported
through async drivers.

It initializes a logger with a NullHandler and makes the record, query,
store and backend classes available at the top level.
"""

import logging

# --------------------------------------------------------------------------
# Logging Setup
# --------------------------------------------------------------------------
# Library logs are discarded unless the consuming application configures
# logging for the "record_store" logger.
logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())
logger.propagate = False

# --------------------------------------------------------------------------
# Core Types and Exceptions
# --------------------------------------------------------------------------
from .base.columns import (
    ALL_COLUMNS,
    COLUMN_CREATED_AT,
    COLUMN_ID,
    COLUMN_MEMO,
    COLUMN_METAS,
    COLUMN_PAYLOAD,
    COLUMN_RECORD_TYPE,
    COLUMN_SOFT_DELETED_AT,
    COLUMN_UPDATED_AT,
    MAX_DATETIME,
)
from .base.clock import Clock, FixedClock, SystemClock
from .base.data_object import DataObject
from .base.exceptions import (
    DecodeError,
    EncodeError,
    KeyAlreadyExistsException,
    RecordStoreError,
    ValidationError,
)
from .base.record import Record

# --------------------------------------------------------------------------
# Query Building Exports
# --------------------------------------------------------------------------
from .base.query import QueryOperator, RecordQuery, SelectQuery, record_query
from .sql.dialect import Dialect

# --------------------------------------------------------------------------
# Store and Backend Exports
# --------------------------------------------------------------------------
from .base.interfaces import SqlBackend, StoreInterface
from .config import StoreSettings, get_settings
from .store import RecordStore
from .db_implementations.sqlite_backend import SqliteBackend
from .db_implementations.postgresql_backend import PostgresBackend
from .db_implementations.mysql_backend import MySQLBackend

__all__ = [
    "ALL_COLUMNS",
    "COLUMN_CREATED_AT",
    "COLUMN_ID",
    "COLUMN_MEMO",
    "COLUMN_METAS",
    "COLUMN_PAYLOAD",
    "COLUMN_RECORD_TYPE",
    "COLUMN_SOFT_DELETED_AT",
    "COLUMN_UPDATED_AT",
    "MAX_DATETIME",
    "Clock",
    "FixedClock",
    "SystemClock",
    "DataObject",
    "DecodeError",
    "EncodeError",
    "KeyAlreadyExistsException",
    "RecordStoreError",
    "ValidationError",
    "Record",
    "QueryOperator",
    "RecordQuery",
    "SelectQuery",
    "record_query",
    "Dialect",
    "SqlBackend",
    "StoreInterface",
    "StoreSettings",
    "get_settings",
    "RecordStore",
    "SqliteBackend",
    "PostgresBackend",
    "MySQLBackend",
]
