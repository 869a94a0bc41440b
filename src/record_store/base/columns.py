# src/record_store/base/columns.py

"""Column names of the records table and shared timestamp constants."""

COLUMN_ID = "id"
COLUMN_RECORD_TYPE = "record_type"
COLUMN_PAYLOAD = "payload"
COLUMN_METAS = "metas"
COLUMN_MEMO = "memo"
COLUMN_CREATED_AT = "created_at"
COLUMN_UPDATED_AT = "updated_at"
COLUMN_SOFT_DELETED_AT = "soft_deleted_at"

ALL_COLUMNS = (
    COLUMN_ID,
    COLUMN_RECORD_TYPE,
    COLUMN_PAYLOAD,
    COLUMN_METAS,
    COLUMN_MEMO,
    COLUMN_CREATED_AT,
    COLUMN_UPDATED_AT,
    COLUMN_SOFT_DELETED_AT,
)

DATETIME_COLUMNS = (
    COLUMN_CREATED_AT,
    COLUMN_UPDATED_AT,
    COLUMN_SOFT_DELETED_AT,
)

# Maximum lengths for the string columns
ID_MAX_LENGTH = 40
RECORD_TYPE_MAX_LENGTH = 100

# Storage format for every timestamp column (UTC, lexically sortable)
DATETIME_FORMAT = "%Y-%m-%d %H:%M:%S"

# Soft-delete sentinel: a record whose soft_deleted_at equals this value
# has not been deleted.
MAX_DATETIME = "9999-12-31 23:59:59"

# Limit applied when an offset is requested without a limit
DEFAULT_LIMIT_WITH_OFFSET = 10
