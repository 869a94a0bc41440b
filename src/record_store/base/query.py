# src/record_store/base/query.py
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Literal, Optional, Tuple

from ..sql.dialect import Dialect
from .clock import Clock
from .columns import (
    COLUMN_ID,
    COLUMN_PAYLOAD,
    COLUMN_RECORD_TYPE,
    COLUMN_SOFT_DELETED_AT,
    DEFAULT_LIMIT_WITH_OFFSET,
)
from .exceptions import ValidationError
from .utils import now_datetime_string

# --- Setup Logging ---
log = logging.getLogger(__name__)


# --- Query Operator Enum ---
class QueryOperator(Enum):
    """Enumeration of the filter operators a rendered query may contain."""

    EQ = "eq"
    GT = "gt"
    # Substring match against the stored text
    CONTAINS = "contains"
    NOT_CONTAINS = "not_contains"


# --- Structured Query Expression Classes ---
@dataclass
class QueryExpression:
    """Base class for structured query filter expressions."""

    pass


@dataclass
class QueryFilter(QueryExpression):
    """Represents a single filter condition (field_path <operator> value)."""

    field_path: str
    operator: QueryOperator
    value: Any


@dataclass
class QueryLogical(QueryExpression):
    """Represents a logical combination (AND/OR) of expressions."""

    operator: Literal["and", "or"]
    conditions: List[QueryExpression] = field(default_factory=list)


# --- Select Description ---
@dataclass
class SelectQuery:
    """
    Dialect-tagged description of a select over the records table.

    `expression` is None when no predicate applies. `order_by` holds
    (column, descending) pairs. `limit`/`offset` are None when not applied.
    """

    dialect: Dialect
    table_name: str
    expression: Optional[QueryExpression] = None
    order_by: List[Tuple[str, bool]] = field(default_factory=list)
    limit: Optional[int] = None
    offset: Optional[int] = None

    def __repr__(self) -> str:
        parts = [f"dialect={self.dialect.value!r}", f"table_name={self.table_name!r}"]
        if self.expression:
            parts.append(f"expression={self.expression!r}")
        if self.order_by:
            parts.append(f"order_by={self.order_by!r}")
        if self.limit is not None:
            parts.append(f"limit={self.limit!r}")
        if self.offset is not None:
            parts.append(f"offset={self.offset!r}")
        return f"SelectQuery({', '.join(parts)})"


# --- Record Query Builder ---
class RecordQuery:
    """
    Collects filter, sort and pagination options for listing records and
    renders them with `to_select()`.

    Every setter returns the builder so calls can be chained::

        query = RecordQuery().set_type("person").set_limit(20).set_order_by("created_at")

    The builder is a plain mutable object owned by its caller.
    """

    def __init__(self):
        self._logger = log
        self._is_id_set = False
        self._id = ""
        self._is_type_set = False
        self._record_type = ""
        self._columns: List[str] = []
        self._is_count_only = False
        self._is_soft_deleted_included = False
        self._is_limit_set = False
        self._limit = 0
        self._is_offset_set = False
        self._offset = 0
        self._is_order_by_set = False
        self._order_by = ""
        self._payload_search: List[str] = []
        self._payload_search_not: List[str] = []

    def __repr__(self) -> str:
        parts = []
        if self._is_id_set:
            parts.append(f"id={self._id!r}")
        if self._is_type_set:
            parts.append(f"type={self._record_type!r}")
        if self._columns:
            parts.append(f"columns={self._columns!r}")
        if self._is_limit_set:
            parts.append(f"limit={self._limit!r}")
        if self._is_offset_set:
            parts.append(f"offset={self._offset!r}")
        if self._is_order_by_set:
            parts.append(f"order_by={self._order_by!r}")
        if self._is_count_only:
            parts.append("count_only=True")
        if self._is_soft_deleted_included:
            parts.append("soft_deleted_included=True")
        if self._payload_search:
            parts.append(f"payload_search={self._payload_search!r}")
        if self._payload_search_not:
            parts.append(f"payload_search_not={self._payload_search_not!r}")
        return f"RecordQuery({', '.join(parts)})"

    # --- ID ---

    def is_id_set(self) -> bool:
        return self._is_id_set

    def get_id(self) -> str:
        return self._id

    def set_id(self, record_id: str) -> "RecordQuery":
        self._is_id_set = True
        self._id = record_id
        return self

    # --- Type ---

    def is_type_set(self) -> bool:
        return self._is_type_set

    def get_type(self) -> str:
        return self._record_type

    def set_type(self, record_type: str) -> "RecordQuery":
        self._is_type_set = True
        self._record_type = record_type
        return self

    # --- Projection ---

    def get_columns(self) -> List[str]:
        return list(self._columns)

    def set_columns(self, columns: List[str]) -> "RecordQuery":
        self._columns = list(columns)
        return self

    # --- Modes ---

    def is_count_only(self) -> bool:
        return self._is_count_only

    def set_count_only(self, count_only: bool) -> "RecordQuery":
        self._is_count_only = count_only
        return self

    def is_soft_deleted_included(self) -> bool:
        return self._is_soft_deleted_included

    def set_soft_deleted_included(self, soft_deleted_included: bool) -> "RecordQuery":
        self._is_soft_deleted_included = soft_deleted_included
        return self

    # --- Pagination ---

    def is_limit_set(self) -> bool:
        return self._is_limit_set

    def get_limit(self) -> int:
        return self._limit

    def set_limit(self, limit: int) -> "RecordQuery":
        if not isinstance(limit, int) or isinstance(limit, bool) or limit < 0:
            raise ValueError("Limit must be a non-negative integer.")
        self._is_limit_set = True
        self._limit = limit
        return self

    def is_offset_set(self) -> bool:
        return self._is_offset_set

    def get_offset(self) -> int:
        return self._offset

    def set_offset(self, offset: int) -> "RecordQuery":
        if not isinstance(offset, int) or isinstance(offset, bool) or offset < 0:
            raise ValueError("Offset must be a non-negative integer.")
        self._is_offset_set = True
        self._offset = offset
        return self

    # --- Sorting ---

    def is_order_by_set(self) -> bool:
        return self._is_order_by_set

    def get_order_by(self) -> str:
        return self._order_by

    def set_order_by(self, order_by: str) -> "RecordQuery":
        """Sorts by `order_by`, newest/largest first."""
        self._is_order_by_set = True
        self._order_by = order_by
        return self

    # --- Payload search ---

    def add_payload_search(self, needle: str) -> "RecordQuery":
        """Keeps records whose payload contains `needle`. Several needles are OR-ed."""
        self._payload_search.append(needle)
        return self

    def get_payload_search(self) -> List[str]:
        return list(self._payload_search)

    def add_payload_search_not(self, needle: str) -> "RecordQuery":
        """Drops records whose payload contains `needle`. Several needles are AND-ed."""
        self._payload_search_not.append(needle)
        return self

    def get_payload_search_not(self) -> List[str]:
        return list(self._payload_search_not)

    # --- Rendering ---

    def validate(self) -> None:
        """
        Raises:
            ValidationError: If the ID or type filter was set to an empty string.
        """
        if self._is_id_set and self._id == "":
            raise ValidationError("id is required")
        if self._is_type_set and self._record_type == "":
            raise ValidationError("type is required")

    def to_select(
        self,
        dialect: Dialect,
        table_name: str,
        clock: Optional[Clock] = None,
    ) -> Tuple[SelectQuery, List[str]]:
        """
        Renders the options into a SelectQuery and the list of columns to project.

        An empty column list means all columns. Unless soft-deleted records are
        included, the query only matches rows whose soft_deleted_at is strictly
        after the current instant of `clock`.

        Raises:
            ValidationError: If the options are invalid. No query is produced.
        """
        self.validate()

        select = SelectQuery(dialect=dialect, table_name=table_name)

        if self._is_soft_deleted_included:
            self._logger.debug(f"Built select with soft deleted records included: {select!r}")
            return select, []

        conditions: List[QueryExpression] = []

        if self._is_id_set:
            conditions.append(QueryFilter(COLUMN_ID, QueryOperator.EQ, self._id))

        payload_conditions: List[QueryExpression] = []
        if self._payload_search:
            payload_conditions.append(
                QueryLogical(
                    "or",
                    [
                        QueryFilter(COLUMN_PAYLOAD, QueryOperator.CONTAINS, needle)
                        for needle in self._payload_search
                    ],
                )
            )
        for needle in self._payload_search_not:
            payload_conditions.append(
                QueryFilter(COLUMN_PAYLOAD, QueryOperator.NOT_CONTAINS, needle)
            )
        if payload_conditions:
            conditions.append(QueryLogical("and", payload_conditions))

        # offset always requires a limit
        if self._is_offset_set and not self._is_limit_set:
            self.set_limit(DEFAULT_LIMIT_WITH_OFFSET)

        if not self._is_count_only:
            if self._is_limit_set:
                select.limit = self._limit
            if self._is_offset_set:
                select.offset = self._offset

        if self._is_order_by_set:
            select.order_by = [(self._order_by, True)]

        columns = list(self._columns)

        conditions.append(
            QueryFilter(COLUMN_SOFT_DELETED_AT, QueryOperator.GT, now_datetime_string(clock))
        )
        if self._is_type_set:
            conditions.append(QueryFilter(COLUMN_RECORD_TYPE, QueryOperator.EQ, self._record_type))

        select.expression = QueryLogical("and", conditions)
        self._logger.debug(f"Built select for {self!r}: {select!r}")
        return select, columns


def record_query() -> RecordQuery:
    """Shortcut for RecordQuery()."""
    return RecordQuery()
