# src/record_store/sql/renderer.py

import logging
from typing import Any, List, Mapping, Optional, Sequence, Tuple

from record_store.base.columns import (
    COLUMN_CREATED_AT,
    COLUMN_ID,
    COLUMN_MEMO,
    COLUMN_METAS,
    COLUMN_PAYLOAD,
    COLUMN_RECORD_TYPE,
    COLUMN_SOFT_DELETED_AT,
    COLUMN_UPDATED_AT,
    ID_MAX_LENGTH,
    RECORD_TYPE_MAX_LENGTH,
)
from record_store.base.query import (
    QueryExpression,
    QueryFilter,
    QueryLogical,
    QueryOperator,
    SelectQuery,
)
from record_store.sql.dialect import Dialect

log = logging.getLogger(__name__)

# --- Column Types ---
# Logical column kinds mapped to the concrete type of each dialect.
_STRING = "string"
_TEXT = "text"
_LONGTEXT = "longtext"
_DATETIME = "datetime"

_COLUMN_TYPES = {
    Dialect.SQLITE: {_TEXT: "TEXT", _LONGTEXT: "TEXT", _DATETIME: "DATETIME"},
    Dialect.POSTGRES: {_TEXT: "TEXT", _LONGTEXT: "TEXT", _DATETIME: "TIMESTAMP"},
    Dialect.MYSQL: {_TEXT: "TEXT", _LONGTEXT: "LONGTEXT", _DATETIME: "DATETIME"},
}

# (column, kind, length, nullable, primary key)
_TABLE_LAYOUT = (
    (COLUMN_ID, _STRING, ID_MAX_LENGTH, False, True),
    (COLUMN_RECORD_TYPE, _STRING, RECORD_TYPE_MAX_LENGTH, False, False),
    (COLUMN_PAYLOAD, _LONGTEXT, None, True, False),
    (COLUMN_METAS, _TEXT, None, True, False),
    (COLUMN_MEMO, _TEXT, None, True, False),
    (COLUMN_CREATED_AT, _DATETIME, None, False, False),
    (COLUMN_UPDATED_AT, _DATETIME, None, False, False),
    (COLUMN_SOFT_DELETED_AT, _DATETIME, None, True, False),
)


def _translate_expression(
    dialect: Dialect, expression: QueryExpression, params: List[Any]
) -> str:
    """
    Recursively translates an expression into a WHERE fragment.

    Parameter values are appended to `params`; markers are numbered from its
    current length so PostgreSQL positions stay consistent across nesting.
    """
    if isinstance(expression, QueryFilter):
        column = dialect.quote_identifier(expression.field_path)
        op = expression.operator

        if op in (QueryOperator.CONTAINS, QueryOperator.NOT_CONTAINS):
            params.append(f"%{expression.value}%")
            keyword = "LIKE" if op is QueryOperator.CONTAINS else "NOT LIKE"
            return f"{column} {keyword} {dialect.placeholder(len(params))}"

        if op is QueryOperator.EQ:
            symbol = "="
        elif op is QueryOperator.GT:
            symbol = ">"
        else:
            raise ValueError(f"Unsupported query operator: {op!r}")

        params.append(expression.value)
        return f"{column} {symbol} {dialect.bind(expression.field_path, len(params))}"

    if isinstance(expression, QueryLogical):
        fragments = [
            _translate_expression(dialect, condition, params)
            for condition in expression.conditions
        ]
        fragments = [f for f in fragments if f]
        if not fragments:
            return ""
        joiner = " AND " if expression.operator == "and" else " OR "
        if len(fragments) == 1:
            return fragments[0]
        return "(" + joiner.join(fragments) + ")"

    raise ValueError(f"Unsupported query expression: {type(expression).__name__}")


def _where_clause(query: SelectQuery, params: List[Any]) -> str:
    if query.expression is None:
        return ""
    fragment = _translate_expression(query.dialect, query.expression, params)
    return f" WHERE {fragment}" if fragment else ""


def render_select(
    query: SelectQuery, columns: Optional[Sequence[str]] = None
) -> Tuple[str, List[Any]]:
    """
    Renders a SELECT statement for `query`.

    Args:
        query: The select description built by RecordQuery.to_select().
        columns: Columns to project. Empty or None selects every column.

    Returns:
        The SQL text and its positional parameters.

    Raises:
        ValueError: If the query has an offset without a limit, or carries an
            operator the renderer does not know.
    """
    dialect = query.dialect
    params: List[Any] = []

    projection = (
        ", ".join(dialect.quote_identifier(c) for c in columns) if columns else "*"
    )
    sql = f"SELECT {projection} FROM {dialect.quote_identifier(query.table_name)}"
    sql += _where_clause(query, params)

    if query.order_by:
        order_parts = [
            f"{dialect.quote_identifier(col)} {'DESC' if descending else 'ASC'}"
            for col, descending in query.order_by
        ]
        sql += " ORDER BY " + ", ".join(order_parts)

    if query.offset is not None and query.limit is None:
        raise ValueError("An offset requires a limit.")
    if query.limit is not None:
        sql += f" LIMIT {int(query.limit)}"
    if query.offset is not None:
        sql += f" OFFSET {int(query.offset)}"

    log.debug(f"Rendered select: {sql} params={params}")
    return sql, params


def render_count(query: SelectQuery) -> Tuple[str, List[Any]]:
    """Renders `SELECT COUNT(*) AS count` over the rows `query` matches."""
    params: List[Any] = []
    sql = (
        f"SELECT COUNT(*) AS count FROM "
        f"{query.dialect.quote_identifier(query.table_name)}"
    )
    sql += _where_clause(query, params)
    log.debug(f"Rendered count: {sql} params={params}")
    return sql, params


def render_insert(
    dialect: Dialect, table_name: str, data: Mapping[str, Any]
) -> Tuple[str, List[Any]]:
    if not data:
        raise ValueError("Cannot render an insert without columns.")
    columns = list(data.keys())
    params = [data[c] for c in columns]
    column_sql = ", ".join(dialect.quote_identifier(c) for c in columns)
    value_sql = ", ".join(dialect.bind(c, i) for i, c in enumerate(columns, start=1))
    sql = (
        f"INSERT INTO {dialect.quote_identifier(table_name)} "
        f"({column_sql}) VALUES ({value_sql})"
    )
    return sql, params


def render_update(
    dialect: Dialect, table_name: str, data: Mapping[str, Any], record_id: str
) -> Tuple[str, List[Any]]:
    """Renders an UPDATE of the given columns on the row with `record_id`."""
    if not data:
        raise ValueError("Cannot render an update without columns.")
    columns = list(data.keys())
    params: List[Any] = [data[c] for c in columns]
    set_sql = ", ".join(
        f"{dialect.quote_identifier(c)} = {dialect.bind(c, i)}"
        for i, c in enumerate(columns, start=1)
    )
    params.append(record_id)
    sql = (
        f"UPDATE {dialect.quote_identifier(table_name)} SET {set_sql} "
        f"WHERE {dialect.quote_identifier(COLUMN_ID)} = {dialect.placeholder(len(params))}"
    )
    return sql, params


def render_delete(
    dialect: Dialect, table_name: str, record_id: str
) -> Tuple[str, List[Any]]:
    sql = (
        f"DELETE FROM {dialect.quote_identifier(table_name)} "
        f"WHERE {dialect.quote_identifier(COLUMN_ID)} = {dialect.placeholder(1)}"
    )
    return sql, [record_id]


def render_create_table(dialect: Dialect, table_name: str) -> str:
    """Renders an idempotent CREATE TABLE for the records layout."""
    types = _COLUMN_TYPES[dialect]
    definitions = []
    for name, kind, length, nullable, primary_key in _TABLE_LAYOUT:
        col_type = f"VARCHAR({length})" if kind == _STRING else types[kind]
        definition = f"{dialect.quote_identifier(name)} {col_type}"
        if primary_key:
            definition += " PRIMARY KEY"
        definition += " NULL" if nullable else " NOT NULL"
        definitions.append(definition)
    return (
        f"CREATE TABLE IF NOT EXISTS {dialect.quote_identifier(table_name)} "
        f"({', '.join(definitions)})"
    )
