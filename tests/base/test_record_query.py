# tests/base/test_record_query.py

import pytest

from record_store.base.columns import (
    COLUMN_CREATED_AT,
    COLUMN_ID,
    COLUMN_PAYLOAD,
    COLUMN_RECORD_TYPE,
    COLUMN_SOFT_DELETED_AT,
)
from record_store.base.exceptions import ValidationError
from record_store.base.query import (
    QueryFilter,
    QueryLogical,
    QueryOperator,
    RecordQuery,
    record_query,
)
from record_store.base.utils import now_datetime_string
from record_store.sql.dialect import Dialect

TABLE = "records"


def _soft_delete_filter(clock):
    return QueryFilter(COLUMN_SOFT_DELETED_AT, QueryOperator.GT, now_datetime_string(clock))


# --- Builder ---


def test_setters_chain_and_getters_reflect_values():
    query = (
        record_query()
        .set_id("abc")
        .set_type("person")
        .set_columns([COLUMN_ID, COLUMN_PAYLOAD])
        .set_limit(5)
        .set_offset(10)
        .set_order_by(COLUMN_CREATED_AT)
        .set_count_only(True)
        .set_soft_deleted_included(True)
        .add_payload_search('"status":"approved"')
        .add_payload_search_not('"name":"Tom"')
    )

    assert query.is_id_set() and query.get_id() == "abc"
    assert query.is_type_set() and query.get_type() == "person"
    assert query.get_columns() == [COLUMN_ID, COLUMN_PAYLOAD]
    assert query.is_limit_set() and query.get_limit() == 5
    assert query.is_offset_set() and query.get_offset() == 10
    assert query.is_order_by_set() and query.get_order_by() == COLUMN_CREATED_AT
    assert query.is_count_only()
    assert query.is_soft_deleted_included()
    assert query.get_payload_search() == ['"status":"approved"']
    assert query.get_payload_search_not() == ['"name":"Tom"']


def test_fresh_query_has_nothing_set():
    query = RecordQuery()
    assert not query.is_id_set()
    assert not query.is_type_set()
    assert not query.is_limit_set()
    assert not query.is_offset_set()
    assert not query.is_order_by_set()
    assert not query.is_count_only()
    assert not query.is_soft_deleted_included()
    assert query.get_columns() == []


@pytest.mark.parametrize("value", [-1, 1.5, "10", True, False])
def test_limit_and_offset_reject_invalid_values(value):
    with pytest.raises(ValueError):
        RecordQuery().set_limit(value)
    with pytest.raises(ValueError):
        RecordQuery().set_offset(value)


# --- Validation ---


def test_empty_id_fails_validation(clock):
    query = RecordQuery().set_id("")
    with pytest.raises(ValidationError):
        query.validate()
    with pytest.raises(ValidationError):
        query.to_select(Dialect.SQLITE, TABLE, clock)


def test_empty_type_fails_validation():
    with pytest.raises(ValidationError):
        RecordQuery().set_type("").validate()


def test_unset_id_renders(clock):
    select, columns = RecordQuery().to_select(Dialect.SQLITE, TABLE, clock)
    assert select.table_name == TABLE
    assert columns == []


# --- Rendering to a select description ---


def test_default_query_only_filters_soft_deleted(clock):
    select, _ = RecordQuery().to_select(Dialect.SQLITE, TABLE, clock)

    assert select.expression == QueryLogical("and", [_soft_delete_filter(clock)])
    assert select.limit is None
    assert select.offset is None
    assert select.order_by == []


def test_id_and_type_filters_are_added(clock):
    select, _ = (
        RecordQuery().set_id("abc").set_type("person").to_select(Dialect.SQLITE, TABLE, clock)
    )

    assert select.expression == QueryLogical(
        "and",
        [
            QueryFilter(COLUMN_ID, QueryOperator.EQ, "abc"),
            _soft_delete_filter(clock),
            QueryFilter(COLUMN_RECORD_TYPE, QueryOperator.EQ, "person"),
        ],
    )


def test_payload_search_terms_are_or_ed_and_exclusions_and_ed(clock):
    select, _ = (
        RecordQuery()
        .add_payload_search("a")
        .add_payload_search("b")
        .add_payload_search_not("c")
        .add_payload_search_not("d")
        .to_select(Dialect.SQLITE, TABLE, clock)
    )

    payload_group = select.expression.conditions[0]
    assert payload_group == QueryLogical(
        "and",
        [
            QueryLogical(
                "or",
                [
                    QueryFilter(COLUMN_PAYLOAD, QueryOperator.CONTAINS, "a"),
                    QueryFilter(COLUMN_PAYLOAD, QueryOperator.CONTAINS, "b"),
                ],
            ),
            QueryFilter(COLUMN_PAYLOAD, QueryOperator.NOT_CONTAINS, "c"),
            QueryFilter(COLUMN_PAYLOAD, QueryOperator.NOT_CONTAINS, "d"),
        ],
    )


def test_soft_deleted_included_skips_all_filters(clock):
    query = (
        RecordQuery()
        .set_type("person")
        .set_limit(3)
        .set_columns([COLUMN_ID])
        .set_soft_deleted_included(True)
    )
    select, columns = query.to_select(Dialect.SQLITE, TABLE, clock)

    assert select.expression is None
    assert select.limit is None
    assert columns == []


def test_offset_without_limit_defaults_limit_to_ten(clock):
    query = RecordQuery().set_offset(20)
    select, _ = query.to_select(Dialect.SQLITE, TABLE, clock)

    assert select.limit == 10
    assert select.offset == 20
    assert query.is_limit_set()
    assert query.get_limit() == 10


def test_explicit_limit_is_kept_with_offset(clock):
    select, _ = RecordQuery().set_limit(3).set_offset(6).to_select(Dialect.SQLITE, TABLE, clock)
    assert (select.limit, select.offset) == (3, 6)


def test_count_only_drops_pagination(clock):
    select, _ = (
        RecordQuery()
        .set_limit(5)
        .set_offset(5)
        .set_count_only(True)
        .to_select(Dialect.SQLITE, TABLE, clock)
    )
    assert select.limit is None
    assert select.offset is None


def test_order_by_is_descending(clock):
    select, _ = RecordQuery().set_order_by(COLUMN_CREATED_AT).to_select(Dialect.SQLITE, TABLE, clock)
    assert select.order_by == [(COLUMN_CREATED_AT, True)]


def test_columns_are_returned_as_projection(clock):
    _, columns = RecordQuery().set_columns([COLUMN_ID]).to_select(Dialect.MYSQL, TABLE, clock)
    assert columns == [COLUMN_ID]


def test_soft_delete_filter_follows_clock(clock):
    clock.advance(hours=1)
    select, _ = RecordQuery().to_select(Dialect.POSTGRES, TABLE, clock)

    assert select.dialect is Dialect.POSTGRES
    assert select.expression.conditions[-1] == QueryFilter(
        COLUMN_SOFT_DELETED_AT, QueryOperator.GT, "2024-01-15 13:00:00"
    )
