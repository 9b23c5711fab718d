from __future__ import annotations

from typing import Any

import pytest

from src.core.errors.exceptions import FilteringError
from src.core.filtering import FilterOperator, FilterSortTranslator
from src.main.config import config
from tests.fakes.query_builder import RecordingQueryBuilder

ALLOWED_FIELDS = {
    "id": "d.id",
    "name": "d.name",
    "status": "d.status",
    "amount": "d.amount",
    "createdAt": "d.createdAt",
    "fullName": "d.firstName, d.lastName",
}


@pytest.fixture
def translator() -> FilterSortTranslator:
    return FilterSortTranslator(ALLOWED_FIELDS, default_sort=("d.id", "DESC"))


def test_operator_values() -> None:
    assert [op.value for op in FilterOperator] == [
        "equal",
        "like",
        "or",
        "gt",
        "between",
    ]


@pytest.mark.parametrize("flag", ["true", "false"])
def test_equal_boolean_strings_are_unquoted(
    translator: FilterSortTranslator, query_builder: RecordingQueryBuilder, flag: str
) -> None:
    translator.apply_filters(
        query_builder, {"status": {"operator": "equal", "data": flag}}
    )

    assert query_builder.where == [f"d.status = {flag}"]


@pytest.mark.parametrize("value", ["TRUE", "True", "1", "yes"])
def test_equal_other_values_are_quoted(
    translator: FilterSortTranslator, query_builder: RecordingQueryBuilder, value: str
) -> None:
    translator.apply_filters(
        query_builder, {"status": {"operator": "equal", "data": value}}
    )

    assert query_builder.where == [f"d.status = '{value}'"]


def test_equal_escapes_quotes(
    translator: FilterSortTranslator, query_builder: RecordingQueryBuilder
) -> None:
    translator.apply_filters(
        query_builder, {"name": {"operator": "equal", "data": "O'Brien"}}
    )

    assert query_builder.where == ["d.name = 'O''Brien'"]


def test_like_single_predicate(
    translator: FilterSortTranslator, query_builder: RecordingQueryBuilder
) -> None:
    translator.apply_filters(
        query_builder, {"name": {"operator": "like", "data": "john"}}
    )

    assert query_builder.where == ["d.name LIKE '%john%'"]
    assert query_builder.parameters == {}


def test_like_on_multiple_columns_matches_every_word(
    translator: FilterSortTranslator, query_builder: RecordingQueryBuilder
) -> None:
    translator.apply_filters(
        query_builder,
        {"fullName": {"operator": "like", "data": {"data": "john doe"}}},
    )

    assert query_builder.where == [
        "(d.firstName LIKE '%john%' OR d.firstName LIKE '%doe%'"
        " OR d.lastName LIKE '%john%' OR d.lastName LIKE '%doe%')"
    ]


def test_or_builds_single_or_group(
    translator: FilterSortTranslator, query_builder: RecordingQueryBuilder
) -> None:
    translator.apply_filters(
        query_builder, {"fullName": {"operator": "or", "data": {"data": "jo"}}}
    )

    assert query_builder.where == [
        "(d.firstName LIKE '%jo%' OR d.lastName LIKE '%jo%')"
    ]


def test_or_accepts_bare_value(
    translator: FilterSortTranslator, query_builder: RecordingQueryBuilder
) -> None:
    translator.apply_filters(
        query_builder, {"fullName": {"operator": "or", "data": "jo"}}
    )

    assert query_builder.where == [
        "(d.firstName LIKE '%jo%' OR d.lastName LIKE '%jo%')"
    ]


def test_gt_binds_parameter_named_after_column(
    translator: FilterSortTranslator, query_builder: RecordingQueryBuilder
) -> None:
    translator.apply_filters(query_builder, {"amount": {"operator": "gt", "data": "100"}})

    assert query_builder.where == ["d.amount > :amount"]
    assert query_builder.parameters == {"amount": "100"}


def test_gt_without_alias_uses_whole_column() -> None:
    translator = FilterSortTranslator({"amount": "amount"})
    query = RecordingQueryBuilder()

    translator.apply_filters(query, {"amount": {"operator": "gt", "data": 5}})

    assert query.where == ["amount > :amount"]
    assert query.parameters == {"amount": 5}


def test_gt_on_columns_sharing_a_name_binds_distinct_parameters() -> None:
    translator = FilterSortTranslator({"id": "d.id", "orderId": "o.id"})
    query = RecordingQueryBuilder()

    translator.apply_filters(
        query,
        {
            "id": {"operator": "gt", "data": 1},
            "orderId": {"operator": "gt", "data": 99},
        },
    )

    assert query.where == ["d.id > :id", "o.id > :id_2"]
    assert query.parameters == {"id": 1, "id_2": 99}


def test_gt_on_function_expression_binds_valid_name() -> None:
    translator = FilterSortTranslator({"name": "LOWER(d.name)"})
    query = RecordingQueryBuilder()

    translator.apply_filters(query, {"name": {"operator": "gt", "data": "m"}})

    assert query.where == ["LOWER(d.name) > :name"]
    assert query.parameters == {"name": "m"}


def test_between_after_gt_on_same_name_does_not_overwrite() -> None:
    translator = FilterSortTranslator(
        {"created": "d.createdAt", "orderCreated": "o.createdAt"}
    )
    query = RecordingQueryBuilder()

    translator.apply_filters(
        query,
        {
            "created": {"operator": "gt", "data": "2024-01-01"},
            "orderCreated": {
                "operator": "between",
                "data": {"first": "2024-02-01", "second": "2024-03-01"},
            },
        },
    )

    assert query.where == [
        "d.createdAt > :createdAt",
        "o.createdAt >= :createdAt_2",
        "o.createdAt <= :createdAt_22",
    ]
    assert query.parameters == {
        "createdAt": "2024-01-01",
        "createdAt_2": "2024-02-01 00:00:00",
        "createdAt_22": "2024-03-01 00:00:00",
    }


def test_between_binds_two_formatted_dates(
    translator: FilterSortTranslator, query_builder: RecordingQueryBuilder
) -> None:
    translator.apply_filters(
        query_builder,
        {
            "createdAt": {
                "operator": "between",
                "data": {"first": "2024-01-01", "second": "2024-01-31T23:59:59"},
            }
        },
    )

    assert query_builder.where == [
        "d.createdAt >= :createdAt",
        "d.createdAt <= :createdAt2",
    ]
    assert query_builder.parameters == {
        "createdAt": "2024-01-01 00:00:00",
        "createdAt2": "2024-01-31 23:59:59",
    }


@pytest.mark.parametrize(
    "data",
    [
        {"first": "2024-01-01"},
        {"first": "not-a-date", "second": "2024-01-31"},
        {"first": "2024-01-01", "second": ""},
        "2024-01-01",
    ],
)
def test_between_rejects_malformed_dates(
    translator: FilterSortTranslator, query_builder: RecordingQueryBuilder, data: Any
) -> None:
    with pytest.raises(FilteringError):
        translator.apply_filters(
            query_builder, {"createdAt": {"operator": "between", "data": data}}
        )


def test_filters_combine_with_and(
    translator: FilterSortTranslator, query_builder: RecordingQueryBuilder
) -> None:
    translator.apply_filters(
        query_builder,
        {
            "name": {"operator": "like", "data": "jo"},
            "status": {"operator": "equal", "data": "true"},
            "amount": {"operator": "gt", "data": 10},
        },
    )

    assert query_builder.where == [
        "d.name LIKE '%jo%'",
        "d.status = true",
        "d.amount > :amount",
    ]


@pytest.mark.parametrize(
    "field",
    ["password", "d.name", "name; DROP TABLE users", "1=1 OR d.id", ""],
)
def test_unknown_fields_emit_nothing(
    translator: FilterSortTranslator, query_builder: RecordingQueryBuilder, field: str
) -> None:
    translator.apply(
        query_builder,
        filters={field: {"operator": "equal", "data": "x"}},
        sorts={field: "ASC"},
    )

    assert query_builder.where == []
    assert query_builder.parameters == {}
    assert query_builder.order_by == []


@pytest.mark.parametrize(
    "definition",
    [
        {"operator": "notEqual", "data": "x"},
        {"operator": None, "data": "x"},
        {"data": "x"},
        {"operator": "like"},
        {},
        "like",
    ],
)
def test_unusable_filter_definitions_are_ignored(
    translator: FilterSortTranslator, query_builder: RecordingQueryBuilder, definition: Any
) -> None:
    translator.apply_filters(query_builder, {"name": definition})

    assert query_builder.where == []


def test_sorts_stack_in_request_order(
    translator: FilterSortTranslator, query_builder: RecordingQueryBuilder
) -> None:
    translator.apply_sorts(query_builder, {"name": "asc", "createdAt": "DESC"})

    assert query_builder.order_by == [("d.name", "ASC"), ("d.createdAt", "DESC")]


def test_sort_on_multiple_columns_orders_each(
    translator: FilterSortTranslator, query_builder: RecordingQueryBuilder
) -> None:
    translator.apply_sorts(query_builder, {"fullName": "ASC"})

    assert query_builder.order_by == [("d.firstName", "ASC"), ("d.lastName", "ASC")]


def test_sort_skips_unknown_fields_and_invalid_directions(
    translator: FilterSortTranslator, query_builder: RecordingQueryBuilder
) -> None:
    translator.apply_sorts(
        query_builder,
        {"unknown": "ASC", "name": "DESC; DROP TABLE users", "id": "DESC"},
    )

    assert query_builder.order_by == [("d.id", "DESC")]


@pytest.mark.parametrize("sorts", [None, {}])
def test_empty_sort_uses_default_ordering(
    translator: FilterSortTranslator,
    query_builder: RecordingQueryBuilder,
    sorts: dict[str, str] | None,
) -> None:
    translator.apply_sorts(query_builder, sorts)

    assert query_builder.order_by == [("d.id", "DESC")]


def test_default_ordering_is_injectable(query_builder: RecordingQueryBuilder) -> None:
    translator = FilterSortTranslator(ALLOWED_FIELDS, default_sort=("o.createdAt", "ASC"))

    translator.apply(query_builder)

    assert query_builder.order_by == [("o.createdAt", "ASC")]


def test_default_ordering_comes_from_config(
    monkeypatch: pytest.MonkeyPatch, query_builder: RecordingQueryBuilder
) -> None:
    monkeypatch.setattr(config.pagination, "DEFAULT_SORT_FIELD", "p.code")
    monkeypatch.setattr(config.pagination, "DEFAULT_SORT_DIRECTION", "ASC")

    FilterSortTranslator(ALLOWED_FIELDS).apply(query_builder)

    assert query_builder.order_by == [("p.code", "ASC")]


def test_apply_search_ors_allowed_fields(
    translator: FilterSortTranslator, query_builder: RecordingQueryBuilder
) -> None:
    translator.apply_search(query_builder, "jo", ["name", "fullName", "unknown"])

    assert query_builder.where == [
        "(d.name LIKE '%jo%' OR d.firstName LIKE '%jo%' OR d.lastName LIKE '%jo%')"
    ]


@pytest.mark.parametrize("search", ["", None])
def test_apply_search_without_term_is_noop(
    translator: FilterSortTranslator,
    query_builder: RecordingQueryBuilder,
    search: str | None,
) -> None:
    translator.apply_search(query_builder, search, ["name"])

    assert query_builder.where == []
