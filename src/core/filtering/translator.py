from collections.abc import Callable, Mapping, Sequence
from datetime import date, datetime
import re
from typing import Any

from loggers import get_logger
from src.core.errors.exceptions import FilteringError
from src.core.filtering.interfaces import QueryBuilder
from src.core.filtering.operators import FilterOperator, SortDirection
from src.main.config import config

logger = get_logger(__name__)

BOOLEAN_LITERALS = ("true", "false")
PARAMETER_DATETIME_FORMAT = "%Y-%m-%d %H:%M:%S"

FilterHandler = Callable[[QueryBuilder, str, Any, "ParameterNames"], None]


def _split_columns(column: str) -> list[str]:
    return [part.strip() for part in column.split(",") if part.strip()]


class ParameterNames:
    """
    Bind parameter names handed out while translating one set of filters.

    A name is the last dotted segment of the column expression with non-word
    characters dropped (``d.createdAt`` -> ``createdAt``,
    ``LOWER(d.name)`` -> ``name``). Names already taken get a numeric suffix,
    so ``d.id`` and ``o.id`` bind ``id`` and ``id_2``.
    """

    def __init__(self) -> None:
        self._taken: set[str] = set()

    def reserve(self, column: str, *suffixes: str) -> str:
        base = re.sub(r"\W", "", column.rsplit(".", 1)[-1]) or "param"
        name, counter = base, 1
        while any(f"{name}{suffix}" in self._taken for suffix in ("", *suffixes)):
            counter += 1
            name = f"{base}_{counter}"
        self._taken.update(f"{name}{suffix}" for suffix in ("", *suffixes))
        return name


def _payload_value(data: Any) -> Any:
    # grouped operators send {"data": "..."} rather than a bare value
    if isinstance(data, Mapping):
        return data.get("data", "")
    return data


def _parse_datetime(value: Any, bound: str) -> datetime:
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, datetime.min.time())
    if not isinstance(value, str) or not value.strip():
        raise FilteringError(
            f"Missing '{bound}' date for between filter", {"bound": bound}
        )
    try:
        return datetime.fromisoformat(value.strip())
    except ValueError as exc:
        raise FilteringError(
            f"Invalid '{bound}' date for between filter",
            {"bound": bound, "value": value},
        ) from exc


class FilterSortTranslator:
    """
    Translate request filters and sorting into calls on a :class:`QueryBuilder`.

    ``allowed_fields`` maps the public field names accepted from clients to
    the column expressions used in the query, e.g. ``{"name": "d.name"}``.
    A column expression may list several columns separated by commas for the
    ``or`` and ``like`` operators. Fields missing from the mapping are
    ignored, for filters and for sorting alike, so raw client input never
    reaches the query.

    Filters are AND-ed together; only ``or`` (and multi-column ``like``)
    build an OR group internally. When no sort is requested the query is
    ordered by ``default_sort``.
    """

    def __init__(
        self,
        allowed_fields: Mapping[str, str],
        default_sort: tuple[str, str] | None = None,
    ) -> None:
        self.allowed_fields = dict(allowed_fields)
        self.default_sort = default_sort or (
            config.pagination.DEFAULT_SORT_FIELD,
            config.pagination.DEFAULT_SORT_DIRECTION,
        )
        self._handlers: dict[FilterOperator, FilterHandler] = {
            FilterOperator.EQUAL: self._apply_equal,
            FilterOperator.LIKE: self._apply_like,
            FilterOperator.OR: self._apply_or,
            FilterOperator.GT: self._apply_gt,
            FilterOperator.BETWEEN: self._apply_between,
        }

    def resolve(self, field: str) -> str | None:
        return self.allowed_fields.get(field)

    def apply(
        self,
        query: QueryBuilder,
        filters: Mapping[str, Any] | None = None,
        sorts: Mapping[str, Any] | None = None,
    ) -> None:
        self.apply_filters(query, filters)
        self.apply_sorts(query, sorts)

    def apply_filters(
        self, query: QueryBuilder, filters: Mapping[str, Any] | None
    ) -> None:
        names = ParameterNames()
        for field, definition in (filters or {}).items():
            if not field or not definition:
                continue
            if not isinstance(definition, Mapping):
                logger.debug("Filter '%s' skipped: malformed payload", field)
                continue

            column = self.resolve(field)
            if column is None:
                logger.debug("Filter '%s' skipped: field is not allowed", field)
                continue

            try:
                operator = FilterOperator(definition.get("operator"))
            except ValueError:
                logger.debug(
                    "Filter '%s' skipped: unknown operator %r",
                    field,
                    definition.get("operator"),
                )
                continue

            data = definition.get("data")
            if data is None:
                logger.debug("Filter '%s' skipped: no data", field)
                continue

            self._handlers[operator](query, column, data, names)

    def apply_sorts(self, query: QueryBuilder, sorts: Mapping[str, Any] | None) -> None:
        if not sorts:
            column, direction = self.default_sort
            query.add_order_by(column, direction)
            return

        for field, direction in sorts.items():
            column = self.resolve(field)
            if column is None:
                logger.debug("Sort '%s' skipped: field is not allowed", field)
                continue
            try:
                sort_direction = SortDirection(str(direction).strip().upper())
            except ValueError:
                logger.debug(
                    "Sort '%s' skipped: invalid direction %r", field, direction
                )
                continue
            for part in _split_columns(column):
                query.add_order_by(part, sort_direction.value)

    def apply_search(
        self, query: QueryBuilder, search: str | None, fields: Sequence[str]
    ) -> None:
        """OR-ed ``LIKE '%search%'`` over the given allowed fields."""
        if not search:
            return
        expr = query.expr()
        pattern = expr.literal(f"%{search}%")
        parts = [
            expr.like(part, pattern)
            for field in fields
            if (column := self.resolve(field)) is not None
            for part in _split_columns(column)
        ]
        if parts:
            query.and_where(expr.orx(*parts))

    # ----- Operators ----- #
    def _apply_equal(
        self, query: QueryBuilder, column: str, data: Any, names: ParameterNames
    ) -> None:
        expr = query.expr()
        # only the exact strings compare unquoted, anything else is a literal
        if data in BOOLEAN_LITERALS:
            query.and_where(expr.eq(column, data))
        else:
            query.and_where(expr.eq(column, expr.literal(_payload_value(data))))

    def _apply_like(
        self, query: QueryBuilder, column: str, data: Any, names: ParameterNames
    ) -> None:
        expr = query.expr()
        columns = _split_columns(column)
        value = _payload_value(data)

        if len(columns) > 1:
            words = str(value).split() or [""]
            parts = [
                expr.like(part, expr.literal(f"%{word}%"))
                for part in columns
                for word in words
            ]
            query.and_where(expr.orx(*parts))
            return

        query.and_where(expr.like(column, expr.literal(f"%{value}%")))

    def _apply_or(
        self, query: QueryBuilder, column: str, data: Any, names: ParameterNames
    ) -> None:
        expr = query.expr()
        pattern = expr.literal(f"%{_payload_value(data)}%")
        parts = [expr.like(part, pattern) for part in _split_columns(column)]
        query.and_where(expr.orx(*parts))

    def _apply_gt(
        self, query: QueryBuilder, column: str, data: Any, names: ParameterNames
    ) -> None:
        name = names.reserve(column)
        query.set_parameter(name, _payload_value(data))
        query.and_where(f"{column} > :{name}")

    def _apply_between(
        self, query: QueryBuilder, column: str, data: Any, names: ParameterNames
    ) -> None:
        if not isinstance(data, Mapping):
            raise FilteringError(
                "Between filter expects 'first' and 'second' dates",
                {"column": column},
            )
        first = _parse_datetime(data.get("first"), "first")
        second = _parse_datetime(data.get("second"), "second")

        name = names.reserve(column, "2")
        query.set_parameter(name, first.strftime(PARAMETER_DATETIME_FORMAT))
        query.set_parameter(f"{name}2", second.strftime(PARAMETER_DATETIME_FORMAT))
        query.and_where(f"{column} >= :{name}")
        query.and_where(f"{column} <= :{name}2")
