from collections.abc import Callable, Mapping, Sequence
from math import ceil
from typing import Any, NamedTuple, TypeVar

from loggers import get_logger
from src.core.errors.exceptions import InvalidArgumentException
from src.core.pagination.schemas import PaginationMeta, PaginationParams
from src.core.responses import ApiResponse
from src.core.schemas import Base
from src.main.config import config

logger = get_logger(__name__)

T = TypeVar("T")
SchemaT = TypeVar("SchemaT", bound=Base)

NO_ITEMS_FOUND_MESSAGE = "No items found"

ServiceResult = tuple[Sequence[Any], int]


class PaginatedResult(NamedTuple):
    """One already paginated page returned by a service, with the overall total."""

    items: Sequence[Any]
    total_records: int


def get_default_page_size() -> int:
    return config.pagination.DEFAULT_PAGE_SIZE


def get_max_page_size() -> int:
    return config.pagination.MAX_PAGE_SIZE


def _ensure_positive(name: str, value: int) -> None:
    if value < 1:
        raise InvalidArgumentException(
            f"{name} must be greater than or equal to 1", {name: value}
        )


def _coerce_int(name: str, raw: Any, default: int) -> int:
    if raw is None or raw == "":
        return default
    if isinstance(raw, bool):
        raise InvalidArgumentException(f"{name} must be an integer", {name: raw})
    try:
        return int(raw)
    except (TypeError, ValueError) as exc:
        raise InvalidArgumentException(
            f"{name} must be an integer", {name: raw}
        ) from exc


def compute_meta(total_records: int, page: int, limit: int) -> PaginationMeta:
    """
    Build pagination metadata for a page of ``limit`` items out of ``total_records``.

    :raises InvalidArgumentException: if page or limit is below 1, or the total is negative.
    """
    _ensure_positive("page", page)
    _ensure_positive("limit", limit)
    if total_records < 0:
        raise InvalidArgumentException(
            "totalRecords must not be negative", {"total_records": total_records}
        )

    total_pages = ceil(total_records / limit) if total_records else 0
    has_next_page = page < total_pages
    has_previous_page = page > 1

    return PaginationMeta(
        total_records=total_records,
        page=page,
        limit=limit,
        total_pages=total_pages,
        has_next_page=has_next_page,
        has_previous_page=has_previous_page,
        next_page=page + 1 if has_next_page else None,
        previous_page=page - 1 if has_previous_page else None,
        first_page=1,
        last_page=total_pages,
    )


def normalize_request_params(
    raw_page: Any = None,
    raw_limit: Any = None,
    raw_search: Any = None,
    raw_sort: Any = None,
    raw_filters: Any = None,
    *,
    default_limit: int | None = None,
    max_limit: int | None = None,
) -> PaginationParams:
    """
    Turn raw request values into :class:`PaginationParams`.

    Page defaults to 1 and limit to the configured page size; the limit is
    clamped to ``max_limit``. Sort and filter values that are not mappings are
    dropped. ``start`` is the zero-based offset ``(page - 1) * limit``.
    """
    default_limit = default_limit or get_default_page_size()
    max_limit = max_limit or get_max_page_size()

    page = _coerce_int("page", raw_page, 1)
    limit = _coerce_int("limit", raw_limit, default_limit)
    _ensure_positive("page", page)
    _ensure_positive("limit", limit)

    if limit > max_limit:
        logger.debug("Requested limit %s clamped to %s", limit, max_limit)
        limit = max_limit

    return PaginationParams(
        start=(page - 1) * limit,
        page=page,
        limit=limit,
        search="" if raw_search is None else str(raw_search),
        sort=dict(raw_sort) if isinstance(raw_sort, Mapping) else {},
        filters=dict(raw_filters) if isinstance(raw_filters, Mapping) else {},
    )


def slice_sequence(items: Sequence[T], page: int, limit: int) -> list[T]:
    """Return the items of ``page`` when the whole result set is held in memory."""
    _ensure_positive("page", page)
    _ensure_positive("limit", limit)
    offset = (page - 1) * limit
    return list(items[offset : offset + limit])


def _parse_items(items: Sequence[Any], schema: type[SchemaT] | None) -> list[Any]:
    if schema is None:
        return list(items)
    return [
        item if isinstance(item, schema) else schema.model_validate(item)
        for item in items
    ]


def make_paginated_response(
    *,
    items: Sequence[Any],
    total_records: int,
    page: int,
    limit: int,
    message: str,
    schema: type[SchemaT] | None = None,
) -> ApiResponse:
    """Success response for one page of items plus its pagination metadata."""
    meta = compute_meta(total_records, page, limit)
    return ApiResponse.success(message, _parse_items(items, schema), meta)


def _not_found_response() -> ApiResponse:
    logger.info("Paginated request returned no items")
    return ApiResponse.error(NO_ITEMS_FOUND_MESSAGE, [], status_code=404)


def paginate_from_service(
    params: PaginationParams,
    service_method: Callable[[], ServiceResult],
    message: str,
    schema: type[SchemaT] | None = None,
) -> ApiResponse:
    """
    Paginate in memory the full item list returned by ``service_method``.

    ``service_method`` returns ``(items, total_records)``; an empty item list
    yields a 404 "No items found" error envelope.
    """
    items, total_records = service_method()
    if not items:
        return _not_found_response()

    return make_paginated_response(
        items=slice_sequence(items, params.page, params.limit),
        total_records=total_records,
        page=params.page,
        limit=params.limit,
        message=message,
        schema=schema,
    )


def paginate_from_service_with_params(
    params: PaginationParams,
    service_method: Callable[[PaginationParams], PaginatedResult | Sequence[Any]],
    message: str,
    schema: type[SchemaT] | None = None,
) -> ApiResponse:
    """
    Call ``service_method(params)`` and wrap its result.

    A :class:`PaginatedResult` is taken as an already paginated page. Any
    other sequence, plain tuples included, is the full item set and is
    paginated in memory.
    """
    result = service_method(params)

    if isinstance(result, PaginatedResult):
        return make_paginated_response(
            items=result.items,
            total_records=result.total_records,
            page=params.page,
            limit=params.limit,
            message=message,
            schema=schema,
        )

    if not result:
        return _not_found_response()

    return make_paginated_response(
        items=slice_sequence(result, params.page, params.limit),
        total_records=len(result),
        page=params.page,
        limit=params.limit,
        message=message,
        schema=schema,
    )
