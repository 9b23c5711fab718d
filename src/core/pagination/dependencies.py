from fastapi import Request

from src.core.pagination.query_params import parse_nested_query
from src.core.pagination.schemas import PaginationParams
from src.core.pagination.service import normalize_request_params


def get_pagination_params(request: Request) -> PaginationParams:
    """FastAPI dependency: paging, search, sort and filters from the query string."""
    query = parse_nested_query(request.query_params)
    return normalize_request_params(
        raw_page=query.get("page"),
        raw_limit=query.get("limit"),
        raw_search=query.get("search"),
        raw_sort=query.get("sort"),
        raw_filters=query.get("filters"),
    )
