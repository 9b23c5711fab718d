from typing import Any

from pydantic import Field

from src.core.schemas import Base, CamelBase


class PaginationParams(Base):
    """Normalized paging/filtering request values.

    - start: zero-based offset, ``(page - 1) * limit``
    - page: page number starting from 1
    - limit: page size, already clamped to the configured maximum
    - sort: field -> direction, insertion ordered
    - filters: field -> {"operator": ..., "data": ...}
    """

    start: int = Field(..., ge=0)
    page: int = Field(..., ge=1)
    limit: int = Field(..., ge=1)
    search: str = ""
    sort: dict[str, Any] = Field(default_factory=dict)
    filters: dict[str, Any] = Field(default_factory=dict)


class PaginationMeta(CamelBase):
    """Pagination metadata attached to a successful envelope."""

    total_records: int
    page: int
    limit: int
    total_pages: int
    has_next_page: bool
    has_previous_page: bool
    next_page: int | None
    previous_page: int | None
    first_page: int = 1
    last_page: int
