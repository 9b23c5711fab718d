from typing import Any

from pydantic import Field

from src.core.pagination.schemas import PaginationMeta
from src.core.schemas import CamelBase


class ResultPayload(CamelBase):
    """Payload part of an envelope: the data plus its pagination metadata."""

    data: Any = None
    # mappings are kept as given, only PaginationMeta instances stay models
    pagination: dict[str, Any] | PaginationMeta = Field(
        default_factory=dict, union_mode="left_to_right"
    )


class Envelope(CamelBase):
    """
    Uniform top-level response body.

    Serialized (``by_alias=True``) as::

        {"hasError": bool, "additionalErrors": [...], "message": str,
         "result": {"data": ..., "pagination": {...}} | null, "redirect": str}
    """

    has_error: bool
    additional_errors: list[Any] = Field(default_factory=list)
    message: str
    result: ResultPayload | None = None
    redirect: str = ""

    def to_content(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)
