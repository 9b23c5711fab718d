from collections.abc import Sequence
from typing import Any

from src.core.pagination.schemas import PaginationMeta
from src.core.responses.schemas import Envelope, ResultPayload


def build_success(
    message: str,
    data: Any,
    pagination: PaginationMeta | dict[str, Any] | None = None,
) -> Envelope:
    """Successful envelope; missing pagination is rendered as an empty object."""
    return Envelope(
        has_error=False,
        additional_errors=[],
        message=message,
        result=ResultPayload(
            data=data, pagination=pagination if pagination is not None else {}
        ),
        redirect="",
    )


def build_error(
    message: str, additional_errors: Sequence[Any] | None = None
) -> Envelope:
    return Envelope(
        has_error=True,
        additional_errors=list(additional_errors or []),
        message=message,
        result=None,
        redirect="",
    )


def build_redirect(message: str, redirect_url: str, data: Any = None) -> Envelope:
    """
    Redirect envelope.

    ``data`` is checked for truthiness: empty collections and zero values
    produce ``result=None`` exactly like a missing payload.
    """
    return Envelope(
        has_error=False,
        additional_errors=[],
        message=message,
        result=ResultPayload(data=data, pagination={}) if data else None,
        redirect=redirect_url,
    )
