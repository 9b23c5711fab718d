from collections.abc import Mapping, Sequence
from typing import Any

from fastapi.responses import JSONResponse

from src.core.pagination.schemas import PaginationMeta
from src.core.responses.builders import build_error, build_redirect, build_success
from src.core.responses.schemas import Envelope


class ApiResponse(JSONResponse):
    """
    JSON response carrying an :class:`Envelope`.

    Status codes are passed through as given; they are not checked against
    the HTTP status space. The envelope stays available as ``.envelope``.
    """

    def __init__(
        self,
        envelope: Envelope,
        status_code: int = 200,
        headers: Mapping[str, str] | None = None,
    ) -> None:
        self.envelope = envelope
        super().__init__(
            content=envelope.to_content(), status_code=status_code, headers=headers
        )

    @classmethod
    def success(
        cls,
        message: str,
        data: Any,
        pagination: PaginationMeta | dict[str, Any] | None = None,
        status_code: int = 200,
        headers: Mapping[str, str] | None = None,
    ) -> "ApiResponse":
        return cls(build_success(message, data, pagination), status_code, headers)

    @classmethod
    def error(
        cls,
        message: str,
        additional_errors: Sequence[Any] | None = None,
        status_code: int = 400,
        headers: Mapping[str, str] | None = None,
    ) -> "ApiResponse":
        return cls(build_error(message, additional_errors), status_code, headers)

    @classmethod
    def redirect(
        cls,
        message: str,
        redirect_url: str,
        data: Any = None,
        status_code: int = 302,
        headers: Mapping[str, str] | None = None,
    ) -> "ApiResponse":
        return cls(build_redirect(message, redirect_url, data), status_code, headers)
