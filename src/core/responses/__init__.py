"""Standard response envelope and its builders."""

from .api_response import ApiResponse
from .builders import build_error, build_redirect, build_success
from .schemas import Envelope, ResultPayload

__all__ = [
    "ApiResponse",
    "Envelope",
    "ResultPayload",
    "build_error",
    "build_redirect",
    "build_success",
]
