from __future__ import annotations

from typing import Any

from starlette.requests import Request


def build_request(
    *,
    path: str = "/v1/resource",
    method: str = "GET",
    headers: dict[str, str] | None = None,
    query_string: str = "",
) -> Request:
    headers = headers or {}
    encoded_headers = [(k.lower().encode(), v.encode()) for k, v in headers.items()]
    scope: dict[str, Any] = {
        "type": "http",
        "method": method,
        "path": path,
        "raw_path": path.encode(),
        "headers": encoded_headers,
        "query_string": query_string.encode(),
        "client": ("127.0.0.1", 1234),
        "server": ("testserver", 80),
        "scheme": "http",
        "root_path": "",
        "http_version": "1.1",
        "asgi": {"version": "3.0"},
    }
    return Request(scope)
