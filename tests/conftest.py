from collections.abc import AsyncGenerator, Callable, Generator
import os
from typing import Any

os.environ.setdefault("TESTING", "true")

from fastapi import FastAPI  # noqa: E402
import httpx  # noqa: E402
import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402

from src.main.config import Config, get_settings  # noqa: E402
from src.main.web import setup_api_utilities  # noqa: E402
from tests.fakes.query_builder import RecordingQueryBuilder  # noqa: E402

DependencyOverrides = dict[Callable[..., Any], Callable[..., Any]]


@pytest.fixture(scope="session")
def settings() -> Config:
    get_settings.cache_clear()
    return get_settings()


@pytest.fixture
def app() -> FastAPI:
    return setup_api_utilities(FastAPI(title="api-utilities-test"))


@pytest.fixture
def dependency_overrides(app: FastAPI) -> Generator[DependencyOverrides]:
    yield app.dependency_overrides
    app.dependency_overrides.clear()


@pytest.fixture
def query_builder() -> RecordingQueryBuilder:
    return RecordingQueryBuilder()


@pytest_asyncio.fixture
async def async_client(app: FastAPI) -> AsyncGenerator[httpx.AsyncClient]:
    transport = httpx.ASGITransport(app=app, raise_app_exceptions=False)
    async with httpx.AsyncClient(
        transport=transport, base_url="http://testserver"
    ) as client:
        yield client
