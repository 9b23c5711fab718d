from functools import lru_cache
import logging
import os
from pathlib import Path
from typing import Any

from dotenv import dotenv_values
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

logger = logging.getLogger(__name__)


class SentryConfig(BaseModel):
    SENTRY_DSN: str | None = None
    SENTRY_ENV: str = "development"
    SENTRY_ENABLED: bool = False

    model_config = ConfigDict(extra="ignore")


class PaginationConfig(BaseModel):
    DEFAULT_PAGE_SIZE: int = Field(10, gt=0)
    MAX_PAGE_SIZE: int = Field(100, gt=0)

    DEFAULT_SORT_FIELD: str = "d.id"
    DEFAULT_SORT_DIRECTION: str = "DESC"

    model_config = ConfigDict(extra="ignore")

    @field_validator("DEFAULT_SORT_DIRECTION", mode="before")
    @classmethod
    def normalize_direction(cls, v: Any) -> str:
        direction = str(v).strip().upper()
        if direction not in ("ASC", "DESC"):
            raise ValueError("DEFAULT_SORT_DIRECTION must be ASC or DESC")
        return direction

    @model_validator(mode="after")
    def check_page_sizes(self) -> "PaginationConfig":
        if self.MAX_PAGE_SIZE < self.DEFAULT_PAGE_SIZE:
            raise ValueError("MAX_PAGE_SIZE must be greater than or equal to DEFAULT_PAGE_SIZE")
        return self


class AppConfig(BaseModel):
    PROJECT_NAME: str = "api-utilities"
    VERSION: str = "0.1.0"
    DEBUG: bool = False

    LOG_LEVEL: str = "INFO"
    LOG_LEVEL_FILE: str = "WARNING"
    LOG_TO_FILE: bool = True
    LOG_DIR: str | None = None

    model_config = ConfigDict(extra="ignore")


class Config(BaseModel):
    _project_root: Path | None = None

    app: AppConfig
    sentry: SentryConfig
    pagination: PaginationConfig

    model_config = ConfigDict(extra="ignore")

    @property
    def project_root(self) -> Path:
        if self._project_root is None:
            self._project_root = find_project_root_robust()
        return self._project_root


@lru_cache
def get_settings() -> Config:
    """
    Cached settings factory. Override in tests via monkeypatching or dependency overrides.
    """
    env_filename = ".env.test" if os.getenv("TESTING") == "true" else ".env"
    env_file_values = dotenv_values(env_filename)
    merged_env: dict[str, Any] = {
        k: v
        for k, v in {**env_file_values, **dict(os.environ)}.items()
        if v is not None
    }

    return Config(
        app=AppConfig(**merged_env),
        sentry=SentryConfig(**merged_env),
        pagination=PaginationConfig(**merged_env),
    )


config = get_settings()


# ----- Config utils ----- #
def find_project_root_robust(
    start_path: Path | None = None, max_depth: int = 10
) -> Path:
    """
    Walk up from ``start_path`` and return the directory carrying the most
    project markers (.git, pyproject.toml, ...).

    Args:
        start_path: Starting path to search from (defaults to current working directory)
        max_depth: Maximum number of parent directories to traverse

    Returns:
        Path: The project root directory if found, otherwise the starting path
    """
    if start_path is None:
        start_path = Path.cwd()

    markers = {
        ".git": 100,
        "pyproject.toml": 90,
        "setup.cfg": 75,
        "requirements": 70,
        "poetry.lock": 70,
        "README.md": 50,
        "Makefile": 60,
    }

    best_match = None
    best_score = 0

    current_path = start_path
    depth = 0

    while current_path != current_path.parent and depth < max_depth:
        score = 0
        for marker, weight in markers.items():
            if (current_path / marker).exists():
                score += weight

        if score > best_score:
            best_score = score
            best_match = current_path

        current_path = current_path.parent
        depth += 1

    if best_match and best_score > 0:
        logger.info(
            "Project root found: %s (confidence score: %s)", best_match, best_score
        )
        return best_match

    logger.error(
        "No project root found within %s parent directories from %s",
        max_depth,
        start_path,
    )
    return start_path
