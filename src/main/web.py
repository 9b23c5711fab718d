from fastapi import FastAPI

from loggers import get_logger
from src.main.presentation import include_exceptions_handlers
from src.main.sentry import init_sentry

logger = get_logger(__name__)


def setup_api_utilities(application: FastAPI) -> FastAPI:
    """
    Wire the envelope error handlers (and Sentry, when configured) into an
    existing FastAPI application.
    """
    init_sentry()
    include_exceptions_handlers(application)
    logger.debug("API utilities registered on %s", application.title)
    return application
