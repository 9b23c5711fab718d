from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError

from src.core.errors.exceptions import (
    CoreException,
    FilteringError,
    InstanceNotFoundException,
    InvalidArgumentException,
)
from src.core.errors.handlers import (
    CoreExceptionHandler,
    FilteringErrorHandler,
    InstanceNotFoundExceptionHandler,
    InvalidArgumentExceptionHandler,
    RequestValidationExceptionHandler,
    ValidationErrorExceptionHandler,
    as_exception_handler,
)


def include_exceptions_handlers(app: FastAPI) -> None:
    """
    Registers the envelope-rendering exception handlers on the provided FastAPI
    application instance.

    Parameters:
        app (FastAPI): The FastAPI application instance to which the exception handlers
        will be added.

    Returns:
        None
    """
    app.add_exception_handler(
        RequestValidationError,
        as_exception_handler(RequestValidationExceptionHandler()),
    )
    app.add_exception_handler(
        ValidationError, as_exception_handler(ValidationErrorExceptionHandler())
    )
    app.add_exception_handler(
        InvalidArgumentException,
        as_exception_handler(InvalidArgumentExceptionHandler()),
    )
    app.add_exception_handler(
        InstanceNotFoundException,
        as_exception_handler(InstanceNotFoundExceptionHandler()),
    )
    app.add_exception_handler(
        FilteringError, as_exception_handler(FilteringErrorHandler())
    )
    app.add_exception_handler(
        CoreException,
        as_exception_handler(CoreExceptionHandler()),
    )
