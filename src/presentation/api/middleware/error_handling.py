"""Global exception handling for the FastAPI application.

Converts exceptions into JSON bodies following the ``ErrorResponse`` schema
so clients see one error shape regardless of where a failure happened.
"""

from collections.abc import Awaitable, Callable
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from src.domain.exceptions import DomainException
from src.infrastructure.logging.config import get_logger
from src.presentation.schemas.error import ErrorDetail, ErrorResponse


logger = get_logger(__name__)

ExceptionHandler = Callable[[Request, Any], Awaitable[JSONResponse]]


def _error_response(status_code: int, code: str, message: str, details: Any = None) -> JSONResponse:
    error_response = ErrorResponse(error=ErrorDetail(code=code, message=message, details=details))
    return JSONResponse(status_code=status_code, content=error_response.model_dump())


async def domain_exception_handler(request: Request, exc: DomainException) -> JSONResponse:
    """Handle domain exceptions as 400 Bad Request.

    The startup policy is built before any route runs, so this covers
    routes that construct policies from request data.

    Args:
        request: Incoming HTTP request
        exc: Domain exception instance

    Returns:
        JSON response with the exception's code, message and details
    """
    logger.warning(
        "domain_exception",
        exception_type=type(exc).__name__,
        code=exc.code,
        message=exc.message,
        path=request.url.path,
    )
    return _error_response(status.HTTP_400_BAD_REQUEST, exc.code, exc.message, exc.details)


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Handle request validation errors as 422."""
    logger.warning("validation_error", errors=exc.errors(), path=request.url.path)
    return _error_response(
        status.HTTP_422_UNPROCESSABLE_CONTENT,
        "VALIDATION_ERROR",
        "Request validation failed",
        jsonable_errors(exc),
    )


def jsonable_errors(exc: RequestValidationError) -> list[dict[str, Any]]:
    """Strip non-serialisable context from validation errors."""
    return [
        {key: value for key, value in error.items() if key in ("loc", "msg", "type")}
        for error in exc.errors()
    ]


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions as last resort.

    Logs the full exception and returns a generic message so internals never
    reach the client.
    """
    logger.exception(
        "unhandled_exception",
        exception_type=type(exc).__name__,
        error=str(exc),
        path=request.url.path,
    )
    return _error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "INTERNAL_SERVER_ERROR",
        "An unexpected error occurred",
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers with the FastAPI application.

    Args:
        app: FastAPI application instance
    """
    domain_handler: ExceptionHandler = domain_exception_handler
    app.add_exception_handler(DomainException, domain_handler)

    validation_handler: ExceptionHandler = validation_exception_handler
    app.add_exception_handler(RequestValidationError, validation_handler)

    generic_handler: ExceptionHandler = generic_exception_handler
    app.add_exception_handler(Exception, generic_handler)
