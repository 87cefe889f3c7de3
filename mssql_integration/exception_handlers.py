"""
Name: FastAPI Exception Handlers

Responsibilities:
  - Convert integration exceptions to HTTP responses
  - Structured error responses (RFC 7807 style)
  - Centralized logging of errors with correlation IDs

Collaborators:
  - main.py: Registers these handlers
  - exceptions.py: ValidationError, ConnectionFailure, OperationFailure
  - error_responses.py: problem details rendering

Constraints:
  - HTTP status codes: 422 validation, 503 connection, 502 operation, 500 other
"""

from fastapi import Request
from fastapi.responses import JSONResponse

from .error_responses import (
    ErrorCode,
    ProblemException,
    problem,
    problem_exception_handler,
)
from .exceptions import (
    ConnectionFailure,
    IntegrationError,
    OperationFailure,
    ValidationError,
)
from .logger import logger

# R: Most specific class first; IntegrationError catches the rest
_CODE_BY_EXCEPTION = (
    (ValidationError, ErrorCode.VALIDATION_ERROR),
    (ConnectionFailure, ErrorCode.DATABASE_UNAVAILABLE),
    (OperationFailure, ErrorCode.OPERATION_FAILED),
    (IntegrationError, ErrorCode.INTERNAL_ERROR),
)


def _error_entries(exc: IntegrationError) -> list[dict]:
    entry = {"error_id": exc.error_id}
    if exc.classified is not None:
        entry["category"] = exc.classified.category.value
        if exc.classified.code:
            entry["code"] = exc.classified.code
    return [entry]


def _code_for(exc: IntegrationError) -> ErrorCode:
    for exc_type, code in _CODE_BY_EXCEPTION:
        if isinstance(exc, exc_type):
            return code
    return ErrorCode.INTERNAL_ERROR


async def integration_error_handler(
    request: Request, exc: IntegrationError
) -> JSONResponse:
    """Handle ValidationError, ConnectionFailure, OperationFailure and the base class."""
    code = _code_for(exc)
    extra = {
        "error_id": exc.error_id,
        "error_code": exc.error_code,
        "error_message": exc.message,
    }
    if code is ErrorCode.VALIDATION_ERROR:
        logger.warning("Action rejected", extra=extra)
    else:
        logger.error("Action failed", extra={**extra, "category": exc.category})

    return await problem_exception_handler(
        request, problem(code, exc.message, _error_entries(exc))
    )


def register_exception_handlers(app) -> None:
    """
    Register all exception handlers on the FastAPI app.

    Usage:
        from .exception_handlers import register_exception_handlers
        register_exception_handlers(app)
    """
    for exc_type, _ in _CODE_BY_EXCEPTION:
        app.add_exception_handler(exc_type, integration_error_handler)
    app.add_exception_handler(ProblemException, problem_exception_handler)
