"""
Name: Problem Details Responses

Responsibilities:
  - Define the error codes the HTTP surface can return
  - Render integration failures as RFC 7807 problem bodies

Collaborators:
  - exception_handlers.py: builds a ProblemException per failure
  - fastapi: JSONResponse

Constraints:
  - Each ErrorCode has exactly one HTTP status (STATUS_BY_CODE)
  - Media type is application/problem+json
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel


class ErrorCode(str, Enum):
    """Error codes a client can branch on."""

    VALIDATION_ERROR = "VALIDATION_ERROR"
    OPERATION_FAILED = "OPERATION_FAILED"
    DATABASE_UNAVAILABLE = "DATABASE_UNAVAILABLE"
    INTERNAL_ERROR = "INTERNAL_ERROR"


STATUS_BY_CODE = {
    ErrorCode.VALIDATION_ERROR: 422,
    ErrorCode.OPERATION_FAILED: 502,
    ErrorCode.DATABASE_UNAVAILABLE: 503,
    ErrorCode.INTERNAL_ERROR: 500,
}

PROBLEM_JSON_MEDIA_TYPE = "application/problem+json"


class ErrorDetail(BaseModel):
    """RFC 7807 Problem Details body."""

    type: str = "about:blank"
    title: str
    status: int
    detail: str
    code: ErrorCode
    instance: str | None = None
    errors: list[dict[str, Any]] | None = None


class ProblemException(HTTPException):
    """HTTPException that carries an ErrorCode and per-error entries."""

    def __init__(
        self,
        code: ErrorCode,
        detail: str,
        errors: list[dict[str, Any]] | None = None,
    ):
        super().__init__(status_code=STATUS_BY_CODE[code], detail=detail)
        self.code = code
        self.errors = errors


def problem(
    code: ErrorCode, detail: str, errors: list[dict[str, Any]] | None = None
) -> ProblemException:
    return ProblemException(code, detail, errors)


async def problem_exception_handler(
    request: Request, exc: ProblemException
) -> JSONResponse:
    """Render a ProblemException."""
    body = ErrorDetail(
        type=f"https://mssql-integration.local/errors/{exc.code.value.lower()}",
        title=exc.code.value.replace("_", " ").title(),
        status=exc.status_code,
        detail=exc.detail,
        code=exc.code,
        instance=str(request.url),
        errors=exc.errors,
    )
    return JSONResponse(
        status_code=exc.status_code,
        content=body.model_dump(mode="json", exclude_none=True),
        media_type=PROBLEM_JSON_MEDIA_TYPE,
    )
