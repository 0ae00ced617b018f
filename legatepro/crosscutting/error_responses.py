"""
===============================================================================
CRC CARD — crosscutting/error_responses.py (JSON error envelope)
===============================================================================

Responsibilities:
  - One error body for every JSON failure:
        {"error", "code", "reason"?, "requestId"?, "errors"?}
    `error` is shown to people; `code` is branched on by clients; `reason`
    carries the validation code of a 400 (e.g. "invalid_amount").
  - AppHTTPException and short factories for the statuses routes raise.
  - render_error(): the single place that serializes the body.

Collaborators:
  - crosscutting/middleware.py: stores the request id on request.state
  - api/exception_handlers.py: internal exceptions -> 500 bodies
  - interfaces/api/http/error_mapping.py: tagged results -> these factories
===============================================================================
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field


class ErrorCode(str, Enum):
    VALIDATION_ERROR = "VALIDATION_ERROR"
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    PAYLOAD_TOO_LARGE = "PAYLOAD_TOO_LARGE"
    INTERNAL_ERROR = "INTERNAL_ERROR"
    DATABASE_ERROR = "DATABASE_ERROR"


class ErrorBody(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    error: str
    code: ErrorCode
    reason: str | None = None
    request_id: str | None = Field(default=None, alias="requestId")
    errors: list[dict[str, Any]] | None = None


OPENAPI_ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    status: {"description": label, "model": ErrorBody}
    for status, label in (
        (400, "Invalid input"),
        (401, "No valid session"),
        (403, "Role does not allow this"),
        (404, "Unknown or hidden resource"),
        (500, "Unexpected failure"),
    )
}


class AppHTTPException(HTTPException):
    """HTTPException that knows its ErrorCode and optional validation reason."""

    def __init__(
        self,
        status_code: int,
        code: ErrorCode,
        detail: str,
        errors: list[dict[str, Any]] | None = None,
        *,
        reason: str | None = None,
        headers: dict[str, str] | None = None,
    ):
        super().__init__(status_code=status_code, detail=detail, headers=headers)
        self.code = code
        self.errors = errors
        self.reason = reason


def bad_request(
    detail: str,
    *,
    reason: str | None = None,
    errors: list[dict[str, Any]] | None = None,
) -> AppHTTPException:
    return AppHTTPException(400, ErrorCode.VALIDATION_ERROR, detail, errors, reason=reason)


def unauthorized(detail: str = "Unauthorized") -> AppHTTPException:
    return AppHTTPException(
        401, ErrorCode.UNAUTHORIZED, detail, headers={"WWW-Authenticate": "Bearer"}
    )


def forbidden(detail: str = "Forbidden") -> AppHTTPException:
    return AppHTTPException(403, ErrorCode.FORBIDDEN, detail)


def not_found(detail: str = "Not found") -> AppHTTPException:
    return AppHTTPException(404, ErrorCode.NOT_FOUND, detail)


def conflict(detail: str) -> AppHTTPException:
    return AppHTTPException(409, ErrorCode.CONFLICT, detail)


def internal_error(detail: str = "Internal server error") -> AppHTTPException:
    return AppHTTPException(500, ErrorCode.INTERNAL_ERROR, detail)


def render_error(
    request: Request,
    *,
    status_code: int,
    code: ErrorCode,
    detail: str,
    reason: str | None = None,
    errors: list[dict[str, Any]] | None = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    body = ErrorBody(
        error=detail,
        code=code,
        reason=reason,
        request_id=getattr(request.state, "request_id", None),
        errors=errors or None,
    )
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(mode="json", by_alias=True, exclude_none=True),
        headers=headers,
    )


async def app_exception_handler(request: Request, exc: AppHTTPException) -> JSONResponse:
    return render_error(
        request,
        status_code=exc.status_code,
        code=exc.code,
        detail=str(exc.detail),
        reason=exc.reason,
        errors=exc.errors,
        headers=exc.headers,
    )
