"""
===============================================================================
CRC CARD — legatepro/api/exception_handlers.py (exceptions -> error body)
===============================================================================

Responsibilities:
  - Render every exception that escapes a route in the standard error body.
  - Tell malformed JSON bodies ("Invalid JSON") apart from other request
    validation failures ("Invalid request").
  - Log internal failures once, with request_id and error_id, and put only
    the error_id on the wire.

Collaborators:
  - crosscutting.error_responses: AppHTTPException, ErrorCode, render_error
  - crosscutting.exceptions: LegateProError, DatabaseError, CacheError
  - crosscutting.config.get_settings (detail level)

Notes:
  - Outcomes of estate operations (Invalid, Forbidden, ...) never get here as
    exceptions; routers map them in interfaces/api/http/error_mapping.py.
===============================================================================
"""

from __future__ import annotations

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from ..crosscutting.config import get_settings
from ..crosscutting.error_responses import (
    AppHTTPException,
    ErrorCode,
    app_exception_handler,
    render_error,
)
from ..crosscutting.exceptions import CacheError, DatabaseError, LegateProError
from ..crosscutting.logger import logger

# Most specific first; LegateProError catches the rest.
_INTERNAL_CODES: tuple[tuple[type[LegateProError], ErrorCode], ...] = (
    (DatabaseError, ErrorCode.DATABASE_ERROR),
    (CacheError, ErrorCode.INTERNAL_ERROR),
    (LegateProError, ErrorCode.INTERNAL_ERROR),
)


def _code_for(exc: LegateProError) -> ErrorCode:
    for exc_type, code in _INTERNAL_CODES:
        if isinstance(exc, exc_type):
            return code
    return ErrorCode.INTERNAL_ERROR


async def internal_error_handler(request: Request, exc: LegateProError) -> JSONResponse:
    code = _code_for(exc)
    logger.error(
        "internal error",
        extra={
            "code": code.value,
            "error_type": exc.error_code,
            "error_id": exc.error_id,
            "detail": exc.message,
        },
    )
    return render_error(
        request,
        status_code=500,
        code=code,
        detail="Internal server error",
        errors=[{"error_id": exc.error_id}],
    )


def _field_of(error: dict) -> str:
    loc = error.get("loc") or ()
    return ".".join(str(part) for part in loc[1:])


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    raw_errors = exc.errors()
    in_body = any((err.get("loc") or ("",))[0] == "body" for err in raw_errors)
    return render_error(
        request,
        status_code=400,
        code=ErrorCode.VALIDATION_ERROR,
        detail="Invalid JSON" if in_body else "Invalid request",
        reason="invalid_json" if in_body else "invalid_request",
        errors=[
            {"field": _field_of(err), "msg": str(err.get("msg", ""))}
            for err in raw_errors
        ],
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Stacktrace goes to the log; production bodies stay generic."""
    logger.error("unhandled exception", exc_info=exc)
    detail = "Internal server error"
    if not get_settings().is_production() and str(exc):
        detail = str(exc)
    return render_error(
        request, status_code=500, code=ErrorCode.INTERNAL_ERROR, detail=detail
    )


def register_exception_handlers(app) -> None:
    """Attach the handlers; the bare Exception fallback goes last."""
    app.add_exception_handler(LegateProError, internal_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(AppHTTPException, app_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)


__all__ = ["register_exception_handlers"]
