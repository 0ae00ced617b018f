"""
===============================================================================
MODULE: HTTP middlewares (request context + payload limits)
===============================================================================

Both are plain ASGI callables, so they wrap JSON routes and form actions the
same way and never buffer a response.

-------------------------------------------------------------------------------
CRC (Component Card)
-------------------------------------------------------------------------------
Components:
  - RequestContextMiddleware: X-Request-Id, log context, request metrics
  - BodyLimitMiddleware: 413 for bodies above MAX_BODY_BYTES

Collaborators:
  - legatepro/context.py
  - crosscutting/metrics.py
  - crosscutting/error_responses.py (ErrorBody)
===============================================================================
"""

from __future__ import annotations

import time
import uuid

from starlette.datastructures import Headers, MutableHeaders
from starlette.responses import JSONResponse
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from ..context import clear_context, set_request_context
from .error_responses import ErrorBody, ErrorCode
from .logger import logger
from .metrics import record_request_metrics

REQUEST_ID_HEADER = "X-Request-Id"
MAX_REQUEST_ID_LENGTH = 128


def accept_request_id(incoming: str | None) -> str:
    """Reuse the caller's id when it is short and printable, else mint one."""
    candidate = (incoming or "").strip()
    if candidate and len(candidate) <= MAX_REQUEST_ID_LENGTH and candidate.isprintable():
        return candidate
    return str(uuid.uuid4())


class RequestContextMiddleware:
    """
    ----------------------------------------------------------------------------
    CRC (Class Card)
    ----------------------------------------------------------------------------
    Class:
      RequestContextMiddleware

    Responsibilities:
      - Put the request id on request.state and on every response
      - Fill the ContextVars read by the logger; clear them afterwards
      - Record count/latency per (endpoint, method, status)

    Collaborators:
      - crosscutting.metrics.record_request_metrics
      - crosscutting.logger
    ----------------------------------------------------------------------------
    """

    QUIET_PATHS = frozenset({"/healthz", "/metrics"})

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request_id = accept_request_id(Headers(scope=scope).get(REQUEST_ID_HEADER))
        scope.setdefault("state", {})["request_id"] = request_id
        method, path = scope["method"], scope["path"]
        set_request_context(request_id=request_id, method=method, path=path)

        status_code = 500

        async def send_with_request_id(message: Message) -> None:
            nonlocal status_code
            if message["type"] == "http.response.start":
                status_code = message["status"]
                MutableHeaders(scope=message)[REQUEST_ID_HEADER] = request_id
            await send(message)

        started = time.perf_counter()
        try:
            await self.app(scope, receive, send_with_request_id)
        except Exception:
            logger.exception("request failed")
            raise
        finally:
            elapsed = time.perf_counter() - started
            record_request_metrics(
                endpoint=path,
                method=method,
                status_code=status_code,
                latency_seconds=elapsed,
            )
            if path not in self.QUIET_PATHS:
                logger.info(
                    "request completed",
                    extra={
                        "status_code": status_code,
                        "latency_ms": round(elapsed * 1000, 2),
                    },
                )
            clear_context()


class _BodyTooLarge(Exception):
    def __init__(self, received: int) -> None:
        super().__init__(received)
        self.received = received


class BodyLimitMiddleware:
    """
    Reject request bodies larger than `max_body_bytes` with a 413.

    Checks the declared Content-Length first, then counts streamed chunks for
    chunked uploads.
    """

    def __init__(self, app: ASGIApp, max_body_bytes: int | None = None) -> None:
        if max_body_bytes is None:
            from .config import get_settings

            max_body_bytes = get_settings().max_body_bytes
        self.app = app
        self.max_body_bytes = max_body_bytes

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        declared = Headers(scope=scope).get("content-length", "")
        if declared.isdigit() and int(declared) > self.max_body_bytes:
            logger.warning(
                "request body rejected",
                extra={"declared_bytes": int(declared), "limit": self.max_body_bytes},
            )
            await self._reject(scope, receive, send)
            return

        received = 0
        response_started = False

        async def counting_receive() -> Message:
            nonlocal received
            message = await receive()
            if message["type"] == "http.request":
                received += len(message.get("body") or b"")
                if received > self.max_body_bytes:
                    raise _BodyTooLarge(received)
            return message

        async def tracking_send(message: Message) -> None:
            nonlocal response_started
            if message["type"] == "http.response.start":
                response_started = True
            await send(message)

        try:
            await self.app(scope, counting_receive, tracking_send)
        except _BodyTooLarge as exc:
            if response_started:
                raise
            logger.warning(
                "streamed request body rejected",
                extra={"received_bytes": exc.received, "limit": self.max_body_bytes},
            )
            await self._reject(scope, receive, send)

    async def _reject(self, scope: Scope, receive: Receive, send: Send) -> None:
        body = ErrorBody(
            error=f"Request body too large. Maximum allowed: {self.max_body_bytes} bytes",
            code=ErrorCode.PAYLOAD_TOO_LARGE,
        )
        response = JSONResponse(
            body.model_dump(mode="json", by_alias=True, exclude_none=True),
            status_code=413,
        )
        await response(scope, receive, send)
