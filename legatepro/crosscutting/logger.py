"""
===============================================================================
MODULE: Application logger (one JSON object per line)
===============================================================================

Every line carries the request context set by the middleware (request_id,
method, path, user_id) plus whatever `extra={...}` the caller passed, so a
denied mutation, a cache failure and the request that caused them can be
joined on request_id.

-------------------------------------------------------------------------------
CRC (Component Card)
-------------------------------------------------------------------------------
Component:
  EstateLogFormatter + configure_logging()

Responsibilities:
  - Render LogRecords as compact JSON (or plain text for local runs)
  - Merge the ContextVars of legatepro/context.py into each line
  - Mask credentials and estate account identifiers found in `extra`
  - Bound the size of logged values (notes and descriptions can be long)

Collaborators:
  - legatepro/context.py
  - crosscutting/config.py (LOG_LEVEL, LOG_JSON)
===============================================================================
"""

from __future__ import annotations

import json
import logging
import sys
import traceback
from datetime import datetime, timezone
from typing import Any

MASK = "[masked]"

# Credentials plus identifiers of real-world accounts held by an estate.
MASKED_FIELDS: frozenset[str] = frozenset(
    {
        "password",
        "password_hash",
        "token",
        "access_token",
        "authorization",
        "cookie",
        "jwt_secret",
        "account_number",
        "court_case_number",
        "phone",
    }
)

MAX_VALUE_CHARS = 2_000
MAX_DEPTH = 4

# Attributes every LogRecord has; anything else came in through `extra`.
_STANDARD_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", (), None)).keys()
) | {"message", "asctime", "taskName"}


def scrub(value: Any, key: str | None = None, depth: int = 0) -> Any:
    """Mask sensitive keys, cut long strings, make the value JSON-safe."""
    if key is not None and key.lower() in MASKED_FIELDS:
        return MASK
    if depth >= MAX_DEPTH:
        return "[nested]"
    if isinstance(value, str):
        if len(value) > MAX_VALUE_CHARS:
            return f"{value[:MAX_VALUE_CHARS]}... ({len(value)} chars)"
        return value
    if isinstance(value, (bytes, bytearray)):
        return f"<{len(value)} bytes>"
    if isinstance(value, dict):
        return {str(k): scrub(v, str(k), depth + 1) for k, v in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [scrub(v, key, depth + 1) for v in value]
    if value is None or isinstance(value, (bool, int, float)):
        return value
    return str(value)


def _context() -> dict[str, str]:
    from ..context import get_context_dict

    return get_context_dict()


class EstateLogFormatter(logging.Formatter):
    """One JSON object per line: ts, level, logger, msg, context, extras."""

    def format(self, record: logging.LogRecord) -> str:
        line: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
            "at": f"{record.module}:{record.lineno}",
        }
        line.update(_context())
        for key, value in vars(record).items():
            if key not in _STANDARD_ATTRS:
                line[key] = scrub(value, key)
        if record.exc_info and record.exc_info[0] is not None:
            exc_type, exc, tb = record.exc_info
            line["error"] = {
                "type": exc_type.__name__,
                "message": str(exc),
                "trace": traceback.format_exception(exc_type, exc, tb),
            }
        return json.dumps(line, ensure_ascii=False, default=str, separators=(",", ":"))


class PlainFormatter(logging.Formatter):
    """Human-readable lines for local development (LOG_JSON=false)."""

    def __init__(self) -> None:
        super().__init__("%(asctime)s %(levelname)-7s %(name)s %(message)s")

    def format(self, record: logging.LogRecord) -> str:
        text = super().format(record)
        request_id = _context().get("request_id")
        return f"{text} [{request_id}]" if request_id else text


def configure_logging(name: str = "legatepro") -> logging.Logger:
    """
    Build the application logger once per process.

    A bad environment must not stop the import of this module: the settings
    error is raised again (and reported) by the app lifespan, the logger just
    keeps INFO/JSON.
    """
    log = logging.getLogger(name)

    level, as_json = "INFO", True
    try:
        from .config import get_settings

        settings = get_settings()
        level, as_json = settings.log_level.upper(), settings.log_json
    except Exception:  # noqa: BLE001
        pass

    log.setLevel(logging.getLevelNamesMapping().get(level, logging.INFO))
    if not log.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(EstateLogFormatter() if as_json else PlainFormatter())
        log.addHandler(handler)
    return log


logger = configure_logging()
