"""
===============================================================================
CRC CARD — dependencies.py (shared FastAPI dependencies)
===============================================================================

Responsibilities:
  - Re-export the session dependency used by every estate route.
  - Parse shared query parameters (dates, booleans) into 400s with stable
    messages.
===============================================================================
"""

from __future__ import annotations

from datetime import date

from legatepro.application.inputs import parse_date
from legatepro.crosscutting.error_responses import bad_request
from legatepro.identity.auth_users import optional_user_id, require_user

__all__ = ["optional_user_id", "require_user", "query_date", "query_bool"]


def query_date(raw: str | None, name: str) -> date | None:
    try:
        return parse_date(raw)
    except ValueError as exc:
        raise bad_request(f"Invalid {name} date", reason="invalid_date") from exc


def query_bool(raw: str | None, name: str) -> bool | None:
    if raw is None or not raw.strip():
        return None
    value = raw.strip().lower()
    if value == "true":
        return True
    if value == "false":
        return False
    raise bad_request(f"{name} must be true or false", reason=f"invalid_{name}")
