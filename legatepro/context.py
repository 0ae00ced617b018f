"""
===============================================================================
CRC CARD — legatepro/context.py (request-scoped log context)
===============================================================================

Responsibilities:
  - Keep who/what is being served (request id, method, path, user id) in one
    ContextVar, safe across threads and async tasks.
  - Hand the logger a dict of the fields that are set.

Collaborators:
  - crosscutting.middleware: opens and clears the context per HTTP request.
  - cli: opens a context per command run (request id "cli-<uuid>").
  - identity.auth_users: adds the user id once a session is resolved.
  - crosscutting.logger: get_context_dict() on every line.

Constraints:
  - Log correlation only. The estate being worked on is never read from
    here; resolvers and guards take estate ids as explicit parameters.
===============================================================================
"""

from __future__ import annotations

from contextvars import ContextVar
from dataclasses import asdict, dataclass, replace


@dataclass(frozen=True, slots=True)
class RequestContext:
    request_id: str = ""
    method: str = ""
    path: str = ""
    user_id: str = ""


_EMPTY = RequestContext()
_current: ContextVar[RequestContext] = ContextVar("legatepro_request", default=_EMPTY)


def set_request_context(
    *, request_id: str = "", method: str = "", path: str = ""
) -> None:
    """Start a fresh context; any user id from a previous request is dropped."""
    _current.set(
        RequestContext(request_id=request_id or "", method=method or "", path=path or "")
    )


def set_user_context(user_id: str) -> None:
    _current.set(replace(_current.get(), user_id=user_id or ""))


def get_context_dict() -> dict[str, str]:
    return {key: value for key, value in asdict(_current.get()).items() if value}


def clear_context() -> None:
    _current.set(_EMPTY)
