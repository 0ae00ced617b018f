"""
===============================================================================
CRC CARD — error_mapping.py (Outcome -> HTTP error)
===============================================================================

Responsibilities:
  - Translate tagged use-case outcomes into AppHTTPException.
  - Keep the mapping in one place so every router answers the same way.

Mapping:
  - Invalid(code, message)  -> 400 {error: message, code: VALIDATION_ERROR, reason: code}
  - Unauthenticated         -> 401
  - Forbidden               -> 403
  - NotFound                -> 404

Collaborators:
  - application.results
  - crosscutting.error_responses
===============================================================================
"""

from __future__ import annotations

from typing import TypeVar

from legatepro.application.results import (
    Failure,
    Forbidden,
    Invalid,
    NotFound,
    Ok,
    Outcome,
    Unauthenticated,
)
from legatepro.crosscutting.error_responses import (
    AppHTTPException,
    bad_request,
    forbidden,
    internal_error,
    not_found,
    unauthorized,
)

T = TypeVar("T")


def to_http_error(failure: Failure) -> AppHTTPException:
    if isinstance(failure, Invalid):
        return bad_request(failure.message, reason=failure.code)
    if isinstance(failure, Unauthenticated):
        return unauthorized(failure.message)
    if isinstance(failure, Forbidden):
        return forbidden(failure.message)
    if isinstance(failure, NotFound):
        return not_found(failure.message)
    return internal_error()


def unwrap(outcome: Outcome[T]) -> T:
    """Return the Ok value or raise the matching HTTP error."""
    if isinstance(outcome, Ok):
        return outcome.value
    raise to_http_error(outcome)
