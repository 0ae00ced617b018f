"""
===============================================================================
CRC CARD — application/results.py
===============================================================================

Module:
    Tagged outcomes of estate operations

Responsibilities:
    - Define the closed set of outcomes every guarded operation returns:
        Ok(value) | Invalid(code, message) | Forbidden | NotFound | Unauthenticated
    - Keep validation and authorization failures as values, so no exception
      crosses from an action into rendering code.

Collaborators:
    - application/guards.py, application/usecases/*: produce outcomes.
    - interfaces/api/http/error_mapping.py: outcome -> JSON status/body.
    - interfaces/web/redirects.py: outcome -> 303 redirect.
    - cli.py: outcome -> process exit code.
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar, Union

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    value: T


@dataclass(frozen=True, slots=True)
class Invalid:
    """Missing or invalid input. `code` is the redirect query code."""

    code: str
    message: str


@dataclass(frozen=True, slots=True)
class Forbidden:
    """
    Caller is known but may not perform the operation.

    `code` is "read_only" when the caller's role is below the one required and
    "estate_access" when the caller holds no role on the estate at all.
    "invite_email" refuses an invite accepted from a different account.
    """

    message: str = "Forbidden"
    code: str = "read_only"


@dataclass(frozen=True, slots=True)
class NotFound:
    resource: str = "Record"
    message: str = "Not found"


@dataclass(frozen=True, slots=True)
class Unauthenticated:
    message: str = "Unauthorized"


Failure = Union[Invalid, Forbidden, NotFound, Unauthenticated]
Outcome = Union[Ok[T], Invalid, Forbidden, NotFound, Unauthenticated]


def is_ok(outcome: object) -> bool:
    return isinstance(outcome, Ok)
