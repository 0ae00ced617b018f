"""
===============================================================================
CRC CARD — interfaces/web/redirects.py
===============================================================================

Responsibilities:
    - Turn the tagged outcome of a form action into a 303 redirect:
        Ok               -> success page
        Invalid(code)    -> origin?error=<code>
        Forbidden        -> origin?forbidden=1 (read-only role)
                            /app/estates?error=estate_access (no role at all)
                            origin?error=<code> (any other refusal)
        NotFound         -> /app/estates?error=not_found (estate)
                            <list page>?error=not_found (record)
        Unauthenticated  -> /login?callbackUrl=<origin>

Collaborators:
    - application.results, application.paths
    - interfaces/web/actions.py
===============================================================================
"""

from __future__ import annotations

from urllib.parse import urlencode

from starlette.responses import RedirectResponse

from legatepro.application.paths import ESTATES_INDEX, login_redirect
from legatepro.application.results import (
    Failure,
    Forbidden,
    Invalid,
    NotFound,
    Unauthenticated,
)


def with_query(path: str, **params: str) -> str:
    if not params:
        return path
    return f"{path}?{urlencode(params)}"


def redirect_to(url: str) -> RedirectResponse:
    return RedirectResponse(url, status_code=303)


def failure_url(failure: Failure, *, origin: str, list_url: str) -> str:
    if isinstance(failure, Unauthenticated):
        return login_redirect(origin)
    if isinstance(failure, Forbidden):
        if failure.code == "estate_access":
            return with_query(ESTATES_INDEX, error="estate_access")
        if failure.code == "read_only":
            return with_query(origin, forbidden="1")
        return with_query(origin, error=failure.code)
    if isinstance(failure, NotFound):
        if failure.resource == "Estate":
            return with_query(ESTATES_INDEX, error="not_found")
        return with_query(list_url, error="not_found")
    if isinstance(failure, Invalid):
        return with_query(origin, error=failure.code)
    return with_query(origin, error="unknown")


def failure_redirect(
    failure: Failure, *, origin: str, list_url: str
) -> RedirectResponse:
    return redirect_to(failure_url(failure, origin=origin, list_url=list_url))
