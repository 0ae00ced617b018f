"""
===============================================================================
CRC CARD — interfaces/web/forms.py
===============================================================================

Responsibilities:
    - Read a browser form submission into the same snake_case input dict the
      JSON routes hand to the use cases.
    - Reuse the JSON request models, so field names (camelCase or snake_case)
      and partial-update semantics are identical on both transports.
    - Treat an absent checkbox as False (browsers omit unchecked boxes).
    - Report a body the request model rejects as Invalid("invalid_form"),
      so the action answers with a redirect like any other validation code.

Collaborators:
    - interfaces/api/http/schemas (request models)
    - interfaces/web/actions.py
===============================================================================
"""

from __future__ import annotations

from typing import Any, Iterable

from pydantic import ValidationError
from starlette.requests import Request

from legatepro.application.results import Invalid
from legatepro.interfaces.api.http.schemas import RequestModel

INVALID_FORM = "invalid_form"


async def read_form(request: Request) -> dict[str, Any]:
    """Form fields as a dict; repeated names (e.g. tag boxes) become lists."""
    form = await request.form()
    data: dict[str, Any] = {}
    for key in form.keys():
        values = [v for v in form.getlist(key) if isinstance(v, str)]
        if not values:
            continue
        data[key] = values[0] if len(values) == 1 else values
    return data


def form_input(
    raw: dict[str, Any],
    request_model: type[RequestModel],
    *,
    checkboxes: Iterable[str] = (),
) -> dict[str, Any] | Invalid:
    """
    Use-case input for a form post, or Invalid("invalid_form") when the body
    does not fit the request model at all (e.g. a repeated single-value field).
    """
    try:
        values = request_model.model_validate(raw).to_input()
    except ValidationError as exc:
        fields = sorted({str(err["loc"][0]) for err in exc.errors() if err.get("loc")})
        return Invalid(
            code=INVALID_FORM,
            message="Invalid form submission: " + ", ".join(fields or ["body"]),
        )
    for name in checkboxes:
        values.setdefault(name, False)
    return values
