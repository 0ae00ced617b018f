"""
===============================================================================
CRC CARD — interfaces/web/actions.py (server-side form actions)
===============================================================================

Responsibilities:
    - Accept browser form posts for estate-scoped resources:
        POST /app/estates/{estateId}/<segment>/new
        POST /app/estates/{estateId}/<segment>/{recordId}/edit
        POST /app/estates/{estateId}/<segment>/{recordId}/delete
      for properties, rent, utilities, documents and tasks.
    - Accept a collaborator invite:
        POST /app/estates/{estateId}/invites/{token}/accept
      (no session -> login with the invite page as callback).
    - Run the same guarded use cases as the JSON API.
    - Answer every outcome with a 303 redirect (see redirects.py).

Collaborators:
    - container: use-case factories
    - identity.auth_users.optional_user_id: session cookie
    - interfaces/web/forms.py, interfaces/web/redirects.py

Notes:
    - Use cases are synchronous; they run in the threadpool so a Postgres
      round-trip never blocks the event loop.
    - Access is resolved again on every post; nothing rendered on the form
      page is trusted.
===============================================================================
"""

from dataclasses import dataclass
from typing import Callable, Optional

from fastapi import APIRouter, Depends, Request
from starlette.concurrency import run_in_threadpool

from legatepro.application.paths import (
    ESTATES_INDEX,
    detail_path,
    edit_path,
    estate_path,
    invite_path,
    list_path,
    new_path,
)
from legatepro.application.results import Failure, Invalid, Ok, Unauthenticated
from legatepro.application.usecases import EstateScopedUseCases, InviteUseCases
from legatepro.container import (
    get_document_use_cases,
    get_invite_use_cases,
    get_property_use_cases,
    get_rent_payment_use_cases,
    get_task_use_cases,
    get_utility_account_use_cases,
)
from legatepro.crosscutting.logger import logger
from legatepro.identity.auth_users import optional_user_id
from legatepro.interfaces.api.http.schemas import RequestModel
from legatepro.interfaces.api.http.schemas.records import (
    DocumentReq,
    PropertyReq,
    RentPaymentReq,
    TaskReq,
    UtilityAccountReq,
)

from .forms import form_input, read_form
from .redirects import failure_redirect, redirect_to


@dataclass(frozen=True)
class FormResource:
    segment: str
    request_model: type[RequestModel]
    use_cases_factory: Callable[[], EstateScopedUseCases]
    checkboxes: tuple[str, ...] = ()


FORM_RESOURCES: tuple[FormResource, ...] = (
    FormResource(
        "properties",
        PropertyReq,
        get_property_use_cases,
        checkboxes=("is_rented", "is_sold"),
    ),
    FormResource(
        "rent",
        RentPaymentReq,
        get_rent_payment_use_cases,
        checkboxes=("is_paid", "is_late"),
    ),
    FormResource("utilities", UtilityAccountReq, get_utility_account_use_cases),
    FormResource(
        "documents",
        DocumentReq,
        get_document_use_cases,
        checkboxes=("is_sensitive",),
    ),
    FormResource("tasks", TaskReq, get_task_use_cases),
)


def build_form_router(resource: FormResource) -> APIRouter:
    router = APIRouter(tags=["forms"], include_in_schema=False)
    segment = resource.segment
    base = f"/app/estates/{{estate_id}}/{segment}"

    async def _input(request: Request) -> dict | Invalid:
        data = form_input(
            await read_form(request),
            resource.request_model,
            checkboxes=resource.checkboxes,
        )
        if isinstance(data, dict):
            data.pop("estate_id", None)
        return data

    def _rejected(action: str, outcome: Failure, estate_id: str, origin: str):
        logger.info(
            "form action rejected",
            extra={"action": f"{action}_{segment}", "outcome": type(outcome).__name__},
        )
        return failure_redirect(
            outcome, origin=origin, list_url=list_path(estate_id, segment)
        )

    @router.post(f"{base}/new", name=f"form_create_{segment}")
    async def create_action(
        estate_id: str,
        request: Request,
        user_id: Optional[str] = Depends(optional_user_id),
        use_cases: EstateScopedUseCases = Depends(resource.use_cases_factory),
    ):
        data = await _input(request)
        if isinstance(data, Invalid):
            outcome = data if user_id else Unauthenticated()
        else:
            outcome = await run_in_threadpool(use_cases.create, estate_id, user_id, data)
        if isinstance(outcome, Ok):
            return redirect_to(list_path(estate_id, segment))
        return _rejected("create", outcome, estate_id, new_path(estate_id, segment))

    @router.post(f"{base}/{{record_id}}/edit", name=f"form_update_{segment}")
    async def update_action(
        estate_id: str,
        record_id: str,
        request: Request,
        user_id: Optional[str] = Depends(optional_user_id),
        use_cases: EstateScopedUseCases = Depends(resource.use_cases_factory),
    ):
        data = await _input(request)
        if isinstance(data, Invalid):
            outcome = data if user_id else Unauthenticated()
        else:
            outcome = await run_in_threadpool(
                use_cases.update, estate_id, record_id, user_id, data
            )
        if isinstance(outcome, Ok):
            return redirect_to(detail_path(estate_id, segment, record_id))
        return _rejected(
            "update", outcome, estate_id, edit_path(estate_id, segment, record_id)
        )

    @router.post(f"{base}/{{record_id}}/delete", name=f"form_delete_{segment}")
    async def delete_action(
        estate_id: str,
        record_id: str,
        user_id: Optional[str] = Depends(optional_user_id),
        use_cases: EstateScopedUseCases = Depends(resource.use_cases_factory),
    ):
        outcome = await run_in_threadpool(
            use_cases.delete, estate_id, record_id, user_id
        )
        if isinstance(outcome, Ok):
            return redirect_to(list_path(estate_id, segment))
        return _rejected(
            "delete", outcome, estate_id, detail_path(estate_id, segment, record_id)
        )

    return router


router = APIRouter()
for _resource in FORM_RESOURCES:
    router.include_router(build_form_router(_resource))


@router.post(
    "/app/estates/{estate_id}/invites/{token}/accept",
    name="form_accept_invite",
    include_in_schema=False,
)
async def accept_invite_action(
    estate_id: str,
    token: str,
    user_id: Optional[str] = Depends(optional_user_id),
    use_cases: InviteUseCases = Depends(get_invite_use_cases),
):
    outcome = await run_in_threadpool(use_cases.accept, estate_id, token, user_id)
    if isinstance(outcome, Ok):
        return redirect_to(estate_path(estate_id))
    logger.info(
        "form action rejected",
        extra={"action": "accept_invite", "outcome": type(outcome).__name__},
    )
    return failure_redirect(
        outcome, origin=invite_path(estate_id, token), list_url=ESTATES_INDEX
    )


__all__ = ["FORM_RESOURCES", "build_form_router", "router"]
