"""
===============================================================================
CRC CARD — routers/estates.py
===============================================================================

Responsibilities:
    - /estates: list (owned + shared, with role) and create.
    - /estates/{estateId}: read, patch, delete (OWNER).
    - /estates/{estateId}/collaborators[/{userId}]: list, grant, revoke.
    - /estates/{estateId}/invites: list, send, revoke (OWNER);
      /invites/{token}/accept for the invited account.
    - /estates/{estateId}/activity: event feed with cursor pagination.
    - /estates/{estateId}/readiness: readiness score (cached per estate).

Collaborators:
    - application.usecases (Estate/Collaborator/Invite/Activity/Readiness)
    - schemas.estates
===============================================================================
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Query, Response

from legatepro.application.paths import invite_path
from legatepro.application.usecases import (
    CollaboratorUseCases,
    EstateUseCases,
    EstateView,
    GetEstateReadinessUseCase,
    InviteUseCases,
    ListEstateActivityUseCase,
)
from legatepro.container import (
    get_activity_use_case,
    get_collaborator_use_cases,
    get_estate_use_cases,
    get_invite_use_cases,
    get_readiness_use_case,
)
from legatepro.domain.access import EstateRole
from legatepro.domain.entities import Estate, EstateInvite

from ..dependencies import optional_user_id
from ..error_mapping import unwrap
from ..schemas import DeletedRes
from ..schemas.estates import (
    ActivityRes,
    CollaboratorEnvelope,
    CollaboratorListRes,
    CollaboratorReq,
    CollaboratorRes,
    EstateEnvelope,
    EstateListRes,
    EstateReq,
    EstateRes,
    EventRes,
    InviteAcceptedRes,
    InviteEnvelope,
    InviteListRes,
    InviteReq,
    InviteRes,
    InviteSentRes,
)

router = APIRouter(tags=["estates"])


def _estate_res(estate: Estate, role: EstateRole | None = None) -> EstateRes:
    return EstateRes.model_validate(estate).model_copy(update={"role": role})


def _view_res(view: EstateView) -> EstateRes:
    return _estate_res(view.estate, view.role)


# =============================================================================
# Estates
# =============================================================================


@router.get("/estates", response_model=EstateListRes)
def list_estates(
    user_id: str | None = Depends(optional_user_id),
    use_cases: EstateUseCases = Depends(get_estate_use_cases),
):
    views = unwrap(use_cases.list(user_id))
    return EstateListRes(estates=[_view_res(v) for v in views])


@router.post("/estates", response_model=EstateEnvelope, status_code=201)
def create_estate(
    req: EstateReq,
    user_id: str | None = Depends(optional_user_id),
    use_cases: EstateUseCases = Depends(get_estate_use_cases),
):
    estate = unwrap(use_cases.create(user_id, req.to_input()))
    return EstateEnvelope(estate=_estate_res(estate, EstateRole.OWNER))


@router.get("/estates/{estate_id}", response_model=EstateEnvelope)
def get_estate(
    estate_id: str,
    user_id: str | None = Depends(optional_user_id),
    use_cases: EstateUseCases = Depends(get_estate_use_cases),
):
    return EstateEnvelope(estate=_view_res(unwrap(use_cases.get(estate_id, user_id))))


@router.patch("/estates/{estate_id}", response_model=EstateEnvelope)
def update_estate(
    estate_id: str,
    req: EstateReq,
    user_id: str | None = Depends(optional_user_id),
    use_cases: EstateUseCases = Depends(get_estate_use_cases),
):
    estate = unwrap(use_cases.update(estate_id, user_id, req.to_input()))
    return EstateEnvelope(estate=_estate_res(estate))


@router.delete("/estates/{estate_id}", response_model=DeletedRes)
def delete_estate(
    estate_id: str,
    user_id: str | None = Depends(optional_user_id),
    use_cases: EstateUseCases = Depends(get_estate_use_cases),
):
    deleted = unwrap(use_cases.delete(estate_id, user_id))
    return DeletedRes(id=deleted.id)


# =============================================================================
# Collaborators
# =============================================================================


@router.get("/estates/{estate_id}/collaborators", response_model=CollaboratorListRes)
def list_collaborators(
    estate_id: str,
    user_id: str | None = Depends(optional_user_id),
    use_cases: CollaboratorUseCases = Depends(get_collaborator_use_cases),
):
    entries = unwrap(use_cases.list(estate_id, user_id))
    return CollaboratorListRes(
        collaborators=[CollaboratorRes.model_validate(c) for c in entries]
    )


@router.post(
    "/estates/{estate_id}/collaborators",
    response_model=CollaboratorEnvelope,
    status_code=201,
)
def add_collaborator(
    estate_id: str,
    req: CollaboratorReq,
    user_id: str | None = Depends(optional_user_id),
    use_cases: CollaboratorUseCases = Depends(get_collaborator_use_cases),
):
    entry = unwrap(use_cases.add(estate_id, user_id, req.to_input()))
    return CollaboratorEnvelope(collaborator=CollaboratorRes.model_validate(entry))


@router.delete(
    "/estates/{estate_id}/collaborators/{collaborator_id}",
    response_model=CollaboratorEnvelope,
)
def remove_collaborator(
    estate_id: str,
    collaborator_id: str,
    user_id: str | None = Depends(optional_user_id),
    use_cases: CollaboratorUseCases = Depends(get_collaborator_use_cases),
):
    entry = unwrap(use_cases.remove(estate_id, user_id, collaborator_id))
    return CollaboratorEnvelope(collaborator=CollaboratorRes.model_validate(entry))


# =============================================================================
# Invites
# =============================================================================


def _invite_res(invite: EstateInvite) -> InviteRes:
    return InviteRes.model_validate(invite)


@router.get("/estates/{estate_id}/invites", response_model=InviteListRes)
def list_invites(
    estate_id: str,
    user_id: str | None = Depends(optional_user_id),
    use_cases: InviteUseCases = Depends(get_invite_use_cases),
):
    invites = unwrap(use_cases.list(estate_id, user_id))
    return InviteListRes(invites=[_invite_res(i) for i in invites])


@router.post(
    "/estates/{estate_id}/invites", response_model=InviteSentRes, status_code=201
)
def send_invite(
    estate_id: str,
    req: InviteReq,
    response: Response,
    user_id: str | None = Depends(optional_user_id),
    use_cases: InviteUseCases = Depends(get_invite_use_cases),
):
    issued = unwrap(use_cases.send(estate_id, user_id, req.to_input()))
    if issued.reused:
        response.status_code = 200
    return InviteSentRes(
        invite=_invite_res(issued.invite),
        invite_url=invite_path(issued.invite.estate_id, issued.invite.token),
        previous_role=issued.previous_role,
    )


@router.delete("/estates/{estate_id}/invites", response_model=InviteEnvelope)
def revoke_invite(
    estate_id: str,
    token: str | None = Query(None),
    email: str | None = Query(None),
    user_id: str | None = Depends(optional_user_id),
    use_cases: InviteUseCases = Depends(get_invite_use_cases),
):
    invite = unwrap(use_cases.revoke(estate_id, user_id, {"token": token, "email": email}))
    return InviteEnvelope(invite=_invite_res(invite))


@router.post(
    "/estates/{estate_id}/invites/{token}/accept", response_model=InviteAcceptedRes
)
def accept_invite(
    estate_id: str,
    token: str,
    user_id: str | None = Depends(optional_user_id),
    use_cases: InviteUseCases = Depends(get_invite_use_cases),
):
    entry = unwrap(use_cases.accept(estate_id, token, user_id))
    return InviteAcceptedRes(estate_id=entry.estate_id, role=entry.role)


# =============================================================================
# Activity + readiness

# =============================================================================


@router.get("/estates/{estate_id}/activity", response_model=ActivityRes)
def list_activity(
    estate_id: str,
    types: list[str] | None = Query(None, alias="type"),
    cursor: str | None = Query(None),
    limit: int | None = Query(None),
    user_id: str | None = Depends(optional_user_id),
    use_case: ListEstateActivityUseCase = Depends(get_activity_use_case),
):
    page = unwrap(
        use_case.execute(estate_id, user_id, types=types, cursor=cursor, limit=limit)
    )
    return ActivityRes(
        events=[EventRes.model_validate(e) for e in page.events],
        next_cursor=page.next_cursor,
    )


@router.get("/estates/{estate_id}/readiness")
def get_readiness(
    estate_id: str,
    user_id: str | None = Depends(optional_user_id),
    use_case: GetEstateReadinessUseCase = Depends(get_readiness_use_case),
) -> dict[str, Any]:
    return unwrap(use_case.execute(estate_id, user_id))
