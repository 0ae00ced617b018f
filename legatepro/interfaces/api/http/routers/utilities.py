"""
===============================================================================
CRC CARD — routers/utilities.py
===============================================================================

Responsibilities:
    - /api/utilities: search (estateId, propertyId, type, q) and create.
    - /api/utilities/{id}: read, patch and delete one account.

Collaborators:
    - application.usecases.UtilityAccountUseCases
    - schemas.records (UtilityAccount DTOs)
===============================================================================
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from legatepro.application.usecases import UtilityAccountUseCases
from legatepro.container import get_utility_account_use_cases
from legatepro.crosscutting.error_responses import bad_request
from legatepro.domain.entities import UtilityAccount, UtilityType

from ..dependencies import optional_user_id
from ..error_mapping import unwrap
from ..schemas import DeletedRes
from ..schemas.records import (
    UtilityAccountEnvelope,
    UtilityAccountListRes,
    UtilityAccountReq,
    UtilityAccountRes,
)

router = APIRouter(tags=["utilities"])


def _envelope(account: UtilityAccount) -> UtilityAccountEnvelope:
    return UtilityAccountEnvelope(utility=UtilityAccountRes.model_validate(account))


def _utility_type(raw: str | None) -> UtilityType | None:
    if raw is None or not raw.strip():
        return None
    try:
        return UtilityType(raw.strip().lower())
    except ValueError as exc:
        raise bad_request("Invalid utility type", reason="invalid_utility_type") from exc


@router.get("/utilities", response_model=UtilityAccountListRes)
def list_utility_accounts(
    estate_id: str | None = Query(None, alias="estateId"),
    property_id: str | None = Query(None, alias="propertyId"),
    type: str | None = Query(None),
    q: str | None = Query(None),
    user_id: str | None = Depends(optional_user_id),
    use_cases: UtilityAccountUseCases = Depends(get_utility_account_use_cases),
):
    accounts = unwrap(
        use_cases.search(
            user_id,
            estate_id=estate_id or None,
            property_id=property_id or None,
            utility_type=_utility_type(type),
            text=q,
        )
    )
    return UtilityAccountListRes(
        utilities=[UtilityAccountRes.model_validate(a) for a in accounts]
    )


@router.post("/utilities", response_model=UtilityAccountEnvelope, status_code=201)
def create_utility_account(
    req: UtilityAccountReq,
    user_id: str | None = Depends(optional_user_id),
    use_cases: UtilityAccountUseCases = Depends(get_utility_account_use_cases),
):
    return _envelope(unwrap(use_cases.record(user_id, req.to_input())))


@router.get("/utilities/{utility_id}", response_model=UtilityAccountEnvelope)
def get_utility_account(
    utility_id: str,
    user_id: str | None = Depends(optional_user_id),
    use_cases: UtilityAccountUseCases = Depends(get_utility_account_use_cases),
):
    return _envelope(unwrap(use_cases.get_by_id(utility_id, user_id)))


@router.patch("/utilities/{utility_id}", response_model=UtilityAccountEnvelope)
def update_utility_account(
    utility_id: str,
    req: UtilityAccountReq,
    user_id: str | None = Depends(optional_user_id),
    use_cases: UtilityAccountUseCases = Depends(get_utility_account_use_cases),
):
    changes = req.to_input()
    changes.pop("estate_id", None)
    return _envelope(unwrap(use_cases.update_by_id(utility_id, user_id, changes)))


@router.delete("/utilities/{utility_id}", response_model=DeletedRes)
def delete_utility_account(
    utility_id: str,
    user_id: str | None = Depends(optional_user_id),
    use_cases: UtilityAccountUseCases = Depends(get_utility_account_use_cases),
):
    deleted = unwrap(use_cases.delete_by_id(utility_id, user_id))
    return DeletedRes(id=deleted.id)
