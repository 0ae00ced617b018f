"""
===============================================================================
CRC CARD — routers/rent.py
===============================================================================

Responsibilities:
    - /api/rent: search and record rent payments.
    - /api/rent/export?estateId=: the estate rent ledger as a CSV download
      (declared before /rent/{id} so "export" is never read as an id).
    - /api/rent/{id}: read, patch and delete one payment.
    - Query parsing errors -> 400 ("Invalid from date" / "Invalid to date").

Collaborators:
    - application.usecases.RentPaymentUseCases (via container)
    - error_mapping.unwrap
    - schemas.records (RentPayment DTOs)
    - csv_export (ledger rendering)
===============================================================================
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Response

from legatepro.application.usecases import RentPaymentUseCases
from legatepro.container import get_rent_payment_use_cases
from legatepro.domain.entities import RentPayment

from ..csv_export import CSV_MEDIA_TYPE, ledger_filename, rent_ledger_csv
from ..dependencies import optional_user_id, query_bool, query_date
from ..error_mapping import unwrap
from ..schemas import DeletedRes
from ..schemas.records import (
    RentPaymentEnvelope,
    RentPaymentListRes,
    RentPaymentReq,
    RentPaymentRes,
)

router = APIRouter(tags=["rent"])


def _envelope(payment: RentPayment) -> RentPaymentEnvelope:
    return RentPaymentEnvelope(payment=RentPaymentRes.model_validate(payment))


@router.get("/rent", response_model=RentPaymentListRes)
def list_rent_payments(
    estate_id: str | None = Query(None, alias="estateId"),
    property_id: str | None = Query(None, alias="propertyId"),
    paid: str | None = Query(None),
    date_from: str | None = Query(None, alias="from"),
    date_to: str | None = Query(None, alias="to"),
    q: str | None = Query(None),
    user_id: str | None = Depends(optional_user_id),
    use_cases: RentPaymentUseCases = Depends(get_rent_payment_use_cases),
):
    payments = unwrap(
        use_cases.search(
            user_id,
            estate_id=estate_id or None,
            property_id=property_id or None,
            is_paid=query_bool(paid, "paid"),
            date_from=query_date(date_from, "from"),
            date_to=query_date(date_to, "to"),
            text=q,
        )
    )
    return RentPaymentListRes(
        payments=[RentPaymentRes.model_validate(p) for p in payments]
    )


@router.post("/rent", response_model=RentPaymentEnvelope, status_code=201)
def create_rent_payment(
    req: RentPaymentReq,
    user_id: str | None = Depends(optional_user_id),
    use_cases: RentPaymentUseCases = Depends(get_rent_payment_use_cases),
):
    return _envelope(unwrap(use_cases.record(user_id, req.to_input())))


@router.get("/rent/export", response_class=Response)
def export_rent_ledger(
    estate_id: str | None = Query(None, alias="estateId"),
    property_id: str | None = Query(None, alias="propertyId"),
    paid: str | None = Query(None),
    date_from: str | None = Query(None, alias="from"),
    date_to: str | None = Query(None, alias="to"),
    q: str | None = Query(None),
    user_id: str | None = Depends(optional_user_id),
    use_cases: RentPaymentUseCases = Depends(get_rent_payment_use_cases),
):
    rows = unwrap(
        use_cases.ledger(
            user_id,
            estate_id=estate_id or None,
            property_id=property_id or None,
            is_paid=query_bool(paid, "paid"),
            date_from=query_date(date_from, "from"),
            date_to=query_date(date_to, "to"),
            text=q,
        )
    )
    return Response(
        content=rent_ledger_csv(rows),
        media_type=CSV_MEDIA_TYPE,
        headers={
            "Content-Disposition": f'attachment; filename="{ledger_filename(estate_id)}"'
        },
    )


@router.get("/rent/{payment_id}", response_model=RentPaymentEnvelope)

def get_rent_payment(
    payment_id: str,
    user_id: str | None = Depends(optional_user_id),
    use_cases: RentPaymentUseCases = Depends(get_rent_payment_use_cases),
):
    return _envelope(unwrap(use_cases.get_by_id(payment_id, user_id)))


@router.patch("/rent/{payment_id}", response_model=RentPaymentEnvelope)
def update_rent_payment(
    payment_id: str,
    req: RentPaymentReq,
    user_id: str | None = Depends(optional_user_id),
    use_cases: RentPaymentUseCases = Depends(get_rent_payment_use_cases),
):
    changes = req.to_input()
    changes.pop("estate_id", None)
    return _envelope(unwrap(use_cases.update_by_id(payment_id, user_id, changes)))


@router.delete("/rent/{payment_id}", response_model=DeletedRes)
def delete_rent_payment(
    payment_id: str,
    user_id: str | None = Depends(optional_user_id),
    use_cases: RentPaymentUseCases = Depends(get_rent_payment_use_cases),
):
    deleted = unwrap(use_cases.delete_by_id(payment_id, user_id))
    return DeletedRes(id=deleted.id)
