"""
===============================================================================
CRC CARD — routers/invoices.py
===============================================================================

Responsibilities:
    - Estate-scoped invoice CRUD (scoped.build_scoped_router).
    - PATCH /estates/{estateId}/invoices/{id}/status: status transitions.

Notes:
    - Totals in responses are always the recomputed ones; request bodies
      cannot set subtotal, taxAmount or totalAmount.
===============================================================================
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from legatepro.application.usecases import InvoiceUseCases
from legatepro.container import get_invoice_use_cases

from ..dependencies import optional_user_id
from ..error_mapping import unwrap
from ..schemas.invoices import InvoiceEnvelope, InvoiceReq, InvoiceRes, InvoiceStatusReq
from .scoped import build_scoped_router

router = APIRouter()


@router.patch(
    "/estates/{estate_id}/invoices/{invoice_id}/status",
    response_model=InvoiceEnvelope,
    tags=["invoices"],
)
def change_invoice_status(
    estate_id: str,
    invoice_id: str,
    req: InvoiceStatusReq,
    user_id: str | None = Depends(optional_user_id),
    use_cases: InvoiceUseCases = Depends(get_invoice_use_cases),
):
    invoice = unwrap(use_cases.change_status(estate_id, invoice_id, user_id, req.status))
    return InvoiceEnvelope(invoice=InvoiceRes.model_validate(invoice))


router.include_router(
    build_scoped_router(
        segment="invoices",
        singular="invoice",
        plural="invoices",
        request_model=InvoiceReq,
        response_model=InvoiceRes,
        use_cases_factory=get_invoice_use_cases,
        tag="invoices",
    )
)
