"""
HTTP schemas: invoices. Money fields are integer minor units.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any

from legatepro.domain.invoices import InvoiceStatus, LineItemType
from .common import CamelModel, RequestModel
from .records import RecordRes


class InvoiceReq(RequestModel):
    issue_date: Any = None
    due_date: Any = None
    status: str | None = None
    invoice_number: str | None = None
    currency: str | None = None
    line_items: Any = None
    tax_rate: Any = None
    notes: str | None = None


class InvoiceStatusReq(CamelModel):
    status: Any = None


class LineItemRes(CamelModel):
    type: LineItemType
    label: str
    quantity: float
    rate: int
    amount: int | None = None


class InvoiceRes(RecordRes):
    status: InvoiceStatus
    invoice_number: str | None = None
    issue_date: date
    due_date: date | None = None
    paid_at: datetime | None = None
    currency: str
    line_items: list[LineItemRes]
    tax_rate: float
    subtotal: int
    tax_amount: int
    total_amount: int
    notes: str | None = None


class InvoiceEnvelope(CamelModel):
    invoice: InvoiceRes


class InvoiceListRes(CamelModel):
    invoices: list[InvoiceRes]
