"""
HTTP schemas: properties, rent payments, utility accounts, documents, tasks,
notes.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any

from legatepro.domain.entities import PropertyType, TaskStatus, UtilityType
from .common import CamelModel, RequestModel


class RecordRes(CamelModel):
    id: str
    estate_id: str
    owner_id: str
    created_at: datetime
    updated_at: datetime


# -----------------------------------------------------------------------------
# Properties
# -----------------------------------------------------------------------------
class PropertyReq(RequestModel):
    label: str | None = None
    address_line1: str | None = None
    address_line2: str | None = None
    city: str | None = None
    state: str | None = None
    postal_code: str | None = None
    property_type: str | None = None
    bedrooms: Any = None
    bathrooms: Any = None
    square_feet: Any = None
    estimated_value: Any = None
    monthly_rent_target: Any = None
    is_rented: Any = None
    is_sold: Any = None
    notes: str | None = None


class PropertyRes(RecordRes):
    label: str
    address_line1: str | None = None
    address_line2: str | None = None
    city: str | None = None
    state: str | None = None
    postal_code: str | None = None
    display_address: str = ""
    property_type: PropertyType
    bedrooms: float | None = None
    bathrooms: float | None = None
    square_feet: float | None = None
    estimated_value: float | None = None
    monthly_rent_target: float | None = None
    is_rented: bool
    is_sold: bool
    notes: str | None = None


class PropertyEnvelope(CamelModel):
    property: PropertyRes


class PropertyListRes(CamelModel):
    properties: list[PropertyRes]


# -----------------------------------------------------------------------------
# Rent payments
# -----------------------------------------------------------------------------
class RentPaymentReq(RequestModel):
    estate_id: str | None = None
    property_id: str | None = None
    tenant_name: str | None = None
    payment_date: Any = None
    amount: Any = None
    notes: str | None = None
    is_paid: Any = None
    period_month: Any = None
    period_year: Any = None
    method: str | None = None
    reference: str | None = None
    is_late: Any = None


class RentPaymentRes(RecordRes):
    property_id: str | None = None
    tenant_name: str
    payment_date: date
    amount: float
    notes: str | None = None
    is_paid: bool
    period_month: int | None = None
    period_year: int | None = None
    method: str | None = None
    reference: str | None = None
    is_late: bool


class RentPaymentEnvelope(CamelModel):
    payment: RentPaymentRes


class RentPaymentListRes(CamelModel):
    payments: list[RentPaymentRes]


# -----------------------------------------------------------------------------
# Utility accounts
# -----------------------------------------------------------------------------
class UtilityAccountReq(RequestModel):
    estate_id: str | None = None
    property_id: str | None = None
    provider_name: str | None = None
    utility_type: str | None = None
    account_number: str | None = None
    phone: str | None = None
    website: str | None = None
    balance_due: Any = None
    last_payment_amount: Any = None
    last_payment_date: Any = None
    notes: str | None = None


class UtilityAccountRes(RecordRes):
    property_id: str | None = None
    provider_name: str
    utility_type: UtilityType
    account_number: str | None = None
    phone: str | None = None
    website: str | None = None
    balance_due: float
    last_payment_amount: float | None = None
    last_payment_date: date | None = None
    notes: str | None = None


class UtilityAccountEnvelope(CamelModel):
    utility: UtilityAccountRes


class UtilityAccountListRes(CamelModel):
    utilities: list[UtilityAccountRes]


# -----------------------------------------------------------------------------
# Documents
# -----------------------------------------------------------------------------
class DocumentReq(RequestModel):
    subject: str | None = None
    label: str | None = None
    location: str | None = None
    url: str | None = None
    tags: Any = None
    notes: str | None = None
    is_sensitive: Any = None


class DocumentRes(RecordRes):
    subject: str
    label: str
    location: str | None = None
    url: str | None = None
    tags: list[str]
    notes: str | None = None
    is_sensitive: bool


class DocumentEnvelope(CamelModel):
    document: DocumentRes


class DocumentListRes(CamelModel):
    documents: list[DocumentRes]


# -----------------------------------------------------------------------------
# Tasks
# -----------------------------------------------------------------------------
class TaskReq(RequestModel):
    title: str | None = None
    description: str | None = None
    status: str | None = None
    due_date: Any = None
    related_document_id: str | None = None
    related_invoice_id: str | None = None


class TaskRes(RecordRes):
    title: str
    description: str | None = None
    status: TaskStatus
    due_date: date | None = None
    completed_at: datetime | None = None
    related_document_id: str | None = None
    related_invoice_id: str | None = None


class TaskEnvelope(CamelModel):
    task: TaskRes


class TaskListRes(CamelModel):
    tasks: list[TaskRes]


# -----------------------------------------------------------------------------
# Notes
# -----------------------------------------------------------------------------
class NoteReq(RequestModel):
    body: str | None = None
    pinned: Any = None


class NoteRes(RecordRes):
    body: str
    pinned: bool


class NoteEnvelope(CamelModel):
    note: NoteRes


class NoteListRes(CamelModel):
    notes: list[NoteRes]
