"""
===============================================================================
USE CASES: Invoices
===============================================================================

Invoices for the administrator's time and expenses, in integer minor units.

Rules:
  - Callers never write subtotal/taxAmount/totalAmount; the invoice repository
    recomputes them from lineItems and taxRate on every write.
  - invoiceNumber, when present, is unique per estate owner.
  - issueDate defaults to today.
  - A status change is reported as INVOICE_STATUS_CHANGED; moving to PAID
    stamps paidAt.
===============================================================================
"""

from __future__ import annotations

from datetime import date
from typing import Any, Mapping

from ...domain.entities import EstateEventType
from ...domain.errors import DomainValidationError
from ...domain.invoices import Invoice, InvoiceLineItem, InvoiceStatus, LineItemType
from .. import inputs
from ..results import Invalid, Outcome
from .base import EstateScopedUseCases, parse_fields


def _line_item(raw: Any, index: int) -> InvoiceLineItem:
    if not isinstance(raw, Mapping):
        raise DomainValidationError(
            "invalid_line_items", f"lineItems[{index}] must be an object"
        )
    quantity = inputs.amount(
        raw,
        "quantity",
        required=False,
        code="invalid_quantity",
        message="quantity must be a non-negative number",
    )
    rate = inputs.integer(
        raw,
        "rate",
        code="invalid_rate",
        message="rate must be a non-negative whole number of minor units",
        minimum=0,
    )
    return InvoiceLineItem(
        label=inputs.text(raw, "label"),
        type=inputs.choice(
            raw,
            "type",
            LineItemType,
            code="invalid_line_type",
            message="Invalid line item type",
            default=LineItemType.TIME,
            upper=True,
        ),
        quantity=1 if quantity is None else quantity,
        rate=rate or 0,
        amount=inputs.amount(
            raw,
            "amount",
            required=False,
            code="invalid_amount",
            message="amount must be a non-negative number",
        ),
    )


def _line_items(data: Mapping[str, Any]) -> list[InvoiceLineItem]:
    raw = data.get("line_items")
    if raw is None:
        return []
    if not isinstance(raw, (list, tuple)):
        raise DomainValidationError("invalid_line_items", "lineItems must be a list")
    return [_line_item(item, index) for index, item in enumerate(raw)]


def _status(data: Mapping[str, Any]) -> InvoiceStatus:
    return inputs.choice(
        data,
        "status",
        InvoiceStatus,
        code="invalid_status",
        message="Invalid invoice status",
        default=InvoiceStatus.DRAFT,
        upper=True,
    )


def _tax_rate(data: Mapping[str, Any]) -> float:
    value = inputs.amount(
        data,
        "tax_rate",
        required=False,
        code="invalid_tax_rate",
        message="taxRate must be between 0 and 1",
    )
    return 0 if value is None else value


_PARSERS = {
    "issue_date": lambda d: inputs.date_field(
        d,
        "issue_date",
        invalid=("invalid_date", "issueDate must be a valid date"),
    ),
    "due_date": lambda d: inputs.date_field(
        d, "due_date", invalid=("invalid_date", "dueDate must be a valid date")
    ),
    "status": _status,
    "invoice_number": lambda d: inputs.text(d, "invoice_number"),
    "currency": lambda d: inputs.text(d, "currency") or "USD",
    "line_items": _line_items,
    "tax_rate": _tax_rate,
    "notes": lambda d: inputs.text(d, "notes"),
}


class InvoiceUseCases(EstateScopedUseCases[Invoice]):
    resource = "Invoice"
    segment = "invoices"
    entity_cls = Invoice

    created_event = EstateEventType.INVOICE_CREATED

    def _parse(self, data: Mapping[str, Any], *, partial: bool) -> dict[str, Any]:
        fields = parse_fields(data, _PARSERS, partial=partial)
        if not partial and fields.get("issue_date") is None:
            fields["issue_date"] = date.today()
        return fields

    def _check(self, entity: Invoice) -> Invalid | None:
        if entity.invoice_number is None:
            return None
        clash = self._repo.find_by_number(entity.owner_id, entity.invoice_number)
        if clash is not None and clash.id != entity.id:
            return Invalid(
                code="duplicate_invoice_number",
                message="Invoice number already in use",
            )
        return None

    def _describe(self, entity: Invoice) -> str:
        return entity.invoice_number or entity.id

    def _event_for_update(
        self, before: Invoice, after: Invoice
    ) -> EstateEventType | None:
        if before.status != after.status:
            return EstateEventType.INVOICE_STATUS_CHANGED
        return None

    def change_status(
        self,
        estate_id: str,
        invoice_id: str,
        user_id: str | None,
        status: Any,
    ) -> Outcome[Invoice]:
        if inputs.text({"status": status}, "status") is None:
            return Invalid(code="missing_status", message="status is required")
        return self.update(estate_id, invoice_id, user_id, {"status": status})
