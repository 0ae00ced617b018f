"""
===============================================================================
CRC CARD — domain/invoices.py
===============================================================================

Module:
    Invoices and totals recomputation

Responsibilities:
    - Define Invoice and InvoiceLineItem (integer minor units).
    - Provide recompute_totals(): line amounts, subtotal, tax and total.
    - Reject out-of-range values at construction (negative money, tax rate
      outside [0, 1], unknown status).

Collaborators:
    - infrastructure/repositories/records.py: calls recompute_totals() on every
      invoice save, so no stored invoice carries caller-written totals.
    - application/usecases/invoices.py

Notes:
    - Rounding is half-up to whole minor units (2.5 cents -> 3 cents).
    - recompute_totals() is idempotent.
===============================================================================
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum

from .entities import EstateRecord, clean_text, optional_text, utcnow
from .errors import DomainValidationError


class InvoiceStatus(str, Enum):
    DRAFT = "DRAFT"
    SENT = "SENT"
    PAID = "PAID"
    VOID = "VOID"


class LineItemType(str, Enum):
    TIME = "TIME"
    EXPENSE = "EXPENSE"
    ADJUSTMENT = "ADJUSTMENT"


def round_minor(value: float | int | Decimal) -> int:
    """Round to an integer number of minor units, half away from zero."""
    return int(Decimal(str(value)).quantize(Decimal(1), rounding=ROUND_HALF_UP))


def _finite_non_negative(value, code: str, message: str) -> None:
    if (
        value is None
        or isinstance(value, bool)
        or not math.isfinite(float(value))
        or value < 0
    ):
        raise DomainValidationError(code, message)


@dataclass(kw_only=True)
class InvoiceLineItem:
    label: str
    type: LineItemType = LineItemType.TIME
    quantity: float = 1
    rate: int = 0
    amount: int | None = None

    def __post_init__(self) -> None:
        label = clean_text(self.label)
        if label is None:
            raise DomainValidationError("missing_line_label", "line item label is required")
        self.label = label
        self.type = LineItemType(self.type)
        _finite_non_negative(
            self.quantity, "invalid_quantity", "quantity must be a non-negative number"
        )
        _finite_non_negative(
            self.rate, "invalid_rate", "rate must be a non-negative number"
        )
        if self.amount is not None:
            _finite_non_negative(
                self.amount, "invalid_amount", "amount must be a non-negative number"
            )

    def resolved_amount(self) -> int:
        if self.amount is not None:
            return round_minor(self.amount)
        return round_minor(Decimal(str(self.quantity)) * Decimal(str(self.rate)))


@dataclass(kw_only=True)
class Invoice(EstateRecord):
    issue_date: date
    status: InvoiceStatus = InvoiceStatus.DRAFT
    invoice_number: str | None = None
    due_date: date | None = None
    paid_at: datetime | None = None
    currency: str = "USD"
    line_items: list[InvoiceLineItem] = field(default_factory=list)
    tax_rate: float = 0
    subtotal: int = 0
    tax_amount: int = 0
    total_amount: int = 0
    notes: str | None = None

    def __post_init__(self) -> None:
        super().__post_init__()
        if not isinstance(self.issue_date, date):
            raise DomainValidationError("missing_issue_date", "issueDate is required")
        if isinstance(self.issue_date, datetime):
            self.issue_date = self.issue_date.date()
        self.status = InvoiceStatus(self.status)
        if self.status == InvoiceStatus.PAID and self.paid_at is None:
            self.paid_at = utcnow()
        elif self.status != InvoiceStatus.PAID:
            self.paid_at = None
        self.invoice_number = clean_text(self.invoice_number)
        currency = (clean_text(self.currency) or "USD").upper()
        if len(currency) != 3 or not currency.isalpha():
            raise DomainValidationError("invalid_currency", "currency must be a 3-letter code")
        self.currency = currency
        if (
            self.tax_rate is None
            or isinstance(self.tax_rate, bool)
            or not math.isfinite(float(self.tax_rate))
            or not 0 <= self.tax_rate <= 1
        ):
            raise DomainValidationError(
                "invalid_tax_rate", "taxRate must be between 0 and 1"
            )
        self.line_items = [
            item if isinstance(item, InvoiceLineItem) else InvoiceLineItem(**item)
            for item in self.line_items or []
        ]
        if self.due_date is not None and self.due_date < self.issue_date:
            raise DomainValidationError(
                "invalid_due_date", "dueDate cannot be before issueDate"
            )
        self.notes = optional_text(self.notes, "invalid_notes", "notes", max_len=4000)

    def is_overdue(self, today: date) -> bool:
        return (
            self.status == InvoiceStatus.SENT
            and self.due_date is not None
            and self.due_date < today
        )


def recompute_totals(invoice: Invoice) -> Invoice:
    """
    Return a copy of `invoice` with derived money fields recomputed.

    - line amount: explicit `amount` rounded, else round(quantity * rate)
    - subtotal = sum(line amounts)
    - tax_amount = round(subtotal * tax_rate)
    - total_amount = subtotal + tax_amount
    """
    items = [
        replace(item, amount=item.resolved_amount()) for item in invoice.line_items
    ]
    subtotal = sum(item.amount for item in items)
    tax_amount = round_minor(Decimal(subtotal) * Decimal(str(invoice.tax_rate)))
    return replace(
        invoice,
        line_items=items,
        subtotal=subtotal,
        tax_amount=tax_amount,
        total_amount=subtotal + tax_amount,
    )
