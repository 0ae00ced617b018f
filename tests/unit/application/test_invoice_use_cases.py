"""
Name: Invoice Use Case Tests

Responsibilities:
  - Totals are recomputed on every write, whatever the caller sends
  - Invoice numbers are unique per estate owner
  - Status changes emit INVOICE_STATUS_CHANGED and stamp paidAt
"""

import pytest

from legatepro.application.results import Invalid, Ok
from legatepro.container import (
    get_event_repository,
    get_invoice_repository,
    get_invoice_use_cases,
)
from legatepro.domain.entities import EstateEventType
from legatepro.domain.invoices import InvoiceStatus

pytestmark = pytest.mark.unit

LINE_ITEMS = [
    {"label": "Court filings", "quantity": 2, "rate": 10000},
    {"label": "Appraisal", "quantity": "1", "rate": "5000", "type": "expense"},
]


def test_create_recomputes_totals(estate, owner):
    outcome = get_invoice_use_cases().create(
        "e1",
        owner.id,
        {
            "issue_date": "2024-03-01",
            "line_items": LINE_ITEMS,
            "tax_rate": "0.05",
            "total_amount": 1,
        },
    )

    assert isinstance(outcome, Ok)
    invoice = outcome.value
    assert (invoice.subtotal, invoice.tax_amount, invoice.total_amount) == (
        25000,
        1250,
        26250,
    )

    stored = get_invoice_repository().get(invoice.id)
    assert stored.total_amount == 26250


def test_update_recomputes_totals(estate, owner):
    use_cases = get_invoice_use_cases()
    invoice = use_cases.create("e1", owner.id, {"line_items": LINE_ITEMS}).value

    updated = use_cases.update("e1", invoice.id, owner.id, {"tax_rate": 0.1}).value

    assert updated.subtotal == 25000
    assert updated.tax_amount == 2500
    assert updated.total_amount == 27500


def test_duplicate_invoice_number_is_rejected(estate, owner):
    use_cases = get_invoice_use_cases()
    use_cases.create("e1", owner.id, {"invoice_number": "INV-001"})

    outcome = use_cases.create("e1", owner.id, {"invoice_number": "INV-001"})

    assert outcome == Invalid(
        code="duplicate_invoice_number", message="Invoice number already in use"
    )


def test_invalid_line_items(estate, owner):
    use_cases = get_invoice_use_cases()

    not_a_list = use_cases.create("e1", owner.id, {"line_items": "lots"})
    bad_rate = use_cases.create(
        "e1", owner.id, {"line_items": [{"label": "x", "rate": 12.5}]}
    )

    assert not_a_list.code == "invalid_line_items"
    assert bad_rate.code == "invalid_rate"


def test_change_status_to_paid(estate, owner):
    use_cases = get_invoice_use_cases()
    invoice = use_cases.create("e1", owner.id, {"invoice_number": "INV-7"}).value

    paid = use_cases.change_status("e1", invoice.id, owner.id, "paid").value

    assert paid.status == InvoiceStatus.PAID
    assert paid.paid_at is not None
    types = [e.type for e in get_event_repository().list_events("e1")]
    assert EstateEventType.INVOICE_STATUS_CHANGED in types


def test_change_status_requires_value(estate, owner):
    use_cases = get_invoice_use_cases()
    invoice = use_cases.create("e1", owner.id, {}).value

    assert use_cases.change_status("e1", invoice.id, owner.id, " ") == Invalid(
        code="missing_status", message="status is required"
    )
    bogus = use_cases.change_status("e1", invoice.id, owner.id, "lost")
    assert bogus.code == "invalid_status"
