"""
Name: Invoice Totals Tests

Responsibilities:
  - Validate recompute_totals arithmetic in minor units
  - Cover half-up rounding and idempotency
  - Reject out-of-range money and tax values at construction
"""

from datetime import date

import pytest

from legatepro.domain.errors import DomainValidationError
from legatepro.domain.invoices import (
    Invoice,
    InvoiceLineItem,
    InvoiceStatus,
    recompute_totals,
    round_minor,
)

pytestmark = pytest.mark.unit


def _invoice(**overrides) -> Invoice:
    fields = {
        "estate_id": "e1",
        "owner_id": "u-owner",
        "issue_date": date(2024, 3, 1),
    }
    fields.update(overrides)
    return Invoice(**fields)


def test_two_line_items_with_tax():
    invoice = _invoice(
        line_items=[
            InvoiceLineItem(label="Court filings", quantity=2, rate=10000),
            InvoiceLineItem(label="Appraisal", quantity=1, rate=5000),
        ],
        tax_rate=0.05,
    )

    result = recompute_totals(invoice)

    assert [item.amount for item in result.line_items] == [20000, 5000]
    assert result.subtotal == 25000
    assert result.tax_amount == 1250
    assert result.total_amount == 26250


def test_total_is_subtotal_plus_tax():
    invoice = _invoice(
        line_items=[
            InvoiceLineItem(label="Hours", quantity=3.25, rate=12345),
            InvoiceLineItem(label="Postage", quantity=1, rate=899),
        ],
        tax_rate=0.0825,
    )

    result = recompute_totals(invoice)

    assert result.subtotal == sum(item.amount for item in result.line_items)
    assert result.total_amount == result.subtotal + result.tax_amount


def test_explicit_amount_wins_over_quantity_times_rate():
    invoice = _invoice(
        line_items=[InvoiceLineItem(label="Flat fee", quantity=4, rate=100, amount=250)]
    )

    result = recompute_totals(invoice)

    assert result.line_items[0].amount == 250
    assert result.subtotal == 250


def test_rounds_half_up():
    assert round_minor(2.5) == 3
    assert round_minor(3.5) == 4
    assert round_minor(2.49) == 2

    invoice = _invoice(
        line_items=[InvoiceLineItem(label="Half unit", quantity=1.5, rate=3)],
        tax_rate=0.5,
    )
    result = recompute_totals(invoice)

    assert result.subtotal == 5
    assert result.tax_amount == 3
    assert result.total_amount == 8


def test_recompute_is_idempotent():
    invoice = _invoice(
        line_items=[InvoiceLineItem(label="Hours", quantity=1.5, rate=333)],
        tax_rate=0.07,
    )

    once = recompute_totals(invoice)
    twice = recompute_totals(once)

    assert twice == once


def test_caller_written_totals_are_replaced():
    invoice = _invoice(
        line_items=[InvoiceLineItem(label="Hours", quantity=1, rate=1000)],
        subtotal=1,
        tax_amount=2,
        total_amount=999999,
    )

    result = recompute_totals(invoice)

    assert (result.subtotal, result.tax_amount, result.total_amount) == (1000, 0, 1000)


def test_empty_invoice_totals_zero():
    result = recompute_totals(_invoice())
    assert (result.subtotal, result.tax_amount, result.total_amount) == (0, 0, 0)


@pytest.mark.parametrize("tax_rate", [-0.01, 1.5, float("nan")])
def test_tax_rate_out_of_range_is_rejected(tax_rate):
    with pytest.raises(DomainValidationError) as exc:
        _invoice(tax_rate=tax_rate)
    assert exc.value.code == "invalid_tax_rate"


def test_negative_rate_is_rejected():
    with pytest.raises(DomainValidationError) as exc:
        InvoiceLineItem(label="Refund", quantity=1, rate=-100)
    assert exc.value.code == "invalid_rate"


def test_paid_status_stamps_paid_at():
    invoice = _invoice(status=InvoiceStatus.PAID)
    assert invoice.paid_at is not None

    draft = _invoice(status=InvoiceStatus.DRAFT)
    assert draft.paid_at is None


def test_due_date_before_issue_date_is_rejected():
    with pytest.raises(DomainValidationError) as exc:
        _invoice(due_date=date(2024, 2, 1))
    assert exc.value.code == "invalid_due_date"
