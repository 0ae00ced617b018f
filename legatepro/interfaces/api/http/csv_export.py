"""
===============================================================================
CRC CARD — csv_export.py (rent ledger as CSV)
===============================================================================

Responsibilities:
  - Render RentLedgerRow lists as a quoted CSV document.
  - Name the attachment after the estate.

Collaborators:
  - application.usecases.RentLedgerRow
  - routers/rent.py: GET /api/rent/export

Notes:
  - Every cell is quoted; embedded quotes are doubled by the csv module.
  - Text cells starting with = + - @ get a leading apostrophe so
    spreadsheets show them as text.
===============================================================================
"""

from __future__ import annotations

import csv
import io
from typing import Iterable

from legatepro.application.usecases import RentLedgerRow

CSV_MEDIA_TYPE = "text/csv; charset=utf-8"
LEDGER_COLUMNS = ("Date", "Period", "Tenant", "Property", "Method", "Amount", "Notes")
_FORMULA_PREFIXES = ("=", "+", "-", "@")


def _text(value: str | None) -> str:
    if not value:
        return ""
    if value.startswith(_FORMULA_PREFIXES):
        return "'" + value
    return value


def rent_ledger_csv(rows: Iterable[RentLedgerRow]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(LEDGER_COLUMNS)
    for row in rows:
        payment = row.payment
        writer.writerow(
            [
                payment.payment_date.isoformat(),
                row.period_label,
                _text(payment.tenant_name),
                _text(row.property_label),
                _text(payment.method),
                f"{payment.amount:.2f}",
                _text(payment.notes),
            ]
        )
    return buffer.getvalue()


def ledger_filename(estate_id: str) -> str:
    return f"estate-{estate_id}-rent-ledger.csv"
