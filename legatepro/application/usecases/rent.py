"""
===============================================================================
USE CASES: Rent payments
===============================================================================

Rent collected (or expected) from a tenant of an estate property.

Rules:
  - tenantName, paymentDate and a finite amount > 0 are required.
  - New payments need a property of the same estate.
  - periodMonth/periodYear default to the month of paymentDate.
  - isPaid defaults to true.
  - Without an estate filter, a search lists the payments of the estates the
    caller owns.
  - The ledger (CSV export) always names one estate and runs oldest first.
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any, Mapping

from ...domain.access import EstateAccess
from ...domain.entities import EstateEventType, RentPayment
from ...domain.errors import DomainValidationError
from ...domain.repositories import (
    PropertyRepository,
    RentPaymentQuery,
    RentPaymentRepository,
)
from .. import inputs
from ..guards import EstateMutationGuard
from ..results import Invalid, Ok, Outcome, Unauthenticated
from .base import EstateScopedUseCases, parse_fields
from .properties import check_property_in_estate

_PARSERS = {
    "property_id": lambda d: inputs.text(d, "property_id"),
    "tenant_name": lambda d: inputs.text(d, "tenant_name"),
    "payment_date": lambda d: inputs.date_field(
        d,
        "payment_date",
        invalid=("invalid_date", "paymentDate must be a valid date"),
    ),
    "amount": lambda d: inputs.amount(d, "amount", required=False),
    "notes": lambda d: inputs.text(d, "notes"),
    "is_paid": lambda d: inputs.boolean(d, "is_paid", True),
    "period_month": lambda d: inputs.integer(
        d,
        "period_month",
        code="invalid_month",
        message="periodMonth must be between 1 and 12",
    ),
    "period_year": lambda d: inputs.integer(
        d,
        "period_year",
        code="invalid_year",
        message="periodYear must be between 1900 and 2100",
    ),
    "method": lambda d: inputs.text(d, "method"),
    "reference": lambda d: inputs.text(d, "reference"),
    "is_late": lambda d: inputs.boolean(d, "is_late", False),
}


@dataclass(frozen=True, slots=True)
class RentLedgerRow:
    payment: RentPayment
    property_label: str | None = None

    @property
    def period_label(self) -> str:
        month, year = self.payment.period_month, self.payment.period_year
        if month is None or year is None:
            return ""
        return f"{year:04d}-{month:02d}"


class RentPaymentUseCases(EstateScopedUseCases[RentPayment]):

    resource = "Rent payment"
    segment = "rent"
    entity_cls = RentPayment

    created_event = EstateEventType.RENT_PAYMENT_RECORDED

    def __init__(
        self,
        guard: EstateMutationGuard,
        repository: RentPaymentRepository,
        properties: PropertyRepository,
        events=None,
    ) -> None:
        super().__init__(guard, repository, events)
        self._properties = properties

    def _parse(self, data: Mapping[str, Any], *, partial: bool) -> dict[str, Any]:
        if not partial and inputs.text(data, "property_id") is None:
            raise DomainValidationError("missing_property", "propertyId is required")
        fields = parse_fields(data, _PARSERS, partial=partial)
        if not partial and isinstance(fields.get("payment_date"), date):
            paid_on: date = fields["payment_date"]
            if fields.get("period_month") is None:
                fields["period_month"] = paid_on.month
            if fields.get("period_year") is None:
                fields["period_year"] = paid_on.year
        return fields

    def _check(self, entity: RentPayment) -> Invalid | None:
        return check_property_in_estate(
            self._properties, entity.estate_id, entity.property_id
        )

    def _describe(self, entity: RentPayment) -> str:
        return f"{entity.tenant_name} {entity.amount:.2f} on {entity.payment_date.isoformat()}"

    def record(
        self, user_id: str | None, data: Mapping[str, Any]
    ) -> Outcome[RentPayment]:
        """Create from a payload that names its estate (JSON API)."""
        if not user_id:
            return Unauthenticated()
        estate_id = inputs.text(data, "estate_id")
        if estate_id is None:
            return Invalid(code="missing_estate", message="estateId is required")
        return self.create(estate_id, user_id, data)

    def search(
        self,
        user_id: str | None,
        *,
        estate_id: str | None = None,
        property_id: str | None = None,
        is_paid: bool | None = None,
        date_from: date | None = None,
        date_to: date | None = None,
        text: str | None = None,
    ) -> Outcome[list[RentPayment]]:
        if not user_id:
            return Unauthenticated()
        if estate_id:
            access = self._guard.authorize_read(estate_id, user_id)
            if not isinstance(access, EstateAccess):
                return access
            scope = {"estate_id": estate_id}
        else:
            scope = {"owner_id": user_id}
        query = RentPaymentQuery(
            **scope,
            property_id=property_id,
            is_paid=is_paid,
            date_from=date_from,
            date_to=date_to,
            text=(text or "").strip() or None,
        )
        return Ok(self._repo.search(query))

    def ledger(
        self,
        user_id: str | None,
        *,
        estate_id: str | None,
        property_id: str | None = None,
        is_paid: bool | None = None,
        date_from: date | None = None,
        date_to: date | None = None,
        text: str | None = None,
    ) -> Outcome[list[RentLedgerRow]]:
        """One estate's payments, oldest first, with property labels (CSV export)."""
        if not user_id:
            return Unauthenticated()
        if not estate_id:
            return Invalid(code="missing_estate", message="Missing estateId")
        outcome = self.search(
            user_id,
            estate_id=estate_id,
            property_id=property_id,
            is_paid=is_paid,
            date_from=date_from,
            date_to=date_to,
            text=text,
        )
        if not isinstance(outcome, Ok):
            return outcome
        labels = {p.id: p.label for p in self._properties.list_for_estate(estate_id)}
        payments = sorted(outcome.value, key=lambda p: (p.payment_date, p.created_at))
        return Ok(
            [
                RentLedgerRow(payment=p, property_label=labels.get(p.property_id or ""))
                for p in payments
            ]
        )


    def list_for_property(
        self, estate_id: str, property_id: str, user_id: str | None
    ) -> Outcome[list[RentPayment]]:
        access = self._guard.authorize_read(estate_id, user_id)
        if not isinstance(access, EstateAccess):
            return access
        return Ok(self._repo.list_for_property(estate_id, property_id))
