"""
===============================================================================
USE CASES: Utility accounts
===============================================================================

Service accounts (electric, water, internet...) the estate keeps paying,
optionally attached to one of its properties.

Rules:
  - providerName is required (max 160 chars); website must be http(s).
  - A property, when given, must belong to the same estate.
  - Listing without an estate returns the accounts of estates the caller owns,
    optionally narrowed by property, type and free text.
===============================================================================
"""

from __future__ import annotations

from typing import Any, Mapping

from ...domain.access import EstateAccess
from ...domain.entities import UtilityAccount, UtilityType
from ...domain.repositories import PropertyRepository, UtilityAccountRepository
from .. import inputs
from ..guards import EstateMutationGuard
from ..results import Invalid, Ok, Outcome, Unauthenticated
from .base import EstateScopedUseCases, parse_fields
from .properties import check_property_in_estate


def _balance(data: Mapping[str, Any]) -> float:
    value = inputs.amount(
        data,
        "balance_due",
        required=False,
        code="invalid_balance",
        message="balanceDue must be a non-negative number",
    )
    return 0 if value is None else value


_PARSERS = {
    "property_id": lambda d: inputs.text(d, "property_id"),
    "provider_name": lambda d: inputs.text(d, "provider_name"),
    "utility_type": lambda d: inputs.choice(
        d,
        "utility_type",
        UtilityType,
        code="invalid_utility_type",
        message="Invalid utility type",
        default=UtilityType.OTHER,
    ),
    "account_number": lambda d: inputs.text(d, "account_number"),
    "phone": lambda d: inputs.text(d, "phone"),
    "website": lambda d: inputs.text(d, "website"),
    "balance_due": _balance,
    "last_payment_amount": lambda d: inputs.amount(
        d, "last_payment_amount", required=False
    ),
    "last_payment_date": lambda d: inputs.date_field(d, "last_payment_date"),
    "notes": lambda d: inputs.text(d, "notes"),
}


def _matches_text(account: UtilityAccount, needle: str) -> bool:
    haystack = (account.provider_name, account.account_number or "", account.notes or "")
    return any(needle in value.casefold() for value in haystack)


class UtilityAccountUseCases(EstateScopedUseCases[UtilityAccount]):
    resource = "Utility account"
    segment = "utilities"
    entity_cls = UtilityAccount

    def __init__(
        self,
        guard: EstateMutationGuard,
        repository: UtilityAccountRepository,
        properties: PropertyRepository,
        events=None,
    ) -> None:
        super().__init__(guard, repository, events)
        self._properties = properties

    def _parse(self, data: Mapping[str, Any], *, partial: bool) -> dict[str, Any]:
        return parse_fields(data, _PARSERS, partial=partial)

    def _check(self, entity: UtilityAccount) -> Invalid | None:
        return check_property_in_estate(
            self._properties, entity.estate_id, entity.property_id
        )

    def _describe(self, entity: UtilityAccount) -> str:
        return entity.provider_name

    def record(
        self, user_id: str | None, data: Mapping[str, Any]
    ) -> Outcome[UtilityAccount]:
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
        utility_type: UtilityType | None = None,
        text: str | None = None,
    ) -> Outcome[list[UtilityAccount]]:
        if not user_id:
            return Unauthenticated()
        if estate_id:
            access = self._guard.authorize_read(estate_id, user_id)
            if not isinstance(access, EstateAccess):
                return access
            if property_id:
                accounts = self._repo.list_for_property(estate_id, property_id)
            else:
                accounts = self._repo.list_for_estate(estate_id)
        else:
            accounts = self._repo.list_for_owner(user_id, property_id=property_id)

        if utility_type is not None:
            accounts = [a for a in accounts if a.utility_type == utility_type]
        needle = (text or "").strip().casefold()
        if needle:
            accounts = [a for a in accounts if _matches_text(a, needle)]
        return Ok(accounts)
