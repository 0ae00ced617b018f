"""
Name: Rent Payment Use Case Tests

Responsibilities:
  - Create-then-fetch round trip preserves the submitted values
  - Input parsing codes (amount, dates, property) surface as Invalid
  - Search filters (paid, dates, text) and owner scoping
"""

from datetime import date

import pytest

from legatepro.application.results import Forbidden, Invalid, NotFound, Ok
from legatepro.container import (
    get_event_repository,
    get_rent_payment_use_cases,
)
from legatepro.domain.entities import EstateEventType

pytestmark = pytest.mark.unit


def _payload(**overrides):
    data = {
        "property_id": "p1",
        "tenant_name": "J. Doe",
        "payment_date": "2024-01-05",
        "amount": "1,200",
    }
    data.update(overrides)
    return data


def test_create_then_fetch_round_trip(estate_property, editor):
    use_cases = get_rent_payment_use_cases()

    created = use_cases.create("e1", editor.id, _payload(period_month="2"))
    assert isinstance(created, Ok)

    fetched = use_cases.get("e1", created.value.id, editor.id)
    assert isinstance(fetched, Ok)
    payment = fetched.value
    assert payment.tenant_name == "J. Doe"
    assert payment.amount == 1200
    assert payment.period_month == 2
    assert payment.period_year == 2024
    assert payment.is_paid is True
    assert payment.owner_id == "u-owner"


def test_period_defaults_to_payment_month(estate_property, owner):
    payment = get_rent_payment_use_cases().create("e1", owner.id, _payload()).value

    assert (payment.period_month, payment.period_year) == (1, 2024)


@pytest.mark.parametrize(
    "overrides,code,message",
    [
        ({"amount": "abc"}, "invalid_amount", "Valid amount is required"),
        ({"amount": "-5"}, "invalid_amount", "Valid amount is required"),
        ({"amount": None}, "invalid_amount", "Valid amount is required"),
        ({"tenant_name": ""}, "missing_tenant", "tenantName is required"),
        ({"payment_date": None}, "missing_date", "paymentDate is required"),
        (
            {"payment_date": "05/01/2024"},
            "invalid_date",
            "paymentDate must be a valid date",
        ),
        ({"property_id": None}, "missing_property", "propertyId is required"),
        ({"period_month": "13"}, "invalid_month", "periodMonth must be between 1 and 12"),
    ],
)
def test_invalid_input(estate_property, owner, overrides, code, message):
    outcome = get_rent_payment_use_cases().create("e1", owner.id, _payload(**overrides))

    assert outcome == Invalid(code=code, message=message)


def test_property_of_another_estate_is_rejected(estate_property, owner):
    outcome = get_rent_payment_use_cases().create(
        "e1", owner.id, _payload(property_id="p-elsewhere")
    )
    assert isinstance(outcome, Invalid)
    assert outcome.code == "invalid_property"


def test_viewer_cannot_record_payment(estate_property, viewer):
    use_cases = get_rent_payment_use_cases()

    outcome = use_cases.create("e1", viewer.id, _payload())

    assert isinstance(outcome, Forbidden)
    assert use_cases.list("e1", viewer.id).value == []


def test_record_requires_estate_id(estate_property, owner):
    outcome = get_rent_payment_use_cases().record(owner.id, _payload())
    assert outcome == Invalid(code="missing_estate", message="estateId is required")


def test_create_emits_event_and_invalidates_views(estate_property, owner, revalidated):
    payment = get_rent_payment_use_cases().create("e1", owner.id, _payload()).value

    events = get_event_repository().list_events("e1")
    assert [e.type for e in events] == [EstateEventType.RENT_PAYMENT_RECORDED]
    assert events[0].actor_id == owner.id

    assert f"/app/estates/e1/rent/{payment.id}" in revalidated
    assert "/app/estates/e1/rent" in revalidated
    assert "/app/estates/e1/properties/p1" in revalidated


def test_partial_update_keeps_other_fields(estate_property, owner):
    use_cases = get_rent_payment_use_cases()
    payment = use_cases.create("e1", owner.id, _payload()).value

    updated = use_cases.update("e1", payment.id, owner.id, {"is_paid": False})

    assert isinstance(updated, Ok)
    assert updated.value.is_paid is False
    assert updated.value.amount == 1200
    assert updated.value.tenant_name == "J. Doe"


def test_record_of_another_estate_is_not_found(estate_property, owner):
    use_cases = get_rent_payment_use_cases()
    payment = use_cases.create("e1", owner.id, _payload()).value

    assert isinstance(use_cases.get("e2", payment.id, owner.id), NotFound)
    assert isinstance(use_cases.get("e1", "missing", owner.id), NotFound)


def test_delete_by_id(estate_property, editor):
    use_cases = get_rent_payment_use_cases()
    payment = use_cases.create("e1", editor.id, _payload()).value

    assert isinstance(use_cases.delete_by_id(payment.id, editor.id), Ok)
    outcome = use_cases.get_by_id(payment.id, editor.id)
    assert outcome == NotFound(resource="Rent payment", message="Rent payment not found")


def test_stranger_cannot_locate_payment_by_id(estate_property, owner, stranger):
    use_cases = get_rent_payment_use_cases()
    payment = use_cases.create("e1", owner.id, _payload()).value

    assert isinstance(use_cases.get_by_id(payment.id, stranger.id), NotFound)


def test_search_filters(estate_property, owner):
    use_cases = get_rent_payment_use_cases()
    use_cases.create("e1", owner.id, _payload(payment_date="2024-01-05"))
    use_cases.create(
        "e1",
        owner.id,
        _payload(
            tenant_name="Rita Roe",
            payment_date="2024-02-05",
            is_paid=False,
            notes="late again",
        ),
    )
    use_cases.create("e1", owner.id, _payload(payment_date="2024-03-05"))

    unpaid = use_cases.search(owner.id, estate_id="e1", is_paid=False).value
    assert [p.tenant_name for p in unpaid] == ["Rita Roe"]

    ranged = use_cases.search(
        owner.id,
        estate_id="e1",
        date_from=date(2024, 2, 1),
        date_to=date(2024, 3, 31),
    ).value
    assert [p.payment_date for p in ranged] == [date(2024, 3, 5), date(2024, 2, 5)]

    by_text = use_cases.search(owner.id, estate_id="e1", text="LATE").value
    assert [p.tenant_name for p in by_text] == ["Rita Roe"]

    owned = use_cases.search(owner.id).value
    assert len(owned) == 3


def test_search_without_access_is_forbidden(estate_property, stranger):
    outcome = get_rent_payment_use_cases().search(stranger.id, estate_id="e1")
    assert isinstance(outcome, Forbidden)
