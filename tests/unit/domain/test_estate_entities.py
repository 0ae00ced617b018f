"""
Name: Estate Entity Tests

Responsibilities:
  - Validate constructor checks of estate-scoped records
  - Validate role predicates and their ranking
"""

from datetime import date, datetime, timezone

import pytest

from legatepro.domain.access import (
    EstateAccess,
    EstateRole,
    can_edit,
    can_view_sensitive,
    can_view_sensitive_owner_only,
    has_role,
)
from legatepro.domain.entities import (
    EstateCollaborator,
    EstateDocument,
    EstateEventType,
    EstateTask,
    Property,
    RentPayment,
    TaskStatus,
    UtilityAccount,
    normalize_event_type,
)
from legatepro.domain.errors import DomainValidationError

pytestmark = pytest.mark.unit

SCOPE = {"estate_id": "e1", "owner_id": "u-owner"}


# ---------------------------------------------------------------------------
# Roles
# ---------------------------------------------------------------------------


def test_role_ranking():
    assert has_role(EstateRole.OWNER, EstateRole.EDITOR)
    assert has_role(EstateRole.EDITOR, EstateRole.EDITOR)
    assert not has_role(EstateRole.VIEWER, EstateRole.EDITOR)
    assert not has_role(EstateRole.EDITOR, EstateRole.OWNER)


@pytest.mark.parametrize(
    "role,edit,sensitive,sensitive_owner_only",
    [
        (EstateRole.OWNER, True, True, True),
        (EstateRole.EDITOR, True, True, False),
        (EstateRole.VIEWER, False, False, False),
    ],
)
def test_capability_predicates(role, edit, sensitive, sensitive_owner_only):
    assert can_edit(role) is edit
    assert can_view_sensitive(role) is sensitive
    assert can_view_sensitive_owner_only(role) is sensitive_owner_only


def test_estate_access_properties():
    access = EstateAccess(estate_id="e1", user_id="u-owner", role=EstateRole.OWNER)
    assert access.is_owner
    assert access.can_edit
    assert access.can_view_sensitive


def test_collaborator_cannot_be_granted_owner():
    with pytest.raises(DomainValidationError) as exc:
        EstateCollaborator(estate_id="e1", user_id="u-2", role=EstateRole.OWNER)
    assert exc.value.code == "invalid_role"


# ---------------------------------------------------------------------------
# Rent payments
# ---------------------------------------------------------------------------


def test_rent_payment_requires_positive_amount():
    with pytest.raises(DomainValidationError) as exc:
        RentPayment(
            **SCOPE, tenant_name="Jane", payment_date=date(2024, 1, 5), amount=0
        )
    assert exc.value.code == "invalid_amount"
    assert exc.value.message == "Valid amount is required"


def test_rent_payment_requires_tenant():
    with pytest.raises(DomainValidationError) as exc:
        RentPayment(**SCOPE, tenant_name="  ", payment_date=date(2024, 1, 5), amount=10)
    assert exc.value.code == "missing_tenant"


def test_rent_payment_rejects_bad_month():
    with pytest.raises(DomainValidationError) as exc:
        RentPayment(
            **SCOPE,
            tenant_name="Jane",
            payment_date=date(2024, 1, 5),
            amount=10,
            period_month=13,
        )
    assert exc.value.code == "invalid_month"


def test_rent_payment_defaults_to_paid_and_truncates_datetime():
    payment = RentPayment(
        **SCOPE,
        tenant_name=" Jane ",
        payment_date=datetime(2024, 1, 5, 10, 30, tzinfo=timezone.utc),
        amount=1200,
    )
    assert payment.is_paid is True
    assert payment.tenant_name == "Jane"
    assert payment.payment_date == date(2024, 1, 5)


# ---------------------------------------------------------------------------
# Other records
# ---------------------------------------------------------------------------


def test_property_display_address():
    prop = Property(
        **SCOPE,
        label="Elm",
        address_line1="12 Elm St",
        city="Springfield",
        state="IL",
        postal_code="62701",
    )
    assert prop.display_address == "12 Elm St, Springfield, IL 62701"


def test_property_rejects_negative_measurements():
    with pytest.raises(DomainValidationError) as exc:
        Property(**SCOPE, label="Elm", bedrooms=-1)
    assert exc.value.code == "invalid_bedrooms"


def test_utility_website_must_be_http():
    with pytest.raises(DomainValidationError) as exc:
        UtilityAccount(**SCOPE, provider_name="City Water", website="ftp://water")
    assert exc.value.code == "invalid_website"


def test_document_subject_upper_and_tags_deduplicated():
    doc = EstateDocument(
        **SCOPE, subject="legal", label="Will", tags=["Court", "court", " ", "Probate"]
    )
    assert doc.subject == "LEGAL"
    assert doc.tags == ["court", "probate"]


def test_task_done_stamps_completed_at():
    task = EstateTask(**SCOPE, title="File inventory", status=TaskStatus.DONE)
    assert task.completed_at is not None

    reopened = EstateTask(
        **SCOPE,
        title="File inventory",
        status=TaskStatus.IN_PROGRESS,
        completed_at=task.completed_at,
    )
    assert reopened.completed_at is None


def test_task_overdue():
    task = EstateTask(**SCOPE, title="Notify creditors", due_date=date(2024, 1, 1))
    assert task.is_overdue(date(2024, 1, 2))
    assert not task.is_overdue(date(2024, 1, 1))


def test_record_requires_estate_id():
    with pytest.raises(DomainValidationError) as exc:
        EstateTask(estate_id="", owner_id="u-owner", title="x")
    assert exc.value.code == "missing_estate"


def test_event_type_aliases():
    assert normalize_event_type("document_added") == EstateEventType.DOCUMENT_CREATED
    assert normalize_event_type("TASK_CREATED") == EstateEventType.TASK_CREATED
    assert normalize_event_type("bogus") is None
