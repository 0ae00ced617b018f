"""
Name: Estate + Collaborator Use Case Tests

Responsibilities:
  - Estate listing (owned + shared with role), create, update, delete cascade
  - Collaborator grant/change/revoke rules (OWNER-only, owner never stored)
"""

import pytest

from legatepro.application.results import (
    Forbidden,
    Invalid,
    NotFound,
    Ok,
    Unauthenticated,
)
from legatepro.container import (
    get_access_resolver,
    get_collaborator_use_cases,
    get_estate_use_cases,
    get_event_repository,
    get_task_use_cases,
)
from legatepro.domain.access import EstateAccess, EstateRole
from legatepro.domain.entities import EstateEventType, EstateStatus

pytestmark = pytest.mark.unit


# ---------------------------------------------------------------------------
# Estates
# ---------------------------------------------------------------------------


def test_create_makes_caller_owner(owner, editor):
    outcome = get_estate_use_cases().create(editor.id, {"label": "  Estate of B  "})

    assert isinstance(outcome, Ok)
    assert outcome.value.label == "Estate of B"
    access = get_access_resolver().resolve(outcome.value.id, editor.id)
    assert access.role == EstateRole.OWNER


def test_create_requires_label_and_session(owner):
    use_cases = get_estate_use_cases()

    assert isinstance(use_cases.create(None, {"label": "x"}), Unauthenticated)
    assert use_cases.create(owner.id, {}) == Invalid(
        code="missing_label", message="label is required"
    )


def test_list_includes_shared_estates_with_role(estate, owner, viewer):
    own = get_estate_use_cases().create(viewer.id, {"label": "Viewer's own"}).value

    views = get_estate_use_cases().list(viewer.id).value

    roles = {v.estate.id: v.role for v in views}
    assert roles == {"e1": EstateRole.VIEWER, own.id: EstateRole.OWNER}


def test_status_change_is_reported(estate, editor):
    outcome = get_estate_use_cases().update("e1", editor.id, {"status": "closed"})

    assert outcome.value.status == EstateStatus.CLOSED
    types = [e.type for e in get_event_repository().list_events("e1")]
    assert types == [EstateEventType.ESTATE_STATUS_CHANGED]


def test_viewer_cannot_update_estate(estate, viewer):
    outcome = get_estate_use_cases().update("e1", viewer.id, {"label": "Mine now"})

    assert isinstance(outcome, Forbidden)
    assert get_estate_use_cases().get("e1", viewer.id).value.estate.label == (
        "Estate of Ada Smith"
    )


def test_delete_is_owner_only_and_cascades(estate, owner, editor):
    tasks = get_task_use_cases()
    tasks.create("e1", owner.id, {"title": "Inventory"})
    use_cases = get_estate_use_cases()

    assert isinstance(use_cases.delete("e1", editor.id), Forbidden)
    assert isinstance(use_cases.delete("e1", owner.id), Ok)

    assert isinstance(use_cases.get("e1", owner.id), NotFound)
    assert get_event_repository().list_events("e1") == []
    assert isinstance(get_access_resolver().resolve("e1", editor.id), NotFound)


# ---------------------------------------------------------------------------
# Collaborators
# ---------------------------------------------------------------------------


def test_owner_grants_role_by_email(estate, owner, stranger):
    outcome = get_collaborator_use_cases().add(
        "e1", owner.id, {"email": "STRANGER@example.com", "role": "editor"}
    )

    assert isinstance(outcome, Ok)
    assert outcome.value.role == EstateRole.EDITOR
    access = get_access_resolver().resolve("e1", stranger.id)
    assert isinstance(access, EstateAccess)
    assert access.role == EstateRole.EDITOR


def test_role_change_and_noop_regrant(estate, owner, viewer):
    use_cases = get_collaborator_use_cases()

    same = use_cases.add("e1", owner.id, {"user_id": viewer.id, "role": "VIEWER"})
    changed = use_cases.add("e1", owner.id, {"user_id": viewer.id, "role": "EDITOR"})

    assert same.value.role == EstateRole.VIEWER
    assert changed.value.role == EstateRole.EDITOR
    types = [e.type for e in get_event_repository().list_events("e1")]
    assert types == [EstateEventType.COLLABORATOR_ROLE_CHANGED]


def test_role_change_keeps_grant_date_and_order(estate, owner, viewer):
    use_cases = get_collaborator_use_cases()
    before = use_cases.list("e1", owner.id).value

    changed = use_cases.add("e1", owner.id, {"user_id": viewer.id, "role": "EDITOR"})
    after = use_cases.list("e1", owner.id).value

    granted = {c.user_id: c.added_at for c in before}
    assert changed.value.added_at == granted[viewer.id]
    assert [c.user_id for c in after] == [c.user_id for c in before]


def test_owner_is_never_stored_as_collaborator(estate, owner):
    outcome = get_collaborator_use_cases().add("e1", owner.id, {"user_id": owner.id})
    assert outcome == Invalid(code="owner_has_access", message="Owner already has access")


@pytest.mark.parametrize(
    "data,code",
    [
        ({"user_id": "u-stranger", "role": "OWNER"}, "invalid_role"),
        ({"user_id": "u-stranger", "role": "ADMIN"}, "invalid_role"),
        ({"email": "nobody@example.com"}, "unknown_user"),
        ({}, "missing_user"),
    ],
)
def test_invalid_grants(estate, owner, stranger, data, code):
    outcome = get_collaborator_use_cases().add("e1", owner.id, data)

    assert isinstance(outcome, Invalid)
    assert outcome.code == code


def test_only_owner_manages_collaborators(estate, editor, stranger):
    outcome = get_collaborator_use_cases().add(
        "e1", editor.id, {"user_id": stranger.id, "role": "VIEWER"}
    )
    assert isinstance(outcome, Forbidden)


def test_revoke_takes_effect_immediately(estate, owner, editor):
    use_cases = get_collaborator_use_cases()

    assert isinstance(use_cases.remove("e1", owner.id, editor.id), Ok)
    assert isinstance(get_access_resolver().resolve("e1", editor.id), Forbidden)
    assert isinstance(use_cases.remove("e1", owner.id, editor.id), NotFound)


def test_any_role_lists_collaborators(estate, viewer):
    entries = get_collaborator_use_cases().list("e1", viewer.id).value
    assert {(c.user_id, c.role) for c in entries} == {
        ("u-editor", EstateRole.EDITOR),
        ("u-viewer", EstateRole.VIEWER),
    }
