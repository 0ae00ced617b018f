"""
Name: Sensitive Document Visibility Tests

Responsibilities:
  - non_viewer policy: OWNER and EDITOR see sensitive entries, VIEWER does not
  - owner_only policy: only the OWNER sees sensitive entries
  - Hidden entries behave as missing (read, edit, delete)
"""

import pytest

from legatepro.application.results import NotFound, Ok
from legatepro.application.usecases.documents import sensitive_predicate
from legatepro.container import get_document_use_cases
from legatepro.crosscutting.config import get_settings
from legatepro.domain.access import (
    EstateRole,
    can_view_sensitive,
    can_view_sensitive_owner_only,
)

pytestmark = pytest.mark.unit


@pytest.fixture
def documents(estate, owner):
    use_cases = get_document_use_cases()
    public = use_cases.create(
        "e1", owner.id, {"subject": "legal", "label": "Letters testamentary"}
    ).value
    secret = use_cases.create(
        "e1",
        owner.id,
        {"subject": "banking", "label": "Account numbers", "is_sensitive": True},
    ).value
    return public, secret


def _labels(outcome):
    assert isinstance(outcome, Ok)
    return sorted(doc.label for doc in outcome.value)


def test_policy_selects_named_predicate():
    assert sensitive_predicate("non_viewer") is can_view_sensitive
    assert sensitive_predicate("owner_only") is can_view_sensitive_owner_only


def test_non_viewer_policy(documents, owner, editor, viewer):
    use_cases = get_document_use_cases()

    assert _labels(use_cases.list("e1", owner.id)) == [
        "Account numbers",
        "Letters testamentary",
    ]
    assert _labels(use_cases.list("e1", editor.id)) == [
        "Account numbers",
        "Letters testamentary",
    ]
    assert _labels(use_cases.list("e1", viewer.id)) == ["Letters testamentary"]


def test_owner_only_policy(monkeypatch, documents, owner, editor):
    monkeypatch.setenv("SENSITIVE_DOCUMENTS_POLICY", "owner_only")
    get_settings.cache_clear()
    use_cases = get_document_use_cases()

    assert _labels(use_cases.list("e1", owner.id)) == [
        "Account numbers",
        "Letters testamentary",
    ]
    assert _labels(use_cases.list("e1", editor.id)) == ["Letters testamentary"]


def test_hidden_document_behaves_as_missing(monkeypatch, documents, editor):
    monkeypatch.setenv("SENSITIVE_DOCUMENTS_POLICY", "owner_only")
    get_settings.cache_clear()
    use_cases = get_document_use_cases()
    _, secret = documents

    assert isinstance(use_cases.get("e1", secret.id, editor.id), NotFound)
    assert isinstance(
        use_cases.update("e1", secret.id, editor.id, {"label": "Renamed"}), NotFound
    )
    assert isinstance(use_cases.delete("e1", secret.id, editor.id), NotFound)


def test_invalid_policy_is_rejected(monkeypatch):
    monkeypatch.setenv("SENSITIVE_DOCUMENTS_POLICY", "everyone")
    get_settings.cache_clear()

    with pytest.raises(ValueError):
        get_settings()


def test_viewer_role_predicates_agree_with_policies():
    assert not sensitive_predicate("non_viewer")(EstateRole.VIEWER)
    assert not sensitive_predicate("owner_only")(EstateRole.EDITOR)
