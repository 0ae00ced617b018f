"""
Name: Estate Access Resolver Tests

Responsibilities:
  - Owner always resolves to OWNER
  - Collaborator entries decide non-owner roles
  - Revocation takes effect on the next call (nothing memoized)
  - Unknown or malformed estates are NotFound
"""

import pytest

from legatepro.application.access_resolver import (
    EstateAccessResolver,
    resolve_access,
)
from legatepro.application.results import Forbidden, NotFound
from legatepro.container import (
    get_access_resolver,
    get_collaborator_repository,
    get_estate_repository,
)
from legatepro.domain.access import EstateAccess, EstateRole
from legatepro.domain.entities import EstateCollaborator

pytestmark = pytest.mark.unit


@pytest.fixture
def resolver(estate) -> EstateAccessResolver:
    return get_access_resolver()


def test_owner_resolves_to_owner(resolver, owner):
    access = resolver.resolve("e1", owner.id)

    assert isinstance(access, EstateAccess)
    assert access.role == EstateRole.OWNER
    assert access.estate_id == "e1"
    assert access.user_id == owner.id


def test_owner_stays_owner_with_stray_collaborator_row(resolver, owner):
    # Written straight to the store: the use cases refuse to add the owner.
    get_collaborator_repository().upsert_collaborator(
        EstateCollaborator(estate_id="e1", user_id=owner.id, role=EstateRole.VIEWER)
    )

    access = resolver.resolve("e1", owner.id)

    assert access.role == EstateRole.OWNER


@pytest.mark.parametrize(
    "fixture_name,role",
    [("editor", EstateRole.EDITOR), ("viewer", EstateRole.VIEWER)],
)
def test_collaborator_role(request, resolver, fixture_name, role):
    user = request.getfixturevalue(fixture_name)

    access = resolver.resolve("e1", user.id)

    assert isinstance(access, EstateAccess)
    assert access.role == role


def test_user_without_entry_is_forbidden(resolver, stranger):
    result = resolver.resolve("e1", stranger.id)

    assert isinstance(result, Forbidden)
    assert result.code == "estate_access"


def test_revoked_collaborator_loses_access_on_next_call(resolver, editor):
    assert isinstance(resolver.resolve("e1", editor.id), EstateAccess)

    get_collaborator_repository().remove_collaborator("e1", editor.id)

    assert isinstance(resolver.resolve("e1", editor.id), Forbidden)


def test_role_change_is_seen_on_next_call(resolver, viewer):
    get_collaborator_repository().upsert_collaborator(
        EstateCollaborator(estate_id="e1", user_id=viewer.id, role=EstateRole.EDITOR)
    )

    assert resolver.resolve("e1", viewer.id).role == EstateRole.EDITOR


@pytest.mark.parametrize("estate_id", ["missing", "", "../e1", "e" * 80])
def test_unknown_or_malformed_estate_is_not_found(resolver, owner, estate_id):
    result = resolver.resolve(estate_id, owner.id)

    assert isinstance(result, NotFound)
    assert result.resource == "Estate"


def test_malformed_user_id_is_forbidden(resolver):
    assert isinstance(resolver.resolve("e1", "not a user id"), Forbidden)


def test_functional_entry_point(owner, estate):
    access = resolve_access(
        "e1",
        owner.id,
        estate_repository=get_estate_repository(),
        collaborator_repository=get_collaborator_repository(),
    )
    assert access.role == EstateRole.OWNER
