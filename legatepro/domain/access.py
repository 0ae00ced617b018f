"""
===============================================================================
CRC CARD — domain/access.py
===============================================================================

Module:
    Estate access model (roles and capabilities)

Responsibilities:
    - Define the estate role catalogue (OWNER / EDITOR / VIEWER) and its rank.
    - Define EstateAccess, the resolved (estate, user, role) triple.
    - Expose the single set of capability predicates every caller uses.

Collaborators:
    - application/access_resolver.py: builds EstateAccess.
    - application/guards.py: gates mutations with can_edit().
    - application/usecases/documents.py: filters sensitive documents.

Notes:
    - Pure: no IO, no framework imports.
    - Sensitive visibility has two named predicates. `can_view_sensitive`
      admits every non-viewer; `can_view_sensitive_owner_only` admits the
      owner alone. Which one gates document listings is a configuration
      choice (SENSITIVE_DOCUMENTS_POLICY).
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class EstateRole(str, Enum):
    OWNER = "OWNER"
    EDITOR = "EDITOR"
    VIEWER = "VIEWER"


ROLE_RANK: dict[EstateRole, int] = {
    EstateRole.OWNER: 3,
    EstateRole.EDITOR: 2,
    EstateRole.VIEWER: 1,
}

# Roles an owner may hand out to collaborators.
ASSIGNABLE_ROLES: frozenset[EstateRole] = frozenset(
    {EstateRole.EDITOR, EstateRole.VIEWER}
)


def has_role(actual: EstateRole, at_least: EstateRole) -> bool:
    """True if `actual` ranks at or above `at_least`."""
    return ROLE_RANK[actual] >= ROLE_RANK[at_least]


def can_edit(role: EstateRole) -> bool:
    return role != EstateRole.VIEWER


def can_view_sensitive(role: EstateRole) -> bool:
    return role != EstateRole.VIEWER


def can_view_sensitive_owner_only(role: EstateRole) -> bool:
    return role == EstateRole.OWNER


def can_manage_collaborators(role: EstateRole) -> bool:
    return role == EstateRole.OWNER


@dataclass(frozen=True, slots=True)
class EstateAccess:
    """Role of one user on one estate, resolved for a single request."""

    estate_id: str
    user_id: str
    role: EstateRole

    @property
    def is_owner(self) -> bool:
        return self.role == EstateRole.OWNER

    @property
    def can_edit(self) -> bool:
        return can_edit(self.role)

    @property
    def can_view_sensitive(self) -> bool:
        return can_view_sensitive(self.role)
