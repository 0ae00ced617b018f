"""
===============================================================================
USE CASES: Estate collaborators
===============================================================================

Grants non-owners a role on one estate: (estate_id, user_id) -> EDITOR|VIEWER.

Rules:
  - Listing needs any role; adding, changing and removing are OWNER-only.
  - The owner is never stored as a collaborator ("Owner already has access").
  - Granting the role a user already holds is a no-op; a different role
    replaces it (COLLABORATOR_ROLE_CHANGED) and keeps the original added_at.
  - Removing an absent collaborator is NotFound.
  - Access is resolved on every request, so a removal takes effect on the
    collaborator's very next call.
===============================================================================
"""

from __future__ import annotations

from dataclasses import replace
from typing import Any, Mapping

from ...audit import emit_estate_event
from ...domain.access import EstateAccess, EstateRole
from ...domain.entities import EstateCollaborator, EstateEventType
from ...domain.repositories import (
    CollaboratorRepository,
    EventRepository,
    UserRepository,
)
from .. import inputs
from ..access_resolver import ESTATE_NOT_FOUND
from ..guards import EstateMutationGuard
from ..paths import estate_path, list_path
from ..results import Invalid, NotFound, Ok, Outcome

COLLABORATOR_NOT_FOUND = NotFound(
    resource="Collaborator", message="Collaborator not found"
)


def _collaborator_views(entry: EstateCollaborator) -> list[str]:
    return [list_path(entry.estate_id, "collaborators"), estate_path(entry.estate_id)]


class CollaboratorUseCases:
    def __init__(
        self,
        guard: EstateMutationGuard,
        collaborators: CollaboratorRepository,
        users: UserRepository,
        events: EventRepository | None = None,
    ) -> None:
        self._guard = guard
        self._collaborators = collaborators
        self._users = users
        self._events = events

    def list(
        self, estate_id: str, user_id: str | None
    ) -> Outcome[list[EstateCollaborator]]:
        access = self._guard.authorize_read(estate_id, user_id)
        if not isinstance(access, EstateAccess):
            return access
        return Ok(self._collaborators.list_collaborators(estate_id))

    def _entry(self, estate_id: str, user_id: str) -> EstateCollaborator | None:
        return next(
            (
                c
                for c in self._collaborators.list_collaborators(estate_id)
                if c.user_id == user_id
            ),
            None,
        )

    def _target_user_id(self, data: Mapping[str, Any]) -> str | Invalid:
        target_id = inputs.text(data, "user_id")
        if target_id is not None:
            user = self._users.get_user(target_id)
        else:
            email = inputs.text(data, "email")
            if email is None:
                return Invalid(code="missing_user", message="userId or email is required")
            user = self._users.get_user_by_email(email)
        if user is None:
            return Invalid(code="unknown_user", message="User not found")
        return user.id

    def add(
        self, estate_id: str, user_id: str | None, data: Mapping[str, Any]
    ) -> Outcome[EstateCollaborator]:
        def mutation(access: EstateAccess) -> Outcome[EstateCollaborator]:
            estate = self._guard.load_estate(estate_id)
            if estate is None:
                return ESTATE_NOT_FOUND

            target = self._target_user_id(data)
            if isinstance(target, Invalid):
                return target
            if target == estate.owner_id:
                return Invalid(code="owner_has_access", message="Owner already has access")

            role = inputs.choice(
                data,
                "role",
                EstateRole,
                code="invalid_role",
                message="role must be EDITOR or VIEWER",
                default=EstateRole.VIEWER,
                upper=True,
            )
            existing = self._entry(estate.id, target)
            if existing is None:
                entry = EstateCollaborator(estate_id=estate.id, user_id=target, role=role)
            elif existing.role == role:
                return Ok(existing)
            else:
                entry = replace(existing, role=role)

            saved = self._collaborators.upsert_collaborator(entry)
            if existing is None:
                event_type = EstateEventType.COLLABORATOR_ADDED
                summary = f"Collaborator added as {saved.role.value}"
            else:
                event_type = EstateEventType.COLLABORATOR_ROLE_CHANGED
                summary = f"Collaborator role changed to {saved.role.value}"
            emit_estate_event(
                self._events,
                estate=estate,
                type=event_type,
                summary=summary,
                actor_id=access.user_id,
                meta={"userId": target, "role": saved.role.value},
            )
            return Ok(saved)

        return self._guard.run(
            estate_id=estate_id,
            user_id=user_id,
            mutation=mutation,
            views=_collaborator_views,
            required_role=EstateRole.OWNER,
        )

    def remove(
        self, estate_id: str, user_id: str | None, target_user_id: str
    ) -> Outcome[EstateCollaborator]:
        def mutation(access: EstateAccess) -> Outcome[EstateCollaborator]:
            estate = self._guard.load_estate(estate_id)
            if estate is None:
                return ESTATE_NOT_FOUND
            existing = self._entry(estate.id, target_user_id)
            if existing is None:
                return COLLABORATOR_NOT_FOUND
            if not self._collaborators.remove_collaborator(estate.id, target_user_id):
                return COLLABORATOR_NOT_FOUND
            emit_estate_event(
                self._events,
                estate=estate,
                type=EstateEventType.COLLABORATOR_REMOVED,
                summary="Collaborator removed",
                actor_id=access.user_id,
                meta={"userId": target_user_id, "role": existing.role.value},
            )
            return Ok(existing)

        return self._guard.run(
            estate_id=estate_id,
            user_id=user_id,
            mutation=mutation,
            views=_collaborator_views,
            required_role=EstateRole.OWNER,
        )
