"""
===============================================================================
USE CASES: Estates
===============================================================================

Rules:
  - Any signed-in user may open an estate and becomes its OWNER.
  - Listing returns owned estates plus estates shared with the caller, each
    with the caller's role.
  - Reading needs any role; editing needs EDITOR; deleting is OWNER-only and
    removes every record of the estate.
  - A status change (OPEN <-> CLOSED) is reported as ESTATE_STATUS_CHANGED.
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Mapping, Sequence

from ...audit import emit_estate_event
from ...domain.access import EstateAccess, EstateRole
from ...domain.entities import Estate, EstateEventType, EstateStatus
from ...domain.errors import DomainValidationError
from ...domain.repositories import (
    CollaboratorRepository,
    EstateRepository,
    EstateScopedRepository,
    EventRepository,
)
from .. import inputs
from ..access_resolver import ESTATE_NOT_FOUND
from ..guards import EstateMutationGuard
from ..paths import ESTATES_INDEX, estate_path
from ..results import Invalid, Ok, Outcome, Unauthenticated
from .base import parse_fields

_PARSERS = {
    "label": lambda d: inputs.text(d, "label"),
    "decedent_name": lambda d: inputs.text(d, "decedent_name"),
    "court_county": lambda d: inputs.text(d, "court_county"),
    "court_state": lambda d: inputs.text(d, "court_state"),
    "court_case_number": lambda d: inputs.text(d, "court_case_number"),
    "status": lambda d: inputs.choice(
        d,
        "status",
        EstateStatus,
        code="invalid_status",
        message="status must be OPEN or CLOSED",
        default=EstateStatus.OPEN,
        upper=True,
    ),
    "notes": lambda d: inputs.text(d, "notes"),
}


@dataclass(frozen=True, slots=True)
class EstateView:
    """An estate as seen by one user."""

    estate: Estate
    role: EstateRole


def _estate_views(estate: Estate) -> list[str]:
    return [estate_path(estate.id), ESTATES_INDEX]


class EstateUseCases:
    def __init__(
        self,
        guard: EstateMutationGuard,
        estates: EstateRepository,
        collaborators: CollaboratorRepository,
        events: EventRepository | None = None,
        scoped_repositories: Sequence[EstateScopedRepository] = (),
    ) -> None:
        self._guard = guard
        self._estates = estates
        self._collaborators = collaborators
        self._events = events
        self._scoped = tuple(scoped_repositories)

    def list(self, user_id: str | None) -> Outcome[list[EstateView]]:
        if not user_id:
            return Unauthenticated()
        views = [
            EstateView(estate=e, role=EstateRole.OWNER)
            for e in self._estates.list_owned_estates(user_id)
        ]
        owned = {v.estate.id for v in views}
        memberships = {
            m.estate_id: m.role
            for m in self._collaborators.list_memberships(user_id)
            if m.estate_id not in owned
        }
        for estate in self._estates.list_estates(list(memberships)):
            if estate.owner_id == user_id:
                role = EstateRole.OWNER
            else:
                role = memberships[estate.id]
            views.append(EstateView(estate=estate, role=role))
        views.sort(key=lambda v: v.estate.created_at, reverse=True)
        return Ok(views)

    def get(self, estate_id: str, user_id: str | None) -> Outcome[EstateView]:
        access = self._guard.authorize_read(estate_id, user_id)
        if not isinstance(access, EstateAccess):
            return access
        estate = self._estates.get_estate(estate_id)
        if estate is None:
            return ESTATE_NOT_FOUND
        return Ok(EstateView(estate=estate, role=access.role))

    def create(self, user_id: str | None, data: Mapping[str, Any]) -> Outcome[Estate]:
        if not user_id:
            return Unauthenticated()
        try:
            estate = Estate(
                owner_id=user_id, **parse_fields(data, _PARSERS, partial=False)
            )
        except DomainValidationError as exc:
            return Invalid(code=exc.code, message=exc.message)
        saved = self._estates.create_estate(estate)
        emit_estate_event(
            self._events,
            estate=saved,
            type=EstateEventType.ESTATE_CREATED,
            summary=f"Estate created: {saved.label}",
            actor_id=user_id,
        )
        self._guard.invalidate([ESTATES_INDEX])
        return Ok(saved)

    def update(
        self, estate_id: str, user_id: str | None, data: Mapping[str, Any]
    ) -> Outcome[Estate]:
        def mutation(access: EstateAccess) -> Outcome[Estate]:
            existing = self._estates.get_estate(estate_id)
            if existing is None:
                return ESTATE_NOT_FOUND
            updated = replace(existing, **parse_fields(data, _PARSERS, partial=True))
            saved = self._estates.save_estate(updated)
            if saved is None:
                return ESTATE_NOT_FOUND
            if existing.status != saved.status:
                emit_estate_event(
                    self._events,
                    estate=saved,
                    type=EstateEventType.ESTATE_STATUS_CHANGED,
                    summary=f"Estate status changed to {saved.status.value}",
                    actor_id=access.user_id,
                    meta={"from": existing.status.value, "to": saved.status.value},
                )
            else:
                emit_estate_event(
                    self._events,
                    estate=saved,
                    type=EstateEventType.ESTATE_UPDATED,
                    summary=f"Estate updated: {saved.label}",
                    actor_id=access.user_id,
                )
            return Ok(saved)

        return self._guard.run(
            estate_id=estate_id, user_id=user_id, mutation=mutation, views=_estate_views
        )

    def delete(self, estate_id: str, user_id: str | None) -> Outcome[Estate]:
        def mutation(access: EstateAccess) -> Outcome[Estate]:
            existing = self._estates.get_estate(estate_id)
            if existing is None:
                return ESTATE_NOT_FOUND
            for repository in self._scoped:
                repository.delete_for_estate(estate_id)
            self._collaborators.remove_all(estate_id)
            if self._events is not None:
                self._events.delete_for_estate(estate_id)
            self._estates.delete_estate(estate_id)
            return Ok(existing)

        return self._guard.run(
            estate_id=estate_id,
            user_id=user_id,
            mutation=mutation,
            views=_estate_views,
            required_role=EstateRole.OWNER,
        )

