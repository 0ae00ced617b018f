"""
===============================================================================
CRC CARD — application/access_resolver.py
===============================================================================

Class:
    EstateAccessResolver

Responsibilities:
    - Answer "what role does this user hold on this estate?" for one call.
    - Unify both ownership representations: the estate's owner_id and the
      (estate_id, user_id) -> role collaborator entries.
    - Signal NotFound for unknown/malformed estates and Forbidden when the
      user holds no role at all.

Collaborators:
    - domain.repositories.EstateRepository
    - domain.repositories.CollaboratorRepository
    - domain.access.EstateAccess

Rules:
    - The owner is OWNER unconditionally; a stray collaborator row for the
      owner is ignored.
    - A non-owner without a collaborator entry has no access (no default role).
    - Nothing is memoized: a revoked collaborator is denied on the next call.
===============================================================================
"""

from __future__ import annotations

from typing import Union

from ..crosscutting.logger import logger
from ..domain.access import EstateAccess, EstateRole
from ..domain.entities import Estate, is_valid_id
from ..domain.repositories import CollaboratorRepository, EstateRepository
from .results import Forbidden, NotFound

AccessResult = Union[EstateAccess, NotFound, Forbidden]

ESTATE_NOT_FOUND = NotFound(resource="Estate", message="Estate not found")
NO_ESTATE_ACCESS = Forbidden(
    message="You do not have access to this estate", code="estate_access"
)


class EstateAccessResolver:
    def __init__(
        self,
        estate_repository: EstateRepository,
        collaborator_repository: CollaboratorRepository,
    ):
        self._estates = estate_repository
        self._collaborators = collaborator_repository

    def load_estate(self, estate_id: str) -> Estate | None:
        if not is_valid_id(estate_id):
            return None
        return self._estates.get_estate(estate_id)

    def resolve(self, estate_id: str, user_id: str) -> AccessResult:
        estate = self.load_estate(estate_id)
        if estate is None:
            return ESTATE_NOT_FOUND
        return self.resolve_for(estate, user_id)

    def resolve_for(self, estate: Estate, user_id: str) -> AccessResult:
        """Resolve against an already-loaded estate."""
        if not is_valid_id(user_id):
            return NO_ESTATE_ACCESS

        if estate.owner_id == user_id:
            return EstateAccess(
                estate_id=estate.id, user_id=user_id, role=EstateRole.OWNER
            )

        role = self._collaborators.get_role(estate.id, user_id)
        if role is None or role == EstateRole.OWNER:
            logger.info(
                "estate access denied",
                extra={"estate_id": estate.id, "reason": "no_collaborator_entry"},
            )
            return NO_ESTATE_ACCESS

        return EstateAccess(estate_id=estate.id, user_id=user_id, role=role)


def resolve_access(
    estate_id: str,
    user_id: str,
    *,
    estate_repository: EstateRepository,
    collaborator_repository: CollaboratorRepository,
) -> AccessResult:
    """Functional entry point over EstateAccessResolver."""
    return EstateAccessResolver(estate_repository, collaborator_repository).resolve(
        estate_id, user_id
    )
