"""
===============================================================================
CRC CARD — application/guards.py
===============================================================================

Class:
    EstateMutationGuard

Responsibilities:
    - Run before every state-changing estate operation, in this order:
        1) no current user          -> Unauthenticated
        2) resolve access            -> NotFound (no estate) / Forbidden
        3) role below the required   -> Forbidden (viewers are read-only)
        4) perform the mutation      -> Ok / Invalid
        5) on Ok, invalidate cached views embedding the mutated resource
    - Also gate reads (steps 1-2) so list/detail handlers share one path.
    - Turn DomainValidationError raised by constructors into Invalid(code).

Collaborators:
    - application.access_resolver.EstateAccessResolver
    - domain.services.PageCache
    - crosscutting.metrics (denied mutations, invalidations)

Notes:
    - The store write and the invalidation are two independent steps; a
      cache outage is logged and never undoes or fails a stored mutation.
    - Access is resolved on every call; nothing from a previous page render is
      trusted.
===============================================================================
"""

from __future__ import annotations

from typing import Callable, Iterable, TypeVar, Union

from ..crosscutting.exceptions import CacheError
from ..crosscutting.logger import logger
from ..crosscutting.metrics import record_mutation_denied, record_page_invalidation
from ..domain.access import EstateAccess, EstateRole, has_role
from ..domain.entities import Estate
from ..domain.errors import DomainValidationError
from ..domain.services import PageCache
from .access_resolver import EstateAccessResolver
from .results import Forbidden, Invalid, NotFound, Ok, Outcome, Unauthenticated

T = TypeVar("T")

GateResult = Union[EstateAccess, Forbidden, NotFound, Unauthenticated]

READ_ONLY = Forbidden(message="You have read-only access to this estate")


class EstateMutationGuard:
    def __init__(self, resolver: EstateAccessResolver, page_cache: PageCache):
        self._resolver = resolver
        self._cache = page_cache

    @property
    def resolver(self) -> EstateAccessResolver:
        return self._resolver

    # -------------------------------------------------------------------------
    # Gates
    # -------------------------------------------------------------------------
    def authorize_read(self, estate_id: str, user_id: str | None) -> GateResult:
        if not user_id:
            return Unauthenticated()
        return self._resolver.resolve(estate_id, user_id)

    def authorize_edit(
        self,
        estate_id: str,
        user_id: str | None,
        *,
        required_role: EstateRole = EstateRole.EDITOR,
    ) -> GateResult:
        access = self.authorize_read(estate_id, user_id)
        if not isinstance(access, EstateAccess):
            record_mutation_denied(type(access).__name__.lower())
            return access
        if not has_role(access.role, required_role):
            record_mutation_denied("insufficient_role")
            logger.info(
                "estate mutation rejected",
                extra={
                    "estate_id": estate_id,
                    "role": access.role.value,
                    "required_role": required_role.value,
                },
            )
            if required_role == EstateRole.OWNER:
                return Forbidden(message="Only the estate owner can do this")
            return READ_ONLY
        return access

    def load_estate(self, estate_id: str) -> Estate | None:
        return self._resolver.load_estate(estate_id)

    # -------------------------------------------------------------------------
    # Guarded mutation
    # -------------------------------------------------------------------------
    def run(
        self,
        *,
        estate_id: str,
        user_id: str | None,
        mutation: Callable[[EstateAccess], Outcome[T]],
        views: Callable[[T], Iterable[str]],
        required_role: EstateRole = EstateRole.EDITOR,
    ) -> Outcome[T]:
        access = self.authorize_edit(estate_id, user_id, required_role=required_role)
        if not isinstance(access, EstateAccess):
            return access

        try:
            outcome = mutation(access)
        except DomainValidationError as exc:
            return Invalid(code=exc.code, message=exc.message)

        if isinstance(outcome, Ok):
            self.invalidate(views(outcome.value))
        return outcome

    def invalidate(self, paths: Iterable[str]) -> None:
        unique = list(dict.fromkeys(paths))
        if not unique:
            return
        try:
            self._cache.revalidate(unique)
        except CacheError as exc:
            logger.warning(
                "page cache invalidation failed",
                extra={"paths": unique, "error": exc.message},
            )
            return
        record_page_invalidation(len(unique))
