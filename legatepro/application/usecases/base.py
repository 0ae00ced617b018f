"""
===============================================================================
USE CASES: Estate-scoped resource CRUD (shared base)
===============================================================================

Every estate-scoped resource (properties, rent payments, utility accounts,
documents, tasks, invoices, notes) is listed, read, created, updated and
deleted the same way:

  - reads go through guard.authorize_read (any role),
  - writes go through guard.run (EDITOR or above), which also invalidates the
    views embedding the record once the write succeeded,
  - records are only ever looked up inside the estate named by the caller;
    a record of another estate is NotFound.

Subclasses declare how raw input maps onto entity fields (`_parse`) and any
cross-record rule (`_check`, e.g. "the property belongs to this estate").

Partial updates:
  - `_parse(data, partial=True)` returns only the fields present in `data`.
  - The record is rebuilt with dataclasses.replace, so the constructor's
    validation runs again on the merged values.
===============================================================================
"""

from __future__ import annotations

from dataclasses import replace
from typing import Any, Callable, Generic, Iterable, Mapping, TypeVar

from ...audit import emit_estate_event
from ...domain.access import EstateAccess
from ...domain.entities import Estate, EstateEventType
from ...domain.repositories import EstateScopedRepository, EventRepository
from ..access_resolver import ESTATE_NOT_FOUND
from ..guards import EstateMutationGuard
from ..paths import views_for
from ..results import Failure, Invalid, NotFound, Ok, Outcome, Unauthenticated

T = TypeVar("T")

FieldParser = Callable[[Mapping[str, Any]], Any]


def parse_fields(
    data: Mapping[str, Any], parsers: Mapping[str, FieldParser], *, partial: bool
) -> dict[str, Any]:
    """Run each field parser; in partial mode only for keys present in `data`."""
    return {
        name: parse(data)
        for name, parse in parsers.items()
        if not partial or name in data
    }


class EstateScopedUseCases(Generic[T]):
    resource: str = "Record"
    segment: str = ""
    entity_cls: type

    created_event: EstateEventType | None = None
    updated_event: EstateEventType | None = None
    deleted_event: EstateEventType | None = None

    def __init__(
        self,
        guard: EstateMutationGuard,
        repository: EstateScopedRepository[T],
        events: EventRepository | None = None,
    ) -> None:
        self._guard = guard
        self._repo = repository
        self._events = events

    @property
    def not_found(self) -> NotFound:
        return NotFound(resource=self.resource, message=f"{self.resource} not found")

    # -------------------------------------------------------------------------
    # Hooks
    # -------------------------------------------------------------------------
    def _parse(self, data: Mapping[str, Any], *, partial: bool) -> dict[str, Any]:
        raise NotImplementedError

    def _check(self, entity: T) -> Invalid | None:
        return None

    def _visible(self, access: EstateAccess, items: list[T]) -> list[T]:
        return items

    def _describe(self, entity: T) -> str:
        return getattr(entity, "label", None) or entity.id

    def _event_for_update(self, before: T, after: T) -> EstateEventType | None:
        return self.updated_event

    def _views(self, entity: T) -> list[str]:
        return views_for(
            entity.estate_id,
            self.segment,
            entity.id,
            property_id=getattr(entity, "property_id", None),
        )

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------
    def _find(self, estate_id: str, record_id: str) -> T | None:
        entity = self._repo.get(record_id)
        if entity is None or entity.estate_id != estate_id:
            return None
        return entity

    def _emit(
        self,
        estate: Estate,
        event_type: EstateEventType | None,
        verb: str,
        access: EstateAccess,
        entity: T,
        meta: dict[str, Any] | None = None,
    ) -> None:
        if event_type is None:
            return
        emit_estate_event(
            self._events,
            estate=estate,
            type=event_type,
            summary=f"{self.resource} {verb}: {self._describe(entity)}",
            actor_id=access.user_id,
            meta={"id": entity.id, **(meta or {})},
        )

    def _locate(self, record_id: str, user_id: str | None) -> T | Failure:
        """Find a record by id alone, hidden unless the caller can read its estate."""
        if not user_id:
            return Unauthenticated()
        entity = self._repo.get(record_id)
        if entity is None:
            return self.not_found
        access = self._guard.authorize_read(entity.estate_id, user_id)
        if not isinstance(access, EstateAccess):
            return self.not_found
        if not self._visible(access, [entity]):
            return self.not_found
        return entity

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------
    def list(self, estate_id: str, user_id: str | None) -> Outcome[list[T]]:
        access = self._guard.authorize_read(estate_id, user_id)
        if not isinstance(access, EstateAccess):
            return access
        return Ok(self._visible(access, self._repo.list_for_estate(estate_id)))

    def get(self, estate_id: str, record_id: str, user_id: str | None) -> Outcome[T]:
        access = self._guard.authorize_read(estate_id, user_id)
        if not isinstance(access, EstateAccess):
            return access
        entity = self._find(estate_id, record_id)
        if entity is None or not self._visible(access, [entity]):
            return self.not_found
        return Ok(entity)

    def get_by_id(self, record_id: str, user_id: str | None) -> Outcome[T]:
        located = self._locate(record_id, user_id)
        if isinstance(located, (Unauthenticated, NotFound)):
            return located
        return Ok(located)

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------
    def create(
        self, estate_id: str, user_id: str | None, data: Mapping[str, Any]
    ) -> Outcome[T]:
        def mutation(access: EstateAccess) -> Outcome[T]:
            estate = self._guard.load_estate(estate_id)
            if estate is None:
                return ESTATE_NOT_FOUND
            entity = self.entity_cls(
                estate_id=estate.id,
                owner_id=estate.owner_id,
                **self._parse(data, partial=False),
            )
            invalid = self._check(entity)
            if invalid is not None:
                return invalid
            saved = self._repo.add(entity)
            self._emit(estate, self.created_event, "created", access, saved)
            return Ok(saved)

        return self._guard.run(
            estate_id=estate_id, user_id=user_id, mutation=mutation, views=self._views
        )

    def update(
        self,
        estate_id: str,
        record_id: str,
        user_id: str | None,
        data: Mapping[str, Any],
    ) -> Outcome[T]:
        previous: list[T] = []

        def mutation(access: EstateAccess) -> Outcome[T]:
            existing = self._find(estate_id, record_id)
            if existing is None or not self._visible(access, [existing]):
                return self.not_found
            updated = replace(existing, **self._parse(data, partial=True))
            invalid = self._check(updated)
            if invalid is not None:
                return invalid
            saved = self._repo.save(updated)
            if saved is None:
                return self.not_found
            previous.append(existing)
            estate = self._guard.load_estate(estate_id)
            if estate is not None:
                self._emit(
                    estate,
                    self._event_for_update(existing, saved),
                    "updated",
                    access,
                    saved,
                )
            return Ok(saved)

        def views(saved: T) -> Iterable[str]:
            # A record moved to another property leaves the old rollup stale too.
            old = [path for entity in previous for path in self._views(entity)]
            return [*self._views(saved), *old]

        return self._guard.run(
            estate_id=estate_id, user_id=user_id, mutation=mutation, views=views
        )

    def delete(
        self, estate_id: str, record_id: str, user_id: str | None
    ) -> Outcome[T]:
        def mutation(access: EstateAccess) -> Outcome[T]:
            existing = self._find(estate_id, record_id)
            if existing is None or not self._visible(access, [existing]):
                return self.not_found
            if not self._repo.delete(existing.id):
                return Invalid(
                    code="delete_failed",
                    message=f"Unable to delete {self.resource.lower()}",
                )
            estate = self._guard.load_estate(estate_id)
            if estate is not None:
                self._emit(estate, self.deleted_event, "deleted", access, existing)
            return Ok(existing)

        return self._guard.run(
            estate_id=estate_id, user_id=user_id, mutation=mutation, views=self._views
        )

    def update_by_id(
        self, record_id: str, user_id: str | None, data: Mapping[str, Any]
    ) -> Outcome[T]:
        located = self._locate(record_id, user_id)
        if isinstance(located, (Unauthenticated, NotFound)):
            return located
        return self.update(located.estate_id, located.id, user_id, data)

    def delete_by_id(self, record_id: str, user_id: str | None) -> Outcome[T]:
        located = self._locate(record_id, user_id)
        if isinstance(located, (Unauthenticated, NotFound)):
            return located
        return self.delete(located.estate_id, located.id, user_id)
