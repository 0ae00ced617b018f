"""
Name: Repository Interfaces (Ports)

Responsibilities:
  - Define the storage contracts the application layer depends on
  - RecordStore: the generic document-store interface (find, find_one,
    create, update, delete) that every adapter implements
  - Typed repositories: estate-scoped queries expressed in domain types

Collaborators:
  - domain.entities / domain.invoices: entities crossing these ports
  - infrastructure.repositories: in-memory and Postgres implementations

Constraints:
  - Protocols only, no implementation details
  - Every estate-scoped query takes the estate id explicitly

Notes:
  - Typed repositories never check access; the access resolver and mutation
    guard run before any of these calls
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Generic, Mapping, Protocol, Sequence, TypeVar

from .access import EstateRole
from .entities import (
    Estate,
    EstateCollaborator,
    EstateDocument,
    EstateEvent,
    EstateEventType,
    EstateInvite,
    EstateNote,
    EstateTask,
    Property,
    RentPayment,
    UtilityAccount,
)
from .invoices import Invoice
from ..identity.users import User

T = TypeVar("T")


class RecordStore(Protocol):
    """
    Generic collection-oriented store.

    Records are JSON-compatible dicts with a string "id". `where` is an
    equality filter on top-level keys.
    """

    def find(
        self, collection: str, where: Mapping[str, Any] | None = None
    ) -> list[dict[str, Any]]: ...

    def find_one(
        self, collection: str, where: Mapping[str, Any]
    ) -> dict[str, Any] | None: ...

    def create(self, collection: str, record: dict[str, Any]) -> dict[str, Any]: ...

    def update(
        self, collection: str, record_id: str, record: dict[str, Any]
    ) -> dict[str, Any] | None: ...

    def delete(self, collection: str, where: Mapping[str, Any]) -> int: ...

    def ping(self) -> bool: ...


class EstateScopedRepository(Protocol, Generic[T]):
    def get(self, record_id: str) -> T | None: ...

    def list_for_estate(self, estate_id: str) -> list[T]: ...

    def add(self, entity: T) -> T: ...

    def save(self, entity: T) -> T: ...

    def delete(self, record_id: str) -> bool: ...

    def delete_for_estate(self, estate_id: str) -> int: ...


@dataclass(frozen=True, slots=True)
class RentPaymentQuery:
    """Filters of the rent listing. None means "no constraint"."""

    estate_id: str | None = None
    owner_id: str | None = None
    property_id: str | None = None
    is_paid: bool | None = None
    date_from: date | None = None
    date_to: date | None = None
    text: str | None = None


class EstateRepository(Protocol):
    def get_estate(self, estate_id: str) -> Estate | None: ...

    def list_estates(self, estate_ids: Sequence[str]) -> list[Estate]: ...

    def list_owned_estates(self, owner_id: str) -> list[Estate]: ...

    def create_estate(self, estate: Estate) -> Estate: ...

    def save_estate(self, estate: Estate) -> Estate: ...

    def delete_estate(self, estate_id: str) -> bool: ...


class CollaboratorRepository(Protocol):
    def get_role(self, estate_id: str, user_id: str) -> EstateRole | None: ...

    def list_collaborators(self, estate_id: str) -> list[EstateCollaborator]: ...

    def list_memberships(self, user_id: str) -> list[EstateCollaborator]: ...

    def upsert_collaborator(self, entry: EstateCollaborator) -> EstateCollaborator: ...

    def remove_collaborator(self, estate_id: str, user_id: str) -> bool: ...

    def remove_all(self, estate_id: str) -> int: ...


class PropertyRepository(EstateScopedRepository[Property], Protocol):
    pass


class RentPaymentRepository(EstateScopedRepository[RentPayment], Protocol):
    def search(self, query: RentPaymentQuery) -> list[RentPayment]: ...

    def list_for_property(self, estate_id: str, property_id: str) -> list[RentPayment]: ...


class UtilityAccountRepository(EstateScopedRepository[UtilityAccount], Protocol):
    def list_for_owner(
        self, owner_id: str, *, property_id: str | None = None
    ) -> list[UtilityAccount]: ...

    def list_for_property(
        self, estate_id: str, property_id: str
    ) -> list[UtilityAccount]: ...


class DocumentRepository(EstateScopedRepository[EstateDocument], Protocol):
    pass


class TaskRepository(EstateScopedRepository[EstateTask], Protocol):
    pass


class InvoiceRepository(EstateScopedRepository[Invoice], Protocol):
    def find_by_number(self, owner_id: str, invoice_number: str) -> Invoice | None: ...


class NoteRepository(EstateScopedRepository[EstateNote], Protocol):
    pass


class InviteRepository(EstateScopedRepository[EstateInvite], Protocol):
    def find_by_token(self, estate_id: str, token: str) -> EstateInvite | None: ...

    def find_pending_for_email(
        self, estate_id: str, email: str
    ) -> EstateInvite | None: ...



class EventRepository(Protocol):
    def record_event(self, event: EstateEvent) -> EstateEvent: ...

    def list_events(
        self,
        estate_id: str,
        *,
        types: Sequence[EstateEventType] | None = None,
        before: datetime | None = None,
        limit: int = 25,
    ) -> list[EstateEvent]: ...

    def delete_for_estate(self, estate_id: str) -> int: ...


class UserRepository(Protocol):
    def get_user(self, user_id: str) -> User | None: ...

    def get_user_by_email(self, email: str) -> User | None: ...

    def create_user(self, user: User) -> User: ...
