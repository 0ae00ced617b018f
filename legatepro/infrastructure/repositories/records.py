"""
============================================================
CRC CARD — infrastructure/repositories/records.py
============================================================
Module: Typed repositories over a RecordStore

Responsibilities:
  - Implement the domain repository ports on top of any RecordStore
    (in-memory or Postgres), one collection per entity type.
  - Own deterministic ordering of every listing.
  - Recompute invoice totals on every invoice write.
  - Stamp updated_at on saves.

Collaborators:
  - domain.repositories (ports), domain.entities, domain.invoices
  - infrastructure.repositories.codec (dataclass <-> dict)

Constraints / Notes:
  - No access rules here; callers pass through the mutation guard first.
  - Filters the store cannot express as equality (date ranges, free text,
    cursors) are applied in Python over the estate-scoped result.
============================================================
"""

from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime
from typing import Any, Generic, Sequence, TypeVar

from ...domain.access import EstateRole
from ...domain.entities import (
    Estate,
    EstateCollaborator,
    EstateDocument,
    EstateEvent,
    EstateEventType,
    EstateInvite,
    EstateNote,
    EstateTask,
    InviteStatus,
    Property,
    RentPayment,
    UtilityAccount,
    is_valid_id,
    utcnow,
)
from ...domain.invoices import Invoice, recompute_totals
from ...domain.repositories import RecordStore, RentPaymentQuery
from ...identity.users import User
from .codec import from_record, to_record

T = TypeVar("T")

ESTATES = "estates"
COLLABORATORS = "estate_collaborators"
PROPERTIES = "properties"
RENT_PAYMENTS = "rent_payments"
UTILITY_ACCOUNTS = "utility_accounts"
DOCUMENTS = "estate_documents"
TASKS = "estate_tasks"
INVOICES = "invoices"
NOTES = "estate_notes"
INVITES = "estate_invites"
EVENTS = "estate_events"
USERS = "users"


# =========================================================
# Generic estate-scoped repository
# =========================================================
class StoreRepository(Generic[T]):
    collection: str
    entity_cls: type

    def __init__(self, store: RecordStore):
        self._store = store

    # --- hooks ---
    def _prepare(self, entity: T) -> T:
        return entity

    def _order(self, items: list[T]) -> list[T]:
        return sorted(items, key=lambda e: e.created_at, reverse=True)

    # --- helpers ---
    def _load(self, row: dict[str, Any] | None) -> T | None:
        if row is None:
            return None
        return from_record(self.entity_cls, row)

    def _load_all(self, rows: list[dict[str, Any]]) -> list[T]:
        return [from_record(self.entity_cls, row) for row in rows]

    # --- port ---
    def get(self, record_id: str) -> T | None:
        if not is_valid_id(record_id):
            return None
        return self._load(self._store.find_one(self.collection, {"id": record_id}))

    def list_for_estate(self, estate_id: str) -> list[T]:
        rows = self._store.find(self.collection, {"estate_id": estate_id})
        return self._order(self._load_all(rows))

    def add(self, entity: T) -> T:
        prepared = self._prepare(entity)
        return self._load(self._store.create(self.collection, to_record(prepared)))

    def save(self, entity: T) -> T | None:
        prepared = self._prepare(replace(entity, updated_at=utcnow()))
        row = self._store.update(self.collection, prepared.id, to_record(prepared))
        return self._load(row)

    def delete(self, record_id: str) -> bool:
        if not is_valid_id(record_id):
            return False
        return self._store.delete(self.collection, {"id": record_id}) > 0

    def delete_for_estate(self, estate_id: str) -> int:
        return self._store.delete(self.collection, {"estate_id": estate_id})


def _nulls_last(value: Any, fallback: Any) -> tuple[bool, Any]:
    return (value is None, value if value is not None else fallback)


class StorePropertyRepository(StoreRepository[Property]):
    collection = PROPERTIES
    entity_cls = Property

    def _order(self, items: list[Property]) -> list[Property]:
        return sorted(items, key=lambda p: (p.label.lower(), p.created_at))


class StoreRentPaymentRepository(StoreRepository[RentPayment]):
    collection = RENT_PAYMENTS
    entity_cls = RentPayment

    def _order(self, items: list[RentPayment]) -> list[RentPayment]:
        return sorted(
            items, key=lambda p: (p.payment_date, p.created_at), reverse=True
        )

    def search(self, query: RentPaymentQuery) -> list[RentPayment]:
        where: dict[str, Any] = {}
        if query.estate_id is not None:
            where["estate_id"] = query.estate_id
        if query.owner_id is not None:
            where["owner_id"] = query.owner_id
        if query.property_id is not None:
            where["property_id"] = query.property_id
        if query.is_paid is not None:
            where["is_paid"] = query.is_paid

        payments = self._load_all(self._store.find(self.collection, where))

        if query.date_from is not None:
            payments = [p for p in payments if p.payment_date >= query.date_from]
        if query.date_to is not None:
            payments = [p for p in payments if p.payment_date <= query.date_to]
        if query.text:
            needle = query.text.casefold()
            payments = [
                p
                for p in payments
                if needle in p.tenant_name.casefold()
                or needle in (p.notes or "").casefold()
            ]
        return self._order(payments)

    def list_for_property(self, estate_id: str, property_id: str) -> list[RentPayment]:
        return self.search(
            RentPaymentQuery(estate_id=estate_id, property_id=property_id)
        )


class StoreUtilityAccountRepository(StoreRepository[UtilityAccount]):
    collection = UTILITY_ACCOUNTS
    entity_cls = UtilityAccount

    def _order(self, items: list[UtilityAccount]) -> list[UtilityAccount]:
        return sorted(items, key=lambda u: (u.provider_name.lower(), u.created_at))

    def list_for_owner(
        self, owner_id: str, *, property_id: str | None = None
    ) -> list[UtilityAccount]:
        where: dict[str, Any] = {"owner_id": owner_id}
        if property_id is not None:
            where["property_id"] = property_id
        return self._order(self._load_all(self._store.find(self.collection, where)))

    def list_for_property(
        self, estate_id: str, property_id: str
    ) -> list[UtilityAccount]:
        rows = self._store.find(
            self.collection, {"estate_id": estate_id, "property_id": property_id}
        )
        return self._order(self._load_all(rows))


class StoreDocumentRepository(StoreRepository[EstateDocument]):
    collection = DOCUMENTS
    entity_cls = EstateDocument

    def _order(self, items: list[EstateDocument]) -> list[EstateDocument]:
        return sorted(items, key=lambda d: (d.subject, d.label.lower()))


class StoreTaskRepository(StoreRepository[EstateTask]):
    collection = TASKS
    entity_cls = EstateTask

    def _order(self, items: list[EstateTask]) -> list[EstateTask]:
        return sorted(
            items,
            key=lambda t: (*_nulls_last(t.due_date, date.max), t.created_at),
        )


class StoreInvoiceRepository(StoreRepository[Invoice]):
    collection = INVOICES
    entity_cls = Invoice

    def _prepare(self, entity: Invoice) -> Invoice:
        return recompute_totals(entity)

    def _order(self, items: list[Invoice]) -> list[Invoice]:
        return sorted(items, key=lambda i: (i.issue_date, i.created_at), reverse=True)

    def find_by_number(self, owner_id: str, invoice_number: str) -> Invoice | None:
        return self._load(
            self._store.find_one(
                self.collection,
                {"owner_id": owner_id, "invoice_number": invoice_number},
            )
        )


class StoreNoteRepository(StoreRepository[EstateNote]):
    collection = NOTES
    entity_cls = EstateNote

    def _order(self, items: list[EstateNote]) -> list[EstateNote]:
        newest_first = sorted(items, key=lambda n: n.created_at, reverse=True)
        return sorted(newest_first, key=lambda n: not n.pinned)


class StoreInviteRepository(StoreRepository[EstateInvite]):
    collection = INVITES
    entity_cls = EstateInvite

    def find_by_token(self, estate_id: str, token: str) -> EstateInvite | None:
        if not token:
            return None
        return self._load(
            self._store.find_one(self.collection, {"estate_id": estate_id, "token": token})
        )

    def find_pending_for_email(self, estate_id: str, email: str) -> EstateInvite | None:
        rows = self._store.find(
            self.collection,
            {"estate_id": estate_id, "email": email, "status": InviteStatus.PENDING.value},
        )
        pending = self._order(self._load_all(rows))
        return pending[0] if pending else None



# =========================================================
# Estates, collaborators, events, users
# =========================================================
class StoreEstateRepository:
    def __init__(self, store: RecordStore):
        self._store = store

    def _load(self, row: dict[str, Any] | None) -> Estate | None:
        return from_record(Estate, row) if row is not None else None

    def get_estate(self, estate_id: str) -> Estate | None:
        if not is_valid_id(estate_id):
            return None
        return self._load(self._store.find_one(ESTATES, {"id": estate_id}))

    def list_estates(self, estate_ids: Sequence[str]) -> list[Estate]:
        estates = [self.get_estate(eid) for eid in dict.fromkeys(estate_ids)]
        return sorted(
            (e for e in estates if e is not None),
            key=lambda e: e.created_at,
            reverse=True,
        )

    def list_owned_estates(self, owner_id: str) -> list[Estate]:
        rows = self._store.find(ESTATES, {"owner_id": owner_id})
        return sorted(
            (from_record(Estate, row) for row in rows),
            key=lambda e: e.created_at,
            reverse=True,
        )

    def create_estate(self, estate: Estate) -> Estate:
        record = {**to_record(estate), "estate_id": estate.id}
        return self._load(self._store.create(ESTATES, record))

    def save_estate(self, estate: Estate) -> Estate | None:
        updated = replace(estate, updated_at=utcnow())
        record = {**to_record(updated), "estate_id": updated.id}
        return self._load(self._store.update(ESTATES, updated.id, record))

    def delete_estate(self, estate_id: str) -> bool:
        return self._store.delete(ESTATES, {"id": estate_id}) > 0


class StoreCollaboratorRepository:
    def __init__(self, store: RecordStore):
        self._store = store

    @staticmethod
    def _key(estate_id: str, user_id: str) -> str:
        return f"{estate_id}:{user_id}"

    def get_role(self, estate_id: str, user_id: str) -> EstateRole | None:
        row = self._store.find_one(
            COLLABORATORS, {"estate_id": estate_id, "user_id": user_id}
        )
        if row is None:
            return None
        return from_record(EstateCollaborator, row).role

    def list_collaborators(self, estate_id: str) -> list[EstateCollaborator]:
        rows = self._store.find(COLLABORATORS, {"estate_id": estate_id})
        return sorted(
            (from_record(EstateCollaborator, row) for row in rows),
            key=lambda c: (c.added_at, c.user_id),
        )

    def list_memberships(self, user_id: str) -> list[EstateCollaborator]:
        rows = self._store.find(COLLABORATORS, {"user_id": user_id})
        return [from_record(EstateCollaborator, row) for row in rows]

    def upsert_collaborator(self, entry: EstateCollaborator) -> EstateCollaborator:
        key = self._key(entry.estate_id, entry.user_id)
        record = {**to_record(entry), "id": key}
        row = self._store.update(COLLABORATORS, key, record)
        if row is None:
            row = self._store.create(COLLABORATORS, record)
        return from_record(EstateCollaborator, row)

    def remove_collaborator(self, estate_id: str, user_id: str) -> bool:
        removed = self._store.delete(
            COLLABORATORS, {"estate_id": estate_id, "user_id": user_id}
        )
        return removed > 0

    def remove_all(self, estate_id: str) -> int:
        return self._store.delete(COLLABORATORS, {"estate_id": estate_id})


class StoreEventRepository:
    def __init__(self, store: RecordStore):
        self._store = store

    def record_event(self, event: EstateEvent) -> EstateEvent:
        return from_record(EstateEvent, self._store.create(EVENTS, to_record(event)))

    def list_events(
        self,
        estate_id: str,
        *,
        types: Sequence[EstateEventType] | None = None,
        before: datetime | None = None,
        limit: int = 25,
    ) -> list[EstateEvent]:
        events = [
            from_record(EstateEvent, row)
            for row in self._store.find(EVENTS, {"estate_id": estate_id})
        ]
        if types:
            wanted = set(types)
            events = [e for e in events if e.type in wanted]
        if before is not None:
            events = [e for e in events if e.created_at < before]
        events.sort(key=lambda e: (e.created_at, e.id), reverse=True)
        return events[:limit]

    def delete_for_estate(self, estate_id: str) -> int:
        return self._store.delete(EVENTS, {"estate_id": estate_id})


class StoreUserRepository:
    def __init__(self, store: RecordStore):
        self._store = store

    def get_user(self, user_id: str) -> User | None:
        if not is_valid_id(user_id):
            return None
        row = self._store.find_one(USERS, {"id": user_id})
        return from_record(User, row) if row is not None else None

    def get_user_by_email(self, email: str) -> User | None:
        row = self._store.find_one(USERS, {"email": email.strip().lower()})
        return from_record(User, row) if row is not None else None

    def create_user(self, user: User) -> User:
        normalized = replace(user, email=user.email.strip().lower())
        return from_record(User, self._store.create(USERS, to_record(normalized)))

