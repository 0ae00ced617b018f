from .in_memory_store import InMemoryRecordStore
from .postgres_store import PostgresRecordStore
from .records import (
    StoreCollaboratorRepository,
    StoreDocumentRepository,
    StoreEstateRepository,
    StoreEventRepository,
    StoreInviteRepository,
    StoreInvoiceRepository,
    StoreNoteRepository,
    StorePropertyRepository,
    StoreRentPaymentRepository,
    StoreTaskRepository,
    StoreUserRepository,
    StoreUtilityAccountRepository,
)

__all__ = [
    "InMemoryRecordStore",
    "PostgresRecordStore",
    "StoreCollaboratorRepository",
    "StoreDocumentRepository",
    "StoreEstateRepository",
    "StoreEventRepository",
    "StoreInviteRepository",
    "StoreInvoiceRepository",
    "StoreNoteRepository",
    "StorePropertyRepository",
    "StoreRentPaymentRepository",
    "StoreTaskRepository",
    "StoreUserRepository",
    "StoreUtilityAccountRepository",
]
