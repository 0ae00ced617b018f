"""
===============================================================================
CRC CARD — legatepro/container.py (composition root / manual DI)
===============================================================================

Responsibilities:
  - Wire repositories, the page cache, the access resolver, the mutation
    guard and the use cases.
  - Expose factories for FastAPI (Depends) and the CLI.
  - Keep singletons with lru_cache.
  - Make runtime choices from Settings: Postgres vs in-memory record store,
    Redis vs in-memory page cache.

Collaborators:
  - crosscutting.config.get_settings
  - domain.repositories.* / domain.services.PageCache (ports)
  - infrastructure.* (adapters)
  - application.* (resolver, guard, use cases)

Notes:
  - No business logic and no FastAPI imports here.
  - Tests reset everything with reset_container().
===============================================================================
"""

from __future__ import annotations

from functools import lru_cache

from .application.access_resolver import EstateAccessResolver
from .application.guards import EstateMutationGuard
from .application.usecases import (
    CollaboratorUseCases,
    DocumentUseCases,
    EstateUseCases,
    GetEstateReadinessUseCase,
    InviteUseCases,
    InvoiceUseCases,
    ListEstateActivityUseCase,
    NoteUseCases,
    PropertyUseCases,
    RentPaymentUseCases,
    TaskUseCases,
    UtilityAccountUseCases,
)
from .crosscutting.config import get_settings
from .domain.repositories import (
    CollaboratorRepository,
    DocumentRepository,
    EstateRepository,
    EventRepository,
    InviteRepository,
    InvoiceRepository,
    NoteRepository,
    PropertyRepository,
    RecordStore,
    RentPaymentRepository,
    TaskRepository,
    UserRepository,
    UtilityAccountRepository,
)
from .domain.services import PageCache
from .infrastructure.cache import InMemoryPageCache, build_page_cache
from .infrastructure.repositories import (
    InMemoryRecordStore,
    PostgresRecordStore,
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

# =============================================================================
# Helpers
# =============================================================================


def _is_test_env() -> bool:
    """app_env in {test, testing, ci} forces in-memory adapters."""
    return get_settings().is_test()


# =============================================================================
# Store + cache (singletons)
# =============================================================================


@lru_cache(maxsize=1)
def get_record_store() -> RecordStore:
    """Postgres when DATABASE_URL is set (outside tests); in-memory otherwise."""
    if get_settings().uses_postgres():
        return PostgresRecordStore()
    return InMemoryRecordStore()


@lru_cache(maxsize=1)
def get_page_cache() -> PageCache:
    settings = get_settings()
    if _is_test_env():
        return InMemoryPageCache(ttl_seconds=settings.page_cache_ttl_seconds)
    return build_page_cache(
        settings.redis_url, ttl_seconds=settings.page_cache_ttl_seconds
    )


# =============================================================================
# Repositories (singletons)
# =============================================================================


@lru_cache(maxsize=1)
def get_estate_repository() -> EstateRepository:
    return StoreEstateRepository(get_record_store())


@lru_cache(maxsize=1)
def get_collaborator_repository() -> CollaboratorRepository:
    return StoreCollaboratorRepository(get_record_store())


@lru_cache(maxsize=1)
def get_property_repository() -> PropertyRepository:
    return StorePropertyRepository(get_record_store())


@lru_cache(maxsize=1)
def get_rent_payment_repository() -> RentPaymentRepository:
    return StoreRentPaymentRepository(get_record_store())


@lru_cache(maxsize=1)
def get_utility_account_repository() -> UtilityAccountRepository:
    return StoreUtilityAccountRepository(get_record_store())


@lru_cache(maxsize=1)
def get_document_repository() -> DocumentRepository:
    return StoreDocumentRepository(get_record_store())


@lru_cache(maxsize=1)
def get_task_repository() -> TaskRepository:
    return StoreTaskRepository(get_record_store())


@lru_cache(maxsize=1)
def get_invoice_repository() -> InvoiceRepository:
    return StoreInvoiceRepository(get_record_store())


@lru_cache(maxsize=1)
def get_note_repository() -> NoteRepository:
    return StoreNoteRepository(get_record_store())


@lru_cache(maxsize=1)
def get_invite_repository() -> InviteRepository:
    return StoreInviteRepository(get_record_store())


@lru_cache(maxsize=1)
def get_event_repository() -> EventRepository:
    return StoreEventRepository(get_record_store())


@lru_cache(maxsize=1)
def get_user_repository() -> UserRepository:
    return StoreUserRepository(get_record_store())


# =============================================================================
# Access control
# =============================================================================


@lru_cache(maxsize=1)
def get_access_resolver() -> EstateAccessResolver:
    return EstateAccessResolver(get_estate_repository(), get_collaborator_repository())


@lru_cache(maxsize=1)
def get_mutation_guard() -> EstateMutationGuard:
    return EstateMutationGuard(get_access_resolver(), get_page_cache())


# =============================================================================
# Use cases
# =============================================================================


def get_estate_use_cases() -> EstateUseCases:
    return EstateUseCases(
        get_mutation_guard(),
        get_estate_repository(),
        get_collaborator_repository(),
        get_event_repository(),
        scoped_repositories=(
            get_property_repository(),
            get_rent_payment_repository(),
            get_utility_account_repository(),
            get_document_repository(),
            get_task_repository(),
            get_invoice_repository(),
            get_note_repository(),
            get_invite_repository(),
        ),
    )


def get_collaborator_use_cases() -> CollaboratorUseCases:
    return CollaboratorUseCases(
        get_mutation_guard(),
        get_collaborator_repository(),
        get_user_repository(),
        get_event_repository(),
    )


def get_invite_use_cases() -> InviteUseCases:
    settings = get_settings()
    return InviteUseCases(
        get_mutation_guard(),
        get_invite_repository(),
        get_collaborator_repository(),
        get_user_repository(),
        get_event_repository(),
        ttl_days=settings.invite_ttl_days,
        max_active=settings.max_active_invites,
    )


def get_property_use_cases() -> PropertyUseCases:
    return PropertyUseCases(
        get_mutation_guard(), get_property_repository(), get_event_repository()
    )


def get_rent_payment_use_cases() -> RentPaymentUseCases:
    return RentPaymentUseCases(
        get_mutation_guard(),
        get_rent_payment_repository(),
        get_property_repository(),
        get_event_repository(),
    )


def get_utility_account_use_cases() -> UtilityAccountUseCases:
    return UtilityAccountUseCases(
        get_mutation_guard(),
        get_utility_account_repository(),
        get_property_repository(),
        get_event_repository(),
    )


def get_document_use_cases() -> DocumentUseCases:
    return DocumentUseCases(
        get_mutation_guard(),
        get_document_repository(),
        get_event_repository(),
        sensitive_policy=get_settings().sensitive_documents_policy,
    )


def get_task_use_cases() -> TaskUseCases:
    return TaskUseCases(
        get_mutation_guard(), get_task_repository(), get_event_repository()
    )


def get_invoice_use_cases() -> InvoiceUseCases:
    return InvoiceUseCases(
        get_mutation_guard(), get_invoice_repository(), get_event_repository()
    )


def get_note_use_cases() -> NoteUseCases:
    return NoteUseCases(
        get_mutation_guard(), get_note_repository(), get_event_repository()
    )


def get_activity_use_case() -> ListEstateActivityUseCase:
    return ListEstateActivityUseCase(
        get_mutation_guard(),
        get_event_repository(),
        default_limit=get_settings().events_default_limit,
    )


def get_readiness_use_case() -> GetEstateReadinessUseCase:
    return GetEstateReadinessUseCase(
        get_mutation_guard(),
        get_page_cache(),
        documents=get_document_repository(),
        tasks=get_task_repository(),
        properties=get_property_repository(),
        invoices=get_invoice_repository(),
        rent_payments=get_rent_payment_repository(),
    )


# =============================================================================
# Test support
# =============================================================================

_CACHED_FACTORIES = (
    get_record_store,
    get_page_cache,
    get_estate_repository,
    get_collaborator_repository,
    get_property_repository,
    get_rent_payment_repository,
    get_utility_account_repository,
    get_document_repository,
    get_task_repository,
    get_invoice_repository,
    get_note_repository,
    get_invite_repository,
    get_event_repository,
    get_user_repository,
    get_access_resolver,
    get_mutation_guard,
)


def reset_container() -> None:
    """Drop every cached singleton (fresh store, cache and guard)."""
    for factory in _CACHED_FACTORIES:
        factory.cache_clear()
