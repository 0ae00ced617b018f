"""
===============================================================================
USE CASES: Document index
===============================================================================

Index entries for estate paperwork (where the original lives, a URL, tags).

Sensitive entries:
  - Visibility is decided by one of two named predicates, chosen by the
    SENSITIVE_DOCUMENTS_POLICY setting:
      non_viewer -> can_view_sensitive (OWNER, EDITOR)
      owner_only -> can_view_sensitive_owner_only (OWNER)
  - A hidden entry behaves as if it did not exist (list, read, edit, delete).
===============================================================================
"""

from __future__ import annotations

from typing import Any, Callable, Mapping

from ...crosscutting.config import SENSITIVE_POLICY_OWNER_ONLY
from ...domain.access import (
    EstateAccess,
    EstateRole,
    can_view_sensitive,
    can_view_sensitive_owner_only,
)
from ...domain.entities import EstateDocument, EstateEventType
from ...domain.repositories import DocumentRepository, EventRepository
from .. import inputs
from ..guards import EstateMutationGuard
from .base import EstateScopedUseCases, parse_fields

_PARSERS = {
    "subject": lambda d: inputs.text(d, "subject"),
    "label": lambda d: inputs.text(d, "label"),
    "location": lambda d: inputs.text(d, "location"),
    "url": lambda d: inputs.text(d, "url"),
    "tags": lambda d: inputs.tags(d, "tags"),
    "notes": lambda d: inputs.text(d, "notes"),
    "is_sensitive": lambda d: inputs.boolean(d, "is_sensitive", False),
}


def sensitive_predicate(policy: str) -> Callable[[EstateRole], bool]:
    if policy == SENSITIVE_POLICY_OWNER_ONLY:
        return can_view_sensitive_owner_only
    return can_view_sensitive


class DocumentUseCases(EstateScopedUseCases[EstateDocument]):
    resource = "Document"
    segment = "documents"
    entity_cls = EstateDocument

    created_event = EstateEventType.DOCUMENT_CREATED
    updated_event = EstateEventType.DOCUMENT_UPDATED
    deleted_event = EstateEventType.DOCUMENT_DELETED

    def __init__(
        self,
        guard: EstateMutationGuard,
        repository: DocumentRepository,
        events: EventRepository | None = None,
        *,
        sensitive_policy: str = "non_viewer",
    ) -> None:
        super().__init__(guard, repository, events)
        self._can_see_sensitive = sensitive_predicate(sensitive_policy)

    def _parse(self, data: Mapping[str, Any], *, partial: bool) -> dict[str, Any]:
        return parse_fields(data, _PARSERS, partial=partial)

    def _visible(
        self, access: EstateAccess, items: list[EstateDocument]
    ) -> list[EstateDocument]:
        if self._can_see_sensitive(access.role):
            return items
        return [doc for doc in items if not doc.is_sensitive]
