"""
===============================================================================
USE CASES: Estate notes
===============================================================================

Free-form notes on an estate; pinned notes list first.
===============================================================================
"""

from __future__ import annotations

from typing import Any, Mapping

from ...domain.entities import EstateEventType, EstateNote
from .. import inputs
from .base import EstateScopedUseCases, parse_fields

_PARSERS = {
    "body": lambda d: inputs.text(d, "body"),
    "pinned": lambda d: inputs.boolean(d, "pinned", False),
}


class NoteUseCases(EstateScopedUseCases[EstateNote]):
    resource = "Note"
    segment = "notes"
    entity_cls = EstateNote

    created_event = EstateEventType.NOTE_CREATED
    updated_event = EstateEventType.NOTE_UPDATED
    deleted_event = EstateEventType.NOTE_DELETED

    def _parse(self, data: Mapping[str, Any], *, partial: bool) -> dict[str, Any]:
        return parse_fields(data, _PARSERS, partial=partial)

    def _describe(self, entity: EstateNote) -> str:
        return entity.body if len(entity.body) <= 60 else f"{entity.body[:57]}..."
