"""
===============================================================================
CRC CARD — legatepro/audit.py (estate activity emission)
===============================================================================

Responsibilities:
  - Build EstateEvent records with a consistent shape (type/summary/actor/meta).
  - Persist them through the EventRepository port.
  - Best-effort: a failed write is logged and never breaks the request.

Collaborators:
  - domain.entities.EstateEvent / EstateEventType
  - domain.repositories.EventRepository
  - crosscutting.logger.logger

Notes:
  - Meta values are coerced to JSON-compatible types; anything else is
    stringified.
  - No PII beyond the actor id is stored.
===============================================================================
"""

from __future__ import annotations

from typing import Any

from .crosscutting.logger import logger
from .domain.entities import Estate, EstateEvent, EstateEventType
from .domain.repositories import EventRepository


def _sanitize(value: Any) -> Any:
    if value is None or isinstance(value, (str, int, float, bool)):
        return value

    if isinstance(value, dict):
        return {str(k): _sanitize(v) for k, v in value.items()}

    if isinstance(value, (list, tuple)):
        return [_sanitize(v) for v in value]

    return str(value)


def emit_estate_event(
    repository: EventRepository | None,
    *,
    estate: Estate,
    type: EstateEventType,
    summary: str,
    actor_id: str | None = None,
    detail: str | None = None,
    meta: dict[str, Any] | None = None,
) -> EstateEvent | None:
    """
    Record one activity event for `estate`.

    Returns the stored event, or None when there is no repository or the
    write failed.
    """
    if repository is None:
        return None

    try:
        event = EstateEvent(
            estate_id=estate.id,
            owner_id=estate.owner_id,
            type=type,
            summary=summary,
            actor_id=actor_id,
            detail=detail,
            meta=_sanitize(meta or {}),
        )
        return repository.record_event(event)
    except Exception as exc:
        logger.warning(
            "estate event write failed",
            extra={"estate_id": estate.id, "event_type": str(type), "error": str(exc)},
        )
        return None
