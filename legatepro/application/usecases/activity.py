"""
===============================================================================
USE CASE: Estate activity feed
===============================================================================

Newest-first listing of EstateEvents with cursor pagination.

Rules:
  - Any role may read.
  - limit is clamped to 1..100 (default from settings, 25).
  - cursor is an ISO-8601 timestamp; only events strictly older are returned.
  - nextCursor is the createdAt of the last returned event when more exist.
  - types accepts current names and the older aliases (e.g. DOCUMENT_ADDED).
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Iterable

from ...domain.access import EstateAccess
from ...domain.entities import EstateEvent, EstateEventType, normalize_event_type
from ...domain.repositories import EventRepository
from ..guards import EstateMutationGuard
from ..results import Invalid, Ok, Outcome

MIN_LIMIT = 1
MAX_LIMIT = 100


@dataclass(frozen=True, slots=True)
class ActivityPage:
    events: list[EstateEvent]
    next_cursor: str | None


def clamp_limit(limit: int | None, default: int) -> int:
    if limit is None:
        return default
    return max(MIN_LIMIT, min(MAX_LIMIT, int(limit)))


def parse_cursor(raw: str | None) -> datetime | None:
    """ISO timestamp -> aware datetime (naive values are taken as UTC)."""
    if raw is None or not raw.strip():
        return None
    value = datetime.fromisoformat(raw.strip().replace("Z", "+00:00"))
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value


class ListEstateActivityUseCase:
    def __init__(
        self,
        guard: EstateMutationGuard,
        events: EventRepository,
        *,
        default_limit: int = 25,
    ) -> None:
        self._guard = guard
        self._events = events
        self._default_limit = default_limit

    def execute(
        self,
        estate_id: str,
        user_id: str | None,
        *,
        types: Iterable[str] | None = None,
        cursor: str | None = None,
        limit: int | None = None,
    ) -> Outcome[ActivityPage]:
        access = self._guard.authorize_read(estate_id, user_id)
        if not isinstance(access, EstateAccess):
            return access

        wanted: list[EstateEventType] = []
        for raw in types or []:
            for part in str(raw).split(","):
                if not part.strip():
                    continue
                event_type = normalize_event_type(part)
                if event_type is None:
                    return Invalid(
                        code="invalid_type", message=f"Unknown event type: {part.strip()}"
                    )
                wanted.append(event_type)

        try:
            before = parse_cursor(cursor)
        except ValueError:
            return Invalid(code="invalid_cursor", message="Invalid cursor")

        page_size = clamp_limit(limit, self._default_limit)
        rows = self._events.list_events(
            estate_id, types=wanted or None, before=before, limit=page_size + 1
        )
        page = rows[:page_size]
        next_cursor = page[-1].created_at.isoformat() if len(rows) > page_size else None
        return Ok(ActivityPage(events=page, next_cursor=next_cursor))
