"""
HTTP schemas: estates, collaborators, invites, activity, readiness.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from legatepro.domain.access import EstateRole
from legatepro.domain.entities import EstateEventType, EstateStatus, InviteStatus
from .common import CamelModel, RequestModel


class EstateReq(RequestModel):
    label: str | None = None
    decedent_name: str | None = None
    court_county: str | None = None
    court_state: str | None = None
    court_case_number: str | None = None
    status: str | None = None
    notes: str | None = None


class EstateRes(CamelModel):
    id: str
    owner_id: str
    label: str
    decedent_name: str | None = None
    court_county: str | None = None
    court_state: str | None = None
    court_case_number: str | None = None
    status: EstateStatus
    notes: str | None = None
    role: EstateRole | None = None
    created_at: datetime
    updated_at: datetime


class EstateEnvelope(CamelModel):
    estate: EstateRes


class EstateListRes(CamelModel):
    estates: list[EstateRes]


class CollaboratorReq(RequestModel):
    user_id: str | None = None
    email: str | None = None
    role: str | None = None


class CollaboratorRes(CamelModel):
    estate_id: str
    user_id: str
    role: EstateRole
    added_at: datetime


class CollaboratorEnvelope(CamelModel):
    collaborator: CollaboratorRes


class CollaboratorListRes(CamelModel):
    collaborators: list[CollaboratorRes]


class EventRes(CamelModel):
    id: str
    estate_id: str
    type: EstateEventType
    summary: str
    detail: str | None = None
    actor_id: str | None = None
    meta: dict[str, Any] = {}
    created_at: datetime


class ActivityRes(CamelModel):
    events: list[EventRes]
    next_cursor: str | None = None


class InviteReq(RequestModel):
    email: str | None = None
    role: str | None = None


class InviteRes(CamelModel):
    id: str
    estate_id: str
    email: str
    role: EstateRole
    status: InviteStatus
    token: str
    expires_at: datetime
    created_by: str
    created_at: datetime
    accepted_by: str | None = None
    accepted_at: datetime | None = None
    revoked_at: datetime | None = None


class InviteListRes(CamelModel):
    invites: list[InviteRes]


class InviteSentRes(CamelModel):
    invite: InviteRes
    invite_url: str
    previous_role: EstateRole | None = None


class InviteEnvelope(CamelModel):
    invite: InviteRes


class InviteAcceptedRes(CamelModel):
    ok: bool = True
    estate_id: str
    role: EstateRole
