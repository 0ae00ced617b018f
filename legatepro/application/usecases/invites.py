"""
===============================================================================
USE CASES: Collaborator invites
===============================================================================

Token invitations that turn into an EDITOR or VIEWER collaborator entry once
the invited person signs in and accepts.

Rules:
  - Listing, sending and revoking are OWNER-only.
  - One PENDING invite per email: re-inviting rotates its token and replaces
    its role and expiry instead of creating a second one.
  - At most max_active invites may be PENDING at once; the owner cannot
    invite their own email.
  - Revoking is idempotent for REVOKED invites; a lapsed invite is marked
    EXPIRED instead, and ACCEPTED ones cannot be revoked.
  - Accepting needs a session whose email matches the invite. It writes the
    collaborator entry (keeping added_at on a role change) and marks the
    invite ACCEPTED.
  - Listing never writes: lapsed PENDING invites are reported as EXPIRED.
===============================================================================
"""

from __future__ import annotations

import secrets
from dataclasses import dataclass, replace
from datetime import timedelta
from typing import Any, Mapping

from ...audit import emit_estate_event
from ...crosscutting.logger import logger
from ...domain.access import ASSIGNABLE_ROLES, EstateAccess, EstateRole
from ...domain.entities import (
    EstateCollaborator,
    EstateEventType,
    EstateInvite,
    InviteStatus,
    normalize_email,
    utcnow,
)
from ...domain.repositories import (
    CollaboratorRepository,
    EventRepository,
    InviteRepository,
    UserRepository,
)
from .. import inputs
from ..access_resolver import ESTATE_NOT_FOUND
from ..guards import EstateMutationGuard
from ..paths import estate_path, list_path
from ..results import Forbidden, Invalid, NotFound, Ok, Outcome, Unauthenticated

INVITE_NOT_FOUND = NotFound(resource="Invite", message="Invite not found")
INVITE_EMAIL_MISMATCH = Forbidden(
    message="Invite email does not match your account", code="invite_email"
)
TOKEN_BYTES = 24


def _invite_views(estate_id: str) -> list[str]:
    return [
        list_path(estate_id, "invites"),
        list_path(estate_id, "collaborators"),
        estate_path(estate_id),
    ]


def _status_failure(status: InviteStatus) -> Invalid:
    return Invalid(code=f"invite_{status.value.lower()}", message=f"Invite is {status.value}")


@dataclass(frozen=True, slots=True)
class IssuedInvite:
    invite: EstateInvite
    previous_role: EstateRole | None = None

    @property
    def reused(self) -> bool:
        return self.previous_role is not None


class InviteUseCases:
    def __init__(
        self,
        guard: EstateMutationGuard,
        invites: InviteRepository,
        collaborators: CollaboratorRepository,
        users: UserRepository,
        events: EventRepository | None = None,
        *,
        ttl_days: int = 7,
        max_active: int = 50,
    ) -> None:
        self._guard = guard
        self._invites = invites
        self._collaborators = collaborators
        self._users = users
        self._events = events
        self._ttl = timedelta(days=ttl_days)
        self._max_active = max_active

    # -------------------------------------------------------------------------
    # Owner side
    # -------------------------------------------------------------------------
    def list(self, estate_id: str, user_id: str | None) -> Outcome[list[EstateInvite]]:
        access = self._guard.authorize_edit(
            estate_id, user_id, required_role=EstateRole.OWNER
        )
        if not isinstance(access, EstateAccess):
            return access
        now = utcnow()
        return Ok(
            [
                replace(i, status=i.current_status(now))
                for i in self._invites.list_for_estate(estate_id)
            ]
        )

    def send(
        self, estate_id: str, user_id: str | None, data: Mapping[str, Any]
    ) -> Outcome[IssuedInvite]:
        def mutation(access: EstateAccess) -> Outcome[IssuedInvite]:
            estate = self._guard.load_estate(estate_id)
            if estate is None:
                return ESTATE_NOT_FOUND

            email = normalize_email(inputs.text(data, "email"))
            if email is None:
                return Invalid(code="invalid_email", message="A valid email is required")
            role = inputs.choice(
                data,
                "role",
                EstateRole,
                code="invalid_role",
                message="role must be EDITOR or VIEWER",
                default=EstateRole.VIEWER,
                upper=True,
            )
            if role not in ASSIGNABLE_ROLES:
                return Invalid(code="invalid_role", message="role must be EDITOR or VIEWER")
            caller = self._users.get_user(access.user_id)
            if caller is not None and caller.email.strip().lower() == email:
                return Invalid(code="self_invite", message="You cannot invite yourself.")

            now = utcnow()
            token = secrets.token_hex(TOKEN_BYTES)
            pending = self._invites.find_pending_for_email(estate.id, email)
            if pending is not None and not pending.is_expired(now):
                invite = self._invites.save(
                    replace(
                        pending,
                        token=token,
                        role=role,
                        expires_at=now + self._ttl,
                        created_by=access.user_id,
                    )
                )
                issued = IssuedInvite(invite=invite, previous_role=pending.role)
            else:
                active = [
                    i
                    for i in self._invites.list_for_estate(estate.id)
                    if i.current_status(now) == InviteStatus.PENDING
                ]
                if len(active) >= self._max_active:
                    return Invalid(
                        code="invite_limit",
                        message="Invite limit reached. Revoke old invites and try again.",
                    )
                if pending is not None:
                    self._invites.save(replace(pending, status=InviteStatus.EXPIRED))
                invite = self._invites.add(
                    EstateInvite(
                        estate_id=estate.id,
                        owner_id=estate.owner_id,
                        email=email,
                        role=role,
                        token=token,
                        expires_at=now + self._ttl,
                        created_by=access.user_id,
                    )
                )
                issued = IssuedInvite(invite=invite)

            emit_estate_event(
                self._events,
                estate=estate,
                type=EstateEventType.COLLABORATOR_INVITE_SENT,
                summary=f"Invite sent ({role.value})",
                actor_id=access.user_id,
                meta={
                    "inviteId": issued.invite.id,
                    "role": role.value,
                    "reused": issued.reused,
                },
            )
            logger.info(
                "collaborator invite sent",
                extra={
                    "estate_id": estate.id,
                    "invite_id": issued.invite.id,
                    "reused": issued.reused,
                },
            )
            return Ok(issued)

        return self._guard.run(
            estate_id=estate_id,
            user_id=user_id,
            mutation=mutation,
            views=lambda issued: _invite_views(issued.invite.estate_id),
            required_role=EstateRole.OWNER,
        )

    def revoke(
        self, estate_id: str, user_id: str | None, data: Mapping[str, Any]
    ) -> Outcome[EstateInvite]:
        """Revoke by `token`, or the PENDING invite of `email`."""

        def mutation(access: EstateAccess) -> Outcome[EstateInvite]:
            estate = self._guard.load_estate(estate_id)
            if estate is None:
                return ESTATE_NOT_FOUND

            token = inputs.text(data, "token")
            email = normalize_email(inputs.text(data, "email"))
            if token is None and email is None:
                return Invalid(code="missing_invite", message="token or email is required")
            if token is not None:
                invite = self._invites.find_by_token(estate.id, token)
            else:
                invite = self._invites.find_pending_for_email(estate.id, email)
            if invite is None:
                return INVITE_NOT_FOUND

            now = utcnow()
            if invite.status == InviteStatus.REVOKED:
                return Ok(invite)
            if invite.current_status(now) == InviteStatus.EXPIRED:
                if invite.status == InviteStatus.EXPIRED:
                    return Ok(invite)
                return Ok(self._invites.save(replace(invite, status=InviteStatus.EXPIRED)))
            if invite.status != InviteStatus.PENDING:
                return _status_failure(invite.status)

            revoked = self._invites.save(
                replace(invite, status=InviteStatus.REVOKED, revoked_at=now)
            )
            emit_estate_event(
                self._events,
                estate=estate,
                type=EstateEventType.COLLABORATOR_INVITE_REVOKED,
                summary=f"Invite revoked ({revoked.role.value})",
                actor_id=access.user_id,
                meta={"inviteId": revoked.id, "role": revoked.role.value},
            )
            return Ok(revoked)

        return self._guard.run(
            estate_id=estate_id,
            user_id=user_id,
            mutation=mutation,
            views=lambda invite: _invite_views(invite.estate_id),
            required_role=EstateRole.OWNER,
        )

    # -------------------------------------------------------------------------
    # Invitee side
    # -------------------------------------------------------------------------
    def accept(
        self, estate_id: str, token: str, user_id: str | None
    ) -> Outcome[EstateCollaborator]:
        if not user_id:
            return Unauthenticated()
        user = self._users.get_user(user_id)
        if user is None:
            return Unauthenticated()
        estate = self._guard.load_estate(estate_id)
        if estate is None:
            return ESTATE_NOT_FOUND
        invite = self._invites.find_by_token(estate.id, token)
        if invite is None:
            return INVITE_NOT_FOUND

        now = utcnow()
        if invite.status != InviteStatus.PENDING:
            return _status_failure(invite.status)
        if invite.is_expired(now):
            self._invites.save(replace(invite, status=InviteStatus.EXPIRED))
            return Invalid(code="invite_expired", message="Invite expired")
        if user.email.strip().lower() != invite.email:
            return INVITE_EMAIL_MISMATCH
        if user.id == estate.owner_id:
            return Invalid(code="owner_has_access", message="Owner already has access")

        existing = next(
            (
                c
                for c in self._collaborators.list_collaborators(estate.id)
                if c.user_id == user.id
            ),
            None,
        )
        if existing is None:
            entry = self._collaborators.upsert_collaborator(
                EstateCollaborator(estate_id=estate.id, user_id=user.id, role=invite.role)
            )
            event_type = EstateEventType.COLLABORATOR_ADDED
            summary = f"Collaborator added as {entry.role.value}"
        elif existing.role != invite.role:
            entry = self._collaborators.upsert_collaborator(
                replace(existing, role=invite.role)
            )
            event_type = EstateEventType.COLLABORATOR_ROLE_CHANGED
            summary = f"Collaborator role changed to {entry.role.value}"
        else:
            entry, event_type = existing, None

        self._invites.save(
            replace(
                invite,
                status=InviteStatus.ACCEPTED,
                accepted_by=user.id,
                accepted_at=now,
            )
        )
        if event_type is not None:
            emit_estate_event(
                self._events,
                estate=estate,
                type=event_type,
                summary=summary,
                actor_id=user.id,
                meta={"userId": user.id, "role": entry.role.value, "inviteId": invite.id},
            )
        self._guard.invalidate(_invite_views(estate.id))
        return Ok(entry)
