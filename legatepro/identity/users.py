"""
===============================================================================
CRC CARD — identity/users.py
===============================================================================

Module:
    User model

Responsibilities:
    - Define the User record used by login, session tokens and estate
      ownership (Estate.owner_id / collaborator user ids point at User.id).

Collaborators:
    - identity/auth_users.py: issues and validates session tokens for a User.
    - infrastructure/repositories/records.py: persists users.

Notes:
    - Shape only, no business rules.
    - Estate roles are NOT user attributes; they are resolved per estate.
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from uuid import uuid4


def _new_user_id() -> str:
    return uuid4().hex


@dataclass(frozen=True, slots=True)
class User:
    """Registered account."""

    email: str
    password_hash: str
    id: str = field(default_factory=_new_user_id)
    name: str | None = None
    is_active: bool = True
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
