"""
===============================================================================
CRC CARD — domain/entities.py
===============================================================================

Module:
    Estate-scoped domain entities

Responsibilities:
    - Define the records the system stores: estates, collaborators and every
      estate-scoped resource (properties, rent payments, utility accounts,
      documents, tasks, notes, collaborator invites, events).
    - Enforce required fields and value ranges in the constructors, so an
      invalid entity can never be built (and therefore never persisted).
    - Normalize free text (trim, empty -> None).

Collaborators:
    - domain/access.py: EstateRole for collaborator entries.
    - domain/invoices.py: the Invoice entity (kept apart for its arithmetic).
    - infrastructure/repositories/records.py: (de)serializes these dataclasses.

Notes:
    - Ids are opaque strings. New ids are uuid4 hex.
    - Money on rent/utility/property records is a decimal amount in the
      estate's currency; invoices use integer minor units.
    - Every resource carries estate_id and owner_id (the estate owner).
===============================================================================
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from enum import Enum
from typing import Any
from uuid import uuid4

from .access import ASSIGNABLE_ROLES, EstateRole
from .errors import DomainValidationError

_ID_RE = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_-]{0,63}$")


def new_id() -> str:
    return uuid4().hex


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def is_valid_id(value: object) -> bool:
    """Opaque ids: 1-64 chars of [A-Za-z0-9_-], not starting with a separator."""
    return isinstance(value, str) and bool(_ID_RE.match(value))


# =============================================================================
# Field helpers
# =============================================================================


def clean_text(value: str | None) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _require_text(
    value: str | None, code: str, message: str, *, max_len: int | None = None
) -> str:
    text = clean_text(value)
    if text is None:
        raise DomainValidationError(code, message)
    if max_len is not None and len(text) > max_len:
        raise DomainValidationError(code, f"{message.split(' is ')[0]} is too long")
    return text


def optional_text(
    value: str | None, code: str, field_name: str, *, max_len: int | None = None
) -> str | None:
    text = clean_text(value)
    if text is not None and max_len is not None and len(text) > max_len:
        raise DomainValidationError(
            code, f"{field_name} must be at most {max_len} characters"
        )
    return text


def _non_negative(value: float | None, code: str, field_name: str) -> float | None:
    if value is None:
        return None
    if isinstance(value, bool) or not math.isfinite(float(value)) or value < 0:
        raise DomainValidationError(code, f"{field_name} must be a non-negative number")
    return value


# =============================================================================
# Estate + collaborators
# =============================================================================


class EstateStatus(str, Enum):
    OPEN = "OPEN"
    CLOSED = "CLOSED"


@dataclass(kw_only=True)
class Estate:
    """A probate case; the partition for every other resource."""

    owner_id: str
    label: str
    id: str = field(default_factory=new_id)
    decedent_name: str | None = None
    court_county: str | None = None
    court_state: str | None = None
    court_case_number: str | None = None
    status: EstateStatus = EstateStatus.OPEN
    notes: str | None = None
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    def __post_init__(self) -> None:
        if not is_valid_id(self.owner_id):
            raise DomainValidationError("invalid_owner", "ownerId is required")
        self.label = _require_text(
            self.label, "missing_label", "label is required", max_len=200
        )
        self.decedent_name = optional_text(
            self.decedent_name, "invalid_decedent", "decedentName", max_len=200
        )
        self.court_county = clean_text(self.court_county)
        self.court_state = clean_text(self.court_state)
        self.court_case_number = clean_text(self.court_case_number)
        self.notes = optional_text(self.notes, "invalid_notes", "notes", max_len=4000)
        self.status = EstateStatus(self.status)


@dataclass(kw_only=True)
class EstateCollaborator:
    """Explicit (estate_id, user_id) -> role grant for a non-owner."""

    estate_id: str
    user_id: str
    role: EstateRole
    added_at: datetime = field(default_factory=utcnow)

    def __post_init__(self) -> None:
        try:
            self.role = EstateRole(self.role)
        except ValueError as exc:
            raise DomainValidationError(
                "invalid_role", "role must be EDITOR or VIEWER"
            ) from exc
        if self.role not in ASSIGNABLE_ROLES:
            raise DomainValidationError("invalid_role", "role must be EDITOR or VIEWER")
        if not is_valid_id(self.user_id):
            raise DomainValidationError("invalid_user", "userId is required")


# =============================================================================
# Estate-scoped resources
# =============================================================================


@dataclass(kw_only=True)
class EstateRecord:
    """Fields shared by every estate-scoped resource."""

    estate_id: str
    owner_id: str
    id: str = field(default_factory=new_id)
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    def __post_init__(self) -> None:
        if not is_valid_id(self.estate_id):
            raise DomainValidationError("missing_estate", "estateId is required")
        if not is_valid_id(self.owner_id):
            raise DomainValidationError("invalid_owner", "ownerId is required")


class PropertyType(str, Enum):
    SINGLE_FAMILY = "single_family"
    MULTI_FAMILY = "multi_family"
    CONDO = "condo"
    LAND = "land"
    OTHER = "other"


@dataclass(kw_only=True)
class Property(EstateRecord):
    label: str
    address_line1: str | None = None
    address_line2: str | None = None
    city: str | None = None
    state: str | None = None
    postal_code: str | None = None
    property_type: PropertyType = PropertyType.SINGLE_FAMILY
    bedrooms: float | None = None
    bathrooms: float | None = None
    square_feet: float | None = None
    estimated_value: float | None = None
    monthly_rent_target: float | None = None
    is_rented: bool = False
    is_sold: bool = False
    notes: str | None = None

    def __post_init__(self) -> None:
        super().__post_init__()
        self.label = _require_text(
            self.label, "missing_label", "label is required", max_len=200
        )
        self.address_line1 = clean_text(self.address_line1)
        self.address_line2 = clean_text(self.address_line2)
        self.city = clean_text(self.city)
        self.state = clean_text(self.state)
        self.postal_code = clean_text(self.postal_code)
        self.property_type = PropertyType(self.property_type)
        for name in (
            "bedrooms",
            "bathrooms",
            "square_feet",
            "estimated_value",
            "monthly_rent_target",
        ):
            _non_negative(getattr(self, name), f"invalid_{name}", name)
        self.notes = optional_text(self.notes, "invalid_notes", "notes", max_len=4000)

    @property
    def display_address(self) -> str:
        parts = [self.address_line1, self.address_line2, self.city, self.state]
        line = ", ".join(p for p in parts if p)
        if self.postal_code:
            line = f"{line} {self.postal_code}".strip()
        return line


@dataclass(kw_only=True)
class RentPayment(EstateRecord):
    tenant_name: str
    payment_date: date
    amount: float
    property_id: str | None = None
    notes: str | None = None
    is_paid: bool = True
    period_month: int | None = None
    period_year: int | None = None
    method: str | None = None
    reference: str | None = None
    is_late: bool = False

    def __post_init__(self) -> None:
        super().__post_init__()
        self.tenant_name = _require_text(
            self.tenant_name, "missing_tenant", "tenantName is required", max_len=200
        )
        if isinstance(self.payment_date, datetime):
            self.payment_date = self.payment_date.date()
        if not isinstance(self.payment_date, date):
            raise DomainValidationError("missing_date", "paymentDate is required")
        if (
            self.amount is None
            or isinstance(self.amount, bool)
            or not math.isfinite(float(self.amount))
            or self.amount <= 0
        ):
            raise DomainValidationError("invalid_amount", "Valid amount is required")
        if self.period_month is not None and not 1 <= self.period_month <= 12:
            raise DomainValidationError(
                "invalid_month", "periodMonth must be between 1 and 12"
            )
        if self.period_year is not None and not 1900 <= self.period_year <= 2100:
            raise DomainValidationError(
                "invalid_year", "periodYear must be between 1900 and 2100"
            )
        if self.property_id is not None and not is_valid_id(self.property_id):
            raise DomainValidationError("invalid_property", "Invalid propertyId")
        self.notes = optional_text(self.notes, "invalid_notes", "notes", max_len=4000)
        self.method = clean_text(self.method)
        self.reference = clean_text(self.reference)


class UtilityType(str, Enum):
    ELECTRIC = "electric"
    GAS = "gas"
    WATER = "water"
    SEWER = "sewer"
    TRASH = "trash"
    INTERNET = "internet"
    CABLE = "cable"
    SECURITY = "security"
    OTHER = "other"


@dataclass(kw_only=True)
class UtilityAccount(EstateRecord):
    provider_name: str
    utility_type: UtilityType = UtilityType.OTHER
    property_id: str | None = None
    account_number: str | None = None
    phone: str | None = None
    website: str | None = None
    balance_due: float = 0
    last_payment_amount: float | None = None
    last_payment_date: date | None = None
    notes: str | None = None

    def __post_init__(self) -> None:
        super().__post_init__()
        self.provider_name = _require_text(
            self.provider_name,
            "missing_provider",
            "providerName is required",
            max_len=160,
        )
        self.utility_type = UtilityType(self.utility_type)
        self.account_number = optional_text(
            self.account_number, "invalid_account_number", "accountNumber", max_len=80
        )
        self.phone = optional_text(self.phone, "invalid_phone", "phone", max_len=25)
        self.website = clean_text(self.website)
        if self.website is not None and not re.match(
            r"^https?://", self.website, re.IGNORECASE
        ):
            raise DomainValidationError(
                "invalid_website", "website must start with http:// or https://"
            )
        if _non_negative(self.balance_due, "invalid_balance", "balanceDue") is None:
            self.balance_due = 0
        _non_negative(self.last_payment_amount, "invalid_amount", "lastPaymentAmount")
        if self.property_id is not None and not is_valid_id(self.property_id):
            raise DomainValidationError("invalid_property", "Invalid propertyId")
        self.notes = optional_text(self.notes, "invalid_notes", "notes", max_len=4000)


@dataclass(kw_only=True)
class EstateDocument(EstateRecord):
    """An index entry pointing at a document kept elsewhere (drawer, drive, URL)."""

    subject: str
    label: str
    location: str | None = None
    url: str | None = None
    tags: list[str] = field(default_factory=list)
    notes: str | None = None
    is_sensitive: bool = False

    def __post_init__(self) -> None:
        super().__post_init__()
        self.subject = _require_text(
            self.subject, "missing_subject", "subject is required", max_len=80
        ).upper()
        self.label = _require_text(
            self.label, "missing_label", "label is required", max_len=200
        )
        self.location = clean_text(self.location)
        self.url = clean_text(self.url)
        seen: list[str] = []
        for tag in self.tags or []:
            text = clean_text(tag)
            if text and text.lower() not in seen:
                seen.append(text.lower())
        self.tags = seen
        self.notes = optional_text(self.notes, "invalid_notes", "notes", max_len=4000)


class TaskStatus(str, Enum):
    NOT_STARTED = "NOT_STARTED"
    IN_PROGRESS = "IN_PROGRESS"
    DONE = "DONE"


@dataclass(kw_only=True)
class EstateTask(EstateRecord):
    title: str
    description: str | None = None
    status: TaskStatus = TaskStatus.NOT_STARTED
    due_date: date | None = None
    completed_at: datetime | None = None
    related_document_id: str | None = None
    related_invoice_id: str | None = None

    def __post_init__(self) -> None:
        super().__post_init__()
        self.title = _require_text(
            self.title, "missing_title", "title is required", max_len=200
        )
        self.description = optional_text(
            self.description, "invalid_description", "description", max_len=4000
        )
        self.status = TaskStatus(self.status)
        if self.status == TaskStatus.DONE and self.completed_at is None:
            self.completed_at = utcnow()
        elif self.status != TaskStatus.DONE:
            self.completed_at = None

    def is_overdue(self, today: date) -> bool:
        return (
            self.status != TaskStatus.DONE
            and self.due_date is not None
            and self.due_date < today
        )


@dataclass(kw_only=True)
class EstateNote(EstateRecord):
    body: str
    pinned: bool = False

    def __post_init__(self) -> None:
        super().__post_init__()
        self.body = _require_text(
            self.body, "missing_body", "body is required", max_len=5000
        )


# =============================================================================
# Collaborator invites
# =============================================================================

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+$")
MAX_EMAIL_LENGTH = 254


def normalize_email(value: str | None) -> str | None:
    """Lowercased address, or None when it cannot be an email."""
    text = clean_text(value)
    if text is None:
        return None
    text = text.lower()
    if len(text) > MAX_EMAIL_LENGTH or not _EMAIL_RE.match(text):
        return None
    return text


class InviteStatus(str, Enum):
    PENDING = "PENDING"
    ACCEPTED = "ACCEPTED"
    REVOKED = "REVOKED"
    EXPIRED = "EXPIRED"


@dataclass(kw_only=True)
class EstateInvite(EstateRecord):
    """
    Token invitation to join an estate as EDITOR or VIEWER.

    Only the account whose email matches can accept it, and only while it is
    PENDING and before expires_at.
    """

    email: str
    role: EstateRole
    token: str
    expires_at: datetime
    created_by: str
    status: InviteStatus = InviteStatus.PENDING
    accepted_by: str | None = None
    accepted_at: datetime | None = None
    revoked_at: datetime | None = None

    def __post_init__(self) -> None:
        super().__post_init__()
        email = normalize_email(self.email)
        if email is None:
            raise DomainValidationError("invalid_email", "A valid email is required")
        self.email = email
        try:
            self.role = EstateRole(self.role)
        except ValueError as exc:
            raise DomainValidationError(
                "invalid_role", "role must be EDITOR or VIEWER"
            ) from exc
        if self.role not in ASSIGNABLE_ROLES:
            raise DomainValidationError("invalid_role", "role must be EDITOR or VIEWER")
        if not clean_text(self.token):
            raise DomainValidationError("missing_token", "token is required")
        self.status = InviteStatus(self.status)

    def is_expired(self, now: datetime | None = None) -> bool:
        return self.expires_at <= (now or utcnow())

    def current_status(self, now: datetime | None = None) -> InviteStatus:
        """Stored status, except that a lapsed PENDING invite reads as EXPIRED."""
        if self.status == InviteStatus.PENDING and self.is_expired(now):
            return InviteStatus.EXPIRED
        return self.status


# =============================================================================
# Activity events
# =============================================================================


class EstateEventType(str, Enum):
    ESTATE_CREATED = "ESTATE_CREATED"
    ESTATE_UPDATED = "ESTATE_UPDATED"
    ESTATE_STATUS_CHANGED = "ESTATE_STATUS_CHANGED"
    PROPERTY_CREATED = "PROPERTY_CREATED"
    PROPERTY_UPDATED = "PROPERTY_UPDATED"
    PROPERTY_DELETED = "PROPERTY_DELETED"
    RENT_PAYMENT_RECORDED = "RENT_PAYMENT_RECORDED"
    INVOICE_CREATED = "INVOICE_CREATED"
    INVOICE_STATUS_CHANGED = "INVOICE_STATUS_CHANGED"
    DOCUMENT_CREATED = "DOCUMENT_CREATED"
    DOCUMENT_UPDATED = "DOCUMENT_UPDATED"
    DOCUMENT_DELETED = "DOCUMENT_DELETED"
    NOTE_CREATED = "NOTE_CREATED"
    NOTE_UPDATED = "NOTE_UPDATED"
    NOTE_DELETED = "NOTE_DELETED"
    TASK_CREATED = "TASK_CREATED"
    TASK_UPDATED = "TASK_UPDATED"
    TASK_COMPLETED = "TASK_COMPLETED"
    TASK_DELETED = "TASK_DELETED"
    COLLABORATOR_ADDED = "COLLABORATOR_ADDED"
    COLLABORATOR_ROLE_CHANGED = "COLLABORATOR_ROLE_CHANGED"
    COLLABORATOR_REMOVED = "COLLABORATOR_REMOVED"
    COLLABORATOR_INVITE_SENT = "COLLABORATOR_INVITE_SENT"
    COLLABORATOR_INVITE_REVOKED = "COLLABORATOR_INVITE_REVOKED"


# Older client names still accepted by the activity filter.
EVENT_TYPE_ALIASES: dict[str, EstateEventType] = {
    "DOCUMENT_ADDED": EstateEventType.DOCUMENT_CREATED,
    "DOCUMENT_REMOVED": EstateEventType.DOCUMENT_DELETED,
    "TASK_DONE": EstateEventType.TASK_COMPLETED,
    "NOTE_ADDED": EstateEventType.NOTE_CREATED,
    "STATUS_CHANGED": EstateEventType.ESTATE_STATUS_CHANGED,
}


def normalize_event_type(value: str) -> EstateEventType | None:
    key = (value or "").strip().upper()
    if not key:
        return None
    if key in EVENT_TYPE_ALIASES:
        return EVENT_TYPE_ALIASES[key]
    try:
        return EstateEventType(key)
    except ValueError:
        return None


@dataclass(kw_only=True)
class EstateEvent(EstateRecord):
    type: EstateEventType
    summary: str
    actor_id: str | None = None
    detail: str | None = None
    meta: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        super().__post_init__()
        self.type = EstateEventType(self.type)
        self.summary = _require_text(self.summary, "missing_summary", "summary is required")
