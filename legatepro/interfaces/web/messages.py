"""
===============================================================================
CRC CARD — interfaces/web/messages.py
===============================================================================

Responsibilities:
    - Map the `?error=<code>` query codes written by form actions to fixed,
      human-readable messages.
    - Map `?forbidden=1` to the read-only access banner.
    - Build the flash payload a page shows above its content.

Collaborators:
    - interfaces/web/redirects.py: writes the codes.
    - Page templates (outside this package): read flash_from_query().

Notes:
    - Unknown codes fall back to a generic message; the raw code is never
      shown to the user.
===============================================================================
"""

from __future__ import annotations

from typing import Mapping

READ_ONLY_BANNER = (
    "You have read-only access to this estate. Ask the owner for edit access."
)
DEFAULT_ERROR_MESSAGE = "Something went wrong. Please check the form and try again."

ERROR_MESSAGES: dict[str, str] = {
    # rent payments
    "missing_tenant": "Tenant name is required.",
    "missing_property": "Choose the property this payment belongs to.",
    "missing_date": "Payment date is required.",
    "invalid_amount": "Enter an amount greater than zero.",
    "invalid_month": "Month must be between 1 and 12.",
    "invalid_year": "Year must be between 1900 and 2100.",
    # shared field checks
    "invalid_date": "Enter a valid date (YYYY-MM-DD).",
    "invalid_property": "That property does not belong to this estate.",
    "missing_label": "A label is required.",
    "invalid_notes": "Notes are too long.",
    # properties
    "invalid_property_type": "Choose a valid property type.",
    # utilities
    "missing_provider": "Provider name is required.",
    "invalid_utility_type": "Choose a valid utility type.",
    "invalid_website": "Website must start with http:// or https://.",
    "invalid_balance": "Balance due must be zero or more.",
    "invalid_phone": "Phone number is too long.",
    "invalid_account_number": "Account number is too long.",
    # documents
    "missing_subject": "Choose a subject for this document.",
    "invalid_tags": "Tags must be a comma-separated list.",
    # tasks
    "missing_title": "A title is required.",
    "invalid_status": "Choose a valid status.",
    # collaborator invites
    "invite_email": (
        "This invite was sent to a different email address. "
        "Sign in with that account to accept it."
    ),
    "invite_expired": "This invite has expired. Ask the estate owner to send a new one.",
    "invite_revoked": "This invite was revoked by the estate owner.",
    "invite_accepted": "This invite has already been accepted.",
    "owner_has_access": "You already own this estate.",
    # form shape
    "invalid_form": "The form was sent in an unexpected shape. Reload the page and try again.",
    # record lifecycle
    "delete_failed": "We couldn't delete that record. Please try again.",
    "not_found": "That record no longer exists.",
    "estate_access": "You don't have access to that estate.",
}


def message_for(code: str | None) -> str:
    if not code:
        return DEFAULT_ERROR_MESSAGE
    return ERROR_MESSAGES.get(code, DEFAULT_ERROR_MESSAGE)


def flash_from_query(params: Mapping[str, str]) -> dict[str, str] | None:
    """
    Flash payload for a page rendered after a form redirect, or None.

    `forbidden=1` wins over `error=<code>` when both are present.
    """
    if params.get("forbidden") == "1":
        return {"kind": "forbidden", "code": "forbidden", "message": READ_ONLY_BANNER}
    code = (params.get("error") or "").strip()
    if code:
        return {"kind": "error", "code": code, "message": message_for(code)}
    return None
