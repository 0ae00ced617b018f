"""
Name: Estate Page Paths

Responsibilities:
  - Build the canonical paths of server-rendered estate pages
  - List the views embedding a resource, i.e. what a mutation must invalidate

Collaborators:
  - application.guards: invalidates views_for(...) after a mutation
  - interfaces.web: redirect targets of form actions

Notes:
  - Property-scoped resources (rent, utilities) are also embedded in the parent
    property's rollup page and its per-resource tab
"""

from __future__ import annotations

from urllib.parse import quote

APP_ROOT = "/app"
ESTATES_INDEX = f"{APP_ROOT}/estates"
LOGIN_PATH = "/login"


def estate_path(estate_id: str) -> str:
    return f"{ESTATES_INDEX}/{estate_id}"


def list_path(estate_id: str, segment: str) -> str:
    return f"{estate_path(estate_id)}/{segment}"


def detail_path(estate_id: str, segment: str, record_id: str) -> str:
    return f"{list_path(estate_id, segment)}/{record_id}"


def property_path(estate_id: str, property_id: str) -> str:
    return detail_path(estate_id, "properties", property_id)


def invite_path(estate_id: str, token: str) -> str:
    """Page where an invited person accepts `token`."""
    return detail_path(estate_id, "invites", token)


def login_redirect(callback_path: str) -> str:
    return f"{LOGIN_PATH}?callbackUrl={quote(callback_path, safe='/')}"


def views_for(
    estate_id: str,
    segment: str,
    record_id: str | None = None,
    *,
    property_id: str | None = None,
) -> list[str]:
    """Pages that embed one resource: detail, list, overview, property rollup."""
    paths: list[str] = []
    if record_id:
        paths.append(detail_path(estate_id, segment, record_id))
    paths.append(list_path(estate_id, segment))
    paths.append(estate_path(estate_id))
    if property_id:
        paths.append(property_path(estate_id, property_id))
        paths.append(f"{property_path(estate_id, property_id)}/{segment}")
    return paths


def new_path(estate_id: str, segment: str) -> str:
    return f"{list_path(estate_id, segment)}/new"


def edit_path(estate_id: str, segment: str, record_id: str) -> str:
    return f"{detail_path(estate_id, segment, record_id)}/edit"
