"""
Name: LegatePro Management CLI

Responsibilities:
  - create-user: register an account (idempotent on email)
  - grant / revoke: manage estate collaborators on behalf of the owner
  - access: print the role a user resolves to on an estate

Collaborators:
  - container: repositories, access resolver, collaborator use cases
  - identity.auth_users.hash_password
  - infrastructure.db.pool: opened when DATABASE_URL is configured

Exit codes:
  0 ok, 1 unauthenticated/unknown actor, 2 invalid input,
  3 forbidden, 4 not found
"""

from __future__ import annotations

import argparse
import getpass
import sys
import uuid
from typing import Sequence

from .application.results import (
    Forbidden,
    Invalid,
    NotFound,
    Ok,
    Outcome,
    Unauthenticated,
)
from .container import (
    get_access_resolver,
    get_collaborator_use_cases,
    get_user_repository,
)
from .context import clear_context, set_request_context
from .crosscutting.config import get_settings
from .domain.access import EstateAccess
from .identity.auth_users import hash_password
from .identity.users import User
from .infrastructure.db.pool import close_pool, init_pool

EXIT_OK = 0
EXIT_UNAUTHENTICATED = 1
EXIT_INVALID = 2
EXIT_FORBIDDEN = 3
EXIT_NOT_FOUND = 4


def exit_code_for(outcome: object) -> int:
    """Map a tagged outcome (or an EstateAccess) to a process exit code."""
    if isinstance(outcome, (Ok, EstateAccess)):
        return EXIT_OK
    if isinstance(outcome, Invalid):
        return EXIT_INVALID
    if isinstance(outcome, Forbidden):
        return EXIT_FORBIDDEN
    if isinstance(outcome, NotFound):
        return EXIT_NOT_FOUND
    if isinstance(outcome, Unauthenticated):
        return EXIT_UNAUTHENTICATED
    return EXIT_INVALID


def _report(outcome: Outcome) -> int:
    if not isinstance(outcome, Ok):
        print(f"error: {outcome.message}", file=sys.stderr)
    return exit_code_for(outcome)


def _resolve_user_id(ref: str) -> str | None:
    """Accept a user id or an email address."""
    users = get_user_repository()
    user = users.get_user_by_email(ref) if "@" in ref else users.get_user(ref)
    return user.id if user is not None else None


# -----------------------------------------------------------------------------
# Commands
# -----------------------------------------------------------------------------


def cmd_create_user(args: argparse.Namespace) -> int:
    email = (args.email or "").strip().lower()
    if not email:
        print("error: email is required", file=sys.stderr)
        return EXIT_INVALID

    users = get_user_repository()
    existing = users.get_user_by_email(email)
    if existing is not None:
        print(f"User already exists: id={existing.id} email={email}")
        return EXIT_OK

    password = args.password or getpass.getpass("Password: ")
    if len(password) < 8:
        print("error: password must be at least 8 characters", file=sys.stderr)
        return EXIT_INVALID

    user = users.create_user(
        User(
            email=email,
            password_hash=hash_password(password),
            name=(args.name or "").strip() or None,
            is_active=not args.inactive,
        )
    )
    print(f"Created user: id={user.id} email={user.email}")
    return EXIT_OK


def cmd_grant(args: argparse.Namespace) -> int:
    actor_id = _resolve_user_id(args.actor)
    if actor_id is None:
        print(f"error: unknown actor {args.actor}", file=sys.stderr)
        return EXIT_UNAUTHENTICATED

    target = {"email": args.user} if "@" in args.user else {"user_id": args.user}
    outcome = get_collaborator_use_cases().add(
        args.estate, actor_id, {**target, "role": args.role}
    )
    if isinstance(outcome, Ok):
        entry = outcome.value
        print(f"Granted {entry.role.value} on {entry.estate_id} to {entry.user_id}")
    return _report(outcome)


def cmd_revoke(args: argparse.Namespace) -> int:
    actor_id = _resolve_user_id(args.actor)
    if actor_id is None:
        print(f"error: unknown actor {args.actor}", file=sys.stderr)
        return EXIT_UNAUTHENTICATED

    target_id = _resolve_user_id(args.user) or args.user
    outcome = get_collaborator_use_cases().remove(args.estate, actor_id, target_id)
    if isinstance(outcome, Ok):
        print(f"Revoked access on {args.estate} for {target_id}")
    return _report(outcome)


def cmd_access(args: argparse.Namespace) -> int:
    user_id = _resolve_user_id(args.user)
    if user_id is None:
        print(f"error: unknown user {args.user}", file=sys.stderr)
        return EXIT_NOT_FOUND

    result = get_access_resolver().resolve(args.estate, user_id)
    if isinstance(result, EstateAccess):
        print(
            f"role={result.role.value} "
            f"can_edit={str(result.can_edit).lower()} "
            f"can_view_sensitive={str(result.can_view_sensitive).lower()}"
        )
    else:
        print(f"no access: {result.message}", file=sys.stderr)
    return exit_code_for(result)


# -----------------------------------------------------------------------------
# Entry point
# -----------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="legatepro", description="LegatePro management commands."
    )
    sub = parser.add_subparsers(dest="command", required=True)

    create = sub.add_parser("create-user", help="Create a user (idempotent)")
    create.add_argument("--email", required=True)
    create.add_argument("--password", help="Omit to be prompted securely")
    create.add_argument("--name")
    create.add_argument("--inactive", action="store_true")
    create.set_defaults(handler=cmd_create_user)

    grant = sub.add_parser("grant", help="Grant a collaborator role on an estate")
    grant.add_argument("--estate", required=True)
    grant.add_argument("--user", required=True, help="User id or email")
    grant.add_argument("--role", required=True, choices=["EDITOR", "VIEWER"])
    grant.add_argument("--actor", required=True, help="Estate owner (id or email)")
    grant.set_defaults(handler=cmd_grant)

    revoke = sub.add_parser("revoke", help="Remove a collaborator from an estate")
    revoke.add_argument("--estate", required=True)
    revoke.add_argument("--user", required=True, help="User id or email")
    revoke.add_argument("--actor", required=True, help="Estate owner (id or email)")
    revoke.set_defaults(handler=cmd_revoke)

    access = sub.add_parser("access", help="Show the role a user resolves to")
    access.add_argument("--estate", required=True)
    access.add_argument("--user", required=True, help="User id or email")
    access.set_defaults(handler=cmd_access)

    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = get_settings()
    uses_postgres = settings.uses_postgres()
    if uses_postgres:
        init_pool(
            database_url=settings.database_url,
            min_size=settings.db_pool_min_size,
            max_size=settings.db_pool_max_size,
        )
    set_request_context(
        request_id=f"cli-{uuid.uuid4().hex[:12]}", method="CLI", path=args.command
    )
    try:
        return args.handler(args)
    finally:
        clear_context()
        if uses_postgres:
            close_pool()


if __name__ == "__main__":
    sys.exit(main())
