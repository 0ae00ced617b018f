"""
===============================================================================
CRC CARD — identity/auth_users.py
===============================================================================

Module:
    Sessions: Argon2 passwords and signed JWT access tokens

Responsibilities:
    - Hash and verify passwords.
    - Mint a session token for a User and read one back into a User.
    - Find the token on a request (bearer header first, then cookie).
    - FastAPI dependencies: `require_user` (401 when anonymous) and
      `optional_user_id` (None when anonymous).

Collaborators:
    - crosscutting.config.get_settings
    - crosscutting.error_responses (401/403)
    - domain.repositories.UserRepository, via the container
    - context.set_user_context

Notes:
    - Estate use cases receive a user id or None, never a token.
    - Neither tokens nor hashes reach the logs.
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import jwt
from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError, VerifyMismatchError
from fastapi import Header, Request

from ..context import set_user_context
from ..crosscutting.config import get_settings
from ..crosscutting.error_responses import AppHTTPException, forbidden, unauthorized
from ..crosscutting.logger import logger
from ..domain.repositories import UserRepository
from .users import User

SIGNING_ALGORITHM = "HS256"
DEFAULT_SESSION_COOKIE = "legatepro_session"
SESSION_KIND = "session"
REQUIRED_CLAIMS = ("sub", "email", "exp")

_hasher = PasswordHasher()


@dataclass(frozen=True, slots=True)
class AuthSettings:
    jwt_secret: str
    jwt_access_ttl_minutes: int
    jwt_cookie_name: str
    jwt_cookie_secure: bool

    @property
    def ttl_seconds(self) -> int:
        return int(self.jwt_access_ttl_minutes * 60)


def get_auth_settings() -> AuthSettings:
    settings = get_settings()
    return AuthSettings(
        jwt_secret=settings.jwt_secret,
        jwt_access_ttl_minutes=settings.jwt_access_ttl_minutes,
        jwt_cookie_name=settings.jwt_cookie_name,
        jwt_cookie_secure=settings.jwt_cookie_secure,
    )


def session_cookie_name() -> str:
    return get_auth_settings().jwt_cookie_name.strip() or DEFAULT_SESSION_COOKIE


# -- passwords ---------------------------------------------------------------


def hash_password(password: str) -> str:
    return _hasher.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return _hasher.verify(password_hash, password)
    except (VerifyMismatchError, VerificationError, InvalidHashError):
        return False


def authenticate_user(users: UserRepository, email: str, password: str) -> User | None:
    """
    The active account matching the credentials, else None.

    A deactivated account raises 403 instead of looking like a bad password.
    """
    user = users.get_user_by_email((email or "").strip().lower()) if email else None
    if user is None:
        return None
    if not user.is_active:
        logger.warning("inactive account tried to log in", extra={"user_id": user.id})
        raise forbidden("User is inactive")
    return user if verify_password(password, user.password_hash) else None


# -- tokens ------------------------------------------------------------------


def create_access_token(
    user: User, settings: AuthSettings | None = None
) -> tuple[str, int]:
    """Return (token, lifetime in seconds)."""
    cfg = settings or get_auth_settings()
    issued = datetime.now(timezone.utc)
    lifetime = cfg.ttl_seconds
    claims = {
        "sub": user.id,
        "email": user.email,
        "iat": issued,
        "exp": issued + timedelta(seconds=lifetime),
        "kind": SESSION_KIND,
    }
    return jwt.encode(claims, cfg.jwt_secret, algorithm=SIGNING_ALGORITHM), lifetime


def read_access_token(token: str, settings: AuthSettings | None = None) -> str:
    """User id carried by a valid session token; 401 otherwise."""
    cfg = settings or get_auth_settings()
    try:
        claims = jwt.decode(
            token,
            cfg.jwt_secret,
            algorithms=[SIGNING_ALGORITHM],
            options={"require": list(REQUIRED_CLAIMS)},
        )
    except jwt.ExpiredSignatureError as exc:
        raise unauthorized("Token expired") from exc
    except jwt.InvalidTokenError as exc:
        raise unauthorized("Invalid token") from exc

    if claims.get("kind", SESSION_KIND) != SESSION_KIND or not claims.get("sub"):
        raise unauthorized("Invalid token")
    return str(claims["sub"])


def resolve_user(users: UserRepository, token: str) -> User:
    user = users.get_user(read_access_token(token))
    if user is None:
        raise unauthorized("Invalid token")
    if not user.is_active:
        raise forbidden("User is inactive")
    return user


def token_from_request(request: Request, authorization: str | None) -> str | None:
    scheme, _, credentials = (authorization or "").strip().partition(" ")
    if scheme.lower() == "bearer" and credentials.strip():
        return credentials.strip()
    return request.cookies.get(session_cookie_name()) or None


# -- dependencies ------------------------------------------------------------


def _users() -> UserRepository:
    from ..container import get_user_repository

    return get_user_repository()


def _attach(request: Request, user: User) -> None:
    request.state.user = user
    set_user_context(user.id)


async def require_user(
    request: Request,
    authorization: str | None = Header(None, alias="Authorization"),
) -> User:
    token = token_from_request(request, authorization)
    if token is None:
        raise unauthorized("Missing bearer token")
    user = resolve_user(_users(), token)
    _attach(request, user)
    return user


async def optional_user_id(
    request: Request,
    authorization: str | None = Header(None, alias="Authorization"),
) -> str | None:
    """
    Id of the signed-in user, or None.

    Rejected sessions are treated as anonymous; estate operations then answer
    Unauthenticated in whatever shape their surface uses (JSON 401 or a login
    redirect).
    """
    token = token_from_request(request, authorization)
    if token is None:
        return None
    try:
        user = resolve_user(_users(), token)
    except AppHTTPException as exc:
        logger.info("session rejected", extra={"reason": str(exc.detail)})
        return None
    _attach(request, user)
    return user.id
