"""
===============================================================================
CRC CARD — legatepro/api/auth_routes.py (accounts and sessions)
===============================================================================

Responsibilities:
  - POST /auth/register, POST /auth/login, POST /auth/logout, GET /auth/me.
  - Issue the session as both a bearer token (JSON clients) and an httpOnly
    cookie (browser form actions read the cookie).
  - Lower-case and trim emails before any lookup or write.

Collaborators:
  - identity.auth_users: hash_password, authenticate_user,
    create_access_token, require_user, session_cookie_name
  - container.get_user_repository
  - interfaces.api.http.schemas.CamelModel (camelCase on the wire)

Notes:
  - Unknown email and wrong password answer the same 401.
  - Logout needs no session and always succeeds.
===============================================================================
"""

from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, Depends, Response
from pydantic import Field, field_validator

from ..container import get_user_repository
from ..crosscutting.error_responses import (
    OPENAPI_ERROR_RESPONSES,
    conflict,
    unauthorized,
)
from ..crosscutting.logger import logger
from ..domain.repositories import UserRepository
from ..identity.auth_users import (
    authenticate_user,
    create_access_token,
    get_auth_settings,
    hash_password,
    require_user,
    session_cookie_name,
)
from ..identity.users import User
from ..interfaces.api.http.schemas import CamelModel

router = APIRouter(prefix="/auth", tags=["auth"], responses=OPENAPI_ERROR_RESPONSES)

MIN_PASSWORD_LENGTH = 8


class Credentials(CamelModel):
    email: str = Field(..., min_length=3, max_length=320)
    password: str = Field(..., min_length=1, max_length=512)

    @field_validator("email")
    @classmethod
    def _normalize_email(cls, value: str) -> str:
        return value.strip().lower()


class Registration(Credentials):
    password: str = Field(..., min_length=MIN_PASSWORD_LENGTH, max_length=512)
    name: str | None = Field(default=None, max_length=200)


class AccountRes(CamelModel):
    id: str
    email: str
    name: str | None = None
    is_active: bool
    created_at: datetime | None = None


class SessionRes(CamelModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int
    user: AccountRes


def _write_session_cookie(response: Response, token: str | None, max_age: int) -> None:
    """Set the session cookie, or expire it when `token` is None."""
    secure = get_auth_settings().jwt_cookie_secure
    if token is None:
        response.delete_cookie(
            session_cookie_name(), path="/", samesite="lax", secure=secure
        )
        return
    response.set_cookie(
        session_cookie_name(),
        token,
        max_age=max_age,
        path="/",
        httponly=True,
        samesite="lax",
        secure=secure,
    )


@router.post("/register", response_model=AccountRes, status_code=201)
def register(
    req: Registration,
    users: UserRepository = Depends(get_user_repository),
):
    """Create an account; 409 when the email is taken."""
    if users.get_user_by_email(req.email) is not None:
        raise conflict("Email already registered")

    account = users.create_user(
        User(
            email=req.email,
            password_hash=hash_password(req.password),
            name=(req.name or "").strip() or None,
        )
    )
    logger.info("account registered", extra={"user_id": account.id})
    return AccountRes.model_validate(account)


@router.post("/login", response_model=SessionRes)
def login(
    req: Credentials,
    response: Response,
    users: UserRepository = Depends(get_user_repository),
):
    user = authenticate_user(users, req.email, req.password)
    if user is None:
        raise unauthorized("Invalid credentials")

    token, expires_in = create_access_token(user)
    _write_session_cookie(response, token, expires_in)
    logger.info("session started", extra={"user_id": user.id})
    return SessionRes(
        access_token=token,
        expires_in=expires_in,
        user=AccountRes.model_validate(user),
    )


@router.post("/logout")
def logout(response: Response):
    _write_session_cookie(response, None, 0)
    return {"ok": True}


@router.get("/me", response_model=AccountRes)
def me(user: User = Depends(require_user)):
    return AccountRes.model_validate(user)


__all__ = ["router"]
