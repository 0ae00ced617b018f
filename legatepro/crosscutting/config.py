"""
Name: LegatePro Settings

Responsibilities:
  - One typed view of the environment (pydantic-settings, optional .env)
  - Reject unusable values at startup instead of at first use
  - Boot with no environment at all: in-memory store, no Redis, dev secret

Collaborators:
  - api/main.py: CORS and pool lifespan
  - container.py: adapter selection (in-memory vs Postgres/Redis)
  - identity/auth_users.py: session token and cookie settings
  - crosscutting/logger.py: level and output format

Notes:
  - Cached; tests call get_settings.cache_clear() after changing the env
  - DATABASE_URL="" selects the in-memory record store
"""

from functools import lru_cache

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

SENSITIVE_POLICY_NON_VIEWER = "non_viewer"
SENSITIVE_POLICY_OWNER_ONLY = "owner_only"
SENSITIVE_POLICIES = frozenset({SENSITIVE_POLICY_NON_VIEWER, SENSITIVE_POLICY_OWNER_ONLY})

TEST_ENVIRONMENTS = frozenset({"test", "testing", "ci"})
WEAK_SECRETS = frozenset({"dev-secret", "changeme", "change-me", "password", "secret"})
MIN_PRODUCTION_SECRET_LENGTH = 32


class Settings(BaseSettings):
    """
    Environment-backed settings.

    Storage: database_url, db_pool_min_size, db_pool_max_size,
    db_statement_timeout_ms. Cache: redis_url, page_cache_ttl_seconds.
    Sessions: jwt_secret, jwt_access_ttl_minutes, jwt_cookie_name,
    jwt_cookie_secure. Estate rules: sensitive_documents_policy,
    events_default_limit, invite_ttl_days, max_active_invites.
    """

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "development"
    log_level: str = "INFO"
    log_json: bool = True

    allowed_origins: str = "http://localhost:3000"
    cors_allow_credentials: bool = True
    max_body_bytes: int = 1024 * 1024

    database_url: str = ""
    db_pool_min_size: int = 1
    db_pool_max_size: int = 10
    db_statement_timeout_ms: int = 15000

    redis_url: str = ""
    page_cache_ttl_seconds: int = 300

    jwt_secret: str = "dev-secret"
    jwt_access_ttl_minutes: int = 12 * 60
    jwt_cookie_name: str = "legatepro_session"
    jwt_cookie_secure: bool = False

    sensitive_documents_policy: str = SENSITIVE_POLICY_NON_VIEWER
    events_default_limit: int = 25
    invite_ttl_days: int = 7
    max_active_invites: int = 50

    @field_validator("sensitive_documents_policy")
    @classmethod
    def _known_policy(cls, value: str) -> str:
        policy = (value or SENSITIVE_POLICY_NON_VIEWER).strip().lower()
        if policy not in SENSITIVE_POLICIES:
            raise ValueError(
                "sensitive_documents_policy must be one of: "
                + ", ".join(sorted(SENSITIVE_POLICIES))
            )
        return policy

    @field_validator(
        "page_cache_ttl_seconds",
        "jwt_access_ttl_minutes",
        "max_body_bytes",
        "invite_ttl_days",
        "max_active_invites",
    )
    @classmethod
    def _positive(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("must be greater than 0")
        return value

    @field_validator("events_default_limit")
    @classmethod
    def _page_size(cls, value: int) -> int:
        if not 1 <= value <= 100:
            raise ValueError("events_default_limit must be between 1 and 100")
        return value

    @model_validator(mode="after")
    def _production_ready(self) -> "Settings":
        if not self.is_production():
            return self

        problems = []
        secret = self.jwt_secret.strip()
        if secret in WEAK_SECRETS or len(secret) < MIN_PRODUCTION_SECRET_LENGTH:
            problems.append(
                f"JWT_SECRET must be a non-default value of at least "
                f"{MIN_PRODUCTION_SECRET_LENGTH} characters"
            )
        if not self.jwt_cookie_secure:
            problems.append("JWT_COOKIE_SECURE must be true")
        if not self.database_url.strip():
            problems.append("DATABASE_URL is required")
        if problems:
            raise ValueError("production settings rejected: " + "; ".join(problems))
        return self

    def get_allowed_origins_list(self) -> list[str]:
        return [o.strip() for o in self.allowed_origins.split(",") if o.strip()]

    def is_production(self) -> bool:
        return self.app_env.strip().lower() == "production"

    def is_test(self) -> bool:
        return self.app_env.strip().lower() in TEST_ENVIRONMENTS

    def uses_postgres(self) -> bool:
        return bool(self.database_url.strip()) and not self.is_test()


@lru_cache
def get_settings() -> Settings:
    return Settings()
