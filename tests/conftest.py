"""
Name: Pytest Configuration and Shared Fixtures

Responsibilities:
  - Force the test environment (in-memory store and page cache)
  - Reset cached settings and container singletons between tests
  - Seed users, an estate and its collaborators
  - Provide a TestClient and bearer headers per user

Collaborators:
  - legatepro.container: repositories and the reset hook
  - legatepro.identity.auth_users: password hashing and access tokens
  - fastapi.testclient: HTTP-level tests

Notes:
  - Every test starts from an empty InMemoryRecordStore
  - Estate "e1" is owned by u-owner; u-editor is EDITOR, u-viewer is VIEWER,
    u-stranger holds no role
"""

import os

os.environ.setdefault("APP_ENV", "test")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from legatepro.crosscutting import config as app_config  # noqa: E402

app_config.Settings.model_config["env_file"] = None

from legatepro.container import (  # noqa: E402
    get_collaborator_repository,
    get_estate_repository,
    get_page_cache,
    get_property_repository,
    get_user_repository,
    reset_container,
)
from legatepro.domain.access import EstateRole  # noqa: E402
from legatepro.domain.entities import Estate, EstateCollaborator, Property  # noqa: E402
from legatepro.identity.auth_users import (  # noqa: E402
    create_access_token,
    hash_password,
)
from legatepro.identity.users import User  # noqa: E402

TEST_PASSWORD = "correct-horse-battery"
_PASSWORD_HASH = hash_password(TEST_PASSWORD)

ESTATE_ID = "e1"
PROPERTY_ID = "p1"


def pytest_configure(config) -> None:
    config.addinivalue_line(
        "markers", "unit: Unit tests (fast, no external dependencies)"
    )


@pytest.fixture(autouse=True)
def _fresh_container():
    """R: Fresh settings, store, cache and guard for every test."""
    app_config.get_settings.cache_clear()
    reset_container()
    yield
    app_config.get_settings.cache_clear()
    reset_container()


# ============================================================================
# Users
# ============================================================================


def make_user(user_id: str, email: str, *, is_active: bool = True) -> User:
    return get_user_repository().create_user(
        User(
            id=user_id,
            email=email,
            password_hash=_PASSWORD_HASH,
            is_active=is_active,
        )
    )


@pytest.fixture
def owner() -> User:
    return make_user("u-owner", "owner@example.com")


@pytest.fixture
def editor() -> User:
    return make_user("u-editor", "editor@example.com")


@pytest.fixture
def viewer() -> User:
    return make_user("u-viewer", "viewer@example.com")


@pytest.fixture
def stranger() -> User:
    return make_user("u-stranger", "stranger@example.com")


# ============================================================================
# Estate + collaborators
# ============================================================================


@pytest.fixture
def estate(owner, editor, viewer, stranger) -> Estate:
    """R: Estate e1 with one EDITOR and one VIEWER collaborator."""
    saved = get_estate_repository().create_estate(
        Estate(id=ESTATE_ID, owner_id=owner.id, label="Estate of Ada Smith")
    )
    collaborators = get_collaborator_repository()
    collaborators.upsert_collaborator(
        EstateCollaborator(
            estate_id=saved.id, user_id=editor.id, role=EstateRole.EDITOR
        )
    )
    collaborators.upsert_collaborator(
        EstateCollaborator(
            estate_id=saved.id, user_id=viewer.id, role=EstateRole.VIEWER
        )
    )
    return saved


@pytest.fixture
def estate_property(estate) -> Property:
    return get_property_repository().add(
        Property(
            id=PROPERTY_ID,
            estate_id=estate.id,
            owner_id=estate.owner_id,
            label="12 Elm Street",
        )
    )


# ============================================================================
# HTTP
# ============================================================================


def auth_headers(user: User) -> dict[str, str]:
    token, _ = create_access_token(user)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def headers_for():
    """R: Bearer headers for a seeded user."""
    return auth_headers


@pytest.fixture
def client() -> TestClient:
    from legatepro.api.main import create_app

    return TestClient(create_app())


# ============================================================================
# Page cache
# ============================================================================


@pytest.fixture
def revalidated(monkeypatch) -> list[str]:
    """R: Paths the container's page cache is asked to drop, in call order."""
    cache = get_page_cache()
    paths: list[str] = []
    forward = cache.revalidate

    def _record(batch):
        batch = list(batch)
        paths.extend(batch)
        forward(batch)

    monkeypatch.setattr(cache, "revalidate", _record)
    return paths
