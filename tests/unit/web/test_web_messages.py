"""Unit tests for form redirects, flash messages and form input parsing."""

import pytest

from legatepro.application.results import Forbidden, Invalid, NotFound, Unauthenticated
from legatepro.interfaces.api.http.schemas.records import PropertyReq, RentPaymentReq
from legatepro.interfaces.web.forms import form_input
from legatepro.interfaces.web.messages import (
    DEFAULT_ERROR_MESSAGE,
    READ_ONLY_BANNER,
    flash_from_query,
    message_for,
)
from legatepro.interfaces.web.redirects import failure_url

pytestmark = pytest.mark.unit

ORIGIN = "/app/estates/e1/rent/new"
LIST_URL = "/app/estates/e1/rent"


@pytest.mark.parametrize(
    "failure,expected",
    [
        (Unauthenticated(), "/login?callbackUrl=/app/estates/e1/rent/new"),
        (Forbidden(message="read only"), f"{ORIGIN}?forbidden=1"),
        (
            Forbidden(message="no access", code="estate_access"),
            "/app/estates?error=estate_access",
        ),
        (
            Forbidden(message="wrong account", code="invite_email"),
            f"{ORIGIN}?error=invite_email",
        ),
        (NotFound(resource="Estate", message="x"), "/app/estates?error=not_found"),
        (NotFound(resource="Rent payment", message="x"), f"{LIST_URL}?error=not_found"),
        (Invalid(code="invalid_amount", message="x"), f"{ORIGIN}?error=invalid_amount"),
    ],
)
def test_failure_url(failure, expected):
    assert failure_url(failure, origin=ORIGIN, list_url=LIST_URL) == expected


def test_login_callback_is_encoded():
    url = failure_url(Unauthenticated(), origin="/app/estates/a b/rent", list_url=LIST_URL)
    assert url == "/login?callbackUrl=/app/estates/a%20b/rent"


class TestMessages:
    def test_known_and_unknown_codes(self):
        assert message_for("missing_tenant") == "Tenant name is required."
        assert message_for("something_new") == DEFAULT_ERROR_MESSAGE
        assert message_for(None) == DEFAULT_ERROR_MESSAGE

    def test_flash(self):
        assert flash_from_query({}) is None
        assert flash_from_query({"error": "not_found"}) == {
            "kind": "error",
            "code": "not_found",
            "message": "That record no longer exists.",
        }

    def test_forbidden_wins(self):
        flash = flash_from_query({"forbidden": "1", "error": "invalid_amount"})
        assert flash["kind"] == "forbidden"
        assert flash["message"] == READ_ONLY_BANNER


class TestFormInput:
    def test_accepts_camel_and_snake_names(self):
        values = form_input(
            {"tenantName": "Jane", "payment_date": "2024-01-01"}, RentPaymentReq
        )
        assert values == {"tenant_name": "Jane", "payment_date": "2024-01-01"}

    def test_absent_checkboxes_are_false(self):
        values = form_input(
            {"label": "Cabin", "isRented": "on"},
            PropertyReq,
            checkboxes=("is_rented", "is_sold"),
        )
        assert values["is_rented"] == "on"
        assert values["is_sold"] is False
