"""Unit tests for /api/utilities (utility accounts)."""

import pytest

pytestmark = pytest.mark.unit

ACCOUNT = {
    "estateId": "e1",
    "propertyId": "p1",
    "providerName": "City Water",
    "utilityType": "water",
    "accountNumber": "W-1001",
    "balanceDue": "42.50",
}


def test_create_and_filter(client, estate_property, editor, headers_for):
    headers = headers_for(editor)
    created = client.post("/api/utilities", json=ACCOUNT, headers=headers)
    client.post(
        "/api/utilities",
        json={**ACCOUNT, "providerName": "Grid Power", "utilityType": "electric"},
        headers=headers,
    )

    water = client.get(
        "/api/utilities", params={"estateId": "e1", "type": "Water"}, headers=headers
    )
    by_text = client.get(
        "/api/utilities", params={"estateId": "e1", "q": "grid"}, headers=headers
    )

    assert created.status_code == 201
    assert created.json()["utility"]["balanceDue"] == 42.5
    assert [u["providerName"] for u in water.json()["utilities"]] == ["City Water"]
    assert [u["providerName"] for u in by_text.json()["utilities"]] == ["Grid Power"]


def test_validation(client, estate_property, owner, headers_for):
    headers = headers_for(owner)

    no_provider = client.post(
        "/api/utilities", json={**ACCOUNT, "providerName": ""}, headers=headers
    )
    bad_site = client.post(
        "/api/utilities", json={**ACCOUNT, "website": "ftp://water"}, headers=headers
    )
    foreign_property = client.post(
        "/api/utilities", json={**ACCOUNT, "propertyId": "p-elsewhere"}, headers=headers
    )
    bad_type = client.get("/api/utilities", params={"type": "plasma"}, headers=headers)

    assert no_provider.json()["reason"] == "missing_provider"
    assert bad_site.json()["reason"] == "invalid_website"
    assert foreign_property.json()["reason"] == "invalid_property"
    assert bad_type.status_code == 400
    assert bad_type.json()["reason"] == "invalid_utility_type"


def test_update_and_delete_by_id(client, estate_property, owner, viewer, headers_for):
    account_id = client.post(
        "/api/utilities", json=ACCOUNT, headers=headers_for(owner)
    ).json()["utility"]["id"]

    denied = client.patch(
        f"/api/utilities/{account_id}", json={"balanceDue": 0}, headers=headers_for(viewer)
    )
    patched = client.patch(
        f"/api/utilities/{account_id}", json={"balanceDue": 0}, headers=headers_for(owner)
    )
    deleted = client.delete(f"/api/utilities/{account_id}", headers=headers_for(owner))

    assert denied.status_code == 403
    assert patched.json()["utility"]["balanceDue"] == 0
    assert deleted.json() == {"id": account_id}
