"""
Name: VIEWER Read-Only API Tests

Responsibilities:
  - PATCH and DELETE by a VIEWER answer 403 on every estate-scoped resource
  - The record store is identical before and after the rejected call
"""

import pytest

from legatepro.container import (
    get_document_repository,
    get_invoice_repository,
    get_property_repository,
    get_task_repository,
)

pytestmark = pytest.mark.unit

RESOURCES = {
    # plural: (create body, envelope key, patch body, repository)
    "properties": (
        {"label": "Lake cabin"},
        "property",
        {"label": "Sold"},
        get_property_repository,
    ),
    "documents": (
        {"subject": "LEGAL", "label": "Will"},
        "document",
        {"label": "Old"},
        get_document_repository,
    ),
    "tasks": (
        {"title": "File inventory"},
        "task",
        {"status": "done"},
        get_task_repository,
    ),
    "invoices": (
        {
            "issueDate": "2024-03-01",
            "lineItems": [{"label": "Filing", "quantity": 1, "rate": 5000}],
        },
        "invoice",
        {"taxRate": 0.2},
        get_invoice_repository,
    ),
}


@pytest.mark.parametrize("plural", sorted(RESOURCES))
@pytest.mark.parametrize("method", ["patch", "delete"])
def test_viewer_cannot_change_records(
    client, estate, owner, viewer, headers_for, plural, method
):
    body, key, patch_body, repository = RESOURCES[plural]
    created = client.post(f"/api/estates/e1/{plural}", json=body, headers=headers_for(owner))
    assert created.status_code == 201, created.text
    record_id = created.json()[key]["id"]
    before = repository().list_for_estate("e1")

    url = f"/api/estates/e1/{plural}/{record_id}"
    if method == "patch":
        res = client.patch(url, json=patch_body, headers=headers_for(viewer))
    else:
        res = client.delete(url, headers=headers_for(viewer))

    assert res.status_code == 403
    assert res.json()["error"] == "You have read-only access to this estate"
    assert repository().list_for_estate("e1") == before


def test_viewer_cannot_change_invoice_status(client, estate, owner, viewer, headers_for):
    body, key, _, repository = RESOURCES["invoices"]
    invoice_id = client.post(
        "/api/estates/e1/invoices", json=body, headers=headers_for(owner)
    ).json()[key]["id"]
    before = repository().list_for_estate("e1")

    res = client.patch(
        f"/api/estates/e1/invoices/{invoice_id}/status",
        json={"status": "PAID"},
        headers=headers_for(viewer),
    )

    assert res.status_code == 403
    assert repository().list_for_estate("e1") == before
