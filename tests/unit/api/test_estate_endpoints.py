"""
Name: Estate API Tests

Responsibilities:
  - /api/estates CRUD with the caller's role on each estate
  - Estate-scoped resources (tasks, invoices) through the shared router
  - Collaborator grants and revocations (OWNER only)
  - Activity feed pagination and readiness payload over HTTP
"""

import pytest

pytestmark = pytest.mark.unit


# ---------------------------------------------------------------------------
# Estates
# ---------------------------------------------------------------------------


def test_list_estates_includes_role(client, estate, owner, viewer, stranger, headers_for):
    mine = client.get("/api/estates", headers=headers_for(owner)).json()["estates"]
    shared = client.get("/api/estates", headers=headers_for(viewer)).json()["estates"]
    none = client.get("/api/estates", headers=headers_for(stranger)).json()["estates"]

    assert [(e["id"], e["role"]) for e in mine] == [("e1", "OWNER")]
    assert [(e["id"], e["role"]) for e in shared] == [("e1", "VIEWER")]
    assert none == []


def test_create_estate(client, owner, headers_for):
    res = client.post(
        "/api/estates",
        json={"label": "Estate of Bo Chen", "decedentName": "Bo Chen"},
        headers=headers_for(owner),
    )

    assert res.status_code == 201
    estate = res.json()["estate"]
    assert estate["ownerId"] == owner.id
    assert estate["role"] == "OWNER"
    assert estate["status"] == "OPEN"


def test_create_estate_requires_label(client, owner, headers_for):
    res = client.post("/api/estates", json={"label": "  "}, headers=headers_for(owner))

    assert res.status_code == 400
    assert res.json()["reason"] == "missing_label"


def test_update_estate_by_editor(client, estate, editor, headers_for):
    res = client.patch(
        "/api/estates/e1", json={"courtCounty": "Kings"}, headers=headers_for(editor)
    )

    assert res.status_code == 200
    assert res.json()["estate"]["courtCounty"] == "Kings"
    assert res.json()["estate"]["label"] == "Estate of Ada Smith"


def test_delete_estate_is_owner_only(client, estate, owner, editor, headers_for):
    denied = client.delete("/api/estates/e1", headers=headers_for(editor))
    deleted = client.delete("/api/estates/e1", headers=headers_for(owner))
    gone = client.get("/api/estates/e1", headers=headers_for(owner))

    assert denied.status_code == 403
    assert denied.json()["error"] == "Only the estate owner can do this"
    assert deleted.json() == {"id": "e1"}
    assert gone.status_code == 404
    assert gone.json()["error"] == "Estate not found"


def test_unknown_estate(client, owner, headers_for):
    res = client.get("/api/estates/nope", headers=headers_for(owner))

    assert res.status_code == 404


# ---------------------------------------------------------------------------
# Scoped resources
# ---------------------------------------------------------------------------


def test_task_crud(client, estate, editor, headers_for):
    headers = headers_for(editor)

    created = client.post(
        "/api/estates/e1/tasks",
        json={"title": "File inventory", "dueDate": "2024-06-01"},
        headers=headers,
    )
    task_id = created.json()["task"]["id"]
    done = client.patch(
        f"/api/estates/e1/tasks/{task_id}", json={"status": "done"}, headers=headers
    )
    listed = client.get("/api/estates/e1/tasks", headers=headers)
    deleted = client.delete(f"/api/estates/e1/tasks/{task_id}", headers=headers)

    assert created.status_code == 201
    assert created.json()["task"]["status"] == "NOT_STARTED"
    assert done.json()["task"]["status"] == "DONE"
    assert done.json()["task"]["completedAt"] is not None
    assert [t["id"] for t in listed.json()["tasks"]] == [task_id]
    assert deleted.json() == {"id": task_id}


def test_viewer_reads_but_cannot_write(client, estate, viewer, headers_for):
    headers = headers_for(viewer)

    listed = client.get("/api/estates/e1/tasks", headers=headers)
    created = client.post("/api/estates/e1/tasks", json={"title": "x"}, headers=headers)

    assert listed.status_code == 200
    assert created.status_code == 403
    assert created.json()["error"] == "You have read-only access to this estate"


def test_missing_title(client, estate, owner, headers_for):
    res = client.post("/api/estates/e1/tasks", json={}, headers=headers_for(owner))

    assert res.status_code == 400
    assert res.json()["reason"] == "missing_title"


def test_record_of_other_estate_is_not_found(client, estate, owner, headers_for):
    headers = headers_for(owner)
    other = client.post("/api/estates", json={"label": "Other"}, headers=headers).json()
    other_id = other["estate"]["id"]
    note = client.post(
        f"/api/estates/{other_id}/notes", json={"body": "hello"}, headers=headers
    ).json()["note"]

    res = client.get(f"/api/estates/e1/notes/{note['id']}", headers=headers)

    assert res.status_code == 404
    assert res.json()["error"] == "Note not found"


def test_invoice_totals_and_status(client, estate, owner, headers_for):
    headers = headers_for(owner)
    created = client.post(
        "/api/estates/e1/invoices",
        json={
            "issueDate": "2024-03-01",
            "lineItems": [{"label": "Filing", "quantity": 2, "rate": 10000}],
            "taxRate": 0.05,
            "totalAmount": 5,
        },
        headers=headers,
    )
    invoice = created.json()["invoice"]

    paid = client.patch(
        f"/api/estates/e1/invoices/{invoice['id']}/status",
        json={"status": "PAID"},
        headers=headers,
    )
    blank = client.patch(
        f"/api/estates/e1/invoices/{invoice['id']}/status",
        json={"status": ""},
        headers=headers,
    )

    assert created.status_code == 201
    assert (invoice["subtotal"], invoice["taxAmount"], invoice["totalAmount"]) == (
        20000,
        1000,
        21000,
    )
    assert paid.json()["invoice"]["status"] == "PAID"
    assert paid.json()["invoice"]["paidAt"] is not None
    assert blank.status_code == 400
    assert blank.json()["reason"] == "missing_status"


# ---------------------------------------------------------------------------
# Collaborators
# ---------------------------------------------------------------------------


def test_grant_and_revoke(client, estate, owner, stranger, headers_for):
    headers = headers_for(owner)

    granted = client.post(
        "/api/estates/e1/collaborators",
        json={"email": "stranger@example.com", "role": "editor"},
        headers=headers,
    )
    as_stranger = client.get("/api/estates/e1", headers=headers_for(stranger))
    revoked = client.delete(f"/api/estates/e1/collaborators/{stranger.id}", headers=headers)
    after = client.get("/api/estates/e1", headers=headers_for(stranger))

    assert granted.status_code == 201
    assert granted.json()["collaborator"]["role"] == "EDITOR"
    assert as_stranger.json()["estate"]["role"] == "EDITOR"
    assert revoked.status_code == 200
    assert after.status_code == 403


def test_collaborator_rules(client, estate, owner, editor, headers_for):
    headers = headers_for(owner)

    to_owner = client.post(
        "/api/estates/e1/collaborators", json={"userId": owner.id}, headers=headers
    )
    unknown = client.post(
        "/api/estates/e1/collaborators", json={"email": "who@example.com"}, headers=headers
    )
    by_editor = client.post(
        "/api/estates/e1/collaborators",
        json={"email": "stranger@example.com"},
        headers=headers_for(editor),
    )
    absent = client.delete("/api/estates/e1/collaborators/u-nobody", headers=headers)

    assert to_owner.json()["error"] == "Owner already has access"
    assert unknown.json()["reason"] == "unknown_user"
    assert by_editor.status_code == 403
    assert absent.status_code == 404


def test_list_collaborators(client, estate, viewer, headers_for):
    res = client.get("/api/estates/e1/collaborators", headers=headers_for(viewer))

    roles = {c["userId"]: c["role"] for c in res.json()["collaborators"]}
    assert roles == {"u-editor": "EDITOR", "u-viewer": "VIEWER"}


# ---------------------------------------------------------------------------
# Activity + readiness
# ---------------------------------------------------------------------------


def test_activity_feed(client, estate, owner, headers_for):
    headers = headers_for(owner)
    for title in ("One", "Two", "Three"):
        client.post("/api/estates/e1/tasks", json={"title": title}, headers=headers)

    first = client.get(
        "/api/estates/e1/activity", params={"type": "TASK_CREATED", "limit": 2}, headers=headers
    ).json()
    rest = client.get(
        "/api/estates/e1/activity",
        params={"type": "TASK_CREATED", "limit": 2, "cursor": first["nextCursor"]},
        headers=headers,
    ).json()

    assert len(first["events"]) == 2
    assert first["nextCursor"] is not None
    assert len(rest["events"]) == 1
    assert all(e["type"] == "TASK_CREATED" for e in first["events"] + rest["events"])


def test_activity_bad_cursor(client, estate, owner, headers_for):
    res = client.get(
        "/api/estates/e1/activity", params={"cursor": "tomorrow"}, headers=headers_for(owner)
    )

    assert res.status_code == 400
    assert res.json()["error"] == "Invalid cursor"


def test_readiness(client, estate, estate_property, viewer, headers_for):
    res = client.get("/api/estates/e1/readiness", headers=headers_for(viewer))

    assert res.status_code == 200
    body = res.json()
    assert body["estateId"] == "e1"
    assert 0 <= body["score"] <= 100
    assert {"breakdown", "counts", "missing", "atRisk", "generatedAt"} <= set(body)
