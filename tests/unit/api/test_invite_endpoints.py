"""
Name: Collaborator Invite API Tests

Responsibilities:
  - /api/estates/{id}/invites list/send/revoke through the real app
  - 201 for a new invite, 200 with previousRole when it is re-sent
  - /invites/{token}/accept grants the role to the matching account only
"""

import pytest

pytestmark = pytest.mark.unit

INVITES = "/api/estates/e1/invites"


def _send(client, headers, **body):
    body = {"email": "stranger@example.com", **body}
    return client.post(INVITES, json=body, headers=headers)


def test_send_and_resend(client, estate, owner, headers_for):
    headers = headers_for(owner)

    first = _send(client, headers, role="EDITOR")
    again = _send(client, headers, role="VIEWER")

    assert first.status_code == 201
    invite = first.json()["invite"]
    assert invite["email"] == "stranger@example.com"
    assert invite["status"] == "PENDING"
    assert first.json()["inviteUrl"] == f"/app/estates/e1/invites/{invite['token']}"
    assert first.json().get("previousRole") is None

    assert again.status_code == 200
    assert again.json()["previousRole"] == "EDITOR"
    assert again.json()["invite"]["role"] == "VIEWER"
    assert again.json()["invite"]["id"] == invite["id"]


def test_send_rejections(client, estate, owner, editor, headers_for):
    assert _send(client, headers_for(editor)).status_code == 403
    assert client.post(INVITES, json={"email": "stranger@example.com"}).status_code == 401

    res = _send(client, headers_for(owner), email="owner@example.com")

    assert res.status_code == 400
    assert res.json()["error"] == "You cannot invite yourself."
    assert res.json()["reason"] == "self_invite"


def test_list_is_owner_only(client, estate, owner, viewer, headers_for):
    _send(client, headers_for(owner))

    listed = client.get(INVITES, headers=headers_for(owner))
    denied = client.get(INVITES, headers=headers_for(viewer))

    assert listed.status_code == 200
    assert [i["email"] for i in listed.json()["invites"]] == ["stranger@example.com"]
    assert denied.status_code == 403


def test_revoke(client, estate, owner, headers_for):
    headers = headers_for(owner)
    token = _send(client, headers).json()["invite"]["token"]

    res = client.delete(INVITES, params={"token": token}, headers=headers)
    missing = client.delete(INVITES, params={"token": "nope"}, headers=headers)
    empty = client.delete(INVITES, headers=headers)

    assert res.status_code == 200
    assert res.json()["invite"]["status"] == "REVOKED"
    assert missing.status_code == 404
    assert empty.status_code == 400
    assert empty.json()["reason"] == "missing_invite"


def test_accept_grants_access(client, estate, owner, stranger, headers_for):
    token = _send(client, headers_for(owner), role="EDITOR").json()["invite"]["token"]
    assert client.get("/api/estates/e1", headers=headers_for(stranger)).status_code == 403

    res = client.post(f"{INVITES}/{token}/accept", headers=headers_for(stranger))

    assert res.status_code == 200
    assert res.json() == {"ok": True, "estateId": "e1", "role": "EDITOR"}
    estate_res = client.get("/api/estates/e1", headers=headers_for(stranger))
    assert estate_res.status_code == 200
    assert estate_res.json()["estate"]["role"] == "EDITOR"


def test_accept_rejections(client, estate, owner, viewer, stranger, headers_for):
    token = _send(client, headers_for(owner)).json()["invite"]["token"]
    url = f"{INVITES}/{token}/accept"

    anonymous = client.post(url)
    mismatch = client.post(url, headers=headers_for(viewer))
    unknown = client.post(f"{INVITES}/nope/accept", headers=headers_for(stranger))

    assert anonymous.status_code == 401
    assert mismatch.status_code == 403
    assert mismatch.json()["error"] == "Invite email does not match your account"
    assert unknown.status_code == 404
    assert unknown.json()["error"] == "Invite not found"

    assert client.post(url, headers=headers_for(stranger)).status_code == 200
    again = client.post(url, headers=headers_for(stranger))
    assert again.status_code == 400
    assert again.json()["error"] == "Invite is ACCEPTED"
