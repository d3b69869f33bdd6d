# mypy: ignore-errors
# tests/v1/test_members.py
"""Tests for administrator member and moderator management."""

from fastapi import status

from tests.conftest import TEST_PASSWORD

MEMBERS = "/api/v1/members/"
MODERATORS = "/api/v1/moderators/"


def test_admin_searches_members(client, admin_headers, member, other_member) -> None:
    response = client.get(MEMBERS, params={"keyword": "bob"}, headers=admin_headers)
    assert response.status_code == status.HTTP_200_OK
    assert [m["id"] for m in response.json()["data"]] == [other_member.id]
    assert "password_hash" not in response.json()["data"][0]

    everyone = client.get(MEMBERS, params={"status": "active"}, headers=admin_headers).json()
    # alice, bob and the administrator's own account
    assert everyone["pagination"]["records"] == 3


def test_members_cannot_manage_accounts(client, member_headers, member, other_member) -> None:
    assert client.get(MEMBERS, headers=member_headers).status_code == status.HTTP_403_FORBIDDEN
    response = client.patch(
        f"{MEMBERS}{other_member.id}", json={"status": "banned"}, headers=member_headers
    )
    assert response.status_code == status.HTTP_403_FORBIDDEN

    own = client.get(f"{MEMBERS}{member.id}", headers=member_headers)
    assert own.status_code == status.HTTP_200_OK
    other = client.get(f"{MEMBERS}{other_member.id}", headers=member_headers)
    assert other.status_code == status.HTTP_403_FORBIDDEN


def test_suspension_blocks_login_and_tokens(client, admin_headers, member, member_headers) -> None:
    response = client.patch(
        f"{MEMBERS}{member.id}", json={"status": "suspended"}, headers=admin_headers
    )
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["status"] == "suspended"

    login = client.post(
        "/api/v1/auth/member/login",
        json={"email": member.email, "password": TEST_PASSWORD},
    )
    assert login.status_code == status.HTTP_403_FORBIDDEN
    assert client.get("/api/v1/appeals/", headers=member_headers).status_code == 401

    client.patch(f"{MEMBERS}{member.id}", json={"status": "active"}, headers=admin_headers)
    assert client.get("/api/v1/appeals/", headers=member_headers).status_code == 200


def test_ban_also_disables_staff_roles(
    client, admin_headers, moderator, moderator_headers
) -> None:
    client.patch(
        f"{MEMBERS}{moderator.member_id}", json={"status": "banned"}, headers=admin_headers
    )
    response = client.get("/api/v1/moderation-actions/", headers=moderator_headers)
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_update_rules(client, admin_headers, administrator, member, other_member) -> None:
    url = f"{MEMBERS}{member.id}"
    renamed = client.patch(
        url, json={"nickname": "alice2", "email_verified": True}, headers=admin_headers
    )
    assert renamed.json()["nickname"] == "alice2"
    assert renamed.json()["email_verified"] is True

    taken = client.patch(url, json={"nickname": other_member.nickname}, headers=admin_headers)
    assert taken.status_code == status.HTTP_409_CONFLICT

    frozen = client.patch(url, json={"email": "new@example.com"}, headers=admin_headers)
    assert frozen.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    self_ban = client.patch(
        f"{MEMBERS}{administrator.member_id}", json={"status": "banned"}, headers=admin_headers
    )
    assert self_ban.status_code == status.HTTP_409_CONFLICT


def test_soft_delete_member(client, admin_headers, administrator, member, member_headers) -> None:
    url = f"{MEMBERS}{member.id}"
    assert client.delete(url, headers=admin_headers).status_code == status.HTTP_204_NO_CONTENT
    assert client.delete(url, headers=admin_headers).status_code == status.HTTP_404_NOT_FOUND
    assert client.get(url, headers=admin_headers).status_code == status.HTTP_404_NOT_FOUND
    assert client.get("/api/v1/appeals/", headers=member_headers).status_code == 401

    own = client.delete(f"{MEMBERS}{administrator.member_id}", headers=admin_headers)
    assert own.status_code == status.HTTP_409_CONFLICT


def test_revoke_and_restore_moderator(
    client, admin_headers, moderator, moderator_headers, second_moderator
) -> None:
    listing = client.get(MODERATORS, headers=admin_headers).json()
    assert listing["pagination"]["records"] == 2

    url = f"{MODERATORS}{moderator.id}"
    revoked = client.patch(url, json={"status": "revoked"}, headers=admin_headers)
    assert revoked.status_code == status.HTTP_200_OK
    assert revoked.json()["status"] == "revoked"
    assert client.get("/api/v1/moderation-actions/", headers=moderator_headers).status_code == 401

    active = client.get(MODERATORS, params={"status": "active"}, headers=admin_headers).json()
    assert [m["id"] for m in active["data"]] == [second_moderator.id]

    client.patch(url, json={"status": "active"}, headers=admin_headers)
    assert client.get("/api/v1/moderation-actions/", headers=moderator_headers).status_code == 200


def test_moderators_cannot_revoke(client, moderator_headers, second_moderator) -> None:
    response = client.patch(
        f"{MODERATORS}{second_moderator.id}", json={"status": "revoked"}, headers=moderator_headers
    )
    assert response.status_code == status.HTTP_403_FORBIDDEN
