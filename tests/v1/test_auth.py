# mypy: ignore-errors
# tests/v1/test_auth.py
"""Tests for registration, login and token refresh."""

from fastapi import status

from discuss_board.db.time import utcnow
from discuss_board.models import Administrator, ConsentRecord, Moderator
from discuss_board.models.account import MemberStatus, Role
from tests.conftest import TEST_PASSWORD, bearer

CONSENT = [
    {"policy_type": "privacy_policy", "policy_version": "2024-01"},
    {"policy_type": "terms_of_service", "policy_version": "2024-01"},
]


def _join(client, **overrides):
    payload = {
        "email": "carol@example.com",
        "password": "long-enough-secret",
        "nickname": "carol",
        "consent": CONSENT,
    }
    payload.update(overrides)
    return client.post("/api/v1/auth/member/join", json=payload)


def test_member_join(client, db_session) -> None:
    """A member registers with mandatory consents and receives tokens."""
    response = _join(client)
    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()
    assert data["type"] == "member"
    assert data["member"]["nickname"] == "carol"
    assert data["member"]["deleted_at"] is None
    assert "password_hash" not in data["member"]
    assert data["token"]["access"]
    assert data["token"]["expired_at"].endswith("Z")

    consents = db_session.query(ConsentRecord).filter_by(member_id=data["id"]).all()
    assert sorted(c.policy_type for c in consents) == ["privacy_policy", "terms_of_service"]


def test_member_join_requires_consent(client) -> None:
    response = _join(client, consent=CONSENT[:1])
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
    assert response.json()["code"] == "validation_error"
    assert "terms_of_service" in response.json()["detail"]


def test_member_join_short_password(client) -> None:
    response = _join(client, password="short")
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


def test_member_join_duplicate(client, member) -> None:
    response = _join(client, email=member.email)
    assert response.status_code == status.HTTP_409_CONFLICT
    assert response.json()["code"] == "conflict"

    response = _join(client, nickname=member.nickname)
    assert response.status_code == status.HTTP_409_CONFLICT


def test_member_login(client, member) -> None:
    response = client.post(
        "/api/v1/auth/member/login",
        json={"email": member.email, "password": TEST_PASSWORD},
    )
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["id"] == member.id


def test_member_login_bad_password(client, member) -> None:
    response = client.post(
        "/api/v1/auth/member/login",
        json={"email": member.email, "password": "wrong-password"},
    )
    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json()["code"] == "unauthorized"


def test_suspended_member_cannot_login(client, member, db_session) -> None:
    member.status = MemberStatus.SUSPENDED
    db_session.flush()

    response = client.post(
        "/api/v1/auth/member/login",
        json={"email": member.email, "password": TEST_PASSWORD},
    )
    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_moderator_login(client, moderator, db_session) -> None:
    email = moderator.member.email
    response = client.post(
        "/api/v1/auth/moderator/login",
        json={"email": email, "password": TEST_PASSWORD},
    )
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["id"] == moderator.id
    assert response.json()["type"] == "moderator"


def test_plain_member_cannot_login_as_moderator(client, member) -> None:
    response = client.post(
        "/api/v1/auth/moderator/login",
        json={"email": member.email, "password": TEST_PASSWORD},
    )
    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_administrator_promotes_moderator(client, admin_headers, member, db_session) -> None:
    response = client.post(
        "/api/v1/auth/moderator/join",
        json={"member_id": member.id},
        headers=admin_headers,
    )
    assert response.status_code == status.HTTP_201_CREATED
    moderator = db_session.query(Moderator).filter_by(member_id=member.id).one()
    assert response.json()["id"] == moderator.id

    again = client.post(
        "/api/v1/auth/moderator/join",
        json={"member_id": member.id},
        headers=admin_headers,
    )
    assert again.status_code == status.HTTP_409_CONFLICT


def test_member_cannot_promote_moderator(client, member_headers, other_member) -> None:
    response = client.post(
        "/api/v1/auth/moderator/join",
        json={"member_id": other_member.id},
        headers=member_headers,
    )
    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_first_administrator_bootstraps(client, member, db_session) -> None:
    response = client.post(
        "/api/v1/auth/administrator/join",
        json={"email": member.email, "password": TEST_PASSWORD},
    )
    assert response.status_code == status.HTTP_201_CREATED
    assert db_session.query(Administrator).filter_by(member_id=member.id).count() == 1

    login = client.post(
        "/api/v1/auth/administrator/login",
        json={"email": member.email, "password": TEST_PASSWORD},
    )
    assert login.status_code == status.HTTP_200_OK
    assert login.json()["type"] == "administrator"


def test_later_administrators_need_an_administrator(
    client, administrator, member, member_headers, admin_headers
) -> None:
    response = client.post(
        "/api/v1/auth/administrator/join",
        json={"email": member.email, "password": TEST_PASSWORD},
    )
    assert response.status_code == status.HTTP_403_FORBIDDEN

    response = client.post(
        "/api/v1/auth/administrator/join",
        json={"member_id": member.id},
        headers=member_headers,
    )
    assert response.status_code == status.HTTP_403_FORBIDDEN

    response = client.post(
        "/api/v1/auth/administrator/join",
        json={"member_id": member.id},
        headers=admin_headers,
    )
    assert response.status_code == status.HTTP_201_CREATED


def test_refresh_issues_new_pair(client, member) -> None:
    login = client.post(
        "/api/v1/auth/member/login",
        json={"email": member.email, "password": TEST_PASSWORD},
    ).json()

    response = client.post(
        "/api/v1/auth/member/refresh",
        json={"refresh_token": login["token"]["refresh"]},
    )
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["id"] == member.id
    assert response.json()["token"]["access"]


def test_refresh_rejects_access_token_and_wrong_role(client, member) -> None:
    login = client.post(
        "/api/v1/auth/member/login",
        json={"email": member.email, "password": TEST_PASSWORD},
    ).json()

    response = client.post(
        "/api/v1/auth/member/refresh",
        json={"refresh_token": login["token"]["access"]},
    )
    assert response.status_code == status.HTTP_401_UNAUTHORIZED

    response = client.post(
        "/api/v1/auth/moderator/refresh",
        json={"refresh_token": login["token"]["refresh"]},
    )
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_garbage_token_rejected(client) -> None:
    response = client.get(
        "/api/v1/notifications/",
        headers={"Authorization": "Bearer not-a-jwt"},
    )
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_missing_token_rejected(client) -> None:
    response = client.get("/api/v1/notifications/")
    assert response.status_code in {status.HTTP_401_UNAUTHORIZED, status.HTTP_403_FORBIDDEN}


def test_deleted_member_token_rejected(client, member, member_headers, db_session) -> None:
    member.deleted_at = utcnow()
    db_session.flush()

    response = client.get("/api/v1/notifications/", headers=member_headers)
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_token_for_unknown_role_record_rejected(client, member) -> None:
    headers = bearer(member.id, Role.MODERATOR)
    response = client.get("/api/v1/moderation-actions/", headers=headers)
    assert response.status_code == status.HTTP_401_UNAUTHORIZED
