# mypy: ignore-errors
# tests/v1/test_moderation_actions.py
"""Tests for the moderation action endpoints."""

from fastapi import status

BASE = "/api/v1/moderation-actions/"


def test_create_and_read_back(client, moderator_headers, member) -> None:
    """Creating a warn action and reading it back returns the same fields."""
    response = client.post(
        BASE,
        json={
            "target_member_id": member.id,
            "action_type": "warn",
            "action_reason": "be civil",
        },
        headers=moderator_headers,
    )
    assert response.status_code == status.HTTP_201_CREATED
    created = response.json()
    assert created["status"] == "active"
    assert created["appeal_id"] is None
    assert created["target_post_id"] is None
    assert created["effective_until"] is None
    assert created["created_at"].endswith("Z")

    fetched = client.get(f"{BASE}{created['id']}", headers=moderator_headers)
    assert fetched.status_code == status.HTTP_200_OK
    data = fetched.json()
    for key in ("action_type", "action_reason", "target_member_id", "target_post_id",
                "target_comment_id"):
        assert data[key] == created[key]


def test_create_unknown_type(client, moderator_headers, member) -> None:
    response = client.post(
        BASE,
        json={"target_member_id": member.id, "action_type": "smite", "action_reason": "x"},
        headers=moderator_headers,
    )
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


def test_create_with_two_targets(client, moderator_headers, member, test_post) -> None:
    response = client.post(
        BASE,
        json={
            "target_member_id": member.id,
            "target_post_id": test_post.id,
            "action_type": "warn",
            "action_reason": "x",
        },
        headers=moderator_headers,
    )
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
    assert response.json()["code"] == "validation_error"


def test_member_cannot_create(client, member_headers, other_member) -> None:
    response = client.post(
        BASE,
        json={"target_member_id": other_member.id, "action_type": "warn", "action_reason": "x"},
        headers=member_headers,
    )
    assert response.status_code == status.HTTP_403_FORBIDDEN
    assert response.json()["code"] == "forbidden"


def test_update_ownership(
    client, moderator_headers, second_moderator_headers, admin_headers, mute_action
) -> None:
    url = f"{BASE}{mute_action.id}"

    response = client.patch(url, json={"details": "hijack"}, headers=second_moderator_headers)
    assert response.status_code == status.HTTP_403_FORBIDDEN

    response = client.patch(url, json={"details": "72h"}, headers=moderator_headers)
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["details"] == "72h"

    response = client.patch(url, json={"action_reason": "spam links"}, headers=admin_headers)
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["action_reason"] == "spam links"


def test_update_rejects_unlisted_fields(client, moderator_headers, mute_action) -> None:
    response = client.patch(
        f"{BASE}{mute_action.id}",
        json={"moderator_id": mute_action.moderator_id},
        headers=moderator_headers,
    )
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


def test_soft_delete_twice(client, moderator_headers, mute_action) -> None:
    url = f"{BASE}{mute_action.id}"

    first = client.delete(url, headers=moderator_headers)
    assert first.status_code == status.HTTP_204_NO_CONTENT

    second = client.delete(url, headers=moderator_headers)
    assert second.status_code == status.HTTP_404_NOT_FOUND
    assert second.json() == {"detail": "moderation action not found", "code": "not_found"}

    assert client.get(url, headers=moderator_headers).status_code == status.HTTP_404_NOT_FOUND


def test_search_with_pagination(client, moderator_headers, member, other_member) -> None:
    for target, kind in ((member.id, "mute"), (other_member.id, "warn"), (member.id, "warn")):
        client.post(
            BASE,
            json={"target_member_id": target, "action_type": kind, "action_reason": "r"},
            headers=moderator_headers,
        )

    response = client.get(
        BASE,
        params={"target_member_id": member.id, "limit": 1, "sort": "action_type:asc"},
        headers=moderator_headers,
    )
    assert response.status_code == status.HTTP_200_OK
    body = response.json()
    assert body["pagination"] == {"current": 1, "limit": 1, "records": 2, "pages": 2}
    assert body["data"][0]["action_type"] == "mute"

    response = client.get(BASE, params={"status": "active"}, headers=moderator_headers)
    assert response.json()["pagination"]["records"] == 3


def test_malformed_id(client, moderator_headers) -> None:
    response = client.get(f"{BASE}not-a-uuid", headers=moderator_headers)
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
