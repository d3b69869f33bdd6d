# mypy: ignore-errors
# tests/v1/test_moderation_logs.py
"""Tests for the moderation log endpoints."""

from fastapi import status

LOGS = "/api/v1/moderation-logs/"


def _append(client, headers, action_id, **extra):
    payload = {"related_action_id": action_id, "event_type": "note"}
    payload.update(extra)
    return client.post(LOGS, json=payload, headers=headers)


def test_append_and_read(client, moderator_headers, mute_action) -> None:
    response = _append(client, moderator_headers, mute_action.id, event_details="checked")
    assert response.status_code == status.HTTP_201_CREATED
    entry = response.json()
    assert entry["related_appeal_id"] is None
    assert entry["related_report_id"] is None
    assert entry["deleted_at"] is None

    fetched = client.get(f"{LOGS}{entry['id']}", headers=moderator_headers)
    assert fetched.json()["event_details"] == "checked"


def test_append_on_missing_action(client, moderator_headers) -> None:
    response = _append(client, moderator_headers, "00000000-0000-0000-0000-000000000000")
    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_append_on_deleted_action(client, moderator_headers, mute_action) -> None:
    client.delete(f"/api/v1/moderation-actions/{mute_action.id}", headers=moderator_headers)
    response = _append(client, moderator_headers, mute_action.id)
    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_only_event_details_editable(client, moderator_headers, mute_action) -> None:
    entry_id = _append(client, moderator_headers, mute_action.id).json()["id"]

    ok = client.patch(
        f"{LOGS}{entry_id}", json={"event_details": "corrected"}, headers=moderator_headers
    )
    assert ok.status_code == status.HTTP_200_OK
    assert ok.json()["event_details"] == "corrected"

    rejected = client.patch(
        f"{LOGS}{entry_id}",
        json={"event_details": "x", "event_type": "other"},
        headers=moderator_headers,
    )
    assert rejected.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    unchanged = client.get(f"{LOGS}{entry_id}", headers=moderator_headers).json()
    assert unchanged["event_type"] == "note"
    assert unchanged["event_details"] == "corrected"


def test_member_cannot_read_logs(client, member_headers) -> None:
    assert client.get(LOGS, headers=member_headers).status_code == status.HTTP_403_FORBIDDEN


def test_soft_delete_and_compliance_read(
    client, moderator_headers, admin_headers, mute_action
) -> None:
    entry_id = _append(client, moderator_headers, mute_action.id).json()["id"]
    url = f"{LOGS}{entry_id}"

    assert client.delete(url, headers=moderator_headers).status_code == status.HTTP_403_FORBIDDEN
    assert client.delete(url, headers=admin_headers).status_code == status.HTTP_204_NO_CONTENT
    assert client.delete(url, headers=admin_headers).status_code == status.HTTP_404_NOT_FOUND

    assert client.get(url, headers=admin_headers).status_code == status.HTTP_404_NOT_FOUND
    audit = client.get(url, params={"include_deleted": True}, headers=admin_headers)
    assert audit.status_code == status.HTTP_200_OK
    assert audit.json()["deleted_at"] is not None

    listing = client.get(
        LOGS,
        params={"related_action_id": mute_action.id, "include_deleted": True},
        headers=moderator_headers,
    )
    assert listing.status_code == status.HTTP_403_FORBIDDEN
