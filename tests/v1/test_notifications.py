# mypy: ignore-errors
# tests/v1/test_notifications.py
"""Tests for notification endpoints."""

import pytest
from fastapi import status

from discuss_board.models import Notification

NOTIFICATIONS = "/api/v1/notifications/"


@pytest.fixture()
def notification(db_session, member):
    notice = Notification(recipient_member_id=member.id, type="appeal_resolved", title="Hi")
    db_session.add(notice)
    db_session.flush()
    db_session.refresh(notice)
    return notice


def test_member_lists_and_reads_own(client, member_headers, notification) -> None:
    listing = client.get(NOTIFICATIONS, params={"status": "pending"}, headers=member_headers)
    assert listing.status_code == status.HTTP_200_OK
    assert [n["id"] for n in listing.json()["data"]] == [notification.id]

    read = client.post(f"{NOTIFICATIONS}{notification.id}/read", headers=member_headers)
    assert read.status_code == status.HTTP_200_OK
    assert read.json()["status"] == "read"
    assert read.json()["read_at"].endswith("Z")


def test_other_member_cannot_touch(client, other_member_headers, notification) -> None:
    assert client.get(NOTIFICATIONS, headers=other_member_headers).json()["data"] == []
    response = client.post(f"{NOTIFICATIONS}{notification.id}/read", headers=other_member_headers)
    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_admin_records_delivery(client, admin_headers, member_headers, notification) -> None:
    url = f"{NOTIFICATIONS}{notification.id}"
    assert client.patch(
        url, json={"status": "delivered"}, headers=member_headers
    ).status_code == status.HTTP_403_FORBIDDEN

    delivered = client.patch(url, json={"status": "delivered"}, headers=admin_headers)
    assert delivered.status_code == status.HTTP_200_OK
    assert delivered.json()["delivered_at"] is not None

    failed = client.patch(url, json={"status": "failed"}, headers=admin_headers)
    assert failed.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    failed = client.patch(
        url, json={"status": "failed", "failure_reason": "bounced"}, headers=admin_headers
    )
    assert failed.json()["failure_reason"] == "bounced"

    read = client.patch(url, json={"status": "read"}, headers=admin_headers)
    assert read.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


def test_admin_soft_delete(client, admin_headers, member_headers, notification) -> None:
    url = f"{NOTIFICATIONS}{notification.id}"
    assert client.delete(url, headers=admin_headers).status_code == status.HTTP_204_NO_CONTENT
    assert client.delete(url, headers=admin_headers).status_code == status.HTTP_404_NOT_FOUND
    assert client.get(url, headers=member_headers).status_code == status.HTTP_404_NOT_FOUND


def test_read_notification_keeps_its_status(
    client, admin_headers, member_headers, notification
) -> None:
    url = f"{NOTIFICATIONS}{notification.id}"
    client.post(f"{url}/read", headers=member_headers)

    response = client.patch(url, json={"status": "delivered"}, headers=admin_headers)
    assert response.status_code == status.HTTP_409_CONFLICT

    current = client.get(url, headers=member_headers).json()
    assert current["status"] == "read"
    assert current["read_at"] is not None
    assert current["delivered_at"] is None
