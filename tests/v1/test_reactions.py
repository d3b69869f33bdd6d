# mypy: ignore-errors
# tests/v1/test_reactions.py
"""Tests for comment reaction endpoints."""

from fastapi import status

REACTIONS = "/api/v1/comment-reactions/"


def _react(client, headers, comment_id, reaction_type="like"):
    return client.post(
        REACTIONS,
        json={"comment_id": comment_id, "reaction_type": reaction_type},
        headers=headers,
    )


def test_like_a_comment(client, other_member_headers, other_member, test_comment) -> None:
    response = _react(client, other_member_headers, test_comment.id)
    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()
    assert data["member_id"] == other_member.id
    assert data["reaction_type"] == "like"
    assert data["deleted_at"] is None


def test_one_reaction_per_member(client, other_member_headers, test_comment) -> None:
    _react(client, other_member_headers, test_comment.id)
    second = _react(client, other_member_headers, test_comment.id, "dislike")
    assert second.status_code == status.HTTP_409_CONFLICT


def test_cannot_react_to_own_comment(client, member_headers, test_comment) -> None:
    response = _react(client, member_headers, test_comment.id)
    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_unknown_type_and_comment(client, other_member_headers, test_comment) -> None:
    bad_type = _react(client, other_member_headers, test_comment.id, "love")
    assert bad_type.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
    missing = _react(client, other_member_headers, "00000000-0000-0000-0000-000000000000")
    assert missing.status_code == status.HTTP_404_NOT_FOUND


def test_locked_post_rejects_reactions(
    client, moderator_headers, other_member_headers, test_post, test_comment
) -> None:
    client.patch(
        f"/api/v1/posts/{test_post.id}",
        json={"business_status": "locked"},
        headers=moderator_headers,
    )
    response = _react(client, other_member_headers, test_comment.id)
    assert response.status_code == status.HTTP_409_CONFLICT


def test_delete_and_react_again(
    client, other_member_headers, member_headers, test_comment
) -> None:
    reaction_id = _react(client, other_member_headers, test_comment.id).json()["id"]
    url = f"{REACTIONS}{reaction_id}"

    assert client.delete(url, headers=member_headers).status_code == status.HTTP_403_FORBIDDEN
    assert client.delete(url, headers=other_member_headers).status_code == 204
    assert client.delete(url, headers=other_member_headers).status_code == 404

    revived = _react(client, other_member_headers, test_comment.id, "dislike")
    assert revived.status_code == status.HTTP_201_CREATED
    assert revived.json()["id"] == reaction_id
    assert revived.json()["reaction_type"] == "dislike"


def test_members_list_only_their_reactions(
    client, other_member_headers, member_headers, moderator_headers, test_comment
) -> None:
    _react(client, other_member_headers, test_comment.id)

    mine = client.get(
        REACTIONS, params={"comment_id": test_comment.id}, headers=other_member_headers
    )
    assert mine.json()["pagination"]["records"] == 1
    assert client.get(REACTIONS, headers=member_headers).json()["data"] == []
    staff = client.get(REACTIONS, params={"reaction_type": "like"}, headers=moderator_headers)
    assert staff.json()["pagination"]["records"] == 1
