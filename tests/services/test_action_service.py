# mypy: ignore-errors
# tests/services/test_action_service.py
"""Service-level tests for the moderation action lifecycle."""

from datetime import UTC, datetime, timedelta

import pytest

from discuss_board.core.auth import AuthContext
from discuss_board.core.errors import ForbiddenError, NotFoundError, ValidationError
from discuss_board.db.time import utcnow
from discuss_board.models import Moderator
from discuss_board.models.account import ModeratorStatus, Role
from discuss_board.models.moderation import ActionStatus, ActionType
from discuss_board.services import moderation_actions as actions


def test_warn_action_reads_back_unchanged(db_session, moderator_ctx, test_post) -> None:
    """A created warn action reads back with the same type, reason and targets."""
    created = actions.create_action(
        db_session,
        moderator_ctx,
        action_type="warn",
        action_reason="off-topic",
        target_post_id=test_post.id,
    )

    fetched = actions.get_action(db_session, moderator_ctx, created.id)
    assert fetched.action_type is ActionType.WARN
    assert fetched.action_reason == "off-topic"
    assert fetched.target_post_id == test_post.id
    assert fetched.target_member_id is None
    assert fetched.target_comment_id is None
    assert fetched.status is ActionStatus.ACTIVE
    assert fetched.moderator_id == moderator_ctx.id


def test_create_without_target_is_allowed(db_session, moderator_ctx) -> None:
    action = actions.create_action(
        db_session, moderator_ctx, action_type=ActionType.ESCALATE, action_reason="site-wide"
    )
    assert action.target_member_id is None
    assert action.effective_from is not None


def test_unknown_action_type_rejected(db_session, moderator_ctx, member) -> None:
    with pytest.raises(ValidationError):
        actions.create_action(
            db_session,
            moderator_ctx,
            action_type="ban_forever",
            action_reason="nope",
            target_member_id=member.id,
        )


def test_more_than_one_target_rejected(db_session, moderator_ctx, member, test_post) -> None:
    with pytest.raises(ValidationError):
        actions.create_action(
            db_session,
            moderator_ctx,
            action_type="warn",
            action_reason="two targets",
            target_member_id=member.id,
            target_post_id=test_post.id,
        )


def test_deleted_target_rejected(db_session, moderator_ctx, test_comment) -> None:
    test_comment.deleted_at = utcnow()
    db_session.flush()

    with pytest.raises(ValidationError):
        actions.create_action(
            db_session,
            moderator_ctx,
            action_type="remove",
            action_reason="gone already",
            target_comment_id=test_comment.id,
        )


def test_missing_target_rejected(db_session, moderator_ctx) -> None:
    with pytest.raises(ValidationError):
        actions.create_action(
            db_session,
            moderator_ctx,
            action_type="warn",
            action_reason="ghost",
            target_member_id="00000000-0000-0000-0000-000000000000",
        )


def test_effective_window_must_be_ordered(db_session, moderator_ctx, member) -> None:
    start = datetime(2026, 1, 2, tzinfo=UTC)
    with pytest.raises(ValidationError):
        actions.create_action(
            db_session,
            moderator_ctx,
            action_type="mute",
            action_reason="spam",
            target_member_id=member.id,
            effective_from=start,
            effective_until=start - timedelta(hours=1),
        )


def test_member_cannot_create_action(db_session, member_ctx, other_member) -> None:
    with pytest.raises(ForbiddenError):
        actions.create_action(
            db_session,
            member_ctx,
            action_type="warn",
            action_reason="vigilante",
            target_member_id=other_member.id,
        )


def test_administrator_needs_moderator_record(db_session, admin_ctx, member) -> None:
    with pytest.raises(ForbiddenError):
        actions.create_action(
            db_session,
            admin_ctx,
            action_type="warn",
            action_reason="admin only",
            target_member_id=member.id,
        )


def test_administrator_with_moderator_record_is_attributed(
    db_session, admin_ctx, member
) -> None:
    moderator = Moderator(member_id=admin_ctx.member_id)
    db_session.add(moderator)
    db_session.flush()

    action = actions.create_action(
        db_session,
        admin_ctx,
        action_type="restrict",
        action_reason="repeat offender",
        target_member_id=member.id,
    )
    assert action.moderator_id == moderator.id


def test_soft_delete_twice_reports_not_found(db_session, moderator_ctx, mute_action) -> None:
    actions.soft_delete_action(db_session, moderator_ctx, mute_action.id)

    with pytest.raises(NotFoundError):
        actions.soft_delete_action(db_session, moderator_ctx, mute_action.id)
    with pytest.raises(NotFoundError):
        actions.get_action(db_session, moderator_ctx, mute_action.id)


def test_update_by_creator(db_session, moderator_ctx, mute_action) -> None:
    updated = actions.update_action(
        db_session,
        moderator_ctx,
        mute_action.id,
        {"action_type": "warn", "details": "downgraded"},
    )
    assert updated.action_type is ActionType.WARN
    assert updated.details == "downgraded"
    assert updated.action_reason == "spam"


def test_update_by_other_moderator_forbidden(
    db_session, second_moderator_ctx, mute_action
) -> None:
    with pytest.raises(ForbiddenError):
        actions.update_action(
            db_session, second_moderator_ctx, mute_action.id, {"action_reason": "mine now"}
        )


def test_update_by_administrator(db_session, admin_ctx, mute_action) -> None:
    updated = actions.update_action(
        db_session, admin_ctx, mute_action.id, {"status": "reversed"}
    )
    assert updated.status is ActionStatus.REVERSED


def test_update_rejects_immutable_fields(db_session, moderator_ctx, mute_action, other_member) -> None:
    with pytest.raises(ValidationError):
        actions.update_action(
            db_session,
            moderator_ctx,
            mute_action.id,
            {"target_member_id": other_member.id},
        )


def test_update_deleted_action_not_found(db_session, admin_ctx, mute_action) -> None:
    mute_action.deleted_at = utcnow()
    db_session.flush()

    with pytest.raises(NotFoundError):
        actions.update_action(db_session, admin_ctx, mute_action.id, {"details": "late"})


def test_member_cannot_read_actions(db_session, member_ctx, mute_action) -> None:
    with pytest.raises(ForbiddenError):
        actions.get_action(db_session, member_ctx, mute_action.id)


def test_search_filters_and_skips_deleted(
    db_session, moderator_ctx, member, other_member, test_post
) -> None:
    kept = actions.create_action(
        db_session, moderator_ctx, action_type="mute", action_reason="a", target_member_id=member.id
    )
    actions.create_action(
        db_session, moderator_ctx, action_type="warn", action_reason="b", target_post_id=test_post.id
    )
    dropped = actions.create_action(
        db_session,
        moderator_ctx,
        action_type="mute",
        action_reason="c",
        target_member_id=other_member.id,
    )
    actions.soft_delete_action(db_session, moderator_ctx, dropped.id)

    rows, pagination = actions.search_actions(db_session, moderator_ctx, action_type="mute")
    assert [row.id for row in rows] == [kept.id]
    assert pagination.records == 1
    assert pagination.pages == 1

    rows, pagination = actions.search_actions(db_session, moderator_ctx, limit=1)
    assert len(rows) == 1
    assert pagination.records == 2
    assert pagination.pages == 2


def test_affected_member_resolution(db_session, moderator_ctx, member, test_post, test_comment) -> None:
    on_post = actions.create_action(
        db_session, moderator_ctx, action_type="edit", action_reason="x", target_post_id=test_post.id
    )
    on_comment = actions.create_action(
        db_session,
        moderator_ctx,
        action_type="remove",
        action_reason="y",
        target_comment_id=test_comment.id,
    )
    untargeted = actions.create_action(
        db_session, moderator_ctx, action_type="escalate", action_reason="z"
    )

    assert actions.affected_member_id(db_session, on_post) == member.id
    assert actions.affected_member_id(db_session, on_comment) == member.id
    assert actions.affected_member_id(db_session, untargeted) is None


def test_revoked_moderator_cannot_create(db_session, moderator, member) -> None:
    moderator.status = ModeratorStatus.REVOKED
    db_session.flush()
    ctx = AuthContext(id=moderator.id, type=Role.MODERATOR, member_id=moderator.member_id)

    with pytest.raises(ForbiddenError):
        actions.create_action(
            db_session, ctx, action_type="warn", action_reason="x", target_member_id=member.id
        )
