"""Moderation action lifecycle: create, read, search, update and soft delete."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import datetime
from typing import Any

from sqlalchemy import update
from sqlalchemy.orm import Session

from discuss_board.core.auth import AuthContext, require_staff
from discuss_board.core.errors import ForbiddenError, NotFoundError, ValidationError
from discuss_board.db.time import as_utc, utcnow
from discuss_board.models.account import Member, Moderator, ModeratorStatus, Role
from discuss_board.models.moderation import ActionStatus, ActionType, ModerationAction
from discuss_board.models.post import Comment, Post
from discuss_board.schemas.common import Pagination
from discuss_board.services.pagination import paginate

logger = logging.getLogger(__name__)

ACTION_SORTABLE = {
    "created_at": ModerationAction.created_at,
    "updated_at": ModerationAction.updated_at,
    "effective_from": ModerationAction.effective_from,
    "action_type": ModerationAction.action_type,
    "status": ModerationAction.status,
}
MUTABLE_ACTION_FIELDS = frozenset(
    {"action_type", "action_reason", "details", "effective_from", "effective_until", "status"}
)


def live_action(db: Session, action_id: str) -> ModerationAction:
    """Return the action or raise ``NotFoundError`` if missing or soft-deleted."""
    action = (
        db.query(ModerationAction)
        .filter(ModerationAction.id == action_id, ModerationAction.deleted_at.is_(None))
        .first()
    )
    if action is None:
        raise NotFoundError("moderation action not found")
    return action


def affected_member_id(db: Session, action: ModerationAction) -> str | None:
    """The member an action lands on: the target member, else the content author."""
    if action.target_member_id is not None:
        return action.target_member_id
    if action.target_post_id is not None:
        post = db.get(Post, action.target_post_id)
        return post.author_member_id if post is not None else None
    if action.target_comment_id is not None:
        comment = db.get(Comment, action.target_comment_id)
        return comment.author_member_id if comment is not None else None
    return None


def coerce_action_type(value: ActionType | str) -> ActionType:
    try:
        return ActionType(value)
    except ValueError as err:
        raise ValidationError(f"unknown action_type: {value}") from err


def coerce_action_status(value: ActionStatus | str) -> ActionStatus:
    try:
        return ActionStatus(value)
    except ValueError as err:
        raise ValidationError(f"unknown status: {value}") from err


def _acting_moderator(db: Session, auth: AuthContext) -> Moderator:
    """Moderator record an action is attributed to."""
    query = db.query(Moderator).filter(
        Moderator.status == ModeratorStatus.ACTIVE,
        Moderator.deleted_at.is_(None),
    )
    if auth.type is Role.MODERATOR:
        moderator = query.filter(Moderator.id == auth.id).first()
    elif auth.type is Role.ADMINISTRATOR:
        moderator = query.filter(Moderator.member_id == auth.member_id).first()
    else:
        moderator = None
    if moderator is None:
        raise ForbiddenError("moderator role required")
    return moderator


def _ensure_target(
    db: Session,
    target_member_id: str | None,
    target_post_id: str | None,
    target_comment_id: str | None,
) -> None:
    targets = [t for t in (target_member_id, target_post_id, target_comment_id) if t is not None]
    if len(targets) > 1:
        raise ValidationError("at most one target may be set")

    if target_member_id is not None:
        model: Any = Member
        label = "member"
    elif target_post_id is not None:
        model = Post
        label = "post"
    elif target_comment_id is not None:
        model = Comment
        label = "comment"
    else:
        return

    found = (
        db.query(model.id)
        .filter(model.id == targets[0], model.deleted_at.is_(None))
        .first()
    )
    if found is None:
        raise ValidationError(f"target {label} does not exist")


def _ensure_window(effective_from: datetime | None, effective_until: datetime | None) -> None:
    if effective_from is None or effective_until is None:
        return
    if as_utc(effective_until) < as_utc(effective_from):
        raise ValidationError("effective_until must not precede effective_from")


def create_action(
    db: Session,
    auth: AuthContext,
    *,
    action_type: ActionType | str,
    action_reason: str,
    target_member_id: str | None = None,
    target_post_id: str | None = None,
    target_comment_id: str | None = None,
    details: str | None = None,
    effective_from: datetime | None = None,
    effective_until: datetime | None = None,
) -> ModerationAction:
    """Record a new action in status ``active``.

    The caller must be a moderator, or an administrator whose member account
    also holds an active moderator record.
    """
    moderator = _acting_moderator(db, auth)
    kind = coerce_action_type(action_type)
    if not action_reason or not action_reason.strip():
        raise ValidationError("action_reason must not be empty")
    _ensure_target(db, target_member_id, target_post_id, target_comment_id)

    effective_from = effective_from or utcnow()
    _ensure_window(effective_from, effective_until)

    action = ModerationAction(
        moderator_id=moderator.id,
        target_member_id=target_member_id,
        target_post_id=target_post_id,
        target_comment_id=target_comment_id,
        action_type=kind,
        action_reason=action_reason,
        details=details,
        effective_from=effective_from,
        effective_until=effective_until,
        status=ActionStatus.ACTIVE,
    )
    db.add(action)
    db.commit()
    db.refresh(action)
    logger.info(
        "moderation action %s (%s) created by moderator %s", action.id, kind.value, moderator.id
    )
    return action


def get_action(db: Session, auth: AuthContext, action_id: str) -> ModerationAction:
    require_staff(auth)
    return live_action(db, action_id)


def search_actions(
    db: Session,
    auth: AuthContext,
    *,
    moderator_id: str | None = None,
    target_member_id: str | None = None,
    target_post_id: str | None = None,
    target_comment_id: str | None = None,
    action_type: ActionType | str | None = None,
    status: ActionStatus | str | None = None,
    created_from: datetime | None = None,
    created_to: datetime | None = None,
    page: int = 1,
    limit: int = 20,
    sort: str | None = None,
) -> tuple[list[ModerationAction], Pagination]:
    require_staff(auth)
    query = db.query(ModerationAction).filter(ModerationAction.deleted_at.is_(None))
    if moderator_id:
        query = query.filter(ModerationAction.moderator_id == moderator_id)
    if target_member_id:
        query = query.filter(ModerationAction.target_member_id == target_member_id)
    if target_post_id:
        query = query.filter(ModerationAction.target_post_id == target_post_id)
    if target_comment_id:
        query = query.filter(ModerationAction.target_comment_id == target_comment_id)
    if action_type is not None:
        query = query.filter(ModerationAction.action_type == coerce_action_type(action_type))
    if status is not None:
        query = query.filter(ModerationAction.status == coerce_action_status(status))
    if created_from is not None:
        query = query.filter(ModerationAction.created_at >= created_from)
    if created_to is not None:
        query = query.filter(ModerationAction.created_at <= created_to)
    return paginate(
        query,
        page=page,
        limit=limit,
        sort=sort,
        sortable=ACTION_SORTABLE,
        tiebreaker=ModerationAction.id,
    )


def _owner_guard(auth: AuthContext, action: ModerationAction) -> list[Any]:
    """Ownership predicate for conditional writes; empty for administrators."""
    require_staff(auth)
    if auth.is_administrator:
        return []
    if action.moderator_id != auth.id:
        raise ForbiddenError(
            "only the creating moderator or an administrator may change this action"
        )
    return [ModerationAction.moderator_id == auth.id]


def update_action(
    db: Session, auth: AuthContext, action_id: str, changes: Mapping[str, Any]
) -> ModerationAction:
    """Apply a partial update restricted to the mutable fields."""
    unknown = sorted(set(changes) - MUTABLE_ACTION_FIELDS)
    if unknown:
        raise ValidationError(f"fields are immutable: {', '.join(unknown)}")

    action = live_action(db, action_id)
    guard = _owner_guard(auth, action)

    values = dict(changes)
    if "action_type" in values:
        values["action_type"] = coerce_action_type(values["action_type"])
    if "status" in values:
        values["status"] = coerce_action_status(values["status"])
    if "action_reason" in values and not (values["action_reason"] or "").strip():
        raise ValidationError("action_reason must not be empty")
    if "effective_from" in values and values["effective_from"] is None:
        raise ValidationError("effective_from must not be null")
    _ensure_window(
        values.get("effective_from", action.effective_from),
        values.get("effective_until", action.effective_until),
    )
    if not values:
        return action

    values["updated_at"] = utcnow()
    result = db.execute(
        update(ModerationAction)
        .where(
            ModerationAction.id == action_id,
            ModerationAction.deleted_at.is_(None),
            *guard,
        )
        .values(**values)
    )
    if result.rowcount != 1:
        raise NotFoundError("moderation action not found")
    db.commit()
    db.refresh(action)
    logger.info("moderation action %s updated: %s", action_id, ", ".join(sorted(changes)))
    return action


def soft_delete_action(db: Session, auth: AuthContext, action_id: str) -> None:
    """Mark an action deleted; a second call finds nothing and raises ``NotFoundError``."""
    action = live_action(db, action_id)
    guard = _owner_guard(auth, action)
    result = db.execute(
        update(ModerationAction)
        .where(
            ModerationAction.id == action_id,
            ModerationAction.deleted_at.is_(None),
            *guard,
        )
        .values(deleted_at=utcnow())
    )
    if result.rowcount != 1:
        raise NotFoundError("moderation action not found")
    db.commit()
    logger.info("moderation action %s soft-deleted by %s %s", action_id, auth.type.value, auth.id)
