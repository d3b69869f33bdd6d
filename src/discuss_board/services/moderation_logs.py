"""Append-only moderation audit trail."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import datetime
from typing import Any

from sqlalchemy import update
from sqlalchemy.orm import Session

from discuss_board.core.auth import AuthContext, require_administrator, require_staff
from discuss_board.core.errors import ForbiddenError, NotFoundError, ValidationError
from discuss_board.db.time import utcnow
from discuss_board.models.moderation import Appeal, ModerationAction, ModerationLog
from discuss_board.models.report import ContentReport
from discuss_board.schemas.common import Pagination
from discuss_board.services.pagination import paginate

logger = logging.getLogger(__name__)

LOG_SORTABLE = {
    "created_at": ModerationLog.created_at,
    "event_type": ModerationLog.event_type,
}
MUTABLE_LOG_FIELDS = frozenset({"event_details"})


def record_event(
    db: Session,
    *,
    actor_member_id: str | None,
    related_action_id: str,
    event_type: str,
    event_details: str | None = None,
    related_appeal_id: str | None = None,
    related_report_id: str | None = None,
) -> ModerationLog:
    """Stage a log entry in the caller's transaction without committing."""
    entry = ModerationLog(
        actor_member_id=actor_member_id,
        related_action_id=related_action_id,
        related_appeal_id=related_appeal_id,
        related_report_id=related_report_id,
        event_type=event_type,
        event_details=event_details,
    )
    db.add(entry)
    return entry


def _ensure_live(db: Session, model: Any, entity_id: str, label: str) -> None:
    found = (
        db.query(model.id)
        .filter(model.id == entity_id, model.deleted_at.is_(None))
        .first()
    )
    if found is None:
        raise NotFoundError(f"{label} not found")


def append_log(
    db: Session,
    auth: AuthContext,
    *,
    related_action_id: str,
    event_type: str,
    event_details: str | None = None,
    related_appeal_id: str | None = None,
    related_report_id: str | None = None,
) -> ModerationLog:
    """Append an entry against a live moderation action."""
    require_staff(auth)
    if not event_type or not event_type.strip():
        raise ValidationError("event_type must not be empty")

    _ensure_live(db, ModerationAction, related_action_id, "moderation action")
    if related_appeal_id is not None:
        _ensure_live(db, Appeal, related_appeal_id, "appeal")
    if related_report_id is not None:
        _ensure_live(db, ContentReport, related_report_id, "report")

    entry = record_event(
        db,
        actor_member_id=auth.member_id,
        related_action_id=related_action_id,
        event_type=event_type.strip(),
        event_details=event_details,
        related_appeal_id=related_appeal_id,
        related_report_id=related_report_id,
    )
    db.commit()
    db.refresh(entry)
    return entry


def get_log(
    db: Session, auth: AuthContext, log_id: str, *, include_deleted: bool = False
) -> ModerationLog:
    require_staff(auth)
    if include_deleted:
        require_administrator(auth)

    query = db.query(ModerationLog).filter(ModerationLog.id == log_id)
    if not include_deleted:
        query = query.filter(ModerationLog.deleted_at.is_(None))
    entry = query.first()
    if entry is None:
        raise NotFoundError("moderation log not found")
    return entry


def search_logs(
    db: Session,
    auth: AuthContext,
    *,
    related_action_id: str | None = None,
    related_appeal_id: str | None = None,
    related_report_id: str | None = None,
    actor_member_id: str | None = None,
    event_type: str | None = None,
    created_from: datetime | None = None,
    created_to: datetime | None = None,
    include_deleted: bool = False,
    page: int = 1,
    limit: int = 20,
    sort: str | None = None,
) -> tuple[list[ModerationLog], Pagination]:
    require_staff(auth)
    if include_deleted and not auth.is_administrator:
        raise ForbiddenError("only administrators may read deleted log entries")

    query = db.query(ModerationLog)
    if not include_deleted:
        query = query.filter(ModerationLog.deleted_at.is_(None))
    if related_action_id:
        query = query.filter(ModerationLog.related_action_id == related_action_id)
    if related_appeal_id:
        query = query.filter(ModerationLog.related_appeal_id == related_appeal_id)
    if related_report_id:
        query = query.filter(ModerationLog.related_report_id == related_report_id)
    if actor_member_id:
        query = query.filter(ModerationLog.actor_member_id == actor_member_id)
    if event_type:
        query = query.filter(ModerationLog.event_type == event_type)
    if created_from is not None:
        query = query.filter(ModerationLog.created_at >= created_from)
    if created_to is not None:
        query = query.filter(ModerationLog.created_at <= created_to)
    return paginate(
        query,
        page=page,
        limit=limit,
        sort=sort,
        sortable=LOG_SORTABLE,
        tiebreaker=ModerationLog.id,
    )


def update_log(
    db: Session, auth: AuthContext, log_id: str, changes: Mapping[str, Any]
) -> ModerationLog:
    """Correct the narrative of an entry; every other field is frozen."""
    require_staff(auth)
    frozen = sorted(set(changes) - MUTABLE_LOG_FIELDS)
    if frozen:
        raise ValidationError(f"fields are immutable: {', '.join(frozen)}")
    if "event_details" not in changes:
        raise ValidationError("event_details is required")

    entry = get_log(db, auth, log_id)
    entry.event_details = changes["event_details"]
    db.commit()
    db.refresh(entry)
    return entry


def soft_delete_log(db: Session, auth: AuthContext, log_id: str) -> None:
    require_administrator(auth)
    result = db.execute(
        update(ModerationLog)
        .where(ModerationLog.id == log_id, ModerationLog.deleted_at.is_(None))
        .values(deleted_at=utcnow())
    )
    if result.rowcount != 1:
        raise NotFoundError("moderation log not found")
    db.commit()
    logger.info("moderation log %s soft-deleted by administrator %s", log_id, auth.id)
