"""Member-filed content reports and their triage by staff."""

from __future__ import annotations

import logging

from sqlalchemy import update
from sqlalchemy.orm import Session

from discuss_board.core.auth import AuthContext, require_administrator, require_staff
from discuss_board.core.errors import ConflictError, ForbiddenError, NotFoundError, ValidationError
from discuss_board.db.time import utcnow
from discuss_board.models.report import ContentReport, ContentType, ReportStatus
from discuss_board.schemas.common import Pagination
from discuss_board.services.moderation_actions import live_action
from discuss_board.services.moderation_logs import record_event
from discuss_board.services.pagination import paginate
from discuss_board.services.posts import live_comment, live_post

logger = logging.getLogger(__name__)

REPORT_SORTABLE = {
    "created_at": ContentReport.created_at,
    "updated_at": ContentReport.updated_at,
    "status": ContentReport.status,
}


def coerce_report_status(value: ReportStatus | str) -> ReportStatus:
    try:
        return ReportStatus(value)
    except ValueError as err:
        raise ValidationError(f"unknown status: {value}") from err


def live_report(db: Session, report_id: str) -> ContentReport:
    report = (
        db.query(ContentReport)
        .filter(ContentReport.id == report_id, ContentReport.deleted_at.is_(None))
        .first()
    )
    if report is None:
        raise NotFoundError("report not found")
    return report


def create_report(
    db: Session,
    auth: AuthContext,
    *,
    content_type: ContentType | str,
    reason: str,
    content_post_id: str | None = None,
    content_comment_id: str | None = None,
) -> ContentReport:
    """Flag a single post or comment."""
    try:
        kind = ContentType(content_type)
    except ValueError as err:
        raise ValidationError(f"unknown content_type: {content_type}") from err
    if not reason or not reason.strip():
        raise ValidationError("reason must not be empty")

    if kind is ContentType.POST:
        if content_post_id is None or content_comment_id is not None:
            raise ValidationError("a post report names exactly one post")
        if live_post(db, content_post_id) is None:
            raise NotFoundError("post not found")
        duplicate_filter = ContentReport.content_post_id == content_post_id
    else:
        if content_comment_id is None or content_post_id is not None:
            raise ValidationError("a comment report names exactly one comment")
        if live_comment(db, content_comment_id) is None:
            raise NotFoundError("comment not found")
        duplicate_filter = ContentReport.content_comment_id == content_comment_id

    duplicate = (
        db.query(ContentReport.id)
        .filter(
            ContentReport.reporter_member_id == auth.member_id,
            ContentReport.deleted_at.is_(None),
            duplicate_filter,
        )
        .first()
    )
    if duplicate is not None:
        raise ConflictError("content already reported")

    report = ContentReport(
        reporter_member_id=auth.member_id,
        content_type=kind,
        content_post_id=content_post_id,
        content_comment_id=content_comment_id,
        reason=reason,
    )
    db.add(report)
    db.commit()
    db.refresh(report)
    logger.info("report %s filed against %s", report.id, kind.value)
    return report


def get_report(db: Session, auth: AuthContext, report_id: str) -> ContentReport:
    report = live_report(db, report_id)
    if not auth.is_staff and report.reporter_member_id != auth.member_id:
        raise ForbiddenError("report belongs to another member")
    return report


def search_reports(
    db: Session,
    auth: AuthContext,
    *,
    status: ReportStatus | str | None = None,
    content_type: ContentType | str | None = None,
    reporter_member_id: str | None = None,
    page: int = 1,
    limit: int = 20,
    sort: str | None = None,
) -> tuple[list[ContentReport], Pagination]:
    query = db.query(ContentReport).filter(ContentReport.deleted_at.is_(None))
    if not auth.is_staff:
        query = query.filter(ContentReport.reporter_member_id == auth.member_id)
    elif reporter_member_id:
        query = query.filter(ContentReport.reporter_member_id == reporter_member_id)
    if status is not None:
        query = query.filter(ContentReport.status == coerce_report_status(status))
    if content_type is not None:
        try:
            query = query.filter(ContentReport.content_type == ContentType(content_type))
        except ValueError as err:
            raise ValidationError(f"unknown content_type: {content_type}") from err
    return paginate(
        query,
        page=page,
        limit=limit,
        sort=sort,
        sortable=REPORT_SORTABLE,
        tiebreaker=ContentReport.id,
    )


def update_report(
    db: Session,
    auth: AuthContext,
    report_id: str,
    *,
    status: ReportStatus | str | None = None,
    moderation_action_id: str | None = None,
) -> ContentReport:
    """Triage a report: change its status and/or link the resulting action."""
    require_staff(auth)
    if status is None and moderation_action_id is None:
        raise ValidationError("nothing to update")

    report = live_report(db, report_id)
    if moderation_action_id is not None:
        report.moderation_action_id = live_action(db, moderation_action_id).id
        event_type = "report_linked"
    if status is not None:
        report.status = coerce_report_status(status)
        event_type = f"report_{report.status.value}"

    if report.moderation_action_id is not None:
        record_event(
            db,
            actor_member_id=auth.member_id,
            related_action_id=report.moderation_action_id,
            related_report_id=report.id,
            event_type=event_type,
        )
    db.commit()
    db.refresh(report)
    return report


def soft_delete_report(db: Session, auth: AuthContext, report_id: str) -> None:
    require_administrator(auth)
    result = db.execute(
        update(ContentReport)
        .where(ContentReport.id == report_id, ContentReport.deleted_at.is_(None))
        .values(deleted_at=utcnow())
    )
    if result.rowcount != 1:
        raise NotFoundError("report not found")
    db.commit()
