"""Notification records: queued by workflows, read by members, tracked by administrators."""

from __future__ import annotations

import logging

from sqlalchemy import update
from sqlalchemy.orm import Session

from discuss_board.core.auth import AuthContext, require_administrator
from discuss_board.core.errors import ConflictError, ForbiddenError, NotFoundError, ValidationError
from discuss_board.db.time import utcnow
from discuss_board.models.notification import Notification, NotificationStatus
from discuss_board.schemas.common import Pagination
from discuss_board.services.pagination import paginate

logger = logging.getLogger(__name__)

NOTIFICATION_SORTABLE = {
    "created_at": Notification.created_at,
    "status": Notification.status,
    "type": Notification.type,
}
DELIVERY_STATUSES = frozenset({NotificationStatus.DELIVERED, NotificationStatus.FAILED})


def queue_notification(
    db: Session,
    *,
    recipient_member_id: str,
    type: str,
    actor_member_id: str | None = None,
    title: str | None = None,
    body: str | None = None,
    related_action_id: str | None = None,
    related_appeal_id: str | None = None,
) -> Notification:
    """Stage a pending notification in the caller's transaction."""
    notification = Notification(
        recipient_member_id=recipient_member_id,
        actor_member_id=actor_member_id,
        type=type,
        title=title,
        body=body,
        related_action_id=related_action_id,
        related_appeal_id=related_appeal_id,
    )
    db.add(notification)
    return notification


def get_notification(db: Session, auth: AuthContext, notification_id: str) -> Notification:
    notification = (
        db.query(Notification)
        .filter(Notification.id == notification_id, Notification.deleted_at.is_(None))
        .first()
    )
    if notification is None:
        raise NotFoundError("notification not found")
    if not auth.is_administrator and notification.recipient_member_id != auth.member_id:
        raise ForbiddenError("notification belongs to another member")
    return notification


def list_notifications(
    db: Session,
    auth: AuthContext,
    *,
    status: NotificationStatus | str | None = None,
    type: str | None = None,
    recipient_member_id: str | None = None,
    page: int = 1,
    limit: int = 20,
    sort: str | None = None,
) -> tuple[list[Notification], Pagination]:
    """Members see their own notifications; administrators may see anyone's."""
    query = db.query(Notification).filter(Notification.deleted_at.is_(None))
    if auth.is_administrator:
        if recipient_member_id:
            query = query.filter(Notification.recipient_member_id == recipient_member_id)
    else:
        query = query.filter(Notification.recipient_member_id == auth.member_id)
    if status is not None:
        try:
            query = query.filter(Notification.status == NotificationStatus(status))
        except ValueError as err:
            raise ValidationError(f"unknown status: {status}") from err
    if type:
        query = query.filter(Notification.type == type)
    return paginate(
        query,
        page=page,
        limit=limit,
        sort=sort,
        sortable=NOTIFICATION_SORTABLE,
        tiebreaker=Notification.id,
    )


def mark_read(db: Session, auth: AuthContext, notification_id: str) -> Notification:
    notification = get_notification(db, auth, notification_id)
    if notification.recipient_member_id != auth.member_id:
        raise ForbiddenError("only the recipient may mark a notification read")
    if notification.status is not NotificationStatus.READ:
        notification.status = NotificationStatus.READ
        notification.read_at = utcnow()
        db.commit()
        db.refresh(notification)
    return notification


def update_delivery(
    db: Session,
    auth: AuthContext,
    notification_id: str,
    *,
    status: NotificationStatus | str,
    failure_reason: str | None = None,
) -> Notification:
    """Record a delivery outcome (``delivered`` or ``failed``) for an unread notification."""
    require_administrator(auth)
    try:
        new_status = NotificationStatus(status)
    except ValueError as err:
        raise ValidationError(f"unknown status: {status}") from err
    if new_status not in DELIVERY_STATUSES:
        raise ValidationError("delivery status must be delivered or failed")
    if new_status is NotificationStatus.FAILED and not failure_reason:
        raise ValidationError("failure_reason is required when status is failed")

    notification = get_notification(db, auth, notification_id)
    if notification.status is NotificationStatus.READ:
        raise ConflictError("notification was already read by its recipient")
    notification.status = new_status
    if new_status is NotificationStatus.DELIVERED:
        notification.delivered_at = utcnow()
        notification.failure_reason = None
    else:
        notification.failure_reason = failure_reason
    db.commit()
    db.refresh(notification)
    logger.info("notification %s marked %s", notification.id, new_status.value)
    return notification


def soft_delete_notification(db: Session, auth: AuthContext, notification_id: str) -> None:
    require_administrator(auth)
    result = db.execute(
        update(Notification)
        .where(Notification.id == notification_id, Notification.deleted_at.is_(None))
        .values(deleted_at=utcnow())
    )
    if result.rowcount != 1:
        raise NotFoundError("notification not found")
    db.commit()
