"""Appeal workflow.

An appeal moves ``pending -> under_review -> accepted | denied | closed``
(``pending -> closed`` is allowed too). Every status change is a
compare-and-swap on the observed status, and the audit log entry, the
coupled moderation action update and the appellant notification are written
in the same transaction as the appeal itself.
"""

from __future__ import annotations

import logging
from datetime import datetime

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from discuss_board.core.auth import AuthContext, require_administrator, require_staff
from discuss_board.core.errors import ConflictError, ForbiddenError, NotFoundError, ValidationError
from discuss_board.db.time import utcnow
from discuss_board.models.moderation import (
    APPEAL_TRANSITIONS,
    RESOLUTION_REQUIRED,
    TERMINAL_APPEAL_STATUSES,
    ActionStatus,
    Appeal,
    AppealStatus,
    ModerationAction,
)
from discuss_board.schemas.common import Pagination
from discuss_board.services.moderation_actions import affected_member_id, live_action
from discuss_board.services.moderation_logs import record_event
from discuss_board.services.notifications import queue_notification
from discuss_board.services.pagination import paginate

logger = logging.getLogger(__name__)

APPEAL_SORTABLE = {
    "created_at": Appeal.created_at,
    "updated_at": Appeal.updated_at,
    "status": Appeal.status,
}

# Status the coupled moderation action takes when an appeal lands in a terminal state.
ACTION_STATUS_ON_RESOLUTION = {
    AppealStatus.ACCEPTED: ActionStatus.REVERSED,
    AppealStatus.DENIED: ActionStatus.ACTIVE,
    AppealStatus.CLOSED: ActionStatus.ACTIVE,
}

FINALIZED = "appeal already finalized"


def coerce_appeal_status(value: AppealStatus | str) -> AppealStatus:
    try:
        return AppealStatus(value)
    except ValueError as err:
        raise ValidationError(f"unknown status: {value}") from err


def live_appeal(db: Session, appeal_id: str) -> Appeal:
    appeal = (
        db.query(Appeal)
        .filter(Appeal.id == appeal_id, Appeal.deleted_at.is_(None))
        .first()
    )
    if appeal is None:
        raise NotFoundError("appeal not found")
    return appeal


def check_transition(current: AppealStatus, target: AppealStatus) -> None:
    """Raise ``ConflictError`` unless ``current -> target`` is a legal edge."""
    if current in TERMINAL_APPEAL_STATUSES:
        raise ConflictError(FINALIZED)
    if target not in APPEAL_TRANSITIONS[current]:
        raise ConflictError(f"cannot move appeal from {current.value} to {target.value}")


def create_appeal(
    db: Session, auth: AuthContext, *, moderation_action_id: str, appeal_rationale: str
) -> Appeal:
    """File an appeal on behalf of the member the action affected."""
    action = live_action(db, moderation_action_id)
    if affected_member_id(db, action) != auth.member_id:
        raise ForbiddenError("only the affected member may appeal this action")
    if not appeal_rationale or not appeal_rationale.strip():
        raise ValidationError("appeal_rationale must not be empty")

    existing = (
        db.query(Appeal.id)
        .filter(Appeal.moderation_action_id == action.id, Appeal.deleted_at.is_(None))
        .first()
    )
    if existing is not None:
        raise ConflictError("moderation action already has an appeal")

    appeal = Appeal(
        moderation_action_id=action.id,
        appellant_member_id=auth.member_id,
        appeal_rationale=appeal_rationale,
        status=AppealStatus.PENDING,
    )
    try:
        with db.begin_nested():
            db.add(appeal)
            db.flush()
    except IntegrityError as err:
        raise ConflictError("moderation action already has an appeal") from err

    result = db.execute(
        update(ModerationAction)
        .where(ModerationAction.id == action.id, ModerationAction.deleted_at.is_(None))
        .values(status=ActionStatus.APPEALED, appeal_id=appeal.id, updated_at=utcnow())
    )
    if result.rowcount != 1:
        raise NotFoundError("moderation action not found")

    record_event(
        db,
        actor_member_id=auth.member_id,
        related_action_id=action.id,
        related_appeal_id=appeal.id,
        event_type="appeal_submitted",
    )
    db.commit()
    db.refresh(appeal)
    logger.info("appeal %s submitted against action %s", appeal.id, action.id)
    return appeal


def compare_and_transition(
    db: Session,
    auth: AuthContext,
    appeal: Appeal,
    observed: AppealStatus,
    target: AppealStatus,
    *,
    resolution_notes: str | None = None,
) -> Appeal:
    """Move ``appeal`` from ``observed`` to ``target`` if nobody moved it first."""
    require_staff(auth)
    try:
        check_transition(observed, target)
    except ConflictError:
        logger.warning(
            "appeal %s: rejected %s -> %s", appeal.id, observed.value, target.value
        )
        raise
    if target in RESOLUTION_REQUIRED and not (resolution_notes or "").strip():
        raise ValidationError(f"resolution_notes are required to mark an appeal {target.value}")
    live_action(db, appeal.moderation_action_id)

    now = utcnow()
    values: dict[str, object] = {"status": target, "updated_at": now}
    if target in TERMINAL_APPEAL_STATUSES and resolution_notes is not None:
        values["resolution_notes"] = resolution_notes

    result = db.execute(
        update(Appeal)
        .where(
            Appeal.id == appeal.id,
            Appeal.status == observed,
            Appeal.deleted_at.is_(None),
        )
        .values(**values)
    )
    if result.rowcount != 1:
        logger.warning(
            "appeal %s: lost race %s -> %s", appeal.id, observed.value, target.value
        )
        raise ConflictError("appeal was modified concurrently")

    record_event(
        db,
        actor_member_id=auth.member_id,
        related_action_id=appeal.moderation_action_id,
        related_appeal_id=appeal.id,
        event_type=f"appeal_{target.value}",
        event_details=resolution_notes,
    )

    if target in TERMINAL_APPEAL_STATUSES:
        coupled = db.execute(
            update(ModerationAction)
            .where(
                ModerationAction.id == appeal.moderation_action_id,
                ModerationAction.deleted_at.is_(None),
            )
            .values(status=ACTION_STATUS_ON_RESOLUTION[target], updated_at=now)
        )
        if coupled.rowcount != 1:
            raise NotFoundError("moderation action not found")
        queue_notification(
            db,
            recipient_member_id=appeal.appellant_member_id,
            actor_member_id=auth.member_id,
            type="appeal_resolved",
            title=f"Your appeal was {target.value}",
            body=resolution_notes,
            related_action_id=appeal.moderation_action_id,
            related_appeal_id=appeal.id,
        )

    db.commit()
    db.refresh(appeal)
    logger.info("appeal %s: %s -> %s", appeal.id, observed.value, target.value)
    return appeal


def transition_appeal(
    db: Session,
    auth: AuthContext,
    appeal_id: str,
    status: AppealStatus | str,
    *,
    resolution_notes: str | None = None,
    expected_status: AppealStatus | str | None = None,
) -> Appeal:
    """Change an appeal's status.

    ``expected_status`` is the status the reviewer last saw. When given, it is
    the state the swap is conditioned on, so two reviewers acting on the same
    observation cannot both succeed.
    """
    require_staff(auth)
    target = coerce_appeal_status(status)
    appeal = live_appeal(db, appeal_id)
    live_action(db, appeal.moderation_action_id)
    if appeal.status in TERMINAL_APPEAL_STATUSES:
        raise ConflictError(FINALIZED)

    observed = appeal.status
    if expected_status is not None:
        expected = coerce_appeal_status(expected_status)
        if expected != observed:
            logger.warning(
                "appeal %s: expected %s but found %s", appeal.id, expected.value, observed.value
            )
            raise ConflictError("appeal status changed since it was read")
        observed = expected

    return compare_and_transition(
        db, auth, appeal, observed, target, resolution_notes=resolution_notes
    )


def amend_rationale(
    db: Session, auth: AuthContext, appeal_id: str, appeal_rationale: str
) -> Appeal:
    """Let the appellant rewrite the rationale while the appeal is open."""
    appeal = live_appeal(db, appeal_id)
    live_action(db, appeal.moderation_action_id)
    if appeal.status in TERMINAL_APPEAL_STATUSES:
        raise ConflictError(FINALIZED)
    if appeal.appellant_member_id != auth.member_id:
        raise ForbiddenError("only the appellant may amend the rationale")
    if not appeal_rationale or not appeal_rationale.strip():
        raise ValidationError("appeal_rationale must not be empty")

    result = db.execute(
        update(Appeal)
        .where(
            Appeal.id == appeal.id,
            Appeal.status == appeal.status,
            Appeal.deleted_at.is_(None),
        )
        .values(appeal_rationale=appeal_rationale, updated_at=utcnow())
    )
    if result.rowcount != 1:
        raise ConflictError("appeal was modified concurrently")

    record_event(
        db,
        actor_member_id=auth.member_id,
        related_action_id=appeal.moderation_action_id,
        related_appeal_id=appeal.id,
        event_type="appeal_amended",
    )
    db.commit()
    db.refresh(appeal)
    return appeal


def update_appeal(
    db: Session,
    auth: AuthContext,
    appeal_id: str,
    *,
    appeal_rationale: str | None = None,
    status: AppealStatus | str | None = None,
    resolution_notes: str | None = None,
    expected_status: AppealStatus | str | None = None,
) -> Appeal:
    if status is not None:
        return transition_appeal(
            db,
            auth,
            appeal_id,
            status,
            resolution_notes=resolution_notes,
            expected_status=expected_status,
        )
    if appeal_rationale is not None:
        return amend_rationale(db, auth, appeal_id, appeal_rationale)
    raise ValidationError("nothing to update")


def get_appeal(db: Session, auth: AuthContext, appeal_id: str) -> Appeal:
    appeal = live_appeal(db, appeal_id)
    if not auth.is_staff and appeal.appellant_member_id != auth.member_id:
        raise ForbiddenError("appeal belongs to another member")
    return appeal


def search_appeals(
    db: Session,
    auth: AuthContext,
    *,
    status: AppealStatus | str | None = None,
    moderation_action_id: str | None = None,
    appellant_member_id: str | None = None,
    created_from: datetime | None = None,
    created_to: datetime | None = None,
    page: int = 1,
    limit: int = 20,
    sort: str | None = None,
) -> tuple[list[Appeal], Pagination]:
    """Staff see every live appeal; members only their own."""
    query = db.query(Appeal).filter(Appeal.deleted_at.is_(None))
    if not auth.is_staff:
        query = query.filter(Appeal.appellant_member_id == auth.member_id)
    elif appellant_member_id:
        query = query.filter(Appeal.appellant_member_id == appellant_member_id)
    if status is not None:
        query = query.filter(Appeal.status == coerce_appeal_status(status))
    if moderation_action_id:
        query = query.filter(Appeal.moderation_action_id == moderation_action_id)
    if created_from is not None:
        query = query.filter(Appeal.created_at >= created_from)
    if created_to is not None:
        query = query.filter(Appeal.created_at <= created_to)
    return paginate(
        query, page=page, limit=limit, sort=sort, sortable=APPEAL_SORTABLE, tiebreaker=Appeal.id
    )


def soft_delete_appeal(db: Session, auth: AuthContext, appeal_id: str) -> None:
    """Retire an appeal in any state and detach it from its action."""
    require_administrator(auth)
    appeal = live_appeal(db, appeal_id)
    now = utcnow()
    result = db.execute(
        update(Appeal)
        .where(Appeal.id == appeal.id, Appeal.deleted_at.is_(None))
        .values(deleted_at=now)
    )
    if result.rowcount != 1:
        raise NotFoundError("appeal not found")

    db.execute(
        update(ModerationAction)
        .where(
            ModerationAction.id == appeal.moderation_action_id,
            ModerationAction.appeal_id == appeal.id,
        )
        .values(appeal_id=None, updated_at=now)
    )
    if appeal.status not in TERMINAL_APPEAL_STATUSES:
        db.execute(
            update(ModerationAction)
            .where(
                ModerationAction.id == appeal.moderation_action_id,
                ModerationAction.status == ActionStatus.APPEALED,
            )
            .values(status=ActionStatus.ACTIVE, updated_at=now)
        )
    record_event(
        db,
        actor_member_id=auth.member_id,
        related_action_id=appeal.moderation_action_id,
        related_appeal_id=appeal.id,
        event_type="appeal_deleted",
    )
    db.commit()
    logger.info("appeal %s soft-deleted by administrator %s", appeal.id, auth.id)
