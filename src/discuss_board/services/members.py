"""Administrator management of member accounts and moderator grants."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import datetime
from typing import Any

from sqlalchemy import or_, update
from sqlalchemy.orm import Session

from discuss_board.core.auth import AuthContext, require_administrator
from discuss_board.core.errors import ConflictError, ForbiddenError, NotFoundError, ValidationError
from discuss_board.db.time import utcnow
from discuss_board.models.account import Member, MemberStatus, Moderator, ModeratorStatus
from discuss_board.schemas.common import Pagination
from discuss_board.services.pagination import paginate

logger = logging.getLogger(__name__)

MEMBER_SORTABLE = {
    "created_at": Member.created_at,
    "updated_at": Member.updated_at,
    "nickname": Member.nickname,
    "email": Member.email,
}
MODERATOR_SORTABLE = {
    "created_at": Moderator.created_at,
    "updated_at": Moderator.updated_at,
    "status": Moderator.status,
}
MUTABLE_MEMBER_FIELDS = frozenset({"nickname", "status", "email_verified"})


def live_member(db: Session, member_id: str) -> Member:
    member = (
        db.query(Member)
        .filter(Member.id == member_id, Member.deleted_at.is_(None))
        .first()
    )
    if member is None:
        raise NotFoundError("member not found")
    return member


def get_member(db: Session, auth: AuthContext, member_id: str) -> Member:
    """Administrators read any account; everyone else only their own."""
    if not auth.is_administrator and auth.member_id != member_id:
        raise ForbiddenError("administrator role required")
    return live_member(db, member_id)


def search_members(
    db: Session,
    auth: AuthContext,
    *,
    keyword: str | None = None,
    status: MemberStatus | str | None = None,
    email_verified: bool | None = None,
    created_from: datetime | None = None,
    created_to: datetime | None = None,
    page: int = 1,
    limit: int = 20,
    sort: str | None = None,
) -> tuple[list[Member], Pagination]:
    require_administrator(auth)
    query = db.query(Member).filter(Member.deleted_at.is_(None))
    if keyword:
        pattern = f"%{keyword}%"
        query = query.filter(or_(Member.nickname.ilike(pattern), Member.email.ilike(pattern)))
    if status is not None:
        try:
            query = query.filter(Member.status == MemberStatus(status))
        except ValueError as err:
            raise ValidationError(f"unknown status: {status}") from err
    if email_verified is not None:
        query = query.filter(Member.email_verified.is_(email_verified))
    if created_from is not None:
        query = query.filter(Member.created_at >= created_from)
    if created_to is not None:
        query = query.filter(Member.created_at <= created_to)
    return paginate(
        query, page=page, limit=limit, sort=sort, sortable=MEMBER_SORTABLE, tiebreaker=Member.id
    )


def update_member(
    db: Session, auth: AuthContext, member_id: str, changes: Mapping[str, Any]
) -> Member:
    """Rename, verify, suspend, ban or reactivate a member.

    A suspended or banned member can no longer log in, and tokens already
    issued to them stop resolving.
    """
    require_administrator(auth)
    unknown = sorted(set(changes) - MUTABLE_MEMBER_FIELDS)
    if unknown:
        raise ValidationError(f"fields are immutable: {', '.join(unknown)}")
    if not changes:
        raise ValidationError("nothing to update")

    member = live_member(db, member_id)
    if "status" in changes and changes["status"] is not None:
        try:
            new_status = MemberStatus(changes["status"])
        except ValueError as err:
            raise ValidationError(f"unknown status: {changes['status']}") from err
        if member.id == auth.member_id and new_status is not MemberStatus.ACTIVE:
            raise ConflictError("administrators cannot deactivate their own account")
        if new_status is not member.status:
            logger.info(
                "member %s: %s -> %s by administrator %s",
                member.id,
                member.status.value,
                new_status.value,
                auth.id,
            )
        member.status = new_status

    nickname = changes.get("nickname")
    if nickname is not None and nickname != member.nickname:
        taken = (
            db.query(Member.id)
            .filter(Member.nickname == nickname, Member.id != member.id)
            .first()
        )
        if taken is not None:
            raise ConflictError("nickname is already taken")
        member.nickname = nickname

    if changes.get("email_verified") is not None:
        member.email_verified = bool(changes["email_verified"])

    db.commit()
    db.refresh(member)
    return member


def soft_delete_member(db: Session, auth: AuthContext, member_id: str) -> None:
    require_administrator(auth)
    if member_id == auth.member_id:
        raise ConflictError("administrators cannot delete their own account")
    result = db.execute(
        update(Member)
        .where(Member.id == member_id, Member.deleted_at.is_(None))
        .values(deleted_at=utcnow())
    )
    if result.rowcount != 1:
        raise NotFoundError("member not found")
    db.commit()
    logger.info("member %s soft-deleted by administrator %s", member_id, auth.id)


def get_moderator(db: Session, auth: AuthContext, moderator_id: str) -> Moderator:
    require_administrator(auth)
    moderator = (
        db.query(Moderator)
        .filter(Moderator.id == moderator_id, Moderator.deleted_at.is_(None))
        .first()
    )
    if moderator is None:
        raise NotFoundError("moderator not found")
    return moderator


def search_moderators(
    db: Session,
    auth: AuthContext,
    *,
    status: ModeratorStatus | str | None = None,
    page: int = 1,
    limit: int = 20,
    sort: str | None = None,
) -> tuple[list[Moderator], Pagination]:
    require_administrator(auth)
    query = db.query(Moderator).filter(Moderator.deleted_at.is_(None))
    if status is not None:
        try:
            query = query.filter(Moderator.status == ModeratorStatus(status))
        except ValueError as err:
            raise ValidationError(f"unknown status: {status}") from err
    return paginate(
        query,
        page=page,
        limit=limit,
        sort=sort,
        sortable=MODERATOR_SORTABLE,
        tiebreaker=Moderator.id,
    )


def update_moderator_status(
    db: Session, auth: AuthContext, moderator_id: str, status: ModeratorStatus | str
) -> Moderator:
    """Revoke or restore moderator rights; revoked tokens stop resolving at once."""
    require_administrator(auth)
    try:
        new_status = ModeratorStatus(status)
    except ValueError as err:
        raise ValidationError(f"unknown status: {status}") from err

    moderator = get_moderator(db, auth, moderator_id)
    result = db.execute(
        update(Moderator)
        .where(Moderator.id == moderator.id, Moderator.deleted_at.is_(None))
        .values(status=new_status, updated_at=utcnow())
    )
    if result.rowcount != 1:
        raise NotFoundError("moderator not found")
    db.commit()
    db.refresh(moderator)
    logger.info("moderator %s set %s by administrator %s", moderator.id, new_status.value, auth.id)
    return moderator
