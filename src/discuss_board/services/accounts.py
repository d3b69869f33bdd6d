"""Registration, login and token refresh for members, moderators and administrators."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from jose import JWTError
from sqlalchemy.orm import Session

from discuss_board.core import security
from discuss_board.core.auth import AuthContext, require_administrator
from discuss_board.core.errors import (
    AuthenticationError,
    ConflictError,
    ForbiddenError,
    NotFoundError,
    ValidationError,
)
from discuss_board.db.time import to_iso
from discuss_board.models.account import (
    Administrator,
    ConsentRecord,
    Member,
    MemberStatus,
    Moderator,
    ModeratorStatus,
    Role,
)

logger = logging.getLogger(__name__)

CONSENT_GRANTED = "granted"


@dataclass(frozen=True)
class ConsentInput:
    policy_type: str
    policy_version: str
    consent_action: str = CONSENT_GRANTED


@dataclass(frozen=True)
class IssuedTokens:
    access: str
    refresh: str
    expired_at: datetime
    refreshable_until: datetime

    def as_dict(self) -> dict[str, str | None]:
        return {
            "access": self.access,
            "refresh": self.refresh,
            "expired_at": to_iso(self.expired_at),
            "refreshable_until": to_iso(self.refreshable_until),
        }


def issue_tokens(subject_id: str, role: Role) -> IssuedTokens:
    """Sign an access/refresh pair for a role record."""
    access, expired_at = security.create_token(subject_id, role.value, security.ACCESS_TOKEN)
    refresh, refreshable_until = security.create_token(
        subject_id, role.value, security.REFRESH_TOKEN
    )
    return IssuedTokens(access, refresh, expired_at, refreshable_until)


def _live_member(db: Session, member_id: str) -> Member | None:
    return (
        db.query(Member)
        .filter(Member.id == member_id, Member.deleted_at.is_(None))
        .first()
    )


def _active_moderator(db: Session, moderator_id: str) -> Moderator | None:
    return (
        db.query(Moderator)
        .filter(
            Moderator.id == moderator_id,
            Moderator.status == ModeratorStatus.ACTIVE,
            Moderator.deleted_at.is_(None),
        )
        .first()
    )


def _live_administrator(db: Session, administrator_id: str) -> Administrator | None:
    return (
        db.query(Administrator)
        .filter(Administrator.id == administrator_id, Administrator.deleted_at.is_(None))
        .first()
    )


def _moderator_of(db: Session, member_id: str) -> Moderator | None:
    return db.query(Moderator).filter(Moderator.member_id == member_id).first()


def _administrator_of(db: Session, member_id: str) -> Administrator | None:
    return db.query(Administrator).filter(Administrator.member_id == member_id).first()


def resolve_context(db: Session, role: Role, subject_id: str) -> AuthContext | None:
    """Rebuild the caller context from a token subject, or None if it no longer holds."""
    member_id: str | None = None
    if role is Role.MEMBER:
        member = _live_member(db, subject_id)
        if member is not None and member.status is MemberStatus.ACTIVE:
            member_id = member.id
    elif role is Role.MODERATOR:
        moderator = _active_moderator(db, subject_id)
        if moderator is not None:
            member_id = moderator.member_id
    elif role is Role.ADMINISTRATOR:
        administrator = _live_administrator(db, subject_id)
        if administrator is not None:
            member_id = administrator.member_id

    if member_id is None:
        return None
    if role is not Role.MEMBER:
        member = _live_member(db, member_id)
        if member is None or member.status is not MemberStatus.ACTIVE:
            return None
    return AuthContext(id=subject_id, type=role, member_id=member_id)


def context_from_token(
    db: Session, token: str, token_type: str = security.ACCESS_TOKEN
) -> AuthContext:
    """Verify ``token`` and return the context it authenticates."""
    try:
        payload: dict[str, Any] = security.decode_token(token)
    except JWTError as err:
        raise AuthenticationError("could not validate credentials") from err

    if payload.get("token_type") != token_type:
        raise AuthenticationError("wrong token type")
    try:
        role = Role(payload.get("type"))
    except ValueError as err:
        raise AuthenticationError("could not validate credentials") from err
    subject_id = payload.get("id")
    if not isinstance(subject_id, str):
        raise AuthenticationError("could not validate credentials")

    context = resolve_context(db, role, subject_id)
    if context is None:
        raise AuthenticationError("account is no longer active")
    return context


def join_member(
    db: Session,
    *,
    email: str,
    password: str,
    nickname: str,
    consents: Sequence[ConsentInput],
    required_policies: Iterable[str],
    min_password_length: int,
) -> Member:
    """Register a member after checking password length and mandatory consents."""
    if len(password) < min_password_length:
        raise ValidationError(f"password must be at least {min_password_length} characters")

    granted = {c.policy_type for c in consents if c.consent_action == CONSENT_GRANTED}
    missing = [policy for policy in required_policies if policy not in granted]
    if missing:
        raise ValidationError(f"consent required for: {', '.join(missing)}")

    if db.query(Member).filter(Member.email == email).first() is not None:
        raise ConflictError("email is already registered")
    if db.query(Member).filter(Member.nickname == nickname).first() is not None:
        raise ConflictError("nickname is already taken")

    member = Member(
        email=email,
        password_hash=security.hash_password(password),
        nickname=nickname,
    )
    db.add(member)
    db.flush()
    for consent in consents:
        db.add(
            ConsentRecord(
                member_id=member.id,
                policy_type=consent.policy_type,
                policy_version=consent.policy_version,
                consent_action=consent.consent_action,
            )
        )
    db.commit()
    db.refresh(member)
    logger.info("member %s registered", member.id)
    return member


def _authenticate_member(db: Session, email: str, password: str) -> Member:
    member = (
        db.query(Member)
        .filter(Member.email == email, Member.deleted_at.is_(None))
        .first()
    )
    if member is None or not security.verify_password(member.password_hash, password):
        logger.info("login rejected for unknown account or bad password")
        raise AuthenticationError("invalid email or password")
    if member.status is not MemberStatus.ACTIVE:
        raise ForbiddenError("account is not active")
    return member


def login(db: Session, role: Role, *, email: str, password: str) -> tuple[str, Member]:
    """Authenticate the member behind ``role`` and return the role record id."""
    member = _authenticate_member(db, email, password)
    if role is Role.MEMBER:
        return member.id, member

    if role is Role.MODERATOR:
        moderator = _moderator_of(db, member.id)
        if (
            moderator is None
            or moderator.deleted_at is not None
            or moderator.status is not ModeratorStatus.ACTIVE
        ):
            raise ForbiddenError("account does not hold moderator rights")
        return moderator.id, member

    administrator = _administrator_of(db, member.id)
    if administrator is None or administrator.deleted_at is not None:
        raise ForbiddenError("account does not hold administrator rights")
    return administrator.id, member


def refresh(db: Session, role: Role, refresh_token: str) -> tuple[AuthContext, IssuedTokens]:
    """Exchange a refresh token of ``role`` for a new pair."""
    context = context_from_token(db, refresh_token, security.REFRESH_TOKEN)
    if context.type is not role:
        raise AuthenticationError("token was issued for a different role")
    return context, issue_tokens(context.id, role)


def member_of(db: Session, context: AuthContext) -> Member:
    member = _live_member(db, context.member_id)
    if member is None:
        raise NotFoundError("member not found")
    return member


def join_moderator(db: Session, auth: AuthContext, member_id: str) -> Moderator:
    """Grant moderator rights to an existing member."""
    require_administrator(auth)
    member = _live_member(db, member_id)
    if member is None:
        raise NotFoundError("member not found")

    moderator = _moderator_of(db, member.id)
    if moderator is not None:
        if moderator.deleted_at is None and moderator.status is ModeratorStatus.ACTIVE:
            raise ConflictError("member is already a moderator")
        moderator.status = ModeratorStatus.ACTIVE
        moderator.deleted_at = None
        moderator.assigned_by_administrator_id = auth.id
    else:
        moderator = Moderator(
            member_id=member.id,
            assigned_by_administrator_id=auth.id,
        )
        db.add(moderator)

    db.commit()
    db.refresh(moderator)
    logger.info("member %s promoted to moderator by administrator %s", member.id, auth.id)
    return moderator


def administrators_exist(db: Session) -> bool:
    return (
        db.query(Administrator.id).filter(Administrator.deleted_at.is_(None)).first()
        is not None
    )


def join_administrator(
    db: Session,
    auth: AuthContext | None,
    *,
    email: str | None = None,
    password: str | None = None,
    member_id: str | None = None,
) -> Administrator:
    """Create an administrator.

    While no administrator exists, any member may claim the role with their own
    credentials. After that only an administrator may promote another member.
    """
    if not administrators_exist(db):
        if email is None or password is None:
            raise ValidationError("email and password are required to bootstrap an administrator")
        member = _authenticate_member(db, email, password)
        assigned_by = None
    else:
        if auth is None:
            raise ForbiddenError("administrator role required")
        require_administrator(auth)
        if member_id is None:
            raise ValidationError("member_id is required")
        found = _live_member(db, member_id)
        if found is None:
            raise NotFoundError("member not found")
        member = found
        assigned_by = auth.id

    administrator = _administrator_of(db, member.id)
    if administrator is not None:
        if administrator.deleted_at is None:
            raise ConflictError("member is already an administrator")
        administrator.deleted_at = None
    else:
        administrator = Administrator(member_id=member.id)
        db.add(administrator)

    db.commit()
    db.refresh(administrator)
    logger.info("member %s granted administrator (by %s)", member.id, assigned_by or "bootstrap")
    return administrator
