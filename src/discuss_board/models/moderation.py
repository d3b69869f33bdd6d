"""Models for moderation actions, appeals and the moderation audit log."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from sqlalchemy import DateTime, ForeignKey, Index, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column

from discuss_board.db.session import Base
from discuss_board.db.time import utcnow

from .mixins import SoftDeleteMixin, TimestampMixin, enum_column, new_uuid


class ActionType(str, Enum):
    WARN = "warn"
    MUTE = "mute"
    REMOVE = "remove"
    EDIT = "edit"
    RESTRICT = "restrict"
    RESTORE = "restore"
    ESCALATE = "escalate"


class ActionStatus(str, Enum):
    ACTIVE = "active"
    APPEALED = "appealed"
    REVERSED = "reversed"


class AppealStatus(str, Enum):
    PENDING = "pending"
    UNDER_REVIEW = "under_review"
    ACCEPTED = "accepted"
    DENIED = "denied"
    CLOSED = "closed"


TERMINAL_APPEAL_STATUSES = frozenset(
    {AppealStatus.ACCEPTED, AppealStatus.DENIED, AppealStatus.CLOSED}
)

# Every legal edge of the appeal workflow; anything absent is a conflict.
APPEAL_TRANSITIONS: dict[AppealStatus, frozenset[AppealStatus]] = {
    AppealStatus.PENDING: frozenset({AppealStatus.UNDER_REVIEW, AppealStatus.CLOSED}),
    AppealStatus.UNDER_REVIEW: frozenset(
        {AppealStatus.ACCEPTED, AppealStatus.DENIED, AppealStatus.CLOSED}
    ),
    AppealStatus.ACCEPTED: frozenset(),
    AppealStatus.DENIED: frozenset(),
    AppealStatus.CLOSED: frozenset(),
}

# Terminal states that must carry resolution notes.
RESOLUTION_REQUIRED = frozenset({AppealStatus.ACCEPTED, AppealStatus.DENIED})


class ModerationAction(Base, TimestampMixin, SoftDeleteMixin):
    """An intervention recorded by a moderator against a member, post or comment."""

    __tablename__ = "moderation_actions"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_uuid)
    moderator_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("moderators.id"), nullable=False, index=True
    )
    # At most one of the three targets is set.
    target_member_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("members.id"), nullable=True, index=True
    )
    target_post_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("posts.id"), nullable=True, index=True
    )
    target_comment_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("comments.id"), nullable=True, index=True
    )
    action_type: Mapped[ActionType] = mapped_column(enum_column(ActionType), nullable=False)
    action_reason: Mapped[str] = mapped_column(Text, nullable=False)
    details: Mapped[str | None] = mapped_column(Text, nullable=True)
    effective_from: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    effective_until: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    status: Mapped[ActionStatus] = mapped_column(
        enum_column(ActionStatus), nullable=False, default=ActionStatus.ACTIVE
    )
    # Back-reference to the live appeal. Maintained by the appeal workflow and
    # kept without a database FK to avoid a cycle with appeals.moderation_action_id.
    appeal_id: Mapped[str | None] = mapped_column(String(36), nullable=True)


class Appeal(Base, TimestampMixin, SoftDeleteMixin):
    """A member's contest of a moderation action."""

    __tablename__ = "appeals"
    __table_args__ = (
        # One live appeal per action.
        Index(
            "uq_appeals_live_action",
            "moderation_action_id",
            unique=True,
            sqlite_where=text("deleted_at IS NULL"),
            postgresql_where=text("deleted_at IS NULL"),
        ),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_uuid)
    moderation_action_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("moderation_actions.id"), nullable=False
    )
    appellant_member_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("members.id"), nullable=False, index=True
    )
    appeal_rationale: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[AppealStatus] = mapped_column(
        enum_column(AppealStatus), nullable=False, default=AppealStatus.PENDING
    )
    resolution_notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_APPEAL_STATUSES


class ModerationLog(Base, SoftDeleteMixin):
    """Append-only audit entry tied to a moderation action."""

    __tablename__ = "moderation_logs"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_uuid)
    # Null for system-generated entries.
    actor_member_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("members.id"), nullable=True, index=True
    )
    related_action_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("moderation_actions.id"), nullable=False, index=True
    )
    related_appeal_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("appeals.id"), nullable=True, index=True
    )
    related_report_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("content_reports.id"), nullable=True, index=True
    )
    event_type: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    event_details: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )
