"""Notification delivery records."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from sqlalchemy import DateTime, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from discuss_board.db.session import Base

from .mixins import SoftDeleteMixin, TimestampMixin, enum_column, new_uuid


class NotificationStatus(str, Enum):
    PENDING = "pending"
    DELIVERED = "delivered"
    READ = "read"
    FAILED = "failed"


class Notification(Base, TimestampMixin, SoftDeleteMixin):
    """A message queued for a member; delivery is tracked, not performed, here."""

    __tablename__ = "notifications"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_uuid)
    recipient_member_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("members.id"), nullable=False, index=True
    )
    actor_member_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("members.id"), nullable=True
    )
    type: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    status: Mapped[NotificationStatus] = mapped_column(
        enum_column(NotificationStatus), nullable=False, default=NotificationStatus.PENDING
    )
    title: Mapped[str | None] = mapped_column(String(300), nullable=True)
    body: Mapped[str | None] = mapped_column(Text, nullable=True)
    related_action_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("moderation_actions.id"), nullable=True
    )
    related_appeal_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("appeals.id"), nullable=True
    )
    failure_reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    delivered_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    read_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
