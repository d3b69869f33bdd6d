"""Member-filed content reports (flags)."""

from __future__ import annotations

from enum import Enum

from sqlalchemy import ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from discuss_board.db.session import Base

from .mixins import SoftDeleteMixin, TimestampMixin, enum_column, new_uuid


class ContentType(str, Enum):
    POST = "post"
    COMMENT = "comment"


class ReportStatus(str, Enum):
    PENDING = "pending"
    UNDER_REVIEW = "under_review"
    RESOLVED = "resolved"
    DISMISSED = "dismissed"


class ContentReport(Base, TimestampMixin, SoftDeleteMixin):
    """A flag raised by a member against exactly one post or comment."""

    __tablename__ = "content_reports"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_uuid)
    reporter_member_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("members.id"), nullable=False, index=True
    )
    content_type: Mapped[ContentType] = mapped_column(enum_column(ContentType), nullable=False)
    content_post_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("posts.id"), nullable=True, index=True
    )
    content_comment_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("comments.id"), nullable=True, index=True
    )
    reason: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[ReportStatus] = mapped_column(
        enum_column(ReportStatus), nullable=False, default=ReportStatus.PENDING
    )
    moderation_action_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("moderation_actions.id"), nullable=True
    )
