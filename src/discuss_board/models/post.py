"""SQLAlchemy models for posts and comments."""

from __future__ import annotations

from enum import Enum

from sqlalchemy import ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from discuss_board.db.session import Base

from .mixins import SoftDeleteMixin, TimestampMixin, enum_column, new_uuid


class PostStatus(str, Enum):
    PUBLIC = "public"
    LOCKED = "locked"
    HIDDEN = "hidden"


class ReactionType(str, Enum):
    LIKE = "like"
    DISLIKE = "dislike"


class Post(Base, TimestampMixin, SoftDeleteMixin):
    """A top-level discussion thread started by a member."""

    __tablename__ = "posts"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_uuid)
    author_member_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("members.id"), nullable=False, index=True
    )
    title: Mapped[str] = mapped_column(String(300), nullable=False)
    body: Mapped[str] = mapped_column(Text, nullable=False)
    business_status: Mapped[PostStatus] = mapped_column(
        enum_column(PostStatus), nullable=False, default=PostStatus.PUBLIC
    )


class Comment(Base, TimestampMixin, SoftDeleteMixin):
    """A reply attached to a post."""

    __tablename__ = "comments"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_uuid)
    post_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("posts.id"), nullable=False, index=True
    )
    author_member_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("members.id"), nullable=False, index=True
    )
    body: Mapped[str] = mapped_column(Text, nullable=False)


class CommentReaction(Base, TimestampMixin, SoftDeleteMixin):
    """One like or dislike per member and comment; deleted rows are revived, not duplicated."""

    __tablename__ = "comment_reactions"
    __table_args__ = (
        UniqueConstraint("member_id", "comment_id", name="uq_comment_reactions_member_comment"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_uuid)
    member_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("members.id"), nullable=False, index=True
    )
    comment_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("comments.id"), nullable=False, index=True
    )
    reaction_type: Mapped[ReactionType] = mapped_column(
        enum_column(ReactionType), nullable=False
    )
