"""SQLAlchemy models for the discussion board."""

from .account import Administrator, ConsentRecord, Member, Moderator
from .moderation import Appeal, ModerationAction, ModerationLog
from .notification import Notification
from .post import Comment, CommentReaction, Post
from .report import ContentReport

__all__ = [
    "Administrator", "ConsentRecord", "Member", "Moderator",
    "Appeal", "ModerationAction", "ModerationLog",
    "Notification",
    "Comment", "CommentReaction", "Post",
    "ContentReport",
]
