"""
Pydantic schemas for API request/response models.

These schemas define the structure of API data for serialization and validation.
"""

from .auth import MemberJoinRequest, MemberResponse, RoleAuthorized, TokenPair
from .common import Page, Pagination
from .member import MemberUpdate, ModeratorResponse, ModeratorUpdate
from .moderation import (
    AppealCreate,
    AppealResponse,
    ModerationActionCreate,
    ModerationActionResponse,
    ModerationLogCreate,
    ModerationLogResponse,
)
from .notification import NotificationResponse
from .post import CommentResponse, PostCreate, PostResponse
from .reaction import CommentReactionCreate, CommentReactionResponse
from .report import ReportCreate, ReportResponse

__all__ = [
    "MemberJoinRequest", "MemberResponse", "RoleAuthorized", "TokenPair",
    "Page", "Pagination",
    "MemberUpdate", "ModeratorResponse", "ModeratorUpdate",
    "AppealCreate", "AppealResponse",
    "ModerationActionCreate", "ModerationActionResponse",
    "ModerationLogCreate", "ModerationLogResponse",
    "NotificationResponse",
    "CommentResponse", "PostCreate", "PostResponse",
    "CommentReactionCreate", "CommentReactionResponse",
    "ReportCreate", "ReportResponse",
]
