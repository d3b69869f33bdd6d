"""API endpoint modules for version 1."""

from .appeals import router as appeals_router
from .auth import router as auth_router
from .members import router as members_router
from .moderation_actions import router as moderation_actions_router
from .moderation_logs import router as moderation_logs_router
from .moderators import router as moderators_router
from .notifications import router as notifications_router
from .posts import router as posts_router
from .reactions import router as reactions_router
from .reports import router as reports_router

__all__ = [
    "auth_router",
    "posts_router",
    "reports_router",
    "moderation_actions_router",
    "appeals_router",
    "moderation_logs_router",
    "notifications_router",
    "members_router",
    "moderators_router",
    "reactions_router",
]
