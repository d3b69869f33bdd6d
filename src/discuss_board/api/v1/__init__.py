"""Version 1 API endpoints."""

from .endpoints import (
    appeals_router,
    auth_router,
    members_router,
    moderation_actions_router,
    moderation_logs_router,
    moderators_router,
    notifications_router,
    posts_router,
    reactions_router,
    reports_router,
)

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
