"""Content report schemas."""

from pydantic import BaseModel, ConfigDict, Field

from discuss_board.models.report import ContentType, ReportStatus

from .common import OrmResponse


class ReportCreate(BaseModel):
    """Flag exactly one post or comment; ``content_type`` names which."""

    content_type: ContentType
    content_post_id: str | None = Field(None, max_length=36)
    content_comment_id: str | None = Field(None, max_length=36)
    reason: str = Field(..., min_length=1)

    model_config = ConfigDict(extra="forbid")


class ReportUpdate(BaseModel):
    status: ReportStatus | None = None
    moderation_action_id: str | None = Field(None, max_length=36)

    model_config = ConfigDict(extra="forbid")


class ReportResponse(OrmResponse):
    id: str
    reporter_member_id: str
    content_type: str
    content_post_id: str | None
    content_comment_id: str | None
    reason: str
    status: str
    moderation_action_id: str | None
    created_at: str
    updated_at: str
    deleted_at: str | None
