"""Comment reaction schemas."""

from pydantic import BaseModel, ConfigDict, Field

from discuss_board.models.post import ReactionType

from .common import OrmResponse


class CommentReactionCreate(BaseModel):
    comment_id: str = Field(..., min_length=1, max_length=36)
    reaction_type: ReactionType

    model_config = ConfigDict(extra="forbid")


class CommentReactionResponse(OrmResponse):
    id: str
    member_id: str
    comment_id: str
    reaction_type: str
    created_at: str
    updated_at: str
    deleted_at: str | None
