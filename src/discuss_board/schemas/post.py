"""Post and comment schemas."""

from pydantic import BaseModel, Field

from discuss_board.models.post import PostStatus

from .common import OrmResponse


class PostCreate(BaseModel):
    """Schema for creating a new post."""

    title: str = Field(..., min_length=1, max_length=300)
    body: str = Field(..., min_length=1)


class PostUpdate(BaseModel):
    """Partial update of a post; ``business_status`` is staff-only."""

    title: str | None = Field(None, min_length=1, max_length=300)
    body: str | None = Field(None, min_length=1)
    business_status: PostStatus | None = None


class PostResponse(OrmResponse):
    id: str
    author_member_id: str
    title: str
    body: str
    business_status: str
    created_at: str
    updated_at: str
    deleted_at: str | None


class CommentCreate(BaseModel):
    body: str = Field(..., min_length=1)


class CommentUpdate(BaseModel):
    body: str = Field(..., min_length=1)


class CommentResponse(OrmResponse):
    id: str
    post_id: str
    author_member_id: str
    body: str
    created_at: str
    updated_at: str
    deleted_at: str | None
