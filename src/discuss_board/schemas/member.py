"""Administrator-facing member and moderator schemas."""

from pydantic import BaseModel, ConfigDict, Field

from discuss_board.models.account import MemberStatus, ModeratorStatus

from .common import OrmResponse


class MemberUpdate(BaseModel):
    """Fields an administrator may change on a member account."""

    nickname: str | None = Field(None, min_length=1, max_length=64)
    status: MemberStatus | None = None
    email_verified: bool | None = None

    model_config = ConfigDict(extra="forbid")


class ModeratorUpdate(BaseModel):
    status: ModeratorStatus

    model_config = ConfigDict(extra="forbid")


class ModeratorResponse(OrmResponse):
    id: str
    member_id: str
    assigned_by_administrator_id: str | None
    status: str
    created_at: str
    updated_at: str
    deleted_at: str | None
