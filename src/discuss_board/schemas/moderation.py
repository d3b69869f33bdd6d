"""Schemas for moderation actions, appeals and moderation logs."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, model_validator

from discuss_board.models.moderation import ActionStatus, ActionType, AppealStatus

from .common import OrmResponse


class ModerationActionCreate(BaseModel):
    """Schema for recording a moderation action.

    At most one of the three target references may be supplied.
    """

    target_member_id: str | None = Field(None, max_length=36)
    target_post_id: str | None = Field(None, max_length=36)
    target_comment_id: str | None = Field(None, max_length=36)
    action_type: ActionType
    action_reason: str = Field(..., min_length=1)
    details: str | None = None
    effective_from: datetime | None = None
    effective_until: datetime | None = None

    model_config = ConfigDict(extra="forbid")


class ModerationActionUpdate(BaseModel):
    """Fields the owning moderator or an administrator may change."""

    action_type: ActionType | None = None
    action_reason: str | None = Field(None, min_length=1)
    details: str | None = None
    effective_from: datetime | None = None
    effective_until: datetime | None = None
    status: ActionStatus | None = None

    model_config = ConfigDict(extra="forbid")


class ModerationActionResponse(OrmResponse):
    id: str
    moderator_id: str
    target_member_id: str | None
    target_post_id: str | None
    target_comment_id: str | None
    action_type: str
    action_reason: str
    details: str | None
    effective_from: str
    effective_until: str | None
    status: str
    appeal_id: str | None
    created_at: str
    updated_at: str
    deleted_at: str | None


class AppealCreate(BaseModel):
    moderation_action_id: str = Field(..., min_length=1, max_length=36)
    appeal_rationale: str = Field(..., min_length=1)

    model_config = ConfigDict(extra="forbid")


class AppealUpdate(BaseModel):
    """Either a rationale amendment (appellant) or a status transition (staff).

    ``expected_status`` lets a reviewer assert the state they observed; the
    transition is rejected if the appeal has moved on since.
    """

    appeal_rationale: str | None = Field(None, min_length=1)
    status: AppealStatus | None = None
    resolution_notes: str | None = None
    expected_status: AppealStatus | None = None

    model_config = ConfigDict(extra="forbid")

    @model_validator(mode="after")
    def _one_kind_of_change(self) -> "AppealUpdate":
        if self.appeal_rationale is not None and self.status is not None:
            raise ValueError("rationale and status cannot change in the same request")
        if self.appeal_rationale is None and self.status is None:
            raise ValueError("nothing to update")
        return self


class AppealResponse(OrmResponse):
    id: str
    moderation_action_id: str
    appellant_member_id: str
    appeal_rationale: str
    status: str
    resolution_notes: str | None
    created_at: str
    updated_at: str
    deleted_at: str | None


class ModerationLogCreate(BaseModel):
    related_action_id: str = Field(..., min_length=1, max_length=36)
    related_appeal_id: str | None = Field(None, max_length=36)
    related_report_id: str | None = Field(None, max_length=36)
    event_type: str = Field(..., min_length=1, max_length=64)
    event_details: str | None = None

    model_config = ConfigDict(extra="forbid")


class ModerationLogUpdate(BaseModel):
    """Only the narrative of a log entry may be corrected."""

    event_details: str | None

    model_config = ConfigDict(extra="forbid")


class ModerationLogResponse(OrmResponse):
    id: str
    actor_member_id: str | None
    related_action_id: str
    related_appeal_id: str | None
    related_report_id: str | None
    event_type: str
    event_details: str | None
    created_at: str
    deleted_at: str | None
