"""Notification schemas."""

from pydantic import BaseModel, ConfigDict, model_validator

from discuss_board.models.notification import NotificationStatus

from .common import OrmResponse


class NotificationDeliveryUpdate(BaseModel):
    """Delivery outcome reported by an administrator."""

    status: NotificationStatus
    failure_reason: str | None = None

    model_config = ConfigDict(extra="forbid")

    @model_validator(mode="after")
    def _failure_needs_reason(self) -> "NotificationDeliveryUpdate":
        if self.status is NotificationStatus.FAILED and not self.failure_reason:
            raise ValueError("failure_reason is required when status is failed")
        return self


class NotificationResponse(OrmResponse):
    id: str
    recipient_member_id: str
    actor_member_id: str | None
    type: str
    status: str
    title: str | None
    body: str | None
    related_action_id: str | None
    related_appeal_id: str | None
    failure_reason: str | None
    delivered_at: str | None
    read_at: str | None
    created_at: str
    updated_at: str
    deleted_at: str | None
