"""Notification endpoints."""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Query, Response, status

from discuss_board.api.v1.dependencies import AuthDep, ListParamsDep, SessionDep
from discuss_board.models.notification import NotificationStatus
from discuss_board.schemas.common import Page
from discuss_board.schemas.notification import NotificationDeliveryUpdate, NotificationResponse
from discuss_board.services import notifications as notification_service

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("/", response_model=Page[NotificationResponse])
async def list_notifications(
    auth: AuthDep,
    db: SessionDep,
    params: ListParamsDep,
    notification_status: NotificationStatus | None = Query(None, alias="status"),
    notification_type: str | None = Query(None, alias="type", max_length=64),
    recipient_member_id: UUID | None = Query(None),
) -> Page[NotificationResponse]:
    rows, pagination = notification_service.list_notifications(
        db,
        auth,
        status=notification_status,
        type=notification_type,
        recipient_member_id=str(recipient_member_id) if recipient_member_id else None,
        page=params.page,
        limit=params.limit,
        sort=params.sort,
    )
    return Page[NotificationResponse](
        pagination=pagination,
        data=[NotificationResponse.model_validate(row) for row in rows],
    )


@router.get("/{notification_id}", response_model=NotificationResponse)
async def get_notification(
    notification_id: UUID, auth: AuthDep, db: SessionDep
) -> NotificationResponse:
    notification = notification_service.get_notification(db, auth, str(notification_id))
    return NotificationResponse.model_validate(notification)


@router.post("/{notification_id}/read", response_model=NotificationResponse)
async def mark_notification_read(
    notification_id: UUID, auth: AuthDep, db: SessionDep
) -> NotificationResponse:
    notification = notification_service.mark_read(db, auth, str(notification_id))
    return NotificationResponse.model_validate(notification)


@router.patch("/{notification_id}", response_model=NotificationResponse)
async def update_notification_delivery(
    notification_id: UUID,
    body: NotificationDeliveryUpdate,
    auth: AuthDep,
    db: SessionDep,
) -> NotificationResponse:
    """Record a delivery outcome (administrators only)."""
    notification = notification_service.update_delivery(
        db,
        auth,
        str(notification_id),
        status=body.status,
        failure_reason=body.failure_reason,
    )
    return NotificationResponse.model_validate(notification)


@router.delete("/{notification_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_notification(
    notification_id: UUID, auth: AuthDep, db: SessionDep
) -> Response:
    notification_service.soft_delete_notification(db, auth, str(notification_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
