"""Moderation log endpoints."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from fastapi import APIRouter, Query, Response, status

from discuss_board.api.v1.dependencies import AuthDep, ListParamsDep, SessionDep
from discuss_board.schemas.common import Page
from discuss_board.schemas.moderation import (
    ModerationLogCreate,
    ModerationLogResponse,
    ModerationLogUpdate,
)
from discuss_board.services import moderation_logs as log_service

router = APIRouter(prefix="/moderation-logs", tags=["moderation"])


@router.post("/", response_model=ModerationLogResponse, status_code=status.HTTP_201_CREATED)
async def append_moderation_log(
    body: ModerationLogCreate, auth: AuthDep, db: SessionDep
) -> ModerationLogResponse:
    entry = log_service.append_log(db, auth, **body.model_dump())
    return ModerationLogResponse.model_validate(entry)


@router.get("/", response_model=Page[ModerationLogResponse])
async def search_moderation_logs(
    auth: AuthDep,
    db: SessionDep,
    params: ListParamsDep,
    related_action_id: UUID | None = Query(None),
    related_appeal_id: UUID | None = Query(None),
    related_report_id: UUID | None = Query(None),
    actor_member_id: UUID | None = Query(None),
    event_type: str | None = Query(None, max_length=64),
    created_from: datetime | None = Query(None),
    created_to: datetime | None = Query(None),
    include_deleted: bool = Query(False),
) -> Page[ModerationLogResponse]:
    """Search the audit trail; administrators may include deleted entries."""
    rows, pagination = log_service.search_logs(
        db,
        auth,
        related_action_id=str(related_action_id) if related_action_id else None,
        related_appeal_id=str(related_appeal_id) if related_appeal_id else None,
        related_report_id=str(related_report_id) if related_report_id else None,
        actor_member_id=str(actor_member_id) if actor_member_id else None,
        event_type=event_type,
        created_from=created_from,
        created_to=created_to,
        include_deleted=include_deleted,
        page=params.page,
        limit=params.limit,
        sort=params.sort,
    )
    return Page[ModerationLogResponse](
        pagination=pagination,
        data=[ModerationLogResponse.model_validate(row) for row in rows],
    )


@router.get("/{moderation_log_id}", response_model=ModerationLogResponse)
async def get_moderation_log(
    moderation_log_id: UUID,
    auth: AuthDep,
    db: SessionDep,
    include_deleted: bool = Query(False),
) -> ModerationLogResponse:
    entry = log_service.get_log(
        db, auth, str(moderation_log_id), include_deleted=include_deleted
    )
    return ModerationLogResponse.model_validate(entry)


@router.patch("/{moderation_log_id}", response_model=ModerationLogResponse)
async def update_moderation_log(
    moderation_log_id: UUID,
    body: ModerationLogUpdate,
    auth: AuthDep,
    db: SessionDep,
) -> ModerationLogResponse:
    entry = log_service.update_log(
        db, auth, str(moderation_log_id), body.model_dump(exclude_unset=True)
    )
    return ModerationLogResponse.model_validate(entry)


@router.delete("/{moderation_log_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_moderation_log(
    moderation_log_id: UUID, auth: AuthDep, db: SessionDep
) -> Response:
    log_service.soft_delete_log(db, auth, str(moderation_log_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
