"""Moderation action endpoints."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from fastapi import APIRouter, Query, Response, status

from discuss_board.api.v1.dependencies import AuthDep, ListParamsDep, SessionDep
from discuss_board.models.moderation import ActionStatus, ActionType
from discuss_board.schemas.common import Page
from discuss_board.schemas.moderation import (
    ModerationActionCreate,
    ModerationActionResponse,
    ModerationActionUpdate,
)
from discuss_board.services import moderation_actions as action_service

router = APIRouter(prefix="/moderation-actions", tags=["moderation"])


def _opt(value: UUID | None) -> str | None:
    return str(value) if value is not None else None


@router.post("/", response_model=ModerationActionResponse, status_code=status.HTTP_201_CREATED)
async def create_moderation_action(
    body: ModerationActionCreate, auth: AuthDep, db: SessionDep
) -> ModerationActionResponse:
    """Record an action against a member, post or comment."""
    action = action_service.create_action(db, auth, **body.model_dump())
    return ModerationActionResponse.model_validate(action)


@router.get("/", response_model=Page[ModerationActionResponse])
async def search_moderation_actions(
    auth: AuthDep,
    db: SessionDep,
    params: ListParamsDep,
    moderator_id: UUID | None = Query(None),
    target_member_id: UUID | None = Query(None),
    target_post_id: UUID | None = Query(None),
    target_comment_id: UUID | None = Query(None),
    action_type: ActionType | None = Query(None),
    action_status: ActionStatus | None = Query(None, alias="status"),
    created_from: datetime | None = Query(None),
    created_to: datetime | None = Query(None),
) -> Page[ModerationActionResponse]:
    rows, pagination = action_service.search_actions(
        db,
        auth,
        moderator_id=_opt(moderator_id),
        target_member_id=_opt(target_member_id),
        target_post_id=_opt(target_post_id),
        target_comment_id=_opt(target_comment_id),
        action_type=action_type,
        status=action_status,
        created_from=created_from,
        created_to=created_to,
        page=params.page,
        limit=params.limit,
        sort=params.sort,
    )
    return Page[ModerationActionResponse](
        pagination=pagination,
        data=[ModerationActionResponse.model_validate(row) for row in rows],
    )


@router.get("/{moderation_action_id}", response_model=ModerationActionResponse)
async def get_moderation_action(
    moderation_action_id: UUID, auth: AuthDep, db: SessionDep
) -> ModerationActionResponse:
    action = action_service.get_action(db, auth, str(moderation_action_id))
    return ModerationActionResponse.model_validate(action)


@router.patch("/{moderation_action_id}", response_model=ModerationActionResponse)
async def update_moderation_action(
    moderation_action_id: UUID,
    body: ModerationActionUpdate,
    auth: AuthDep,
    db: SessionDep,
) -> ModerationActionResponse:
    """Edit an action (creating moderator or administrator)."""
    action = action_service.update_action(
        db, auth, str(moderation_action_id), body.model_dump(exclude_unset=True)
    )
    return ModerationActionResponse.model_validate(action)


@router.delete("/{moderation_action_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_moderation_action(
    moderation_action_id: UUID, auth: AuthDep, db: SessionDep
) -> Response:
    action_service.soft_delete_action(db, auth, str(moderation_action_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
