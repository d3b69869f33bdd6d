"""Administrator endpoints for moderator grants."""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Query

from discuss_board.api.v1.dependencies import AuthDep, ListParamsDep, SessionDep
from discuss_board.models.account import ModeratorStatus
from discuss_board.schemas.common import Page
from discuss_board.schemas.member import ModeratorResponse, ModeratorUpdate
from discuss_board.services import members as member_service

router = APIRouter(prefix="/moderators", tags=["members"])


@router.get("/", response_model=Page[ModeratorResponse])
async def search_moderators(
    auth: AuthDep,
    db: SessionDep,
    params: ListParamsDep,
    moderator_status: ModeratorStatus | None = Query(None, alias="status"),
) -> Page[ModeratorResponse]:
    rows, pagination = member_service.search_moderators(
        db,
        auth,
        status=moderator_status,
        page=params.page,
        limit=params.limit,
        sort=params.sort,
    )
    return Page[ModeratorResponse](
        pagination=pagination,
        data=[ModeratorResponse.model_validate(row) for row in rows],
    )


@router.get("/{moderator_id}", response_model=ModeratorResponse)
async def get_moderator(moderator_id: UUID, auth: AuthDep, db: SessionDep) -> ModeratorResponse:
    moderator = member_service.get_moderator(db, auth, str(moderator_id))
    return ModeratorResponse.model_validate(moderator)


@router.patch("/{moderator_id}", response_model=ModeratorResponse)
async def update_moderator(
    moderator_id: UUID, body: ModeratorUpdate, auth: AuthDep, db: SessionDep
) -> ModeratorResponse:
    """Revoke or restore a moderator (administrators only)."""
    moderator = member_service.update_moderator_status(
        db, auth, str(moderator_id), body.status
    )
    return ModeratorResponse.model_validate(moderator)
