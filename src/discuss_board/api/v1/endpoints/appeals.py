"""Appeal endpoints."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from fastapi import APIRouter, Query, Response, status

from discuss_board.api.v1.dependencies import AuthDep, ListParamsDep, SessionDep
from discuss_board.models.moderation import AppealStatus
from discuss_board.schemas.common import Page
from discuss_board.schemas.moderation import AppealCreate, AppealResponse, AppealUpdate
from discuss_board.services import appeals as appeal_service

router = APIRouter(prefix="/appeals", tags=["appeals"])


@router.post("/", response_model=AppealResponse, status_code=status.HTTP_201_CREATED)
async def create_appeal(body: AppealCreate, auth: AuthDep, db: SessionDep) -> AppealResponse:
    """File an appeal against an action that affected the caller."""
    appeal = appeal_service.create_appeal(
        db,
        auth,
        moderation_action_id=body.moderation_action_id,
        appeal_rationale=body.appeal_rationale,
    )
    return AppealResponse.model_validate(appeal)


@router.get("/", response_model=Page[AppealResponse])
async def search_appeals(
    auth: AuthDep,
    db: SessionDep,
    params: ListParamsDep,
    appeal_status: AppealStatus | None = Query(None, alias="status"),
    moderation_action_id: UUID | None = Query(None),
    appellant_member_id: UUID | None = Query(None),
    created_from: datetime | None = Query(None),
    created_to: datetime | None = Query(None),
) -> Page[AppealResponse]:
    rows, pagination = appeal_service.search_appeals(
        db,
        auth,
        status=appeal_status,
        moderation_action_id=str(moderation_action_id) if moderation_action_id else None,
        appellant_member_id=str(appellant_member_id) if appellant_member_id else None,
        created_from=created_from,
        created_to=created_to,
        page=params.page,
        limit=params.limit,
        sort=params.sort,
    )
    return Page[AppealResponse](
        pagination=pagination,
        data=[AppealResponse.model_validate(row) for row in rows],
    )


@router.get("/{appeal_id}", response_model=AppealResponse)
async def get_appeal(appeal_id: UUID, auth: AuthDep, db: SessionDep) -> AppealResponse:
    return AppealResponse.model_validate(appeal_service.get_appeal(db, auth, str(appeal_id)))


@router.patch("/{appeal_id}", response_model=AppealResponse)
async def update_appeal(
    appeal_id: UUID, body: AppealUpdate, auth: AuthDep, db: SessionDep
) -> AppealResponse:
    """Amend the rationale (appellant) or move the appeal along its workflow (staff)."""
    appeal = appeal_service.update_appeal(
        db,
        auth,
        str(appeal_id),
        appeal_rationale=body.appeal_rationale,
        status=body.status,
        resolution_notes=body.resolution_notes,
        expected_status=body.expected_status,
    )
    return AppealResponse.model_validate(appeal)


@router.delete("/{appeal_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_appeal(appeal_id: UUID, auth: AuthDep, db: SessionDep) -> Response:
    appeal_service.soft_delete_appeal(db, auth, str(appeal_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
