"""Administrator member management endpoints."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from fastapi import APIRouter, Query, Response, status

from discuss_board.api.v1.dependencies import AuthDep, ListParamsDep, SessionDep
from discuss_board.models.account import MemberStatus
from discuss_board.schemas.auth import MemberResponse
from discuss_board.schemas.common import Page
from discuss_board.schemas.member import MemberUpdate
from discuss_board.services import members as member_service

router = APIRouter(prefix="/members", tags=["members"])


@router.get("/", response_model=Page[MemberResponse])
async def search_members(
    auth: AuthDep,
    db: SessionDep,
    params: ListParamsDep,
    keyword: str | None = Query(None, max_length=200),
    member_status: MemberStatus | None = Query(None, alias="status"),
    email_verified: bool | None = Query(None),
    created_from: datetime | None = Query(None),
    created_to: datetime | None = Query(None),
) -> Page[MemberResponse]:
    """Search live member accounts (administrators only)."""
    rows, pagination = member_service.search_members(
        db,
        auth,
        keyword=keyword,
        status=member_status,
        email_verified=email_verified,
        created_from=created_from,
        created_to=created_to,
        page=params.page,
        limit=params.limit,
        sort=params.sort,
    )
    return Page[MemberResponse](
        pagination=pagination,
        data=[MemberResponse.model_validate(row) for row in rows],
    )


@router.get("/{member_id}", response_model=MemberResponse)
async def get_member(member_id: UUID, auth: AuthDep, db: SessionDep) -> MemberResponse:
    return MemberResponse.model_validate(member_service.get_member(db, auth, str(member_id)))


@router.patch("/{member_id}", response_model=MemberResponse)
async def update_member(
    member_id: UUID, body: MemberUpdate, auth: AuthDep, db: SessionDep
) -> MemberResponse:
    """Change nickname, verification flag or account status."""
    member = member_service.update_member(
        db, auth, str(member_id), body.model_dump(exclude_unset=True)
    )
    return MemberResponse.model_validate(member)


@router.delete("/{member_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_member(member_id: UUID, auth: AuthDep, db: SessionDep) -> Response:
    member_service.soft_delete_member(db, auth, str(member_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
