"""Content report endpoints."""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Query, Response, status

from discuss_board.api.v1.dependencies import AuthDep, ListParamsDep, SessionDep
from discuss_board.models.report import ContentType, ReportStatus
from discuss_board.schemas.common import Page
from discuss_board.schemas.report import ReportCreate, ReportResponse, ReportUpdate
from discuss_board.services import reports as report_service

router = APIRouter(prefix="/reports", tags=["reports"])


@router.post("/", response_model=ReportResponse, status_code=status.HTTP_201_CREATED)
async def create_report(body: ReportCreate, auth: AuthDep, db: SessionDep) -> ReportResponse:
    report = report_service.create_report(db, auth, **body.model_dump())
    return ReportResponse.model_validate(report)


@router.get("/", response_model=Page[ReportResponse])
async def search_reports(
    auth: AuthDep,
    db: SessionDep,
    params: ListParamsDep,
    report_status: ReportStatus | None = Query(None, alias="status"),
    content_type: ContentType | None = Query(None),
    reporter_member_id: UUID | None = Query(None),
) -> Page[ReportResponse]:
    rows, pagination = report_service.search_reports(
        db,
        auth,
        status=report_status,
        content_type=content_type,
        reporter_member_id=str(reporter_member_id) if reporter_member_id else None,
        page=params.page,
        limit=params.limit,
        sort=params.sort,
    )
    return Page[ReportResponse](
        pagination=pagination,
        data=[ReportResponse.model_validate(row) for row in rows],
    )


@router.get("/{report_id}", response_model=ReportResponse)
async def get_report(report_id: UUID, auth: AuthDep, db: SessionDep) -> ReportResponse:
    return ReportResponse.model_validate(report_service.get_report(db, auth, str(report_id)))


@router.patch("/{report_id}", response_model=ReportResponse)
async def update_report(
    report_id: UUID, body: ReportUpdate, auth: AuthDep, db: SessionDep
) -> ReportResponse:
    report = report_service.update_report(
        db,
        auth,
        str(report_id),
        status=body.status,
        moderation_action_id=body.moderation_action_id,
    )
    return ReportResponse.model_validate(report)


@router.delete("/{report_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_report(report_id: UUID, auth: AuthDep, db: SessionDep) -> Response:
    report_service.soft_delete_report(db, auth, str(report_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
