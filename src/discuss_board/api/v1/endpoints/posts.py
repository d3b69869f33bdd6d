"""Post and comment endpoints."""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Query, Response, status

from discuss_board.api.v1.dependencies import AuthDep, ListParamsDep, OptionalAuthDep, SessionDep
from discuss_board.schemas.common import Page
from discuss_board.schemas.post import (
    CommentCreate,
    CommentResponse,
    CommentUpdate,
    PostCreate,
    PostResponse,
    PostUpdate,
)
from discuss_board.services import posts as post_service

router = APIRouter(prefix="/posts", tags=["posts"])


@router.get("/", response_model=Page[PostResponse])
async def list_posts(
    db: SessionDep,
    auth: OptionalAuthDep,
    params: ListParamsDep,
    keyword: str | None = Query(None, max_length=200),
    author_member_id: UUID | None = Query(None),
) -> Page[PostResponse]:
    """List live posts, newest first by default."""
    rows, pagination = post_service.search_posts(
        db,
        auth,
        keyword=keyword,
        author_member_id=str(author_member_id) if author_member_id else None,
        page=params.page,
        limit=params.limit,
        sort=params.sort,
    )
    return Page[PostResponse](
        pagination=pagination,
        data=[PostResponse.model_validate(row) for row in rows],
    )


@router.post("/", response_model=PostResponse, status_code=status.HTTP_201_CREATED)
async def create_post(body: PostCreate, auth: AuthDep, db: SessionDep) -> PostResponse:
    post = post_service.create_post(db, auth, title=body.title, body=body.body)
    return PostResponse.model_validate(post)


@router.get("/{post_id}", response_model=PostResponse)
async def get_post(post_id: UUID, db: SessionDep, auth: OptionalAuthDep) -> PostResponse:
    return PostResponse.model_validate(post_service.get_post(db, str(post_id), auth))


@router.patch("/{post_id}", response_model=PostResponse)
async def update_post(
    post_id: UUID, body: PostUpdate, auth: AuthDep, db: SessionDep
) -> PostResponse:
    post = post_service.update_post(
        db,
        auth,
        str(post_id),
        title=body.title,
        body=body.body,
        business_status=body.business_status,
    )
    return PostResponse.model_validate(post)


@router.delete("/{post_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_post(post_id: UUID, auth: AuthDep, db: SessionDep) -> Response:
    """Soft-delete a post (author or staff)."""
    post_service.delete_post(db, auth, str(post_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{post_id}/comments", response_model=Page[CommentResponse])
async def list_comments(
    post_id: UUID, db: SessionDep, auth: OptionalAuthDep, params: ListParamsDep
) -> Page[CommentResponse]:
    rows, pagination = post_service.list_comments(
        db, str(post_id), auth, page=params.page, limit=params.limit, sort=params.sort
    )
    return Page[CommentResponse](
        pagination=pagination,
        data=[CommentResponse.model_validate(row) for row in rows],
    )


@router.post(
    "/{post_id}/comments",
    response_model=CommentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_comment(
    post_id: UUID, body: CommentCreate, auth: AuthDep, db: SessionDep
) -> CommentResponse:
    comment = post_service.create_comment(db, auth, str(post_id), body=body.body)
    return CommentResponse.model_validate(comment)


@router.get("/{post_id}/comments/{comment_id}", response_model=CommentResponse)
async def get_comment(post_id: UUID, comment_id: UUID, db: SessionDep) -> CommentResponse:
    comment = post_service.get_comment(db, str(post_id), str(comment_id))
    return CommentResponse.model_validate(comment)


@router.patch("/{post_id}/comments/{comment_id}", response_model=CommentResponse)
async def update_comment(
    post_id: UUID, comment_id: UUID, body: CommentUpdate, auth: AuthDep, db: SessionDep
) -> CommentResponse:
    comment = post_service.update_comment(db, auth, str(post_id), str(comment_id), body=body.body)
    return CommentResponse.model_validate(comment)


@router.delete("/{post_id}/comments/{comment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_comment(
    post_id: UUID, comment_id: UUID, auth: AuthDep, db: SessionDep
) -> Response:
    post_service.delete_comment(db, auth, str(post_id), str(comment_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
