"""Comment reaction endpoints."""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Query, Response, status

from discuss_board.api.v1.dependencies import AuthDep, ListParamsDep, SessionDep
from discuss_board.models.post import ReactionType
from discuss_board.schemas.common import Page
from discuss_board.schemas.reaction import CommentReactionCreate, CommentReactionResponse
from discuss_board.services import reactions as reaction_service

router = APIRouter(prefix="/comment-reactions", tags=["posts"])


@router.post("/", response_model=CommentReactionResponse, status_code=status.HTTP_201_CREATED)
async def create_reaction(
    body: CommentReactionCreate, auth: AuthDep, db: SessionDep
) -> CommentReactionResponse:
    reaction = reaction_service.create_reaction(
        db, auth, comment_id=body.comment_id, reaction_type=body.reaction_type
    )
    return CommentReactionResponse.model_validate(reaction)


@router.get("/", response_model=Page[CommentReactionResponse])
async def list_reactions(
    auth: AuthDep,
    db: SessionDep,
    params: ListParamsDep,
    comment_id: UUID | None = Query(None),
    reaction_type: ReactionType | None = Query(None),
) -> Page[CommentReactionResponse]:
    rows, pagination = reaction_service.list_reactions(
        db,
        auth,
        comment_id=str(comment_id) if comment_id else None,
        reaction_type=reaction_type,
        page=params.page,
        limit=params.limit,
        sort=params.sort,
    )
    return Page[CommentReactionResponse](
        pagination=pagination,
        data=[CommentReactionResponse.model_validate(row) for row in rows],
    )


@router.get("/{reaction_id}", response_model=CommentReactionResponse)
async def get_reaction(
    reaction_id: UUID, auth: AuthDep, db: SessionDep
) -> CommentReactionResponse:
    reaction = reaction_service.get_reaction(db, auth, str(reaction_id))
    return CommentReactionResponse.model_validate(reaction)


@router.delete("/{reaction_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_reaction(reaction_id: UUID, auth: AuthDep, db: SessionDep) -> Response:
    """Withdraw a reaction (the reacting member only)."""
    reaction_service.delete_reaction(db, auth, str(reaction_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
