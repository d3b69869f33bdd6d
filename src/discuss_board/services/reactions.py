"""Member likes and dislikes on comments."""

from __future__ import annotations

import logging

from sqlalchemy import update
from sqlalchemy.orm import Session

from discuss_board.core.auth import AuthContext
from discuss_board.core.errors import ConflictError, ForbiddenError, NotFoundError, ValidationError
from discuss_board.db.time import utcnow
from discuss_board.models.post import CommentReaction, PostStatus, ReactionType
from discuss_board.schemas.common import Pagination
from discuss_board.services.pagination import paginate
from discuss_board.services.posts import live_comment, live_post

logger = logging.getLogger(__name__)

REACTION_SORTABLE = {
    "created_at": CommentReaction.created_at,
    "updated_at": CommentReaction.updated_at,
    "reaction_type": CommentReaction.reaction_type,
}


def create_reaction(
    db: Session, auth: AuthContext, *, comment_id: str, reaction_type: ReactionType | str
) -> CommentReaction:
    """React to someone else's comment.

    A member holds at most one reaction per comment. A previously deleted
    reaction is revived with the new type instead of inserting a second row.
    """
    try:
        kind = ReactionType(reaction_type)
    except ValueError as err:
        raise ValidationError(f"unknown reaction_type: {reaction_type}") from err

    comment = live_comment(db, comment_id)
    if comment is None:
        raise NotFoundError("comment not found")
    if comment.author_member_id == auth.member_id:
        raise ForbiddenError("members cannot react to their own comments")
    post = live_post(db, comment.post_id)
    if post is None:
        raise NotFoundError("comment not found")
    if post.business_status is PostStatus.LOCKED:
        raise ConflictError("post is locked")

    reaction = (
        db.query(CommentReaction)
        .filter(
            CommentReaction.member_id == auth.member_id,
            CommentReaction.comment_id == comment.id,
        )
        .first()
    )
    if reaction is not None and reaction.deleted_at is None:
        raise ConflictError("comment already has a reaction from this member")
    if reaction is not None:
        reaction.reaction_type = kind
        reaction.deleted_at = None
    else:
        reaction = CommentReaction(
            member_id=auth.member_id, comment_id=comment.id, reaction_type=kind
        )
        db.add(reaction)

    db.commit()
    db.refresh(reaction)
    return reaction


def get_reaction(db: Session, auth: AuthContext, reaction_id: str) -> CommentReaction:
    reaction = (
        db.query(CommentReaction)
        .filter(CommentReaction.id == reaction_id, CommentReaction.deleted_at.is_(None))
        .first()
    )
    if reaction is None:
        raise NotFoundError("reaction not found")
    if reaction.member_id != auth.member_id and not auth.is_staff:
        raise ForbiddenError("reaction belongs to another member")
    return reaction


def list_reactions(
    db: Session,
    auth: AuthContext,
    *,
    comment_id: str | None = None,
    reaction_type: ReactionType | str | None = None,
    page: int = 1,
    limit: int = 20,
    sort: str | None = None,
) -> tuple[list[CommentReaction], Pagination]:
    """Members list their own reactions; staff see everyone's."""
    query = db.query(CommentReaction).filter(CommentReaction.deleted_at.is_(None))
    if not auth.is_staff:
        query = query.filter(CommentReaction.member_id == auth.member_id)
    if comment_id:
        query = query.filter(CommentReaction.comment_id == comment_id)
    if reaction_type is not None:
        try:
            query = query.filter(CommentReaction.reaction_type == ReactionType(reaction_type))
        except ValueError as err:
            raise ValidationError(f"unknown reaction_type: {reaction_type}") from err
    return paginate(
        query,
        page=page,
        limit=limit,
        sort=sort,
        sortable=REACTION_SORTABLE,
        tiebreaker=CommentReaction.id,
    )


def delete_reaction(db: Session, auth: AuthContext, reaction_id: str) -> None:
    reaction = get_reaction(db, auth, reaction_id)
    if reaction.member_id != auth.member_id:
        raise ForbiddenError("only the reacting member may remove a reaction")
    result = db.execute(
        update(CommentReaction)
        .where(CommentReaction.id == reaction.id, CommentReaction.deleted_at.is_(None))
        .values(deleted_at=utcnow())
    )
    if result.rowcount != 1:
        raise NotFoundError("reaction not found")
    db.commit()
    logger.info("reaction %s removed by member %s", reaction.id, auth.member_id)
