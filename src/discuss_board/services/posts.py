"""Posts and comments: the content moderation actions point at."""

from __future__ import annotations

import logging

from sqlalchemy import or_, update
from sqlalchemy.orm import Session

from discuss_board.core.auth import AuthContext
from discuss_board.core.errors import ConflictError, ForbiddenError, NotFoundError, ValidationError
from discuss_board.db.time import utcnow
from discuss_board.models.post import Comment, Post, PostStatus
from discuss_board.schemas.common import Pagination
from discuss_board.services.pagination import paginate

logger = logging.getLogger(__name__)

POST_SORTABLE = {
    "created_at": Post.created_at,
    "updated_at": Post.updated_at,
    "title": Post.title,
}
COMMENT_SORTABLE = {
    "created_at": Comment.created_at,
    "updated_at": Comment.updated_at,
}


def _can_see_hidden(auth: AuthContext | None, post: Post) -> bool:
    if auth is None:
        return False
    return auth.is_staff or post.author_member_id == auth.member_id


def live_post(db: Session, post_id: str) -> Post | None:
    return db.query(Post).filter(Post.id == post_id, Post.deleted_at.is_(None)).first()


def live_comment(db: Session, comment_id: str) -> Comment | None:
    return (
        db.query(Comment)
        .filter(Comment.id == comment_id, Comment.deleted_at.is_(None))
        .first()
    )


def create_post(db: Session, auth: AuthContext, *, title: str, body: str) -> Post:
    post = Post(author_member_id=auth.member_id, title=title, body=body)
    db.add(post)
    db.commit()
    db.refresh(post)
    logger.info("post %s created by member %s", post.id, auth.member_id)
    return post


def get_post(db: Session, post_id: str, auth: AuthContext | None = None) -> Post:
    post = live_post(db, post_id)
    if post is None:
        raise NotFoundError("post not found")
    if post.business_status is PostStatus.HIDDEN and not _can_see_hidden(auth, post):
        raise NotFoundError("post not found")
    return post


def search_posts(
    db: Session,
    auth: AuthContext | None = None,
    *,
    keyword: str | None = None,
    author_member_id: str | None = None,
    page: int = 1,
    limit: int = 20,
    sort: str | None = None,
) -> tuple[list[Post], Pagination]:
    """List live posts; hidden posts are shown to staff and to their authors only."""
    query = db.query(Post).filter(Post.deleted_at.is_(None))
    if auth is None:
        query = query.filter(Post.business_status != PostStatus.HIDDEN)
    elif not auth.is_staff:
        query = query.filter(
            or_(
                Post.business_status != PostStatus.HIDDEN,
                Post.author_member_id == auth.member_id,
            )
        )
    if keyword:
        pattern = f"%{keyword}%"
        query = query.filter(or_(Post.title.ilike(pattern), Post.body.ilike(pattern)))
    if author_member_id:
        query = query.filter(Post.author_member_id == author_member_id)
    return paginate(
        query, page=page, limit=limit, sort=sort, sortable=POST_SORTABLE, tiebreaker=Post.id
    )


def update_post(
    db: Session,
    auth: AuthContext,
    post_id: str,
    *,
    title: str | None = None,
    body: str | None = None,
    business_status: PostStatus | str | None = None,
) -> Post:
    """Authors edit their text; staff change ``business_status``."""
    post = get_post(db, post_id, auth)
    is_author = post.author_member_id == auth.member_id

    if (title is not None or body is not None) and not is_author:
        raise ForbiddenError("only the author may edit a post")
    if business_status is not None:
        if not auth.is_staff:
            raise ForbiddenError("moderator or administrator role required")
        try:
            post.business_status = PostStatus(business_status)
        except ValueError as err:
            raise ValidationError(f"unknown business_status: {business_status}") from err
    if title is not None:
        post.title = title
    if body is not None:
        post.body = body

    db.commit()
    db.refresh(post)
    return post


def delete_post(db: Session, auth: AuthContext, post_id: str) -> None:
    post = live_post(db, post_id)
    if post is None:
        raise NotFoundError("post not found")
    if post.author_member_id != auth.member_id and not auth.is_staff:
        raise ForbiddenError("only the author or staff may delete a post")

    result = db.execute(
        update(Post)
        .where(Post.id == post_id, Post.deleted_at.is_(None))
        .values(deleted_at=utcnow())
    )
    if result.rowcount != 1:
        raise NotFoundError("post not found")
    db.commit()
    logger.info("post %s soft-deleted by %s %s", post_id, auth.type.value, auth.id)


def create_comment(db: Session, auth: AuthContext, post_id: str, *, body: str) -> Comment:
    post = get_post(db, post_id, auth)
    if post.business_status is PostStatus.LOCKED:
        raise ConflictError("post is locked")
    comment = Comment(post_id=post.id, author_member_id=auth.member_id, body=body)
    db.add(comment)
    db.commit()
    db.refresh(comment)
    return comment


def get_comment(db: Session, post_id: str, comment_id: str) -> Comment:
    comment = live_comment(db, comment_id)
    if comment is None or comment.post_id != post_id:
        raise NotFoundError("comment not found")
    return comment


def list_comments(
    db: Session,
    post_id: str,
    auth: AuthContext | None = None,
    *,
    page: int = 1,
    limit: int = 20,
    sort: str | None = None,
) -> tuple[list[Comment], Pagination]:
    get_post(db, post_id, auth)
    query = db.query(Comment).filter(Comment.post_id == post_id, Comment.deleted_at.is_(None))
    return paginate(
        query,
        page=page,
        limit=limit,
        sort=sort or "created_at:asc",
        sortable=COMMENT_SORTABLE,
        tiebreaker=Comment.id,
    )


def update_comment(
    db: Session, auth: AuthContext, post_id: str, comment_id: str, *, body: str
) -> Comment:
    comment = get_comment(db, post_id, comment_id)
    if comment.author_member_id != auth.member_id:
        raise ForbiddenError("only the author may edit a comment")
    comment.body = body
    db.commit()
    db.refresh(comment)
    return comment


def delete_comment(db: Session, auth: AuthContext, post_id: str, comment_id: str) -> None:
    comment = get_comment(db, post_id, comment_id)
    if comment.author_member_id != auth.member_id and not auth.is_staff:
        raise ForbiddenError("only the author or staff may delete a comment")

    result = db.execute(
        update(Comment)
        .where(Comment.id == comment_id, Comment.deleted_at.is_(None))
        .values(deleted_at=utcnow())
    )
    if result.rowcount != 1:
        raise NotFoundError("comment not found")
    db.commit()
