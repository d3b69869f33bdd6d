# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Generator, Iterator
from itertools import count

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault("SECRET_KEY", "discuss-board-test-secret")
os.environ.setdefault("DATABASE_URL", "sqlite://")

from discuss_board.core.auth import AuthContext
from discuss_board.core.security import hash_password
from discuss_board.db.session import Base
from discuss_board.db.session import get_db as app_get_session
from discuss_board.main import app as fastapi_app
from discuss_board.models import Administrator, Comment, Member, ModerationAction, Moderator, Post
from discuss_board.models.account import Role
from discuss_board.models.moderation import ActionType
from discuss_board.services.accounts import issue_tokens

TEST_DB_URL = "sqlite://"
TEST_PASSWORD = "correct-horse-battery"

_MEMBER_COUNTER = count(1)
_PASSWORD_HASH = hash_password(TEST_PASSWORD)


@pytest.fixture(scope="session")
def engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def db_session(engine: Engine) -> Iterator[Session]:
    connection = engine.connect()
    transaction = connection.begin()
    SessionLocal = sessionmaker(
        bind=connection,
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
        join_transaction_mode="create_savepoint",
    )
    session = SessionLocal()

    try:
        yield session
    finally:
        session.close()

        if transaction.is_active:
            transaction.rollback()
        connection.close()

        # Ensure each test sees a clean database even if commits occurred.
        with engine.begin() as cleanup_conn:
            for table in reversed(Base.metadata.sorted_tables):
                cleanup_conn.execute(table.delete())


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture(autouse=True)
def override_session_dependency(app: FastAPI, db_session: Session) -> Iterator[None]:
    def _get_session_override() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[app_get_session] = _get_session_override
    try:
        yield
    finally:
        app.dependency_overrides.pop(app_get_session, None)


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


def make_member(db_session: Session, nickname: str | None = None) -> Member:
    """Persist an active member whose password is ``TEST_PASSWORD``."""
    n = next(_MEMBER_COUNTER)
    member = Member(
        email=f"member{n}@example.com",
        password_hash=_PASSWORD_HASH,
        nickname=nickname or f"member{n}",
    )
    db_session.add(member)
    db_session.flush()
    db_session.refresh(member)
    return member


def make_moderator(db_session: Session, member: Member | None = None) -> Moderator:
    moderator = Moderator(member_id=(member or make_member(db_session)).id)
    db_session.add(moderator)
    db_session.flush()
    db_session.refresh(moderator)
    return moderator


def bearer(subject_id: str, role: Role) -> dict[str, str]:
    token = issue_tokens(subject_id, role).access
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def member(db_session: Session) -> Member:
    """The member most tests act as (and the usual moderation target)."""
    return make_member(db_session, "alice")


@pytest.fixture()
def other_member(db_session: Session) -> Member:
    return make_member(db_session, "bob")


@pytest.fixture()
def moderator(db_session: Session) -> Moderator:
    return make_moderator(db_session)


@pytest.fixture()
def second_moderator(db_session: Session) -> Moderator:
    return make_moderator(db_session)


@pytest.fixture()
def administrator(db_session: Session) -> Administrator:
    administrator = Administrator(member_id=make_member(db_session, "root").id)
    db_session.add(administrator)
    db_session.flush()
    db_session.refresh(administrator)
    return administrator


@pytest.fixture()
def member_headers(member: Member) -> dict[str, str]:
    return bearer(member.id, Role.MEMBER)


@pytest.fixture()
def other_member_headers(other_member: Member) -> dict[str, str]:
    return bearer(other_member.id, Role.MEMBER)


@pytest.fixture()
def moderator_headers(moderator: Moderator) -> dict[str, str]:
    return bearer(moderator.id, Role.MODERATOR)


@pytest.fixture()
def second_moderator_headers(second_moderator: Moderator) -> dict[str, str]:
    return bearer(second_moderator.id, Role.MODERATOR)


@pytest.fixture()
def admin_headers(administrator: Administrator) -> dict[str, str]:
    return bearer(administrator.id, Role.ADMINISTRATOR)


@pytest.fixture()
def member_ctx(member: Member) -> AuthContext:
    return AuthContext(id=member.id, type=Role.MEMBER, member_id=member.id)


@pytest.fixture()
def other_member_ctx(other_member: Member) -> AuthContext:
    return AuthContext(id=other_member.id, type=Role.MEMBER, member_id=other_member.id)


@pytest.fixture()
def moderator_ctx(moderator: Moderator) -> AuthContext:
    return AuthContext(id=moderator.id, type=Role.MODERATOR, member_id=moderator.member_id)


@pytest.fixture()
def second_moderator_ctx(second_moderator: Moderator) -> AuthContext:
    return AuthContext(
        id=second_moderator.id, type=Role.MODERATOR, member_id=second_moderator.member_id
    )


@pytest.fixture()
def admin_ctx(administrator: Administrator) -> AuthContext:
    return AuthContext(
        id=administrator.id, type=Role.ADMINISTRATOR, member_id=administrator.member_id
    )


@pytest.fixture()
def test_post(db_session: Session, member: Member) -> Post:
    """A post written by ``member``."""
    post = Post(author_member_id=member.id, title="Hello board", body="First post")
    db_session.add(post)
    db_session.flush()
    db_session.refresh(post)
    return post


@pytest.fixture()
def test_comment(db_session: Session, test_post: Post, member: Member) -> Comment:
    comment = Comment(post_id=test_post.id, author_member_id=member.id, body="A reply")
    db_session.add(comment)
    db_session.flush()
    db_session.refresh(comment)
    return comment


@pytest.fixture()
def mute_action(db_session: Session, moderator: Moderator, member: Member) -> ModerationAction:
    """An active ``mute`` issued by ``moderator`` against ``member``."""
    action = ModerationAction(
        moderator_id=moderator.id,
        target_member_id=member.id,
        action_type=ActionType.MUTE,
        action_reason="spam",
    )
    db_session.add(action)
    db_session.flush()
    db_session.refresh(action)
    return action
