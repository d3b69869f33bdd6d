"""Authentication endpoints for members, moderators and administrators."""

from __future__ import annotations

from fastapi import APIRouter, status

from discuss_board.api.v1.dependencies import AuthDep, OptionalAuthDep, SessionDep
from discuss_board.core.settings import settings
from discuss_board.models.account import Role
from discuss_board.schemas.auth import (
    AdministratorJoinRequest,
    LoginRequest,
    MemberJoinRequest,
    MemberResponse,
    ModeratorJoinRequest,
    RefreshRequest,
    RoleAuthorized,
)
from discuss_board.services import accounts

router = APIRouter(prefix="/auth", tags=["authentication"])


def _authorized(role_id: str, role: Role, member: object) -> RoleAuthorized:
    tokens = accounts.issue_tokens(role_id, role)
    return RoleAuthorized(
        id=role_id,
        type=role.value,
        member=MemberResponse.model_validate(member),
        token=tokens.as_dict(),
    )


@router.post(
    "/member/join",
    response_model=RoleAuthorized,
    status_code=status.HTTP_201_CREATED,
)
async def join_member(body: MemberJoinRequest, db: SessionDep) -> RoleAuthorized:
    """Register a member and sign them in."""
    member = accounts.join_member(
        db,
        email=body.email,
        password=body.password,
        nickname=body.nickname,
        consents=[
            accounts.ConsentInput(c.policy_type, c.policy_version, c.consent_action)
            for c in body.consent
        ],
        required_policies=settings.required_consent_policies,
        min_password_length=settings.min_password_length,
    )
    return _authorized(member.id, Role.MEMBER, member)


@router.post("/member/login", response_model=RoleAuthorized)
async def login_member(body: LoginRequest, db: SessionDep) -> RoleAuthorized:
    role_id, member = accounts.login(db, Role.MEMBER, email=body.email, password=body.password)
    return _authorized(role_id, Role.MEMBER, member)


@router.post(
    "/moderator/join",
    response_model=RoleAuthorized,
    status_code=status.HTTP_201_CREATED,
)
async def join_moderator(
    body: ModeratorJoinRequest, auth: AuthDep, db: SessionDep
) -> RoleAuthorized:
    """Promote an existing member to moderator (administrators only)."""
    moderator = accounts.join_moderator(db, auth, body.member_id)
    return _authorized(moderator.id, Role.MODERATOR, moderator.member)


@router.post("/moderator/login", response_model=RoleAuthorized)
async def login_moderator(body: LoginRequest, db: SessionDep) -> RoleAuthorized:
    role_id, member = accounts.login(db, Role.MODERATOR, email=body.email, password=body.password)
    return _authorized(role_id, Role.MODERATOR, member)


@router.post(
    "/administrator/join",
    response_model=RoleAuthorized,
    status_code=status.HTTP_201_CREATED,
)
async def join_administrator(
    body: AdministratorJoinRequest, auth: OptionalAuthDep, db: SessionDep
) -> RoleAuthorized:
    """Bootstrap the first administrator, or let an administrator promote a member."""
    administrator = accounts.join_administrator(
        db,
        auth,
        email=body.email,
        password=body.password,
        member_id=body.member_id,
    )
    return _authorized(administrator.id, Role.ADMINISTRATOR, administrator.member)


@router.post("/administrator/login", response_model=RoleAuthorized)
async def login_administrator(body: LoginRequest, db: SessionDep) -> RoleAuthorized:
    role_id, member = accounts.login(
        db, Role.ADMINISTRATOR, email=body.email, password=body.password
    )
    return _authorized(role_id, Role.ADMINISTRATOR, member)


@router.post("/{role}/refresh", response_model=RoleAuthorized)
async def refresh_token(role: Role, body: RefreshRequest, db: SessionDep) -> RoleAuthorized:
    """Exchange a refresh token for a new token pair of the same role."""
    context, tokens = accounts.refresh(db, role, body.refresh_token)
    member = accounts.member_of(db, context)
    return RoleAuthorized(
        id=context.id,
        type=role.value,
        member=MemberResponse.model_validate(member),
        token=tokens.as_dict(),
    )
