"""Account and authentication schemas."""

from pydantic import BaseModel, EmailStr, Field

from .common import OrmResponse


class ConsentIn(BaseModel):
    """A policy the member agrees to (or declines) at registration."""

    policy_type: str = Field(..., min_length=1, max_length=64)
    policy_version: str = Field(..., min_length=1, max_length=32)
    consent_action: str = Field("granted", pattern="^(granted|revoked)$")


class MemberJoinRequest(BaseModel):
    """Schema for registering a new member."""

    email: EmailStr
    password: str = Field(..., min_length=1, max_length=256)
    nickname: str = Field(..., min_length=1, max_length=64)
    consent: list[ConsentIn] = Field(default_factory=list)


class LoginRequest(BaseModel):
    """Credentials of the underlying member account."""

    email: EmailStr
    password: str = Field(..., min_length=1, max_length=256)


class RefreshRequest(BaseModel):
    refresh_token: str = Field(..., min_length=1)


class ModeratorJoinRequest(BaseModel):
    """Administrator request promoting an existing member."""

    member_id: str = Field(..., min_length=1, max_length=36)


class AdministratorJoinRequest(BaseModel):
    """Grant administrator rights to a member identified by credentials or id.

    The very first administrator bootstraps with credentials; afterwards an
    administrator names the member to promote.
    """

    email: EmailStr | None = None
    password: str | None = None
    member_id: str | None = Field(None, max_length=36)


class TokenPair(BaseModel):
    access: str
    refresh: str
    expired_at: str
    refreshable_until: str


class MemberResponse(OrmResponse):
    """Public view of a member account."""

    id: str
    email: str
    nickname: str
    status: str
    email_verified: bool
    created_at: str
    updated_at: str
    deleted_at: str | None


class RoleAuthorized(BaseModel):
    """Token pair and the identity it was issued for."""

    id: str
    type: str
    member: MemberResponse
    token: TokenPair
