"""Typed authentication context handed to the service layer."""

from __future__ import annotations

from dataclasses import dataclass

from discuss_board.core.errors import ForbiddenError
from discuss_board.models.account import Role

STAFF_ROLES = frozenset({Role.MODERATOR, Role.ADMINISTRATOR})


@dataclass(frozen=True)
class AuthContext:
    """Identity resolved from a verified access token.

    ``id`` is the role record the token was issued for (member, moderator or
    administrator id); ``member_id`` is always the underlying member account.
    """

    id: str
    type: Role
    member_id: str

    @property
    def is_staff(self) -> bool:
        return self.type in STAFF_ROLES

    @property
    def is_administrator(self) -> bool:
        return self.type is Role.ADMINISTRATOR


def require_staff(auth: AuthContext) -> None:
    if not auth.is_staff:
        raise ForbiddenError("moderator or administrator role required")


def require_administrator(auth: AuthContext) -> None:
    if not auth.is_administrator:
        raise ForbiddenError("administrator role required")
