"""Shared API dependencies for authentication and common functionality."""

from dataclasses import dataclass
from typing import Annotated

from fastapi import Depends, HTTPException, Query, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from discuss_board.core.auth import AuthContext
from discuss_board.core.errors import AuthenticationError
from discuss_board.core.settings import settings
from discuss_board.db.session import get_db
from discuss_board.services import accounts

# HTTP Bearer scheme for JWT authentication
bearer_scheme = HTTPBearer()
optional_bearer_scheme = HTTPBearer(auto_error=False)

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]


def get_auth_context(
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(bearer_scheme)],
    db: SessionDep,
) -> AuthContext:
    """Resolve the caller from an access token.

    Raises:
        HTTPException: If the token is invalid, expired, of the wrong kind or
            its role record is no longer active.
    """
    try:
        return accounts.context_from_token(db, credentials.credentials)
    except AuthenticationError as err:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=err.detail,
            headers={"WWW-Authenticate": "Bearer"},
        ) from err


def get_optional_auth_context(
    credentials: Annotated[
        HTTPAuthorizationCredentials | None, Depends(optional_bearer_scheme)
    ],
    db: SessionDep,
) -> AuthContext | None:
    """Like ``get_auth_context`` but anonymous callers yield None."""
    if credentials is None:
        return None
    return get_auth_context(credentials, db)


# Type aliases for the caller context
AuthDep = Annotated[AuthContext, Depends(get_auth_context)]
OptionalAuthDep = Annotated[AuthContext | None, Depends(get_optional_auth_context)]


@dataclass(frozen=True)
class ListParams:
    page: int
    limit: int
    sort: str | None


def get_list_params(
    page: int = Query(1, ge=1),
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    sort: str | None = Query(None, description="field:asc or field:desc"),
) -> ListParams:
    return ListParams(page=page, limit=limit, sort=sort)


ListParamsDep = Annotated[ListParams, Depends(get_list_params)]
