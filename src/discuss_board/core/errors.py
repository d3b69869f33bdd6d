"""Typed failures raised by the service layer.

Each error carries the HTTP status and machine-readable code it maps to, so
the API boundary renders all of them through a single exception handler.
Messages must not echo identifiers the caller did not supply.
"""

from __future__ import annotations

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse


class DiscussBoardError(Exception):
    """Base class for domain failures surfaced to API callers."""

    status_code: int = status.HTTP_400_BAD_REQUEST
    code: str = "error"

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail


class AuthenticationError(DiscussBoardError):
    """Credentials or token are missing, invalid or expired."""

    status_code = status.HTTP_401_UNAUTHORIZED
    code = "unauthorized"


class NotFoundError(DiscussBoardError):
    """Referenced entity does not exist or is soft-deleted."""

    status_code = status.HTTP_404_NOT_FOUND
    code = "not_found"


class ForbiddenError(DiscussBoardError):
    """Actor lacks the role or ownership required for the operation."""

    status_code = status.HTTP_403_FORBIDDEN
    code = "forbidden"


class ConflictError(DiscussBoardError):
    """Mutation would violate a state-machine or uniqueness invariant."""

    status_code = status.HTTP_409_CONFLICT
    code = "conflict"


class ValidationError(DiscussBoardError):
    """Field value is malformed or outside its enumeration."""

    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    code = "validation_error"


async def discuss_board_error_handler(_request: Request, exc: DiscussBoardError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail, "code": exc.code},
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """Register the domain error handler on the application."""
    app.add_exception_handler(DiscussBoardError, discuss_board_error_handler)  # type: ignore[arg-type]
