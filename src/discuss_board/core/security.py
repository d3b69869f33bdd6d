"""Password hashing and JWT helpers."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import Any

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError
from jose import jwt

from discuss_board.core.settings import settings

ACCESS_TOKEN = "access"
REFRESH_TOKEN = "refresh"

PASSWORD_HASHER = PasswordHasher()


def hash_password(password: str) -> str:
    """Hash a password using Argon2id."""
    return PASSWORD_HASHER.hash(password)


def verify_password(password_hash: str, password: str) -> bool:
    """Return True if ``password`` matches ``password_hash``."""
    try:
        return PASSWORD_HASHER.verify(password_hash, password)
    except (VerificationError, InvalidHashError):
        return False


def create_token(
    subject_id: str,
    role: str,
    token_type: str = ACCESS_TOKEN,
    expires_delta: timedelta | None = None,
) -> tuple[str, datetime]:
    """Sign a role token and return it together with its expiry.

    The payload carries ``{id, type}`` so the authentication layer can rebuild
    a typed context without touching anything but the role record.
    """
    if expires_delta is None:
        if token_type == REFRESH_TOKEN:
            expires_delta = timedelta(days=settings.refresh_token_expire_days)
        else:
            expires_delta = timedelta(minutes=settings.access_token_expire_minutes)

    expire = datetime.now(UTC) + expires_delta
    to_encode: dict[str, Any] = {
        "id": subject_id,
        "type": role,
        "token_type": token_type,
        "iss": settings.jwt_issuer,
        "exp": expire,
    }
    encoded_jwt: str = jwt.encode(
        to_encode,
        settings.secret_key,
        algorithm=settings.jwt_algorithm,
    )
    return encoded_jwt, expire


def decode_token(token: str) -> dict[str, Any]:
    """Decode and verify a token; raises ``jose.JWTError`` on failure."""
    payload: dict[str, Any] = jwt.decode(
        token,
        settings.secret_key,
        algorithms=[settings.jwt_algorithm],
        issuer=settings.jwt_issuer,
    )
    return payload
