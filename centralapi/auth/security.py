"""Password hashing (bcrypt) and access-token signing (python-jose, HS256)."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import Any

import bcrypt
from jose import ExpiredSignatureError, JWTError, jwt

from centralapi.config import settings
from centralapi.errors import InvalidTokenError, TokenExpiredError
from centralapi.models.db import User


def hash_password(password: str) -> str:
    salt = bcrypt.gensalt(rounds=settings.bcrypt_rounds)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Malformed stored hash
        return False


def create_access_token(user: User, *, expires_delta: timedelta | None = None) -> str:
    """Sign a token for ``user``.

    Claims: ``sub`` (email), ``user_id``, ``user_type``, ``user_role``,
    ``iat`` and ``exp``.
    """
    now = datetime.now(UTC)
    expires_delta = expires_delta or timedelta(minutes=settings.jwt_expiry_minutes)
    claims: dict[str, Any] = {
        "sub": user.email,
        "user_id": user.id,
        "user_type": str(user.user_type),
        "user_role": str(user.user_role),
        "iat": now,
        "exp": now + expires_delta,
    }
    return jwt.encode(claims, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> dict[str, Any]:
    """Verify signature and expiry. Raises TokenExpiredError / InvalidTokenError."""
    try:
        payload: dict[str, Any] = jwt.decode(
            token, settings.jwt_secret, algorithms=[settings.jwt_algorithm]
        )
    except ExpiredSignatureError as exc:
        raise TokenExpiredError() from exc
    except JWTError as exc:
        raise InvalidTokenError(f"Invalid token: {exc}") from exc

    if not isinstance(payload.get("user_id"), int):
        raise InvalidTokenError("Invalid token: missing user id")
    return payload
