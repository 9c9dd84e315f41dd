"""FastAPI auth dependencies.

Usage:
    @router.get("/protected")
    async def protected(user: User = Depends(get_current_user)):
        ...

    @router.get("/admin-only", dependencies=[Depends(require_user_type(UserType.CL_ADMIN))])
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable

import structlog
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from centralapi.auth.security import decode_access_token
from centralapi.database import get_session
from centralapi.errors import (
    AccountArchivedError,
    InvalidTokenError,
    NotAuthenticatedError,
    PermissionDeniedError,
)
from centralapi.models.db import User
from centralapi.models.enums import UserStatus, UserType
from centralapi.repositories import users as users_repo

logger = structlog.get_logger()

# auto_error=False so a missing header becomes our 401 ErrorResponse
bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    session: AsyncSession = Depends(get_session),
) -> User:
    """Resolve the bearer token to a live, active user row."""
    if credentials is None or not credentials.credentials:
        raise NotAuthenticatedError("Missing bearer token")

    payload = decode_access_token(credentials.credentials)
    user = await users_repo.get_by_id(session, payload["user_id"])
    if user is None:
        logger.warning("auth_user_vanished", user_id=payload["user_id"])
        raise InvalidTokenError("Invalid token: user no longer exists")
    if user.status == UserStatus.ARCHIVED:
        raise AccountArchivedError()

    structlog.contextvars.bind_contextvars(user_id=user.id)
    return user


async def get_optional_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    session: AsyncSession = Depends(get_session),
) -> User | None:
    """Like ``get_current_user`` but anonymous callers resolve to None."""
    if credentials is None or not credentials.credentials:
        return None
    return await get_current_user(credentials, session)


def require_user_type(*allowed: UserType) -> Callable[..., Awaitable[User]]:
    """Dependency factory: 403 unless the caller's user_type is in ``allowed``."""

    async def _check(user: User = Depends(get_current_user)) -> User:
        if user.user_type not in allowed:
            raise PermissionDeniedError(
                "You do not have permission to perform this action",
            )
        return user

    return _check
