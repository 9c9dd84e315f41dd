"""User management endpoints.

Registration is public, but only an admin caller may pick a non-default
user type or role. Admins manage everyone; other users only see and
edit their own profile. Hard delete is reserved for harbingers.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from centralapi.auth import get_current_user, get_optional_user, require_user_type
from centralapi.auth.permissions import is_admin, is_admin_or_self
from centralapi.database import get_session
from centralapi.errors import PermissionDeniedError
from centralapi.models.contracts import (
    ErrorResponse,
    MessageResponse,
    UserCreate,
    UserCreatedResponse,
    UserResponse,
    UserUpdate,
)
from centralapi.models.db import User
from centralapi.models.enums import UserRole, UserStatus, UserType
from centralapi.services import users as user_service

router = APIRouter(prefix="/users", tags=["users"])

_FORBIDDEN = {403: {"model": ErrorResponse}}
_NOT_FOUND = {404: {"model": ErrorResponse}}

require_admin = require_user_type(UserType.CL_ADMIN)
require_harbinger = require_user_type(UserType.HARBINGER)


@router.post(
    "",
    status_code=201,
    response_model=UserCreatedResponse,
    responses={**_FORBIDDEN, 409: {"model": ErrorResponse}},
)
async def create_user(
    body: UserCreate,
    caller: User | None = Depends(get_optional_user),
    session: AsyncSession = Depends(get_session),
) -> UserCreatedResponse:
    elevated = body.user_type != UserType.CLIENT or body.user_role != UserRole.OWNER
    if elevated and not (caller is not None and is_admin(caller)):
        raise PermissionDeniedError("Only administrators can assign a user type or role.")
    user = await user_service.create_user(session, body)
    return UserCreatedResponse(id=user.id)


@router.get("", response_model=list[UserResponse], responses=_FORBIDDEN)
async def list_users(
    status: UserStatus | None = None,
    _admin: User = Depends(require_admin),
    session: AsyncSession = Depends(get_session),
):
    return await user_service.list_users(session, status)


@router.get("/email/{email}", response_model=UserResponse, responses=_FORBIDDEN | _NOT_FOUND)
async def get_user_by_email(
    email: str,
    _admin: User = Depends(require_admin),
    session: AsyncSession = Depends(get_session),
):
    return await user_service.get_user_by_email(session, email)


@router.get("/{user_id}", response_model=UserResponse, responses=_FORBIDDEN | _NOT_FOUND)
async def get_user(
    user_id: int,
    current: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
):
    if not is_admin_or_self(current, user_id):
        raise PermissionDeniedError("You do not have permission to view this user.")
    return await user_service.get_user(session, user_id)


@router.put(
    "/{user_id}",
    response_model=UserResponse,
    responses=_FORBIDDEN | _NOT_FOUND | {409: {"model": ErrorResponse}},
)
async def update_user(
    user_id: int,
    body: UserUpdate,
    current: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
):
    if not is_admin_or_self(current, user_id):
        raise PermissionDeniedError("You do not have permission to update this user.")
    return await user_service.update_user(session, user_id, body, actor=current)


@router.delete("/{user_id}", status_code=204, responses=_FORBIDDEN | _NOT_FOUND)
async def delete_user(
    user_id: int,
    _harbinger: User = Depends(require_harbinger),
    session: AsyncSession = Depends(get_session),
) -> None:
    await user_service.delete_user(session, user_id)


@router.patch(
    "/archive/{user_id}", response_model=MessageResponse, responses=_FORBIDDEN | _NOT_FOUND
)
async def archive_user(
    user_id: int,
    _admin: User = Depends(require_admin),
    session: AsyncSession = Depends(get_session),
) -> MessageResponse:
    await user_service.set_user_status(session, user_id, UserStatus.ARCHIVED)
    return MessageResponse(message="User archived successfully")


@router.patch(
    "/reactivate/{user_id}", response_model=MessageResponse, responses=_FORBIDDEN | _NOT_FOUND
)
async def reactivate_user(
    user_id: int,
    _admin: User = Depends(require_admin),
    session: AsyncSession = Depends(get_session),
) -> MessageResponse:
    await user_service.set_user_status(session, user_id, UserStatus.ACTIVE)
    return MessageResponse(message="User reactivated successfully")
