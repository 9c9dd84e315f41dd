"""User accounts: registration, profile updates, archiving and login."""

from __future__ import annotations

import asyncio

import structlog
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from centralapi.auth.permissions import is_admin
from centralapi.auth.security import hash_password, verify_password
from centralapi.errors import (
    AccountArchivedError,
    EmailAlreadyUsedError,
    InvalidCredentialsError,
    PermissionDeniedError,
    UserNotFoundError,
)
from centralapi.models.contracts import UserCreate, UserUpdate
from centralapi.models.db import User
from centralapi.models.enums import UserStatus
from centralapi.repositories import collections as collections_repo
from centralapi.repositories import users as users_repo
from centralapi.utils import storage

logger = structlog.get_logger()


async def create_user(session: AsyncSession, data: UserCreate) -> User:
    email = data.email.lower()
    if await users_repo.get_by_email(session, email) is not None:
        raise EmailAlreadyUsedError()

    user = User(
        name=data.name,
        email=email,
        password_hash=hash_password(data.password),
        phone_number=data.phone_number,
        user_type=data.user_type,
        user_role=data.user_role,
        status=UserStatus.ACTIVE,
        property_ids=list(data.property_ids),
    )
    try:
        await users_repo.add(session, user)
        await session.commit()
    except IntegrityError as exc:
        # Lost a race against a concurrent registration with the same email
        await session.rollback()
        raise EmailAlreadyUsedError() from exc

    logger.info("user_created", user_id=user.id, user_type=str(user.user_type))
    return user


async def get_user(session: AsyncSession, user_id: int) -> User:
    user = await users_repo.get_by_id(session, user_id)
    if user is None:
        raise UserNotFoundError(user_id)
    return user


async def get_user_by_email(session: AsyncSession, email: str) -> User:
    user = await users_repo.get_by_email(session, email)
    if user is None:
        raise UserNotFoundError(email)
    return user


async def list_users(session: AsyncSession, status: UserStatus | None = None) -> list[User]:
    return await users_repo.list_users(session, status)


async def update_user(session: AsyncSession, user_id: int, data: UserUpdate, actor: User) -> User:
    """Apply the fields present in ``data``.

    Only admins may change ``user_type`` or ``user_role``. The password is
    re-hashed only when it actually changes.
    """
    user = await get_user(session, user_id)
    changes = data.model_dump(exclude_unset=True)

    if ("user_type" in changes or "user_role" in changes) and not is_admin(actor):
        raise PermissionDeniedError("Only administrators can change user type or role.")

    email = changes.pop("email", None)
    if email is not None and email.lower() != user.email:
        if await users_repo.get_by_email(session, email) is not None:
            raise EmailAlreadyUsedError()
        user.email = email.lower()

    password = changes.pop("password", None)
    if password and not verify_password(password, user.password_hash):
        user.password_hash = hash_password(password)

    for field in ("name", "phone_number", "user_type", "user_role", "property_ids"):
        if field in changes and changes[field] is not None:
            setattr(user, field, changes[field])

    try:
        await session.flush()
        await session.commit()
    except IntegrityError as exc:
        await session.rollback()
        raise EmailAlreadyUsedError() from exc

    logger.info(
        "user_updated", user_id=user.id, actor_id=actor.id, fields=sorted(data.model_fields_set)
    )
    return user


async def delete_user(session: AsyncSession, user_id: int) -> None:
    """Delete the user; their collections and images cascade in the database.

    Stored image objects are purged afterwards, best-effort.
    """
    user = await get_user(session, user_id)
    collection_ids = [c.id for c in await collections_repo.list_by_user(session, user_id)]
    await users_repo.delete(session, user)
    await session.commit()
    logger.info("user_deleted", user_id=user_id, collection_count=len(collection_ids))

    for collection_id in collection_ids:
        try:
            await asyncio.to_thread(storage.delete_prefix, storage.collection_prefix(collection_id))
        except Exception:
            logger.exception("storage_purge_failed", user_id=user_id, collection_id=collection_id)


async def set_user_status(session: AsyncSession, user_id: int, status: UserStatus) -> User:
    user = await get_user(session, user_id)
    user.status = status
    await session.commit()
    logger.info("user_status_changed", user_id=user_id, status=str(status))
    return user


async def authenticate(session: AsyncSession, email: str, password: str) -> User:
    """Return the user for valid credentials.

    Unknown email and wrong password raise the same error.
    """
    user = await users_repo.get_by_email(session, email)
    if user is None or not verify_password(password, user.password_hash):
        logger.warning("login_failed", email=email)
        raise InvalidCredentialsError()
    if user.status == UserStatus.ARCHIVED:
        logger.warning("login_archived_account", user_id=user.id)
        raise AccountArchivedError()
    logger.info("login_succeeded", user_id=user.id)
    return user
