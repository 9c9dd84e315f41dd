from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from centralapi.models.db import User
from centralapi.models.enums import UserStatus


async def get_by_id(session: AsyncSession, user_id: int) -> User | None:
    return await session.get(User, user_id)


async def get_by_email(session: AsyncSession, email: str) -> User | None:
    """Case-insensitive lookup; emails are stored lower-cased."""
    result = await session.execute(select(User).where(func.lower(User.email) == email.lower()))
    return result.scalar_one_or_none()


async def list_users(session: AsyncSession, status: UserStatus | None = None) -> list[User]:
    stmt = select(User).order_by(User.id)
    if status is not None:
        stmt = stmt.where(User.status == status)
    result = await session.execute(stmt)
    return list(result.scalars())


async def add(session: AsyncSession, user: User) -> User:
    session.add(user)
    await session.flush()
    return user


async def delete(session: AsyncSession, user: User) -> None:
    await session.delete(user)
    await session.flush()
