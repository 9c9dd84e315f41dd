from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from centralapi.models.db import Collection


async def get_by_id(session: AsyncSession, collection_id: int) -> Collection | None:
    return await session.get(Collection, collection_id)


async def list_by_user(session: AsyncSession, user_id: int) -> list[Collection]:
    result = await session.execute(
        select(Collection).where(Collection.user_id == user_id).order_by(Collection.id)
    )
    return list(result.scalars())


async def list_all(session: AsyncSession) -> list[Collection]:
    result = await session.execute(select(Collection).order_by(Collection.id))
    return list(result.scalars())


async def add(session: AsyncSession, collection: Collection) -> Collection:
    session.add(collection)
    await session.flush()
    return collection


async def delete(session: AsyncSession, collection: Collection) -> None:
    await session.delete(collection)
    await session.flush()
