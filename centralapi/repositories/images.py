from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from centralapi.models.db import Image


async def get_by_id(session: AsyncSession, image_pk: int) -> Image | None:
    return await session.get(Image, image_pk)


async def list_by_collection(session: AsyncSession, collection_id: int) -> list[Image]:
    result = await session.execute(
        select(Image)
        .where(Image.collection_id == collection_id)
        .order_by(Image.image_tag, Image.instance_number, Image.id)
    )
    return list(result.scalars())


async def list_statuses(session: AsyncSession, collection_id: int) -> list[str]:
    result = await session.execute(
        select(Image.image_status).where(Image.collection_id == collection_id)
    )
    return list(result.scalars())


async def add(session: AsyncSession, image: Image) -> Image:
    session.add(image)
    await session.flush()
    return image


async def delete(session: AsyncSession, image: Image) -> None:
    await session.delete(image)
    await session.flush()
