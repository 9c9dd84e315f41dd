"""Collection approval status derived from its images."""

from __future__ import annotations

from collections.abc import Iterable

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from centralapi.models.db import Collection
from centralapi.models.enums import Status
from centralapi.repositories import images as images_repo

logger = structlog.get_logger()


def aggregate_status(statuses: Iterable[str]) -> Status:
    """Any rejected image rejects the collection; all approved approves it.

    A collection with no images stays pending.
    """
    seen = [Status(s) for s in statuses]
    if Status.REJECTED in seen:
        return Status.REJECTED
    if seen and all(s == Status.APPROVED for s in seen):
        return Status.APPROVED
    return Status.PENDING


async def recalculate_collection_status(session: AsyncSession, collection: Collection) -> Status:
    """Recompute and set ``collection.approval_status`` (caller commits)."""
    statuses = await images_repo.list_statuses(session, collection.id)
    new_status = aggregate_status(statuses)
    if collection.approval_status != new_status:
        logger.info(
            "collection_status_changed",
            collection_id=collection.id,
            old=str(collection.approval_status),
            new=str(new_status),
            image_count=len(statuses),
        )
        collection.approval_status = new_status
        await session.flush()
    return new_status
