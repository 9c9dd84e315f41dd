"""Property collections: CRUD plus the storage purge on delete."""

from __future__ import annotations

import asyncio

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from centralapi.auth.permissions import can_access, is_admin_or_harbinger, is_admin_or_owner
from centralapi.errors import CollectionNotFoundError, PermissionDeniedError
from centralapi.models.contracts import CollectionCreate, CollectionUpdate
from centralapi.models.db import Collection, User
from centralapi.models.enums import Status
from centralapi.repositories import collections as collections_repo
from centralapi.utils import storage

logger = structlog.get_logger()


async def get_collection(session: AsyncSession, collection_id: int) -> Collection:
    collection = await collections_repo.get_by_id(session, collection_id)
    if collection is None:
        raise CollectionNotFoundError(collection_id)
    return collection


async def get_accessible_collection(
    session: AsyncSession, collection_id: int, user: User, action: str = "access"
) -> Collection:
    """Fetch a collection the caller may act on; 404 before 403."""
    collection = await get_collection(session, collection_id)
    if not can_access(user, collection):
        raise PermissionDeniedError(f"You do not have permission to {action} this collection.")
    return collection


async def get_owned_collection(
    session: AsyncSession, collection_id: int, user: User, action: str = "access"
) -> Collection:
    """Like ``get_accessible_collection`` but for admins and the owner only."""
    collection = await get_collection(session, collection_id)
    if not is_admin_or_owner(user, collection):
        raise PermissionDeniedError(f"You do not have permission to {action} this collection.")
    return collection


async def list_collections_for_user(session: AsyncSession, user_id: int) -> list[Collection]:
    return await collections_repo.list_by_user(session, user_id)


async def list_all_collections(session: AsyncSession) -> list[Collection]:
    return await collections_repo.list_all(session)


async def create_collection(
    session: AsyncSession, data: CollectionCreate, owner: User
) -> Collection:
    """The caller owns the new collection; it starts out pending."""
    owner_id = data.property_owner_id if data.property_owner_id is not None else owner.id
    collection = Collection(
        user_id=owner.id,
        property_owner_id=owner_id,
        approval_status=Status.PENDING,
        **data.model_dump(exclude={"property_owner_id"}),
    )
    await collections_repo.add(session, collection)
    await session.commit()
    logger.info("collection_created", collection_id=collection.id, user_id=owner.id)
    return collection


async def update_collection(
    session: AsyncSession, collection: Collection, data: CollectionUpdate, actor: User
) -> Collection:
    """Apply the fields present in ``data``; explicit nulls only clear nullable columns.

    Setting ``approval_status`` is a reviewer override.
    """
    changes = data.model_dump(exclude_unset=True)
    if changes.get("approval_status") is not None and not is_admin_or_harbinger(actor):
        raise PermissionDeniedError("Only reviewers can change a collection's approval status.")
    nullable = {"property_owner_id", "parking_spaces"}
    for field, value in changes.items():
        if value is None and field not in nullable:
            continue
        setattr(collection, field, value)
    await session.commit()
    logger.info("collection_updated", collection_id=collection.id, fields=sorted(changes))
    return collection


async def update_collection_status(
    session: AsyncSession, collection: Collection, status: Status
) -> Collection:
    """Manual override; the next image change recalculates it again."""
    collection.approval_status = status
    await session.commit()
    logger.info("collection_status_set", collection_id=collection.id, status=str(status))
    return collection


async def delete_collection(session: AsyncSession, collection: Collection) -> None:
    """Delete rows (images cascade), then purge stored objects best-effort."""
    collection_id = collection.id
    await collections_repo.delete(session, collection)
    await session.commit()
    logger.info("collection_deleted", collection_id=collection_id)

    try:
        await asyncio.to_thread(storage.delete_prefix, storage.collection_prefix(collection_id))
    except Exception:
        logger.exception("storage_purge_failed", collection_id=collection_id)
