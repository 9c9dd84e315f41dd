"""Image upload, review and removal within a collection.

Every change to an image's presence or status recalculates the owning
collection's approval status in the same transaction.
"""

from __future__ import annotations

import asyncio
import mimetypes
import uuid
from pathlib import PurePosixPath

import structlog
from botocore.exceptions import BotoCoreError, ClientError
from sqlalchemy.ext.asyncio import AsyncSession

from centralapi.auth.permissions import is_admin_or_harbinger
from centralapi.errors import (
    ImageNotFoundError,
    NotFoundError,
    PermissionDeniedError,
    StorageError,
    ValidationFailedError,
)
from centralapi.models.contracts import ClassificationResult, ImageUpdate
from centralapi.models.db import Collection, Image, User
from centralapi.models.enums import ImageTag, Status
from centralapi.repositories import images as images_repo
from centralapi.services.status import recalculate_collection_status
from centralapi.utils import storage

logger = structlog.get_logger()

IMAGE_EXTENSIONS = {".jpg", ".jpeg", ".png", ".webp", ".gif", ".heic", ".heif", ".tif", ".tiff"}
REVIEW_FIELDS = {"image_status", "rejection_reason"}


def new_image_id() -> str:
    return f"img_{uuid.uuid4().hex}"


def _extension(filename: str | None, content_type: str) -> str:
    suffix = PurePosixPath(filename or "").suffix.lower()
    if suffix in IMAGE_EXTENSIONS:
        return suffix
    return mimetypes.guess_extension(content_type) or ""


async def get_image(session: AsyncSession, collection: Collection, image_pk: int) -> Image:
    """Fetch an image that belongs to ``collection``."""
    image = await images_repo.get_by_id(session, image_pk)
    if image is None or image.collection_id != collection.id:
        raise ImageNotFoundError(image_pk)
    return image


async def list_images(session: AsyncSession, collection: Collection) -> list[Image]:
    return await images_repo.list_by_collection(session, collection.id)


async def upload_image(
    session: AsyncSession,
    collection: Collection,
    uploader: User,
    *,
    data: bytes,
    content_type: str,
    filename: str | None = None,
    tag: ImageTag | None = None,
    custom_tag: str | None = None,
    description: str | None = None,
    instance_number: int = 1,
) -> Image:
    """Store the bytes, record the image as pending, refresh the collection status.

    A custom tag on its own files the image under ``OTHER``.
    """
    custom_tag = (custom_tag or "").strip() or None
    if tag is None and custom_tag is None:
        raise ValidationFailedError(
            "An image must have either a tag or a custom tag.", code="tag_required"
        )
    if instance_number < 1:
        raise ValidationFailedError("instance_number must be 1 or greater")

    image_id = new_image_id()
    key = storage.image_key(collection.id, image_id, _extension(filename, content_type))

    try:
        await asyncio.to_thread(storage.upload_object, key, data, content_type)
    except (BotoCoreError, ClientError) as exc:
        logger.exception(
            "storage_upload_failed",
            collection_id=collection.id,
            storage_key=key,
            size_bytes=len(data),
        )
        raise StorageError("Could not store the image, please retry") from exc

    url = storage.public_url(key)
    image = Image(
        image_id=image_id,
        collection_id=collection.id,
        storage_key=key,
        image_url=url,
        image_tag=tag or ImageTag.OTHER,
        custom_tag=custom_tag,
        instance_number=instance_number,
        image_status=Status.PENDING,
        description=description,
        content_type=content_type,
        size_bytes=len(data),
    )
    try:
        await images_repo.add(session, image)
        collection.image_urls = [*collection.image_urls, url]
        await recalculate_collection_status(session, collection)
        await session.commit()
    except Exception:
        await session.rollback()
        # Remove the orphaned object if the row could not be written
        try:
            await asyncio.to_thread(storage.delete_object, key)
        except Exception:
            logger.error("storage_rollback_failed", storage_key=key, exc_info=True)
        raise

    logger.info(
        "image_uploaded",
        collection_id=collection.id,
        image_id=image_id,
        uploader_id=uploader.id,
        tag=str(image.image_tag),
        size_bytes=len(data),
    )
    return image


async def update_image(
    session: AsyncSession,
    collection: Collection,
    image_pk: int,
    data: ImageUpdate,
    actor: User,
) -> Image:
    """Apply the fields present in ``data``. Review fields are reviewer-only."""
    image = await get_image(session, collection, image_pk)
    changes = data.model_dump(exclude_unset=True)

    if REVIEW_FIELDS & changes.keys() and not is_admin_or_harbinger(actor):
        raise PermissionDeniedError("Only reviewers can approve or reject images.")

    for field in ("image_tag", "instance_number", "image_status"):
        if changes.get(field) is not None:
            setattr(image, field, changes[field])
    for field in ("custom_tag", "description", "description_summary", "rejection_reason"):
        if field in changes:
            setattr(image, field, changes[field])

    if changes.get("image_status") == Status.APPROVED and "rejection_reason" not in changes:
        image.rejection_reason = None

    await session.flush()
    await recalculate_collection_status(session, collection)
    await session.commit()
    logger.info(
        "image_updated",
        collection_id=collection.id,
        image_pk=image.id,
        actor_id=actor.id,
        fields=sorted(changes),
    )
    return image


async def delete_image(session: AsyncSession, collection: Collection, image_pk: int) -> None:
    image = await get_image(session, collection, image_pk)
    key, url = image.storage_key, image.image_url

    await images_repo.delete(session, image)
    collection.image_urls = [u for u in collection.image_urls if u != url]
    await recalculate_collection_status(session, collection)
    await session.commit()
    logger.info("image_deleted", collection_id=collection.id, image_pk=image_pk)

    try:
        await asyncio.to_thread(storage.delete_object, key)
    except Exception:
        logger.exception("storage_delete_failed", storage_key=key)


async def download_url(image: Image) -> str:
    """Presigned GET URL; 404 if the stored object has gone missing."""
    try:
        exists = await asyncio.to_thread(storage.head_object, image.storage_key)
        if exists:
            return await asyncio.to_thread(storage.generate_presigned_url, image.storage_key)
    except (BotoCoreError, ClientError) as exc:
        raise StorageError("Could not create a download link, please retry") from exc

    logger.warning("storage_object_missing", image_pk=image.id, storage_key=image.storage_key)
    raise NotFoundError(f"Stored file for image {image.id} is missing", code="image_file_missing")


async def record_classification(
    session: AsyncSession, image_pk: int, result: ClassificationResult
) -> Image | None:
    """Store a classifier prediction. Returns None if the image is gone."""
    image = await images_repo.get_by_id(session, image_pk)
    if image is None:
        return None
    image.ai_tag = result.tag
    image.ai_confidence = result.confidence
    await session.commit()
    return image
