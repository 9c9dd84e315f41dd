"""Image endpoints: upload, list, review, delete.

Upload reads the body in chunks with an early size cut-off, stores the
bytes in object storage, then schedules best-effort classification.
"""

from fastapi import APIRouter, BackgroundTasks, Depends, File, Form, Response, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from centralapi.auth import get_current_user, require_user_type
from centralapi.auth.permissions import is_admin_or_harbinger
from centralapi.config import settings
from centralapi.database import get_session
from centralapi.errors import FileTooLargeError, PermissionDeniedError, UnsupportedMediaTypeError
from centralapi.models.contracts import (
    CollectionResponse,
    DownloadUrlResponse,
    ErrorResponse,
    ImageResponse,
    ImageUpdate,
    ImageUploadResponse,
    MessageResponse,
)
from centralapi.models.db import User
from centralapi.models.enums import ImageTag, Status, UserType
from centralapi.services import collections as collection_service
from centralapi.services import images as image_service
from centralapi.utils.classifier import classify_image

router = APIRouter(prefix="/images", tags=["images"])

_ERRORS = {403: {"model": ErrorResponse}, 404: {"model": ErrorResponse}}
_CHUNK_SIZE = 65_536


async def _read_limited(file: UploadFile) -> bytes:
    max_bytes = settings.max_upload_mb * 1024 * 1024
    chunks: list[bytes] = []
    total = 0
    while chunk := await file.read(_CHUNK_SIZE):
        total += len(chunk)
        if total > max_bytes:
            raise FileTooLargeError(settings.max_upload_mb)
        chunks.append(chunk)
    return b"".join(chunks)


@router.post(
    "/upload",
    status_code=201,
    response_model=ImageUploadResponse,
    responses={
        **_ERRORS,
        413: {"model": ErrorResponse},
        415: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
    },
)
async def upload_image(
    response: Response,
    background_tasks: BackgroundTasks,
    collection_id: int = Form(...),
    file: UploadFile = File(...),
    tag: ImageTag | None = Form(None),
    custom_tag: str | None = Form(None, max_length=100),
    description: str | None = Form(None, max_length=500),
    instance_number: int = Form(1, ge=1),
    current: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
) -> ImageUploadResponse:
    """Upload -> store -> record as pending -> recalculate collection status."""
    collection = await collection_service.get_accessible_collection(
        session, collection_id, current, "upload images to"
    )

    content_type = (file.content_type or "").lower()
    if not content_type.startswith("image/"):
        raise UnsupportedMediaTypeError(content_type)

    data = await _read_limited(file)
    image = await image_service.upload_image(
        session,
        collection,
        current,
        data=data,
        content_type=content_type,
        filename=file.filename,
        tag=tag,
        custom_tag=custom_tag,
        description=description,
        instance_number=instance_number,
    )
    background_tasks.add_task(classify_image, image.id, data, content_type)

    response.headers["Location"] = image.image_url
    return ImageUploadResponse(
        url=image.image_url,
        image_id=image.image_id,
        collection_status=collection.approval_status,
    )


@router.get("/collections", response_model=list[CollectionResponse], responses=_ERRORS)
async def list_collections_for_user(
    user_id: int,
    current: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
):
    if not (is_admin_or_harbinger(current) or current.id == user_id):
        raise PermissionDeniedError("You do not have permission to access these collections.")
    return await collection_service.list_collections_for_user(session, user_id)


@router.get(
    "/collections/{collection_id}/images",
    response_model=list[ImageResponse],
    responses=_ERRORS,
)
async def list_images(
    collection_id: int,
    current: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
):
    collection = await collection_service.get_accessible_collection(
        session, collection_id, current
    )
    return await image_service.list_images(session, collection)


@router.get(
    "/collections/{collection_id}/images/{image_pk}/download",
    response_model=DownloadUrlResponse,
    responses=_ERRORS,
)
async def get_download_url(
    collection_id: int,
    image_pk: int,
    current: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
) -> DownloadUrlResponse:
    collection = await collection_service.get_accessible_collection(
        session, collection_id, current
    )
    image = await image_service.get_image(session, collection, image_pk)
    url = await image_service.download_url(image)
    return DownloadUrlResponse(url=url, expires_in=settings.presigned_url_expiry_seconds)


@router.put(
    "/collections/{collection_id}/images/{image_pk}",
    response_model=ImageResponse,
    responses=_ERRORS,
)
async def update_image(
    collection_id: int,
    image_pk: int,
    body: ImageUpdate,
    current: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
):
    collection = await collection_service.get_accessible_collection(
        session, collection_id, current, "update images in"
    )
    return await image_service.update_image(session, collection, image_pk, body, actor=current)


@router.delete(
    "/collections/{collection_id}/images/{image_pk}", status_code=204, responses=_ERRORS
)
async def delete_image(
    collection_id: int,
    image_pk: int,
    current: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
) -> None:
    collection = await collection_service.get_accessible_collection(
        session, collection_id, current, "delete images in"
    )
    await image_service.delete_image(session, collection, image_pk)


@router.delete("/collections/{collection_id}", status_code=204, responses=_ERRORS)
async def delete_collection(
    collection_id: int,
    current: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
) -> None:
    collection = await collection_service.get_accessible_collection(
        session, collection_id, current, "delete"
    )
    await collection_service.delete_collection(session, collection)


@router.put(
    "/collections/{collection_id}/status",
    response_model=MessageResponse,
    responses=_ERRORS,
)
async def update_collection_status(
    collection_id: int,
    status: Status,
    _reviewer: User = Depends(require_user_type(UserType.CL_ADMIN, UserType.HARBINGER)),
    session: AsyncSession = Depends(get_session),
) -> MessageResponse:
    collection = await collection_service.get_collection(session, collection_id)
    await collection_service.update_collection_status(session, collection, status)
    return MessageResponse(message="Collection status updated successfully.")
