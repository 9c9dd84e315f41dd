"""Collection (property) endpoints.

Owners manage their own collections; admins may act on any. Reviewers
reach collections through the image endpoints.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from centralapi.auth import get_current_user, require_user_type
from centralapi.auth.permissions import is_admin_or_self
from centralapi.database import get_session
from centralapi.errors import NotFoundError, PermissionDeniedError
from centralapi.models.contracts import (
    CollectionCreate,
    CollectionResponse,
    CollectionUpdate,
    ErrorResponse,
)
from centralapi.models.db import User
from centralapi.models.enums import UserType
from centralapi.services import collections as collection_service

router = APIRouter(prefix="/collections", tags=["collections"])

_ERRORS = {403: {"model": ErrorResponse}, 404: {"model": ErrorResponse}}


@router.get("/all", response_model=list[CollectionResponse], responses=_ERRORS)
async def list_all_collections(
    _admin: User = Depends(require_user_type(UserType.CL_ADMIN)),
    session: AsyncSession = Depends(get_session),
):
    return await collection_service.list_all_collections(session)


@router.get("/user/{user_id}", response_model=list[CollectionResponse], responses=_ERRORS)
async def list_user_collections(
    user_id: int,
    current: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
):
    """Collections owned by ``user_id``. 404 when the user has none."""
    if not is_admin_or_self(current, user_id):
        raise PermissionDeniedError("You do not have permission to view these collections.")
    collections = await collection_service.list_collections_for_user(session, user_id)
    if not collections:
        raise NotFoundError(
            f"No collections found for user {user_id}", code="collections_not_found"
        )
    return collections


@router.post("", status_code=201, response_model=CollectionResponse)
async def create_collection(
    body: CollectionCreate,
    current: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
):
    return await collection_service.create_collection(session, body, owner=current)


@router.get("/{collection_id}", response_model=CollectionResponse, responses=_ERRORS)
async def get_collection(
    collection_id: int,
    current: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
):
    return await collection_service.get_owned_collection(
        session, collection_id, current, "view"
    )


@router.put("/{collection_id}", response_model=CollectionResponse, responses=_ERRORS)
async def update_collection(
    collection_id: int,
    body: CollectionUpdate,
    current: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
):
    collection = await collection_service.get_owned_collection(
        session, collection_id, current, "update"
    )
    return await collection_service.update_collection(session, collection, body, actor=current)


@router.delete("/{collection_id}", status_code=204, responses=_ERRORS)
async def delete_collection(
    collection_id: int,
    current: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
) -> None:
    collection = await collection_service.get_owned_collection(
        session, collection_id, current, "delete"
    )
    await collection_service.delete_collection(session, collection)
