"""Suggested shot list for a property collection."""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from centralapi.auth.permissions import can_access
from centralapi.errors import PermissionDeniedError
from centralapi.models.db import User
from centralapi.repositories import collections as collections_repo


def recommended_shots(bedrooms: int, bathrooms: int) -> list[str]:
    shots = ["Hero Image"]
    shots += [f"Bedroom {i}" for i in range(1, bedrooms + 1)]
    shots += [f"Bathroom {i}" for i in range(1, bathrooms + 1)]
    shots.append("Kitchen")
    return shots


async def get_recommended_images(
    session: AsyncSession, collection_id: int, viewer: User
) -> list[str]:
    """Shot list for a stored collection; empty when the collection does not exist."""
    collection = await collections_repo.get_by_id(session, collection_id)
    if collection is None:
        return []
    if not can_access(viewer, collection):
        raise PermissionDeniedError("You do not have permission to access this collection.")
    return recommended_shots(collection.bedrooms, collection.bathrooms)
