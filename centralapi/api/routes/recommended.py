from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from centralapi.auth import get_current_user
from centralapi.database import get_session
from centralapi.models.contracts import ErrorResponse
from centralapi.models.db import User
from centralapi.services.recommendations import get_recommended_images

router = APIRouter(prefix="/recommended-images", tags=["recommendations"])


@router.get(
    "/{collection_id}", response_model=list[str], responses={403: {"model": ErrorResponse}}
)
async def recommended_images(
    collection_id: int,
    current: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
) -> list[str]:
    """Suggested shots: hero, one per bedroom, one per bathroom, kitchen."""
    return await get_recommended_images(session, collection_id, current)
