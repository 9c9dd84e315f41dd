"""Login endpoint: exchanges email + password for a bearer token."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from centralapi.auth.security import create_access_token
from centralapi.database import get_session
from centralapi.models.contracts import AuthenticationResponse, ErrorResponse, LoginRequest
from centralapi.services import users as user_service

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post(
    "/login",
    response_model=AuthenticationResponse,
    responses={401: {"model": ErrorResponse}, 403: {"model": ErrorResponse}},
)
async def login(
    body: LoginRequest, session: AsyncSession = Depends(get_session)
) -> AuthenticationResponse:
    user = await user_service.authenticate(session, body.email, body.password)
    return AuthenticationResponse(
        token=create_access_token(user),
        email=user.email,
        name=user.name,
        role=user.user_role,
        user_type=user.user_type,
        id=user.id,
    )
