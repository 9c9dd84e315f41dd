"""Shared fixtures: in-memory database, mocked object storage, API client, users."""

from __future__ import annotations

import os

# Settings are read at import time, so the test environment goes in first
os.environ["ENVIRONMENT"] = "test"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["JWT_SECRET"] = "test-secret-not-for-production"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["CLASSIFIER_URL"] = ""

from collections.abc import Awaitable, Callable  # noqa: E402
from unittest.mock import MagicMock, patch  # noqa: E402

import httpx  # noqa: E402
import pytest  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from centralapi.auth.security import create_access_token  # noqa: E402
from centralapi.database import configure_engine, dispose_engine, get_session_factory  # noqa: E402
from centralapi.main import app  # noqa: E402
from centralapi.models.contracts import CollectionCreate, UserCreate  # noqa: E402
from centralapi.models.db import Base, Collection, User  # noqa: E402
from centralapi.models.enums import UserRole, UserType  # noqa: E402
from centralapi.services import collections as collection_service  # noqa: E402
from centralapi.services import users as user_service  # noqa: E402
from centralapi.utils import storage  # noqa: E402

PASSWORD = "correct-horse-battery"


@pytest.fixture
async def db_engine():
    """Fresh in-memory SQLite database per test, with foreign keys enforced."""
    engine = configure_engine("sqlite+aiosqlite://", poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await dispose_engine()


@pytest.fixture
async def session(db_engine):
    async with get_session_factory()() as s:
        yield s


@pytest.fixture
def mock_s3():
    """Replace the boto3 S3 client with a MagicMock."""
    storage.reset_client()
    with patch.object(storage, "_build_client") as mock_build:
        mock_client = MagicMock()
        mock_client.generate_presigned_url.return_value = "https://signed.example.com/object"
        mock_client.get_paginator.return_value.paginate.return_value = []
        mock_build.return_value = mock_client
        yield mock_client
    storage.reset_client()


@pytest.fixture
async def client(db_engine, mock_s3):
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest.fixture
def make_user(db_engine) -> Callable[..., Awaitable[User]]:
    """Factory: create a committed user row."""
    counter = 0

    async def _make(
        user_type: UserType = UserType.CLIENT,
        user_role: UserRole = UserRole.OWNER,
        email: str | None = None,
        password: str = PASSWORD,
    ) -> User:
        nonlocal counter
        counter += 1
        data = UserCreate(
            name=f"{user_type.lower()} {counter}",
            email=email or f"{user_type.lower()}{counter}@example.com",
            password=password,
            user_type=user_type,
            user_role=user_role,
        )
        async with get_session_factory()() as s:
            return await user_service.create_user(s, data)

    return _make


@pytest.fixture
def make_collection(db_engine) -> Callable[..., Awaitable[Collection]]:
    """Factory: create a committed collection owned by ``owner``."""

    async def _make(owner: User, **overrides) -> Collection:
        fields = {
            "property_description": "Three bedroom family home",
            "property_address": "12 Example Street, Sydney NSW",
            "collection_code": "COL-001",
            "property_size": 240,
            "bedrooms": 3,
            "bathrooms": 2,
            "parking_spaces": 1,
            "property_type": "House",
        }
        fields.update(overrides)
        async with get_session_factory()() as s:
            return await collection_service.create_collection(
                s, CollectionCreate(**fields), owner=owner
            )

    return _make


def _bearer(user: User) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(user)}"}


@pytest.fixture
def auth_headers() -> Callable[[User], dict[str, str]]:
    """Build an Authorization header for a user."""
    return _bearer


@pytest.fixture
def password() -> str:
    """Plain-text password every factory-made user is created with."""
    return PASSWORD


@pytest.fixture
async def admin(make_user) -> User:
    return await make_user(UserType.CL_ADMIN, UserRole.ADMIN)


@pytest.fixture
async def harbinger(make_user) -> User:
    return await make_user(UserType.HARBINGER, UserRole.AGENT)


@pytest.fixture
async def owner(make_user) -> User:
    return await make_user(UserType.CLIENT, UserRole.OWNER)


@pytest.fixture
async def other_client(make_user) -> User:
    return await make_user(UserType.CLIENT, UserRole.OWNER)
