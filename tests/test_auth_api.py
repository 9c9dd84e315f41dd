"""Tests for login and bearer-token resolution."""

from datetime import timedelta

import pytest

from centralapi.auth.security import create_access_token
from centralapi.database import get_session_factory
from centralapi.models.enums import UserStatus, UserType
from centralapi.services.users import set_user_status


class TestLogin:
    @pytest.mark.asyncio
    async def test_login_returns_token(self, client, owner, password):
        resp = await client.post(
            "/api/auth/login", json={"email": owner.email, "password": password}
        )

        assert resp.status_code == 200
        body = resp.json()
        assert body["token"]
        assert body["token_type"] == "bearer"
        assert body["email"] == owner.email
        assert body["id"] == owner.id
        assert body["user_type"] == "CLIENT"
        assert body["role"] == "OWNER"

    @pytest.mark.asyncio
    async def test_login_email_is_case_insensitive(self, client, owner, password):
        resp = await client.post(
            "/api/auth/login", json={"email": owner.email.upper(), "password": password}
        )
        assert resp.status_code == 200

    @pytest.mark.asyncio
    async def test_token_works_on_protected_route(self, client, owner, password):
        login = await client.post(
            "/api/auth/login", json={"email": owner.email, "password": password}
        )
        token = login.json()["token"]

        resp = await client.get(
            f"/api/users/{owner.id}", headers={"Authorization": f"Bearer {token}"}
        )

        assert resp.status_code == 200
        assert resp.json()["email"] == owner.email

    @pytest.mark.asyncio
    async def test_wrong_password_and_unknown_email_look_the_same(self, client, owner, password):
        wrong = await client.post(
            "/api/auth/login", json={"email": owner.email, "password": "not-the-password"}
        )
        unknown = await client.post(
            "/api/auth/login", json={"email": "nobody@example.com", "password": password}
        )

        assert wrong.status_code == unknown.status_code == 401
        assert wrong.json() == unknown.json()
        assert wrong.json()["error"] == "invalid_credentials"

    @pytest.mark.asyncio
    async def test_archived_user_cannot_login(self, client, owner, password):
        async with get_session_factory()() as s:
            await set_user_status(s, owner.id, UserStatus.ARCHIVED)

        resp = await client.post(
            "/api/auth/login", json={"email": owner.email, "password": password}
        )

        assert resp.status_code == 403
        assert resp.json()["error"] == "account_archived"


class TestBearerToken:
    @pytest.mark.asyncio
    async def test_expired_token(self, client, owner):
        token = create_access_token(owner, expires_delta=timedelta(seconds=-1))

        resp = await client.get(
            f"/api/users/{owner.id}", headers={"Authorization": f"Bearer {token}"}
        )

        assert resp.status_code == 401
        assert resp.json()["error"] == "token_expired"

    @pytest.mark.asyncio
    async def test_malformed_token(self, client, owner):
        resp = await client.get(
            f"/api/users/{owner.id}", headers={"Authorization": "Bearer garbage"}
        )

        assert resp.status_code == 401
        assert resp.json()["error"] == "invalid_token"

    @pytest.mark.asyncio
    async def test_token_for_deleted_user(self, client, owner, harbinger, auth_headers):
        headers = auth_headers(owner)
        deleted = await client.delete(f"/api/users/{owner.id}", headers=auth_headers(harbinger))
        assert deleted.status_code == 204

        resp = await client.get(f"/api/users/{owner.id}", headers=headers)

        assert resp.status_code == 401
        assert resp.json()["error"] == "invalid_token"

    @pytest.mark.asyncio
    async def test_archived_user_token_rejected(self, client, owner, auth_headers):
        headers = auth_headers(owner)
        async with get_session_factory()() as s:
            await set_user_status(s, owner.id, UserStatus.ARCHIVED)

        resp = await client.get(f"/api/users/{owner.id}", headers=headers)

        assert resp.status_code == 403

    @pytest.mark.asyncio
    async def test_require_user_type(self, client, make_user, auth_headers):
        harbinger = await make_user(UserType.HARBINGER)

        resp = await client.get("/api/collections/all", headers=auth_headers(harbinger))

        assert resp.status_code == 403
        assert resp.json()["error"] == "forbidden"
