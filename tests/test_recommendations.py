"""Tests for the suggested shot list."""

import pytest

from centralapi.errors import PermissionDeniedError
from centralapi.services.recommendations import get_recommended_images, recommended_shots


class TestRecommendedShots:
    def test_order_and_numbering(self):
        assert recommended_shots(2, 1) == [
            "Hero Image",
            "Bedroom 1",
            "Bedroom 2",
            "Bathroom 1",
            "Kitchen",
        ]

    def test_no_rooms(self):
        assert recommended_shots(0, 0) == ["Hero Image", "Kitchen"]

    def test_length(self):
        assert len(recommended_shots(5, 3)) == 5 + 3 + 2


class TestGetRecommendedImages:
    @pytest.mark.asyncio
    async def test_missing_collection_is_empty(self, session, owner):
        assert await get_recommended_images(session, 9999, owner) == []

    @pytest.mark.asyncio
    async def test_owner_gets_shot_list(self, session, owner, make_collection):
        collection = await make_collection(owner, bedrooms=1, bathrooms=1)

        shots = await get_recommended_images(session, collection.id, owner)

        assert shots == ["Hero Image", "Bedroom 1", "Bathroom 1", "Kitchen"]

    @pytest.mark.asyncio
    async def test_stranger_is_forbidden(self, session, owner, other_client, make_collection):
        collection = await make_collection(owner)

        with pytest.raises(PermissionDeniedError):
            await get_recommended_images(session, collection.id, other_client)


class TestRecommendedImagesEndpoint:
    @pytest.mark.asyncio
    async def test_owner(self, client, owner, make_collection, auth_headers):
        collection = await make_collection(owner, bedrooms=2, bathrooms=0)

        resp = await client.get(
            f"/api/recommended-images/{collection.id}", headers=auth_headers(owner)
        )

        assert resp.status_code == 200
        assert resp.json() == ["Hero Image", "Bedroom 1", "Bedroom 2", "Kitchen"]

    @pytest.mark.asyncio
    async def test_missing_collection(self, client, owner, auth_headers):
        resp = await client.get("/api/recommended-images/9999", headers=auth_headers(owner))

        assert resp.status_code == 200
        assert resp.json() == []

    @pytest.mark.asyncio
    async def test_stranger(self, client, owner, other_client, make_collection, auth_headers):
        collection = await make_collection(owner)

        resp = await client.get(
            f"/api/recommended-images/{collection.id}", headers=auth_headers(other_client)
        )

        assert resp.status_code == 403

    @pytest.mark.asyncio
    async def test_requires_auth(self, client):
        resp = await client.get("/api/recommended-images/1")
        assert resp.status_code == 401
