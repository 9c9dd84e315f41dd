"""Tests for the collection endpoints: ownership, admin views, partial updates."""

import pytest

from centralapi.database import get_session_factory
from centralapi.models.db import Collection

NEW_COLLECTION = {
    "property_description": "Two bedroom apartment with balcony",
    "property_address": "5/20 Harbour Road, Sydney NSW",
    "collection_code": "APT-20",
    "property_size": 85,
    "bedrooms": 2,
    "bathrooms": 1,
    "parking_spaces": 1,
    "property_type": "Apartment",
}


async def _load(collection_id: int) -> Collection | None:
    async with get_session_factory()() as s:
        return await s.get(Collection, collection_id)


class TestCreateCollection:
    @pytest.mark.asyncio
    async def test_creates_owned_pending_collection(self, client, owner, auth_headers):
        resp = await client.post(
            "/api/collections", json=NEW_COLLECTION, headers=auth_headers(owner)
        )

        assert resp.status_code == 201
        body = resp.json()
        assert body["user_id"] == owner.id
        assert body["property_owner_id"] == owner.id
        assert body["approval_status"] == "PENDING"
        assert body["image_urls"] == []
        assert body["bedrooms"] == 2

    @pytest.mark.asyncio
    async def test_requires_auth(self, client):
        resp = await client.post("/api/collections", json=NEW_COLLECTION)
        assert resp.status_code == 401

    @pytest.mark.asyncio
    async def test_rejects_negative_rooms(self, client, owner, auth_headers):
        resp = await client.post(
            "/api/collections",
            json={**NEW_COLLECTION, "bedrooms": -1},
            headers=auth_headers(owner),
        )
        assert resp.status_code == 422


class TestReadCollections:
    @pytest.mark.asyncio
    async def test_owner_reads_own(self, client, owner, make_collection, auth_headers):
        collection = await make_collection(owner)

        resp = await client.get(f"/api/collections/{collection.id}", headers=auth_headers(owner))

        assert resp.status_code == 200
        assert resp.json()["id"] == collection.id

    @pytest.mark.asyncio
    async def test_other_client_forbidden(
        self, client, owner, other_client, make_collection, auth_headers
    ):
        collection = await make_collection(owner)

        resp = await client.get(
            f"/api/collections/{collection.id}", headers=auth_headers(other_client)
        )

        assert resp.status_code == 403

    @pytest.mark.asyncio
    async def test_admin_reads_any(self, client, owner, admin, make_collection, auth_headers):
        collection = await make_collection(owner)

        resp = await client.get(f"/api/collections/{collection.id}", headers=auth_headers(admin))

        assert resp.status_code == 200

    @pytest.mark.asyncio
    async def test_harbinger_locked_out(
        self, client, owner, harbinger, make_collection, auth_headers
    ):
        """Harbingers reach collections through the image endpoints only."""
        collection = await make_collection(owner)
        url = f"/api/collections/{collection.id}"
        headers = auth_headers(harbinger)

        assert (await client.get(url, headers=headers)).status_code == 403
        assert (await client.put(url, json={"bedrooms": 9}, headers=headers)).status_code == 403
        assert (await client.delete(url, headers=headers)).status_code == 403

        stored = await _load(collection.id)
        assert stored is not None
        assert stored.bedrooms == collection.bedrooms

    @pytest.mark.asyncio
    async def test_missing_collection_is_404_before_403(self, client, other_client, auth_headers):
        resp = await client.get("/api/collections/9999", headers=auth_headers(other_client))

        assert resp.status_code == 404
        assert resp.json()["error"] == "collection_not_found"

    @pytest.mark.asyncio
    async def test_all_requires_admin(self, client, owner, admin, make_collection, auth_headers):
        await make_collection(owner)
        await make_collection(owner, collection_code="COL-002")

        forbidden = await client.get("/api/collections/all", headers=auth_headers(owner))
        allowed = await client.get("/api/collections/all", headers=auth_headers(admin))

        assert forbidden.status_code == 403
        assert allowed.status_code == 200
        assert len(allowed.json()) == 2

    @pytest.mark.asyncio
    async def test_user_collections(self, client, owner, make_collection, auth_headers):
        await make_collection(owner)

        resp = await client.get(f"/api/collections/user/{owner.id}", headers=auth_headers(owner))

        assert resp.status_code == 200
        assert [c["user_id"] for c in resp.json()] == [owner.id]

    @pytest.mark.asyncio
    async def test_user_collections_empty_is_404(self, client, owner, auth_headers):
        resp = await client.get(f"/api/collections/user/{owner.id}", headers=auth_headers(owner))

        assert resp.status_code == 404
        assert resp.json()["error"] == "collections_not_found"

    @pytest.mark.asyncio
    async def test_user_collections_of_someone_else(
        self, client, owner, other_client, auth_headers
    ):
        resp = await client.get(
            f"/api/collections/user/{owner.id}", headers=auth_headers(other_client)
        )
        assert resp.status_code == 403


class TestUpdateCollection:
    @pytest.mark.asyncio
    async def test_partial_update(self, client, owner, make_collection, auth_headers):
        collection = await make_collection(owner)

        resp = await client.put(
            f"/api/collections/{collection.id}",
            json={"bedrooms": 4, "property_description": None},
            headers=auth_headers(owner),
        )

        assert resp.status_code == 200
        body = resp.json()
        assert body["bedrooms"] == 4
        assert body["bathrooms"] == collection.bathrooms
        assert body["property_description"] == collection.property_description

    @pytest.mark.asyncio
    async def test_explicit_null_clears_optional_field(
        self, client, owner, make_collection, auth_headers
    ):
        collection = await make_collection(owner)

        resp = await client.put(
            f"/api/collections/{collection.id}",
            json={"parking_spaces": None},
            headers=auth_headers(owner),
        )

        assert resp.json()["parking_spaces"] is None

    @pytest.mark.asyncio
    async def test_stranger_cannot_update(
        self, client, owner, other_client, make_collection, auth_headers
    ):
        collection = await make_collection(owner)

        resp = await client.put(
            f"/api/collections/{collection.id}",
            json={"bedrooms": 9},
            headers=auth_headers(other_client),
        )

        assert resp.status_code == 403
        assert (await _load(collection.id)).bedrooms == collection.bedrooms

    @pytest.mark.asyncio
    async def test_owner_cannot_approve_own_collection(
        self, client, owner, make_collection, auth_headers
    ):
        collection = await make_collection(owner)

        resp = await client.put(
            f"/api/collections/{collection.id}",
            json={"approval_status": "APPROVED"},
            headers=auth_headers(owner),
        )

        assert resp.status_code == 403
        assert (await _load(collection.id)).approval_status == "PENDING"

    @pytest.mark.asyncio
    async def test_admin_may_override_status(
        self, client, owner, admin, make_collection, auth_headers
    ):
        collection = await make_collection(owner)

        resp = await client.put(
            f"/api/collections/{collection.id}",
            json={"approval_status": "REJECTED"},
            headers=auth_headers(admin),
        )

        assert resp.status_code == 200
        assert resp.json()["approval_status"] == "REJECTED"


class TestDeleteCollection:
    @pytest.mark.asyncio
    async def test_owner_deletes_and_prefix_purged(
        self, client, owner, make_collection, auth_headers, mock_s3
    ):
        collection = await make_collection(owner)

        resp = await client.delete(
            f"/api/collections/{collection.id}", headers=auth_headers(owner)
        )

        assert resp.status_code == 204
        assert await _load(collection.id) is None
        paginate = mock_s3.get_paginator.return_value.paginate
        assert paginate.call_args[1]["Prefix"] == f"collections/{collection.id}/"

    @pytest.mark.asyncio
    async def test_missing(self, client, owner, auth_headers):
        resp = await client.delete("/api/collections/9999", headers=auth_headers(owner))
        assert resp.status_code == 404
