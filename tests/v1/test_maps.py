# mypy: ignore-errors
# tests/v1/test_maps.py
"""Tests for map endpoints."""

from fastapi import status
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from community_maps.services import maps as map_service


def _create(client, headers, title="Cafes With Wifi", **extra):
    payload = {"title": title, "shortDescription": "Work-friendly", "body": "Long form text"}
    payload.update(extra)
    return client.post("/api/maps", json=payload, headers=headers)


class TestCheckSlug:
    """Slug availability checks."""

    def test_free_and_taken(self, client: TestClient, test_map) -> None:
        free = client.get("/api/check-slug", params={"slug": "brand-new"})
        taken = client.get("/api/check-slug", params={"slug": test_map.slug})
        assert free.json() == {"available": True}
        assert taken.json() == {"available": False}

    def test_missing_slug(self, client: TestClient) -> None:
        response = client.get("/api/check-slug")
        assert response.status_code == status.HTTP_400_BAD_REQUEST


class TestCreateAndRead:
    """Creating, listing and fetching maps."""

    def test_create_map(self, client: TestClient, auth_token, test_user) -> None:
        response = _create(client, auth_token)
        assert response.status_code == status.HTTP_201_CREATED
        data = response.json()
        assert data["slug"] == "cafes-with-wifi"
        assert data["owner_id"] == test_user.id

        fetched = client.get("/api/maps/cafes-with-wifi")
        assert fetched.status_code == status.HTTP_200_OK
        assert fetched.json()["id"] == data["id"]

    def test_create_requires_auth(self, client: TestClient) -> None:
        response = _create(client, {})
        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_create_missing_fields(self, client: TestClient, auth_token) -> None:
        response = client.post("/api/maps", json={"title": "Only title"}, headers=auth_token)
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert "Missing required fields" in response.json()["detail"]

    def test_create_with_reserved_custom_slug(self, client: TestClient, auth_token) -> None:
        response = _create(client, auth_token, slug="api")
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_unknown_slug(self, client: TestClient) -> None:
        response = client.get("/api/maps/does-not-exist")
        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_list_maps(self, client: TestClient, auth_token) -> None:
        first = _create(client, auth_token, title="First").json()
        second = _create(client, auth_token, title="Second").json()

        response = client.get("/api/maps", params={"page": 1, "limit": 10}, headers=auth_token)
        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["total"] == 2
        assert [item["id"] for item in data["items"]] == [second["id"], first["id"]]
        assert data["items"][0]["vote_count"] == 1
        assert data["items"][0]["has_upvoted"] is True

        anonymous = client.get("/api/maps").json()
        assert anonymous["items"][0]["has_upvoted"] is False

    def test_list_maps_bad_paging(self, client: TestClient) -> None:
        response = client.get("/api/maps", params={"limit": 0})
        assert response.status_code == status.HTTP_400_BAD_REQUEST


class TestUpdateMap:
    """PUT /api/maps/{id}."""

    def test_owner_can_update(self, client: TestClient, test_map, auth_token) -> None:
        response = client.put(
            f"/api/maps/{test_map.id}",
            json={"title": "Cafes With Wifi", "shortDescription": "Updated", "body": "New body"},
            headers=auth_token,
        )
        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {
            "id": test_map.id,
            "title": "Cafes With Wifi",
            "slug": "cafes-with-wifi",
        }

    def test_missing_fields(self, client: TestClient, test_map, auth_token) -> None:
        response = client.put(f"/api/maps/{test_map.id}", json={"title": "x"}, headers=auth_token)
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_requires_auth(self, client: TestClient, test_map) -> None:
        response = client.put(
            f"/api/maps/{test_map.id}",
            json={"title": "t", "shortDescription": "s", "body": "b"},
        )
        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_non_owner_forbidden(self, client: TestClient, test_map, other_auth_token) -> None:
        response = client.put(
            f"/api/maps/{test_map.id}",
            json={"title": "t", "shortDescription": "s", "body": "b"},
            headers=other_auth_token,
        )
        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_title_with_reserved_slug(self, client: TestClient, test_map, auth_token) -> None:
        response = client.put(
            f"/api/maps/{test_map.id}",
            json={"title": "Login", "shortDescription": "s", "body": "b"},
            headers=auth_token,
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert client.get(f"/api/maps/{test_map.slug}").status_code == status.HTTP_200_OK

    def test_unknown_map(self, client: TestClient, auth_token) -> None:
        response = client.put(
            "/api/maps/no-such-id",
            json={"title": "t", "shortDescription": "s", "body": "b"},
            headers=auth_token,
        )
        assert response.status_code == status.HTTP_404_NOT_FOUND


class TestVotes:
    """Upvotes and batch status."""

    def test_upvote_is_idempotent(self, client: TestClient, test_map, other_auth_token) -> None:
        first = client.post(f"/api/maps/{test_map.id}/upvote", headers=other_auth_token)
        second = client.post(f"/api/maps/{test_map.id}/upvote", headers=other_auth_token)
        assert first.status_code == status.HTTP_200_OK
        assert first.json() == {"upvoted": True, "created": True}
        assert second.json() == {"upvoted": True, "created": False}

    def test_upvote_unknown_map(self, client: TestClient, auth_token) -> None:
        response = client.post("/api/maps/missing/upvote", headers=auth_token)
        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_status(self, client: TestClient, test_map, other_auth_token) -> None:
        client.post(f"/api/maps/{test_map.id}/upvote", headers=other_auth_token)

        response = client.post(
            "/api/votes/status",
            json={"mapIds": [test_map.id, "other"]},
            headers=other_auth_token,
        )
        assert response.json() == {test_map.id: True, "other": False}

    def test_status_anonymous(self, client: TestClient, test_map) -> None:
        response = client.post("/api/votes/status", json={"mapIds": [test_map.id]})
        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {test_map.id: False}


class TestMyMaps:
    """GET /api/my-maps."""

    def test_lists_owned_maps_with_pending_counts(
        self, client: TestClient, test_map, pending_location, auth_token, other_auth_token
    ) -> None:
        _create(client, other_auth_token, title="Someone Else's")

        response = client.get("/api/my-maps", headers=auth_token)

        assert response.status_code == status.HTTP_200_OK
        body = response.json()
        assert [item["id"] for item in body] == [test_map.id]
        assert body[0]["pending_count"] == 1
        assert body[0]["slug"] == test_map.slug

    def test_requires_auth(self, client: TestClient) -> None:
        response = client.get("/api/my-maps")
        assert response.status_code == status.HTTP_401_UNAUTHORIZED


class TestDatabaseFailures:
    """Storage failures become JSON 500 responses."""

    def test_failed_read_returns_storage_error(
        self, client: TestClient, db_session, test_map, monkeypatch
    ) -> None:
        def broken(*args, **kwargs):
            raise OperationalError("SELECT 1", {}, Exception("db down"))

        monkeypatch.setattr(db_session, "scalar", broken)

        response = client.get(f"/api/maps/{test_map.slug}")
        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.json() == {"detail": "Failed to fetch map"}

    def test_unwrapped_database_error_is_handled(self, client: TestClient, monkeypatch) -> None:
        def broken(db, slug):
            raise OperationalError("SELECT 1", {}, Exception("db down"))

        monkeypatch.setattr(map_service, "get_map_by_slug", broken)

        response = client.get("/api/maps/anything")
        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.json() == {"detail": "Storage failure"}
