# mypy: ignore-errors
# tests/v1/test_auth.py
"""Tests for authentication and profile endpoints."""

from fastapi import status
from fastapi.testclient import TestClient

from tests.conftest import auth_headers_for


def test_me_creates_profile_on_first_sign_in(client: TestClient) -> None:
    """A valid token for an unknown subject creates the profile."""
    headers = auth_headers_for(
        "fresh-subject-42",
        email="fresh@example.com",
        metadata={"full_name": "Fresh Face"},
    )
    response = client.get("/api/auth/me", headers=headers)

    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["is_new_user"] is True
    assert data["user"]["id"] == "fresh-subject-42"
    assert data["user"]["first_name"] == "Fresh"
    assert data["user"]["last_name"] == "Face"

    again = client.get("/api/auth/me", headers=headers)
    assert again.json()["is_new_user"] is False


def test_me_existing_user(client: TestClient, test_user, auth_token) -> None:
    response = client.get("/api/auth/me", headers=auth_token)
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["user"]["first_name"] == test_user.first_name
    assert response.json()["is_new_user"] is False


def test_me_requires_token(client: TestClient) -> None:
    response = client.get("/api/auth/me")
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_me_rejects_garbage_token(client: TestClient) -> None:
    response = client.get("/api/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_me_rejects_expired_token(client: TestClient, expired_token) -> None:
    response = client.get("/api/auth/me", headers=expired_token)
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_update_profile(client: TestClient, auth_token) -> None:
    response = client.patch(
        "/api/users/me",
        json={"firstName": "Olivia", "city": "Mysore"},
        headers=auth_token,
    )
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["first_name"] == "Olivia"
    assert data["city"] == "Mysore"
    assert data["last_name"] == "Tester"


def test_update_profile_empty_body(client: TestClient, auth_token) -> None:
    response = client.patch("/api/users/me", json={}, headers=auth_token)
    assert response.status_code == status.HTTP_400_BAD_REQUEST
