# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Integration tests for Users API endpoints."""

import asyncio
from unittest.mock import AsyncMock
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient

from src.api.app import create_app
from src.api.dependencies import get_user_service
from src.core.config import (
    APISettings,
    DatabaseSettings,
    PaginationSettings,
    RateLimitSettings,
    SecuritySettings,
    Settings,
)
from src.domains.auth.password import PasswordHasher
from src.domains.user.errors import ErrorKind, PasswordHashingError, UserAlreadyExistsError
from src.domains.user.repository import UserRepository
from src.domains.user.service import UserService

pytestmark = pytest.mark.integration

USERS_URL = "/api/v1/users"


@pytest.fixture
def settings():
    """Create settings for an in-memory application."""
    return Settings(
        environment="development",
        debug=False,
        log_level="WARNING",
        database=DatabaseSettings(backend="memory"),
        security=SecuritySettings(bcrypt_rounds=4),
        pagination=PaginationSettings(default_limit=10, max_limit=100),
        rate_limit=RateLimitSettings(enabled=False),
    )


@pytest.fixture
def app(settings):
    """Create test FastAPI app."""
    return create_app(settings)


@pytest.fixture
def client(app):
    """Create test client with the application lifespan running."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def created_user(client, sample_user_data):
    """Create a user through the API."""
    response = client.post(USERS_URL, json=sample_user_data)
    assert response.status_code == 201
    return response.json()


class TestUsersAPIRouting:
    """Tests for users API routing."""

    def test_routes_registered(self, app):
        """Test that user routes are registered."""
        routes = [route.path for route in app.routes]

        assert "/api/v1/users" in routes
        assert "/api/v1/users/by-email" in routes
        assert "/api/v1/users/authenticate" in routes
        assert "/api/v1/users/{user_id}" in routes
        assert "/healthz" in routes
        assert "/readyz" in routes


class TestCreateUserEndpoint:
    """Tests for POST /api/v1/users."""

    def test_create_user_success(self, client, sample_user_data):
        """Test successful creation returns the public projection."""
        response = client.post(USERS_URL, json=sample_user_data)

        assert response.status_code == 201
        body = response.json()
        assert body["email"] == sample_user_data["email"]
        assert body["name"] == sample_user_data["name"]
        assert body["created_at"] == body["updated_at"]
        assert "id" in body
        assert "password" not in body

    def test_create_user_duplicate_email(self, client, created_user, sample_user_data):
        """Test that a second registration returns 409."""
        response = client.post(USERS_URL, json=sample_user_data)

        assert response.status_code == 409
        assert response.json()["code"] == "E010"

    def test_create_user_invalid_email(self, client, sample_user_data):
        """Test that a malformed email returns 400."""
        response = client.post(USERS_URL, json={**sample_user_data, "email": "invalid"})

        assert response.status_code == 400
        body = response.json()
        assert body["code"] == "E001"
        assert body["error"] == "Invalid email address"

    def test_create_user_short_password(self, client, sample_user_data):
        """Test that a short password returns 400 with E003."""
        response = client.post(USERS_URL, json={**sample_user_data, "password": "short"})

        assert response.status_code == 400
        assert response.json()["code"] == "E003"

    def test_create_user_missing_field(self, client):
        """Test that a missing body field fails validation."""
        response = client.post(USERS_URL, json={"email": "a@example.com", "name": "Alice"})

        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "Validation failed"
        assert "password" in body["details"]


class TestGetUserEndpoints:
    """Tests for GET endpoints."""

    def test_get_user_by_id(self, client, created_user):
        """Test lookup by id."""
        response = client.get(f"{USERS_URL}/{created_user['id']}")

        assert response.status_code == 200
        assert response.json() == created_user

    def test_get_user_bad_uuid(self, client):
        """Test that a malformed id returns 400."""
        response = client.get(f"{USERS_URL}/not-a-uuid")

        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "Invalid user ID format"
        assert body["code"] == "E004"

    def test_get_user_not_found(self, client):
        """Test that an unknown id returns 404."""
        response = client.get(f"{USERS_URL}/{uuid4()}")

        assert response.status_code == 404
        assert response.json() == {"error": "User not found", "code": "E008"}

    def test_get_user_by_email(self, client, created_user):
        """Test lookup by email."""
        response = client.get(f"{USERS_URL}/by-email", params={"email": created_user["email"]})

        assert response.status_code == 200
        assert response.json()["id"] == created_user["id"]

    def test_get_user_by_email_malformed(self, client):
        """Test that a malformed email returns 400 instead of a lookup miss."""
        response = client.get(f"{USERS_URL}/by-email", params={"email": "not-an-email"})

        assert response.status_code == 400
        body = response.json()
        assert body["code"] == "E001"
        assert body["error"] == "Invalid email address"

    def test_get_user_by_email_missing_parameter(self, client):
        """Test that an absent email returns 400."""
        response = client.get(f"{USERS_URL}/by-email")

        assert response.status_code == 400
        assert response.json()["code"] == "E001"


class TestListUsersEndpoint:
    """Tests for GET /api/v1/users."""

    @pytest.fixture
    def three_users(self, client):
        """Create three users."""
        ids = []
        for i in range(3):
            response = client.post(
                USERS_URL,
                json={
                    "email": f"user{i}@example.com",
                    "name": f"User {i:03d}",
                    "password": "password-123",
                },
            )
            ids.append(response.json()["id"])
        return ids

    def test_list_users_defaults(self, client, three_users):
        """Test default pagination and newest-first order."""
        response = client.get(USERS_URL)

        assert response.status_code == 200
        body = response.json()
        assert body["limit"] == 10
        assert body["offset"] == 0
        assert body["total_count"] == 3
        assert [u["id"] for u in body["users"]] == list(reversed(three_users))

    @pytest.mark.parametrize(
        ("params", "expected_limit", "expected_offset"),
        [
            ({"limit": "1000"}, 10, 0),
            ({"limit": "0"}, 10, 0),
            ({"limit": "abc"}, 10, 0),
            ({"limit": "2", "offset": "-5"}, 2, 0),
            ({"limit": "100", "offset": "x"}, 100, 0),
        ],
    )
    def test_list_users_clamps_pagination(self, client, params, expected_limit, expected_offset):
        """Test that out-of-range values fall back to defaults."""
        response = client.get(USERS_URL, params=params)

        assert response.status_code == 200
        body = response.json()
        assert body["limit"] == expected_limit
        assert body["offset"] == expected_offset

    def test_list_users_page(self, client, three_users):
        """Test that limit and offset select a page."""
        response = client.get(USERS_URL, params={"limit": 2, "offset": 2})

        body = response.json()
        assert body["total_count"] == 1
        assert body["users"][0]["id"] == three_users[0]


class TestUpdateUserEndpoint:
    """Tests for PUT /api/v1/users/{user_id}."""

    def test_update_user_success(self, client, created_user):
        """Test updating the name."""
        response = client.put(f"{USERS_URL}/{created_user['id']}", json={"name": "Janet Doe"})

        assert response.status_code == 200
        assert response.json() == {"message": "User updated successfully"}
        fetched = client.get(f"{USERS_URL}/{created_user['id']}").json()
        assert fetched["name"] == "Janet Doe"

    def test_update_user_no_fields(self, client, created_user):
        """Test that an empty update returns 400 with E007."""
        response = client.put(f"{USERS_URL}/{created_user['id']}", json={})

        assert response.status_code == 400
        assert response.json()["code"] == "E007"

    def test_update_user_not_found(self, client):
        """Test that updating an unknown user returns 404."""
        response = client.put(f"{USERS_URL}/{uuid4()}", json={"name": "Janet Doe"})

        assert response.status_code == 404


class TestDeleteUserEndpoint:
    """Tests for DELETE /api/v1/users/{user_id}."""

    def test_delete_user_is_idempotent(self, client, created_user):
        """Test that deleting twice returns 204 both times."""
        url = f"{USERS_URL}/{created_user['id']}"

        first = client.delete(url)
        second = client.delete(url)

        assert first.status_code == 204
        assert second.status_code == 204
        assert client.get(url).status_code == 404


class TestAuthenticateEndpoint:
    """Tests for POST /api/v1/users/authenticate."""

    def test_authenticate_success(self, client, created_user, sample_user_data):
        """Test that correct credentials return 200."""
        response = client.post(
            f"{USERS_URL}/authenticate",
            json={"email": sample_user_data["email"], "password": sample_user_data["password"]},
        )

        assert response.status_code == 200
        assert response.json() == {"message": "Authentication successful"}

    def test_authenticate_wrong_password(self, client, created_user, sample_user_data):
        """Test that a wrong password returns 401."""
        response = client.post(
            f"{USERS_URL}/authenticate",
            json={"email": sample_user_data["email"], "password": "wrong-password"},
        )

        assert response.status_code == 401
        assert response.json()["code"] == "E014"

    def test_authenticate_unknown_email(self, client):
        """Test that an unknown email returns 404."""
        response = client.post(
            f"{USERS_URL}/authenticate",
            json={"email": "nobody@example.com", "password": "password-123"},
        )

        assert response.status_code == 404


class TestRequestContext:
    """Tests for request id propagation."""

    def test_request_id_echoed(self, client):
        """Test that a supplied X-Request-ID is returned."""
        response = client.get("/healthz", headers={"X-Request-ID": "req-123"})

        assert response.headers["X-Request-ID"] == "req-123"

    def test_request_id_generated(self, client):
        """Test that a request id is generated when absent."""
        response = client.get("/healthz")

        assert response.headers["X-Request-ID"]


class TestRateLimiting:
    """Tests for the global rate limit."""

    def test_requests_over_limit_rejected(self, settings):
        """Test that the limit returns 429 once exceeded."""
        settings.rate_limit = RateLimitSettings(enabled=True, requests_per_minute=2)
        app = create_app(settings)

        with TestClient(app) as client:
            statuses = [client.get("/healthz").status_code for _ in range(3)]

        assert statuses == [200, 200, 429]


class TestServiceOverride:
    """Tests using a mocked service through dependency overrides."""

    def test_hashing_failure_returns_500(self, app, sample_user_data):
        """Test that a hashing failure hides details behind a 500."""
        service = AsyncMock(spec=UserService)
        service.create_user.side_effect = PasswordHashingError(detail="bcrypt exploded")
        app.dependency_overrides[get_user_service] = lambda: service

        with TestClient(app) as client:
            response = client.post(USERS_URL, json=sample_user_data)

        assert response.status_code == 500
        assert response.json() == {"error": "Internal server error", "code": "E015"}

    def test_duplicate_email_from_storage_returns_409(self, app, sample_user_data):
        """Test that a storage-level duplicate maps to 409."""
        service = AsyncMock(spec=UserService)
        service.create_user.side_effect = UserAlreadyExistsError(ErrorKind.DUPLICATE_EMAIL)
        app.dependency_overrides[get_user_service] = lambda: service

        with TestClient(app) as client:
            response = client.post(USERS_URL, json=sample_user_data)

        assert response.status_code == 409
        assert response.json() == {"error": "Email already exists", "code": "E012"}


class TestRequestTimeout:
    """Tests for the per-request timeout."""

    def test_slow_request_times_out_without_writing(self, settings, sample_user_data):
        """Test that an expired request answers 504 and stops before storing."""
        settings.api = APISettings(request_timeout=0.1)
        app = create_app(settings)

        async def slow_lookup(email):
            await asyncio.sleep(5)

        repository = AsyncMock(spec=UserRepository)
        repository.get_by_email.side_effect = slow_lookup
        service = UserService(repository=repository, hasher=PasswordHasher(rounds=4))
        app.dependency_overrides[get_user_service] = lambda: service

        with TestClient(app) as client:
            response = client.post(
                USERS_URL,
                json=sample_user_data,
                headers={"X-Request-ID": "req-timeout"},
            )

        assert response.status_code == 504
        assert response.json() == {"error": "Request timed out"}
        assert response.headers["X-Request-ID"] == "req-timeout"
        repository.get_by_email.assert_awaited_once()
        repository.create.assert_not_awaited()

    def test_fast_request_unaffected(self, settings):
        """Test that requests within the timeout complete normally."""
        settings.api = APISettings(request_timeout=5.0)
        app = create_app(settings)

        with TestClient(app) as client:
            response = client.get("/healthz")

        assert response.status_code == 200
        assert response.text == "OK"
