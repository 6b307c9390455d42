"""
Unit tests for API v1 routes.

Tests endpoint responses with mocked or in-memory dependencies.
"""

from unittest.mock import MagicMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from src.adapters.hashing.bcrypt_hasher import BcryptPasswordHasher
from src.adapters.repository.memory import InMemoryUserStore
from src.api.dependencies import get_registration_service
from src.api.v1.routes import router
from src.domain.models import ErrorBody, RegistrationResult, RegistrationState, User
from src.domain.registration import RegistrationService
from tests.factories import valid_record


@pytest.fixture
def store(hasher: BcryptPasswordHasher) -> InMemoryUserStore:
    return InMemoryUserStore(hasher)


@pytest.fixture
def app(store: InMemoryUserStore) -> FastAPI:
    """Create test FastAPI application."""
    test_app = FastAPI()
    test_app.include_router(router, prefix="/v1")
    test_app.state.user_store = store
    return test_app


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    """Create test client for the application."""
    with TestClient(app) as test_client:
        yield test_client


class TestRegisterSuccess:
    """Tests for successful POST /v1/register."""

    def test_register_returns_201(self, client: TestClient, store: InMemoryUserStore) -> None:
        response = client.post("/v1/register", json=valid_record())

        assert response.status_code == 201
        assert response.json() == {
            "message": "You have successfully registered. You can login now.",
            "username": "alice",
            "role": "user",
        }
        assert store.get("alice") is not None

    def test_response_never_contains_hash(self, client: TestClient) -> None:
        response = client.post("/v1/register", json=valid_record())
        body = response.text
        assert "password" not in body
        assert "$2" not in body

    def test_form_encoded_body(self, client: TestClient, store: InMemoryUserStore) -> None:
        response = client.post("/v1/register", data=valid_record())

        assert response.status_code == 201
        assert store.get("alice").role == "user"


class TestRegisterValidationErrors:
    """Field validation failures return 422 with a structured body."""

    def test_missing_field(self, client: TestClient) -> None:
        response = client.post("/v1/register", json={"username": "bob", "password": "secret1!"})

        assert response.status_code == 422
        assert response.json() == {
            "code": 422,
            "reason": "ValidationError",
            "message": "Missing field",
            "location": "role",
        }

    def test_wrong_type(self, client: TestClient) -> None:
        response = client.post("/v1/register", json=valid_record(password=12345678))

        assert response.status_code == 422
        assert response.json()["message"] == "Incorrect field type: expected string"
        assert response.json()["location"] == "password"

    def test_untrimmed_username(self, client: TestClient) -> None:
        response = client.post("/v1/register", json=valid_record(username="  bob"))

        assert response.status_code == 422
        assert response.json()["location"] == "username"

    def test_password_too_long(self, client: TestClient) -> None:
        response = client.post("/v1/register", json=valid_record(password="x" * 73))

        assert response.status_code == 422
        assert response.json()["message"] == "Must be at most 72 characters long"

    def test_empty_body_is_missing_username(self, client: TestClient) -> None:
        response = client.post("/v1/register", content=b"")

        assert response.status_code == 422
        assert response.json()["location"] == "username"

    def test_json_array_body_is_missing_username(self, client: TestClient) -> None:
        response = client.post("/v1/register", json=["username", "password", "role"])

        assert response.status_code == 422
        assert response.json()["location"] == "username"

    def test_repeated_form_key_is_type_mismatch(
        self, client: TestClient, store: InMemoryUserStore
    ) -> None:
        """username=a&username=b must not silently register as "b"."""
        response = client.post(
            "/v1/register",
            content=b"username=a&username=b&password=goodpassw&role=user",
            headers={"Content-Type": "application/x-www-form-urlencoded"},
        )

        assert response.status_code == 422
        assert response.json() == {
            "code": 422,
            "reason": "ValidationError",
            "message": "Incorrect field type: expected string",
            "location": "username",
        }
        assert len(store) == 0

    def test_unsupported_content_type_is_missing_username(self, client: TestClient) -> None:
        response = client.post(
            "/v1/register",
            content=b"hello",
            headers={"Content-Type": "text/plain"},
        )

        assert response.status_code == 422
        assert response.json()["message"] == "Missing field"
        assert response.json()["location"] == "username"

    def test_json_suffix_content_type_parsed(self, client: TestClient) -> None:
        response = client.post(
            "/v1/register",
            content=b'{"username": "alice", "password": "goodpassw", "role": "user"}',
            headers={"Content-Type": "application/vnd.api+json; charset=utf-8"},
        )

        assert response.status_code == 201

    def test_malformed_json_returns_400(self, client: TestClient) -> None:
        response = client.post(
            "/v1/register",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json() == {"detail": "Malformed request body"}


class TestRegisterDuplicate:
    """Duplicate usernames return exactly one 422 response."""

    def test_duplicate_returns_422(self, client: TestClient) -> None:
        first = client.post("/v1/register", json=valid_record())
        second = client.post("/v1/register", json=valid_record(password="another1"))

        assert first.status_code == 201
        assert second.status_code == 422
        assert second.json() == {
            "code": 422,
            "reason": "ValidationError",
            "message": "Username already taken",
            "location": "username",
        }


class TestRegisterWithMockedService:
    """Route behavior with the domain service mocked."""

    def test_internal_error_returns_generic_500(self, app: FastAPI) -> None:
        mock_service = MagicMock(spec=RegistrationService)
        mock_service.register.return_value = RegistrationResult.rejected(
            ErrorBody(500, "InternalError", "Internal server error"),
            after=RegistrationState.PASSWORD_HASHED,
        )
        app.dependency_overrides[get_registration_service] = lambda: mock_service

        try:
            with TestClient(app) as client:
                response = client.post("/v1/register", json=valid_record())

            assert response.status_code == 500
            assert response.json() == {
                "code": 500,
                "reason": "InternalError",
                "message": "Internal server error",
            }
        finally:
            app.dependency_overrides.clear()

    def test_raw_record_passed_to_service(self, app: FastAPI) -> None:
        mock_service = MagicMock(spec=RegistrationService)
        mock_service.register.return_value = RegistrationResult.persisted(
            User(username="bob", password_hash="h", role="admin")
        )
        app.dependency_overrides[get_registration_service] = lambda: mock_service

        try:
            with TestClient(app) as client:
                response = client.post(
                    "/v1/register",
                    json={"username": "bob", "password": "secret1!", "role": "admin", "x": 1},
                )

            assert response.status_code == 201
            mock_service.register.assert_awaited_once_with(
                {"username": "bob", "password": "secret1!", "role": "admin", "x": 1}
            )
        finally:
            app.dependency_overrides.clear()
