"""Integration tests for global exception handlers."""

import pytest
from fastapi import FastAPI, status
from fastapi.testclient import TestClient

from src.domain.cors_policy import CorsPolicy
from src.presentation.api.middleware.error_handling import setup_exception_handlers


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def error_client() -> TestClient:
    """Create an app whose routes fail in different ways."""
    app = FastAPI()
    setup_exception_handlers(app)

    @app.get("/invalid-policy")
    async def invalid_policy() -> dict[str, str]:
        CorsPolicy(allow_origins=[""])
        return {"message": "unreachable"}

    @app.get("/boom")
    async def boom() -> dict[str, str]:
        raise RuntimeError("database password is hunter2")

    @app.get("/items/{item_id}")
    async def get_item(item_id: int) -> dict[str, int]:
        return {"item_id": item_id}

    return TestClient(app, raise_server_exceptions=False)


# ============================================================================
# Test Classes
# ============================================================================


class TestDomainExceptionHandler:
    """Test DomainException mapping."""

    def test_invalid_policy_maps_to_400(self, error_client: TestClient) -> None:
        """Test policy errors become 400 with code and details.

        Arrange: Route constructing an invalid policy
        Act: GET /invalid-policy
        Assert: 400 with INVALID_CORS_POLICY error body
        """
        # Act
        response = error_client.get("/invalid-policy")

        # Assert
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        error = response.json()["error"]
        assert error["code"] == "INVALID_CORS_POLICY"
        assert error["details"] == {"field": "allow_origins", "indexes": [0]}


class TestValidationExceptionHandler:
    """Test request validation mapping."""

    def test_bad_path_parameter_maps_to_422(self, error_client: TestClient) -> None:
        """Test validation failures use the shared error shape."""
        # Act
        response = error_client.get("/items/not-a-number")

        # Assert
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_CONTENT
        error = response.json()["error"]
        assert error["code"] == "VALIDATION_ERROR"
        assert error["details"][0]["loc"] == ["path", "item_id"]


class TestGenericExceptionHandler:
    """Test catch-all mapping."""

    def test_unexpected_error_maps_to_500(self, error_client: TestClient) -> None:
        """Test internals are not leaked to the client."""
        # Act
        response = error_client.get("/boom")

        # Assert
        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        error = response.json()["error"]
        assert error["code"] == "INTERNAL_SERVER_ERROR"
        assert "hunter2" not in response.text
