"""Global test configuration and fixtures.

Fixture Scoping Strategy:
- session: test settings (immutable)
- function: app instance and clients (fresh middleware stack per test)
"""

from collections.abc import Callable
from datetime import timedelta

import pytest
from fastapi import FastAPI, Response
from fastapi.testclient import TestClient

from src.domain.cors_policy import CorsPolicy
from src.infrastructure.config import Settings, get_settings
from src.presentation.api import create_app
from src.presentation.api.middleware.cors import CorsPolicyMiddleware


# ============================================================================
# Session-Scoped Fixtures
# ============================================================================


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    """Create test settings (session-scoped, settings are immutable).

    Returns:
        Settings with a small, explicit CORS policy
    """
    return Settings(
        app_env="testing",
        app_name="CORS Gate Test",
        log_level="DEBUG",
        cors_allow_all_origins=False,
        cors_allow_origins=["https://app.example.com", "https://*.example.org"],
        cors_allow_credentials=True,
        cors_allow_methods=["GET", "POST"],
        cors_allow_headers=["Content-Type", "Authorization", "X-Request-ID"],
        cors_expose_headers=["X-Request-ID"],
        cors_max_age=600,
    )


# ============================================================================
# Function-Scoped Fixtures
# ============================================================================


@pytest.fixture(autouse=True)
def clear_settings_cache() -> None:
    """Reset the cached settings so environment tweaks never leak."""
    get_settings.cache_clear()


@pytest.fixture
def app(test_settings: Settings) -> FastAPI:
    """Create the full application with test settings."""
    return create_app(test_settings)


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    """Create a test client for the full application."""
    return TestClient(app)


@pytest.fixture
def make_cors_client() -> Callable[..., TestClient]:
    """Factory building a bare app guarded only by ``CorsPolicyMiddleware``.

    The app exposes ``/foo`` for GET, PUT and OPTIONS. Its OPTIONS handler
    answers 500 so tests can tell whether a preflight reached it.

    Example:
        >>> client = make_cors_client(allow_all_origins=True)
        >>> client.put("/foo").headers["access-control-allow-origin"]
        '*'
    """

    def _make(**policy_kwargs: object) -> TestClient:
        policy = CorsPolicy(**policy_kwargs)  # type: ignore[arg-type]
        bare_app = FastAPI()
        bare_app.add_middleware(CorsPolicyMiddleware, policy=policy)

        @bare_app.get("/foo")
        async def get_foo() -> dict[str, str]:
            return {"message": "foo"}

        @bare_app.put("/foo")
        async def put_foo() -> dict[str, str]:
            return {"message": "foo"}

        @bare_app.options("/foo")
        async def options_foo() -> Response:
            return Response(status_code=500)

        @bare_app.get("/custom-header")
        async def custom_header() -> Response:
            return Response(
                content="ok",
                headers={"Access-Control-Allow-Origin": "https://handler.example"},
            )

        return TestClient(bare_app)

    return _make


@pytest.fixture
def five_minutes() -> timedelta:
    """Max-age used by the header scenarios."""
    return timedelta(minutes=5)
