"""FastAPI application factory and configuration."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from src.infrastructure.config import Settings, get_settings
from src.infrastructure.logging.config import configure_logging, get_logger
from src.presentation.api.middleware.cors import setup_cors
from src.presentation.api.middleware.error_handling import setup_exception_handlers
from src.presentation.api.v1 import api_router


logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Application lifespan events."""
    logger.info("application_startup", app_name=app.title, version=app.version)
    yield
    logger.info("application_shutdown")


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Settings to use instead of the cached environment settings

    Returns:
        Configured FastAPI application instance
    """
    settings = settings or get_settings()

    configure_logging(settings)

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="""
# CORS Gate

HTTP service front that enforces a single, static Cross-Origin Resource
Sharing policy.

- **Origin patterns**: glob syntax (`*`, `?`), always matched against the whole origin
- **Preflight handling**: `OPTIONS` preflights are answered directly with `200 OK`
- **Simple responses**: `Access-Control-*` headers merged into every allowed response
        """,
        lifespan=lifespan,
    )

    app.state.settings = settings

    setup_exception_handlers(app)

    # Added last so it wraps everything and sees each request first
    app.state.cors_policy = setup_cors(app, settings)

    app.include_router(api_router, prefix=settings.api_v1_prefix)

    return app
