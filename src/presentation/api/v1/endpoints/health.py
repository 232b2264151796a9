"""Health check endpoints for monitoring and orchestration."""

from fastapi import APIRouter, Request, status

from src.presentation.schemas.health import CorsSummary, HealthResponse


router = APIRouter(tags=["health"])


@router.get(
    "/health",
    response_model=HealthResponse,
    status_code=status.HTTP_200_OK,
    summary="Health Check",
    description="""
Check that the service is up and report the CORS policy it enforces.

Use this endpoint for:
- Load balancer health checks
- Verifying a deployment picked up the intended CORS configuration
    """,
)
async def health_check(request: Request) -> HealthResponse:
    """Return service status and a summary of the active CORS policy."""
    settings = request.app.state.settings
    return HealthResponse(
        status="healthy",
        version=settings.app_version,
        environment=settings.app_env,
        cors=CorsSummary.from_policy(request.app.state.cors_policy),
    )


@router.get(
    "/",
    status_code=status.HTTP_200_OK,
    summary="API Root",
)
async def root(request: Request) -> dict[str, str]:
    """Root endpoint providing service information and navigation links."""
    return {
        "message": f"{request.app.title} is running",
        "docs": request.app.docs_url or "",
        "health": request.url_for("health_check").path,
    }
