"""CORS (Cross-Origin Resource Sharing) middleware.

Runs the process-wide ``CorsPolicy`` ahead of every route. Preflight
requests are answered here and never reach the application; every other
request continues downstream and gets the policy's headers merged into its
response.
"""

from collections.abc import Awaitable, Callable

from fastapi import FastAPI, Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from src.domain.cors_policy import HEADER_ALLOW_ORIGIN, CorsPolicy, Terminate
from src.infrastructure.config import Settings, build_cors_policy
from src.infrastructure.logging.config import get_logger
from src.presentation.api.middleware.error_handling import generic_exception_handler


logger = get_logger(__name__)


class CorsPolicyMiddleware(BaseHTTPMiddleware):
    """Apply a ``CorsPolicy`` decision to each request.

    The policy is immutable and compiled once, so one middleware instance
    serves concurrent requests without locking.
    """

    def __init__(self, app: ASGIApp, policy: CorsPolicy) -> None:
        super().__init__(app)
        self.policy = policy

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        """Answer preflights directly, decorate everything else."""
        decision = self.policy.evaluate(request.method, request.headers)

        logger.debug(
            "cors_request_evaluated",
            method=request.method,
            path=request.url.path,
            decision=type(decision).__name__.lower(),
            header_count=len(decision.headers),
        )

        origin = request.headers.get("origin", "")
        if origin and HEADER_ALLOW_ORIGIN not in decision.headers:
            logger.debug("cors_origin_rejected", origin=origin)

        if isinstance(decision, Terminate):
            logger.debug(
                "cors_preflight_handled",
                origin=origin,
                requested_method=request.headers.get("access-control-request-method", ""),
                allowed=HEADER_ALLOW_ORIGIN in decision.headers,
            )
            return Response(status_code=decision.status_code, headers=decision.headers)

        try:
            response = await call_next(request)
        except Exception as exc:
            # 500 responses carry the policy headers as well
            response = await generic_exception_handler(request, exc)
        for name, value in decision.headers.items():
            response.headers[name] = value
        return response


def setup_cors(app: FastAPI, settings: Settings) -> CorsPolicy:
    """Build the CORS policy from settings and install the middleware.

    Returns:
        The installed policy
    """
    policy = build_cors_policy(settings)
    app.add_middleware(CorsPolicyMiddleware, policy=policy)

    logger.info(
        "cors_policy_loaded",
        allow_all_origins=policy.allow_all_origins,
        origin_patterns=len(policy.matcher),
        allow_credentials=policy.allow_credentials,
        max_age=int(policy.max_age.total_seconds()),
    )
    return policy
