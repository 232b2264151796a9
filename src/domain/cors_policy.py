"""CORS policy evaluation.

A ``CorsPolicy`` is built once from static configuration and shared by every
request. For each request it decides which ``Access-Control-*`` headers to
emit, and whether the request is a preflight that must be answered directly
instead of reaching the application.

Nothing here raises for request input: a missing or unexpected header only
ever results in a header being omitted.
"""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from datetime import timedelta
from http import HTTPStatus

from src.domain.exceptions import InvalidCorsPolicyError
from src.domain.origin_matcher import OriginMatcher


# Response headers
HEADER_ALLOW_ORIGIN = "Access-Control-Allow-Origin"
HEADER_ALLOW_CREDENTIALS = "Access-Control-Allow-Credentials"
HEADER_ALLOW_HEADERS = "Access-Control-Allow-Headers"
HEADER_ALLOW_METHODS = "Access-Control-Allow-Methods"
HEADER_EXPOSE_HEADERS = "Access-Control-Expose-Headers"
HEADER_MAX_AGE = "Access-Control-Max-Age"

# Request headers
HEADER_ORIGIN = "Origin"
HEADER_REQUEST_METHOD = "Access-Control-Request-Method"
HEADER_REQUEST_HEADERS = "Access-Control-Request-Headers"

DEFAULT_ALLOW_HEADERS: tuple[str, ...] = ("Origin", "Accept", "Content-Type", "Authorization")

PREFLIGHT_METHOD = "OPTIONS"


@dataclass(frozen=True)
class Continue:
    """Let the request through and merge ``headers`` into its response."""

    headers: dict[str, str]


@dataclass(frozen=True)
class Terminate:
    """Answer the request directly with ``status_code`` and ``headers``."""

    status_code: int
    headers: dict[str, str]


CorsDecision = Continue | Terminate


def _as_string_tuple(name: str, value: Sequence[str]) -> tuple[str, ...]:
    if isinstance(value, str | bytes):
        raise InvalidCorsPolicyError(
            f"{name} must be a sequence of strings, not a single string",
            details={"field": name, "value": value if isinstance(value, str) else repr(value)},
        )
    items = tuple(value)
    bad = [repr(item) for item in items if not isinstance(item, str)]
    if bad:
        raise InvalidCorsPolicyError(
            f"{name} must contain only strings",
            details={"field": name, "invalid_items": bad},
        )
    return items


@dataclass(frozen=True)
class CorsPolicy:
    """Immutable cross-origin access policy.

    Attributes:
        allow_all_origins: Accept every origin without pattern matching
        allow_origins: Glob patterns of accepted origins, in match order
        allow_credentials: Emit ``Access-Control-Allow-Credentials: true``
        allow_methods: Methods advertised in ``Access-Control-Allow-Methods``
        allow_headers: Accepted request headers; empty means
            ``DEFAULT_ALLOW_HEADERS``
        expose_headers: Response headers readable by the client
        max_age: How long a preflight may be cached; zero or negative omits
            the header
    """

    allow_all_origins: bool = False
    allow_origins: Sequence[str] = ()
    allow_credentials: bool = False
    allow_methods: Sequence[str] = ()
    allow_headers: Sequence[str] = ()
    expose_headers: Sequence[str] = ()
    max_age: timedelta = timedelta(0)
    matcher: OriginMatcher = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        for name in ("allow_origins", "allow_methods", "allow_headers", "expose_headers"):
            object.__setattr__(self, name, _as_string_tuple(name, getattr(self, name)))

        empty = [index for index, pattern in enumerate(self.allow_origins) if not pattern]
        if empty:
            raise InvalidCorsPolicyError(
                "allow_origins must not contain empty patterns",
                details={"field": "allow_origins", "indexes": empty},
            )

        if not isinstance(self.max_age, timedelta):
            raise InvalidCorsPolicyError(
                "max_age must be a datetime.timedelta",
                details={"field": "max_age", "value": repr(self.max_age)},
            )

        # Compiled once here; the policy is shared read-only across requests.
        object.__setattr__(self, "matcher", OriginMatcher(self.allow_origins))

    @property
    def effective_allow_headers(self) -> tuple[str, ...]:
        """Configured allow-headers, or the default list when none are set."""
        return tuple(self.allow_headers) or DEFAULT_ALLOW_HEADERS

    def is_origin_allowed(self, origin: str) -> bool:
        """Check ``origin`` against the compiled ``allow_origins`` patterns.

        This does not consult ``allow_all_origins``; callers short-circuit on
        that flag before matching.
        """
        return self.matcher.matches(origin)

    def _permits(self, origin: str) -> bool:
        return self.allow_all_origins or self.is_origin_allowed(origin)

    def _add_shared_headers(self, headers: dict[str, str]) -> None:
        if self.allow_credentials:
            headers[HEADER_ALLOW_CREDENTIALS] = "true"
        if self.expose_headers:
            headers[HEADER_EXPOSE_HEADERS] = ",".join(self.expose_headers)
        if self.max_age > timedelta(0):
            headers[HEADER_MAX_AGE] = str(self.max_age // timedelta(seconds=1))

    def simple_headers(self, origin: str) -> dict[str, str]:
        """Compute CORS headers for an actual (non-preflight) response.

        Args:
            origin: Value of the request's ``Origin`` header, empty if absent

        Returns:
            Headers to merge into the response; empty when the origin is not
            allowed
        """
        headers: dict[str, str] = {}
        if not self._permits(origin):
            return headers

        # A request without Origin is echoed as "*" once the policy allowed it.
        headers[HEADER_ALLOW_ORIGIN] = origin or "*"

        if self.allow_methods:
            headers[HEADER_ALLOW_METHODS] = ",".join(self.allow_methods)

        headers[HEADER_ALLOW_HEADERS] = ",".join(self.effective_allow_headers)

        self._add_shared_headers(headers)
        return headers

    def preflight_headers(
        self, origin: str, requested_method: str, requested_headers: str
    ) -> dict[str, str]:
        """Compute CORS headers for a preflight response.

        ``Access-Control-Allow-Methods`` lists every configured method, but
        only when ``requested_method`` is one of them. Requested headers are
        echoed back in their original casing when they appear, compared
        case-insensitively, in the effective allow list.

        Args:
            origin: Value of the request's ``Origin`` header
            requested_method: Value of ``Access-Control-Request-Method``
            requested_headers: Comma-separated ``Access-Control-Request-Headers``

        Returns:
            Headers for the preflight response; empty when the origin is not
            allowed
        """
        headers: dict[str, str] = {}
        if not self._permits(origin):
            return headers

        if requested_method in self.allow_methods:
            headers[HEADER_ALLOW_METHODS] = ",".join(self.allow_methods)

        accepted = {name.lower() for name in self.effective_allow_headers}
        allowed = [
            token
            for token in (raw.strip() for raw in requested_headers.split(","))
            if token and token.lower() in accepted
        ]
        if allowed:
            headers[HEADER_ALLOW_HEADERS] = ",".join(allowed)

        # An empty Allow-Origin is meaningless to browsers; same fallback as
        # the simple path.
        headers[HEADER_ALLOW_ORIGIN] = origin or "*"

        self._add_shared_headers(headers)
        return headers

    def evaluate(self, method: str, request_headers: Mapping[str, str]) -> CorsDecision:
        """Decide how the hosting pipeline should treat a request.

        An ``OPTIONS`` request carrying ``Access-Control-Request-Method`` or
        ``Access-Control-Request-Headers`` is a preflight and terminates with
        ``200 OK``. Anything else continues to the application with the
        simple-response headers attached.

        Args:
            method: HTTP request method
            request_headers: Request headers; names are compared
                case-insensitively

        Returns:
            ``Terminate`` for preflights, ``Continue`` otherwise
        """
        # First occurrence wins for repeated headers, as with Headers.get
        lowered: dict[str, str] = {}
        for name, value in request_headers.items():
            lowered.setdefault(name.lower(), value)
        origin = lowered.get(HEADER_ORIGIN.lower(), "")
        requested_method = lowered.get(HEADER_REQUEST_METHOD.lower(), "")
        requested_headers = lowered.get(HEADER_REQUEST_HEADERS.lower(), "")

        if method == PREFLIGHT_METHOD and (requested_method or requested_headers):
            return Terminate(
                status_code=HTTPStatus.OK.value,
                headers=self.preflight_headers(origin, requested_method, requested_headers),
            )

        return Continue(headers=self.simple_headers(origin))
