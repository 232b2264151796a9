"""Domain-specific exceptions.

The CORS evaluator itself never raises for request input; these exceptions
cover invalid policy construction, which is a startup-time programming or
configuration mistake.
"""

from typing import Any


class DomainException(Exception):
    """Base exception for all domain-related errors.

    Attributes:
        code: Machine-readable error code
        message: Human-readable error message
        details: Optional additional error context (dict or list)
    """

    code: str = "DOMAIN_ERROR"

    def __init__(self, message: str, details: dict[str, Any] | list[Any] | None = None) -> None:
        """Initialize domain exception.

        Args:
            message: Human-readable error description
            details: Optional additional context about the error
        """
        self.message = message
        self.details = details
        super().__init__(self.message)


class InvalidCorsPolicyError(DomainException):
    """Raised when a CORS policy is built from malformed values.

    Examples are a bare string where a sequence of strings is expected,
    a non-string item, or an empty origin pattern.
    """

    code = "INVALID_CORS_POLICY"
