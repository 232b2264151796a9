"""API schemas."""

from src.presentation.schemas.error import ErrorDetail, ErrorResponse
from src.presentation.schemas.health import CorsSummary, HealthResponse


__all__ = [
    "CorsSummary",
    "ErrorDetail",
    "ErrorResponse",
    "HealthResponse",
]
