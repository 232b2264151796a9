"""Error response schemas."""

from typing import Any

from pydantic import BaseModel, Field


class ErrorDetail(BaseModel):
    """Error detail schema."""

    code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error message")
    details: Any | None = Field(None, description="Additional error details")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "code": "INVALID_CORS_POLICY",
                    "message": "allow_origins must not contain empty patterns",
                    "details": {"field": "allow_origins", "indexes": [1]},
                },
                {
                    "code": "INTERNAL_SERVER_ERROR",
                    "message": "An unexpected error occurred",
                    "details": None,
                },
            ]
        }
    }


class ErrorResponse(BaseModel):
    """Standard error response schema."""

    error: ErrorDetail = Field(..., description="Error information")
