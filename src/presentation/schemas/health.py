"""Health check schemas."""

from pydantic import BaseModel, Field

from src.domain.cors_policy import CorsPolicy


class CorsSummary(BaseModel):
    """Non-sensitive overview of the active CORS policy."""

    allow_all_origins: bool
    origin_patterns: int = Field(..., description="Number of configured origin patterns")
    allow_credentials: bool
    max_age: int = Field(..., description="Preflight cache lifetime in seconds")

    @classmethod
    def from_policy(cls, policy: CorsPolicy) -> "CorsSummary":
        return cls(
            allow_all_origins=policy.allow_all_origins,
            origin_patterns=len(policy.matcher),
            allow_credentials=policy.allow_credentials,
            max_age=max(int(policy.max_age.total_seconds()), 0),
        )


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    version: str
    environment: str
    cors: CorsSummary

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "status": "healthy",
                    "version": "0.1.0",
                    "environment": "production",
                    "cors": {
                        "allow_all_origins": False,
                        "origin_patterns": 2,
                        "allow_credentials": True,
                        "max_age": 600,
                    },
                }
            ]
        }
    }
