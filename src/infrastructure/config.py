"""Application configuration with environment variable support."""

import json
from datetime import timedelta
from functools import lru_cache
from typing import Annotated, Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from src.domain.cors_policy import CorsPolicy


LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")

# Comma-separated or JSON list in the environment, parsed by _parse_list
StringList = Annotated[list[str], NoDecode]


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # Application
    app_name: str = Field(default="cors-gate", alias="APP_NAME")
    app_version: str = Field(default="0.1.0", alias="APP_VERSION")
    app_env: str = Field(default="development", alias="APP_ENV")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Server
    host: str = Field(default="0.0.0.0", alias="HOST")
    port: int = Field(default=8000, alias="PORT")
    workers: int = Field(default=1, alias="WORKERS")
    reload: bool = Field(default=False, alias="RELOAD")

    # API
    api_v1_prefix: str = Field(default="/api/v1", alias="API_V1_PREFIX")

    # CORS
    cors_allow_all_origins: bool = Field(default=False, alias="CORS_ALLOW_ALL_ORIGINS")
    cors_allow_origins: StringList = Field(
        default_factory=list,
        alias="CORS_ALLOW_ORIGINS",
        description="Glob patterns of accepted origins, e.g. https://*.example.com",
    )
    cors_allow_credentials: bool = Field(default=False, alias="CORS_ALLOW_CREDENTIALS")
    cors_allow_methods: StringList = Field(default_factory=list, alias="CORS_ALLOW_METHODS")
    cors_allow_headers: StringList = Field(
        default_factory=list,
        alias="CORS_ALLOW_HEADERS",
        description="Empty means Origin, Accept, Content-Type, Authorization",
    )
    cors_expose_headers: StringList = Field(default_factory=list, alias="CORS_EXPOSE_HEADERS")
    cors_max_age: int = Field(
        default=0,
        alias="CORS_MAX_AGE",
        description="Preflight cache lifetime in seconds; 0 or less omits the header",
    )

    @field_validator(
        "cors_allow_origins",
        "cors_allow_methods",
        "cors_allow_headers",
        "cors_expose_headers",
        mode="before",
    )
    @classmethod
    def _parse_list(cls, v: Any) -> Any:
        """Parse a list from a JSON array or a comma-separated string.

        Items are stripped and empty items dropped, so ``"GET,,POST "``
        becomes ``["GET", "POST"]``.
        """
        if isinstance(v, str):
            stripped = v.strip()
            if stripped.startswith("["):
                v = json.loads(stripped)
            else:
                v = stripped.split(",")
        if isinstance(v, list | tuple):
            items = [item.strip() if isinstance(item, str) else item for item in v]
            return [item for item in items if item != ""]
        return v

    @field_validator("cors_allow_origins")
    @classmethod
    def validate_cors_origins_https(cls, v: list[str], info: Any) -> list[str]:
        """Validate CORS origin patterns use HTTPS in production."""
        app_env = info.data.get("app_env", "development")
        if app_env.lower() == "production":
            for origin in v:
                if not origin.startswith("https://") and not origin.startswith("http://localhost"):
                    raise ValueError(
                        f"Production CORS origins must use HTTPS: {origin}. "
                        f"Only localhost is allowed with http:// for testing."
                    )
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is a standard logging level name."""
        level = v.strip().upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"LOG_LEVEL must be one of {list(LOG_LEVELS)}, got {v!r}")
        return level

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.app_env.lower() == "development"


def build_cors_policy(settings: Settings) -> CorsPolicy:
    """Build the process-wide CORS policy from settings."""
    return CorsPolicy(
        allow_all_origins=settings.cors_allow_all_origins,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
        expose_headers=settings.cors_expose_headers,
        max_age=timedelta(seconds=settings.cors_max_age),
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
