"""Application configuration using Pydantic Settings.

Environment variables are loaded from .env files and system environment.
Validator thresholds are configurable here so that deployments can tune
the heuristics without code changes.
"""

from functools import lru_cache
from typing import Any

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings.

    All settings can be overridden via environment variables.
    Environment variables take precedence over .env file values.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Application
    PROJECT_NAME: str = "Flowcheck Workflow Validator"
    DEBUG: bool = False
    API_V1_PREFIX: str = "/api/v1"

    # CORS
    ALLOWED_ORIGINS: list[str] = ["http://localhost:3000"]

    @field_validator("ALLOWED_ORIGINS", mode="before")
    @classmethod
    def parse_allowed_origins(cls, v: Any) -> list[str]:
        """Parse ALLOWED_ORIGINS from comma-separated string or list."""
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        if isinstance(v, list):
            return v
        return ["http://localhost:3000"]

    # Request limits (graphs above these are rejected before validation)
    MAX_GRAPH_NODES: int = 500
    MAX_GRAPH_EDGES: int = 2000

    # Validator thresholds
    MAX_START_NODES: int = 3
    LARGE_WORKFLOW_NODES: int = 50
    MAX_PATH_DEPTH: int = 20
    SUBWORKFLOW_SUGGESTION_NODES: int = 10
    MINUTES_PER_NODE: int = 2

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FILE: str | None = None  # Console only when unset
    LOG_JSON_FORMAT: bool = True


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Settings are cached after first load for performance.
    """
    return Settings()


# Global settings instance
settings = get_settings()
