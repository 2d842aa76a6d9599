"""
Centralized settings management using pydantic-settings.

All environment variables and configuration values are defined here.
Use get_settings() to access the singleton settings instance.
"""

from functools import lru_cache
from pathlib import Path
from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Every value has a default, so the service starts with no environment
    at all. Commonly set:
        - CATALOG_PATH: JSON catalog file loaded at startup
        - ENVIRONMENT: Environment name (development, staging, production)
        - SCORING_WORKERS: Thread pool size for candidate scoring (0 = inline)
        - LOG_LEVEL: Minimum log level
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ==========================================================================
    # Environment
    # ==========================================================================
    environment: str = Field(default="development", description="Environment name")
    debug: bool = Field(default=False, description="Debug mode")

    @property
    def is_development(self) -> bool:
        return self.environment.lower() in ("development", "dev", "local")

    @property
    def is_production(self) -> bool:
        return self.environment.lower() in ("production", "prod")

    # ==========================================================================
    # Server Configuration
    # ==========================================================================
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=8080, description="Server port")

    cors_origins: List[str] = Field(
        default=[
            "http://localhost:3000",
            "http://localhost:8081",
            "http://127.0.0.1:3000",
        ],
        description="Allowed CORS origins"
    )

    @field_validator("cors_origins", mode="before")
    @classmethod
    def parse_cors_origins(cls, v):
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v

    # ==========================================================================
    # Logging
    # ==========================================================================
    log_level: str = Field(default="INFO", description="Minimum log level")
    json_logs: Optional[bool] = Field(
        default=None,
        description="Force JSON log output (defaults to on in production)"
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        valid = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid:
            raise ValueError(f"log_level must be one of {valid}")
        return v.upper()

    @property
    def use_json_logs(self) -> bool:
        if self.json_logs is None:
            return self.is_production
        return self.json_logs

    # ==========================================================================
    # Catalog
    # ==========================================================================
    catalog_path: Optional[Path] = Field(
        default=None,
        description="JSON file with candidate records, loaded at startup"
    )

    # ==========================================================================
    # Scoring
    # ==========================================================================
    default_top_n: int = Field(default=5, ge=1, description="Suggestions returned by default")
    max_top_n: int = Field(default=50, ge=1, description="Upper bound on requested suggestions")
    scoring_workers: int = Field(
        default=0,
        ge=0,
        description="Thread pool size for scoring candidates (0 = score inline)"
    )


@lru_cache
def get_settings() -> Settings:
    """
    Get the application settings singleton.

    Uses lru_cache to ensure only one instance is created.
    Settings are loaded from environment variables and .env file.
    """
    env_file = Path(__file__).parent.parent.parent / ".env"
    return Settings(_env_file=env_file if env_file.exists() else None)


def get_settings_for_testing(**overrides) -> Settings:
    """
    Create a settings instance for testing with optional overrides.

    This bypasses the cache to allow different settings in tests.
    """
    return Settings(_env_file=None, **overrides)
