"""
Core configuration using Pydantic Settings.
Loads from environment variables.
"""

from typing import Literal
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # App
    app_name: str = Field(default="talentflow", alias="APP_NAME")
    app_env: Literal["development", "staging", "production", "test"] = Field(
        default="development", alias="APP_ENV"
    )
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO", alias="LOG_LEVEL"
    )

    # API
    api_prefix: str = Field(default="", alias="API_PREFIX")
    allowed_origins: list[str] = Field(
        default=["http://localhost:5173", "http://localhost:3000"],
        alias="ALLOWED_ORIGINS",
    )

    # Database
    database_url: str = Field(
        default="sqlite+aiosqlite:///./talentflow.db", alias="DATABASE_URL"
    )
    database_echo: bool = Field(default=False, alias="DATABASE_ECHO")

    # Logging
    log_request_body: bool = Field(default=False, alias="LOG_REQUEST_BODY")
    log_response_body: bool = Field(default=False, alias="LOG_RESPONSE_BODY")
    log_max_body_size: int = Field(default=1024, alias="LOG_MAX_BODY_SIZE")
    json_logs: bool = Field(default=True, alias="JSON_LOGS")

    # Gateway simulation (latency and random write failures)
    simulation_enabled: bool = Field(default=True, alias="SIMULATION_ENABLED")
    simulated_latency_min_ms: int = Field(
        default=200, ge=0, alias="SIMULATED_LATENCY_MIN_MS"
    )
    simulated_latency_max_ms: int = Field(
        default=1200, ge=0, alias="SIMULATED_LATENCY_MAX_MS"
    )
    simulated_write_failure_rate: float = Field(
        default=0.08, ge=0.0, le=1.0, alias="SIMULATED_WRITE_FAILURE_RATE"
    )
    simulated_reorder_failure_rate: float = Field(
        default=0.1, ge=0.0, le=1.0, alias="SIMULATED_REORDER_FAILURE_RATE"
    )

    # Assessments
    assessment_validate_on_submit: bool = Field(
        default=True, alias="ASSESSMENT_VALIDATE_ON_SUBMIT"
    )


# Global settings instance
settings = Settings()
