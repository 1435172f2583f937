"""
Configuration for the DoFIRE API.

Settings come from environment variables and an optional .env file via
pydantic-settings. They are built explicitly and handed to create_app.
"""

from typing import List, Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class SupabaseSettings(BaseSettings):
    """Supabase project used for storage and token verification."""

    model_config = SettingsConfigDict(
        env_prefix="SUPABASE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    url: str = Field(..., description="Supabase project URL")
    key: str = Field(..., description="Supabase API key")


class AppSettings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_prefix="DOFIRE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    environment: str = Field(default="development")
    log_level: str = Field(default="INFO")
    log_json: bool = Field(
        default=True,
        description="Render logs as JSON lines (console renderer otherwise)",
    )
    storage_backend: Literal["supabase", "memory"] = Field(
        default="supabase",
        description="'memory' keeps everything in process, for local development",
    )
    cors_origins: List[str] = Field(
        default_factory=lambda: ["http://localhost:4321", "http://localhost:3000"],
    )

    # health check thresholds
    db_degraded_threshold_ms: int = Field(default=500, ge=1)
    db_timeout_ms: int = Field(default=2000, ge=1)