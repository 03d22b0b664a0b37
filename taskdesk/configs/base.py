"""
Base configuration settings.

Shared `.env` handling for every settings class plus the process-level
options (logging, HTTP binding, CORS) read by the application entry point.

Dependencies: pydantic_settings
System role: Foundation for all configuration classes
"""

from pydantic_settings import BaseSettings as PydanticBaseSettings, SettingsConfigDict
from pydantic import Field


class BaseSettings(PydanticBaseSettings):
    """Base configuration class; subclasses add an env_prefix."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    api_host: str = Field(default="localhost", description="Bind address for `python -m taskdesk.main`")
    api_port: int = Field(default=8082, description="Bind port for `python -m taskdesk.main`")
    cors_origins: list[str] = Field(
        default_factory=lambda: ["*"],
        description="Origins allowed to call the chat API (JSON list in the environment)",
    )
