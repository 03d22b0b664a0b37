"""
Web search settings.

Serper.dev credentials and transport settings for the optional web stage.

Dependencies: pydantic, pydantic_settings
System role: External search configuration
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from taskdesk.configs.base import BaseSettings


class WebSearchSettings(BaseSettings):
    """Serper web search configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="SERPER_",
        case_sensitive=False,
        extra="ignore",
    )

    api_key: str | None = Field(default=None, description="Serper API key")
    endpoint: str = Field(
        default="https://google.serper.dev/search",
        description="Search endpoint URL",
    )
    timeout_seconds: float = Field(default=10.0, description="HTTP timeout")
