"""
Short-term history cache settings.

Redis connection and retention policy for recent chat turns.

Dependencies: pydantic, pydantic_settings
System role: Cache configuration for chat history reads
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from taskdesk.configs.base import BaseSettings


class CacheSettings(BaseSettings):
    """Redis cache configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="REDIS_",
        case_sensitive=False,
        extra="ignore",
    )

    url: str = Field(default="redis://localhost:6379", description="Redis connection URL")
    enabled: bool = Field(default=True, description="Use Redis for the history cache")
    history_ttl_seconds: int = Field(
        default=3600,
        description="Time-to-live of a cached session history",
    )
    history_max_messages: int = Field(
        default=12,
        description="Most recent messages kept per cached session",
    )
    socket_timeout: float = Field(default=2.0, description="Redis socket timeout in seconds")
    key_prefix: str = Field(default="chat:session:", description="Cache key prefix")
