"""
Language model settings.

Selects the chat/embedding provider and its sampling parameters.

Dependencies: pydantic, pydantic_settings
System role: Model invoker configuration
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from taskdesk.configs.base import BaseSettings


class LLMSettings(BaseSettings):
    """Chat completion and embedding provider configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="LLM_",
        case_sensitive=False,
        extra="ignore",
    )

    provider: str = Field(
        default="ollama",
        description="Model provider: 'ollama' (local) or 'google' (Gemini)",
    )
    base_url: str = Field(
        default="http://localhost:11434",
        description="Ollama host URL (ignored by the google provider)",
    )
    chat_model: str = Field(default="aya:23", description="Chat completion model ID")
    embedding_model: str = Field(
        default="nomic-embed-text",
        description="Embedding model ID",
    )

    temperature: float = Field(default=0.2, description="Sampling temperature")
    top_p: float = Field(default=0.9, description="Nucleus sampling cutoff")
    num_ctx: int = Field(default=4096, description="Context window (ollama only)")
    request_timeout_seconds: float = Field(
        default=60.0,
        description="Upper bound on a single chat completion call",
    )
