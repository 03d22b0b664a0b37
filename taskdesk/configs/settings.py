"""
Unified application settings.

Aggregates all configuration modules into a single Settings class.
Provides dependency injection factory for FastAPI.

Dependencies: All config modules
System role: Central configuration aggregator for the application
"""

from functools import lru_cache

from pydantic import Field

from taskdesk.configs.base import BaseSettings
from taskdesk.configs.cache import CacheSettings
from taskdesk.configs.database import DatabaseSettings
from taskdesk.configs.llm import LLMSettings
from taskdesk.configs.retrieval import RetrievalSettings
from taskdesk.configs.vector_store import VectorStoreSettings
from taskdesk.configs.web_search import WebSearchSettings


class Settings(BaseSettings):
    """Unified application settings aggregating all config modules."""

    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    cache: CacheSettings = Field(default_factory=CacheSettings)
    llm: LLMSettings = Field(default_factory=LLMSettings)
    vector_store: VectorStoreSettings = Field(default_factory=VectorStoreSettings)
    retrieval: RetrievalSettings = Field(default_factory=RetrievalSettings)
    web_search: WebSearchSettings = Field(default_factory=WebSearchSettings)


@lru_cache
def get_settings() -> Settings:
    """
    Get application settings singleton.

    Returns Settings instance, cached for dependency injection.
    Environment variables loaded once at startup.

    Returns:
        Settings: Application settings instance

    Usage:
        from taskdesk.configs import get_settings
        settings = get_settings()
    """
    return Settings()
