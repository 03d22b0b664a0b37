"""
Retrieval fusion settings.

Per-stage limits for keyword, table, vector and web retrieval plus the
conversation windows used when building a prompt.

Dependencies: pydantic, pydantic_settings
System role: Retrieval pipeline configuration
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from taskdesk.configs.base import BaseSettings


class RetrievalSettings(BaseSettings):
    """Context assembly configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="RETRIEVAL_",
        case_sensitive=False,
        extra="ignore",
    )

    query_prefix_length: int = Field(
        default=120,
        description="Characters of the question used for keyword matching",
    )
    per_source_limit: int = Field(default=3, description="Keyword hits per source")
    table_candidates: int = Field(default=6, description="Recent tables considered per turn")
    matched_tables_limit: int = Field(default=3, description="Matched tables kept")
    fallback_tables_limit: int = Field(
        default=2,
        description="Recent tables used when no table matches the question",
    )
    table_summary_rows: int = Field(default=10, description="Sample rows per table summary")
    max_context_chunks: int = Field(default=6, description="Context chunks sent to the model")

    history_window: int = Field(default=12, description="Recent messages loaded per turn")
    prompt_history: int = Field(default=6, description="Recent messages rendered in the prompt")

    web_search_enabled: bool = Field(default=False, description="Enable the web search stage")
    web_result_limit: int = Field(default=4, description="Web results requested per turn")
