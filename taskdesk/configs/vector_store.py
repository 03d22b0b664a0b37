"""
Vector store configuration settings.

Chunking policy and nearest-neighbour query defaults for the pgvector
embeddings table.

Dependencies: pydantic, pydantic_settings
System role: Vector database configuration for RAG retrieval
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from taskdesk.configs.base import BaseSettings


class VectorStoreSettings(BaseSettings):
    """pgvector embedding store configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="VECTOR_STORE_",
        case_sensitive=False,
        extra="ignore",
    )

    chunk_size: int = Field(default=700, description="Maximum characters per chunk")
    chunk_overlap: int = Field(default=80, description="Characters shared by adjacent chunks")
    search_limit: int = Field(default=3, description="Nearest neighbours per chat turn")
    table_sample_rows: int = Field(
        default=5,
        description="Rows of each data table included in its embedding payload",
    )
