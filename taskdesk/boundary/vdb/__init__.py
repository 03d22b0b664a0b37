"""
Vector database boundary layer.

Provides the pgvector-backed embedding store used for rebuilds, ad-hoc
embeddings and similarity retrieval.

Dependencies: sqlalchemy, pgvector
System role: Vector store adapter for retrieval
"""

from taskdesk.boundary.vdb.pgvector_store import PgVectorStore, distance_to_score

__all__ = [
    "PgVectorStore",
    "distance_to_score",
]
