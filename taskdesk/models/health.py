"""
Health check models.

Dependencies: pydantic
System role: Health API contracts
"""

from pydantic import BaseModel


class AIHealthResponse(BaseModel):
    """Liveness of the relational store and the short-term cache."""

    ok: bool
    db: bool
    cache: bool
