"""
Observability module.

Provides structured logging, correlation ID tracking and request logging
middleware.
"""

from taskdesk.observability.correlation import get_correlation_id, set_correlation_id
from taskdesk.observability.logger import configure_logging

__all__ = ["configure_logging", "get_correlation_id", "set_correlation_id"]
