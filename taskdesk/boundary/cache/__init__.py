"""
Cache boundary layer.

Exports:
  - HistoryCache, CachedHistory: Redis-backed recent-history cache

Dependencies: redis
System role: Short-term storage for recent chat turns
"""

from taskdesk.boundary.cache.history_cache import CachedHistory, HistoryCache

__all__ = ["CachedHistory", "HistoryCache"]
