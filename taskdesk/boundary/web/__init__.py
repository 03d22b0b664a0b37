"""
Web search boundary layer.

Exports:
  - WebSearchClient: Serper.dev search client

Dependencies: httpx
System role: External search adapter
"""

from taskdesk.boundary.web.web_search_client import WebSearchClient

__all__ = ["WebSearchClient"]
