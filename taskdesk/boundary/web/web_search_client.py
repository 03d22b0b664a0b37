"""
Web search client.

Queries Serper.dev for a few organic results used as supplementary context.
Any failure (missing key, HTTP error, transport error, malformed body)
yields an empty list.

Dependencies: httpx, taskdesk.configs
System role: Optional web stage of retrieval
"""

import logging

import httpx

from taskdesk.configs import get_settings
from taskdesk.core.bot.bot_schema import WebResult

logger = logging.getLogger(__name__)


class WebSearchClient:
    """
    Serper search client.

    Attributes:
        api_key: Serper API key, None disables the client
        endpoint: Search endpoint URL
        timeout_seconds: HTTP timeout
    """

    def __init__(
        self,
        api_key: str | None,
        endpoint: str = "https://google.serper.dev/search",
        timeout_seconds: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.api_key = api_key
        self.endpoint = endpoint
        self.timeout_seconds = timeout_seconds
        self._transport = transport

    @classmethod
    def from_settings(cls) -> "WebSearchClient":
        config = get_settings().web_search
        return cls(
            api_key=config.api_key,
            endpoint=config.endpoint,
            timeout_seconds=config.timeout_seconds,
        )

    async def search(self, query: str, limit: int = 4) -> list[WebResult]:
        """
        Search the web.

        Args:
            query: Search text
            limit: Maximum results

        Returns:
            list[WebResult]: Up to `limit` results, empty on any failure
        """
        if not self.api_key:
            logger.warning(f"{__name__}:search - SERPER_API_KEY not set, skipping web search")
            return []

        headers = {
            "X-API-KEY": self.api_key,
            "Content-Type": "application/json",
        }
        payload = {"q": query, "num": limit}
        async with httpx.AsyncClient(
            timeout=self.timeout_seconds,
            transport=self._transport,
        ) as client:
            try:
                response = await client.post(self.endpoint, json=payload, headers=headers)
                response.raise_for_status()
                body = response.json()
            except httpx.HTTPStatusError as e:
                logger.warning(
                    f"{__name__}:search - Search returned HTTP {e.response.status_code}"
                )
                return []
            except (httpx.HTTPError, ValueError) as e:
                logger.warning(f"{__name__}:search - {type(e).__name__}: {e}")
                return []

        organic = body.get("organic") if isinstance(body, dict) else None
        if not isinstance(organic, list):
            return []

        results = []
        for item in organic[:limit]:
            if not isinstance(item, dict):
                continue
            results.append(
                WebResult(
                    title=str(item.get("title") or ""),
                    url=str(item.get("link") or ""),
                    snippet=str(item.get("snippet") or ""),
                )
            )
        return results
