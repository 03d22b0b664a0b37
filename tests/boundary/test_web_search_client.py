"""
Test suite for the web search client.

Uses httpx.MockTransport in place of the Serper API.

System role: Verification of the optional web retrieval stage
"""

import json

import httpx
import pytest

from taskdesk.boundary.web.web_search_client import WebSearchClient


def make_client(handler, api_key: str | None = "secret") -> WebSearchClient:
    """WebSearchClient routed through a mock transport."""
    return WebSearchClient(
        api_key=api_key,
        endpoint="https://search.test/search",
        timeout_seconds=1.0,
        transport=httpx.MockTransport(handler),
    )


class TestWebSearchClient:
    """Test suite for WebSearchClient.search."""

    @pytest.mark.asyncio
    async def test_search_should_map_organic_results(self) -> None:
        """Test request shape and result mapping."""
        # Arrange
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["key"] = request.headers["X-API-KEY"]
            seen["body"] = json.loads(request.content)
            return httpx.Response(
                200,
                json={
                    "organic": [
                        {"title": "כתבה", "link": "https://a.test", "snippet": "תקציר"},
                        {"title": "שנייה", "link": "https://b.test"},
                        "not-a-result",
                    ]
                },
            )

        client = make_client(handler)

        # Act
        results = await client.search("מה חדש?", limit=3)

        # Assert
        assert seen == {"key": "secret", "body": {"q": "מה חדש?", "num": 3}}
        assert [r.title for r in results] == ["כתבה", "שנייה"]
        assert results[0].url == "https://a.test"
        assert results[1].snippet == ""

    @pytest.mark.asyncio
    async def test_search_should_respect_limit(self) -> None:
        """Test at most `limit` results are returned."""
        organic = [{"title": f"r{idx}", "link": "", "snippet": ""} for idx in range(10)]
        client = make_client(lambda request: httpx.Response(200, json={"organic": organic}))

        assert len(await client.search("q", limit=4)) == 4

    @pytest.mark.asyncio
    async def test_search_without_key_should_skip_request(self) -> None:
        """Test a missing key returns no results without calling out."""
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(200, json={})

        assert await make_client(handler, api_key=None).search("q") == []
        assert calls == []

    @pytest.mark.asyncio
    async def test_search_should_return_empty_on_http_error(self) -> None:
        """Test non-2xx responses degrade to no results."""
        client = make_client(lambda request: httpx.Response(500, text="boom"))

        assert await client.search("q") == []

    @pytest.mark.asyncio
    async def test_search_should_return_empty_on_transport_error(self) -> None:
        """Test connection failures degrade to no results."""
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("unreachable", request=request)

        assert await make_client(handler).search("q") == []

    @pytest.mark.asyncio
    async def test_search_should_return_empty_on_malformed_body(self) -> None:
        """Test bodies without an organic list yield no results."""
        client = make_client(lambda request: httpx.Response(200, json={"organic": "nope"}))

        assert await client.search("q") == []
