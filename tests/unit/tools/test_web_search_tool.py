"""
Unit tests for the web_search_tool module.

Tests cover the Tavily request payload, the digest format and the fallback
texts returned instead of raising.
"""

import logging
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from app.tools.web_search_tool import (
    FAILED_TEXT,
    NO_RESULTS_TEXT,
    NOT_CONFIGURED_TEXT,
    TAVILY_SEARCH_URL,
    WebSearchTool,
    format_results,
)

LOGGER = logging.getLogger("test.web_search")


def _response(status_code: int, json_body=None) -> httpx.Response:
    return httpx.Response(
        status_code,
        json=json_body,
        request=httpx.Request("POST", TAVILY_SEARCH_URL),
    )


class TestFormatResults:
    """Test cases for the plain-text digest."""

    def test_format_with_answer_and_results(self) -> None:
        data = {
            "answer": "Berlin ist die Hauptstadt.",
            "results": [
                {
                    "title": "Berlin",
                    "content": "Hauptstadt von Deutschland",
                    "url": "https://example.com/berlin",
                }
            ],
        }

        digest = format_results(data)

        assert digest.startswith("Zusammenfassung: Berlin ist die Hauptstadt.")
        assert "Relevante Quellen:" in digest
        assert "1. Berlin" in digest
        assert "   Hauptstadt von Deutschland" in digest
        assert "   Quelle: https://example.com/berlin" in digest

    def test_format_without_answer(self) -> None:
        data = {"results": [{"title": "A", "content": "a", "url": "https://a"}]}

        digest = format_results(data)

        assert "Zusammenfassung" not in digest
        assert digest.startswith("Relevante Quellen:")

    def test_format_limits_to_five_results(self) -> None:
        data = {
            "results": [
                {"title": f"T{i}", "content": "c", "url": f"https://x/{i}"}
                for i in range(8)
            ]
        }

        digest = format_results(data)

        assert "5. T4" in digest
        assert "6. T5" not in digest

    def test_format_empty(self) -> None:
        assert format_results({"results": []}) == NO_RESULTS_TEXT


class TestWebSearchTool:
    """Test cases for WebSearchTool.search."""

    @pytest.mark.asyncio
    async def test_search_without_api_key(self) -> None:
        http_client = MagicMock()
        http_client.post = AsyncMock()
        tool = WebSearchTool(api_key="", logger=LOGGER, http_client=http_client)

        result = await tool.search("wetter berlin")

        assert result == NOT_CONFIGURED_TEXT
        http_client.post.assert_not_called()

    @pytest.mark.asyncio
    async def test_search_success(self) -> None:
        http_client = MagicMock()
        http_client.post = AsyncMock(
            return_value=_response(
                200,
                {
                    "answer": "Sonnig",
                    "results": [
                        {"title": "Wetter", "content": "25 Grad", "url": "https://w"}
                    ],
                },
            )
        )
        tool = WebSearchTool(api_key="tvly-test", logger=LOGGER, http_client=http_client)

        result = await tool.search("wetter berlin")

        assert "Zusammenfassung: Sonnig" in result
        assert "Quelle: https://w" in result

        args, kwargs = http_client.post.call_args
        assert args[0] == TAVILY_SEARCH_URL
        assert kwargs["json"] == {
            "api_key": "tvly-test",
            "query": "wetter berlin",
            "search_depth": "basic",
            "include_answer": True,
            "max_results": 5,
        }

    @pytest.mark.asyncio
    async def test_search_http_error(self) -> None:
        http_client = MagicMock()
        http_client.post = AsyncMock(return_value=_response(500, {"error": "boom"}))
        tool = WebSearchTool(api_key="tvly-test", logger=LOGGER, http_client=http_client)

        result = await tool.search("anything")

        assert result == FAILED_TEXT

    @pytest.mark.asyncio
    async def test_search_transport_error(self) -> None:
        http_client = MagicMock()
        http_client.post = AsyncMock(side_effect=httpx.ConnectError("down"))
        tool = WebSearchTool(api_key="tvly-test", logger=LOGGER, http_client=http_client)

        result = await tool.search("anything")

        assert result == FAILED_TEXT

    @pytest.mark.asyncio
    async def test_search_no_results(self) -> None:
        http_client = MagicMock()
        http_client.post = AsyncMock(return_value=_response(200, {"results": []}))
        tool = WebSearchTool(api_key="tvly-test", logger=LOGGER, http_client=http_client)

        result = await tool.search("nichts")

        assert result == NO_RESULTS_TEXT
