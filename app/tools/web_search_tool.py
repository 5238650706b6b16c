"""
Web Search Tool backed by the Tavily search API.

The tool returns a plain-text digest (answer summary, titles, snippets and
URLs) that can be placed directly into a tool turn of the conversation. It
never raises: missing configuration, upstream failures and empty result sets
all degrade to an explanatory string.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

TAVILY_SEARCH_URL = "https://api.tavily.com/search"
MAX_RESULTS = 5

NOT_CONFIGURED_TEXT = "Search nicht verfügbar - kein API Key"
FAILED_TEXT = "Search fehlgeschlagen"
NO_RESULTS_TEXT = "Keine Suchergebnisse für diese Anfrage gefunden."


def format_results(data: dict[str, Any]) -> str:
    """Format a Tavily response body for the language model."""
    lines: list[str] = []

    answer = data.get("answer")
    if answer:
        lines.append(f"Zusammenfassung: {answer}")
        lines.append("")

    results = [r for r in data.get("results") or [] if isinstance(r, dict)]
    if not results and not answer:
        return NO_RESULTS_TEXT

    lines.append("Relevante Quellen:")
    for idx, item in enumerate(results[:MAX_RESULTS], start=1):
        lines.append(f"{idx}. {item.get('title', '')}")
        lines.append(f"   {item.get('content', '')}")
        lines.append(f"   Quelle: {item.get('url', '')}")
        lines.append("")

    return "\n".join(lines).strip()


class WebSearchTool:
    def __init__(
        self,
        api_key: str | None,
        logger: logging.Logger,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = 15.0,
        base_url: str = TAVILY_SEARCH_URL,
    ) -> None:
        self.api_key = api_key
        self.logger = logger
        self.timeout = timeout
        self.base_url = base_url
        self._client = http_client

    async def search(self, query: str) -> str:
        """
        Search the web for a query.

        Args:
            query: The search query.

        Returns:
            A pre-formatted plain-text digest or an explanatory message.
        """
        if not self.api_key:
            self.logger.error("No Tavily API key configured")
            return NOT_CONFIGURED_TEXT

        if not query or not query.strip():
            return NO_RESULTS_TEXT

        payload = {
            "api_key": self.api_key,
            "query": query,
            "search_depth": "basic",
            "include_answer": True,
            "max_results": MAX_RESULTS,
        }

        self.logger.info("Executing web search for query: %s", query[:100])

        try:
            if self._client is not None:
                response = await self._client.post(
                    self.base_url, json=payload, timeout=self.timeout
                )
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.post(self.base_url, json=payload)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            self.logger.error(
                "Tavily search failed with status %d: %s",
                e.response.status_code,
                e.response.text[:200],
            )
            return FAILED_TEXT
        except Exception as e:
            self.logger.error("Tavily search error: %s", e, exc_info=True)
            return FAILED_TEXT

        if not isinstance(data, dict):
            return FAILED_TEXT

        digest = format_results(data)
        self.logger.info(
            "Web search completed with %d results", len(data.get("results") or [])
        )
        return digest
