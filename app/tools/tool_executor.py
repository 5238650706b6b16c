"""
Tool executor for the provider adapters.

Dispatches a tool call by name to a ``_tool_<name>`` handler after validating
its arguments against the closed schema in ``tool_schema``. The executor never
raises; every failure becomes a text result the model can read.
"""

import logging
from collections.abc import Mapping
from typing import Any

from app.tools.tool_schema import TOOLS, SearchWebArguments, ToolArgumentError
from app.tools.web_search_tool import WebSearchTool


class ToolExecutor:
    def __init__(self, web_search: WebSearchTool, logger: logging.Logger) -> None:
        self.web_search = web_search
        self.logger = logger

    @property
    def tool_names(self) -> frozenset[str]:
        return frozenset(tool.name for tool in TOOLS)

    def knows(self, tool_name: str) -> bool:
        return tool_name in self.tool_names

    async def execute(
        self, tool_name: str, arguments: str | Mapping[str, Any] | None
    ) -> str:
        """
        Execute a tool by name.

        Args:
            tool_name: Name of the tool the model asked for
            arguments: Raw arguments as sent by the vendor (JSON string or mapping)

        Returns:
            The tool result as plain text.
        """
        method = getattr(self, f"_tool_{tool_name}", None)
        if method is None or not self.knows(tool_name):
            self.logger.warning("Model requested unknown tool '%s'", tool_name)
            return f"Unbekanntes Werkzeug: {tool_name}"

        try:
            return await method(arguments)
        except ToolArgumentError as e:
            self.logger.warning("Invalid arguments for %s: %s", tool_name, e)
            return f"Ungültige Argumente für {tool_name}: {e}"
        except Exception as e:
            self.logger.error("Tool %s failed: %s", tool_name, e, exc_info=True)
            return f"Werkzeug {tool_name} fehlgeschlagen."

    async def _tool_search_web(self, arguments: Any) -> str:
        args = SearchWebArguments.parse(arguments)
        self.logger.info("Searching the web: %s", args.query)
        return await self.web_search.search(args.query)
