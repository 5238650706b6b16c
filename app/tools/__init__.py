"""
Tools module for the provider adapters.

This module contains the tools the language models may call during the
tool-calling loop and the executor that dispatches them.
"""

from app.tools.tool_executor import ToolExecutor
from app.tools.tool_schema import SEARCH_WEB_TOOL, SearchWebArguments
from app.tools.web_search_tool import WebSearchTool

__all__ = ["SEARCH_WEB_TOOL", "SearchWebArguments", "ToolExecutor", "WebSearchTool"]
