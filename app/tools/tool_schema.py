"""
Closed schema of the tools exposed to the language models.

Each tool is a ``ToolDefinition`` plus an argument dataclass that validates the
raw vendor payload. Adding a tool means adding both here and a handler in the
``ToolExecutor``.
"""

import json
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

SEARCH_WEB = "search_web"


class ToolArgumentError(ValueError):
    """Raised when a tool call carries arguments that do not fit the schema."""


@dataclass(frozen=True)
class ToolParameter:
    name: str
    description: str
    type: str = "string"
    required: bool = True


@dataclass(frozen=True)
class ToolDefinition:
    name: str
    description: str
    parameters: tuple[ToolParameter, ...]

    def json_schema(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                p.name: {"type": p.type, "description": p.description}
                for p in self.parameters
            },
            "required": [p.name for p in self.parameters if p.required],
        }


@dataclass(frozen=True)
class SearchWebArguments:
    query: str

    @classmethod
    def parse(cls, raw: str | Mapping[str, Any] | None) -> "SearchWebArguments":
        if isinstance(raw, str):
            try:
                raw = json.loads(raw) if raw.strip() else {}
            except json.JSONDecodeError as e:
                raise ToolArgumentError(f"Arguments are not valid JSON: {e}") from e

        if not isinstance(raw, Mapping):
            raise ToolArgumentError("Arguments must be an object")

        query = raw.get("query")
        if not isinstance(query, str) or not query.strip():
            raise ToolArgumentError("Argument 'query' must be a non-empty string")
        return cls(query=query.strip())


SEARCH_WEB_TOOL = ToolDefinition(
    name=SEARCH_WEB,
    description=(
        "Sucht aktuelle Informationen im Internet. Nutze dies für aktuelle "
        "Ereignisse, Fakten, News oder wenn du nicht sicher bist."
    ),
    parameters=(ToolParameter(name="query", description="Die Suchanfrage"),),
)

TOOLS: tuple[ToolDefinition, ...] = (SEARCH_WEB_TOOL,)


def openai_tool_declarations() -> list[dict[str, Any]]:
    return [
        {
            "type": "function",
            "function": {
                "name": tool.name,
                "description": tool.description,
                "parameters": tool.json_schema(),
            },
        }
        for tool in TOOLS
    ]
