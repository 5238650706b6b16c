"""
OpenAI chat completions adapter.

Several tool calls may arrive in one response; each is answered by a ``tool``
message carrying the call id before the next completion request.
"""

from __future__ import annotations

import logging
from typing import Any

import openai
from openai import AsyncOpenAI

from app.entities.errors import ConfigurationError, ProviderError
from app.entities.message import MessagePayload
from app.services.ProviderService.base_provider_adapter import BaseProviderAdapter
from app.services.ProviderService.loop_state import (
    MAX_TOOL_ITERATIONS,
    ModelTurn,
    ToolInvocation,
)
from app.tools.tool_executor import ToolExecutor
from app.tools.tool_schema import openai_tool_declarations


class OpenAIAdapter(BaseProviderAdapter):
    provider_name = "OpenAI"

    def __init__(
        self,
        api_key: str | None,
        model: str,
        temperature: float,
        tool_executor: ToolExecutor,
        logger: logging.Logger,
        base_url: str | None = None,
        client: AsyncOpenAI | None = None,
        max_iterations: int = MAX_TOOL_ITERATIONS,
    ) -> None:
        super().__init__(model, temperature, tool_executor, logger, max_iterations)
        if client is None:
            if not api_key:
                raise ConfigurationError("OPENAI_API_KEY not configured")
            client = AsyncOpenAI(api_key=api_key, base_url=base_url)
        self.client = client

    def _convert_messages(self, messages: list[MessagePayload]) -> list[dict[str, Any]]:
        converted: list[dict[str, Any]] = []
        for msg in messages:
            role = msg["role"]
            content = msg.get("content", "")

            if role == "tool":
                converted.append(
                    {
                        "role": "tool",
                        "tool_call_id": msg.get("tool_call_id", ""),
                        "content": content,
                    }
                )
                continue

            if role == "assistant" and msg.get("tool_calls"):
                converted.append(
                    {
                        "role": "assistant",
                        "content": content or None,
                        "tool_calls": msg["tool_calls"],
                    }
                )
                continue

            images = [
                a
                for a in msg.get("attachments") or []
                if a["strategy"] == "inline-media"
                and a["mime_type"].startswith("image/")
                and a.get("base64")
            ]
            if role == "user" and images:
                parts: list[dict[str, Any]] = [{"type": "text", "text": content}]
                parts.extend(
                    {
                        "type": "image_url",
                        "image_url": {
                            "url": f"data:{a['mime_type']};base64,{a['base64']}"
                        },
                    }
                    for a in images
                )
                converted.append({"role": role, "content": parts})
                continue

            converted.append({"role": role, "content": content})
        return converted

    async def _complete(
        self, conversation: list[dict[str, Any]], system_instruction: str
    ) -> ModelTurn:
        request_messages = [{"role": "system", "content": system_instruction}]
        request_messages.extend(conversation)

        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=request_messages,
                temperature=self.temperature,
                tools=openai_tool_declarations(),
                tool_choice="auto",
            )
        except openai.APIStatusError as e:
            self.logger.error("OpenAI error %d: %s", e.status_code, e.message)
            raise ProviderError(self.provider_name, e.message, e.status_code) from e
        except openai.APIError as e:
            self.logger.error("OpenAI request failed: %s", e, exc_info=True)
            raise ProviderError(self.provider_name, str(e)) from e

        if not response.choices:
            raise ProviderError(self.provider_name, "response contained no choices")

        message = response.choices[0].message
        tokens = response.usage.total_tokens if response.usage else 0
        tool_calls = [
            ToolInvocation(
                id=call.id,
                name=call.function.name,
                arguments=call.function.arguments,
            )
            for call in message.tool_calls or []
        ]
        return ModelTurn(
            text=message.content, tool_calls=tool_calls, tokens=tokens, raw=message
        )

    def _append_tool_round(
        self,
        conversation: list[dict[str, Any]],
        turn: ModelTurn,
        invocations: list[ToolInvocation],
    ) -> None:
        conversation.append(
            {
                "role": "assistant",
                "content": turn.text,
                "tool_calls": [
                    {
                        "id": call.id,
                        "type": "function",
                        "function": {"name": call.name, "arguments": call.arguments},
                    }
                    for call in turn.tool_calls
                ],
            }
        )
        for invocation in invocations:
            conversation.append(
                {
                    "role": "tool",
                    "tool_call_id": invocation.id,
                    "content": invocation.result or "",
                }
            )
