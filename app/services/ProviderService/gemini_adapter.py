"""
Gemini adapter on the google-genai async client.

Gemini has no per-call ids; a function result is fed back keyed by the
function name. Only the first part of a candidate is inspected for a function
call, so at most one call is in flight per round.
"""

from __future__ import annotations

import base64
import logging

import httpx
from google import genai
from google.genai import errors, types

from app.entities.errors import ConfigurationError, ProviderError
from app.entities.message import MessagePayload
from app.services.ProviderService.base_provider_adapter import BaseProviderAdapter
from app.services.ProviderService.loop_state import (
    MAX_TOOL_ITERATIONS,
    ModelTurn,
    ToolInvocation,
)
from app.tools.tool_executor import ToolExecutor
from app.tools.tool_schema import TOOLS, ToolDefinition

SAFETY_BLOCKED_TEXT = (
    "Die Anfrage wurde aus Sicherheitsgründen blockiert. "
    "Bitte formuliere deine Nachricht um."
)
NO_CANDIDATES_TEXT = (
    "Das Modell hat keine Antwort geliefert. Bitte versuche es erneut."
)
EMPTY_RESPONSE_TEXT = "Keine Antwort erhalten"
UNKNOWN_FUNCTION_TEXT = "Das Modell hat ein unbekanntes Werkzeug angefordert: {name}"

SAFETY_FINISH_REASONS = frozenset(
    {
        types.FinishReason.SAFETY,
        types.FinishReason.PROHIBITED_CONTENT,
        types.FinishReason.BLOCKLIST,
        types.FinishReason.SPII,
    }
)


def supports_tools(model: str) -> bool:
    """Thinking variants reject function declarations."""
    return "thinking" not in model.lower()


def function_declaration(tool: ToolDefinition) -> types.FunctionDeclaration:
    return types.FunctionDeclaration(
        name=tool.name,
        description=tool.description,
        parameters=types.Schema(
            type=types.Type.OBJECT,
            properties={
                p.name: types.Schema(
                    type=types.Type(p.type.upper()), description=p.description
                )
                for p in tool.parameters
            },
            required=[p.name for p in tool.parameters if p.required],
        ),
    )


class GeminiAdapter(BaseProviderAdapter):
    provider_name = "Gemini"

    def __init__(
        self,
        api_key: str | None,
        model: str,
        temperature: float,
        tool_executor: ToolExecutor,
        logger: logging.Logger,
        base_url: str | None = None,
        client: genai.Client | None = None,
        max_iterations: int = MAX_TOOL_ITERATIONS,
    ) -> None:
        super().__init__(model, temperature, tool_executor, logger, max_iterations)
        if client is None:
            if not api_key:
                raise ConfigurationError("GEMINI_API_KEY not configured")
            http_options = types.HttpOptions(base_url=base_url) if base_url else None
            client = genai.Client(api_key=api_key, http_options=http_options)
        self.client = client

    def _convert_messages(self, messages: list[MessagePayload]) -> list[types.Content]:
        contents: list[types.Content] = []
        for msg in messages:
            parts: list[types.Part] = []
            content_text = msg.get("content", "")
            if content_text:
                parts.append(types.Part.from_text(text=content_text))

            for attachment in msg.get("attachments") or []:
                base64_data = attachment.get("base64")
                if attachment["strategy"] != "inline-media" or not base64_data:
                    continue
                try:
                    parts.append(
                        types.Part.from_bytes(
                            data=base64.b64decode(base64_data),
                            mime_type=attachment["mime_type"],
                        )
                    )
                except ValueError as e:
                    self.logger.warning(
                        "Failed to decode attachment %s: %s",
                        attachment["file_name"],
                        e,
                    )

            if not parts:
                continue
            contents.append(
                types.Content(
                    role="model" if msg["role"] == "assistant" else "user",
                    parts=parts,
                )
            )
        return contents

    def _config(self, system_instruction: str) -> types.GenerateContentConfig:
        tools = None
        if supports_tools(self.model):
            tools = [
                types.Tool(
                    function_declarations=[function_declaration(t) for t in TOOLS]
                )
            ]
        return types.GenerateContentConfig(
            system_instruction=system_instruction,
            temperature=self.temperature,
            tools=tools,
        )

    async def _complete(
        self, conversation: list[types.Content], system_instruction: str
    ) -> ModelTurn:
        try:
            response = await self.client.aio.models.generate_content(
                model=self.model,
                contents=conversation,
                config=self._config(system_instruction),
            )
        except errors.APIError as e:
            self.logger.error("Gemini error %s: %s", e.code, e.message)
            raise ProviderError(self.provider_name, str(e.message), e.code) from e
        except httpx.HTTPError as e:
            self.logger.error("Gemini request failed: %s", e, exc_info=True)
            raise ProviderError(self.provider_name, str(e)) from e

        tokens = 0
        if response.usage_metadata is not None:
            tokens = response.usage_metadata.total_token_count or 0

        feedback = response.prompt_feedback
        if feedback is not None and feedback.block_reason:
            self.logger.warning("Gemini blocked the prompt: %s", feedback.block_reason)
            return ModelTurn(tokens=tokens, stop_message=SAFETY_BLOCKED_TEXT)

        if not response.candidates:
            return ModelTurn(tokens=tokens, stop_message=NO_CANDIDATES_TEXT)

        candidate = response.candidates[0]
        if candidate.finish_reason in SAFETY_FINISH_REASONS:
            self.logger.warning(
                "Gemini stopped for safety: %s", candidate.finish_reason
            )
            return ModelTurn(tokens=tokens, stop_message=SAFETY_BLOCKED_TEXT)

        parts = candidate.content.parts if candidate.content else None
        if not parts:
            return ModelTurn(tokens=tokens, stop_message=EMPTY_RESPONSE_TEXT)

        function_call = parts[0].function_call
        if function_call is not None:
            name = function_call.name or ""
            if not self.tool_executor.knows(name):
                self.logger.warning("Gemini requested unknown function %s", name)
                return ModelTurn(
                    tokens=tokens, stop_message=UNKNOWN_FUNCTION_TEXT.format(name=name)
                )
            return ModelTurn(
                tool_calls=[
                    ToolInvocation(id=None, name=name, arguments=function_call.args or {})
                ],
                tokens=tokens,
                raw=candidate.content,
            )

        text = "".join(p.text for p in parts if p.text and not p.thought)
        return ModelTurn(text=text, tokens=tokens, raw=candidate.content)

    def _append_tool_round(
        self,
        conversation: list[types.Content],
        turn: ModelTurn,
        invocations: list[ToolInvocation],
    ) -> None:
        conversation.append(turn.raw)
        conversation.append(
            types.Content(
                role="user",
                parts=[
                    types.Part.from_function_response(
                        name=invocation.name,
                        response={"result": invocation.result or ""},
                    )
                    for invocation in invocations
                ],
            )
        )
