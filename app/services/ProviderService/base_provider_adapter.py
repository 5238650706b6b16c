"""
Shared skeleton of the tool-calling loop.

Vendor variants only convert messages, send one completion request and parse
its response; iteration budget, usage accounting and tool execution live here.

    AWAITING_MODEL -> EXECUTING_TOOLS -> AWAITING_MODEL (iteration + 1) -> ... -> DONE
"""

from __future__ import annotations

import logging
from abc import abstractmethod
from dataclasses import replace
from typing import Any

from langfuse import observe

from app.entities.message import MessagePayload
from app.services.ProviderService.loop_state import (
    MAX_TOOL_ITERATIONS,
    CompletionResult,
    LoopOutcome,
    ModelTurn,
    ToolInvocation,
    TurnBudget,
    UsageAccumulator,
)
from app.services.ProviderService.provider_adapter_interface import (
    ProviderAdapterInterface,
)
from app.tools.tool_executor import ToolExecutor


class BaseProviderAdapter(ProviderAdapterInterface):
    def __init__(
        self,
        model: str,
        temperature: float,
        tool_executor: ToolExecutor,
        logger: logging.Logger,
        max_iterations: int = MAX_TOOL_ITERATIONS,
    ) -> None:
        self.model = model
        self.temperature = temperature
        self.tool_executor = tool_executor
        self.logger = logger
        self.max_iterations = max_iterations

    @abstractmethod
    def _convert_messages(self, messages: list[MessagePayload]) -> list[Any]:
        """Unified messages to the vendor conversation shape."""

    @abstractmethod
    async def _complete(
        self, conversation: list[Any], system_instruction: str
    ) -> ModelTurn:
        """Send one completion request and parse the response."""

    @abstractmethod
    def _append_tool_round(
        self,
        conversation: list[Any],
        turn: ModelTurn,
        invocations: list[ToolInvocation],
    ) -> None:
        """Append the model's tool calls and one result per call."""

    @observe()
    async def run(
        self, messages: list[MessagePayload], system_instruction: str
    ) -> CompletionResult:
        conversation = self._convert_messages(messages)
        budget = TurnBudget(ceiling=self.max_iterations)
        usage = UsageAccumulator()
        last_text = ""

        while True:
            turn = await self._complete(conversation, system_instruction)
            usage.add(turn.tokens)

            if turn.stop_message is not None:
                self.logger.info(
                    "%s loop stopped early: %s", self.provider_name, turn.stop_message
                )
                return CompletionResult(
                    content=turn.stop_message,
                    tokens=usage.total,
                    outcome=LoopOutcome.BLOCKED,
                    iterations=budget.used,
                )

            if not turn.tool_calls:
                return CompletionResult(
                    content=turn.text or "",
                    tokens=usage.total,
                    outcome=LoopOutcome.DONE,
                    iterations=budget.used,
                )

            if turn.text:
                last_text = turn.text

            invocations = [
                replace(
                    call,
                    result=await self.tool_executor.execute(call.name, call.arguments),
                )
                for call in turn.tool_calls
            ]
            self._append_tool_round(conversation, turn, invocations)
            budget.consume()

            if budget.exhausted:
                self.logger.warning(
                    "%s reached the tool iteration limit (%d) with a tool call pending",
                    self.provider_name,
                    budget.ceiling,
                )
                return CompletionResult(
                    content=last_text or invocations[-1].result or "",
                    tokens=usage.total,
                    outcome=LoopOutcome.BUDGET_EXHAUSTED,
                    iterations=budget.used,
                )
