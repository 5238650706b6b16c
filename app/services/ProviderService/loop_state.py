"""State carried through one run of the tool-calling loop."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

MAX_TOOL_ITERATIONS = 3


class LoopOutcome(str, Enum):
    DONE = "done"
    BUDGET_EXHAUSTED = "budget_exhausted"
    # Non-fatal short circuit: safety block, no candidate, unknown function
    BLOCKED = "blocked"


@dataclass
class TurnBudget:
    ceiling: int = MAX_TOOL_ITERATIONS
    used: int = 0

    @property
    def exhausted(self) -> bool:
        return self.used >= self.ceiling

    def consume(self) -> None:
        if self.exhausted:
            raise RuntimeError("Tool iteration budget already exhausted")
        self.used += 1


@dataclass
class UsageAccumulator:
    total: int = 0

    def add(self, tokens: int | None) -> int:
        """Add reported usage; missing or negative values count as zero."""
        self.total += max(0, int(tokens or 0))
        return self.total


@dataclass(frozen=True)
class ToolInvocation:
    # None for vendors without per-call ids (Gemini)
    id: str | None
    name: str
    arguments: Any
    result: str | None = None


@dataclass
class ModelTurn:
    """One parsed vendor response."""

    text: str | None = None
    tool_calls: list[ToolInvocation] = field(default_factory=list)
    tokens: int = 0
    # Set when the loop must stop immediately with this user-facing message
    stop_message: str | None = None
    # Vendor-native assistant content, replayed on the next request
    raw: Any = None


@dataclass(frozen=True)
class CompletionResult:
    content: str
    tokens: int
    outcome: LoopOutcome = LoopOutcome.DONE
    iterations: int = 0
