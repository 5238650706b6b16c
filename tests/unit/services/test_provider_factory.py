import logging
from unittest.mock import MagicMock

import pytest

from app.entities.errors import ConfigurationError, RequestValidationError
from app.services.ProviderService.gemini_adapter import GeminiAdapter
from app.services.ProviderService.loop_state import TurnBudget, UsageAccumulator
from app.services.ProviderService.openai_adapter import OpenAIAdapter
from app.services.ProviderService.provider_factory import (
    ProviderCredentials,
    ProviderFactory,
)
from app.tools.tool_executor import ToolExecutor

LOGGER = logging.getLogger("test.provider_factory")


@pytest.fixture
def factory():
    return ProviderFactory(
        ProviderCredentials(openai_api_key="sk-test", gemini_api_key="g-test"),
        MagicMock(spec=ToolExecutor),
        LOGGER,
    )


def test_creates_fresh_openai_adapter(factory) -> None:
    first = factory.create("OpenAI", "gpt-4o", 0.2)
    second = factory.create("OpenAI", "gpt-4o", 0.9)

    assert isinstance(first, OpenAIAdapter)
    assert first is not second
    assert first.temperature == 0.2
    assert second.temperature == 0.9


def test_creates_gemini_adapter(factory) -> None:
    adapter = factory.create("Gemini", "gemini-2.0-flash", 0.5)

    assert isinstance(adapter, GeminiAdapter)
    assert adapter.max_iterations == 3


@pytest.mark.parametrize("provider", ["OpenAI", "Gemini"])
def test_missing_key(provider) -> None:
    factory = ProviderFactory(ProviderCredentials(), MagicMock(spec=ToolExecutor), LOGGER)

    with pytest.raises(ConfigurationError):
        factory.create(provider, "model", 0.5)


def test_unknown_provider(factory) -> None:
    with pytest.raises(RequestValidationError):
        factory.create("Claude", "model", 0.5)


def test_turn_budget_never_exceeds_ceiling() -> None:
    budget = TurnBudget(ceiling=2)
    budget.consume()
    budget.consume()

    assert budget.exhausted
    with pytest.raises(RuntimeError):
        budget.consume()
    assert budget.used == 2


def test_usage_accumulator_clamps() -> None:
    usage = UsageAccumulator()
    usage.add(10)
    usage.add(None)
    usage.add(-3)

    assert usage.total == 10


@pytest.mark.parametrize("max_iterations", [0, -1])
def test_rejects_iteration_ceiling_below_one(max_iterations) -> None:
    with pytest.raises(ConfigurationError, match="MAX_TOOL_ITERATIONS"):
        ProviderFactory(
            ProviderCredentials(openai_api_key="sk-test"),
            MagicMock(spec=ToolExecutor),
            LOGGER,
            max_iterations=max_iterations,
        )


def test_single_iteration_ceiling_accepted() -> None:
    factory = ProviderFactory(
        ProviderCredentials(openai_api_key="sk-test"),
        MagicMock(spec=ToolExecutor),
        LOGGER,
        max_iterations=1,
    )

    assert factory.create("OpenAI", "gpt-4o", 0.5).max_iterations == 1
