"""
Unit tests for GeminiAdapter using real google.genai response types.
"""

import base64
import logging
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from google.genai import errors, types

from app.entities.errors import ProviderError
from app.services.ProviderService.gemini_adapter import (
    EMPTY_RESPONSE_TEXT,
    NO_CANDIDATES_TEXT,
    SAFETY_BLOCKED_TEXT,
    GeminiAdapter,
    supports_tools,
)
from app.services.ProviderService.loop_state import LoopOutcome
from app.tools.tool_executor import ToolExecutor

LOGGER = logging.getLogger("test.gemini_adapter")


def _usage(tokens):
    return types.GenerateContentResponseUsageMetadata(total_token_count=tokens)


def _text_response(*texts: str, tokens: int = 10) -> types.GenerateContentResponse:
    return types.GenerateContentResponse(
        candidates=[
            types.Candidate(
                content=types.Content(
                    role="model", parts=[types.Part(text=t) for t in texts]
                ),
                finish_reason=types.FinishReason.STOP,
            )
        ],
        usage_metadata=_usage(tokens),
    )


def _call_response(name: str = "search_web", query: str = "wetter", tokens: int = 4):
    return types.GenerateContentResponse(
        candidates=[
            types.Candidate(
                content=types.Content(
                    role="model",
                    parts=[
                        types.Part(
                            function_call=types.FunctionCall(
                                name=name, args={"query": query}
                            )
                        )
                    ],
                )
            )
        ],
        usage_metadata=_usage(tokens),
    )


def _client(*responses):
    generate = AsyncMock(side_effect=list(responses))
    client = SimpleNamespace(
        aio=SimpleNamespace(models=SimpleNamespace(generate_content=generate))
    )
    return client, generate


@pytest.fixture
def executor():
    mock = MagicMock(spec=ToolExecutor)
    mock.knows.side_effect = lambda name: name == "search_web"
    mock.execute = AsyncMock(return_value="Suchergebnis")
    return mock


def _adapter(client, executor, model: str = "gemini-2.0-flash") -> GeminiAdapter:
    return GeminiAdapter(
        api_key=None,
        model=model,
        temperature=0.5,
        tool_executor=executor,
        logger=LOGGER,
        client=client,
    )


def test_supports_tools() -> None:
    assert supports_tools("gemini-2.5-pro")
    assert not supports_tools("gemini-2.0-flash-Thinking-exp")


@pytest.mark.asyncio
async def test_plain_answer(executor) -> None:
    client, generate = _client(_text_response("Hallo", " Welt", tokens=12))
    adapter = _adapter(client, executor)

    result = await adapter.run(
        [
            {"role": "system", "content": "Kontext"},
            {"role": "user", "content": "Hi"},
            {"role": "assistant", "content": "Hallo"},
            {"role": "user", "content": "Wie geht's?"},
        ],
        "SYSTEM",
    )

    assert result.content == "Hallo Welt"
    assert result.tokens == 12
    assert result.outcome == LoopOutcome.DONE

    kwargs = generate.call_args.kwargs
    assert [c.role for c in kwargs["contents"]] == ["user", "user", "model", "user"]
    config = kwargs["config"]
    assert config.system_instruction == "SYSTEM"
    assert config.temperature == 0.5
    declaration = config.tools[0].function_declarations[0]
    assert declaration.name == "search_web"
    assert declaration.parameters.required == ["query"]


@pytest.mark.asyncio
async def test_system_turns_sent_as_user_and_empty_turns_skipped(executor) -> None:
    client, generate = _client(_text_response("ok"))
    adapter = _adapter(client, executor)

    await adapter.run(
        [
            {"role": "system", "content": "Antworte knapp."},
            {"role": "user", "content": ""},
            {"role": "user", "content": "Frage"},
        ],
        "SYSTEM",
    )

    contents = generate.call_args.kwargs["contents"]
    assert [c.role for c in contents] == ["user", "user"]
    assert contents[0].parts[0].text == "Antworte knapp."
    assert contents[1].parts[0].text == "Frage"


@pytest.mark.asyncio
async def test_thinking_model_gets_no_tools(executor) -> None:
    client, generate = _client(_text_response("ok"))
    adapter = _adapter(client, executor, model="gemini-2.0-flash-thinking-exp")

    await adapter.run([{"role": "user", "content": "x"}], "SYSTEM")

    assert generate.call_args.kwargs["config"].tools is None


@pytest.mark.asyncio
async def test_inline_attachment_becomes_bytes_part(executor) -> None:
    client, generate = _client(_text_response("Ein PDF"))
    adapter = _adapter(client, executor)
    message = {
        "role": "user",
        "content": "Lies das",
        "attachments": [
            {
                "source_reference": "/api/file/a.pdf",
                "file_name": "a.pdf",
                "mime_type": "application/pdf",
                "strategy": "inline-media",
                "base64": base64.b64encode(b"%PDF").decode("ascii"),
                "size_bytes": 4,
            }
        ],
    }

    await adapter.run([message], "SYSTEM")

    parts = generate.call_args.kwargs["contents"][0].parts
    assert parts[0].text == "Lies das"
    assert parts[1].inline_data.data == b"%PDF"
    assert parts[1].inline_data.mime_type == "application/pdf"


@pytest.mark.asyncio
async def test_function_call_round(executor) -> None:
    client, generate = _client(_call_response(tokens=4), _text_response("Sonnig", tokens=6))
    adapter = _adapter(client, executor)

    result = await adapter.run([{"role": "user", "content": "Wetter?"}], "SYSTEM")

    assert result.content == "Sonnig"
    assert result.tokens == 10
    assert result.iterations == 1
    executor.execute.assert_awaited_once_with("search_web", {"query": "wetter"})

    contents = generate.call_args_list[1].kwargs["contents"]
    assert contents[1].role == "model"
    assert contents[1].parts[0].function_call.name == "search_web"
    response_part = contents[2].parts[0].function_response
    assert contents[2].role == "user"
    assert response_part.name == "search_web"
    assert response_part.response == {"result": "Suchergebnis"}


@pytest.mark.asyncio
async def test_iteration_ceiling(executor) -> None:
    client, generate = _client(*[_call_response(tokens=1) for _ in range(4)])
    adapter = _adapter(client, executor)

    result = await adapter.run([{"role": "user", "content": "x"}], "SYSTEM")

    assert generate.await_count == 3
    assert result.outcome == LoopOutcome.BUDGET_EXHAUSTED
    assert result.content == "Suchergebnis"
    assert result.tokens == 3


@pytest.mark.asyncio
async def test_prompt_blocked(executor) -> None:
    response = types.GenerateContentResponse(
        prompt_feedback=types.GenerateContentResponsePromptFeedback(
            block_reason=types.BlockedReason.SAFETY
        ),
        usage_metadata=_usage(3),
    )
    client, _ = _client(response)
    adapter = _adapter(client, executor)

    result = await adapter.run([{"role": "user", "content": "x"}], "SYSTEM")

    assert result.content == SAFETY_BLOCKED_TEXT
    assert result.outcome == LoopOutcome.BLOCKED
    assert result.tokens == 3


@pytest.mark.asyncio
async def test_safety_finish_reason(executor) -> None:
    response = types.GenerateContentResponse(
        candidates=[types.Candidate(finish_reason=types.FinishReason.SAFETY)]
    )
    client, _ = _client(response)

    result = await _adapter(client, executor).run(
        [{"role": "user", "content": "x"}], "SYSTEM"
    )

    assert result.content == SAFETY_BLOCKED_TEXT
    assert result.outcome == LoopOutcome.BLOCKED


@pytest.mark.asyncio
async def test_no_candidates(executor) -> None:
    client, _ = _client(types.GenerateContentResponse(candidates=[]))

    result = await _adapter(client, executor).run(
        [{"role": "user", "content": "x"}], "SYSTEM"
    )

    assert result.content == NO_CANDIDATES_TEXT
    assert result.outcome == LoopOutcome.BLOCKED
    assert result.tokens == 0


@pytest.mark.asyncio
async def test_empty_parts(executor) -> None:
    response = types.GenerateContentResponse(
        candidates=[types.Candidate(content=types.Content(role="model", parts=[]))]
    )
    client, _ = _client(response)

    result = await _adapter(client, executor).run(
        [{"role": "user", "content": "x"}], "SYSTEM"
    )

    assert result.content == EMPTY_RESPONSE_TEXT


@pytest.mark.asyncio
async def test_unknown_function(executor) -> None:
    client, generate = _client(_call_response(name="delete_all"))

    result = await _adapter(client, executor).run(
        [{"role": "user", "content": "x"}], "SYSTEM"
    )

    assert result.outcome == LoopOutcome.BLOCKED
    assert "delete_all" in result.content
    executor.execute.assert_not_called()
    assert generate.await_count == 1


@pytest.mark.asyncio
async def test_api_error_becomes_provider_error(executor) -> None:
    client, _ = _client(errors.APIError(503, {"error": {"message": "overloaded"}}))

    with pytest.raises(ProviderError) as exc_info:
        await _adapter(client, executor).run(
            [{"role": "user", "content": "x"}], "SYSTEM"
        )

    assert exc_info.value.status_code == 503
    assert exc_info.value.provider == "Gemini"
