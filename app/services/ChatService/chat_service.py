"""
Chat request orchestration.

Validates the request, looks up the configured model, enriches user messages
with their attachments, assembles the system instruction and runs the
provider's tool-calling loop. Usage is logged in the background.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from typing import Any

from langfuse import observe

from app.entities.chat import (
    SUPPORTED_PROVIDERS,
    ChatRequest,
    ChatResponse,
    CompanyContext,
    ProjectContext,
)
from app.entities.errors import RequestValidationError
from app.entities.message import MessagePayload
from app.repositories.chat_repository.chat_repository_interface import (
    ChatRepositoryInterface,
)
from app.repositories.usage_repository.usage_repository_interface import (
    UsageRepositoryInterface,
)
from app.services.AttachmentService.attachment_resolver_interface import (
    AttachmentResolverInterface,
)
from app.services.ChatService.chat_service_interface import ChatServiceInterface
from app.services.ContextService.context_assembler_interface import (
    ContextAssemblerInterface,
)
from app.services.ProviderService.provider_factory import ProviderFactory

VALID_ROLES = frozenset({"system", "user", "assistant", "tool"})
MAX_TEMPERATURE = 2.0


def parse_request(payload: Any) -> ChatRequest:
    """Decode a JSON body into a ``ChatRequest``, raising on malformed input."""
    if not isinstance(payload, Mapping):
        raise RequestValidationError("Request body must be a JSON object")

    messages = payload.get("messages")
    if not isinstance(messages, list) or not messages:
        raise RequestValidationError("'messages' must be a non-empty list")
    for index, msg in enumerate(messages):
        if not isinstance(msg, Mapping):
            raise RequestValidationError(f"messages[{index}] must be an object")
        if msg.get("role") not in VALID_ROLES:
            raise RequestValidationError(f"messages[{index}] has an invalid role")
        if not isinstance(msg.get("content", ""), str):
            raise RequestValidationError(f"messages[{index}].content must be a string")

    provider = payload.get("provider")
    if provider not in SUPPORTED_PROVIDERS:
        raise RequestValidationError(
            f"'provider' must be one of {', '.join(SUPPORTED_PROVIDERS)}"
        )

    mode = payload.get("mode")
    if not isinstance(mode, str) or not mode.strip():
        raise RequestValidationError("'mode' must be a non-empty string")

    temperature = payload.get("temperature", 0.7)
    if isinstance(temperature, bool) or not isinstance(temperature, (int, float)):
        raise RequestValidationError("'temperature' must be a number")
    if not 0 <= temperature <= MAX_TEMPERATURE:
        raise RequestValidationError(
            f"'temperature' must be between 0 and {MAX_TEMPERATURE:g}"
        )

    chat_id = payload.get("chatId")
    system_prompt = payload.get("systemPrompt")
    return ChatRequest(
        messages=[dict(m) for m in messages],  # type: ignore[misc]
        provider=provider,
        mode=mode.strip(),
        temperature=float(temperature),
        chat_id=chat_id if isinstance(chat_id, str) and chat_id else None,
        system_prompt=system_prompt if isinstance(system_prompt, str) else None,
    )


class ChatService(ChatServiceInterface):
    def __init__(
        self,
        chat_repository: ChatRepositoryInterface,
        usage_repository: UsageRepositoryInterface,
        attachment_resolver: AttachmentResolverInterface,
        context_assembler: ContextAssemblerInterface,
        provider_factory: ProviderFactory,
        logger: logging.Logger,
    ) -> None:
        self.chat_repository = chat_repository
        self.usage_repository = usage_repository
        self.attachment_resolver = attachment_resolver
        self.context_assembler = context_assembler
        self.provider_factory = provider_factory
        self.logger = logger
        self._background_tasks: set[asyncio.Task] = set()

    @observe()
    async def handle(
        self, request: ChatRequest, user_id: str, tenant_id: str | None = None
    ) -> ChatResponse:
        self._validate(request)

        model_config = self.chat_repository.get_model_config(
            request.provider, request.mode
        )
        if model_config is None:
            raise RequestValidationError(
                f"No model configured for {request.provider} in mode '{request.mode}'"
            )
        model = model_config["model_id"]

        # Fails fast on a missing API key, before any attachment is fetched
        adapter = self.provider_factory.create(
            request.provider, model, request.temperature
        )

        project = self._load_project(request.chat_id)
        company = self._load_company(tenant_id)

        messages: list[MessagePayload] = []
        for message in request.messages:
            messages.append(
                await self.attachment_resolver.resolve(message, request.provider)
            )

        system_instruction = self.context_assembler.build_system_instruction(
            temperature=request.temperature,
            custom_persona=request.system_prompt,
            project=project,
            company=company,
        )

        self.logger.info(
            "Running %s/%s (mode=%s, messages=%d, project=%s)",
            request.provider,
            model,
            request.mode,
            len(messages),
            project.project["id"] if project else None,
        )
        result = await adapter.run(messages, system_instruction)
        self.logger.info(
            "%s finished with outcome %s after %d tool round(s), %d tokens",
            request.provider,
            result.outcome.value,
            result.iterations,
            result.tokens,
        )

        self._schedule_usage_log(
            user_id, tenant_id or "", request.provider, model, result.tokens
        )
        return ChatResponse(message=result.content, tokens=result.tokens)

    @staticmethod
    def _validate(request: ChatRequest) -> None:
        if not request.messages:
            raise RequestValidationError("'messages' must be a non-empty list")
        if request.provider not in SUPPORTED_PROVIDERS:
            raise RequestValidationError(f"Unsupported provider: {request.provider}")
        if not request.mode:
            raise RequestValidationError("'mode' must be a non-empty string")
        if not 0 <= request.temperature <= MAX_TEMPERATURE:
            raise RequestValidationError(
                f"'temperature' must be between 0 and {MAX_TEMPERATURE:g}"
            )

    def _load_project(self, chat_id: str | None) -> ProjectContext | None:
        if not chat_id:
            return None

        chat = self.chat_repository.get_chat(chat_id)
        if chat is None or not chat["project_id"]:
            return None

        project = self.chat_repository.get_project(chat["project_id"])
        if project is None:
            self.logger.warning(
                "Chat %s references missing project %s", chat_id, chat["project_id"]
            )
            return None

        documents = self.chat_repository.get_project_documents(project["id"])
        return ProjectContext(project=project, documents=documents)

    def _load_company(self, tenant_id: str | None) -> CompanyContext | None:
        if not tenant_id:
            return None
        return self.chat_repository.get_company_context(tenant_id)

    def _schedule_usage_log(
        self, user_id: str, tenant_id: str, provider: str, model: str, tokens: int
    ) -> None:
        task = asyncio.create_task(
            self._log_usage(user_id, tenant_id, provider, model, tokens)
        )
        self._background_tasks.add(task)
        task.add_done_callback(self._background_tasks.discard)

    async def _log_usage(
        self, user_id: str, tenant_id: str, provider: str, model: str, tokens: int
    ) -> None:
        try:
            await asyncio.to_thread(
                self.usage_repository.log_usage,
                user_id,
                tenant_id,
                provider,
                model,
                tokens,
            )
        except Exception as e:
            self.logger.error("Failed to log usage for %s: %s", user_id, e, exc_info=True)
