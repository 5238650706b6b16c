import logging
from dataclasses import dataclass

from app.entities.errors import ConfigurationError, RequestValidationError
from app.services.ProviderService.gemini_adapter import GeminiAdapter
from app.services.ProviderService.loop_state import MAX_TOOL_ITERATIONS
from app.services.ProviderService.openai_adapter import OpenAIAdapter
from app.services.ProviderService.provider_adapter_interface import (
    ProviderAdapterInterface,
)
from app.tools.tool_executor import ToolExecutor


@dataclass(frozen=True)
class ProviderCredentials:
    openai_api_key: str = ""
    openai_base_url: str = ""
    gemini_api_key: str = ""
    gemini_base_url: str = ""


class ProviderFactory:
    """Builds a fresh adapter per request; adapters hold no cross-request state."""

    def __init__(
        self,
        credentials: ProviderCredentials,
        tool_executor: ToolExecutor,
        logger: logging.Logger,
        max_iterations: int = MAX_TOOL_ITERATIONS,
    ) -> None:
        if max_iterations < 1:
            raise ConfigurationError("MAX_TOOL_ITERATIONS must be at least 1")
        self.credentials = credentials
        self.tool_executor = tool_executor
        self.logger = logger
        self.max_iterations = max_iterations

    def create(
        self, provider: str, model: str, temperature: float
    ) -> ProviderAdapterInterface:
        if provider == "OpenAI":
            if not self.credentials.openai_api_key:
                raise ConfigurationError("OPENAI_API_KEY not configured")
            return OpenAIAdapter(
                api_key=self.credentials.openai_api_key,
                model=model,
                temperature=temperature,
                tool_executor=self.tool_executor,
                logger=self.logger,
                base_url=self.credentials.openai_base_url or None,
                max_iterations=self.max_iterations,
            )

        if provider == "Gemini":
            if not self.credentials.gemini_api_key:
                raise ConfigurationError("GEMINI_API_KEY not configured")
            return GeminiAdapter(
                api_key=self.credentials.gemini_api_key,
                model=model,
                temperature=temperature,
                tool_executor=self.tool_executor,
                logger=self.logger,
                base_url=self.credentials.gemini_base_url or None,
                max_iterations=self.max_iterations,
            )

        raise RequestValidationError(f"Unsupported provider: {provider}")
