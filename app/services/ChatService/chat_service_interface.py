from abc import ABC, abstractmethod

from app.entities.chat import ChatRequest, ChatResponse


class ChatServiceInterface(ABC):
    @abstractmethod
    async def handle(
        self, request: ChatRequest, user_id: str, tenant_id: str | None = None
    ) -> ChatResponse:
        """
        Answer one chat request.

        Raises:
            RequestValidationError: Malformed request or unknown provider/mode.
            ConfigurationError: Missing API key for the selected provider.
            ProviderError: The vendor completion call failed.
        """
