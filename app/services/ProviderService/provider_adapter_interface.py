from abc import ABC, abstractmethod

from app.entities.message import MessagePayload
from app.services.ProviderService.loop_state import CompletionResult


class ProviderAdapterInterface(ABC):
    provider_name: str = ""

    @abstractmethod
    async def run(
        self, messages: list[MessagePayload], system_instruction: str
    ) -> CompletionResult:
        """
        Drive the tool-calling loop until the model answers in plain text or
        the iteration budget is spent.

        Raises:
            ProviderError: When the vendor completion call fails.
        """
