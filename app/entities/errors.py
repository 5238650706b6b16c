class ChatError(Exception):
    """Base error for the chat orchestration core."""


class ConfigurationError(ChatError):
    """Raised when a required setting (usually an API key) is missing."""


class RequestValidationError(ChatError):
    """Raised when an inbound chat request is malformed."""


class ProviderError(ChatError):
    def __init__(
        self, provider: str, message: str, status_code: int | None = None
    ) -> None:
        self.provider = provider
        self.status_code = status_code
        super().__init__(f"{provider} request failed: {message}")


class ExtractionError(ChatError):
    """Raised when the extraction service cannot be reached or fails."""


class StorageError(ChatError):
    """Raised when a file reference cannot be resolved to bytes."""
