from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class StoredFile:
    data: bytes
    file_name: str
    mime_type: str | None = None


class StorageServiceInterface(ABC):
    @abstractmethod
    def is_storage_reference(self, reference: str) -> bool:
        """Return True when the reference points into one of the storage origins."""

    @abstractmethod
    async def fetch(self, reference: str) -> StoredFile:
        """Read the bytes behind a storage reference. Raises StorageError."""
