from abc import ABC, abstractmethod

from app.entities.message import MessagePayload


class AttachmentResolverInterface(ABC):
    @abstractmethod
    async def resolve(self, message: MessagePayload, provider: str) -> MessagePayload:
        """
        Return the message enriched with the files it references.

        The input message is never mutated. When it contains no file
        references the very same object is returned.
        """
