from typing import Any, Literal, NotRequired, TypedDict


AttachmentStrategy = Literal["inline-media", "text-extracted"]


class Attachment(TypedDict):
    """File resolved from a message reference, either inlined or extracted."""

    source_reference: str
    file_name: str
    mime_type: str
    strategy: AttachmentStrategy
    base64: NotRequired[str]
    text: NotRequired[str]
    size_bytes: int


class MessagePayload(TypedDict):
    """Conversation message handed to the provider adapters."""

    role: Literal["system", "user", "assistant", "tool"]
    content: str
    attachments: NotRequired[list[Attachment]]
    tool_call_id: NotRequired[str]
    # Vendor tool-call metadata on assistant turns, passed through untouched
    tool_calls: NotRequired[list[dict[str, Any]]]
