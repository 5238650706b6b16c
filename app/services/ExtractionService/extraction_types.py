from dataclasses import dataclass, field
from typing import Any

TRUNCATION_MARKER = "... (Text gekürzt)"


@dataclass(frozen=True)
class ExtractOptions:
    max_characters: int | None = None
    include_page_numbers: bool = False
    # Skip the offline parser and go straight to multimodal extraction
    use_gemini: bool = False


@dataclass
class ExtractionResult:
    text: str
    extraction_method: str
    metadata: dict[str, Any] = field(default_factory=dict)
    pages: list[str] = field(default_factory=list)
    page_count: int = 0
    # True when ``text`` is a [SYSTEM INFO: ...] notice instead of document text
    is_info: bool = False


def apply_character_cap(text: str, max_characters: int | None) -> str:
    if max_characters and len(text) > max_characters:
        return text[:max_characters] + TRUNCATION_MARKER
    return text
