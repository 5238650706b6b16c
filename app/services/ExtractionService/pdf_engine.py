"""PDF text extraction through the multimodal extractor."""

import logging
import re

from app.services.ExtractionService.extraction_types import (
    ExtractOptions,
    ExtractionResult,
    apply_character_cap,
)
from app.services.ExtractionService.multimodal_extractor import GeminiExtractor

PDF_MIME_TYPE = "application/pdf"

PAGE_MARKER_PATTERN = re.compile(r"--- Seite \d+ ---")

PROMPT_WITH_PAGES = (
    "Extrahiere den gesamten Text aus diesem PDF-Dokument. "
    "Gib die Seitennummern an (Format: '--- Seite X ---'). "
    "Bewahre die Struktur und Formatierung soweit möglich. "
    "Gib NUR den extrahierten Text zurück, keine zusätzlichen Kommentare."
)
PROMPT_PLAIN = (
    "Extrahiere den gesamten Text aus diesem PDF-Dokument. "
    "Bewahre die Struktur und Formatierung soweit möglich. "
    "Gib NUR den extrahierten Text zurück, keine zusätzlichen Kommentare."
)

NO_CANDIDATES_TEXT = (
    "[SYSTEM INFO: PDF konnte nicht analysiert werden. Bitte versuchen Sie es "
    "erneut oder kontaktieren Sie den Support.]"
)
EMPTY_TEXT = "[SYSTEM INFO: Diese PDF enthält keinen auslesbaren Text oder ist leer.]"


def split_pages(text: str) -> tuple[list[str], int]:
    """Split text on ``--- Seite N ---`` markers into (pages, page_count)."""
    markers = PAGE_MARKER_PATTERN.findall(text)
    if not markers:
        return [text], 1
    chunks = PAGE_MARKER_PATTERN.split(text)[1:]
    return [chunk.strip() for chunk in chunks], len(markers)


class PdfEngine:
    def __init__(self, extractor: GeminiExtractor, logger: logging.Logger) -> None:
        self.extractor = extractor
        self.logger = logger

    async def extract(
        self, data: bytes, options: ExtractOptions | None = None
    ) -> ExtractionResult:
        options = options or ExtractOptions()
        prompt = PROMPT_WITH_PAGES if options.include_page_numbers else PROMPT_PLAIN

        text = await self.extractor.extract_text(data, PDF_MIME_TYPE, prompt)

        if text is None:
            return ExtractionResult(
                text=NO_CANDIDATES_TEXT, extraction_method="gemini", is_info=True
            )
        if not text:
            return ExtractionResult(
                text=EMPTY_TEXT, extraction_method="gemini", is_info=True
            )

        text = apply_character_cap(text, options.max_characters)
        pages, page_count = split_pages(text)

        self.logger.info(
            "Extracted %d characters from PDF (%d pages)", len(text), page_count
        )
        return ExtractionResult(
            text=text,
            extraction_method="gemini",
            metadata={"extracted_by": self.extractor.model_name},
            pages=pages,
            page_count=page_count,
        )
