"""
Word document extraction.

``.docx`` files are parsed offline with python-docx. Legacy ``.doc`` files,
and ``.docx`` files python-docx cannot open, go through the multimodal
extractor instead.
"""

import asyncio
import logging
from io import BytesIO

from docx import Document

from app.services.ExtractionService.extraction_types import (
    ExtractOptions,
    ExtractionResult,
    apply_character_cap,
)
from app.services.ExtractionService.multimodal_extractor import GeminiExtractor

DOC_MIME_TYPE = "application/msword"
DOCX_MIME_TYPE = (
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
)

GEMINI_PROMPT = (
    "Extrahiere den gesamten Text aus diesem Word-Dokument. Bewahre die Struktur "
    "und Formatierung soweit möglich (z.B. Absätze, Listen, Überschriften). "
    "Gib NUR den extrahierten Text zurück, keine zusätzlichen Kommentare."
)

NO_CANDIDATES_TEXT = (
    "[SYSTEM INFO: Word-Dokument konnte nicht analysiert werden. Bitte versuchen "
    "Sie es erneut oder kontaktieren Sie den Support.]"
)
EMPTY_TEXT = (
    "[SYSTEM INFO: Dieses Word-Dokument enthält keinen auslesbaren Text oder ist leer.]"
)


def parse_docx(data: bytes) -> str:
    """Paragraph text followed by pipe-delimited table rows."""
    document = Document(BytesIO(data))
    lines = [paragraph.text for paragraph in document.paragraphs if paragraph.text]
    for table in document.tables:
        for row in table.rows:
            cells = [cell.text.strip() for cell in row.cells]
            if any(cells):
                lines.append(" | ".join(cells))
    return "\n".join(lines).strip()


class DocxEngine:
    def __init__(self, extractor: GeminiExtractor, logger: logging.Logger) -> None:
        self.extractor = extractor
        self.logger = logger

    async def extract(
        self,
        data: bytes,
        file_name: str,
        options: ExtractOptions | None = None,
        mime_type: str | None = None,
    ) -> ExtractionResult:
        options = options or ExtractOptions()
        legacy = file_name.lower().endswith(".doc") or mime_type == DOC_MIME_TYPE
        extension = "doc" if legacy else "docx"

        if extension == "docx" and not options.use_gemini:
            try:
                text = await asyncio.to_thread(parse_docx, data)
            except Exception as e:
                self.logger.warning(
                    "python-docx could not parse %s, falling back to Gemini: %s",
                    file_name,
                    e,
                )
            else:
                if not text:
                    return ExtractionResult(
                        text=EMPTY_TEXT, extraction_method="python-docx", is_info=True
                    )
                return ExtractionResult(
                    text=apply_character_cap(text, options.max_characters),
                    extraction_method="python-docx",
                    metadata={"extracted_by": "python-docx"},
                )

        return await self._extract_with_gemini(data, extension, options)

    async def _extract_with_gemini(
        self, data: bytes, extension: str, options: ExtractOptions
    ) -> ExtractionResult:
        mime_type = DOC_MIME_TYPE if extension == "doc" else DOCX_MIME_TYPE
        text = await self.extractor.extract_text(data, mime_type, GEMINI_PROMPT)

        if text is None:
            return ExtractionResult(
                text=NO_CANDIDATES_TEXT, extraction_method="gemini", is_info=True
            )
        if not text:
            return ExtractionResult(
                text=EMPTY_TEXT, extraction_method="gemini", is_info=True
            )

        return ExtractionResult(
            text=apply_character_cap(text, options.max_characters),
            extraction_method="gemini",
            metadata={"extracted_by": self.extractor.model_name},
        )
