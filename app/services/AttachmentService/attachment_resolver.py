"""
Attachment resolution for chat messages.

Markdown file references inside a user message are fetched from storage and
turned into something the destination provider can consume:

- images are always inlined as base64 and their link is removed from the text
- PDF and Word files are inlined for providers that read documents natively
  (Gemini), otherwise their extracted text is appended to the message body

Each reference is handled in isolation: a failing fetch or extraction turns
into a ``[SYSTEM FEHLER: ...]`` note for that file only.
"""

from __future__ import annotations

import asyncio
import base64
import logging
import re
from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import Literal
from urllib.parse import unquote, urlparse

from langfuse import observe

from app.entities.message import Attachment, MessagePayload
from app.services.AttachmentService.attachment_resolver_interface import (
    AttachmentResolverInterface,
)
from app.services.ExtractionService.docx_engine import (
    DOC_MIME_TYPE,
    DOCX_MIME_TYPE,
    DocxEngine,
)
from app.services.ExtractionService.extraction_types import ExtractOptions
from app.services.ExtractionService.pdf_engine import PDF_MIME_TYPE, PdfEngine
from app.services.StorageService.storage_service_interface import (
    StorageServiceInterface,
    StoredFile,
)

FileKind = Literal["image", "pdf", "word"]

REFERENCE_PATTERN = re.compile(r"(!?)\[([^\]]*)\]\(([^)\s]+)\)")

IMAGE_MIME_TYPES: dict[str, str] = {
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".gif": "image/gif",
    ".webp": "image/webp",
}
DOCUMENT_MIME_TYPES: dict[str, str] = {
    ".pdf": PDF_MIME_TYPE,
    ".docx": DOCX_MIME_TYPE,
    ".doc": DOC_MIME_TYPE,
}

# Providers that accept PDF/Word bytes as inline media
NATIVE_DOCUMENT_PROVIDERS = frozenset({"Gemini"})

DEFAULT_MAX_CHARACTERS = 50_000


@dataclass(frozen=True)
class FileReference:
    markdown: str
    label: str
    target: str
    is_image_link: bool

    @property
    def path(self) -> str:
        return unquote(urlparse(self.target).path)

    @property
    def display_name(self) -> str:
        return PurePosixPath(self.path).name or self.label or self.target


@dataclass
class _Resolution:
    reference: FileReference
    attachment: Attachment | None = None
    note: str | None = None
    strip_link: bool = False


def find_references(content: str) -> list[FileReference]:
    """All markdown links in order of appearance, duplicates removed."""
    seen: set[str] = set()
    references: list[FileReference] = []
    for match in REFERENCE_PATTERN.finditer(content):
        bang, label, target = match.groups()
        if target in seen:
            continue
        seen.add(target)
        references.append(
            FileReference(
                markdown=match.group(0),
                label=label,
                target=target,
                is_image_link=bang == "!",
            )
        )
    return references


def classify(file_name: str, mime_type: str | None = None) -> FileKind | None:
    suffix = PurePosixPath(file_name.lower()).suffix
    if suffix in IMAGE_MIME_TYPES:
        return "image"
    if suffix == ".pdf":
        return "pdf"
    if suffix in (".docx", ".doc"):
        return "word"

    if mime_type:
        if mime_type.startswith("image/"):
            return "image"
        if mime_type == PDF_MIME_TYPE:
            return "pdf"
        if mime_type in (DOC_MIME_TYPE, DOCX_MIME_TYPE):
            return "word"
    return None


def mime_type_for(file_name: str, kind: FileKind, stored: str | None) -> str:
    suffix = PurePosixPath(file_name.lower()).suffix
    if kind == "image":
        return IMAGE_MIME_TYPES.get(suffix) or stored or "image/jpeg"
    return DOCUMENT_MIME_TYPES.get(suffix) or stored or PDF_MIME_TYPE


class AttachmentResolver(AttachmentResolverInterface):
    def __init__(
        self,
        storage: StorageServiceInterface,
        pdf_engine: PdfEngine,
        docx_engine: DocxEngine,
        logger: logging.Logger,
        max_characters: int = DEFAULT_MAX_CHARACTERS,
    ) -> None:
        self.storage = storage
        self.pdf_engine = pdf_engine
        self.docx_engine = docx_engine
        self.logger = logger
        self.max_characters = max_characters

    @observe()
    async def resolve(self, message: MessagePayload, provider: str) -> MessagePayload:
        if message.get("role") != "user":
            return message

        content = message.get("content") or ""
        references = [
            ref
            for ref in find_references(content)
            if self.storage.is_storage_reference(ref.target)
        ]
        if not references:
            return message

        resolutions = await asyncio.gather(
            *(self._resolve_reference(ref, provider) for ref in references)
        )
        return self._merge(message, content, list(resolutions))

    async def _resolve_reference(
        self, reference: FileReference, provider: str
    ) -> _Resolution:
        kind = classify(reference.path)
        if kind is None and PurePosixPath(reference.path).suffix:
            # Known extension we do not handle
            return _Resolution(reference=reference)

        try:
            stored = await self.storage.fetch(reference.target)
            kind = kind or classify(stored.file_name, stored.mime_type)
            if kind is None:
                return _Resolution(reference=reference)

            if kind == "image":
                return self._inline(reference, stored, kind, strip_link=True)

            if provider in NATIVE_DOCUMENT_PROVIDERS:
                resolution = self._inline(reference, stored, kind, strip_link=False)
                resolution.note = f"[Analysiere angehängte Datei: {stored.file_name}]"
                return resolution

            return await self._extract(reference, stored, kind)

        except Exception as e:
            self.logger.warning(
                "Failed to process attachment %s: %s", reference.target, e
            )
            return _Resolution(
                reference=reference,
                note=(
                    f"[SYSTEM FEHLER: Datei '{reference.display_name}' konnte nicht "
                    f"verarbeitet werden: {e}]"
                ),
            )

    def _inline(
        self,
        reference: FileReference,
        stored: StoredFile,
        kind: FileKind,
        strip_link: bool,
    ) -> _Resolution:
        attachment: Attachment = {
            "source_reference": reference.target,
            "file_name": stored.file_name,
            "mime_type": mime_type_for(stored.file_name, kind, stored.mime_type),
            "strategy": "inline-media",
            "base64": base64.b64encode(stored.data).decode("ascii"),
            "size_bytes": len(stored.data),
        }
        return _Resolution(
            reference=reference, attachment=attachment, strip_link=strip_link
        )

    async def _extract(
        self, reference: FileReference, stored: StoredFile, kind: FileKind
    ) -> _Resolution:
        options = ExtractOptions(max_characters=self.max_characters)
        if kind == "pdf":
            result = await self.pdf_engine.extract(stored.data, options)
        else:
            result = await self.docx_engine.extract(
                stored.data,
                stored.file_name,
                options,
                mime_type=mime_type_for(stored.file_name, kind, stored.mime_type),
            )

        self.logger.info(
            "Extracted %d characters from %s via %s",
            len(result.text),
            stored.file_name,
            result.extraction_method,
        )
        attachment: Attachment = {
            "source_reference": reference.target,
            "file_name": stored.file_name,
            "mime_type": mime_type_for(stored.file_name, kind, stored.mime_type),
            "strategy": "text-extracted",
            "text": result.text,
            "size_bytes": len(stored.data),
        }
        note = (
            f"--- INHALT DATEI '{stored.file_name}' ---\n"
            f"{result.text}\n"
            "--- ENDE DATEI INHALT ---"
        )
        return _Resolution(reference=reference, attachment=attachment, note=note)

    @staticmethod
    def _merge(
        message: MessagePayload, content: str, resolutions: list[_Resolution]
    ) -> MessagePayload:
        stripped = {r.reference.target for r in resolutions if r.strip_link}
        text = REFERENCE_PATTERN.sub(
            lambda match: "" if match.group(3) in stripped else match.group(0), content
        )
        text = re.sub(r"[ \t]+\n", "\n", text).strip()

        notes = [r.note for r in resolutions if r.note]
        if notes:
            text = "\n\n".join([text, *notes]) if text else "\n\n".join(notes)

        attachments = list(message.get("attachments") or [])
        attachments.extend(r.attachment for r in resolutions if r.attachment)

        enriched: MessagePayload = {**message, "content": text}
        enriched["attachments"] = attachments
        return enriched
