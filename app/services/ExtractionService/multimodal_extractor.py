"""
Multimodal text extraction through Gemini.

Shared by the PDF engine and the DOCX/DOC fallback path: the document bytes
are sent inline together with an extraction prompt and the model returns the
text it reads. The extractor only talks to the API; truncation and empty-result
handling belong to the engines.
"""

from __future__ import annotations

import logging

from google import genai
from google.genai import errors, types

from app.entities.errors import ConfigurationError, ExtractionError

DEFAULT_EXTRACTION_MODEL = "gemini-2.0-flash"


class GeminiExtractor:
    def __init__(
        self,
        api_key: str | None,
        logger: logging.Logger,
        model_name: str = DEFAULT_EXTRACTION_MODEL,
        client: genai.Client | None = None,
    ) -> None:
        self.api_key = api_key
        self.logger = logger
        self.model_name = model_name
        self._client = client

    @property
    def client(self) -> genai.Client:
        if self._client is None:
            if not self.api_key:
                raise ConfigurationError("GEMINI_API_KEY not configured")
            self._client = genai.Client(api_key=self.api_key)
        return self._client

    async def extract_text(
        self, data: bytes, mime_type: str, prompt: str
    ) -> str | None:
        """
        Ask the model to transcribe the document.

        Returns:
            The joined text parts of the first candidate (possibly empty), or
            None when the response carries no candidates at all.

        Raises:
            ExtractionError: On any API or transport failure.
        """
        contents = [
            types.Content(
                role="user",
                parts=[
                    types.Part.from_text(text=prompt),
                    types.Part.from_bytes(data=data, mime_type=mime_type),
                ],
            )
        ]
        client = self.client

        try:
            response = await client.aio.models.generate_content(
                model=self.model_name,
                contents=contents,
            )
        except errors.APIError as e:
            self.logger.error("Gemini extraction failed (%s): %s", e.code, e)
            raise ExtractionError(f"Gemini API failed: {e.code}") from e
        except Exception as e:
            self.logger.error("Gemini extraction failed: %s", e, exc_info=True)
            raise ExtractionError(f"Gemini extraction failed: {e}") from e

        if not response.candidates:
            self.logger.warning("Gemini returned no candidates for %s", mime_type)
            return None

        content = response.candidates[0].content
        parts = content.parts if content and content.parts else []
        return "\n".join(part.text for part in parts if part.text).strip()
