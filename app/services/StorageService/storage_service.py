"""
File storage backed by the local filesystem.

Two origins are served behind the same ``fetch`` contract:
- the ephemeral upload area (``/api/file/<path>`` and ``/uploads/<path>``)
- the managed document repository (``/api/documents/<id>``), whose records
  map an id to a stored path and the original file name.
"""

import asyncio
import logging
from pathlib import Path, PurePosixPath
from urllib.parse import unquote, urlparse

from app.entities.errors import StorageError
from app.repositories.document_repository.document_repository_interface import (
    DocumentRepositoryInterface,
)
from app.services.StorageService.storage_service_interface import (
    StorageServiceInterface,
    StoredFile,
)

UPLOAD_PREFIXES: tuple[str, ...] = ("/api/file/", "/uploads/")
DOCUMENT_PREFIX = "/api/documents/"


class LocalStorageService(StorageServiceInterface):
    def __init__(
        self,
        uploads_dir: str,
        documents_dir: str,
        document_repository: DocumentRepositoryInterface,
        logger: logging.Logger,
    ) -> None:
        self.uploads_dir = Path(uploads_dir).resolve()
        self.documents_dir = Path(documents_dir).resolve()
        self.document_repository = document_repository
        self.logger = logger

    @staticmethod
    def _path_of(reference: str) -> str:
        # Accept absolute URLs pointing at our own routes as well
        return unquote(urlparse(reference).path)

    def is_storage_reference(self, reference: str) -> bool:
        path = self._path_of(reference)
        return path.startswith(UPLOAD_PREFIXES) or path.startswith(DOCUMENT_PREFIX)

    async def fetch(self, reference: str) -> StoredFile:
        path = self._path_of(reference)

        if path.startswith(DOCUMENT_PREFIX):
            return await self._fetch_document(path[len(DOCUMENT_PREFIX):])

        for prefix in UPLOAD_PREFIXES:
            if path.startswith(prefix):
                return await self._fetch_upload(path[len(prefix):])

        raise StorageError(f"Unsupported file reference: {reference}")

    async def _fetch_upload(self, relative_path: str) -> StoredFile:
        file_path = self._resolve_inside(self.uploads_dir, relative_path)
        data = await self._read(file_path)
        return StoredFile(data=data, file_name=PurePosixPath(relative_path).name)

    async def _fetch_document(self, document_id: str) -> StoredFile:
        document_id = document_id.strip("/")
        document = self.document_repository.get_document(document_id)
        if document is None:
            raise StorageError(f"Document not found: {document_id}")

        file_path = self._resolve_inside(self.documents_dir, document["storage_path"])
        data = await self._read(file_path)
        return StoredFile(
            data=data,
            file_name=document["filename"],
            mime_type=document["mime_type"],
        )

    @staticmethod
    def _resolve_inside(root: Path, relative_path: str) -> Path:
        candidate = (root / relative_path.lstrip("/")).resolve()
        if not candidate.is_relative_to(root):
            raise StorageError(f"Path escapes storage root: {relative_path}")
        return candidate

    async def _read(self, file_path: Path) -> bytes:
        if not file_path.is_file():
            raise StorageError(f"File not found: {file_path.name}")
        try:
            return await asyncio.to_thread(file_path.read_bytes)
        except OSError as e:
            self.logger.warning("Failed to read %s: %s", file_path, e)
            raise StorageError(f"Could not read {file_path.name}: {e}") from e
