import logging
from unittest.mock import MagicMock

import pytest

from app.entities.errors import StorageError
from app.repositories.document_repository.document_repository_interface import (
    DocumentRepositoryInterface,
)
from app.services.StorageService.storage_service import LocalStorageService

LOGGER = logging.getLogger("test.storage")


@pytest.fixture
def storage(tmp_path):
    uploads = tmp_path / "uploads"
    documents = tmp_path / "documents"
    (uploads / "chat").mkdir(parents=True)
    documents.mkdir()
    (uploads / "chat" / "foto.png").write_bytes(b"PNGDATA")
    (documents / "abc123.bin").write_bytes(b"%PDF-1.7")
    (tmp_path / "secret.txt").write_text("nope")

    repo = MagicMock(spec=DocumentRepositoryInterface)
    repo.get_document.side_effect = lambda doc_id: (
        {
            "id": "doc1",
            "filename": "Bericht.pdf",
            "storage_path": "abc123.bin",
            "mime_type": "application/pdf",
        }
        if doc_id == "doc1"
        else None
    )
    return LocalStorageService(str(uploads), str(documents), repo, LOGGER)


def test_is_storage_reference(storage) -> None:
    assert storage.is_storage_reference("/api/file/chat/foto.png")
    assert storage.is_storage_reference("/uploads/chat/foto.png")
    assert storage.is_storage_reference("https://app.example.com/api/documents/doc1")
    assert not storage.is_storage_reference("https://example.com/bild.png")


@pytest.mark.asyncio
async def test_fetch_upload(storage) -> None:
    stored = await storage.fetch("/api/file/chat/foto.png")

    assert stored.data == b"PNGDATA"
    assert stored.file_name == "foto.png"
    assert stored.mime_type is None


@pytest.mark.asyncio
async def test_fetch_upload_with_encoded_path(storage, tmp_path) -> None:
    (tmp_path / "uploads" / "chat" / "mein bild.png").write_bytes(b"X")

    stored = await storage.fetch("/uploads/chat/mein%20bild.png")

    assert stored.file_name == "mein bild.png"


@pytest.mark.asyncio
async def test_fetch_document(storage) -> None:
    stored = await storage.fetch("/api/documents/doc1")

    assert stored.data == b"%PDF-1.7"
    assert stored.file_name == "Bericht.pdf"
    assert stored.mime_type == "application/pdf"


@pytest.mark.asyncio
async def test_fetch_unknown_document(storage) -> None:
    with pytest.raises(StorageError, match="Document not found"):
        await storage.fetch("/api/documents/missing")


@pytest.mark.asyncio
async def test_fetch_missing_file(storage) -> None:
    with pytest.raises(StorageError, match="File not found"):
        await storage.fetch("/api/file/chat/none.png")


@pytest.mark.asyncio
async def test_fetch_rejects_traversal(storage) -> None:
    with pytest.raises(StorageError, match="escapes storage root"):
        await storage.fetch("/api/file/../secret.txt")
