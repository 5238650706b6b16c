from app.entities.chat import StoredDocument


class DocumentRepositoryInterface:
    def get_document(self, document_id: str) -> StoredDocument | None:
        """Retrieve the storage record of a managed document."""
        raise NotImplementedError

    def save_document(self, document: StoredDocument) -> None:
        raise NotImplementedError
