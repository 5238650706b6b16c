from app.components.database.db_interface import DBInterface
from app.entities.chat import StoredDocument
from app.repositories.document_repository.document_repository_interface import (
    DocumentRepositoryInterface,
)


class SqliteDocumentRepository(DocumentRepositoryInterface):
    def __init__(self, db: DBInterface):
        self.db = db
        self._init_table()

    def _init_table(self):
        query = """
        CREATE TABLE IF NOT EXISTS documents (
            id TEXT PRIMARY KEY,
            filename TEXT NOT NULL,
            storage_path TEXT NOT NULL,
            mime_type TEXT NOT NULL
        );
        """
        self.db.execute(query)

    def get_document(self, document_id: str) -> StoredDocument | None:
        query = """
        SELECT id, filename, storage_path, mime_type
        FROM documents
        WHERE id = ?
        """
        result = self.db.execute_and_fetchone(query, (document_id,))
        if result:
            return {
                "id": result["id"],
                "filename": result["filename"],
                "storage_path": result["storage_path"],
                "mime_type": result["mime_type"],
            }
        return None

    def save_document(self, document: StoredDocument) -> None:
        query = """
        INSERT INTO documents (id, filename, storage_path, mime_type)
        VALUES (?, ?, ?, ?)
        ON CONFLICT(id) DO UPDATE SET
            filename = excluded.filename,
            storage_path = excluded.storage_path,
            mime_type = excluded.mime_type;
        """
        self.db.execute(
            query,
            (
                document["id"],
                document["filename"],
                document["storage_path"],
                document["mime_type"],
            ),
        )
