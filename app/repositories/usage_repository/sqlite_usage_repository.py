from datetime import datetime, timezone

from app.components.database.db_interface import DBInterface
from app.repositories.usage_repository.usage_repository_interface import (
    UsageRepositoryInterface,
)


class SqliteUsageRepository(UsageRepositoryInterface):
    def __init__(self, db: DBInterface):
        self.db = db
        self._init_table()

    def _init_table(self):
        query = """
        CREATE TABLE IF NOT EXISTS usage_logs (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            user_id TEXT NOT NULL,
            tenant_id TEXT NOT NULL,
            provider TEXT NOT NULL,
            model TEXT NOT NULL,
            tokens INTEGER NOT NULL,
            created_at TEXT NOT NULL
        );
        """
        self.db.execute(query)

    def log_usage(
        self,
        user_id: str,
        tenant_id: str,
        provider: str,
        model: str,
        tokens: int,
    ) -> None:
        query = """
        INSERT INTO usage_logs (user_id, tenant_id, provider, model, tokens, created_at)
        VALUES (?, ?, ?, ?, ?, ?)
        """
        created_at = datetime.now(timezone.utc).isoformat()
        self.db.execute(
            query, (user_id, tenant_id, provider, model, max(0, tokens), created_at)
        )

    def get_total_tokens(self, tenant_id: str) -> int:
        query = "SELECT COALESCE(SUM(tokens), 0) AS total FROM usage_logs WHERE tenant_id = ?"
        result = self.db.execute_and_fetchone(query, (tenant_id,))
        return int(result["total"]) if result else 0
