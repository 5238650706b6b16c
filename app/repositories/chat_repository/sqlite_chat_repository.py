from app.components.database.db_interface import DBInterface
from app.entities.chat import (
    ChatRecord,
    CompanyContext,
    CompanyStrategy,
    ModelConfig,
    ProjectDocument,
    ProjectRecord,
)
from app.repositories.chat_repository.chat_repository_interface import (
    ChatRepositoryInterface,
)


class SqliteChatRepository(ChatRepositoryInterface):
    def __init__(self, db: DBInterface):
        self.db = db
        self._init_table()

    def _init_table(self):
        statements = [
            """
            CREATE TABLE IF NOT EXISTS projects (
                id TEXT PRIMARY KEY,
                name TEXT NOT NULL,
                description TEXT NOT NULL DEFAULT '',
                non_goals TEXT NOT NULL DEFAULT ''
            );
            """,
            """
            CREATE TABLE IF NOT EXISTS chats (
                id TEXT PRIMARY KEY,
                title TEXT NOT NULL,
                project_id TEXT REFERENCES projects(id)
            );
            """,
            """
            CREATE TABLE IF NOT EXISTS project_documents (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                project_id TEXT NOT NULL REFERENCES projects(id),
                filename TEXT NOT NULL,
                parsed_content TEXT
            );
            """,
            """
            CREATE TABLE IF NOT EXISTS ai_model_configs (
                provider TEXT NOT NULL,
                mode TEXT NOT NULL,
                model_id TEXT NOT NULL,
                PRIMARY KEY (provider, mode)
            );
            """,
            """
            CREATE TABLE IF NOT EXISTS companies (
                tenant_id TEXT PRIMARY KEY,
                name TEXT NOT NULL,
                description TEXT
            );
            """,
            """
            CREATE TABLE IF NOT EXISTS company_strategies (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                tenant_id TEXT NOT NULL REFERENCES companies(tenant_id),
                type TEXT NOT NULL,
                title TEXT NOT NULL,
                description TEXT NOT NULL DEFAULT '',
                priority INTEGER NOT NULL DEFAULT 0,
                is_active INTEGER NOT NULL DEFAULT 1
            );
            """,
        ]
        for statement in statements:
            self.db.execute(statement)

    def get_chat(self, chat_id: str) -> ChatRecord | None:
        query = "SELECT id, title, project_id FROM chats WHERE id = ?"
        result = self.db.execute_and_fetchone(query, (chat_id,))
        if result:
            return {
                "id": result["id"],
                "title": result["title"],
                "project_id": result["project_id"],
            }
        return None

    def save_chat(self, chat: ChatRecord) -> None:
        query = """
        INSERT INTO chats (id, title, project_id)
        VALUES (?, ?, ?)
        ON CONFLICT(id) DO UPDATE SET
            title = excluded.title,
            project_id = excluded.project_id;
        """
        self.db.execute(query, (chat["id"], chat["title"], chat["project_id"]))

    def get_project(self, project_id: str) -> ProjectRecord | None:
        query = "SELECT id, name, description, non_goals FROM projects WHERE id = ?"
        result = self.db.execute_and_fetchone(query, (project_id,))
        if result:
            return {
                "id": result["id"],
                "name": result["name"],
                "description": result["description"],
                "non_goals": result["non_goals"],
            }
        return None

    def save_project(self, project: ProjectRecord) -> None:
        query = """
        INSERT INTO projects (id, name, description, non_goals)
        VALUES (?, ?, ?, ?)
        ON CONFLICT(id) DO UPDATE SET
            name = excluded.name,
            description = excluded.description,
            non_goals = excluded.non_goals;
        """
        self.db.execute(
            query,
            (
                project["id"],
                project["name"],
                project["description"],
                project["non_goals"],
            ),
        )

    def get_project_documents(self, project_id: str) -> list[ProjectDocument]:
        query = """
        SELECT filename, parsed_content
        FROM project_documents
        WHERE project_id = ?
        ORDER BY id
        """
        rows = self.db.execute_and_fetch(query, (project_id,))
        return [
            {"filename": row["filename"], "parsed_content": row["parsed_content"]}
            for row in rows
        ]

    def add_project_document(
        self, project_id: str, filename: str, parsed_content: str | None
    ) -> None:
        query = """
        INSERT INTO project_documents (project_id, filename, parsed_content)
        VALUES (?, ?, ?)
        """
        self.db.execute(query, (project_id, filename, parsed_content))

    def get_model_config(self, provider: str, mode: str) -> ModelConfig | None:
        query = """
        SELECT provider, mode, model_id
        FROM ai_model_configs
        WHERE provider = ? AND mode = ?
        """
        result = self.db.execute_and_fetchone(query, (provider, mode))
        if result:
            return {
                "provider": result["provider"],
                "mode": result["mode"],
                "model_id": result["model_id"],
            }
        return None

    def set_model_config(self, provider: str, mode: str, model_id: str) -> None:
        query = """
        INSERT INTO ai_model_configs (provider, mode, model_id)
        VALUES (?, ?, ?)
        ON CONFLICT(provider, mode) DO UPDATE SET model_id = excluded.model_id;
        """
        self.db.execute(query, (provider, mode, model_id))

    def get_company_context(self, tenant_id: str) -> CompanyContext | None:
        company = self.db.execute_and_fetchone(
            "SELECT name, description FROM companies WHERE tenant_id = ?",
            (tenant_id,),
        )
        if not company:
            return None

        rows = self.db.execute_and_fetch(
            """
            SELECT type, title, description, priority
            FROM company_strategies
            WHERE tenant_id = ? AND is_active = 1
            ORDER BY priority DESC, id
            """,
            (tenant_id,),
        )
        strategies: list[CompanyStrategy] = [
            {
                "type": row["type"],
                "title": row["title"],
                "description": row["description"],
                "priority": row["priority"],
            }
            for row in rows
        ]
        return CompanyContext(
            name=company["name"],
            description=company["description"],
            strategies=strategies,
        )

    def save_company(
        self, tenant_id: str, name: str, description: str | None = None
    ) -> None:
        query = """
        INSERT INTO companies (tenant_id, name, description)
        VALUES (?, ?, ?)
        ON CONFLICT(tenant_id) DO UPDATE SET
            name = excluded.name,
            description = excluded.description;
        """
        self.db.execute(query, (tenant_id, name, description))

    def add_company_strategy(
        self,
        tenant_id: str,
        strategy: CompanyStrategy,
        is_active: bool = True,
    ) -> None:
        query = """
        INSERT INTO company_strategies
            (tenant_id, type, title, description, priority, is_active)
        VALUES (?, ?, ?, ?, ?, ?)
        """
        self.db.execute(
            query,
            (
                tenant_id,
                strategy["type"],
                strategy["title"],
                strategy["description"],
                strategy["priority"],
                int(is_active),
            ),
        )
