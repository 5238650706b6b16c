from app.entities.chat import (
    ChatRecord,
    CompanyContext,
    ModelConfig,
    ProjectDocument,
    ProjectRecord,
)


class ChatRepositoryInterface:
    def get_chat(self, chat_id: str) -> ChatRecord | None:
        """Retrieve a chat by id."""
        raise NotImplementedError

    def get_project(self, project_id: str) -> ProjectRecord | None:
        raise NotImplementedError

    def get_project_documents(self, project_id: str) -> list[ProjectDocument]:
        """Documents attached to a project, oldest first."""
        raise NotImplementedError

    def get_model_config(self, provider: str, mode: str) -> ModelConfig | None:
        """Retrieve the model configured for a provider/mode pair."""
        raise NotImplementedError

    def set_model_config(self, provider: str, mode: str, model_id: str) -> None:
        raise NotImplementedError

    def get_company_context(self, tenant_id: str) -> CompanyContext | None:
        """Company record with its active strategies, highest priority first."""
        raise NotImplementedError
