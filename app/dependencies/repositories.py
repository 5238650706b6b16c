from app.bootstrap.components import Components
from app.components.database.db_interface import DBInterface
from app.repositories.chat_repository.chat_repository_interface import (
    ChatRepositoryInterface,
)
from app.repositories.chat_repository.sqlite_chat_repository import SqliteChatRepository
from app.repositories.document_repository.document_repository_interface import (
    DocumentRepositoryInterface,
)
from app.repositories.document_repository.sqlite_document_repository import (
    SqliteDocumentRepository,
)
from app.repositories.usage_repository.sqlite_usage_repository import (
    SqliteUsageRepository,
)
from app.repositories.usage_repository.usage_repository_interface import (
    UsageRepositoryInterface,
)


def get_chat_repository(components: Components) -> ChatRepositoryInterface:
    return SqliteChatRepository(components.get_component(DBInterface))


def get_document_repository(components: Components) -> DocumentRepositoryInterface:
    return SqliteDocumentRepository(components.get_component(DBInterface))


def get_usage_repository(components: Components) -> UsageRepositoryInterface:
    return SqliteUsageRepository(components.get_component(DBInterface))
