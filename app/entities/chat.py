from dataclasses import dataclass, field
from typing import Literal, TypedDict

from app.entities.message import MessagePayload


Provider = Literal["OpenAI", "Gemini"]
SUPPORTED_PROVIDERS: tuple[str, ...] = ("OpenAI", "Gemini")


@dataclass(frozen=True)
class ChatRequest:
    """Inbound chat request after JSON decoding."""

    messages: list[MessagePayload]
    provider: str
    mode: str
    temperature: float
    chat_id: str | None = None
    system_prompt: str | None = None


@dataclass(frozen=True)
class ChatResponse:
    message: str
    tokens: int = 0


class ChatRecord(TypedDict):
    id: str
    title: str
    project_id: str | None


class ProjectRecord(TypedDict):
    id: str
    name: str
    description: str
    non_goals: str


class ProjectDocument(TypedDict):
    filename: str
    parsed_content: str | None


class StoredDocument(TypedDict):
    id: str
    filename: str
    storage_path: str
    mime_type: str


class ModelConfig(TypedDict):
    provider: str
    mode: str
    model_id: str


class CompanyStrategy(TypedDict):
    type: Literal["GOAL", "STRATEGY", "INITIATIVE", "VALUE"]
    title: str
    description: str
    priority: int


@dataclass
class CompanyContext:
    name: str
    description: str | None = None
    strategies: list[CompanyStrategy] = field(default_factory=list)


@dataclass
class ProjectContext:
    """Project data the context assembler turns into instruction text."""

    project: ProjectRecord
    documents: list[ProjectDocument] = field(default_factory=list)
