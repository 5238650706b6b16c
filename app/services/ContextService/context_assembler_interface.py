from abc import ABC, abstractmethod

from app.entities.chat import CompanyContext, ProjectContext


class ContextAssemblerInterface(ABC):
    @abstractmethod
    def build_system_instruction(
        self,
        temperature: float,
        custom_persona: str | None = None,
        project: ProjectContext | None = None,
        company: CompanyContext | None = None,
    ) -> str:
        """Return the provider-agnostic system instruction for one request."""
