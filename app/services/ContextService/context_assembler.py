"""
System instruction assembly.

The base instruction is picked from five verbosity tiers by temperature, unless
a custom persona replaces it. Company strategy and project knowledge (goal,
non-goals and the extracted text of the project documents) are appended after
it.
"""

from datetime import datetime, timezone

from app.entities.chat import CompanyContext, ProjectContext
from app.services.ContextService.context_assembler_interface import (
    ContextAssemblerInterface,
)

DEFAULT_MAX_CHARACTERS_PER_DOCUMENT = 10_000

# (upper bound inclusive, instruction); the last tier covers everything above 0.8
VERBOSITY_TIERS: tuple[tuple[float, str], ...] = (
    (
        0.2,
        "Du bist ein hilfreicher KI-Assistent. Antworte extrem knapp und "
        "ausschließlich in Stichpunkten. Keine Einleitung, keine Erklärungen.",
    ),
    (
        0.4,
        "Du bist ein hilfreicher KI-Assistent. Antworte kurz und direkt. "
        "Beschränke dich auf das Wesentliche.",
    ),
    (
        0.6,
        "Du bist ein hilfreicher KI-Assistent. Antworte in normaler Länge und "
        "erkläre die wichtigsten Zusammenhänge verständlich.",
    ),
    (
        0.8,
        "Du bist ein hilfreicher KI-Assistent. Antworte ausführlich, liefere "
        "Hintergrundinformationen und ordne die Antwort in ihren Kontext ein.",
    ),
    (
        float("inf"),
        "Du bist ein hilfreicher KI-Assistent. Antworte so ausführlich wie "
        "möglich, mit umfassenden Erklärungen, Hintergründen und konkreten "
        "Beispielen.",
    ),
)

STRATEGY_SECTIONS: tuple[tuple[str, str], ...] = (
    ("GOAL", "Unternehmensziele"),
    ("STRATEGY", "Strategien"),
    ("INITIATIVE", "Aktuelle Initiativen"),
    ("VALUE", "Unternehmenswerte"),
)


def tier_instruction(temperature: float) -> str:
    for upper_bound, instruction in VERBOSITY_TIERS:
        if temperature <= upper_bound:
            return instruction
    return VERBOSITY_TIERS[-1][1]


def truncate(text: str, limit: int) -> str:
    if len(text) <= limit:
        return text
    return text[:limit] + "\n... (Dokument gekürzt)"


class ContextAssembler(ContextAssemblerInterface):
    def __init__(
        self,
        max_characters_per_document: int = DEFAULT_MAX_CHARACTERS_PER_DOCUMENT,
    ) -> None:
        self.max_characters_per_document = max_characters_per_document

    def build_system_instruction(
        self,
        temperature: float,
        custom_persona: str | None = None,
        project: ProjectContext | None = None,
        company: CompanyContext | None = None,
    ) -> str:
        persona = (custom_persona or "").strip()
        sections = [persona or tier_instruction(temperature)]

        if company is not None:
            company_block = self._company_block(company)
            if company_block:
                sections.append(company_block)

        if project is not None:
            sections.append(self._project_block(project))

        utc_time = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S UTC")
        sections.append(f"Aktuelle Zeit (UTC): {utc_time}")

        return "\n\n".join(sections)

    @staticmethod
    def _company_block(company: CompanyContext) -> str:
        if not company.strategies:
            return ""

        lines = [f"## UNTERNEHMENSKONTEXT: {company.name}", ""]
        if company.description:
            lines += ["**Unternehmensbeschreibung:**", company.description, ""]

        for strategy_type, heading in STRATEGY_SECTIONS:
            entries = [s for s in company.strategies if s["type"] == strategy_type]
            if not entries:
                continue
            lines.append(f"**{heading}:**")
            lines += [f"- {s['title']}: {s['description']}" for s in entries]
            lines.append("")

        lines.append(
            "**WICHTIG:** Berücksichtige diese Unternehmensinformationen bei deinen "
            "Antworten und Analysen. Stelle sicher, dass deine Vorschläge und "
            "Empfehlungen mit den Unternehmenszielen und -strategien übereinstimmen."
        )
        return "\n".join(lines)

    def _project_block(self, context: ProjectContext) -> str:
        project = context.project
        lines = [f"## PROJEKT: {project['name']}"]

        if project["description"].strip():
            lines += ["", "### Ziel / Anweisungen", project["description"].strip()]

        if project["non_goals"].strip():
            lines += [
                "",
                "### Non-Goals (explizit ausgeschlossen)",
                project["non_goals"].strip(),
            ]

        documents = [d for d in context.documents if d["parsed_content"]]
        if documents:
            lines += [
                "",
                "### Projektwissen",
                "Nutze die folgenden Projektdokumente als Wissensbasis:",
            ]
            for document in documents:
                lines += [
                    "",
                    f"--- DOKUMENT: {document['filename']} ---",
                    truncate(
                        document["parsed_content"] or "",
                        self.max_characters_per_document,
                    ),
                    "--- ENDE DOKUMENT ---",
                ]

        return "\n".join(lines)
