from app.bootstrap.components import Components
from app.components.configuration.configuration_interface import (
    ConfigurationInterface,
)
from app.components.logger.logger_interface import LoggerInterface
from app.dependencies.repositories import (
    get_chat_repository,
    get_document_repository,
    get_usage_repository,
)
from app.services.AttachmentService.attachment_resolver import AttachmentResolver
from app.services.AttachmentService.attachment_resolver_interface import (
    AttachmentResolverInterface,
)
from app.services.ChatService.chat_service import ChatService
from app.services.ChatService.chat_service_interface import ChatServiceInterface
from app.services.ContextService.context_assembler import ContextAssembler
from app.services.ContextService.context_assembler_interface import (
    ContextAssemblerInterface,
)
from app.services.ExtractionService.docx_engine import DocxEngine
from app.services.ExtractionService.multimodal_extractor import GeminiExtractor
from app.services.ExtractionService.pdf_engine import PdfEngine
from app.services.ProviderService.provider_factory import (
    ProviderCredentials,
    ProviderFactory,
)
from app.services.StorageService.storage_service import LocalStorageService
from app.services.StorageService.storage_service_interface import (
    StorageServiceInterface,
)
from app.tools.tool_executor import ToolExecutor
from app.tools.web_search_tool import WebSearchTool


def get_storage_service(components: Components) -> StorageServiceInterface:
    configuration = components.get_component(ConfigurationInterface)
    logger = components.get_component(LoggerInterface)

    return LocalStorageService(
        uploads_dir=configuration.get_configuration(
            "UPLOADS_DIR", str, default="uploads"
        ),
        documents_dir=configuration.get_configuration(
            "DOCUMENTS_DIR", str, default="documents"
        ),
        document_repository=get_document_repository(components),
        logger=logger.get_logger("StorageService"),
    )


def get_attachment_resolver(components: Components) -> AttachmentResolverInterface:
    """
    Create the attachment resolver with its extraction engines.

    The Gemini extractor is created lazily, so a missing GEMINI_API_KEY only
    surfaces when a document actually needs extraction.
    """
    configuration = components.get_component(ConfigurationInterface)
    logger = components.get_component(LoggerInterface)

    extractor = GeminiExtractor(
        api_key=configuration.get_configuration("GEMINI_API_KEY", str, default=""),
        logger=logger.get_logger("GeminiExtractor"),
        model_name=configuration.get_configuration(
            "EXTRACTION_MODEL_NAME", str, default="gemini-2.0-flash"
        ),
    )

    return AttachmentResolver(
        storage=get_storage_service(components),
        pdf_engine=PdfEngine(extractor, logger.get_logger("PdfEngine")),
        docx_engine=DocxEngine(extractor, logger.get_logger("DocxEngine")),
        logger=logger.get_logger("AttachmentResolver"),
        max_characters=configuration.get_configuration(
            "ATTACHMENT_MAX_CHARACTERS", int, default=50_000
        ),
    )


def get_context_assembler(components: Components) -> ContextAssemblerInterface:
    configuration = components.get_component(ConfigurationInterface)
    return ContextAssembler(
        max_characters_per_document=configuration.get_configuration(
            "RAG_MAX_CHARACTERS_PER_DOCUMENT", int, default=10_000
        )
    )


def get_tool_executor(components: Components) -> ToolExecutor:
    configuration = components.get_component(ConfigurationInterface)
    logger = components.get_component(LoggerInterface)

    web_search = WebSearchTool(
        api_key=configuration.get_configuration("TAVILY_API_KEY", str, default=""),
        logger=logger.get_logger("WebSearchTool"),
    )
    return ToolExecutor(web_search, logger.get_logger("ToolExecutor"))


def get_provider_factory(components: Components) -> ProviderFactory:
    configuration = components.get_component(ConfigurationInterface)
    logger = components.get_component(LoggerInterface)

    credentials = ProviderCredentials(
        openai_api_key=configuration.get_configuration(
            "OPENAI_API_KEY", str, default=""
        ),
        openai_base_url=configuration.get_configuration(
            "OPENAI_BASE_URL", str, default=""
        ),
        gemini_api_key=configuration.get_configuration(
            "GEMINI_API_KEY", str, default=""
        ),
        gemini_base_url=configuration.get_configuration(
            "GEMINI_BASE_URL", str, default=""
        ),
    )
    return ProviderFactory(
        credentials=credentials,
        tool_executor=get_tool_executor(components),
        logger=logger.get_logger("ProviderAdapter"),
        max_iterations=configuration.get_configuration(
            "MAX_TOOL_ITERATIONS", int, default=3
        ),
    )


def get_chat_service(components: Components) -> ChatServiceInterface:
    logger = components.get_component(LoggerInterface)

    return ChatService(
        chat_repository=get_chat_repository(components),
        usage_repository=get_usage_repository(components),
        attachment_resolver=get_attachment_resolver(components),
        context_assembler=get_context_assembler(components),
        provider_factory=get_provider_factory(components),
        logger=logger.get_logger("ChatService"),
    )
