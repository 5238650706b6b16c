"""FastAPI application factory."""

from fastapi import FastAPI
from fastapi.responses import JSONResponse

from app.api.chat_route import router as chat_router
from app.services.ChatService.chat_service_interface import ChatServiceInterface


def create_app(chat_service: ChatServiceInterface) -> FastAPI:
    app = FastAPI(
        title="Chat Orchestrator",
        description="Multi-provider chat with attachments, project knowledge and web search",
        version="0.1.0",
    )
    app.state.chat_service = chat_service

    @app.get("/health")
    async def health_check() -> JSONResponse:
        """Health check endpoint."""
        return JSONResponse(content={"status": "ok"}, status_code=200)

    app.include_router(chat_router, prefix="/api", tags=["chat"])
    return app
