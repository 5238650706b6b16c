"""Chat completion endpoint.

Authentication happens upstream; the caller identity arrives in the
``X-User-Id`` and ``X-Tenant-Id`` headers.
"""

import json
import logging

from fastapi import APIRouter, Depends, Header, Request
from fastapi.responses import JSONResponse

from app.entities.errors import (
    ConfigurationError,
    ProviderError,
    RequestValidationError,
)
from app.services.ChatService.chat_service import parse_request
from app.services.ChatService.chat_service_interface import ChatServiceInterface

logger = logging.getLogger("app.ChatRoute")
router = APIRouter()


def get_chat_service(request: Request) -> ChatServiceInterface:
    return request.app.state.chat_service


def _error(message: str, status_code: int) -> JSONResponse:
    return JSONResponse(content={"error": message}, status_code=status_code)


@router.post("/chat")
async def chat(
    request: Request,
    x_user_id: str | None = Header(default=None),
    x_tenant_id: str | None = Header(default=None),
    chat_service: ChatServiceInterface = Depends(get_chat_service),
) -> JSONResponse:
    """
    Answer a chat conversation with the configured provider.

    Body: ``messages``, ``provider`` ("OpenAI" | "Gemini"), ``mode``,
    ``temperature``, optional ``chatId`` and ``systemPrompt``.

    Returns:
        ``{"message": <assistant text>}``
    """
    if not x_user_id:
        return _error("Missing X-User-Id header", 400)

    try:
        payload = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return _error("Request body must be valid JSON", 400)

    try:
        chat_request = parse_request(payload)
        response = await chat_service.handle(chat_request, x_user_id, x_tenant_id)
    except RequestValidationError as e:
        return _error(str(e), 400)
    except ConfigurationError as e:
        logger.error("Configuration error: %s", e)
        return _error(str(e), 500)
    except ProviderError as e:
        logger.error("Provider error: %s", e)
        return _error(str(e), 502)
    except Exception as e:
        logger.error("Chat request failed: %s", e, exc_info=True)
        return _error("Internal server error", 500)

    return JSONResponse(content={"message": response.message}, status_code=200)
