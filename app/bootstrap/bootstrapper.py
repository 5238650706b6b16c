from fastapi import FastAPI

from app.api.api_server import create_app
from app.dependencies.components import get_components
from app.dependencies.services import get_chat_service
from app.services.ChatService.chat_service_interface import ChatServiceInterface


def bootstrap_api(
    env: str = "development",
    config_path: str = "configuration",
) -> FastAPI:
    components = get_components(env=env, config_path=config_path)
    chat_service: ChatServiceInterface = get_chat_service(components)

    return create_app(chat_service)
