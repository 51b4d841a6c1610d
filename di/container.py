from __future__ import annotations

from dependency_injector import containers, providers

from api.features.chat.controller import ChatController
from api.features.chat.service import ChatService
from core.settings import SETTINGS
from infra.resources import DatabaseResource
from llm.reply_generator import ReplyGenerator


class InfrastructureContainer(containers.DeclarativeContainer):
    """Infrastructure layer dependencies, built from SETTINGS."""

    # Database
    database = providers.Singleton(
        DatabaseResource,
        database_url=str(SETTINGS.DATABASE.DATABASE_URL),
    )

    # Gemini (an empty key degrades replies, it never blocks startup)
    reply_generator = providers.Singleton(
        ReplyGenerator,
        api_key=SETTINGS.GEMINI.GEMINI_API_KEY.get_secret_value(),
        model=SETTINGS.GEMINI.GEMINI_MODEL,
        max_output_tokens=SETTINGS.GEMINI.GEMINI_MAX_OUTPUT_TOKENS,
        timeout=SETTINGS.GEMINI.GEMINI_TIMEOUT,
        max_retries=SETTINGS.GEMINI.GEMINI_MAX_RETRIES,
    )


class ServiceContainer(containers.DeclarativeContainer):
    """Application services - depends on infrastructure."""

    infrastructure = providers.DependenciesContainer()

    chat_service = providers.Factory(
        ChatService,
        reply_generator=infrastructure.reply_generator,
    )


class ControllerContainer(containers.DeclarativeContainer):
    """Controller-specific dependencies."""

    services = providers.DependenciesContainer()

    chat_controller = providers.Factory(
        ChatController,
        chat_service=services.chat_service,
    )


class ApplicationContainer(containers.DeclarativeContainer):
    """Main application container composing all sub-containers."""

    wiring_config = containers.WiringConfiguration(
        modules=[
            "api.features.chat.router",
        ]
    )

    infrastructure = providers.Container(InfrastructureContainer)
    services = providers.Container(ServiceContainer, infrastructure=infrastructure)
    controllers = providers.Container(ControllerContainer, services=services)
