from __future__ import annotations

import structlog
from dependency_injector import containers, providers

from core.settings import SETTINGS
from infra.resources import DatabaseResource, build_chat_model


logger = structlog.get_logger("rlchat")


class InfrastructureContainer(containers.DeclarativeContainer):
    config = providers.Configuration()
    settings = providers.Object(SETTINGS)
    logger = providers.Object(logger)

    # Database
    database = providers.Resource(
        DatabaseResource,
        database_url=SETTINGS.DATABASE.DATABASE_URL,
    )

    # Text-generation backend, built on first use
    chat_model = providers.Singleton(
        build_chat_model,
        model=SETTINGS.OPENAI.OPENAI_MODEL,
        temperature=SETTINGS.OPENAI.OPENAI_TEMPERATURE,
        api_key=SETTINGS.OPENAI.OPENAI_API_KEY.get_secret_value(),
    )


class ServiceContainer(containers.DeclarativeContainer):
    """Application services - depends on infrastructure."""

    infrastructure = providers.DependenciesContainer()

    transcript_service = providers.Factory(
        "api.features.transcript.service.TranscriptService",
    )

    example_selector = providers.Factory(
        "api.features.examples.selector.ExampleSelector",
        limit=SETTINGS.EXAMPLES.EXAMPLES_LIMIT,
    )

    response_generator = providers.Factory(
        "api.features.generation.service.ResponseGenerator",
        llm_factory=infrastructure.chat_model.provider,
        model=SETTINGS.OPENAI.OPENAI_MODEL,
    )


class ControllerContainer(containers.DeclarativeContainer):
    """Controller-specific dependencies."""

    services = providers.DependenciesContainer()

    transcript_controller = providers.Factory(
        "api.features.transcript.controller.TranscriptController",
        transcript_service=services.transcript_service,
        example_selector=services.example_selector,
    )

    generation_controller = providers.Factory(
        "api.features.generation.controller.GenerationController",
        response_generator=services.response_generator,
        example_selector=services.example_selector,
    )


class ApplicationContainer(containers.DeclarativeContainer):
    """Main application container composing all sub-containers."""

    wiring_config = containers.WiringConfiguration(
        modules=[
            "api.main",
            "api.shared.db",
            "api.features.transcript.router",
            "api.features.generation.router",
        ]
    )

    infrastructure = providers.Container(InfrastructureContainer)
    services = providers.Container(ServiceContainer, infrastructure=infrastructure)
    controllers = providers.Container(ControllerContainer, services=services)
