"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from photo_restorer.adapters.openai_restoration_client import OpenAIRestorationClient
from photo_restorer.config import Settings
from photo_restorer.services.previews import InMemoryPreviewStore, PreviewStore
from photo_restorer.services.restoration import RestorationService
from photo_restorer.services.sessions import SessionRegistry


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    preview_store: PreviewStore
    restoration_service: RestorationService
    session_registry: SessionRegistry
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    openai_client = OpenAIRestorationClient.create(
        api_key=resolved_settings.openai_api_key,
        model=resolved_settings.openai_image_model,
    )
    restoration_service = RestorationService(
        client=openai_client,
        prompt=resolved_settings.restoration_prompt,
    )
    preview_store = InMemoryPreviewStore()
    session_registry = SessionRegistry(
        restoration_service=restoration_service,
        preview_store=preview_store,
        ttl_seconds=resolved_settings.session_ttl_seconds,
    )

    async def close_resources() -> None:
        session_registry.close_all()
        await openai_client.close()

    return AppContainer(
        settings=resolved_settings,
        preview_store=preview_store,
        restoration_service=restoration_service,
        session_registry=session_registry,
        close_resources=close_resources,
    )
