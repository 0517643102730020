"""Shared test fixtures."""

from collections.abc import Callable
from dataclasses import dataclass, field

import pytest

from photo_restorer.config import Settings
from photo_restorer.containers import AppContainer
from photo_restorer.domain.images import PreviewHandle, SelectedImage
from photo_restorer.services.previews import InMemoryPreviewStore
from photo_restorer.services.restoration import RestorationClient, RestorationService
from photo_restorer.services.sessions import SessionRegistry

JPEG_BYTES = b"\xff\xd8\xff\xe0" + b"\x00" * 2044


@dataclass
class FakeRestorationClient(RestorationClient):
    """Fake restoration client returning a fixed base64 payload."""

    payload: str = "Zm9vYmFy"
    calls: list[SelectedImage] = field(default_factory=list)
    on_call: Callable[[], None] | None = None

    async def restore(self, *, image: SelectedImage, prompt: str) -> str:
        self.calls.append(image)
        if self.on_call is not None:
            self.on_call()
        return self.payload


@dataclass
class FailingRestorationClient(RestorationClient):
    """Fake restoration client that always raises."""

    error: Exception = field(default_factory=lambda: ConnectionError("refused"))
    calls: list[SelectedImage] = field(default_factory=list)

    async def restore(self, *, image: SelectedImage, prompt: str) -> str:
        self.calls.append(image)
        raise self.error


class RecordingPreviewStore(InMemoryPreviewStore):
    """Preview store that records every allocation and release."""

    def __init__(self) -> None:
        super().__init__()
        self.events: list[tuple[str, str]] = []

    def create(self, image: SelectedImage) -> PreviewHandle:
        handle = super().create(image)
        self.events.append(("create", handle.id))
        return handle

    def release(self, handle: PreviewHandle) -> None:
        self.events.append(("release", handle.id))
        super().release(handle)

    def released(self, handle: PreviewHandle) -> int:
        return self.events.count(("release", handle.id))


@pytest.fixture
def settings() -> Settings:
    return Settings(openai_api_key="openai-key")


@pytest.fixture
def restoration_client() -> FakeRestorationClient:
    return FakeRestorationClient()


@pytest.fixture
def preview_store() -> RecordingPreviewStore:
    return RecordingPreviewStore()


@pytest.fixture
def container(
    settings: Settings,
    restoration_client: FakeRestorationClient,
    preview_store: RecordingPreviewStore,
) -> AppContainer:
    restoration_service = RestorationService(client=restoration_client)
    session_registry = SessionRegistry(
        restoration_service=restoration_service,
        preview_store=preview_store,
    )

    async def close_resources() -> None:
        session_registry.close_all()

    return AppContainer(
        settings=settings,
        preview_store=preview_store,
        restoration_service=restoration_service,
        session_registry=session_registry,
        close_resources=close_resources,
    )
