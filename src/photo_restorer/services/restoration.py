"""Photo restoration session controller."""

import logging
from dataclasses import dataclass, field
from typing import Protocol

from photo_restorer.domain.images import (
    RestoredImage,
    SelectedImage,
    decode_restored_payload,
    is_image_mime_type,
)
from photo_restorer.domain.session import (
    FileSelected,
    RestorationFailed,
    RestorationStarted,
    RestorationSucceeded,
    SessionCleared,
    SessionEvent,
    SessionState,
    transition,
)
from photo_restorer.services.previews import PreviewStore

logger = logging.getLogger(__name__)

NOT_AN_IMAGE_MESSAGE = "Please upload a valid image file (PNG, JPG, etc.)."

DEFAULT_RESTORATION_PROMPT = (
    "Restore this vintage photograph into a modern, high-quality portrait. "
    "Remove scratches, dust, stains, fading and noise, repair torn or missing "
    "areas, sharpen soft details and correct the faded colors or tones. "
    "Keep the people, their faces, expressions, clothing and the composition "
    "exactly as they are so the photo keeps its original soul."
)


class PhotoRestorerError(Exception):
    """Base error for the photo restorer."""


class ValidationError(PhotoRestorerError):
    """Raised when a selected file is rejected."""


class NotAnImageError(ValidationError):
    """Raised when the selected file does not declare an image MIME type."""

    def __init__(self, mime_type: str | None) -> None:
        super().__init__(NOT_AN_IMAGE_MESSAGE)
        self.mime_type = mime_type


class RestorationError(PhotoRestorerError):
    """Raised when the restoration service exchange fails."""


class RestorationClient(Protocol):
    """Interface for the external image restoration service."""

    async def restore(self, *, image: SelectedImage, prompt: str) -> str:
        """Send one image and return the restored image as base64."""


@dataclass
class RestorationService:
    """Performs a single restoration exchange and decodes its payload."""

    client: RestorationClient
    prompt: str = DEFAULT_RESTORATION_PROMPT

    async def restore(self, image: SelectedImage) -> RestoredImage:
        """Restore ``image``; every failure surfaces as RestorationError."""
        try:
            payload = await self.client.restore(image=image, prompt=self.prompt)
            return decode_restored_payload(payload, image.mime_type)
        except Exception as exc:
            raise RestorationError(str(exc) or type(exc).__name__) from exc


@dataclass
class PhotoRestorationSession:
    """Owns one upload-restore cycle and the preview handle it allocates."""

    restoration_service: RestorationService
    preview_store: PreviewStore
    state: SessionState = field(default_factory=SessionState)

    def select_file(
        self, filename: str, mime_type: str | None, content: bytes
    ) -> SessionState:
        """Accept an image, replacing any previous selection."""
        if not is_image_mime_type(mime_type):
            raise NotAnImageError(mime_type)
        image = SelectedImage(filename=filename, mime_type=mime_type, content=content)
        self._dispatch(SessionCleared())
        preview = self.preview_store.create(image)
        return self._dispatch(FileSelected(image=image, preview=preview))

    async def restore(self) -> RestoredImage | None:
        """Restore the selected image, recording the outcome in the state.

        Returns the restored image, or None when nothing was restored: no file
        is selected, a restoration is already running, the service failed, or
        the selection changed while the request was in flight.
        """
        if self.state.original is None:
            logger.info("Restore requested without a selected photo")
            return None
        if self.state.is_restoring:
            logger.warning("Restore requested while a restoration is running")
            return None

        self._dispatch(RestorationStarted())
        generation = self.state.generation
        image = self.state.original
        try:
            restored = await self.restoration_service.restore(image)
        except RestorationError:
            logger.exception("Failed to restore %s", image.filename)
            self._dispatch(RestorationFailed(generation=generation))
            return None
        except BaseException:
            logger.warning("Restoration of %s was interrupted", image.filename)
            self._dispatch(RestorationFailed(generation=generation))
            raise

        state = self._dispatch(
            RestorationSucceeded(generation=generation, restored=restored)
        )
        if state.restored is not restored:
            logger.info("Discarding restoration result for a replaced photo")
            return None
        return restored

    def reset(self) -> None:
        """Return to idle and release the preview handle."""
        self._dispatch(SessionCleared())

    def _dispatch(self, event: SessionEvent) -> SessionState:
        previous = self.state
        self.state = transition(previous, event)
        if previous.preview is not None and previous.preview != self.state.preview:
            self.preview_store.release(previous.preview)
        return self.state
