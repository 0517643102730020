"""Display handles for uploaded images."""

import logging
from dataclasses import dataclass
from typing import Protocol
from uuid import uuid4

from photo_restorer.domain.images import PreviewHandle, SelectedImage

logger = logging.getLogger(__name__)


class PreviewStore(Protocol):
    """Interface for allocating and releasing preview handles."""

    def create(self, image: SelectedImage) -> PreviewHandle:
        """Allocate a handle that serves ``image`` until released."""

    def get(self, handle_id: str) -> SelectedImage | None:
        """Return the image behind a live handle, if any."""

    def release(self, handle: PreviewHandle) -> None:
        """Free a handle; later lookups return nothing."""


@dataclass
class InMemoryPreviewStore(PreviewStore):
    """Keeps uploaded images in memory while their handle is live."""

    _images: dict[str, SelectedImage]

    def __init__(self) -> None:
        self._images = {}

    def create(self, image: SelectedImage) -> PreviewHandle:
        """Register the image under a fresh random id."""
        handle = PreviewHandle(id=uuid4().hex)
        self._images[handle.id] = image
        return handle

    def get(self, handle_id: str) -> SelectedImage | None:
        return self._images.get(handle_id)

    def release(self, handle: PreviewHandle) -> None:
        """Drop the image; releasing an unknown handle is logged and ignored."""
        if self._images.pop(handle.id, None) is None:
            logger.warning("Preview handle %s was already released", handle.id)

    @property
    def live_count(self) -> int:
        return len(self._images)
