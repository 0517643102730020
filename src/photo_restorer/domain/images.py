"""Image payloads and display handles."""

import base64
import binascii
from dataclasses import dataclass
from pathlib import PurePosixPath

DOWNLOAD_BASENAME = "restored-photo"
DEFAULT_DOWNLOAD_EXTENSION = "png"


@dataclass(frozen=True)
class SelectedImage:
    """An uploaded file with its declared MIME type."""

    filename: str
    mime_type: str
    content: bytes

    @property
    def size(self) -> int:
        return len(self.content)


@dataclass(frozen=True)
class RestoredImage:
    """Restored image bytes returned by the restoration service."""

    mime_type: str
    content: bytes

    @property
    def data_url(self) -> str:
        """Return the image as a base64 data URL."""
        encoded = base64.b64encode(self.content).decode("ascii")
        return f"data:{self.mime_type};base64,{encoded}"


@dataclass(frozen=True)
class PreviewHandle:
    """Opaque display reference to an uploaded image."""

    id: str

    @property
    def url(self) -> str:
        return f"/previews/{self.id}"


def is_image_mime_type(mime_type: str | None) -> bool:
    """Return True when the declared MIME type is an image type."""
    if not mime_type:
        return False
    return mime_type.startswith("image/")


def download_filename(original_filename: str | None) -> str:
    """Build the default save-as name, keeping the original extension."""
    suffix = PurePosixPath(original_filename or "").suffix.lstrip(".").lower()
    return f"{DOWNLOAD_BASENAME}.{suffix or DEFAULT_DOWNLOAD_EXTENSION}"


def decode_restored_payload(payload: str, mime_type: str) -> RestoredImage:
    """Decode a base64 payload into a restored image of the given type."""
    try:
        content = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise ValueError("Restoration payload is not valid base64") from exc
    if not content:
        raise ValueError("Restoration payload is empty")
    return RestoredImage(mime_type=mime_type, content=content)
