"""Pydantic response models for the restoration API."""

from uuid import UUID

from pydantic import BaseModel

from photo_restorer.domain.images import download_filename
from photo_restorer.domain.session import SessionState, SessionStatus


class SessionView(BaseModel):
    """What the page needs to render one session."""

    id: UUID
    status: SessionStatus
    error_message: str | None = None
    original_filename: str | None = None
    original_preview_url: str | None = None
    restored_image_url: str | None = None
    download_filename: str | None = None
    is_loading: bool = False
    can_restore: bool = False
    can_download: bool = False
    can_reset: bool = False

    @classmethod
    def from_state(cls, session_id: UUID, state: SessionState) -> "SessionView":
        """Build the view for a session snapshot."""
        original = state.original
        restored = state.restored
        return cls(
            id=session_id,
            status=state.status,
            error_message=state.error_message,
            original_filename=original.filename if original else None,
            original_preview_url=state.preview.url if state.preview else None,
            restored_image_url=restored.data_url if restored else None,
            download_filename=(
                download_filename(original.filename if original else None)
                if restored
                else None
            ),
            is_loading=state.is_restoring,
            can_restore=original is not None and not state.is_restoring,
            can_download=restored is not None,
            can_reset=(original is not None or restored is not None)
            and not state.is_restoring,
        )
