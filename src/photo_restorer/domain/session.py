"""Photo restoration session state and its transition function."""

from dataclasses import dataclass, replace
from enum import Enum

from photo_restorer.domain.images import PreviewHandle, RestoredImage, SelectedImage

RESTORE_FAILED_MESSAGE = "Failed to restore photo. Please try again later."


class SessionStatus(Enum):
    """Lifecycle of one upload-restore cycle."""

    IDLE = "idle"
    READY = "ready"
    RESTORING = "restoring"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True)
class SessionState:
    """Immutable snapshot of a restoration session."""

    original: SelectedImage | None = None
    preview: PreviewHandle | None = None
    restored: RestoredImage | None = None
    status: SessionStatus = SessionStatus.IDLE
    error_message: str | None = None
    generation: int = 0

    @property
    def is_restoring(self) -> bool:
        return self.status is SessionStatus.RESTORING


@dataclass(frozen=True)
class FileSelected:
    image: SelectedImage
    preview: PreviewHandle


@dataclass(frozen=True)
class RestorationStarted:
    pass


@dataclass(frozen=True)
class RestorationSucceeded:
    generation: int
    restored: RestoredImage


@dataclass(frozen=True)
class RestorationFailed:
    generation: int


@dataclass(frozen=True)
class SessionCleared:
    pass


SessionEvent = (
    FileSelected
    | RestorationStarted
    | RestorationSucceeded
    | RestorationFailed
    | SessionCleared
)


def transition(state: SessionState, event: SessionEvent) -> SessionState:
    """Return the state that follows ``event``.

    Events that do not apply to the current state return it unchanged. A
    restoration outcome is applied only while the session is still restoring
    the same selection it was started for; a selection or reset made in the
    meantime bumps ``generation`` and the late outcome is dropped.
    """
    if isinstance(event, FileSelected):
        return SessionState(
            original=event.image,
            preview=event.preview,
            status=SessionStatus.READY,
            generation=state.generation + 1,
        )
    if isinstance(event, SessionCleared):
        return SessionState(generation=state.generation + 1)
    if isinstance(event, RestorationStarted):
        if state.original is None or state.is_restoring:
            return state
        return replace(
            state,
            restored=None,
            status=SessionStatus.RESTORING,
            error_message=None,
        )
    if isinstance(event, RestorationSucceeded):
        if not _is_current(state, event.generation):
            return state
        return replace(
            state,
            restored=event.restored,
            status=SessionStatus.SUCCEEDED,
            error_message=None,
        )
    if isinstance(event, RestorationFailed):
        if not _is_current(state, event.generation):
            return state
        return replace(
            state,
            restored=None,
            status=SessionStatus.FAILED,
            error_message=RESTORE_FAILED_MESSAGE,
        )
    raise TypeError(f"Unsupported session event: {event!r}")


def _is_current(state: SessionState, generation: int) -> bool:
    return state.is_restoring and state.generation == generation
