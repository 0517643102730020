"""Tests for the session registry."""

from dataclasses import replace

from photo_restorer.domain.session import SessionStatus
from photo_restorer.services.restoration import RestorationService
from photo_restorer.services.sessions import SessionRegistry
from tests.conftest import FakeRestorationClient, RecordingPreviewStore


def _registry(store: RecordingPreviewStore) -> SessionRegistry:
    return SessionRegistry(
        restoration_service=RestorationService(client=FakeRestorationClient()),
        preview_store=store,
    )


def test_open_creates_idle_sessions() -> None:
    registry = _registry(RecordingPreviewStore())

    first_id, first = registry.open()
    second_id, _ = registry.open()

    assert first_id != second_id
    assert first.state.status is SessionStatus.IDLE
    assert registry.get(first_id) is first


def test_close_releases_preview() -> None:
    store = RecordingPreviewStore()
    registry = _registry(store)
    session_id, session = registry.open()
    session.select_file("photo.jpg", "image/jpeg", b"jpeg")

    assert registry.close(session_id) is True
    assert registry.get(session_id) is None
    assert store.live_count == 0


def test_close_unknown_session() -> None:
    registry = _registry(RecordingPreviewStore())
    session_id, _ = registry.open()
    registry.close(session_id)

    assert registry.close(session_id) is False


def test_close_all() -> None:
    store = RecordingPreviewStore()
    registry = _registry(store)
    for _ in range(3):
        _, session = registry.open()
        session.select_file("photo.png", "image/png", b"png")

    registry.close_all()

    assert store.live_count == 0


def test_expired_sessions_are_evicted() -> None:
    store = RecordingPreviewStore()
    registry = SessionRegistry(
        restoration_service=RestorationService(client=FakeRestorationClient()),
        preview_store=store,
        ttl_seconds=0,
    )
    session_id, session = registry.open()
    session.select_file("photo.jpg", "image/jpeg", b"jpeg")

    assert registry.get(session_id) is None
    assert store.live_count == 0


def test_restoring_session_is_not_evicted() -> None:
    registry = SessionRegistry(
        restoration_service=RestorationService(client=FakeRestorationClient()),
        preview_store=RecordingPreviewStore(),
        ttl_seconds=0,
    )
    session_id, session = registry.open()
    session.select_file("photo.jpg", "image/jpeg", b"jpeg")
    session.state = replace(session.state, status=SessionStatus.RESTORING)

    assert registry.evict_expired() == 0
    assert registry.get(session_id) is session


def test_access_extends_session_lifetime() -> None:
    registry = _registry(RecordingPreviewStore())
    session_id, session = registry.open()

    assert registry.get(session_id) is session
    assert registry.evict_expired() == 0
