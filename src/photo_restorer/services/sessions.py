"""Registry of live restoration sessions."""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from uuid import UUID, uuid4

from photo_restorer.services.previews import PreviewStore
from photo_restorer.services.restoration import (
    PhotoRestorationSession,
    RestorationService,
)

logger = logging.getLogger(__name__)

DEFAULT_SESSION_TTL_SECONDS = 3600


@dataclass
class _SessionEntry:
    session: PhotoRestorationSession
    expires_at: datetime


@dataclass
class SessionRegistry:
    """Keeps one restoration session per open page.

    Sessions untouched for ``ttl_seconds`` are torn down on the next registry
    access, so pages closed without a teardown request do not keep their
    images in memory. A session that is restoring is never evicted.
    """

    restoration_service: RestorationService
    preview_store: PreviewStore
    ttl_seconds: int
    _entries: dict[UUID, _SessionEntry]

    def __init__(
        self,
        restoration_service: RestorationService,
        preview_store: PreviewStore,
        ttl_seconds: int = DEFAULT_SESSION_TTL_SECONDS,
    ) -> None:
        self.restoration_service = restoration_service
        self.preview_store = preview_store
        self.ttl_seconds = ttl_seconds
        self._entries = {}

    def open(self) -> tuple[UUID, PhotoRestorationSession]:
        """Create an idle session and return it with its id."""
        self.evict_expired()
        session_id = uuid4()
        session = PhotoRestorationSession(
            restoration_service=self.restoration_service,
            preview_store=self.preview_store,
        )
        self._entries[session_id] = _SessionEntry(
            session=session, expires_at=self._expiry()
        )
        return session_id, session

    def get(self, session_id: UUID) -> PhotoRestorationSession | None:
        """Return a live session and extend its lifetime."""
        self.evict_expired()
        entry = self._entries.get(session_id)
        if entry is None:
            return None
        entry.expires_at = self._expiry()
        return entry.session

    def close(self, session_id: UUID) -> bool:
        """Tear down a session, releasing its handles."""
        entry = self._entries.pop(session_id, None)
        if entry is None:
            return False
        entry.session.reset()
        return True

    def close_all(self) -> None:
        for session_id in list(self._entries):
            self.close(session_id)

    def evict_expired(self) -> int:
        """Tear down expired sessions and return how many were removed."""
        now = datetime.now(tz=UTC)
        expired = [
            session_id
            for session_id, entry in self._entries.items()
            if now >= entry.expires_at and not entry.session.state.is_restoring
        ]
        for session_id in expired:
            self.close(session_id)
        if expired:
            logger.info("Evicted %d expired sessions", len(expired))
        return len(expired)

    def _expiry(self) -> datetime:
        return datetime.now(tz=UTC) + timedelta(seconds=self.ttl_seconds)
