"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from uuid import UUID

from fastapi import FastAPI, File, HTTPException, Request, Response, UploadFile, status

from photo_restorer.api.models import SessionView
from photo_restorer.app_logging import configure_logging
from photo_restorer.containers import AppContainer
from photo_restorer.domain.images import download_filename
from photo_restorer.services.restoration import (
    PhotoRestorationSession,
    ValidationError,
)

RESTORE_IN_PROGRESS = "A restoration is already in progress."


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(title="AI Photo Restorer", lifespan=lifespan)
    app.state.container = container

    def _session(request: Request, session_id: UUID) -> PhotoRestorationSession:
        state_container: AppContainer = request.app.state.container
        session = state_container.session_registry.get(session_id)
        if session is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        return session

    def _ensure_idle(session: PhotoRestorationSession) -> None:
        if session.state.is_restoring:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT, detail=RESTORE_IN_PROGRESS
            )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/sessions", status_code=status.HTTP_201_CREATED)
    async def open_session(request: Request) -> SessionView:
        """Start a new idle restoration session."""
        state_container: AppContainer = request.app.state.container
        session_id, session = state_container.session_registry.open()
        return SessionView.from_state(session_id, session.state)

    @app.get("/sessions/{session_id}")
    async def get_session(session_id: UUID, request: Request) -> SessionView:
        """Return the current state of a session."""
        session = _session(request, session_id)
        return SessionView.from_state(session_id, session.state)

    @app.post("/sessions/{session_id}/file")
    async def select_file(
        session_id: UUID, request: Request, file: UploadFile = File(...)
    ) -> SessionView:
        """Upload the photo to restore, replacing any previous one."""
        session = _session(request, session_id)
        content = await file.read()
        try:
            state = session.select_file(
                filename=file.filename or "",
                mime_type=file.content_type,
                content=content,
            )
        except ValidationError as exc:
            logger.info("Rejected upload %r (%s)", file.filename, file.content_type)
            raise HTTPException(
                status_code=status.HTTP_415_UNSUPPORTED_MEDIA_TYPE, detail=str(exc)
            ) from exc
        return SessionView.from_state(session_id, state)

    @app.post("/sessions/{session_id}/restore")
    async def restore(session_id: UUID, request: Request) -> SessionView:
        """Run the restoration and return the resulting state."""
        session = _session(request, session_id)
        _ensure_idle(session)
        await session.restore()
        return SessionView.from_state(session_id, session.state)

    @app.post("/sessions/{session_id}/reset")
    async def reset(session_id: UUID, request: Request) -> SessionView:
        """Start over with an empty session."""
        session = _session(request, session_id)
        _ensure_idle(session)
        session.reset()
        return SessionView.from_state(session_id, session.state)

    @app.delete("/sessions/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
    async def close_session(session_id: UUID, request: Request) -> Response:
        """Tear down a session when its page goes away."""
        state_container: AppContainer = request.app.state.container
        if not state_container.session_registry.close(session_id):
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    @app.get("/sessions/{session_id}/download")
    async def download(session_id: UUID, request: Request) -> Response:
        """Serve the restored photo as an attachment."""
        session = _session(request, session_id)
        state = session.state
        if state.restored is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        filename = download_filename(
            state.original.filename if state.original else None
        )
        return Response(
            content=state.restored.content,
            media_type=state.restored.mime_type,
            headers={"Content-Disposition": f'attachment; filename="{filename}"'},
        )

    @app.get("/previews/{handle_id}")
    async def preview(handle_id: str, request: Request) -> Response:
        """Serve an uploaded photo while its preview handle is live."""
        state_container: AppContainer = request.app.state.container
        image = state_container.preview_store.get(handle_id)
        if image is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        return Response(content=image.content, media_type=image.mime_type)

    return app
