"""ASGI entrypoint for the photo restorer API."""

from photo_restorer.api.app import create_app
from photo_restorer.containers import build_container

app = create_app(build_container())
