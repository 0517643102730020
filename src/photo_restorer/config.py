"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

from photo_restorer.services.restoration import DEFAULT_RESTORATION_PROMPT
from photo_restorer.services.sessions import DEFAULT_SESSION_TTL_SECONDS

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    openai_api_key: str
    openai_image_model: str = "gpt-image-1"
    restoration_prompt: str = DEFAULT_RESTORATION_PROMPT
    session_ttl_seconds: int = DEFAULT_SESSION_TTL_SECONDS
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )
